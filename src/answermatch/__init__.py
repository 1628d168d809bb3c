"""
answermatch: graded free-text answer matching.

Decides whether a user's answer matches a reference answer by fusing a
Jaro-Winkler lexical score with a sentence-embedding cosine similarity.

Entry point: answermatch.scoring.AnswerComparer(provider).decide(...)
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
