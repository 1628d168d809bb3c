"""
Answer scoring engine.

  - normalize: whitespace normalization and case-folding
  - jaro: Jaro-Winkler lexical similarity
  - embedding: semantic similarity port + sentence-transformers provider
  - combiner: score fusion and threshold decision
"""

from .combiner import AnswerComparer, combine_scores
from .embedding import SemanticSimilarityPort, SentenceTransformerEmbedder, cosine_similarity
from .jaro import jaro_similarity, jaro_winkler_similarity
from .normalize import fold, normalize
from .types import AnswerPair, Decision, ScoreSet

__all__ = [
    "AnswerComparer",
    "AnswerPair",
    "Decision",
    "ScoreSet",
    "SemanticSimilarityPort",
    "SentenceTransformerEmbedder",
    "combine_scores",
    "cosine_similarity",
    "fold",
    "jaro_similarity",
    "jaro_winkler_similarity",
    "normalize",
]
