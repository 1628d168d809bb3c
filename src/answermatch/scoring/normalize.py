"""
Text normalization for answer comparison.

Normalization and case-folding are separate steps: normalize() keeps case,
fold() lower-cases. Callers compose them right before comparing.
"""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Trim, then collapse every run of whitespace to a single space."""
    return _WHITESPACE_RE.sub(" ", text.strip())


def fold(text: str) -> str:
    return text.lower()
