"""
Value types for one scoring request.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from answermatch.errors import MissingInputError

DEFAULT_THRESHOLD = 0.75

_USER_KEYS = ("userAnswer", "user_answer")
_CORRECT_KEYS = ("correctAnswer", "correct_answer")


def _pick(payload: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def require_answer(value: Any, field: str) -> str:
    """Return `value` if it is a string with non-whitespace content."""
    if not isinstance(value, str) or not value.strip():
        raise MissingInputError(
            f"Both userAnswer and correctAnswer are required ({field} is missing or empty)"
        )
    return value


@dataclass(frozen=True)
class AnswerPair:
    """A user answer, the reference answer and the acceptance threshold."""

    user_answer: str
    correct_answer: str
    threshold: float = DEFAULT_THRESHOLD

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        default_threshold: float = DEFAULT_THRESHOLD,
    ) -> AnswerPair:
        """
        Build from the external request shape {userAnswer, correctAnswer, threshold?}.

        snake_case keys are accepted as well. A missing or null threshold
        falls back to `default_threshold`; range checks happen in the comparer.
        """
        user = require_answer(_pick(payload, _USER_KEYS), "userAnswer")
        correct = require_answer(_pick(payload, _CORRECT_KEYS), "correctAnswer")
        threshold = payload.get("threshold")
        if threshold is None:
            threshold = default_threshold
        return cls(user_answer=user, correct_answer=correct, threshold=threshold)


@dataclass(frozen=True)
class ScoreSet:
    semantic: float
    jaro_winkler: float
    combined: float
    exact: float | None = None  # set only on the exact-match fast path

    def to_dict(self) -> dict[str, float]:
        out: dict[str, float] = {}
        if self.exact is not None:
            out["exact"] = self.exact
        out["semantic"] = self.semantic
        out["jaroWinkler"] = self.jaro_winkler
        out["combined"] = self.combined
        return out


@dataclass(frozen=True)
class Decision:
    """Verdict plus the component scores that produced it."""

    is_correct: bool
    confidence: float
    scores: ScoreSet
    threshold: float

    @property
    def exact_match(self) -> bool:
        return self.scores.exact is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "isCorrect": self.is_correct,
            "confidence": self.confidence,
            "scores": self.scores.to_dict(),
            "threshold": self.threshold,
        }
