"""
Error taxonomy for answer matching.

- MissingInputError: an answer is absent or blank; scoring never attempted
- InvalidThresholdError: threshold outside [0, 1]
- ProviderFailureError: the embedding provider raised or returned malformed output
- MalformedRecordError: a batch input line is not valid JSON
"""

from __future__ import annotations

from typing import Any


class AnswerMatchError(Exception):
    """Base class for all answermatch failures."""

    kind = "AnswerMatchError"

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.kind, "message": str(self)}


class MissingInputError(AnswerMatchError):
    kind = "MissingInput"


class InvalidThresholdError(AnswerMatchError, ValueError):
    kind = "InvalidThreshold"


class ProviderFailureError(AnswerMatchError):
    kind = "ProviderFailure"


class MalformedRecordError(AnswerMatchError):
    kind = "MalformedRecord"
