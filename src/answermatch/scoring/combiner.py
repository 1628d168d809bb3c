"""
Score fusion and the accept/reject decision.

Flow per request:
  1. Normalize both answers (trim + collapse whitespace)
  2. Case-folded exact match -> fast path, no provider call
  3. Otherwise embed both answers in one batched provider call and take the
     cosine similarity; compute Jaro-Winkler on the case-folded pair
  4. combined = semantic * 0.8 + jaro_winkler * 0.2
  5. is_correct = combined >= threshold (inclusive)

There is no degraded mode: if the provider fails, no decision is returned.
"""

from __future__ import annotations

import logging
import math

from answermatch.config import ScoringConfig
from answermatch.errors import AnswerMatchError, InvalidThresholdError, ProviderFailureError
from answermatch.scoring.embedding import SemanticSimilarityPort, check_embeddings
from answermatch.scoring.jaro import jaro_winkler_similarity
from answermatch.scoring.normalize import fold, normalize
from answermatch.scoring.types import AnswerPair, Decision, ScoreSet, require_answer

logger = logging.getLogger(__name__)

SEMANTIC_WEIGHT = 0.8
LEXICAL_WEIGHT = 0.2


def combine_scores(
    semantic: float,
    jaro_winkler: float,
    semantic_weight: float = SEMANTIC_WEIGHT,
    lexical_weight: float = LEXICAL_WEIGHT,
) -> float:
    return semantic * semantic_weight + jaro_winkler * lexical_weight


def check_threshold(threshold, check_range: bool = True) -> float:
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        raise InvalidThresholdError(f"Threshold must be a number, got {threshold!r}")
    if not check_range:
        return float(threshold)
    if math.isnan(threshold) or not 0.0 <= threshold <= 1.0:
        raise InvalidThresholdError(f"Threshold must lie in [0, 1], got {threshold}")
    return float(threshold)


class AnswerComparer:
    """
    Decides whether a user answer matches a reference answer.

    Stateless apart from the injected provider handle, so a single instance
    can score concurrent requests.
    """

    def __init__(
        self,
        provider: SemanticSimilarityPort,
        config: ScoringConfig | None = None,
    ):
        """
        Args:
            provider: Embedding provider (shared, long-lived)
            config: Scoring defaults and weights; ScoringConfig() if None
        """
        self.provider = provider
        self.config = config or ScoringConfig()

    async def decide(
        self,
        user_answer: str,
        correct_answer: str,
        threshold: float | None = None,
    ) -> Decision:
        require_answer(user_answer, "userAnswer")
        require_answer(correct_answer, "correctAnswer")
        if threshold is None:
            threshold = self.config.threshold
        threshold = check_threshold(threshold, check_range=self.config.validate_threshold)

        norm_user = normalize(user_answer)
        norm_correct = normalize(correct_answer)
        folded_user = fold(norm_user)
        folded_correct = fold(norm_correct)

        if folded_user == folded_correct:
            logger.debug("Exact match after normalization, skipping provider")
            return Decision(
                is_correct=True,
                confidence=1.0,
                scores=ScoreSet(semantic=1.0, jaro_winkler=1.0, combined=1.0, exact=1.0),
                threshold=threshold,
            )

        semantic = await self._semantic_similarity(norm_user, norm_correct)
        jaro_winkler = jaro_winkler_similarity(folded_user, folded_correct)
        combined = combine_scores(
            semantic,
            jaro_winkler,
            self.config.semantic_weight,
            self.config.lexical_weight,
        )
        is_correct = combined >= threshold

        logger.debug(
            f"semantic={semantic:.4f} jaro_winkler={jaro_winkler:.4f} "
            f"combined={combined:.4f} threshold={threshold} -> {is_correct}"
        )
        return Decision(
            is_correct=is_correct,
            confidence=combined,
            scores=ScoreSet(semantic=semantic, jaro_winkler=jaro_winkler, combined=combined),
            threshold=threshold,
        )

    async def decide_pair(self, pair: AnswerPair) -> Decision:
        return await self.decide(pair.user_answer, pair.correct_answer, pair.threshold)

    async def _semantic_similarity(self, user: str, correct: str) -> float:
        try:
            vectors = await self.provider.embed([user, correct])
            vec_user, vec_correct = check_embeddings(vectors, expected=2)
            return float(self.provider.cosine_similarity(vec_user, vec_correct))
        except AnswerMatchError:
            logger.error("Embedding provider returned malformed output", exc_info=True)
            raise
        except Exception as exc:
            logger.error(f"Embedding provider failed: {exc}")
            raise ProviderFailureError(f"Embedding provider failed: {exc}") from exc
