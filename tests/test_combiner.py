import asyncio

import pytest

from answermatch.config import ScoringConfig
from answermatch.errors import InvalidThresholdError, MissingInputError, ProviderFailureError
from answermatch.scoring.combiner import AnswerComparer, combine_scores
from answermatch.scoring.jaro import jaro_winkler_similarity
from answermatch.scoring.types import AnswerPair


def decide(comparer, *args, **kwargs):
    return asyncio.run(comparer.decide(*args, **kwargs))


# ---------------------------------------------------------------------
# Exact-match fast path
# ---------------------------------------------------------------------
@pytest.mark.parametrize("threshold", [0.0, 0.5, 0.75, 1.0])
def test_identical_answers_skip_provider(stub_provider, threshold):
    comparer = AnswerComparer(stub_provider)
    decision = decide(comparer, "photosynthesis", "photosynthesis", threshold)

    assert decision.is_correct is True
    assert decision.confidence == 1.0
    assert decision.scores.to_dict() == {
        "exact": 1.0,
        "semantic": 1.0,
        "jaroWinkler": 1.0,
        "combined": 1.0,
    }
    assert stub_provider.calls == []


def test_case_insensitive_exact_match(stub_provider):
    decision = decide(AnswerComparer(stub_provider), "Paris", "paris")

    assert decision.is_correct is True
    assert decision.exact_match
    assert decision.scores.combined == 1.0
    assert stub_provider.calls == []


def test_whitespace_differences_hit_fast_path(stub_provider):
    decision = decide(AnswerComparer(stub_provider), "  New   York\tCity ", "new york city")
    assert decision.exact_match
    assert stub_provider.calls == []


# ---------------------------------------------------------------------
# Fusion arithmetic
# ---------------------------------------------------------------------
def test_combine_scores_weights():
    assert combine_scores(0.9, 0.5) == pytest.approx(0.82)


def test_semantic_only_scenario(make_provider):
    provider = make_provider(similarity=0.0)
    decision = decide(AnswerComparer(provider), "Jaro Winkler", "Jaro-Wnkler")

    expected_jw = jaro_winkler_similarity("jaro winkler", "jaro-wnkler")
    assert decision.scores.jaro_winkler == pytest.approx(expected_jw, abs=1e-6)
    assert decision.scores.jaro_winkler == pytest.approx(313 / 330, abs=1e-6)
    assert decision.scores.semantic == 0.0
    assert decision.scores.combined == pytest.approx(expected_jw * 0.2)
    assert decision.is_correct is False
    assert decision.scores.exact is None
    assert "exact" not in decision.to_dict()["scores"]


def test_provider_called_once_with_normalized_batch(make_provider):
    provider = make_provider(similarity=0.5)
    decide(AnswerComparer(provider), "  The   Eiffel Tower ", "Eiffel\ttower")

    # one batched call, normalized but not case-folded
    assert provider.calls == [["The Eiffel Tower", "Eiffel tower"]]


def test_lexical_score_uses_folded_text(make_provider):
    provider = make_provider(similarity=0.5)
    decision = decide(AnswerComparer(provider), "MARTHA", "marhta")
    assert decision.scores.jaro_winkler == pytest.approx(0.961111, abs=1e-6)


@pytest.mark.parametrize("threshold,expected", [(0.5, True), (0.9, False)])
def test_threshold_decision(make_provider, threshold, expected):
    provider = make_provider(similarity=0.9)
    decision = decide(AnswerComparer(provider), "mitochondria", "the mitochondrion", threshold)
    assert decision.is_correct is expected
    assert decision.confidence == decision.scores.combined
    assert decision.threshold == threshold


def test_threshold_boundary_is_inclusive(make_provider):
    provider = make_provider(similarity=0.6)
    jw = jaro_winkler_similarity("dwayne", "duane")
    threshold = combine_scores(0.6, jw)

    decision = decide(AnswerComparer(provider), "dwayne", "duane", threshold)

    assert decision.scores.combined == threshold
    assert decision.is_correct is True


def test_default_threshold_from_config(make_provider):
    provider = make_provider(similarity=0.8)
    comparer = AnswerComparer(provider, ScoringConfig(threshold=0.3))
    decision = decide(comparer, "red", "crimson")
    assert decision.threshold == 0.3
    assert decision.is_correct is True


def test_decide_pair(make_provider):
    provider = make_provider(similarity=1.0)
    pair = AnswerPair.from_payload({"userAnswer": "H2O", "correctAnswer": "water"})
    decision = asyncio.run(AnswerComparer(provider).decide_pair(pair))
    assert decision.threshold == 0.75
    assert decision.is_correct is True


# ---------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------
@pytest.mark.parametrize(
    "user,correct",
    [("", "paris"), ("paris", ""), ("   ", "paris"), (None, "paris"), ("paris", None)],
)
def test_missing_input_never_calls_provider(stub_provider, user, correct):
    with pytest.raises(MissingInputError):
        decide(AnswerComparer(stub_provider), user, correct)
    assert stub_provider.calls == []


@pytest.mark.parametrize("threshold", [-0.1, 1.5, float("nan"), "0.5", True])
def test_invalid_threshold_rejected(stub_provider, threshold):
    with pytest.raises(InvalidThresholdError):
        decide(AnswerComparer(stub_provider), "cat", "dog", threshold)
    assert stub_provider.calls == []


def test_threshold_passthrough_when_validation_disabled(make_provider):
    provider = make_provider(similarity=1.0)
    comparer = AnswerComparer(provider, ScoringConfig(validate_threshold=False))
    decision = decide(comparer, "cat", "feline", 1.5)
    assert decision.threshold == 1.5
    assert decision.is_correct is False


def test_provider_exception_is_wrapped(make_provider):
    provider = make_provider(error=RuntimeError("model not ready"))
    with pytest.raises(ProviderFailureError, match="model not ready") as excinfo:
        decide(AnswerComparer(provider), "cat", "dog")
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert excinfo.value.to_dict()["error"] == "ProviderFailure"


@pytest.mark.parametrize(
    "vectors",
    [
        [[1.0, 0.0]],
        [[1.0, 0.0], [1.0, 0.0, 0.0]],
        [[1.0, 0.0], ["x", "y"]],
        [[1.0, 0.0], [float("nan"), 0.0]],
    ],
)
def test_malformed_provider_output(make_provider, vectors):
    provider = make_provider(vectors=vectors)
    with pytest.raises(ProviderFailureError):
        decide(AnswerComparer(provider), "cat", "dog")


@pytest.mark.parametrize("threshold", ["high", "0.5", [0.5]])
def test_non_numeric_threshold_rejected_when_validation_disabled(stub_provider, threshold):
    comparer = AnswerComparer(stub_provider, ScoringConfig(validate_threshold=False))
    with pytest.raises(InvalidThresholdError):
        decide(comparer, "cat", "dog", threshold)
    assert stub_provider.calls == []
