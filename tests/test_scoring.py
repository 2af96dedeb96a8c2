import pytest

from idea_dig.schemas import Analysis, Perspective, Recommendation
from idea_dig.scoring import aggregate_score, determine_recommendation, generate_title


def _analysis(score, perspective=Perspective.FINANCIAL):
    return Analysis(perspective=perspective, score=score)


def test_aggregate_of_nothing_is_zero() -> None:
    assert aggregate_score([]) == 0


def test_aggregate_ignores_missing_scores() -> None:
    analyses = [_analysis(80), _analysis(None), _analysis(60)]

    assert aggregate_score(analyses) == pytest.approx(70)


def test_aggregate_with_only_missing_scores_is_zero() -> None:
    assert aggregate_score([_analysis(None), _analysis(None)]) == 0


@pytest.mark.parametrize(
    ("score", "expected"),
    [
        (90, Recommendation.PROCEED),
        (75, Recommendation.PROCEED),
        (60, Recommendation.REFINE),
        (45, Recommendation.PIVOT),
        (39.9, Recommendation.ABANDON),
    ],
)
def test_recommendation_bands(score: float, expected: Recommendation) -> None:
    assert determine_recommendation(score, [_analysis(score)]) is expected


def test_critical_perspective_caps_recommendation() -> None:
    analyses = [_analysis(95), _analysis(95), _analysis(25)]

    assert determine_recommendation(71.7, analyses) is Recommendation.PIVOT
    assert determine_recommendation(45, analyses) is Recommendation.ABANDON


def test_short_idea_is_its_own_title() -> None:
    assert generate_title("  Left-handed scissors box  ") == "Left-handed scissors box"


def test_long_idea_title_cut_at_first_sentence() -> None:
    idea = "A subscription box for left-handed scissors. Ships monthly to craft lovers everywhere in the world."

    assert generate_title(idea) == "A subscription box for left-handed scissors"


def test_long_idea_without_sentence_is_truncated() -> None:
    idea = "word " * 30

    title = generate_title(idea)

    assert len(title) == 60
    assert title.endswith("...")


def test_idea_opening_with_punctuation_keeps_its_text() -> None:
    idea = "...and then there was a subscription box for left-handed scissors shipped monthly"

    title = generate_title(idea)

    assert title == idea[:57] + "..."
