"""Score aggregation, recommendation and title helpers."""

from __future__ import annotations

import re
from typing import Iterable, Sequence

from .schemas import Analysis, Recommendation

CRITICAL_PERSPECTIVE_SCORE = 30.0

TITLE_MAX_PLAIN = 50
TITLE_SENTENCE_SEARCH = 100
TITLE_MAX_LENGTH = 60


def aggregate_score(analyses: Iterable[Analysis]) -> float:
    """Return the mean of the scores that are present, or 0 when none are."""

    scores = [analysis.score for analysis in analyses if analysis.score is not None]
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


def determine_recommendation(score: float, analyses: Sequence[Analysis]) -> Recommendation:
    """Map the overall score to a recommendation.

    A single perspective scoring below 30 caps the verdict at pivot, or
    abandon when the overall score is also weak.
    """

    if any(a.score is not None and a.score < CRITICAL_PERSPECTIVE_SCORE for a in analyses):
        return Recommendation.ABANDON if score < 50 else Recommendation.PIVOT

    if score >= 75:
        return Recommendation.PROCEED
    if score >= 55:
        return Recommendation.REFINE
    if score >= 40:
        return Recommendation.PIVOT
    return Recommendation.ABANDON


def generate_title(idea: str) -> str:
    """Derive a short label from the raw idea text."""

    title = idea.strip()
    if len(title) <= TITLE_MAX_PLAIN:
        return title

    match = re.search(r"[.!?]", title)
    if match and match.start() < TITLE_SENTENCE_SEARCH:
        # Ideas that open with punctuation keep the whole text.
        title = title[: match.start()].rstrip() or title
    if len(title) > TITLE_MAX_LENGTH:
        title = title[: TITLE_MAX_LENGTH - 3] + "..."
    return title
