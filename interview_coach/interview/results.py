"""
Turns the coach's free-text evaluation into a score card.

There are two failure tiers:
- the coach answered but a label is missing or unreadable -> that score is 0
- the coach could not be reached at all -> the fixed fallback card
"""
import logging
import re
from typing import Optional

from ..config import SCORE_LABELS, FALLBACK_SCORES, FALLBACK_SUMMARY
from .models import ScoreCard

logger = logging.getLogger("results")

_SUMMARY_RE = re.compile(r"Summary:[ \t]*(.*)")


def fallback_score_card() -> ScoreCard:
    """The plausible default shown when no evaluation came back."""
    return ScoreCard.from_scores(FALLBACK_SCORES, FALLBACK_SUMMARY, is_fallback=True)


def parse_score_text(text: str) -> ScoreCard:
    """
    Extract the five labelled scores and the summary from ``text``.

    Each score is the first integer on its label's line; a missing label
    yields 0. A missing summary yields an empty string.
    """
    scores = []
    for label in SCORE_LABELS:
        match = re.search(rf"{re.escape(label)}:[^\d\n]*(\d+)", text)
        if match:
            scores.append(int(match.group(1)))
        else:
            logger.debug("No score found for %s", label)
            scores.append(0)

    summary_match = _SUMMARY_RE.search(text)
    summary = summary_match.group(1).strip() if summary_match else ""

    return ScoreCard.from_scores(tuple(scores), summary)


class ResultsRenderer:
    """Produces the score card for the results view."""

    def render(self, payload: Optional[str]) -> ScoreCard:
        """
        ``payload`` is the coach's reply, or None when the call failed.
        """
        if payload is None:
            logger.info("No evaluation payload, using fallback scores")
            return fallback_score_card()
        return parse_score_text(payload)
