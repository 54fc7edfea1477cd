"""
Score bucketing rules for the visual transcription and result cards.

Maps accuracy scores to the display classes used to color letters, phoneme
cards and progress bars, and to the performance feedback shown after an
attempt. Thresholds are fixed and shared by every view.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Final

from src.transcription_annotation.constants import (
    AVERAGE_THRESHOLD,
    EXCELLENT_THRESHOLD,
    GOOD_THRESHOLD,
    NEEDS_WORK_THRESHOLD,
)
from src.transcription_annotation.models import AnnotatedCharacter, PhonemeScore

SPACE_DISPLAY_CLASS: Final[str] = "space"


class ScoreClass(StrEnum):
    """Display class of a score, from best to worst."""

    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    NEEDS_WORK = "needs-work"
    POOR = "poor"


class PerformanceTier(StrEnum):
    """Overall performance tier shown after an attempt."""

    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    NEEDS_WORK = "needs-work"


@dataclass(frozen=True)
class PerformanceFeedback:
    """Performance tier with the message to display.

    Args:
        tier: Performance tier for the score
        icon: Icon name for the tier
        message: Custom message if given, otherwise the tier's default message
    """

    tier: PerformanceTier
    icon: str
    message: str


PERFORMANCE_DEFAULTS: Final[dict[PerformanceTier, tuple[str, str]]] = {
    PerformanceTier.EXCELLENT: ("bi-emoji-laughing-fill", "Excellent pronunciation!"),
    PerformanceTier.GOOD: ("bi-emoji-smile-fill", "Good job!"),
    PerformanceTier.AVERAGE: ("bi-emoji-neutral-fill", "Keep practicing!"),
    PerformanceTier.NEEDS_WORK: ("bi-emoji-frown-fill", "Needs improvement."),
}


def score_class(score: float) -> ScoreClass:
    """Bucket a 0-100 score into its display class.

    Args:
        score: Accuracy score.

    Returns:
        ``excellent`` at 90 and above, ``good`` at 75, ``average`` at 60,
        ``needs-work`` at 40, ``poor`` below that.
    """
    if score >= EXCELLENT_THRESHOLD:
        return ScoreClass.EXCELLENT
    if score >= GOOD_THRESHOLD:
        return ScoreClass.GOOD
    if score >= AVERAGE_THRESHOLD:
        return ScoreClass.AVERAGE
    if score >= NEEDS_WORK_THRESHOLD:
        return ScoreClass.NEEDS_WORK
    return ScoreClass.POOR


def annotation_display_class(annotation: AnnotatedCharacter) -> str:
    """Display class of an annotated character.

    Only scores below the excellent threshold change a letter's class; letters
    with no usable score render as excellent.

    Args:
        annotation: Annotated character from the alignment engine.

    Returns:
        ``space`` for separators, otherwise a ``ScoreClass`` value.
    """
    if annotation.is_space:
        return SPACE_DISPLAY_CLASS

    score: Any = annotation.accuracy_score
    if isinstance(score, bool) or not isinstance(score, int | float):
        return ScoreClass.EXCELLENT.value
    if score < EXCELLENT_THRESHOLD:
        return score_class(score).value
    return ScoreClass.EXCELLENT.value


def performance_feedback(score: float, message: str | None = None) -> PerformanceFeedback:
    """Pick the performance tier for an overall score.

    Args:
        score: Overall accuracy score of the attempt.
        message: Optional message replacing the tier's default message.

    Returns:
        Tier, icon and message to display.
    """
    if score >= EXCELLENT_THRESHOLD:
        tier = PerformanceTier.EXCELLENT
    elif score >= GOOD_THRESHOLD:
        tier = PerformanceTier.GOOD
    elif score >= AVERAGE_THRESHOLD:
        tier = PerformanceTier.AVERAGE
    else:
        tier = PerformanceTier.NEEDS_WORK

    icon, default_message = PERFORMANCE_DEFAULTS[tier]
    return PerformanceFeedback(tier=tier, icon=icon, message=message or default_message)


def group_by_word(phoneme_scores: Iterable[PhonemeScore]) -> dict[str, list[PhonemeScore]]:
    """Group phoneme scores by their word for the per-word phoneme card grid.

    Args:
        phoneme_scores: Phoneme scores in payload order.

    Returns:
        Mapping of word to its phoneme scores in first-seen word order. Scores
        without a word are skipped.
    """
    groups: dict[str, list[PhonemeScore]] = {}
    for score in phoneme_scores:
        if not score.from_word:
            continue
        groups.setdefault(score.from_word, []).append(score)
    return groups
