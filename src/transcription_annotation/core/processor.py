"""
Core processing logic for the transcription annotation pipeline.

This module chains the payload adapter, the grapheme alignment engine and the
display rules into a single analysis of one practice attempt, and optionally
asks a feedback generator for coaching text. Feedback is best effort: a
failing feedback service never prevents the report from being returned.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from fluentform_pyutils.errors import FluentFormError
from fluentform_pyutils.logging import get_logger
from src.transcription_annotation.alignment.grapheme_alignment import annotate
from src.transcription_annotation.alignment.recognition_payload import parse_assessment_result
from src.transcription_annotation.constants import EMPTY_TRANSCRIPTION_PLACEHOLDER
from src.transcription_annotation.models import (
    AnnotatedCharacter,
    AssessmentResult,
    AssessmentScores,
    CharacterKind,
    PhonemeScore,
)
from src.transcription_annotation.rules.score_classes import (
    PerformanceTier,
    annotation_display_class,
    group_by_word,
    performance_feedback,
)
from src.transcription_annotation.services.feedback import (
    FeedbackGenerator,
    build_feedback_prompt,
)

logger = get_logger(__name__)


class AnnotatedCharacterView(BaseModel):
    """One displayed character with its phoneme, score and display class."""

    character: str
    kind: CharacterKind
    phoneme: str = ""
    accuracy_score: Any = None
    display_class: str

    @classmethod
    def from_annotation(cls, annotation: AnnotatedCharacter) -> "AnnotatedCharacterView":
        return cls(
            character=annotation.character,
            kind=annotation.kind,
            phoneme=annotation.phoneme,
            accuracy_score=annotation.accuracy_score,
            display_class=annotation_display_class(annotation),
        )


class PhonemeScoreView(BaseModel):
    """A phoneme card in the per-word grid."""

    phoneme: str
    accuracy_score: Any = None
    offset: int | None = None
    duration: int | None = None

    @classmethod
    def from_score(cls, score: PhonemeScore) -> "PhonemeScoreView":
        return cls(
            phoneme=score.phoneme,
            accuracy_score=score.accuracy_score,
            offset=score.offset,
            duration=score.duration,
        )


class ScoresView(BaseModel):
    """Overall utterance scores."""

    accuracy: float = 0.0
    fluency: float = 0.0
    completeness: float = 0.0
    prosody: float = 0.0
    pronunciation: float = 0.0

    @classmethod
    def from_scores(cls, scores: AssessmentScores) -> "ScoresView":
        return cls(
            accuracy=scores.accuracy,
            fluency=scores.fluency,
            completeness=scores.completeness,
            prosody=scores.prosody,
            pronunciation=scores.pronunciation,
        )


class PerformanceView(BaseModel):
    """Performance tier shown after an attempt."""

    tier: PerformanceTier
    icon: str
    message: str


class AnalysisReport(BaseModel):
    """Full analysis of one attempt, ready for rendering or JSON output."""

    transcription: str
    scores: ScoresView
    annotations: list[AnnotatedCharacterView] = Field(default_factory=list)
    phoneme_groups: dict[str, list[PhonemeScoreView]] = Field(default_factory=dict)
    performance: PerformanceView
    feedback: str = ""


def _request_feedback(
    *,
    feedback: FeedbackGenerator,
    result: AssessmentResult,
    display_text: str,
) -> str:
    prompt = build_feedback_prompt(
        transcription=result.transcription,
        scores=result.scores,
        phoneme_scores=result.phoneme_scores,
        reference_text=display_text if display_text != result.transcription else None,
    )
    try:
        return feedback.generate(prompt=prompt)
    except FluentFormError as e:
        logger.warning(f"Feedback unavailable, continuing without it: {e}")
        return ""


def analyze_assessment(
    result: AssessmentResult,
    *,
    text: str | None = None,
    feedback: FeedbackGenerator | None = None,
    placeholder: str = EMPTY_TRANSCRIPTION_PLACEHOLDER,
) -> AnalysisReport:
    """
    Analyze one assessment result.

    Args:
        result: Parsed assessment result
        text: Text to annotate instead of the recognized transcription
        feedback: Optional feedback generator for coaching text
        placeholder: Text reported when there is nothing to display

    Returns:
        Annotated report. ``feedback`` is empty when no generator is given or it fails.
    """
    display_text = text if text is not None else result.transcription

    with logger.attempt_context(description="analyze_assessment"):
        annotations = annotate(display_text, result.phoneme_scores)
        if not annotations:
            logger.info("Nothing to annotate, reporting placeholder text")

        groups = group_by_word(result.phoneme_scores)
        performance = performance_feedback(result.scores.accuracy)
        logger.debug(
            f"Annotated {len(annotations)} characters, {len(groups)} words in phoneme grid, "
            f"performance {performance.tier.value}"
        )

        feedback_text = ""
        if feedback is not None and display_text:
            feedback_text = _request_feedback(
                feedback=feedback, result=result, display_text=display_text
            )

    return AnalysisReport(
        transcription=display_text or placeholder,
        scores=ScoresView.from_scores(result.scores),
        annotations=[AnnotatedCharacterView.from_annotation(a) for a in annotations],
        phoneme_groups={
            word: [PhonemeScoreView.from_score(score) for score in scores]
            for word, scores in groups.items()
        },
        performance=PerformanceView(
            tier=performance.tier, icon=performance.icon, message=performance.message
        ),
        feedback=feedback_text,
    )


def analyze_payload(
    payload: Mapping[str, Any],
    *,
    text: str | None = None,
    feedback: FeedbackGenerator | None = None,
    placeholder: str = EMPTY_TRANSCRIPTION_PLACEHOLDER,
) -> AnalysisReport:
    """Parse an assessment payload and analyze it.

    Args:
        payload: Raw service response or relay response
        text: Text to annotate instead of the recognized transcription
        feedback: Optional feedback generator for coaching text
        placeholder: Text reported when there is nothing to display

    Returns:
        Annotated report.
    """
    result = parse_assessment_result(payload)
    return analyze_assessment(result, text=text, feedback=feedback, placeholder=placeholder)
