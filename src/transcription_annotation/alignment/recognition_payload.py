"""Adapter from pronunciation-assessment payloads to annotation inputs.

The assessment service nests phoneme results inside word results. The
alignment engine works on a flat list of phoneme scores tagged with their
word, so this module owns the reshaping and keeps the engine independent of
the upstream schema. Both the raw service response (``NBest`` form) and the
relay form produced by the upload endpoint (``transcription``/``scores``/
``words``) are accepted.
"""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final

import orjson

from fluentform_pyutils.logging import get_logger
from src.transcription_annotation.constants import DEFAULT_ACCURACY_SCORE
from src.transcription_annotation.exceptions import PayloadError
from src.transcription_annotation.models import (
    AssessmentResult,
    AssessmentScores,
    PhonemeScore,
)

logger = get_logger(__name__)

ASSESSMENT_KEY: Final[str] = "PronunciationAssessment"

# (service key, relay key) pairs, service form checked first
WORD_KEYS: Final[tuple[str, str]] = ("Word", "word")
PHONEMES_KEYS: Final[tuple[str, str]] = ("Phonemes", "phonemes")
PHONEME_KEYS: Final[tuple[str, str]] = ("Phoneme", "phoneme")
ACCURACY_KEYS: Final[tuple[str, str]] = ("AccuracyScore", "accuracyScore")
OFFSET_KEYS: Final[tuple[str, str]] = ("Offset", "offset")
DURATION_KEYS: Final[tuple[str, str]] = ("Duration", "duration")

SERVICE_SCORE_KEYS: Final[Mapping[str, str]] = {
    "accuracy": "AccuracyScore",
    "fluency": "FluencyScore",
    "completeness": "CompletenessScore",
    "prosody": "ProsodyScore",
    "pronunciation": "PronScore",
}


def _first_present(item: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        if key in item:
            return item[key]
    return None


def _phoneme_accuracy(phoneme: Mapping[str, Any]) -> Any:
    """Read a phoneme's accuracy from the nested assessment block or a flat key."""
    assessment = phoneme.get(ASSESSMENT_KEY)
    if isinstance(assessment, Mapping):
        value = _first_present(assessment, ACCURACY_KEYS)
        if value is not None:
            return value
    value = _first_present(phoneme, ACCURACY_KEYS)
    return DEFAULT_ACCURACY_SCORE if value is None else value


def _as_ticks(value: Any) -> int | None:
    """Keep an offset or duration only when it is a whole number of ticks."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def flatten_phoneme_scores(words: Sequence[Any] | None) -> list[PhonemeScore]:
    """Flatten word results into one phoneme score per recognized phoneme.

    Args:
        words: Word objects, each optionally carrying a list of phoneme objects.

    Returns:
        Phoneme scores in payload order, each tagged with its owning word.
        Entries whose word or phoneme symbol is not text are skipped.
    """
    if words is None:
        return []
    if isinstance(words, str) or not isinstance(words, Sequence):
        logger.debug(f"Skipping word list of unexpected type {type(words).__name__}")
        return []

    phoneme_scores: list[PhonemeScore] = []
    for word in words:
        if not isinstance(word, Mapping):
            logger.debug(f"Skipping malformed word entry: {word!r}")
            continue

        word_text = _first_present(word, WORD_KEYS)
        if word_text is not None and not isinstance(word_text, str):
            logger.debug(f"Skipping word with non-text value: {word_text!r}")
            continue

        phonemes = _first_present(word, PHONEMES_KEYS) or []
        if isinstance(phonemes, str) or not isinstance(phonemes, Sequence):
            logger.debug(f"Skipping phoneme list of unexpected type in '{word_text}'")
            continue
        for phoneme in phonemes:
            if not isinstance(phoneme, Mapping):
                logger.debug(f"Skipping malformed phoneme entry in '{word_text}': {phoneme!r}")
                continue
            symbol = _first_present(phoneme, PHONEME_KEYS)
            if symbol is not None and not isinstance(symbol, str):
                logger.debug(f"Skipping phoneme with non-text symbol in '{word_text}': {symbol!r}")
                continue
            phoneme_scores.append(
                PhonemeScore(
                    phoneme=symbol or "",
                    from_word=word_text or "",
                    accuracy_score=_phoneme_accuracy(phoneme),
                    offset=_as_ticks(_first_present(phoneme, OFFSET_KEYS)),
                    duration=_as_ticks(_first_present(phoneme, DURATION_KEYS)),
                )
            )
    return phoneme_scores


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _parse_service_payload(payload: Mapping[str, Any]) -> AssessmentResult:
    nbest = payload.get("NBest")
    best: Mapping[str, Any] = {}
    if isinstance(nbest, Sequence) and nbest and isinstance(nbest[0], Mapping):
        best = nbest[0]
    assessment = best.get(ASSESSMENT_KEY)
    if not isinstance(assessment, Mapping):
        assessment = {}

    transcription = payload.get("DisplayText") or best.get("Display") or best.get("Lexical") or ""
    scores = AssessmentScores(
        **{field: _as_float(assessment.get(key)) for field, key in SERVICE_SCORE_KEYS.items()}
    )
    return AssessmentResult(
        transcription=str(transcription).strip(),
        scores=scores,
        phoneme_scores=flatten_phoneme_scores(best.get("Words")),
    )


def _parse_relay_payload(payload: Mapping[str, Any]) -> AssessmentResult:
    raw_scores = payload.get("scores")
    if not isinstance(raw_scores, Mapping):
        raw_scores = {}
    scores = AssessmentScores(
        **{field: _as_float(raw_scores.get(field)) for field in SERVICE_SCORE_KEYS}
    )
    return AssessmentResult(
        transcription=str(payload.get("transcription") or "").strip(),
        scores=scores,
        phoneme_scores=flatten_phoneme_scores(payload.get("words")),
    )


def parse_assessment_result(payload: Mapping[str, Any]) -> AssessmentResult:
    """Reshape an assessment payload into an annotation-ready result.

    Args:
        payload: Either the raw service response (with ``NBest``) or the relay
            response (with ``transcription``, ``scores`` and ``words``).

    Returns:
        Transcription, overall scores and flat phoneme scores.
    """
    if "NBest" in payload:
        result = _parse_service_payload(payload)
    else:
        result = _parse_relay_payload(payload)

    logger.debug(
        f"Parsed assessment for '{result.transcription}' with "
        f"{len(result.phoneme_scores)} phoneme scores"
    )
    return result


def load_assessment_file(path: str | Path) -> AssessmentResult:
    """Read a saved assessment JSON file and reshape it.

    Args:
        path: Path to a JSON file holding one assessment payload.

    Returns:
        Parsed assessment result.

    Raises:
        PayloadError: If the file cannot be read, is not valid JSON, or is not an object.
    """
    file_path = Path(path)
    try:
        payload = orjson.loads(file_path.read_bytes())
    except OSError as e:
        raise PayloadError(f"Cannot read assessment file {file_path}: {e}") from e
    except orjson.JSONDecodeError as e:
        raise PayloadError(f"Invalid JSON in assessment file {file_path}: {e}") from e

    if not isinstance(payload, Mapping):
        raise PayloadError(
            f"Assessment file {file_path} must hold a JSON object, got {type(payload).__name__}"
        )

    logger.info(f"Loaded assessment payload from {file_path}")
    return parse_assessment_result(payload)
