"""Pytest configuration and fixtures for the transcription annotation tests."""

from pathlib import Path
from typing import Any

import orjson
import pytest

from src.transcription_annotation.models import (
    AssessmentResult,
    AssessmentScores,
    PhonemeScore,
)


@pytest.fixture
def red_phoneme_scores() -> list[PhonemeScore]:
    """Phoneme scores for a single utterance of "red"."""
    return [
        PhonemeScore("r", "red", 62.0),
        PhonemeScore("eh", "red", 88.0),
        PhonemeScore("d", "red", 95.0),
    ]


@pytest.fixture
def sun_phoneme_scores() -> list[PhonemeScore]:
    """Phoneme scores for "sun" only."""
    return [
        PhonemeScore("s", "sun", 80.0),
        PhonemeScore("ah", "sun", 70.0),
        PhonemeScore("n", "sun", 90.0),
    ]


@pytest.fixture
def red_assessment(red_phoneme_scores: list[PhonemeScore]) -> AssessmentResult:
    """Parsed assessment for "red" with overall scores."""
    return AssessmentResult(
        transcription="red",
        scores=AssessmentScores(
            accuracy=81.0, fluency=90.0, completeness=100.0, prosody=70.5, pronunciation=84.2
        ),
        phoneme_scores=red_phoneme_scores,
    )


@pytest.fixture
def service_payload() -> dict[str, Any]:
    """Raw assessment service response for "Red sun"."""
    return {
        "RecognitionStatus": "Success",
        "DisplayText": "Red sun.",
        "NBest": [
            {
                "Confidence": 0.97,
                "Lexical": "red sun",
                "Display": "Red sun.",
                "PronunciationAssessment": {
                    "AccuracyScore": 81.0,
                    "FluencyScore": 90.0,
                    "CompletenessScore": 100.0,
                    "ProsodyScore": 70.5,
                    "PronScore": 84.2,
                },
                "Words": [
                    {
                        "Word": "red",
                        "Offset": 500000,
                        "Duration": 3000000,
                        "PronunciationAssessment": {"AccuracyScore": 81.0},
                        "Phonemes": [
                            {
                                "Phoneme": "r",
                                "Offset": 500000,
                                "Duration": 1000000,
                                "PronunciationAssessment": {"AccuracyScore": 62.0},
                            },
                            {
                                "Phoneme": "eh",
                                "Offset": 1500000,
                                "Duration": 1000000,
                                "PronunciationAssessment": {"AccuracyScore": 88.0},
                            },
                            {
                                "Phoneme": "d",
                                "Offset": 2500000,
                                "Duration": 1000000,
                                "PronunciationAssessment": {"AccuracyScore": 95.0},
                            },
                        ],
                    },
                    {
                        "Word": "sun",
                        "Offset": 3600000,
                        "Duration": 3000000,
                        "PronunciationAssessment": {"AccuracyScore": 80.0},
                        "Phonemes": [
                            {"Phoneme": "s", "PronunciationAssessment": {"AccuracyScore": 80.0}},
                            {"Phoneme": "ah", "PronunciationAssessment": {"AccuracyScore": 70.0}},
                            {"Phoneme": "n", "PronunciationAssessment": {"AccuracyScore": 90.0}},
                        ],
                    },
                ],
            }
        ],
    }


@pytest.fixture
def relay_payload() -> dict[str, Any]:
    """Assessment in the relay form returned by the upload endpoint."""
    return {
        "transcription": "red",
        "scores": {
            "accuracy": 81.0,
            "fluency": 90.0,
            "completeness": 100.0,
            "prosody": 70.5,
            "pronunciation": 84.2,
        },
        "words": [
            {
                "word": "red",
                "accuracyScore": 81.0,
                "phonemes": [
                    {"phoneme": "r", "accuracyScore": 62.0},
                    {"phoneme": "eh", "accuracyScore": 88.0},
                    {"phoneme": "d", "accuracyScore": 95.0},
                ],
            }
        ],
    }


@pytest.fixture
def relay_payload_file(tmp_path: Path, relay_payload: dict[str, Any]) -> Path:
    """Relay payload saved as a JSON file."""
    path = tmp_path / "assessment.json"
    path.write_bytes(orjson.dumps(relay_payload))
    return path
