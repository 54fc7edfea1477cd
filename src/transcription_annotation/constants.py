"""Configuration constants for the transcription annotation pipeline.

Loads the project ``.env`` file once at module import and exposes the
environment-backed settings and fixed scoring thresholds as typed constants.
"""

import os
from pathlib import Path
from typing import Final

from dotenv import load_dotenv

_PROJECT_ROOT: Final[Path] = Path(__file__).parent.parent.parent
_ENV_FILE: Final[Path] = _PROJECT_ROOT / ".env"

load_dotenv(_ENV_FILE)

FEEDBACK_API_KEY: Final[str] = os.getenv("FEEDBACK_API_KEY", "")
FEEDBACK_API_URL: Final[str] = os.getenv(
    "FEEDBACK_API_URL", "https://openrouter.ai/api/v1/chat/completions"
)
FEEDBACK_MODEL: Final[str] = os.getenv("FEEDBACK_MODEL", "openai/gpt-4o-mini")

DEFAULT_ACCURACY_SCORE: Final[float] = 100.0
EXCELLENT_THRESHOLD: Final[float] = 90.0
GOOD_THRESHOLD: Final[float] = 75.0
AVERAGE_THRESHOLD: Final[float] = 60.0
NEEDS_WORK_THRESHOLD: Final[float] = 40.0

EMPTY_TRANSCRIPTION_PLACEHOLDER: Final[str] = "No transcription available"
WORD_SEPARATOR: Final[str] = " "

DEFAULT_LOG_LEVEL: Final[str] = "INFO"
