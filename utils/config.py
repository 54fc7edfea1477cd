import os
from pathlib import Path
from typing import Any, Final

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

from fluentform_pyutils.errors import MissingConfigError
from src.transcription_annotation.constants import (
    EMPTY_TRANSCRIPTION_PLACEHOLDER,
    FEEDBACK_API_KEY,
    FEEDBACK_API_URL,
    FEEDBACK_MODEL,
)
from src.transcription_annotation.exceptions import ConfigurationError
from src.transcription_annotation.services.feedback import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEOUT_SECONDS,
    ChatCompletionFeedbackClient,
)

TRUTHY_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


class FeedbackConfig(BaseModel):
    """LLM feedback configuration."""

    enabled: bool = False
    api_url: str = FEEDBACK_API_URL
    model: str = FEEDBACK_MODEL
    api_key: str = Field(default=FEEDBACK_API_KEY, repr=False)
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, gt=0)
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Validate the endpoint URL scheme."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"api_url must be an http(s) URL, got {v!r}")
        return v


class AnnotationSettings(BaseModel):
    """Annotation display configuration."""

    placeholder: str = EMPTY_TRANSCRIPTION_PLACEHOLDER


class AppConfig(BaseModel):
    """Main application configuration."""

    feedback: FeedbackConfig = Field(default_factory=FeedbackConfig)
    annotation: AnnotationSettings = Field(default_factory=AnnotationSettings)


def load_config(*, config_path: str | None = None) -> AppConfig:
    """Load configuration from YAML file.

    Environment variables ``FEEDBACK_API_KEY``, ``FEEDBACK_API_URL``,
    ``FEEDBACK_MODEL`` and ``FEEDBACK_ENABLED`` override the file.

    Args:
        config_path: Path to the YAML configuration file. Defaults apply when omitted.

    Returns:
        Configuration object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigurationError: If the YAML cannot be parsed or fails validation.
    """
    raw_config: dict[str, Any] = {}
    if config_path is not None:
        config_file: Path = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        try:
            with config_file.open("r") as file:
                raw_config = yaml.safe_load(file) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML config: {e}") from e

        if not isinstance(raw_config, dict):
            raise ConfigurationError(f"Config file {config_path} must hold a mapping")

    try:
        config = AppConfig(**raw_config)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    if config_path is not None:
        logger.info(f"Config loaded from {config_path}")

    if os.getenv("FEEDBACK_API_KEY"):
        config.feedback.api_key = os.getenv("FEEDBACK_API_KEY", config.feedback.api_key)
    if os.getenv("FEEDBACK_API_URL"):
        config.feedback.api_url = os.getenv("FEEDBACK_API_URL", config.feedback.api_url)
    if os.getenv("FEEDBACK_MODEL"):
        config.feedback.model = os.getenv("FEEDBACK_MODEL", config.feedback.model)
    if os.getenv("FEEDBACK_ENABLED"):
        config.feedback.enabled = os.getenv("FEEDBACK_ENABLED", "false").lower() in TRUTHY_VALUES

    return config


def build_feedback_client(*, config: FeedbackConfig) -> ChatCompletionFeedbackClient | None:
    """Create the feedback client described by the configuration.

    Args:
        config: Feedback configuration.

    Returns:
        A client, or None when feedback is disabled.

    Raises:
        MissingConfigError: If feedback is enabled without an API key.
    """
    if not config.enabled:
        return None
    if not config.api_key:
        raise MissingConfigError(config_key_name="FEEDBACK_API_KEY")

    logger.debug(f"Feedback enabled with model {config.model}")
    return ChatCompletionFeedbackClient(
        api_key=config.api_key,
        api_url=config.api_url,
        model=config.model,
        timeout_seconds=config.timeout_seconds,
        max_tokens=config.max_tokens,
        temperature=config.temperature,
    )
