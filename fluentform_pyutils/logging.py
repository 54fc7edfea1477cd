"""Loguru-backed loggers shared by the FluentForm packages.

Sinks are configured once per process from the environment the first time a
logger is requested; entry points may replace them afterwards. Every record
carries the component that emitted it and, inside ``attempt_context``, the
practice attempt being processed.
"""

import os
import random
import sys
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Final

from loguru import logger as _loguru_logger

if TYPE_CHECKING:
    from loguru import Record

TRUTHY_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
NO_ATTEMPT: Final[str] = "-"

STANDARD_FORMAT: Final[str] = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<yellow>{extra[attempt]}</yellow> - <level>{message}</level>"
)


class LogFormat(StrEnum):
    """Supported logging output formats."""

    STANDARD = "standard"
    JSON = "json"


@dataclass(frozen=True)
class AttemptContext:
    """Identifiers of the practice attempt being processed.

    Args:
        attempt_id: Unique identifier of the attempt
        learner_id: Optional learner the attempt belongs to
    """

    attempt_id: str
    learner_id: str | None = None

    def __str__(self) -> str:
        if self.learner_id:
            return f"{self.learner_id}/{self.attempt_id}"
        return self.attempt_id


@dataclass(frozen=True)
class LoggerConfig:
    """Sink settings.

    Args:
        level: Minimum level name
        format_type: Colored text or one JSON object per line
        sampling_rate: Share of records kept, 0.0 to 1.0
    """

    level: str = "INFO"
    format_type: LogFormat = LogFormat.STANDARD
    sampling_rate: float = 1.0

    @classmethod
    def from_env(cls) -> "LoggerConfig":
        """Read ``LOG_LEVEL``/``LOGLEVEL``, ``LOG_FORMAT``, ``LOG_JSON`` and ``LOG_SAMPLING_RATE``."""
        level = os.getenv("LOG_LEVEL", os.getenv("LOGLEVEL", "INFO")).upper()
        if os.getenv("LOG_JSON", "false").lower() in TRUTHY_VALUES:
            format_type = LogFormat.JSON
        else:
            try:
                format_type = LogFormat(os.getenv("LOG_FORMAT", "standard").lower())
            except ValueError:
                format_type = LogFormat.STANDARD

        return cls(
            level=level,
            format_type=format_type,
            sampling_rate=_sampling_rate_from_env("LOG_SAMPLING_RATE", 1.0),
        )


_current_attempt: ContextVar[AttemptContext | None] = ContextVar(
    "fluentform_attempt", default=None
)
_configured = False


def _add_context(record: "Record") -> None:
    attempt = _current_attempt.get()
    record["extra"]["attempt"] = str(attempt) if attempt else NO_ATTEMPT
    record["extra"].setdefault("component", record["name"])


def configure_logging(config: LoggerConfig | None = None) -> None:
    """Replace all sinks with a single stderr sink.

    Args:
        config: Sink settings; read from the environment when omitted.
    """
    global _configured

    effective = config or LoggerConfig.from_env()
    sampling_rate = effective.sampling_rate

    def _sample(record: "Record") -> bool:
        return sampling_rate >= 1.0 or random.random() < sampling_rate

    _loguru_logger.remove()
    _loguru_logger.configure(patcher=_add_context)
    if effective.format_type == LogFormat.JSON:
        _loguru_logger.add(sys.stderr, level=effective.level, filter=_sample, serialize=True)
    else:
        _loguru_logger.add(
            sys.stderr,
            level=effective.level,
            filter=_sample,
            format=STANDARD_FORMAT,
            colorize=True,
        )
    _configured = True


class ComponentLogger:
    """Logger bound to one component of the annotation pipeline."""

    def __init__(self, *, name: str) -> None:
        self._name = name
        self._logger = _loguru_logger.bind(component=name)

    @contextmanager
    def attempt_context(
        self, *, description: str, attempt_id: str | None = None, learner_id: str | None = None
    ) -> Generator[AttemptContext, None, None]:
        """Tag every record emitted inside the block with one attempt.

        Args:
            description: What is being done with the attempt
            attempt_id: Attempt identifier; a random one is generated when omitted
            learner_id: Optional learner identifier

        Yields:
            The attempt context in effect
        """
        attempt = AttemptContext(attempt_id=attempt_id or uuid.uuid4().hex, learner_id=learner_id)
        token = _current_attempt.set(attempt)
        self._logger.opt(depth=2).debug(f"Started '{description}' for attempt {attempt}")
        try:
            yield attempt
        finally:
            _current_attempt.reset(token)

    @property
    def current_attempt(self) -> AttemptContext | None:
        return _current_attempt.get()

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.opt(depth=1).debug(message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.opt(depth=1).info(message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.opt(depth=1).warning(message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.opt(depth=1).error(message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log at error level with the active exception's traceback."""
        self._logger.opt(depth=1).exception(message, **kwargs)


_loggers: dict[str, ComponentLogger] = {}


def get_logger(name: str) -> ComponentLogger:
    """Get the logger for a component, configuring sinks on first use.

    Args:
        name: Component name, normally ``__name__``

    Returns:
        Cached logger for the component

    Examples:
        logger = get_logger(__name__)

        with logger.attempt_context(description="analyze_assessment"):
            logger.info("Annotating")
    """
    if not _configured:
        configure_logging()

    if name not in _loggers:
        _loggers[name] = ComponentLogger(name=name)
    return _loggers[name]


def _sampling_rate_from_env(env_name: str, default: float) -> float:
    try:
        value = float(os.getenv(env_name, str(default)))
    except ValueError:
        return default
    if not (0.0 <= value <= 1.0):
        return default
    return value
