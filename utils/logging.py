import random
import sys
from typing import Final

from loguru import logger

from fluentform_pyutils.logging import LogFormat, LoggerConfig

SERVICE_FORMAT: Final[str] = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<blue>{extra[service]}</blue> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> "
    "| <yellow>{extra[attempt]}</yellow> - <level>{message}</level>"
)


def setup_logging(*, service: str = "cli") -> None:
    """Configure Loguru logger for an entry point based on environment variables.

    Logs go to stderr so that command output on stdout stays machine readable.

    Args:
        service: Service name to include in log context.
    """
    config = LoggerConfig.from_env()
    sampling_rate = config.sampling_rate

    def _sample(record: object) -> bool:
        return sampling_rate >= 1.0 or random.random() < sampling_rate

    logger.remove()
    logger.configure(extra={"service": service, "attempt": "-"})

    if config.format_type == LogFormat.JSON:
        logger.add(sys.stderr, level=config.level, serialize=True, filter=_sample)
    else:
        logger.add(sys.stderr, level=config.level, format=SERVICE_FORMAT, colorize=True, filter=_sample)
