"""Logging setup and structured one-line event helpers."""

import logging
import sys
from typing import Any

LOGGER_NAME = "eventhub"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

logger = logging.getLogger(LOGGER_NAME)


def configure_logging(level: str = "INFO") -> None:
    """Attach a stream handler to the package logger once."""
    if any(getattr(h, "_eventhub_handler", False) for h in logger.handlers):
        logger.setLevel(level)
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._eventhub_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level)


def _format(event: str, fields: dict[str, Any]) -> str:
    if not fields:
        return event
    pairs = " ".join(f"{key}={value!r}" for key, value in sorted(fields.items()))
    return f"{event} {pairs}"


def log_event(event: str, **fields: Any) -> None:
    logger.info(_format(event, fields))


def log_warning(event: str, **fields: Any) -> None:
    logger.warning(_format(event, fields))
