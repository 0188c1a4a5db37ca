"""Structured JSON logging, one line per record."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from app.core.config import get_settings

ROOT_LOGGER_NAME = "resource_planning"


class JSONFormatter(logging.Formatter):
    """Emit every log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            log_data.update({key: str(value) for key, value in context.items()})
        if record.exc_info and record.exc_info[1]:
            log_data["error"] = str(record.exc_info[1])
            log_data["error_type"] = type(record.exc_info[1]).__name__
        return json.dumps(log_data)


def configure_logging() -> logging.Logger:
    """Attach the JSON handler to the application root logger once."""

    settings = get_settings()
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    # Other handlers (test capture, host instrumentation) may already be attached.
    if not any(isinstance(handler.formatter, JSONFormatter) for handler in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(getattr(logging, settings.log_level, logging.INFO))
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a child of the application logger."""

    configure_logging()
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
