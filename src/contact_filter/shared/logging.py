"""
Logging configuration: plain progress lines or structured JSON.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from contact_filter.config import Settings, get_settings

ROOT_LOGGER_NAME = "contact_filter"

_RESERVED = {
    # standard LogRecord attributes
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
    "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
    "created", "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "message", "taskName",
}


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Collect fields passed through ``extra=...`` or ``log_with_context``."""
    fields: dict[str, Any] = {}
    if hasattr(record, "extra_data") and isinstance(record.extra_data, dict):  # type: ignore[attr-defined]
        fields.update(record.extra_data)  # type: ignore[attr-defined]
    for k, v in record.__dict__.items():
        if k in _RESERVED or k == "extra_data":
            continue
        fields[k] = v
    return fields


class StructuredFormatter(logging.Formatter):
    """JSON-like structured log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for k, v in _extra_fields(record).items():
            # avoid overriding base keys
            if k in log_data:
                log_data[f"extra_{k}"] = v
            else:
                log_data[k] = v

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Plain formatter for interactive runs.

    INFO records are printed as bare progress lines; other levels get a
    level prefix so warnings and errors stand out.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.levelno != logging.INFO:
            message = f"{record.levelname}: {message}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Handlers live on the package logger (see ``setup_logging``); module
    loggers only propagate to it.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


def setup_logging(settings: Settings | None = None) -> None:
    """Install a single stdout handler on the package logger."""
    settings = settings or get_settings()

    handler = logging.StreamHandler(sys.stdout)
    if settings.log_format == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(TextFormatter())

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(getattr(logging, settings.log_level, logging.INFO))
    package_logger.handlers = [handler]
    package_logger.propagate = False


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **extra: Any,
) -> None:
    """Log a message with extra context data."""
    if not logger.isEnabledFor(level):
        return
    record = logger.makeRecord(
        logger.name,
        level,
        "",
        0,
        message,
        (),
        None,
    )
    record.extra_data = extra  # type: ignore[attr-defined]
    logger.handle(record)
