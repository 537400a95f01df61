"""Structured logging configuration for matcalc."""

import logging
import sys
from datetime import datetime
from typing import Optional

from .config import LOG_LEVEL

# Expressions may be MAX_INPUT_LENGTH characters long; log only their head
LOG_PREVIEW_LENGTH = 60


class StructuredFormatter(logging.Formatter):
    """Formatter that outputs structured log entries with timestamp, module, level, and message."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat()
        message = f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def setup_logging(
    level: Optional[str] = None, log_file: Optional[str] = None
) -> logging.Logger:
    """Set up structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            MATCALC_LOG_LEVEL when omitted
        log_file: Optional file path to write logs (if None, logs to stderr)

    Returns:
        Configured logger instance
    """
    if level is None:
        level = LOG_LEVEL
    logger = logging.getLogger("matcalc")
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    # Remove existing handlers
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(StructuredFormatter())
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "matcalc") -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Logger name (typically module name)

    Returns:
        Logger instance
    """
    return logging.getLogger(f"matcalc.{name}")


def preview_expression(text: str, limit: int = LOG_PREVIEW_LENGTH) -> str:
    """Shorten expression text for a log line.

    Example:
        >>> preview_expression("1+" * 40 + "1", limit=10)
        "'1+1+1+1+1+' ... (81 chars)"
    """
    if len(text) <= limit:
        return repr(text)
    return f"{text[:limit]!r} ... ({len(text)} chars)"
