from __future__ import annotations

import logging
import sys

"""Logging initialization with labeled prefixes.

Every line written by the application carries one of the labels
INFO | SUCCESS | WARN | ERROR | SUMMARY followed by the message. The
diagnostics sink in fcrgen.logging.event_log mirrors its events through
this logger so the CLI output and the in-memory event list stay in step.
"""

__all__ = [
    "LOGGER_NAME",
    "SUCCESS_LEVEL",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "log_summary",
    "reset_logging",
]

LOGGER_NAME = "fcr_generator"

# Custom levels (between INFO=20 and WARNING=30)
SUCCESS_LEVEL = 21
SUMMARY_LEVEL = 25

# Global logger instance
_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Formatter that prefixes each message with a fixed label per level."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        SUCCESS_LEVEL: "SUCCESS",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        level_label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{level_label} {record.getMessage()}"


def setup_logging(debug: bool = False) -> logging.Logger:
    """Setup the application logger.

    - One stdout handler with LabeledFormatter
    - SUCCESS / SUMMARY custom levels registered
    - Idempotent: a second call returns the same logger (only the level may change)

    Args:
        debug: Lower the logger and handler level to DEBUG

    Returns:
        Configured logger instance for the application
    """
    global _logger

    level = logging.DEBUG if debug else logging.INFO

    if _logger is not None:
        if debug:
            _logger.setLevel(level)
            for handler in _logger.handlers:
                handler.setLevel(level)
        return _logger

    logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")
    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Clear any existing handlers to avoid duplication
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)

    # Prevent propagation to root logger to avoid duplicate output
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Return the configured application logger, configuring it on first use."""
    if _logger is None:
        return setup_logging()
    return _logger


def log_summary(message: str) -> None:
    """Log a message at SUMMARY level."""
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Reset the global logger state. Mainly for testing purposes."""
    global _logger
    _logger = None
