"""Sanitizing logger for the chat completion proxy.

Every record is redacted in the formatter, before any handler writes it, so
credentials, bearer tokens and email addresses never reach a log sink.
"""

import logging
import re
import sys
from typing import Any, List, Optional, TextIO, Union

REDACTION_RULES = [
    (
        re.compile(r"Authorization:[ \t]*(?:Bearer[ \t]+)?\S*", re.IGNORECASE),
        "Authorization: [REDACTED]",
    ),
    (re.compile(r"api[_-]?key:[ \t]*\S*", re.IGNORECASE), "api_key: [REDACTED]"),
    (re.compile(r"Bearer\s+[A-Za-z0-9_\-.~+/]+=*"), "Bearer [REDACTED]"),
    (re.compile(r'"token":\s*"[^"]*"'), '"token": "[REDACTED]"'),
    (
        re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}"),
        "[EMAIL REDACTED]",
    ),
]

LOG_FORMAT = "%(levelname)s: %(message)s"

LEVEL_ALIASES = {
    "warn": "warning",
    "http": "info",
    "verbose": "debug",
    "silly": "debug",
}

STANDARD_LEVELS = ("critical", "error", "warning", "info", "debug")


def normalize_level(level: Optional[str]) -> str:
    """Map a configured level name onto a stdlib/uvicorn level name.

    Aliases such as ``warn`` or ``verbose`` are translated; unknown names
    fall back to ``info``.
    """
    name = (level or "").strip().lower()
    name = LEVEL_ALIASES.get(name, name)
    return name if name in STANDARD_LEVELS else "info"


def sanitize_message(message: Any) -> str:
    """Stringify ``message`` and redact secrets and email addresses from it."""
    if not isinstance(message, str):
        message = str(message)
    for pattern, replacement in REDACTION_RULES:
        message = pattern.sub(replacement, message)
    return message


class SanitizingFormatter(logging.Formatter):
    """Formats records as ``level: message`` and redacts the whole line."""

    def __init__(self, fmt: str = LOG_FORMAT):
        super().__init__(fmt)

    def format(self, record: logging.LogRecord) -> str:
        # Copy so other handlers still see the upper-case level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = record.levelname.lower()
        return sanitize_message(super().format(record))


class SafeStreamHandler(logging.StreamHandler):
    """Stream handler that never lets a write failure reach the caller."""

    def handleError(self, record: logging.LogRecord) -> None:
        pass


class _BelowLevelFilter(logging.Filter):
    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


class SanitizingLogger:
    """Thin wrapper around a stdlib logger that only emits sanitized lines."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    @property
    def handlers(self) -> List[logging.Handler]:
        return self._logger.handlers

    def log(self, level: Union[int, str], message: Any) -> None:
        if isinstance(level, str):
            level = getattr(logging, normalize_level(level).upper())
        # Pre-stringify so no %-style interpolation of user content happens
        self._logger.log(level, "%s", sanitize_message(message))

    def debug(self, message: Any) -> None:
        self.log(logging.DEBUG, message)

    def info(self, message: Any) -> None:
        self.log(logging.INFO, message)

    def warning(self, message: Any) -> None:
        self.log(logging.WARNING, message)

    def error(self, message: Any) -> None:
        self.log(logging.ERROR, message)

    def close(self) -> None:
        for handler in list(self._logger.handlers):
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)


def create_sanitized_logger(
    level: str = "info",
    stream: Optional[TextIO] = None,
    name: str = "chat_proxy",
) -> SanitizingLogger:
    """Build a sanitizing logger.

    With no ``stream`` given, errors go to stderr and everything else to
    stdout. Passing a stream sends every level there, which tests use to
    capture output.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, normalize_level(level).upper()))
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    formatter = SanitizingFormatter()
    if stream is not None:
        handler = SafeStreamHandler(stream)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    else:
        stdout_handler = SafeStreamHandler(sys.stdout)
        stdout_handler.addFilter(_BelowLevelFilter(logging.ERROR))
        stdout_handler.setFormatter(formatter)

        stderr_handler = SafeStreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.ERROR)
        stderr_handler.setFormatter(formatter)

        logger.addHandler(stdout_handler)
        logger.addHandler(stderr_handler)

    return SanitizingLogger(logger)
