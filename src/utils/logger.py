"""Logging setup for the recipe finder.

Every module logs through the module-level `logger`; get_logger(name) builds others.
Environment:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
- LOG_TYPE: text or json (default: text)

Service calls attach retrieval context with `extra={...}`. Both formats render the
fields listed in CONTEXT_FIELDS and ignore any other extras.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any


CONTEXT_FIELDS = ("operation", "recipe_id", "candidate_count", "result_count")


def context_of(record: logging.LogRecord) -> dict[str, Any]:
    """Context fields present on record, in CONTEXT_FIELDS order."""
    return {name: getattr(record, name) for name in CONTEXT_FIELDS if hasattr(record, name)}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **context_of(record),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


class RichTextFormatter(logging.Formatter):
    """Colored single-line output for terminals.

    Context fields are appended as key=value pairs, tracebacks follow uncolored.
    """

    RESET = "\033[0m"

    # level -> (ANSI color, icon)
    STYLES = {
        "DEBUG": ("\033[36m", "🔍"),
        "INFO": ("\033[32m", "ℹ️"),
        "WARNING": ("\033[33m", "⚠️"),
        "ERROR": ("\033[31m", "❌"),
        "CRITICAL": ("\033[35m", "🛑"),
    }

    def format(self, record: logging.LogRecord) -> str:
        color, icon = self.STYLES.get(record.levelname, ("", "•"))
        line = (
            f"{self.formatTime(record, '%Y-%m-%d %H:%M:%S')} {icon} "
            f"{record.levelname:<8} [{record.name}] {record.getMessage()}"
        )

        context = context_of(record)
        if context:
            line += " | " + " ".join(f"{key}={value}" for key, value in context.items())

        text = f"{color}{line}{self.RESET}"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


FORMATTERS: dict[str, type[logging.Formatter]] = {
    "json": JSONFormatter,
    "text": RichTextFormatter,
}


def resolve_level(name: str) -> int:
    """Numeric level for a LOG_LEVEL value; unknown names mean INFO."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """Return the named logger, attaching one stderr handler the first time.

    Stdout is left to the CLI's own output (tables and JSON).
    """
    instance = logging.getLogger(name)
    if instance.handlers:
        return instance

    formatter_class = FORMATTERS.get(os.getenv("LOG_TYPE", "text").lower(), RichTextFormatter)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter_class())

    instance.addHandler(handler)
    instance.setLevel(resolve_level(os.getenv("LOG_LEVEL", "INFO")))
    return instance


logger = get_logger("recipe_finder")

# SQL echo is opt-in through DB_ECHO
for noisy in ("sqlalchemy.engine", "aiohttp"):
    logging.getLogger(noisy).setLevel(logging.WARNING)
