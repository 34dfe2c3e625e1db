"""Logging setup for btrpc.

Records from the ``btrpc`` logger go to a Rich console handler on stderr and,
when configured, to a rotating log file in plain text or one JSON object per
line. Each record is stamped with the correlation id of the command that
produced it.
"""

from __future__ import annotations

import json
import logging
import logging.config
import uuid
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:  # pragma: no cover
    from btrpc.models import ObservabilityConfig

_correlation: ContextVar[str] = ContextVar("btrpc_correlation_id", default="-")

# Attributes every LogRecord has; anything else was passed through ``extra``.
_BUILTIN_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "correlation_id"}

PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"


class CorrelationFilter(logging.Filter):
    """Stamp records with the current correlation id."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = _correlation.get()
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record, ``extra`` fields included."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", _correlation.get()),
        }
        entry.update((key, value) for key, value in vars(record).items() if key not in _BUILTIN_ATTRS)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(config: ObservabilityConfig, console: Console | None = None) -> None:
    """Configure the ``btrpc`` logger from *config*.

    Args:
        config: Level, optional log file and record format
        console: Console for the Rich handler (defaults to stderr)

    """
    level = config.log_level.value
    handlers: dict[str, dict[str, Any]] = {
        "console": {
            "()": RichHandler,
            "level": level,
            "filters": ["correlation"],
            "console": console or Console(stderr=True),
            "show_path": False,
            "rich_tracebacks": True,
            "markup": False,
        },
    }
    if config.log_file:
        Path(config.log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "json" if config.structured_logging else "plain",
            "filters": ["correlation"],
            "filename": config.log_file,
            "maxBytes": 5 * 1024 * 1024,
            "backupCount": 3,
            "encoding": "utf-8",
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"correlation": {"()": CorrelationFilter}},
            "formatters": {
                "json": {"()": JsonFormatter},
                "plain": {"format": PLAIN_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
            },
            "handlers": handlers,
            "loggers": {
                "btrpc": {"level": level, "handlers": list(handlers), "propagate": False},
            },
        }
    )

    if config.log_correlation_id:
        new_correlation_id()


def new_correlation_id(value: str | None = None) -> str:
    """Start a new correlation scope; a random id is used when *value* is None."""
    value = value or uuid.uuid4().hex[:12]
    _correlation.set(value)
    return value


def current_correlation_id() -> str:
    """Correlation id stamped on records logged now."""
    return _correlation.get()
