"""Logging setup for the ``promisestream`` logger hierarchy.

Modules log through ``logging.getLogger("promisestream.<module>")`` and stay
silent until configure_logging() attaches a handler.

Quick Start:
    >>> from promisestream import configure_logging
    >>> configure_logging(level="DEBUG")             # text lines on stderr
    >>> configure_logging(format="json")             # JSON Lines for aggregation
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TextIO

import orjson

from .settings import get_settings

ROOT_LOGGER = "promisestream"

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RESERVED = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}


class TextFormatter(logging.Formatter):
    """Format: timestamp [level] logger: message key=value ..."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=UTC).strftime("%H:%M:%S.%f")[:-3]
        extras = " ".join(f"{k}={v!r}" for k, v in sorted(_extras(record).items()))
        line = f"{ts} [{record.levelname.lower()}] {record.name}: {record.getMessage()}"
        if extras:
            line = f"{line} {extras}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class JsonFormatter(logging.Formatter):
    """JSON Lines output for log aggregation (Loki, Elasticsearch, Datadog, etc.)."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, option=orjson.OPT_NON_STR_KEYS, default=repr).decode()


def configure_logging(
    level: str | None = None,
    format: str | None = None,  # noqa: A002 - shadows builtin but matches stdlib
    *,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Attach a single handler to the ``promisestream`` logger.

    Unset arguments fall back to settings. Calling again replaces the handler
    installed by the previous call.
    """
    settings = get_settings()
    level = (level or settings.log_level).upper()
    format = format or settings.logging.format
    match format:
        case "text": formatter: logging.Formatter = TextFormatter()
        case "json": formatter = JsonFormatter()
        case _: raise ValueError(f"Unknown format: {format}. Use 'text' or 'json'")

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in [h for h in logger.handlers if getattr(h, "_promisestream", False)]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    handler._promisestream = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level, logging.WARNING))
    return handler


def _extras(record: logging.LogRecord) -> dict[str, object]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED and not k.startswith("_")}
