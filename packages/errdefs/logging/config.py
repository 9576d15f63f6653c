"""Stdout logging configuration and structured context for errdefs.

Library modules only obtain loggers; handlers are installed by the host
process through ``configure_logging``. Structured fields bound with
``log_context`` are attached to every record emitted inside the block.
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any, Iterator, Mapping

from packages.errdefs.config import LoggingSettings, get_settings
from packages.errdefs.resolve import kind_label

from . import fields

_LOG_CONTEXT: ContextVar[Mapping[str, str]] = ContextVar(
    "errdefs_log_context", default={}
)


def get_context() -> dict[str, str]:
    """Return a copy of the structured fields bound to the current context."""
    return dict(_LOG_CONTEXT.get())


def bind_context(**values: object) -> None:
    """Bind fields for the rest of the current context; ``None`` is skipped."""
    _LOG_CONTEXT.set(_merged(_LOG_CONTEXT.get(), values))


def clear_context(*keys: str) -> None:
    """Clear selected keys or the entire logging context."""
    if not keys:
        _LOG_CONTEXT.set({})
        return
    _LOG_CONTEXT.set(
        {key: value for key, value in _LOG_CONTEXT.get().items() if key not in keys}
    )


@contextmanager
def log_context(values: Mapping[str, object] | None = None, **extra: object) -> Iterator[None]:
    """Bind fields for the duration of a block."""
    merged = _merged(_LOG_CONTEXT.get(), {**dict(values or {}), **extra})
    token = _LOG_CONTEXT.set(merged)
    try:
        yield
    finally:
        _LOG_CONTEXT.reset(token)


def _merged(current: Mapping[str, str], values: Mapping[str, object]) -> dict[str, str]:
    """Return ``current`` updated with stringified non-``None`` values."""
    merged = dict(current)
    for key, value in values.items():
        if value is not None:
            merged[str(key)] = str(value)
    return merged


# Attributes LogRecord defines itself; context keys never overwrite them.
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
}


class ContextFilter(logging.Filter):
    """Copy bound error-translation fields onto each record.

    Fields are kept as a ``context`` mapping for the formatters and mirrored
    as record attributes unless they collide with a built-in attribute.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        context = get_context()
        record.context = context
        for key, value in context.items():
            if key not in _RECORD_ATTRIBUTES:
                setattr(record, key, value)
        return True


def _record_fields(record: logging.LogRecord) -> dict[str, str]:
    """Return context fields plus the kind of a logged exception.

    A kind bound explicitly by the caller wins over the one resolved here.
    """
    context = getattr(record, "context", None)
    values = dict(context) if isinstance(context, dict) else {}
    if record.exc_info and record.exc_info[1] is not None:
        values.setdefault(fields.ERROR_KIND, kind_label(record.exc_info[1]))
    return values


class JsonFormatter(logging.Formatter):
    """One JSON object per line: core fields, context fields, error kind."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            fields.TIMESTAMP: datetime.now(UTC).isoformat(),
            fields.LEVEL: record.levelname,
            fields.LOGGER: record.name,
            fields.MESSAGE: record.getMessage(),
        }
        payload.update(_record_fields(record))
        if record.exc_info:
            payload[fields.EXCEPTION] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))


class PlainFormatter(logging.Formatter):
    """Text log line followed by sorted ``key=value`` context fields."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        values = _record_fields(record)
        if not values:
            return message
        suffix = " ".join(f"{key}={value}" for key, value in sorted(values.items()))
        # Fields stay on the first line, ahead of any traceback.
        head, newline, rest = message.partition("\n")
        return f"{head} {suffix}{newline}{rest}"


def configure_logging(settings: LoggingSettings | None = None) -> None:
    """Install a single stdout root handler from logging settings.

    Without explicit settings the ``logging`` section of ``get_settings()``
    is used.

    Existing root handlers are replaced, so repeated calls do not duplicate
    output.
    """
    settings = settings or get_settings().logging
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(settings.level)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setLevel(settings.level)
    handler.addFilter(ContextFilter())
    handler.setFormatter(JsonFormatter() if settings.json_output else PlainFormatter())
    root.addHandler(handler)

    bind_context(
        **{
            fields.SERVICE: settings.service or None,
            fields.ENVIRONMENT: settings.environment or None,
        }
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger using Python's standard logging hierarchy."""
    return logging.getLogger(name)
