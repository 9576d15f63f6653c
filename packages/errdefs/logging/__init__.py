"""Structured logging helpers for errdefs adapters.

Wraps Python's ``logging`` module with stdout defaults and ``contextvars``
based field propagation. ``error_log_fields`` lives in
``packages.errdefs.logging.errors`` to keep this package free of imports from
the transport mappers.
"""

from .config import (
    ContextFilter,
    JsonFormatter,
    PlainFormatter,
    bind_context,
    clear_context,
    configure_logging,
    get_context,
    get_logger,
    log_context,
)

__all__ = [
    "ContextFilter",
    "JsonFormatter",
    "PlainFormatter",
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_context",
    "get_logger",
    "log_context",
]
