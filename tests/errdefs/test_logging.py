"""Tests for structured logging setup and error log fields."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest

from packages.errdefs import ERR_CONFLICT, ERR_NOT_FOUND, join, wrap
from packages.errdefs.config import LoggingSettings
from packages.errdefs.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_context,
    get_logger,
    log_context,
)
from packages.errdefs.logging.errors import error_log_fields


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Restore root handlers and bound context after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    clear_context()
    yield
    clear_context()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_log_context_binds_fields_for_the_block() -> None:
    """Fields bound by log_context should be removed when the block exits."""
    bind_context(service="widgets", skipped=None)

    with log_context({"event": "lookup"}, widget_id=7):
        assert get_context() == {
            "service": "widgets",
            "event": "lookup",
            "widget_id": "7",
        }

    assert get_context() == {"service": "widgets"}


def test_clear_context_drops_selected_keys() -> None:
    """clear_context should remove named keys or everything."""
    bind_context(service="widgets", environment="test", event="x")

    clear_context("event")
    assert get_context() == {"service": "widgets", "environment": "test"}

    clear_context()
    assert get_context() == {}


def test_configure_logging_emits_json_with_context(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """JSON output should carry core fields, bound context and service identity."""
    configure_logging(LoggingSettings(level="INFO", service="widgets", environment="test"))
    logger = get_logger("tests.errdefs")

    with log_context({"event": "lookup"}):
        logger.info("widget %s loaded", 7)

    payload = json.loads(capsys.readouterr().out.strip())
    assert payload["level"] == "INFO"
    assert payload["logger"] == "tests.errdefs"
    assert payload["message"] == "widget 7 loaded"
    assert payload["event"] == "lookup"
    assert payload["service"] == "widgets"
    assert payload["environment"] == "test"
    assert "timestamp" in payload


def test_configure_logging_replaces_existing_handlers(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Repeated configuration should not duplicate output lines."""
    settings = LoggingSettings(level="INFO", json_output=False)
    configure_logging(settings)
    configure_logging(settings)

    get_logger("tests.errdefs").warning("once")

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 1
    assert "WARNING tests.errdefs once" in lines[0]
    assert lines[0].endswith("environment=dev service=errdefs")


def test_configure_logging_respects_level(capsys: pytest.CaptureFixture[str]) -> None:
    """Records below the configured level should be dropped."""
    configure_logging(LoggingSettings(level="WARNING"))

    get_logger("tests.errdefs").info("hidden")

    assert capsys.readouterr().out == ""


def test_json_output_includes_exception_text(capsys: pytest.CaptureFixture[str]) -> None:
    """Logged exceptions should be rendered into the payload."""
    configure_logging(LoggingSettings(level="INFO"))

    try:
        raise wrap(ERR_NOT_FOUND, "widget 7")
    except Exception:
        get_logger("tests.errdefs").exception("lookup failed")

    payload = json.loads(capsys.readouterr().out.strip())
    assert "widget 7: not found" in payload["exception"]
    assert payload["error_kind"] == "not_found"


def test_bound_error_kind_wins_over_logged_exception(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """A kind bound by the caller should not be replaced by the exception's."""
    configure_logging(LoggingSettings(level="INFO", json_output=False))

    try:
        raise wrap(ERR_NOT_FOUND, "widget 7")
    except Exception:
        with log_context({"error_kind": "conflict"}):
            get_logger("tests.errdefs").exception("lookup failed")

    first_line = capsys.readouterr().out.splitlines()[0]
    assert "error_kind=conflict" in first_line
    assert "not_found" not in first_line


def test_context_keys_do_not_clobber_record_attributes(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Context keys named like record attributes stay out of the record."""
    configure_logging(LoggingSettings(level="INFO"))

    with log_context(name="widget", event="lookup"):
        get_logger("tests.errdefs").info("loaded")

    payload = json.loads(capsys.readouterr().out.strip())
    assert payload["logger"] == "tests.errdefs"
    assert payload["name"] == "widget"
    assert payload["event"] == "lookup"

def test_error_log_fields_describe_the_resolved_kind() -> None:
    """Error fields should name the kind and both status codes."""
    assert error_log_fields(None) == {}
    assert error_log_fields(wrap(ERR_NOT_FOUND, "widget 7")) == {
        "error_kind": "not_found",
        "http_status": 404,
        "grpc_code": "NOT_FOUND",
    }
    assert error_log_fields(join(ERR_CONFLICT, ERR_NOT_FOUND)) == {
        "error_kind": "conflict",
        "http_status": 404,
        "grpc_code": "FAILED_PRECONDITION",
    }
    assert error_log_fields(ValueError("boom")) == {
        "error_kind": "unknown",
        "http_status": 500,
        "grpc_code": "UNKNOWN",
    }
