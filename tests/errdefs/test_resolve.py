"""Unit tests for reducing error trees to one canonical kind."""

from __future__ import annotations

import asyncio

import pytest

from packages.errdefs import (
    CANCELED,
    DEADLINE_EXCEEDED,
    ERR_CONFLICT,
    ERR_INTERNAL,
    ERR_NOT_FOUND,
    ERR_UNKNOWN,
    Kind,
    NotFoundError,
    UnexpectedStatusError,
    join,
    kind_label,
    resolve,
    wrap,
)


class _Unreachable(Exception):
    """Error carrying both the unavailable and system markers."""

    def system(self) -> None:
        """Mark the error as a system error."""

    def unavailable(self) -> None:
        """Mark the error as unavailable."""


class _Timeout(Exception):
    """Foreign error carrying the deadline marker."""

    def deadline_exceeded(self) -> None:
        """Mark the error as past its deadline."""


_CANONICAL = [kind.error for kind in Kind] + [CANCELED, DEADLINE_EXCEEDED]


@pytest.mark.parametrize("canonical", _CANONICAL, ids=str)
def test_resolve_ignores_unrelated_context(canonical: BaseException) -> None:
    """Wrapping or joining with untyped errors never changes the kind."""
    assert resolve(canonical) is canonical
    assert resolve(wrap(canonical, "while saving")) is canonical
    assert resolve(join(ValueError("untyped"), canonical)) is canonical


def test_resolve_none_and_unmatched_trees() -> None:
    """None resolves to None; unmatched trees escalate to unknown."""
    assert resolve(None) is None
    assert resolve(ValueError("plain")) is ERR_UNKNOWN
    assert resolve(join(ValueError("untyped 1"), ValueError("untyped 2"))) is ERR_UNKNOWN


def test_first_joined_kind_wins() -> None:
    """Join order decides priority when several kinds are present."""
    assert resolve(join(ERR_CONFLICT, ERR_NOT_FOUND)) is ERR_CONFLICT
    assert resolve(join(ERR_NOT_FOUND, ERR_CONFLICT)) is ERR_NOT_FOUND


def test_outermost_classified_node_wins() -> None:
    """The first classified node on the single-cause path stops the search."""
    err = NotFoundError("widget 7")
    err.__cause__ = wrap(ERR_INTERNAL, "db")

    assert resolve(wrap(err, "outer")) is ERR_NOT_FOUND


def test_join_branch_without_match_continues_to_siblings() -> None:
    """An unmatched join branch yields nothing so later members are tried."""
    err = join(join(ValueError("a"), ValueError("b")), wrap(ERR_CONFLICT, "c"))

    assert resolve(err) is ERR_CONFLICT


def test_resolve_returns_canonical_value_for_custom_messages() -> None:
    """Kind errors with custom text resolve to their canonical value."""
    assert resolve(NotFoundError("widget 7")) is ERR_NOT_FOUND


def test_marker_order_decides_between_markers_on_one_node() -> None:
    """Within one node, markers are checked in a fixed order."""
    assert resolve(_Unreachable()) is ERR_INTERNAL


def test_foreign_cancellation_and_timeouts_resolve_to_sentinels() -> None:
    """External primitives and markers resolve to the sentinel values."""
    assert resolve(asyncio.CancelledError()) is CANCELED
    assert resolve(wrap(TimeoutError("slow"), "query")) is DEADLINE_EXCEEDED
    assert resolve(_Timeout()) is DEADLINE_EXCEEDED


def test_unexpected_status_resolves_to_unknown() -> None:
    """The unexpected-status marker is an unknown kind."""
    assert resolve(UnexpectedStatusError(418)) is ERR_UNKNOWN


def test_kind_label_names_the_resolved_kind() -> None:
    """kind_label should give stable snake_case names."""
    assert kind_label(wrap(ERR_NOT_FOUND, "x")) == "not_found"
    assert kind_label(CANCELED) == "canceled"
    assert kind_label(TimeoutError()) == "deadline_exceeded"
    assert kind_label(ValueError()) == "unknown"
    assert kind_label(None) == ""
