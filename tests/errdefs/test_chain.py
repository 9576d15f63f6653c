"""Unit tests for error tree traversal, wrapping and joining."""

from __future__ import annotations

from packages.errdefs import (
    ERR_NOT_FOUND,
    LEAF,
    JoinError,
    Multi,
    NotFoundError,
    Single,
    as_,
    format_error,
    is_,
    join,
    unwrap,
    walk,
    wrap,
)


class _Collapsed(Exception):
    """Collapsible test member with a visible verbose rendering."""

    def __str__(self) -> str:
        return "hidden detail"

    def collapse_error(self) -> None:
        """Mark the error as collapsible."""


class _BrokenEquality(Exception):
    """Exception whose equality check raises."""

    def __eq__(self, other: object) -> bool:
        raise RuntimeError("no comparisons")

    __hash__ = Exception.__hash__


class _ExplicitUnwrap(Exception):
    """Exception exposing its cause only through ``unwrap``."""

    def __init__(self, cause: BaseException | None) -> None:
        super().__init__("explicit")
        self._cause = cause

    def unwrap(self) -> BaseException | None:
        return self._cause


def test_unwrap_classifies_leaf_single_and_join_nodes() -> None:
    """unwrap should expose each node as one tagged shape."""
    leaf = ValueError("leaf")
    wrapped = wrap(leaf, "context")
    joined = join(leaf, KeyError("other"))

    assert unwrap(leaf) == LEAF
    assert unwrap(wrapped) == Single(leaf)
    assert isinstance(unwrap(joined), Multi)
    assert unwrap(joined).causes[0] is leaf


def test_unwrap_follows_explicit_cause_but_not_implicit_context() -> None:
    """``raise ... from`` is followed; implicit exception context is not."""
    cause = ValueError("root")
    try:
        try:
            raise cause
        except ValueError as exc:
            raise RuntimeError("explicit") from exc
    except RuntimeError as explicit:
        assert unwrap(explicit) == Single(cause)

    try:
        try:
            raise cause
        except ValueError:
            raise RuntimeError("implicit")
    except RuntimeError as implicit:
        assert unwrap(implicit) == LEAF


def test_unwrap_method_wins_over_dunder_cause() -> None:
    """An explicit unwrap method should take precedence over __cause__."""
    err = _ExplicitUnwrap(None)
    err.__cause__ = ValueError("ignored")

    assert unwrap(err) == LEAF
    assert unwrap(_ExplicitUnwrap(KeyError("k"))).cause.args == ("k",)


def test_exception_groups_are_join_nodes() -> None:
    """Built-in exception groups should be traversed like joins."""
    group = ExceptionGroup("batch", [ValueError("a"), wrap(ERR_NOT_FOUND, "b")])

    assert isinstance(unwrap(group), Multi)
    assert is_(group, ERR_NOT_FOUND)


def test_walk_is_preorder_and_left_to_right() -> None:
    """walk should yield parents before children and joins in order."""
    a, b, c = ValueError("a"), ValueError("b"), ValueError("c")
    inner = wrap(b, "inner")
    tree = wrap(join(a, inner, c), "outer")

    order = [str(node) for node in walk(tree)]

    assert order == [str(tree), "a\ninner: b\nc", "a", "inner: b", "b", "c"]
    assert list(walk(None)) == []


def test_walk_handles_deep_single_chains() -> None:
    """Long single-cause chains should not exhaust the interpreter stack."""
    err: BaseException = ERR_NOT_FOUND
    for index in range(5000):
        err = wrap(err, f"layer {index}")

    assert is_(err, ERR_NOT_FOUND)
    assert sum(1 for _ in walk(err)) == 5001


def test_is_survives_broken_equality() -> None:
    """A node whose __eq__ raises should simply not match."""
    err = join(_BrokenEquality("odd"), ERR_NOT_FOUND)

    assert is_(err, ERR_NOT_FOUND)
    assert not is_(_BrokenEquality("odd"), ValueError("x"))


def test_as_returns_first_instance() -> None:
    """as_ should find the first node of the requested class."""
    first = NotFoundError("first")
    tree = join(ValueError("x"), wrap(first, "ctx"), NotFoundError("second"))

    assert as_(tree, NotFoundError) is first
    assert as_(tree, KeyError) is None
    assert as_(None, ValueError) is None


def test_wrap_renders_message_then_cause() -> None:
    """wrap should render ``<message>: <cause>``."""
    err = wrap(ERR_NOT_FOUND, "widget 7")

    assert str(err) == "widget 7: not found"
    assert err.__cause__ is ERR_NOT_FOUND


def test_join_drops_none_and_unwraps_single_error() -> None:
    """join should skip None, return a lone error and None for nothing."""
    err = ValueError("only")

    assert join() is None
    assert join(None, None) is None
    assert join(None, err) is err


def test_join_renders_members_on_separate_lines() -> None:
    """A join's text is its members' text joined by newlines."""
    err = join(ValueError("first"), ValueError("second"))

    assert isinstance(err, JoinError)
    assert str(err) == "first\nsecond"
    assert err.unwrap_all() == err.errors


def test_collapsible_members_render_only_when_verbose() -> None:
    """Collapsible members should be hidden from the default text."""
    err = join(ValueError("visible"), _Collapsed())

    assert str(err) == "visible"
    assert format_error(err) == "visible"
    assert format_error(err, verbose=True) == "visible\nhidden detail"
    assert format_error(_Collapsed()) == ""
    assert format_error(None) == ""
