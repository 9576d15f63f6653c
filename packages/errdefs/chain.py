"""Traversal over trees of wrapped and joined exceptions.

An exception exposes at most one of three shapes:

- a single cause, through an ``unwrap()`` method or ``__cause__``;
- an ordered list of causes, through an ``unwrap_all()`` method or
  ``BaseExceptionGroup.exceptions``;
- neither, making it a leaf.

Explicit methods win over the built-in attributes. Implicit chaining
(``__context__``) is never followed.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TypeVar

_TException = TypeVar("_TException", bound=BaseException)


@dataclass(frozen=True, slots=True)
class Leaf:
    """Node without further causes."""


@dataclass(frozen=True, slots=True)
class Single:
    """Node wrapping exactly one cause."""

    cause: BaseException


@dataclass(frozen=True, slots=True)
class Multi:
    """Node joining an ordered list of causes."""

    causes: tuple[BaseException, ...]


Node = Leaf | Single | Multi

LEAF = Leaf()


def unwrap(err: BaseException) -> Node:
    """Classify one exception as a leaf, single-wrap or join node."""
    single = getattr(err, "unwrap", None)
    if callable(single):
        cause = single()
        return LEAF if cause is None else Single(cause)

    multi = getattr(err, "unwrap_all", None)
    if callable(multi):
        return Multi(tuple(cause for cause in multi() if cause is not None))

    if isinstance(err, BaseExceptionGroup):
        return Multi(tuple(err.exceptions))

    if err.__cause__ is not None:
        return Single(err.__cause__)
    return LEAF


def walk(err: BaseException | None) -> Iterator[BaseException]:
    """Yield every node depth-first, single causes and join members in order."""
    if err is None:
        return
    pending: list[BaseException] = [err]
    while pending:
        node = pending.pop()
        yield node
        shape = unwrap(node)
        if isinstance(shape, Single):
            pending.append(shape.cause)
        elif isinstance(shape, Multi):
            pending.extend(reversed(shape.causes))


def is_(err: BaseException | None, target: BaseException) -> bool:
    """Return whether any node in the tree matches ``target``.

    A node matches when it is ``target``, compares equal to it, or reports a
    match through its own ``matches(target)`` method.
    """
    for node in walk(err):
        if node is target or _equals(node, target):
            return True
        matches = getattr(node, "matches", None)
        if callable(matches) and matches(target):
            return True
    return False


def as_(err: BaseException | None, cls: type[_TException]) -> _TException | None:
    """Return the first node that is an instance of ``cls``."""
    for node in walk(err):
        if isinstance(node, cls):
            return node
    return None


def _equals(node: BaseException, target: BaseException) -> bool:
    """Compare two exceptions without letting a broken ``__eq__`` escape."""
    try:
        return bool(node == target)
    except Exception:
        return False
