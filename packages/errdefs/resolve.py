"""Reduction of an error tree to one canonical kind."""

from __future__ import annotations

from . import markers
from .chain import Multi, Single, unwrap
from .classify import CANCELLATION_TYPES, TIMEOUT_TYPES
from .kinds import (
    CANCELED,
    DEADLINE_EXCEEDED,
    ERR_CONFLICT,
    ERR_DATA_LOSS,
    ERR_INTERNAL,
    ERR_INVALID_ARGUMENT,
    ERR_NOT_FOUND,
    ERR_NOT_IMPLEMENTED,
    ERR_NOT_MODIFIED,
    ERR_PERMISSION_DENIED,
    ERR_UNAUTHENTICATED,
    ERR_UNAVAILABLE,
    ERR_UNKNOWN,
    ErrdefsError,
)

# Already exists, resource exhausted, failed precondition, aborted and out of
# range have no marker and resolve only from their own classes.
_MARKED: tuple[tuple[type, BaseException], ...] = (
    (markers.Unknown, ERR_UNKNOWN),
    (markers.InvalidParameter, ERR_INVALID_ARGUMENT),
    (markers.NotFound, ERR_NOT_FOUND),
    (markers.Forbidden, ERR_PERMISSION_DENIED),
    (markers.Conflict, ERR_CONFLICT),
    (markers.NotModified, ERR_NOT_MODIFIED),
    (markers.Unimplemented, ERR_NOT_IMPLEMENTED),
    (markers.System, ERR_INTERNAL),
    (markers.Unavailable, ERR_UNAVAILABLE),
    (markers.DataLoss, ERR_DATA_LOSS),
    (markers.Unauthorized, ERR_UNAUTHENTICATED),
    (markers.DeadlineExceeded, DEADLINE_EXCEEDED),
    (markers.Cancelled, CANCELED),
)


def resolve(err: BaseException | None) -> BaseException | None:
    """Return the canonical value for the first classified error in the tree.

    The search is depth first. A single cause is followed before any joined
    causes, and joined causes are searched left to right, so the outermost
    wrapping context wins and callers control priority by join order.
    ``None`` resolves to ``None``; a tree without any match resolves to
    ``ERR_UNKNOWN``.

    The result is one of the ``ERR_*`` values, ``CANCELED`` or
    ``DEADLINE_EXCEEDED``.
    """
    if err is None:
        return None
    found = _first(err)
    return ERR_UNKNOWN if found is None else found


def _first(err: BaseException) -> BaseException | None:
    """Search one branch; ``None`` when nothing in it is classified."""
    while True:
        matched = _classify(err)
        if matched is not None:
            return matched

        shape = unwrap(err)
        if isinstance(shape, Single):
            err = shape.cause
            continue
        if isinstance(shape, Multi):
            for cause in shape.causes:
                found = _first(cause)
                if found is not None:
                    return found
        return None


def _classify(node: BaseException) -> BaseException | None:
    """Return the canonical value for one node without descending."""
    if node is CANCELED or node is DEADLINE_EXCEEDED:
        return node
    if isinstance(node, ErrdefsError):
        return node.kind.error
    if isinstance(node, markers.Decoded):
        # Kinds without markers are only visible on the parent itself.
        parent = _classify(node.decoded_parent())
        if parent is not None:
            return parent
    for marker, value in _MARKED:
        if isinstance(node, marker):
            return value
    if isinstance(node, CANCELLATION_TYPES):
        return CANCELED
    if isinstance(node, TIMEOUT_TYPES):
        return DEADLINE_EXCEEDED
    return None


def kind_label(err: BaseException | None) -> str:
    """Return a stable snake_case label for the resolved kind of ``err``.

    Used for structured log fields and response bodies; ``None`` yields an
    empty string.
    """
    resolved = resolve(err)
    if resolved is None:
        return ""
    if resolved is CANCELED:
        return "canceled"
    if resolved is DEADLINE_EXCEEDED:
        return "deadline_exceeded"
    if isinstance(resolved, ErrdefsError):
        return resolved.kind.name.lower()
    return ERR_UNKNOWN.kind.name.lower()
