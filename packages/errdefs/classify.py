"""Membership tests for canonical error kinds.

Each ``is_*`` function answers whether any node of an error tree, at any
depth, belongs to one kind: by matching the kind's canonical value or by
carrying the kind's marker method. Unlike ``resolve``, a different kind found
first never stops the search.
"""

from __future__ import annotations

import asyncio
import concurrent.futures

from . import markers
from .chain import is_, walk
from .kinds import (
    CANCELED,
    DEADLINE_EXCEEDED,
    ERR_ABORTED,
    ERR_ALREADY_EXISTS,
    ERR_CONFLICT,
    ERR_DATA_LOSS,
    ERR_FAILED_PRECONDITION,
    ERR_INTERNAL,
    ERR_INVALID_ARGUMENT,
    ERR_NOT_FOUND,
    ERR_NOT_IMPLEMENTED,
    ERR_NOT_MODIFIED,
    ERR_OUT_OF_RANGE,
    ERR_PERMISSION_DENIED,
    ERR_RESOURCE_EXHAUSTED,
    ERR_UNAUTHENTICATED,
    ERR_UNAVAILABLE,
    ERR_UNKNOWN,
)

# Cancellation and timeout primitives from outside the taxonomy.
CANCELLATION_TYPES: tuple[type[BaseException], ...] = (
    asyncio.CancelledError,
    concurrent.futures.CancelledError,
)
TIMEOUT_TYPES: tuple[type[BaseException], ...] = (TimeoutError,)


def _has_instance(err: BaseException | None, cls: type | tuple[type, ...]) -> bool:
    """Return whether any node is an instance of ``cls`` or carries its marker."""
    return any(isinstance(node, cls) for node in walk(err))


def is_canceled(err: BaseException | None) -> bool:
    """Return True if the error is due to cancellation."""
    return (
        is_(err, CANCELED)
        or _has_instance(err, markers.Cancelled)
        or _has_instance(err, CANCELLATION_TYPES)
    )


def is_unknown(err: BaseException | None) -> bool:
    """Return True for an unknown error, unhandled condition or unexpected response."""
    return is_(err, ERR_UNKNOWN) or _has_instance(err, markers.Unknown)


def is_invalid_argument(err: BaseException | None) -> bool:
    """Return True if the error is due to an invalid argument."""
    return is_(err, ERR_INVALID_ARGUMENT) or _has_instance(err, markers.InvalidParameter)


def is_deadline_exceeded(err: BaseException | None) -> bool:
    """Return True if the error is due to an exceeded deadline or a timeout."""
    return (
        is_(err, DEADLINE_EXCEEDED)
        or _has_instance(err, markers.DeadlineExceeded)
        or _has_instance(err, TIMEOUT_TYPES)
    )


def is_not_found(err: BaseException | None) -> bool:
    """Return True if the error is due to a missing object."""
    return is_(err, ERR_NOT_FOUND) or _has_instance(err, markers.NotFound)


def is_already_exists(err: BaseException | None) -> bool:
    """Return True if the error is due to an already existing object."""
    return is_(err, ERR_ALREADY_EXISTS)


def is_permission_denied(err: BaseException | None) -> bool:
    """Return True if the error is due to permission denied or a forbidden response."""
    return is_(err, ERR_PERMISSION_DENIED) or _has_instance(err, markers.Forbidden)


def is_resource_exhausted(err: BaseException | None) -> bool:
    """Return True if the error is due to a lack of resources or too many attempts."""
    return is_(err, ERR_RESOURCE_EXHAUSTED)


def is_failed_precondition(err: BaseException | None) -> bool:
    """Return True if an operation lacked a required condition."""
    return is_(err, ERR_FAILED_PRECONDITION)


def is_conflict(err: BaseException | None) -> bool:
    """Return True if an operation could not proceed due to a conflict."""
    return is_(err, ERR_CONFLICT) or _has_instance(err, markers.Conflict)


def is_not_modified(err: BaseException | None) -> bool:
    """Return True if an object was not modified from a previous state."""
    return is_(err, ERR_NOT_MODIFIED) or _has_instance(err, markers.NotModified)


def is_aborted(err: BaseException | None) -> bool:
    """Return True if an operation was aborted."""
    return is_(err, ERR_ABORTED)


def is_out_of_range(err: BaseException | None) -> bool:
    """Return True if data was outside of the expected range."""
    return is_(err, ERR_OUT_OF_RANGE)


def is_not_implemented(err: BaseException | None) -> bool:
    """Return True if the error is due to a missing implementation."""
    return is_(err, ERR_NOT_IMPLEMENTED) or _has_instance(err, markers.Unimplemented)


def is_internal(err: BaseException | None) -> bool:
    """Return True for an internal or system error."""
    return is_(err, ERR_INTERNAL) or _has_instance(err, markers.System)


def is_unavailable(err: BaseException | None) -> bool:
    """Return True if a resource is unavailable."""
    return is_(err, ERR_UNAVAILABLE) or _has_instance(err, markers.Unavailable)


def is_data_loss(err: BaseException | None) -> bool:
    """Return True if data was lost or corrupted."""
    return is_(err, ERR_DATA_LOSS) or _has_instance(err, markers.DataLoss)


def is_unauthorized(err: BaseException | None) -> bool:
    """Return True if the caller was unauthenticated or unauthorized."""
    return is_(err, ERR_UNAUTHENTICATED) or _has_instance(err, markers.Unauthorized)


is_unauthenticated = is_unauthorized
