"""Mapping between canonical error kinds and gRPC status codes."""

from __future__ import annotations

from collections.abc import Callable

import grpc

from .. import classify
from ..kinds import (
    ERR_CONFLICT,
    ERR_NOT_MODIFIED,
    UNEXPECTED_STATUS_PREFIX,
    AbortedError,
    AlreadyExistsError,
    ConflictError,
    ContextCanceledError,
    ContextDeadlineExceededError,
    DataLossError,
    FailedPreconditionError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    NotModifiedError,
    OutOfRangeError,
    PermissionDeniedError,
    ResourceExhaustedError,
    UnauthenticatedError,
    UnavailableError,
    UnexpectedStatusError,
    UnimplementedError,
    UnknownError,
)
from ..resolve import resolve
from .status import code_from_value, status_of

# Checked against the resolved value; failed precondition, conflict and not
# modified share one code.
_CODES: tuple[tuple[Callable[[BaseException | None], bool], grpc.StatusCode], ...] = (
    (classify.is_invalid_argument, grpc.StatusCode.INVALID_ARGUMENT),
    (classify.is_not_found, grpc.StatusCode.NOT_FOUND),
    (classify.is_already_exists, grpc.StatusCode.ALREADY_EXISTS),
    (classify.is_failed_precondition, grpc.StatusCode.FAILED_PRECONDITION),
    (classify.is_conflict, grpc.StatusCode.FAILED_PRECONDITION),
    (classify.is_not_modified, grpc.StatusCode.FAILED_PRECONDITION),
    (classify.is_unavailable, grpc.StatusCode.UNAVAILABLE),
    (classify.is_not_implemented, grpc.StatusCode.UNIMPLEMENTED),
    (classify.is_canceled, grpc.StatusCode.CANCELLED),
    (classify.is_deadline_exceeded, grpc.StatusCode.DEADLINE_EXCEEDED),
    (classify.is_unauthorized, grpc.StatusCode.UNAUTHENTICATED),
    (classify.is_permission_denied, grpc.StatusCode.PERMISSION_DENIED),
    (classify.is_internal, grpc.StatusCode.INTERNAL),
    (classify.is_data_loss, grpc.StatusCode.DATA_LOSS),
    (classify.is_aborted, grpc.StatusCode.ABORTED),
    (classify.is_out_of_range, grpc.StatusCode.OUT_OF_RANGE),
    (classify.is_resource_exhausted, grpc.StatusCode.RESOURCE_EXHAUSTED),
)

_NATIVE: dict[grpc.StatusCode, Callable[[], BaseException]] = {
    grpc.StatusCode.INVALID_ARGUMENT: InvalidArgumentError,
    grpc.StatusCode.ALREADY_EXISTS: AlreadyExistsError,
    grpc.StatusCode.NOT_FOUND: NotFoundError,
    grpc.StatusCode.UNAVAILABLE: UnavailableError,
    grpc.StatusCode.UNIMPLEMENTED: UnimplementedError,
    grpc.StatusCode.CANCELLED: ContextCanceledError,
    grpc.StatusCode.DEADLINE_EXCEEDED: ContextDeadlineExceededError,
    grpc.StatusCode.ABORTED: AbortedError,
    grpc.StatusCode.UNAUTHENTICATED: UnauthenticatedError,
    grpc.StatusCode.PERMISSION_DENIED: PermissionDeniedError,
    grpc.StatusCode.INTERNAL: InternalError,
    grpc.StatusCode.DATA_LOSS: DataLossError,
    grpc.StatusCode.OUT_OF_RANGE: OutOfRangeError,
    grpc.StatusCode.RESOURCE_EXHAUSTED: ResourceExhaustedError,
}


def code_for(err: BaseException | None) -> grpc.StatusCode:
    """Return the gRPC status code for an error tree.

    Status-shaped errors keep their own code. Anything else is resolved to
    one canonical kind first; unmatched trees get ``UNKNOWN``.
    """
    status = status_of(err)
    if status is not None:
        return code_from_value(status.code)

    resolved = resolve(err)
    for matches, code in _CODES:
        if matches(resolved):
            return code
    return grpc.StatusCode.UNKNOWN


def native_for(code: grpc.StatusCode, message: str) -> BaseException:
    """Return a fresh error of the kind a status code decodes to.

    FAILED_PRECONDITION is shared with conflict and not modified; a message
    equal to, or ending in ``": conflict"`` / ``": not modified"`` selects
    those kinds. A user message that happens to read that way misclassifies.
    Otherwise unmapped codes look for ``unexpected status <n>`` in the
    message before falling back to unknown. The phrase is also accepted at
    the very start of the message, which some peers reject; a bare
    ``unexpected status 418`` therefore decodes to status 418 here.
    """
    if code is grpc.StatusCode.FAILED_PRECONDITION:
        if _names_kind(message, str(ERR_CONFLICT)):
            return ConflictError()
        if _names_kind(message, str(ERR_NOT_MODIFIED)):
            return NotModifiedError()
        return FailedPreconditionError()

    factory = _NATIVE.get(code)
    if factory is not None:
        return factory()

    status = _unexpected_status(message)
    if status is not None:
        return UnexpectedStatusError(status)
    return UnknownError()


def rebase_message(native: BaseException, message: str) -> str:
    """Strip a trailing ``": <kind text>"`` that re-wrapping would repeat."""
    text = str(native)
    if message == text:
        return ""
    return message.removesuffix(f": {text}")


def _names_kind(message: str, text: str) -> bool:
    """Return whether ``message`` is, or ends with, one kind's text."""
    return message == text or message.endswith(f": {text}")


def _unexpected_status(message: str) -> int | None:
    """Return an HTTP status recorded with ``unexpected status <n>``."""
    index = message.rfind(UNEXPECTED_STATUS_PREFIX)
    if index == -1:
        return None
    tail = message[index + len(UNEXPECTED_STATUS_PREFIX) :]
    if not (tail.isascii() and tail.isdigit()):
        return None
    status = int(tail)
    return status if 200 <= status < 600 else None
