"""Canonical error kinds shared across service boundaries.

Every error returned across a service boundary should map into one of these
kinds. They map closely to gRPC status codes. Raise fresh instances
(``NotFoundError("widget 7")``) or wrap the canonical values; the module-level
``ERR_*`` values are meant for comparison and wrapping.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, TypeVar

from . import typeurl

UNEXPECTED_STATUS_PREFIX = "unexpected status "

_TError = TypeVar("_TError", bound="ErrdefsError")


class Kind(str, Enum):
    """Canonical error kinds; each value is the kind's textual description."""

    UNKNOWN = "unknown"
    INVALID_ARGUMENT = "invalid argument"
    NOT_FOUND = "not found"
    ALREADY_EXISTS = "already exists"
    PERMISSION_DENIED = "permission denied"
    RESOURCE_EXHAUSTED = "resource exhausted"
    FAILED_PRECONDITION = "failed precondition"
    CONFLICT = "conflict"
    NOT_MODIFIED = "not modified"
    ABORTED = "aborted"
    OUT_OF_RANGE = "out of range"
    NOT_IMPLEMENTED = "not implemented"
    INTERNAL = "internal"
    UNAVAILABLE = "unavailable"
    DATA_LOSS = "data loss"
    UNAUTHENTICATED = "unauthorized"

    @property
    def error(self) -> ErrdefsError:
        """Return the canonical error value for this kind."""
        return _CANONICAL[self]


class _ComparableError(Exception):
    """Exception compared by class and text rather than identity."""

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash((type(self), str(self)))


class ErrdefsError(_ComparableError):
    """Base class for errors of one canonical kind."""

    kind: ClassVar[Kind]

    def __init__(self, message: str | None = None) -> None:
        super().__init__(self.kind.value if message is None else message)

    @property
    def message(self) -> str:
        """Return the error text."""
        return str(self.args[0]) if self.args else self.kind.value

    def __str__(self) -> str:
        return self.message

    def with_message(self: _TError, message: str) -> _TError:
        """Return an error of the same kind with a custom message."""
        return type(self)(message)

    def matches(self, target: object) -> bool:
        """Match the canonical value of this error's kind or a parent kind."""
        return (
            isinstance(target, ErrdefsError)
            and isinstance(self, type(target))
            and target.message == target.kind.value
        )

    def to_json(self) -> bytes:
        """Serialize the error for status details."""
        return json.dumps({"message": self.message}).encode("utf-8")

    @classmethod
    def from_json(cls: type[_TError], data: bytes) -> _TError:
        """Rebuild an error serialized by ``to_json``."""
        payload = json.loads(data)
        return cls(str(payload["message"]))


class UnknownError(ErrdefsError):
    """Unknown error, unhandled condition or unexpected response."""

    kind = Kind.UNKNOWN

    def unknown(self) -> None:
        """Mark the error as unknown."""


class InvalidArgumentError(ErrdefsError):
    """Invalid argument supplied by the caller."""

    kind = Kind.INVALID_ARGUMENT

    def invalid_parameter(self) -> None:
        """Mark the error as an invalid parameter."""


class NotFoundError(ErrdefsError):
    """Missing object."""

    kind = Kind.NOT_FOUND

    def not_found(self) -> None:
        """Mark the error as not found."""


class AlreadyExistsError(ErrdefsError):
    """Object already exists."""

    kind = Kind.ALREADY_EXISTS


class PermissionDeniedError(ErrdefsError):
    """Permission denied."""

    kind = Kind.PERMISSION_DENIED


class ResourceExhaustedError(ErrdefsError):
    """Lack of resources or too many attempts."""

    kind = Kind.RESOURCE_EXHAUSTED


class FailedPreconditionError(ErrdefsError):
    """Operation could not proceed for lack of a required condition."""

    kind = Kind.FAILED_PRECONDITION


class ConflictError(ErrdefsError):
    """Operation conflicts with the current state."""

    kind = Kind.CONFLICT

    def conflict(self) -> None:
        """Mark the error as a conflict."""


class NotModifiedError(ErrdefsError):
    """Object not modified from a previous state."""

    kind = Kind.NOT_MODIFIED

    def not_modified(self) -> None:
        """Mark the error as not modified."""


class AbortedError(ErrdefsError):
    """Operation was aborted."""

    kind = Kind.ABORTED


class OutOfRangeError(ErrdefsError):
    """Data outside of the expected range."""

    kind = Kind.OUT_OF_RANGE


class UnimplementedError(ErrdefsError):
    """Operation not implemented."""

    kind = Kind.NOT_IMPLEMENTED

    def not_implemented(self) -> None:
        """Mark the error as not implemented."""


class InternalError(ErrdefsError):
    """Internal or system error."""

    kind = Kind.INTERNAL

    def system(self) -> None:
        """Mark the error as a system error."""


class UnavailableError(ErrdefsError):
    """Resource temporarily unavailable."""

    kind = Kind.UNAVAILABLE

    def unavailable(self) -> None:
        """Mark the error as unavailable."""


class DataLossError(ErrdefsError):
    """Data lost or corrupted during an operation."""

    kind = Kind.DATA_LOSS

    def data_loss(self) -> None:
        """Mark the error as data loss."""


class UnauthenticatedError(ErrdefsError):
    """Caller is unauthenticated or unauthorized."""

    kind = Kind.UNAUTHENTICATED

    def unauthorized(self) -> None:
        """Mark the error as unauthorized."""


class ContextCanceledError(_ComparableError):
    """Operation was canceled by its caller."""

    def __init__(self, message: str = "context canceled") -> None:
        super().__init__(message)

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "context canceled"

    def cancelled(self) -> None:
        """Mark the error as canceled."""

    def to_json(self) -> bytes:
        """Serialize the sentinel for status details."""
        return json.dumps({"message": str(self)}).encode("utf-8")

    @classmethod
    def from_json(cls, data: bytes) -> ContextCanceledError:
        """Rebuild a sentinel serialized by ``to_json``."""
        return cls(str(json.loads(data)["message"]))


class ContextDeadlineExceededError(_ComparableError, TimeoutError):
    """Operation ran past its deadline."""

    def __init__(self, message: str = "context deadline exceeded") -> None:
        super().__init__(message)

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "context deadline exceeded"

    def deadline_exceeded(self) -> None:
        """Mark the error as past its deadline."""

    def to_json(self) -> bytes:
        """Serialize the sentinel for status details."""
        return json.dumps({"message": str(self)}).encode("utf-8")

    @classmethod
    def from_json(cls, data: bytes) -> ContextDeadlineExceededError:
        """Rebuild a sentinel serialized by ``to_json``."""
        return cls(str(json.loads(data)["message"]))


@dataclass(frozen=True)
class UnexpectedStatusError(Exception):
    """Raw status code outside the taxonomy, kept for round trips."""

    status: int

    def __str__(self) -> str:
        """Return the human-readable error message."""
        return f"{UNEXPECTED_STATUS_PREFIX}{self.status}"

    def unknown(self) -> None:
        """Mark the error as unknown."""

    def to_json(self) -> bytes:
        """Serialize the raw status for status details."""
        return json.dumps({"status": self.status}).encode("utf-8")

    @classmethod
    def from_json(cls, data: bytes) -> UnexpectedStatusError:
        """Rebuild a status serialized by ``to_json``."""
        return cls(int(json.loads(data)["status"]))


ERR_UNKNOWN = UnknownError()
ERR_INVALID_ARGUMENT = InvalidArgumentError()
ERR_NOT_FOUND = NotFoundError()
ERR_ALREADY_EXISTS = AlreadyExistsError()
ERR_PERMISSION_DENIED = PermissionDeniedError()
ERR_RESOURCE_EXHAUSTED = ResourceExhaustedError()
ERR_FAILED_PRECONDITION = FailedPreconditionError()
ERR_CONFLICT = ConflictError()
ERR_NOT_MODIFIED = NotModifiedError()
ERR_ABORTED = AbortedError()
ERR_OUT_OF_RANGE = OutOfRangeError()
ERR_NOT_IMPLEMENTED = UnimplementedError()
ERR_INTERNAL = InternalError()
ERR_UNAVAILABLE = UnavailableError()
ERR_DATA_LOSS = DataLossError()
ERR_UNAUTHENTICATED = UnauthenticatedError()

CANCELED = ContextCanceledError()
DEADLINE_EXCEEDED = ContextDeadlineExceededError()

_CANONICAL: dict[Kind, ErrdefsError] = {
    error.kind: error
    for error in (
        ERR_UNKNOWN,
        ERR_INVALID_ARGUMENT,
        ERR_NOT_FOUND,
        ERR_ALREADY_EXISTS,
        ERR_PERMISSION_DENIED,
        ERR_RESOURCE_EXHAUSTED,
        ERR_FAILED_PRECONDITION,
        ERR_CONFLICT,
        ERR_NOT_MODIFIED,
        ERR_ABORTED,
        ERR_OUT_OF_RANGE,
        ERR_NOT_IMPLEMENTED,
        ERR_INTERNAL,
        ERR_UNAVAILABLE,
        ERR_DATA_LOSS,
        ERR_UNAUTHENTICATED,
    )
}

for _error in _CANONICAL.values():
    typeurl.register(type(_error), "errdefs", "kind", _error.kind.name.lower())
typeurl.register(ContextCanceledError, "errdefs", "context", "canceled")
typeurl.register(ContextDeadlineExceededError, "errdefs", "context", "deadline_exceeded")
typeurl.register(UnexpectedStatusError, "errdefs", "unexpected_status")
