"""Duck-typed capability markers for canonical error kinds.

Any exception type may declare membership in a kind by defining the matching
no-argument method; no base class is required. Several kinds have no marker
(already exists, resource exhausted, failed precondition, aborted, out of
range) and can only be matched by class.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Unknown(Protocol):
    """Unknown error, unhandled condition or unexpected response."""

    def unknown(self) -> None: ...


@runtime_checkable
class InvalidParameter(Protocol):
    """Invalid argument supplied by the caller."""

    def invalid_parameter(self) -> None: ...


@runtime_checkable
class NotFound(Protocol):
    """Missing object."""

    def not_found(self) -> None: ...


@runtime_checkable
class Forbidden(Protocol):
    """Permission denied or forbidden response."""

    def forbidden(self) -> None: ...


@runtime_checkable
class Conflict(Protocol):
    """Operation conflicts with current state."""

    def conflict(self) -> None: ...


@runtime_checkable
class NotModified(Protocol):
    """Object unchanged from a previous state."""

    def not_modified(self) -> None: ...


@runtime_checkable
class Unimplemented(Protocol):
    """Operation not implemented."""

    def not_implemented(self) -> None: ...


@runtime_checkable
class System(Protocol):
    """Internal or system failure."""

    def system(self) -> None: ...


@runtime_checkable
class Unavailable(Protocol):
    """Resource temporarily unavailable."""

    def unavailable(self) -> None: ...


@runtime_checkable
class DataLoss(Protocol):
    """Data lost or corrupted."""

    def data_loss(self) -> None: ...


@runtime_checkable
class Unauthorized(Protocol):
    """Caller is unauthenticated or unauthorized."""

    def unauthorized(self) -> None: ...


@runtime_checkable
class DeadlineExceeded(Protocol):
    """Operation ran past its deadline."""

    def deadline_exceeded(self) -> None: ...


@runtime_checkable
class Cancelled(Protocol):
    """Operation was canceled."""

    def cancelled(self) -> None: ...


@runtime_checkable
class Collapsible(Protocol):
    """Join member omitted from default error text."""

    def collapse_error(self) -> None: ...


@runtime_checkable
class ErrorWrapper(Protocol):
    """Error able to absorb a cause rebuilt from a status detail."""

    def wrap_error(self, cause: BaseException) -> BaseException: ...


@runtime_checkable
class Decoded(Protocol):
    """Node rebuilt from a status detail around a decoded parent value."""

    def decoded_parent(self) -> BaseException: ...


MARKER_METHODS: frozenset[str] = frozenset(
    {
        "unknown",
        "invalid_parameter",
        "not_found",
        "forbidden",
        "conflict",
        "not_modified",
        "not_implemented",
        "system",
        "unavailable",
        "data_loss",
        "unauthorized",
        "deadline_exceeded",
        "cancelled",
    }
)
