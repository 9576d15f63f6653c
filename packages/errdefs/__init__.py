"""Canonical error kinds and their translation across service boundaries.

Errors are classified into one of sixteen kinds plus the canceled and
deadline-exceeded sentinels, either by class or by duck-typed marker methods.
``resolve`` picks one kind for a whole tree of wrapped and joined errors;
``errhttp`` and ``errgrpc`` map kinds to and from wire status codes.
"""

from .chain import LEAF, Leaf, Multi, Single, as_, is_, unwrap, walk
from .classify import (
    is_aborted,
    is_already_exists,
    is_canceled,
    is_conflict,
    is_data_loss,
    is_deadline_exceeded,
    is_failed_precondition,
    is_internal,
    is_invalid_argument,
    is_not_found,
    is_not_implemented,
    is_not_modified,
    is_out_of_range,
    is_permission_denied,
    is_resource_exhausted,
    is_unauthenticated,
    is_unauthorized,
    is_unavailable,
    is_unknown,
)
from .join import JoinError, join
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
    AbortedError,
    AlreadyExistsError,
    ConflictError,
    ContextCanceledError,
    ContextDeadlineExceededError,
    DataLossError,
    ErrdefsError,
    FailedPreconditionError,
    InternalError,
    InvalidArgumentError,
    Kind,
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
from .resolve import kind_label, resolve
from .stack import StackError
from .wrap import WrappedError, format_error, wrap

__all__ = [
    "CANCELED",
    "DEADLINE_EXCEEDED",
    "ERR_ABORTED",
    "ERR_ALREADY_EXISTS",
    "ERR_CONFLICT",
    "ERR_DATA_LOSS",
    "ERR_FAILED_PRECONDITION",
    "ERR_INTERNAL",
    "ERR_INVALID_ARGUMENT",
    "ERR_NOT_FOUND",
    "ERR_NOT_IMPLEMENTED",
    "ERR_NOT_MODIFIED",
    "ERR_OUT_OF_RANGE",
    "ERR_PERMISSION_DENIED",
    "ERR_RESOURCE_EXHAUSTED",
    "ERR_UNAUTHENTICATED",
    "ERR_UNAVAILABLE",
    "ERR_UNKNOWN",
    "AbortedError",
    "AlreadyExistsError",
    "ConflictError",
    "ContextCanceledError",
    "ContextDeadlineExceededError",
    "DataLossError",
    "ErrdefsError",
    "FailedPreconditionError",
    "InternalError",
    "InvalidArgumentError",
    "JoinError",
    "Kind",
    "LEAF",
    "Leaf",
    "Multi",
    "NotFoundError",
    "NotModifiedError",
    "OutOfRangeError",
    "PermissionDeniedError",
    "ResourceExhaustedError",
    "Single",
    "StackError",
    "UnauthenticatedError",
    "UnavailableError",
    "UnexpectedStatusError",
    "UnimplementedError",
    "UnknownError",
    "WrappedError",
    "as_",
    "format_error",
    "is_",
    "is_aborted",
    "is_already_exists",
    "is_canceled",
    "is_conflict",
    "is_data_loss",
    "is_deadline_exceeded",
    "is_failed_precondition",
    "is_internal",
    "is_invalid_argument",
    "is_not_found",
    "is_not_implemented",
    "is_not_modified",
    "is_out_of_range",
    "is_permission_denied",
    "is_resource_exhausted",
    "is_unauthenticated",
    "is_unauthorized",
    "is_unavailable",
    "is_unknown",
    "join",
    "kind_label",
    "resolve",
    "unwrap",
    "walk",
    "wrap",
]
