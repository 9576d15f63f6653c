"""gRPC status mapping and the recursive status detail protocol."""

from .codes import code_for, native_for, rebase_message
from .details import (
    RemoteError,
    RemoteJoinError,
    RemoteWrapError,
    from_status,
    to_status,
)
from .status import StatusError, code_from_value, code_value, status_of
from .transport import abort, from_grpc, to_grpc, to_grpcf, to_native

__all__ = [
    "RemoteError",
    "RemoteJoinError",
    "RemoteWrapError",
    "StatusError",
    "abort",
    "code_for",
    "code_from_value",
    "code_value",
    "from_grpc",
    "from_status",
    "native_for",
    "rebase_message",
    "status_of",
    "to_grpc",
    "to_grpcf",
    "to_native",
    "to_status",
]
