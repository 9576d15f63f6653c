"""In-process carrier for ``google.rpc.Status`` and status extraction."""

from __future__ import annotations

import grpc
from google.protobuf.message import DecodeError
from google.rpc import status_pb2
from grpc_status import rpc_status

from ..logging import fields, get_logger, log_context

_LOGGER = get_logger(__name__)

_CODES_BY_VALUE: dict[int, grpc.StatusCode] = {
    code.value[0]: code for code in grpc.StatusCode
}


def code_from_value(value: int) -> grpc.StatusCode:
    """Return the ``grpc.StatusCode`` for a wire value; unknown values map to UNKNOWN."""
    return _CODES_BY_VALUE.get(value, grpc.StatusCode.UNKNOWN)


def code_value(code: grpc.StatusCode) -> int:
    """Return the wire value of one ``grpc.StatusCode``."""
    return int(code.value[0])


class StatusError(Exception):
    """Exception carrying a full ``google.rpc.Status``, details included."""

    def __init__(self, status: status_pb2.Status) -> None:
        super().__init__(status.message)
        self.status = status

    @property
    def code(self) -> grpc.StatusCode:
        """Return the status code."""
        return code_from_value(self.status.code)

    @property
    def message(self) -> str:
        """Return the status message."""
        return self.status.message

    def __str__(self) -> str:
        return f"rpc error: code = {self.code.name} desc = {self.status.message}"


def status_of(err: object) -> status_pb2.Status | None:
    """Return the status carried by a status-shaped value, else ``None``.

    Status-shaped values are ``Status`` messages, ``StatusError`` and
    ``grpc.RpcError``. Rich details are read from the
    ``grpc-status-details-bin`` trailer when a call exposes one.
    """
    if isinstance(err, status_pb2.Status):
        return err
    if isinstance(err, StatusError):
        return err.status
    if isinstance(err, grpc.RpcError):
        return _rpc_error_status(err)
    return None


def _rpc_error_status(err: grpc.RpcError) -> status_pb2.Status:
    """Build a status from a failed call, preferring its rich trailer."""
    code = err.code() if callable(getattr(err, "code", None)) else grpc.StatusCode.UNKNOWN
    details = err.details() if callable(getattr(err, "details", None)) else str(err)

    if callable(getattr(err, "trailing_metadata", None)):
        try:
            rich = rpc_status.from_call(err)
        except (ValueError, DecodeError) as exc:
            with log_context({fields.GRPC_CODE: code.name}):
                _LOGGER.debug("Ignoring mismatched rich status trailer: %s", exc)
            rich = None
        if rich is not None:
            return rich

    return status_pb2.Status(code=code_value(code), message=details or "")
