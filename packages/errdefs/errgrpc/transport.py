"""Translation between errors and gRPC call failures on both sides of a call."""

from __future__ import annotations

import grpc
from grpc_status import rpc_status

from ..chain import is_
from ..kinds import ErrdefsError
from ..logging import fields, get_logger, log_context
from ..resolve import kind_label
from ..wrap import wrap
from .codes import native_for, rebase_message
from .details import RemoteError, RemoteWrapError, from_status, to_status
from .status import StatusError, code_from_value, status_of

_LOGGER = get_logger(__name__)


def to_grpc(err: BaseException | None) -> BaseException | None:
    """Map an error into a ``StatusError`` using the error text as description.

    Values that already carry a status (``StatusError``, ``grpc.RpcError``)
    are returned unchanged.
    """
    if err is None:
        return None
    if isinstance(err, (StatusError, grpc.RpcError)):
        return err
    return StatusError(to_status(err))


def to_grpcf(err: BaseException, fmt: str, *args: object) -> BaseException | None:
    """Wrap ``err`` with a ``%``-formatted message, then map it with ``to_grpc``."""
    return to_grpc(wrap(err, fmt % args if args else fmt))


def from_grpc(err: BaseException | None) -> BaseException | None:
    """Rebuild the error tree carried by a status-shaped error.

    Errors without a status are returned unchanged.
    """
    if err is None:
        return None
    status = status_of(err)
    if status is None:
        return err
    return from_status(status)


def to_native(err: BaseException | None) -> BaseException | None:
    """Return a native error for a gRPC failure based on its status code.

    When the status carries details and the rebuilt tree contains the kind
    the code stands for, the tree is returned. Otherwise the kind is rebuilt
    from the code and message alone, and any rebuilt tree that did not
    contain it is kept underneath as its cause. Errors without a status are
    read as UNKNOWN with their own text.
    """
    if err is None:
        return None

    status = status_of(err)
    if status is None:
        code, message = grpc.StatusCode.UNKNOWN, str(err)
    else:
        code, message = code_from_value(status.code), status.message

    native = native_for(code, message)

    tree: BaseException | None = None
    if status is not None and status.details:
        tree = from_status(status)
        if is_(tree, native):
            return tree

    result = _with_message(native, message)
    if tree is None or isinstance(tree, RemoteError):
        return result
    return RemoteWrapError(result, tree)


def _with_message(native: BaseException, message: str) -> BaseException:
    """Attach the status message to a rebuilt kind error without repeating it."""
    rebased = rebase_message(native, message)
    if not rebased:
        return native
    if rebased == message and isinstance(native, ErrdefsError):
        return native.with_message(message)
    return wrap(native, rebased)


def abort(context: grpc.ServicerContext, err: BaseException) -> None:
    """Abort one servicer call with the full status of ``err``.

    The code and message reach every client; the detail tree travels in the
    ``grpc-status-details-bin`` trailer for clients using ``from_grpc``.
    """
    status = to_status(err)
    payload = {
        fields.EVENT: fields.STATUS_ABORT_EVENT,
        fields.ERROR_KIND: kind_label(err),
        fields.GRPC_CODE: code_from_value(status.code).name,
    }
    with log_context(payload):
        _LOGGER.info("Aborting call: %s", status.message)
    context.abort_with_status(rpc_status.to_status(status))
