"""Recursive status detail protocol for error trees.

``to_status`` flattens an error tree into one ``google.rpc.Status``:

- detail 0 is the codec serialization of the whole error, or an ``Empty``
  placeholder when the codec cannot encode it;
- details 1..N are nested ``Status`` messages, one per direct child of a
  single-wrap or join node, encoded the same way.

``from_status`` reverses this as far as it can. Details that cannot be
decoded are skipped, so the result is always an error, never a failure.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from functools import lru_cache
from typing import Any

import grpc
from google.protobuf import any_pb2, empty_pb2
from google.protobuf.message import DecodeError
from google.rpc import status_pb2

from ..chain import Multi, Single, is_, unwrap
from ..logging import fields, get_logger, log_context
from ..markers import MARKER_METHODS, ErrorWrapper
from ..typeurl import DEFAULT_CODEC, Codec, TypeUrlError
from .codes import code_for
from .status import code_value, status_of

_LOGGER = get_logger(__name__)


class RemoteError(Exception):
    """Leaf rebuilt from a status message when no live value was recovered."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class _DecodedWrapper(Exception):
    """Generic node joining a decoded parent with its decoded children.

    The parent's text and marker methods stay visible on the wrapper, so a
    decoded kind error still classifies after children are attached. Marker
    methods live on a per-marker-set subclass so protocol checks see them.
    """

    def __new__(cls, parent: BaseException, *args: Any) -> _DecodedWrapper:
        markers = frozenset(
            name for name in MARKER_METHODS if callable(getattr(parent, name, None))
        )
        return super().__new__(_with_markers(cls, markers))

    def __init__(self, parent: BaseException) -> None:
        super().__init__(str(parent))
        self.parent = parent

    def __str__(self) -> str:
        return str(self.parent)

    def decoded_parent(self) -> BaseException:
        """Return the value decoded from this node's own detail."""
        return self.parent

    def matches(self, target: object) -> bool:
        """Match whatever the decoded parent matches."""
        return isinstance(target, BaseException) and is_(self.parent, target)


class RemoteWrapError(_DecodedWrapper):
    """Decoded parent with exactly one decoded cause."""

    def __init__(self, parent: BaseException, cause: BaseException) -> None:
        super().__init__(parent)
        self.cause = cause

    def unwrap(self) -> BaseException:
        """Return the decoded cause."""
        return self.cause


class RemoteJoinError(_DecodedWrapper):
    """Decoded parent with two or more decoded causes."""

    def __init__(self, parent: BaseException, causes: Sequence[BaseException]) -> None:
        super().__init__(parent)
        self.causes: tuple[BaseException, ...] = tuple(causes)

    def unwrap_all(self) -> tuple[BaseException, ...]:
        """Return the decoded causes in order."""
        return self.causes


@lru_cache(maxsize=None)
def _with_markers(
    cls: type[_DecodedWrapper], markers: frozenset[str]
) -> type[_DecodedWrapper]:
    """Return ``cls`` extended with methods delegating ``markers`` to the parent."""
    missing = sorted(name for name in markers if not hasattr(cls, name))
    if not missing:
        return cls
    namespace: dict[str, object] = {name: _delegate(name) for name in missing}
    namespace["__module__"] = cls.__module__
    namespace["__qualname__"] = cls.__qualname__
    return type(cls.__name__, (cls,), namespace)


def _delegate(name: str) -> Callable[[_DecodedWrapper], object]:
    """Return a marker method forwarding to the decoded parent."""

    def marker(self: _DecodedWrapper) -> object:
        return getattr(self.parent, name)()

    marker.__name__ = name
    return marker


def to_status(err: BaseException, codec: Codec | None = None) -> status_pb2.Status:
    """Encode an error tree as a ``google.rpc.Status``.

    Status-shaped input passes through with its own code, message and
    details.
    """
    existing = status_of(err)
    if existing is not None:
        return existing
    status = status_pb2.Status(code=code_value(code_for(err)), message=str(err))
    _append_details(status, err, codec or DEFAULT_CODEC)
    return status


def _append_details(status: status_pb2.Status, err: BaseException, codec: Codec) -> None:
    """Append the value detail and one nested status per direct child."""
    value = err.parent if isinstance(err, _DecodedWrapper) else err
    status.details.append(_encode_value(value, codec))

    shape = unwrap(err)
    if isinstance(shape, Single):
        children: tuple[BaseException, ...] = (shape.cause,)
    elif isinstance(shape, Multi):
        children = shape.causes
    else:
        children = ()

    for child in children:
        # Only the top-level code is meaningful.
        nested = status_pb2.Status(
            code=code_value(grpc.StatusCode.UNKNOWN), message=str(child)
        )
        _append_details(nested, child, codec)
        detail = any_pb2.Any()
        detail.Pack(nested)
        status.details.append(detail)


def _encode_value(err: BaseException, codec: Codec) -> any_pb2.Any:
    """Serialize one error value, falling back to an ``Empty`` placeholder."""
    try:
        return codec.marshal(err)
    except TypeUrlError as exc:
        with log_context({fields.EVENT: fields.DETAIL_UNENCODABLE_EVENT}):
            _LOGGER.debug("Status detail not encodable: %s", exc)
    placeholder = any_pb2.Any()
    placeholder.Pack(empty_pb2.Empty())
    return placeholder


def from_status(status: status_pb2.Status, codec: Codec | None = None) -> BaseException:
    """Rebuild an error tree from a ``google.rpc.Status``.

    The result's text is the status message. A value recovered from detail 0
    replaces the generic ``RemoteError`` leaf, and nested statuses become its
    causes: one cause gives a single-wrap, several give a join.
    """
    codec = codec or DEFAULT_CODEC
    err: BaseException = RemoteError(status.message)
    if not status.details:
        return err

    decoded = _decode_value(status.details[0], codec)
    if decoded is not None:
        err = decoded

    causes: list[BaseException] = []
    for index, detail in enumerate(status.details[1:], start=1):
        nested = _decode_nested(index, detail)
        if nested is not None:
            causes.append(from_status(nested, codec))
    return _attach(err, causes)


def _decode_value(detail: any_pb2.Any, codec: Codec) -> BaseException | None:
    """Return the live error serialized in detail 0, if the codec knows it."""
    if detail.Is(empty_pb2.Empty.DESCRIPTOR):
        return None
    try:
        value = codec.unmarshal(detail)
    except TypeUrlError as exc:
        with log_context({fields.TYPE_URL: detail.type_url, fields.DETAIL_INDEX: 0}):
            _LOGGER.debug("Status value detail not decodable: %s", exc)
        return None
    return value if isinstance(value, BaseException) else None


def _decode_nested(index: int, detail: any_pb2.Any) -> status_pb2.Status | None:
    """Return the nested status carried by one detail, or ``None`` to skip it."""
    nested = status_pb2.Status()
    try:
        unpacked = detail.Is(status_pb2.Status.DESCRIPTOR) and detail.Unpack(nested)
    except DecodeError:
        unpacked = False
    if unpacked:
        return nested

    payload = {
        fields.EVENT: fields.DETAIL_SKIPPED_EVENT,
        fields.TYPE_URL: detail.type_url,
        fields.DETAIL_INDEX: index,
    }
    with log_context(payload):
        _LOGGER.debug("Skipping status detail")
    return None


def _attach(parent: BaseException, causes: list[BaseException]) -> BaseException:
    """Attach decoded causes, letting a wrapper-aware parent absorb them first."""
    while causes:
        if isinstance(parent, ErrorWrapper):
            parent = parent.wrap_error(causes[0])
            causes = causes[1:]
            continue
        if len(causes) == 1:
            return RemoteWrapError(parent, causes[0])
        return RemoteJoinError(parent, causes)
    return parent
