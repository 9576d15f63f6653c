"""Type URL registry for carrying error values inside protobuf ``Any``.

Registered classes are serialized as JSON. A class may supply its own
``to_json()`` / ``from_json()`` pair; otherwise a pydantic ``TypeAdapter``
handles dataclasses and pydantic models.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Protocol

from google.protobuf import any_pb2
from pydantic import TypeAdapter
from pydantic.errors import PydanticSchemaGenerationError
from pydantic_core import PydanticSerializationError

_TYPES: dict[str, type] = {}
_URLS: dict[type, str] = {}


@dataclass(frozen=True)
class TypeUrlError(Exception):
    """Base error for type URL registry and codec failures."""

    message: str

    def __str__(self) -> str:
        """Return the human-readable error message."""
        return self.message


@dataclass(frozen=True)
class TypeNotRegisteredError(TypeUrlError):
    """No class is registered for a value or type URL."""

    type_url: str = ""


@dataclass(frozen=True)
class TypeRegistrationError(TypeUrlError):
    """Registration conflicts with an existing entry."""


class Codec(Protocol):
    """Serializer for single error values carried in status details."""

    def marshal(self, value: object) -> any_pb2.Any:
        """Serialize one value into a protobuf ``Any``."""

    def unmarshal(self, message: any_pb2.Any) -> object:
        """Rebuild one value from a protobuf ``Any``."""


class TypeUrlCodec:
    """Codec backed by the module-level type URL registry."""

    def marshal(self, value: object) -> any_pb2.Any:
        """Serialize one registered value."""
        return marshal_any(value)

    def unmarshal(self, message: any_pb2.Any) -> object:
        """Rebuild one registered value."""
        return unmarshal_any(message)


DEFAULT_CODEC = TypeUrlCodec()


def register(cls: type, *path: str) -> str:
    """Register ``cls`` under the type URL formed by joining ``path``."""
    segments = [segment.strip("/") for segment in path if segment.strip("/")]
    if not segments:
        raise TypeRegistrationError(message=f"type URL path required for {cls.__name__}")
    type_url = "/".join(segments)

    existing = _TYPES.get(type_url)
    if existing is not None and existing is not cls:
        raise TypeRegistrationError(
            message=f"type URL {type_url} already registered to {existing.__qualname__}"
        )
    existing_url = _URLS.get(cls)
    if existing_url is not None and existing_url != type_url:
        raise TypeRegistrationError(
            message=f"{cls.__qualname__} already registered as {existing_url}"
        )

    _TYPES[type_url] = cls
    _URLS[cls] = type_url
    return type_url


def type_url_of(value: object) -> str:
    """Return the registered type URL for the exact type of ``value``."""
    type_url = _URLS.get(type(value))
    if type_url is None:
        raise TypeNotRegisteredError(
            message=f"type not registered: {type(value).__qualname__}"
        )
    return type_url


def marshal_any(value: object) -> any_pb2.Any:
    """Serialize one registered value into a protobuf ``Any``."""
    type_url = type_url_of(value)
    return any_pb2.Any(type_url=type_url, value=_dump_json(value))


def unmarshal_any(message: any_pb2.Any) -> object:
    """Rebuild a registered value from a protobuf ``Any``."""
    cls = _TYPES.get(message.type_url)
    if cls is None:
        raise TypeNotRegisteredError(
            message=f"type URL not registered: {message.type_url}",
            type_url=message.type_url,
        )
    return _load_json(cls, message.value)


def _dump_json(value: object) -> bytes:
    """Serialize a value with its own hook or a pydantic adapter."""
    to_json = getattr(value, "to_json", None)
    if callable(to_json):
        return to_json()
    try:
        return _adapter(type(value)).dump_json(value)
    except (PydanticSchemaGenerationError, PydanticSerializationError) as exc:
        raise TypeUrlError(
            message=f"cannot serialize {type(value).__qualname__}: {exc}"
        ) from exc


def _load_json(cls: type, data: bytes) -> object:
    """Deserialize a value with the class hook or a pydantic adapter."""
    from_json = getattr(cls, "from_json", None)
    try:
        if callable(from_json):
            return from_json(data)
        return _adapter(cls).validate_json(data)
    except (PydanticSchemaGenerationError, ValueError, TypeError, KeyError) as exc:
        raise TypeUrlError(
            message=f"cannot deserialize {cls.__qualname__}: {exc}"
        ) from exc


@lru_cache(maxsize=None)
def _adapter(cls: type) -> TypeAdapter:
    """Return a cached pydantic adapter for one registered class."""
    return TypeAdapter(cls)
