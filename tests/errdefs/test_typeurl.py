"""Unit tests for the type URL registry and JSON codec."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from google.protobuf import any_pb2
from pydantic import BaseModel

from packages.errdefs import ERR_NOT_FOUND, NotFoundError, typeurl


class _Widget(BaseModel):
    """Pydantic model carried through the adapter path."""

    name: str
    size: int


@dataclass(frozen=True)
class _Shelf:
    """Plain dataclass carried through the adapter path."""

    label: str
    slots: int = 4


class _Opaque:
    """Class pydantic cannot build a schema for."""


class _First:
    """First class competing for one type URL."""


class _Second:
    """Second class competing for one type URL."""


typeurl.register(_Widget, "tests", "typeurl", "widget")
typeurl.register(_Shelf, "/tests/", "typeurl/", "shelf")
typeurl.register(_Opaque, "tests", "typeurl", "opaque")
typeurl.register(_First, "tests", "typeurl", "contested")


def test_registered_paths_are_joined_and_trimmed() -> None:
    """Path segments should be joined with single slashes."""
    assert typeurl.type_url_of(_Shelf(label="top")) == "tests/typeurl/shelf"
    assert typeurl.type_url_of(NotFoundError("x")) == "errdefs/kind/not_found"


def test_repeated_registration_is_idempotent() -> None:
    """Registering the same class at the same URL again should be accepted."""
    assert typeurl.register(_First, "tests", "typeurl", "contested") == (
        "tests/typeurl/contested"
    )


def test_registration_conflicts_are_rejected() -> None:
    """A URL or class already bound elsewhere should raise."""
    with pytest.raises(typeurl.TypeRegistrationError, match="already registered"):
        typeurl.register(_Second, "tests", "typeurl", "contested")
    with pytest.raises(typeurl.TypeRegistrationError, match="already registered"):
        typeurl.register(_First, "tests", "typeurl", "elsewhere")
    with pytest.raises(typeurl.TypeRegistrationError, match="path required"):
        typeurl.register(_Second, "", "/")


def test_model_round_trip_through_adapter() -> None:
    """Pydantic models without hooks should use a TypeAdapter."""
    message = typeurl.marshal_any(_Widget(name="gear", size=3))

    assert message.type_url == "tests/typeurl/widget"
    assert typeurl.unmarshal_any(message) == _Widget(name="gear", size=3)


def test_dataclass_round_trip_through_adapter() -> None:
    """Dataclasses without hooks should use a TypeAdapter with defaults."""
    message = any_pb2.Any(type_url="tests/typeurl/shelf", value=b'{"label": "top"}')

    assert typeurl.unmarshal_any(message) == _Shelf(label="top", slots=4)


def test_hooked_errors_use_their_own_json() -> None:
    """Kind errors serialize their message through their hooks."""
    message = typeurl.DEFAULT_CODEC.marshal(ERR_NOT_FOUND.with_message("widget 7"))

    assert message.value == b'{"message": "widget 7"}'
    assert typeurl.DEFAULT_CODEC.unmarshal(message) == NotFoundError("widget 7")


def test_unregistered_values_and_urls_raise() -> None:
    """Unknown types and URLs should raise TypeNotRegisteredError."""
    with pytest.raises(typeurl.TypeNotRegisteredError, match="_Second"):
        typeurl.marshal_any(_Second())

    with pytest.raises(typeurl.TypeNotRegisteredError) as exc_info:
        typeurl.unmarshal_any(any_pb2.Any(type_url="tests/typeurl/missing"))
    assert exc_info.value.type_url == "tests/typeurl/missing"


@pytest.mark.parametrize(
    ("type_url", "payload"),
    [
        ("tests/typeurl/widget", b"not json"),
        ("tests/typeurl/widget", b'{"name": "gear"}'),
        ("errdefs/kind/not_found", b"{}"),
        ("errdefs/unexpected_status", b'{"status": "abc"}'),
    ],
)
def test_bad_payloads_raise_codec_errors(type_url: str, payload: bytes) -> None:
    """Undecodable payloads should surface as TypeUrlError."""
    with pytest.raises(typeurl.TypeUrlError, match="cannot deserialize"):
        typeurl.unmarshal_any(any_pb2.Any(type_url=type_url, value=payload))


def test_unserializable_classes_raise_codec_errors() -> None:
    """Registered classes pydantic cannot handle should fail cleanly."""
    with pytest.raises(typeurl.TypeUrlError, match="cannot serialize"):
        typeurl.marshal_any(_Opaque())
