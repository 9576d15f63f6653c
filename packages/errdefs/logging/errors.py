"""Structured log fields describing one error tree."""

from __future__ import annotations

from packages.errdefs.errgrpc import code_for
from packages.errdefs.errhttp import to_http
from packages.errdefs.resolve import kind_label

from . import fields


def error_log_fields(err: BaseException | None) -> dict[str, object]:
    """Return the resolved kind and its HTTP and gRPC codes for log context.

    ``None`` yields an empty mapping so callers can bind it unconditionally.
    """
    if err is None:
        return {}
    return {
        fields.ERROR_KIND: kind_label(err),
        fields.HTTP_STATUS: to_http(err),
        fields.GRPC_CODE: code_for(err).name,
    }
