"""Mapping between canonical error kinds and HTTP status codes.

Outbound, ``to_http`` picks the status for an error tree. Inbound,
``from_http`` turns a status code back into a kind error, and
``raise_for_status`` does the same for an ``httpx.Response``.
``install_error_handler`` answers unhandled FastAPI errors with the mapped
status.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from http import HTTPStatus

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from . import classify
from .chain import as_
from .kinds import (
    ConflictError,
    FailedPreconditionError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    NotModifiedError,
    PermissionDeniedError,
    ResourceExhaustedError,
    UnauthenticatedError,
    UnavailableError,
    UnexpectedStatusError,
    UnimplementedError,
)
from .logging import fields, get_logger, log_context
from .resolve import kind_label

_LOGGER = get_logger(__name__)

_FROM_HTTP: dict[int, Callable[[], BaseException]] = {
    HTTPStatus.NOT_FOUND: NotFoundError,
    HTTPStatus.BAD_REQUEST: InvalidArgumentError,
    HTTPStatus.CONFLICT: ConflictError,
    HTTPStatus.PRECONDITION_FAILED: FailedPreconditionError,
    HTTPStatus.UNAUTHORIZED: UnauthenticatedError,
    HTTPStatus.FORBIDDEN: PermissionDeniedError,
    HTTPStatus.NOT_MODIFIED: NotModifiedError,
    HTTPStatus.TOO_MANY_REQUESTS: ResourceExhaustedError,
    HTTPStatus.INTERNAL_SERVER_ERROR: InternalError,
    HTTPStatus.NOT_IMPLEMENTED: UnimplementedError,
    HTTPStatus.SERVICE_UNAVAILABLE: UnavailableError,
}

# Several kinds may be present in one tree; the first match wins.
_TO_HTTP: tuple[tuple[Callable[[BaseException | None], bool], HTTPStatus], ...] = (
    (classify.is_not_found, HTTPStatus.NOT_FOUND),
    (classify.is_invalid_argument, HTTPStatus.BAD_REQUEST),
    (classify.is_conflict, HTTPStatus.CONFLICT),
    (classify.is_not_modified, HTTPStatus.NOT_MODIFIED),
    (classify.is_failed_precondition, HTTPStatus.PRECONDITION_FAILED),
    (classify.is_unauthorized, HTTPStatus.UNAUTHORIZED),
    (classify.is_permission_denied, HTTPStatus.FORBIDDEN),
    (classify.is_resource_exhausted, HTTPStatus.TOO_MANY_REQUESTS),
    (classify.is_internal, HTTPStatus.INTERNAL_SERVER_ERROR),
    (classify.is_not_implemented, HTTPStatus.NOT_IMPLEMENTED),
    (classify.is_unavailable, HTTPStatus.SERVICE_UNAVAILABLE),
)


@dataclass(frozen=True)
class HttpResponseError(Exception):
    """Non-success HTTP response classified into a canonical kind."""

    message: str
    method: str
    url: str
    status_code: int
    cause: BaseException
    response_body: str = ""

    def __str__(self) -> str:
        """Return the request summary followed by the kind text."""
        return f"{self.message}: {self.cause}"

    def unwrap(self) -> BaseException:
        """Return the kind error for the response status."""
        return self.cause


def from_http(status_code: int) -> BaseException:
    """Return a fresh kind error for an HTTP status code.

    Codes without a canonical kind are preserved as
    ``UnexpectedStatusError`` so they survive a later ``to_http``.
    """
    factory = _FROM_HTTP.get(status_code)
    if factory is None:
        return UnexpectedStatusError(status_code)
    return factory()


def to_http(err: BaseException | None) -> int:
    """Return the HTTP status code for an error tree; unmatched trees get 500."""
    for matches, status in _TO_HTTP:
        if matches(err):
            return int(status)
    if classify.is_unknown(err):
        unexpected = as_(err, UnexpectedStatusError)
        if unexpected is not None and 200 <= unexpected.status < 600:
            return unexpected.status
    return int(HTTPStatus.INTERNAL_SERVER_ERROR)


def _response_text(response: httpx.Response) -> str:
    """Return response text without raising secondary decode errors."""
    try:
        return response.text
    except (httpx.ResponseNotRead, UnicodeDecodeError, LookupError):
        return ""


def error_from_response(response: httpx.Response) -> HttpResponseError:
    """Build a classified error from one HTTP response."""
    request = response.request
    return HttpResponseError(
        message=f"HTTP {response.status_code} for {request.method} {request.url}",
        method=request.method,
        url=str(request.url),
        status_code=response.status_code,
        cause=from_http(response.status_code),
        response_body=_response_text(response),
    )


def raise_for_status(response: httpx.Response) -> httpx.Response:
    """Return a 2xx response unchanged; raise ``HttpResponseError`` otherwise."""
    if response.is_success:
        return response
    raise error_from_response(response)


def error_response(err: BaseException) -> Response:
    """Build the HTTP response describing one error tree."""
    status_code = to_http(err)
    if status_code == HTTPStatus.NOT_MODIFIED:
        return Response(status_code=status_code)
    return JSONResponse(
        status_code=status_code,
        content={"message": str(err), "kind": kind_label(err)},
    )


def install_error_handler(app: FastAPI) -> FastAPI:
    """Answer unhandled errors raised by ``app`` routes with their mapped status.

    FastAPI's own ``HTTPException`` and request validation handling run first
    and are left untouched.
    """

    async def dispatch(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            response = error_response(exc)
            payload = {
                fields.EVENT: fields.HTTP_ERROR_RESPONSE_EVENT,
                fields.ERROR_KIND: kind_label(exc),
                fields.HTTP_STATUS: response.status_code,
            }
            with log_context(payload):
                _LOGGER.warning(
                    "Request failed", exc_info=response.status_code >= 500
                )
            return response

    app.middleware("http")(dispatch)
    return app
