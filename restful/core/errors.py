"""Structured HTTP errors and the exception handlers that turn them into responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from restful.core.config import get_settings
from restful.schemas.error import ErrorMessage

logger = logging.getLogger(__name__)


class HttpError(Exception):
    """Client-facing error that aborts request handling with a status and message.

    Only instances of this class are translated into responses by
    :func:`http_error_handler`. Lookalike exceptions carrying the same
    attributes are left to the framework.
    """

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"HttpError({self.message!r}, {self.status_code})"


def create_http_error(message: str, status_code: int) -> HttpError:
    """Build a new structured error."""
    return HttpError(message, status_code)


def default_http_error() -> HttpError:
    """Build the generic 400 error raised for missing or malformed parameters."""
    return HttpError(get_settings().invalid_parameter_message, status.HTTP_400_BAD_REQUEST)


def is_http_error(exc: BaseException) -> bool:
    return isinstance(exc, HttpError)


def build_error_response(*, status_code: int, message: str) -> JSONResponse:
    payload = ErrorMessage(msg=message)
    return JSONResponse(status_code=status_code, content=payload.model_dump())


async def http_error_handler(request: Request, exc: HttpError) -> JSONResponse:
    """Return a structured error as ``{"msg": ...}`` with its own status."""

    logger.info("%s %s aborted with %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return build_error_response(status_code=exc.status_code, message=exc.message)


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Normalize framework HTTP exceptions to the ``{"msg": ...}`` body."""

    message = str(exc.detail) if isinstance(exc.detail, str) and exc.detail else "request failed"
    response = build_error_response(status_code=exc.status_code, message=message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def request_validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Report framework-level validation failures like parameter failures."""

    logger.debug("Request validation failed: %s", exc.errors())
    return build_error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        message=get_settings().invalid_parameter_message,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach the structured error handlers to a FastAPI app instance.

    Exceptions other than the ones listed here keep the framework's default
    handling.
    """

    app.add_exception_handler(HttpError, http_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
