"""
Error taxonomy and FastAPI exception handlers.

Every ``ApiError`` is rendered into the ``{status, errors, data}``
envelope.  Anything else that escapes a route is logged and rendered as
a 500; the exception text is only exposed in development mode.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Union

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from utils.schemas import ApiResponse

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Unauthorized - Invalid or missing token"
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"
INTERNAL_MESSAGE = "Internal server error"


class ApiError(Exception):
    """Base for errors that map directly onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = INTERNAL_MESSAGE

    def __init__(
        self,
        errors: Union[str, List[str], None] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        if errors is None:
            errors = [self.default_message]
        elif isinstance(errors, str):
            errors = [errors]
        self.errors: List[str] = list(errors)
        self.headers = headers
        super().__init__("; ".join(self.errors))


class ValidationFailed(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad Request"


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = UNAUTHORIZED_MESSAGE

    def __init__(self, errors: Union[str, List[str], None] = None) -> None:
        super().__init__(errors, headers={"WWW-Authenticate": "Bearer"})


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not Found"


class Conflict(ApiError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class Internal(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = INTERNAL_MESSAGE


def envelope(status_code: int, errors: List[str], data=None) -> dict:
    return ApiResponse(status=status_code, errors=errors, data=data).model_dump(mode="json")


def error_response(
    status_code: int,
    errors: List[str],
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=envelope(status_code, errors),
        headers=headers,
    )


def internal_error_response(exc: Exception, *, expose: bool) -> JSONResponse:
    """500 envelope; carries the exception text only when *expose* is set."""
    message = str(exc) if expose and str(exc) else INTERNAL_MESSAGE
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, [message])


def register_exception_handlers(app: FastAPI, *, expose_internal_errors: bool) -> None:
    """Attach the envelope-rendering handlers to *app*."""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return error_response(exc.status_code, exc.errors, exc.headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = []
        for err in exc.errors():
            field = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "path", "query"))
            errors.append(f"{field or 'request'}: {err.get('msg', 'Invalid value')}")
        return error_response(status.HTTP_400_BAD_REQUEST, errors)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            message = f"Route {request.method} {request.url.path} not found"
        else:
            message = str(exc.detail)
        return error_response(exc.status_code, [message], getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return internal_error_response(exc, expose=expose_internal_errors)
