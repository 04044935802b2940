"""
Global middleware: request ids and per-request access logging.
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request

from utils.errors import internal_error_response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def register_middleware(app: FastAPI, *, expose_internal_errors: bool = False) -> None:
    """Attach any app-level middleware."""

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception(
                "Unhandled error on %s %s [%s]", request.method, request.url.path, request_id
            )
            response = internal_error_response(exc, expose=expose_internal_errors)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed_ms:.1f}ms"
        logger.info(
            "%s %s - %d (%.0fms) [%s]",
            request.method, request.url.path, response.status_code, elapsed_ms, request_id,
        )
        return response
