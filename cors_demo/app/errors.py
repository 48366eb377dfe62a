"""
cors_demo/app/errors.py

Error types and FastAPI exception handlers.

Every error leaves the server as `{"error": <string>}`:
    403  cross-origin policy rejection
    401  missing demo session
    422  malformed request body
    500  anything else (details only go to the log)
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong"


class CORSRejected(HTTPException):
    """The request's Origin (or preflight ask) is not allowed for the route."""

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=403, detail=detail)


class Unauthorized(HTTPException):
    """The demo session cookie is missing."""

    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(status_code=401, detail=detail)


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("[errors] %s %s → %d %s", request.method, request.url.path, exc.status_code, exc.detail)
    else:
        logger.info("[errors] %s %s → %d %s", request.method, request.url.path, exc.status_code, exc.detail)
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    )
    logger.info("[errors] %s %s → 422 %s", request.method, request.url.path, problems)
    return error_response(422, problems or "Invalid request")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("[errors] Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return error_response(500, GENERIC_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the `{"error": ...}` handlers to an application."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
