"""
Global exception handlers for the attendance API.

Every error leaves the app as ``{"detail": ..., "success": false}``, the shape
the input grid and dashboard check before reading anything else. Database
errors are logged with the request line and reported without internals.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


def error_response(status_code: int, detail: object) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail, "success": False})


def _request_line(request: Request) -> str:
    return f"{request.method} {request.url.path}"


async def _on_http_error(_request: Request, exc: HTTPException) -> JSONResponse:
    return error_response(exc.status_code, exc.detail)


async def _on_row_conflict(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("[%s] row store constraint failed: %s", _request_line(request), exc, exc_info=True)
    return error_response(409, "Database constraint violation")


async def _on_row_store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("[%s] row store write failed: %s", _request_line(request), exc, exc_info=True)
    return error_response(500, "Internal database error")


async def _on_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("[%s] unhandled exception: %s", _request_line(request), exc)
    return error_response(500, "Internal server error")


_HANDLERS = (
    (HTTPException, _on_http_error),
    (IntegrityError, _on_row_conflict),
    (SQLAlchemyError, _on_row_store_error),
    (Exception, _on_unexpected),
)


def register_exception_handlers(app: FastAPI) -> None:
    for exc_class, handler in _HANDLERS:
        app.add_exception_handler(exc_class, handler)  # type: ignore[arg-type]
