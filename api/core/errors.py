"""
Error classification and exception handlers.

Every error body has one shape: {"error": "<short message>"}.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .db import ForeignKeyViolation, IntegrityViolation, InvalidValue, StoreError, UniqueViolation

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal Server Error"


def error_body(message: str) -> dict[str, str]:
    return {"error": message}


def classify_store_error(exc: StoreError) -> tuple[int, str]:
    """
    Map a store failure to (status code, client message).
    """
    if isinstance(exc, InvalidValue):
        return status.HTTP_400_BAD_REQUEST, "A value does not fit its column type or range."
    if isinstance(exc, ForeignKeyViolation):
        return status.HTTP_409_CONFLICT, "Referenced performer is missing or still referenced."
    if isinstance(exc, UniqueViolation):
        return status.HTTP_409_CONFLICT, "A record with the same unique value already exists."
    if isinstance(exc, IntegrityViolation):
        return status.HTTP_409_CONFLICT, "Integrity constraint violated."
    return status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE


def describe_errors(errors: Sequence[Any]) -> str:
    """
    One-line summary of the first pydantic / FastAPI validation error.
    """
    if not errors:
        return "Invalid request."
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    msg = str(first.get("msg") or "Invalid value.")
    # pydantic prefixes custom ValueErrors.
    msg = msg.removeprefix("Value error, ")
    if loc:
        return f"{'.'.join(loc)}: {msg}"
    return msg


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(describe_errors(exc.errors())),
    )


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    status_code, message = classify_store_error(exc)
    if status_code >= 500:
        logger.error(
            "store_error method=%s path=%s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
    else:
        logger.info("store_rejected status=%s path=%s error=%s", status_code, request.url.path, exc)
    return JSONResponse(status_code=status_code, content=error_body(message))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_error method=%s path=%s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(INTERNAL_ERROR_MESSAGE),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
