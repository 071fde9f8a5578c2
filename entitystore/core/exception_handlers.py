"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Every ErrorKind maps to
exactly one HTTP status; the mapping is checked for completeness at import so
a new kind cannot ship unmapped.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from entitystore.core.config import get_settings
from entitystore.domain.exceptions import EntityStoreError, ErrorKind

logger = logging.getLogger(__name__)

ERROR_KIND_STATUS: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.VALIDATION: 400,
    ErrorKind.INTERNAL: 500,
}

_unmapped = set(ErrorKind) - set(ERROR_KIND_STATUS)
if _unmapped:
    raise RuntimeError(f"ErrorKind members without an HTTP status: {sorted(_unmapped)}")


def status_for(kind: ErrorKind) -> int:
    return ERROR_KIND_STATUS[kind]


def _entity_store_exception_handler(
    request: Request, exc: EntityStoreError
) -> JSONResponse:
    """Return JSON from EntityStoreError.to_dict() with the kind's status code."""
    status = status_for(exc.kind)
    if status >= 500:
        logger.error(
            "%s %s failed: %s",
            request.method,
            request.url.path,
            getattr(exc, "reason", exc.message),
            exc_info=exc.cause or exc,
        )
    elif exc.kind is ErrorKind.UNAUTHORIZED:
        logger.info(
            "Rejected %s %s: %s",
            request.method,
            request.url.path,
            getattr(exc, "reason", exc.message),
        )
    elif exc.cause is not None:
        logger.debug("%s caused by %r", exc.error_code, exc.cause)
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=headers)


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Validation errors without the raw ctx objects (e.g. ValueError instances)."""
    return [
        {
            "loc": list(err.get("loc", ())),
            "msg": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": jsonable_errors(exc),
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    detail: Any = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": ErrorKind.INTERNAL.value, "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Handlers: EntityStoreError (and subclasses), RequestValidationError,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(EntityStoreError, _entity_store_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
