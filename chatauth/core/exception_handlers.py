"""Exception handlers producing the service's JSON error body.

Every error response has the shape ``{"type": ..., "message": ...}``.
Store and unexpected failures never leak their details to the client.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from chatauth.core.exceptions import AppException

logger = logging.getLogger("chatauth.exception")


def _error(status_code: int, error_type: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"type": error_type, "message": message},
    )


def _request_extra(request: Request, status_code: int, error_type: str) -> dict:
    return {
        "method": request.method,
        "path": request.url.path,
        "status_code": status_code,
        "error_type": error_type,
    }


def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    extra = _request_extra(request, exc.status_code, exc.error_type)
    level = logging.ERROR if exc.status_code >= 500 else logging.INFO
    logger.log(level, "%s: %s", exc.error_type, exc.message, extra=extra)
    return JSONResponse(status_code=exc.status_code, content=exc.payload())


def http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _error(exc.status_code, "http_error", str(exc.detail))


def validation_exception_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Flatten pydantic errors into one ``field: problem; ...`` message."""
    problems = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body")
        problems.append(f"{field}: {error['msg']}" if field else error["msg"])
    return _error(422, "validation_error", "; ".join(problems))


def store_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """User store failures surface as an opaque 500."""
    logger.error(
        "Store failure on %s %s (%s)",
        request.method,
        request.url.path,
        exc.__class__.__name__,
        extra=_request_extra(request, 500, "store_error"),
        exc_info=exc,
    )
    return _error(500, "internal_error", "Internal server error")


def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled %s on %s %s",
        exc.__class__.__name__,
        request.method,
        request.url.path,
        extra=_request_extra(request, 500, "internal_error"),
        exc_info=exc,
    )
    return _error(500, "internal_error", "An unexpected error occurred")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
