"""
Exception handlers - every error body is {"message", "error_type", ...}.

validation -> 400, unauthorized -> 401, forbidden -> 403, not_found -> 404,
conflict -> 409, store / unexpected failures -> 500 with a generic message.
"""

import traceback

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from consultant_tracker.core.logging_config import setup_logger

logger = setup_logger("consultant_tracker.errors", log_file="errors.log")

ERROR_TYPES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    409: "conflict",
    413: "payload_too_large",
}


def error_type_for(status_code: int) -> str:
    if status_code >= 500:
        return "server_error"
    return ERROR_TYPES.get(status_code, "http_error")


def format_validation_errors(errors) -> list:
    """Flatten pydantic errors into [{"field", "message"}], dropping the location prefix."""
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        formatted.append({"field": ".".join(loc) or None, "message": error.get("msg")})
    return formatted


def register_exception_handlers(app):
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(f"[HTTPException] {exc.detail} | Path={request.url.path}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail, "error_type": error_type_for(exc.status_code)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = format_validation_errors(exc.errors())
        logger.warning(f"[ValidationError] Path={request.url.path} | {errors}")
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid data", "error_type": "validation", "errors": errors},
        )

    @app.exception_handler(IntegrityError)
    async def integrity_exception_handler(request: Request, exc: IntegrityError):
        logger.warning(f"[IntegrityError] Path={request.url.path} | {exc.orig}")
        return JSONResponse(
            status_code=409,
            content={"message": "Record conflicts with existing data", "error_type": "conflict"},
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"[DatabaseError] Path={request.url.path} | {exc}\n{traceback.format_exc()}")
        return JSONResponse(
            status_code=500,
            content={"message": "Database error", "error_type": "server_error"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"[UnhandledError] {str(exc)}\n{traceback.format_exc()}")
        return JSONResponse(
            status_code=500,
            content={"message": "Internal server error", "error_type": "server_error"},
        )
