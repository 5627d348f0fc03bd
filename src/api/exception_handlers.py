"""Exception handlers for the FastAPI application.

Every error leaves the API as ``{error_code, message, details}``. For domain
errors ``details`` is the keyed message map (``{"noprofile": ...}``) and its
keys are also copied to the top level, so ``body["noprofile"]`` works as well.
"""

from collections.abc import Mapping
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.exceptions import AppException, ErrorCode

logger = structlog.get_logger()


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
    keyed: Mapping[str, Any] | None = None,
) -> JSONResponse:
    """Build the error envelope shared by every handler.

    ``keyed`` entries sit beside the envelope fields; the envelope wins on a clash.
    """
    return JSONResponse(
        status_code=status_code,
        content={
            **(keyed or {}),
            "error_code": error_code,
            "message": message,
            "details": details,
        },
        headers=headers,
    )


async def handle_app_exception(request: Request, exc: AppException) -> JSONResponse:
    """Domain errors raised by services and dependencies."""
    log = logger.info if exc.status_code < 500 else logger.error
    log(
        "app_exception",
        error_code=exc.error_code.value,
        status_code=exc.status_code,
        message=exc.message,
    )
    return error_response(
        exc.status_code,
        exc.error_code.value,
        exc.message,
        exc.details,
        keyed=exc.details if isinstance(exc.details, Mapping) else None,
    )


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Routing errors (unknown path, wrong method)."""
    return error_response(
        exc.status_code,
        "HTTP_ERROR",
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies and path parameters (wrong JSON types, bad UUIDs)."""
    errors = exc.errors()
    logger.info("request_validation_error", errors=errors)
    return error_response(
        422,
        ErrorCode.VALIDATION_ERROR.value,
        "Request validation failed",
        [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in errors
        ],
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    """Store failures and bugs are 500s, never a disguised 404."""
    request_id = getattr(request.state, "request_id", "unknown")
    logger.error(
        "unhandled_exception",
        error_type=type(exc).__name__,
        request_id=request_id,
        exc_info=exc,
    )
    message = "An unexpected error occurred" if settings.is_production else str(exc)
    return error_response(
        500,
        ErrorCode.INTERNAL_ERROR.value,
        message,
        {"request_id": request_id},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""
    app.add_exception_handler(AppException, handle_app_exception)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected)
