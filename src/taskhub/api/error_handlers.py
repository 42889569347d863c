"""Global exception handlers.

Learn: Three layers, registered once in create_app():
- AppError → plain-text body holding exactly the error message
- RequestValidationError → 400 with one "<message>: <field>" entry per problem
- Exception (catch-all) → logged with context, generic 500, no internals leaked
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from taskhub.errors import AppError, Unauthenticated

logger = structlog.get_logger()

_LOCATION_PREFIXES = ("body", "query", "path", "header")


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("request.app_error", path=request.url.path, error=exc.message)
        headers = None
        if isinstance(exc, Unauthenticated):
            headers = {"WWW-Authenticate": "Bearer"}
        return PlainTextResponse(
            exc.message, status_code=exc.status_code, headers=headers
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        errors = [_format_validation_error(e) for e in exc.errors()]
        logger.info("request.invalid", path=request.url.path, errors=errors)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Validation error", "errors": errors},
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.exception(
            "request.unhandled_error",
            path=request.url.path,
            method=request.method,
            error=str(exc),
        )
        return PlainTextResponse(
            "Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


def _format_validation_error(error: dict) -> str:
    loc = list(error.get("loc", ()))
    if loc and loc[0] in _LOCATION_PREFIXES:
        loc = loc[1:]
    field = ".".join(str(part) for part in loc)
    return f"{error['msg'].lower()}: {field}"
