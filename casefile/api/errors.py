"""Translate application errors into ``{"error": ...}`` responses."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from casefile.core.exceptions import (
    AppError,
    CaseFileNotFoundError,
    DataSourceError,
    ValidationError,
)
from casefile.utils.logging import get_logger

LOGGER = get_logger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    LOGGER.info(
        "Rejected malformed request",
        extra={"path": request.url.path, "errors": [e.get("type") for e in exc.errors()]},
    )
    return _error(400, "Malformed request")


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error(400, exc.message)


async def not_found_handler(request: Request, exc: CaseFileNotFoundError) -> JSONResponse:
    return _error(404, exc.message)


async def data_source_error_handler(request: Request, exc: DataSourceError) -> JSONResponse:
    LOGGER.error(
        f"Backend load failed: {exc.message}",
        exc_info=exc.original_error or exc,
        extra={"path": request.url.path},
    )
    return _error(500, "Failed to load data")


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    LOGGER.error(
        f"Request failed: {exc.message}",
        exc_info=exc.original_error or exc,
        extra={"path": request.url.path},
    )
    return _error(500, "Error processing request")


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers, most specific first."""
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(CaseFileNotFoundError, not_found_handler)
    app.add_exception_handler(DataSourceError, data_source_error_handler)
    app.add_exception_handler(AppError, app_error_handler)
