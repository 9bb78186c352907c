"""
Exception handlers.

Maps each service error type to one HTTP status and a common error body:
{timestamp, status, error, message, path}.
"""

import logging
from datetime import datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from stockbars.services.base import (
    BarNotFoundError,
    ParsingError,
    ProviderError,
    StorageIntegrityError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def error_body(request: Request, status: int, error: str, message: str, **extra: Any) -> dict:
    body = {
        "timestamp": datetime.now().isoformat(),
        "status": status,
        "error": error,
        "message": message,
        "path": request.url.path,
    }
    body.update(extra)
    return body


async def handle_provider_error(request: Request, exc: ProviderError) -> JSONResponse:
    logger.error(f"Polygon API exception ({exc.kind.value}): {exc.message}")
    return JSONResponse(
        status_code=503,
        content=error_body(request, 503, "Polygon API Error", exc.message, kind=exc.kind.value),
    )


async def handle_parsing_error(request: Request, exc: ParsingError) -> JSONResponse:
    logger.error(f"Stock data parsing exception: {exc.message}")
    return JSONResponse(
        status_code=500,
        content=error_body(request, 500, "Data Processing Error", exc.message),
    )


async def handle_not_found(request: Request, exc: BarNotFoundError) -> JSONResponse:
    logger.warning(f"Stock data not found: {exc.message}")
    return JSONResponse(
        status_code=404,
        content=error_body(
            request,
            404,
            "Not Found",
            exc.message,
            symbol=exc.symbol,
            date=exc.trading_date.isoformat(),
        ),
    )


async def handle_integrity_error(request: Request, exc: StorageIntegrityError) -> JSONResponse:
    logger.error(f"Storage integrity violation: {exc.message}")
    return JSONResponse(
        status_code=409,
        content=error_body(request, 409, "Conflict", exc.message),
    )


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    logger.warning(f"Invalid request parameters: {exc.message}")
    return JSONResponse(
        status_code=400,
        content=error_body(request, 400, "Bad Request", exc.message),
    )


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    logger.warning(f"Invalid request parameters: {message}")
    return JSONResponse(
        status_code=400,
        content=error_body(request, 400, "Bad Request", message),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content=error_body(request, 500, "Internal Server Error", "An unexpected error occurred"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ProviderError, handle_provider_error)
    app.add_exception_handler(ParsingError, handle_parsing_error)
    app.add_exception_handler(BarNotFoundError, handle_not_found)
    app.add_exception_handler(StorageIntegrityError, handle_integrity_error)
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
