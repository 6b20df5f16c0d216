"""
Exception handlers.

Map domain errors and framework errors to the JSON error envelope. The
``detail`` of a domain error is logged, never returned.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth_service.core.exceptions import (
    AuthenticationError,
    AuthServiceError,
    BackendError,
    ConfigurationError,
    FileStorageError,
    NotFoundError,
    ServiceUnavailableError,
    ValidationError,
)
from auth_service.core.utils.validation import describe_errors
from auth_service.presentation.api.schemas.error import error_response

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[AuthServiceError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    FileStorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    BackendError: status.HTTP_502_BAD_GATEWAY,
    ServiceUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(exc: AuthServiceError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to ``app``."""

    @app.exception_handler(AuthServiceError)
    async def auth_service_error_handler(request: Request, exc: AuthServiceError) -> JSONResponse:
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc}")
        else:
            logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc}")
        headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
        return error_response(request, status_code, type(exc).__name__, exc.message, headers=headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        logger.info(f"HTTP Exception: {exc.status_code} - {exc.detail}")
        if exc.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
            message = "An internal server error occurred."
        else:
            message = str(exc.detail)
        return error_response(
            request, exc.status_code, type(exc).__name__, message, headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = "; ".join(describe_errors(exc.errors()))
        logger.warning(f"Validation error: {message}")
        return error_response(request, status.HTTP_400_BAD_REQUEST, type(exc).__name__, message)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled exception: {type(exc).__name__}: {exc}", exc_info=True)
        return error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            type(exc).__name__,
            "An internal server error occurred.",
        )
