"""
Domain exceptions and the FastAPI handlers that render them.

Services raise these instead of HTTPException so they stay usable outside
a request; the handlers registered by ``add_exception_handlers`` translate
them into ``{"detail": ...}`` JSON responses.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class CarLensError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Server error"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class MissingFieldsError(CarLensError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Email and password required"


class NoFileProvidedError(CarLensError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "No file uploaded"


class InvalidCredentialsError(CarLensError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid credentials"


class ConflictError(CarLensError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Email already exists"


class UnauthenticatedError(CarLensError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"


class ForbiddenError(CarLensError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Invalid or expired token"


class NotFoundError(CarLensError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class UpstreamError(CarLensError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Upstream service failed"


async def carlens_error_handler(request: Request, exc: CarLensError) -> JSONResponse:
    headers = None
    if isinstance(exc, UnauthenticatedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Missing or malformed request fields are a plain 400 for this API
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Missing or invalid fields", "errors": jsonable_encoder(exc.errors())},
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error"},
    )


def add_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI application."""
    app.add_exception_handler(CarLensError, carlens_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
