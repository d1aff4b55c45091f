"""
Featureboard – error taxonomy.

Every domain failure is a ``FeatureboardError`` carrying the HTTP status and
a stable error code. ``register_error_handlers`` renders them as
``{"error": code, "detail": message}``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class FeatureboardError(Exception):
    status_code = 500
    code = "error"
    default_detail = "Request failed"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class MissingCredential(FeatureboardError):
    status_code = 401
    code = "unauthorized"
    default_detail = "Missing bearer credential"


class InvalidCredential(FeatureboardError):
    status_code = 401
    code = "unauthorized"
    default_detail = "Invalid or expired credential"


class Forbidden(FeatureboardError):
    status_code = 403
    code = "forbidden"
    default_detail = "Insufficient permissions"


class NotFound(FeatureboardError):
    status_code = 404
    code = "not_found"
    default_detail = "Not found"


class ValidationError(FeatureboardError):
    status_code = 400
    code = "invalid_request"
    default_detail = "Invalid request"


class ConflictError(FeatureboardError):
    """A concurrent update won the race; the caller may retry."""

    status_code = 409
    code = "conflict"
    default_detail = "Concurrent update, please retry"


class StorageError(FeatureboardError):
    status_code = 500
    code = "storage_error"
    default_detail = "Internal server error"


UNAUTHENTICATED = (MissingCredential, InvalidCredential)


async def _featureboard_error_handler(request: Request, exc: FeatureboardError) -> JSONResponse:
    headers = None
    if isinstance(exc, UNAUTHENTICATED):
        headers = {"WWW-Authenticate": "Bearer"}
    if isinstance(exc, StorageError):
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc.__cause__ or exc)
    return JSONResponse(
        {"error": exc.code, "detail": exc.detail},
        status_code=exc.status_code,
        headers=headers,
    )


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ())[1:])
    message = first.get("msg", ValidationError.default_detail)
    return JSONResponse(
        {"error": ValidationError.code, "detail": f"{field}: {message}" if field else message},
        status_code=ValidationError.status_code,
    )


async def _sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        {"error": StorageError.code, "detail": StorageError.default_detail},
        status_code=StorageError.status_code,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FeatureboardError, _featureboard_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)
