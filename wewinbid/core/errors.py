"""
Centralized error types and API error rendering.

Domain errors derive from FastAPI's HTTPException so that endpoint code which
re-raises HTTPException also propagates them untouched. Every error leaving
the API is rendered as {"error": <code>, "message": <text>, "details": ...}.
"""
import logging
from enum import Enum
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    GONE = "GONE"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    EXTERNAL_API_ERROR = "EXTERNAL_API_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


_STATUS_CODES = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.AUTHENTICATION_ERROR,
    402: ErrorCode.QUOTA_EXCEEDED,
    403: ErrorCode.AUTHORIZATION_ERROR,
    404: ErrorCode.NOT_FOUND,
    409: ErrorCode.CONFLICT,
    410: ErrorCode.GONE,
    422: ErrorCode.VALIDATION_ERROR,
    429: ErrorCode.RATE_LIMIT_EXCEEDED,
    502: ErrorCode.EXTERNAL_API_ERROR,
    503: ErrorCode.SERVICE_UNAVAILABLE,
}


class AppError(HTTPException):
    """Base class for errors raised by services and endpoints."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code_default: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Any] = None, headers: Optional[dict] = None):
        super().__init__(status_code=self.status_code_default, detail=message, headers=headers)
        self.message = message
        self.details = details


class ValidationError(AppError):
    code = ErrorCode.VALIDATION_ERROR
    status_code_default = status.HTTP_400_BAD_REQUEST


class AuthenticationError(AppError):
    code = ErrorCode.AUTHENTICATION_ERROR
    status_code_default = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Not authenticated", details: Optional[Any] = None):
        super().__init__(message, details, headers={"WWW-Authenticate": "Bearer"})


class QuotaExceededError(AppError):
    code = ErrorCode.QUOTA_EXCEEDED
    status_code_default = status.HTTP_402_PAYMENT_REQUIRED


class PermissionDeniedError(AppError):
    code = ErrorCode.AUTHORIZATION_ERROR
    status_code_default = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    code = ErrorCode.NOT_FOUND
    status_code_default = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    code = ErrorCode.CONFLICT
    status_code_default = status.HTTP_409_CONFLICT


class GoneError(AppError):
    code = ErrorCode.GONE
    status_code_default = status.HTTP_410_GONE


class ExternalServiceError(AppError):
    code = ErrorCode.EXTERNAL_API_ERROR
    status_code_default = status.HTTP_502_BAD_GATEWAY


class ServiceUnavailableError(AppError):
    code = ErrorCode.SERVICE_UNAVAILABLE
    status_code_default = status.HTTP_503_SERVICE_UNAVAILABLE


def error_body(code: str, message: str, details: Any = None) -> dict:
    return {"error": code, "message": message, "details": details}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.code.value, exc.message, exc.details),
        headers=exc.headers,
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    details = None if isinstance(exc.detail, str) else exc.detail
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(code.value, message, details),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body(ErrorCode.VALIDATION_ERROR.value, "Invalid request data", details),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(ErrorCode.INTERNAL_ERROR.value, "An unexpected error occurred"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
