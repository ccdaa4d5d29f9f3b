"""
Error taxonomy and the handlers that turn it into the JSON envelope.

Every failure a client can observe is one of:
- ValidationFailure   400  malformed or missing input
- Unauthenticated     401  missing/expired/invalid token, unknown or inactive account
- NotFoundOrForbidden 404  absent resource and foreign resource look the same
- Conflict            409  duplicate unique field
- Internal            500  store failure or anything unexpected

Routing errors raised by the framework (unmatched path, wrong method) use the
same envelope.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = ["/api/auth", "/api/users", "/api/meals", "/api/workouts", "/api/goals"]


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal server error"

    def __init__(self, message: str, *, error: Optional[str] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error
        self.details = details


class ValidationFailure(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation failed"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Access denied"


class TokenExpired(Unauthenticated):
    error = "Token expired"

    def __init__(self, message: str = "Please login again"):
        super().__init__(message)


class TokenInvalid(Unauthenticated):
    error = "Invalid token"

    def __init__(self, message: str = "Token is malformed"):
        super().__init__(message)


class NotFoundOrForbidden(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not found"

    def __init__(self, resource: str):
        super().__init__(
            f"{resource} does not exist or access denied",
            error=f"{resource} not found",
        )


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"


class Internal(AppError):
    pass


def error_body(error: str, message: str, details: Any = None) -> dict:
    body = {"success": False, "error": error, "message": message}
    if details is not None:
        body["details"] = details
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    headers = None
    if isinstance(exc, Unauthenticated):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error, exc.message, exc.details),
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(ValidationFailure.error, "Request validation failed", details),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Framework errors such as unmatched routes or disallowed methods."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        content = error_body(
            "Route not found",
            f"The requested endpoint {request.url.path} does not exist",
            {"available_endpoints": AVAILABLE_ENDPOINTS},
        )
    else:
        content = error_body(str(exc.detail), f"{request.method} {request.url.path} cannot be processed")
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Database error", "Unable to complete the request against the database"),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(Internal.error, "Something went wrong"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
