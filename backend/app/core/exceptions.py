"""
Custom exceptions and error handlers for consistent error responses.

Every failure the service reports falls into one of six kinds:
Unauthenticated, Forbidden, InvalidArgument, NotFound, Conflict and
UpstreamFailure. Handlers below turn them into a uniform JSON envelope.
"""

import logging
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from typing import Any, Dict, List

logger = logging.getLogger("parcel_delivery")


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class Unauthenticated(AppException):
    """Raised when the bearer credential is missing, malformed or rejected."""

    def __init__(self, message: str = "Unauthorized access"):
        super().__init__(
            message=message,
            error_code="ERR_AUTH_001",
            status_code=status.HTTP_401_UNAUTHORIZED
        )


class Forbidden(AppException):
    """Raised on identity mismatch or missing role."""

    def __init__(self, message: str = "Forbidden access", details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_PERM_001",
            status_code=status.HTTP_403_FORBIDDEN,
            details=details
        )


class InvalidArgument(AppException):
    """Raised when a required field is missing or empty."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_BAD_REQUEST_001",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class DuplicateKey(InvalidArgument):
    """Raised when an insert collides with a unique field (tracking_id, email)."""

    def __init__(self, collection: str, fields: List[str]):
        super().__init__(
            f"A {collection} document with the same {', '.join(fields) or 'key'} already exists",
            details={"collection": collection, "fields": fields}
        )


class NotFound(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class Conflict(AppException):
    """
    Raised when the requested state is already satisfied (e.g. parcel already paid).

    Reported as 404 on the wire: clients treat it the same as a missing
    unpaid parcel.
    """

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_CONFLICT_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details=details
        )


class UpstreamFailure(AppException):
    """Raised when the document store, payment gateway or identity service fails."""

    def __init__(self, message: str = "Upstream service failure", service: str = None):
        super().__init__(
            message=message,
            error_code="ERR_UPSTREAM_001",
            status_code=status.HTTP_502_BAD_GATEWAY,
            details={"service": service} if service else {}
        )


# Global Exception Handlers

# Codes for errors raised by FastAPI itself rather than by our services
HTTP_ERROR_CODES = {
    400: "ERR_BAD_REQUEST_001",
    401: "ERR_AUTH_001",
    403: "ERR_PERM_001",
    404: "ERR_NOT_FOUND_001",
    405: "ERR_METHOD_NOT_ALLOWED",
}


def error_response(status_code: int, error_code: str, message: str, details: Dict[str, Any] = None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error_code": error_code, "message": message, "details": details or {}},
        headers=headers,
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    if isinstance(exc, UpstreamFailure):
        logger.error("Upstream failure on %s %s: %s", request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.error_code, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Wrap FastAPI's own HTTP errors (unknown route, wrong method) in the same envelope."""
    return error_response(
        exc.status_code,
        HTTP_ERROR_CODES.get(exc.status_code, "ERR_UNKNOWN"),
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies or query strings: 422 with the offending fields."""
    errors = [
        # ctx may hold raw exception objects
        {key: value for key, value in error.items() if key in ("loc", "msg", "type")}
        for error in exc.errors()
    ]
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY, "ERR_VALIDATION", "Validation error", {"errors": errors}
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "ERR_INTERNAL_SERVER", "An internal server error occurred"
    )
