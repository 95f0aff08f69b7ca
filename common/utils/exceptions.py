"""
Custom HTTP exceptions with error codes.

Extends FastAPI's HTTPException with standardized error codes so the
application error handlers can render the common error envelope.

Example:
    from common.utils import NotFoundException

    court = await court_service.get_court(court_id)
    if not court:
        raise NotFoundException("Court not found", code="COURT_NOT_FOUND")
"""

from typing import Optional, Any, Dict, List
from fastapi import HTTPException


class APIException(HTTPException):
    """
    Base API exception with error code support.

    Keeps message, code, details and field errors as attributes so the
    handler in the application can build the response body directly.
    """

    default_code = "ERROR"

    def __init__(
        self,
        status_code: int,
        message: str,
        code: Optional[str] = None,
        details: Optional[Any] = None,
        errors: Optional[List[Dict[str, str]]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Create an API exception.

        Args:
            status_code: HTTP status code
            message: Human-readable error message
            code: Machine-readable error code
            details: Additional error details
            errors: Field-level errors, e.g. [{"field": "name", "message": "..."}]
            headers: Optional response headers
        """
        self.message = message
        self.code = code or self.default_code
        self.details = details
        self.errors = errors

        detail: Dict[str, Any] = {"message": message, "code": self.code}

        if details is not None:
            detail["details"] = details

        if errors:
            detail["errors"] = errors

        super().__init__(
            status_code=status_code,
            detail=detail,
            headers=headers,
        )


class BadRequestException(APIException):
    """400 Bad Request - Invalid input or malformed request."""

    default_code = "BAD_REQUEST"

    def __init__(
        self,
        message: str = "Bad request",
        code: str = "BAD_REQUEST",
        details: Optional[Any] = None,
    ):
        super().__init__(400, message, code, details)


class ValidationException(APIException):
    """400 Validation Error - Input failed field validation."""

    default_code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str = "Validation error",
        code: str = "VALIDATION_ERROR",
        details: Optional[Any] = None,
        errors: Optional[List[Dict[str, str]]] = None,
    ):
        super().__init__(400, message, code, details, errors)


class UnauthorizedException(APIException):
    """401 Unauthorized - Missing or invalid authentication."""

    default_code = "UNAUTHORIZED"

    def __init__(
        self,
        message: str = "Unauthorized",
        code: str = "UNAUTHORIZED",
        details: Optional[Any] = None,
    ):
        super().__init__(401, message, code, details)


class ForbiddenException(APIException):
    """403 Forbidden - Valid auth but insufficient permissions."""

    default_code = "FORBIDDEN"

    def __init__(
        self,
        message: str = "Forbidden",
        code: str = "FORBIDDEN",
        details: Optional[Any] = None,
    ):
        super().__init__(403, message, code, details)


class NotFoundException(APIException):
    """404 Not Found - Resource doesn't exist."""

    default_code = "NOT_FOUND"

    def __init__(
        self,
        message: str = "Not found",
        code: str = "NOT_FOUND",
        details: Optional[Any] = None,
    ):
        super().__init__(404, message, code, details)


class ConflictException(APIException):
    """409 Conflict - Resource already exists or state conflict."""

    default_code = "CONFLICT"

    def __init__(
        self,
        message: str = "Conflict",
        code: str = "CONFLICT",
        details: Optional[Any] = None,
    ):
        super().__init__(409, message, code, details)


class RateLimitException(APIException):
    """429 Too Many Requests - Rate or usage limit exceeded."""

    default_code = "RATE_LIMIT_EXCEEDED"

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        code: str = "RATE_LIMIT_EXCEEDED",
        details: Optional[Any] = None,
        retry_after: Optional[int] = None,
    ):
        headers = {"Retry-After": str(retry_after)} if retry_after else None
        super().__init__(429, message, code, details, headers=headers)


class InternalServerException(APIException):
    """500 Internal Server Error - Unexpected server error."""

    default_code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str = "Internal server error",
        code: str = "INTERNAL_ERROR",
        details: Optional[Any] = None,
    ):
        super().__init__(500, message, code, details)
