# ruff: noqa: D107
"""Base exception classes."""

from typing import Any

from fastapi import HTTPException


class BaseAppException(HTTPException):
    """Base application exception.

    ``public`` controls whether the message and details reach the client;
    non-public errors are reported as a generic internal server error.
    """

    public = True

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(
            status_code=status_code,
            detail={"message": message, "error_code": error_code, "details": details},
        )


class BadRequestError(BaseAppException):
    """Exception raised when the request is malformed or incomplete."""

    def __init__(
        self,
        message: str = "Bad request",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message=message, status_code=400, error_code="BAD_REQUEST", details=details)


class ValidationError(BaseAppException):
    """Exception raised when validation fails."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            status_code=400,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class UnauthorizedError(BaseAppException):
    """Exception raised when authentication fails."""

    def __init__(
        self,
        message: str = "Invalid token",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message=message, status_code=401, error_code="UNAUTHORIZED", details=details)
        self.headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenError(BaseAppException):
    """Exception raised when user doesn't have permission to access a resource."""

    def __init__(
        self,
        message: str = "Forbidden access",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message=message, status_code=403, error_code="FORBIDDEN", details=details)


class NotFoundError(BaseAppException):
    """Exception raised when a resource is not found."""

    def __init__(
        self,
        message: str = "Data not found",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message=message, status_code=404, error_code="NOT_FOUND", details=details)


class ConfigurationError(BaseAppException):
    """Exception raised when a required server setting is missing.

    The status code is chosen by the raiser: the checklist flow reports it as
    a 400, the task endpoints as a 500.
    """

    def __init__(
        self,
        message: str = "Server configuration error",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code="CONFIGURATION_ERROR",
            details=details,
        )

