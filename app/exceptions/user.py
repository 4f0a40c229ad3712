"""User and authentication exceptions."""

from .base import BaseAppException


class UserValidationError(BaseAppException):
    """Raised when registration data violates a format or uniqueness rule."""

    def __init__(self, message: str = "User validation failed"):
        super().__init__(message=message, status_code=400, error_code="USER_VALIDATION_ERROR")


class InvalidCredentialsError(BaseAppException):
    """Raised on login failure; the message never reveals which check failed."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message=message, status_code=401, error_code="INVALID_CREDENTIALS")
