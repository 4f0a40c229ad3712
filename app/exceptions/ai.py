# ruff: noqa: D107
"""AI service exceptions.

All AI failures are reported to clients as a generic internal server error;
the message and details are kept for logs only.
"""

from typing import Any

from .base import BaseAppException


class AIServiceError(BaseAppException):
    """Base exception for AI service errors."""

    public = False

    def __init__(
        self,
        message: str = "AI service error occurred",
        error_code: str = "AI_SERVICE_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, status_code=500, error_code=error_code, details=details)


class AIConfigurationError(AIServiceError):
    """Exception raised when AI service is not properly configured."""

    def __init__(
        self,
        message: str = "AI service is not properly configured",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "AI_CONFIGURATION_ERROR", details)


class AITimeoutError(AIServiceError):
    """Exception raised when AI service request times out."""

    def __init__(
        self,
        message: str = "AI service request timed out",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "AI_TIMEOUT", details)


class AIParsingError(AIServiceError):
    """Exception raised when AI response cannot be parsed."""

    def __init__(
        self,
        message: str = "Gemini returned invalid JSON format. Could not parse.",
        raw_response: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = dict(details or {})
        if raw_response is not None:
            details["raw_response"] = raw_response
        self.raw_response = raw_response
        super().__init__(message, "AI_PARSING_ERROR", details)
