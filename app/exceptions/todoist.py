"""Task service (Todoist) exceptions."""

from typing import Any

from .base import BaseAppException


class TodoistAPIError(BaseAppException):
    """Raised when a Todoist call fails; carries the upstream status when known."""

    def __init__(
        self,
        message: str = "Todoist request failed",
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            status_code=status_code or 500,
            error_code="TODOIST_API_ERROR",
            details=details,
        )
