"""Todoist task schemas."""

from typing import Any, Optional

from pydantic import Field

from .base import BaseSchema


class TaskCreateRequest(BaseSchema):
    """Body of ``POST /api/todoist/create``.

    ``simplifiedChecklist`` is kept as a raw mapping; its shape is checked by
    the service so malformed payloads get the documented 400 message.
    """

    message: Optional[str] = None
    simplifiedChecklist: Optional[dict[str, Any]] = None


class TaskCreateResponse(BaseSchema):
    """Response of the checklist task creation."""

    message: str
    createdTasks: list[dict[str, Any]]
    skippedCount: int = Field(0, description="Checklist items skipped for lacking a description")
