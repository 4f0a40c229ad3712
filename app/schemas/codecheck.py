"""Checklist generation schemas."""

from typing import Any

from .base import BaseSchema


class CodeCheckRequest(BaseSchema):
    """Body of ``POST /api/codecheck/``.

    Both fields accept any JSON value; non-string or blank values are
    rejected by ``CodeCheckService`` with field-specific messages.
    """

    requirements: Any = None
    code: Any = None


class CodeCheckResponse(BaseSchema):
    """Result of a code check."""

    message: str
    simplifiedChecklist: dict[str, Any]
    next: str
