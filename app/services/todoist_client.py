"""Thin async client for the Todoist REST API."""

import logging
import time
import uuid
from typing import Any

import httpx

from app.core.config import Settings
from app.exceptions.base import ConfigurationError

logger = logging.getLogger(__name__)


def make_request_id(tag: str) -> str:
    """Build an ``X-Request-Id`` value Todoist can use to drop duplicate writes."""
    return f"{int(time.time() * 1000)}-{tag}-{uuid.uuid4()}"


class TodoistClient:
    """Issues authenticated calls against the Todoist REST API.

    Non-2xx responses raise ``httpx.HTTPStatusError`` and transport failures
    raise ``httpx.RequestError``; callers decide how to report them.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        """Bind the client to the configured API token.

        Args:
            settings: Application settings holding the Todoist credential.
            transport: Optional httpx transport, used by tests.

        Raises:
            ConfigurationError: If ``TODOIST_API_KEY`` is not configured.
        """
        if not settings.todoist_api_key:
            logger.error("CRITICAL ERROR: TODOIST_API_KEY is not defined in environment variables.")
            raise ConfigurationError(
                "Todoist API key is missing. Please configure it in your .env file.",
                status_code=500,
            )
        self.base_url = settings.todoist_api_url.rstrip("/")
        self.token = settings.todoist_api_key
        self.timeout = settings.todoist_request_timeout
        self._transport = transport

    def _get_headers(self, request_tag: str | None = None) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }
        if request_tag:
            headers["X-Request-Id"] = make_request_id(request_tag)
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
        request_tag: str | None = None,
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.request(
                method, url, headers=self._get_headers(request_tag), json=payload
            )
            resp.raise_for_status()
            return resp

    async def list_tasks(self) -> list[dict[str, Any]]:
        """Lists active Todoist tasks for the configured token."""
        resp = await self._request("GET", "/tasks")
        return resp.json()

    async def create_task(self, payload: dict[str, Any], request_tag: str = "task") -> dict[str, Any]:
        """Creates a task in Todoist."""
        resp = await self._request("POST", "/tasks", payload=payload, request_tag=request_tag)
        return resp.json()

    async def update_task(self, task_id: str, updates: dict[str, Any]) -> Any:
        """Updates a task in Todoist. Todoist uses POST for updates."""
        resp = await self._request(
            "POST", f"/tasks/{task_id}", payload=updates, request_tag=f"update-task-{task_id}"
        )
        if resp.status_code == 204 or not resp.content:
            return {}
        return resp.json()

    async def delete_task(self, task_id: str) -> None:
        """Deletes a task in Todoist."""
        await self._request("DELETE", f"/tasks/{task_id}", request_tag=f"delete-task-{task_id}")

    async def close_task(self, task_id: str) -> None:
        """Marks a task as completed in Todoist."""
        await self._request("POST", f"/tasks/{task_id}/close", request_tag=f"close-task-{task_id}")
