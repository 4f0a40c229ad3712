"""Todoist task service: mirrors checklists into Todoist as parent and subtasks."""

import logging
from typing import Any

import httpx

from app.core.config import Settings
from app.exceptions.base import BadRequestError
from app.exceptions.todoist import TodoistAPIError
from app.services.todoist_client import TodoistClient

logger = logging.getLogger(__name__)

INVALID_CHECKLIST_MESSAGE = (
    "Invalid input format. Expected 'message', 'simplifiedChecklist.checklist', "
    "and 'simplifiedChecklist.summary'."
)
CHECKLIST_CREATED_MESSAGE = "Checklist tasks and subtasks created successfully in Todoist."


def _upstream_message(error: httpx.HTTPStatusError) -> str | None:
    """Extract the ``error`` field Todoist sometimes puts in a JSON error body."""
    try:
        body = error.response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return None


def to_todoist_error(
    error: Exception, default_message: str, details: dict[str, Any] | None = None
) -> TodoistAPIError:
    """Wrap an httpx failure, keeping the upstream status and message when present."""
    if isinstance(error, httpx.HTTPStatusError):
        return TodoistAPIError(
            message=_upstream_message(error) or default_message,
            status_code=error.response.status_code,
            details=details,
        )
    return TodoistAPIError(message=default_message, status_code=500, details=details)


class TodoistService:
    """Task operations against a single shared Todoist account."""

    def __init__(self, settings: Settings, client: TodoistClient | None = None):
        self.settings = settings
        self._client = client

    @property
    def client(self) -> TodoistClient:
        """The Todoist client; built on first use so a missing key fails the request."""
        if self._client is None:
            self._client = TodoistClient(self.settings)
        return self._client

    async def get_tasks(self) -> list[dict[str, Any]]:
        """Return the raw task list, subtasks included."""
        client = self.client
        try:
            return await client.list_tasks()
        except httpx.HTTPError as e:
            logger.error(f"Error in TodoistService.get_tasks: {e}")
            raise to_todoist_error(e, "Failed to retrieve tasks from Todoist.") from e

    async def create_checklist_tasks(
        self, message: Any, simplified_checklist: Any
    ) -> dict[str, Any]:
        """Create a parent task for the checklist and one subtask per item.

        Items without ``itemDescription`` are skipped. Completed items are
        closed right after their subtask is created. A failure stops the
        sequence; tasks created before it stay in Todoist and their ids are
        reported in the error details.
        """
        client = self.client

        if (
            not message
            or not isinstance(simplified_checklist, dict)
            or not isinstance(simplified_checklist.get("checklist"), list)
            or not simplified_checklist.get("summary")
        ):
            raise BadRequestError(INVALID_CHECKLIST_MESSAGE)

        checklist = simplified_checklist["checklist"]
        summary = simplified_checklist["summary"]
        created_tasks: list[dict[str, Any]] = []
        skipped = 0

        try:
            main_task = await client.create_task(
                {"content": message, "description": summary}, request_tag="main-task"
            )
            created_tasks.append(main_task)
            logger.info(f"Created main task {main_task.get('id')} with {len(checklist)} checklist items")

            for item in checklist:
                description = item.get("itemDescription") if isinstance(item, dict) else None
                if not description:
                    logger.warning(f"Skipping subtask due to missing itemDescription: {item!r}")
                    skipped += 1
                    continue

                subtask = await client.create_task(
                    {"content": description, "parent_id": main_task["id"]}, request_tag="subtask"
                )
                created_tasks.append(subtask)

                if item.get("isCompleted"):
                    await client.close_task(subtask["id"])
        except httpx.HTTPError as e:
            created_ids = [task.get("id") for task in created_tasks]
            logger.error(
                f"Error in TodoistService.create_checklist_tasks after creating {created_ids}: {e}"
            )
            raise to_todoist_error(
                e,
                "Failed to create tasks in Todoist. Ensure API key is valid and content is not empty.",
                details={"created_task_ids": created_ids},
            ) from e

        return {
            "message": CHECKLIST_CREATED_MESSAGE,
            "createdTasks": created_tasks,
            "skippedCount": skipped,
        }

    async def update_task(self, task_id: str, updates: dict[str, Any] | None) -> Any:
        """Apply ``updates`` to a task and return Todoist's response body."""
        client = self.client
        if not task_id or not task_id.strip():
            raise BadRequestError("Task ID is required for update.")
        if not updates:
            raise BadRequestError("No update data provided.")

        try:
            return await client.update_task(task_id, updates)
        except httpx.HTTPError as e:
            logger.error(f"Error in TodoistService.update_task: {e}")
            raise to_todoist_error(e, "Failed to update task in Todoist.") from e

    async def delete_task(self, task_id: str) -> None:
        client = self.client
        if not task_id or not task_id.strip():
            raise BadRequestError("Task ID is required for deletion.")

        try:
            await client.delete_task(task_id)
        except httpx.HTTPError as e:
            logger.error(f"Error in TodoistService.delete_task: {e}")
            raise to_todoist_error(e, "Failed to delete task from Todoist.") from e

    async def complete_task(self, task_id: str) -> None:
        client = self.client
        if not task_id or not task_id.strip():
            raise BadRequestError("Task ID is required to complete a task.")

        try:
            await client.close_task(task_id)
        except httpx.HTTPError as e:
            logger.error(f"Error in TodoistService.complete_task: {e}")
            raise to_todoist_error(e, "Failed to complete task in Todoist.") from e
