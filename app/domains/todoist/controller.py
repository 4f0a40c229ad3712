"""Todoist task API controller.

These routes are public; the checklist flow calls ``/create`` over HTTP.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Path, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse

from app.core.config import Settings, get_settings
from app.domains.todoist.service import TodoistService
from app.schemas.todoist import TaskCreateRequest, TaskCreateResponse

router = APIRouter(prefix="/api/todoist", tags=["todoist"])


def get_todoist_service(config: Settings = Depends(get_settings)) -> TodoistService:
    return TodoistService(config)


@router.get("/list")
async def get_tasks(service: TodoistService = Depends(get_todoist_service)):
    """Get every task and subtask in the configured Todoist account."""
    tasks = await service.get_tasks()
    return JSONResponse(content=tasks)


@router.post("/create", response_model=TaskCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreateRequest | None = Body(None),
    service: TodoistService = Depends(get_todoist_service),
):
    """Create a main task from the checklist summary and a subtask per item."""
    task_data = task_data or TaskCreateRequest()
    result = await service.create_checklist_tasks(
        message=task_data.message,
        simplified_checklist=task_data.simplifiedChecklist,
    )
    return TaskCreateResponse(**result)


@router.put("/update/{task_id}")
async def update_task(
    task_id: str = Path(..., description="Todoist task ID"),
    updates: dict[str, Any] | None = Body(None),
    service: TodoistService = Depends(get_todoist_service),
):
    """Update a single task; the Todoist response is returned unmodified."""
    updated = await service.update_task(task_id, updates)
    return JSONResponse(content=updated)


@router.delete("/delete/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: str = Path(..., description="Todoist task ID"),
    service: TodoistService = Depends(get_todoist_service),
):
    await service.delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/complete/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def complete_task(
    task_id: str = Path(..., description="Todoist task ID"),
    service: TodoistService = Depends(get_todoist_service),
):
    """Mark a task as completed."""
    await service.complete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/tes", response_class=PlainTextResponse)
async def tes():
    return "tes"
