# routers/tasks.py
import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from dependencies import get_store
from errors import NotFoundError, ServerError, StorageError, ValidationError
from storage import TaskStore, reject_constant

logger = logging.getLogger(__name__)

# --- Router Setup ---
router = APIRouter(
    prefix="/api/tasks",
    tags=["Task Management"],
)


# --- Response Models ---
class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


# --- Helpers ---
async def read_json_object(request: Request, allow_empty: bool = False) -> Dict[str, Any]:
    """Decodes the request body as a JSON object. Anything else is invalid task data."""
    raw = await request.body()
    if not raw.strip():
        if allow_empty:
            return {}
        raise ValidationError()
    try:
        body = json.loads(raw, parse_constant=reject_constant)
    except (ValueError, RecursionError):
        raise ValidationError()
    if not isinstance(body, dict):
        raise ValidationError()
    return body


def storage_failure(route: str, error: str, exc: StorageError) -> ServerError:
    logger.error("%s error: %s", route, exc)
    return ServerError(error, details=str(exc))


# --- Endpoints ---
@router.get("", responses=ERROR_RESPONSES)
async def list_tasks(store: TaskStore = Depends(get_store)) -> List[Dict[str, Any]]:
    """Returns every task, in insertion order."""
    try:
        return await store.load()
    except StorageError as e:
        raise storage_failure("GET /api/tasks", "Failed to read tasks", e)


@router.post("", responses=ERROR_RESPONSES)
async def create_task(request: Request, store: TaskStore = Depends(get_store)) -> Dict[str, Any]:
    """
    Appends the posted task as-is. `title` and `quadrant` must be present and non-empty.
    The client supplies `id`; duplicates are not detected.
    """
    task = await read_json_object(request)
    if not task.get("title") or not task.get("quadrant"):
        raise ValidationError()

    try:
        tasks = await store.load()
        tasks.append(task)
        await store.save(tasks)
    except StorageError as e:
        raise storage_failure("POST /api/tasks", "Failed to create task", e)
    return task


@router.put("/{task_id}", responses=ERROR_RESPONSES)
async def update_task(task_id: str, request: Request, store: TaskStore = Depends(get_store)) -> Dict[str, Any]:
    """Shallow-merges the body over the first task with a matching id."""
    patch = await read_json_object(request, allow_empty=True)

    try:
        tasks = await store.load()
        index = next((i for i, t in enumerate(tasks) if t.get("id") == task_id), None)
        if index is None:
            raise NotFoundError()
        tasks[index] = {**tasks[index], **patch}
        await store.save(tasks)
    except StorageError as e:
        raise storage_failure("PUT /api/tasks/{id}", "Failed to update task", e)
    return tasks[index]


@router.delete("/{task_id}", response_model=MessageResponse, responses=ERROR_RESPONSES)
async def delete_task(task_id: str, store: TaskStore = Depends(get_store)) -> MessageResponse:
    """Removes every task with a matching id. Deleting an unknown id still succeeds."""
    try:
        tasks = await store.load()
        remaining_tasks = [t for t in tasks if t.get("id") != task_id]
        await store.save(remaining_tasks)
    except StorageError as e:
        raise storage_failure("DELETE /api/tasks/{id}", "Failed to delete task", e)
    return MessageResponse(message="Task deleted")
