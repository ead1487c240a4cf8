from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, status

from ..errors import GatewayError, store_boundary
from ..schemas import DeleteAck, ErrorOut, TaskCreate, TaskOut, TaskUpdate
from ..store import Store, get_store

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
)

TITLE_REQUIRED = "title required"
TASK_NOT_FOUND = "task not found"

_server_error = {500: {"model": ErrorOut, "description": "Store or unexpected failure"}}
_not_found = {404: {"model": ErrorOut, "description": "Task not found"}}


def _get_store(store: Store = Depends(get_store)) -> Store:
    """
    Dependency wrapper for the store to keep signatures clean.
    """
    return store


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TaskOut],
    summary="List Tasks",
    description="Return every task, newest first.",
    responses={200: {"description": "Tasks retrieved"}, **_server_error},
)
def list_tasks(store: Store = Depends(_get_store)) -> List[TaskOut]:
    with store_boundary("Failed to fetch tasks"):
        return [TaskOut(**it) for it in store.list()]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a pending task with a trimmed, non-empty title.",
    responses={
        201: {"description": "Task created"},
        400: {"model": ErrorOut, "description": "Title missing or blank"},
        **_server_error,
    },
)
def create_task(
    payload: Optional[TaskCreate] = Body(default=None),
    store: Store = Depends(_get_store),
) -> TaskOut:
    """
    Create a new Task. A missing body or a missing, null or blank title is
    rejected before the store is touched.
    """
    if payload is None or payload.title is None:
        raise GatewayError(status.HTTP_400_BAD_REQUEST, TITLE_REQUIRED)
    with store_boundary("Failed to create task"):
        return TaskOut(**store.create(payload.title))


# PUBLIC_INTERFACE
@router.patch(
    "/{task_id}",
    response_model=TaskOut,
    summary="Update Task",
    description="Set the completion flag of a task.",
    responses={200: {"description": "Task updated"}, **_not_found, **_server_error},
)
def update_task(task_id: str, payload: TaskUpdate, store: Store = Depends(_get_store)) -> TaskOut:
    with store_boundary("Failed to update task"):
        updated = store.update(task_id, payload.completed)
        if updated is None:
            raise GatewayError(status.HTTP_404_NOT_FOUND, TASK_NOT_FOUND)
        return TaskOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    response_model=DeleteAck,
    summary="Delete Task",
    description="Delete a task by id.",
    responses={200: {"description": "Task deleted"}, **_not_found, **_server_error},
)
def delete_task(task_id: str, store: Store = Depends(_get_store)) -> DeleteAck:
    with store_boundary("Failed to delete task"):
        if not store.delete(task_id):
            raise GatewayError(status.HTTP_404_NOT_FOUND, TASK_NOT_FOUND)
    return DeleteAck(success=True)
