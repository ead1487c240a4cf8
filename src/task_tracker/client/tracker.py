from __future__ import annotations

import logging
from threading import Lock
from typing import Callable, List, TypeVar

from ..schemas import TaskOut
from . import state as transitions
from .gateway import Result, TaskGatewayClient
from .state import TrackerState

logger = logging.getLogger(__name__)

T = TypeVar("T")

BUSY_MESSAGE = "another request is in flight"
EMPTY_TITLE_MESSAGE = "title required"


# PUBLIC_INTERFACE
class TaskTracker:
    """
    Holds the client's TrackerState and drives it through gateway calls.

    Mutations are serialized: while one is in flight, further mutations are
    refused with a failed Result instead of racing each other. Every call
    returns its Result so the caller decides how to present failures.
    """

    def __init__(self, gateway: TaskGatewayClient) -> None:
        self._gateway = gateway
        self._state = TrackerState()
        self._mutation_lock = Lock()

    @property
    def state(self) -> TrackerState:
        return self._state

    def load(self) -> Result[List[TaskOut]]:
        self._state = transitions.start_initial_load(self._state)
        result = self._gateway.list_tasks()
        if not result.ok:
            logger.warning("Failed to fetch tasks: %s", result.error)
        self._state = transitions.finish_initial_load(self._state, result)
        return result

    def add(self, title: str) -> Result[TaskOut]:
        if not title.strip():
            return Result.failure(EMPTY_TITLE_MESSAGE)
        return self._mutate(
            "add task",
            lambda: self._gateway.create_task(title),
            transitions.apply_created,
        )

    def toggle(self, task_id: str) -> Result[TaskOut]:
        task = self._state.find(task_id)
        if task is None:
            return Result.failure(f"unknown task {task_id}")
        return self._mutate(
            "update task",
            lambda: self._gateway.update_task(task_id, not task.completed),
            transitions.apply_updated,
        )

    def remove(self, task_id: str) -> Result[str]:
        return self._mutate(
            "delete task",
            lambda: self._gateway.delete_task(task_id),
            transitions.apply_deleted,
        )

    def _mutate(
        self,
        action: str,
        call: Callable[[], Result[T]],
        apply: Callable[[TrackerState, Result[T]], TrackerState],
    ) -> Result[T]:
        if not self._mutation_lock.acquire(blocking=False):
            return Result.failure(BUSY_MESSAGE)
        try:
            self._state = transitions.start_mutation(self._state)
            result = call()
            if not result.ok:
                logger.warning("Failed to %s: %s", action, result.error)
            self._state = apply(self._state, result)
            return result
        except Exception:
            self._state = transitions.finish_mutation(self._state)
            raise
        finally:
            self._mutation_lock.release()
