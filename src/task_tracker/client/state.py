"""
Client-side task list state and its transitions.

Every transition is a pure function taking the current TrackerState (and, for
completed requests, the gateway Result) and returning the next state. Failed
results never touch `tasks`; they only clear the relevant loading flag.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Tuple

from ..schemas import TaskOut
from .gateway import Result


@dataclass(frozen=True)
class TrackerState:
    tasks: Tuple[TaskOut, ...] = ()
    is_loading: bool = False
    is_initial_loading: bool = False

    @property
    def pending_count(self) -> int:
        return sum(1 for t in self.tasks if not t.completed)

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self.tasks if t.completed)

    def find(self, task_id: str) -> TaskOut | None:
        return next((t for t in self.tasks if t.id == task_id), None)


def start_initial_load(state: TrackerState) -> TrackerState:
    return replace(state, is_initial_loading=True)


def finish_initial_load(state: TrackerState, result: Result[List[TaskOut]]) -> TrackerState:
    """Replace the task list on success; keep whatever was there on failure."""
    if result.ok and result.value is not None:
        return replace(state, tasks=tuple(result.value), is_initial_loading=False)
    return replace(state, is_initial_loading=False)


def start_mutation(state: TrackerState) -> TrackerState:
    return replace(state, is_loading=True)


def finish_mutation(state: TrackerState) -> TrackerState:
    return replace(state, is_loading=False)


def apply_created(state: TrackerState, result: Result[TaskOut]) -> TrackerState:
    """Prepend the created task; new tasks are always the newest."""
    if result.ok and result.value is not None:
        state = replace(state, tasks=(result.value, *state.tasks))
    return finish_mutation(state)


def apply_updated(state: TrackerState, result: Result[TaskOut]) -> TrackerState:
    """Swap the returned record in at the position of the task with the same id."""
    if result.ok and result.value is not None:
        updated = result.value
        state = replace(
            state,
            tasks=tuple(updated if t.id == updated.id else t for t in state.tasks),
        )
    return finish_mutation(state)


def apply_deleted(state: TrackerState, result: Result[str]) -> TrackerState:
    if result.ok and result.value is not None:
        task_id = result.value
        state = replace(state, tasks=tuple(t for t in state.tasks if t.id != task_id))
    return finish_mutation(state)
