from __future__ import annotations

from typing import List

from .state import TrackerState

LOADING_TEXT = "Loading tasks..."
EMPTY_TEXT = "No tasks yet. Add one to get started!"
BUSY_TEXT = "Saving..."


def render(state: TrackerState) -> str:
    """Render the task list as plain text, one task per line."""
    if state.is_initial_loading:
        return LOADING_TEXT
    lines: List[str] = [BUSY_TEXT] if state.is_loading else []
    if not state.tasks:
        lines.append(EMPTY_TEXT)
        return "\n".join(lines)

    for task in state.tasks:
        box = "[x]" if task.completed else "[ ]"
        badge = "Completed" if task.completed else "Pending"
        lines.append(f"{box} {task.title}  ({badge})  {task.id}")
    lines.append("")
    lines.append(f"{state.pending_count} pending, {state.completed_count} completed")
    return "\n".join(lines)
