from __future__ import annotations

from datetime import datetime
from typing import TypedDict


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A lightweight record representing a Task as held by any store backend.

    Fields:
    - id: Opaque identifier assigned by the store
    - title: Trimmed, non-empty title (immutable after creation)
    - completed: Completion flag, the only mutable field
    - created_at: Creation timestamp assigned by the store; sort key (desc)
    """

    id: str
    title: str
    completed: bool
    created_at: datetime
