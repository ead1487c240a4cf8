from __future__ import annotations

import itertools
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from functools import lru_cache
from threading import RLock
from typing import Dict, List, Optional

from .models import TaskEntity
from .settings import get_settings


class StoreError(Exception):
    """Failure reported by a store backend; the message is safe to show to clients."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# PUBLIC_INTERFACE
class Store(ABC):
    """Abstract contract for task storage backends."""

    @abstractmethod
    def list(self) -> List[TaskEntity]:
        """Return every task, newest `created_at` first."""

    @abstractmethod
    def create(self, title: str) -> TaskEntity:
        """Insert a pending task with the given (already trimmed) title and return it."""

    @abstractmethod
    def update(self, task_id: str, completed: bool) -> Optional[TaskEntity]:
        """Set `completed` on a task. Return the updated task or None if not found."""

    @abstractmethod
    def delete(self, task_id: str) -> bool:
        """Delete a task by id. Return True if deleted, False if not found."""


class InMemoryStore(Store):
    """
    Thread-safe in-memory store suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[str, TaskEntity] = {}
        # insertion sequence per id, used to order tasks sharing a timestamp
        self._seq: Dict[str, int] = {}
        self._counter = itertools.count()

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def list(self) -> List[TaskEntity]:
        with self._lock:
            ordered = sorted(
                self._items.values(),
                key=lambda t: (t["created_at"], self._seq[t["id"]]),
                reverse=True,
            )
            return [t.copy() for t in ordered]

    def create(self, title: str) -> TaskEntity:
        entity: TaskEntity = {
            "id": str(uuid.uuid4()),
            "title": title,
            "completed": False,
            "created_at": self._now(),
        }
        with self._lock:
            self._items[entity["id"]] = entity
            self._seq[entity["id"]] = next(self._counter)
        return entity.copy()

    def update(self, task_id: str, completed: bool) -> Optional[TaskEntity]:
        with self._lock:
            existing = self._items.get(task_id)
            if existing is None:
                return None
            updated = existing.copy()
            updated["completed"] = completed
            self._items[task_id] = updated
            return updated.copy()

    def delete(self, task_id: str) -> bool:
        with self._lock:
            self._seq.pop(task_id, None)
            return self._items.pop(task_id, None) is not None


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_store() -> Store:
    """
    Return the process-wide store configured by settings.
    - memory: InMemoryStore
    - sqlite: SQLiteStore backed by SQLITE_DB_PATH
    - rest: RestStore talking to STORE_URL
    """
    settings = get_settings()
    if settings.store_backend == "sqlite":
        from .db import SQLiteStore

        return SQLiteStore(settings.sqlite_db_path)
    if settings.store_backend == "rest":
        from .rest_store import RestStore

        if not settings.store_url:
            raise RuntimeError("STORE_URL is not set. It is required when STORE_BACKEND=rest.")
        return RestStore(
            settings.store_url,
            api_key=settings.store_api_key,
            table=settings.store_table,
            timeout=settings.http_timeout_seconds,
        )
    return InMemoryStore()
