from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from .models import TaskEntity
from .store import Store, StoreError

logger = logging.getLogger(__name__)


class RestStore(Store):
    """
    Store backed by a remote relational database exposed through a
    PostgREST-style HTTP API (e.g. a hosted Postgres with a REST layer).

    The remote table is expected to provide `id` and `created_at` defaults;
    this class only sends `title` on insert and `completed` on update.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        table: str = "tasks",
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        headers: Dict[str, str] = {"Accept": "application/json"}
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"
        self._path = f"/rest/v1/{table}"
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)
        self._client.headers.update(headers)

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, **kwargs: Any) -> List[Dict[str, Any]]:
        try:
            response = self._client.request(method, self._path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("Store request %s %s failed: %s", method, self._path, e)
            raise StoreError(str(e) or e.__class__.__name__) from e

        if response.is_error:
            raise StoreError(self._error_message(response))
        if not response.content:
            return []
        data = response.json()
        return data if isinstance(data, list) else [data]

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            for key in ("message", "error", "hint"):
                if body.get(key):
                    return str(body[key])
        return response.text or f"Store responded with HTTP {response.status_code}"

    @staticmethod
    def _row_to_entity(row: Dict[str, Any]) -> TaskEntity:
        created = row["created_at"]
        return {
            "id": str(row["id"]),
            "title": str(row["title"]),
            "completed": bool(row.get("completed", False)),
            "created_at": created if isinstance(created, datetime) else datetime.fromisoformat(created),
        }

    def list(self) -> List[TaskEntity]:
        rows = self._request("GET", params={"select": "*", "order": "created_at.desc"})
        return [self._row_to_entity(r) for r in rows]

    def create(self, title: str) -> TaskEntity:
        rows = self._request(
            "POST",
            json=[{"title": title}],
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            raise StoreError("Store returned no row for the inserted task")
        return self._row_to_entity(rows[0])

    def update(self, task_id: str, completed: bool) -> Optional[TaskEntity]:
        rows = self._request(
            "PATCH",
            params={"id": f"eq.{task_id}"},
            json={"completed": completed},
            headers={"Prefer": "return=representation"},
        )
        return self._row_to_entity(rows[0]) if rows else None

    def delete(self, task_id: str) -> bool:
        rows = self._request(
            "DELETE",
            params={"id": f"eq.{task_id}"},
            headers={"Prefer": "return=representation"},
        )
        return bool(rows)
