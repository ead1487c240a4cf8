from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, List, Optional, TypeVar
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ..schemas import TaskOut

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of one gateway call. Exactly one of `value` / `error` is meaningful,
    depending on `ok`. `status_code` is None when no response was received.
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    @classmethod
    def success(cls, value: T, status_code: Optional[int] = None) -> "Result[T]":
        return cls(ok=True, value=value, status_code=status_code)

    @classmethod
    def failure(cls, error: str, status_code: Optional[int] = None) -> "Result[T]":
        return cls(ok=False, error=error, status_code=status_code)


# PUBLIC_INTERFACE
class TaskGatewayClient:
    """
    HTTP client for the task gateway.

    Methods never raise for transport or HTTP errors; they return a failed Result
    carrying the gateway's `error` text (or the transport error) instead.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "TaskGatewayClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _send(self, method: str, url: str, **kwargs: Any) -> Result[Any]:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            return Result.failure(str(e) or e.__class__.__name__)

        if response.is_error:
            return Result.failure(self._error_message(response), response.status_code)
        try:
            return Result.success(response.json(), response.status_code)
        except ValueError:
            return Result.failure("Gateway returned a non-JSON response", response.status_code)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"HTTP {response.status_code}"

    @staticmethod
    def _as_task(result: Result[Any]) -> Result[TaskOut]:
        if not result.ok:
            return Result.failure(result.error or "request failed", result.status_code)
        try:
            return Result.success(TaskOut.model_validate(result.value), result.status_code)
        except ValidationError as e:
            return Result.failure(f"Malformed task in response: {e}", result.status_code)

    def list_tasks(self) -> Result[List[TaskOut]]:
        result = self._send("GET", "/tasks")
        if not result.ok:
            return Result.failure(result.error or "request failed", result.status_code)
        try:
            tasks = [TaskOut.model_validate(item) for item in result.value]
        except (TypeError, ValidationError) as e:
            return Result.failure(f"Malformed task list in response: {e}", result.status_code)
        return Result.success(tasks, result.status_code)

    def create_task(self, title: str) -> Result[TaskOut]:
        return self._as_task(self._send("POST", "/tasks", json={"title": title}))

    def update_task(self, task_id: str, completed: bool) -> Result[TaskOut]:
        return self._as_task(self._send("PATCH", f"/tasks/{quote(task_id, safe='')}", json={"completed": completed}))

    def delete_task(self, task_id: str) -> Result[str]:
        result = self._send("DELETE", f"/tasks/{quote(task_id, safe='')}")
        if not result.ok:
            return Result.failure(result.error or "request failed", result.status_code)
        return Result.success(task_id, result.status_code)
