from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - STORE_BACKEND: 'memory' (default), 'sqlite' or 'rest'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/tasks.db'
    - STORE_URL: base URL of the remote REST store (required for 'rest')
    - STORE_API_KEY: API key sent to the remote REST store
    - STORE_TABLE: remote table name. Default 'tasks'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - GATEWAY_URL: base URL the client uses to reach the gateway
    - HOST / PORT: bind address for `task-tracker serve`
    - LOG_LEVEL: root log level. Default 'INFO'
    - HTTP_TIMEOUT_SECONDS: timeout for outgoing HTTP calls. Default 10
    """

    store_backend: str
    sqlite_db_path: str
    store_url: Optional[str]
    store_api_key: Optional[str]
    store_table: str
    cors_allow_origins: List[str]
    gateway_url: str
    host: str
    port: int
    log_level: str
    http_timeout_seconds: float


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_float(value: str, default: float) -> float:
    try:
        return float(value.strip())
    except ValueError:
        return default


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("STORE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "sqlite", "rest"}:
        backend = "memory"

    store_url = os.getenv("STORE_URL", "").strip() or None
    store_api_key = os.getenv("STORE_API_KEY", "").strip() or None

    return Settings(
        store_backend=backend,
        sqlite_db_path=_get_env("SQLITE_DB_PATH", "./data/tasks.db").strip(),
        store_url=store_url.rstrip("/") if store_url else None,
        store_api_key=store_api_key,
        store_table=_get_env("STORE_TABLE", "tasks").strip(),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        gateway_url=_get_env("GATEWAY_URL", "http://127.0.0.1:8000").strip().rstrip("/"),
        host=_get_env("HOST", "127.0.0.1").strip(),
        port=_parse_int(_get_env("PORT", "8000"), 8000),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        http_timeout_seconds=_parse_float(_get_env("HTTP_TIMEOUT_SECONDS", "10"), 10.0),
    )
