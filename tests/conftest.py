from __future__ import annotations

import os
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

# Default to the memory backend so importing the app never touches disk or network
os.environ.setdefault("STORE_BACKEND", "memory")

from task_tracker.main import app  # noqa: E402
from task_tracker.store import Store, get_store  # noqa: E402

from .fakes import RecordingStore  # noqa: E402


@pytest.fixture()
def store() -> RecordingStore:
    return RecordingStore()


def _client_for(store: Store) -> Iterator[TestClient]:
    app.dependency_overrides[get_store] = lambda: store
    try:
        with TestClient(app, base_url="http://gateway.test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(store: RecordingStore) -> Iterator[TestClient]:
    """TestClient wired to a fresh RecordingStore per test."""
    yield from _client_for(store)


@pytest.fixture()
def client_factory():
    """Build a TestClient over an arbitrary store (e.g. a failing fake)."""
    clients = []

    def make(store: Store) -> TestClient:
        gen = _client_for(store)
        clients.append(gen)
        return next(gen)

    yield make
    for gen in clients:
        gen.close()
