import logging
from datetime import datetime

from fastapi.testclient import TestClient

from task_tracker.main import app
from task_tracker.store import get_store

from .fakes import BrokenStore, FailingStore


def assert_task_shape(task: dict):
    assert set(task) == {"id", "title", "completed", "created_at"}
    assert isinstance(task["id"], str) and task["id"]
    assert isinstance(task["title"], str)
    assert isinstance(task["completed"], bool)
    datetime.fromisoformat(task["created_at"])


def create(client, title):
    res = client.post("/tasks", json={"title": title})
    assert res.status_code == 201
    return res.json()


class TestHealth:
    def test_health_check(self, client):
        res = client.get("/")
        assert res.status_code == 200
        data = res.json()
        assert data["message"] == "Healthy"
        assert data["backend"] in ("memory", "sqlite", "rest")


class TestCreate:
    def test_create_returns_pending_task(self, client):
        res = client.post("/tasks", json={"title": "Buy milk"})
        assert res.status_code == 201
        task = res.json()
        assert_task_shape(task)
        assert task["title"] == "Buy milk"
        assert task["completed"] is False

    def test_create_trims_title(self, client):
        task = create(client, "  Walk the dog \n")
        assert task["title"] == "Walk the dog"

    def test_create_ignores_client_supplied_fields(self, client):
        res = client.post(
            "/tasks",
            json={"title": "Mine", "id": "chosen", "completed": True, "created_at": "2000-01-01T00:00:00"},
        )
        assert res.status_code == 201
        task = res.json()
        assert task["id"] != "chosen"
        assert task["completed"] is False
        assert not task["created_at"].startswith("2000")

    def test_whitespace_title_rejected_before_store(self, client, store):
        res = client.post("/tasks", json={"title": "   "})
        assert res.status_code == 400
        assert res.json() == {"error": "title required"}
        assert "create" not in store.calls
        assert client.get("/tasks").json() == []

    def test_missing_and_null_title_rejected(self, client, store):
        for body in ({}, {"title": None}, {"title": ""}):
            res = client.post("/tasks", json=body)
            assert res.status_code == 400
            assert res.json()["error"] == "title required"
        assert store.calls == []

    def test_missing_or_null_body_rejected(self, client, store):
        no_body = client.post("/tasks")
        null_body = client.post("/tasks", content="null", headers={"content-type": "application/json"})
        for res in (no_body, null_body):
            assert res.status_code == 400
            assert res.json() == {"error": "title required"}
        assert store.calls == []

    def test_non_string_title_is_validation_error(self, client):
        res = client.post("/tasks", json={"title": 42})
        assert res.status_code == 422
        body = res.json()
        assert body["error"] == "ValidationError"
        assert body["message"] == "Request validation failed"
        assert isinstance(body["detail"], list)


class TestList:
    def test_empty(self, client):
        res = client.get("/tasks")
        assert res.status_code == 200
        assert res.json() == []

    def test_newest_first(self, client):
        titles = [f"Task {i}" for i in range(5)]
        for t in titles:
            create(client, t)
        items = client.get("/tasks").json()
        assert [t["title"] for t in items] == list(reversed(titles))
        created = [datetime.fromisoformat(t["created_at"]) for t in items]
        assert created == sorted(created, reverse=True)


class TestUpdate:
    def test_toggle_changes_only_completed(self, client):
        task = create(client, "Read book")
        res = client.patch(f"/tasks/{task['id']}", json={"completed": True})
        assert res.status_code == 200
        updated = res.json()
        assert updated == {**task, "completed": True}

        res_back = client.patch(f"/tasks/{task['id']}", json={"completed": False})
        assert res_back.json() == task

    def test_title_in_patch_body_is_ignored(self, client):
        task = create(client, "Original")
        res = client.patch(f"/tasks/{task['id']}", json={"completed": True, "title": "Changed"})
        assert res.status_code == 200
        assert res.json()["title"] == "Original"

    def test_unknown_id_is_404(self, client):
        res = client.patch("/tasks/does-not-exist", json={"completed": True})
        assert res.status_code == 404
        assert res.json() == {"error": "task not found"}

    def test_completed_must_be_boolean(self, client):
        task = create(client, "Strict")
        for body in ({}, {"completed": "yes"}, {"completed": 1}):
            res = client.patch(f"/tasks/{task['id']}", json=body)
            assert res.status_code == 422
            assert res.json()["error"] == "ValidationError"


class TestDelete:
    def test_delete_then_gone(self, client):
        task = create(client, "ToDelete")
        res = client.delete(f"/tasks/{task['id']}")
        assert res.status_code == 200
        assert res.json() == {"success": True}
        assert client.get("/tasks").json() == []

    def test_delete_twice_leaves_same_state(self, client):
        keep = create(client, "Keep")
        gone = create(client, "Gone")
        assert client.delete(f"/tasks/{gone['id']}").status_code == 200
        after_first = client.get("/tasks").json()

        res_again = client.delete(f"/tasks/{gone['id']}")
        assert res_again.status_code == 404
        assert res_again.json() == {"error": "task not found"}
        assert client.get("/tasks").json() == after_first == [keep]


class TestScenario:
    def test_insert_toggle_delete(self, client):
        a = create(client, "A")
        b = create(client, "B")
        assert [t["title"] for t in client.get("/tasks").json()] == ["B", "A"]

        client.patch(f"/tasks/{b['id']}", json={"completed": True})
        listed = client.get("/tasks").json()
        assert [(t["title"], t["completed"]) for t in listed] == [("B", True), ("A", False)]

        client.delete(f"/tasks/{a['id']}")
        listed = client.get("/tasks").json()
        assert [(t["title"], t["completed"]) for t in listed] == [("B", True)]


class TestFailureBoundary:
    def test_store_errors_surface_message(self, client_factory):
        client = client_factory(FailingStore("relation \"tasks\" does not exist"))
        expected = {"error": "relation \"tasks\" does not exist"}
        for res in (
            client.get("/tasks"),
            client.post("/tasks", json={"title": "x"}),
            client.patch("/tasks/1", json={"completed": True}),
            client.delete("/tasks/1"),
        ):
            assert res.status_code == 500
            assert res.json() == expected

    def test_unexpected_errors_use_fixed_messages(self, client_factory):
        client = client_factory(BrokenStore())
        assert client.get("/tasks").json() == {"error": "Failed to fetch tasks"}
        assert client.post("/tasks", json={"title": "x"}).json() == {"error": "Failed to create task"}
        assert client.patch("/tasks/1", json={"completed": True}).json() == {"error": "Failed to update task"}
        res = client.delete("/tasks/1")
        assert res.status_code == 500
        assert res.json() == {"error": "Failed to delete task"}

    def test_validation_still_runs_before_failing_store(self, client_factory):
        client = client_factory(FailingStore())
        res = client.post("/tasks", json={"title": " "})
        assert res.status_code == 400
        assert res.json() == {"error": "title required"}

    def test_store_errors_are_logged_as_warnings(self, client_factory, caplog):
        client = client_factory(FailingStore("disk full"))
        with caplog.at_level(logging.WARNING, logger="task_tracker"):
            client.get("/tasks")
        records = [r for r in caplog.records if r.name == "task_tracker.errors"]
        assert [(r.levelno, r.getMessage()) for r in records] == [(logging.WARNING, "Store error: disk full")]

    def test_unexpected_errors_are_logged_with_traceback(self, client_factory, caplog):
        client = client_factory(BrokenStore())
        with caplog.at_level(logging.WARNING, logger="task_tracker"):
            client.post("/tasks", json={"title": "x"})
        records = [r for r in caplog.records if r.name == "task_tracker.errors"]
        assert len(records) == 1
        assert records[0].levelno == logging.ERROR
        assert records[0].exc_info is not None
        assert isinstance(records[0].exc_info[1], RuntimeError)


class TestUnhandledErrors:
    def test_misconfigured_store_becomes_internal_error(self, monkeypatch, caplog):
        monkeypatch.setenv("STORE_BACKEND", "rest")
        monkeypatch.delenv("STORE_URL", raising=False)
        get_store.cache_clear()
        try:
            with TestClient(app, raise_server_exceptions=False) as client:
                with caplog.at_level(logging.ERROR, logger="task_tracker"):
                    res = client.get("/tasks")
        finally:
            get_store.cache_clear()
        assert res.status_code == 500
        assert res.json() == {"error": "Internal server error"}
        assert any(r.name == "task_tracker.main" and r.levelno == logging.ERROR for r in caplog.records)
