"""Tests for the /api/tasks endpoints and task ownership."""

import pytest
from fastapi.testclient import TestClient

from app.main import app
from tests.helpers import auth_headers, create_task


# ============================================================================
# CRUD
# ============================================================================

class TestTaskCrud:
    """Tests for create/get/list/update/delete of the owner's tasks."""

    def test_create_then_get(self, client: TestClient, ana: dict):
        """A new task is not completed and keeps title and description."""
        created = create_task(client, ana["token"], "Buy milk", "Two litres")

        response = client.get(f"/api/tasks/{created['id']}", headers=auth_headers(ana["token"]))

        assert response.status_code == 200
        task = response.json()["task"]
        assert task["title"] == "Buy milk"
        assert task["description"] == "Two litres"
        assert task["completed"] is False
        assert task["user_id"] == ana["user"]["id"]

    def test_create_ignores_completed_flag(self, client: TestClient, ana: dict):
        """A completed flag sent on create is ignored."""
        response = client.post(
            "/api/tasks",
            json={"title": "Already done?", "completed": True},
            headers=auth_headers(ana["token"]),
        )

        assert response.status_code == 201
        assert response.json()["task"]["completed"] is False
        assert response.json()["success"] == "Task created successfully"

    def test_list_in_insertion_order(self, client: TestClient, ana: dict):
        """Tasks are listed in the order they were created."""
        titles = ["first", "second", "third"]
        for title in titles:
            create_task(client, ana["token"], title)

        response = client.get("/api/tasks", headers=auth_headers(ana["token"]))

        assert response.status_code == 200
        assert [t["title"] for t in response.json()["tasks"]] == titles

    def test_list_completed_filter(self, client: TestClient, ana: dict):
        """The completed query parameter filters the list."""
        headers = auth_headers(ana["token"])
        done = create_task(client, ana["token"], "done")
        create_task(client, ana["token"], "open")
        client.put(f"/api/tasks/{done['id']}", json={"completed": True}, headers=headers)

        completed = client.get("/api/tasks?completed=true", headers=headers).json()["tasks"]
        pending = client.get("/api/tasks?completed=false", headers=headers).json()["tasks"]

        assert [t["title"] for t in completed] == ["done"]
        assert [t["title"] for t in pending] == ["open"]

    def test_partial_update_only_touches_given_fields(self, client: TestClient, ana: dict):
        """Fields missing from the body keep their stored values."""
        created = create_task(client, ana["token"], "Buy milk", "Two litres")

        response = client.put(
            f"/api/tasks/{created['id']}",
            json={"title": "Buy oat milk"},
            headers=auth_headers(ana["token"]),
        )

        assert response.status_code == 200
        task = response.json()["task"]
        assert task["title"] == "Buy oat milk"
        assert task["description"] == "Two litres"
        assert task["completed"] is False

    def test_completed_round_trip(self, client: TestClient, ana: dict):
        """Completing and un-completing restores the task except updated_at."""
        headers = auth_headers(ana["token"])
        created = create_task(client, ana["token"], "Round trip")

        client.put(f"/api/tasks/{created['id']}", json={"completed": True}, headers=headers)
        response = client.put(
            f"/api/tasks/{created['id']}", json={"completed": False}, headers=headers
        )

        final = response.json()["task"]
        final.pop("updated_at")
        initial = dict(created)
        initial.pop("updated_at")
        assert final == initial

    def test_description_can_be_cleared(self, client: TestClient, ana: dict):
        """An explicit null description clears it."""
        created = create_task(client, ana["token"], "Task", "details")

        response = client.put(
            f"/api/tasks/{created['id']}",
            json={"description": None},
            headers=auth_headers(ana["token"]),
        )

        assert response.status_code == 200
        assert response.json()["task"]["description"] is None

    def test_delete_removes_from_list(self, client: TestClient, ana: dict):
        """A deleted task disappears from the list and cannot be fetched."""
        headers = auth_headers(ana["token"])
        keep = create_task(client, ana["token"], "keep")
        gone = create_task(client, ana["token"], "gone")

        response = client.delete(f"/api/tasks/{gone['id']}", headers=headers)

        assert response.status_code == 200
        assert response.json() == {"success": "Task deleted successfully"}
        ids = [t["id"] for t in client.get("/api/tasks", headers=headers).json()["tasks"]]
        assert ids == [keep["id"]]
        assert client.get(f"/api/tasks/{gone['id']}", headers=headers).status_code == 404

    def test_unknown_id_is_not_found(self, client: TestClient, ana: dict):
        """GET, PUT and DELETE of a missing id all answer 404."""
        headers = auth_headers(ana["token"])

        assert client.get("/api/tasks/9999", headers=headers).status_code == 404
        assert client.put("/api/tasks/9999", json={"title": "x"}, headers=headers).status_code == 404
        assert client.delete("/api/tasks/9999", headers=headers).status_code == 404
        assert client.get("/api/tasks/9999", headers=headers).json() == {"message": "Task not found"}

    @pytest.mark.parametrize("task_id", ["99999999999999999999", str(2**31), "0", "-1"])
    def test_out_of_range_id_is_not_found(self, client: TestClient, ana: dict, task_id: str):
        """Ids no row can have answer 404 instead of failing in the database."""
        headers = auth_headers(ana["token"])
        url = f"/api/tasks/{task_id}"

        for response in (
            client.get(url, headers=headers),
            client.put(url, json={"completed": True}, headers=headers),
            client.delete(url, headers=headers),
        ):
            assert response.status_code == 404
            assert response.json() == {"message": "Task not found"}

    @pytest.mark.parametrize("task_id", ["abc", "1.5"])
    def test_non_numeric_id_is_not_found(self, client: TestClient, ana: dict, task_id: str):
        """A path segment that is not an integer names no task."""
        headers = auth_headers(ana["token"])
        url = f"/api/tasks/{task_id}"

        assert client.get(url, headers=headers).status_code == 404
        assert client.put(url, json={"title": "x"}, headers=headers).status_code == 404
        assert client.delete(url, headers=headers).json() == {"message": "Task not found"}

    def test_non_numeric_id_still_requires_authentication(self, client: TestClient):
        """Authentication is checked before the id is looked at."""
        assert client.get("/api/tasks/abc").status_code == 401

    def test_title_and_description_are_trimmed(self, client: TestClient, ana: dict):
        """Surrounding whitespace is dropped and a blank description stored as null."""
        headers = auth_headers(ana["token"])

        created = create_task(client, ana["token"], "   Buy milk   ", "  Two litres \n")
        assert created["title"] == "Buy milk"
        assert created["description"] == "Two litres"

        response = client.put(
            f"/api/tasks/{created['id']}",
            json={"title": "  Buy oat milk ", "description": "   "},
            headers=headers,
        )
        task = response.json()["task"]
        assert task["title"] == "Buy oat milk"
        assert task["description"] is None


# ============================================================================
# Validation
# ============================================================================

class TestTaskValidation:
    """Tests for title and completed constraints."""

    @pytest.mark.parametrize("payload", [{}, {"title": ""}, {"title": "   "}, {"title": None}])
    def test_create_requires_title(self, client: TestClient, ana: dict, payload: dict):
        """Missing, empty, blank and null titles are rejected."""
        response = client.post("/api/tasks", json=payload, headers=auth_headers(ana["token"]))

        assert response.status_code == 422
        assert response.json()["errors"]["title"] == ["The title field is required."]

    def test_title_length_limit(self, client: TestClient, ana: dict):
        """Titles of 255 characters are accepted, 256 are not."""
        headers = auth_headers(ana["token"])

        too_long = client.post("/api/tasks", json={"title": "x" * 256}, headers=headers)
        at_limit = client.post("/api/tasks", json={"title": "x" * 255}, headers=headers)

        assert too_long.status_code == 422
        assert "255" in too_long.json()["errors"]["title"][0]
        assert at_limit.status_code == 201

    def test_title_limit_ignores_surrounding_whitespace(self, client: TestClient, ana: dict):
        """Padding around a 255 character title does not count towards the limit."""
        response = client.post(
            "/api/tasks",
            json={"title": "  " + "x" * 255 + "  "},
            headers=auth_headers(ana["token"]),
        )

        assert response.status_code == 201
        assert response.json()["task"]["title"] == "x" * 255

    def test_update_rejects_blank_title(self, client: TestClient, ana: dict):
        """A blank title on update is rejected and the stored title kept."""
        created = create_task(client, ana["token"], "Keep me")

        response = client.put(
            f"/api/tasks/{created['id']}",
            json={"title": "  "},
            headers=auth_headers(ana["token"]),
        )

        assert response.status_code == 422
        stored = client.get(f"/api/tasks/{created['id']}", headers=auth_headers(ana["token"]))
        assert stored.json()["task"]["title"] == "Keep me"

    def test_update_requires_boolean_completed(self, client: TestClient, ana: dict):
        """Non-boolean completed values are rejected."""
        created = create_task(client, ana["token"], "Strict")

        response = client.put(
            f"/api/tasks/{created['id']}",
            json={"completed": "yes"},
            headers=auth_headers(ana["token"]),
        )

        assert response.status_code == 422
        assert "completed" in response.json()["errors"]

    def test_update_rejects_null_completed(self, client: TestClient, ana: dict):
        """completed may be omitted but not null."""
        created = create_task(client, ana["token"], "Strict")

        response = client.put(
            f"/api/tasks/{created['id']}",
            json={"completed": None},
            headers=auth_headers(ana["token"]),
        )

        assert response.status_code == 422
        assert response.json()["errors"]["completed"] == ["The completed field is required."]


# ============================================================================
# Ownership
# ============================================================================

class TestTaskOwnership:
    """Another user's tasks behave exactly like missing ones."""

    def test_other_user_cannot_read_update_or_delete(
        self, client: TestClient, ana: dict, bob: dict
    ):
        """Another user's task answers 404 and stays unchanged."""
        task = create_task(client, ana["token"], "Ana's task")
        bob_headers = auth_headers(bob["token"])

        assert client.get(f"/api/tasks/{task['id']}", headers=bob_headers).status_code == 404
        assert client.put(
            f"/api/tasks/{task['id']}", json={"completed": True}, headers=bob_headers
        ).status_code == 404
        assert client.delete(f"/api/tasks/{task['id']}", headers=bob_headers).status_code == 404

        stored = client.get(f"/api/tasks/{task['id']}", headers=auth_headers(ana["token"]))
        assert stored.json()["task"]["completed"] is False

    def test_ownership_checked_before_validation(self, client: TestClient, ana: dict, bob: dict):
        """A foreign id with an invalid title is still reported as not found."""
        task = create_task(client, ana["token"], "Ana's task")

        response = client.put(
            f"/api/tasks/{task['id']}", json={"title": ""}, headers=auth_headers(bob["token"])
        )

        assert response.status_code == 404

    def test_lists_are_scoped(self, client: TestClient, ana: dict, bob: dict):
        """Each user only lists their own tasks."""
        create_task(client, ana["token"], "Ana's task")
        create_task(client, bob["token"], "Bob's task")

        ana_tasks = client.get("/api/tasks", headers=auth_headers(ana["token"])).json()["tasks"]
        bob_tasks = client.get("/api/tasks", headers=auth_headers(bob["token"])).json()["tasks"]

        assert [t["title"] for t in ana_tasks] == ["Ana's task"]
        assert [t["title"] for t in bob_tasks] == ["Bob's task"]

    def test_requires_authentication(self, client: TestClient):
        """Requests without a token are unauthenticated."""
        assert client.get("/api/tasks").status_code == 401
        assert client.post("/api/tasks", json={"title": "x"}).status_code == 401

    def test_revoked_token_loses_access(self, client: TestClient, ana: dict):
        """A token stops working after logout."""
        headers = auth_headers(ana["token"])
        client.post("/api/logout", headers=headers)

        assert client.get("/api/tasks", headers=headers).status_code == 401


# ============================================================================
# Scenario and unexpected errors
# ============================================================================

def test_full_scenario(client: TestClient):
    """register -> login -> create -> complete -> delete."""
    registered = client.post(
        "/api/register",
        json={
            "name": "Ana",
            "email": "ana@x.com",
            "password": "secret123",
            "password_confirmation": "secret123",
        },
    )
    assert registered.status_code == 201

    logged_in = client.post("/api/login", json={"email": "ana@x.com", "password": "secret123"})
    assert logged_in.status_code == 200
    assert logged_in.json()["user"]["id"] == registered.json()["user"]["id"]
    headers = auth_headers(logged_in.json()["token"])

    created = client.post("/api/tasks", json={"title": "Buy milk"}, headers=headers)
    task = created.json()["task"]
    assert task["completed"] is False

    updated = client.put(f"/api/tasks/{task['id']}", json={"completed": True}, headers=headers)
    assert updated.json()["task"]["completed"] is True

    assert client.delete(f"/api/tasks/{task['id']}", headers=headers).status_code == 200
    remaining = client.get("/api/tasks", headers=headers).json()["tasks"]
    assert task["id"] not in [t["id"] for t in remaining]


def test_unexpected_error_hides_details(override_db, ana: dict, monkeypatch):
    """Internal failures return a generic message, never the exception text."""

    def explode(*args, **kwargs):
        raise RuntimeError("database password is hunter2")

    monkeypatch.setattr("app.api.tasks.list_tasks", explode)
    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/api/tasks", headers=auth_headers(ana["token"]))

    assert response.status_code == 500
    assert response.json() == {"message": "Server error"}
    assert "hunter2" not in response.text
