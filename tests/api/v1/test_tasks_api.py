"""
Tests for the task endpoints.

Tests cover:
- GET/POST /api/v1/tasks
- GET/PUT/DELETE /api/v1/tasks/{task_id}
- Ownership isolation between users
"""

from typing import Any, Callable
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

TASKS_URL = "/api/v1/tasks"


@pytest.fixture
def alice(
    register_user: Callable[..., dict[str, Any]],
    headers_for: Callable[[str], dict[str, str]],
) -> dict[str, str]:
    """Auth headers for a freshly registered user."""
    return headers_for(register_user(email="alice@example.com")["token"])


@pytest.fixture
def mallory(
    register_user: Callable[..., dict[str, Any]],
    headers_for: Callable[[str], dict[str, str]],
) -> dict[str, str]:
    """Auth headers for a second, unrelated user."""
    return headers_for(register_user(email="mallory@example.com", name="Mallory")["token"])


def create_task(client: TestClient, headers: dict[str, str], **fields: Any) -> dict[str, Any]:
    response = client.post(TASKS_URL, json={"title": "Task", **fields}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestTaskScenario:
    """End-to-end flow over HTTP."""

    def test_full_flow(self, client: TestClient) -> None:
        """Test register, login, list, create, update, delete and a final 404."""
        register = client.post(
            "/api/v1/auth/register",
            json={"name": "Alice", "email": "alice@example.com", "password": "secret123"},
        )
        assert register.status_code == 201

        login = client.post(
            "/api/v1/auth/login",
            json={"email": "alice@example.com", "password": "secret123"},
        )
        assert login.status_code == 200
        headers = {"Authorization": f"Bearer {login.json()['data']['token']}"}

        empty = client.get(TASKS_URL, headers=headers)
        assert empty.status_code == 200
        assert empty.json() == {"success": True, "data": []}

        created = client.post(
            TASKS_URL,
            json={"title": "Write docs", "description": "API reference", "priority": "high"},
            headers=headers,
        )
        assert created.status_code == 201
        task = created.json()["data"]
        assert task["status"] == "todo"
        assert task["priority"] == "high"
        assert task["ownerId"] == register.json()["data"]["user"]["id"]
        assert {"id", "title", "description", "createdAt", "updatedAt"} <= set(task)

        updated = client.put(
            f"{TASKS_URL}/{task['id']}", json={"status": "done"}, headers=headers
        )
        assert updated.status_code == 200
        assert updated.json()["data"]["status"] == "done"
        assert updated.json()["data"]["title"] == "Write docs"

        deleted = client.delete(f"{TASKS_URL}/{task['id']}", headers=headers)
        assert deleted.status_code == 200
        assert deleted.json() == {"success": True, "message": "Task deleted successfully"}

        gone = client.get(f"{TASKS_URL}/{task['id']}", headers=headers)
        assert gone.status_code == 404
        assert gone.json()["error"] == "NOT_FOUND"
        assert gone.json()["message"] == "Task not found"


class TestListTasks:
    """Tests for GET /api/v1/tasks."""

    def test_requires_token(self, client: TestClient) -> None:
        """Test listing without a token is unauthorized."""
        response = client.get(TASKS_URL)
        assert response.status_code == 401
        assert response.json()["error"] == "UNAUTHORIZED"

    def test_pagination_and_filters(self, client: TestClient, alice: dict[str, str]) -> None:
        """Test limit/offset and equality filters are applied."""
        for i in range(1, 6):
            create_task(client, alice, title=f"Task {i}", priority="high" if i % 2 else "low")

        page = client.get(TASKS_URL, params={"limit": 2, "offset": 0}, headers=alice)
        high = client.get(TASKS_URL, params={"priority": "high"}, headers=alice)

        assert page.status_code == 200
        assert len(page.json()["data"]) == 2
        assert {t["title"] for t in high.json()["data"]} == {"Task 1", "Task 3", "Task 5"}

    @pytest.mark.parametrize(
        "params",
        [{"limit": 0}, {"limit": 1001}, {"offset": -1}, {"status": "blocked"}, {"limit": "many"}],
    )
    def test_invalid_query(
        self, client: TestClient, alice: dict[str, str], params: dict[str, Any]
    ) -> None:
        """Test invalid pagination or filter values are a 400."""
        response = client.get(TASKS_URL, params=params, headers=alice)
        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"


class TestCreateTask:
    """Tests for POST /api/v1/tasks."""

    def test_defaults(self, client: TestClient, alice: dict[str, str]) -> None:
        """Test omitted fields get their defaults."""
        task = create_task(client, alice, title="Minimal")

        assert task["description"] == ""
        assert task["status"] == "todo"
        assert task["priority"] == "medium"
        assert task["createdAt"] == task["updatedAt"]

    def test_blank_title(self, client: TestClient, alice: dict[str, str]) -> None:
        """Test a whitespace-only title is rejected."""
        response = client.post(TASKS_URL, json={"title": "   "}, headers=alice)

        assert response.status_code == 400
        assert response.json()["field"] == "title"

    def test_created_task_is_readable(self, client: TestClient, alice: dict[str, str]) -> None:
        """Test create then get returns the same task."""
        task = create_task(client, alice, title="Readable", description="body")

        response = client.get(f"{TASKS_URL}/{task['id']}", headers=alice)

        assert response.status_code == 200
        assert response.json()["data"] == task


class TestUpdateTask:
    """Tests for PUT /api/v1/tasks/{task_id}."""

    def test_empty_patch(self, client: TestClient, alice: dict[str, str]) -> None:
        """Test a patch without recognized fields is rejected."""
        task = create_task(client, alice)

        response = client.put(f"{TASKS_URL}/{task['id']}", json={"color": "red"}, headers=alice)

        assert response.status_code == 400
        assert response.json()["message"] == "No valid fields to update"

    def test_null_value(self, client: TestClient, alice: dict[str, str]) -> None:
        """Test an explicit null is rejected."""
        task = create_task(client, alice)

        response = client.put(f"{TASKS_URL}/{task['id']}", json={"title": None}, headers=alice)

        assert response.status_code == 400
        assert response.json()["field"] == "title"

    def test_owner_cannot_be_changed(
        self, client: TestClient, alice: dict[str, str]
    ) -> None:
        """Test ownerId in a patch is ignored."""
        task = create_task(client, alice)

        response = client.put(
            f"{TASKS_URL}/{task['id']}",
            json={"title": "Renamed", "ownerId": str(uuid4())},
            headers=alice,
        )

        assert response.status_code == 200
        assert response.json()["data"]["ownerId"] == task["ownerId"]


class TestTaskIds:
    """Tests for unknown and malformed task IDs."""

    @pytest.mark.parametrize("task_id", ["not-a-uuid", "12345", str(uuid4())])
    def test_unknown_ids_are_not_found(
        self, client: TestClient, alice: dict[str, str], task_id: str
    ) -> None:
        """Test malformed and unknown IDs are all reported as missing tasks."""
        for method in ("GET", "DELETE"):
            response = client.request(method, f"{TASKS_URL}/{task_id}", headers=alice)
            assert response.status_code == 404
            assert response.json()["error"] == "NOT_FOUND"

        response = client.put(f"{TASKS_URL}/{task_id}", json={"title": "x"}, headers=alice)
        assert response.status_code == 404


class TestOwnershipIsolation:
    """A task owned by someone else behaves exactly like a missing one."""

    def test_cross_user_access(
        self, client: TestClient, alice: dict[str, str], mallory: dict[str, str]
    ) -> None:
        """Test another user gets 404 on get, update and delete."""
        task = create_task(client, alice, title="Private")
        url = f"{TASKS_URL}/{task['id']}"

        missing = client.get(f"{TASKS_URL}/{uuid4()}", headers=mallory)
        foreign = client.get(url, headers=mallory)
        assert foreign.status_code == 404
        assert foreign.json()["message"] == missing.json()["message"]

        assert client.put(url, json={"title": "Hacked"}, headers=mallory).status_code == 404
        assert client.delete(url, headers=mallory).status_code == 404

        assert client.get(TASKS_URL, headers=mallory).json()["data"] == []
        still_there = client.get(url, headers=alice)
        assert still_there.json()["data"]["title"] == "Private"
