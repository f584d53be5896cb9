"""Tests for the task CRUD router with a mocked manager."""

from __future__ import annotations

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from taskmanager import SortOrder, TaskIn, TaskManager, TaskOut, TaskStatus
from taskmanager.core.api import CrudPermissions, add_error_handlers
from taskmanager.modules.task import TaskRouter

NOW = datetime(2024, 6, 1, 8, 30, tzinfo=timezone.utc)


def make_task(task_id: int = 1, title: str = "Write tests", **kwargs: object) -> TaskOut:
    values: dict[str, object] = {"status": TaskStatus.TODO, "created_at": NOW, "updated_at": NOW}
    values.update(kwargs)
    return TaskOut(id=task_id, title=title, **values)  # type: ignore[arg-type]


def build_client(manager: Mock, permissions: CrudPermissions | None = None) -> TestClient:
    def manager_factory() -> TaskManager:
        return manager

    app = FastAPI()
    add_error_handlers(app)
    app.include_router(
        TaskRouter.create(
            prefix="/api/tasks",
            tags=["Tasks"],
            manager_factory=manager_factory,
            permissions=permissions,
        )
    )
    return TestClient(app)


@pytest.fixture
def manager() -> Mock:
    return Mock(spec=TaskManager)


def test_create_returns_201_with_location(manager: Mock) -> None:
    """POST creates the task and points Location at it."""
    manager.save = AsyncMock(return_value=make_task(5, due_date=date(2024, 6, 2)))
    client = build_client(manager)

    response = client.post("/api/tasks", json={"title": "Write tests", "dueDate": "2024-06-02"})

    assert response.status_code == 201
    assert response.headers["location"] == "http://testserver/api/tasks/5"
    data = response.json()
    assert data["id"] == 5
    assert data["dueDate"] == "2024-06-02"
    assert data["createdAt"] == "2024-06-01T08:30:00Z"
    assert "due_date" not in data


def test_create_ignores_client_supplied_id(manager: Mock) -> None:
    manager.save = AsyncMock(return_value=make_task(9))
    client = build_client(manager)

    response = client.post("/api/tasks", json={"id": 3, "title": "Write tests"})

    assert response.status_code == 201
    saved: TaskIn = manager.save.call_args.args[0]
    assert saved.id is None
    assert saved.title == "Write tests"


def test_create_blank_title_returns_422(manager: Mock) -> None:
    manager.save = AsyncMock()
    client = build_client(manager)

    response = client.post("/api/tasks", json={"title": "  "})

    assert response.status_code == 422
    assert "Title is required." in response.text
    manager.save.assert_not_awaited()


def test_list_returns_plain_array(manager: Mock) -> None:
    manager.find_all = AsyncMock(return_value=[make_task(1), make_task(2, title="Second")])
    client = build_client(manager)

    response = client.get("/api/tasks")

    assert response.status_code == 200
    assert [task["id"] for task in response.json()] == [1, 2]
    manager.find_all.assert_awaited_once_with(sort=[])


def test_list_with_sort(manager: Mock) -> None:
    """Sort fields arrive in camelCase and reach the manager as attribute names."""
    manager.find_all = AsyncMock(return_value=[])
    client = build_client(manager)

    response = client.get("/api/tasks", params={"sort": "dueDate,-title"})

    assert response.status_code == 200
    manager.find_all.assert_awaited_once_with(
        sort=[SortOrder("due_date"), SortOrder("title", descending=True)],
    )


def test_list_unknown_sort_field_returns_400(manager: Mock) -> None:
    manager.find_all = AsyncMock(side_effect=ValueError("Cannot sort Task by unknown field 'priority'"))
    client = build_client(manager)

    response = client.get("/api/tasks", params={"sort": "priority"})

    assert response.status_code == 400
    assert "priority" in response.json()["detail"]


def test_list_paginated_envelope(manager: Mock) -> None:
    manager.find_paginated = AsyncMock(return_value=([make_task(3), make_task(4)], 5))
    client = build_client(manager)

    response = client.get("/api/tasks", params={"page": 2, "size": 2})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 5
    assert data["page"] == 2
    assert data["size"] == 2
    assert data["pages"] == 3
    assert [task["id"] for task in data["items"]] == [3, 4]
    assert "createdAt" in data["items"][0]
    manager.find_paginated.assert_awaited_once_with(2, 2, sort=[])


def test_list_size_only_uses_first_page(manager: Mock) -> None:
    manager.find_paginated = AsyncMock(return_value=([], 0))
    client = build_client(manager)

    response = client.get("/api/tasks", params={"size": 10})

    assert response.status_code == 200
    assert response.json() == {"items": [], "total": 0, "page": 1, "size": 10, "pages": 0}


@pytest.mark.parametrize("params", [{"page": 0}, {"size": 0}, {"size": 101}, {"page": "x"}])
def test_list_invalid_pagination_returns_422(manager: Mock, params: dict[str, object]) -> None:
    client = build_client(manager)
    assert client.get("/api/tasks", params=params).status_code == 422


def test_get_by_id(manager: Mock) -> None:
    manager.find_by_id = AsyncMock(return_value=make_task(7))
    client = build_client(manager)

    response = client.get("/api/tasks/7")

    assert response.status_code == 200
    assert response.json()["id"] == 7
    manager.find_by_id.assert_awaited_once_with(7)


def test_get_missing_returns_404(manager: Mock) -> None:
    manager.find_by_id = AsyncMock(return_value=None)
    client = build_client(manager)

    response = client.get("/api/tasks/7")

    assert response.status_code == 404
    assert response.json()["detail"] == "Task with id 7 not found"


@pytest.mark.parametrize("bad_id", ["abc", "0", "-1", "1.5", "99999999999999999999"])
def test_malformed_id_returns_400(manager: Mock, bad_id: str) -> None:
    """Ids must be positive 64-bit integers."""
    manager.find_by_id = AsyncMock()
    client = build_client(manager)

    response = client.get(f"/api/tasks/{bad_id}")

    assert response.status_code == 400
    assert response.json()["detail"] == f"Invalid id '{bad_id}': must be a positive integer"
    manager.find_by_id.assert_not_awaited()


def test_update_uses_path_id(manager: Mock) -> None:
    manager.exists_by_id = AsyncMock(return_value=True)
    manager.save = AsyncMock(return_value=make_task(7, title="Renamed", status=TaskStatus.DONE))
    client = build_client(manager)

    response = client.put("/api/tasks/7", json={"id": 99, "title": "Renamed", "status": "DONE"})

    assert response.status_code == 200
    assert response.json()["status"] == "DONE"
    saved: TaskIn = manager.save.call_args.args[0]
    assert saved.id == 7


@pytest.mark.parametrize("body_id", [0, -3, "abc"])
def test_update_replaces_any_body_id(manager: Mock, body_id: object) -> None:
    """The body id is overwritten by the path id, so its value is never validated."""
    manager.exists_by_id = AsyncMock(return_value=True)
    manager.save = AsyncMock(return_value=make_task(1, title="a2"))
    client = build_client(manager)

    response = client.put("/api/tasks/1", json={"id": body_id, "title": "a2"})

    assert response.status_code == 200
    saved: TaskIn = manager.save.call_args.args[0]
    assert saved.id == 1
    assert saved.title == "a2"


def test_create_ignores_invalid_body_id(manager: Mock) -> None:
    manager.save = AsyncMock(return_value=make_task(4))
    client = build_client(manager)

    response = client.post("/api/tasks", json={"id": 0, "title": "Write tests"})

    assert response.status_code == 201
    assert manager.save.call_args.args[0].id is None


def test_update_missing_returns_404(manager: Mock) -> None:
    manager.exists_by_id = AsyncMock(return_value=False)
    manager.save = AsyncMock()
    client = build_client(manager)

    response = client.put("/api/tasks/7", json={"title": "Renamed"})

    assert response.status_code == 404
    manager.save.assert_not_awaited()


def test_update_invalid_body_returns_422(manager: Mock) -> None:
    manager.exists_by_id = AsyncMock(return_value=True)
    client = build_client(manager)

    response = client.put("/api/tasks/7", json={"title": "ok", "status": "BLOCKED"})

    assert response.status_code == 422


def test_delete_returns_204(manager: Mock) -> None:
    manager.exists_by_id = AsyncMock(return_value=True)
    manager.delete_by_id = AsyncMock(return_value=None)
    client = build_client(manager)

    response = client.delete("/api/tasks/7")

    assert response.status_code == 204
    assert response.content == b""
    manager.delete_by_id.assert_awaited_once_with(7)


def test_delete_missing_returns_404(manager: Mock) -> None:
    manager.exists_by_id = AsyncMock(return_value=False)
    manager.delete_by_id = AsyncMock()
    client = build_client(manager)

    response = client.delete("/api/tasks/7")

    assert response.status_code == 404
    manager.delete_by_id.assert_not_awaited()


def test_permissions_disable_routes(manager: Mock) -> None:
    """Disabled operations are not routed."""
    manager.find_all = AsyncMock(return_value=[])
    client = build_client(manager, permissions=CrudPermissions(create=False, delete=False))

    assert client.get("/api/tasks").status_code == 200
    assert client.post("/api/tasks", json={"title": "x"}).status_code == 405
    assert client.delete("/api/tasks/1").status_code == 405
