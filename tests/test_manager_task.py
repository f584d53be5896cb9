"""Task manager tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date

import pytest
from structlog.testing import capture_logs

from taskmanager import Database, SortOrder, TaskIn, TaskManager, TaskOut, TaskRepository, TaskStatus


@pytest.fixture
async def manager() -> AsyncGenerator[TaskManager, None]:
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.init()
    async with db.session() as session:
        yield TaskManager(TaskRepository(session))
    await db.dispose()


async def test_save_without_id_inserts(manager: TaskManager) -> None:
    created = await manager.save(TaskIn(title="Buy milk", due_date=date(2024, 6, 1)))

    assert isinstance(created, TaskOut)
    assert created.id > 0
    assert created.status is TaskStatus.TODO
    assert created.due_date == date(2024, 6, 1)
    assert created.created_at.tzinfo is not None
    assert await manager.count() == 1


async def test_save_with_existing_id_replaces_fields(manager: TaskManager) -> None:
    """Saving with a known id is a full update, not a second row."""
    created = await manager.save(TaskIn(title="Draft", description="first pass"))

    updated = await manager.save(TaskIn(id=created.id, title="Final", status=TaskStatus.DONE))

    assert updated.id == created.id
    assert updated.title == "Final"
    assert updated.description is None
    assert updated.status is TaskStatus.DONE
    assert updated.created_at == created.created_at
    assert updated.updated_at >= created.updated_at
    assert await manager.count() == 1


async def test_save_with_unknown_id_inserts_with_that_id(manager: TaskManager) -> None:
    created = await manager.save(TaskIn(id=42, title="Explicit"))

    assert created.id == 42
    assert await manager.exists_by_id(42) is True


async def test_save_all(manager: TaskManager) -> None:
    saved = await manager.save_all([TaskIn(title="a"), TaskIn(title="b")])

    assert [task.title for task in saved] == ["a", "b"]
    assert len({task.id for task in saved}) == 2


async def test_find_operations(manager: TaskManager) -> None:
    a = await manager.save(TaskIn(title="alpha"))
    b = await manager.save(TaskIn(title="beta"))

    assert (await manager.find_by_id(a.id)) == a
    assert await manager.find_by_id(a.id + b.id + 100) is None
    assert [task.title for task in await manager.find_all(sort=[SortOrder("title", descending=True)])] == [
        "beta",
        "alpha",
    ]
    assert [task.id for task in await manager.find_all_by_id([b.id])] == [b.id]

    items, total = await manager.find_paginated(2, 1)
    assert total == 2
    assert [task.id for task in items] == [b.id]


async def test_delete_operations(manager: TaskManager) -> None:
    a = await manager.save(TaskIn(title="a"))
    b = await manager.save(TaskIn(title="b"))
    c = await manager.save(TaskIn(title="c"))

    await manager.delete_by_id(a.id)
    assert await manager.find_by_id(a.id) is None

    await manager.delete_all_by_id([b.id])
    assert [task.id for task in await manager.find_all()] == [c.id]

    await manager.delete_all()
    assert await manager.count() == 0


async def test_mutations_are_logged(manager: TaskManager) -> None:
    with capture_logs() as logs:
        created = await manager.save(TaskIn(title="logged"))
        await manager.delete_by_id(created.id)

    events = [(entry["event"], entry.get("id")) for entry in logs]
    assert ("entity.saved", created.id) in events
    assert ("entity.deleted", created.id) in events
    assert all(entry.get("entity") == "Task" for entry in logs if entry["event"].startswith("entity."))
