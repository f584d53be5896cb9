"""Task repository for database access."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.core.repository import BaseRepository

from .models import Task


class TaskRepository(BaseRepository[Task, int]):
    """Repository for Task entities; inherits the generic CRUD and paging operations unchanged."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize task repository with database session."""
        super().__init__(session, Task)
