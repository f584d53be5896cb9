"""Task manager."""

from __future__ import annotations

from taskmanager.core.manager import BaseManager

from .models import Task
from .repository import TaskRepository
from .schemas import TaskIn, TaskOut


class TaskManager(BaseManager[Task, TaskIn, TaskOut, int]):
    """Manager for Task entities."""

    def __init__(self, repo: TaskRepository) -> None:
        """Initialize task manager with repository."""
        super().__init__(repo, Task, TaskOut)
        self.repo: TaskRepository = repo
