"""Task feature - persisted to-do items with CRUD endpoints."""

from .manager import TaskManager
from .models import Task, TaskStatus
from .repository import TaskRepository
from .router import TaskRouter
from .schemas import TaskIn, TaskOut

__all__ = [
    "Task",
    "TaskStatus",
    "TaskIn",
    "TaskOut",
    "TaskRepository",
    "TaskManager",
    "TaskRouter",
]
