"""Taskmanager - task tracking service on a generic async repository framework."""

# Core framework
from taskmanager.core import (
    Base,
    BaseManager,
    BaseRepository,
    Database,
    Entity,
    EntityIn,
    EntityOut,
    Manager,
    PaginatedResponse,
    Repository,
    SortOrder,
)

# Task feature
from taskmanager.modules.task import Task, TaskIn, TaskManager, TaskOut, TaskRepository, TaskStatus

__version__ = "0.1.0"

__all__ = [
    # Core framework
    "Database",
    "Repository",
    "BaseRepository",
    "SortOrder",
    "Manager",
    "BaseManager",
    "Base",
    "Entity",
    "EntityIn",
    "EntityOut",
    "PaginatedResponse",
    # Task feature
    "Task",
    "TaskStatus",
    "TaskIn",
    "TaskOut",
    "TaskRepository",
    "TaskManager",
    # Version
    "__version__",
]
