"""Core framework - database, repository, manager and base schemas."""

from .database import Database
from .exceptions import BadRequestError, InvalidIdError, NotFoundError, TaskManagerError
from .manager import BaseManager, Manager
from .models import Base, Entity
from .repository import BaseRepository, Repository, SortOrder
from .schemas import EntityIn, EntityOut, PaginatedResponse
from .types import UTCDateTime

__all__ = [
    "Database",
    "Repository",
    "BaseRepository",
    "SortOrder",
    "Manager",
    "BaseManager",
    "Base",
    "Entity",
    "UTCDateTime",
    "EntityIn",
    "EntityOut",
    "PaginatedResponse",
    "TaskManagerError",
    "NotFoundError",
    "BadRequestError",
    "InvalidIdError",
]
