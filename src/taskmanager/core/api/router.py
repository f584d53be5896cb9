"""Base class for class-based FastAPI routers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from fastapi import APIRouter


class Router(ABC):
    """Wraps an APIRouter; subclasses register their endpoints in _register_routes."""

    def __init__(self, prefix: str, tags: Sequence[str], **kwargs: Any) -> None:
        self.router = APIRouter(prefix=prefix, tags=list(tags), **kwargs)
        self._register_routes()

    @abstractmethod
    def _register_routes(self) -> None:
        """Register endpoints on self.router."""
        ...

    @classmethod
    def create(cls, prefix: str, tags: Sequence[str], **kwargs: Any) -> APIRouter:
        """Instantiate the router and return the underlying APIRouter."""
        return cls(prefix=prefix, tags=tags, **kwargs).router
