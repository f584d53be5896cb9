"""Exception hierarchy mapped to HTTP responses by the error handlers."""

from __future__ import annotations


class TaskManagerError(Exception):
    """Base class for errors raised by taskmanager."""

    status_code: int = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class BadRequestError(TaskManagerError):
    """Request parameters are malformed."""

    status_code = 400


class InvalidIdError(BadRequestError):
    """Entity identifier could not be parsed."""


class NotFoundError(TaskManagerError):
    """Requested entity does not exist."""

    status_code = 404
