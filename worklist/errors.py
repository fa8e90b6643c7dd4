"""Error types raised by the todo service."""

from __future__ import annotations

NOT_FOUND_MESSAGE = "Data Not Found"
SERVER_ERROR_MESSAGE = "Error Occurred in Server"


class TodoError(Exception):
    """Base class for todo errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TodoValidationError(TodoError):
    """Rejected input: missing field, wrong type or length."""


class TodoNotFoundError(TodoError):
    """The referenced todo does not exist."""

    def __init__(self, message: str = NOT_FOUND_MESSAGE) -> None:
        super().__init__(message)
