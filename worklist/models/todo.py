"""Todo data models using Pydantic."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from ..errors import TodoValidationError

VALUE_MIN_LENGTH = 1
VALUE_MAX_LENGTH = 50


class TodoCreate(BaseModel):
    """Payload for creating a todo."""

    value: StrictStr = Field(..., min_length=VALUE_MIN_LENGTH, max_length=VALUE_MAX_LENGTH)

    model_config = ConfigDict(extra="forbid")


class TodoUpdate(BaseModel):
    """Payload for reordering, completing or editing a todo.

    Every field is optional and ``order`` 0 counts as absent. ``done`` is
    tracked through ``model_fields_set`` so that an explicit ``false`` or
    ``null`` clears the completion time.
    """

    order: Optional[int] = None
    done: Optional[bool] = None
    value: Optional[StrictStr] = Field(None, max_length=VALUE_MAX_LENGTH)


class Todo(BaseModel):
    """A stored todo record."""

    id: str
    value: str
    order: int
    done_at: Optional[datetime] = Field(None, alias="doneAt")

    model_config = ConfigDict(populate_by_name=True)


class TodoResponse(BaseModel):
    todo: Todo


class TodoListResponse(BaseModel):
    todos: List[Todo] = Field(default_factory=list)


def format_validation_message(errors: List[dict]) -> str:
    """Render the first pydantic error as ``"field" reason``."""
    if not errors:
        return "Invalid input"
    error = errors[0]
    location = [part for part in error.get("loc", ()) if isinstance(part, str) and part != "body"]
    message = error.get("msg", "Invalid input")
    if not location:
        return message
    return f"\"{'.'.join(location)}\" {message}"


def validate_create_payload(payload: Any) -> TodoCreate:
    """Validate a raw creation payload and return the normalized model."""
    if not isinstance(payload, dict):
        raise TodoValidationError("Request body must be a JSON object")
    try:
        return TodoCreate.model_validate(payload)
    except ValidationError as exc:
        raise TodoValidationError(format_validation_message(exc.errors())) from exc
