from .todo import (
    Todo,
    TodoCreate,
    TodoListResponse,
    TodoResponse,
    TodoUpdate,
    validate_create_payload,
)

__all__ = [
    "Todo",
    "TodoCreate",
    "TodoListResponse",
    "TodoResponse",
    "TodoUpdate",
    "validate_create_payload",
]
