"""Todo service - business logic layer."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List

from ..errors import TodoNotFoundError
from ..models.todo import Todo, TodoUpdate, validate_create_payload
from ..repositories.todo_repository import TodoRepository

logger = logging.getLogger(__name__)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


class TodoService:
    """Service for todo business logic."""

    def __init__(self, repository: TodoRepository) -> None:
        self.repository = repository

    async def create_todo(self, payload: Any) -> Todo:
        """Validate ``payload`` and append a todo after the current highest order."""
        todo_data = validate_create_payload(payload)
        top = await self.repository.get_max_order()
        order = top.order + 1 if top else 1
        todo = await self.repository.create(todo_data.value, order)
        logger.info("Created todo id=%s order=%s", todo.id, todo.order)
        return todo

    async def list_todos(self) -> List[Todo]:
        """Get all todos, highest order first."""
        return await self.repository.list_by_order_desc()

    async def update_todo(self, todo_id: str, todo_data: TodoUpdate) -> Todo:
        """Reorder, complete or edit a todo.

        Moving to an order held by another todo swaps the two orders. The
        lookup and the two writes are separate store calls, so concurrent
        reorders can still leave duplicates behind.
        """
        current = await self.repository.get_by_id(todo_id)
        if current is None:
            raise TodoNotFoundError()

        if todo_data.order:
            holder = await self.repository.get_by_order(todo_data.order)
            if holder is not None and holder.id != current.id:
                holder.order = current.order
                await self.repository.save(holder)
                logger.info("Swapped todo id=%s to order=%s", holder.id, holder.order)
            current.order = todo_data.order

        if "done" in todo_data.model_fields_set:
            current.done_at = now_utc() if todo_data.done else None

        if todo_data.value:
            current.value = todo_data.value

        return await self.repository.save(current)

    async def delete_todo(self, todo_id: str) -> None:
        """Delete a todo."""
        todo = await self.repository.get_by_id(todo_id)
        if todo is None:
            raise TodoNotFoundError()
        await self.repository.delete(todo.id)
        logger.info("Deleted todo id=%s", todo.id)
