"""Todo repository - data access layer."""

from __future__ import annotations

import abc
import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING

from ..models.todo import Todo

logger = logging.getLogger(__name__)


class TodoRepository(abc.ABC):
    """Persistence contract for todo records."""

    @abc.abstractmethod
    async def create(self, value: str, order: int) -> Todo:
        """Insert a new todo with ``doneAt`` unset."""

    @abc.abstractmethod
    async def get_by_id(self, todo_id: str) -> Optional[Todo]:
        """Return the todo with ``todo_id`` or ``None``."""

    @abc.abstractmethod
    async def get_by_order(self, order: int) -> Optional[Todo]:
        """Return a todo currently holding ``order`` or ``None``."""

    @abc.abstractmethod
    async def get_max_order(self) -> Optional[Todo]:
        """Return the todo with the highest ``order`` or ``None`` when empty."""

    @abc.abstractmethod
    async def list_by_order_desc(self) -> List[Todo]:
        """Return every todo, highest ``order`` first."""

    @abc.abstractmethod
    async def save(self, todo: Todo) -> Todo:
        """Persist the mutable fields of an existing todo."""

    @abc.abstractmethod
    async def delete(self, todo_id: str) -> bool:
        """Remove a todo; ``False`` when nothing was deleted."""


class InMemoryTodoRepository(TodoRepository):
    """Repository for todo data access with in-memory storage."""

    def __init__(self) -> None:
        self._todos: Dict[str, Todo] = {}

    async def create(self, value: str, order: int) -> Todo:
        todo = Todo(id=str(ObjectId()), value=value, order=order, done_at=None)
        self._todos[todo.id] = todo
        return todo.model_copy()

    async def get_by_id(self, todo_id: str) -> Optional[Todo]:
        todo = self._todos.get(todo_id)
        return todo.model_copy() if todo else None

    async def get_by_order(self, order: int) -> Optional[Todo]:
        for todo in self._todos.values():
            if todo.order == order:
                return todo.model_copy()
        return None

    async def get_max_order(self) -> Optional[Todo]:
        if not self._todos:
            return None
        return max(self._todos.values(), key=lambda todo: todo.order).model_copy()

    async def list_by_order_desc(self) -> List[Todo]:
        todos = sorted(self._todos.values(), key=lambda todo: todo.order, reverse=True)
        return [todo.model_copy() for todo in todos]

    async def save(self, todo: Todo) -> Todo:
        if todo.id not in self._todos:
            raise KeyError(f"Todo with id '{todo.id}' not found")
        self._todos[todo.id] = todo.model_copy()
        return todo

    async def delete(self, todo_id: str) -> bool:
        if todo_id in self._todos:
            del self._todos[todo_id]
            return True
        return False

    def clear(self) -> None:
        """Clear all stored todos (testing helper)."""
        self._todos.clear()


def _coerce_object_id(todo_id: str) -> Optional[ObjectId]:
    if isinstance(todo_id, ObjectId):
        return todo_id
    try:
        return ObjectId(todo_id)
    except (InvalidId, TypeError):
        return None


def _document_to_todo(document: Optional[Mapping[str, Any]]) -> Optional[Todo]:
    if document is None:
        return None
    done_at: Optional[datetime] = document.get("doneAt")
    return Todo(
        id=str(document["_id"]),
        value=document["value"],
        order=document["order"],
        done_at=done_at,
    )


class MongoTodoRepository(TodoRepository):
    """Repository backed by a motor collection."""

    def __init__(self, collection: Any) -> None:
        self.collection = collection

    async def create(self, value: str, order: int) -> Todo:
        document = {"value": value, "order": order, "doneAt": None}
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return _document_to_todo(document)

    async def get_by_id(self, todo_id: str) -> Optional[Todo]:
        object_id = _coerce_object_id(todo_id)
        if object_id is None:
            logger.info("Rejected malformed todo id %r", todo_id)
            return None
        return _document_to_todo(await self.collection.find_one({"_id": object_id}))

    async def get_by_order(self, order: int) -> Optional[Todo]:
        return _document_to_todo(await self.collection.find_one({"order": order}))

    async def get_max_order(self) -> Optional[Todo]:
        document = await self.collection.find_one({}, sort=[("order", DESCENDING)])
        return _document_to_todo(document)

    async def list_by_order_desc(self) -> List[Todo]:
        cursor = self.collection.find({}).sort("order", DESCENDING)
        return [_document_to_todo(document) async for document in cursor]

    async def save(self, todo: Todo) -> Todo:
        await self.collection.update_one(
            {"_id": ObjectId(todo.id)},
            {"$set": {"value": todo.value, "order": todo.order, "doneAt": todo.done_at}},
        )
        return todo

    async def delete(self, todo_id: str) -> bool:
        object_id = _coerce_object_id(todo_id)
        if object_id is None:
            return False
        result = await self.collection.delete_one({"_id": object_id})
        return result.deleted_count > 0
