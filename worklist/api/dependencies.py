"""API dependencies for todo management."""

from fastapi import Depends, Request

from ..repositories.todo_repository import TodoRepository
from ..services.todo_service import TodoService


def get_todo_repository(request: Request) -> TodoRepository:
    """Dependency for getting the repository attached to the running app."""
    return request.app.state.todo_repository


def get_todo_service(
    repository: TodoRepository = Depends(get_todo_repository),
) -> TodoService:
    """Dependency for getting todo service instance."""
    return TodoService(repository)
