"""API routes for todo management."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status

from ..errors import TodoNotFoundError
from ..models.todo import TodoListResponse, TodoResponse, TodoUpdate
from ..services.todo_service import TodoService
from .dependencies import get_todo_service

router = APIRouter()


@router.post("/todos", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
async def create_todo(
    payload: Any = Body(None),
    service: TodoService = Depends(get_todo_service),
) -> TodoResponse:
    """Create a todo after the current highest order."""
    todo = await service.create_todo({} if payload is None else payload)
    return TodoResponse(todo=todo)


@router.get("/todos", response_model=TodoListResponse)
async def list_todos(
    service: TodoService = Depends(get_todo_service),
) -> TodoListResponse:
    """List all todos, highest order first."""
    return TodoListResponse(todos=await service.list_todos())


@router.patch("/todos/{todo_id}")
async def update_todo(
    todo_id: str,
    todo_data: Optional[TodoUpdate] = None,
    service: TodoService = Depends(get_todo_service),
) -> Dict[str, Any]:
    """Reorder, complete or edit a todo."""
    try:
        await service.update_todo(todo_id, todo_data or TodoUpdate())
    except TodoNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    return {}


@router.delete("/todos/{todo_id}")
async def delete_todo(
    todo_id: str,
    service: TodoService = Depends(get_todo_service),
) -> Dict[str, Any]:
    """Delete a todo."""
    try:
        await service.delete_todo(todo_id)
    except TodoNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    return {}
