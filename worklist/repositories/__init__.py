from .todo_repository import InMemoryTodoRepository, MongoTodoRepository, TodoRepository

__all__ = ["InMemoryTodoRepository", "MongoTodoRepository", "TodoRepository"]
