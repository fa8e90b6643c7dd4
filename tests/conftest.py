"""Test configuration for the worklist API."""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from worklist.main import create_app  # noqa: E402
from worklist.repositories.todo_repository import InMemoryTodoRepository  # noqa: E402


@pytest.fixture
def repository() -> InMemoryTodoRepository:
    """Fresh in-memory store for each test."""
    return InMemoryTodoRepository()


@pytest.fixture
def client(repository: InMemoryTodoRepository) -> TestClient:
    """Provide a TestClient bound to the in-memory store."""
    app = create_app(repository=repository)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
