"""Pytest fixtures for the task list tests."""

import pytest
from fastapi.testclient import TestClient

from tasklist.errors import StorageError
from tasklist.main import create_app
from tasklist.models import TaskFields
from tasklist.state import AppState, create_state
from tasklist.storage import MemoryStorage
from tasklist.store import TaskStore


class FailingStorage(MemoryStorage):
    """MemoryStorage whose writes fail once ``broken`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.broken = False

    def set_item(self, key: str, value: str) -> None:
        if self.broken:
            raise StorageError("quota exceeded")
        super().set_item(key, value)


@pytest.fixture
def storage() -> MemoryStorage:
    """Empty in-memory key-value storage."""
    return MemoryStorage()


@pytest.fixture
def failing_storage() -> FailingStorage:
    return FailingStorage()


@pytest.fixture
def store(storage: MemoryStorage) -> TaskStore:
    """A loaded store over empty storage."""
    task_store = TaskStore(storage)
    task_store.load()
    return task_store


@pytest.fixture
def state(storage: MemoryStorage) -> AppState:
    """Application state over empty storage."""
    return create_state(storage)


@pytest.fixture
def client(state: AppState) -> TestClient:
    """Create a test client for the API."""
    return TestClient(create_app(state))


@pytest.fixture
def milk() -> TaskFields:
    return TaskFields(title="Buy milk", due_date="2025-01-01", category="errand", description="2 litres")


@pytest.fixture
def bills() -> TaskFields:
    return TaskFields(title="Pay bills", due_date="2024-12-01", category="finance", description="")
