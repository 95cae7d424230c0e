"""Tests for the task store and its persistence."""

import json

import pytest

from tasklist.errors import PersistenceError
from tasklist.models import TaskFields, TaskStatus
from tasklist.storage import MemoryStorage
from tasklist.store import DEFAULT_STORAGE_KEY, TaskStore


def test_load_empty_storage(store: TaskStore) -> None:
    """Test that a store over empty storage starts with no tasks."""
    assert store.all() == []


@pytest.mark.parametrize("raw", ["not json", "{\"a\": 1}", "[{\"title\": \"no id\"}]", "null"])
def test_load_malformed_storage(raw: str) -> None:
    """Test that malformed persisted data degrades to an empty collection."""
    task_store = TaskStore(MemoryStorage({DEFAULT_STORAGE_KEY: raw}))
    assert task_store.load() == []


def test_load_browser_layout() -> None:
    """Test loading records in the persisted camelCase layout."""
    raw = json.dumps([
        {
            "id": "1735689600000",
            "title": "Buy milk",
            "dueDate": "2025-01-01",
            "category": "errand",
            "description": "",
            "status": "complete",
            "history": [
                {
                    "timestamp": "2024-12-30T10:00:00.000Z",
                    "changes": {
                        "id": "1735689600000",
                        "title": "Buy mlik",
                        "dueDate": "",
                        "category": "errand",
                        "description": "",
                        "status": "incomplete",
                        "history": [],
                    },
                }
            ],
        }
    ])
    task_store = TaskStore(MemoryStorage({DEFAULT_STORAGE_KEY: raw}))
    [task] = task_store.load()
    assert task.due_date == "2025-01-01"
    assert task.status is TaskStatus.COMPLETE
    assert task.history[0].changes.title == "Buy mlik"


def test_load_drops_duplicate_ids() -> None:
    """Test that only the first record with a given id is kept."""
    raw = json.dumps([{"id": "a", "title": "first"}, {"id": "a", "title": "second"}])
    task_store = TaskStore(MemoryStorage({DEFAULT_STORAGE_KEY: raw}))
    assert [t.title for t in task_store.load()] == ["first"]


def test_create_persists_and_reloads(storage: MemoryStorage, store: TaskStore, milk: TaskFields) -> None:
    """Test that a created task survives a reload from storage."""
    created = store.create(milk)
    assert created.status is TaskStatus.INCOMPLETE
    assert created.history == []

    fresh = TaskStore(storage)
    [loaded] = fresh.load()
    assert loaded == created
    assert loaded.title == "Buy milk"
    assert loaded.due_date == "2025-01-01"
    assert loaded.category == "errand"
    assert loaded.description == "2 litres"


def test_persisted_layout_uses_camel_case(storage: MemoryStorage, store: TaskStore, milk: TaskFields) -> None:
    """Test the field names written to the storage slot."""
    store.create(milk)
    [record] = json.loads(storage.get_item(DEFAULT_STORAGE_KEY))
    assert set(record) == {"id", "title", "dueDate", "category", "description", "status", "history"}
    assert record["status"] == "incomplete"


def test_create_assigns_unique_ids(store: TaskStore) -> None:
    """Test that rapid creations never share an id."""
    ids = {store.create(TaskFields(title=str(i))).id for i in range(200)}
    assert len(ids) == 200


def test_create_accepts_empty_title(store: TaskStore) -> None:
    """Test that the store does not validate fields."""
    task = store.create(TaskFields(title="", due_date="someday"))
    assert task.title == ""
    assert task.due_date == "someday"


def test_find_by_id(store: TaskStore, milk: TaskFields) -> None:
    """Test lookup by id, including a missing id."""
    task = store.create(milk)
    assert store.find_by_id(task.id) is task
    assert store.find_by_id("missing") is None


def test_apply_edit_records_pre_edit_state(store: TaskStore, milk: TaskFields) -> None:
    """Test that one edit appends exactly the pre-edit values to history."""
    task = store.create(milk)
    store.toggle_status(task.id)

    edited = store.apply_edit(task.id, TaskFields(title="Buy oat milk", due_date="2025-01-02"))

    assert edited is task
    assert len(task.history) == 1
    changes = task.history[0].changes
    assert changes.title == "Buy milk"
    assert changes.due_date == "2025-01-01"
    assert changes.category == "errand"
    assert changes.description == "2 litres"
    assert changes.status is TaskStatus.COMPLETE
    assert task.title == "Buy oat milk"
    assert task.category == ""
    assert task.status is TaskStatus.COMPLETE


def test_apply_edit_appends_history(store: TaskStore, milk: TaskFields) -> None:
    """Test that history grows in chronological order and is not mutated in place."""
    task = store.create(milk)
    store.apply_edit(task.id, TaskFields(title="v2"))
    first_history = task.history
    store.apply_edit(task.id, TaskFields(title="v3"))

    assert [h.changes.title for h in task.history] == ["Buy milk", "v2"]
    assert len(first_history) == 1
    assert task.history[0].timestamp <= task.history[1].timestamp


def test_apply_edit_unknown_id(storage: MemoryStorage, store: TaskStore, milk: TaskFields) -> None:
    """Test that editing a missing task changes nothing."""
    store.create(milk)
    before = storage.get_item(DEFAULT_STORAGE_KEY)
    assert store.apply_edit("missing", TaskFields(title="x")) is None
    assert storage.get_item(DEFAULT_STORAGE_KEY) == before


def test_toggle_twice_restores_status(storage: MemoryStorage, store: TaskStore, milk: TaskFields) -> None:
    """Test that toggling twice round-trips status without history entries."""
    task = store.create(milk)

    assert store.toggle_status(task.id) is TaskStatus.COMPLETE
    assert json.loads(storage.get_item(DEFAULT_STORAGE_KEY))[0]["status"] == "complete"
    assert store.toggle_status(task.id) is TaskStatus.INCOMPLETE

    assert task.status is TaskStatus.INCOMPLETE
    assert task.history == []


def test_toggle_unknown_id(store: TaskStore) -> None:
    """Test that toggling a missing task is a no-op."""
    assert store.toggle_status("missing") is None


def test_delete(storage: MemoryStorage, store: TaskStore, milk: TaskFields, bills: TaskFields) -> None:
    """Test deleting a task removes it from memory and storage."""
    a = store.create(milk)
    b = store.create(bills)

    assert store.delete(a.id) is True
    assert store.all() == [b]
    assert [r["id"] for r in json.loads(storage.get_item(DEFAULT_STORAGE_KEY))] == [b.id]


def test_delete_unknown_id_keeps_serialized_form(
    storage: MemoryStorage, store: TaskStore, milk: TaskFields
) -> None:
    """Test that deleting a missing id leaves the serialized form byte-for-byte unchanged."""
    store.create(milk)
    before_slot = storage.get_item(DEFAULT_STORAGE_KEY)
    before_dump = store.dump()

    assert store.delete("missing") is False
    assert storage.get_item(DEFAULT_STORAGE_KEY) == before_slot
    assert store.dump() == before_dump


def test_all_returns_copy(store: TaskStore, milk: TaskFields) -> None:
    """Test that mutating the returned list does not affect the store."""
    store.create(milk)
    tasks = store.all()
    tasks.clear()
    assert len(store.all()) == 1


def test_categories(store: TaskStore) -> None:
    """Test distinct categories in first-appearance order."""
    for category in ["home", "", "work", "home"]:
        store.create(TaskFields(title="t", category=category))
    assert store.categories() == ["home", "work"]


def test_persistence_failure_keeps_memory(failing_storage, milk: TaskFields) -> None:
    """Test that a failed write is reported while in-memory state stays intact."""
    task_store = TaskStore(failing_storage)
    task_store.load()
    task = task_store.create(milk)
    failing_storage.broken = True

    with pytest.raises(PersistenceError):
        task_store.toggle_status(task.id)

    assert task_store.find_by_id(task.id).status is TaskStatus.COMPLETE
    assert json.loads(failing_storage.get_item(DEFAULT_STORAGE_KEY))[0]["status"] == "incomplete"


def _stored(storage) -> list[dict]:
    return json.loads(storage.get_item(DEFAULT_STORAGE_KEY))


def test_failed_edit_stays_applied_in_memory(failing_storage, milk: TaskFields) -> None:
    """Test that an edit whose write fails is kept in memory while storage holds the old record."""
    task_store = TaskStore(failing_storage)
    task_store.load()
    task = task_store.create(milk)
    failing_storage.broken = True

    with pytest.raises(PersistenceError):
        task_store.apply_edit(task.id, TaskFields(title="Buy oat milk", category="errand"))

    edited = task_store.find_by_id(task.id)
    assert edited.title == "Buy oat milk"
    assert [entry.changes.title for entry in edited.history] == ["Buy milk"]
    [record] = _stored(failing_storage)
    assert record["title"] == "Buy milk"
    assert record["history"] == []


def test_failed_create_stays_applied_in_memory(failing_storage, milk: TaskFields, bills: TaskFields) -> None:
    """Test that a created task whose write fails is kept in memory only."""
    task_store = TaskStore(failing_storage)
    task_store.load()
    first = task_store.create(milk)
    failing_storage.broken = True

    with pytest.raises(PersistenceError):
        task_store.create(bills)

    assert [t.title for t in task_store.all()] == ["Buy milk", "Pay bills"]
    assert [record["id"] for record in _stored(failing_storage)] == [first.id]


def test_failed_delete_stays_applied_in_memory(failing_storage, milk: TaskFields) -> None:
    """Test that a deleted task whose write fails is gone from memory but still stored."""
    task_store = TaskStore(failing_storage)
    task_store.load()
    task = task_store.create(milk)
    failing_storage.broken = True

    with pytest.raises(PersistenceError):
        task_store.delete(task.id)

    assert task_store.find_by_id(task.id) is None
    assert [record["id"] for record in _stored(failing_storage)] == [task.id]


def test_next_write_after_failure_stores_everything(failing_storage, milk: TaskFields, bills: TaskFields) -> None:
    """Test that the first successful write after a failure catches storage up with memory."""
    task_store = TaskStore(failing_storage)
    task_store.load()
    failing_storage.broken = True
    with pytest.raises(PersistenceError):
        task_store.create(milk)

    failing_storage.broken = False
    task_store.create(bills)

    assert [record["title"] for record in _stored(failing_storage)] == ["Buy milk", "Pay bills"]
    assert [t.title for t in TaskStore(failing_storage).load()] == ["Buy milk", "Pay bills"]
