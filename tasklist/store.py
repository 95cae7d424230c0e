"""Task storage.

The collection lives in memory and is mirrored into one slot of a
key-value storage backend. Every mutation rewrites the whole slot.
"""

import logging
from uuid import uuid4

from pydantic import TypeAdapter, ValidationError

from tasklist import history
from tasklist.errors import PersistenceError, StorageError
from tasklist.models import Task, TaskFields, TaskStatus
from tasklist.storage import KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "todos"

_TASK_LIST = TypeAdapter(list[Task])


class TaskStore:
    """In-memory task collection backed by a storage slot."""

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_STORAGE_KEY) -> None:
        """Initialize an empty store; call ``load`` to read persisted tasks."""
        self._storage = storage
        self._key = key
        self._tasks: list[Task] = []

    def load(self) -> list[Task]:
        """Replace the collection with the persisted one.

        Absent or malformed data yields an empty collection. Never raises.
        """
        self._tasks = self._read()
        logger.info("Loaded %d task(s) from slot %r", len(self._tasks), self._key)
        return self.all()

    def _read(self) -> list[Task]:
        try:
            raw = self._storage.get_item(self._key)
        except StorageError:
            logger.warning("Could not read slot %r; starting empty", self._key, exc_info=True)
            return []
        if raw is None:
            return []
        try:
            tasks = _TASK_LIST.validate_json(raw)
        except ValidationError as exc:
            logger.warning(
                "Slot %r holds malformed data (%d error(s)); starting empty",
                self._key,
                exc.error_count(),
            )
            return []

        unique: list[Task] = []
        seen: set[str] = set()
        for task in tasks:
            if task.id in seen:
                logger.warning("Dropping duplicate task id %s from slot %r", task.id, self._key)
                continue
            seen.add(task.id)
            unique.append(task)
        return unique

    def dump(self) -> str:
        """Serialize the whole collection as it is written to storage."""
        return _TASK_LIST.dump_json(self._tasks, by_alias=True).decode("utf-8")

    def _persist(self) -> None:
        try:
            self._storage.set_item(self._key, self.dump())
        except StorageError as exc:
            logger.error("Persisting %d task(s) failed: %s", len(self._tasks), exc)
            raise PersistenceError(self._key) from exc

    def _new_id(self) -> str:
        task_id = uuid4().hex
        while self.find_by_id(task_id) is not None:
            task_id = uuid4().hex
        return task_id

    def all(self) -> list[Task]:
        """Return all tasks in insertion order.

        The list is a copy; the task records themselves belong to the store.
        """
        return list(self._tasks)

    def categories(self) -> list[str]:
        """Distinct non-empty categories in order of first appearance."""
        found: dict[str, None] = {}
        for task in self._tasks:
            if task.category:
                found.setdefault(task.category, None)
        return list(found)

    def find_by_id(self, task_id: str) -> Task | None:
        """Get a task by its ID, or None if not found."""
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def create(self, fields: TaskFields) -> Task:
        """Create a new incomplete task and return it."""
        task = Task(
            id=self._new_id(),
            status=TaskStatus.INCOMPLETE,
            history=[],
            **fields.model_dump(),
        )
        self._tasks.append(task)
        logger.debug("Created task %s", task.id)
        self._persist()
        return task

    def apply_edit(self, task_id: str, fields: TaskFields) -> Task | None:
        """Record the pre-edit state in history, then overwrite the form fields.

        Status is kept. Returns None, and persists nothing, if not found.
        """
        task = self.find_by_id(task_id)
        if task is None:
            logger.debug("Edit ignored for unknown task %s", task_id)
            return None

        history.record_edit(task)
        for name, value in fields.model_dump().items():
            setattr(task, name, value)
        logger.debug("Edited task %s (history length %d)", task_id, len(task.history))
        self._persist()
        return task

    def toggle_status(self, task_id: str) -> TaskStatus | None:
        """Flip a task between complete and incomplete; no history entry.

        Returns the new status, or None if not found.
        """
        task = self.find_by_id(task_id)
        if task is None:
            logger.debug("Toggle ignored for unknown task %s", task_id)
            return None

        task.status = task.status.toggled()
        logger.debug("Task %s is now %s", task_id, task.status.value)
        self._persist()
        return task.status

    def delete(self, task_id: str) -> bool:
        """Delete a task. Returns True if deleted, False if not found."""
        task = self.find_by_id(task_id)
        if task is None:
            logger.debug("Delete ignored for unknown task %s", task_id)
            return False

        self._tasks = [t for t in self._tasks if t.id != task_id]
        logger.debug("Deleted task %s", task_id)
        self._persist()
        return True
