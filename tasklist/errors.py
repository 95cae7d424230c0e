"""Exception types raised by the task list."""


class TaskListError(Exception):
    """Base class for task list errors."""


class StorageError(TaskListError):
    """A key-value storage backend could not be read or written."""


class PersistenceError(TaskListError):
    """The task collection could not be written to storage.

    The in-memory collection stays authoritative for the running session.
    """

    def __init__(self, key: str, message: str = "Storage write failed") -> None:
        super().__init__(f"{message} (slot {key!r})")
        self.key = key
