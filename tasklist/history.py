"""Version history of edited tasks.

Every full-form edit first records the task's pre-edit field values. Entries
are write-once and never pruned, so a task's history grows with each edit.
"""

from datetime import UTC, datetime

from tasklist.models import HistorySnapshot, Task


def snapshot(task: Task, now: datetime | None = None) -> HistorySnapshot:
    """Capture the task's current field values."""
    return HistorySnapshot(timestamp=now or datetime.now(UTC), changes=task.state())


def record_edit(task: Task, now: datetime | None = None) -> HistorySnapshot:
    """Append a snapshot of the task as it is now to its history."""
    entry = snapshot(task, now)
    # History lists are never mutated in place.
    task.history = [*task.history, entry]
    return entry
