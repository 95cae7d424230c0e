"""Edit session for the shared task form.

The form is one widget: while idle a submission creates a task, while
editing it updates the task being edited. Either way the session ends idle
with an empty form.
"""

import logging

from tasklist.models import FormState, SubmitResult, TaskFields
from tasklist.store import TaskStore

logger = logging.getLogger(__name__)


class EditSession:
    def __init__(self, store: TaskStore) -> None:
        self._store = store
        self.editing_id: str | None = None
        self.form = TaskFields()

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    def state(self) -> FormState:
        return FormState(
            editing_id=self.editing_id,
            mode="edit" if self.is_editing else "create",
            fields=self.form,
        )

    def begin_edit(self, task_id: str) -> bool:
        """Start editing a task, filling the form with its current values.

        Does nothing and returns False if the task does not exist.
        """
        task = self._store.find_by_id(task_id)
        if task is None:
            logger.debug("Cannot edit unknown task %s", task_id)
            return False
        self.editing_id = task_id
        self.form = TaskFields(
            title=task.title,
            due_date=task.due_date,
            category=task.category,
            description=task.description,
        )
        return True

    def submit(self, fields: TaskFields) -> SubmitResult:
        """Create a task when idle, or apply the edit when editing."""
        editing_id = self.editing_id
        try:
            if editing_id is None:
                return SubmitResult(action="created", task=self._store.create(fields))
            task = self._store.apply_edit(editing_id, fields)
            if task is None:
                return SubmitResult(action="ignored")
            return SubmitResult(action="updated", task=task)
        finally:
            self.cancel()

    def cancel(self) -> None:
        """Return to idle with an empty form."""
        self.editing_id = None
        self.form = TaskFields()

    def forget(self, task_id: str) -> None:
        """Drop the session if it was editing the given task."""
        if self.editing_id == task_id:
            logger.debug("Task %s under edit was removed; leaving edit mode", task_id)
            self.cancel()
