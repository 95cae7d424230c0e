"""Project tasks into display rows and history dialogs."""

from collections.abc import Iterable

from tasklist.models import HistoryEntryView, HistoryView, Task, TaskStatus, TaskView

NO_HISTORY_MESSAGE = "No history yet."


def action_label(status: TaskStatus) -> str:
    return "Undo" if status is TaskStatus.COMPLETE else "Complete"


def project_task(task: Task) -> TaskView:
    return TaskView(
        id=task.id,
        title=task.title,
        due_date=task.due_date,
        category=task.category,
        description=task.description,
        status=task.status,
        action_label=action_label(task.status),
        css_class="complete" if task.status is TaskStatus.COMPLETE else "",
        has_history=bool(task.history),
    )


def project(tasks: Iterable[Task]) -> list[TaskView]:
    """Map ordered tasks to display rows, keeping their order."""
    return [project_task(task) for task in tasks]


def project_history(task: Task) -> HistoryView:
    """Numbered prior versions of a task, oldest first."""
    entries = [
        HistoryEntryView(
            version=index,
            label=f"Version {index} ({entry.timestamp.isoformat(sep=' ', timespec='seconds')})",
            timestamp=entry.timestamp,
            title=entry.changes.title,
            due_date=entry.changes.due_date,
            category=entry.changes.category,
            description=entry.changes.description,
            status=entry.changes.status,
        )
        for index, entry in enumerate(task.history, start=1)
    ]
    return HistoryView(
        task_id=task.id,
        heading=f"History for: {task.title}",
        entries=entries,
        message=None if entries else NO_HISTORY_MESSAGE,
    )
