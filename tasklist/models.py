"""Pydantic models for the task list.

Persisted and wire field names are camelCase (``dueDate``) to match the
stored layout; Python attributes are snake_case.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ALL_CATEGORIES = "all"


class TaskStatus(str, Enum):
    """Completion status of a task."""

    INCOMPLETE = "incomplete"
    COMPLETE = "complete"

    def toggled(self) -> "TaskStatus":
        if self is TaskStatus.COMPLETE:
            return TaskStatus.INCOMPLETE
        return TaskStatus.COMPLETE


class StatusFilter(str, Enum):
    ALL = "all"
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"


class SortKey(str, Enum):
    NONE = "none"
    DATE = "date"
    TITLE = "title"


class TaskFields(BaseModel):
    """Values accepted from the task form.

    Status and history are never settable here. Nothing is validated:
    an empty title or a free-form due date is stored as given.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(default="", description="Display title")
    due_date: str = Field(default="", alias="dueDate", description="Free-form due date")
    category: str = Field(default="", description="Free-form category label")
    description: str = Field(default="", description="Free-form notes")


class TaskState(TaskFields):
    """Field values of a task at one point in time."""

    model_config = ConfigDict(frozen=True)

    status: TaskStatus = TaskStatus.INCOMPLETE


class HistorySnapshot(BaseModel):
    """A task's field values as they were immediately before an edit."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(..., description="When the snapshot was taken")
    changes: TaskState = Field(..., description="Pre-edit field values")


class Task(BaseModel):
    """A task record, the only persisted entity."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Opaque unique identifier")
    title: str = ""
    due_date: str = Field(default="", alias="dueDate")
    category: str = ""
    description: str = ""
    status: TaskStatus = TaskStatus.INCOMPLETE
    history: list[HistorySnapshot] = Field(default_factory=list)

    def state(self) -> TaskState:
        """Copy of the current field values, without id and history."""
        return TaskState(
            title=self.title,
            due_date=self.due_date,
            category=self.category,
            description=self.description,
            status=self.status,
        )


class ViewCriteria(BaseModel):
    """Current search, filter and sort selection."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    search_text: str = Field(default="", alias="searchText")
    status_filter: StatusFilter = Field(default=StatusFilter.ALL, alias="statusFilter")
    category_filter: str = Field(default=ALL_CATEGORIES, alias="categoryFilter")
    sort_key: SortKey = Field(default=SortKey.NONE, alias="sortKey")


class TaskView(BaseModel):
    """One rendered row of the task list."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    due_date: str = Field(alias="dueDate")
    category: str
    description: str
    status: TaskStatus
    action_label: Literal["Complete", "Undo"] = Field(alias="actionLabel")
    css_class: str = Field(alias="cssClass")
    has_history: bool = Field(alias="hasHistory")


class HistoryEntryView(BaseModel):
    """One numbered version in a task's history dialog."""

    model_config = ConfigDict(populate_by_name=True)

    version: int
    label: str
    timestamp: datetime
    title: str
    due_date: str = Field(alias="dueDate")
    category: str
    description: str
    status: TaskStatus


class HistoryView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    task_id: str = Field(alias="taskId")
    heading: str
    entries: list[HistoryEntryView]
    message: str | None = None


class FormState(BaseModel):
    """The shared task form and which task, if any, it is editing."""

    model_config = ConfigDict(populate_by_name=True)

    editing_id: str | None = Field(default=None, alias="editingId")
    mode: Literal["create", "edit"] = "create"
    fields: TaskFields = Field(default_factory=TaskFields)


class SubmitResult(BaseModel):
    """Outcome of submitting the task form."""

    action: Literal["created", "updated", "ignored"]
    task: Task | None = None


class ConfettiParticle(BaseModel):
    left: float = Field(..., ge=0, le=100, description="Horizontal position in percent")


class ConfettiBurst(BaseModel):
    """A transient particle burst attached to a completed task."""

    model_config = ConfigDict(populate_by_name=True)

    task_id: str = Field(alias="taskId")
    particles: list[ConfettiParticle]
    created_at: datetime = Field(alias="createdAt")
    ttl_ms: int = Field(alias="ttlMs")

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(milliseconds=self.ttl_ms)


class Celebration(BaseModel):
    """Cosmetic effects fired when a task becomes complete."""

    sound: str | None = None
    confetti: ConfettiBurst | None = None


class ToggleResult(BaseModel):
    id: str
    status: TaskStatus | None = None
    celebration: Celebration | None = None


class HealthResponse(BaseModel):
    """Response from the health check endpoint."""

    status: str = "healthy"
    version: str = "1.0.0"
