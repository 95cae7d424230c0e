"""Application state: one container for everything a user action touches.

Each public method on ``AppState`` is one user action. Mutations go through
the store (which persists), and completion effects are published on the
event bus after the state change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from tasklist.config import Settings, get_settings
from tasklist.effects import AudioCue, ConfettiEffect, EventBus, TaskCompleted
from tasklist.models import (
    Celebration,
    FormState,
    HistoryView,
    SortKey,
    StatusFilter,
    SubmitResult,
    TaskFields,
    TaskStatus,
    TaskView,
    ToggleResult,
    ViewCriteria,
)
from tasklist.render import project, project_history
from tasklist.session import EditSession
from tasklist.storage import JsonFileStorage, KeyValueStorage
from tasklist.store import DEFAULT_STORAGE_KEY, TaskStore
from tasklist.view import derive

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    store: TaskStore
    session: EditSession
    bus: EventBus
    audio: AudioCue
    confetti: ConfettiEffect
    criteria: ViewCriteria = field(default_factory=ViewCriteria)

    # ---- form ----
    def form(self) -> FormState:
        return self.session.state()

    def submit_form(self, fields: TaskFields) -> SubmitResult:
        result = self.session.submit(fields)
        logger.info("Form submitted: %s", result.action)
        return result

    def begin_edit(self, task_id: str) -> FormState:
        self.session.begin_edit(task_id)
        return self.session.state()

    def cancel_edit(self) -> FormState:
        self.session.cancel()
        return self.session.state()

    # ---- per-task actions ----
    def toggle(self, task_id: str) -> ToggleResult:
        status = self.store.toggle_status(task_id)
        if status is not TaskStatus.COMPLETE:
            return ToggleResult(id=task_id, status=status)

        cued = len(self.audio.cued)
        self.bus.publish(TaskCompleted(task_id))
        celebration = Celebration(
            sound=self.audio.sound if len(self.audio.cued) > cued else None,
            confetti=self.confetti.burst_for(task_id),
        )
        return ToggleResult(id=task_id, status=status, celebration=celebration)

    def delete(self, task_id: str) -> bool:
        deleted = self.store.delete(task_id)
        if deleted:
            self.session.forget(task_id)
        return deleted

    def history(self, task_id: str) -> HistoryView | None:
        task = self.store.find_by_id(task_id)
        if task is None:
            return None
        return project_history(task)

    # ---- view criteria ----
    def update_criteria(self, **changes: object) -> ViewCriteria:
        self.criteria = self.criteria.model_copy(update=changes)
        return self.criteria

    def set_criteria(self, criteria: ViewCriteria) -> ViewCriteria:
        self.criteria = criteria
        return self.criteria

    def set_search(self, text: str) -> ViewCriteria:
        return self.update_criteria(search_text=text)

    def set_status_filter(self, status_filter: StatusFilter) -> ViewCriteria:
        return self.update_criteria(status_filter=status_filter)

    def set_category_filter(self, category: str) -> ViewCriteria:
        return self.update_criteria(category_filter=category)

    def sort_by(self, sort_key: SortKey) -> ViewCriteria:
        return self.update_criteria(sort_key=sort_key)

    def visible(self, criteria: ViewCriteria | None = None) -> list[TaskView]:
        """Render the tasks that pass ``criteria``, or the current criteria."""
        return project(derive(self.store.all(), criteria or self.criteria))


def create_state(
    storage: KeyValueStorage,
    *,
    storage_key: str = DEFAULT_STORAGE_KEY,
    audio: AudioCue | None = None,
    confetti: ConfettiEffect | None = None,
) -> AppState:
    """Load the store from ``storage`` and wire the session and effects."""
    store = TaskStore(storage, storage_key)
    store.load()

    audio = audio or AudioCue()
    confetti = confetti or ConfettiEffect()
    bus = EventBus()
    bus.subscribe(audio)
    bus.subscribe(confetti)

    return AppState(
        store=store,
        session=EditSession(store),
        bus=bus,
        audio=audio,
        confetti=confetti,
    )


def create_initial_state(settings: Settings | None = None) -> AppState:
    """Create application state backed by the configured storage file."""
    settings = settings or get_settings()
    logger.info("Using storage %s (slot %r)", settings.storage_path, settings.storage_key)
    return create_state(
        JsonFileStorage(settings.storage_path),
        storage_key=settings.storage_key,
        audio=AudioCue(settings.completion_sound),
        confetti=ConfettiEffect(
            particle_count=settings.confetti_count,
            ttl_ms=settings.confetti_ttl_ms,
        ),
    )
