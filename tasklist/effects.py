"""Cosmetic reactions to task events.

State changes publish events on an ``EventBus``; effects subscribe to it.
A failing effect is logged and otherwise ignored, so it can never affect
task state or persistence.
"""

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from tasklist.models import ConfettiBurst, ConfettiParticle

logger = logging.getLogger(__name__)

DEFAULT_SOUND = "complete"
DEFAULT_PARTICLE_COUNT = 20
DEFAULT_TTL_MS = 1000


@dataclass(frozen=True, slots=True)
class TaskCompleted:
    """A task transitioned from incomplete to complete."""

    task_id: str


Handler = Callable[[TaskCompleted], None]


class EventBus:
    """Synchronous publish/subscribe for task events."""

    def __init__(self) -> None:
        self._handlers: list[Handler] = []

    def subscribe(self, handler: Handler) -> None:
        self._handlers.append(handler)

    def publish(self, event: TaskCompleted) -> None:
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                logger.exception("Effect %r failed for %r", handler, event)


class AudioCue:
    """Plays a named sound when a task is completed.

    ``player`` receives the sound name; without one the cue is only logged
    and left for the client to play.
    """

    def __init__(self, sound: str = DEFAULT_SOUND, player: Callable[[str], None] | None = None) -> None:
        self.sound = sound
        self._player = player
        self.cued: list[str] = []

    def __call__(self, event: TaskCompleted) -> None:
        logger.debug("Audio cue %r for task %s", self.sound, event.task_id)
        if self._player is not None:
            self._player(self.sound)
        self.cued.append(event.task_id)


class ConfettiEffect:
    """Creates particle bursts that expire after a fixed delay."""

    def __init__(
        self,
        *,
        particle_count: int = DEFAULT_PARTICLE_COUNT,
        ttl_ms: int = DEFAULT_TTL_MS,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.particle_count = particle_count
        self.ttl_ms = ttl_ms
        self._rng = rng or random.Random()
        self._clock = clock or (lambda: datetime.now(UTC))
        self._bursts: list[ConfettiBurst] = []

    def __call__(self, event: TaskCompleted) -> None:
        now = self._clock()
        self._prune(now)
        burst = ConfettiBurst(
            task_id=event.task_id,
            particles=[
                ConfettiParticle(left=self._rng.uniform(0, 100)) for _ in range(self.particle_count)
            ],
            created_at=now,
            ttl_ms=self.ttl_ms,
        )
        self._bursts.append(burst)

    def _prune(self, now: datetime) -> None:
        self._bursts = [b for b in self._bursts if b.expires_at > now]

    def active(self) -> list[ConfettiBurst]:
        """Bursts that have not yet expired."""
        self._prune(self._clock())
        return list(self._bursts)

    def burst_for(self, task_id: str) -> ConfettiBurst | None:
        """The newest live burst for a task, if any."""
        for burst in reversed(self.active()):
            if burst.task_id == task_id:
                return burst
        return None
