"""
Collision Response
Maps contact data from the rigid-body engine to ball deformation and
sound/score notifications.

Features:
- Deformation intensity proportional to impact speed, capped
- Single delayed snap-back instead of an eased recovery
- Score signal for target contacts above a separate threshold
- Last contact wins: a new contact overwrites intensity and restarts the decay
"""

import math
import numpy as np
from typing import List, Optional, Protocol
from dataclasses import dataclass, field

from ..physics.impact_logical import TennisPhysicsError
from .scheduler import Scheduler


COURT = "court"
RACKET = "racket"
TARGET = "target"

IMPACT = "impact"
BOUNCE = "bounce"
SCORE = "score"

UP = (0.0, 1.0, 0.0)


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class ContactEvent:
    """Contact reported by the collision solver, consumed once"""
    contact_normal: np.ndarray  # unit vector
    impact_speed: float  # m/s along the normal
    surface: str = COURT


@dataclass(frozen=True)
class DeformationCommand:
    """Squash to apply to the ball material"""
    intensity: float
    direction: np.ndarray
    decay_after: float  # seconds until the squash is reset
    generation: int


@dataclass
class ResponseSettings:
    min_impact_speed: float = 0.0  # deformation only above this (m/s)
    scale_factor: float = 0.05
    max_intensity: float = 0.4
    decay_after: float = 0.1  # s
    score_threshold: float = 1.0  # target contacts above this score (m/s)
    target_reset_after: float = 0.5  # s

    def __post_init__(self):
        for name in ("scale_factor", "max_intensity", "decay_after", "target_reset_after"):
            if not getattr(self, name) > 0:
                raise TennisPhysicsError(f"{name} must be positive, got {getattr(self, name)}")
        if self.min_impact_speed < 0 or self.score_threshold < 0:
            raise TennisPhysicsError("impact thresholds must be non-negative")


class NotificationSink(Protocol):
    def notify(self, event: str) -> None:
        ...


@dataclass
class RecordingSink:
    """Sink that keeps every notification, in order"""
    events: List[str] = field(default_factory=list)

    def notify(self, event: str) -> None:
        self.events.append(event)


class NullSink:
    def notify(self, event: str) -> None:
        pass


def _contact_direction(normal) -> np.ndarray:
    direction = np.array(normal, dtype=float).reshape(3)
    length = float(np.linalg.norm(direction))
    if not math.isfinite(length) or length == 0.0:
        return np.array(UP)
    return direction / length


# ============================================================================
# Dispatcher
# ============================================================================

class CollisionResponseDispatcher:
    """
    Turn a contact into a deformation command.

    Called synchronously from the host's collision step. Scoring and
    bounce sounds go to the injected sink; the returned command carries
    its own decay delay for the host's scheduler.
    """

    def __init__(self, sink: Optional[NotificationSink] = None,
                 settings: Optional[ResponseSettings] = None):
        self.sink = sink or NullSink()
        self.settings = settings or ResponseSettings()
        self._generation = 0

    def impact_speed(self, event: ContactEvent) -> float:
        speed = abs(float(event.impact_speed))
        return speed if math.isfinite(speed) else 0.0

    def is_score(self, event: ContactEvent) -> bool:
        return event.surface == TARGET and self.impact_speed(event) > self.settings.score_threshold

    def on_contact(self, event: ContactEvent) -> Optional[DeformationCommand]:
        speed = self.impact_speed(event)

        if self.is_score(event):
            self.sink.notify(SCORE)

        if speed <= self.settings.min_impact_speed:
            return None

        if event.surface == COURT:
            self.sink.notify(BOUNCE)

        self._generation += 1
        return DeformationCommand(
            intensity=min(max(speed * self.settings.scale_factor, 0.0), self.settings.max_intensity),
            direction=_contact_direction(event.contact_normal),
            decay_after=self.settings.decay_after,
            generation=self._generation,
        )


class DeformationState:
    """Material-side squash parameters driven by deformation commands"""

    def __init__(self):
        self.intensity = 0.0
        self.direction = np.array(UP)
        self.generation = 0

    def apply(self, command: DeformationCommand, scheduler: Optional[Scheduler] = None) -> None:
        self.intensity = command.intensity
        self.direction = command.direction.copy()
        self.generation = command.generation
        if scheduler is not None:
            scheduler.call_later(command.decay_after, lambda: self.decay(command.generation))

    def decay(self, generation: int) -> bool:
        # A newer contact owns the squash now
        if generation != self.generation:
            return False
        self.intensity = 0.0
        return True


class TargetHitState:
    """Highlight flag of a target, cleared after a fixed delay"""

    def __init__(self, reset_after: float = 0.5):
        self.reset_after = reset_after
        self.hit = False
        self._hits = 0

    def mark(self, scheduler: Optional[Scheduler] = None) -> None:
        self.hit = True
        self._hits += 1
        if scheduler is not None:
            hits = self._hits
            scheduler.call_later(self.reset_after, lambda: self._clear(hits))

    def _clear(self, hits: int) -> None:
        if hits == self._hits:
            self.hit = False
