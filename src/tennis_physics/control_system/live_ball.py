"""
Headless stand-in for the rigid-body engine's ball.

Advances the ball with the trajectory integrator once per frame, bounces
it off the court and static targets, and reports each contact as a
ContactEvent for the collision response dispatcher.
"""

import numpy as np
from typing import List, Optional, Sequence, Tuple
from dataclasses import dataclass

from ..physics.effects_simulation import BallState, TrajectoryIntegrator
from ..physics.impact_logical import BALL_RADIUS
from .collision_response import ContactEvent, COURT, TARGET


COURT_RESTITUTION = 0.7
REST_SPEED = 0.2  # slower contacts are resting contact, not impacts (m/s)


@dataclass(frozen=True)
class TargetBox:
    """Axis-aligned static target"""
    center: Tuple[float, float, float]
    size: Tuple[float, float, float] = (1.0, 1.0, 0.1)

    def closest_point(self, point: np.ndarray) -> np.ndarray:
        center = np.array(self.center)
        half = np.array(self.size) / 2
        return np.clip(point, center - half, center + half)


def default_targets() -> List[TargetBox]:
    return [
        TargetBox((0.0, 1.5, -12.0)),
        TargetBox((-3.0, 1.0, -10.0)),
        TargetBox((3.0, 2.0, -11.0)),
    ]


class SimulatedBall:
    def __init__(self, integrator: Optional[TrajectoryIntegrator] = None,
                 targets: Sequence[TargetBox] = (), restitution: float = COURT_RESTITUTION):
        self.integrator = integrator or TrajectoryIntegrator()
        self.targets = list(targets)
        self.restitution = restitution
        self._state = BallState()
        self.rotation = np.zeros(3)
        self._touching = set()

    def reset(self, state: BallState) -> None:
        self._state = state.copy()
        self.rotation = np.zeros(3)
        self._touching = set()

    def current_state(self) -> BallState:
        return self._state.copy()

    def tick(self, dt: float) -> List[ContactEvent]:
        """Advance one physics frame and return the contacts it produced"""
        state = self.integrator.step(self._state, dt)
        self.rotation = self.rotation + state.angular_velocity * dt

        events = []
        court_event = self._resolve_court(state)
        if court_event is not None:
            events.append(court_event)
        events.extend(self._resolve_targets(state))

        self._state = state
        return events

    def _resolve_court(self, state: BallState) -> Optional[ContactEvent]:
        if state.position[1] >= BALL_RADIUS or state.velocity[1] >= 0:
            return None

        impact_speed = -float(state.velocity[1])
        state.position[1] = BALL_RADIUS
        if impact_speed < REST_SPEED:
            state.velocity[1] = 0.0
            return None

        state.velocity[1] = impact_speed * self.restitution
        return ContactEvent(np.array([0.0, 1.0, 0.0]), impact_speed, COURT)

    def _resolve_targets(self, state: BallState) -> List[ContactEvent]:
        events = []
        for index, target in enumerate(self.targets):
            offset = state.position - target.closest_point(state.position)
            distance = float(np.linalg.norm(offset))

            if distance > BALL_RADIUS:
                self._touching.discard(index)
                continue
            if index in self._touching:
                continue
            self._touching.add(index)

            if distance > 0:
                normal = offset / distance
            else:
                normal = np.array([0.0, 0.0, 1.0 if state.velocity[2] < 0 else -1.0])

            approach = float(np.dot(state.velocity, normal))
            if approach < 0:
                state.velocity = state.velocity - (1 + self.restitution) * approach * normal
            events.append(ContactEvent(normal, abs(approach), TARGET))
        return events
