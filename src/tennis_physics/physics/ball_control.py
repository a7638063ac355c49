"""
Ball control interface.

The physics body belongs to the rigid-body engine; this side only
computes launch states and pushes them through ``reset``.
"""

import numpy as np
from typing import Protocol

from .effects_simulation import BallState
from .impact_logical import ImpactResult


class BallController(Protocol):
    def reset(self, state: BallState) -> None:
        """Overwrite position, velocity and spin at once and clear any residual rotation"""
        ...

    def current_state(self) -> BallState:
        ...


def launch_state(start_position, impact: ImpactResult) -> BallState:
    return BallState(np.array(start_position, dtype=float), impact.exit_velocity.copy(),
                     impact.angular_velocity)


def apply_impact(controller: BallController, start_position, impact: ImpactResult) -> BallState:
    """
    Reset the ball to its launch state for an impact.

    Nothing accumulates between calls: applying the same impact twice
    leaves the controller in the same state both times.

    Returns:
        The state pushed into the controller
    """
    state = launch_state(start_position, impact)
    controller.reset(state.copy())
    return state
