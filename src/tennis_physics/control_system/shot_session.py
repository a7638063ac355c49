import csv, os
from dataclasses import replace
from typing import Optional, Tuple

import numpy as np

from ..physics.ball_control import BallController, apply_impact
from ..physics.effects_simulation import Trajectory, TrajectoryIntegrator
from ..physics.impact_logical import (
    ImpactResult, ShotAnalytics, SwingParameters, SwingPreset, SwingPresets,
    SWING_LOCK_EXTRA, TennisPhysicsError, compute_impact_from_swing,
    compute_shot_analytics, swing_delay_seconds
)
from .collision_response import IMPACT, NotificationSink, NullSink
from .scheduler import Scheduler


class ShotSession:
    """
    One predicted path and one live run for the current swing settings.

    The prediction is recomputed from scratch whenever settings change;
    a swing schedules the impact after the racket latency and locks the
    trigger until the follow-through is over.
    """

    def __init__(self, preset: Optional[SwingPreset] = None,
                 integrator: Optional[TrajectoryIntegrator] = None,
                 sink: Optional[NotificationSink] = None):
        self.integrator = integrator or TrajectoryIntegrator()
        self.sink = sink or NullSink()
        self.swinging = False
        self.last_impact: Optional[ImpactResult] = None
        self.last_analytics: Optional[ShotAnalytics] = None
        self.apply_preset(preset or SwingPresets.forehand())

    def apply_preset(self, preset: SwingPreset) -> None:
        self.preset = preset
        self.start_position = np.array(preset.start_position, dtype=float)

    def update_parameter(self, name: str, value: float) -> None:
        """Change one UI value (speed_kmh, face_angle, swing_path_angle, horizontal_angle, off_center_factor)"""
        if name not in ("speed_kmh", "face_angle", "swing_path_angle",
                        "horizontal_angle", "off_center_factor"):
            raise TennisPhysicsError(f"Unknown swing parameter: {name}")
        self.preset = replace(self.preset, **{name: float(value)})

    def move_ball(self, position) -> None:
        position = np.array(position, dtype=float)
        position[1] = max(position[1], 0.1)  # keep the ball above the court
        self.start_position = position

    def swing_parameters(self) -> SwingParameters:
        return self.preset.to_parameters().sanitized()

    def impact(self) -> ImpactResult:
        return compute_impact_from_swing(self.swing_parameters())

    def predicted_trajectory(self) -> Trajectory:
        impact = self.impact()
        return self.integrator.predict(self.start_position, impact.exit_velocity,
                                       impact.angular_velocity)

    def swing(self, controller: BallController, scheduler: Scheduler) -> bool:
        """
        Trigger a swing. Returns False if one is already in flight.
        """
        if self.swinging:
            return False

        self.swinging = True
        # Captured at the trigger; later slider moves do not change this shot
        params = self.swing_parameters()
        start_position = self.start_position.copy()
        delay = swing_delay_seconds(self.preset.speed_kmh)
        scheduler.call_later(delay, lambda: self.strike(controller, params, start_position))
        scheduler.call_later(delay + SWING_LOCK_EXTRA, self._unlock)
        return True

    def strike(self, controller: BallController, params: Optional[SwingParameters] = None,
               start_position=None) -> Tuple[ImpactResult, ShotAnalytics]:
        """Hit the ball now, with the current settings unless a captured swing is given"""
        self.sink.notify(IMPACT)

        params = self.swing_parameters() if params is None else params
        start_position = self.start_position if start_position is None else start_position
        impact = compute_impact_from_swing(params)
        apply_impact(controller, start_position, impact)

        self.last_impact = impact
        self.last_analytics = compute_shot_analytics(impact, params.speed)
        return impact, self.last_analytics

    def _unlock(self) -> None:
        self.swinging = False


def save_trajectory_csv(trajectory: Trajectory, filepath: str) -> str:
    """
    Save a predicted trajectory to CSV.

    Args:
        trajectory: Trajectory to write
        filepath: Output file path

    Returns:
        Full path to saved file
    """
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(filepath, 'w', newline='') as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(['time', 'x', 'y', 'z'])
        for point in trajectory:
            writer.writerow([
                f"{point.time:.3f}",
                f"{point.x:.4f}",
                f"{point.y:.4f}",
                f"{point.z:.4f}",
            ])

    return os.path.abspath(filepath)
