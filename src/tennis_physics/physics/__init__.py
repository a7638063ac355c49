"""
Physics Engine Module

Contains the racket impact model, Magnus lift and trajectory integration.
"""

from .impact_logical import (
    SwingParameters, ImpactResult, ShotAnalytics, SwingPreset, SwingPresets,
    TennisPhysicsError, compute_impact, compute_impact_from_swing, compute_shot_analytics,
    coefficient_of_restitution, get_parameter_ranges, kmh_to_ms, swing_delay_seconds,
    BALL_RADIUS, BALL_MASS
)

from .effects_simulation import (
    magnus_force, BallState, Trajectory, TrajectoryPoint, TrajectoryIntegrator,
    SimulationSettings
)

from .ball_control import BallController, apply_impact, launch_state

__all__ = [
    'SwingParameters', 'ImpactResult', 'ShotAnalytics', 'SwingPreset', 'SwingPresets',
    'TennisPhysicsError', 'compute_impact', 'compute_impact_from_swing', 'compute_shot_analytics',
    'coefficient_of_restitution', 'get_parameter_ranges', 'kmh_to_ms', 'swing_delay_seconds',
    'BALL_RADIUS', 'BALL_MASS',
    'magnus_force', 'BallState', 'Trajectory', 'TrajectoryPoint', 'TrajectoryIntegrator',
    'SimulationSettings',
    'BallController', 'apply_impact', 'launch_state'
]
