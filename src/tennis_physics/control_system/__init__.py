"""
Shot Control System
Swing sessions, headless live runs and collision response.
"""

from .collision_response import (
    CollisionResponseDispatcher,
    ContactEvent,
    DeformationCommand,
    DeformationState,
    NotificationSink,
    ResponseSettings,
    TargetHitState
)
from .scheduler import FrameScheduler
from .shot_session import ShotSession, save_trajectory_csv

__all__ = [
    'CollisionResponseDispatcher',
    'ContactEvent',
    'DeformationCommand',
    'DeformationState',
    'NotificationSink',
    'ResponseSettings',
    'TargetHitState',
    'FrameScheduler',
    'ShotSession',
    'save_trajectory_csv'
]
