"""
Impact Logical - Racket/Ball Impact Model

This module converts racket kinematics (speed, face angle, swing path,
lateral aim, off-center distance) into the ball's launch conditions:
exit velocity, spin rate and energy transfer efficiency.

The model is a simplified Brody-style impact: restitution drops as the
contact point leaves the sweet spot, the mismatch between where the face
points and where it travels is split between ball speed (cosine) and
spin (sine), and the launch angle sits partway between swing path and
face normal.

Frame convention: y is up, forward travel is -z, lateral is x.
"""

import math
from typing import Dict, Tuple
from dataclasses import dataclass, field, replace

import numpy as np


# Physical constants
BALL_RADIUS = 0.033  # Tennis ball radius (m)
BALL_MASS = 0.057  # Tennis ball mass (kg)
AIR_DENSITY = 1.225  # Sea level air density (kg/m³)
BALL_AREA = math.pi * BALL_RADIUS**2  # Cross-sectional area (m²)
G = 9.81  # Gravity (m/s²)

# Impact model constants
BASE_COR = 0.85  # Racket restitution at the sweet spot
COR_OFF_CENTER_LOSS = 0.5  # Fraction of COR lost at the frame edge
LAUNCH_BLEND = 0.4  # Share of face angle in the launch angle (string friction)
SPIN_FACTOR = 500.0  # rpm per m/s of tangential racket speed
SPIN_OFF_CENTER_LOSS = 0.3  # Fraction of spin lost at the frame edge

# Topspin rotates about -x for forward (-z) travel
TOPSPIN_AXIS = (-1.0, 0.0, 0.0)

KMH_PER_MS = 3.6

DEFAULT_START_POSITION = (0.0, 1.0, 11.0)
SERVE_START_POSITION = (0.0, 2.8, 11.0)


class TennisPhysicsError(Exception):
    """Custom exception for tennis physics configuration errors"""
    pass


def validate_positive(value: float, name: str) -> None:
    """Validate that a parameter is positive"""
    if not value > 0:
        raise TennisPhysicsError(f"{name} must be positive, got {value}")


def kmh_to_ms(speed_kmh: float) -> float:
    return speed_kmh / KMH_PER_MS


def rpm_to_rad_per_s(rpm: float) -> float:
    return rpm * 2 * math.pi / 60


def _finite_or(value: float, default: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return default
    return value if math.isfinite(value) else default


def rotate_about_vertical(vector: np.ndarray, horizontal_angle: float) -> np.ndarray:
    """
    Rotate a vector about the vertical (+y) axis by the lateral aim.

    A positive horizontal angle turns forward (-z) travel toward +x
    (to the right as seen from behind the hitter).

    Args:
        vector: 3D vector to rotate
        horizontal_angle: Lateral aim in degrees

    Returns:
        New rotated vector
    """
    h = math.radians(horizontal_angle)
    cos_h, sin_h = math.cos(h), math.sin(h)
    x, y, z = vector
    return np.array([x * cos_h - z * sin_h, y, x * sin_h + z * cos_h])


# ============================================================================
# DATA MODEL
# ============================================================================

@dataclass(frozen=True)
class SwingParameters:
    """Racket kinematics for a single shot (m/s and degrees)"""
    speed: float
    face_angle: float = 0.0
    swing_path_angle: float = 0.0
    horizontal_angle: float = 0.0
    off_center_factor: float = 0.0

    @classmethod
    def from_ui(cls, speed_kmh: float, face_angle: float = 0.0,
                swing_path_angle: float = 0.0, horizontal_angle: float = 0.0,
                off_center_factor: float = 0.0) -> "SwingParameters":
        """Build parameters from UI values (racket speed in km/h)"""
        return cls(kmh_to_ms(_finite_or(speed_kmh, 0.0)), face_angle, swing_path_angle,
                   horizontal_angle, off_center_factor)

    def sanitized(self) -> "SwingParameters":
        """
        Return a copy that is safe to simulate.

        Non-finite inputs fall back to neutral values and the off-center
        factor is clamped into [0, 1]; a bad slider value must never stop
        the frame loop.
        """
        return replace(
            self,
            speed=max(0.0, _finite_or(self.speed, 0.0)),
            face_angle=_finite_or(self.face_angle, 0.0),
            swing_path_angle=_finite_or(self.swing_path_angle, 0.0),
            horizontal_angle=_finite_or(self.horizontal_angle, 0.0),
            off_center_factor=min(1.0, max(0.0, _finite_or(self.off_center_factor, 0.0))),
        )


@dataclass(frozen=True)
class ImpactResult:
    """Launch conditions produced by a racket impact"""
    exit_velocity: np.ndarray  # m/s
    spin_rate_rpm: float  # positive = topspin
    energy_efficiency_percent: float  # 0-100
    spin_axis: np.ndarray = field(default_factory=lambda: np.array(TOPSPIN_AXIS))

    @property
    def angular_velocity(self) -> np.ndarray:
        """Angular velocity vector (rad/s), always coupled to the travel direction"""
        return self.spin_axis * rpm_to_rad_per_s(self.spin_rate_rpm)


@dataclass(frozen=True)
class ShotAnalytics:
    """Read-out shown after a swing"""
    exit_speed_kmh: int
    spin_rpm: int
    lift_force: float  # N


# ============================================================================
# IMPACT MODEL
# ============================================================================

def coefficient_of_restitution(off_center_factor: float) -> float:
    """Racket COR, degrading linearly from the sweet spot to the frame"""
    return BASE_COR * (1 - off_center_factor * COR_OFF_CENTER_LOSS)


def compute_impact(speed: float, face_angle: float, swing_path_angle: float,
                   off_center_factor: float = 0.0, horizontal_angle: float = 0.0) -> ImpactResult:
    """
    Calculate ball launch conditions from racket kinematics.

    Args:
        speed: Racket head speed in m/s
        face_angle: Vertical tilt of the racket face in degrees
        swing_path_angle: Vertical direction of racket travel in degrees
        off_center_factor: Contact distance from the sweet spot (0 = center, 1 = edge)
        horizontal_angle: Lateral aim in degrees

    Returns:
        ImpactResult with exit velocity, spin rate (rpm) and efficiency (%)
    """
    params = SwingParameters(speed, face_angle, swing_path_angle,
                             horizontal_angle, off_center_factor).sanitized()

    cor = coefficient_of_restitution(params.off_center_factor)

    face_rad = math.radians(params.face_angle)
    path_rad = math.radians(params.swing_path_angle)
    mismatch = path_rad - face_rad

    # Face/path mismatch bleeds ball speed into spin
    launch_speed = params.speed * (1 + cor) * math.cos(mismatch)
    launch_angle = path_rad + (face_rad - path_rad) * LAUNCH_BLEND

    if params.face_angle == params.swing_path_angle:
        spin_rpm = 0.0
    else:
        tangential_speed = params.speed * math.sin(mismatch)
        spin_rpm = tangential_speed * SPIN_FACTOR * (1 - params.off_center_factor * SPIN_OFF_CENTER_LOSS)

    planar_velocity = np.array([
        0.0,
        launch_speed * math.sin(launch_angle),
        -launch_speed * math.cos(launch_angle),
    ])

    # Velocity and spin axis turn together so the Magnus force stays consistent
    return ImpactResult(
        exit_velocity=rotate_about_vertical(planar_velocity, params.horizontal_angle),
        spin_rate_rpm=spin_rpm,
        energy_efficiency_percent=min(100.0, max(0.0, cor * 100)),
        spin_axis=rotate_about_vertical(np.array(TOPSPIN_AXIS), params.horizontal_angle),
    )


def compute_impact_from_swing(params: SwingParameters) -> ImpactResult:
    return compute_impact(params.speed, params.face_angle, params.swing_path_angle,
                          params.off_center_factor, params.horizontal_angle)


def compute_shot_analytics(impact: ImpactResult, racket_speed: float) -> ShotAnalytics:
    """
    Summarize an impact for display.

    The lift estimate uses a spin-ratio lift coefficient (1.5 * r * |w| / v)
    against the racket speed, floored at 1 m/s.
    """
    omega = float(np.linalg.norm(impact.angular_velocity))
    lift_coefficient = 1.5 * (BALL_RADIUS * omega) / max(racket_speed, 1.0)
    force = 0.5 * AIR_DENSITY * racket_speed**2 * BALL_AREA * abs(lift_coefficient)

    return ShotAnalytics(
        exit_speed_kmh=int(round(float(np.linalg.norm(impact.exit_velocity)) * KMH_PER_MS)),
        spin_rpm=int(round(impact.spin_rate_rpm)),
        lift_force=round(force, 2),
    )


def swing_delay_seconds(speed_kmh: float) -> float:
    """Latency between triggering a swing and the ball being struck"""
    return max(150.0, 400.0 - _finite_or(speed_kmh, 0.0) * 2) / 1000.0


SWING_LOCK_EXTRA = 0.4  # Trigger stays disabled this long after impact (s)


# ============================================================================
# PRESETS AND RANGES
# ============================================================================

@dataclass(frozen=True)
class SwingPreset:
    name: str
    speed_kmh: float
    face_angle: float
    swing_path_angle: float
    horizontal_angle: float
    off_center_factor: float
    start_position: Tuple[float, float, float] = DEFAULT_START_POSITION

    def to_parameters(self) -> SwingParameters:
        return SwingParameters.from_ui(self.speed_kmh, self.face_angle, self.swing_path_angle,
                                       self.horizontal_angle, self.off_center_factor)


class SwingPresets:
    @staticmethod
    def forehand() -> SwingPreset:
        return SwingPreset("Forehand", 90.0, -5.0, 20.0, 0.0, 0.1)

    @staticmethod
    def backhand() -> SwingPreset:
        return SwingPreset("Backhand", 80.0, -2.0, 15.0, 0.0, 0.0)

    @staticmethod
    def volley() -> SwingPreset:
        return SwingPreset("Volley", 50.0, 5.0, -10.0, 0.0, 0.0)

    @staticmethod
    def serve() -> SwingPreset:
        return SwingPreset("Serve", 120.0, -15.0, -5.0, 0.0, 0.2, SERVE_START_POSITION)

    @staticmethod
    def all() -> Dict[str, SwingPreset]:
        presets = [SwingPresets.forehand(), SwingPresets.backhand(),
                   SwingPresets.volley(), SwingPresets.serve()]
        return {preset.name.lower(): preset for preset in presets}

    @staticmethod
    def by_name(name: str) -> SwingPreset:
        presets = SwingPresets.all()
        key = name.lower().strip()
        if key not in presets:
            raise TennisPhysicsError(f"Unknown swing preset: {name}")
        return presets[key]


def get_parameter_ranges() -> Dict[str, Tuple[float, float]]:
    """
    Get the UI slider ranges for swing parameters.

    Returns:
        Dictionary mapping parameter name to (min, max)
    """
    return {
        "speed_kmh": (30.0, 150.0),
        "face_angle": (-20.0, 20.0),        # degrees
        "swing_path_angle": (-20.0, 60.0),  # degrees
        "horizontal_angle": (-30.0, 30.0),  # degrees
        "off_center_factor": (0.0, 1.0),
    }
