import math
import numpy as np
from typing import Iterator, Optional, Tuple
from dataclasses import dataclass, field
from .impact_logical import (
    AIR_DENSITY, BALL_AREA, BALL_MASS, BALL_RADIUS, G, validate_positive, TennisPhysicsError
)


MAGNUS_LIFT_COEFFICIENT = 0.0004
MAGNUS_SCALE = MAGNUS_LIFT_COEFFICIENT * AIR_DENSITY * BALL_AREA
COURT_BOUNDS = 50.0  # |x| or |z| beyond this ends a prediction (m)
MIN_MAGNUS_SPEED_SQ = 1e-12

GROUND = "ground"
BOUNDS = "bounds"
MAX_STEPS = "max_steps"


def _vec(value) -> np.ndarray:
    return np.array(value, dtype=float).reshape(3)


def magnus_force(velocity: np.ndarray, angular_velocity: np.ndarray) -> np.ndarray:
    """
    Spin-induced lift: F = Cl * rho * A * (w x v).

    A ball at rest gets the zero vector rather than an error, so the
    function is safe to call on every tick.
    """
    velocity = _vec(velocity)
    if float(np.dot(velocity, velocity)) < MIN_MAGNUS_SPEED_SQ:
        return np.zeros(3)
    return MAGNUS_SCALE * np.cross(_vec(angular_velocity), velocity)


@dataclass
class TrajectoryPoint:
    """Single point in trajectory"""
    time: float
    x: float
    y: float
    z: float

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])


@dataclass
class BallState:
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    angular_velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        self.position = _vec(self.position)
        self.velocity = _vec(self.velocity)
        self.angular_velocity = _vec(self.angular_velocity)

    def copy(self) -> "BallState":
        return BallState(self.position.copy(), self.velocity.copy(), self.angular_velocity.copy())

    def matches(self, other: "BallState") -> bool:
        return (np.array_equal(self.position, other.position)
                and np.array_equal(self.velocity, other.velocity)
                and np.array_equal(self.angular_velocity, other.angular_velocity))


@dataclass(frozen=True)
class Trajectory:
    """Finite predicted path; a new prediction builds a new Trajectory"""
    points: Tuple[TrajectoryPoint, ...]
    termination: str

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[TrajectoryPoint]:
        return iter(self.points)

    def __getitem__(self, index):
        return self.points[index]

    def positions(self) -> np.ndarray:
        return np.array([p.as_array() for p in self.points]).reshape(-1, 3)

    def apex(self) -> float:
        return max(p.y for p in self.points)

    def carry(self) -> float:
        """Horizontal distance between the first and last point"""
        start, end = self.points[0], self.points[-1]
        return math.hypot(end.x - start.x, end.z - start.z)

    def flight_time(self) -> float:
        return self.points[-1].time


@dataclass
class SimulationSettings:
    """`bounds` limits absolute court coordinates |x| and |z|, not distance from the launch point"""
    dt: float = 0.016
    max_steps: int = 100
    bounds: float = COURT_BOUNDS

    def __post_init__(self):
        validate_positive(self.dt, "time step")
        validate_positive(self.bounds, "court bounds")
        if self.max_steps < 0:
            raise TennisPhysicsError(f"max steps must be non-negative, got {self.max_steps}")


class TrajectoryIntegrator:
    """
    Semi-implicit Euler integrator under gravity and Magnus lift.

    Angular velocity is held constant over a flight; there is no
    aerodynamic spin decay and no drag in this model.
    """

    def __init__(self, settings: Optional[SimulationSettings] = None):
        self.settings = settings or SimulationSettings()
        self.gravity = np.array([0.0, -G, 0.0])

    def acceleration(self, velocity: np.ndarray, angular_velocity: np.ndarray) -> np.ndarray:
        total_force = self.gravity * BALL_MASS + magnus_force(velocity, angular_velocity)
        return total_force / BALL_MASS

    def step(self, state: BallState, dt: Optional[float] = None) -> BallState:
        """Advance one tick, velocity before position. The input state is not modified."""
        dt = self.settings.dt if dt is None else dt
        velocity = state.velocity + self.acceleration(state.velocity, state.angular_velocity) * dt
        position = state.position + velocity * dt
        return BallState(position, velocity, state.angular_velocity.copy())

    def predict(self, start_position, start_velocity, start_angular_velocity,
                dt: Optional[float] = None, max_steps: Optional[int] = None) -> Trajectory:
        """
        Predict the flight path until the ball lands, leaves the court or
        the step budget runs out.

        Args:
            start_position: Launch position (m)
            start_velocity: Launch velocity (m/s)
            start_angular_velocity: Spin vector (rad/s), constant for the flight
            dt: Time step in seconds (settings default if None)
            max_steps: Step budget (settings default if None)

        Returns:
            Trajectory with at most max_steps + 1 points, starting at start_position
        """
        dt = self.settings.dt if dt is None else dt
        max_steps = self.settings.max_steps if max_steps is None else max_steps
        validate_positive(dt, "time step")
        bounds = self.settings.bounds

        state = BallState(start_position, start_velocity, start_angular_velocity)
        points = [TrajectoryPoint(0.0, *state.position)]
        termination = MAX_STEPS

        for i in range(max(0, int(max_steps))):
            previous = state.position
            state = self.step(state, dt)
            time = (i + 1) * dt

            if state.position[1] < BALL_RADIUS:
                landing, fraction = self._landing_point(previous, state.position)
                points.append(TrajectoryPoint(i * dt + fraction * dt, *landing))
                termination = GROUND
                break

            if abs(state.position[0]) > bounds or abs(state.position[2]) > bounds:
                termination = BOUNDS
                break

            points.append(TrajectoryPoint(time, *state.position))

        return Trajectory(tuple(points), termination)

    @staticmethod
    def _landing_point(previous: np.ndarray, current: np.ndarray) -> Tuple[np.ndarray, float]:
        # Cut the last segment where the ball touches the ground; fraction of the step taken
        drop = previous[1] - current[1]
        if previous[1] > BALL_RADIUS and drop > 0:
            fraction = (previous[1] - BALL_RADIUS) / drop
            landing = previous + (current - previous) * fraction
            landing[1] = BALL_RADIUS
            return landing, float(fraction)
        landing = current.copy()
        landing[1] = max(landing[1], -BALL_RADIUS)
        return landing, 1.0
