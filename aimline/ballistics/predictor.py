"""Closed-form projectile position prediction.

Exact constant-acceleration kinematics per axis of the ballistic plane:

    horizontal(t) = d_h * power * t
    vertical(t)   = h0 + d_v * power * t + 0.5 * g * t^2

where (d_h, d_v) is the unit launch direction. There is no integration step
and no ground collision, so every time yields a position, including times
after the projectile would have landed.

Reference:
- https://en.wikipedia.org/wiki/Equations_of_motion

Example:
    >>> from aimline.ballistics import LaunchDirection, predict_position
    >>>
    >>> direction = LaunchDirection.from_angle(45.0)
    >>> pos = predict_position(1.0, direction, 0.0, 20.0, -9.81)
    >>> print(f"x={pos.horizontal:.2f} y={pos.vertical:.2f}")
"""

import math
from typing import NamedTuple

import numpy as np
from beartype import beartype
from numba import njit
from numpy.typing import NDArray

# =============================================================================
# Plane Vectors
# =============================================================================


class Position2D(NamedTuple):
    """Point in the ballistic plane [m]."""
    horizontal: float
    vertical: float


class LaunchDirection(NamedTuple):
    """Unit launch vector in the ballistic plane.

    ``horizontal`` is the share of the launch speed along the facing
    direction, ``vertical`` the share pointing up.
    """
    horizontal: float
    vertical: float

    @classmethod
    def from_angle(cls, angle: float) -> "LaunchDirection":
        """Direction for a launch angle above horizontal [degrees]."""
        theta = math.radians(angle)
        return cls(math.cos(theta), math.sin(theta))

    @classmethod
    def from_forward(cls, forward: NDArray[np.float64]) -> "LaunchDirection":
        """Project a 3D forward vector onto the ballistic plane.

        Args:
            forward: Shooter forward vector [x, y, z] with Y up and Z the
                facing direction

        Raises:
            ValueError: If the vector has no component in the plane
        """
        h, v = float(forward[2]), float(forward[1])
        norm = math.hypot(h, v)
        if norm < 1e-12:
            raise ValueError("forward vector has no component in the ballistic plane")
        return cls(h / norm, v / norm)

    @property
    def angle(self) -> float:
        """Elevation above horizontal [degrees]."""
        return math.degrees(math.atan2(self.vertical, self.horizontal))


# =============================================================================
# Numba-Optimized Core Functions
# =============================================================================


@njit(cache=True)
def _predict(
    t: float,
    d_h: float, d_v: float,
    h0: float, power: float, g: float,
) -> tuple[float, float]:
    """Position at time t."""
    x = d_h * power * t
    y = h0 + d_v * power * t + 0.5 * g * t * t
    return (x, y)


@njit(cache=True)
def _predict_many(
    times: np.ndarray,
    d_h: float, d_v: float,
    h0: float, power: float, g: float,
    out: np.ndarray,
) -> None:
    """Fill out[i] with the position at times[i]."""
    for i in range(times.shape[0]):
        x, y = _predict(times[i], d_h, d_v, h0, power, g)
        out[i, 0] = x
        out[i, 1] = y


# =============================================================================
# Prediction
# =============================================================================


@beartype
def predict_position(
    t: float,
    launch_direction: LaunchDirection,
    origin_height: float,
    power: float,
    gravity: float,
) -> Position2D:
    """Projectile position at time t after launch.

    Args:
        t: Time since launch [s]
        launch_direction: Unit launch vector
        origin_height: Launch height [m]
        power: Launch speed [m/s]
        gravity: Vertical acceleration [m/s^2]

    Returns:
        Position in the ballistic plane [m]
    """
    x, y = _predict(
        t,
        launch_direction.horizontal, launch_direction.vertical,
        origin_height, power, gravity,
    )
    return Position2D(float(x), float(y))


@beartype
def predict_positions(
    times: NDArray[np.float64],
    launch_direction: LaunchDirection,
    origin_height: float,
    power: float,
    gravity: float,
) -> NDArray[np.float64]:
    """Vectorized ``predict_position``.

    Returns:
        Array of shape (N, 2), columns [horizontal, vertical] [m]
    """
    out = np.empty((times.shape[0], 2), dtype=np.float64)
    _predict_many(
        times,
        launch_direction.horizontal, launch_direction.vertical,
        origin_height, power, gravity,
        out,
    )
    return out


@beartype
def time_at_horizontal(
    launch_direction: LaunchDirection,
    power: float,
    horizontal_distance: float,
) -> float | None:
    """Time at which the projectile reaches a horizontal distance.

    Returns:
        Time [s], or None if the projectile never gets there (no horizontal
        speed, or moving away from the distance)
    """
    speed = launch_direction.horizontal * power
    if speed == 0.0:
        return 0.0 if horizontal_distance == 0.0 else None
    t = horizontal_distance / speed
    if t < 0.0:
        return None
    return t
