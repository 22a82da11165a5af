"""Closed-form launch angle solver for ballistic aiming.

Solves the projectile range equation for the launch angle that carries a
projectile of fixed launch speed through a target point under constant
gravity. Two angles generally exist:

- POSITIVE branch: tan(theta) = (v^2 + sqrt(D)) / (-g * x)
- NEGATIVE branch: tan(theta) = (v^2 - sqrt(D)) / (-g * x)

where D = v^4 + g * (-g * x^2 + 2 * y * v^2) is the discriminant. With the
usual downward (negative) gravity the positive branch is the high arc and the
negative branch is the low arc. The two coincide at the maximum-range
boundary (D == 0).

A negative discriminant means the launch speed cannot reach the target at
any angle. This is reported as an ``Infeasible`` value rather than NaN so an
unreachable solution can never leak into later arithmetic.

Example:
    >>> from aimline.ballistics import Branch, solve_launch_angle
    >>>
    >>> solution = solve_launch_angle(50.0, -9.8, 40.0, 0.0, Branch.NEGATIVE)
    >>> if solution.feasible:
    ...     print(f"Low arc: {solution.angle:.2f} deg")
"""

import math
from dataclasses import dataclass
from enum import Enum, auto

import numpy as np
from beartype import beartype
from numba import njit

# =============================================================================
# Solution Types
# =============================================================================


class Branch(Enum):
    """Root of the angle equation to use."""

    POSITIVE = auto()  # +sqrt(D), high arc for downward gravity
    NEGATIVE = auto()  # -sqrt(D), low arc for downward gravity

    @property
    def other(self) -> "Branch":
        """The opposite branch."""
        return Branch.NEGATIVE if self is Branch.POSITIVE else Branch.POSITIVE


class InfeasibleReason(Enum):
    """Why no launch angle exists."""

    INSUFFICIENT_POWER = auto()   # Discriminant below zero
    DEGENERATE_GEOMETRY = auto()  # Zero horizontal distance or zero gravity


@beartype
@dataclass(frozen=True)
class Feasible:
    """A launch angle that passes through the target.

    Attributes:
        angle: Launch angle above horizontal [degrees]
        branch: Root the angle was taken from
    """
    angle: float
    branch: Branch

    @property
    def feasible(self) -> bool:
        return True


@beartype
@dataclass(frozen=True)
class Infeasible:
    """No launch angle reaches the target.

    Attributes:
        reason: Which guard rejected the inputs
    """
    reason: InfeasibleReason = InfeasibleReason.INSUFFICIENT_POWER

    @property
    def feasible(self) -> bool:
        return False


AimSolution = Feasible | Infeasible


@beartype
@dataclass(frozen=True)
class LaunchProfile:
    """Launch speed and gravity for a single computation.

    Attributes:
        power: Launch speed [m/s], non-negative
        gravity: Vertical acceleration [m/s^2], negative is downward
    """
    power: float
    gravity: float

    def __post_init__(self) -> None:
        """Validate inputs."""
        _check_power(self.power)
        if not math.isfinite(self.gravity):
            raise ValueError(f"gravity must be finite, got {self.gravity}")


@beartype
@dataclass(frozen=True)
class TargetOffset:
    """Target position relative to the shooter origin.

    Attributes:
        horizontal_distance: Distance along the facing direction [m]
        vertical_offset: Height above the shooter origin [m]
    """
    horizontal_distance: float
    vertical_offset: float

    @classmethod
    def from_positions(
        cls,
        distance: float,
        elevation: float,
        origin_height: float,
    ) -> "TargetOffset":
        """Build an offset from an absolute target elevation.

        Args:
            distance: Horizontal distance from shooter to target [m]
            elevation: Absolute target height [m]
            origin_height: Absolute shooter height [m]
        """
        return cls(horizontal_distance=distance, vertical_offset=elevation - origin_height)


# =============================================================================
# Numba-Optimized Core Functions
# =============================================================================


@njit(cache=True)
def _discriminant(v: float, g: float, x: float, y: float) -> float:
    """Value under the square root of the angle equation."""
    v2 = v * v
    return v2 * v2 + g * (-g * x * x + 2.0 * y * v2)


@njit(cache=True)
def _launch_tangent(v: float, g: float, x: float, disc: float, positive: bool) -> float:
    """tan(theta) for one root. Caller guarantees g * x != 0 and disc >= 0."""
    root = np.sqrt(disc)
    if positive:
        return (v * v + root) / (-g * x)
    return (v * v - root) / (-g * x)


# =============================================================================
# Solver
# =============================================================================


def _check_power(power: float) -> None:
    if not math.isfinite(power) or power < 0.0:
        raise ValueError(f"power must be finite and non-negative, got {power}")


def _check_finite(**values: float) -> None:
    for name, value in values.items():
        if not math.isfinite(value):
            raise ValueError(f"{name} must be finite, got {value}")


@beartype
def discriminant(
    power: float,
    gravity: float,
    horizontal_distance: float,
    vertical_offset: float,
) -> float:
    """Discriminant of the launch angle equation.

    Negative means the target is out of reach for this launch speed.
    """
    return float(_discriminant(power, gravity, horizontal_distance, vertical_offset))


@beartype
def solve_launch_angle(
    power: float,
    gravity: float,
    horizontal_distance: float,
    vertical_offset: float,
    branch: Branch,
) -> AimSolution:
    """Launch angle that passes a projectile through the target point.

    Args:
        power: Launch speed [m/s], non-negative
        gravity: Vertical acceleration [m/s^2], negative is downward
        horizontal_distance: Target distance along the facing direction [m]
        vertical_offset: Target height above the shooter origin [m]
        branch: Which of the two roots to return

    Returns:
        ``Feasible`` with the angle in degrees, or ``Infeasible``

    Raises:
        ValueError: If power is negative, any input is not finite, or the
            inputs are large enough to overflow the discriminant
    """
    _check_power(power)
    _check_finite(
        gravity=gravity,
        horizontal_distance=horizontal_distance,
        vertical_offset=vertical_offset,
    )

    if horizontal_distance == 0.0 or gravity == 0.0:
        return Infeasible(InfeasibleReason.DEGENERATE_GEOMETRY)
    if power == 0.0:
        return Infeasible(InfeasibleReason.INSUFFICIENT_POWER)

    disc = _discriminant(power, gravity, horizontal_distance, vertical_offset)
    if not math.isfinite(disc):
        raise ValueError(
            f"discriminant overflowed for power={power}, gravity={gravity}, "
            f"distance={horizontal_distance}, height={vertical_offset}"
        )
    if disc < 0.0:
        return Infeasible(InfeasibleReason.INSUFFICIENT_POWER)

    tan_theta = _launch_tangent(
        power, gravity, horizontal_distance, disc, branch is Branch.POSITIVE
    )
    angle = math.degrees(math.atan(tan_theta))
    if not math.isfinite(angle):
        return Infeasible(InfeasibleReason.DEGENERATE_GEOMETRY)

    return Feasible(angle=angle, branch=branch)


@beartype
def solve_both(
    power: float,
    gravity: float,
    horizontal_distance: float,
    vertical_offset: float,
) -> tuple[AimSolution, AimSolution]:
    """Solve both roots.

    Returns:
        (positive branch solution, negative branch solution)
    """
    return (
        solve_launch_angle(power, gravity, horizontal_distance, vertical_offset, Branch.POSITIVE),
        solve_launch_angle(power, gravity, horizontal_distance, vertical_offset, Branch.NEGATIVE),
    )


@beartype
def solve_for_target(
    profile: LaunchProfile,
    target: TargetOffset,
    branch: Branch,
) -> AimSolution:
    """``solve_launch_angle`` over the profile and target types."""
    return solve_launch_angle(
        profile.power,
        profile.gravity,
        target.horizontal_distance,
        target.vertical_offset,
        branch,
    )


@beartype
def minimum_power(
    gravity: float,
    horizontal_distance: float,
    vertical_offset: float,
) -> float:
    """Smallest launch speed that reaches the target.

    Found where the discriminant touches zero:
        v^2 = |g| * (y + sqrt(x^2 + y^2))

    Args:
        gravity: Vertical acceleration [m/s^2]
        horizontal_distance: Target distance [m]
        vertical_offset: Target height above origin [m]

    Returns:
        Minimum launch speed [m/s]
    """
    reach = math.hypot(horizontal_distance, vertical_offset)
    return math.sqrt(abs(gravity) * max(0.0, vertical_offset + reach))
