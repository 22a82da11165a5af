"""Auto-aim state machine.

Re-solves the launch angle every tick while an automatch mode is active and
drives an error indicator that jumps to full on an unreachable target and
fades out once tracking stops.

States:
1. OFF: no re-solving, angle editable, error intensity decays
2. TRACKING_FEASIBLE: solved angle applied, angle locked, no error
3. TRACKING_INFEASIBLE: angle held, still locked, error at full

Example:
    >>> from aimline.control import AutoAimController, AutoAimMode
    >>> from aimline.ballistics import TargetOffset
    >>>
    >>> ctrl = AutoAimController.from_angle(45.0)
    >>> ctrl.mode = AutoAimMode.PREFER_NEGATIVE
    >>> state = ctrl.update(50.0, -9.8, TargetOffset(40.0, 0.0), dt=0.02)
    >>> state.locked
    True
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto

import numpy as np
from beartype import beartype

from aimline.ballistics.solver import (
    AimSolution,
    Branch,
    Feasible,
    TargetOffset,
    minimum_power,
    solve_launch_angle,
)

logger = logging.getLogger(__name__)

# Error indicator fade [1/s]
DEFAULT_DECAY_RATE: float = 0.5

# =============================================================================
# Modes and State
# =============================================================================


class AutoAimMode(Enum):
    """Per-tick re-solving mode selected by the operator."""

    OFF = auto()
    PREFER_POSITIVE = auto()
    PREFER_NEGATIVE = auto()

    @property
    def branch(self) -> Branch | None:
        """Solver branch tracked in this mode, None when off."""
        if self is AutoAimMode.PREFER_POSITIVE:
            return Branch.POSITIVE
        if self is AutoAimMode.PREFER_NEGATIVE:
            return Branch.NEGATIVE
        return None


class AimStatus(Enum):
    """Controller state after the most recent tick."""

    OFF = auto()
    TRACKING_FEASIBLE = auto()
    TRACKING_INFEASIBLE = auto()


@beartype
@dataclass
class AimState:
    """Aim outputs consumed by the presentation layer.

    Attributes:
        current_angle: Launch angle above horizontal [deg]
        locked: True while auto-aim owns the angle (manual edits disabled)
        error_intensity: Error indicator visibility in [0, 1]
        status: Controller state
    """
    current_angle: float
    locked: bool = False
    error_intensity: float = 0.0
    status: AimStatus = AimStatus.OFF


# =============================================================================
# Controller
# =============================================================================


@beartype
@dataclass
class AutoAimController:
    """Per-tick auto-aim controller.

    Attributes:
        state: Aim state, mutated once per tick
        mode: Active automatch mode
        decay_rate: Error intensity fade while off [1/s]
        match_tolerance: Largest angle difference the match command treats
            as already matched [deg]; 0 means exact equality
    """
    state: AimState
    mode: AutoAimMode = AutoAimMode.OFF
    decay_rate: float = DEFAULT_DECAY_RATE
    match_tolerance: float = 0.0

    _last_solution: AimSolution | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate inputs."""
        if self.decay_rate < 0:
            raise ValueError("decay_rate must be non-negative")
        if self.match_tolerance < 0:
            raise ValueError("match_tolerance must be non-negative")

    @classmethod
    def from_angle(
        cls,
        angle: float,
        decay_rate: float = DEFAULT_DECAY_RATE,
        match_tolerance: float = 0.0,
    ) -> "AutoAimController":
        """Create a controller at rest, unlocked with no error showing."""
        return cls(
            state=AimState(current_angle=angle),
            decay_rate=decay_rate,
            match_tolerance=match_tolerance,
        )

    @property
    def last_solution(self) -> AimSolution | None:
        """Solver result from the latest tracking tick or match."""
        return self._last_solution

    @beartype
    def update(
        self,
        power: float,
        gravity: float,
        target: TargetOffset,
        dt: float,
    ) -> AimState:
        """Advance one tick.

        Args:
            power: Launch speed [m/s]
            gravity: Vertical acceleration [m/s^2]
            target: Target offset from the shooter origin
            dt: Time since the previous tick [s]

        Returns:
            The updated state
        """
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")

        branch = self.mode.branch
        if branch is None:
            self._set_status(AimStatus.OFF)
            self.state.locked = False
            self.state.error_intensity = self._decayed(dt)
            return self.state

        solution = solve_launch_angle(
            power,
            gravity,
            target.horizontal_distance,
            target.vertical_offset,
            branch,
        )
        self._last_solution = solution
        self.state.locked = True

        if isinstance(solution, Feasible):
            self._set_status(AimStatus.TRACKING_FEASIBLE)
            self.state.current_angle = solution.angle
            self.state.error_intensity = 0.0
        else:
            if self.state.status is not AimStatus.TRACKING_INFEASIBLE:
                logger.debug(
                    "Target out of reach (%s): power %.2f, needs %.2f",
                    solution.reason.name,
                    power,
                    minimum_power(gravity, target.horizontal_distance, target.vertical_offset),
                )
            self._set_status(AimStatus.TRACKING_INFEASIBLE)
            self.state.error_intensity = 1.0

        return self.state

    @beartype
    def match(
        self,
        power: float,
        gravity: float,
        target: TargetOffset,
    ) -> AimSolution:
        """One-shot solve, toggling branches on repeated use.

        Adopts the positive-branch angle. If that angle is already applied,
        adopts the negative-branch angle instead. An unreachable target
        leaves the angle alone and flashes the error indicator.

        Returns:
            The solution that was adopted, or the infeasible result
        """
        x, y = target.horizontal_distance, target.vertical_offset
        solution = solve_launch_angle(power, gravity, x, y, Branch.POSITIVE)

        if isinstance(solution, Feasible):
            if abs(solution.angle - self.state.current_angle) <= self.match_tolerance:
                solution = solve_launch_angle(power, gravity, x, y, solution.branch.other)

        if isinstance(solution, Feasible):
            self.state.current_angle = solution.angle
        else:
            logger.info(
                "Match failed (%s): power %.2f cannot reach target at %.2f m",
                solution.reason.name,
                power,
                x,
            )
            self.state.error_intensity = 1.0

        self._last_solution = solution
        return solution

    @beartype
    def set_manual_angle(self, angle: float) -> bool:
        """Apply an operator angle edit.

        Returns:
            False if the angle is locked by auto-aim and the edit was ignored
        """
        if self.state.locked:
            return False
        self.state.current_angle = angle
        return True

    def reset(self) -> None:
        """Clear the error indicator and unlock."""
        self.mode = AutoAimMode.OFF
        self.state.locked = False
        self.state.error_intensity = 0.0
        self.state.status = AimStatus.OFF
        self._last_solution = None

    def _decayed(self, dt: float) -> float:
        return float(np.clip(self.state.error_intensity - self.decay_rate * dt, 0.0, 1.0))

    def _set_status(self, status: AimStatus) -> None:
        if status is not self.state.status:
            logger.debug("Auto-aim %s -> %s", self.state.status.name, status.name)
            self.state.status = status
