"""Tick-driven aiming session.

Ties the auto-aim controller and the preview sampler into the per-frame
loop. The host (game engine, UI, test) owns the loop and calls:

- session.tick(inputs, dt) -> aim outputs and refreshed preview curve
- session.match(inputs) -> one-shot solve, toggling branches when repeated
- session.set_angle(angle) -> operator angle edit, ignored while locked

Example:
    >>> from aimline.control import AutoAimMode
    >>> from aimline.session import AimSession, ControlPanel
    >>>
    >>> session = AimSession()
    >>> panel = ControlPanel(session.config)
    >>> panel.toggle_automatch(AutoAimMode.PREFER_NEGATIVE)
    >>>
    >>> while running:
    ...     out = session.tick(panel.inputs(origin_height=1.0), dt=frame_time)
    ...     draw_curve(out.samples.points)
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import NamedTuple

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from aimline.ballistics.predictor import LaunchDirection
from aimline.ballistics.sampler import TrajectorySampleBuffer, TrajectorySampler
from aimline.ballistics.solver import AimSolution, TargetOffset
from aimline.config import DEFAULT_GRAVITY, AimConfig
from aimline.control.autoaim import AimStatus, AutoAimController, AutoAimMode

logger = logging.getLogger(__name__)

# =============================================================================
# Inputs and Outputs
# =============================================================================


class PreviewStyle(Enum):
    """How the preview curve should be drawn."""

    NORMAL = auto()   # Manual aiming
    MATCHED = auto()  # Auto-aim holding a solution
    ERROR = auto()    # Auto-aim cannot reach the target


_STYLE_FOR_STATUS = {
    AimStatus.OFF: PreviewStyle.NORMAL,
    AimStatus.TRACKING_FEASIBLE: PreviewStyle.MATCHED,
    AimStatus.TRACKING_INFEASIBLE: PreviewStyle.ERROR,
}


@beartype
@dataclass
class ControlInputs:
    """Values read from the control surface each tick.

    Attributes:
        power: Launch speed [m/s]
        target: Target offset from the shooter origin
        gravity: Vertical acceleration [m/s^2]
        mode: Automatch mode
        origin_height: Shooter launch height [m]
        launch_direction: Launch direction override; derived from the
            current angle when None
    """
    power: float
    target: TargetOffset
    gravity: float = DEFAULT_GRAVITY
    mode: AutoAimMode = AutoAimMode.OFF
    origin_height: float = 0.0
    launch_direction: LaunchDirection | None = None

    def __post_init__(self) -> None:
        """Validate inputs."""
        if self.power < 0:
            raise ValueError(f"power must be non-negative, got {self.power}")


class TickOutput(NamedTuple):
    """Everything the presentation layer needs after a tick."""
    angle: float                     # Aim angle [deg]
    display_angle: float             # Aim angle clamped to the control range [deg]
    locked: bool                     # Angle editing disabled
    error_intensity: float           # Error indicator visibility [0, 1]
    status: AimStatus
    preview_style: PreviewStyle
    samples: TrajectorySampleBuffer  # Refreshed in place every tick


# =============================================================================
# Session
# =============================================================================


@beartype
@dataclass
class AimSession:
    """Per-frame aiming loop.

    Owns the controller state and the preview buffer. Both are created once
    and mutated in place by ``tick``.

    Attributes:
        config: Aiming configuration
    """
    config: AimConfig = field(default_factory=AimConfig)

    controller: AutoAimController = field(init=False)
    sampler: TrajectorySampler = field(init=False)

    def __post_init__(self) -> None:
        """Build the controller and allocate the preview buffer."""
        self.controller = AutoAimController.from_angle(
            self.config.initial_angle,
            decay_rate=self.config.error_decay_rate,
            match_tolerance=self.config.match_tolerance,
        )
        self.sampler = TrajectorySampler(
            samples_per_second=self.config.samples_per_second,
            preview_seconds=self.config.preview_seconds,
        )

    @property
    def angle(self) -> float:
        """Current aim angle [deg]."""
        return self.controller.state.current_angle

    @beartype
    def tick(self, inputs: ControlInputs, dt: float) -> TickOutput:
        """Run one frame: auto-aim, then rebuild the preview curve.

        Args:
            inputs: Control values for this frame
            dt: Time since the previous frame [s]
        """
        self.controller.mode = inputs.mode
        state = self.controller.update(inputs.power, inputs.gravity, inputs.target, dt)

        direction = inputs.launch_direction
        if direction is None:
            direction = LaunchDirection.from_angle(state.current_angle)

        samples = self.sampler.rebuild(
            direction,
            inputs.origin_height,
            inputs.power,
            inputs.gravity,
        )

        return TickOutput(
            angle=state.current_angle,
            display_angle=self.config.clamp_angle(state.current_angle),
            locked=state.locked,
            error_intensity=state.error_intensity,
            status=state.status,
            preview_style=_STYLE_FOR_STATUS[state.status],
            samples=samples,
        )

    @beartype
    def match(self, inputs: ControlInputs) -> AimSolution:
        """One-shot solve for the current target."""
        return self.controller.match(inputs.power, inputs.gravity, inputs.target)

    @beartype
    def set_angle(self, angle: float) -> bool:
        """Operator angle edit, clamped to the control range.

        Returns:
            False if auto-aim holds the angle
        """
        return self.controller.set_manual_angle(self.config.clamp_angle(angle))

    @beartype
    def launch_velocity(self, power: float) -> NDArray[np.float64]:
        """Initial velocity handed to the physics engine on a shot.

        Returns:
            [horizontal, vertical] velocity [m/s]
        """
        direction = LaunchDirection.from_angle(self.angle)
        logger.debug("Launch at %.2f deg, power %.2f", self.angle, power)
        return np.array([direction.horizontal * power, direction.vertical * power])


# =============================================================================
# Operator Controls
# =============================================================================


@beartype
@dataclass
class ControlPanel:
    """Operator control values, clamped to the configured ranges.

    Starts every control at the middle of its range with auto-aim off.
    """
    config: AimConfig = field(default_factory=AimConfig)

    power: float = field(init=False)
    distance: float = field(init=False)
    elevation: float = field(init=False)
    mode: AutoAimMode = field(default=AutoAimMode.OFF, init=False)

    def __post_init__(self) -> None:
        self.power = self.config.initial_power
        self.distance = self.config.initial_distance
        self.elevation = self.config.initial_elevation

    def set_power(self, value: float) -> float:
        self.power = self.config.clamp_power(value)
        return self.power

    def set_distance(self, value: float) -> float:
        self.distance = self.config.clamp_distance(value)
        return self.distance

    def set_elevation(self, value: float) -> float:
        self.elevation = self.config.clamp_elevation(value)
        return self.elevation

    @beartype
    def toggle_automatch(self, mode: AutoAimMode) -> AutoAimMode:
        """Flip an automatch toggle.

        Selecting a mode replaces the other one; selecting the active mode
        turns auto-aim off.
        """
        if mode is AutoAimMode.OFF or mode is self.mode:
            self.mode = AutoAimMode.OFF
        else:
            self.mode = mode
        return self.mode

    @beartype
    def inputs(
        self,
        origin_height: float = 0.0,
        gravity: float | None = None,
    ) -> ControlInputs:
        """Snapshot the controls as tick inputs.

        Args:
            origin_height: Shooter launch height [m]
            gravity: Vertical acceleration [m/s^2], config default when None
        """
        return ControlInputs(
            power=self.power,
            target=TargetOffset.from_positions(self.distance, self.elevation, origin_height),
            gravity=self.config.gravity if gravity is None else gravity,
            mode=self.mode,
            origin_height=origin_height,
        )
