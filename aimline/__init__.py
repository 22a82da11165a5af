"""Aimline - Ballistic aiming with live trajectory preview.

This package solves launch angles for a fixed-power projectile under
constant gravity, samples a preview of the resulting trajectory, and runs
an auto-aim loop that keeps the angle on a moving target.

Example:
    >>> from aimline import AimSession, AutoAimMode, ControlInputs, TargetOffset
    >>>
    >>> session = AimSession()
    >>> inputs = ControlInputs(
    ...     power=50.0,
    ...     target=TargetOffset(40.0, 0.0),
    ...     gravity=-9.8,
    ...     mode=AutoAimMode.PREFER_NEGATIVE,
    ... )
    >>> out = session.tick(inputs, dt=0.02)
    >>> print(f"Angle: {out.angle:.2f} deg")
"""

__version__ = "0.1.0"

# Ballistic math
from aimline.ballistics import (
    AimSolution,
    Branch,
    Feasible,
    Infeasible,
    InfeasibleReason,
    LaunchDirection,
    LaunchProfile,
    Position2D,
    TargetOffset,
    TrajectorySampleBuffer,
    TrajectorySampler,
    discriminant,
    minimum_power,
    predict_position,
    predict_positions,
    rebuild_samples,
    solve_both,
    solve_for_target,
    solve_launch_angle,
    time_at_horizontal,
)

# Configuration
from aimline.config import DEFAULT_GRAVITY, AimConfig

# Auto-aim control
from aimline.control import (
    AimState,
    AimStatus,
    AutoAimController,
    AutoAimMode,
)

# Tick loop
from aimline.session import (
    AimSession,
    ControlInputs,
    ControlPanel,
    PreviewStyle,
    TickOutput,
)

__all__ = [
    # Version
    "__version__",
    # Solver
    "AimSolution",
    "Branch",
    "Feasible",
    "Infeasible",
    "InfeasibleReason",
    "LaunchProfile",
    "TargetOffset",
    "discriminant",
    "minimum_power",
    "solve_both",
    "solve_for_target",
    "solve_launch_angle",
    # Predictor
    "LaunchDirection",
    "Position2D",
    "predict_position",
    "predict_positions",
    "time_at_horizontal",
    # Sampler
    "TrajectorySampleBuffer",
    "TrajectorySampler",
    "rebuild_samples",
    # Configuration
    "AimConfig",
    "DEFAULT_GRAVITY",
    # Control
    "AimState",
    "AimStatus",
    "AutoAimController",
    "AutoAimMode",
    # Session
    "AimSession",
    "ControlInputs",
    "ControlPanel",
    "PreviewStyle",
    "TickOutput",
]
