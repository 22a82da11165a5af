"""Ballistic math for aiming in a 2D launch plane.

Provides the closed-form angle solver, the position predictor and the
preview-curve sampler. All functions are pure; gravity is always passed in.

Example:
    >>> from aimline.ballistics import Branch, LaunchDirection, solve_launch_angle
    >>>
    >>> solution = solve_launch_angle(50.0, -9.8, 40.0, 0.0, Branch.POSITIVE)
    >>> direction = LaunchDirection.from_angle(solution.angle)
"""

from aimline.ballistics.predictor import (
    LaunchDirection,
    Position2D,
    predict_position,
    predict_positions,
    time_at_horizontal,
)
from aimline.ballistics.sampler import (
    TrajectorySampleBuffer,
    TrajectorySampler,
    rebuild_samples,
)
from aimline.ballistics.solver import (
    AimSolution,
    Branch,
    Feasible,
    Infeasible,
    InfeasibleReason,
    LaunchProfile,
    TargetOffset,
    discriminant,
    minimum_power,
    solve_both,
    solve_for_target,
    solve_launch_angle,
)

__all__ = [
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
]
