"""Aiming control.

Provides the auto-aim state machine that keeps the launch angle on a moving
target and reports an error indicator when the target is out of reach.
"""

from aimline.control.autoaim import (
    AimState,
    AimStatus,
    AutoAimController,
    AutoAimMode,
)

__all__ = [
    "AimState",
    "AimStatus",
    "AutoAimController",
    "AutoAimMode",
]
