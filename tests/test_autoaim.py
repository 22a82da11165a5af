"""Unit tests for the auto-aim state machine and the match command."""

import logging

import pytest
from numpy.testing import assert_allclose

from aimline.ballistics.solver import (
    Branch,
    Feasible,
    Infeasible,
    InfeasibleReason,
    TargetOffset,
    solve_both,
    solve_launch_angle,
)
from aimline.control import autoaim
from aimline.control.autoaim import (
    AimStatus,
    AutoAimController,
    AutoAimMode,
)

G = -9.8
REACHABLE = TargetOffset(40.0, 0.0)
UNREACHABLE = TargetOffset(80.0, 0.0)

# =============================================================================
# Initial State
# =============================================================================


class TestInitialState:
    """A fresh controller is at rest."""

    def test_from_angle(self):
        ctrl = AutoAimController.from_angle(45.0)
        assert ctrl.state.current_angle == 45.0
        assert ctrl.state.locked is False
        assert ctrl.state.error_intensity == 0.0
        assert ctrl.state.status is AimStatus.OFF
        assert ctrl.mode is AutoAimMode.OFF
        assert ctrl.last_solution is None

    def test_mode_branches(self):
        assert AutoAimMode.OFF.branch is None
        assert AutoAimMode.PREFER_POSITIVE.branch is Branch.POSITIVE
        assert AutoAimMode.PREFER_NEGATIVE.branch is Branch.NEGATIVE

    def test_invalid_decay_rate(self):
        with pytest.raises(ValueError):
            AutoAimController.from_angle(45.0, decay_rate=-1.0)


# =============================================================================
# Tracking
# =============================================================================


class TestTracking:
    """Test per-tick re-solving."""

    @pytest.mark.parametrize(
        "mode,branch",
        [
            (AutoAimMode.PREFER_POSITIVE, Branch.POSITIVE),
            (AutoAimMode.PREFER_NEGATIVE, Branch.NEGATIVE),
        ],
    )
    def test_feasible_tracking(self, mode, branch):
        """Feasible target: angle applied, locked, no error."""
        ctrl = AutoAimController.from_angle(45.0)
        ctrl.mode = mode
        state = ctrl.update(50.0, G, REACHABLE, 0.02)

        expected = solve_launch_angle(50.0, G, 40.0, 0.0, branch)
        assert state.status is AimStatus.TRACKING_FEASIBLE
        assert state.current_angle == expected.angle
        assert state.locked is True
        assert state.error_intensity == 0.0
        assert ctrl.last_solution == expected

    def test_infeasible_tracking_holds_angle(self):
        """Infeasible target: angle unchanged, still locked, full error."""
        ctrl = AutoAimController.from_angle(45.0)
        ctrl.mode = AutoAimMode.PREFER_NEGATIVE
        ctrl.update(50.0, G, REACHABLE, 0.02)
        tracked = ctrl.state.current_angle

        state = ctrl.update(5.0, G, UNREACHABLE, 0.02)
        assert state.status is AimStatus.TRACKING_INFEASIBLE
        assert state.current_angle == tracked
        assert state.locked is True
        assert state.error_intensity == 1.0
        assert isinstance(ctrl.last_solution, Infeasible)

    def test_recovery_clears_error(self):
        """Regaining a solution drops the error immediately."""
        ctrl = AutoAimController.from_angle(45.0)
        ctrl.mode = AutoAimMode.PREFER_POSITIVE
        ctrl.update(5.0, G, UNREACHABLE, 0.02)
        assert ctrl.state.error_intensity == 1.0

        state = ctrl.update(50.0, G, REACHABLE, 0.02)
        assert state.status is AimStatus.TRACKING_FEASIBLE
        assert state.error_intensity == 0.0

    def test_follows_moving_target(self):
        """Angle follows the target as it slides away."""
        ctrl = AutoAimController.from_angle(45.0)
        ctrl.mode = AutoAimMode.PREFER_NEGATIVE
        angles = []
        for distance in (20.0, 40.0, 60.0, 80.0):
            ctrl.update(50.0, G, TargetOffset(distance, 0.0), 0.02)
            angles.append(ctrl.state.current_angle)
        assert angles == sorted(angles)

    def test_turning_off_unlocks(self):
        """Switching to OFF stops re-solving starting that tick."""
        ctrl = AutoAimController.from_angle(45.0)
        ctrl.mode = AutoAimMode.PREFER_POSITIVE
        ctrl.update(50.0, G, REACHABLE, 0.02)
        solved = ctrl.state.current_angle

        ctrl.mode = AutoAimMode.OFF
        state = ctrl.update(50.0, G, TargetOffset(60.0, 0.0), 0.02)
        assert state.status is AimStatus.OFF
        assert state.locked is False
        assert state.current_angle == solved

    def test_negative_dt_rejected(self):
        ctrl = AutoAimController.from_angle(45.0)
        with pytest.raises(ValueError, match="dt"):
            ctrl.update(50.0, G, REACHABLE, -0.1)

    def test_transition_logged(self, caplog):
        ctrl = AutoAimController.from_angle(45.0)
        ctrl.mode = AutoAimMode.PREFER_POSITIVE
        with caplog.at_level(logging.DEBUG, logger="aimline.control.autoaim"):
            ctrl.update(5.0, G, UNREACHABLE, 0.02)
        assert "TRACKING_INFEASIBLE" in caplog.text


# =============================================================================
# Error Decay
# =============================================================================


class TestErrorDecay:
    """Test the fading error indicator."""

    def test_decay_scenario(self):
        """1.0 -> 0.5 -> 0.0 with 1 s ticks at 0.5/s."""
        ctrl = AutoAimController.from_angle(45.0, decay_rate=0.5)
        ctrl.state.error_intensity = 1.0

        ctrl.update(50.0, G, REACHABLE, 1.0)
        assert ctrl.state.error_intensity == 0.5

        ctrl.update(50.0, G, REACHABLE, 1.0)
        assert ctrl.state.error_intensity == 0.0

    def test_decay_is_linear_then_holds(self):
        """Strictly decreasing at the decay rate, then held at zero."""
        ctrl = AutoAimController.from_angle(45.0, decay_rate=0.5)
        ctrl.state.error_intensity = 1.0

        previous = 1.0
        for _ in range(19):
            ctrl.update(50.0, G, REACHABLE, 0.1)
            assert ctrl.state.error_intensity < previous
            assert_allclose(previous - ctrl.state.error_intensity, 0.05, atol=1e-12)
            previous = ctrl.state.error_intensity

        ctrl.update(50.0, G, REACHABLE, 0.1)
        assert_allclose(ctrl.state.error_intensity, 0.0, atol=1e-12)

        for _ in range(5):
            ctrl.update(50.0, G, REACHABLE, 0.1)
            assert ctrl.state.error_intensity == 0.0

    def test_intensity_stays_in_unit_range(self):
        ctrl = AutoAimController.from_angle(45.0)
        ctrl.state.error_intensity = 0.2
        ctrl.update(50.0, G, REACHABLE, 100.0)
        assert ctrl.state.error_intensity == 0.0

        ctrl.mode = AutoAimMode.PREFER_POSITIVE
        for _ in range(3):
            ctrl.update(5.0, G, UNREACHABLE, 0.02)
            assert ctrl.state.error_intensity == 1.0

    def test_fade_after_infeasible_tracking(self):
        """Turning auto-aim off after a failure fades the error out."""
        ctrl = AutoAimController.from_angle(45.0)
        ctrl.mode = AutoAimMode.PREFER_NEGATIVE
        ctrl.update(5.0, G, UNREACHABLE, 0.02)

        ctrl.mode = AutoAimMode.OFF
        ctrl.update(5.0, G, UNREACHABLE, 0.5)
        assert_allclose(ctrl.state.error_intensity, 0.75)


# =============================================================================
# Manual Match
# =============================================================================


class TestMatch:
    """Test the one-shot match command."""

    def test_repeated_match_toggles(self):
        """First press: positive branch. Second press: negative branch."""
        high, low = solve_both(50.0, G, 40.0, 0.0)
        ctrl = AutoAimController.from_angle(45.0)

        first = ctrl.match(50.0, G, REACHABLE)
        assert isinstance(first, Feasible)
        assert ctrl.state.current_angle == high.angle

        second = ctrl.match(50.0, G, REACHABLE)
        assert second.branch is Branch.NEGATIVE
        assert ctrl.state.current_angle == low.angle

        ctrl.match(50.0, G, REACHABLE)
        assert ctrl.state.current_angle == high.angle

    def test_match_infeasible_flashes(self):
        """Unreachable target: angle kept, error set to full."""
        ctrl = AutoAimController.from_angle(30.0)
        solution = ctrl.match(5.0, G, UNREACHABLE)

        assert isinstance(solution, Infeasible)
        assert ctrl.state.current_angle == 30.0
        assert ctrl.state.error_intensity == 1.0

    def test_match_flash_decays(self):
        ctrl = AutoAimController.from_angle(30.0, decay_rate=0.5)
        ctrl.match(5.0, G, UNREACHABLE)
        ctrl.update(5.0, G, UNREACHABLE, 1.0)
        assert ctrl.state.error_intensity == 0.5

    def test_match_tolerance(self):
        """A near-equal angle counts as matched when a tolerance is set."""
        high, low = solve_both(50.0, G, 40.0, 0.0)

        exact = AutoAimController.from_angle(high.angle + 1e-9)
        exact.match(50.0, G, REACHABLE)
        assert exact.state.current_angle == high.angle

        loose = AutoAimController.from_angle(high.angle + 1e-9, match_tolerance=1e-6)
        loose.match(50.0, G, REACHABLE)
        assert loose.state.current_angle == low.angle

    def test_match_does_not_touch_lock(self):
        ctrl = AutoAimController.from_angle(45.0)
        ctrl.match(50.0, G, REACHABLE)
        assert ctrl.state.locked is False

    def test_match_falls_back_when_other_branch_fails(self, monkeypatch):
        """A failed toggle keeps the current angle and flashes the error."""
        high, _ = solve_both(50.0, G, 40.0, 0.0)

        def solve_positive_only(power, gravity, x, y, branch):
            if branch is Branch.POSITIVE:
                return high
            return Infeasible(InfeasibleReason.DEGENERATE_GEOMETRY)

        monkeypatch.setattr(autoaim, "solve_launch_angle", solve_positive_only)
        ctrl = AutoAimController.from_angle(high.angle)
        solution = ctrl.match(50.0, G, REACHABLE)

        assert isinstance(solution, Infeasible)
        assert ctrl.state.current_angle == high.angle
        assert ctrl.state.error_intensity == 1.0
        assert ctrl.last_solution is solution

    def test_match_overflowing_power_rejected(self):
        ctrl = AutoAimController.from_angle(45.0)
        with pytest.raises(ValueError):
            ctrl.match(1e80, G, REACHABLE)
        assert ctrl.state.current_angle == 45.0


# =============================================================================
# Manual Angle Edits
# =============================================================================


class TestManualAngle:
    """Operator edits respect the lock."""

    def test_edit_when_unlocked(self):
        ctrl = AutoAimController.from_angle(45.0)
        assert ctrl.set_manual_angle(60.0) is True
        assert ctrl.state.current_angle == 60.0

    def test_edit_ignored_when_locked(self):
        ctrl = AutoAimController.from_angle(45.0)
        ctrl.mode = AutoAimMode.PREFER_POSITIVE
        ctrl.update(50.0, G, REACHABLE, 0.02)
        solved = ctrl.state.current_angle

        assert ctrl.set_manual_angle(10.0) is False
        assert ctrl.state.current_angle == solved

    def test_reset(self):
        ctrl = AutoAimController.from_angle(45.0)
        ctrl.mode = AutoAimMode.PREFER_POSITIVE
        ctrl.update(5.0, G, UNREACHABLE, 0.02)
        ctrl.reset()

        assert ctrl.mode is AutoAimMode.OFF
        assert ctrl.state.locked is False
        assert ctrl.state.error_intensity == 0.0
        assert ctrl.state.status is AimStatus.OFF
