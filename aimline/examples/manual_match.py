#!/usr/bin/env python
"""Manual match example.

Presses the one-shot match command repeatedly against a fixed target to
show the toggle between the two solutions, then tries an unreachable target.
"""

from aimline import AimSession, ControlInputs, TargetOffset, solve_both
from aimline.ballistics import LaunchDirection, predict_position, time_at_horizontal


def main() -> None:
    """Run the manual match example."""

    print("=" * 60)
    print("MANUAL MATCH")
    print("=" * 60)

    session = AimSession()
    target = TargetOffset(40.0, 0.0)
    inputs = ControlInputs(power=50.0, target=target, gravity=-9.8)

    high, low = solve_both(inputs.power, inputs.gravity, 40.0, 0.0)
    print(f"\nSolutions: high arc {high.angle:.2f} deg, low arc {low.angle:.2f} deg")

    print("\nPressing match:")
    for press in range(1, 4):
        session.match(inputs)
        print(f"   press {press}: angle={session.angle:.2f} deg")

    direction = LaunchDirection.from_angle(session.angle)
    t = time_at_horizontal(direction, inputs.power, target.horizontal_distance)
    pos = predict_position(t, direction, 0.0, inputs.power, inputs.gravity)
    print(f"\nImpact after {t:.2f} s at x={pos.horizontal:.2f} m, y={pos.vertical:.2f} m")

    print("\nUnreachable target:")
    weak = ControlInputs(power=5.0, target=TargetOffset(80.0, 0.0), gravity=-9.8)
    solution = session.match(weak)
    out = session.tick(weak, 0.0)
    print(f"   feasible={solution.feasible}  angle kept at {out.angle:.2f} deg")
    print(f"   error indicator at {out.error_intensity:.2f}")


if __name__ == "__main__":
    main()
