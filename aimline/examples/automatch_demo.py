#!/usr/bin/env python
"""Auto-aim tracking example.

This example runs the aiming loop headless for a few seconds of frames:
1. Track a target that slides away from the shooter with the low arc
2. Drop the power until the target is out of reach
3. Turn auto-aim off and watch the error indicator fade
4. Export the final preview curve
"""

import logging

from aimline import AimSession, AutoAimMode, ControlPanel

FRAME_TIME = 1.0 / 60.0


def main() -> None:
    """Run the auto-aim example."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("AUTO-AIM TRACKING")
    print("=" * 60)

    session = AimSession()
    panel = ControlPanel(session.config)
    origin_height = 1.0

    # =========================================================================
    # 1. Track a sliding target
    # =========================================================================
    print("\n1. Tracking a sliding target (low arc)...")

    panel.toggle_automatch(AutoAimMode.PREFER_NEGATIVE)
    panel.set_power(40.0)

    for frame in range(120):
        panel.set_distance(20.0 + frame * 0.5)
        out = session.tick(panel.inputs(origin_height), FRAME_TIME)
        if frame % 30 == 0:
            print(
                f"   d={panel.distance:5.1f} m  angle={out.angle:6.2f} deg  "
                f"{out.status.name}"
            )

    # =========================================================================
    # 2. Run out of power
    # =========================================================================
    print("\n2. Lowering power...")

    for power in (30.0, 25.0, 20.0, 15.0):
        panel.set_power(power)
        out = session.tick(panel.inputs(origin_height), FRAME_TIME)
        print(
            f"   power={power:5.1f}  angle={out.angle:6.2f} deg  "
            f"error={out.error_intensity:.2f}  {out.preview_style.name}"
        )

    # =========================================================================
    # 3. Fade the error
    # =========================================================================
    print("\n3. Auto-aim off, error fading...")

    panel.toggle_automatch(AutoAimMode.PREFER_NEGATIVE)
    for second in range(3):
        for _ in range(60):
            out = session.tick(panel.inputs(origin_height), FRAME_TIME)
        print(f"   t+{second + 1}s  error={out.error_intensity:.2f}  locked={out.locked}")

    # =========================================================================
    # 4. Preview curve
    # =========================================================================
    print("\n4. Preview curve")

    df = out.samples.to_dataframe()
    print(f"   {df.height} samples over {session.config.preview_seconds} s")
    print(df.head(5))


if __name__ == "__main__":
    main()
