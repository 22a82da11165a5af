"""Fixed-size trajectory preview sampling.

The preview curve is a fixed number of predicted positions spaced evenly in
time over a bounded window after launch. The buffer is allocated once and
overwritten in place on every rebuild, so a per-frame caller never grows or
reallocates it.

Example:
    >>> from aimline.ballistics import LaunchDirection, TrajectorySampler
    >>>
    >>> sampler = TrajectorySampler(samples_per_second=20, preview_seconds=10)
    >>> sampler.rebuild(LaunchDirection.from_angle(30.0), 1.0, 50.0, -9.81)
    >>> sampler.buffer.points.shape
    (200, 2)
"""

from dataclasses import dataclass, field

import numpy as np
from beartype import beartype
from numba import njit
from numpy.typing import NDArray

from aimline.ballistics.predictor import LaunchDirection, Position2D, _predict

# =============================================================================
# Sample Buffer
# =============================================================================


@beartype
@dataclass
class TrajectorySampleBuffer:
    """Preview curve storage.

    Attributes:
        samples_per_second: Sample rate along the time axis [1/s]
        preview_seconds: Length of the preview window [s]
        points: Positions, shape (capacity, 2), columns [horizontal, vertical]
    """
    samples_per_second: int = 20
    preview_seconds: int = 10

    points: NDArray[np.float64] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate sizing and allocate storage."""
        if self.samples_per_second <= 0:
            raise ValueError("samples_per_second must be positive")
        if self.preview_seconds <= 0:
            raise ValueError("preview_seconds must be positive")
        self.points = np.zeros((self.capacity, 2), dtype=np.float64)

    @property
    def capacity(self) -> int:
        """Number of samples held."""
        return self.samples_per_second * self.preview_seconds

    @property
    def times(self) -> NDArray[np.float64]:
        """Sample times [s] at the buffer's own rate."""
        return np.arange(self.capacity, dtype=np.float64) / self.samples_per_second

    @property
    def horizontal(self) -> NDArray[np.float64]:
        """Horizontal coordinates [m]."""
        return self.points[:, 0]

    @property
    def vertical(self) -> NDArray[np.float64]:
        """Vertical coordinates [m]."""
        return self.points[:, 1]

    def __len__(self) -> int:
        return self.capacity

    def __getitem__(self, index: int) -> Position2D:
        x, y = self.points[index]
        return Position2D(float(x), float(y))

    def to_dataframe(self):
        """Convert to Polars DataFrame."""
        import polars as pl

        return pl.DataFrame({
            "time": self.times,
            "horizontal": self.horizontal,
            "vertical": self.vertical,
        })


# =============================================================================
# Numba-Optimized Fill
# =============================================================================


@njit(cache=True)
def _fill_samples(
    out: np.ndarray,
    samples_per_second: int,
    d_h: float, d_v: float,
    h0: float, power: float, g: float,
) -> None:
    """Overwrite every row of out with the position at t = i / rate."""
    for i in range(out.shape[0]):
        t = i / samples_per_second
        x, y = _predict(t, d_h, d_v, h0, power, g)
        out[i, 0] = x
        out[i, 1] = y


# =============================================================================
# Sampling
# =============================================================================


@beartype
def rebuild_samples(
    buffer: TrajectorySampleBuffer,
    samples_per_second: int,
    launch_direction: LaunchDirection,
    origin_height: float,
    power: float,
    gravity: float,
) -> TrajectorySampleBuffer:
    """Recompute every sample of the preview buffer in place.

    Args:
        buffer: Buffer to overwrite
        samples_per_second: Sample spacing, t = i / samples_per_second [1/s]
        launch_direction: Unit launch vector
        origin_height: Launch height [m]
        power: Launch speed [m/s]
        gravity: Vertical acceleration [m/s^2]

    Returns:
        The same buffer, for chaining

    Raises:
        ValueError: If samples_per_second differs from the buffer's rate
    """
    if samples_per_second <= 0:
        raise ValueError("samples_per_second must be positive")
    if samples_per_second != buffer.samples_per_second:
        raise ValueError(
            f"samples_per_second={samples_per_second} does not match the "
            f"buffer rate {buffer.samples_per_second}"
        )

    _fill_samples(
        buffer.points,
        samples_per_second,
        launch_direction.horizontal, launch_direction.vertical,
        origin_height, power, gravity,
    )
    return buffer


@beartype
@dataclass
class TrajectorySampler:
    """Owns a preview buffer and refreshes it each tick.

    Attributes:
        samples_per_second: Sample rate [1/s]
        preview_seconds: Preview window [s]
    """
    samples_per_second: int = 20
    preview_seconds: int = 10

    buffer: TrajectorySampleBuffer = field(init=False)

    def __post_init__(self) -> None:
        """Allocate the buffer once."""
        self.buffer = TrajectorySampleBuffer(
            samples_per_second=self.samples_per_second,
            preview_seconds=self.preview_seconds,
        )

    @beartype
    def rebuild(
        self,
        launch_direction: LaunchDirection,
        origin_height: float,
        power: float,
        gravity: float,
    ) -> TrajectorySampleBuffer:
        """Refresh the owned buffer for the current launch."""
        return rebuild_samples(
            self.buffer,
            self.samples_per_second,
            launch_direction,
            origin_height,
            power,
            gravity,
        )
