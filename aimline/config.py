"""Configuration for the aiming session.

Holds the operator control ranges, the preview sizing and the error
indicator decay. Defaults match a small tank-shooting range: power 0 to 100,
angle 0 to 90 degrees, target 10 to 80 m out and up to 30 m high.

Example:
    >>> from aimline.config import AimConfig
    >>>
    >>> config = AimConfig(max_power=150.0, error_decay_rate=1.0)
    >>> text = config.to_json()
    >>> AimConfig.from_json(text) == config
    True
"""

import json
from dataclasses import asdict, dataclass

import numpy as np
from beartype import beartype

# Unity-style downward gravity [m/s^2]
DEFAULT_GRAVITY: float = -9.81


@beartype
@dataclass
class AimConfig:
    """Aiming configuration.

    Attributes:
        min_power: Lowest selectable launch speed [m/s]
        max_power: Highest selectable launch speed [m/s]
        min_angle: Lowest selectable launch angle [deg]
        max_angle: Highest selectable launch angle [deg]
        min_distance: Closest target placement [m]
        max_distance: Farthest target placement [m]
        min_elevation: Lowest target elevation [m]
        max_elevation: Highest target elevation [m]
        samples_per_second: Preview sample rate [1/s]
        preview_seconds: Preview window length [s]
        error_decay_rate: Error indicator fade rate [1/s]
        match_tolerance: Angle difference treated as "already matched" [deg]
        gravity: Default vertical acceleration [m/s^2]
    """
    min_power: float = 0.0
    max_power: float = 100.0
    min_angle: float = 0.0
    max_angle: float = 90.0
    min_distance: float = 10.0
    max_distance: float = 80.0
    min_elevation: float = 0.0
    max_elevation: float = 30.0
    samples_per_second: int = 20
    preview_seconds: int = 10
    error_decay_rate: float = 0.5
    match_tolerance: float = 0.0  # Exact equality by default
    gravity: float = DEFAULT_GRAVITY

    def __post_init__(self) -> None:
        """Validate inputs."""
        for name in ("power", "angle", "distance", "elevation"):
            lo = getattr(self, f"min_{name}")
            hi = getattr(self, f"max_{name}")
            if lo > hi:
                raise ValueError(f"min_{name} ({lo}) exceeds max_{name} ({hi})")
        if self.min_power < 0:
            raise ValueError("min_power must be non-negative")
        if self.min_distance <= 0:
            raise ValueError("min_distance must be positive")
        if self.samples_per_second <= 0 or self.preview_seconds <= 0:
            raise ValueError("preview sizing must be positive")
        if self.error_decay_rate < 0:
            raise ValueError("error_decay_rate must be non-negative")
        if self.match_tolerance < 0:
            raise ValueError("match_tolerance must be non-negative")

    @property
    def sample_count(self) -> int:
        """Preview buffer capacity."""
        return self.samples_per_second * self.preview_seconds

    # Starting control values sit mid-range

    @property
    def initial_power(self) -> float:
        return (self.min_power + self.max_power) / 2.0

    @property
    def initial_angle(self) -> float:
        return (self.min_angle + self.max_angle) / 2.0

    @property
    def initial_distance(self) -> float:
        return (self.min_distance + self.max_distance) / 2.0

    @property
    def initial_elevation(self) -> float:
        return (self.min_elevation + self.max_elevation) / 2.0

    def clamp_power(self, value: float) -> float:
        return float(np.clip(value, self.min_power, self.max_power))

    def clamp_angle(self, value: float) -> float:
        return float(np.clip(value, self.min_angle, self.max_angle))

    def clamp_distance(self, value: float) -> float:
        return float(np.clip(value, self.min_distance, self.max_distance))

    def clamp_elevation(self, value: float) -> float:
        return float(np.clip(value, self.min_elevation, self.max_elevation))

    def to_json(self) -> str:
        """Serialize to JSON."""
        return json.dumps(asdict(self), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> "AimConfig":
        """Deserialize from JSON.

        Unknown keys raise ValueError. Integer values for float fields are
        accepted.
        """
        data = json.loads(json_str)
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        for key, value in data.items():
            if isinstance(cls.__dataclass_fields__[key].default, float) and isinstance(value, int):
                data[key] = float(value)
        return cls(**data)
