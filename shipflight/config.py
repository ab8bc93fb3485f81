"""
Flight configuration for the ship-flight simulation.

Defaults reproduce the tuned values of the interactive viewer:
- short takeoff and landing dwell times
- travel speed in scene units per simulated second
- a small parking orbit shared by the orbiting and waiting phases
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict


@dataclass
class LaunchConfig:
    """Per-flight tuning: phase durations, speeds and trajectory shape."""
    takeoff_duration: float = 2.0  # seconds
    travel_speed: float = 4.0  # units per second
    orbit_duration: float = 1.0  # seconds
    landing_duration: float = 2.0  # seconds
    takeoff_height: float = 0.3  # units above the launch point
    orbit_radius: float = 0.3  # units around destination
    orbit_speed: float = 0.5  # revolutions per second
    max_trail_length: int = 30  # positions kept in the trail
    # Bezier arc shape
    curve_height_factor: float = 0.3  # arc height as a fraction of distance
    max_curve_height: float = 5.0
    control_point_offset: float = 0.2  # sideways offset as a fraction of distance

    def __post_init__(self) -> None:
        """Clamp dwell times and reject values that cannot drive a flight."""
        self.takeoff_duration = max(0.0, self.takeoff_duration)
        self.orbit_duration = max(0.0, self.orbit_duration)
        self.landing_duration = max(0.0, self.landing_duration)
        self.takeoff_height = max(0.0, self.takeoff_height)
        self.orbit_radius = max(0.0, self.orbit_radius)
        self.max_curve_height = max(0.0, self.max_curve_height)
        if self.travel_speed <= 0:
            raise ValueError(f"travel_speed must be positive, got {self.travel_speed}")
        if self.max_trail_length < 1:
            raise ValueError(
                f"max_trail_length must be at least 1, got {self.max_trail_length}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LaunchConfig':
        """Create configuration from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


DEFAULT_LAUNCH_CONFIG = LaunchConfig()


@dataclass
class SimulationConfig:
    """Stepper configuration wrapping the flight tuning."""
    launch: LaunchConfig = field(default_factory=LaunchConfig)
    min_tick_interval: float = 1.0 / 30.0  # seconds of wall time (~30 updates/s)
    event_history_limit: int = 1000

    def __post_init__(self) -> None:
        self.min_tick_interval = max(0.0, self.min_tick_interval)
        self.event_history_limit = max(0, self.event_history_limit)

    @property
    def max_tick_rate_hz(self) -> float:
        """Upper bound on executed ticks per second."""
        if self.min_tick_interval <= 0:
            return float('inf')
        return 1.0 / self.min_tick_interval

    @classmethod
    def from_json(cls, path: str | Path) -> 'SimulationConfig':
        """Load configuration from JSON file."""
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Simulation config not found: {path}")

        with open(config_path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimulationConfig':
        """
        Create configuration from dictionary.

        Accepts either a nested ``launch`` table or, when the stepper
        settings are not needed, a flat table of launch settings.
        """
        launch_data = data.get("launch")
        if launch_data is None:
            launch_data = data
        max_rate = data.get("max_tick_rate_hz")
        if max_rate is not None:
            if max_rate <= 0:
                raise ValueError(f"max_tick_rate_hz must be positive, got {max_rate}")
            min_interval = 1.0 / max_rate
        else:
            min_interval = data.get("min_tick_interval", 1.0 / 30.0)

        return cls(
            launch=LaunchConfig.from_dict(launch_data),
            min_tick_interval=min_interval,
            event_history_limit=data.get("event_history_limit", 1000),
        )
