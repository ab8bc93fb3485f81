"""Simulated time source driven by the host game loop."""
from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class FrameTimer:
    """High resolution wall-clock timer based on :func:`time.perf_counter`."""

    last_time: float = field(default_factory=time.perf_counter)

    def tick(self) -> float:
        now = time.perf_counter()
        dt = now - self.last_time
        self.last_time = now
        return dt


@dataclass
class SimulationClock:
    """
    Monotonic simulated time advanced by the host loop.

    Real elapsed time is multiplied by ``time_scale``; a paused clock, or a
    scale of zero, leaves simulated time where it is.
    """

    time_scale: float = 1.0
    sim_time: float = 0.0
    paused: bool = False

    def __post_init__(self) -> None:
        if self.time_scale < 0:
            raise ValueError(f"time_scale cannot be negative, got {self.time_scale}")

    def now(self) -> float:
        return self.sim_time

    def advance(self, real_dt: float) -> float:
        """Advance by ``real_dt`` wall seconds; returns the new simulated time."""
        if not self.paused and real_dt > 0.0:
            self.sim_time += real_dt * self.time_scale
        return self.sim_time

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    @property
    def is_paused(self) -> bool:
        return self.paused or self.time_scale == 0.0

    def set_time_scale(self, scale: float) -> None:
        if scale < 0:
            raise ValueError(f"time_scale cannot be negative, got {scale}")
        self.time_scale = scale


__all__ = ["FrameTimer", "SimulationClock"]
