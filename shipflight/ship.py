"""
Ship record and read-only snapshots.

A Ship is owned by the FlightSimulation; collaborators such as the renderer
only see ShipSnapshot copies or read the record without mutating it.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional, Tuple

import numpy as np

from .bodies import BodyRef
from .flight import INITIAL_STATE, FlightState
from .physics import Vector3D, vectors_to_array


@dataclass(frozen=True)
class ShipSnapshot:
    """Immutable copy of what the rendering layer needs to draw a ship."""
    ship_id: str
    origin: BodyRef
    destination: BodyRef
    position: Vector3D
    velocity: Vector3D
    state: FlightState
    state_start_time: float
    trail: Tuple[Vector3D, ...]
    total_flight_time_estimate: float


@dataclass
class Ship:
    """
    A ship flying between two bodies.

    Attributes:
        ship_id: Unique identifier.
        origin: Body the flight started from.
        destination: Body the ship is flying to.
        launch_origin: Fixed start point of the current flight. Captured at
            launch and replaced by the ship's position on retarget.
        position: Last committed position.
        velocity: Position change per simulated second over the last tick.
        state: Current flight phase.
        state_start_time: Simulated time the current phase was entered.
        launch_time: Simulated time the ship was launched.
        fixed_destination: Destination snapshot taken on entering TRAVELING.
        travel_duration: Time threshold of the TRAVELING phase.
        total_flight_time_estimate: Informational estimate of the whole
            flight (all phases up to WAITING).
        last_update_time: Simulated time of the last committed position.
        max_trail_length: Capacity of the trail buffer.
        trail: Past positions, oldest first.
    """
    ship_id: str
    origin: BodyRef
    destination: BodyRef
    launch_origin: Vector3D
    position: Vector3D
    velocity: Vector3D = field(default_factory=Vector3D.zero)
    state: FlightState = INITIAL_STATE
    state_start_time: float = 0.0
    launch_time: float = 0.0
    fixed_destination: Optional[Vector3D] = None
    travel_duration: float = 0.0
    total_flight_time_estimate: float = 0.0
    last_update_time: Optional[float] = None
    max_trail_length: int = 30
    trail: Deque[Vector3D] = field(default_factory=deque)

    def __post_init__(self) -> None:
        if self.max_trail_length < 1:
            raise ValueError(
                f"max_trail_length must be at least 1, got {self.max_trail_length}"
            )
        seed = list(self.trail) or [self.position.copy()]
        self.trail = deque(seed, maxlen=self.max_trail_length)

    def reset_trail(self) -> None:
        """Clear the trail and reseed it with the current position."""
        self.trail = deque([self.position.copy()], maxlen=self.max_trail_length)

    def record_position(self, position: Vector3D) -> None:
        """Append a position; the deque drops the oldest entry when full."""
        self.trail.append(position.copy())

    def snapshot(self) -> ShipSnapshot:
        """Copy of the drawable state."""
        return ShipSnapshot(
            ship_id=self.ship_id,
            origin=self.origin,
            destination=self.destination,
            position=self.position.copy(),
            velocity=self.velocity.copy(),
            state=self.state,
            state_start_time=self.state_start_time,
            trail=tuple(p.copy() for p in self.trail),
            total_flight_time_estimate=self.total_flight_time_estimate,
        )

    def trail_array(self) -> np.ndarray:
        """Trail positions as an (N, 3) array, oldest first."""
        return vectors_to_array(self.trail)

    def trail_fade_weights(self) -> np.ndarray:
        """
        Per-point brightness for a fading trail.

        Quadratic fade from 0 at the oldest point to 1 at the newest. A
        single-point trail is fully bright.
        """
        count = len(self.trail)
        if count < 2:
            return np.ones(count, dtype=float)
        return np.linspace(0.0, 1.0, count) ** 2
