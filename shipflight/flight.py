"""
Flight State Machine for the Ship-Flight Simulation.

Every ship moves through a fixed sequence of phases:

    LAUNCHING -> TRAVELING -> ORBITING -> LANDING -> WAITING

Transitions depend only on the time spent in the current phase:
- LAUNCHING, ORBITING and LANDING leave after a fixed dwell duration
- TRAVELING leaves once elapsed time reaches the travel duration fixed when
  the phase was entered (launch origin to fixed destination / speed)
- WAITING is terminal; only a retarget or removal ends it

The machine is evaluated once per simulation tick and moves at most one
phase per evaluation, so no phase is ever skipped and none is revisited
except through an explicit retarget.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .config import DEFAULT_LAUNCH_CONFIG, LaunchConfig
from .intercept import estimate_travel_time
from .physics import Vector3D, clamp01

if TYPE_CHECKING:
    from .ship import Ship


class FlightState(Enum):
    """Phases of a ship's flight."""
    LAUNCHING = "launching"
    TRAVELING = "traveling"
    ORBITING = "orbiting"
    LANDING = "landing"
    WAITING = "waiting"


# Phase order; WAITING has no successor
PHASE_ORDER = (
    FlightState.LAUNCHING,
    FlightState.TRAVELING,
    FlightState.ORBITING,
    FlightState.LANDING,
    FlightState.WAITING,
)

INITIAL_STATE = FlightState.LAUNCHING
TERMINAL_STATE = FlightState.WAITING


def next_state(state: FlightState) -> Optional[FlightState]:
    """Successor of a phase, or None for the terminal phase."""
    index = PHASE_ORDER.index(state)
    if index + 1 >= len(PHASE_ORDER):
        return None
    return PHASE_ORDER[index + 1]


def phase_index(state: FlightState) -> int:
    """Position of a phase in the flight sequence."""
    return PHASE_ORDER.index(state)


def travel_duration_for(
    launch_origin: Vector3D,
    destination: Vector3D,
    travel_speed: float
) -> float:
    """
    Time needed to travel between two fixed points.

    Measured from the launch origin, never from the ship's live position, so a
    ship partway along its arc keeps its original travel time.
    """
    return estimate_travel_time(launch_origin.distance_to(destination), travel_speed)


@dataclass(frozen=True)
class FlightTransition:
    """
    A phase change that is due.

    Attributes:
        from_state: Phase being left.
        to_state: Phase being entered.
        time: Simulated time at which the change is applied.
        elapsed_in_previous: Time spent in the phase being left.
    """
    from_state: FlightState
    to_state: FlightState
    time: float
    elapsed_in_previous: float


class FlightStateMachine:
    """
    Transition rules for ship flights.

    The machine holds only configuration; all per-ship state lives on the
    Ship record, which the simulation owns.
    """

    def __init__(self, config: LaunchConfig = DEFAULT_LAUNCH_CONFIG) -> None:
        self.config = config

    def phase_duration(self, ship: Ship, state: Optional[FlightState] = None) -> Optional[float]:
        """
        Dwell threshold of a phase for a ship.

        Args:
            ship: Ship whose travel duration is used for TRAVELING.
            state: Phase to query (defaults to the ship's current phase).

        Returns:
            Threshold in seconds, or None for the terminal phase.
        """
        state = state or ship.state
        if state == FlightState.LAUNCHING:
            return self.config.takeoff_duration
        if state == FlightState.TRAVELING:
            return ship.travel_duration
        if state == FlightState.ORBITING:
            return self.config.orbit_duration
        if state == FlightState.LANDING:
            return self.config.landing_duration
        return None

    @staticmethod
    def elapsed(ship: Ship, now: float) -> float:
        """Time spent in the current phase (never negative)."""
        return max(0.0, now - ship.state_start_time)

    def due_transition(self, ship: Ship, now: float) -> Optional[FlightTransition]:
        """
        Check whether the ship should move to its next phase.

        Returns:
            The transition to apply, or None if the ship stays put.
        """
        threshold = self.phase_duration(ship)
        if threshold is None:
            return None

        elapsed = self.elapsed(ship, now)
        if elapsed < threshold:
            return None

        target = next_state(ship.state)
        if target is None:
            return None
        return FlightTransition(
            from_state=ship.state,
            to_state=target,
            time=now,
            elapsed_in_previous=elapsed,
        )

    def apply(self, ship: Ship, transition: FlightTransition) -> None:
        """Enter the transition's target phase."""
        ship.state = transition.to_state
        ship.state_start_time = transition.time

    def begin_travel(self, ship: Ship, fixed_destination: Vector3D, now: float) -> None:
        """
        Enter TRAVELING toward a fixed destination.

        Snapshots the destination and fixes the travel duration from the
        ship's launch origin. Used both when leaving LAUNCHING and when a ship
        is retargeted.
        """
        ship.state = FlightState.TRAVELING
        ship.state_start_time = now
        ship.fixed_destination = fixed_destination.copy()
        ship.travel_duration = travel_duration_for(
            ship.launch_origin, fixed_destination, self.config.travel_speed
        )

    def remaining_flight_time(self, travel_duration: float, from_state: FlightState) -> float:
        """Estimated time from entering a phase until the ship is waiting."""
        durations = {
            FlightState.LAUNCHING: self.config.takeoff_duration,
            FlightState.TRAVELING: travel_duration,
            FlightState.ORBITING: self.config.orbit_duration,
            FlightState.LANDING: self.config.landing_duration,
        }
        start = phase_index(from_state)
        return sum(durations.get(state, 0.0) for state in PHASE_ORDER[start:])

    def progress(self, ship: Ship, now: float) -> float:
        """
        Fraction of the current phase completed, in [0, 1].

        The terminal phase always reports 1.0.
        """
        threshold = self.phase_duration(ship)
        if threshold is None:
            return 1.0
        if threshold <= 0:
            return 1.0
        return clamp01(self.elapsed(ship, now) / threshold)
