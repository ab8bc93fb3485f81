#!/usr/bin/env python3
"""
Flight Simulation Engine for the Ship-Flight Simulation.

This module implements the stepper that owns every ship:
- Commands: launch, retarget, remove
- A throttled tick that advances all ships once per call
- Live origin/destination lookups through orbital kinematics
- Arrival prediction when a ship starts traveling or is retargeted
- Phase transitions, trajectory evaluation and trail upkeep
- An event log with optional observer callbacks

No condition inside a tick is raised to the caller. A ship whose bodies cannot
be resolved simply keeps its last position and phase; a tick that arrives too
soon after the previous one does nothing.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Deque, Optional

from .bodies import BodyRef, SolarSystem
from .config import SimulationConfig
from .flight import FlightState, FlightStateMachine
from .intercept import predict_for_ref
from .orbits import position_of
from .ship import Ship, ShipSnapshot
from .trajectory import TrajectoryGenerator

logger = logging.getLogger(__name__)


# =============================================================================
# EVENT TYPES
# =============================================================================

class SimulationEventType(Enum):
    """Types of events that can occur during simulation."""
    # Commands
    SHIP_LAUNCHED = auto()
    SHIP_RETARGETED = auto()
    SHIP_REMOVED = auto()

    # Flight
    STATE_CHANGED = auto()

    # Degraded conditions (never raised)
    BODY_UNRESOLVED = auto()
    RETARGET_REJECTED = auto()


@dataclass
class SimulationEvent:
    """
    An event that occurs during simulation.

    Attributes:
        event_type: The type of event.
        timestamp: Simulation time when event occurred (seconds).
        ship_id: ID of the ship involved (if applicable).
        data: Additional event-specific data.
    """
    event_type: SimulationEventType
    timestamp: float
    ship_id: Optional[str] = None
    data: dict = field(default_factory=dict)

    def __str__(self) -> str:
        ship_str = f"[{self.ship_id}] " if self.ship_id else ""
        return f"T+{self.timestamp:.1f}s {ship_str}{self.event_type.name}"


# =============================================================================
# FLIGHT SIMULATION
# =============================================================================

class FlightSimulation:
    """
    Owner of all ships in one system view.

    Every mutation of ship state goes through ``launch``, ``retarget``,
    ``remove`` or ``tick``. Simulated time is always passed in explicitly;
    only the tick throttle reads a wall-clock timer.

    Usage:
        sim = FlightSimulation()
        ship_id = sim.launch(BodyRef.of("p1", "planet"),
                             BodyRef.of("m1", "moon"), system, clock.now())
        # each host frame:
        sim.tick(system, clock.now())
        snapshot = sim.get_ship_snapshot(ship_id)

    Attributes:
        config: Stepper and flight configuration.
        ships: Dict of ship_id to Ship.
        events: Bounded history of simulation events.
        current_time: Simulated time of the last executed tick or command.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        timer: Callable[[], float] = time.perf_counter
    ) -> None:
        """
        Initialize the simulation.

        Args:
            config: Stepper configuration (defaults to SimulationConfig()).
            timer: Monotonic wall-clock source used only for tick throttling.
        """
        self.config = config or SimulationConfig()
        self.state_machine = FlightStateMachine(self.config.launch)
        self.trajectory = TrajectoryGenerator(self.config.launch)
        self._timer = timer

        self.ships: dict[str, Ship] = {}
        self.events: Deque[SimulationEvent] = deque(maxlen=self.config.event_history_limit)
        self.current_time: float = 0.0

        self._last_tick_wall: Optional[float] = None
        self._last_tick_sim: Optional[float] = None
        self._unresolved: set[str] = set()

        # Event callbacks (diagnostics only)
        self._event_callbacks: list[Callable[[SimulationEvent], None]] = []

    # -------------------------------------------------------------------------
    # Ship Management
    # -------------------------------------------------------------------------

    def launch(
        self,
        origin: BodyRef,
        destination: BodyRef,
        system: SolarSystem,
        sim_time: float,
        ship_id: Optional[str] = None
    ) -> Optional[str]:
        """
        Create a ship on the origin body, in the LAUNCHING phase.

        Args:
            origin: Body to launch from.
            destination: Body to fly to.
            system: System both bodies belong to.
            sim_time: Simulated launch time.
            ship_id: Explicit identifier (generated when omitted).

        Returns:
            The new ship's ID, or None if either body cannot be resolved.

        Raises:
            ValueError: If ``ship_id`` is already in use.
        """
        if ship_id is not None and ship_id in self.ships:
            raise ValueError(f"Ship ID already in use: {ship_id}")

        origin_pos = position_of(origin, system, sim_time)
        destination_pos = position_of(destination, system, sim_time)
        if origin_pos is None or destination_pos is None:
            missing = origin if origin_pos is None else destination
            logger.warning("Launch aborted: cannot resolve %s at t=%.2f", missing, sim_time)
            self._log_event(
                SimulationEventType.BODY_UNRESOLVED,
                timestamp=sim_time,
                data={'command': 'launch', 'body': str(missing)}
            )
            return None

        ship_id = ship_id or f"ship-{uuid.uuid4().hex[:8]}"
        launch_cfg = self.config.launch
        travel_estimate = origin_pos.distance_to(destination_pos) / launch_cfg.travel_speed

        ship = Ship(
            ship_id=ship_id,
            origin=origin,
            destination=destination,
            launch_origin=origin_pos.copy(),
            position=origin_pos.copy(),
            state=FlightState.LAUNCHING,
            state_start_time=sim_time,
            launch_time=sim_time,
            total_flight_time_estimate=self.state_machine.remaining_flight_time(
                travel_estimate, FlightState.LAUNCHING
            ),
            last_update_time=sim_time,
            max_trail_length=launch_cfg.max_trail_length,
        )
        self.ships[ship_id] = ship

        logger.info("Launched %s: %s -> %s at t=%.2f", ship_id, origin, destination, sim_time)
        self._log_event(
            SimulationEventType.SHIP_LAUNCHED,
            timestamp=sim_time,
            ship_id=ship_id,
            data={
                'origin': str(origin),
                'destination': str(destination),
                'estimated_flight_time': ship.total_flight_time_estimate,
            }
        )
        return ship_id

    def retarget(
        self,
        ship_id: str,
        new_destination: BodyRef,
        system: SolarSystem,
        sim_time: float
    ) -> bool:
        """
        Send a ship to a new destination from wherever it is now.

        Works from any phase, including WAITING. The ship re-enters TRAVELING
        with its current position as the new launch origin, a single-element
        trail, and a freshly predicted fixed destination.

        Args:
            ship_id: Ship to redirect.
            new_destination: New target body.
            system: System the target belongs to.
            sim_time: Simulated time of the command.

        Returns:
            True if the ship was redirected; False if the ship does not exist
            or the destination cannot be resolved (the ship is left as is).
        """
        ship = self.ships.get(ship_id)
        if ship is None:
            logger.warning("Retarget ignored: unknown ship %s", ship_id)
            return False

        solution = predict_for_ref(
            ship.position, new_destination, system, sim_time, self.config.launch.travel_speed
        )
        if solution is None:
            logger.warning(
                "Retarget of %s rejected: cannot resolve %s at t=%.2f",
                ship_id, new_destination, sim_time
            )
            self._log_event(
                SimulationEventType.RETARGET_REJECTED,
                timestamp=sim_time,
                ship_id=ship_id,
                data={'destination': str(new_destination)}
            )
            return False

        previous_destination = ship.destination
        previous_state = ship.state

        ship.destination = new_destination
        ship.launch_origin = ship.position.copy()
        self.state_machine.begin_travel(ship, solution.predicted_position, sim_time)
        ship.reset_trail()
        ship.total_flight_time_estimate = (
            (sim_time - ship.launch_time)
            + self.state_machine.remaining_flight_time(ship.travel_duration, FlightState.TRAVELING)
        )
        self._unresolved.discard(ship_id)

        logger.info(
            "Retargeted %s: %s -> %s from %s at t=%.2f",
            ship_id, previous_destination, new_destination, previous_state.value, sim_time
        )
        self._log_event(
            SimulationEventType.SHIP_RETARGETED,
            timestamp=sim_time,
            ship_id=ship_id,
            data={
                'previous_destination': str(previous_destination),
                'destination': str(new_destination),
                'previous_state': previous_state.value,
                'travel_duration': ship.travel_duration,
            }
        )
        return True

    def remove(self, ship_id: str) -> bool:
        """
        Dispose of a ship.

        Returns:
            True if a ship was removed, False if none had that ID.
        """
        ship = self.ships.pop(ship_id, None)
        if ship is None:
            return False
        self._unresolved.discard(ship_id)
        logger.info("Removed %s", ship_id)
        self._log_event(
            SimulationEventType.SHIP_REMOVED,
            timestamp=self.current_time,
            ship_id=ship_id,
            data={'state': ship.state.value}
        )
        return True

    def clear(self) -> None:
        """Remove every ship without emitting events."""
        self.ships.clear()
        self._unresolved.clear()

    def get_ship(self, ship_id: str) -> Optional[Ship]:
        """Get a ship by ID."""
        return self.ships.get(ship_id)

    def list_active_ships(self) -> list[Ship]:
        """All ships, in launch order."""
        return list(self.ships.values())

    def ships_by_state(self, state: FlightState) -> list[Ship]:
        """All ships currently in a given phase."""
        return [s for s in self.ships.values() if s.state == state]

    def get_ship_snapshot(self, ship_id: str) -> Optional[ShipSnapshot]:
        """Immutable copy of a ship's drawable state, or None."""
        ship = self.ships.get(ship_id)
        if ship is None:
            return None
        return ship.snapshot()

    def get_flight_progress(self, ship_id: str, sim_time: float) -> Optional[float]:
        """Fraction of the ship's current phase completed, or None."""
        ship = self.ships.get(ship_id)
        if ship is None:
            return None
        return self.state_machine.progress(ship, sim_time)

    # -------------------------------------------------------------------------
    # Stepping
    # -------------------------------------------------------------------------

    def tick(self, system: SolarSystem, sim_time_now: float) -> list[SimulationEvent]:
        """
        Advance every ship to ``sim_time_now``.

        Calls closer together than ``config.min_tick_interval`` of wall time,
        and calls that do not move simulated time forward, are no-ops.

        Args:
            system: System the ships fly in.
            sim_time_now: Current simulated time.

        Returns:
            Events produced by this tick (empty for a skipped tick).
        """
        wall_now = self._timer()
        if (self._last_tick_wall is not None and
                wall_now - self._last_tick_wall < self.config.min_tick_interval):
            logger.debug("Tick skipped: %.4fs since last tick", wall_now - self._last_tick_wall)
            return []

        if self._last_tick_sim is not None and sim_time_now <= self._last_tick_sim:
            logger.debug("Tick skipped: simulated time has not advanced (t=%.3f)", sim_time_now)
            return []

        self._last_tick_wall = wall_now
        self._last_tick_sim = sim_time_now
        self.current_time = sim_time_now

        step_events: list[SimulationEvent] = []
        for ship in list(self.ships.values()):
            step_events.extend(self._update_ship(ship, system, sim_time_now))
        return step_events

    def _update_ship(
        self,
        ship: Ship,
        system: SolarSystem,
        now: float
    ) -> list[SimulationEvent]:
        """Resolve, transition, place and record one ship."""
        events: list[SimulationEvent] = []
        if ship.last_update_time is not None and now <= ship.last_update_time:
            return events

        origin_pos = position_of(ship.origin, system, now)
        destination_pos = position_of(ship.destination, system, now)
        if origin_pos is None or destination_pos is None:
            missing = ship.origin if origin_pos is None else ship.destination
            self._report_unresolved(ship, missing, now, events)
            return events
        if ship.ship_id in self._unresolved:
            self._unresolved.discard(ship.ship_id)
            logger.info("%s: bodies resolvable again at t=%.2f", ship.ship_id, now)

        transition = self.state_machine.due_transition(ship, now)
        if transition is not None:
            if transition.to_state == FlightState.TRAVELING:
                solution = predict_for_ref(
                    ship.launch_origin, ship.destination, system, now,
                    self.config.launch.travel_speed
                )
                if solution is None:
                    self._report_unresolved(ship, ship.destination, now, events)
                    return events
                self.state_machine.begin_travel(ship, solution.predicted_position, now)
                ship.total_flight_time_estimate = (
                    (now - ship.launch_time)
                    + self.state_machine.remaining_flight_time(
                        ship.travel_duration, FlightState.TRAVELING
                    )
                )
            else:
                self.state_machine.apply(ship, transition)

            logger.debug(
                "%s: %s -> %s at t=%.2f",
                ship.ship_id, transition.from_state.value, transition.to_state.value, now
            )
            events.append(self._log_event(
                SimulationEventType.STATE_CHANGED,
                timestamp=now,
                ship_id=ship.ship_id,
                data={
                    'from_state': transition.from_state.value,
                    'to_state': transition.to_state.value,
                    'elapsed_in_previous': transition.elapsed_in_previous,
                }
            ))

        elapsed = self.state_machine.elapsed(ship, now)
        new_position = self.trajectory.position_for(ship, origin_pos, destination_pos, elapsed)

        if ship.last_update_time is not None and now > ship.last_update_time:
            ship.velocity = (new_position - ship.position) / (now - ship.last_update_time)

        ship.record_position(new_position)
        ship.position = new_position
        ship.last_update_time = now
        return events

    def _report_unresolved(
        self,
        ship: Ship,
        missing: BodyRef,
        now: float,
        events: list[SimulationEvent]
    ) -> None:
        """Log an unresolvable body once per outage; the ship is not touched."""
        if ship.ship_id in self._unresolved:
            return
        self._unresolved.add(ship.ship_id)
        logger.warning("%s frozen: cannot resolve %s at t=%.2f", ship.ship_id, missing, now)
        events.append(self._log_event(
            SimulationEventType.BODY_UNRESOLVED,
            timestamp=now,
            ship_id=ship.ship_id,
            data={'body': str(missing), 'state': ship.state.value}
        ))

    # -------------------------------------------------------------------------
    # Event Logging
    # -------------------------------------------------------------------------

    def add_event_callback(self, callback: Callable[[SimulationEvent], None]) -> None:
        """
        Register a callback to be called for each simulation event.

        Args:
            callback: Function that takes a SimulationEvent.
        """
        self._event_callbacks.append(callback)

    def remove_event_callback(self, callback: Callable[[SimulationEvent], None]) -> None:
        """Remove an event callback."""
        if callback in self._event_callbacks:
            self._event_callbacks.remove(callback)

    def _log_event(
        self,
        event_type: SimulationEventType,
        timestamp: float,
        ship_id: Optional[str] = None,
        data: Optional[dict] = None
    ) -> SimulationEvent:
        """Record a simulation event and notify callbacks."""
        event = SimulationEvent(
            event_type=event_type,
            timestamp=timestamp,
            ship_id=ship_id,
            data=data or {}
        )
        self.events.append(event)

        for callback in self._event_callbacks:
            try:
                callback(event)
            except Exception:
                logger.warning("Event callback failed for %s", event, exc_info=True)

        return event

    def get_events_since(self, since_time: float) -> list[SimulationEvent]:
        """Get all recorded events at or after a given time."""
        return [e for e in self.events if e.timestamp >= since_time]

    def get_events_for_ship(self, ship_id: str) -> list[SimulationEvent]:
        """Get all recorded events involving a specific ship."""
        return [e for e in self.events if e.ship_id == ship_id]

    def get_events_by_type(self, event_type: SimulationEventType) -> list[SimulationEvent]:
        """Get all recorded events of a specific type."""
        return [e for e in self.events if e.event_type == event_type]
