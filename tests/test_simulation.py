#!/usr/bin/env python3
"""
Test Suite for the Flight Simulation Engine

Tests cover:
1. Launch, retarget and remove commands
2. Full flights through every phase
3. Trail bounds and snapshots
4. Tick throttling and paused clocks
5. Unresolvable bodies and rejected retargets
6. Event log and callbacks
"""

import pytest

import shipflight.simulation as simulation_module
from shipflight.bodies import BodyRef
from shipflight.config import LaunchConfig, SimulationConfig
from shipflight.flight import PHASE_ORDER, FlightState, phase_index
from shipflight.orbits import position_of
from shipflight.scenarios import create_demo_system
from shipflight.simulation import (
    FlightSimulation,
    SimulationEvent,
    SimulationEventType,
)


HOME = BodyRef.of("home", "planet")
LUNA = BodyRef.of("luna", "moon")
OUTER = BodyRef.of("outer", "planet")
CERES = BodyRef.of("ceres", "asteroid")

FRAME = 0.05  # wall and simulated seconds per test tick


# =============================================================================
# FIXTURES
# =============================================================================

class FakeTimer:
    """Manually advanced wall clock."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, dt):
        self.now += dt


@pytest.fixture
def system():
    return create_demo_system()


@pytest.fixture
def timer():
    return FakeTimer()


@pytest.fixture
def sim(timer):
    return FlightSimulation(timer=timer)


def run(sim, system, timer, start, end, dt=FRAME, observe=None):
    """Tick from ``start`` (exclusive) to ``end`` with wall time keeping pace."""
    t = start
    while t < end:
        t += dt
        timer.advance(dt)
        sim.tick(system, t)
        if observe is not None:
            observe(t)
    return t


# =============================================================================
# LAUNCH
# =============================================================================

class TestLaunch:
    """Tests for creating ships."""

    def test_launch_creates_launching_ship(self, sim, system):
        ship_id = sim.launch(HOME, LUNA, system, 0.0)
        ship = sim.get_ship(ship_id)

        assert ship.state == FlightState.LAUNCHING
        assert ship.state_start_time == 0.0
        assert ship.position == position_of(HOME, system, 0.0)
        assert ship.launch_origin == ship.position
        assert len(ship.trail) == 1
        assert ship.total_flight_time_estimate > 0.0

    def test_launch_emits_event(self, sim, system):
        ship_id = sim.launch(HOME, LUNA, system, 1.5)
        events = sim.get_events_by_type(SimulationEventType.SHIP_LAUNCHED)
        assert len(events) == 1
        assert events[0].ship_id == ship_id
        assert events[0].timestamp == 1.5
        assert events[0].data["destination"] == "moon:luna"

    def test_generated_ids_are_unique(self, sim, system):
        ids = {sim.launch(HOME, LUNA, system, 0.0) for _ in range(10)}
        assert len(ids) == 10

    def test_explicit_id(self, sim, system):
        assert sim.launch(HOME, LUNA, system, 0.0, ship_id="alpha") == "alpha"

    def test_duplicate_id_raises(self, sim, system):
        sim.launch(HOME, LUNA, system, 0.0, ship_id="alpha")
        with pytest.raises(ValueError):
            sim.launch(HOME, OUTER, system, 0.0, ship_id="alpha")

    @pytest.mark.parametrize("origin,destination", [
        (BodyRef.of("nowhere", "planet"), LUNA),
        (HOME, BodyRef.of("nowhere", "moon")),
        (HOME, BodyRef.of("luna", "planet")),
    ])
    def test_unresolvable_launch_returns_none(self, sim, system, origin, destination):
        assert sim.launch(origin, destination, system, 0.0) is None
        assert sim.list_active_ships() == []
        assert len(sim.get_events_by_type(SimulationEventType.BODY_UNRESOLVED)) == 1

    def test_trail_capacity_from_config(self, timer, system):
        config = SimulationConfig(launch=LaunchConfig(max_trail_length=7))
        sim = FlightSimulation(config=config, timer=timer)
        ship = sim.get_ship(sim.launch(HOME, LUNA, system, 0.0))
        assert ship.trail.maxlen == 7


# =============================================================================
# FULL FLIGHTS
# =============================================================================

class TestFullFlight:
    """Tests for ships flying through every phase."""

    def test_reaches_waiting_through_every_phase(self, sim, system, timer):
        ship_id = sim.launch(HOME, OUTER, system, 0.0)
        run(sim, system, timer, 0.0, 40.0)

        ship = sim.get_ship(ship_id)
        assert ship.state == FlightState.WAITING
        changes = [
            e.data["to_state"]
            for e in sim.get_events_for_ship(ship_id)
            if e.event_type == SimulationEventType.STATE_CHANGED
        ]
        assert changes == [s.value for s in PHASE_ORDER[1:]]

    def test_phases_never_go_backwards(self, sim, system, timer):
        ship_id = sim.launch(HOME, CERES, system, 0.0)
        seen = []
        run(sim, system, timer, 0.0, 30.0,
            observe=lambda t: seen.append(phase_index(sim.get_ship(ship_id).state)))
        assert seen == sorted(seen)
        assert all(b - a <= 1 for a, b in zip(seen, seen[1:]))

    def test_waiting_ships_persist(self, sim, system, timer):
        ship_id = sim.launch(HOME, LUNA, system, 0.0)
        run(sim, system, timer, 0.0, 60.0)
        assert sim.get_ship(ship_id).state == FlightState.WAITING
        assert [s.ship_id for s in sim.list_active_ships()] == [ship_id]

    def test_prediction_runs_once_per_flight(self, sim, system, timer, monkeypatch):
        calls = []
        original = simulation_module.predict_for_ref

        def counting(*args, **kwargs):
            calls.append(args)
            return original(*args, **kwargs)

        monkeypatch.setattr(simulation_module, "predict_for_ref", counting)

        sim.launch(HOME, OUTER, system, 0.0)
        end = run(sim, system, timer, 0.0, 40.0)
        assert len(calls) == 1

        sim.retarget(sim.list_active_ships()[0].ship_id, LUNA, system, end)
        run(sim, system, timer, end, end + 2.0)
        assert len(calls) == 2

    def test_travel_plan_fixed_while_traveling(self, sim, system, timer):
        ship_id = sim.launch(HOME, OUTER, system, 0.0)
        plans = []

        def observe(t):
            ship = sim.get_ship(ship_id)
            if ship.state == FlightState.TRAVELING:
                plans.append((ship.fixed_destination.to_tuple(), ship.travel_duration))

        run(sim, system, timer, 0.0, 20.0, observe=observe)

        assert len(plans) > 10
        assert all(plan == plans[0] for plan in plans)
        ship = sim.get_ship(ship_id)
        _, duration = plans[0]
        assert duration == pytest.approx(
            ship.launch_origin.distance_to(ship.fixed_destination) / 4.0
        )

    def test_velocity_while_traveling(self, sim, system, timer):
        ship_id = sim.launch(HOME, OUTER, system, 0.0)
        run(sim, system, timer, 0.0, 4.0)
        ship = sim.get_ship(ship_id)
        assert ship.state == FlightState.TRAVELING
        assert ship.velocity.magnitude > 0.0


# =============================================================================
# TRAIL AND SNAPSHOTS
# =============================================================================

class TestTrail:
    """Tests for the bounded trail."""

    def test_trail_never_exceeds_capacity(self, timer, system):
        config = SimulationConfig(launch=LaunchConfig(max_trail_length=5))
        sim = FlightSimulation(config=config, timer=timer)
        ship_id = sim.launch(HOME, OUTER, system, 0.0)
        lengths = []
        run(sim, system, timer, 0.0, 5.0,
            observe=lambda t: lengths.append(len(sim.get_ship(ship_id).trail)))
        assert max(lengths) == 5
        ship = sim.get_ship(ship_id)
        assert ship.trail[-1] == ship.position

    def test_trail_arrays(self, sim, system, timer):
        ship_id = sim.launch(HOME, OUTER, system, 0.0)
        run(sim, system, timer, 0.0, 1.0)
        ship = sim.get_ship(ship_id)
        weights = ship.trail_fade_weights()
        assert ship.trail_array().shape == (len(ship.trail), 3)
        assert weights[0] == 0.0
        assert weights[-1] == 1.0

    def test_snapshot_is_detached(self, sim, system, timer):
        ship_id = sim.launch(HOME, OUTER, system, 0.0)
        snapshot = sim.get_ship_snapshot(ship_id)
        run(sim, system, timer, 0.0, 3.0)
        assert snapshot.state == FlightState.LAUNCHING
        assert len(snapshot.trail) == 1
        assert snapshot.position != sim.get_ship(ship_id).position

    def test_snapshot_unknown_ship(self, sim):
        assert sim.get_ship_snapshot("ghost") is None


# =============================================================================
# RETARGET
# =============================================================================

class TestRetarget:
    """Tests for redirecting ships."""

    def test_retarget_mid_flight_resets_trail_and_origin(self, sim, system, timer):
        ship_id = sim.launch(HOME, OUTER, system, 0.0)
        end = run(sim, system, timer, 0.0, 4.0)
        ship = sim.get_ship(ship_id)
        assert len(ship.trail) > 1

        assert sim.retarget(ship_id, CERES, system, end) is True

        assert ship.state == FlightState.TRAVELING
        assert ship.destination == CERES
        assert ship.state_start_time == end
        assert len(ship.trail) == 1
        assert ship.trail[0] == ship.position
        assert ship.launch_origin == ship.position
        assert ship.travel_duration == pytest.approx(
            ship.position.distance_to(ship.fixed_destination) / 4.0
        )

    def test_retarget_from_waiting(self, sim, system, timer):
        ship_id = sim.launch(HOME, LUNA, system, 0.0)
        end = run(sim, system, timer, 0.0, 60.0)
        ship = sim.get_ship(ship_id)
        assert ship.state == FlightState.WAITING

        assert sim.retarget(ship_id, OUTER, system, end) is True
        assert ship.state == FlightState.TRAVELING
        assert len(ship.trail) == 1
        assert ship.trail[0] == ship.position

        run(sim, system, timer, end, end + 40.0)
        assert ship.state == FlightState.WAITING

    def test_retarget_emits_event(self, sim, system):
        ship_id = sim.launch(HOME, LUNA, system, 0.0)
        sim.retarget(ship_id, OUTER, system, 0.5)
        event = sim.get_events_by_type(SimulationEventType.SHIP_RETARGETED)[0]
        assert event.data["previous_destination"] == "moon:luna"
        assert event.data["destination"] == "planet:outer"
        assert event.data["previous_state"] == "launching"

    def test_invalid_retarget_leaves_ship_alone(self, sim, system, timer):
        ship_id = sim.launch(HOME, OUTER, system, 0.0)
        end = run(sim, system, timer, 0.0, 4.0)
        ship = sim.get_ship(ship_id)
        before = ship.snapshot()

        assert sim.retarget(ship_id, BodyRef.of("nowhere", "asteroid"), system, end) is False

        assert ship.destination == OUTER
        assert ship.state == before.state
        assert ship.state_start_time == before.state_start_time
        assert len(ship.trail) == len(before.trail)
        assert len(sim.get_events_by_type(SimulationEventType.RETARGET_REJECTED)) == 1

    def test_retarget_unknown_ship(self, sim, system):
        assert sim.retarget("ghost", OUTER, system, 0.0) is False


# =============================================================================
# THROTTLING
# =============================================================================

class TestThrottling:
    """Tests for the tick rate limit and paused clocks."""

    def test_tick_too_soon_is_noop(self, sim, system, timer):
        ship_id = sim.launch(HOME, OUTER, system, 0.0)
        sim.tick(system, 1.0)
        before = sim.get_ship_snapshot(ship_id)

        timer.advance(0.01)
        assert sim.tick(system, 1.5) == []

        after = sim.get_ship_snapshot(ship_id)
        assert after.position == before.position
        assert after.state == before.state
        assert after.state_start_time == before.state_start_time
        assert after.trail == before.trail
        assert after.velocity == before.velocity
        assert sim.current_time == 1.0

    def test_tick_after_interval_runs(self, sim, system, timer):
        ship_id = sim.launch(HOME, OUTER, system, 0.0)
        sim.tick(system, 1.0)
        timer.advance(0.04)
        sim.tick(system, 1.5)
        assert sim.current_time == 1.5
        assert len(sim.get_ship(ship_id).trail) == 3

    def test_tick_at_launch_time_keeps_ship(self, sim, system, timer):
        ship_id = sim.launch(HOME, OUTER, system, 1.0)
        before = sim.get_ship_snapshot(ship_id)
        sim.tick(system, 1.0)
        after = sim.get_ship_snapshot(ship_id)
        assert after.trail == before.trail
        assert after.position == before.position

    def test_paused_clock_is_noop(self, sim, system, timer):
        ship_id = sim.launch(HOME, OUTER, system, 0.0)
        sim.tick(system, 1.0)
        trail_length = len(sim.get_ship(ship_id).trail)
        for _ in range(5):
            timer.advance(1.0)
            assert sim.tick(system, 1.0) == []
        assert len(sim.get_ship(ship_id).trail) == trail_length

    def test_skipped_tick_does_not_reset_throttle(self, sim, system, timer):
        sim.launch(HOME, OUTER, system, 0.0)
        sim.tick(system, 1.0)
        timer.advance(0.02)
        sim.tick(system, 1.1)
        timer.advance(0.02)
        sim.tick(system, 1.2)
        assert sim.current_time == 1.2

    def test_unthrottled_config(self, system, timer):
        sim = FlightSimulation(config=SimulationConfig(min_tick_interval=0.0), timer=timer)
        sim.launch(HOME, OUTER, system, 0.0)
        sim.tick(system, 0.1)
        sim.tick(system, 0.2)
        assert sim.current_time == 0.2


# =============================================================================
# UNRESOLVABLE BODIES
# =============================================================================

class TestUnresolvableBodies:
    """Tests for ships whose bodies disappear."""

    def test_ship_freezes_and_reports_once(self, sim, system, timer):
        ship_id = sim.launch(HOME, LUNA, system, 0.0)
        end = run(sim, system, timer, 0.0, 1.0)
        ship = sim.get_ship(ship_id)
        frozen = ship.snapshot()

        _, home = system.find_planet("home")
        moons = home.moons
        home.moons = []

        end = run(sim, system, timer, end, end + 3.0)

        assert ship.state == frozen.state
        assert ship.position == frozen.position
        assert len(ship.trail) == len(frozen.trail)
        unresolved = sim.get_events_by_type(SimulationEventType.BODY_UNRESOLVED)
        assert len(unresolved) == 1
        assert unresolved[0].data["body"] == "moon:luna"

        home.moons = moons
        run(sim, system, timer, end, end + 1.0)
        assert ship.position != frozen.position

    def test_other_ships_keep_flying(self, sim, system, timer):
        stuck = sim.launch(HOME, LUNA, system, 0.0)
        flying = sim.launch(HOME, OUTER, system, 0.0)
        system.find_planet("home")[1].moons = []

        run(sim, system, timer, 0.0, 5.0)

        assert sim.get_ship(stuck).state == FlightState.LAUNCHING
        assert sim.get_ship(flying).state != FlightState.LAUNCHING


# =============================================================================
# REMOVAL AND QUERIES
# =============================================================================

class TestRemoveAndQueries:
    """Tests for disposal and lookups."""

    def test_remove(self, sim, system):
        ship_id = sim.launch(HOME, LUNA, system, 0.0)
        assert sim.remove(ship_id) is True
        assert sim.get_ship(ship_id) is None
        assert sim.remove(ship_id) is False
        assert len(sim.get_events_by_type(SimulationEventType.SHIP_REMOVED)) == 1

    def test_clear(self, sim, system):
        sim.launch(HOME, LUNA, system, 0.0)
        sim.launch(HOME, OUTER, system, 0.0)
        sim.clear()
        assert sim.list_active_ships() == []

    def test_ships_by_state(self, sim, system, timer):
        sim.launch(HOME, LUNA, system, 0.0)
        sim.launch(HOME, OUTER, system, 0.0)
        assert len(sim.ships_by_state(FlightState.LAUNCHING)) == 2
        assert sim.ships_by_state(FlightState.WAITING) == []

    def test_flight_progress(self, sim, system):
        ship_id = sim.launch(HOME, LUNA, system, 0.0)
        assert sim.get_flight_progress(ship_id, 1.0) == pytest.approx(0.5)
        assert sim.get_flight_progress("ghost", 1.0) is None


# =============================================================================
# EVENTS
# =============================================================================

class TestEvents:
    """Tests for the event log and callbacks."""

    def test_tick_returns_state_changes(self, sim, system, timer):
        ship_id = sim.launch(HOME, OUTER, system, 0.0)
        timer.advance(1.0)
        events = sim.tick(system, 2.0)
        assert len(events) == 1
        assert events[0].event_type == SimulationEventType.STATE_CHANGED
        assert events[0].ship_id == ship_id
        assert events[0].data["to_state"] == "traveling"

    def test_callbacks_receive_events(self, sim, system):
        received = []
        sim.add_event_callback(received.append)
        sim.launch(HOME, LUNA, system, 0.0)
        assert [e.event_type for e in received] == [SimulationEventType.SHIP_LAUNCHED]

        sim.remove_event_callback(received.append)
        sim.launch(HOME, OUTER, system, 0.0)
        assert len(received) == 1

    def test_failing_callback_does_not_break_tick(self, sim, system, timer):
        def broken(event):
            raise RuntimeError("observer failure")

        sim.add_event_callback(broken)
        ship_id = sim.launch(HOME, OUTER, system, 0.0)
        run(sim, system, timer, 0.0, 3.0)
        assert sim.get_ship(ship_id).state == FlightState.TRAVELING

    def test_event_history_is_bounded(self, system, timer):
        sim = FlightSimulation(config=SimulationConfig(event_history_limit=3), timer=timer)
        for _ in range(5):
            sim.launch(HOME, LUNA, system, 0.0)
        assert len(sim.events) == 3

    def test_event_queries(self, sim, system):
        a = sim.launch(HOME, LUNA, system, 0.0)
        sim.launch(HOME, OUTER, system, 2.0)
        assert len(sim.get_events_since(1.0)) == 1
        assert [e.ship_id for e in sim.get_events_for_ship(a)] == [a]

    def test_event_str(self):
        event = SimulationEvent(SimulationEventType.SHIP_LAUNCHED, 1.5, ship_id="s1")
        assert str(event) == "T+1.5s [s1] SHIP_LAUNCHED"
