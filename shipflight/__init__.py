"""Ship-flight simulation core: orbits, arrival prediction and flight phases."""

from .bodies import (
    Asteroid,
    AsteroidBelt,
    BodyKind,
    BodyRef,
    Moon,
    Planet,
    SolarSystem,
    Star,
)

from .clock import FrameTimer, SimulationClock

from .config import (
    DEFAULT_LAUNCH_CONFIG,
    LaunchConfig,
    SimulationConfig,
)

from .flight import (
    FlightState,
    FlightStateMachine,
    FlightTransition,
    next_state,
    travel_duration_for,
)

from .intercept import (
    InterceptSolution,
    estimate_travel_time,
    predict,
    predict_intercept,
)

from .orbits import (
    object_world_position,
    planet_angular_speed,
    position_of,
    sample_orbit_path,
)

from .physics import Vector3D, ease_in_out_cubic

from .ship import Ship, ShipSnapshot

from .simulation import (
    FlightSimulation,
    SimulationEvent,
    SimulationEventType,
)

from .trajectory import (
    TrajectoryGenerator,
    bezier_control_points,
    cubic_bezier,
    sample_travel_path,
)

__all__ = [
    # Bodies
    "Asteroid",
    "AsteroidBelt",
    "BodyKind",
    "BodyRef",
    "Moon",
    "Planet",
    "SolarSystem",
    "Star",
    # Time
    "FrameTimer",
    "SimulationClock",
    # Configuration
    "DEFAULT_LAUNCH_CONFIG",
    "LaunchConfig",
    "SimulationConfig",
    # Flight phases
    "FlightState",
    "FlightStateMachine",
    "FlightTransition",
    "next_state",
    "travel_duration_for",
    # Prediction
    "InterceptSolution",
    "estimate_travel_time",
    "predict",
    "predict_intercept",
    # Orbits
    "object_world_position",
    "planet_angular_speed",
    "position_of",
    "sample_orbit_path",
    # Math
    "Vector3D",
    "ease_in_out_cubic",
    # Ships
    "Ship",
    "ShipSnapshot",
    # Simulation
    "FlightSimulation",
    "SimulationEvent",
    "SimulationEventType",
    # Trajectories
    "TrajectoryGenerator",
    "bezier_control_points",
    "cubic_bezier",
    "sample_travel_path",
]
