"""
Arrival Prediction for the Ship-Flight Simulation.

A ship travelling to a moving body must aim at where the body will be, not
where it is at launch. The predictor makes a single-pass estimate:

1. Resolve the target's current position.
2. Travel time = straight-line distance / nominal speed.
3. Resolve the target's position at now + travel time.

The estimate is not refined by further iterations. Fast-moving bodies
therefore carry a small targeting error, which the landing phase absorbs by
descending onto the live destination.

The predictor runs once per launch (when the ship enters the traveling
phase) and once per retarget, never per tick, so a ship's arc stays stable
while the real target keeps moving.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .bodies import BodyKind, BodyRef, SolarSystem
from .orbits import object_world_position
from .physics import Vector3D


@dataclass(frozen=True)
class InterceptSolution:
    """
    Result of an arrival prediction.

    Attributes:
        current_position: Target position at prediction time.
        predicted_position: Target position at the estimated arrival time.
        estimated_travel_time: Straight-line distance / nominal speed.
        arrival_time: Prediction time + estimated travel time.
    """
    current_position: Vector3D
    predicted_position: Vector3D
    estimated_travel_time: float
    arrival_time: float


def estimate_travel_time(distance: float, nominal_speed: float) -> float:
    """
    Time to cover a straight-line distance.

    Args:
        distance: Distance in scene units.
        nominal_speed: Travel speed in units per second.

    Returns:
        Travel time in seconds. Returns infinity if speed is zero or negative.
    """
    if nominal_speed <= 0:
        return float('inf')
    return distance / nominal_speed


def predict_intercept(
    launch_pos: Vector3D,
    target_id: str,
    target_kind: BodyKind | str,
    system: SolarSystem,
    sim_time_now: float,
    nominal_speed: float
) -> Optional[InterceptSolution]:
    """
    One-shot prediction of where a target will be on arrival.

    Args:
        launch_pos: Where the mover starts.
        target_id: Target body identifier.
        target_kind: Target body kind.
        system: System the target belongs to.
        sim_time_now: Simulated time of the prediction.
        nominal_speed: Mover's travel speed (units per second).

    Returns:
        InterceptSolution, or None if the target cannot be resolved or the
        speed cannot produce a finite travel time.
    """
    current = object_world_position(target_id, target_kind, system, sim_time_now)
    if current is None:
        return None

    travel_time = estimate_travel_time(launch_pos.distance_to(current), nominal_speed)
    if travel_time == float('inf'):
        return None

    arrival_time = sim_time_now + travel_time
    predicted = object_world_position(target_id, target_kind, system, arrival_time)
    if predicted is None:
        return None

    return InterceptSolution(
        current_position=current,
        predicted_position=predicted,
        estimated_travel_time=travel_time,
        arrival_time=arrival_time,
    )


def predict(
    launch_pos: Vector3D,
    target_id: str,
    target_kind: BodyKind | str,
    system: SolarSystem,
    sim_time_now: float,
    nominal_speed: float
) -> Optional[Vector3D]:
    """Predicted target position on arrival, or None (see predict_intercept)."""
    solution = predict_intercept(
        launch_pos, target_id, target_kind, system, sim_time_now, nominal_speed
    )
    if solution is None:
        return None
    return solution.predicted_position


def predict_for_ref(
    launch_pos: Vector3D,
    target: BodyRef,
    system: SolarSystem,
    sim_time_now: float,
    nominal_speed: float
) -> Optional[InterceptSolution]:
    """:func:`predict_intercept` for a BodyRef."""
    return predict_intercept(
        launch_pos, target.body_id, target.kind, system, sim_time_now, nominal_speed
    )
