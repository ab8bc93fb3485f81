#!/usr/bin/env python3
"""
Trajectory Generation for the Ship-Flight Simulation.

Computes where a ship is drawn within its current flight phase:
- LAUNCHING: eased vertical ascent from the fixed launch point
- TRAVELING: cubic Bezier arc from the launch origin to the fixed
  destination, raised above the orbital plane
- ORBITING / WAITING: uniform circle around the live destination
- LANDING: eased descent from the parking orbit onto the live destination

All functions are stateless: they read the ship and return a new position.
Committing that position is the simulation's job.
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from .config import DEFAULT_LAUNCH_CONFIG, LaunchConfig
from .flight import FlightState
from .physics import (
    TWO_PI, Vector3D, clamp01, ease_in_out_cubic, ease_in_out_cubic_array,
)
from .ship import Ship


# =============================================================================
# BEZIER ARC
# =============================================================================

def bezier_control_points(
    origin: Vector3D,
    destination: Vector3D,
    config: LaunchConfig = DEFAULT_LAUNCH_CONFIG
) -> tuple[Vector3D, Vector3D]:
    """
    Control points for the travel arc.

    Both points start at the midpoint of the straight line, are pushed to
    opposite sides along the in-plane perpendicular by
    ``distance * control_point_offset``, and are raised to
    ``min(distance * curve_height_factor, max_curve_height)``.

    Args:
        origin: Arc start
        destination: Arc end
        config: Arc shape settings

    Returns:
        Tuple of (first control point, second control point)
    """
    distance = origin.distance_to(destination)
    midpoint = (origin + destination) * 0.5
    perpendicular = Vector3D(
        -(destination.z - origin.z),
        0.0,
        destination.x - origin.x
    ).normalized()

    curve_height = min(distance * config.curve_height_factor, config.max_curve_height)
    offset = perpendicular * (distance * config.control_point_offset)

    control1 = midpoint + offset
    control1.y = curve_height
    control2 = midpoint - offset
    control2.y = curve_height
    return control1, control2


def cubic_bezier(
    p0: Vector3D,
    p1: Vector3D,
    p2: Vector3D,
    p3: Vector3D,
    t: float
) -> Vector3D:
    """Point on a cubic Bezier curve (de Casteljau)."""
    a = p0.lerp(p1, t)
    b = p1.lerp(p2, t)
    c = p2.lerp(p3, t)
    ab = a.lerp(b, t)
    bc = b.lerp(c, t)
    return ab.lerp(bc, t)


def sample_travel_path(
    origin: Vector3D,
    destination: Vector3D,
    config: LaunchConfig = DEFAULT_LAUNCH_CONFIG,
    samples: int = 64,
    eased: bool = False
) -> np.ndarray:
    """
    Sample the whole travel arc for drawing a planned route.

    Args:
        origin: Arc start
        destination: Arc end
        config: Arc shape settings
        samples: Number of points (at least 2)
        eased: Space samples by the eased parameter the ship actually uses

    Returns:
        Array of shape (samples, 3), first row at origin, last at destination.
    """
    samples = max(2, samples)
    c1, c2 = bezier_control_points(origin, destination, config)
    t = np.linspace(0.0, 1.0, samples)
    if eased:
        t = ease_in_out_cubic_array(t)
    t = t[:, np.newaxis]
    p0, p1, p2, p3 = (v.to_array() for v in (origin, c1, c2, destination))
    u = 1.0 - t
    return (u**3) * p0 + 3 * (u**2) * t * p1 + 3 * u * (t**2) * p2 + (t**3) * p3


# =============================================================================
# PHASE POSITIONS
# =============================================================================

def launch_position(
    launch_origin: Vector3D,
    elapsed: float,
    config: LaunchConfig = DEFAULT_LAUNCH_CONFIG
) -> Vector3D:
    """Eased climb from the launch point to takeoff height."""
    if config.takeoff_duration <= 0:
        progress = 1.0
    else:
        progress = clamp01(elapsed / config.takeoff_duration)
    height = config.takeoff_height * ease_in_out_cubic(progress)
    return launch_origin + Vector3D.unit_y() * height


def travel_position(
    launch_origin: Vector3D,
    fixed_destination: Vector3D,
    elapsed: float,
    travel_duration: float,
    config: LaunchConfig = DEFAULT_LAUNCH_CONFIG
) -> Vector3D:
    """Point on the travel arc after ``elapsed`` seconds of travel."""
    if travel_duration <= 0:
        progress = 1.0
    else:
        progress = clamp01(elapsed / travel_duration)
    t = ease_in_out_cubic(progress)
    c1, c2 = bezier_control_points(launch_origin, fixed_destination, config)
    return cubic_bezier(launch_origin, c1, c2, fixed_destination, t)


def orbit_position(
    center: Vector3D,
    elapsed: float,
    config: LaunchConfig = DEFAULT_LAUNCH_CONFIG
) -> Vector3D:
    """
    Uniform circular parking orbit around a point.

    Shared by ORBITING and WAITING so both phases trace the same circle.
    """
    revolutions = (elapsed * config.orbit_speed) % 1.0
    angle = revolutions * TWO_PI
    return Vector3D(
        center.x + math.cos(angle) * config.orbit_radius,
        center.y,
        center.z + math.sin(angle) * config.orbit_radius
    )


def landing_position(
    destination: Vector3D,
    elapsed: float,
    config: LaunchConfig = DEFAULT_LAUNCH_CONFIG
) -> Vector3D:
    """Eased descent from the orbit entry point onto the destination."""
    if config.landing_duration <= 0:
        progress = 1.0
    else:
        progress = clamp01(elapsed / config.landing_duration)
    start = destination + Vector3D(config.orbit_radius, 0.0, 0.0)
    return start.lerp(destination, ease_in_out_cubic(progress))


# =============================================================================
# TRAJECTORY GENERATOR
# =============================================================================

class TrajectoryGenerator:
    """
    Picks the phase rule for a ship and evaluates it.

    Usage:
        generator = TrajectoryGenerator(config)
        pos = generator.position_for(ship, origin_pos, dest_pos, elapsed)
    """

    def __init__(self, config: LaunchConfig = DEFAULT_LAUNCH_CONFIG) -> None:
        self.config = config

    def position_for(
        self,
        ship: Ship,
        live_origin_pos: Optional[Vector3D],
        live_destination_pos: Vector3D,
        elapsed_in_state: float
    ) -> Vector3D:
        """
        Position of a ship within its current phase.

        Args:
            ship: Ship to place (not modified).
            live_origin_pos: Origin body's position this tick; only used when
                the ship has no fixed launch origin.
            live_destination_pos: Destination body's position this tick.
            elapsed_in_state: Simulated time since the phase began.

        Returns:
            New position vector.
        """
        launch_origin = ship.launch_origin
        if launch_origin is None:
            launch_origin = live_origin_pos if live_origin_pos is not None else ship.position

        state = ship.state
        if state == FlightState.LAUNCHING:
            return launch_position(launch_origin, elapsed_in_state, self.config)

        if state == FlightState.TRAVELING:
            destination = ship.fixed_destination
            if destination is None:
                destination = live_destination_pos
            return travel_position(
                launch_origin, destination, elapsed_in_state,
                ship.travel_duration, self.config
            )

        if state in (FlightState.ORBITING, FlightState.WAITING):
            return orbit_position(live_destination_pos, elapsed_in_state, self.config)

        if state == FlightState.LANDING:
            return landing_position(live_destination_pos, elapsed_in_state, self.config)

        return ship.position.copy()
