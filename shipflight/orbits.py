#!/usr/bin/env python3
"""
Orbital Kinematics for the Ship-Flight Simulation.

Places any body of a solar system at a simulated time. Bodies move on
precomputed circular paths, not by integrating gravity, so a position is a
pure function of (body id, kind, simulated time).

Rules:
- Planets: angular speed 0.08 / sqrt(orbital distance), outer planets slower
- Moons: parent planet position plus the moon's own circular offset
- Asteroids: every asteroid of a belt shares one slow angular rate and the
  belt's mid-radius, separated only by fixed angular offsets
- Star: fixed at the origin

Launch and landing points are lifted slightly above the body's surface along
+Y so ships do not start inside the body mesh.
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from .bodies import BodyKind, BodyRef, Planet, SolarSystem
from .physics import TWO_PI, Vector3D, vectors_to_array


# =============================================================================
# CONSTANTS
# =============================================================================

# Planet angular speed = coefficient / sqrt(orbital distance)  (rad/s)
PLANET_ANGULAR_SPEED_COEFFICIENT = 0.08

# Shared angular rate for all asteroids in a belt (rad/s)
ASTEROID_BELT_ANGULAR_SPEED = 0.1

# Launch points sit this many body radii above the orbital plane
SURFACE_CLEARANCE = 1.1


# =============================================================================
# PLANETS
# =============================================================================

def planet_angular_speed(orbital_distance: float) -> float:
    """
    Angular speed of a planet on a circular orbit.

    Simplified Kepler scaling: speed is proportional to 1/sqrt(distance).

    Args:
        orbital_distance: Orbit radius (scene units)

    Returns:
        Angular speed in rad/s

    Raises:
        ValueError: If distance is not positive.
    """
    if orbital_distance <= 0:
        raise ValueError(f"Orbital distance must be positive, got {orbital_distance}")
    return PLANET_ANGULAR_SPEED_COEFFICIENT / math.sqrt(orbital_distance)


def planet_initial_phase(planet: Planet, index: int, planet_count: int) -> float:
    """Phase at time zero; planets without one are spread by index."""
    if planet.initial_phase is not None:
        return planet.initial_phase
    return index * math.pi / (planet_count or 1)


def _planet_center(planet: Planet, index: int, system: SolarSystem,
                   sim_time: float) -> Vector3D:
    """Planet centre in the orbital plane."""
    phase = planet_initial_phase(planet, index, len(system.planets))
    angle = phase + sim_time * planet_angular_speed(planet.orbital_distance)
    return Vector3D(
        math.cos(angle) * planet.orbital_distance,
        0.0,
        math.sin(angle) * planet.orbital_distance
    )


# =============================================================================
# BODY POSITIONS
# =============================================================================

def body_center_position(
    body_id: str,
    kind: BodyKind | str,
    system: SolarSystem,
    sim_time: float
) -> Optional[tuple[Vector3D, float]]:
    """
    Resolve a body's centre and radius at a simulated time.

    Args:
        body_id: Identifier of the body
        kind: Kind of the body
        system: System the body belongs to
        sim_time: Simulated time (seconds)

    Returns:
        Tuple of (centre position, body radius), or None if the id/kind
        combination does not exist in the system.
    """
    try:
        kind = BodyKind.parse(kind)
    except ValueError:
        return None

    if kind == BodyKind.PLANET:
        found = system.find_planet(body_id)
        if found is None:
            return None
        index, planet = found
        if planet.orbital_distance <= 0:
            return None
        return _planet_center(planet, index, system, sim_time), planet.radius

    if kind == BodyKind.MOON:
        found_moon = system.find_moon(body_id)
        if found_moon is None:
            return None
        moon, parent = found_moon
        parent_found = system.find_planet(parent.body_id)
        if parent_found is None or parent.orbital_distance <= 0:
            return None
        parent_center = _planet_center(parent, parent_found[0], system, sim_time)

        moon_angle = (moon.initial_phase + sim_time * moon.orbital_speed) % TWO_PI
        offset = Vector3D(
            math.cos(moon_angle) * moon.orbital_distance,
            0.0,
            math.sin(moon_angle) * moon.orbital_distance
        )
        return parent_center + offset, moon.radius

    if kind == BodyKind.ASTEROID:
        found_asteroid = system.find_asteroid(body_id)
        if found_asteroid is None:
            return None
        asteroid, belt = found_asteroid
        angle = (sim_time * ASTEROID_BELT_ANGULAR_SPEED + asteroid.angular_offset) % TWO_PI
        distance = belt.mid_radius
        return (
            Vector3D(math.cos(angle) * distance, 0.0, math.sin(angle) * distance),
            asteroid.radius
        )

    if kind == BodyKind.SUN:
        star = system.star
        if star is None or star.body_id != body_id:
            return None
        return Vector3D.zero(), star.radius

    return None


def object_world_position(
    body_id: str,
    kind: BodyKind | str,
    system: SolarSystem,
    sim_time: float
) -> Optional[Vector3D]:
    """
    World position of a body's launch/landing point at a simulated time.

    The point is the body's centre lifted along +Y by SURFACE_CLEARANCE
    body radii. Unknown bodies give None; callers treat that as "cannot act
    now", never as a fatal condition.

    Args:
        body_id: Identifier of the body
        kind: Kind of the body
        system: System the body belongs to
        sim_time: Simulated time (seconds)

    Returns:
        Position vector, or None if the body cannot be resolved.
    """
    resolved = body_center_position(body_id, kind, system, sim_time)
    if resolved is None:
        return None
    center, radius = resolved
    return Vector3D(center.x, radius * SURFACE_CLEARANCE, center.z)


def position_of(ref: BodyRef, system: SolarSystem, sim_time: float) -> Optional[Vector3D]:
    """:func:`object_world_position` for a BodyRef."""
    return object_world_position(ref.body_id, ref.kind, system, sim_time)


def sample_orbit_path(
    ref: BodyRef,
    system: SolarSystem,
    start_time: float,
    duration: float,
    samples: int = 64
) -> Optional[np.ndarray]:
    """
    Sample a body's upcoming path for drawing.

    Args:
        ref: Body to sample
        system: System the body belongs to
        start_time: First sample time
        duration: Time span covered by the samples
        samples: Number of samples (at least 2)

    Returns:
        Array of shape (samples, 3), or None if the body cannot be resolved.
    """
    samples = max(2, samples)
    points = []
    for t in np.linspace(start_time, start_time + duration, samples):
        pos = position_of(ref, system, float(t))
        if pos is None:
            return None
        points.append(pos)
    return vectors_to_array(points)
