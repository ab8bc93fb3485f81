"""
Ready-made solar systems for demos and tests.

Usage:
    system = create_demo_system()
    system = load_system("systems/kepler.json")
"""

from __future__ import annotations

import json
import math
from pathlib import Path

from .bodies import Asteroid, AsteroidBelt, Moon, Planet, SolarSystem, Star


def create_demo_system() -> SolarSystem:
    """
    Small system with every body kind.

    - star ``sun``
    - planets ``inner`` (d=4), ``home`` (d=7, moons ``luna`` and ``phobos``)
      and ``outer`` (d=14)
    - belt ``main-belt`` between 9 and 11 with asteroids ``ceres`` and
      ``vesta`` half a turn apart
    """
    return SolarSystem(
        system_id="demo",
        star=Star(body_id="sun", radius=1.0),
        planets=[
            Planet(body_id="inner", orbital_distance=4.0, radius=0.08),
            Planet(
                body_id="home",
                orbital_distance=7.0,
                radius=0.12,
                moons=[
                    Moon(body_id="luna", orbital_distance=0.6, orbital_speed=0.5, radius=0.03),
                    Moon(body_id="phobos", orbital_distance=0.35, orbital_speed=1.2,
                         radius=0.01, initial_phase=math.pi / 2),
                ],
            ),
            Planet(body_id="outer", orbital_distance=14.0, radius=0.3),
        ],
        asteroid_belts=[
            AsteroidBelt(
                belt_id="main-belt",
                inner_radius=9.0,
                outer_radius=11.0,
                asteroids=[
                    Asteroid(body_id="ceres", radius=0.02),
                    Asteroid(body_id="vesta", radius=0.01, angular_offset=math.pi),
                ],
            )
        ],
    )


def load_system(filepath: str | Path) -> SolarSystem:
    """
    Load a solar system from a JSON file.

    Args:
        filepath: Path to a JSON document in the SolarSystem.from_dict shape.

    Returns:
        The parsed system.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If required fields are missing.
    """
    with open(filepath, "r") as f:
        return SolarSystem.from_dict(json.load(f))
