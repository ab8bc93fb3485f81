"""
Celestial Body Registry for the Ship-Flight Simulation.

Read-only view of one solar system as supplied by the topology layer. The
flight core never mutates these records; it only resolves a ``BodyRef`` to the
orbital parameters needed to place a body at a simulated time.

Body kinds:
- Planets orbit the star on circular paths in the X/Z plane
- Moons orbit a parent planet
- Asteroids ride their belt's mid-radius at a shared angular rate
- The star sits at the system origin
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple


# =============================================================================
# BODY KIND / REFERENCE
# =============================================================================

class BodyKind(Enum):
    """Kinds of bodies a ship can launch from or travel to."""
    PLANET = "planet"
    MOON = "moon"
    ASTEROID = "asteroid"
    SUN = "sun"

    @classmethod
    def parse(cls, value: BodyKind | str) -> BodyKind:
        """
        Accept either a BodyKind or its string value.

        Raises:
            ValueError: If the string is not a known kind.
        """
        if isinstance(value, BodyKind):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown body kind: {value!r}") from None


@dataclass(frozen=True)
class BodyRef:
    """
    Reference to a body by identity and kind.

    Ships hold references, never the bodies themselves.
    """
    body_id: str
    kind: BodyKind

    @classmethod
    def of(cls, body_id: str, kind: BodyKind | str) -> BodyRef:
        """Build a reference, parsing string kinds."""
        return cls(body_id, BodyKind.parse(kind))

    @classmethod
    def parse(cls, text: str) -> BodyRef:
        """
        Parse the ``kind:id`` form produced by ``str(ref)``.

        Raises:
            ValueError: If the text has no kind prefix or an unknown kind.
        """
        kind, sep, body_id = text.partition(":")
        if not sep or not body_id:
            raise ValueError(f"Expected 'kind:id', got {text!r}")
        return cls.of(body_id, kind)

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.body_id}"


# =============================================================================
# BODY RECORDS
# =============================================================================

@dataclass
class Star:
    """The system's star, fixed at the origin."""
    body_id: str
    radius: float = 1.0


@dataclass
class Moon:
    """
    A moon orbiting a planet.

    Attributes:
        body_id: Unique identifier.
        orbital_distance: Distance from the parent planet's centre.
        orbital_speed: Angular speed around the parent (rad/s).
        radius: Body radius, used to lift launch points above the surface.
        initial_phase: Angle at simulated time zero (radians).
    """
    body_id: str
    orbital_distance: float
    orbital_speed: float
    radius: float = 0.0
    initial_phase: float = 0.0


@dataclass
class Planet:
    """
    A planet on a circular orbit around the star.

    Attributes:
        body_id: Unique identifier.
        orbital_distance: Orbit radius around the star.
        radius: Body radius, used to lift launch points above the surface.
        initial_phase: Angle at simulated time zero (radians). When None the
            phase is spread by the planet's index in the system.
        moons: Moons orbiting this planet.
    """
    body_id: str
    orbital_distance: float
    radius: float = 0.0
    initial_phase: Optional[float] = None
    moons: List[Moon] = field(default_factory=list)


@dataclass
class Asteroid:
    """An asteroid inside a belt, placed by a fixed angular offset."""
    body_id: str
    radius: float = 0.0
    angular_offset: float = 0.0


@dataclass
class AsteroidBelt:
    """A ring of asteroids between two radii."""
    belt_id: str
    inner_radius: float
    outer_radius: float
    asteroids: List[Asteroid] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.outer_radius < self.inner_radius:
            raise ValueError(
                f"Belt {self.belt_id}: outer radius {self.outer_radius} "
                f"is inside inner radius {self.inner_radius}"
            )

    @property
    def mid_radius(self) -> float:
        """Radius halfway between the belt's edges."""
        return self.inner_radius + (self.outer_radius - self.inner_radius) * 0.5


# =============================================================================
# SOLAR SYSTEM
# =============================================================================

@dataclass
class SolarSystem:
    """
    Read-only view of one system's bodies.

    Attributes:
        system_id: Unique identifier of the system.
        star: The central star, or None for a starless system.
        planets: Planets in orbit order; the index feeds default phases.
        asteroid_belts: Belts of asteroids.
    """
    system_id: str
    star: Optional[Star] = None
    planets: List[Planet] = field(default_factory=list)
    asteroid_belts: List[AsteroidBelt] = field(default_factory=list)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def find_planet(self, body_id: str) -> Optional[Tuple[int, Planet]]:
        """Find a planet and its index in the system."""
        for index, planet in enumerate(self.planets):
            if planet.body_id == body_id:
                return index, planet
        return None

    def find_moon(self, body_id: str) -> Optional[Tuple[Moon, Planet]]:
        """Find a moon together with its parent planet."""
        for planet in self.planets:
            for moon in planet.moons:
                if moon.body_id == body_id:
                    return moon, planet
        return None

    def find_asteroid(self, body_id: str) -> Optional[Tuple[Asteroid, AsteroidBelt]]:
        """Find an asteroid together with its belt."""
        for belt in self.asteroid_belts:
            for asteroid in belt.asteroids:
                if asteroid.body_id == body_id:
                    return asteroid, belt
        return None

    def contains(self, ref: BodyRef) -> bool:
        """Check whether a reference names a body of this system."""
        if ref.kind == BodyKind.PLANET:
            return self.find_planet(ref.body_id) is not None
        if ref.kind == BodyKind.MOON:
            return self.find_moon(ref.body_id) is not None
        if ref.kind == BodyKind.ASTEROID:
            return self.find_asteroid(ref.body_id) is not None
        if ref.kind == BodyKind.SUN:
            return self.star is not None and self.star.body_id == ref.body_id
        return False

    def iter_refs(self) -> Iterator[BodyRef]:
        """Yield a reference for every body, star first."""
        if self.star is not None:
            yield BodyRef(self.star.body_id, BodyKind.SUN)
        for planet in self.planets:
            yield BodyRef(planet.body_id, BodyKind.PLANET)
            for moon in planet.moons:
                yield BodyRef(moon.body_id, BodyKind.MOON)
        for belt in self.asteroid_belts:
            for asteroid in belt.asteroids:
                yield BodyRef(asteroid.body_id, BodyKind.ASTEROID)

    # -------------------------------------------------------------------------
    # Construction from plain data
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SolarSystem:
        """
        Create a system from a dictionary.

        Expected shape::

            {
                "id": "sol",
                "star": {"id": "sun", "radius": 1.0},
                "planets": [
                    {"id": "p1", "orbital_distance": 5.0, "radius": 0.1,
                     "moons": [{"id": "m1", "orbital_distance": 0.5,
                                "orbital_speed": 0.4}]}
                ],
                "asteroid_belts": [
                    {"id": "b1", "inner_radius": 9.0, "outer_radius": 11.0,
                     "asteroids": [{"id": "a1", "angular_offset": 0.3}]}
                ]
            }

        Raises:
            ValueError: If a required field is missing.
        """
        try:
            star_data = data.get("star")
            star = None
            if star_data is not None:
                star = Star(body_id=star_data["id"], radius=star_data.get("radius", 1.0))

            planets = []
            for p in data.get("planets", []):
                moons = [
                    Moon(
                        body_id=m["id"],
                        orbital_distance=m["orbital_distance"],
                        orbital_speed=m["orbital_speed"],
                        radius=m.get("radius", 0.0),
                        initial_phase=m.get("initial_phase", 0.0),
                    )
                    for m in p.get("moons", [])
                ]
                planets.append(Planet(
                    body_id=p["id"],
                    orbital_distance=p["orbital_distance"],
                    radius=p.get("radius", 0.0),
                    initial_phase=p.get("initial_phase"),
                    moons=moons,
                ))

            belts = []
            for b in data.get("asteroid_belts", []):
                asteroids = [
                    Asteroid(
                        body_id=a["id"],
                        radius=a.get("radius", 0.0),
                        angular_offset=a.get("angular_offset", 0.0),
                    )
                    for a in b.get("asteroids", [])
                ]
                belts.append(AsteroidBelt(
                    belt_id=b["id"],
                    inner_radius=b["inner_radius"],
                    outer_radius=b["outer_radius"],
                    asteroids=asteroids,
                ))

            return cls(
                system_id=data["id"],
                star=star,
                planets=planets,
                asteroid_belts=belts,
            )
        except KeyError as e:
            raise ValueError(f"Solar system data missing field {e}") from e
