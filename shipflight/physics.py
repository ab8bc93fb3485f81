#!/usr/bin/env python3
"""
Vector and Easing Primitives for the Ship-Flight Simulation

Provides the small amount of math the flight core needs:
- 3D vector operations for world positions
- Linear interpolation between positions
- Cubic ease-in-out used by every eased flight phase
- Conversion helpers to numpy arrays for the rendering layer

World coordinates follow the scene convention:
- X/Z: the orbital plane of the solar system
- Y: up (local normal of the orbital plane)
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np


# =============================================================================
# CONSTANTS
# =============================================================================

# Tolerance used for vector equality
VECTOR_EPSILON = 1e-10

TWO_PI = 2.0 * math.pi


# =============================================================================
# VECTOR3D CLASS
# =============================================================================

@dataclass
class Vector3D:
    """
    3D vector for positions and directions in scene space.

    Uses the scene coordinate system where:
    - X: first axis of the orbital plane
    - Y: up (normal of the orbital plane)
    - Z: second axis of the orbital plane

    Units are abstract scene units.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vector3D) -> Vector3D:
        """Vector addition."""
        return Vector3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3D) -> Vector3D:
        """Vector subtraction."""
        return Vector3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector3D:
        """Scalar multiplication."""
        return Vector3D(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> Vector3D:
        """Right scalar multiplication."""
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vector3D:
        """Scalar division."""
        if scalar == 0:
            raise ValueError("Cannot divide vector by zero")
        return Vector3D(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vector3D:
        """Negation."""
        return Vector3D(-self.x, -self.y, -self.z)

    def __eq__(self, other: object) -> bool:
        """Equality check with tolerance."""
        if not isinstance(other, Vector3D):
            return False
        return (abs(self.x - other.x) < VECTOR_EPSILON and
                abs(self.y - other.y) < VECTOR_EPSILON and
                abs(self.z - other.z) < VECTOR_EPSILON)

    def dot(self, other: Vector3D) -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3D) -> Vector3D:
        """Cross product."""
        return Vector3D(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x
        )

    @property
    def magnitude(self) -> float:
        """Vector magnitude (length)."""
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    def normalized(self) -> Vector3D:
        """Return unit vector in same direction (zero stays zero)."""
        mag = self.magnitude
        if mag == 0:
            return Vector3D(0, 0, 0)
        return self / mag

    def distance_to(self, other: Vector3D) -> float:
        """Distance to another point."""
        return (self - other).magnitude

    def lerp(self, other: Vector3D, t: float) -> Vector3D:
        """
        Linear interpolation toward another point.

        Args:
            other: End point (returned at t=1)
            t: Interpolation parameter, not clamped

        Returns:
            self + (other - self) * t
        """
        return Vector3D(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
            self.z + (other.z - self.z) * t
        )

    def copy(self) -> Vector3D:
        """Independent copy of this vector."""
        return Vector3D(self.x, self.y, self.z)

    def to_tuple(self) -> tuple[float, float, float]:
        """Convert to tuple."""
        return (self.x, self.y, self.z)

    def to_array(self) -> np.ndarray:
        """Convert to a float64 numpy array of shape (3,)."""
        return np.array([self.x, self.y, self.z], dtype=float)

    @classmethod
    def from_tuple(cls, t: tuple[float, float, float]) -> Vector3D:
        """Create from tuple."""
        return cls(t[0], t[1], t[2])

    @classmethod
    def zero(cls) -> Vector3D:
        """Zero vector."""
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def unit_y(cls) -> Vector3D:
        """Unit vector in Y direction (up)."""
        return cls(0.0, 1.0, 0.0)

    def __repr__(self) -> str:
        return f"Vector3D({self.x:.6g}, {self.y:.6g}, {self.z:.6g})"


# =============================================================================
# EASING
# =============================================================================

def clamp01(value: float) -> float:
    """Clamp a value into [0, 1]."""
    return max(0.0, min(1.0, value))


def ease_in_out_cubic(t: float) -> float:
    """
    Cubic ease-in-out.

    Starts and ends with zero slope, passes through 0.5 at t=0.5.

    Args:
        t: Linear progress, clamped to [0, 1]

    Returns:
        Eased progress in [0, 1]
    """
    t = clamp01(t)
    if t < 0.5:
        return 4.0 * t * t * t
    return 1.0 - (-2.0 * t + 2.0) ** 3 / 2.0


def ease_in_out_cubic_array(t: np.ndarray) -> np.ndarray:
    """Vectorised :func:`ease_in_out_cubic`."""
    t = np.clip(np.asarray(t, dtype=float), 0.0, 1.0)
    return np.where(t < 0.5, 4.0 * t**3, 1.0 - (-2.0 * t + 2.0) ** 3 / 2.0)


# =============================================================================
# ARRAY HELPERS
# =============================================================================

def vectors_to_array(vectors: Iterable[Vector3D]) -> np.ndarray:
    """
    Stack vectors into an (N, 3) float array.

    An empty input gives an array of shape (0, 3).
    """
    rows = [v.to_tuple() for v in vectors]
    if not rows:
        return np.zeros((0, 3), dtype=float)
    return np.array(rows, dtype=float)
