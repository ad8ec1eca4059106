"""Centralized math utilities for the simulation.

This module provides pure Python mathematical utilities for the simulation,
including a Vector3 implementation for the soil volume the fungi grow in.
The y axis is vertical; the soil surface sits at y = 0 and the soil extends
into negative y.
"""

from __future__ import annotations

import math
from typing import Tuple


class Vector3:
    """A 3D vector class for mathematical operations."""

    __slots__ = ("x", "y", "z")

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> None:
        self.x: float = float(x)
        self.y: float = float(y)
        self.z: float = float(z)

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> "Vector3":
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> "Vector3":
        return self.__mul__(scalar)

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    def distance_to(self, other: "Vector3") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return math.sqrt(dx * dx + dy * dy + dz * dz)

    def normalize(self) -> "Vector3":
        length = self.length()
        if length == 0:
            return Vector3(0, 0, 0)
        return Vector3(self.x / length, self.y / length, self.z / length)

    def dot(self, other: "Vector3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def lerp(self, other: "Vector3", t: float) -> "Vector3":
        """Linear interpolation from this vector toward ``other``."""
        return Vector3(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
            self.z + (other.z - self.z) * t,
        )

    def rotate_about_y(self, angle: float) -> "Vector3":
        """Rotate around the vertical axis by ``angle`` radians (right-handed)."""
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        return Vector3(
            self.x * cos_a + self.z * sin_a,
            self.y,
            -self.x * sin_a + self.z * cos_a,
        )

    def update(self, x: float, y: float, z: float) -> None:
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    def copy(self) -> "Vector3":
        """Return a copy of this vector."""
        return Vector3(self.x, self.y, self.z)

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def __eq__(self, other: object) -> bool:
        """Check if two vectors are equal."""
        if other.__class__ is not Vector3:
            return False
        return (
            abs(self.x - other.x) < 1e-9
            and abs(self.y - other.y) < 1e-9
            and abs(self.z - other.z) < 1e-9
        )

    def __ne__(self, other: object) -> bool:
        """Check if two vectors are not equal."""
        return not self.__eq__(other)

    def __repr__(self) -> str:
        return f"Vector3({self.x}, {self.y}, {self.z})"

    def add_inplace(self, other: "Vector3") -> "Vector3":
        """Add another vector to this one in-place."""
        self.x += other.x
        self.y += other.y
        self.z += other.z
        return self

    __iadd__ = add_inplace


def polyline_length(points: "list[Vector3]") -> float:
    """Total length of the path through ``points`` in order."""
    total = 0.0
    for i in range(1, len(points)):
        total += points[i - 1].distance_to(points[i])
    return total


__all__ = ["Vector3", "polyline_length"]
