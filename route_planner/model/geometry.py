"""Geometry value types for the local Cartesian frame.

The local frame is metric: x points east, y points north, z is altitude.

- Point3D: a location
- Vector3D: a displacement between two locations
- Direction3D: a unit-length vector
"""

from dataclasses import dataclass
from math import atan2, cos, hypot, sin, sqrt
from typing import Optional


@dataclass(frozen=True)
class Vector3D:
    """Displacement in the local frame (meters)."""

    x: float
    y: float
    z: float

    @property
    def length(self) -> float:
        return sqrt(self.x**2 + self.y**2 + self.z**2)

    @property
    def horizontal_length(self) -> float:
        """Length of the projection onto the XY plane."""
        return hypot(self.x, self.y)

    def scaled(self, factor: float) -> "Vector3D":
        return Vector3D(x=self.x * factor, y=self.y * factor, z=self.z * factor)

    def dot(self, other: "Vector3D") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector3D") -> "Vector3D":
        return Vector3D(
            x=self.y * other.z - self.z * other.y,
            y=self.z * other.x - self.x * other.z,
            z=self.x * other.y - self.y * other.x,
        )

    def horizontal_direction(self) -> Optional["Direction3D"]:
        """Unit direction of the XY projection, None if it has zero length."""
        length = self.horizontal_length
        if length == 0:
            return None
        return Direction3D(x=self.x / length, y=self.y / length, z=0.0)


@dataclass(frozen=True)
class Direction3D(Vector3D):
    """Unit-length vector. Horizontal directions have z == 0."""

    def signed_angle_to(self, other: "Direction3D") -> float:
        """Signed turn angle (radians) about the vertical axis, counter-clockwise positive.

        Result lies in [-pi, pi].
        """
        cross_z = self.x * other.y - self.y * other.x
        dot_xy = self.x * other.x + self.y * other.y
        return atan2(cross_z, dot_xy)

    def rotated_about_vertical(self, angle_rad: float) -> "Direction3D":
        """Rotate counter-clockwise around the z axis."""
        c, s = cos(angle_rad), sin(angle_rad)
        return Direction3D(x=self.x * c - self.y * s, y=self.x * s + self.y * c, z=self.z)


@dataclass(frozen=True)
class Point3D:
    """Location in the local frame (meters)."""

    x: float
    y: float
    z: float

    def __sub__(self, other: "Point3D") -> Vector3D:
        return Vector3D(x=self.x - other.x, y=self.y - other.y, z=self.z - other.z)

    def translated(self, vector: Vector3D) -> "Point3D":
        return Point3D(x=self.x + vector.x, y=self.y + vector.y, z=self.z + vector.z)

    def distance_to(self, other: "Point3D") -> float:
        """Euclidean distance in the local frame."""
        return (other - self).length

    def midpoint(self, other: "Point3D") -> "Point3D":
        return Point3D(x=(self.x + other.x) / 2, y=(self.y + other.y) / 2, z=(self.z + other.z) / 2)


def triangle_area(a: Point3D, b: Point3D, c: Point3D) -> float:
    """Area of the 3-D triangle abc. Zero iff the points are collinear."""
    return (b - a).cross(c - a).length / 2
