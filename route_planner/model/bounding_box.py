"""Axis-aligned boxes, 2-D axes and 3-D rays used by the spatial index.

- BoundingBox2D: axis-aligned rectangle in the local frame's XY plane
- Axis2D: infinite line in the XY plane (a ray projected onto the plane)
- Ray3D: half-infinite interaction ray in the local frame (e.g. a mouse pick)
"""

from dataclasses import dataclass
from typing import Iterable

import numpy as np

from route_planner.constants import QueryConfig
from route_planner.model.geometry import Point3D, Vector3D


@dataclass(frozen=True)
class Axis2D:
    """Infinite line through an origin along a direction (XY plane).

    Attributes:
        origin_x, origin_y: Any point on the line
        direction_x, direction_y: Line direction (need not be unit length)
    """

    origin_x: float
    origin_y: float
    direction_x: float
    direction_y: float

    def __post_init__(self) -> None:
        if self.direction_x == 0 and self.direction_y == 0:
            raise ValueError("Axis2D direction must be non-zero")

    def side_of(self, x: float, y: float) -> float:
        """Signed side of a point relative to the line (0 when on it)."""
        return self.direction_x * (y - self.origin_y) - self.direction_y * (x - self.origin_x)

    def intersects_segment(self, start: tuple[float, float], end: tuple[float, float]) -> bool:
        """Whether the segment start-end touches or crosses the line."""
        return self.side_of(*start) * self.side_of(*end) <= 0


@dataclass(frozen=True)
class BoundingBox2D:
    """Axis-aligned rectangle, edges inclusive.

    Attributes:
        min_x, min_y: South-west corner
        max_x, max_y: North-east corner
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def __post_init__(self) -> None:
        if not np.all(np.isfinite([self.min_x, self.min_y, self.max_x, self.max_y])):
            raise ValueError(f"BoundingBox2D must have finite coordinates, got {self}")
        if self.min_x > self.max_x or self.min_y > self.max_y:
            raise ValueError(f"BoundingBox2D min corner must not exceed max corner, got {self}")

    @classmethod
    def around_point(cls, x: float, y: float, padding: float = 0.0) -> "BoundingBox2D":
        return cls(min_x=x - padding, min_y=y - padding, max_x=x + padding, max_y=y + padding)

    @classmethod
    def from_points(cls, points: Iterable[tuple[float, float]]) -> "BoundingBox2D":
        """Smallest box containing all (x, y) pairs."""
        coords = list(points)
        if not coords:
            raise ValueError("Cannot build a bounding box from zero points")
        xs = [c[0] for c in coords]
        ys = [c[1] for c in coords]
        return cls(min_x=min(xs), min_y=min(ys), max_x=max(xs), max_y=max(ys))

    @classmethod
    def covering(cls, boxes: Iterable["BoundingBox2D"]) -> "BoundingBox2D":
        """Smallest box containing all given boxes."""
        boxes = list(boxes)
        if not boxes:
            raise ValueError("Cannot cover zero boxes")
        return cls(
            min_x=min(b.min_x for b in boxes),
            min_y=min(b.min_y for b in boxes),
            max_x=max(b.max_x for b in boxes),
            max_y=max(b.max_y for b in boxes),
        )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def side(self) -> float:
        """Shorter side length (the region size used for subdivision limits)."""
        return min(self.width, self.height)

    @property
    def centre(self) -> tuple[float, float]:
        return (self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2

    def squared(self, min_side: float = 0.0) -> "BoundingBox2D":
        """Square box with the same centre whose side is the longer of width/height."""
        half = max(self.width, self.height, min_side) / 2
        cx, cy = self.centre
        return BoundingBox2D(min_x=cx - half, min_y=cy - half, max_x=cx + half, max_y=cy + half)

    def contains(self, other: "BoundingBox2D") -> bool:
        """Whether other lies entirely inside this box (shared edges count)."""
        return (
            self.min_x <= other.min_x
            and self.min_y <= other.min_y
            and other.max_x <= self.max_x
            and other.max_y <= self.max_y
        )

    def intersects(self, other: "BoundingBox2D") -> bool:
        """Whether the boxes overlap (touching edges count)."""
        return (
            self.min_x <= other.max_x
            and other.min_x <= self.max_x
            and self.min_y <= other.max_y
            and other.min_y <= self.max_y
        )

    def quadrants(self) -> tuple["BoundingBox2D", "BoundingBox2D", "BoundingBox2D", "BoundingBox2D"]:
        """Four quadrant rectangles in (northwest, northeast, southeast, southwest) order."""
        mid_x, mid_y = self.centre
        return (
            BoundingBox2D(min_x=self.min_x, min_y=mid_y, max_x=mid_x, max_y=self.max_y),
            BoundingBox2D(min_x=mid_x, min_y=mid_y, max_x=self.max_x, max_y=self.max_y),
            BoundingBox2D(min_x=mid_x, min_y=self.min_y, max_x=self.max_x, max_y=mid_y),
            BoundingBox2D(min_x=self.min_x, min_y=self.min_y, max_x=mid_x, max_y=mid_y),
        )

    def edges(self) -> list[tuple[tuple[float, float], tuple[float, float]]]:
        """The four boundary edges as (start, end) corner pairs."""
        sw = (self.min_x, self.min_y)
        se = (self.max_x, self.min_y)
        ne = (self.max_x, self.max_y)
        nw = (self.min_x, self.max_y)
        return [(sw, se), (se, ne), (ne, nw), (nw, sw)]

    def boundary_intersects(self, axis: Axis2D) -> bool:
        """Whether the infinite line crosses the rectangle boundary.

        Tested edge by edge, so a line through the rectangle always hits two edges.
        """
        return any(axis.intersects_segment(start=start, end=end) for start, end in self.edges())


@dataclass(frozen=True)
class Ray3D:
    """Half-infinite ray in the local frame.

    Attributes:
        origin: Ray start (e.g. camera position)
        direction: Ray direction (need not be unit length)
    """

    origin: Point3D
    direction: Vector3D

    def __post_init__(self) -> None:
        if self.direction.length == 0:
            raise ValueError("Ray3D direction must be non-zero")

    def distance_to(self, point: Point3D) -> float:
        """Shortest 3-D distance from the ray to a point."""
        offset = point - self.origin
        t = max(0.0, offset.dot(self.direction) / self.direction.dot(self.direction))
        closest = self.origin.translated(self.direction.scaled(t))
        return closest.distance_to(point)

    def to_axis(
        self,
        default_direction: tuple[float, float] = QueryConfig.DEFAULT_HORIZONTAL_AXIS,
    ) -> Axis2D:
        """Project onto the XY plane, dropping elevation.

        A vertical ray has no horizontal direction, so default_direction is used instead.
        """
        if self.direction.horizontal_length <= QueryConfig.VERTICAL_EPSILON:
            dx, dy = default_direction
        else:
            dx, dy = self.direction.x, self.direction.y
        return Axis2D(origin_x=self.origin.x, origin_y=self.origin.y, direction_x=dx, direction_y=dy)
