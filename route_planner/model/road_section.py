"""RoadSection - The segment of road between two consecutive track points.

Sections are derived from enriched points and are read-only once built.
They are the entities indexed for section picking and crossing detection.
"""

from dataclasses import dataclass
from typing import Sequence

from shapely.geometry import LineString

from route_planner.model.bounding_box import BoundingBox2D
from route_planner.model.geometry import Point3D, Vector3D
from route_planner.model.track_point import EnrichedPoint


@dataclass(frozen=True)
class RoadSection:
    """Straight road section between two consecutive surviving points.

    Attributes:
        vector: Displacement from start to end (meters)
        start_point: Point at the start of the section
        end_point: Point at the end of the section
    """

    vector: Vector3D
    start_point: EnrichedPoint
    end_point: EnrichedPoint

    @property
    def length_m(self) -> float:
        """Geodesic length, taken from the points' cumulative distances."""
        return self.end_point.distance_from_start - self.start_point.distance_from_start

    @property
    def midpoint(self) -> Point3D:
        return self.start_point.position.midpoint(self.end_point.position)

    @property
    def bounding_box(self) -> BoundingBox2D:
        a, b = self.start_point.position, self.end_point.position
        return BoundingBox2D.from_points([(a.x, a.y), (b.x, b.y)])

    def get_linestring(self) -> LineString:
        """Get Shapely LineString of the section in plan view."""
        a, b = self.start_point.position, self.end_point.position
        return LineString([(a.x, a.y), (b.x, b.y)])

    def __repr__(self) -> str:
        return (
            f"RoadSection(#{self.start_point.sequence_index}->#{self.end_point.sequence_index}, "
            f"{self.length_m:.0f}m)"
        )


def build_road_sections(points: Sequence[EnrichedPoint]) -> list[RoadSection]:
    """One section per consecutive pair of points."""
    return [
        RoadSection(vector=end.position - start.position, start_point=start, end_point=end)
        for start, end in zip(points, points[1:])
    ]
