"""Data model classes for the route.

Follows the chain from file data to derived geometry:
- RawSample: Source of truth (lat, lon, altitude, file order)
- ProjectedPoint: Sample in the local metric frame
- EnrichedPoint: Projected point with derived geometry
- RoadSection: Segment between consecutive points
- BoundingBox2D / Axis2D / Ray3D: Index and picking geometry
- Warning: Point warnings for editing tools
"""

from route_planner.model.bounding_box import Axis2D, BoundingBox2D, Ray3D
from route_planner.model.geometry import Direction3D, Point3D, Vector3D
from route_planner.model.raw_sample import RawSample
from route_planner.model.road_section import RoadSection, build_road_sections
from route_planner.model.track_point import EnrichedPoint, ProjectedPoint
from route_planner.model.warning import (
    NoisyGeometryWarning,
    SharpTurnWarning,
    SteepGradientWarning,
    Warning,
)

# Track and TrackHolder have circular import with core
# Import directly: from route_planner.model.track import Track, TrackHolder

__all__ = [
    "RawSample",
    "ProjectedPoint",
    "EnrichedPoint",
    "RoadSection",
    "build_road_sections",
    "Point3D",
    "Vector3D",
    "Direction3D",
    "BoundingBox2D",
    "Axis2D",
    "Ray3D",
    "Warning",
    "SharpTurnWarning",
    "SteepGradientWarning",
    "NoisyGeometryWarning",
]
