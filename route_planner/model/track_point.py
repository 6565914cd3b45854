"""Track points - projected and enriched forms of a RawSample.

- ProjectedPoint: a surviving sample placed in the local metric frame
- EnrichedPoint: a projected point plus derived geometry (directions,
  bearing change, gradient, curvature proxy)

Absent derived attributes (None) mean the geometry was degenerate at that
point (route ends, vertical or zero-length segments). They are expected
values, not errors.
"""

from dataclasses import dataclass
from math import atan2, degrees
from typing import Optional

from route_planner.model.geometry import Direction3D, Point3D


@dataclass(frozen=True)
class ProjectedPoint:
    """A sample projected into the local frame.

    Attributes:
        position: Location in the local frame (meters)
        sequence_index: Original file order of the source sample
        sample_index: Index of the source sample in the caller's sample list
        distance_from_start: Cumulative geodesic arc length (meters)
    """

    position: Point3D
    sequence_index: int
    sample_index: int
    distance_from_start: float = 0.0


@dataclass(frozen=True)
class EnrichedPoint(ProjectedPoint):
    """A projected point with derived per-point geometry.

    Attributes:
        forward_direction: Horizontal unit direction to the next point (None at the end)
        backward_direction: Forward direction of the previous point (None at the start)
        bearing_change: Unsigned turn angle in radians between backward and forward
        gradient_percent: 100 * rise / run of the outgoing segment (±inf when vertical)
        gradient_change: |gradient - previous gradient| (None at the start)
        effective_direction: Half-turn bisector of backward and forward
        cost_metric: Area of triangle (previous, this, next) in square meters
    """

    forward_direction: Optional[Direction3D] = None
    backward_direction: Optional[Direction3D] = None
    bearing_change: Optional[float] = None
    gradient_percent: float = 0.0
    gradient_change: Optional[float] = None
    effective_direction: Optional[Direction3D] = None
    cost_metric: float = 0.0

    @property
    def bearing_change_deg(self) -> Optional[float]:
        """Bearing change in degrees."""
        return degrees(self.bearing_change) if self.bearing_change is not None else None

    @property
    def compass_bearing_deg(self) -> Optional[float]:
        """Outgoing direction as degrees clockwise from north (0-360)."""
        if self.forward_direction is None:
            return None
        return (degrees(atan2(self.forward_direction.x, self.forward_direction.y)) + 360) % 360

    def __repr__(self) -> str:
        return (
            f"EnrichedPoint(#{self.sequence_index}, d={self.distance_from_start:.1f}m, "
            f"grad={self.gradient_percent:.1f}%)"
        )
