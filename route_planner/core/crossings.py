"""Self-crossing detection for routes (figure-of-eight, out-and-back overlaps).

Candidate pairs come from the section index (overlapping bounding boxes);
Shapely decides whether the plan-view segments really meet. Sections that
share an endpoint are never reported.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from route_planner.core.spatial_index import SpatialIndex
from route_planner.model.road_section import RoadSection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Crossing:
    """Two road sections meeting in plan view.

    Attributes:
        first: Earlier section along the route
        second: Later section along the route
        x, y: Meeting point in the local frame
    """

    first: RoadSection
    second: RoadSection
    x: float
    y: float


def find_crossings(sections: Sequence[RoadSection], index: SpatialIndex[RoadSection]) -> list[Crossing]:
    """All crossings between non-adjacent sections, ordered along the route.

    Args:
        sections: Road sections in route order
        index: Section index built from the same sections

    Returns:
        One Crossing per crossing pair.
    """
    crossings: list[Crossing] = []
    for section in sections:
        line = section.get_linestring()
        later = [
            other
            for other in index.query_overlapping(box=section.bounding_box)
            if other.start_point.sequence_index > section.end_point.sequence_index
        ]
        for other in sorted(later, key=lambda s: s.start_point.sequence_index):
            other_line = other.get_linestring()
            if not line.intersects(other_line):
                continue
            meeting = line.intersection(other_line).representative_point()
            crossings.append(Crossing(first=section, second=other, x=meeting.x, y=meeting.y))

    logger.info(f"Found {len(crossings)} crossing(s) among {len(sections)} road sections")
    return crossings
