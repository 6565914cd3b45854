"""Ray picker - resolves a 3-D interaction ray to a track point or road section.

The index is 2-D, so the ray is projected onto the ground plane to prune
the search. Candidates are then compared by their true 3-D distance to the
unprojected ray. A vertical ray (looking straight down) has no horizontal
direction; QueryConfig.DEFAULT_HORIZONTAL_AXIS is used in its place.

An empty result (None) is a normal outcome, e.g. a click away from the route.
"""

import logging
from typing import Optional

from route_planner.constants import QueryConfig
from route_planner.core.spatial_index import SpatialIndex
from route_planner.model.bounding_box import Ray3D
from route_planner.model.road_section import RoadSection
from route_planner.model.track_point import EnrichedPoint

logger = logging.getLogger(__name__)


def nearest_point_to(
    index: SpatialIndex[EnrichedPoint],
    ray: Ray3D,
    default_axis: tuple[float, float] = QueryConfig.DEFAULT_HORIZONTAL_AXIS,
) -> Optional[EnrichedPoint]:
    """Track point closest to the ray among those whose index box the ray crosses.

    Args:
        index: Point index built by build_point_index
        ray: Interaction ray in the local frame
        default_axis: Horizontal direction used for vertical rays

    Returns:
        The picked point, or None if the ray passes no indexed point.
    """
    axis = ray.to_axis(default_direction=default_axis)
    picked = index.query_nearest_to_ray(ray=axis, valuation=lambda point: ray.distance_to(point.position))
    if picked is None:
        logger.debug(f"No track point near ray from {ray.origin}")
    else:
        logger.debug(f"Picked point #{picked.sequence_index} at {ray.distance_to(picked.position):.2f}m from ray")
    return picked


def nearest_section_to(
    index: SpatialIndex[RoadSection],
    ray: Ray3D,
    default_axis: tuple[float, float] = QueryConfig.DEFAULT_HORIZONTAL_AXIS,
) -> Optional[RoadSection]:
    """Road section whose midpoint is closest to the ray (see nearest_point_to)."""
    axis = ray.to_axis(default_direction=default_axis)
    picked = index.query_nearest_to_ray(ray=axis, valuation=lambda section: ray.distance_to(section.midpoint))
    if picked is None:
        logger.debug(f"No road section near ray from {ray.origin}")
    return picked
