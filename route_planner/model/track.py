"""Track - Immutable route model and its rebuild-then-swap holder.

A Track bundles everything derived from one version of a route:
- raw samples (source of truth)
- local frame projector
- enriched points and road sections
- point and section spatial indexes

Any edit of the sample sequence (insert, delete, reorder) builds a new
Track from scratch; nothing is patched in place. TrackHolder swaps the
current reference only once the new Track is complete, so readers of the
previous Track are never disturbed.
"""

import logging
from bisect import bisect_right
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from route_planner.constants import WarningConfig
from route_planner.core.crossings import Crossing, find_crossings
from route_planner.core.enrichment import TrackEnricher
from route_planner.core.geo_projector import GeoProjector
from route_planner.core.ray_picker import nearest_point_to, nearest_section_to
from route_planner.core.spatial_index import SpatialIndex, build_point_index, build_section_index
from route_planner.model.bounding_box import BoundingBox2D, Ray3D
from route_planner.model.raw_sample import RawSample
from route_planner.model.road_section import RoadSection, build_road_sections
from route_planner.model.track_point import EnrichedPoint
from route_planner.model.warning import (
    NoisyGeometryWarning,
    SharpTurnWarning,
    SteepGradientWarning,
    Warning,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Track:
    """One immutable version of a route.

    Attributes:
        samples: Raw samples in file order
        projector: Local frame used for all positions
        points: Enriched surviving points in sequence order
        sections: One road section per consecutive point pair
        point_index: Spatial index over points
        section_index: Spatial index over sections

    Example:
        track = Track.from_samples(samples)
        picked = track.nearest_point_to(ray)
    """

    samples: tuple[RawSample, ...]
    projector: GeoProjector
    points: tuple[EnrichedPoint, ...]
    sections: tuple[RoadSection, ...]
    point_index: SpatialIndex[EnrichedPoint]
    section_index: SpatialIndex[RoadSection]

    @classmethod
    def from_samples(cls, samples: Sequence[RawSample], enricher: Optional[TrackEnricher] = None) -> "Track":
        """Build the full model for a route.

        Raises:
            ValueError: If samples is empty or out of sequence order.
        """
        samples = tuple(samples)
        enricher = enricher or TrackEnricher()
        projector = GeoProjector.from_samples(samples)
        points = tuple(enricher.enrich(samples=samples, projector=projector))
        sections = tuple(build_road_sections(points))
        track = cls(
            samples=samples,
            projector=projector,
            points=points,
            sections=sections,
            point_index=build_point_index(points),
            section_index=build_section_index(sections),
        )
        logger.info(f"Built {track!r} from {len(samples)} samples")
        return track

    @property
    def length_m(self) -> float:
        """Total geodesic length."""
        return self.points[-1].distance_from_start if self.points else 0.0

    @property
    def total_ascent_m(self) -> float:
        rises = np.diff([p.position.z for p in self.points])
        return float(rises[rises > 0].sum())

    @property
    def total_descent_m(self) -> float:
        rises = np.diff([p.position.z for p in self.points])
        return float(-rises[rises < 0].sum())

    @property
    def max_gradient_pct(self) -> float:
        """Steepest outgoing gradient, up or down (absolute value)."""
        if not self.points:
            return 0.0
        return float(np.max(np.abs([p.gradient_percent for p in self.points])))

    @property
    def warnings(self) -> list[Warning]:
        """Warnings for all points, in sequence order."""
        result: list[Warning] = []
        following_points: list[Optional[EnrichedPoint]] = [*self.points[1:], None]
        for point, following in zip(self.points, following_points):
            bearing_change_deg = point.bearing_change_deg
            if bearing_change_deg is not None and bearing_change_deg > WarningConfig.SHARP_TURN_DEG:
                result.append(
                    SharpTurnWarning(
                        sequence_index=point.sequence_index,
                        bearing_change_deg=bearing_change_deg,
                        threshold_deg=WarningConfig.SHARP_TURN_DEG,
                    )
                )
            if abs(point.gradient_percent) > WarningConfig.STEEP_GRADIENT_PCT:
                result.append(
                    SteepGradientWarning(
                        sequence_index=point.sequence_index,
                        gradient_pct=point.gradient_percent,
                        threshold_pct=WarningConfig.STEEP_GRADIENT_PCT,
                    )
                )
            if following is not None and point.cost_metric > 0:
                outgoing_m = point.position.distance_to(following.position)
                ratio = point.cost_metric / outgoing_m**2
                if ratio > WarningConfig.NOISY_COST_RATIO:
                    result.append(
                        NoisyGeometryWarning(
                            sequence_index=point.sequence_index,
                            cost_metric_m2=point.cost_metric,
                            outgoing_length_m=outgoing_m,
                            threshold_ratio=WarningConfig.NOISY_COST_RATIO,
                        )
                    )
        return result

    def sample_for(self, point: EnrichedPoint) -> RawSample:
        """Raw sample a point was derived from."""
        return self.samples[point.sample_index]

    def point_at_distance(self, distance_m: float) -> EnrichedPoint:
        """Last point at or before distance_m along the route (clamped to the ends)."""
        distances = [p.distance_from_start for p in self.points]
        position = max(0, bisect_right(distances, distance_m) - 1)
        return self.points[position]

    def points_in_box(self, box: BoundingBox2D) -> list[EnrichedPoint]:
        """Points whose index box overlaps box, in sequence order."""
        return sorted(self.point_index.query_overlapping(box=box), key=lambda p: p.sequence_index)

    def nearest_point_to(self, ray: Ray3D) -> Optional[EnrichedPoint]:
        return nearest_point_to(index=self.point_index, ray=ray)

    def nearest_section_to(self, ray: Ray3D) -> Optional[RoadSection]:
        return nearest_section_to(index=self.section_index, ray=ray)

    def crossings(self) -> list[Crossing]:
        return find_crossings(sections=self.sections, index=self.section_index)

    def __repr__(self) -> str:
        return f"Track({len(self.points)} points, {self.length_m:.0f}m)"


class TrackHolder:
    """Holds the current Track and replaces it wholesale on every edit.

    Example:
        holder = TrackHolder()
        holder.rebuild(samples)
        holder.current.nearest_point_to(ray)
    """

    def __init__(self, enricher: Optional[TrackEnricher] = None) -> None:
        self._enricher = enricher or TrackEnricher()
        self._track: Optional[Track] = None

    @property
    def current(self) -> Optional[Track]:
        """Most recently completed Track (None before the first build)."""
        return self._track

    def rebuild(self, samples: Sequence[RawSample]) -> Track:
        """Build a new Track and make it current.

        If the build raises, the previous Track stays current.
        """
        track = Track.from_samples(samples=samples, enricher=self._enricher)
        previous = self._track
        self._track = track
        logger.info(f"Swapped {previous!r} for {track!r}")
        return track

    def clear(self) -> None:
        self._track = None
