"""Track point enrichment pipeline.

Turns an ordered sequence of raw samples into enriched track points:
1. De-duplication: drop points within DUPLICATE_THRESHOLD_M of the last kept point
2. Forward direction and per-segment geodesic length
3. Backward linkage: bearing change, gradient, gradient change,
   effective (bisector) direction, cost metric
4. Cumulative distance from the start
5. Anomaly removal: drop points whose bearing change is egregious
   (a near U-turn, usually a GPS glitch) and run steps 1-4 again

Step 5 is a bounded loop. Each pass removes at least one point, so it ends
on its own for any finite route, but the pass count is capped and exceeding
the cap is reported as AnomalyRemovalError.
"""

import logging
from itertools import accumulate
from math import copysign, inf
from typing import Optional, Sequence

from route_planner.constants import EnrichmentConfig
from route_planner.core.geo_calculator import GeoCalculator
from route_planner.core.geo_projector import GeoProjector
from route_planner.model.geometry import Direction3D, Vector3D, triangle_area
from route_planner.model.raw_sample import RawSample
from route_planner.model.track_point import EnrichedPoint, ProjectedPoint

logger = logging.getLogger(__name__)


class AnomalyRemovalError(RuntimeError):
    """Anomaly removal did not settle within the allowed number of passes."""


class TrackEnricher:
    """Derives per-point geometry for a route.

    Pure transformation: inputs are never modified and every call builds a
    fresh list of EnrichedPoint.

    Example:
        enricher = TrackEnricher()
        points = enricher.enrich(samples)
        print(points[-1].distance_from_start)
    """

    def __init__(
        self,
        duplicate_threshold_m: float = EnrichmentConfig.DUPLICATE_THRESHOLD_M,
        egregious_bearing_change_rad: float = EnrichmentConfig.EGREGIOUS_BEARING_CHANGE_RAD,
        max_anomaly_passes: int = EnrichmentConfig.MAX_ANOMALY_PASSES,
    ):
        """Initialize enricher.

        Args:
            duplicate_threshold_m: Points this close to the last kept point are dropped
            egregious_bearing_change_rad: Bearing changes above this are anomalies
            max_anomaly_passes: Cap on enrich-then-remove passes
        """
        if max_anomaly_passes < 1:
            raise ValueError(f"max_anomaly_passes must be at least 1, got {max_anomaly_passes}")
        self.duplicate_threshold_m = duplicate_threshold_m
        self.egregious_bearing_change_rad = egregious_bearing_change_rad
        self.max_anomaly_passes = max_anomaly_passes

    def project(self, samples: Sequence[RawSample], projector: Optional[GeoProjector] = None) -> list[ProjectedPoint]:
        """Project samples into a local frame.

        Args:
            samples: Samples in file order
            projector: Frame to use (anchored on the samples if not provided)

        Returns:
            One ProjectedPoint per sample, referring back by list position.
        """
        _check_sample_order(samples=samples)
        if not samples:
            return []
        projector = projector or GeoProjector.from_samples(samples)
        return [
            ProjectedPoint(
                position=projector.project(sample),
                sequence_index=sample.sequence_index,
                sample_index=i,
            )
            for i, sample in enumerate(samples)
        ]

    def enrich(self, samples: Sequence[RawSample], projector: Optional[GeoProjector] = None) -> list[EnrichedPoint]:
        """Project and enrich a route in one call."""
        return self.enrich_points(points=self.project(samples=samples, projector=projector), samples=samples)

    def enrich_points(self, points: Sequence[ProjectedPoint], samples: Sequence[RawSample]) -> list[EnrichedPoint]:
        """Run the pipeline, repeating it until no egregious bearing change remains.

        Args:
            points: Projected points in sequence order
            samples: Sample list the points' sample_index refers into

        Returns:
            Enriched points for every surviving sample, in sequence order.

        Raises:
            AnomalyRemovalError: If anomalies remain after max_anomaly_passes.
        """
        current: Sequence[ProjectedPoint] = points
        for pass_number in range(1, self.max_anomaly_passes + 1):
            enriched = self._enrich_once(points=current, samples=samples)
            egregious = [p for p in enriched if self.is_egregious(point=p)]
            if not egregious:
                logger.debug(f"Enriched {len(enriched)} of {len(points)} points in {pass_number} pass(es)")
                return enriched

            logger.info(
                f"Anomaly pass {pass_number}: removing {len(egregious)} point(s) with bearing change "
                f"> {self.egregious_bearing_change_rad:.3f} rad "
                f"(sequence {[p.sequence_index for p in egregious]})"
            )
            removed = {p.sample_index for p in egregious}
            current = [p for p in enriched if p.sample_index not in removed]

        logger.error(f"Anomaly removal did not settle after {self.max_anomaly_passes} passes")
        raise AnomalyRemovalError(
            f"Egregious bearing changes remain after {self.max_anomaly_passes} removal passes "
            f"({len(current)} points left)"
        )

    def is_egregious(self, point: EnrichedPoint) -> bool:
        """Whether the point's bearing change marks it as a track anomaly."""
        return point.bearing_change is not None and abs(point.bearing_change) > self.egregious_bearing_change_rad

    def deduplicate(self, points: Sequence[ProjectedPoint]) -> list[ProjectedPoint]:
        """Drop points within the threshold of the previously kept point.

        Single forward pass; relative order is preserved.
        """
        kept: list[ProjectedPoint] = []
        for point in points:
            if kept and kept[-1].position.distance_to(point.position) <= self.duplicate_threshold_m:
                continue
            kept.append(point)
        return kept

    def _enrich_once(self, points: Sequence[ProjectedPoint], samples: Sequence[RawSample]) -> list[EnrichedPoint]:
        """Steps 1-4 of the pipeline."""
        kept = self.deduplicate(points=points)
        if not kept:
            return []

        # Step 2: outgoing vectors, forward directions and geodesic segment lengths
        outgoing: list[Optional[Vector3D]] = [b.position - a.position for a, b in zip(kept, kept[1:])]
        outgoing.append(None)
        forward: list[Optional[Direction3D]] = [v.horizontal_direction() if v is not None else None for v in outgoing]
        segment_lengths = [
            _geodesic_length(start=samples[a.sample_index], end=samples[b.sample_index]) for a, b in zip(kept, kept[1:])
        ]
        gradients = [_gradient_percent(vector=v) for v in outgoing]

        # Step 4: cumulative distance, first point at zero
        distances = list(accumulate(segment_lengths, initial=0.0))

        # Step 3: backward linkage
        enriched: list[EnrichedPoint] = []
        for i, point in enumerate(kept):
            backward = forward[i - 1] if i > 0 else None
            bearing_change: Optional[float] = None
            effective: Optional[Direction3D] = None
            if backward is not None and forward[i] is not None:
                turn = backward.signed_angle_to(forward[i])
                bearing_change = abs(turn)
                effective = backward.rotated_about_vertical(turn / 2)

            gradient_change: Optional[float] = None
            cost_metric = 0.0
            if i > 0 and outgoing[i] is not None:
                # Two vertical segments in the same sense do not change gradient
                if gradients[i] == gradients[i - 1]:
                    gradient_change = 0.0
                else:
                    gradient_change = abs(gradients[i] - gradients[i - 1])
                cost_metric = triangle_area(
                    kept[i - 1].position,
                    point.position,
                    point.position.translated(outgoing[i]),
                )

            enriched.append(
                EnrichedPoint(
                    position=point.position,
                    sequence_index=point.sequence_index,
                    sample_index=point.sample_index,
                    distance_from_start=distances[i],
                    forward_direction=forward[i],
                    backward_direction=backward,
                    bearing_change=bearing_change,
                    gradient_percent=gradients[i],
                    gradient_change=gradient_change,
                    effective_direction=effective,
                    cost_metric=cost_metric,
                )
            )
        return enriched


def enrich(samples: Sequence[RawSample]) -> list[EnrichedPoint]:
    """Enrich samples with the default configuration."""
    return TrackEnricher().enrich(samples=samples)


def _check_sample_order(samples: Sequence[RawSample]) -> None:
    for previous, sample in zip(samples, samples[1:]):
        if sample.sequence_index <= previous.sequence_index:
            raise ValueError(
                f"Samples must be in strictly increasing sequence order, "
                f"got {previous.sequence_index} then {sample.sequence_index}"
            )


def _geodesic_length(start: RawSample, end: RawSample) -> float:
    return GeoCalculator.geodesic_distance_m(
        lat1=start.latitude,
        lon1=start.longitude,
        lat2=end.latitude,
        lon2=end.longitude,
    )


def _gradient_percent(vector: Optional[Vector3D]) -> float:
    """Rise over run of a segment in percent.

    0 for a missing or flat zero-length segment, signed infinity for a pure
    vertical one.
    """
    if vector is None:
        return 0.0
    if vector.horizontal_length == 0:
        return copysign(inf, vector.z) if vector.z != 0 else 0.0
    return 100 * vector.z / vector.horizontal_length
