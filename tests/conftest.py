"""Shared pytest fixtures for route_planner tests.

COORDINATE SYSTEM:
    Routes are written in local frame meters (x east, y north, z altitude)
    and converted to samples with a projector anchored at lat=0, lon=0.
    Near the equator the frame is almost exactly metric, so expected values
    can be worked out by hand.
"""

from typing import Callable, Sequence

import pytest

from route_planner.core.enrichment import TrackEnricher
from route_planner.core.geo_projector import GeoProjector
from route_planner.model.geometry import Point3D
from route_planner.model.raw_sample import RawSample
from route_planner.model.track_point import EnrichedPoint

LocalCoords = Sequence[tuple[float, float, float]]


# =============================================================================
# SAMPLE FACTORIES
# =============================================================================


@pytest.fixture
def equator_projector() -> GeoProjector:
    """Projector anchored at the equator / prime meridian intersection."""
    return GeoProjector(reference_lon=0.0, reference_lat=0.0)


@pytest.fixture
def make_samples(equator_projector: GeoProjector) -> Callable[[LocalCoords], list[RawSample]]:
    """Factory: local (x, y, z) meters -> RawSamples in file order."""

    def _make(coords: LocalCoords) -> list[RawSample]:
        samples = []
        for i, (x, y, z) in enumerate(coords):
            lat, lon, alt = equator_projector.unproject(Point3D(x=x, y=y, z=z))
            samples.append(RawSample(latitude=lat, longitude=lon, altitude=alt, sequence_index=i))
        return samples

    return _make


@pytest.fixture
def enrich_local(
    make_samples: Callable[[LocalCoords], list[RawSample]],
    equator_projector: GeoProjector,
) -> Callable[..., list[EnrichedPoint]]:
    """Factory: local (x, y, z) meters -> enriched points in the same frame."""

    def _enrich(coords: LocalCoords, enricher: TrackEnricher | None = None) -> list[EnrichedPoint]:
        enricher = enricher or TrackEnricher()
        return enricher.enrich(samples=make_samples(coords), projector=equator_projector)

    return _enrich


# =============================================================================
# ROUTE FIXTURES
# =============================================================================


@pytest.fixture
def straight_route() -> list[tuple[float, float, float]]:
    """Flat route heading east: 6 points, 10m apart, from x=0 to x=50."""
    return [(10.0 * i, 0.0, 0.0) for i in range(6)]


@pytest.fixture
def right_angle_route() -> list[tuple[float, float, float]]:
    """10m east, then 10m north climbing 2m (20% gradient on the second leg)."""
    return [(0.0, 0.0, 0.0), (10.0, 0.0, 0.0), (10.0, 10.0, 2.0)]


@pytest.fixture
def spike_route() -> list[tuple[float, float, float]]:
    """Straight route east with one GPS glitch 40m off to the north.

    At the glitch the route turns by ~166° (> 0.9π ≈ 162°).
    """
    return [(0.0, 0.0, 0.0), (10.0, 0.0, 0.0), (20.0, 0.0, 0.0), (25.0, 40.0, 0.0), (30.0, 0.0, 0.0), (40.0, 0.0, 0.0)]


@pytest.fixture
def figure_eight_route() -> list[tuple[float, float, float]]:
    """Route whose third section crosses its first at (10, 10)."""
    return [(0.0, 0.0, 0.0), (20.0, 20.0, 0.0), (20.0, 0.0, 0.0), (0.0, 20.0, 0.0)]
