"""Geodetic projection into a local metric frame.

Uses an equirectangular approximation anchored at a reference point
(normally the route's bounding-box midpoint):

    x = M * (lon - ref_lon) * cos(ref_lat)
    y = M * (lat - ref_lat)
    z = altitude

The inverse recovers longitude with the cosine of the point's own latitude,
not the reference latitude, so project() and unproject() are not exact
inverses away from the reference parallel. This is an approximation error
source of the frame and is kept as is; distances along the route are taken
from geodesics (GeoCalculator) rather than from the frame.
"""

import logging
from dataclasses import dataclass
from math import cos, radians
from typing import Sequence

import numpy as np

from route_planner.constants import ProjectionConfig
from route_planner.core.geo_calculator import GeoCalculator
from route_planner.model.geometry import Point3D
from route_planner.model.raw_sample import RawSample

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeoProjector:
    """Projects samples to and from a local frame.

    Attributes:
        reference_lon: Longitude of the frame origin (decimal degrees)
        reference_lat: Latitude of the frame origin (decimal degrees)

    Example:
        projector = GeoProjector.from_samples(samples)
        point = projector.project(samples[0])
    """

    reference_lon: float
    reference_lat: float
    meters_per_degree: float = ProjectionConfig.METERS_PER_DEGREE

    def __post_init__(self) -> None:
        if not np.all(np.isfinite([self.reference_lon, self.reference_lat])):
            raise ValueError(f"GeoProjector reference must be finite, got ({self.reference_lon}, {self.reference_lat})")

    @classmethod
    def from_samples(cls, samples: Sequence[RawSample]) -> "GeoProjector":
        """Anchor a projector at the samples' bounding-box midpoint."""
        if not samples:
            raise ValueError("Cannot anchor a projection on zero samples")
        lon, lat = GeoCalculator.bounding_box_midpoint(s.lon_lat for s in samples)
        logger.debug(f"Local frame anchored at ({lat:.6f}, {lon:.6f}) for {len(samples)} samples")
        return cls(reference_lon=lon, reference_lat=lat)

    def project(self, sample: RawSample) -> Point3D:
        """Convert a sample to local frame coordinates (meters)."""
        return self.project_coordinates(lat=sample.latitude, lon=sample.longitude, altitude=sample.altitude)

    def project_coordinates(self, lat: float, lon: float, altitude: float) -> Point3D:
        if not np.all(np.isfinite([lat, lon, altitude])):
            raise ValueError(f"Cannot project non-finite coordinates ({lat}, {lon}, {altitude})")
        x = self.meters_per_degree * (lon - self.reference_lon) * cos(radians(self.reference_lat))
        y = self.meters_per_degree * (lat - self.reference_lat)
        return Point3D(x=x, y=y, z=altitude)

    def unproject(self, point: Point3D) -> tuple[float, float, float]:
        """Convert local frame coordinates back to (lat, lon, altitude).

        Longitude uses the cosine of the point's own latitude (see module docstring).
        """
        if not np.all(np.isfinite([point.x, point.y, point.z])):
            raise ValueError(f"Cannot unproject non-finite point {point}")
        lat = point.y / self.meters_per_degree + self.reference_lat
        lon = point.x / self.meters_per_degree / cos(radians(lat)) + self.reference_lon
        return lat, lon, point.z
