"""Geodesic calculations on Earth's surface.

Provides geographic helper functions for route modelling:
- True geodesic distance on the WGS84 ellipsoid (used for cumulative distance)
- Bounding-box midpoint of a set of coordinates (local frame anchor)

Geodesic lengths come from pyproj.Geod so cumulative distance matches real
arc length even though rendering uses the local flat approximation.
"""

from typing import Iterable

import pyproj

from route_planner.constants import ProjectionConfig


class GeoCalculator:
    """Static methods for geodesic calculations on Earth's surface.

    Coordinates are in decimal degrees (WGS84).
    Distances are in meters.
    """

    GEOD = pyproj.Geod(ellps=ProjectionConfig.GEOD_ELLPS)

    @staticmethod
    def geodesic_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Calculate ellipsoidal distance between two points.

        Args:
            lat1: Latitude of first point (decimal degrees)
            lon1: Longitude of first point (decimal degrees)
            lat2: Latitude of second point (decimal degrees)
            lon2: Longitude of second point (decimal degrees)

        Returns:
            Distance in meters along the WGS84 geodesic.
        """
        _, _, distance = GeoCalculator.GEOD.inv(lon1, lat1, lon2, lat2)
        return float(distance)

    @staticmethod
    def bounding_box_midpoint(lon_lats: Iterable[tuple[float, float]]) -> tuple[float, float]:
        """Midpoint of the bounding box around (lon, lat) pairs.

        Returns:
            Tuple (lon, lat) of the box centre.

        Raises:
            ValueError: If no coordinates are given.
        """
        coords = list(lon_lats)
        if not coords:
            raise ValueError("Cannot compute bounding box midpoint of zero coordinates")
        lons = [c[0] for c in coords]
        lats = [c[1] for c in coords]
        return (min(lons) + max(lons)) / 2, (min(lats) + max(lats)) / 2
