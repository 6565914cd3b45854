"""RawSample - A single geographic sample of a route as read from file.

A RawSample is the source of truth for location: it is never mutated after
ingestion. Everything downstream (projected and enriched points) refers back
to samples by their position in the caller's sample list.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class RawSample:
    """A route sample with GPS coordinates and altitude.

    Attributes:
        latitude: Latitude in decimal degrees (WGS84)
        longitude: Longitude in decimal degrees (WGS84)
        altitude: Altitude in meters
        sequence_index: Position in the original file order

    Example:
        sample = RawSample(latitude=51.5, longitude=-0.12, altitude=20.0, sequence_index=0)
    """

    latitude: float
    longitude: float
    altitude: float
    sequence_index: int

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if not np.all(np.isfinite([self.latitude, self.longitude, self.altitude])):
            raise ValueError(
                f"RawSample {self.sequence_index} must have finite coordinates, "
                f"got ({self.latitude}, {self.longitude}, {self.altitude})"
            )

    @property
    def lon_lat(self) -> tuple[float, float]:
        """Return (lon, lat) tuple - GeoJSON order."""
        return (self.longitude, self.latitude)

    def __repr__(self) -> str:
        return (
            f"RawSample(#{self.sequence_index}, lat={self.latitude:.6f}, "
            f"lon={self.longitude:.6f}, alt={self.altitude:.1f}m)"
        )
