"""Configuration constants for Route Planner.

All configurable parameters are centralized here for easy tuning.

Classes:
    ProjectionConfig: Local-frame projection parameters
    EnrichmentConfig: De-duplication and anomaly removal thresholds
    IndexConfig: Spatial index region sizes and entry padding
    QueryConfig: Ray picking parameters
    WarningConfig: Thresholds for track point warnings
"""

from math import pi


class ProjectionConfig:
    """Local-frame (equirectangular) projection parameters."""

    # At equator, 1 degree of latitude or longitude ≈ 111,320 meters
    # (Earth circumference 40,075 km / 360 degrees)
    METERS_PER_DEGREE = 111320.0

    # Ellipsoid used for true geodesic segment lengths
    GEOD_ELLPS = "WGS84"


class EnrichmentConfig:
    """Track point enrichment parameters."""

    # Points closer than this to the previously kept point are dropped (meters, 3-D)
    DUPLICATE_THRESHOLD_M = 0.1

    # Bearing change above this is treated as a track anomaly (radians)
    EGREGIOUS_BEARING_CHANGE_RAD = 0.9 * pi

    # Upper bound on enrich-then-remove passes before giving up
    MAX_ANOMALY_PASSES = 25


class IndexConfig:
    """Quadtree spatial index parameters."""

    # Regions whose side would drop below this are not subdivided further
    MIN_REGION_SIZE_M = 10.0

    # Half-size of the box placed around each track point for picking (meters)
    POINT_BOX_PADDING_M = 2.0


class QueryConfig:
    """Ray picking parameters."""

    # Used in place of the ray's horizontal direction when the ray is vertical
    DEFAULT_HORIZONTAL_AXIS = (1.0, 0.0)

    # Horizontal direction lengths below this count as vertical
    VERTICAL_EPSILON = 1e-9


class WarningConfig:
    """Thresholds for point warnings shown by editing tools."""

    SHARP_TURN_DEG = 120.0
    STEEP_GRADIENT_PCT = 25.0

    # Cost metric over squared outgoing length above which a point is flagged as
    # noisy: the previous point sits more than two outgoing lengths off that line
    NOISY_COST_RATIO = 1.0
