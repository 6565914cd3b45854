"""Core algorithms for route modelling.

This module provides the mathematical backbone of the route model:
- GeoCalculator: Geodesic distances on the WGS84 ellipsoid
- GeoProjector: Local metric frame projection
- TrackEnricher: Per-point geometry pipeline with anomaly removal
- SpatialIndex: Quadtree over bounded entities
- nearest_point_to / nearest_section_to: Ray picking
- find_crossings: Self-crossing detection
"""

from route_planner.core.crossings import Crossing, find_crossings
from route_planner.core.enrichment import AnomalyRemovalError, TrackEnricher, enrich
from route_planner.core.geo_calculator import GeoCalculator
from route_planner.core.geo_projector import GeoProjector
from route_planner.core.ray_picker import nearest_point_to, nearest_section_to
from route_planner.core.spatial_index import (
    IndexEntry,
    SpatialIndex,
    build_index,
    build_point_index,
    build_section_index,
)

__all__ = [
    # Geodesics and projection
    "GeoCalculator",
    "GeoProjector",
    # Enrichment
    "TrackEnricher",
    "AnomalyRemovalError",
    "enrich",
    # Spatial index
    "SpatialIndex",
    "IndexEntry",
    "build_index",
    "build_point_index",
    "build_section_index",
    # Picking and analysis
    "nearest_point_to",
    "nearest_section_to",
    "Crossing",
    "find_crossings",
]
