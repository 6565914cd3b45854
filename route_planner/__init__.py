"""Route Planner - Geometric route model with spatial picking.

Turns raw GPS samples (latitude, longitude, altitude) into an enriched,
spatially indexed route model:
- Local metric frame projection of geodetic samples
- Per-point geometry (directions, bearing change, gradient, curvature proxy)
- Quadtree spatial index with region and nearest-to-ray queries
- Ray picking of track points and road sections for interactive editors

Modules:
    core: Algorithms (geodesics, projection, enrichment, spatial index, picking)
    model: Data structures (RawSample, EnrichedPoint, RoadSection, Track)

Example:
    from route_planner.model import RawSample
    from route_planner.model.track import Track

    track = Track.from_samples(samples)
    point = track.nearest_point_to(ray)
"""
