"""Tests for route_planner model classes.

Tests: geometry value types, BoundingBox2D, Axis2D, Ray3D, RawSample,
RoadSection, warnings, Track, TrackHolder
"""

from math import cos, inf, nan, pi, radians, sin, sqrt
from typing import Callable

import pytest

from route_planner.model.bounding_box import Axis2D, BoundingBox2D, Ray3D
from route_planner.model.geometry import Direction3D, Point3D, Vector3D, triangle_area
from route_planner.model.raw_sample import RawSample
from route_planner.model.road_section import build_road_sections
from route_planner.model.track import Track, TrackHolder
from route_planner.model.track_point import EnrichedPoint
from route_planner.model.warning import (
    NoisyGeometryWarning,
    SharpTurnWarning,
    SteepGradientWarning,
    Warning,
)

MakeSamples = Callable[[list[tuple[float, float, float]]], list[RawSample]]


# =============================================================================
# GEOMETRY
# =============================================================================


class TestGeometry:
    """Point3D, Vector3D, Direction3D."""

    def test_horizontal_direction_normalises_xy(self) -> None:
        direction = Vector3D(x=3.0, y=4.0, z=12.0).horizontal_direction()
        assert direction == Direction3D(x=0.6, y=0.8, z=0.0)

    def test_vertical_vector_has_no_horizontal_direction(self) -> None:
        assert Vector3D(x=0.0, y=0.0, z=5.0).horizontal_direction() is None

    def test_signed_angle_counter_clockwise_positive(self) -> None:
        east = Direction3D(x=1.0, y=0.0, z=0.0)
        north = Direction3D(x=0.0, y=1.0, z=0.0)
        assert east.signed_angle_to(north) == pytest.approx(pi / 2)
        assert north.signed_angle_to(east) == pytest.approx(-pi / 2)

    def test_rotation_about_vertical(self) -> None:
        rotated = Direction3D(x=1.0, y=0.0, z=0.0).rotated_about_vertical(pi / 2)
        assert rotated.x == pytest.approx(0.0, abs=1e-12)
        assert rotated.y == pytest.approx(1.0)

    def test_triangle_area(self) -> None:
        a, b = Point3D(x=0, y=0, z=0), Point3D(x=4, y=0, z=0)
        assert triangle_area(a, b, Point3D(x=0, y=3, z=0)) == pytest.approx(6.0)
        assert triangle_area(a, b, Point3D(x=8, y=0, z=0)) == 0.0

    def test_point_arithmetic(self) -> None:
        a, b = Point3D(x=1, y=2, z=3), Point3D(x=4, y=6, z=3)
        assert b - a == Vector3D(x=3, y=4, z=0)
        assert a.distance_to(b) == pytest.approx(5.0)
        assert a.translated(b - a) == b
        assert a.midpoint(b) == Point3D(x=2.5, y=4.0, z=3.0)


# =============================================================================
# BOXES, AXES AND RAYS
# =============================================================================


class TestBoundingBox2D:
    """BoundingBox2D - validation, containment, subdivision, line tests."""

    def test_inverted_box_rejected(self) -> None:
        with pytest.raises(ValueError):
            BoundingBox2D(min_x=10, min_y=0, max_x=0, max_y=10)

    def test_non_finite_box_rejected(self) -> None:
        with pytest.raises(ValueError):
            BoundingBox2D(min_x=0, min_y=0, max_x=float("inf"), max_y=10)

    def test_quadrants_order(self) -> None:
        nw, ne, se, sw = BoundingBox2D(min_x=0, min_y=0, max_x=40, max_y=40).quadrants()
        assert nw == BoundingBox2D(min_x=0, min_y=20, max_x=20, max_y=40)
        assert ne == BoundingBox2D(min_x=20, min_y=20, max_x=40, max_y=40)
        assert se == BoundingBox2D(min_x=20, min_y=0, max_x=40, max_y=20)
        assert sw == BoundingBox2D(min_x=0, min_y=0, max_x=20, max_y=20)

    def test_contains_and_intersects_include_edges(self) -> None:
        box = BoundingBox2D(min_x=0, min_y=0, max_x=10, max_y=10)
        assert box.contains(BoundingBox2D(min_x=0, min_y=0, max_x=10, max_y=5))
        assert not box.contains(BoundingBox2D(min_x=5, min_y=5, max_x=11, max_y=6))
        assert box.intersects(BoundingBox2D(min_x=10, min_y=10, max_x=20, max_y=20))
        assert not box.intersects(BoundingBox2D(min_x=11, min_y=0, max_x=20, max_y=10))

    def test_squared_keeps_centre(self) -> None:
        square = BoundingBox2D(min_x=0, min_y=0, max_x=100, max_y=20).squared()
        assert square.width == square.height == 100
        assert square.centre == (50, 10)
        assert BoundingBox2D.around_point(0, 0).squared(min_side=10).side == 10

    def test_boundary_intersects(self) -> None:
        box = BoundingBox2D(min_x=0, min_y=0, max_x=10, max_y=10)
        through = Axis2D(origin_x=-5, origin_y=5, direction_x=1, direction_y=0)
        diagonal_corner = Axis2D(origin_x=10, origin_y=0, direction_x=1, direction_y=1)
        missing = Axis2D(origin_x=0, origin_y=20, direction_x=1, direction_y=0)
        assert box.boundary_intersects(through)
        assert box.boundary_intersects(diagonal_corner)
        assert not box.boundary_intersects(missing)

    def test_from_points_and_covering(self) -> None:
        box = BoundingBox2D.from_points([(1, 5), (3, -2), (0, 0)])
        assert box == BoundingBox2D(min_x=0, min_y=-2, max_x=3, max_y=5)
        cover = BoundingBox2D.covering([box, BoundingBox2D.around_point(10, 10, padding=1)])
        assert cover == BoundingBox2D(min_x=0, min_y=-2, max_x=11, max_y=11)
        with pytest.raises(ValueError):
            BoundingBox2D.from_points([])


class TestAxisAndRay:
    """Axis2D and Ray3D."""

    def test_zero_direction_rejected(self) -> None:
        with pytest.raises(ValueError):
            Axis2D(origin_x=0, origin_y=0, direction_x=0, direction_y=0)
        with pytest.raises(ValueError):
            Ray3D(origin=Point3D(x=0, y=0, z=0), direction=Vector3D(x=0, y=0, z=0))

    def test_ray_distance_to_point_beside_ray(self) -> None:
        ray = Ray3D(origin=Point3D(x=0, y=0, z=0), direction=Vector3D(x=1, y=0, z=0))
        assert ray.distance_to(Point3D(x=5, y=3, z=4)) == pytest.approx(5.0)

    def test_ray_distance_behind_origin_measures_to_origin(self) -> None:
        ray = Ray3D(origin=Point3D(x=0, y=0, z=0), direction=Vector3D(x=1, y=0, z=0))
        assert ray.distance_to(Point3D(x=-3, y=4, z=0)) == pytest.approx(5.0)

    def test_to_axis_drops_elevation(self) -> None:
        ray = Ray3D(origin=Point3D(x=1, y=2, z=50), direction=Vector3D(x=3, y=4, z=-10))
        assert ray.to_axis() == Axis2D(origin_x=1, origin_y=2, direction_x=3, direction_y=4)

    def test_vertical_ray_uses_default_axis(self) -> None:
        ray = Ray3D(origin=Point3D(x=1, y=2, z=50), direction=Vector3D(x=0, y=0, z=-1))
        assert ray.to_axis() == Axis2D(origin_x=1, origin_y=2, direction_x=1.0, direction_y=0.0)
        assert ray.to_axis(default_direction=(0.0, 1.0)).direction_y == 1.0


class TestRawSample:
    """RawSample validation."""

    def test_non_finite_sample_rejected(self) -> None:
        with pytest.raises(ValueError):
            RawSample(latitude=nan, longitude=10.0, altitude=0.0, sequence_index=0)
        with pytest.raises(ValueError):
            RawSample(latitude=46.0, longitude=10.0, altitude=float("-inf"), sequence_index=0)

    def test_lon_lat_order(self) -> None:
        sample = RawSample(latitude=46.0, longitude=10.0, altitude=0.0, sequence_index=0)
        assert sample.lon_lat == (10.0, 46.0)


# =============================================================================
# ROAD SECTIONS AND WARNINGS
# =============================================================================


class TestRoadSection:
    """RoadSection built from consecutive points."""

    def test_one_section_per_consecutive_pair(
        self,
        enrich_local: Callable[..., list[EnrichedPoint]],
        right_angle_route: list[tuple[float, float, float]],
    ) -> None:
        points = enrich_local(right_angle_route)
        sections = build_road_sections(points)

        assert len(sections) == 2
        assert sections[0].start_point is points[0]
        assert sections[0].end_point is points[1]
        assert sections[1].vector.z == pytest.approx(2.0)
        assert sections[1].length_m == pytest.approx(10.0, rel=1e-3)
        assert sections[1].bounding_box.height == pytest.approx(10.0)
        assert len(sections[1].get_linestring().coords) == 2

    def test_single_point_has_no_sections(self, enrich_local: Callable[..., list[EnrichedPoint]]) -> None:
        assert build_road_sections(enrich_local([(0.0, 0.0, 0.0)])) == []


class TestWarnings:
    """Point warnings."""

    def test_messages(self) -> None:
        turn = SharpTurnWarning(sequence_index=3, bearing_change_deg=135.0, threshold_deg=120.0)
        steep = SteepGradientWarning(sequence_index=4, gradient_pct=-30.0, threshold_pct=25.0)
        noisy = NoisyGeometryWarning(sequence_index=5, cost_metric_m2=900.0, outgoing_length_m=10.0, threshold_ratio=1.0)

        assert "135°" in turn.message
        assert "descent" in steep.message
        assert "900" in noisy.message
        assert noisy.ratio == pytest.approx(9.0)
        assert str(turn) == turn.message
        assert all(isinstance(w, Warning) for w in (turn, steep, noisy))


# =============================================================================
# TRACK
# =============================================================================


class TestTrack:
    """Track - full model built from samples."""

    def test_straight_track(self, make_samples: MakeSamples, straight_route: list[tuple[float, float, float]]) -> None:
        track = Track.from_samples(make_samples(straight_route))

        assert len(track.points) == 6
        assert len(track.sections) == 5
        assert len(track.point_index) == 6
        assert len(track.section_index) == 5
        assert track.length_m == pytest.approx(50.0, rel=1e-3)
        assert track.warnings == []
        assert track.crossings() == []

    def test_climb_statistics_and_warnings(self, make_samples: MakeSamples) -> None:
        track = Track.from_samples(make_samples([(0.0, 0.0, 0.0), (100.0, 0.0, 30.0), (200.0, 0.0, 30.0), (300.0, 0.0, 20.0)]))

        assert track.total_ascent_m == pytest.approx(30.0)
        assert track.total_descent_m == pytest.approx(10.0)
        assert track.max_gradient_pct == pytest.approx(30.0, rel=1e-6)
        steep = [w for w in track.warnings if isinstance(w, SteepGradientWarning)]
        assert [w.sequence_index for w in steep] == [0]

    def test_vertical_climb_is_steepest(self, make_samples: MakeSamples) -> None:
        track = Track.from_samples(make_samples([(0.0, 0.0, 0.0), (0.0, 0.0, 25.0), (0.0, 0.0, 50.0), (10.0, 0.0, 50.0)]))

        assert [p.gradient_percent for p in track.points[:2]] == [inf, inf]
        assert track.max_gradient_pct == inf
        assert track.total_ascent_m == pytest.approx(50.0)
        steep = [w for w in track.warnings if isinstance(w, SteepGradientWarning)]
        assert [w.sequence_index for w in steep] == [0, 1]
        assert "climb" in steep[0].message

    def test_gentle_bend_on_long_sections_not_noisy(self, make_samples: MakeSamples) -> None:
        bend = radians(10.0)
        track = Track.from_samples(make_samples([(0.0, 0.0, 0.0), (100.0, 0.0, 0.0), (100.0 + 100.0 * cos(bend), 100.0 * sin(bend), 0.0)]))

        assert track.points[1].cost_metric == pytest.approx(0.5 * 100 * 100 * sin(bend), rel=1e-2)
        assert track.warnings == []

    def test_short_jog_flagged_as_noisy(self, make_samples: MakeSamples) -> None:
        """A 2m sideways step between two 50m sections."""
        track = Track.from_samples(make_samples([(0.0, 0.0, 0.0), (50.0, 0.0, 0.0), (50.0, 2.0, 0.0), (100.0, 2.0, 0.0)]))

        assert [(type(w), w.sequence_index) for w in track.warnings] == [(NoisyGeometryWarning, 1)]
        assert track.warnings[0].ratio == pytest.approx(12.5, rel=1e-2)

    def test_sharp_turns_flagged(self, make_samples: MakeSamples, figure_eight_route: list[tuple[float, float, float]]) -> None:
        track = Track.from_samples(make_samples(figure_eight_route))
        turns = [w for w in track.warnings if isinstance(w, SharpTurnWarning)]
        assert [w.sequence_index for w in turns] == [1, 2]

    def test_crossings(self, make_samples: MakeSamples, figure_eight_route: list[tuple[float, float, float]]) -> None:
        track = Track.from_samples(make_samples(figure_eight_route))
        crossings = track.crossings()

        assert len(crossings) == 1
        crossing = crossings[0]
        assert crossing.first.start_point.sequence_index == 0
        assert crossing.second.start_point.sequence_index == 2
        # Frame is anchored at the route's midpoint, which is where the sections cross
        assert crossing.x == pytest.approx(0.0, abs=1e-6)
        assert crossing.y == pytest.approx(0.0, abs=1e-6)

    def test_point_at_distance(self, make_samples: MakeSamples, straight_route: list[tuple[float, float, float]]) -> None:
        track = Track.from_samples(make_samples(straight_route))

        assert track.point_at_distance(25.0).sequence_index == 2
        assert track.point_at_distance(-5.0).sequence_index == 0
        assert track.point_at_distance(1000.0).sequence_index == 5

    def test_sample_for_resolves_source(self, make_samples: MakeSamples, spike_route: list[tuple[float, float, float]]) -> None:
        samples = make_samples(spike_route)
        track = Track.from_samples(samples)

        assert [track.sample_for(p).sequence_index for p in track.points] == [0, 1, 2, 4, 5]
        assert track.sample_for(track.points[3]) is samples[4]

    def test_picking_and_box_queries(self, make_samples: MakeSamples, straight_route: list[tuple[float, float, float]]) -> None:
        track = Track.from_samples(make_samples(straight_route))
        target = track.points[2].position

        ray = Ray3D(origin=Point3D(x=target.x, y=target.y + 0.5, z=100.0), direction=Vector3D(x=0, y=0, z=-1))
        assert track.nearest_point_to(ray).sequence_index == 2

        box = BoundingBox2D.around_point(target.x, target.y, padding=3.0)
        assert [p.sequence_index for p in track.points_in_box(box)] == [2]

    def test_empty_samples_rejected(self) -> None:
        with pytest.raises(ValueError):
            Track.from_samples([])


class TestTrackHolder:
    """TrackHolder - rebuild then swap."""

    def test_rebuild_replaces_track(self, make_samples: MakeSamples, straight_route: list[tuple[float, float, float]]) -> None:
        holder = TrackHolder()
        assert holder.current is None

        first = holder.rebuild(make_samples(straight_route))
        second = holder.rebuild(make_samples(straight_route[:3]))

        assert holder.current is second
        assert len(first.points) == 6
        assert len(second.points) == 3

    def test_failed_rebuild_keeps_previous_track(
        self,
        make_samples: MakeSamples,
        straight_route: list[tuple[float, float, float]],
    ) -> None:
        holder = TrackHolder()
        track = holder.rebuild(make_samples(straight_route))
        reordered = list(reversed(make_samples(straight_route)))

        with pytest.raises(ValueError):
            holder.rebuild(reordered)
        assert holder.current is track

    def test_clear(self, make_samples: MakeSamples, straight_route: list[tuple[float, float, float]]) -> None:
        holder = TrackHolder()
        holder.rebuild(make_samples(straight_route))
        holder.clear()
        assert holder.current is None
