"""Tests for ScreenProjector - pixel geometry of a profile."""

import pytest

from conftest import FakeTerrain, build_assembler, make_waypoint
from flightprofile.core.cancellation import CancellationToken
from flightprofile.core.screen_projector import ScreenProjector, safe_altitude_ft
from flightprofile.model.elevation_leg import ElevationLegList
from flightprofile.model.position import Position

X0, Y0 = 65, 14
WIDTH, HEIGHT = 1000, 300
W, H = WIDTH - 2 * X0, HEIGHT - Y0


def assemble(terrain, waypoints) -> ElevationLegList:
    return build_assembler(terrain).assemble(waypoints=waypoints, token=CancellationToken())


@pytest.fixture
def projector() -> ScreenProjector:
    return ScreenProjector()


class TestSafeAltitude:
    @pytest.mark.parametrize(
        "elevation_ft, expected",
        [(0.0, 1000.0), (10500.0, 11500.0), (10400.0, 11500.0), (10501.0, 12000.0), (-300.0, 1000.0)],
    )
    def test_buffer_and_round_up(self, elevation_ft: float, expected: float) -> None:
        assert safe_altitude_ft(elevation_ft) == expected


class TestProjection:
    def test_empty_profile_projects_to_none(self, projector: ScreenProjector) -> None:
        assert projector.project(leg_list=ElevationLegList(), width=WIDTH, height=HEIGHT, cruise_alt_ft=9000) is None

    def test_flat_route_scales(self, projector: ScreenProjector, flat_terrain: FakeTerrain, two_waypoint_route) -> None:
        leg_list = assemble(flat_terrain, two_waypoint_route)
        state = projector.project(leg_list=leg_list, width=WIDTH, height=HEIGHT, cruise_alt_ft=10000.0)

        assert state.max_route_elevation_ft == 1000.0
        assert state.max_height_ft == 10000.0
        assert state.vert_scale == pytest.approx(H / 10000.0)
        assert state.horiz_scale == pytest.approx(W / leg_list.total_distance)
        assert state.flightplan_y == Y0
        assert state.waypoint_x == (X0, X0 + W)

    def test_polygon_is_closed_on_the_baseline(
        self, projector: ScreenProjector, flat_terrain: FakeTerrain, two_waypoint_route
    ) -> None:
        state = projector.project(
            leg_list=assemble(flat_terrain, two_waypoint_route), width=WIDTH, height=HEIGHT, cruise_alt_ft=10000.0
        )
        assert state.polygon[0] == (X0, HEIGHT)
        assert state.polygon[-1] == (X0 + W, HEIGHT)
        # Sea level terrain sits on the baseline
        assert all(y == HEIGHT for _, y in state.polygon)
        assert state.terrain_vertex_count == 11

    def test_cruise_above_terrain_draws_higher(
        self, projector: ScreenProjector, ridge_terrain: FakeTerrain, three_waypoint_route
    ) -> None:
        state = projector.project(
            leg_list=assemble(ridge_terrain, three_waypoint_route), width=WIDTH, height=HEIGHT, cruise_alt_ft=9000.0
        )
        # Ridge at 10,400 ft: axis tops out at the rounded 11,500 ft
        assert state.max_height_ft == 11500.0
        assert state.max_alt_y == Y0
        assert Y0 < state.flightplan_y < HEIGHT
        assert min(y for _, y in state.polygon) < state.flightplan_y

    def test_waypoint_x_within_drawable_area(
        self, projector: ScreenProjector, flat_terrain: FakeTerrain, five_waypoint_route
    ) -> None:
        state = projector.project(
            leg_list=assemble(flat_terrain, five_waypoint_route), width=WIDTH, height=HEIGHT, cruise_alt_ft=5000.0
        )
        assert len(state.waypoint_x) == 5
        assert state.waypoint_x[0] == X0
        assert state.waypoint_x[-1] == X0 + W
        assert list(state.waypoint_x) == sorted(state.waypoint_x)
        # Equal legs, equal spacing (within integer truncation)
        assert state.waypoint_x[2] == pytest.approx(X0 + W / 2, abs=1)

    def test_start_and_destination_altitude_labels(self, projector: ScreenProjector, flat_terrain: FakeTerrain) -> None:
        waypoints = [make_waypoint("A", lon=0.0, altitude=2000.0), make_waypoint("B", lon=1.0, altitude=500.0)]
        state = projector.project(
            leg_list=assemble(flat_terrain, waypoints), width=WIDTH, height=HEIGHT, cruise_alt_ft=10000.0
        )
        assert state.start_alt_y < state.dest_alt_y


class TestPixelThinning:
    def test_dense_samples_are_thinned(self, projector: ScreenProjector, two_waypoint_route) -> None:
        terrain = FakeTerrain(altitude_ft=lambda lon, lat: 3000.0 * lon, samples_per_leg=2001)
        leg_list = assemble(terrain, two_waypoint_route)
        state = projector.project(leg_list=leg_list, width=200, height=HEIGHT, cruise_alt_ft=5000.0)

        assert state.terrain_vertex_count < leg_list.total_num_points
        terrain_pts = state.polygon[1:-1]
        # Every kept vertex moved more than the threshold, except the leg's last sample
        for prev, cur in zip(terrain_pts[:-2], terrain_pts[1:-1]):
            assert abs(cur[0] - prev[0]) + abs(cur[1] - prev[1]) > 2

    def test_first_and_last_sample_kept(self, projector: ScreenProjector, two_waypoint_route) -> None:
        terrain = FakeTerrain(altitude_ft=lambda lon, lat: 0.0, samples_per_leg=2001)
        state = projector.project(
            leg_list=assemble(terrain, two_waypoint_route), width=200, height=HEIGHT, cruise_alt_ft=5000.0
        )
        assert state.polygon[1] == (X0, HEIGHT)
        assert state.polygon[-2][0] in (200 - X0 - 1, 200 - X0)

    def test_vertex_count_never_exceeds_samples(
        self, projector: ScreenProjector, ridge_terrain: FakeTerrain, five_waypoint_route
    ) -> None:
        leg_list = assemble(ridge_terrain, five_waypoint_route)
        state = projector.project(leg_list=leg_list, width=WIDTH, height=HEIGHT, cruise_alt_ft=5000.0)
        assert state.terrain_vertex_count <= leg_list.total_num_points


class TestAircraft:
    def test_aircraft_raises_axis(self, projector: ScreenProjector, flat_terrain: FakeTerrain, two_waypoint_route) -> None:
        leg_list = assemble(flat_terrain, two_waypoint_route)
        state = projector.project(
            leg_list=leg_list,
            width=WIDTH,
            height=HEIGHT,
            cruise_alt_ft=10000.0,
            aircraft=Position(lon=0.5, lat=0.0, altitude=15000.0),
            aircraft_distance_nm=leg_list.total_distance / 2,
        )
        assert state.max_height_ft == 15000.0
        assert state.aircraft_point[1] == Y0
        assert state.aircraft_point[0] == pytest.approx(X0 + W / 2, abs=1)

    def test_invalid_aircraft_ignored(self, projector: ScreenProjector, flat_terrain: FakeTerrain, two_waypoint_route) -> None:
        state = projector.project(
            leg_list=assemble(flat_terrain, two_waypoint_route),
            width=WIDTH,
            height=HEIGHT,
            cruise_alt_ft=10000.0,
            aircraft=Position.invalid(),
            aircraft_distance_nm=10.0,
        )
        assert state.max_height_ft == 10000.0
        assert state.aircraft_point is None


class TestDegenerateGeometry:
    def test_zero_length_route(self, projector: ScreenProjector, flat_terrain: FakeTerrain) -> None:
        waypoints = [make_waypoint("A", lon=1.0), make_waypoint("B", lon=1.0)]
        state = projector.project(
            leg_list=assemble(flat_terrain, waypoints), width=WIDTH, height=HEIGHT, cruise_alt_ft=5000.0
        )
        assert state is not None
        assert state.horiz_scale == 0.0
        assert state.waypoint_x == (X0, X0 + W)
