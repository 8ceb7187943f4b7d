"""Tests for ProfileChart - Plotly rendering of a projected profile.

These tests verify that ProfileChart builds Plotly figures directly from
ProjectionState pixel geometry. Tests cover:
- Placeholder rendering without a route
- Terrain polygon trace
- Waypoint and altitude labels
- Aircraft marker
- Chart configuration (reversed pixel y axis)
"""

import plotly.graph_objects as go
import pytest

from conftest import FakeTerrain, build_assembler
from flightprofile.constants import ProfileConfig
from flightprofile.core.cancellation import CancellationToken
from flightprofile.core.screen_projector import ScreenProjector
from flightprofile.model.elevation_leg import ElevationLegList
from flightprofile.model.position import Position
from flightprofile.ui.profile_chart import ProfileChart


@pytest.fixture
def chart() -> ProfileChart:
    """Standard chart for testing."""
    return ProfileChart(width=800, height=400)


@pytest.fixture
def ridge_profile(ridge_terrain: FakeTerrain, three_waypoint_route):
    leg_list = build_assembler(ridge_terrain).assemble(waypoints=three_waypoint_route, token=CancellationToken())
    projection = ScreenProjector().project(leg_list=leg_list, width=800, height=400, cruise_alt_ft=9000.0)
    return leg_list, projection


def annotation_texts(fig: go.Figure) -> list[str]:
    return [a.text for a in fig.layout.annotations]


class TestPlaceholder:
    def test_no_projection_renders_placeholder(self, chart: ProfileChart) -> None:
        fig = chart.render(projection=None, leg_list=ElevationLegList())

        assert isinstance(fig, go.Figure)
        assert annotation_texts(fig) == [f"<b>{ProfileConfig.NO_ROUTE_TEXT}</b>"]
        assert len(fig.data) == 0

    def test_placeholder_size(self, chart: ProfileChart) -> None:
        fig = chart.render_placeholder(width=500, height=200)
        assert fig.layout.width == 500
        assert fig.layout.height == 200


class TestProfileRendering:
    def test_terrain_trace_matches_polygon(self, chart: ProfileChart, ridge_profile) -> None:
        leg_list, projection = ridge_profile
        fig = chart.render(projection=projection, leg_list=leg_list)

        terrain = [trace for trace in fig.data if trace.name == "Terrain"]
        assert len(terrain) == 1
        assert len(terrain[0].x) == len(projection.polygon)
        assert terrain[0].fill == "toself"

    def test_waypoint_idents_labelled(self, chart: ProfileChart, ridge_profile) -> None:
        leg_list, projection = ridge_profile
        texts = annotation_texts(chart.render(projection=projection, leg_list=leg_list))

        for ident in ("A", "B", "C"):
            assert f"<b>{ident}</b>" in texts
        assert "<b>11,500 ft</b>" in texts
        assert "<b>9,000 ft</b>" in texts

    def test_reversed_pixel_axis(self, chart: ProfileChart, ridge_profile) -> None:
        leg_list, projection = ridge_profile
        fig = chart.render(projection=projection, leg_list=leg_list)

        assert tuple(fig.layout.yaxis.range) == (400, 0)
        assert tuple(fig.layout.xaxis.range) == (0, 800)

    def test_one_line_per_waypoint(self, chart: ProfileChart, ridge_profile) -> None:
        leg_list, projection = ridge_profile
        fig = chart.render(projection=projection, leg_list=leg_list)

        vertical = [s for s in fig.layout.shapes if s.type == "line" and s.x0 == s.x1]
        assert len(vertical) == len(projection.waypoint_x)


class TestAircraftMarker:
    def test_no_marker_without_aircraft(self, chart: ProfileChart, ridge_profile) -> None:
        leg_list, projection = ridge_profile
        fig = chart.render(projection=projection, leg_list=leg_list)
        assert not [trace for trace in fig.data if trace.name == "Aircraft"]

    def test_marker_at_aircraft_point(self, chart: ProfileChart, ridge_terrain: FakeTerrain, three_waypoint_route) -> None:
        leg_list = build_assembler(ridge_terrain).assemble(waypoints=three_waypoint_route, token=CancellationToken())
        aircraft = Position(lon=0.5, lat=0.0, altitude=7500.0)
        projection = ScreenProjector().project(
            leg_list=leg_list, width=800, height=400, cruise_alt_ft=9000.0, aircraft=aircraft, aircraft_distance_nm=30.0
        )
        fig = chart.render(projection=projection, leg_list=leg_list, aircraft=aircraft, aircraft_distance_nm=30.0)

        marker = [trace for trace in fig.data if trace.name == "Aircraft"]
        assert len(marker) == 1
        assert (marker[0].x[0], marker[0].y[0]) == projection.aircraft_point
        assert "<b>7500 ft<br>30 nm</b>" in annotation_texts(fig)
