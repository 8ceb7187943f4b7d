"""Shared pytest fixtures for flightprofile tests.

Provides fake terrain sources, a static route and reusable test data.

COORDINATE SYSTEM:
    Tests use coordinates near the equator (lat~0) and prime meridian (lon~0)
    where 1 degree of latitude or longitude is about 60 nm, so expected
    distances can be written down without GeoCalculator.
"""

import threading
import time
from typing import Callable, Optional, Sequence

import pytest

from flightprofile.core.cancellation import CancellationToken
from flightprofile.core.leg_builder import LegBuilder
from flightprofile.core.profile_assembler import ProfileAssembler
from flightprofile.core.terrain_sampler import TerrainSampler
from flightprofile.model.position import Position
from flightprofile.model.waypoint import MapObjectType, RouteWaypoint

FEET_TO_METERS = 0.3048

# One degree on the equator in nautical miles (6,371 km sphere)
NM_PER_DEGREE = 60.04


def make_waypoint(
    ident: str,
    lon: float,
    lat: float = 0.0,
    altitude: float = 0.0,
    map_object_type: MapObjectType = MapObjectType.WAYPOINT,
) -> RouteWaypoint:
    """Helper to create a RouteWaypoint."""
    return RouteWaypoint(ident=ident, position=Position(lon=lon, lat=lat, altitude=altitude), map_object_type=map_object_type)


# =============================================================================
# FAKE TERRAIN SOURCES
# =============================================================================


class FakeTerrain:
    """Height source returning evenly spaced samples from an altitude function.

    Altitudes are defined in feet for readable tests and handed out in
    meters, like a real DEM.
    """

    def __init__(
        self,
        altitude_ft: Callable[[float, float], float],
        samples_per_leg: int = 11,
        delay_s: float = 0.0,
    ) -> None:
        """Initialize fake terrain.

        Args:
            altitude_ft: Function (lon, lat) -> terrain altitude in feet
            samples_per_leg: Samples returned per call, endpoints included
            delay_s: Sleep per call to simulate slow terrain access
        """
        self.altitude_ft = altitude_ft
        self.samples_per_leg = samples_per_leg
        self.delay_s = delay_s
        self.calls = 0
        self._lock = threading.Lock()

    def height_profile(self, lon1: float, lat1: float, lon2: float, lat2: float) -> list[tuple[float, float, float]]:
        with self._lock:
            self.calls += 1
        if self.delay_s:
            time.sleep(self.delay_s)
        samples = []
        for i in range(self.samples_per_leg):
            f = i / (self.samples_per_leg - 1)
            lon = lon1 + (lon2 - lon1) * f
            lat = lat1 + (lat2 - lat1) * f
            samples.append((lon, lat, self.altitude_ft(lon, lat) * FEET_TO_METERS))
        return samples


class ScriptedTerrain:
    """Height source returning a fixed altitude sequence (feet) for every leg."""

    def __init__(self, altitudes_ft: Sequence[float]) -> None:
        self.altitudes_ft = list(altitudes_ft)
        self.calls = 0

    def height_profile(self, lon1: float, lat1: float, lon2: float, lat2: float) -> list[tuple[float, float, float]]:
        self.calls += 1
        n = len(self.altitudes_ft)
        samples = []
        for i, alt in enumerate(self.altitudes_ft):
            f = i / (n - 1) if n > 1 else 0.0
            samples.append((lon1 + (lon2 - lon1) * f, lat1 + (lat2 - lat1) * f, alt * FEET_TO_METERS))
        return samples


class EmptyTerrain:
    """Height source without any data."""

    def height_profile(self, lon1: float, lat1: float, lon2: float, lat2: float) -> list[tuple[float, float, float]]:
        return []


class BlockingTerrain:
    """Height source that blocks until released, to keep a build in flight."""

    def __init__(self, altitude_ft: float = 0.0) -> None:
        self.altitude_ft = altitude_ft
        self.release = threading.Event()
        self.entered = threading.Event()

    def height_profile(self, lon1: float, lat1: float, lon2: float, lat2: float) -> list[tuple[float, float, float]]:
        self.entered.set()
        self.release.wait(timeout=10.0)
        alt_m = self.altitude_ft * FEET_TO_METERS
        return [(lon1, lat1, alt_m), (lon2, lat2, alt_m)]


class CancellingTerrain:
    """Height source that cancels the given token on its n-th call."""

    def __init__(self, token: CancellationToken, cancel_on_call: int) -> None:
        self.token = token
        self.cancel_on_call = cancel_on_call
        self.calls = 0

    def height_profile(self, lon1: float, lat1: float, lon2: float, lat2: float) -> list[tuple[float, float, float]]:
        self.calls += 1
        if self.calls == self.cancel_on_call:
            self.token.cancel()
        return [(lon1, lat1, 0.0), (lon2, lat2, 0.0)]


# =============================================================================
# ROUTE
# =============================================================================


class StaticRoute:
    """Minimal route model: a list of waypoints plus a cruise altitude."""

    def __init__(self, waypoints: Optional[list[RouteWaypoint]] = None, cruise_altitude_ft: float = 10000.0) -> None:
        self._waypoints = list(waypoints or [])
        self._cruise_altitude_ft = cruise_altitude_ft

    def waypoints(self) -> list[RouteWaypoint]:
        return list(self._waypoints)

    @property
    def cruise_altitude_ft(self) -> float:
        return self._cruise_altitude_ft

    def set_cruise_altitude(self, altitude_ft: float) -> None:
        self._cruise_altitude_ft = altitude_ft

    def set_waypoints(self, waypoints: list[RouteWaypoint]) -> None:
        self._waypoints = list(waypoints)

    def is_empty(self) -> bool:
        return not self._waypoints


# =============================================================================
# FIXTURES
# =============================================================================


def build_assembler(source) -> ProfileAssembler:
    """Assembler wired to the given height source."""
    return ProfileAssembler(leg_builder=LegBuilder(sampler=TerrainSampler(source=source)))


@pytest.fixture
def flat_terrain() -> FakeTerrain:
    """Terrain at sea level everywhere."""
    return FakeTerrain(altitude_ft=lambda lon, lat: 0.0)


@pytest.fixture
def ridge_terrain() -> FakeTerrain:
    """Terrain at 0 ft except a 10,400 ft plateau between lon 1.15 and 1.85."""
    return FakeTerrain(altitude_ft=lambda lon, lat: 10400.0 if 1.15 <= lon <= 1.85 else 0.0)


@pytest.fixture
def two_waypoint_route() -> list[RouteWaypoint]:
    """A -> B along the equator, 1 degree (about 60 nm)."""
    return [
        make_waypoint("A", lon=0.0, map_object_type=MapObjectType.AIRPORT),
        make_waypoint("B", lon=1.0, map_object_type=MapObjectType.AIRPORT),
    ]


@pytest.fixture
def three_waypoint_route() -> list[RouteWaypoint]:
    """A -> B -> C along the equator, 1 degree legs, the B -> C leg crosses the ridge."""
    return [
        make_waypoint("A", lon=0.0, map_object_type=MapObjectType.AIRPORT),
        make_waypoint("B", lon=1.0, map_object_type=MapObjectType.VOR),
        make_waypoint("C", lon=2.0, map_object_type=MapObjectType.AIRPORT),
    ]


@pytest.fixture
def five_waypoint_route() -> list[RouteWaypoint]:
    """Four 0.5 degree legs along the equator."""
    return [make_waypoint(f"WP{i}", lon=i * 0.5) for i in range(5)]
