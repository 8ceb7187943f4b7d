"""Terrain sampler adapter between the profile engine and a height source.

Any object with a height_profile(lon1, lat1, lon2, lat2) method returning
(lon, lat, elevation_m) tuples can serve as source; DEMService is the
bundled implementation. The adapter converts samples to Positions in feet
and substitutes a flat two-point profile when the source has no data.
"""

import logging
from math import isnan
from typing import Protocol, Sequence

from flightprofile.core.geo_calculator import GeoCalculator
from flightprofile.model.position import Position
from flightprofile.model.waypoint import RouteWaypoint

logger = logging.getLogger(__name__)


class RouteContractError(ValueError):
    """A collaborator handed over data that breaks the engine's preconditions."""


class HeightProfileSource(Protocol):
    """External terrain collaborator.

    Must be safe to call from the background worker while the route is
    being edited in the foreground.
    """

    def height_profile(
        self, lon1: float, lat1: float, lon2: float, lat2: float
    ) -> Sequence[tuple[float, float, float]]: ...


class TerrainSampler:
    """Returns the terrain samples between two waypoints.

    Example:
        sampler = TerrainSampler(source=DEMService())
        samples = sampler.sample(start=wp_a, end=wp_b)
    """

    def __init__(self, source: HeightProfileSource) -> None:
        self._source = source

    def sample(self, start: RouteWaypoint, end: RouteWaypoint) -> list[Position]:
        """Sample terrain between two waypoints.

        Args:
            start: Leg start waypoint
            end: Leg end waypoint

        Returns:
            Ordered samples with altitude in feet. Never empty: a flat profile at
            0 ft between both waypoints is returned when the source has no data.

        Raises:
            RouteContractError: If a waypoint has no valid position or the
                source returns malformed samples.
        """
        for waypoint in (start, end):
            if not waypoint.position.is_valid:
                raise RouteContractError(f"Waypoint {waypoint.ident} has no valid position")

        raw = self._source.height_profile(start.lon, start.lat, end.lon, end.lat)
        if not raw:
            logger.warning(f"No terrain data for {start.ident} -> {end.ident}, using flat profile")
            return [
                Position(lon=start.lon, lat=start.lat, altitude=0.0),
                Position(lon=end.lon, lat=end.lat, altitude=0.0),
            ]

        samples = []
        for sample in raw:
            if len(sample) != 3 or any(isnan(value) for value in sample):
                raise RouteContractError(f"Malformed terrain sample {sample!r} for {start.ident} -> {end.ident}")
            lon, lat, elevation_m = sample
            samples.append(Position(lon=lon, lat=lat, altitude=GeoCalculator.meter_to_feet(elevation_m)))
        return samples
