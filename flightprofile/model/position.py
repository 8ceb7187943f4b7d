"""Position - The geometry atom of the elevation profile engine.

A Position is a single geographic coordinate with an altitude in feet.
Terrain samples, waypoint locations, highlight positions and the live
aircraft position all use it.

Position.invalid() is the sentinel for "no position" (cleared highlight,
disconnected simulator).
"""

from dataclasses import dataclass
from math import isnan, nan

from flightprofile.core.geo_calculator import GeoCalculator


@dataclass(frozen=True)
class Position:
    """A geographic point with altitude.

    Attributes:
        lon: Longitude in decimal degrees (WGS84)
        lat: Latitude in decimal degrees (WGS84)
        altitude: Altitude in feet

    Example:
        pos = Position(lon=8.54, lat=47.45, altitude=1416.0)
    """

    lon: float
    lat: float
    altitude: float = 0.0

    def __post_init__(self) -> None:
        """Validate data after initialization.

        NaN is only allowed for all three fields at once (the invalid sentinel).
        """
        nan_fields = [isnan(self.lon), isnan(self.lat), isnan(self.altitude)]
        if any(nan_fields) and not all(nan_fields):
            raise ValueError(f"Position cannot have NaN fields: ({self.lon}, {self.lat}, {self.altitude})")

    @classmethod
    def invalid(cls) -> "Position":
        """Return the invalid sentinel position."""
        return cls(lon=nan, lat=nan, altitude=nan)

    @property
    def is_valid(self) -> bool:
        return not isnan(self.lon)

    @property
    def lon_lat(self) -> tuple[float, float]:
        """Return (lon, lat) tuple."""
        return (self.lon, self.lat)

    def distance_m_to(self, other: "Position") -> float:
        """Great-circle distance to another position in meters."""
        return GeoCalculator.haversine_distance_m(lat1=self.lat, lon1=self.lon, lat2=other.lat, lon2=other.lon)

    def distance_nm_to(self, other: "Position") -> float:
        """Great-circle distance to another position in nautical miles."""
        return GeoCalculator.meter_to_nm(self.distance_m_to(other))

    def interpolate(self, other: "Position", fraction: float) -> "Position":
        """Linear interpolation of coordinates and altitude towards another position.

        Args:
            other: Target position (fraction=1)
            fraction: 0 returns self, 1 returns other

        Returns:
            Position on the straight line between both points.
        """
        return Position(
            lon=self.lon + (other.lon - self.lon) * fraction,
            lat=self.lat + (other.lat - self.lat) * fraction,
            altitude=self.altitude + (other.altitude - self.altitude) * fraction,
        )

    def __repr__(self) -> str:
        if not self.is_valid:
            return "Position(invalid)"
        return f"Position(lon={self.lon:.5f}, lat={self.lat:.5f}, alt={self.altitude:.0f}ft)"
