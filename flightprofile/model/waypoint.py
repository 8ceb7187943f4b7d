"""RouteWaypoint - One entry of the route snapshot.

The engine only needs identity, location and a type tag from the route
model. The type tag is plain data so renderers can pick a symbol without
the engine knowing about symbols.
"""

from dataclasses import dataclass
from enum import Enum

from flightprofile.model.position import Position


class MapObjectType(Enum):
    """Kind of navaid or point a waypoint refers to."""

    WAYPOINT = "waypoint"
    AIRPORT = "airport"
    VOR = "vor"
    NDB = "ndb"
    USER = "user"
    INVALID = "invalid"


@dataclass(frozen=True)
class RouteWaypoint:
    """A waypoint of the flight route.

    Attributes:
        ident: Display identifier (e.g., "LSZH", "ZUE", "USERPT1")
        position: Location, altitude in feet (airport elevation for airports)
        map_object_type: Type tag for rendering

    Example:
        wp = RouteWaypoint(ident="LSZH", position=Position(lon=8.55, lat=47.46, altitude=1416.0),
                           map_object_type=MapObjectType.AIRPORT)
    """

    ident: str
    position: Position
    map_object_type: MapObjectType = MapObjectType.WAYPOINT

    @property
    def lon(self) -> float:
        """Longitude delegated from position."""
        return self.position.lon

    @property
    def lat(self) -> float:
        """Latitude delegated from position."""
        return self.position.lat

    @property
    def altitude(self) -> float:
        """Altitude delegated from position."""
        return self.position.altitude
