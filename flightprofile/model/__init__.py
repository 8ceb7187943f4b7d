"""Data model classes for the elevation profile engine.

- Position: Geometry atom (lon, lat, altitude in feet)
- RouteWaypoint / MapObjectType: Route snapshot entries with type tags
- ElevationLeg / ElevationLegList: Assembled terrain profile
- ProjectionState: Pixel-space geometry for a viewport
- ProbeResult: Answer of a pixel query
"""

from flightprofile.model.elevation_leg import ElevationLeg, ElevationLegList
from flightprofile.model.position import Position
from flightprofile.model.probe import ProbeResult
from flightprofile.model.projection import PixelPoint, ProjectionState
from flightprofile.model.waypoint import MapObjectType, RouteWaypoint

__all__ = [
    "Position",
    "RouteWaypoint",
    "MapObjectType",
    "ElevationLeg",
    "ElevationLegList",
    "ProjectionState",
    "PixelPoint",
    "ProbeResult",
]
