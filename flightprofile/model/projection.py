"""ProjectionState - Pixel-space geometry of a profile for one viewport.

Produced by ScreenProjector, consumed by renderers and by the query engine.
Pixel coordinates follow screen convention: x grows to the right, y grows
downwards, so higher altitudes have smaller y values.
"""

from dataclasses import dataclass, field
from typing import Optional

# Pixel coordinate (x, y)
PixelPoint = tuple[int, int]


@dataclass(frozen=True)
class ProjectionState:
    """Pixel-space rendering of an ElevationLegList.

    Attributes:
        width: Viewport width in pixels
        height: Viewport height in pixels
        vert_scale: Pixels per foot
        horiz_scale: Pixels per nautical mile (0 for zero-length routes)
        max_route_elevation_ft: Route max elevation plus buffer, rounded up
        flightplan_alt_ft: Cruise altitude of the flight plan
        max_height_ft: Top of the altitude axis
        polygon: Terrain silhouette, closed by two baseline corners
        waypoint_x: One x per waypoint, last one at the right edge of the drawable area
        flightplan_y: y of the cruise altitude line
        max_alt_y: y of the max elevation line
        start_alt_y: y of the departure waypoint altitude
        dest_alt_y: y of the destination waypoint altitude
        aircraft_point: Aircraft marker pixel, None if not shown
    """

    width: int
    height: int
    vert_scale: float
    horiz_scale: float
    max_route_elevation_ft: float
    flightplan_alt_ft: float
    max_height_ft: float
    polygon: tuple[PixelPoint, ...] = field(default_factory=tuple)
    waypoint_x: tuple[int, ...] = field(default_factory=tuple)
    flightplan_y: int = 0
    max_alt_y: int = 0
    start_alt_y: int = 0
    dest_alt_y: int = 0
    aircraft_point: Optional[PixelPoint] = None

    @property
    def left_x(self) -> int:
        """Left edge of the drawable profile region."""
        return self.waypoint_x[0] if self.waypoint_x else 0

    @property
    def right_x(self) -> int:
        """Right edge of the drawable profile region."""
        return self.waypoint_x[-1] if self.waypoint_x else self.width

    @property
    def terrain_vertex_count(self) -> int:
        """Number of polygon vertices that are terrain samples (baseline corners excluded)."""
        return max(0, len(self.polygon) - 2)
