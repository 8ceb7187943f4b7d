"""Screen projector - Pixel geometry of an elevation profile.

Maps route distance to x and altitude to y inside a viewport:

    x = LEFT_MARGIN + int(distance_nm * horiz_scale)
    y = TOP_MARGIN + int(h - altitude_ft * vert_scale)

with w = width - 2 * LEFT_MARGIN, h = height - TOP_MARGIN,
horiz_scale = w / total_distance and vert_scale = h / max_height.

The top of the altitude axis (max_height) is the largest of the rounded
route max elevation, the cruise altitude and the live aircraft altitude.
"""

import logging
from math import ceil
from typing import Optional

from flightprofile.constants import ProfileConfig
from flightprofile.model.elevation_leg import ElevationLegList
from flightprofile.model.position import Position
from flightprofile.model.projection import PixelPoint, ProjectionState

logger = logging.getLogger(__name__)


def safe_altitude_ft(elevation_ft: float) -> float:
    """Add the safety buffer and round up to the next rounding step."""
    step = ProfileConfig.ROUNDING_STEP_FT
    return ceil((elevation_ft + ProfileConfig.SAFETY_BUFFER_FT) / step) * step


class ScreenProjector:
    """Projects an ElevationLegList into a viewport.

    Example:
        projector = ScreenProjector()
        projection = projector.project(leg_list=leg_list, width=1000, height=300, cruise_alt_ft=9000)
        if projection is None:
            ...  # draw "No Route loaded."
    """

    def __init__(
        self,
        left_margin: int = ProfileConfig.LEFT_MARGIN_PX,
        top_margin: int = ProfileConfig.TOP_MARGIN_PX,
        pixel_threshold: int = ProfileConfig.PIXEL_THINNING_THRESHOLD,
    ) -> None:
        self.left_margin = left_margin
        self.top_margin = top_margin
        self.pixel_threshold = pixel_threshold

    def project(
        self,
        leg_list: ElevationLegList,
        width: int,
        height: int,
        cruise_alt_ft: float,
        aircraft: Optional[Position] = None,
        aircraft_distance_nm: Optional[float] = None,
    ) -> Optional[ProjectionState]:
        """Build the pixel geometry for the current viewport.

        Args:
            leg_list: Assembled route profile
            width: Viewport width in pixels
            height: Viewport height in pixels
            cruise_alt_ft: Flight plan cruise altitude
            aircraft: Live aircraft position if it is shown, else None
            aircraft_distance_nm: Along-route distance of the aircraft

        Returns:
            Projection, or None if there is nothing to draw.
        """
        if leg_list.is_empty:
            return None

        x0, y0 = self.left_margin, self.top_margin
        w, h = width - x0 * 2, height - y0

        max_route_elevation_ft = safe_altitude_ft(leg_list.max_route_elevation)
        max_height = max(max_route_elevation_ft, cruise_alt_ft)
        show_aircraft = aircraft is not None and aircraft.is_valid
        if show_aircraft:
            max_height = max(max_height, aircraft.altitude)

        vert_scale = h / max_height
        if leg_list.total_distance > 0:
            horiz_scale = w / leg_list.total_distance
        else:
            logger.warning("Route has zero length, collapsing profile to the left margin")
            horiz_scale = 0.0

        def to_y(altitude_ft: float) -> int:
            return y0 + int(h - altitude_ft * vert_scale)

        waypoint_x: list[int] = []
        polygon: list[PixelPoint] = [(x0, h + y0)]
        last_pt: Optional[PixelPoint] = None

        for leg in leg_list.legs:
            waypoint_x.append(x0 + int(leg.start_distance * horiz_scale))

            last_index = leg.num_points - 1
            for i, (pos, distance) in enumerate(zip(leg.elevation, leg.distances)):
                pt = (x0 + int(distance * horiz_scale), to_y(pos.altitude))
                if (
                    last_pt is None
                    or i == last_index
                    or abs(last_pt[0] - pt[0]) + abs(last_pt[1] - pt[1]) > self.pixel_threshold
                ):
                    polygon.append(pt)
                    last_pt = pt

        waypoint_x.append(x0 + w)
        polygon.append((x0 + w, h + y0))

        aircraft_point = None
        if show_aircraft and aircraft_distance_nm is not None:
            aircraft_point = (x0 + int(aircraft_distance_nm * horiz_scale), to_y(aircraft.altitude))

        return ProjectionState(
            width=width,
            height=height,
            vert_scale=vert_scale,
            horiz_scale=horiz_scale,
            max_route_elevation_ft=max_route_elevation_ft,
            flightplan_alt_ft=cruise_alt_ft,
            max_height_ft=max_height,
            polygon=tuple(polygon),
            waypoint_x=tuple(waypoint_x),
            flightplan_y=to_y(cruise_alt_ft),
            max_alt_y=to_y(max_route_elevation_ft),
            start_alt_y=to_y(leg_list.waypoints[0].altitude),
            dest_alt_y=to_y(leg_list.waypoints[-1].altitude),
            aircraft_point=aircraft_point,
        )
