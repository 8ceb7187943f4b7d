"""Query engine - Route information under a pixel column.

Inverse of the screen projection, used for live probing with the mouse:
pixel x -> leg index -> route distance -> bracketing samples -> ground
altitude and highlight position.

Ground altitude is the plain mean abs(alt1 + alt2) / 2 of the two samples
bracketing the query distance, not a distance-weighted interpolation.
The highlight position is interpolated on the straight line between the
first and last sample of the leg.
"""

import bisect
import logging
from typing import Optional

from flightprofile.core.screen_projector import safe_altitude_ft
from flightprofile.model.elevation_leg import ElevationLegList
from flightprofile.model.probe import ProbeResult
from flightprofile.model.projection import ProjectionState

logger = logging.getLogger(__name__)


class QueryEngine:
    """Answers pixel queries against the visible profile.

    Example:
        engine = QueryEngine()
        result = engine.probe(x=420, leg_list=leg_list, projection=projection, cruise_alt_ft=9000)
        if result is not None:
            label.setText(result.info_text)
    """

    def probe(
        self,
        x: int,
        leg_list: ElevationLegList,
        projection: Optional[ProjectionState],
        cruise_alt_ft: float,
    ) -> Optional[ProbeResult]:
        """Look up the route under pixel column x.

        Args:
            x: Pixel x in viewport coordinates
            leg_list: Profile the projection was built from
            projection: Current projection, None if nothing is drawn
            cruise_alt_ft: Flight plan cruise altitude for above ground altitude

        Returns:
            ProbeResult, or None for an empty profile, a degenerate projection
            or an x outside the viewport.
        """
        if leg_list.is_empty or projection is None:
            return None
        if projection.horiz_scale <= 0:
            logger.warning("Cannot query a profile with zero horizontal scale")
            return None
        if x < 0 or x > projection.width:
            return None

        x = max(x, projection.left_x)
        x = min(x, projection.right_x)

        # Leg starting at or left of x; x on the last waypoint stays in the last leg
        index = bisect.bisect_right(projection.waypoint_x, x) - 1
        index = min(max(index, 0), len(leg_list.legs) - 1)
        leg = leg_list.legs[index]

        distance = (x - projection.left_x) / projection.horiz_scale

        last_sample = leg.num_points - 1
        index_low = min(bisect.bisect_left(leg.distances, distance), last_sample)
        index_upper = min(bisect.bisect_right(leg.distances, distance), last_sample)
        alt1 = leg.elevation[index_low].altitude
        alt2 = leg.elevation[index_upper].altitude
        alt = abs(alt1 + alt2) / 2

        leg_length = leg.length_nm
        fraction = (distance - leg.start_distance) / leg_length if leg_length > 0 else 0.0
        fraction = min(max(fraction, 0.0), 1.0)
        position = leg.elevation[0].interpolate(leg.elevation[-1], fraction)

        return ProbeResult(
            x=x,
            leg_index=index,
            from_ident=leg_list.waypoints[index].ident,
            to_ident=leg_list.waypoints[index + 1].ident,
            distance_nm=distance,
            ground_altitude_ft=alt,
            above_ground_altitude_ft=cruise_alt_ft - alt,
            leg_safe_altitude_ft=safe_altitude_ft(leg.max_elevation),
            position=position,
        )
