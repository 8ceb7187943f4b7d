"""Aircraft progress - Along-route distance of the live aircraft.

The aircraft is snapped to the nearest route leg. Its distance from the
departure is the route distance up to the end waypoint of that leg minus
the great-circle distance from that waypoint back to the aircraft.
"""

import logging
from math import cos, radians
from typing import Optional, Sequence

from flightprofile.model.position import Position
from flightprofile.model.waypoint import RouteWaypoint

logger = logging.getLogger(__name__)


class AircraftProgress:
    """Static helpers to place the aircraft on the route."""

    @staticmethod
    def nearest_leg_index(waypoints: Sequence[RouteWaypoint], position: Position) -> Optional[int]:
        """Index of the end waypoint of the leg closest to position.

        Uses a local equirectangular approximation around the aircraft, which is
        plenty for picking a leg.

        Returns:
            Waypoint index in 1..len(waypoints)-1, 0 for single-waypoint routes,
            None for empty routes or an invalid position.
        """
        if not waypoints or not position.is_valid:
            return None
        if len(waypoints) == 1:
            return 0

        lon_scale = cos(radians(position.lat))

        def to_xy(pos: Position) -> tuple[float, float]:
            return (pos.lon - position.lon) * lon_scale, pos.lat - position.lat

        best_index, best_dist_sq = 1, float("inf")
        for i in range(1, len(waypoints)):
            ax, ay = to_xy(waypoints[i - 1].position)
            bx, by = to_xy(waypoints[i].position)
            dx, dy = bx - ax, by - ay
            length_sq = dx * dx + dy * dy
            # Aircraft sits at the origin
            t = 0.0 if length_sq == 0 else min(max(-(ax * dx + ay * dy) / length_sq, 0.0), 1.0)
            px, py = ax + t * dx, ay + t * dy
            dist_sq = px * px + py * py
            if dist_sq < best_dist_sq:
                best_index, best_dist_sq = i, dist_sq
        return best_index

    @staticmethod
    def distance_from_start_nm(waypoints: Sequence[RouteWaypoint], position: Position) -> Optional[float]:
        """Along-route distance of the aircraft in nautical miles.

        Args:
            waypoints: Route waypoints in flight order
            position: Aircraft position

        Returns:
            Distance from departure (may be negative before the departure
            waypoint), or None if the aircraft cannot be placed.
        """
        index = AircraftProgress.nearest_leg_index(waypoints=waypoints, position=position)
        if index is None:
            return None

        distance = 0.0
        for i in range(1, index + 1):
            distance += waypoints[i - 1].position.distance_nm_to(waypoints[i].position)
        return distance - waypoints[index].position.distance_nm_to(position)
