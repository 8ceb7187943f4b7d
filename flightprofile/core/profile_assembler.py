"""Route profile assembler - ElevationLegList for a whole route.

Runs on the background worker. The waypoint snapshot is deep-copied before
any leg is built, so concurrent edits of the live route cannot leak into a
running computation. A cancelled build returns None instead of a partial
list: half-built profiles are never handed to a consumer.
"""

import copy
import logging
import time
from typing import Optional, Sequence

from flightprofile.core.cancellation import CancellationToken
from flightprofile.core.leg_builder import LegBuilder
from flightprofile.model.elevation_leg import ElevationLegList
from flightprofile.model.waypoint import RouteWaypoint

logger = logging.getLogger(__name__)


class ProfileAssembler:
    """Builds the full elevation profile of a route.

    Example:
        assembler = ProfileAssembler(leg_builder=LegBuilder(sampler=sampler))
        leg_list = assembler.assemble(waypoints=route.waypoints(), token=CancellationToken())
    """

    def __init__(self, leg_builder: LegBuilder) -> None:
        self.leg_builder = leg_builder

    def assemble(self, waypoints: Sequence[RouteWaypoint], token: CancellationToken) -> Optional[ElevationLegList]:
        """Build one leg per consecutive waypoint pair.

        Args:
            waypoints: Route waypoints in flight order
            token: Cancellation token, polled before every leg and sample

        Returns:
            The assembled profile (empty for routes with less than two
            waypoints), or None if the build was cancelled.
        """
        start_time = time.time()
        leg_list = ElevationLegList(waypoints=tuple(copy.deepcopy(list(waypoints))))
        snapshot = leg_list.waypoints

        for i in range(1, len(snapshot)):
            if token.is_cancelled:
                logger.info(f"Profile build cancelled before leg {i}")
                return None

            leg = self.leg_builder.build_leg(
                start=snapshot[i - 1],
                end=snapshot[i],
                legs_built=len(leg_list.legs),
                start_distance_nm=leg_list.total_distance,
                token=token,
            )
            if leg is None:
                logger.info(f"Profile build cancelled in leg {i}")
                return None
            leg_list.add_leg(leg)

        elapsed = time.time() - start_time
        logger.info(
            f"Profile built in {elapsed:.2f}s: {len(leg_list.legs)} legs, {leg_list.total_num_points} points, "
            f"{leg_list.total_distance:.1f} nm, max elevation {leg_list.max_route_elevation:.0f} ft"
        )
        return leg_list
