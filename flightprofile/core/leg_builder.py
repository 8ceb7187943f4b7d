"""Leg builder - Terrain profile of a single route leg.

Walks the terrain samples between two waypoints and keeps the ones that
matter for the profile:

1. First and last sample of a leg are always kept
2. Once THINNING_MIN_LEGS legs are built, samples whose altitude is within
   ALTITUDE_THINNING_TOLERANCE_FT of the last kept sample are dropped
3. Every kept sample after the first advances the route distance by the
   great-circle distance from the previously kept sample

The number of legs already built is passed in explicitly, so a builder can
be reused across routes and threads.
"""

import logging
from typing import Optional

from flightprofile.constants import ProfileConfig
from flightprofile.core.cancellation import CancellationToken
from flightprofile.core.terrain_sampler import TerrainSampler
from flightprofile.model.elevation_leg import ElevationLeg
from flightprofile.model.position import Position
from flightprofile.model.waypoint import RouteWaypoint

logger = logging.getLogger(__name__)


class LegBuilder:
    """Builds one ElevationLeg per waypoint pair.

    Example:
        builder = LegBuilder(sampler=TerrainSampler(source=dem))
        leg = builder.build_leg(start=wp_a, end=wp_b, legs_built=0, start_distance_nm=0.0, token=token)
    """

    def __init__(
        self,
        sampler: TerrainSampler,
        tolerance_ft: float = ProfileConfig.ALTITUDE_THINNING_TOLERANCE_FT,
        min_legs_for_thinning: int = ProfileConfig.THINNING_MIN_LEGS,
    ) -> None:
        """Initialize leg builder.

        Args:
            sampler: Terrain sampler adapter
            tolerance_ft: Altitude difference below which samples are dropped
            min_legs_for_thinning: Legs that must exist before thinning applies
        """
        self.sampler = sampler
        self.tolerance_ft = tolerance_ft
        self.min_legs_for_thinning = min_legs_for_thinning

    def build_leg(
        self,
        start: RouteWaypoint,
        end: RouteWaypoint,
        legs_built: int,
        start_distance_nm: float,
        token: CancellationToken,
    ) -> Optional[ElevationLeg]:
        """Build the terrain profile between two consecutive waypoints.

        Args:
            start: Leg start waypoint
            end: Leg end waypoint
            legs_built: Number of legs already accumulated for this route
            start_distance_nm: Route distance at the leg start
            token: Cancellation token polled before every sample

        Returns:
            The leg, or None if the token was cancelled while building.
        """
        samples = self.sampler.sample(start=start, end=end)
        thinning_active = legs_built >= self.min_legs_for_thinning

        leg = ElevationLeg()
        total_distance = start_distance_nm
        last_pos: Optional[Position] = None
        last_index = len(samples) - 1

        for j, pos in enumerate(samples):
            if token.is_cancelled:
                logger.debug(f"Leg {start.ident} -> {end.ident} cancelled at sample {j}")
                return None

            if (
                thinning_active
                and last_pos is not None
                and j != 0
                and j != last_index
                and abs(pos.altitude - last_pos.altitude) < self.tolerance_ft
            ):
                continue

            if last_pos is not None:
                total_distance += last_pos.distance_nm_to(pos)
            leg.append(position=pos, distance=total_distance)
            last_pos = pos

        return leg
