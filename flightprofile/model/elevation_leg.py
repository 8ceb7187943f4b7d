"""ElevationLeg and ElevationLegList - The assembled terrain profile.

An ElevationLeg holds the retained terrain samples between two consecutive
route waypoints, with the cumulative route distance of every sample.
An ElevationLegList holds all legs of a route plus the route snapshot it
was built from.

Invariants:
    - len(leg.elevation) == len(leg.distances)
    - leg.distances is non-decreasing and continues the previous leg's total
    - len(leg_list.legs) == len(leg_list.waypoints) - 1 (for routes with waypoints)
"""

from dataclasses import dataclass, field

from flightprofile.model.position import Position
from flightprofile.model.waypoint import RouteWaypoint


@dataclass
class ElevationLeg:
    """Terrain profile between two consecutive route waypoints.

    Attributes:
        elevation: Retained terrain samples, altitude in feet
        distances: Cumulative route distance (nm) of each sample
        max_elevation: Highest retained sample altitude in feet
    """

    elevation: list[Position] = field(default_factory=list)
    distances: list[float] = field(default_factory=list)
    max_elevation: float = 0.0

    @property
    def num_points(self) -> int:
        return len(self.elevation)

    @property
    def start_distance(self) -> float:
        """Cumulative route distance at the leg start (nm)."""
        return self.distances[0]

    @property
    def end_distance(self) -> float:
        """Cumulative route distance at the leg end (nm)."""
        return self.distances[-1]

    @property
    def length_nm(self) -> float:
        return self.end_distance - self.start_distance

    def append(self, position: Position, distance: float) -> None:
        """Append a retained sample and its cumulative distance."""
        self.elevation.append(position)
        self.distances.append(distance)
        if position.altitude > self.max_elevation:
            self.max_elevation = position.altitude


@dataclass
class ElevationLegList:
    """Full route profile.

    Attributes:
        legs: One ElevationLeg per consecutive waypoint pair
        waypoints: Snapshot of the route used to build the profile
        total_distance: Route length along the retained samples (nm)
        total_num_points: Number of retained samples over all legs
        max_route_elevation: Highest leg max_elevation in feet
    """

    legs: list[ElevationLeg] = field(default_factory=list)
    waypoints: tuple[RouteWaypoint, ...] = ()
    total_distance: float = 0.0
    total_num_points: int = 0
    max_route_elevation: float = 0.0

    @property
    def is_empty(self) -> bool:
        """True if there is nothing to draw."""
        return not self.legs or not self.waypoints

    def add_leg(self, leg: ElevationLeg) -> None:
        """Fold a finished leg into the list totals."""
        self.legs.append(leg)
        self.total_num_points += leg.num_points
        self.total_distance = leg.end_distance
        if leg.max_elevation > self.max_route_elevation:
            self.max_route_elevation = leg.max_elevation

    def __repr__(self) -> str:
        return (
            f"ElevationLegList(legs={len(self.legs)}, points={self.total_num_points}, "
            f"distance={self.total_distance:.1f}nm, max_elev={self.max_route_elevation:.0f}ft)"
        )
