"""ProbeResult - Answer of the interactive query engine for one pixel column."""

from dataclasses import dataclass

from flightprofile.model.position import Position


@dataclass(frozen=True)
class ProbeResult:
    """Route information under a pixel x-coordinate.

    Attributes:
        x: Clamped pixel x the query was answered for
        leg_index: Index of the leg under x
        from_ident: Ident of the leg's start waypoint
        to_ident: Ident of the leg's end waypoint
        distance_nm: Along-route distance from departure
        ground_altitude_ft: Terrain altitude at the query distance
        above_ground_altitude_ft: Cruise altitude minus ground altitude
        leg_safe_altitude_ft: Leg max elevation plus buffer, rounded up
        position: Highlight position on the leg
    """

    x: int
    leg_index: int
    from_ident: str
    to_ident: str
    distance_nm: float
    ground_altitude_ft: float
    above_ground_altitude_ft: float
    leg_safe_altitude_ft: float
    position: Position

    @property
    def info_text(self) -> str:
        """One-line description for a status label."""
        distance_decimals = 1 if self.distance_nm < 100.0 else 0
        return (
            f"{self.from_ident} -> {self.to_ident}, "
            f"{self.distance_nm:.{distance_decimals}f} nm, "
            f"Ground Altitude {self.ground_altitude_ft:.0f} ft, "
            f"Above Ground Altitude {self.above_ground_altitude_ft:.0f} ft, "
            f"Leg Safe Altitude {self.leg_safe_altitude_ft:.0f} ft"
        )
