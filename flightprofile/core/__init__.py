"""Core classes of the elevation profile engine.

- GeoCalculator: Geodesic calculations and unit conversion
- DEMService: GeoTIFF terrain source with great-circle height profiles
- CancellationToken: Cooperative cancellation of background builds
- TerrainSampler: Adapter from a height source to Positions (import from terrain_sampler)
- LegBuilder / ProfileAssembler: Background profile computation
- ScreenProjector / QueryEngine: Pixel geometry and its inverse
- AircraftProgress: Live aircraft along-route distance
"""

from flightprofile.core.cancellation import CancellationToken
from flightprofile.core.dem_service import DEMService
from flightprofile.core.geo_calculator import GeoCalculator

# Modules below import flightprofile.model, which imports geo_calculator.
# Import directly: from flightprofile.core.leg_builder import LegBuilder

__all__ = [
    "GeoCalculator",
    "DEMService",
    "CancellationToken",
]
