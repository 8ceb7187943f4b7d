"""Configuration constants for the flight route elevation profile engine.

All configurable parameters are centralized here for easy tuning.

Classes:
    ProfileConfig: Debounce, thinning thresholds, screen margins, safe altitude rounding
    UnitConfig: Unit conversion factors (feet, nautical miles)
    DEMConfig: Elevation data file paths and sampling density
    ChartConfig: Plotly chart dimensions and colors
"""

from pathlib import Path

# Package root directory (where flightprofile/ lives)
PACKAGE_DIR = Path(__file__).parent

# Project root directory (parent of flightprofile/)
PROJECT_ROOT = PACKAGE_DIR.parent

# Data directory outside package (DEM files are not shipped with the package)
DATA_DIR = PROJECT_ROOT / "data"


class ProfileConfig:
    """Elevation profile computation and projection parameters."""

    # Debounce delay before a route/terrain change triggers a new computation
    UPDATE_TIMEOUT_S = 1.0

    # Altitude-based thinning while sampling legs
    ALTITUDE_THINNING_TOLERANCE_FT = 10.0  # Drop samples closer than this to the last kept one
    THINNING_MIN_LEGS = 2  # Thinning only kicks in once this many legs are built

    # Pixel-based thinning while projecting the terrain polygon (manhattan distance)
    PIXEL_THINNING_THRESHOLD = 2

    # Screen margins in pixels
    LEFT_MARGIN_PX = 65  # Also used as right margin
    TOP_MARGIN_PX = 14

    # Safe altitude: add buffer, then round up to the next step
    SAFETY_BUFFER_FT = 1000.0
    ROUNDING_STEP_FT = 500.0

    NO_ROUTE_TEXT = "No Route loaded."
    NO_INFO_TEXT = "No information."


assert ProfileConfig.ROUNDING_STEP_FT > 0, "Rounding step must be positive"
assert ProfileConfig.THINNING_MIN_LEGS >= 0, "Thinning leg threshold cannot be negative"


class UnitConfig:
    """Unit conversion factors."""

    FEET_PER_METER = 1 / 0.3048
    METERS_PER_NM = 1852.0


class DEMConfig:
    """Elevation data file paths and sampling."""

    # Default GeoTIFF used when no path is given
    DEM_PATH = DATA_DIR / "terrain_dem.tif"

    # Spacing between height samples along a leg (meters)
    SAMPLE_SPACING_M = 500.0
    # Upper bound of samples per leg, spacing grows for very long legs
    MAX_SAMPLES_PER_LEG = 2000


assert DEMConfig.MAX_SAMPLES_PER_LEG >= 2, "A leg needs at least its two endpoints"


class ChartConfig:
    """Chart rendering dimensions and colors."""

    DEFAULT_WIDTH = 1000
    DEFAULT_HEIGHT = 300

    BACKGROUND_COLOR = "white"
    SKY_COLOR = "rgb(204, 204, 255)"
    TERRAIN_COLOR = "darkgreen"
    WAYPOINT_LINE_COLOR = "lightgray"
    MAX_ELEVATION_COLOR = "red"
    FLIGHTPLAN_COLOR = "black"
    FLIGHTPLAN_HIGHLIGHT_COLOR = "yellow"
    AIRCRAFT_COLOR = "black"
