"""Digital Elevation Model (DEM) service for terrain height profiles.

Provides access to a GeoTIFF elevation raster:
- Fast O(1) elevation lookup using a pre-loaded NumPy array
- Automatic coordinate transformation from WGS84 to the DEM's native CRS
- Great-circle height profiles between two points
- Thread-safe lazy loading, so profiles can be sampled from a worker thread
"""

import logging
import threading
import time
from pathlib import Path
from typing import Optional

import numpy as np
import rasterio
from rasterio.warp import transform

from flightprofile.constants import DEMConfig
from flightprofile.core.geo_calculator import GeoCalculator

logger = logging.getLogger(__name__)

# (lon, lat, elevation_m)
HeightSample = tuple[float, float, float]


class DEMService:
    """Elevation sampling from a GeoTIFF raster.

    The raster is loaded on first access and cached for fast subsequent queries.

    Example:
        dem = DEMService(dem_path=Path("data/terrain_dem.tif"))
        samples = dem.height_profile(lon1=8.55, lat1=47.46, lon2=9.0, lat2=46.2)
    """

    def __init__(self, dem_path: Optional[Path] = None, sample_spacing_m: float = DEMConfig.SAMPLE_SPACING_M) -> None:
        """Initialize the service without loading the raster.

        Args:
            dem_path: Path to DEM GeoTIFF (uses DEMConfig.DEM_PATH by default)
            sample_spacing_m: Distance between profile samples in meters
        """
        self._dem_path = dem_path or DEMConfig.DEM_PATH
        self._sample_spacing_m = sample_spacing_m
        self._load_lock = threading.Lock()
        self._dem_crs: Optional[str] = None
        self._dem_array: Optional[np.ndarray] = None
        self._dem_transform = None
        self._dem_nodata = None
        self._dem_bounds = None

    @property
    def is_loaded(self) -> bool:
        """Check if DEM data has been fully loaded into memory."""
        return self._dem_transform is not None

    def _ensure_loaded(self) -> None:
        """Load DEM into memory on first access (thread-safe)."""
        # Fast path: already loaded
        if self.is_loaded:
            return

        with self._load_lock:
            # Double-check after acquiring lock
            if self.is_loaded:
                return

            dem_path = self._dem_path
            if not dem_path.exists():
                raise FileNotFoundError(f"DEM file not found at {dem_path}.")

            logger.info(f"Loading DEM from {dem_path}...")
            start_time = time.time()

            with rasterio.open(dem_path) as dem:
                self._dem_crs = dem.crs.to_string() if dem.crs else "EPSG:4326"
                self._dem_array = dem.read(1)
                self._dem_nodata = dem.nodata
                self._dem_bounds = dem.bounds
                # Set _dem_transform LAST - this is what is_loaded checks
                self._dem_transform = dem.transform

            elapsed = time.time() - start_time
            logger.info(f"DEM loaded in {elapsed:.2f}s (shape: {self._dem_array.shape}, CRS: {self._dem_crs})")

    def get_elevation(self, lon: float, lat: float) -> float | None:
        """Get elevation at a single point using direct NumPy array lookup.

        Args:
            lon: Longitude in decimal degrees (WGS84)
            lat: Latitude in decimal degrees (WGS84)

        Returns:
            Elevation in meters, or None if outside coverage or invalid.
        """
        self._ensure_loaded()

        if self._dem_crs != "EPSG:4326":
            proj_coords = transform("EPSG:4326", self._dem_crs, [lon], [lat])
            x, y = proj_coords[0][0], proj_coords[1][0]
        else:
            x, y = lon, lat

        col, row = ~self._dem_transform * (x, y)
        col, row = int(np.floor(col)), int(np.floor(row))

        if row < 0 or row >= self._dem_array.shape[0] or col < 0 or col >= self._dem_array.shape[1]:
            logger.debug(f"Coordinates outside DEM bounds: lon={lon}, lat={lat} (row={row}, col={col})")
            return None

        elev = self._dem_array[row, col]

        if self._dem_nodata is not None and elev == self._dem_nodata:
            logger.debug(f"No-data value at coordinates: lon={lon}, lat={lat}")
            return None
        if np.isnan(elev):
            logger.debug(f"NaN elevation at coordinates: lon={lon}, lat={lat}")
            return None

        return float(elev)

    def height_profile(self, lon1: float, lat1: float, lon2: float, lat2: float) -> list[HeightSample]:
        """Sample terrain heights along the great circle between two points.

        Both endpoints are always included. Samples are spaced sample_spacing_m
        apart, the spacing grows when a leg would exceed MAX_SAMPLES_PER_LEG.

        Args:
            lon1: Longitude of start point (decimal degrees)
            lat1: Latitude of start point (decimal degrees)
            lon2: Longitude of end point (decimal degrees)
            lat2: Latitude of end point (decimal degrees)

        Returns:
            List of (lon, lat, elevation_m), or an empty list if any sample
            has no terrain data.
        """
        distance_m = GeoCalculator.haversine_distance_m(lat1=lat1, lon1=lon1, lat2=lat2, lon2=lon2)
        num_steps = int(np.ceil(distance_m / self._sample_spacing_m))
        num_steps = min(max(num_steps, 1), DEMConfig.MAX_SAMPLES_PER_LEG - 1)
        step_m = distance_m / num_steps
        bearing = GeoCalculator.initial_bearing_deg(lon1=lon1, lat1=lat1, lon2=lon2, lat2=lat2)

        coords = [(lon1, lat1)]
        for i in range(1, num_steps):
            coords.append(GeoCalculator.destination(lon=lon1, lat=lat1, bearing_deg=bearing, distance_m=i * step_m))
        coords.append((lon2, lat2))

        samples: list[HeightSample] = []
        for lon, lat in coords:
            elev = self.get_elevation(lon=lon, lat=lat)
            if elev is None:
                logger.warning(f"Incomplete terrain data between ({lon1}, {lat1}) and ({lon2}, {lat2})")
                return []
            samples.append((lon, lat, elev))
        return samples

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """Return (west, south, east, north) bounds in WGS84."""
        self._ensure_loaded()
        b = self._dem_bounds

        if self._dem_crs != "EPSG:4326":
            corners_x = [b.left, b.right, b.left, b.right]
            corners_y = [b.bottom, b.bottom, b.top, b.top]
            lons, lats = transform(self._dem_crs, "EPSG:4326", corners_x, corners_y)
            return min(lons), min(lats), max(lons), max(lats)

        return b.left, b.bottom, b.right, b.top
