"""Centralized configuration for station_selector package.

This module provides configuration constants and environment variable handling
for the station_selector package, particularly for the input data directory and
the fixed list of major cities used by the urban-area filter.
"""

import os
from pathlib import Path
from typing import Tuple


def get_data_dir() -> Path:
    """Get the input data directory from environment variable or default.

    The directory can be configured via the STATION_SELECTOR_DATA_DIR environment
    variable. If not set, defaults to ~/DATA/station_selector.

    Returns:
        Path to the data directory (not guaranteed to exist)

    Example:
        >>> # Using default
        >>> dir_path = get_data_dir()
        >>> # Using environment variable
        >>> os.environ['STATION_SELECTOR_DATA_DIR'] = '/custom/path'
        >>> dir_path = get_data_dir()
    """
    env_dir = os.environ.get("STATION_SELECTOR_DATA_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / "DATA" / "station_selector"


# Default input file names, relative to the data directory
STATIONS_FILENAME = "stations.pkl"
SOLAR_FARMS_FILENAME = "solar_farms.pkl"
URBAN_AREAS_FILENAME = "urban_areas/SUA_2021_AUST_GDA2020.shp"

# Name field of the ABS Significant Urban Area shapefile
DEFAULT_AREA_FIELD = "SUA_NAME21"

# Significant Urban Areas treated as major cities
MAJOR_CITIES: Tuple[str, ...] = (
    "Sydney",
    "Melbourne",
    "Brisbane",
    "Perth",
    "Adelaide",
    "Canberra - Queanbeyan",
)

# IUGG mean Earth radius; no ellipsoidal correction is applied
EARTH_MEAN_RADIUS_KM = 6371.0088

WGS84 = "EPSG:4326"

# Roughly the centre of the Australian continent
DEFAULT_MAP_CENTER: Tuple[float, float] = (-25.6, 134.4)
DEFAULT_MAP_ZOOM = 4
