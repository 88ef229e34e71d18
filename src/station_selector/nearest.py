"""
Nearest weather station for each solar farm.

Distances are great-circle distances on a sphere of Earth's mean radius
(haversine formula). No ellipsoidal correction is applied; the error is
well under 1% and irrelevant for picking the closest station.
"""

import logging
from typing import List

import numpy as np
import pandas as pd

from station_selector.config import EARTH_MEAN_RADIUS_KM
from station_selector.loaders import require_columns
from station_selector.models import (
    SOLAR_FARM_COLUMNS,
    STATION_COLUMNS,
    EmptyStationTableError,
)

logger = logging.getLogger(__name__)

CLOSEST_COLUMNS = ["closest_station_id", "closest_station_name", "distance_km"]


def haversine_km(lat1, lon1, lat2, lon2, radius_km: float = EARTH_MEAN_RADIUS_KM):
    """
    Great-circle distance between points given in decimal degrees.

    Accepts scalars or numpy arrays; arrays broadcast against each other.

    Args:
        lat1, lon1: First point(s)
        lat2, lon2: Second point(s)
        radius_km: Sphere radius in kilometres

    Returns:
        Distance(s) in kilometres

    Example:
        >>> round(float(haversine_km(0.0, 0.0, 0.0, 1.0)), 1)
        111.2
    """
    lat1, lon1, lat2, lon2 = map(np.radians, (lat1, lon1, lat2, lon2))

    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = np.sin(dlat / 2.0) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2.0) ** 2
    # Rounding can push a marginally above 1 for antipodal points
    return 2.0 * radius_km * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))


def distance_matrix_km(solar_farms: pd.DataFrame, stations: pd.DataFrame) -> np.ndarray:
    """Distances with shape ``(len(solar_farms), len(stations))``."""
    farm_lat = solar_farms["latitude"].to_numpy(dtype=float)[:, np.newaxis]
    farm_lon = solar_farms["longitude"].to_numpy(dtype=float)[:, np.newaxis]
    station_lat = stations["latitude"].to_numpy(dtype=float)[np.newaxis, :]
    station_lon = stations["longitude"].to_numpy(dtype=float)[np.newaxis, :]
    return haversine_km(farm_lat, farm_lon, station_lat, station_lon)


def _with_numeric_coordinates(frame: pd.DataFrame) -> pd.DataFrame:
    frame = frame.copy()
    frame["latitude"] = pd.to_numeric(frame["latitude"], errors="coerce")
    frame["longitude"] = pd.to_numeric(frame["longitude"], errors="coerce")
    return frame


def find_closest_stations(solar_farms: pd.DataFrame, stations: pd.DataFrame) -> pd.DataFrame:
    """
    Find the closest weather station to every solar farm.

    When several stations are equally close, the one appearing first in
    ``stations`` (row order) is chosen.

    Stations with missing or non-numeric coordinates are ignored. Solar farms
    with missing coordinates get no closest station and a NaN distance.

    Args:
        solar_farms: Solar farm table (``name``, ``latitude``, ``longitude``)
        stations: Weather station table (``station_id``, ``name``, ``latitude``, ``longitude``)

    Returns:
        Copy of ``solar_farms`` (index reset) with ``closest_station_id``,
        ``closest_station_name`` and ``distance_km`` columns

    Raises:
        EmptyStationTableError: If no station has valid coordinates
    """
    require_columns(solar_farms, SOLAR_FARM_COLUMNS, "Solar farm")
    require_columns(stations, STATION_COLUMNS, "Weather station")

    stations = _with_numeric_coordinates(stations)
    located = stations["latitude"].notna() & stations["longitude"].notna()
    if not located.any():
        raise EmptyStationTableError(
            "Cannot find the closest station: no weather station has valid coordinates"
        )
    if not located.all():
        logger.warning(f"Ignoring {int((~located).sum())} stations without valid coordinates")
        stations = stations[located].reset_index(drop=True)

    result = solar_farms.drop(columns=CLOSEST_COLUMNS, errors="ignore").reset_index(drop=True)
    if result.empty:
        for col in CLOSEST_COLUMNS:
            result[col] = pd.Series(dtype=float if col == "distance_km" else object)
        return result

    farms = _with_numeric_coordinates(result)
    farm_located = (farms["latitude"].notna() & farms["longitude"].notna()).to_numpy()
    if not farm_located.all():
        logger.warning(f"{int((~farm_located).sum())} solar farms have no valid coordinates")

    distances = distance_matrix_km(farms, stations)
    # argmin returns the first index of the minimum; rows of unlocated farms are all NaN
    nearest = np.argmin(np.where(farm_located[:, np.newaxis], distances, 0.0), axis=1)

    ids = stations["station_id"].to_numpy()[nearest].astype(object)
    names = stations["name"].to_numpy()[nearest].astype(object)
    ids[~farm_located] = None
    names[~farm_located] = None
    result["closest_station_id"] = ids
    result["closest_station_name"] = names
    result["distance_km"] = np.where(farm_located, distances[np.arange(len(result)), nearest], np.nan)

    logger.info(
        f"Matched {len(result)} solar farms to {result['closest_station_id'].nunique()} stations "
        f"(median distance {result['distance_km'].median():.1f} km)"
    )
    return result


def closest_station_ids(solar_farms_with_closest: pd.DataFrame) -> List[str]:
    """Unique closest station ids in first-seen order, skipping farms without a match."""
    require_columns(solar_farms_with_closest, ["closest_station_id"], "Solar farm")
    ids = solar_farms_with_closest["closest_station_id"].dropna()
    return list(dict.fromkeys(ids.astype(str)))
