"""
Urban-area membership for weather stations.

Each station is tested against the urban area polygons with a point-in-polygon
spatial join, then restricted to a fixed allow-list of major city names.

Longitude/latitude are treated as planar coordinates for the containment test.
This is inaccurate for very large polygons or near the poles, which does not
matter for city-scale boundaries, and is not corrected here.
"""

import logging
from typing import Iterable

import geopandas as gpd
import pandas as pd

from station_selector.config import MAJOR_CITIES, WGS84
from station_selector.loaders import require_columns, to_points
from station_selector.models import STATION_COLUMNS

logger = logging.getLogger(__name__)


def assign_urban_areas(stations: pd.DataFrame, urban_areas: gpd.GeoDataFrame) -> pd.DataFrame:
    """
    Tag each station with the name of the urban area polygon containing it.

    Args:
        stations: Weather station table (``station_id``, ``name``, ``latitude``, ``longitude``)
        urban_areas: Polygons with ``area_name`` and ``geometry`` columns

    Returns:
        Copy of ``stations`` (same rows, same order, index reset) with an added
        ``urban_area`` column. Stations that fall in no polygon get ``None``.
        Where polygons overlap, the first matching polygon wins.
    """
    require_columns(stations, STATION_COLUMNS, "Weather station")
    require_columns(urban_areas, ["area_name", "geometry"], "Urban area")

    result = stations.drop(columns=["urban_area"], errors="ignore").reset_index(drop=True)
    if result.empty:
        result["urban_area"] = pd.Series(dtype=object)
        return result

    polygons = urban_areas[["area_name", "geometry"]].reset_index(drop=True)
    if polygons.crs is not None and polygons.crs != WGS84:
        polygons = polygons.to_crs(WGS84)

    points = to_points(result[["station_id", "latitude", "longitude"]])
    joined = gpd.sjoin(points, polygons, how="left", predicate="within")
    # Spatial index query order is arbitrary; restore polygon row order per station
    joined = joined.assign(_station=joined.index).sort_values(["_station", "index_right"], kind="stable")

    overlapping = joined.index.duplicated(keep="first")
    if overlapping.any():
        logger.debug(
            "%d stations matched more than one urban area; keeping the first match",
            len(joined.index[overlapping].unique()),
        )
        joined = joined[~overlapping]

    area = joined["area_name"].reindex(result.index)
    result["urban_area"] = area.astype(object).where(area.notna(), None)

    logger.info(
        f"{int(result['urban_area'].notna().sum())} of {len(result)} stations fall inside an urban area"
    )
    return result


def filter_major_cities(
    stations_with_areas: pd.DataFrame,
    cities: Iterable[str] = MAJOR_CITIES,
) -> pd.DataFrame:
    """
    Keep only stations whose ``urban_area`` is one of ``cities``.

    Stations with no urban area never pass. An empty ``cities`` list returns an
    empty table.
    """
    require_columns(stations_with_areas, ["urban_area"], "Station")
    allowed = set(cities)
    mask = stations_with_areas["urban_area"].isin(allowed)
    return stations_with_areas[mask].reset_index(drop=True)


def select_urban_stations(
    stations: pd.DataFrame,
    urban_areas: gpd.GeoDataFrame,
    cities: Iterable[str] = MAJOR_CITIES,
) -> pd.DataFrame:
    """
    Stations inside the urban area of any of ``cities``.

    Example:
        >>> urban = select_urban_stations(stations, urban_areas, cities=["Sydney", "Perth"])
        >>> urban.groupby("urban_area").size()
    """
    cities = tuple(cities)
    with_areas = assign_urban_areas(stations, urban_areas)
    urban = filter_major_cities(with_areas, cities)

    per_city = urban["urban_area"].value_counts()
    for city in cities:
        logger.debug("%s: %d stations", city, int(per_city.get(city, 0)))
    missing = [city for city in cities if city not in set(urban_areas["area_name"])]
    if missing:
        logger.warning(f"Cities not present in urban area polygons: {missing}")

    logger.info(f"Selected {len(urban)} stations in {len(cities)} major cities")
    return urban
