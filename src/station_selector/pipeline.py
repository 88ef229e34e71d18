"""
End-to-end station selection: urban filter, nearest-station search and
dataset combination in one call.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

import geopandas as gpd
import pandas as pd

from station_selector.combine import OverlapStrategy, category_counts, combine_datasets
from station_selector.config import (
    DEFAULT_AREA_FIELD,
    MAJOR_CITIES,
    SOLAR_FARMS_FILENAME,
    STATIONS_FILENAME,
    URBAN_AREAS_FILENAME,
    get_data_dir,
)
from station_selector.loaders import (
    TableInput,
    load_solar_farms,
    load_urban_areas,
    load_weather_stations,
    to_records,
)
from station_selector.models import SolarFarm
from station_selector.nearest import closest_station_ids, find_closest_stations
from station_selector.urban import select_urban_stations

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StationSelection:
    """Intermediate and final tables of a station selection run."""

    stations: pd.DataFrame
    urban_stations: pd.DataFrame
    solar_farms: pd.DataFrame
    dataset: pd.DataFrame

    @property
    def urban_ids(self) -> List[str]:
        return self.urban_stations["station_id"].astype(str).tolist()

    @property
    def solar_ids(self) -> List[str]:
        return closest_station_ids(self.solar_farms)

    def solar_farm_records(self) -> List[SolarFarm]:
        """Solar farms with their closest station, as validated models."""
        return to_records(self.solar_farms, SolarFarm)

    def summary(self) -> pd.Series:
        """Map dataset row counts per category."""
        return category_counts(self.dataset)


def select_stations(
    stations: TableInput,
    solar_farms: TableInput,
    urban_areas: gpd.GeoDataFrame,
    cities: Iterable[str] = MAJOR_CITIES,
    overlap_strategy: OverlapStrategy = "precedence",
) -> StationSelection:
    """
    Run the full selection: urban stations, closest stations, map dataset.

    Args:
        stations: Weather station table, or a path to one
        solar_farms: Solar farm table, or a path to one
        urban_areas: Urban area polygons with ``area_name`` (see :func:`load_urban_areas`)
        cities: Urban area names treated as major cities
        overlap_strategy: See :func:`station_selector.combine.combine_datasets`

    Returns:
        StationSelection holding the normalised stations, the urban stations,
        the solar farms with their closest station, and the map dataset

    Raises:
        EmptyStationTableError: If there are no weather stations
    """
    stations = load_weather_stations(stations)
    solar_farms = load_solar_farms(solar_farms)

    urban_stations = select_urban_stations(stations, urban_areas, cities)
    farms_with_closest = find_closest_stations(solar_farms, stations)
    dataset = combine_datasets(
        stations,
        urban_stations["station_id"],
        closest_station_ids(farms_with_closest),
        farms_with_closest,
        overlap_strategy=overlap_strategy,
    )

    selection = StationSelection(
        stations=stations,
        urban_stations=urban_stations,
        solar_farms=farms_with_closest,
        dataset=dataset,
    )
    for label, count in selection.summary().items():
        logger.info(f"  {label}: {count}")
    return selection


def load_and_select(
    data_dir: Optional[Union[str, Path]] = None,
    *,
    stations_path: Optional[Union[str, Path]] = None,
    solar_farms_path: Optional[Union[str, Path]] = None,
    urban_areas_path: Optional[Union[str, Path]] = None,
    area_field: str = DEFAULT_AREA_FIELD,
    cities: Iterable[str] = MAJOR_CITIES,
    overlap_strategy: OverlapStrategy = "precedence",
) -> StationSelection:
    """
    Load the three inputs from disk and run :func:`select_stations`.

    Paths default to the standard file names inside ``data_dir``, which itself
    defaults to :func:`station_selector.config.get_data_dir`.

    Example:
        >>> selection = load_and_select("~/DATA/station_selector")
        >>> selection.summary()
    """
    base = Path(data_dir).expanduser() if data_dir is not None else get_data_dir()
    stations_path = Path(stations_path) if stations_path else base / STATIONS_FILENAME
    solar_farms_path = Path(solar_farms_path) if solar_farms_path else base / SOLAR_FARMS_FILENAME
    urban_areas_path = Path(urban_areas_path) if urban_areas_path else base / URBAN_AREAS_FILENAME

    logger.info(f"Loading inputs from {base}")
    return select_stations(
        stations_path,
        solar_farms_path,
        load_urban_areas(urban_areas_path, area_field=area_field),
        cities=cities,
        overlap_strategy=overlap_strategy,
    )
