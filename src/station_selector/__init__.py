from __future__ import annotations

__version__ = "0.1.0"

from station_selector.combine import (
    category_counts,
    classify_station,
    classify_stations,
    combine_datasets,
)
from station_selector.config import MAJOR_CITIES, get_data_dir
from station_selector.loaders import (
    load_solar_farms,
    load_urban_areas,
    load_weather_stations,
    read_table,
)
from station_selector.logging_utils import configure_logging
from station_selector.mapping import build_station_map, save_map
from station_selector.models import (
    CATEGORY_STYLES,
    SOLAR_FARM_STATION_ID,
    EmptyStationTableError,
    MissingColumnsError,
    SolarFarm,
    StationCategory,
    StationDataError,
    UnsupportedFormatError,
    WeatherStation,
)
from station_selector.nearest import find_closest_stations, haversine_km
from station_selector.pipeline import StationSelection, load_and_select, select_stations
from station_selector.urban import (
    assign_urban_areas,
    filter_major_cities,
    select_urban_stations,
)

__all__ = [
    "load_weather_stations",
    "load_solar_farms",
    "load_urban_areas",
    "read_table",
    "assign_urban_areas",
    "filter_major_cities",
    "select_urban_stations",
    "haversine_km",
    "find_closest_stations",
    "classify_station",
    "classify_stations",
    "combine_datasets",
    "category_counts",
    "build_station_map",
    "save_map",
    "select_stations",
    "load_and_select",
    "StationSelection",
    "configure_logging",
    "get_data_dir",
    "MAJOR_CITIES",
    "CATEGORY_STYLES",
    "SOLAR_FARM_STATION_ID",
    "StationCategory",
    "WeatherStation",
    "SolarFarm",
    "StationDataError",
    "MissingColumnsError",
    "EmptyStationTableError",
    "UnsupportedFormatError",
]
