"""
Loaders for the three reference inputs: weather stations, solar farms and
urban area polygons.

Station and solar farm tables are pre-built serialized pandas tables (pickle
or CSV). Urban areas are read with geopandas from any vector format it
supports, typically the ABS Significant Urban Area shapefile.
"""

import logging
from pathlib import Path
from typing import List, Type, TypeVar, Union

import geopandas as gpd
import pandas as pd
from pydantic import BaseModel, ValidationError

from station_selector.config import DEFAULT_AREA_FIELD, WGS84
from station_selector.models import (
    SOLAR_FARM_COLUMNS,
    STATION_COLUMNS,
    AustralianCoordinates,
    MissingColumnsError,
    UnsupportedFormatError,
)

logger = logging.getLogger(__name__)

TableInput = Union[str, Path, pd.DataFrame]
RecordT = TypeVar("RecordT", bound=BaseModel)

_PICKLE_SUFFIXES = {".pkl", ".pickle"}
_CSV_SUFFIXES = {".csv"}


def read_table(path: Union[str, Path]) -> pd.DataFrame:
    """
    Read a serialized table from disk.

    Args:
        path: Path to a ``.pkl``/``.pickle`` or ``.csv`` file

    Returns:
        The table as a DataFrame

    Raises:
        FileNotFoundError: If the file does not exist
        UnsupportedFormatError: If the suffix is not recognised
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input table not found: {path}")

    suffix = path.suffix.lower()
    if suffix in _PICKLE_SUFFIXES:
        df = pd.read_pickle(path)
    elif suffix in _CSV_SUFFIXES:
        df = pd.read_csv(path)
    else:
        raise UnsupportedFormatError(
            f"Unsupported table format '{suffix}' for {path}. "
            f"Expected one of: {', '.join(sorted(_PICKLE_SUFFIXES | _CSV_SUFFIXES))}"
        )

    logger.debug("Read %d rows from %s", len(df), path)
    return df


def _as_frame(source: TableInput) -> pd.DataFrame:
    if isinstance(source, pd.DataFrame):
        return source.copy()
    return read_table(source)


def require_columns(df: pd.DataFrame, required: List[str], table_name: str) -> None:
    """Raise MissingColumnsError if any of ``required`` is absent from ``df``."""
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise MissingColumnsError(f"{table_name} table is missing required columns: {missing}")


def _coerce_coordinates(df: pd.DataFrame, table_name: str) -> pd.DataFrame:
    """Convert latitude/longitude to floats and drop rows that fail conversion."""
    df["latitude"] = pd.to_numeric(df["latitude"], errors="coerce")
    df["longitude"] = pd.to_numeric(df["longitude"], errors="coerce")

    invalid = df["latitude"].isna() | df["longitude"].isna()
    if invalid.any():
        logger.warning(
            f"Dropping {int(invalid.sum())} {table_name} rows with non-numeric coordinates"
        )
        df = df[~invalid]
    return df


def _report_outside_australia(df: pd.DataFrame, table_name: str) -> None:
    outside = 0
    for lat, lon in zip(df["latitude"], df["longitude"]):
        try:
            AustralianCoordinates(latitude=lat, longitude=lon)
        except ValidationError:
            outside += 1
    if outside:
        logger.debug("%d %s rows lie outside mainland Australia and Tasmania", outside, table_name)


def load_weather_stations(source: TableInput) -> pd.DataFrame:
    """
    Load and normalise the weather station table.

    Args:
        source: Path to a serialized table, or an existing DataFrame

    Returns:
        DataFrame with at least ``station_id`` (str), ``name``, ``latitude`` and
        ``longitude`` (float), one row per station, index reset

    Raises:
        MissingColumnsError: If a required column is absent

    Example:
        >>> stations = load_weather_stations("~/DATA/station_selector/stations.pkl")
        >>> stations[["station_id", "name"]].head()
    """
    df = _as_frame(source)
    require_columns(df, STATION_COLUMNS, "Weather station")

    df["station_id"] = df["station_id"].astype(str).str.strip()
    df = _coerce_coordinates(df, "weather station")

    duplicated = df["station_id"].duplicated(keep="first")
    if duplicated.any():
        logger.warning(
            f"Dropping {int(duplicated.sum())} duplicate station_id rows (first occurrence kept)"
        )
        df = df[~duplicated]

    _report_outside_australia(df, "weather station")
    logger.info(f"Loaded {len(df)} weather stations")
    return df.reset_index(drop=True)


def load_solar_farms(source: TableInput) -> pd.DataFrame:
    """
    Load and normalise the solar farm table.

    Args:
        source: Path to a serialized table, or an existing DataFrame

    Returns:
        DataFrame with at least ``name``, ``latitude`` and ``longitude``, index reset
    """
    df = _as_frame(source)
    require_columns(df, SOLAR_FARM_COLUMNS, "Solar farm")
    df = _coerce_coordinates(df, "solar farm")
    _report_outside_australia(df, "solar farm")
    logger.info(f"Loaded {len(df)} solar farms")
    return df.reset_index(drop=True)


def load_urban_areas(
    source: Union[str, Path, gpd.GeoDataFrame],
    area_field: str = DEFAULT_AREA_FIELD,
) -> gpd.GeoDataFrame:
    """
    Load urban area polygons and normalise them to ``area_name`` + ``geometry``.

    Args:
        source: Path to a vector file readable by geopandas (shapefile, GeoPackage,
            GeoJSON, ...), or an existing GeoDataFrame
        area_field: Column holding the area name (``SUA_NAME21`` for the ABS
            Significant Urban Area 2021 release)

    Returns:
        GeoDataFrame with columns ``area_name`` and ``geometry`` in EPSG:4326.
        Null and empty geometries are removed.

    Raises:
        FileNotFoundError: If ``source`` is a path that does not exist
        MissingColumnsError: If ``area_field`` is absent
    """
    if isinstance(source, gpd.GeoDataFrame):
        gdf = source.copy()
    else:
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Urban area file not found: {path}")
        gdf = gpd.read_file(path)

    require_columns(gdf, [area_field], "Urban area")
    gdf = gdf.rename(columns={area_field: "area_name"})[["area_name", "geometry"]]

    empty = gdf.geometry.isna() | gdf.geometry.is_empty
    if empty.any():
        # The SUA release includes non-spatial placeholder rows such as "Migratory - Offshore - Shipping"
        logger.debug("Dropping %d urban areas without geometry", int(empty.sum()))
        gdf = gdf[~empty]

    if gdf.crs is None:
        gdf = gdf.set_crs(WGS84)
    elif gdf.crs != WGS84:
        gdf = gdf.to_crs(WGS84)

    logger.info(f"Loaded {len(gdf)} urban area polygons")
    return gdf.reset_index(drop=True)


def to_points(df: pd.DataFrame) -> gpd.GeoDataFrame:
    """Convert a table with latitude/longitude columns to a point GeoDataFrame."""
    return gpd.GeoDataFrame(
        df,
        geometry=gpd.points_from_xy(df["longitude"], df["latitude"]),
        crs=WGS84,
    )


def to_records(df: pd.DataFrame, model: Type[RecordT]) -> List[RecordT]:
    """
    Validate each row of ``df`` into a pydantic model.

    Example:
        >>> from station_selector.models import WeatherStation
        >>> stations = to_records(load_weather_stations(path), WeatherStation)
    """
    fields = [name for name in model.model_fields if name in df.columns]
    records = df[fields].astype(object).where(df[fields].notna(), None).to_dict(orient="records")
    return [model(**record) for record in records]
