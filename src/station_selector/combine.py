"""
Combine urban stations, solar-adjacent stations, the regional network and the
solar farms into one table ready for mapping.

Each output row carries a category label plus the marker colour, opacity and
radius for that category.

Two ways of resolving a station that qualifies for more than one category are
supported:

- ``"precedence"``: every station is classified exactly once, using the fixed
  order urban > close to solar farm > regional.
- ``"union"``: the category tables are concatenated (urban, solar, regional,
  solar farms) and identical rows are dropped. A station that is both urban and
  closest to a solar farm then appears twice, once per label, while a station
  closest to several solar farms appears once.
"""

import logging
from typing import Iterable, List, Literal

import pandas as pd

from station_selector.loaders import require_columns
from station_selector.models import (
    CATEGORY_ORDER,
    CATEGORY_PRECEDENCE,
    CATEGORY_STYLES,
    CLASSIFIED_COLUMNS,
    SOLAR_FARM_COLUMNS,
    SOLAR_FARM_STATION_ID,
    STATION_COLUMNS,
    StationCategory,
)

logger = logging.getLogger(__name__)

OverlapStrategy = Literal["precedence", "union"]


def classify_station(
    station_id: str,
    urban_ids: Iterable[str],
    solar_ids: Iterable[str],
) -> StationCategory:
    """
    Assign a single category to a weather station.

    Urban membership wins over solar-farm adjacency; anything else is regional.

    Example:
        >>> classify_station("66062", urban_ids={"66062"}, solar_ids={"66062"})
        <StationCategory.URBAN: 'Urban Weather Station'>
    """
    membership = {
        StationCategory.URBAN: station_id in urban_ids,
        StationCategory.SOLAR: station_id in solar_ids,
        StationCategory.REGIONAL: True,
    }
    for category in CATEGORY_PRECEDENCE:
        if membership[category]:
            return category
    raise AssertionError("REGIONAL always matches")  # pragma: no cover


def classify_stations(
    stations: pd.DataFrame,
    urban_ids: Iterable[str],
    solar_ids: Iterable[str],
) -> pd.DataFrame:
    """Copy of ``stations`` with a ``category`` column from :func:`classify_station`."""
    require_columns(stations, STATION_COLUMNS, "Weather station")
    urban = {str(i) for i in urban_ids}
    solar = {str(i) for i in solar_ids}

    result = stations.reset_index(drop=True)
    result["category"] = [
        classify_station(str(station_id), urban, solar) for station_id in result["station_id"]
    ]
    return result


def style_frame(frame: pd.DataFrame, category: StationCategory) -> pd.DataFrame:
    """Select the map columns of ``frame`` and attach the style of ``category``."""
    style = CATEGORY_STYLES[category]
    styled = frame[STATION_COLUMNS].reset_index(drop=True)
    styled["label"] = category.value
    styled["color"] = style.color
    styled["opacity"] = style.opacity
    styled["radius"] = style.radius
    return styled[CLASSIFIED_COLUMNS]


def _solar_farm_rows(solar_farms: pd.DataFrame) -> pd.DataFrame:
    require_columns(solar_farms, SOLAR_FARM_COLUMNS, "Solar farm")
    farms = solar_farms[SOLAR_FARM_COLUMNS].assign(station_id=SOLAR_FARM_STATION_ID)
    return style_frame(farms, StationCategory.SOLAR_FARM)


def _combine_by_precedence(
    stations: pd.DataFrame,
    urban_ids: set,
    solar_ids: set,
    solar_farms: pd.DataFrame,
) -> pd.DataFrame:
    classified = classify_stations(stations, urban_ids, solar_ids)
    parts: List[pd.DataFrame] = [
        style_frame(classified[classified["category"] == category], category)
        for category in CATEGORY_PRECEDENCE
    ]
    parts.append(_solar_farm_rows(solar_farms))
    return pd.concat(parts, ignore_index=True)


def _combine_by_union(
    stations: pd.DataFrame,
    urban_ids: set,
    solar_ids: set,
    solar_farms: pd.DataFrame,
) -> pd.DataFrame:
    ids = stations["station_id"].astype(str)
    in_urban = ids.isin(urban_ids)
    in_solar = ids.isin(solar_ids)

    parts = [
        style_frame(stations[in_urban], StationCategory.URBAN),
        style_frame(stations[in_solar], StationCategory.SOLAR),
        style_frame(stations[~(in_urban | in_solar)], StationCategory.REGIONAL),
        _solar_farm_rows(solar_farms),
    ]
    combined = pd.concat(parts, ignore_index=True)
    return combined.drop_duplicates().reset_index(drop=True)


def combine_datasets(
    stations: pd.DataFrame,
    urban_ids: Iterable[str],
    solar_ids: Iterable[str],
    solar_farms: pd.DataFrame,
    overlap_strategy: OverlapStrategy = "precedence",
) -> pd.DataFrame:
    """
    Build the map dataset from the station network and the selections.

    Args:
        stations: Full weather station table
        urban_ids: Ids of stations inside a major city's urban area
        solar_ids: Ids of stations closest to at least one solar farm
        solar_farms: Solar farm table (``name``, ``latitude``, ``longitude``)
        overlap_strategy: How to handle stations in both ``urban_ids`` and ``solar_ids``:
                         - "precedence": one row per station, urban label wins (default)
                         - "union": one row per (station, label); such stations appear twice

    Returns:
        DataFrame with columns ``station_id``, ``name``, ``latitude``, ``longitude``,
        ``label``, ``color``, ``opacity``, ``radius``. Rows are ordered urban,
        close to solar farm, regional, solar farm. Solar farm rows use
        ``SOLAR_FARM_STATION_ID`` as their ``station_id``.

    Raises:
        ValueError: If ``overlap_strategy`` is not recognised

    Example:
        >>> dataset = combine_datasets(stations, urban["station_id"], ["66062"], farms)
        >>> category_counts(dataset)
    """
    require_columns(stations, STATION_COLUMNS, "Weather station")
    urban = {str(i) for i in urban_ids}
    solar = {str(i) for i in solar_ids}

    if overlap_strategy == "precedence":
        dataset = _combine_by_precedence(stations, urban, solar, solar_farms)
    elif overlap_strategy == "union":
        dataset = _combine_by_union(stations, urban, solar, solar_farms)
    else:
        raise ValueError(
            f"Invalid overlap_strategy: {overlap_strategy}. Must be 'precedence' or 'union'"
        )

    both = urban & solar & set(stations["station_id"].astype(str))
    if both:
        logger.debug(
            "%d stations are both urban and closest to a solar farm (%s strategy)",
            len(both),
            overlap_strategy,
        )
    logger.info(f"Combined map dataset has {len(dataset)} rows")
    return dataset


def category_counts(dataset: pd.DataFrame) -> pd.Series:
    """Number of rows per category label, in legend order, including empty categories."""
    require_columns(dataset, ["label"], "Map dataset")
    labels = [category.value for category in CATEGORY_ORDER]
    return dataset["label"].value_counts().reindex(labels, fill_value=0).astype(int)
