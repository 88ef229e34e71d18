"""
Interactive folium map of the classified stations.

Draws urban area polygons as an overlay, one layer of circle markers per
category, a layer control and a fixed HTML legend.
"""

import logging
from html import escape
from pathlib import Path
from typing import Dict, Optional, Sequence, Union

import folium
import geopandas as gpd
import pandas as pd

from station_selector.config import DEFAULT_MAP_CENTER, DEFAULT_MAP_ZOOM
from station_selector.loaders import require_columns
from station_selector.models import (
    CATEGORY_ORDER,
    CATEGORY_STYLES,
    CLASSIFIED_COLUMNS,
    SOLAR_FARM_STATION_ID,
    MarkerStyle,
    StationCategory,
)

logger = logging.getLogger(__name__)

URBAN_AREA_STYLE = {
    "fillColor": "#3186cc",
    "color": "#3186cc",
    "weight": 1,
    "fillOpacity": 0.15,
}


def _marker_popup(row: pd.Series) -> folium.Popup:
    lines = [f"<b>{escape(str(row['name']))}</b>", escape(row["label"])]
    if row["station_id"] != SOLAR_FARM_STATION_ID:
        lines.insert(1, f"Station: {escape(str(row['station_id']))}")
    return folium.Popup("<br/>".join(lines), max_width=250)


def add_urban_areas(fmap: folium.Map, urban_areas: gpd.GeoDataFrame) -> None:
    """Add urban area polygons as a single GeoJson layer with name tooltips."""
    require_columns(urban_areas, ["area_name", "geometry"], "Urban area")
    if urban_areas.empty:
        return
    folium.GeoJson(
        urban_areas[["area_name", "geometry"]],
        name="Urban areas",
        style_function=lambda _feature: URBAN_AREA_STYLE,
        tooltip=folium.GeoJsonTooltip(fields=["area_name"], aliases=["Urban area"]),
    ).add_to(fmap)


def add_legend(
    fmap: folium.Map,
    styles: Optional[Dict[StationCategory, MarkerStyle]] = None,
    title: str = "Weather stations",
) -> None:
    """Attach a fixed-position HTML legend listing each category and its colour."""
    styles = styles or CATEGORY_STYLES
    items = []
    for category in CATEGORY_ORDER:
        style = styles.get(category)
        if style is None:
            continue
        items.append(
            '<div style="margin: 2px 0;">'
            f'<span style="display: inline-block; width: 10px; height: 10px; border-radius: 50%; '
            f'background: {style.color}; opacity: {style.opacity}; margin-right: 6px;"></span>'
            f"{escape(category.value)}</div>"
        )

    legend_html = (
        '<div style="position: fixed; bottom: 30px; left: 30px; z-index: 9999; '
        "background: white; padding: 8px 10px; border: 1px solid #999; border-radius: 4px; "
        'font-size: 12px;">'
        f"<b>{escape(title)}</b>{''.join(items)}</div>"
    )
    fmap.get_root().html.add_child(folium.Element(legend_html))


def build_station_map(
    dataset: pd.DataFrame,
    urban_areas: Optional[gpd.GeoDataFrame] = None,
    *,
    tiles: str = "CartoDB positron",
    center: Optional[Sequence[float]] = None,
    zoom_start: int = DEFAULT_MAP_ZOOM,
) -> folium.Map:
    """
    Render the combined station dataset on a folium map.

    Args:
        dataset: Output of :func:`station_selector.combine.combine_datasets`
        urban_areas: Optional polygons (``area_name``, ``geometry``) drawn under the markers
        tiles: Folium tile set name
        center: Map centre as (lat, lon). Defaults to the mean marker position,
            or the centre of Australia when ``dataset`` is empty
        zoom_start: Initial zoom level

    Returns:
        folium.Map, which renders inline in a notebook

    Example:
        >>> fmap = build_station_map(selection.dataset, urban_areas)
        >>> fmap.save("stations.html")
    """
    require_columns(dataset, CLASSIFIED_COLUMNS, "Map dataset")

    if center is None:
        if dataset.empty:
            center = DEFAULT_MAP_CENTER
        else:
            center = (dataset["latitude"].mean(), dataset["longitude"].mean())
    fmap = folium.Map(location=list(center), zoom_start=zoom_start, tiles=tiles)

    if urban_areas is not None:
        add_urban_areas(fmap, urban_areas)

    for category in CATEGORY_ORDER:
        subset = dataset[dataset["label"] == category.value]
        if subset.empty:
            continue
        group = folium.FeatureGroup(name=f"{category.value} ({len(subset)})")
        for _, row in subset.iterrows():
            folium.CircleMarker(
                location=[row["latitude"], row["longitude"]],
                radius=float(row["radius"]),
                color=row["color"],
                weight=1,
                opacity=float(row["opacity"]),
                fill=True,
                fill_color=row["color"],
                fill_opacity=float(row["opacity"]),
                popup=_marker_popup(row),
                tooltip=str(row["name"]),
            ).add_to(group)
        group.add_to(fmap)
        logger.debug("Added %d %s markers", len(subset), category.value)

    folium.LayerControl(collapsed=False).add_to(fmap)
    add_legend(fmap)
    return fmap


def save_map(fmap: folium.Map, path: Union[str, Path]) -> Path:
    """Write the map to an HTML file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fmap.save(str(path))
    logger.info(f"Map written to {path}")
    return path
