# %%  [markdown]
# # Weather Stations in Major Cities and Near Solar Farms
#
# This notebook narrows the national weather station network down to two groups of interest:
# - stations inside the Significant Urban Area (SUA) of a major city
# - the closest station to each solar farm
#
# and shows both groups on an interactive map alongside the rest of the network.
#
# Inputs are read from the data directory (`STATION_SELECTOR_DATA_DIR`, default `~/DATA/station_selector`):
# - `stations.pkl`: station_id, name, latitude, longitude
# - `solar_farms.pkl`: name, latitude, longitude
# - `urban_areas/SUA_2021_AUST_GDA2020.shp`: ABS Significant Urban Areas 2021

# %%
from station_selector.config import (
    MAJOR_CITIES,
    SOLAR_FARMS_FILENAME,
    STATIONS_FILENAME,
    URBAN_AREAS_FILENAME,
    get_data_dir,
)
from station_selector.loaders import load_solar_farms, load_urban_areas, load_weather_stations
from station_selector.logging_utils import configure_logging

configure_logging("INFO")

data_dir = get_data_dir()
stations = load_weather_stations(data_dir / STATIONS_FILENAME)
solar_farms = load_solar_farms(data_dir / SOLAR_FARMS_FILENAME)
urban_areas = load_urban_areas(data_dir / URBAN_AREAS_FILENAME)

stations.head()

# %%  [markdown]
# ## Stations in major cities
#
# A station belongs to an urban area when its point falls inside the SUA polygon.
# The containment test treats longitude/latitude as planar coordinates, which is fine at city scale.
# Stations outside every polygon simply have no urban area.

# %%
from station_selector.urban import assign_urban_areas, filter_major_cities

with_areas = assign_urban_areas(stations, urban_areas)
urban_stations = filter_major_cities(with_areas, MAJOR_CITIES)

urban_stations.groupby("urban_area").size()

# %%  [markdown]
# ## Closest station to each solar farm
#
# Distances are haversine great-circle distances on a sphere of Earth's mean radius.
# When two stations are equally close, the first one in the station table is used.

# %%
from station_selector.nearest import closest_station_ids, find_closest_stations

farms = find_closest_stations(solar_farms, stations)
farms[["name", "closest_station_id", "closest_station_name", "distance_km"]].sort_values("distance_km")

# %%  [markdown]
# ## Combine for mapping
#
# Each station gets one category, checked in order: urban, close to solar farm, regional.
# Pass `overlap_strategy="union"` to keep a station that is both urban and closest to a solar farm
# under both labels instead.

# %%
from station_selector.combine import category_counts, combine_datasets

dataset = combine_datasets(
    stations,
    urban_stations["station_id"],
    closest_station_ids(farms),
    farms,
)
category_counts(dataset)

# %%  [markdown]
# ## Interactive map

# %%
from station_selector.mapping import build_station_map

fmap = build_station_map(
    dataset,
    urban_areas[urban_areas["area_name"].isin(MAJOR_CITIES)],
)
fmap

# %%  [markdown]
# The same result in a single call:

# %%
from station_selector.pipeline import load_and_select

selection = load_and_select(data_dir)
selection.summary()
