"""Tests for the loaders module."""

import geopandas as gpd
import pandas as pd
import pytest
from shapely.geometry import Polygon, box

from station_selector.loaders import (
    load_solar_farms,
    load_urban_areas,
    load_weather_stations,
    read_table,
    to_points,
    to_records,
)
from station_selector.models import (
    MissingColumnsError,
    UnsupportedFormatError,
    WeatherStation,
)


@pytest.fixture
def raw_stations():
    """Station table as it might arrive from a text export."""
    return pd.DataFrame(
        {
            "station_id": [66062, 86071, 40913, 66062],
            "name": ["SYDNEY", "MELBOURNE", "BRISBANE", "SYDNEY DUPLICATE"],
            "latitude": ["-33.86", "-37.81", "not a number", "-33.86"],
            "longitude": ["151.21", "144.97", "153.03", "151.21"],
        }
    )


class TestReadTable:
    """Test reading serialized tables from disk."""

    def test_read_pickle(self, tmp_path):
        df = pd.DataFrame({"a": [1, 2]})
        path = tmp_path / "table.pkl"
        df.to_pickle(path)
        pd.testing.assert_frame_equal(read_table(path), df)

    def test_read_csv(self, tmp_path):
        path = tmp_path / "table.csv"
        pd.DataFrame({"a": [1, 2]}).to_csv(path, index=False)
        assert read_table(path)["a"].tolist() == [1, 2]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_table(tmp_path / "missing.pkl")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "table.xlsx"
        path.write_bytes(b"")
        with pytest.raises(UnsupportedFormatError):
            read_table(path)


class TestLoadWeatherStations:
    """Test station normalisation."""

    def test_coerces_and_cleans(self, raw_stations):
        stations = load_weather_stations(raw_stations)

        # Non-numeric latitude and duplicate id are dropped
        assert stations["station_id"].tolist() == ["66062", "86071"]
        assert stations["latitude"].dtype == float
        assert stations["longitude"].tolist() == pytest.approx([151.21, 144.97])
        assert stations.index.tolist() == [0, 1]

    def test_does_not_modify_input(self, raw_stations):
        original = raw_stations.copy()
        load_weather_stations(raw_stations)
        pd.testing.assert_frame_equal(raw_stations, original)

    def test_missing_columns(self):
        with pytest.raises(MissingColumnsError, match="longitude"):
            load_weather_stations(pd.DataFrame({"station_id": ["1"], "name": ["A"], "latitude": [0.0]}))

    def test_from_pickle_path(self, tmp_path, raw_stations):
        path = tmp_path / "stations.pkl"
        raw_stations.to_pickle(path)
        assert len(load_weather_stations(path)) == 2


class TestLoadSolarFarms:
    def test_load(self):
        farms = load_solar_farms(
            pd.DataFrame({"name": ["Nyngan"], "latitude": ["-31.56"], "longitude": [147.08]})
        )
        assert farms.loc[0, "latitude"] == pytest.approx(-31.56)

    def test_missing_columns(self):
        with pytest.raises(MissingColumnsError):
            load_solar_farms(pd.DataFrame({"name": ["Nyngan"]}))


class TestLoadUrbanAreas:
    """Test urban area polygon loading."""

    def test_renames_area_field(self):
        gdf = gpd.GeoDataFrame(
            {"SUA_NAME21": ["Sydney"], "AREASQKM21": [4000.0]},
            geometry=[box(150.5, -34.2, 151.4, -33.5)],
            crs="EPSG:4326",
        )
        areas = load_urban_areas(gdf)
        assert list(areas.columns) == ["area_name", "geometry"]
        assert areas.loc[0, "area_name"] == "Sydney"

    def test_drops_empty_geometry_and_sets_crs(self):
        gdf = gpd.GeoDataFrame(
            {"SUA_NAME21": ["Sydney", "Migratory - Offshore - Shipping (NSW)"]},
            geometry=[box(150.5, -34.2, 151.4, -33.5), Polygon()],
        )
        areas = load_urban_areas(gdf)
        assert areas["area_name"].tolist() == ["Sydney"]
        assert areas.crs.to_epsg() == 4326

    def test_reprojects_to_wgs84(self):
        gdf = gpd.GeoDataFrame(
            {"name": ["Sydney"]},
            geometry=[box(150.5, -34.2, 151.4, -33.5)],
            crs="EPSG:4326",
        ).to_crs("EPSG:3857")
        areas = load_urban_areas(gdf, area_field="name")
        assert areas.crs.to_epsg() == 4326
        assert areas.total_bounds[0] == pytest.approx(150.5)

    def test_read_from_file(self, tmp_path):
        path = tmp_path / "areas.geojson"
        gpd.GeoDataFrame(
            {"SUA_NAME21": ["Perth"]},
            geometry=[box(115.6, -32.5, 116.1, -31.6)],
            crs="EPSG:4326",
        ).to_file(path, driver="GeoJSON")
        areas = load_urban_areas(path)
        assert areas["area_name"].tolist() == ["Perth"]

    def test_missing_area_field(self):
        gdf = gpd.GeoDataFrame({"other": ["x"]}, geometry=[box(0, 0, 1, 1)], crs="EPSG:4326")
        with pytest.raises(MissingColumnsError):
            load_urban_areas(gdf)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_urban_areas(tmp_path / "missing.shp")


def test_to_points():
    points = to_points(pd.DataFrame({"latitude": [-33.86], "longitude": [151.21]}))
    assert points.crs.to_epsg() == 4326
    assert points.geometry.iloc[0].x == pytest.approx(151.21)
    assert points.geometry.iloc[0].y == pytest.approx(-33.86)


def test_to_records(raw_stations):
    records = to_records(load_weather_stations(raw_stations), WeatherStation)
    assert [r.station_id for r in records] == ["66062", "86071"]
    assert isinstance(records[0], WeatherStation)
