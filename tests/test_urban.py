"""Tests for urban-area membership filtering."""

import geopandas as gpd
import pandas as pd
import pytest
from shapely.geometry import box

from station_selector.models import MissingColumnsError
from station_selector.urban import (
    assign_urban_areas,
    filter_major_cities,
    select_urban_stations,
)


@pytest.fixture
def urban_areas():
    """Rectangular stand-ins for three Significant Urban Areas."""
    return gpd.GeoDataFrame(
        {"area_name": ["Sydney", "Newcastle - Maitland", "Melbourne"]},
        geometry=[
            box(150.5, -34.2, 151.4, -33.5),
            box(151.4, -33.1, 151.9, -32.7),
            box(144.5, -38.3, 145.5, -37.5),
        ],
        crs="EPSG:4326",
    )


@pytest.fixture
def stations():
    return pd.DataFrame(
        {
            "station_id": ["S1", "S2", "S3", "S4"],
            "name": ["SYDNEY", "BOURKE", "NEWCASTLE", "MELBOURNE"],
            "latitude": [-33.86, -30.09, -32.92, -37.81],
            "longitude": [151.21, 145.94, 151.78, 144.97],
        }
    )


class TestAssignUrbanAreas:
    """Test point-in-polygon tagging."""

    def test_tags_containing_area(self, stations, urban_areas):
        result = assign_urban_areas(stations, urban_areas)
        assert result["urban_area"].tolist() == ["Sydney", None, "Newcastle - Maitland", "Melbourne"]

    def test_no_match_does_not_raise(self, urban_areas):
        """A station outside every polygon has no area."""
        remote = pd.DataFrame(
            {"station_id": ["S2"], "name": ["BOURKE"], "latitude": [-30.09], "longitude": [145.94]}
        )
        result = assign_urban_areas(remote, urban_areas)
        assert result.loc[0, "urban_area"] is None

    def test_preserves_rows_and_order(self, stations, urban_areas):
        shuffled = stations.iloc[[3, 1, 0, 2]].set_index(pd.Index([10, 11, 12, 13]))
        result = assign_urban_areas(shuffled, urban_areas)
        assert result["station_id"].tolist() == ["S4", "S2", "S1", "S3"]
        assert len(result) == len(shuffled)

    @pytest.mark.parametrize("greater_first, expected", [(False, "Sydney"), (True, "Greater Sydney")])
    def test_overlapping_polygons_keep_first_match(self, stations, urban_areas, greater_first, expected):
        """A station inside two polygons takes the one earlier in row order."""
        greater = gpd.GeoDataFrame(
            {"area_name": ["Greater Sydney"]},
            geometry=[box(150.0, -35.0, 152.0, -33.0)],
            crs="EPSG:4326",
        )
        frames = [greater, urban_areas] if greater_first else [urban_areas, greater]
        overlapping = pd.concat(frames, ignore_index=True)

        result = assign_urban_areas(stations, overlapping)

        assert len(result) == len(stations)
        assert result["station_id"].tolist() == stations["station_id"].tolist()
        assert result.loc[0, "urban_area"] == expected

    def test_empty_station_table(self, urban_areas):
        empty = pd.DataFrame(columns=["station_id", "name", "latitude", "longitude"])
        result = assign_urban_areas(empty, urban_areas)
        assert result.empty
        assert "urban_area" in result.columns

    def test_reprojects_polygons(self, stations, urban_areas):
        result = assign_urban_areas(stations, urban_areas.to_crs("EPSG:3577"))
        assert result.loc[0, "urban_area"] == "Sydney"

    def test_missing_columns(self, urban_areas):
        with pytest.raises(MissingColumnsError):
            assign_urban_areas(pd.DataFrame({"station_id": ["S1"]}), urban_areas)


class TestFilterMajorCities:
    """Test the allow-list filter."""

    def test_sydney_only(self, urban_areas):
        """S1 inside Sydney, S2 in no polygon: only S1 passes a {"Sydney"} allow-list."""
        stations = pd.DataFrame(
            {
                "station_id": ["S1", "S2"],
                "name": ["SYDNEY", "BOURKE"],
                "latitude": [-33.86, -30.09],
                "longitude": [151.21, 145.94],
            }
        )
        result = filter_major_cities(assign_urban_areas(stations, urban_areas), ["Sydney"])
        assert result["station_id"].tolist() == ["S1"]

    def test_empty_allow_list(self, stations, urban_areas):
        result = filter_major_cities(assign_urban_areas(stations, urban_areas), [])
        assert result.empty

    def test_non_major_area_excluded(self, stations, urban_areas):
        result = filter_major_cities(assign_urban_areas(stations, urban_areas))
        assert set(result["station_id"]) == {"S1", "S4"}

    def test_requires_urban_area_column(self, stations):
        with pytest.raises(MissingColumnsError):
            filter_major_cities(stations)


def test_select_urban_stations(stations, urban_areas):
    result = select_urban_stations(stations, urban_areas, cities=["Melbourne", "Perth"])
    assert result["station_id"].tolist() == ["S4"]
    assert result["urban_area"].tolist() == ["Melbourne"]
