"""
Pydantic models and category registry for weather station selection.

Defines the reference records (weather stations, solar farms), the four map
categories with their marker styles, and the package exception hierarchy.
"""

from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ===========================
# Exception Hierarchy
# ===========================


class StationDataError(Exception):
    """Base exception for station selection operations."""

    pass


class MissingColumnsError(StationDataError):
    """Raised when an input table lacks required columns."""

    pass


class EmptyStationTableError(StationDataError):
    """Raised when a nearest-station search has no stations to choose from."""

    pass


class UnsupportedFormatError(StationDataError):
    """Raised when a serialized table has an unrecognised file suffix."""

    pass


# ===========================
# Coordinates and Records
# ===========================


class Coordinates(BaseModel):
    """
    Geographic coordinates in decimal degrees (WGS84 / GDA lon-lat).
    """

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90.0, le=90.0, description="Latitude (South is negative)")
    longitude: float = Field(..., ge=-180.0, le=180.0, description="Longitude (East is positive)")


class AustralianCoordinates(Coordinates):
    """
    Coordinates restricted to the Australian mainland and Tasmania.

    Latitude: -44°S to -10°S
    Longitude: 113°E to 154°E
    """

    latitude: float = Field(..., ge=-44.0, le=-10.0)
    longitude: float = Field(..., ge=113.0, le=154.0)


class WeatherStation(Coordinates):
    """A weather station from the national network."""

    station_id: str = Field(..., min_length=1)
    name: str

    @field_validator("station_id", mode="before")
    @classmethod
    def coerce_station_id(cls, v):
        """Station numbers are often read as integers; keep them as text."""
        return str(v).strip()


class SolarFarm(Coordinates):
    """
    A solar farm location.

    ``closest_station_id`` and ``distance_km`` are filled in once the
    nearest-station search has run.
    """

    name: str
    closest_station_id: Optional[str] = None
    distance_km: Optional[float] = Field(default=None, ge=0.0)


# ===========================
# Map Categories
# ===========================


class StationCategory(str, Enum):
    """Map categories. The value is the display label."""

    URBAN = "Urban Weather Station"
    SOLAR = "Close to Solar Farm"
    REGIONAL = "Regional Weather Station"
    SOLAR_FARM = "Solar Farm"


class MarkerStyle(BaseModel):
    """Circle marker appearance for a category."""

    model_config = ConfigDict(frozen=True)

    color: str
    opacity: float = Field(..., ge=0.0, le=1.0)
    radius: float = Field(..., gt=0.0)


CATEGORY_STYLES: Dict[StationCategory, MarkerStyle] = {
    StationCategory.URBAN: MarkerStyle(color="green", opacity=1.0, radius=2),
    StationCategory.SOLAR: MarkerStyle(color="red", opacity=1.0, radius=2),
    StationCategory.REGIONAL: MarkerStyle(color="grey", opacity=0.5, radius=2),
    StationCategory.SOLAR_FARM: MarkerStyle(color="orange", opacity=1.0, radius=3),
}

# Order in which a station qualifying for several categories is resolved
CATEGORY_PRECEDENCE: Tuple[StationCategory, ...] = (
    StationCategory.URBAN,
    StationCategory.SOLAR,
    StationCategory.REGIONAL,
)

# Legend and output row order
CATEGORY_ORDER: Tuple[StationCategory, ...] = CATEGORY_PRECEDENCE + (StationCategory.SOLAR_FARM,)

# station_id given to solar farm rows, which have no weather station
SOLAR_FARM_STATION_ID = "solar_farm"

# Column layout of the combined map dataset
CLASSIFIED_COLUMNS = [
    "station_id",
    "name",
    "latitude",
    "longitude",
    "label",
    "color",
    "opacity",
    "radius",
]

STATION_COLUMNS = ["station_id", "name", "latitude", "longitude"]
SOLAR_FARM_COLUMNS = ["name", "latitude", "longitude"]
