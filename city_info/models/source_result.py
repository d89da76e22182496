# Role: Normalized per-source result records. Every field besides `source` is optional ("not obtained"),
# and `error` is additive with data: a record can carry fallback data AND an error string explaining it.

from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SourceId(str, Enum):
    WIKIPEDIA = "wikipedia"
    GEONAMES = "geonames"
    OPENSTREETMAP = "openstreetmap"
    WEATHER = "weather"


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    FALLBACK_USED = "fallback_used"


class SourceResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: SourceId
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class EncyclopediaResult(SourceResult):
    source: Literal[SourceId.WIKIPEDIA] = SourceId.WIKIPEDIA
    page_title: Optional[str] = None
    summary: str = ""
    activities: List[str] = Field(default_factory=list)
    cuisine: List[str] = Field(default_factory=list)
    attractions: List[str] = Field(default_factory=list)
    safety: List[str] = Field(default_factory=list)


class GeoLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: Optional[float] = None
    lon: Optional[float] = None


class GeoRegistryResult(SourceResult):
    source: Literal[SourceId.GEONAMES] = SourceId.GEONAMES
    geoname_id: Optional[int] = None
    name: Optional[str] = None
    ascii_name: Optional[str] = None
    location: GeoLocation = Field(default_factory=GeoLocation)
    country: Optional[str] = None
    country_code: Optional[str] = None
    admin_division: Optional[str] = None
    population: Optional[int] = None
    elevation: Optional[int] = None
    timezone: Optional[str] = None
    feature_class: Optional[str] = None
    feature_code: Optional[str] = None


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float


class POI(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    opening_hours: Optional[str] = None
    coordinates: Optional[Coordinates] = None


class CityArea(BaseModel):
    model_config = ConfigDict(frozen=True)

    area_id: Optional[int] = None
    element_type: Optional[str] = None
    name: Optional[str] = None
    place_type: Optional[str] = None
    admin_level: Optional[str] = None
    population: Optional[str] = None
    center: Optional[Coordinates] = None


# Key line: the output contract has seven categories; only the first four are queried.
POI_CATEGORIES = ("restaurants", "museums", "parks", "leisure", "cultural", "historical", "markets")


class PlacesIndexResult(SourceResult):
    source: Literal[SourceId.OPENSTREETMAP] = SourceId.OPENSTREETMAP
    city_area: Optional[CityArea] = None
    restaurants: List[POI] = Field(default_factory=list)
    museums: List[POI] = Field(default_factory=list)
    parks: List[POI] = Field(default_factory=list)
    leisure: List[POI] = Field(default_factory=list)
    cultural: List[POI] = Field(default_factory=list)
    historical: List[POI] = Field(default_factory=list)
    markets: List[POI] = Field(default_factory=list)


class WeatherResult(SourceResult):
    source: Literal[SourceId.WEATHER] = SourceId.WEATHER
    location: Optional[str] = None
    temperature_c: Optional[float] = None
    feels_like_c: Optional[float] = None
    humidity_pct: Optional[float] = None
    wind_speed_kmh: Optional[float] = None
    wind_gust_kmh: Optional[float] = None
    conditions: Optional[str] = None
