# Role: Per-run accumulator threaded through the pipeline. Holds the CityQuery plus the four source results;
# each slot starts empty and is filled exactly once (never retried or overwritten within a run).

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel

from city_info.models.query import CityQuery
from city_info.models.source_result import (
    EncyclopediaResult,
    GeoRegistryResult,
    PlacesIndexResult,
    SourceId,
    SourceResult,
    WeatherResult,
)


class PipelineStage(str, Enum):
    START = "start"
    ENCYCLOPEDIA = "encyclopedia"
    GEO_REGISTRY = "geo_registry"
    PLACES_INDEX = "places_index"
    WEATHER = "weather"
    SYNTHESIZE = "synthesize"
    DONE = "done"


_SLOT_BY_SOURCE: Dict[SourceId, str] = {
    SourceId.WIKIPEDIA: "encyclopedia",
    SourceId.GEONAMES: "geo",
    SourceId.OPENSTREETMAP: "places",
    SourceId.WEATHER: "weather",
}


class StateError(RuntimeError):
    pass


class PipelineState(BaseModel):
    query: CityQuery
    stage: PipelineStage = PipelineStage.START

    encyclopedia: Optional[EncyclopediaResult] = None
    geo: Optional[GeoRegistryResult] = None
    places: Optional[PlacesIndexResult] = None
    weather: Optional[WeatherResult] = None

    def record(self, result: SourceResult) -> None:
        # Key line: fill-once invariant; a second write for the same source is a pipeline bug.
        slot = _SLOT_BY_SOURCE[result.source]
        if getattr(self, slot) is not None:
            raise StateError(f"{result.source.value} result already recorded for this run")
        setattr(self, slot, result)

    def errors(self) -> Dict[str, str]:
        out: Dict[str, str] = {}
        for source, slot in _SLOT_BY_SOURCE.items():
            result = getattr(self, slot)
            if result is not None and result.error:
                out[source.value] = result.error
        return out
