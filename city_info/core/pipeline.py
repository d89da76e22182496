# Role: Orchestrator for one city request. Runs the four source adapters strictly in order, threads the
# accumulating PipelineState forward, isolates adapter failures, and hands everything to the synthesizer.

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol

import city_info.config as config
from city_info.core.synthesizer import Synthesizer
from city_info.models.profile import CityProfile
from city_info.models.query import CityQuery
from city_info.models.source_result import (
    EncyclopediaResult,
    ErrorKind,
    GeoRegistryResult,
    PlacesIndexResult,
    SourceResult,
    WeatherResult,
)
from city_info.models.state import PipelineStage, PipelineState
from city_info.tools.geonames_client import GeoNamesClient
from city_info.tools.overpass_client import OverpassClient
from city_info.tools.weather_client import WeatherClient
from city_info.tools.wikipedia_client import WikipediaClient


class SourceAdapter(Protocol):
    def fetch(self, query: CityQuery) -> SourceResult: ...


# Fixed transition table; no backtracking, no skipping.
NEXT_STAGE: Dict[PipelineStage, PipelineStage] = {
    PipelineStage.START: PipelineStage.ENCYCLOPEDIA,
    PipelineStage.ENCYCLOPEDIA: PipelineStage.GEO_REGISTRY,
    PipelineStage.GEO_REGISTRY: PipelineStage.PLACES_INDEX,
    PipelineStage.PLACES_INDEX: PipelineStage.WEATHER,
    PipelineStage.WEATHER: PipelineStage.SYNTHESIZE,
    PipelineStage.SYNTHESIZE: PipelineStage.DONE,
}

# Result type used when an adapter breaks its "never raise" contract.
_ERROR_RESULT: Dict[PipelineStage, Callable[..., SourceResult]] = {
    PipelineStage.ENCYCLOPEDIA: EncyclopediaResult,
    PipelineStage.GEO_REGISTRY: GeoRegistryResult,
    PipelineStage.PLACES_INDEX: PlacesIndexResult,
    PipelineStage.WEATHER: WeatherResult,
}


@dataclass(frozen=True)
class PipelineRun:
    state: PipelineState
    profile: CityProfile


class CityInfoPipeline:
    def __init__(
        self,
        wikipedia_client: Optional[SourceAdapter] = None,
        geonames_client: Optional[SourceAdapter] = None,
        overpass_client: Optional[SourceAdapter] = None,
        weather_client: Optional[SourceAdapter] = None,
        synthesizer: Optional[Synthesizer] = None,
    ) -> None:
        # Key line: dependencies are injectable for testing/mocking.
        self.adapters: Dict[PipelineStage, SourceAdapter] = {
            PipelineStage.ENCYCLOPEDIA: wikipedia_client or WikipediaClient(),
            PipelineStage.GEO_REGISTRY: geonames_client or GeoNamesClient(),
            PipelineStage.PLACES_INDEX: overpass_client or OverpassClient(),
            PipelineStage.WEATHER: weather_client or WeatherClient(),
        }
        self.synthesizer = synthesizer or Synthesizer()

    def gather(self, query: CityQuery) -> PipelineState:
        # 1) START -> each adapter stage in fixed order
        # 2) Record every result (errors included) exactly once
        # 3) Stop at SYNTHESIZE; the caller decides whether to synthesize
        state = PipelineState(query=query)
        state.stage = NEXT_STAGE[state.stage]

        while state.stage in self.adapters:
            result = self._run_adapter(state.stage, query)
            state.record(result)

            if config.DEBUG:
                print(f"STAGE {state.stage.value}: ok={result.ok} error={result.error!r}")

            state.stage = NEXT_STAGE[state.stage]

        return state

    def run(self, query: CityQuery) -> PipelineRun:
        state = self.gather(query)

        # Key line: SynthesisUnavailableError is the only failure allowed to abort a run.
        profile = self.synthesizer.synthesize(state)
        state.stage = NEXT_STAGE[state.stage]
        return PipelineRun(state=state, profile=profile)

    def run_request(self, city: str, country: Optional[str] = None) -> Dict[str, str]:
        run = self.run(CityQuery(city_name=city, country_hint=country))
        return {"city_information": run.profile.render()}

    def _run_adapter(self, stage: PipelineStage, query: CityQuery) -> SourceResult:
        # Adapters absorb their own failures; this guard only catches contract violations.
        try:
            return self.adapters[stage].fetch(query)
        except Exception as e:
            if config.DEBUG:
                print(f"!!! ADAPTER RAISED at {stage.value}: {e!r}")
            return _ERROR_RESULT[stage](
                error=f"{stage.value} adapter failed: {e}",
                error_kind=ErrorKind.UPSTREAM_UNAVAILABLE,
            )
