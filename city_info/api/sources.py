# Role: Read-only transparency endpoint. Runs only the four source adapters (no synthesis) and returns the raw
# normalized results, including per-source errors, for debugging and inspection.

from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from city_info.api.deps import pipeline
from city_info.models.query import CityQuery

router = APIRouter(tags=["sources"])


class SourcesRequest(BaseModel):
    city: str = Field(min_length=1)
    country: Optional[str] = None


class SourcesSnapshot(BaseModel):
    city: str
    country: Optional[str]
    wikipedia: Dict[str, Any]
    geonames: Dict[str, Any]
    openstreetmap: Dict[str, Any]
    weather: Dict[str, Any]
    errors: Dict[str, str]


@router.post("/sources", response_model=SourcesSnapshot)
def get_sources(req: SourcesRequest) -> SourcesSnapshot:
    try:
        query = CityQuery(city_name=req.city, country_hint=req.country)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    state = pipeline.gather(query)
    return SourcesSnapshot(
        city=query.city_name,
        country=query.country_hint,
        wikipedia=state.encyclopedia.model_dump(mode="json"),
        geonames=state.geo.model_dump(mode="json"),
        openstreetmap=state.places.model_dump(mode="json"),
        weather=state.weather.model_dump(mode="json"),
        errors=state.errors(),
    )
