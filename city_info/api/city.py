# Role: Thin HTTP adapter for the pipeline entry point. Validates request/response shapes and delegates the whole
# run to CityInfoPipeline (business logic lives in core, not in the API layer).

from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from city_info.api.deps import pipeline
from city_info.core.synthesizer import SynthesisUnavailableError

router = APIRouter(tags=["city"])


class CityRequest(BaseModel):
    city: str = Field(min_length=1)
    country: Optional[str] = None


class CityResponse(BaseModel):
    city_information: str


@router.post("/city-info", response_model=CityResponse)
def city_info(req: CityRequest) -> CityResponse:
    # 1) Forward (city, country) to the pipeline
    # 2) Return the six-section document in a stable schema
    # 3) Only an unavailable synthesis service surfaces as an error (503)
    try:
        result = pipeline.run_request(req.city, req.country)
    except SynthesisUnavailableError as e:
        raise HTTPException(status_code=503, detail=f"City profile synthesis unavailable: {e}") from e
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return CityResponse(city_information=result["city_information"])
