# Role: Shared dependency wiring for routers. One process-wide CityInfoPipeline; it holds no per-request state
# (each run builds its own PipelineState and rate limiter), so sharing it across requests is safe.

from __future__ import annotations

from city_info.core.pipeline import CityInfoPipeline

pipeline = CityInfoPipeline()
