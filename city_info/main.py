# Role: FastAPI app bootstrap. Loads environment config early, registers routers, and exposes health/docs endpoints.

from fastapi import FastAPI

import city_info.config
city_info.config.load_env()

from city_info.api.city import router as city_router
from city_info.api.sources import router as sources_router

app = FastAPI(title="City Info API", version="0.1.0")
app.include_router(city_router)
app.include_router(sources_router)

@app.get("/")
def root() -> dict:
    # Role: quick discoverability for clients (where are docs/health).
    return {
        "message": "City Info API is running",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
