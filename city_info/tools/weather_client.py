# Role: Weather source adapter. Calls Open-Meteo geocoding + the `current` forecast block and returns a flat
# current-conditions WeatherResult. Never raises: failures come back as WeatherResult.error.

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

import city_info.config as config
from city_info.models.query import CityQuery
from city_info.models.source_result import ErrorKind, WeatherResult
from city_info.utils.weather_codes import describe_weather_code

_CURRENT_FIELDS = (
    "temperature_2m",
    "apparent_temperature",
    "relative_humidity_2m",
    "wind_speed_10m",
    "wind_gusts_10m",
    "weather_code",
)


class WeatherClient:
    GEO_URL = "https://geocoding-api.open-meteo.com/v1/search"
    FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

    def __init__(self, session: Optional[requests.Session] = None) -> None:
        self.session = session or requests.Session()

    def fetch(self, query: CityQuery) -> WeatherResult:
        # 1) Geocode city -> (lat, lon)
        # 2) Fetch current conditions
        # 3) Normalize to a flat record

        try:
            geo = self._geocode(query.city_name)
            if not geo:
                return WeatherResult(
                    error=f"Could not geocode '{query.city_name}'",
                    error_kind=ErrorKind.NOT_FOUND,
                )

            name = geo["name"]
            country = geo.get("country")

            params = {
                "latitude": geo["latitude"],
                "longitude": geo["longitude"],
                "current": ",".join(_CURRENT_FIELDS),
                "timezone": "auto",
            }
            payload = self._get_json(self.FORECAST_URL, params)

            current = payload.get("current") or {}
            if not current:
                return WeatherResult(
                    location=f"{name}, {country}" if country else name,
                    error="No current conditions returned",
                    error_kind=ErrorKind.NOT_FOUND,
                )

            result = WeatherResult(
                location=f"{name}, {country}" if country else name,
                temperature_c=current.get("temperature_2m"),
                feels_like_c=current.get("apparent_temperature"),
                humidity_pct=current.get("relative_humidity_2m"),
                wind_speed_kmh=current.get("wind_speed_10m"),
                wind_gust_kmh=current.get("wind_gusts_10m"),
                conditions=describe_weather_code(current.get("weather_code")),
            )

            if config.DEBUG:
                print("\n--- WEATHER TOOL ---")
                print("REQUEST:", params)
                print("RESPONSE:", result.model_dump(exclude_none=True))
                print("--------------------\n")

            return result

        except requests.RequestException as e:
            return WeatherResult(
                error=f"Open-Meteo request failed: {e}",
                error_kind=ErrorKind.UPSTREAM_UNAVAILABLE,
            )
        except (KeyError, TypeError, ValueError) as e:
            return WeatherResult(
                error=f"Bad Open-Meteo payload: {e}",
                error_kind=ErrorKind.UPSTREAM_UNAVAILABLE,
            )

    def _get_json(self, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
        r = self.session.get(
            url,
            params=params,
            headers={"User-Agent": config.USER_AGENT},
            timeout=config.HTTP_TIMEOUT_SECONDS,
        )
        r.raise_for_status()
        return r.json()

    def _geocode(self, name: str) -> Optional[Dict[str, Any]]:
        # Role: resolve city name -> coordinates (single best result).
        params = {"name": name, "count": 1, "language": "en", "format": "json"}
        payload = self._get_json(self.GEO_URL, params)
        results = payload.get("results") or []
        return results[0] if results else None
