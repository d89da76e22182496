# Role: Deterministic helpers for Open-Meteo payloads. Maps WMO weather codes to readable conditions
# and formats a one-line conditions summary used by the deterministic profile filler.

from __future__ import annotations

from typing import Optional

from city_info.models.source_result import WeatherResult

# Reference: WMO code table as documented by Open-Meteo.
WMO_CONDITIONS = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Foggy",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}


def describe_weather_code(code: Optional[int]) -> Optional[str]:
    if code is None:
        return None
    try:
        return WMO_CONDITIONS.get(int(code), "Unknown")
    except (TypeError, ValueError):
        return None


def summarize_conditions(weather: Optional[WeatherResult]) -> Optional[str]:
    # Role: one sentence of sourced facts, or None when nothing usable was fetched.
    if weather is None or weather.temperature_c is None:
        return None

    parts = [f"Currently {weather.temperature_c:g}°C"]
    if weather.feels_like_c is not None:
        parts[0] += f" (feels like {weather.feels_like_c:g}°C)"
    if weather.conditions:
        parts.append(weather.conditions.lower())
    if weather.humidity_pct is not None:
        parts.append(f"humidity {weather.humidity_pct:g}%")
    if weather.wind_speed_kmh is not None:
        wind = f"wind {weather.wind_speed_kmh:g} km/h"
        if weather.wind_gust_kmh is not None:
            wind += f" (gusts {weather.wind_gust_kmh:g} km/h)"
        parts.append(wind)

    return ", ".join(parts) + "."
