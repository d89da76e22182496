# Role: Immutable request contract. One CityQuery is created per pipeline run and handed unchanged
# to every source adapter (and to the synthesizer for naming the city).

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class CityQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    city_name: str
    country_hint: Optional[str] = None

    @field_validator("city_name")
    @classmethod
    def _non_empty_city(cls, value: str) -> str:
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValueError("city_name must be non-empty")
        return cleaned

    @field_validator("country_hint")
    @classmethod
    def _blank_hint_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None

    @property
    def label(self) -> str:
        # Key line: "City, Country" is used both as search term and as the display name in prompts.
        return f"{self.city_name}, {self.country_hint}" if self.country_hint else self.city_name
