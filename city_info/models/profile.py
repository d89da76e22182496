# Role: The pipeline's only externally visible artifact. Six required sections in a fixed order,
# rendered under fixed headings so callers (and the validator) can rely on the markers.

from __future__ import annotations

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, model_validator


class Section(str, Enum):
    OVERVIEW = "overview"
    WEATHER = "weather"
    ACTIVITIES = "activities"
    FOOD = "food"
    ATTRACTIONS = "attractions"
    CONCERNS = "concerns"


# Key line: declaration order of Section is the render order.
SECTION_ORDER: List[Section] = list(Section)

SECTION_TITLES: Dict[Section, str] = {
    Section.OVERVIEW: "City Overview",
    Section.WEATHER: "Weather",
    Section.ACTIVITIES: "Activities",
    Section.FOOD: "Good Food",
    Section.ATTRACTIONS: "Attractions",
    Section.CONCERNS: "Things to Worry About",
}

SECTION_ICONS: Dict[Section, str] = {
    Section.OVERVIEW: "🏙️",
    Section.WEATHER: "☀️",
    Section.ACTIVITIES: "🎯",
    Section.FOOD: "🍽️",
    Section.ATTRACTIONS: "📸",
    Section.CONCERNS: "⚠️",
}


def section_heading(section: Section) -> str:
    return f"{SECTION_ICONS[section]} **{SECTION_TITLES[section]}**"


class CityProfile(BaseModel):
    city: str
    sections: Dict[Section, str]

    @model_validator(mode="after")
    def _check_sections(self):
        missing = [s.value for s in SECTION_ORDER if not (self.sections.get(s) or "").strip()]
        if missing:
            raise ValueError(f"CityProfile is missing sections: {missing}")
        return self

    def render(self) -> str:
        blocks = [f"{section_heading(s)}\n{self.sections[s].strip()}" for s in SECTION_ORDER]
        return "\n\n".join(blocks)
