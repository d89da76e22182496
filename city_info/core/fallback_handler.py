# Role: Recovery path when the generated profile is missing sections. Deterministically writes a section from
# whatever sourced facts the run collected, topped up with general travel guidance for the named city.
# Same inputs -> same text, so sourced facts stay stable across identical runs.

from __future__ import annotations

from typing import Callable, Dict, List

from city_info.models.profile import Section
from city_info.models.source_result import POI
from city_info.models.state import PipelineState
from city_info.utils.weather_codes import summarize_conditions

_MAX_BULLETS = 6


def _bullets(items: List[str]) -> str:
    return "\n".join(f"- {item}" for item in items[:_MAX_BULLETS])


def _poi_label(poi: POI) -> str:
    if poi.type and poi.type.lower() not in poi.name.lower():
        return f"{poi.name} ({poi.type})"
    return poi.name


def _named(pois: List[POI]) -> List[POI]:
    # Key line: placeholder names ("Unknown Museum") are not useful to a reader.
    return [p for p in pois if not p.name.lower().startswith("unknown")]


def _first_sentences(text: str, count: int = 2) -> str:
    sentences = [s.strip() for s in text.split(". ") if s.strip()]
    out = ". ".join(sentences[:count])
    return out if out.endswith(".") else out + "."


class FallbackHandler:
    def __init__(self) -> None:
        self._builders: Dict[Section, Callable[[PipelineState], str]] = {
            Section.OVERVIEW: self._overview,
            Section.WEATHER: self._weather,
            Section.ACTIVITIES: self._activities,
            Section.FOOD: self._food,
            Section.ATTRACTIONS: self._attractions,
            Section.CONCERNS: self._concerns,
        }

    def fill(self, section: Section, state: PipelineState) -> str:
        return self._builders[section](state).strip()

    def _city(self, state: PipelineState) -> str:
        return state.query.label

    def _overview(self, state: PipelineState) -> str:
        lines: List[str] = []
        wiki, geo = state.encyclopedia, state.geo

        if wiki is not None and wiki.summary:
            lines.append(_first_sentences(wiki.summary))

        if geo is not None:
            facts: List[str] = []
            where = ", ".join(p for p in (geo.admin_division, geo.country) if p)
            if where:
                facts.append(f"Located in {where}")
            if geo.population:
                facts.append(f"population of about {geo.population:,}")
            if geo.timezone:
                facts.append(f"time zone {geo.timezone}")
            if facts:
                lines.append("- " + "; ".join(facts) + ".")
            if geo.location.lat is not None and geo.location.lon is not None:
                lines.append(f"- Coordinates: {geo.location.lat:.4f}, {geo.location.lon:.4f}.")
            if geo.elevation is not None:
                lines.append(f"- Elevation: {geo.elevation} m.")

        if not lines:
            lines.append(
                f"{self._city(state)} rewards visitors who explore on foot: start in the historic centre, "
                "then branch out into its neighbourhoods, markets and green spaces."
            )
        return "\n".join(lines)

    def _weather(self, state: PipelineState) -> str:
        current = summarize_conditions(state.weather)
        advice = "Pack layers and a compact rain jacket, and check the local forecast a day or two before outings."
        if current:
            return f"- {current}\n- {advice}"
        return (
            f"- Conditions in {self._city(state)} change with the seasons; expect warmer days in summer "
            "and cooler evenings outside it.\n"
            f"- {advice}"
        )

    def _activities(self, state: PipelineState) -> str:
        items: List[str] = []
        if state.encyclopedia is not None:
            items.extend(state.encyclopedia.activities)
        if state.places is not None:
            items.extend(f"Spend time at {_poi_label(p)}" for p in _named(state.places.leisure)[:2])
            items.extend(f"Relax in {p.name}" for p in _named(state.places.parks)[:2])
        if not items:
            items = [
                f"Take a walking tour of central {state.query.city_name}",
                "Visit a local market to see everyday life",
                "Check listings for concerts, theatre and seasonal festivals",
                "Rent a bike or use public transport to reach outer neighbourhoods",
            ]
        return _bullets(items)

    def _food(self, state: PipelineState) -> str:
        items: List[str] = []
        if state.encyclopedia is not None:
            items.extend(state.encyclopedia.cuisine)
        if state.places is not None:
            items.extend(_poi_label(p) for p in _named(state.places.restaurants)[:4])
        if not items:
            items = [
                f"Try the regional specialities that {state.query.city_name} is known for",
                "Eat where locals queue: neighbourhood bistros and market stalls",
                "Ask for the dish of the day, which is usually seasonal and good value",
            ]
        return _bullets(items)

    def _attractions(self, state: PipelineState) -> str:
        items: List[str] = []
        if state.places is not None:
            items.extend(p.name for p in _named(state.places.museums)[:3])
        if state.encyclopedia is not None:
            items.extend(state.encyclopedia.attractions)
        if state.places is not None:
            items.extend(p.name for p in _named(state.places.parks)[:2])
        if not items:
            items = [
                f"The historic centre and main square of {state.query.city_name}",
                "The principal museums and galleries",
                "Landmark religious and civic buildings",
                "Viewpoints and riverside or waterfront promenades",
            ]
        # Key line: museum names, sentences and parks can repeat each other.
        return _bullets(list(dict.fromkeys(items)))

    def _concerns(self, state: PipelineState) -> str:
        items: List[str] = []
        if state.encyclopedia is not None:
            items.extend(state.encyclopedia.safety)
        items.extend(
            [
                "Watch for pickpockets in crowded transport and tourist hot spots",
                "Keep copies of travel documents and note local emergency numbers",
                "Check opening hours and public holidays before planning visits",
            ]
        )
        return _bullets(items)
