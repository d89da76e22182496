# Role: Builds the user prompt for profile synthesis. Embeds all four source results (JSON, errors included for
# the model's context) plus per-section content guidance and strict output rules.

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from city_info.models.profile import SECTION_ORDER, Section, section_heading
from city_info.models.query import CityQuery
from city_info.models.source_result import SourceResult

_SECTION_GUIDANCE: Dict[Section, str] = {
    Section.OVERVIEW: "Quick intro: location, size, population, importance, key characteristics.",
    Section.WEATHER: "Current conditions (temperature, humidity, wind) and climate considerations for visitors.",
    Section.ACTIVITIES: "Popular local experiences, cultural and recreational activities.",
    Section.FOOD: "Local cuisine highlights, famous dishes, specific restaurant names when available.",
    Section.ATTRACTIONS: "Specific named attractions: museums, monuments, parks, historical spots.",
    Section.CONCERNS: "Practical concerns: safety, climate, health, scams, transport and infrastructure tips.",
}


def source_block(result: Optional[SourceResult]) -> str:
    # Key line: an absent result is rendered explicitly so the model knows to use general knowledge.
    if result is None:
        return "null"
    data: Dict[str, Any] = result.model_dump(mode="json", exclude_none=True)
    return json.dumps(data, ensure_ascii=False)


def build_synthesis_prompt(
    query: CityQuery,
    encyclopedia: Optional[SourceResult],
    geo: Optional[SourceResult],
    places: Optional[SourceResult],
    weather: Optional[SourceResult],
) -> str:
    sections = "\n".join(f"{section_heading(s)}\n- {_SECTION_GUIDANCE[s]}" for s in SECTION_ORDER)

    return f"""
Synthesize the following information about {query.label} into a complete city profile.

WIKIPEDIA_DATA:
{source_block(encyclopedia)}

GEONAMES_DATA:
{source_block(geo)}

OPENSTREETMAP_DATA:
{source_block(places)}

WEATHER_DATA:
{source_block(weather)}

IMPORTANT INSTRUCTIONS:
- A block with an "error" field (or null) means that source failed; that is NORMAL.
- Use the available data and supplement with your knowledge about {query.city_name}.
- If a source failed, write its sections from general knowledge instead of skipping them.
- You MUST provide all 6 sections regardless of source failures.

FORMAT (exact headings, this order):
{sections}

STRICT OUTPUT RULES:
- Output ONLY the city profile.
- Do NOT include preambles like "Okay...", "Here is...".
- Do NOT mention errors, APIs, tools or data sources.
- Do NOT output JSON or code blocks.
""".strip()


def build_gap_fill_prompt(query: CityQuery, missing: list) -> str:
    # Role: second-chance prompt asking only for the sections the first answer lacked.
    sections = "\n".join(f"{section_heading(s)}\n- {_SECTION_GUIDANCE[s]}" for s in missing)
    return f"""
Write ONLY the following sections of a travel guide for {query.label}, using your general knowledge.

{sections}

STRICT OUTPUT RULES:
- Use exactly these headings, in this order.
- 3-6 concise bullet points per section.
- Output ONLY those sections: no preamble, no notes, no JSON.
""".strip()
