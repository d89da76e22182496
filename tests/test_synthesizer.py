"""Tests for section parsing, the trust pass, and the synthesizer's gap-fill/fallback chain."""

import pytest

import city_info.config as config
from city_info.core.fallback_handler import FallbackHandler
from city_info.core.synthesizer import SynthesisUnavailableError, Synthesizer
from city_info.core.trust_layer import TrustLayer
from city_info.core.validator import ProfileValidator, parse_sections
from city_info.llm.gemini_client import EmptyResponseError, LLMUnavailableError
from city_info.llm.profile_generator import ProfileGenerator
from city_info.models.profile import SECTION_ORDER, CityProfile, Section, section_heading
from city_info.models.source_result import (
    POI,
    EncyclopediaResult,
    ErrorKind,
    GeoLocation,
    GeoRegistryResult,
    PlacesIndexResult,
    WeatherResult,
)
from city_info.models.state import PipelineState
from conftest import FakeLLMClient, profile_text

WEATHER_ERROR = "Open-Meteo request failed: 503 Server Error"


def _failed_state(query):
    state = PipelineState(query=query)
    state.record(EncyclopediaResult(error="No Wikipedia page found for Paris", error_kind=ErrorKind.NOT_FOUND))
    state.record(GeoRegistryResult(error="No GeoNames data found for Paris and no fallback available", error_kind=ErrorKind.NOT_FOUND))
    state.record(PlacesIndexResult(error="OpenStreetMap area lookup failed", error_kind=ErrorKind.UPSTREAM_UNAVAILABLE))
    state.record(WeatherResult(error=WEATHER_ERROR, error_kind=ErrorKind.UPSTREAM_UNAVAILABLE))
    return state


def _sourced_state(query):
    state = PipelineState(query=query)
    state.record(
        EncyclopediaResult(
            page_title="Paris",
            summary="Paris is the capital of France. It is a major European city. It has many museums.",
            cuisine=["Parisian cuisine is famous for its bistros and bakeries"],
        )
    )
    state.record(
        GeoRegistryResult(
            name="Paris",
            country="France",
            admin_division="Île-de-France",
            population=2138551,
            timezone="Europe/Paris",
            location=GeoLocation(lat=48.85341, lon=2.3488),
            elevation=42,
        )
    )
    state.record(
        PlacesIndexResult(
            restaurants=[POI(name="Le Procope", type="french"), POI(name="Unknown Restaurant")],
            museums=[POI(name="Louvre", type="museum")],
        )
    )
    state.record(WeatherResult(temperature_c=18, conditions="Overcast", humidity_pct=70))
    return state


def _synthesizer(answers):
    llm = FakeLLMClient(answers)
    return Synthesizer(generator=ProfileGenerator(client=llm)), llm


def test_parse_sections_accepts_heading_variants():
    text = (
        "Intro text that belongs to no section\n"
        "## City Overview\nA big city.\n"
        "**Weather:**\nMild.\n"
        "🎯 Activities\n- Walk\n"
        "### good food:\n- Croissants\n"
        "📸 **Attractions**\n- Louvre\n"
        "⚠️ **Things to Worry About**\n- Pickpockets\n"
    )
    sections = parse_sections(text)
    assert list(sections) == SECTION_ORDER
    assert sections[Section.WEATHER] == "Mild."
    assert sections[Section.FOOD] == "- Croissants"


def test_parse_sections_accepts_bold_wrapped_emoji_and_numbered_headings():
    text = (
        "1. **City Overview**\n- Big city\n"
        "**☀️ Weather**\n- 20C sunny\n"
        "3) 🎯 **Activities**\n- Walk\n"
        "**🍽️ 4. Good Food:**\n- Crepes\n"
    )
    sections = parse_sections(text)
    assert sections == {
        Section.OVERVIEW: "- Big city",
        Section.WEATHER: "- 20C sunny",
        Section.ACTIVITIES: "- Walk",
        Section.FOOD: "- Crepes",
    }


def test_parse_sections_first_occurrence_wins():
    text = f"{section_heading(Section.WEATHER)}\nFirst\n{section_heading(Section.WEATHER)}\nSecond"
    assert parse_sections(text) == {Section.WEATHER: "First"}


def test_validator_reports_missing_and_blank_sections():
    sections = parse_sections(profile_text(skip=[Section.FOOD], bodies={Section.CONCERNS: "   "}))
    result = ProfileValidator().validate(sections)
    assert not result.ok
    assert result.missing_sections == [Section.FOOD, Section.CONCERNS]


def test_validator_notes_out_of_order_sections():
    result = ProfileValidator().validate({Section.WEATHER: "x", Section.OVERVIEW: "y"})
    assert "sections out of order" in result.problems


def test_trust_layer_drops_lines_with_run_errors(paris):
    state = _failed_state(paris)
    sections = {
        Section.WEATHER: f"- {WEATHER_ERROR}\n- Expect mild spring days",
        Section.OVERVIEW: "- The GeoNames API is unavailable right now\n- Paris sits on the Seine",
    }

    result = TrustLayer().apply(sections=sections, state=state)

    assert result.flagged
    assert result.sections[Section.WEATHER] == "- Expect mild spring days"
    assert result.sections[Section.OVERVIEW] == "- Paris sits on the Seine"


def test_complete_answer_is_used_as_is(paris):
    synthesizer, llm = _synthesizer([profile_text()])

    profile = synthesizer.synthesize(_sourced_state(paris))

    assert len(llm.prompts) == 1
    assert profile.sections[Section.FOOD] == "- Sourced food detail"
    assert "Le Procope" in llm.prompts[0]
    assert "City Orchestrator" in llm.systems[0]


def test_missing_sections_are_gap_filled_by_second_generation(paris):
    gap = f"{section_heading(Section.FOOD)}\n- Try onion soup"
    synthesizer, llm = _synthesizer([profile_text(skip=[Section.FOOD]), gap])

    profile = synthesizer.synthesize(_sourced_state(paris))

    assert len(llm.prompts) == 2
    assert "Write ONLY the following sections" in llm.prompts[1]
    assert profile.sections[Section.FOOD] == "- Try onion soup"


def test_empty_answers_fall_back_to_deterministic_sections(paris):
    synthesizer, _ = _synthesizer([EmptyResponseError("empty"), ""])

    profile = synthesizer.synthesize(_sourced_state(paris))

    assert "population of about 2,138,551" in profile.sections[Section.OVERVIEW]
    assert "Currently 18°C, overcast, humidity 70%." in profile.sections[Section.WEATHER]
    assert "- Le Procope (french)" in profile.sections[Section.FOOD]
    assert "Unknown Restaurant" not in profile.sections[Section.FOOD]
    assert "- Louvre" in profile.sections[Section.ATTRACTIONS]


def test_all_sources_failed_still_yields_six_sections(paris):
    synthesizer, _ = _synthesizer(["", ""])
    state = _failed_state(paris)

    rendered = synthesizer.synthesize(state).render()

    positions = [rendered.index(section_heading(s)) for s in SECTION_ORDER]
    assert positions == sorted(positions)
    for error in state.errors().values():
        assert error not in rendered


def test_leaking_section_is_regenerated(paris):
    leaky = profile_text(bodies={Section.WEATHER: f"- {WEATHER_ERROR}"})
    gap = f"{section_heading(Section.WEATHER)}\n- Paris has mild, changeable weather"
    synthesizer, _ = _synthesizer([leaky, gap])

    profile = synthesizer.synthesize(_failed_state(paris))

    assert profile.sections[Section.WEATHER] == "- Paris has mild, changeable weather"


def test_unreachable_llm_is_fatal(paris):
    synthesizer, _ = _synthesizer([LLMUnavailableError("Gemini API call failed: timeout")])

    with pytest.raises(SynthesisUnavailableError):
        synthesizer.synthesize(_sourced_state(paris))


def test_gap_fill_outage_keeps_generated_sections(paris):
    synthesizer, llm = _synthesizer([profile_text(skip=[Section.FOOD]), LLMUnavailableError("timeout")])

    profile = synthesizer.synthesize(_sourced_state(paris))

    assert len(llm.prompts) == 2
    assert profile.sections[Section.OVERVIEW] == "- Sourced overview detail"
    assert profile.sections[Section.CONCERNS] == "- Sourced concerns detail"
    assert "- Le Procope (french)" in profile.sections[Section.FOOD]


def test_deterministic_fill_is_stable(paris):
    state = _failed_state(paris)
    handler = FallbackHandler()
    assert [handler.fill(s, state) for s in SECTION_ORDER] == [handler.fill(s, state) for s in SECTION_ORDER]
    assert all(handler.fill(s, state) for s in SECTION_ORDER)


def test_profile_rejects_missing_sections():
    with pytest.raises(ValueError):
        CityProfile(city="Paris", sections={Section.OVERVIEW: "x"})


def test_debug_report_lists_format_problems(paris, monkeypatch, capsys):
    monkeypatch.setattr(config, "DEBUG", True)
    reordered = profile_text(skip=[Section.OVERVIEW]) + f"\n\n{section_heading(Section.OVERVIEW)}\n- Late intro"
    synthesizer, _ = _synthesizer([reordered])

    profile = synthesizer.synthesize(_sourced_state(paris))

    assert profile.sections[Section.OVERVIEW] == "- Late intro"
    assert "FORMAT PROBLEMS: ['sections out of order']" in capsys.readouterr().out
