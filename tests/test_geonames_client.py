"""Tests for the GeoNames adapter: disambiguation, enrichment, fallback."""

import requests

from city_info.models.query import CityQuery
from city_info.models.source_result import ErrorKind
from city_info.tools.geonames_client import GeoNamesClient, select_best_match
from city_info.utils.country_codes import country_code_for
from conftest import FakeResponse, FakeSession


def test_selector_prefers_capital_with_highest_population():
    candidates = [
        {"name": "Smallville", "fcl": "P", "fcode": "PPL", "population": 500},
        {"name": "Capital", "fcl": "P", "fcode": "PPLC", "population": 2_000_000},
    ]
    assert select_best_match(candidates)["name"] == "Capital"


def test_selector_falls_back_to_first_raw_result():
    candidates = [
        {"name": "Section", "fcl": "P", "fcode": "PPLX", "population": 10},
        {"name": "Ruins", "fcl": "P", "fcode": "PPLQ", "population": 99},
    ]
    assert select_best_match(candidates)["name"] == "Section"


def test_selector_handles_missing_population_and_empty_input():
    candidates = [
        {"name": "A", "fcl": "P", "fcode": "PPL"},
        {"name": "B", "fcl": "P", "fcode": "PPLA", "population": "1200"},
    ]
    assert select_best_match(candidates)["name"] == "B"
    assert select_best_match([]) is None


def test_country_code_lookup():
    assert country_code_for("France") == "FR"
    assert country_code_for("united kingdom") == "GB"
    assert country_code_for("jp") == "JP"
    assert country_code_for("Narnia") is None
    assert country_code_for(None) is None


def test_fetch_merges_enrichment_over_search_match():
    search = {
        "geonames": [
            {"geonameId": 1, "name": "Paris", "fcl": "P", "fcode": "PPL", "population": 100, "lat": "33.6", "lng": "-95.5"},
            {
                "geonameId": 2988507,
                "name": "Paris",
                "asciiName": "Paris",
                "fcl": "P",
                "fcode": "PPLC",
                "population": 2138551,
                "lat": "48.85341",
                "lng": "2.3488",
                "countryName": "France",
                "countryCode": "FR",
                "adminName1": "Île-de-France",
            },
        ]
    }
    details = {
        "geonameId": 2988507,
        "name": "Paris",
        "population": 2138551,
        "elevation": 42,
        "timezone": {"timeZoneId": "Europe/Paris", "gmtOffset": 1},
    }
    session = FakeSession([("searchJSON", search), ("getJSON", details)])

    result = GeoNamesClient(session=session, username="tester").fetch(CityQuery(city_name="Paris", country_hint="France"))

    assert result.ok
    assert result.geoname_id == 2988507
    assert result.feature_code == "PPLC"
    assert result.location.lat == 48.85341 and result.location.lon == 2.3488
    assert result.elevation == 42
    assert result.timezone == "Europe/Paris"
    assert result.country_code == "FR"

    search_params = session.calls[0]["params"]
    assert search_params["country"] == "FR"
    assert search_params["featureClass"] == "P"
    assert search_params["username"] == "tester"
    assert session.calls[1]["params"]["geonameId"] == 2988507


def test_failed_enrichment_keeps_base_match():
    search = {"geonames": [{"geonameId": 7, "name": "Lyon", "fcl": "P", "fcode": "PPLA", "population": 500000}]}
    session = FakeSession([("searchJSON", search), ("getJSON", FakeResponse(status_code=500))])

    result = GeoNamesClient(session=session).fetch(CityQuery(city_name="Lyon"))

    assert result.ok
    assert result.name == "Lyon"
    assert result.population == 500000
    assert result.elevation is None


def test_unreachable_registry_uses_fallback_table():
    session = FakeSession([("searchJSON", requests.ConnectionError("boom"))])

    result = GeoNamesClient(session=session).fetch(CityQuery(city_name="tokyo"))

    assert result.population == 14000000
    assert result.country_code == "JP"
    assert result.error is not None
    assert result.error_kind == ErrorKind.FALLBACK_USED


def test_zero_candidates_uses_fallback_table():
    session = FakeSession([("searchJSON", {"geonames": []})])

    result = GeoNamesClient(session=session).fetch(CityQuery(city_name="London"))

    assert result.name == "London"
    assert result.location.lat == 51.5074
    assert result.error == "Using fallback data - GeoNames API unavailable for London"


def test_unknown_city_without_fallback_reports_no_data():
    session = FakeSession([("searchJSON", {"geonames": []})])

    result = GeoNamesClient(session=session).fetch(CityQuery(city_name="Atlantis", country_hint="Greece"))

    assert result.name == "Atlantis"
    assert result.country == "Greece"
    assert result.location.lat is None and result.location.lon is None
    assert result.error == "No GeoNames data found for Atlantis and no fallback available"
    assert result.error_kind == ErrorKind.NOT_FOUND
