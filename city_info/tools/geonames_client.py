# Role: GeoRegistry source adapter. Searches GeoNames for populated places, disambiguates to the best city-like
# candidate, enriches it by id (elevation/timezone), and substitutes built-in data when the live registry fails.

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import requests

import city_info.config as config
from city_info.models.query import CityQuery
from city_info.models.source_result import ErrorKind, GeoLocation, GeoRegistryResult
from city_info.utils.country_codes import country_code_for
from city_info.utils.fallback_cities import fallback_city

# Capital, admin seats (levels 1-4) and plain populated places.
CITY_FEATURE_CODES = frozenset({"PPL", "PPLA", "PPLA2", "PPLA3", "PPLA4", "PPLC"})


def _population(candidate: Mapping[str, Any]) -> int:
    try:
        return int(candidate.get("population") or 0)
    except (TypeError, ValueError):
        return 0


def select_best_match(candidates: List[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    # 1) Keep only city-like populated places
    # 2) Highest population wins (first one wins ties)
    # 3) Nothing city-like -> first raw result
    if not candidates:
        return None

    best: Optional[Mapping[str, Any]] = None
    for candidate in candidates:
        if candidate.get("fcl") == "P" and candidate.get("fcode") in CITY_FEATURE_CODES:
            if best is None or _population(candidate) > _population(best):
                best = candidate

    return best if best is not None else candidates[0]


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


class GeoNamesClient:
    SEARCH_URL = "https://secure.geonames.org/searchJSON"
    DETAIL_URL = "https://secure.geonames.org/getJSON"
    MAX_ROWS = 10

    def __init__(self, session: Optional[requests.Session] = None, username: Optional[str] = None) -> None:
        self.session = session or requests.Session()
        self._username = username

    @property
    def username(self) -> str:
        return self._username or config.GEONAMES_USERNAME

    def fetch(self, query: CityQuery) -> GeoRegistryResult:
        # 1) Search (optionally narrowed by country code)
        # 2) No candidate / unreachable registry -> built-in fallback table
        # 3) Enrich best match by id; enrichment wins on conflicting keys

        try:
            match = self._search(query)
        except (requests.RequestException, KeyError, TypeError, ValueError) as e:
            if config.DEBUG:
                print("GEONAMES search failed:", repr(e))
            match = None

        if match is None:
            return self._fallback(query)

        try:
            details: Dict[str, Any] = {}
            geoname_id = match.get("geonameId")
            if geoname_id:
                details = self._details(geoname_id)

            merged = {**match, **details}

            if config.DEBUG:
                print("\n--- GEONAMES TOOL ---")
                print("QUERY:", query.label)
                print("MATCH:", match.get("name"), match.get("fcode"), match.get("population"))
                print("ENRICHED KEYS:", sorted(details.keys()))
                print("---------------------\n")

            return self._format(merged)

        except (KeyError, TypeError, ValueError) as e:
            return GeoRegistryResult(
                error=f"Error fetching GeoNames data: {e}",
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

    def _search(self, query: CityQuery) -> Optional[Mapping[str, Any]]:
        params: Dict[str, Any] = {
            "q": query.city_name,
            "maxRows": self.MAX_ROWS,
            "username": self.username,
            "type": "json",
            "featureClass": "P",
            "orderby": "population",
        }
        code = country_code_for(query.country_hint)
        if code:
            params["country"] = code

        payload = self._get_json(self.SEARCH_URL, params)
        return select_best_match(payload.get("geonames") or [])

    def _details(self, geoname_id: Any) -> Dict[str, Any]:
        # Key line: enrichment is optional; a failed detail lookup keeps the search match as-is.
        params = {"geonameId": geoname_id, "username": self.username, "type": "json"}
        try:
            return self._get_json(self.DETAIL_URL, params)
        except (requests.RequestException, ValueError) as e:
            if config.DEBUG:
                print("GEONAMES detail lookup failed:", repr(e))
            return {}

    def _format(self, data: Mapping[str, Any]) -> GeoRegistryResult:
        timezone = data.get("timezone")
        return GeoRegistryResult(
            geoname_id=_optional_int(data.get("geonameId")),
            name=data.get("name"),
            ascii_name=data.get("asciiName"),
            location=GeoLocation(lat=_optional_float(data.get("lat")), lon=_optional_float(data.get("lng"))),
            country=data.get("countryName"),
            country_code=data.get("countryCode"),
            admin_division=data.get("adminName1") or None,
            population=_optional_int(data.get("population")),
            elevation=_optional_int(data.get("elevation")),
            timezone=timezone.get("timeZoneId") if isinstance(timezone, dict) else None,
            feature_class=data.get("fcl"),
            feature_code=data.get("fcode"),
        )

    def _fallback(self, query: CityQuery) -> GeoRegistryResult:
        # Role: richest error path. Either built-in facts + explanatory error, or an explicit "nothing" record
        # that tells the synthesizer to rely entirely on general knowledge.
        known = fallback_city(query.city_name)
        if known is not None:
            return GeoRegistryResult(
                name=known["name"],
                location=GeoLocation(lat=known["lat"], lon=known["lon"]),
                country=known["country"],
                country_code=known["country_code"],
                population=known["population"],
                timezone=known["timezone"],
                admin_division=known["admin_division"],
                error=f"Using fallback data - GeoNames API unavailable for {query.city_name}",
                error_kind=ErrorKind.FALLBACK_USED,
            )

        return GeoRegistryResult(
            name=query.city_name,
            country=query.country_hint,
            location=GeoLocation(),
            error=f"No GeoNames data found for {query.city_name} and no fallback available",
            error_kind=ErrorKind.NOT_FOUND,
        )
