# Role: PlacesIndex source adapter (OpenStreetMap via Overpass). Resolves a city area, then fans out four
# categorized POI queries paced by a RateLimiter. Never raises: failures come back as empty lists / error.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

import requests

import city_info.config as config
from city_info.core.rate_limiter import RateLimiter
from city_info.models.query import CityQuery
from city_info.models.source_result import POI, CityArea, Coordinates, ErrorKind, PlacesIndexResult

# Overpass derives area ids from the source element id.
_RELATION_AREA_OFFSET = 3600000000
_WAY_AREA_OFFSET = 2400000000
_NODE_AROUND_METERS = 10000

_ELEMENT_PREFERENCE = ("relation", "way", "node")


@dataclass(frozen=True)
class CategoryQuery:
    category: str
    selectors: tuple
    limit: int
    default_name: str
    # Tag whose value becomes POI.type; None -> default_type.
    type_tag: Optional[str]
    default_type: str


CATEGORY_QUERIES = (
    CategoryQuery(
        category="restaurants",
        selectors=('node["amenity"="restaurant"]', 'way["amenity"="restaurant"]'),
        limit=20,
        default_name="Unknown",
        type_tag="cuisine",
        default_type="restaurant",
    ),
    CategoryQuery(
        category="museums",
        selectors=('node["tourism"="museum"]', 'way["tourism"="museum"]'),
        limit=15,
        default_name="Unknown Museum",
        type_tag=None,
        default_type="museum",
    ),
    CategoryQuery(
        category="parks",
        selectors=('node["leisure"="park"]', 'way["leisure"="park"]', 'relation["leisure"="park"]'),
        limit=15,
        default_name="Unknown Park",
        type_tag=None,
        default_type="park",
    ),
    CategoryQuery(
        category="leisure",
        selectors=(
            'node["leisure"~"sports_centre|swimming_pool|fitness_centre|golf_course|stadium"]',
            'way["leisure"~"sports_centre|swimming_pool|fitness_centre|golf_course|stadium"]',
        ),
        limit=10,
        default_name="Unknown Facility",
        type_tag="leisure",
        default_type="leisure",
    ),
)


_REGEX_METACHARS = frozenset(".[]{}()*+?^$|")


def name_pattern(value: str) -> str:
    # Exact, case-insensitive name match inside a quoted Overpass regex. Quotes and backslashes are dropped;
    # regex metacharacters get a backslash escape, doubled for the QL string literal.
    chars = []
    for ch in value:
        if ch in '"\\':
            continue
        chars.append("\\\\" + ch if ch in _REGEX_METACHARS else ch)
    return "^" + "".join(chars) + "$"


def extract_coordinates(element: Mapping[str, Any]) -> Optional[Coordinates]:
    # Prefer a direct point; ways/relations only have a computed centroid ("out center").
    lat, lon = element.get("lat"), element.get("lon")
    if lat is not None and lon is not None:
        return Coordinates(lat=lat, lon=lon)

    center = element.get("center") or {}
    if center.get("lat") is not None and center.get("lon") is not None:
        return Coordinates(lat=center["lat"], lon=center["lon"])

    return None


def pick_city_area(elements: List[Mapping[str, Any]], city_name: str) -> Optional[CityArea]:
    # First relation wins; otherwise first way; otherwise first node.
    best: Optional[Mapping[str, Any]] = None
    for kind in _ELEMENT_PREFERENCE:
        best = next((e for e in elements if e.get("type") == kind), None)
        if best is not None:
            break

    if best is None:
        return None

    tags = best.get("tags") or {}
    return CityArea(
        area_id=best.get("id"),
        element_type=best.get("type"),
        name=tags.get("name") or city_name,
        place_type=tags.get("place"),
        admin_level=tags.get("admin_level"),
        population=tags.get("population"),
        center=extract_coordinates(best),
    )


def area_scope(area: CityArea) -> Optional[str]:
    # Role: Overpass filter that restricts a selector to the resolved city.
    if area.area_id is None:
        return None
    if area.element_type == "relation":
        return f"(area:{_RELATION_AREA_OFFSET + area.area_id})"
    if area.element_type == "way":
        return f"(area:{_WAY_AREA_OFFSET + area.area_id})"
    if area.center is not None:
        return f"(around:{_NODE_AROUND_METERS},{area.center.lat},{area.center.lon})"
    return f"(area:{area.area_id})"


def to_poi(element: Mapping[str, Any], cq: CategoryQuery) -> POI:
    tags = element.get("tags") or {}
    poi_type = tags.get(cq.type_tag) if cq.type_tag else None
    return POI(
        name=tags.get("name") or cq.default_name,
        type=poi_type or cq.default_type,
        address=tags.get("addr:street"),
        phone=tags.get("phone"),
        website=tags.get("website"),
        opening_hours=tags.get("opening_hours"),
        coordinates=extract_coordinates(element),
    )


class OverpassClient:
    def __init__(
        self,
        session: Optional[requests.Session] = None,
        api_url: Optional[str] = None,
        limiter_factory: Optional[Callable[[], RateLimiter]] = None,
    ) -> None:
        self.session = session or requests.Session()
        self._api_url = api_url
        # Key line: one limiter per fetch(); concurrent runs never share pacing state.
        self._limiter_factory = limiter_factory or (lambda: RateLimiter(config.OVERPASS_MIN_INTERVAL_SECONDS))

    @property
    def api_url(self) -> str:
        return self._api_url or config.OSM_OVERPASS_API_URL

    def fetch(self, query: CityQuery) -> PlacesIndexResult:
        # 1) Resolve the city area (relation > way > node)
        # 2) Sequential category queries scoped to that area, each paced after the previous call
        # 3) cultural / historical / markets stay empty (not queried)

        # Key line: the area lookup and every category query share one pacing guard.
        limiter = self._limiter_factory()
        try:
            with limiter.slot():
                area = self._find_city_area(query.city_name)
        except requests.RequestException as e:
            return PlacesIndexResult(
                error=f"OpenStreetMap area lookup failed: {e}",
                error_kind=ErrorKind.UPSTREAM_UNAVAILABLE,
            )
        except (KeyError, TypeError, ValueError) as e:
            return PlacesIndexResult(
                error=f"Bad OpenStreetMap payload: {e}",
                error_kind=ErrorKind.UPSTREAM_UNAVAILABLE,
            )

        if area is None:
            return PlacesIndexResult(
                error=f"No OpenStreetMap area found for {query.city_name}",
                error_kind=ErrorKind.NOT_FOUND,
            )

        scope = area_scope(area)
        categories: Dict[str, List[POI]] = {}
        if scope is not None:
            for cq in CATEGORY_QUERIES:
                with limiter.slot():
                    categories[cq.category] = self._category(cq, scope)

        if config.DEBUG:
            print("\n--- OVERPASS TOOL ---")
            print("QUERY:", query.label)
            print("AREA:", area.model_dump())
            print("COUNTS:", {k: len(v) for k, v in categories.items()})
            print("PACING WAITS (s):", [round(w, 2) for w in limiter.waits])
            print("---------------------\n")

        return PlacesIndexResult(city_area=area, **categories)

    def _post(self, overpass_ql: str) -> List[Mapping[str, Any]]:
        r = self.session.post(
            self.api_url,
            data=overpass_ql.encode("utf-8"),
            headers={"Content-Type": "text/plain", "User-Agent": config.USER_AGENT},
            timeout=config.HTTP_TIMEOUT_SECONDS,
        )
        r.raise_for_status()
        return r.json().get("elements") or []

    def _find_city_area(self, city_name: str) -> Optional[CityArea]:
        name = name_pattern(city_name)
        overpass_ql = f"""
[out:json][timeout:25];
(
  relation["name"~"{name}",i]["place"~"city|town|village"]["admin_level"~"[4-8]"];
  way["name"~"{name}",i]["place"~"city|town|village"];
  node["name"~"{name}",i]["place"~"city|town|village"];
  relation["name"~"{name}",i]["boundary"="administrative"]["admin_level"~"[4-8]"];
);
out center;
""".strip()
        return pick_city_area(self._post(overpass_ql), city_name)

    def _category(self, cq: CategoryQuery, scope: str) -> List[POI]:
        # Key line: one failing category degrades to an empty list; the others still run.
        body = "\n".join(f"  {selector}{scope};" for selector in cq.selectors)
        overpass_ql = f"[out:json][timeout:25];\n(\n{body}\n);\nout center;"
        try:
            elements = self._post(overpass_ql)
            return [to_poi(element, cq) for element in elements[: cq.limit]]
        except (requests.RequestException, KeyError, TypeError, ValueError) as e:
            if config.DEBUG:
                print(f"OVERPASS {cq.category} query failed:", repr(e))
            return []
