# Role: Encyclopedia source adapter. Searches Wikipedia for the city page, fetches the REST summary and the
# plain-text intro, and runs the keyword extractors. Never raises: failures come back as EncyclopediaResult.error.

from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

import city_info.config as config
from city_info.models.query import CityQuery
from city_info.models.source_result import EncyclopediaResult, ErrorKind
from city_info.utils.text_extractors import extract_categories


class WikipediaClient:
    API_URL = "https://en.wikipedia.org/w/api.php"
    SUMMARY_URL = "https://en.wikipedia.org/api/rest_v1/page/summary/{title}"
    SEARCH_LIMIT = 5

    def __init__(self, session: Optional[requests.Session] = None) -> None:
        self.session = session or requests.Session()

    def fetch(self, query: CityQuery) -> EncyclopediaResult:
        # 1) Search "City, Country" -> first hit title
        # 2) Fetch summary + plain-text intro for that title
        # 3) Extract activities / cuisine / attractions / safety sentences from the intro

        try:
            title = self._search_title(query.label)
            if not title:
                return EncyclopediaResult(
                    error=f"No Wikipedia page found for {query.city_name}",
                    error_kind=ErrorKind.NOT_FOUND,
                )

            summary = self._summary(title)
            intros = self._intro_extracts(title)
            categories = extract_categories(intros)

            if config.DEBUG:
                print("\n--- WIKIPEDIA TOOL ---")
                print("QUERY:", query.label)
                print("TITLE:", title)
                print("INTRO CHARS:", sum(len(t) for t in intros))
                print("EXTRACTED:", {k: len(v) for k, v in categories.items()})
                print("----------------------\n")

            return EncyclopediaResult(page_title=title, summary=summary, **categories)

        except requests.RequestException as e:
            return EncyclopediaResult(
                error=f"Wikipedia request failed: {e}",
                error_kind=ErrorKind.UPSTREAM_UNAVAILABLE,
            )
        except (KeyError, TypeError, ValueError) as e:
            return EncyclopediaResult(
                error=f"Bad Wikipedia payload: {e}",
                error_kind=ErrorKind.UPSTREAM_UNAVAILABLE,
            )

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        r = self.session.get(
            url,
            params=params,
            headers={"User-Agent": config.USER_AGENT},
            timeout=config.HTTP_TIMEOUT_SECONDS,
        )
        r.raise_for_status()
        return r.json()

    def _search_title(self, term: str) -> Optional[str]:
        params = {
            "action": "query",
            "format": "json",
            "list": "search",
            "srsearch": term,
            "srlimit": self.SEARCH_LIMIT,
        }
        payload = self._get_json(self.API_URL, params)
        hits = (payload.get("query") or {}).get("search") or []
        return hits[0]["title"] if hits else None

    def _summary(self, title: str) -> str:
        payload = self._get_json(self.SUMMARY_URL.format(title=quote(title, safe="")))
        return payload.get("extract") or ""

    def _intro_extracts(self, title: str) -> List[str]:
        params = {
            "action": "query",
            "format": "json",
            "prop": "extracts",
            "exintro": "true",
            "explaintext": "true",
            "titles": title,
        }
        payload = self._get_json(self.API_URL, params)
        pages = (payload.get("query") or {}).get("pages") or {}

        # Key line: MediaWiki keys pages by page id; every returned extract is scanned.
        extracts = [(page or {}).get("extract") or "" for page in pages.values()]
        return [e for e in extracts if e]
