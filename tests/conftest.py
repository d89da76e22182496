"""Shared fakes and fixtures: no test touches the network, the wall clock, or a real LLM."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import pytest
import requests

from city_info.models.profile import SECTION_ORDER, Section, section_heading
from city_info.models.query import CityQuery
from city_info.models.source_result import SourceResult


class FakeResponse:
    def __init__(self, payload: Any = None, status_code: int = 200) -> None:
        self.payload = payload if payload is not None else {}
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self) -> Any:
        return self.payload


Route = Tuple[str, Any]


class FakeSession:
    """Routes GET/POST calls by URL substring.

    A route handler may be a payload (dict), a FakeResponse, an exception instance,
    or a callable(url, params, data) returning any of those.
    """

    def __init__(self, routes: List[Route]) -> None:
        self.routes = routes
        self.calls: List[dict] = []

    def get(self, url, params=None, headers=None, timeout=None):
        return self._dispatch("GET", url, params, None, headers)

    def post(self, url, data=None, headers=None, timeout=None):
        return self._dispatch("POST", url, None, data, headers)

    def _dispatch(self, method, url, params, data, headers):
        body = data.decode("utf-8") if isinstance(data, bytes) else data
        self.calls.append({"method": method, "url": url, "params": params, "data": body, "headers": headers})

        for key, handler in self.routes:
            if key in url:
                if callable(handler) and not isinstance(handler, FakeResponse):
                    handler = handler(url, params or {}, body or "")
                if isinstance(handler, Exception):
                    raise handler
                if isinstance(handler, FakeResponse):
                    return handler
                return FakeResponse(handler)

        raise requests.ConnectionError(f"no route for {url}")


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class StubAdapter:
    """Source adapter returning a canned result (or raising) and counting calls."""

    def __init__(self, result: Optional[SourceResult] = None, raises: Optional[Exception] = None,
                 on_fetch: Optional[Callable[[str], None]] = None, name: str = "") -> None:
        self.result = result
        self.raises = raises
        self.on_fetch = on_fetch
        self.name = name
        self.queries: List[CityQuery] = []

    def fetch(self, query: CityQuery) -> SourceResult:
        self.queries.append(query)
        if self.on_fetch is not None:
            self.on_fetch(self.name)
        if self.raises is not None:
            raise self.raises
        return self.result


class FakeLLMClient:
    """Stands in for GeminiClient: returns scripted answers in order, or raises."""

    def __init__(self, answers: List[Any]) -> None:
        self.answers = list(answers)
        self.prompts: List[str] = []
        self.systems: List[Optional[str]] = []

    def generate_text(self, prompt: str, system: Optional[str] = None) -> str:
        self.prompts.append(prompt)
        self.systems.append(system)
        answer = self.answers.pop(0) if self.answers else ""
        if isinstance(answer, Exception):
            raise answer
        return answer


def profile_text(skip: Iterable[Section] = (), bodies: Optional[Dict[Section, str]] = None) -> str:
    """LLM-style answer with one bullet per section, using the rendered headings."""
    bodies = bodies or {}
    blocks = [
        f"{section_heading(s)}\n{bodies.get(s, f'- Sourced {s.value} detail')}"
        for s in SECTION_ORDER
        if s not in skip
    ]
    return "\n\n".join(blocks)


@pytest.fixture
def paris() -> CityQuery:
    return CityQuery(city_name="Paris")


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
