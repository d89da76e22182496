# Role: Safety filter that enforces "the reader never sees raw source errors".
# Drops lines that leak adapter error strings or tool/API chatter; the synthesizer refills anything left empty.

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List

from city_info.models.profile import Section
from city_info.models.state import PipelineState


@dataclass(frozen=True)
class TrustResult:
    sections: Dict[Section, str]
    flagged: bool
    reasons: List[str]


class TrustLayer:
    _LEAK_PATTERNS = (
        r"\bhttp error\b",
        r"\berror fetching\b",
        r"\brequest failed\b",
        r"\bfallback data\b",
        r"\bno fallback available\b",
        r"\bapi (?:is )?unavailable\b",
        r"\btraceback\b",
        r"\bstatus code \d{3}\b",
        r"\b(?:geonames|overpass|open-meteo) (?:api|tool)\b",
        r"\b(?:wikipedia|weather|openstreetmap) tool\b",
    )

    def apply(self, *, sections: Dict[Section, str], state: PipelineState) -> TrustResult:
        # 1) Collect the exact error strings recorded in this run
        # 2) Drop any line containing one of them, or a generic error/tool phrase
        # 3) Report which sections were touched
        error_strings = [e.lower() for e in state.errors().values() if e]
        reasons: List[str] = []
        cleaned: Dict[Section, str] = {}

        for section, body in sections.items():
            kept: List[str] = []
            for line in (body or "").splitlines():
                if self._leaks(line, error_strings):
                    reasons.append(f"error_leak:{section.value}")
                    continue
                kept.append(line)
            cleaned[section] = "\n".join(kept).strip()

        return TrustResult(sections=cleaned, flagged=bool(reasons), reasons=reasons)

    def _leaks(self, line: str, error_strings: List[str]) -> bool:
        low = line.lower()
        if any(err in low for err in error_strings):
            return True
        return any(re.search(p, low) for p in self._LEAK_PATTERNS)
