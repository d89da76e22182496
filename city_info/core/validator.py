# Role: Output gatekeeper for synthesis. Splits generated text into the six labeled sections and reports
# which sections are missing or empty, so the synthesizer can gap-fill instead of returning an incomplete profile.

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from city_info.models.profile import SECTION_ORDER, SECTION_TITLES, Section

# Heading line: optional markdown hashes, list number, bold and emoji (in either nesting), the title, optional colon.
_HEADING_PATTERNS = {
    section: re.compile(
        r"^\s*(?:#+\s*)?(?:\d+[.)]\s*)?\**\s*(?:[^\w\s*#]+\s*)?\**\s*(?:\d+[.)]\s*)?" + re.escape(title) + r"\s*:?\s*\**\s*:?\s*$",
        re.IGNORECASE,
    )
    for section, title in SECTION_TITLES.items()
}


def _heading_section(line: str) -> Optional[Section]:
    for section, pattern in _HEADING_PATTERNS.items():
        if pattern.match(line):
            return section
    return None


def parse_sections(text: str) -> Dict[Section, str]:
    # 1) Walk lines; a heading line opens a section
    # 2) Collect body lines until the next heading
    # 3) First occurrence of a section wins (repeated headings are ignored)
    sections: Dict[Section, str] = {}
    current: Optional[Section] = None
    body: List[str] = []

    def _close() -> None:
        if current is not None and current not in sections:
            sections[current] = "\n".join(body).strip()

    for line in (text or "").splitlines():
        section = _heading_section(line)
        if section is not None:
            _close()
            current = section
            body = []
            continue
        if current is not None:
            body.append(line)

    _close()
    return sections


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    missing_sections: List[Section]
    problems: List[str]


class ProfileValidator:
    def validate(self, sections: Dict[Section, str]) -> ValidationResult:
        # 1) Collect sections that are absent or blank
        # 2) Note ordering problems (informational; rendering re-orders anyway)
        # 3) ok=True only if nothing is missing
        missing = [s for s in SECTION_ORDER if not (sections.get(s) or "").strip()]
        problems: List[str] = []

        present = [s for s in sections if s in SECTION_ORDER]
        if present != sorted(present, key=SECTION_ORDER.index):
            problems.append("sections out of order")

        return ValidationResult(ok=not missing, missing_sections=missing, problems=problems)
