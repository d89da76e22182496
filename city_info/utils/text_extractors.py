# Role: Deterministic keyword extractors over an encyclopedia intro. Each category owns a fixed keyword list;
# matching sentences are a best-effort signal for the synthesizer (empty lists are valid output).

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

_MIN_SENTENCE_CHARS = 20


@dataclass(frozen=True)
class KeywordExtractor:
    keywords: Tuple[str, ...]
    limit: int

    def extract(self, text: str) -> List[str]:
        # 1) For each keyword found anywhere in the text (case-insensitive)
        # 2) capture the first sentence containing it that is long enough
        # 3) dedupe (first discovery wins), then cap
        if not text:
            return []

        text_lower = text.lower()
        sentences = text.split(".")
        found: List[str] = []

        for keyword in self.keywords:
            if keyword not in text_lower:
                continue
            for sentence in sentences:
                cleaned = sentence.strip()
                if keyword in sentence.lower() and len(cleaned) > _MIN_SENTENCE_CHARS:
                    found.append(cleaned)
                    break

        # Key line: dict.fromkeys keeps insertion order, so dedupe preserves discovery order.
        return list(dict.fromkeys(found))[: self.limit]


ACTIVITIES = KeywordExtractor(
    keywords=(
        "museum", "park", "theater", "concert", "festival", "market",
        "shopping", "nightlife", "entertainment", "sports", "recreation",
        "gallery", "exhibition", "tour", "walking", "cycling",
    ),
    limit=5,
)

CUISINE = KeywordExtractor(
    keywords=(
        "cuisine", "food", "restaurant", "dish", "traditional", "local",
        "specialty", "famous", "popular", "dining", "culinary",
    ),
    limit=3,
)

ATTRACTIONS = KeywordExtractor(
    keywords=(
        "landmark", "monument", "building", "church", "cathedral",
        "palace", "castle", "bridge", "tower", "square", "attraction",
        "historic", "famous", "notable", "important",
    ),
    limit=5,
)

SAFETY = KeywordExtractor(
    keywords=(
        "crime", "safety", "security", "caution", "warning", "danger",
        "risk", "precaution", "emergency", "police", "health", "medical",
    ),
    limit=3,
)

EXTRACTORS: Dict[str, KeywordExtractor] = {
    "activities": ACTIVITIES,
    "cuisine": CUISINE,
    "attractions": ATTRACTIONS,
    "safety": SAFETY,
}


def extract_categories(texts: List[str]) -> Dict[str, List[str]]:
    """Run every extractor over each text and merge per category (deduplicated, first discovery first, capped)."""
    merged: Dict[str, List[str]] = {name: [] for name in EXTRACTORS}
    for text in texts:
        for name, extractor in EXTRACTORS.items():
            merged[name].extend(extractor.extract(text))
    return {name: list(dict.fromkeys(items))[: EXTRACTORS[name].limit] for name, items in merged.items()}
