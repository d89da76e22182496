# Role: Terminal pipeline stage. Validating wrapper around the profile generator that guarantees a complete,
# six-section CityProfile for any combination of source failures. Only an LLM that is unreachable for the
# first generation is fatal.

from __future__ import annotations

from typing import Dict, Optional

import city_info.config as config
from city_info.core.fallback_handler import FallbackHandler
from city_info.core.trust_layer import TrustLayer
from city_info.core.validator import ProfileValidator, parse_sections
from city_info.llm.gemini_client import LLMUnavailableError
from city_info.llm.profile_generator import ProfileGenerator
from city_info.models.profile import SECTION_ORDER, CityProfile, Section
from city_info.models.state import PipelineState


class SynthesisUnavailableError(RuntimeError):
    pass


class Synthesizer:
    def __init__(
        self,
        generator: Optional[ProfileGenerator] = None,
        validator: Optional[ProfileValidator] = None,
        trust_layer: Optional[TrustLayer] = None,
        fallback_handler: Optional[FallbackHandler] = None,
    ) -> None:
        self.generator = generator or ProfileGenerator()
        self.validator = validator or ProfileValidator()
        self.trust_layer = trust_layer or TrustLayer()
        self.fallback_handler = fallback_handler or FallbackHandler()

    def synthesize(self, state: PipelineState) -> CityProfile:
        # 1) Generate from all four results -> parse sections -> trust pass
        # 2) Missing sections -> one gap-fill generation for just those
        # 3) Still missing -> deterministic fill from sourced facts + general guidance
        # 4) Render in fixed order

        # Key line: only the first generation is fatal; a gap-fill outage degrades to deterministic fill.
        try:
            sections = self._trusted(parse_sections(self.generator.generate(state)), state)
        except LLMUnavailableError as e:
            raise SynthesisUnavailableError(str(e)) from e

        validation = self.validator.validate(sections)
        problems = list(validation.problems)
        if not validation.ok:
            try:
                extra = parse_sections(self.generator.generate_sections(state, validation.missing_sections))
            except LLMUnavailableError as e:
                if config.DEBUG:
                    print("[SYNTHESIZER] gap-fill unavailable:", repr(e))
                extra = {}
            extra = self._trusted(extra, state)
            for section in validation.missing_sections:
                if extra.get(section):
                    sections[section] = extra[section]

        validation = self.validator.validate(sections)
        for section in validation.missing_sections:
            sections[section] = self.fallback_handler.fill(section, state)

        if config.DEBUG:
            print("\n--- SYNTHESIZER ---")
            print("CITY:", state.query.label)
            print("SOURCE ERRORS:", state.errors())
            print("FORMAT PROBLEMS:", problems)
            print("DETERMINISTIC SECTIONS:", [s.value for s in validation.missing_sections])
            print("-------------------\n")

        return CityProfile(city=state.query.label, sections={s: sections[s] for s in SECTION_ORDER})

    def _trusted(self, sections: Dict[Section, str], state: PipelineState) -> Dict[Section, str]:
        trust = self.trust_layer.apply(sections=sections, state=state)
        if config.DEBUG and trust.flagged:
            print("[TRUST_LAYER] flagged:", trust.reasons)
        return {s: body for s, body in trust.sections.items() if body}
