# Role: Produces raw profile text from the LLM. Builds system + synthesis prompts from the pipeline state,
# calls the model, then cleans up common "assistant preamble" artifacts. An empty answer comes back as "".

from __future__ import annotations

from typing import List, Optional

import city_info.config as config
from city_info.llm.gemini_client import EmptyResponseError, GeminiClient
from city_info.models.profile import Section
from city_info.models.state import PipelineState
from city_info.prompts.synthesis_prompt import build_gap_fill_prompt, build_synthesis_prompt
from city_info.prompts.system_prompt import build_system_prompt


class ProfileGenerator:
    def __init__(self, client: Optional[GeminiClient] = None) -> None:
        # Key line: lazy-init so importing/constructing the pipeline never needs GEMINI_API_KEY.
        self._client = client

    def _get_client(self) -> GeminiClient:
        if self._client is None:
            self._client = GeminiClient()
        return self._client

    def _clean_llm_output(self, text: str) -> str:
        # Role: remove common filler/preambles and code fences without changing actual content.
        if not text:
            return ""

        text = text.replace("```markdown", "").replace("```", "")
        lines = [ln.rstrip() for ln in text.strip().splitlines()]

        drop_prefixes = ("okay", "ok", "sure", "alright", "here's", "here is", "i will", "i'll")

        cleaned: List[str] = []
        skipping = True
        for ln in lines:
            low = ln.strip().lower().rstrip(":,.-! ")
            if skipping:
                if not low:
                    continue
                if any(low.startswith(p) for p in drop_prefixes) and len(low) <= 80:
                    continue
            skipping = False
            cleaned.append(ln)

        return "\n".join(cleaned).strip()

    def _complete(self, prompt: str, label: str) -> str:
        # Key line: LLMUnavailableError propagates (fatal); an empty answer is just "nothing usable".
        try:
            raw = self._get_client().generate_text(prompt, system=build_system_prompt())
        except EmptyResponseError:
            raw = ""

        if config.DEBUG:
            preview = (raw or "").strip()
            print(f"\n--- PROFILE GENERATOR ({label}) ---")
            print("RAW RESPONSE (preview):\n", preview[:600] + ("..." if len(preview) > 600 else ""))
            print("-------------------------\n")

        return self._clean_llm_output(raw or "")

    def generate(self, state: PipelineState) -> str:
        # 1) Build the synthesis prompt from all four (possibly failed) results
        # 2) Call LLM
        # 3) Clean output
        prompt = build_synthesis_prompt(
            state.query,
            encyclopedia=state.encyclopedia,
            geo=state.geo,
            places=state.places,
            weather=state.weather,
        )
        return self._complete(prompt, "synthesis")

    def generate_sections(self, state: PipelineState, missing: List[Section]) -> str:
        prompt = build_gap_fill_prompt(state.query, missing)
        return self._complete(prompt, "gap-fill")
