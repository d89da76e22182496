# Role: Text-generation boundary for profile synthesis (google-genai). One call: generate_text(prompt, system).
# An unreachable model is fatal for a run (LLMUnavailableError); an empty answer is not (EmptyResponseError).

import os
from typing import Any, Dict, Optional

from google import genai


class LLMUnavailableError(RuntimeError):
    pass


class EmptyResponseError(RuntimeError):
    pass


class GeminiClient:
    # Upper bound for six sections of 3-6 bullets each.
    MAX_OUTPUT_TOKENS = 2048

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: float = 0.4,
    ) -> None:
        self.api_key = api_key or os.getenv("GEMINI_API_KEY")
        if not self.api_key:
            raise LLMUnavailableError("Missing GEMINI_API_KEY in environment or .env")

        self.model_name = model or os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
        self.temperature = temperature
        self.client = genai.Client(api_key=self.api_key)

    def _generation_config(self, system: Optional[str]) -> Dict[str, Any]:
        cfg: Dict[str, Any] = {
            "temperature": self.temperature,
            "max_output_tokens": self.MAX_OUTPUT_TOKENS,
        }
        if system:
            # Key line: orchestration rules travel as a system instruction, source data as the user turn.
            cfg["system_instruction"] = system
        return cfg

    def generate_text(self, prompt: str, system: Optional[str] = None) -> str:
        if not prompt or not prompt.strip():
            raise ValueError("Prompt must be non-empty.")

        try:
            resp = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=self._generation_config(system),
            )
        except Exception as e:
            raise LLMUnavailableError(f"Gemini API call failed: {e}") from e

        text = getattr(resp, "text", None)
        if not text or not text.strip():
            raise EmptyResponseError(f"{self.model_name} returned no text for the city profile.")

        return text.strip()
