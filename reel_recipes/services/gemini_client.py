from __future__ import annotations

import json
import logging

from google import genai
from google.genai import types

from .errors import CompletionServiceError, RateLimitedError, ServiceError

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "gemini-2.5-flash"
DEFAULT_TEMPERATURE = 0.7


class GeminiConfigurationError(ServiceError):
    pass


def _is_rate_limited_error(exc: Exception) -> bool:
    status_code = getattr(exc, "code", None) or getattr(exc, "status_code", None)
    if status_code == 429:
        return True
    return "RESOURCE_EXHAUSTED" in str(exc)


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model_name: str = DEFAULT_MODEL_NAME,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> None:
        if not api_key:
            raise GeminiConfigurationError("Missing Gemini API key.")
        self.model_name = model_name
        self.temperature = temperature
        self._client = genai.Client(api_key=api_key)

    def _serialize_prompt(self, user_prompt: str | dict[str, str | int | float | list | dict]) -> str:
        if isinstance(user_prompt, str):
            return user_prompt
        try:
            return json.dumps(user_prompt, indent=2, ensure_ascii=False)
        except TypeError:
            return str(user_prompt)

    def generate_json(
        self,
        user_prompt: str | dict[str, str | int | float | list | dict],
        system_instruction: str,
    ) -> str | None:
        """Run one single-turn completion and return the raw JSON text, if any."""
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=self.temperature,
            response_mime_type="application/json",
        )
        try:
            response = self._client.models.generate_content(
                model=self.model_name,
                contents=self._serialize_prompt(user_prompt),
                config=config,
            )
        except Exception as err:
            if _is_rate_limited_error(err):
                raise RateLimitedError(f"Gemini rate limit reached: {err}") from err
            logger.error("Gemini request failed model=%s error=%s", self.model_name, err)
            raise CompletionServiceError(f"Gemini request failed: {err}") from err

        return response.text
