from __future__ import annotations

import json
import logging
from typing import Optional, Protocol

from pydantic import BaseModel, ConfigDict, StrictStr, field_validator
from pydantic import ValidationError as SchemaError

from reel_recipes.app.domain.models import DEFAULT_CATEGORY, DEFAULT_TITLE, RecipeDraft

from .errors import EmptyCompletionError, ExtractionError, MalformedCompletionError
from .images import category_image
from .prompt import SYSTEM_PROMPT, build_user_prompt

logger = logging.getLogger(__name__)


class CompletionClient(Protocol):
    def generate_json(self, user_prompt: str, system_instruction: str) -> Optional[str]:
        ...


class ExtractedRecipe(BaseModel):
    """Shape the model is asked to return. Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[StrictStr] = None
    ingredients: Optional[list[StrictStr]] = None
    steps: Optional[list[StrictStr]] = None
    duration: Optional[StrictStr] = None
    category: Optional[StrictStr] = None

    @field_validator("title", "duration", "category")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("ingredients", "steps")
    @classmethod
    def _clean_lines(cls, value: Optional[list[str]]) -> list[str]:
        if not value:
            return []
        return [line.strip() for line in value if line.strip()]


def parse_recipe_payload(content: str) -> ExtractedRecipe:
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as err:
        raise MalformedCompletionError(f"Completion is not valid JSON: {err}") from err

    if not isinstance(payload, dict):
        raise MalformedCompletionError(
            f"Completion must be a JSON object, got {type(payload).__name__}"
        )

    try:
        return ExtractedRecipe.model_validate(payload)
    except SchemaError as err:
        raise MalformedCompletionError(
            f"Completion does not match the recipe schema: {err.error_count()} error(s)"
        ) from err


class RecipeExtractor:
    """Turns a transcript into a recipe draft through a JSON completion."""

    def __init__(self, client: CompletionClient, system_prompt: str = SYSTEM_PROMPT) -> None:
        self._client = client
        self._system_prompt = system_prompt

    def extract(self, transcript: str, source_url: str) -> RecipeDraft:
        if not transcript or not transcript.strip():
            raise ExtractionError(f"Empty transcript for {source_url}")

        content = self._client.generate_json(build_user_prompt(transcript), self._system_prompt)
        if not content or not content.strip():
            raise EmptyCompletionError("No response from the completion service")

        parsed = parse_recipe_payload(content)
        category = parsed.category or DEFAULT_CATEGORY
        draft = RecipeDraft(
            title=parsed.title or DEFAULT_TITLE,
            ingredients=parsed.ingredients or [],
            steps=parsed.steps or [],
            duration=parsed.duration,
            category=category,
            image_url=category_image(category),
            source_url=source_url,
        )
        logger.info(
            "extract.ok url=%s title=%r ingredients=%d steps=%d",
            source_url,
            draft.title,
            len(draft.ingredients),
            len(draft.steps),
        )
        return draft
