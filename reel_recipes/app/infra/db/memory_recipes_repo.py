from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from reel_recipes.app.domain.models import Recipe, RecipeDraft
from reel_recipes.app.infra.db.base import RecipeStore
from reel_recipes.services.errors import DuplicateRecipeError


class InMemoryRecipeStore(RecipeStore):
    """Process-local store with the same uniqueness rule as the database."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_id: dict[str, Recipe] = {}
        self._by_source_url: dict[str, str] = {}

    def find_by_source_url(self, source_url: str) -> Optional[Recipe]:
        with self._lock:
            recipe_id = self._by_source_url.get(source_url)
            return self._by_id.get(recipe_id) if recipe_id else None

    def insert(self, draft: RecipeDraft) -> Recipe:
        recipe = Recipe(
            id=str(uuid4()),
            created_at=datetime.now(timezone.utc),
            title=draft.title,
            ingredients=list(draft.ingredients),
            steps=list(draft.steps),
            duration=draft.duration,
            category=draft.category,
            image_url=draft.image_url,
            source_url=draft.source_url,
        )
        with self._lock:
            if draft.source_url in self._by_source_url:
                raise DuplicateRecipeError(draft.source_url)
            self._by_id[recipe.id] = recipe
            self._by_source_url[draft.source_url] = recipe.id
        return recipe

    def get_by_id(self, recipe_id: str) -> Optional[Recipe]:
        with self._lock:
            return self._by_id.get(recipe_id)

    def list_recipes(self, limit: int = 20, offset: int = 0) -> list[Recipe]:
        with self._lock:
            recipes = sorted(self._by_id.values(), key=lambda r: r.created_at, reverse=True)
        return recipes[offset:offset + limit]

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)
