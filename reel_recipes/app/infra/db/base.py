# reel_recipes/app/infra/db/base.py
"""
Abstract base class for the recipe store.
This interface allows easy swapping between different storage backends.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from reel_recipes.app.domain.models import Recipe, RecipeDraft


class RecipeStore(ABC):
    """
    Abstract interface for persisted recipes.

    Implementations:
    - SupabaseRecipeStore: Postgres table reached through Supabase
    - InMemoryRecipeStore: process-local dict, for local runs and tests
    """

    @abstractmethod
    def find_by_source_url(self, source_url: str) -> Optional[Recipe]:
        """
        Look up the recipe extracted from a normalized video URL.

        Args:
            source_url: Normalized URL (the dedup key)

        Returns:
            The recipe, or None if nothing was extracted from that URL yet

        Raises:
            StorageError: If the store cannot be queried
        """
        pass

    @abstractmethod
    def insert(self, draft: RecipeDraft) -> Recipe:
        """
        Persist a new recipe. The store assigns ``id`` and ``created_at``.

        Args:
            draft: The extraction result, ``source_url`` already normalized

        Returns:
            The stored recipe

        Raises:
            DuplicateRecipeError: If a recipe already exists for ``source_url``
            StorageError: For any other persistence failure
        """
        pass

    @abstractmethod
    def get_by_id(self, recipe_id: str) -> Optional[Recipe]:
        """Fetch a recipe by its identifier, or None if it does not exist."""
        pass

    @abstractmethod
    def list_recipes(self, limit: int = 20, offset: int = 0) -> list[Recipe]:
        """Return recipes newest first."""
        pass
