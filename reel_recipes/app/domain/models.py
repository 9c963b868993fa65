# reel_recipes/app/domain/models.py
"""
Domain models for extracted recipes.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

DEFAULT_TITLE = "Untitled Recipe"
DEFAULT_CATEGORY = "General"


@dataclass
class RecipeDraft:
    """An extraction result that has not been assigned a store identity yet."""
    title: str
    source_url: str
    ingredients: list[str] = field(default_factory=list)
    steps: list[str] = field(default_factory=list)
    duration: Optional[str] = None  # free text, e.g. "20 minutes"
    category: Optional[str] = None
    image_url: Optional[str] = None

    @property
    def missing_sections(self) -> list[str]:
        """Sections that must hold at least one line before persisting."""
        missing = []
        if not self.ingredients:
            missing.append("ingredients")
        if not self.steps:
            missing.append("steps")
        return missing


@dataclass
class Recipe:
    """A persisted recipe, unique per normalized ``source_url``."""
    id: str
    created_at: datetime
    title: str
    ingredients: list[str]
    steps: list[str]
    duration: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    source_url: Optional[str] = None
    edited_by_user: bool = False


@dataclass
class ProcessResult:
    """Outcome of one pipeline run."""
    recipe: Recipe
    cached: bool
