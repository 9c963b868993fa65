from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from reel_recipes.app.domain.models import Recipe


class ProcessRecipeRequest(BaseModel):
    # Optional so a missing URL reaches the pipeline and gets its own message
    url: Optional[str] = None


class RecipeResponse(BaseModel):
    id: str
    createdAt: datetime
    title: str
    imageUrl: Optional[str] = None
    duration: Optional[str] = None
    category: Optional[str] = None
    ingredients: list[str] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)
    sourceUrl: Optional[str] = None
    editedByUser: bool = False

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> "RecipeResponse":
        return cls(
            id=recipe.id,
            createdAt=recipe.created_at,
            title=recipe.title,
            imageUrl=recipe.image_url,
            duration=recipe.duration,
            category=recipe.category,
            ingredients=list(recipe.ingredients),
            steps=list(recipe.steps),
            sourceUrl=recipe.source_url,
            editedByUser=recipe.edited_by_user,
        )


class ProcessRecipeResponse(BaseModel):
    recipe: RecipeResponse
    cached: bool


class RecipeListResponse(BaseModel):
    items: list[RecipeResponse]
    limit: int
    offset: int


class ErrorResponse(BaseModel):
    error: str
