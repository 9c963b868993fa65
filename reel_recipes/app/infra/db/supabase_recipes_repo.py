from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from supabase import Client

from reel_recipes.app.domain.models import Recipe, RecipeDraft
from reel_recipes.app.infra.db.base import RecipeStore
from reel_recipes.services.errors import DuplicateRecipeError, StorageError

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: str | datetime | None) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            normalized = value.replace("Z", "+00:00") if value.endswith("Z") else value
            return datetime.fromisoformat(normalized)
        except ValueError:
            pass
    return _now_utc()


def _safe_str(value: object) -> str | None:
    return str(value) if value else None


def _string_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def _row_to_recipe(row: dict[str, Any]) -> Recipe:
    return Recipe(
        id=str(row["id"]),
        created_at=_parse_datetime(row.get("created_at")),
        title=str(row.get("title") or ""),
        ingredients=_string_list(row.get("ingredients")),
        steps=_string_list(row.get("steps")),
        duration=_safe_str(row.get("duration")),
        category=_safe_str(row.get("category")),
        image_url=_safe_str(row.get("image_url")),
        source_url=_safe_str(row.get("source_url")),
        edited_by_user=bool(row.get("edited_by_user")),
    )


def _draft_to_row(draft: RecipeDraft) -> dict[str, Any]:
    return {
        "title": draft.title,
        "ingredients": list(draft.ingredients),
        "steps": list(draft.steps),
        "duration": draft.duration,
        "category": draft.category,
        "image_url": draft.image_url,
        "source_url": draft.source_url,
        "edited_by_user": False,
    }


def _is_unique_violation(error: Exception) -> bool:
    code = getattr(error, "code", None)
    if code == UNIQUE_VIOLATION:
        return True
    return "duplicate key value" in str(error)


class SupabaseRecipeStore(RecipeStore):
    """Recipe store backed by the Supabase ``recipes`` table.

    Relies on a unique index on ``source_url`` so that concurrent inserts
    from different processes cannot create two rows for one video.
    """

    TABLE_NAME = "recipes"

    def __init__(self, client: Client, table_name: str | None = None):
        self._client = client
        self._table_name = table_name or self.TABLE_NAME
        logger.info("SupabaseRecipeStore initialized table=%s", self._table_name)

    def _table(self):
        return self._client.table(self._table_name)

    def find_by_source_url(self, source_url: str) -> Optional[Recipe]:
        try:
            result = (
                self._table()
                .select("*")
                .eq("source_url", source_url)
                .limit(1)
                .execute()
            )
        except Exception as error:
            logger.error("Error looking up recipe source_url=%s: %s", source_url, error)
            raise StorageError("find_by_source_url", str(error)) from error

        rows = result.data or []
        return _row_to_recipe(rows[0]) if rows else None

    def insert(self, draft: RecipeDraft) -> Recipe:
        try:
            result = self._table().insert(_draft_to_row(draft)).execute()
        except Exception as error:
            if _is_unique_violation(error):
                logger.warning("Recipe already stored for source_url=%s", draft.source_url)
                raise DuplicateRecipeError(draft.source_url) from error
            logger.error("Error inserting recipe source_url=%s: %s", draft.source_url, error)
            raise StorageError("insert", str(error)) from error

        if not result.data:
            raise StorageError("insert", "no row returned")

        recipe = _row_to_recipe(result.data[0])
        logger.info("Inserted recipe id=%s source_url=%s", recipe.id, recipe.source_url)
        return recipe

    def get_by_id(self, recipe_id: str) -> Optional[Recipe]:
        try:
            result = self._table().select("*").eq("id", recipe_id).limit(1).execute()
        except Exception as error:
            logger.error("Error fetching recipe id=%s: %s", recipe_id, error)
            raise StorageError("get_by_id", str(error)) from error

        rows = result.data or []
        return _row_to_recipe(rows[0]) if rows else None

    def list_recipes(self, limit: int = 20, offset: int = 0) -> list[Recipe]:
        try:
            result = (
                self._table()
                .select("*")
                .order("created_at", desc=True)
                .range(offset, offset + limit - 1)
                .execute()
            )
        except Exception as error:
            logger.error("Error listing recipes: %s", error)
            raise StorageError("list_recipes", str(error)) from error

        return [_row_to_recipe(row) for row in result.data or []]
