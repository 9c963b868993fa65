# reel_recipes/app/deps.py

from __future__ import annotations

from functools import lru_cache

from supabase import Client, create_client

from reel_recipes.app.config import Settings, get_settings
from reel_recipes.app.infra.db.base import RecipeStore
from reel_recipes.app.infra.db.memory_recipes_repo import InMemoryRecipeStore
from reel_recipes.app.infra.db.supabase_recipes_repo import SupabaseRecipeStore
from reel_recipes.services.extractor import RecipeExtractor
from reel_recipes.services.gemini_client import GeminiClient
from reel_recipes.services.recipe_pipeline import RecipeProcessor
from reel_recipes.services.transcript import StaticTranscriptProvider


def create_supabase(settings: Settings) -> Client:
    return create_client(
        str(settings.SUPABASE_URL),
        settings.SUPABASE_SERVICE_ROLE_KEY.get_secret_value(),
    )


def build_recipe_store(settings: Settings) -> RecipeStore:
    if settings.RECIPE_STORE == "memory":
        return InMemoryRecipeStore()
    return SupabaseRecipeStore(create_supabase(settings), table_name=settings.RECIPES_TABLE)


def build_recipe_processor(settings: Settings, store: RecipeStore) -> RecipeProcessor:
    client = GeminiClient(
        api_key=settings.GEMINI_API_KEY.get_secret_value(),
        model_name=settings.GEMINI_MODEL,
        temperature=settings.EXTRACTION_TEMPERATURE,
    )
    return RecipeProcessor(
        store=store,
        transcripts=StaticTranscriptProvider(),
        extractor=RecipeExtractor(client),
        require_supported_platform=settings.REQUIRE_SUPPORTED_PLATFORM,
    )


# The store and processor are shared by every request: the processor owns the
# per-URL locks and the in-memory store owns the data.
@lru_cache(maxsize=1)
def get_recipe_store() -> RecipeStore:
    return build_recipe_store(get_settings())


@lru_cache(maxsize=1)
def get_recipe_processor() -> RecipeProcessor:
    return build_recipe_processor(get_settings(), get_recipe_store())


def get_request_timeout() -> float:
    return get_settings().REQUEST_TIMEOUT_SECONDS
