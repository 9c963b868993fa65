# reel_recipes/app/routers/recipes.py
from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, Query
from starlette.concurrency import run_in_threadpool

from reel_recipes.app.deps import get_recipe_processor, get_recipe_store, get_request_timeout
from reel_recipes.app.infra.db.base import RecipeStore
from reel_recipes.app.schemas.recipes import (
    ErrorResponse,
    ProcessRecipeRequest,
    ProcessRecipeResponse,
    RecipeListResponse,
    RecipeResponse,
)
from reel_recipes.services.errors import PipelineTimeoutError, RecipeNotFoundError
from reel_recipes.services.recipe_pipeline import RecipeProcessor

log = logging.getLogger("recipes")
router = APIRouter(tags=["recipes"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}


@router.post(
    "/process-recipe",
    response_model=ProcessRecipeResponse,
    responses=_ERROR_RESPONSES,
)
async def process_recipe(
    body: ProcessRecipeRequest,
    processor: RecipeProcessor = Depends(get_recipe_processor),
    timeout_seconds: float = Depends(get_request_timeout),
) -> ProcessRecipeResponse:
    # the deadline has to fire while the worker thread is still busy
    try:
        result = await asyncio.wait_for(
            asyncio.to_thread(processor.handle, body.url),
            timeout=timeout_seconds,
        )
    except asyncio.TimeoutError as exc:
        log.warning("process.timeout url=%s timeout=%.1fs", body.url, timeout_seconds)
        raise PipelineTimeoutError(timeout_seconds) from exc

    return ProcessRecipeResponse(
        recipe=RecipeResponse.from_recipe(result.recipe),
        cached=result.cached,
    )


@router.get("/recipes", response_model=RecipeListResponse, responses=_ERROR_RESPONSES)
async def list_recipes(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    store: RecipeStore = Depends(get_recipe_store),
) -> RecipeListResponse:
    recipes = await run_in_threadpool(store.list_recipes, limit, offset)
    return RecipeListResponse(
        items=[RecipeResponse.from_recipe(recipe) for recipe in recipes],
        limit=limit,
        offset=offset,
    )


@router.get("/recipes/{recipe_id}", response_model=RecipeResponse, responses=_ERROR_RESPONSES)
async def get_recipe(
    recipe_id: str,
    store: RecipeStore = Depends(get_recipe_store),
) -> RecipeResponse:
    recipe = await run_in_threadpool(store.get_by_id, recipe_id)
    if recipe is None:
        raise RecipeNotFoundError(recipe_id)
    return RecipeResponse.from_recipe(recipe)
