from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Optional

from reel_recipes.app.domain.models import ProcessResult, Recipe, RecipeDraft
from reel_recipes.app.infra.db.base import RecipeStore

from .errors import (
    DuplicateRecipeError,
    IncompleteRecipeError,
    ServiceError,
    UnknownError,
    ValidationError,
)
from .extractor import RecipeExtractor
from .ids import validate_video_url
from .locks import KeyedLocks
from .normalize import normalize_url
from .transcript import TranscriptProvider

log = logging.getLogger("recipe_pipeline")


class RecipeProcessor:
    """
    Turns a video URL into a stored recipe, at most once per normalized URL.

    Concurrent calls for the same URL are serialized through a per-key lock
    held across lookup, extraction and insert, so only the first one reaches
    the completion service. Across processes the store's unique constraint
    decides; the loser returns the winner's record as a cache hit.
    """

    def __init__(
        self,
        store: RecipeStore,
        transcripts: TranscriptProvider,
        extractor: RecipeExtractor,
        *,
        locks: Optional[KeyedLocks] = None,
        require_supported_platform: bool = False,
    ) -> None:
        self._store = store
        self._transcripts = transcripts
        self._extractor = extractor
        self._locks = locks or KeyedLocks()
        self._require_supported_platform = require_supported_platform

    def handle(self, raw_url: Optional[str]) -> ProcessResult:
        if raw_url is None or not str(raw_url).strip():
            raise ValidationError("URL is required")
        video_url = str(raw_url).strip()
        if self._require_supported_platform:
            validate_video_url(video_url)

        source_url = normalize_url(video_url)
        t0 = time.time()
        log.info("process.start url=%s", source_url)
        try:
            with self._locks.hold(source_url):
                result = self._process(video_url, source_url)
        except ServiceError as exc:
            log.warning(
                "process.fail url=%s error=%s dt=%.2fs",
                source_url,
                exc,
                time.time() - t0,
            )
            raise
        except Exception as exc:
            log.exception("process.fail url=%s dt=%.2fs", source_url, time.time() - t0)
            raise UnknownError(str(exc)) from exc

        log.info(
            "process.ok url=%s recipe=%s cached=%s dt=%.2fs",
            source_url,
            result.recipe.id,
            result.cached,
            time.time() - t0,
        )
        return result

    def _process(self, video_url: str, source_url: str) -> ProcessResult:
        existing = self._store.find_by_source_url(source_url)
        if existing is not None:
            log.info("process.cache_hit url=%s recipe=%s", source_url, existing.id)
            return ProcessResult(recipe=existing, cached=True)

        transcript = self._transcripts.get_transcript(video_url)
        draft = self._extractor.extract(transcript, source_url)
        _ensure_complete(draft)

        recipe = self._insert(replace(draft, source_url=source_url))
        if recipe is None:
            winner = self._store.find_by_source_url(source_url)
            if winner is None:
                raise DuplicateRecipeError(source_url)
            log.info("process.lost_race url=%s recipe=%s", source_url, winner.id)
            return ProcessResult(recipe=winner, cached=True)
        return ProcessResult(recipe=recipe, cached=False)

    def _insert(self, draft: RecipeDraft) -> Optional[Recipe]:
        try:
            return self._store.insert(draft)
        except DuplicateRecipeError:
            return None


def _ensure_complete(draft: RecipeDraft) -> None:
    missing = draft.missing_sections
    if missing:
        raise IncompleteRecipeError(missing)
