from __future__ import annotations

import threading
import time
from datetime import datetime, timezone
from typing import Optional

import pytest

from reel_recipes.app.domain.models import Recipe, RecipeDraft
from reel_recipes.app.infra.db.memory_recipes_repo import InMemoryRecipeStore
from reel_recipes.services.errors import (
    DuplicateRecipeError,
    IncompleteRecipeError,
    MalformedCompletionError,
    StorageError,
    TranscriptUnavailableError,
    UnknownError,
    ValidationError,
)
from reel_recipes.services.extractor import RecipeExtractor
from reel_recipes.services.locks import KeyedLocks
from reel_recipes.services.normalize import normalize_url
from reel_recipes.services.recipe_pipeline import RecipeProcessor

VIDEO_URL = "https://www.tiktok.com/@chef/video/7301234567890123456?is_from_webapp=1#top"
SOURCE_URL = normalize_url(VIDEO_URL)


class RecordingStore(InMemoryRecipeStore):
    def __init__(self) -> None:
        super().__init__()
        self.lookups: list[str] = []
        self.inserted: list[RecipeDraft] = []
        self.fail_lookup: Optional[Exception] = None
        self.fail_insert: Optional[Exception] = None

    def find_by_source_url(self, source_url: str) -> Optional[Recipe]:
        self.lookups.append(source_url)
        if self.fail_lookup:
            raise self.fail_lookup
        return super().find_by_source_url(source_url)

    def insert(self, draft: RecipeDraft) -> Recipe:
        self.inserted.append(draft)
        if self.fail_insert:
            raise self.fail_insert
        return super().insert(draft)


class TranscriptProviderStub:
    def __init__(self, transcript: str = "Boil pasta. Add eggs.") -> None:
        self.transcript = transcript
        self.calls: list[str] = []
        self.error: Optional[Exception] = None

    def get_transcript(self, video_url: str) -> str:
        self.calls.append(video_url)
        if self.error:
            raise self.error
        return self.transcript


class ExtractorStub:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []
        self.ingredients = ["400 g spaghetti", "4 eggs"]
        self.steps = ["Boil the pasta", "Mix with eggs"]
        self.error: Optional[Exception] = None
        self.delay = 0.0

    def extract(self, transcript: str, source_url: str) -> RecipeDraft:
        self.calls.append((transcript, source_url))
        if self.delay:
            time.sleep(self.delay)
        if self.error:
            raise self.error
        return RecipeDraft(
            title="Carbonara",
            ingredients=list(self.ingredients),
            steps=list(self.steps),
            duration="20 minutes",
            category="Italian",
            image_url="https://images.example/italian.jpg",
            # the pipeline must overwrite whatever the extractor reports
            source_url="https://model.example/made-up",
        )


def _existing_recipe(source_url: str = SOURCE_URL) -> Recipe:
    return Recipe(
        id="existing-1",
        created_at=datetime(2024, 1, 15, tzinfo=timezone.utc),
        title="Old Carbonara",
        ingredients=["pasta"],
        steps=["cook"],
        source_url=source_url,
    )


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def transcripts() -> TranscriptProviderStub:
    return TranscriptProviderStub()


@pytest.fixture
def extractor() -> ExtractorStub:
    return ExtractorStub()


@pytest.fixture
def processor(store, transcripts, extractor) -> RecipeProcessor:
    return RecipeProcessor(store=store, transcripts=transcripts, extractor=extractor)


class TestCacheMiss:
    def test_runs_full_pipeline_and_persists_once(self, processor, store, transcripts, extractor) -> None:
        result = processor.handle(VIDEO_URL)

        assert result.cached is False
        assert result.recipe.source_url == SOURCE_URL
        assert result.recipe.title == "Carbonara"
        assert len(transcripts.calls) == 1
        assert len(extractor.calls) == 1
        assert len(store.inserted) == 1
        assert store.lookups == [SOURCE_URL]
        assert len(store) == 1

    def test_extractor_receives_normalized_url(self, processor, extractor) -> None:
        processor.handle(VIDEO_URL)

        assert extractor.calls[0][1] == SOURCE_URL

    def test_transcript_provider_receives_trimmed_video_url(self, processor, transcripts) -> None:
        processor.handle(f"  {VIDEO_URL}  ")

        assert transcripts.calls == [VIDEO_URL]

    def test_persisted_source_url_is_normalized(self, processor, store) -> None:
        processor.handle(VIDEO_URL)

        assert store.inserted[0].source_url == SOURCE_URL

    def test_second_call_is_cached(self, processor, extractor) -> None:
        first = processor.handle(VIDEO_URL)
        second = processor.handle(SOURCE_URL + "?utm_source=share")

        assert second.cached is True
        assert second.recipe.id == first.recipe.id
        assert len(extractor.calls) == 1


class TestCacheHit:
    def test_skips_transcript_and_extraction(self, store, transcripts, extractor) -> None:
        store.insert(RecipeDraft(
            title="Old Carbonara",
            ingredients=["pasta"],
            steps=["cook"],
            source_url=SOURCE_URL,
        ))
        store.inserted.clear()
        processor = RecipeProcessor(store=store, transcripts=transcripts, extractor=extractor)

        result = processor.handle(VIDEO_URL)

        assert result.cached is True
        assert result.recipe.title == "Old Carbonara"
        assert transcripts.calls == []
        assert extractor.calls == []
        assert store.inserted == []


class TestValidation:
    @pytest.mark.parametrize("url", [None, "", "   ", "\n\t"])
    def test_blank_url_rejected_before_any_call(self, processor, store, transcripts, extractor, url) -> None:
        with pytest.raises(ValidationError) as exc_info:
            processor.handle(url)

        assert exc_info.value.public_message == "URL is required"
        assert store.lookups == []
        assert transcripts.calls == []
        assert extractor.calls == []

    def test_platform_check_is_off_by_default(self, processor) -> None:
        result = processor.handle("https://www.youtube.com/watch?v=_nJw6nnQms8")

        assert result.cached is False

    def test_platform_check_when_enabled(self, store, transcripts, extractor) -> None:
        processor = RecipeProcessor(
            store=store,
            transcripts=transcripts,
            extractor=extractor,
            require_supported_platform=True,
        )

        with pytest.raises(ValidationError) as exc_info:
            processor.handle("https://www.youtube.com/watch?v=_nJw6nnQms8")

        assert exc_info.value.public_message == "Please use a TikTok or Instagram URL"
        assert store.lookups == []


class TestFailures:
    def test_malformed_ai_output_is_not_persisted(self, store, transcripts) -> None:
        class NonJsonClient:
            def generate_json(self, user_prompt: str, system_instruction: str) -> str:
                return "Sure! Here's the recipe: carbonara"

        processor = RecipeProcessor(
            store=store,
            transcripts=transcripts,
            extractor=RecipeExtractor(NonJsonClient()),
        )

        with pytest.raises(MalformedCompletionError):
            processor.handle(VIDEO_URL)

        assert store.inserted == []

    @pytest.mark.parametrize("section", ["ingredients", "steps"])
    def test_incomplete_recipe_is_not_persisted(self, processor, store, extractor, section) -> None:
        setattr(extractor, section, [])

        with pytest.raises(IncompleteRecipeError) as exc_info:
            processor.handle(VIDEO_URL)

        assert exc_info.value.missing == [section]
        assert store.inserted == []

    def test_transcript_failure_is_not_persisted(self, processor, store, transcripts, extractor) -> None:
        transcripts.error = TranscriptUnavailableError(VIDEO_URL, "Video is private")

        with pytest.raises(TranscriptUnavailableError):
            processor.handle(VIDEO_URL)

        assert extractor.calls == []
        assert store.inserted == []

    def test_lookup_failure_propagates_as_storage_error(self, processor, store, extractor) -> None:
        store.fail_lookup = StorageError("find_by_source_url", "connection refused")

        with pytest.raises(StorageError):
            processor.handle(VIDEO_URL)

        assert extractor.calls == []

    def test_insert_failure_propagates(self, processor, store) -> None:
        store.fail_insert = StorageError("insert", "connection reset")

        with pytest.raises(StorageError):
            processor.handle(VIDEO_URL)

        assert len(store) == 0

    def test_unexpected_exception_is_wrapped(self, processor, extractor) -> None:
        extractor.error = KeyError("choices")

        with pytest.raises(UnknownError) as exc_info:
            processor.handle(VIDEO_URL)

        assert isinstance(exc_info.value.__cause__, KeyError)
        assert "choices" not in exc_info.value.public_message


class TestConcurrency:
    def test_lost_insert_race_returns_winner_as_cached(self, store, transcripts, extractor) -> None:
        winner = _existing_recipe()

        class RacingStore(RecordingStore):
            def find_by_source_url(self, source_url: str) -> Optional[Recipe]:
                self.lookups.append(source_url)
                # first lookup misses, the re-read after the conflict sees the winner
                return winner if len(self.lookups) > 1 else None

            def insert(self, draft: RecipeDraft) -> Recipe:
                self.inserted.append(draft)
                raise DuplicateRecipeError(draft.source_url)

        racing = RacingStore()
        processor = RecipeProcessor(store=racing, transcripts=transcripts, extractor=extractor)

        result = processor.handle(VIDEO_URL)

        assert result.cached is True
        assert result.recipe.id == "existing-1"
        assert len(racing.lookups) == 2

    def test_duplicate_without_winner_is_storage_error(self, transcripts, extractor) -> None:
        class BrokenStore(RecordingStore):
            def insert(self, draft: RecipeDraft) -> Recipe:
                raise DuplicateRecipeError(draft.source_url)

        processor = RecipeProcessor(store=BrokenStore(), transcripts=transcripts, extractor=extractor)

        with pytest.raises(DuplicateRecipeError):
            processor.handle(VIDEO_URL)

    def test_concurrent_requests_extract_once(self, store, transcripts, extractor) -> None:
        extractor.delay = 0.05
        processor = RecipeProcessor(store=store, transcripts=transcripts, extractor=extractor)
        results = []
        errors = []

        def worker(url: str) -> None:
            try:
                results.append(processor.handle(url))
            except Exception as exc:  # pragma: no cover - surfaced by the assert below
                errors.append(exc)

        threads = [
            threading.Thread(target=worker, args=(f"{VIDEO_URL}&n={n}",))
            for n in range(5)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(extractor.calls) == 1
        assert len(store) == 1
        assert sorted(result.cached for result in results) == [False, True, True, True, True]
        assert len({result.recipe.id for result in results}) == 1


class TestKeyedLocks:
    def test_entries_are_released(self) -> None:
        locks = KeyedLocks()

        with locks.hold("a"):
            with locks.hold("b"):
                assert len(locks) == 2

        assert len(locks) == 0

    def test_entry_released_after_exception(self) -> None:
        locks = KeyedLocks()

        with pytest.raises(RuntimeError):
            with locks.hold("a"):
                raise RuntimeError("boom")

        assert len(locks) == 0
