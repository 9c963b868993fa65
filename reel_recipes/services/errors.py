from __future__ import annotations


class ServiceError(Exception):
    """Base class for failures raised by the recipe pipeline.

    ``public_message`` is what the HTTP layer shows to clients; ``str(error)``
    keeps the detailed reason for logs.
    """

    public_message = "Failed to process recipe"


class ValidationError(ServiceError):
    def __init__(self, message: str = "URL is required"):
        super().__init__(message)
        self.public_message = message


class ExtractionError(ServiceError):
    public_message = "Could not extract a recipe from this video"


class TranscriptUnavailableError(ExtractionError):
    def __init__(self, url: str, reason: str = "Transcript unavailable"):
        super().__init__(f"{reason}: {url}")
        self.url = url
        self.reason = reason


class EmptyCompletionError(ExtractionError):
    pass


class MalformedCompletionError(ExtractionError):
    pass


class IncompleteRecipeError(ExtractionError):
    def __init__(self, missing: list[str]):
        super().__init__(f"Extracted recipe has no {' or '.join(missing)}")
        self.missing = missing


class CompletionServiceError(ExtractionError):
    pass


class RateLimitedError(CompletionServiceError):
    public_message = "AI rate limit reached. Try again in a few moments."


class StorageError(ServiceError):
    public_message = "Could not save the recipe"

    def __init__(self, operation: str, reason: str):
        super().__init__(f"Recipe store error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason


class DuplicateRecipeError(StorageError):
    def __init__(self, source_url: str):
        super().__init__("insert", f"recipe already exists for {source_url}")
        self.source_url = source_url


class RecipeNotFoundError(ServiceError):
    public_message = "Recipe not found"

    def __init__(self, recipe_id: str):
        super().__init__(f"Recipe not found: {recipe_id}")
        self.recipe_id = recipe_id


class PipelineTimeoutError(ServiceError):
    public_message = "Recipe processing timed out, please retry"

    def __init__(self, timeout_seconds: float):
        super().__init__(f"Recipe processing timed out after {timeout_seconds}s")
        self.timeout_seconds = timeout_seconds
        self.retryable = True


class UnknownError(ServiceError):
    public_message = "Something went wrong while processing the recipe"
