from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import AnyUrl, Field, SecretStr
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from reel_recipes.app.domain.errors import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    APP_ENV: str = "local"
    LOG_LEVEL: str = "INFO"

    # Recipe store
    RECIPE_STORE: Literal["supabase", "memory"] = "supabase"
    SUPABASE_URL: Optional[AnyUrl] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[SecretStr] = None
    RECIPES_TABLE: str = "recipes"

    # Extraction
    GEMINI_API_KEY: Optional[SecretStr] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"
    EXTRACTION_TEMPERATURE: float = Field(default=0.7, ge=0.0, le=1.0)

    # Request handling
    REQUEST_TIMEOUT_SECONDS: float = Field(default=60.0, gt=0)
    REQUIRE_SUPPORTED_PLATFORM: bool = False

    # Not enforced anywhere yet, see DESIGN.md
    MAX_RECIPES_PER_DAY: int = Field(default=10, ge=0)

    def validate_required(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.GEMINI_API_KEY or not self.GEMINI_API_KEY.get_secret_value():
            errors.append("GEMINI_API_KEY is required")
        if self.RECIPE_STORE == "supabase":
            if not self.SUPABASE_URL:
                errors.append("SUPABASE_URL is required")
            if not self.SUPABASE_SERVICE_ROLE_KEY or not self.SUPABASE_SERVICE_ROLE_KEY.get_secret_value():
                errors.append("SUPABASE_SERVICE_ROLE_KEY is required")

        return errors


def load_settings(**overrides: object) -> Settings:
    """
    Read settings from the environment and check required fields.

    Raises:
        ConfigurationError: If a value is invalid or a required one is missing
    """
    try:
        settings = Settings(**overrides)
    except PydanticValidationError as error:
        raise ConfigurationError(
            [f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}" for item in error.errors()]
        ) from error

    errors = settings.validate_required()
    if errors:
        raise ConfigurationError(errors)
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
