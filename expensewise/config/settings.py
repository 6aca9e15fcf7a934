"""
Configuration for Expensewise

One pydantic-settings class per external service, each reading its own
environment prefix (GOOGLE_AI_, PIXABAY_, AVATAR_) and the local .env file.

Credentials are OPTIONAL at load time: a missing Gemini key is reported
per categorization, a missing Pixabay key simply disables image search.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleAISettings(BaseSettings):
    """Gemini text-generation configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_AI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_key: Optional[str] = Field(
        default=None,
        description="Google AI (Gemini) API key"
    )
    model_name: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model to use"
    )
    max_output_tokens: int = Field(
        default=1024,
        ge=100,
        le=8192,
        description="Maximum tokens in response"
    )
    temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Model temperature (lower = more deterministic)"
    )

    @field_validator("api_key")
    @classmethod
    def blank_key_is_missing(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty or whitespace key as not configured."""
        if v is None or not v.strip():
            return None
        return v.strip()


class PixabaySettings(BaseSettings):
    """Pixabay image search configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PIXABAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_key: Optional[str] = Field(
        default=None,
        description="Pixabay API key (image search is disabled without it)"
    )
    base_url: str = Field(
        default="https://pixabay.com/api/",
        description="Pixabay search endpoint"
    )
    per_page: int = Field(
        default=5,
        ge=3,
        le=200,
        description="Number of hits requested per search"
    )

    @field_validator("api_key")
    @classmethod
    def blank_key_is_missing(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()


class AvatarSettings(BaseSettings):
    """Placeholder avatar (DiceBear) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AVATAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    base_url: str = Field(
        default="https://api.dicebear.com/7.x/icons/png",
        description="Avatar generation endpoint"
    )
    size: int = Field(
        default=256,
        ge=16,
        le=1024,
        description="Avatar size in pixels"
    )
    background_color: str = Field(
        default="6366f1",
        description="Avatar background color (hex, no leading #)"
    )
    background_type: str = Field(
        default="gradientLinear",
        description="Avatar background style"
    )
    cache_size: int = Field(
        default=512,
        ge=1,
        description="Maximum number of memoized avatar URLs"
    )


class AppSettings(BaseSettings):
    """Process-wide settings shared by the Streamlit app and the HTTP API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="development, staging or production"
    )
    debug_mode: bool = False
    log_level: str = Field(
        default="INFO",
        description="Minimum log level for structured logs"
    )
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.app_environment.lower() == "production"


class Settings(BaseSettings):
    """
    Entry point to every settings group.

    Groups are built on access, so a broken PIXABAY_PER_PAGE does not
    stop the categorization settings from loading.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def google_ai(self) -> GoogleAISettings:
        return GoogleAISettings()

    @property
    def pixabay(self) -> PixabaySettings:
        return PixabaySettings()

    @property
    def avatar(self) -> AvatarSettings:
        return AvatarSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """Shared Settings instance; get_settings.cache_clear() forces a reload."""
    return Settings()


def validate_all_settings() -> dict:
    """
    Report which settings groups load and which credentials are present.

    Returns {group: bool}. Groups that fail to load also get a
    "{group}_error" entry with the validation message. For google_ai
    and pixabay, True means an API key is configured.
    """
    settings = get_settings()
    checks = {
        "google_ai": lambda: settings.google_ai.api_key is not None,
        "pixabay": lambda: settings.pixabay.api_key is not None,
        "avatar": lambda: settings.avatar is not None,
        "app": lambda: settings.app is not None,
    }

    results: dict = {}
    for group, check in checks.items():
        try:
            results[group] = check()
        except ValidationError as e:
            results[group] = False
            results[f"{group}_error"] = str(e)
    return results
