"""
Configuration management for ads_library_analyzer.

Uses pydantic-settings for type-safe configuration with automatic
environment variable loading and validation.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ads_library_analyzer.constants import (
    DEFAULT_COUNTRY,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_LLM_MODEL,
    DEFAULT_REQUEST_INTERVAL,
)

FetchProvider = Literal["scrapingbee", "browserless", "direct"]


class MissingCredentialError(ValueError):
    """A required API key is not configured."""


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Provider keys are optional at load time; the fetcher factory and the LLM
    client check for the key they need and fail before any company is processed.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars
    )

    # OpenAI Configuration
    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key for LLM review (optional)",
    )
    openai_model: str = Field(
        default=DEFAULT_LLM_MODEL,
        description="Chat completion model used for LLM review",
    )
    llm_review_enabled: bool = Field(
        default=False,
        description="Ask the LLM to sanity-check heuristic estimates",
    )

    # Scraping providers
    fetch_provider: FetchProvider = Field(
        default="scrapingbee",
        description="Which document fetcher to use",
    )
    scrapingbee_api_key: str | None = Field(
        default=None,
        description="ScrapingBee API key",
    )
    browserless_api_key: str | None = Field(
        default=None,
        description="Browserless API token",
    )
    browserless_base_url: str = Field(
        default="https://production-sfo.browserless.io",
        description="Browserless REST endpoint",
    )
    fetch_timeout_seconds: int = Field(
        default=DEFAULT_FETCH_TIMEOUT,
        gt=0,
        description="Per-request timeout passed to the fetcher",
    )

    # Pipeline
    request_interval_seconds: float = Field(
        default=DEFAULT_REQUEST_INTERVAL,
        ge=0,
        description="Minimum delay between companies",
    )
    ad_library_country: str = Field(
        default=DEFAULT_COUNTRY,
        description="Country filter for ad library searches",
    )

    @field_validator("browserless_base_url", "ad_library_country", mode="before")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from string values."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator(
        "openai_api_key", "scrapingbee_api_key", "browserless_api_key", mode="before"
    )
    @classmethod
    def empty_string_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for optional fields."""
        if isinstance(v, str):
            v = v.strip()
            return v if v else None
        return v

    def with_overrides(self, **overrides) -> "Settings":
        """
        Return a copy with per-request values applied.

        None values are ignored so request bodies can omit keys and fall back
        to the environment.
        """
        update = {}
        for key, value in overrides.items():
            if value is None:
                continue
            if isinstance(value, str):
                value = value.strip()
                if not value:
                    continue
            update[key] = value
        return self.model_copy(update=update)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


def get_openai_api_key(settings: Settings | None = None) -> str:
    """Get OpenAI API key from settings."""
    key = (settings or get_settings()).openai_api_key
    if not key:
        raise MissingCredentialError("OPENAI_API_KEY not set in .env file")
    return key


def get_scrapingbee_api_key(settings: Settings | None = None) -> str:
    """Get ScrapingBee API key from settings."""
    key = (settings or get_settings()).scrapingbee_api_key
    if not key:
        raise MissingCredentialError("SCRAPINGBEE_API_KEY not set in .env file")
    return key


def get_browserless_api_key(settings: Settings | None = None) -> str:
    """Get Browserless API token from settings."""
    key = (settings or get_settings()).browserless_api_key
    if not key:
        raise MissingCredentialError("BROWSERLESS_API_KEY not set in .env file")
    return key
