from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TIME_TRAVELER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_title: str = Field(default="Time Traveler API", description="FastAPI application title")
    app_description: str = Field(
        default="Synthesises history learning units (timeline and quiz) from encyclopedia summaries",
        description="Description shown in the OpenAPI document",
    )
    allowed_origins: str = Field(
        default="*",
        description="Comma separated list of origins allowed by CORS",
    )
    log_level: str = Field(
        default="INFO",
        description="Application log level (DEBUG/INFO/WARNING/ERROR/CRITICAL)",
    )
    enable_request_logging: bool = Field(
        default=True,
        description="Emit one log line per handled request",
    )
    wikipedia_language: str = Field(
        default="en",
        description="MediaWiki language code used for search and summaries",
    )
    wikipedia_timeout: float = Field(
        default=8.0,
        gt=0,
        le=60,
        description="Timeout in seconds for a single Wikipedia request",
    )
    wikipedia_user_agent: str = Field(
        default="TimeTraveler/0.1 (Educational Platform)",
        description="User-Agent header sent to Wikipedia",
    )
    wikipedia_cache_ttl: float = Field(
        default=600.0,
        ge=0,
        description="Seconds Wikipedia responses stay cached; 0 disables the response cache",
    )
    wikipedia_cache_size: int = Field(
        default=100,
        ge=1,
        le=10_000,
        description="Maximum number of cached Wikipedia responses",
    )
    cache_capacity: int = Field(
        default=256,
        ge=1,
        le=100_000,
        description="Number of synthesised topics kept in the in-memory LRU cache",
    )
    random_seed: Optional[int] = Field(
        default=None,
        description="Seed for key-figure sampling and quiz distractors. Unset means non-deterministic.",
    )
    shuffle_quiz_options: bool = Field(
        default=False,
        description="Shuffle quiz options instead of always placing the correct answer first",
    )
    max_search_results: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Upper bound for the limit accepted by the search endpoint",
    )

    @property
    def origins(self) -> List[str]:
        raw = self.allowed_origins.strip()
        if not raw or raw == "*":
            return ["*"]
        return [origin.strip() for origin in raw.split(",") if origin.strip()]

    @field_validator("wikipedia_language")
    @classmethod
    def _normalise_language(cls, value: str) -> str:
        candidate = value.strip().lower()
        return candidate or "en"

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        candidate = value.upper()
        if candidate not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            logging.getLogger("time_traveler.settings").warning(
                "Unknown log level '%s', falling back to INFO.", value
            )
            return "INFO"
        return candidate


settings = Settings()
