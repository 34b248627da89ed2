"""Centralized configuration for cartilha_app."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    PROJECT_NAME: str = "cartilha_app"
    LOG_LEVEL: str = "INFO"
    DISABLE_LOGS: bool = False
    AUDIT_LOG_PATH: str = "data/audit/cartilha_audit.log"
    SIMILARITY_TOPIC_PRUNE: float = 0.4
    SIMILARITY_MIN_COMBINED: float = 0.35
    SIMILARITY_TOPIC_WEIGHT: float = 0.6
    SIMILARITY_MAX_CANDIDATES: int = 5
    RAG_MAX_ENTRIES: int = 5
    RAG_QUERY_KEYWORDS: int = 5
    RAG_FALLBACK_LIMIT: int = 10
    STORE_BACKEND: Literal["memory", "supabase"] = "memory"
    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_ANON_KEY: str | None = Field(default=None, repr=False)
    SUPABASE_TIMEOUT_SECONDS: float = 10.0
    SUPABASE_HYBRID_FUNCTION: str = "search_entries_hybrid"
    SEED_ENTRIES_PATH: str | None = None
    OPENROUTER_API_KEY: str | None = Field(default=None, repr=False)
    OPENROUTER_MODEL: str = "mistralai/mistral-7b-instruct:free"
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    OPENROUTER_TIMEOUT_SECONDS: float = 30.0
    LLM_MAX_TOKENS: int = 512
    LLM_TEMPERATURE: float = 0.7
    RATE_LIMIT_BACKEND: Literal["none", "memory", "redis"] = "memory"
    RATE_LIMIT_MAX_REQUESTS: int = 20
    RATE_LIMIT_WINDOW_SECONDS: int = 60
    RATE_LIMIT_REDIS_URL: str = "redis://localhost:6379/2"
    RATE_LIMIT_KEY_PREFIX: str = "cartilha_app:ratelimit"

    @field_validator(
        "SIMILARITY_TOPIC_PRUNE",
        "SIMILARITY_MIN_COMBINED",
        "SIMILARITY_TOPIC_WEIGHT",
    )
    def _validate_similarity_fraction(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError("Similarity thresholds must be between 0 and 1.")
        return value

    @field_validator(
        "SIMILARITY_MAX_CANDIDATES",
        "RAG_MAX_ENTRIES",
        "RAG_QUERY_KEYWORDS",
        "RAG_FALLBACK_LIMIT",
        "LLM_MAX_TOKENS",
        "RATE_LIMIT_MAX_REQUESTS",
        "RATE_LIMIT_WINDOW_SECONDS",
    )
    def _validate_positive_limit(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Limits must be greater than 0.")
        return value

    @field_validator("SUPABASE_TIMEOUT_SECONDS", "OPENROUTER_TIMEOUT_SECONDS")
    def _validate_provider_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Provider timeout must be greater than 0.")
        return value

    @field_validator("LLM_TEMPERATURE")
    def _validate_temperature(cls, value: float) -> float:
        if not 0.0 <= value <= 2.0:
            raise ValueError("LLM_TEMPERATURE must be between 0 and 2.")
        return value


def load_settings() -> AppSettings:
    env_path = Path(".env")
    if env_path.exists():
        load_dotenv(env_path, override=False)
    return AppSettings()
