"""
Application configuration models and helpers.

Centralizes the endpoint URLs and request defaults so the summary and
prediction services receive an explicit settings object instead of reading
the environment ad hoc.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


def _blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class UpstreamSettings(BaseSettings):
    """Where production records come from and how much to ask for."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    data_base_url: Optional[str] = Field(
        "https://ibabi.onrender.com/api/ai-data/",
        validation_alias="IBABI_API_BASE",
        description="Paginated raw record endpoint of the IBABI data API.",
    )
    summary_url: Optional[str] = Field(
        None,
        validation_alias="IBABI_SUMMARY_URL",
        description=(
            "Optional endpoint returning pre-aggregated harvest/livestock lists. "
            "Takes precedence over the raw record endpoint when set."
        ),
    )
    page_size: int = Field(50, validation_alias="SUMMARY_PAGE_SIZE")
    top_n: int = Field(8, validation_alias="SUMMARY_TOP_N")
    timeout_seconds: float = Field(10.0, validation_alias="UPSTREAM_TIMEOUT_SECONDS")

    @field_validator("data_base_url", "summary_url", mode="before")
    @classmethod
    def _strip_blank(cls, value: object) -> object:
        return _blank_to_none(value)


class ModelSettings(BaseSettings):
    """Configuration for the external yield prediction service."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    endpoint: Optional[str] = Field(
        None,
        validation_alias="MODEL_API",
        description=(
            "Public URL of the model serving endpoint. Loopback addresses are "
            "treated as unreachable and answered with a demo prediction."
        ),
    )
    timeout_seconds: float = Field(10.0, validation_alias="MODEL_TIMEOUT_SECONDS")

    @field_validator("endpoint", mode="before")
    @classmethod
    def _strip_blank(cls, value: object) -> object:
        return _blank_to_none(value)


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(extra="ignore")

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    prediction: ModelSettings = Field(default_factory=ModelSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()


__all__ = [
    "AppSettings",
    "ModelSettings",
    "UpstreamSettings",
    "get_settings",
]
