"""Application configuration using Pydantic settings."""

import logging
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Matching settings loaded from environment variables (prefix ``DIARIZE_``)."""

    model_config = SettingsConfigDict(
        env_prefix="DIARIZE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Speaker matching
    # Models whose mean log-likelihood is at or below this are not compared at all
    log_likelihood_threshold: float = -33.0
    # Detection score (1 - divergence) must exceed this; meant to be tuned on trials
    detection_threshold: float = 0.2

    # Divergence backend: "fallback" is pure numpy, "native" delegates to a GDMAP toolkit
    divergence_backend: Literal["fallback", "native"] = "fallback"
    native_gdmap: str = ""  # "package.module:callable", required when backend is native

    # Universal background model; empty means the bundled default
    ubm_path: str = ""

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()
    logger.info(
        f"[CONFIG] Loaded settings: log_likelihood_threshold={settings.log_likelihood_threshold}, "
        f"detection_threshold={settings.detection_threshold}, backend={settings.divergence_backend}"
    )
    return settings


def clear_settings_cache():
    """Clear the settings cache to reload from environment."""
    get_settings.cache_clear()
