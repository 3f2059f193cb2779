"""
SheShape - Configuration and settings.

Settings are read from the environment and an optional .env file. The
wizard_* fields make the navigation policies explicit instead of baking
them into the engine.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    sheshape_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Backend API
    api_url: str = "http://localhost:8080"
    api_token: str | None = None  # Seeds the session when set
    request_timeout_seconds: float = 15.0

    # Profile image staging
    max_profile_image_bytes: int = 5 * 1024 * 1024

    # Wizard navigation policies
    # "all" re-validates the whole draft on next; "section" only the section being left
    wizard_validation_scope: Literal["all", "section"] = "all"
    wizard_gate_jumps: bool = False  # Validate forward tab clicks like next
    wizard_lock_navigation_during_submit: bool = False

    @property
    def is_development(self) -> bool:
        return self.sheshape_env == "development"

    @property
    def is_production(self) -> bool:
        return self.sheshape_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: Settings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
