"""
Wizard App - Configuration and settings.

Read from environment variables and .env.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class WizardSettings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    wizard_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Record store endpoint. Unset = keep records in memory
    record_store_url: str | None = None
    record_store_timeout: float = 10.0

    # Sessions
    session_cookie_name: str = "onboarding_session"
    session_expire_hours: int = 24

    # Assignment used until an admin saves one
    default_preset: str = "default"

    cors_origins: list[str] = [
        "http://localhost:5173",  # Vite dev server
        "http://127.0.0.1:5173",
    ]

    @property
    def is_development(self) -> bool:
        return self.wizard_env == "development"

    @property
    def is_production(self) -> bool:
        return self.wizard_env == "production"


@lru_cache
def get_settings() -> WizardSettings:
    """Get cached settings instance."""
    return WizardSettings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: WizardSettings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
