"""Application settings using Pydantic BaseSettings."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_default_data_dir() -> str:
    """Per-user directory holding the database and the generated key file."""
    return os.path.join(os.path.expanduser("~"), ".llmkeyring")


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LLMKEYRING_",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    environment: str = Field(default="development")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8787)
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)
    log_file: Optional[str] = Field(default=None)

    # Storage
    data_dir: str = Field(default_factory=_get_default_data_dir)
    database_url: str = Field(default="")

    # Secret store
    secret_service: str = Field(default="LLMKeyring")
    legacy_secret_service: str = Field(default="LLMManager")
    encryption_key: str = Field(default="")

    # Messages
    locale: str = Field(default="system")

    # Providers
    provider_timeout_seconds: Optional[float] = Field(default=None)
    bootstrap_defaults: bool = Field(default=True)

    @property
    def effective_database_url(self) -> str:
        """Explicit DATABASE_URL, else a SQLite file inside data_dir."""
        if self.database_url:
            return self.database_url
        return f"sqlite:///{Path(self.data_dir) / 'llmkeyring.db'}"

    @property
    def key_file(self) -> Path:
        return Path(self.data_dir) / "secret.key"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        vv = (v or "").strip().lower()
        if vv not in {"development", "staging", "production"}:
            raise ValueError("ENVIRONMENT must be one of: development, staging, production")
        return vv

    @field_validator("locale")
    @classmethod
    def validate_locale(cls, v: str) -> str:
        vv = (v or "").strip()
        if vv not in {"system", "en", "zh-Hans"}:
            raise ValueError("LOCALE must be one of: system, en, zh-Hans")
        return vv

    @field_validator("provider_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("PROVIDER_TIMEOUT_SECONDS must be positive")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
