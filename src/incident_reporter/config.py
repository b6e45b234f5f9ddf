"""Application configuration models and access helpers."""
from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Runtime configuration sourced from environment variables."""

    environment: str = "development"
    log_level: str = "INFO"
    api_prefix: str = "/api"
    database_url: str | None = "sqlite+aiosqlite:///./data/submissions.db"
    auto_create_tables: bool = True
    upload_dir: str = "./data/uploads"
    upload_url_prefix: str = "/uploads"
    storage_url: str | None = None
    storage_credentials_path: str | None = None
    storage_bucket: str | None = None
    firebase_project_id: str | None = None
    firebase_app_name: str | None = None
    admin_secret_key: str | None = None
    default_source: str = "web"
    enable_prometheus: bool = True

    model_config = SettingsConfigDict(env_prefix="REPORTER_", case_sensitive=False)

    @property
    def remote_storage_enabled(self) -> bool:
        """Bucket uploads require the service URL, credential and bucket name together."""

        return bool(self.storage_url and self.storage_credentials_path and self.storage_bucket)


@lru_cache
def get_settings() -> AppSettings:
    """Return a cached instance of the application settings."""

    return AppSettings()
