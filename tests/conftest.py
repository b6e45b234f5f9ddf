"""Shared pytest configuration for the incident-reporter test suite."""
from __future__ import annotations

import os
from pathlib import Path
from typing import AsyncIterator

import pytest
import pytest_asyncio
from fastapi import FastAPI

# Keep the module-level application created on import away from the working tree.
_DEFAULT_ARTIFACT_ROOT = Path(".pytest_artifacts").resolve()
os.environ.setdefault("REPORTER_ENVIRONMENT", "test")
os.environ.setdefault("REPORTER_UPLOAD_DIR", str(_DEFAULT_ARTIFACT_ROOT / "uploads"))
os.environ.setdefault("REPORTER_DATABASE_URL", f"sqlite+aiosqlite:///{_DEFAULT_ARTIFACT_ROOT / 'import.db'}")

from incident_reporter.config import AppSettings, get_settings  # noqa: E402
from incident_reporter.main import create_app  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> None:
    """Reset cached settings around each test to honor environment changes."""

    get_settings.cache_clear()  # type: ignore[attr-defined]
    try:
        yield
    finally:
        get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture
def admin_key() -> str:
    return "letmein"


@pytest.fixture
def test_settings(tmp_path: Path, admin_key: str) -> AppSettings:
    """Settings pointing the store and local uploads at a per-test directory."""

    return AppSettings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'reports.db'}",
        upload_dir=str(tmp_path / "uploads"),
        storage_url=None,
        storage_credentials_path=None,
        storage_bucket=None,
        admin_secret_key=admin_key,
    )


@pytest_asyncio.fixture
async def test_app(test_settings: AppSettings) -> AsyncIterator[FastAPI]:
    """Provide an application instance backed by a temporary SQLite database."""

    app = create_app(test_settings)
    await app.state.database.create_all()
    try:
        yield app
    finally:
        await app.state.database.dispose()
