"""Tests for repository implementations."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.exc import IntegrityError

from incident_reporter.db.models import SubmissionRecordModel
from incident_reporter.db.session import Database
from incident_reporter.errors import RecordStoreError
from incident_reporter.models.submission import GeoLocation, SubmissionDraft, SubmissionStatus
from incident_reporter.repositories.submission_repository import (
    InMemorySubmissionRepository,
    SqlAlchemySubmissionRepository,
)
from incident_reporter.services.submission_service import SubmissionService
from incident_reporter.storage.media_store import LocalMediaStore


@pytest_asyncio.fixture
async def database(tmp_path: Path):
    db = Database.from_url(f"sqlite+aiosqlite:///{tmp_path / 'nested' / 'store.db'}")
    await db.create_all()
    try:
        yield db
    finally:
        await db.dispose()


async def _seed_rows(db: Database) -> None:
    base = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
    rows = [
        ("oldest-new", "new", 0),
        ("middle-verified", "verified", 1),
        ("recent-rejected", "rejected", 2),
        ("newest-verified", "verified", 3),
    ]
    async with db.session_factory() as session:
        for title, status, offset in rows:
            session.add(
                SubmissionRecordModel(
                    title=title,
                    description=f"{title} description",
                    media_urls=[],
                    media_types=[],
                    tags=[],
                    anonymity=True,
                    source="web",
                    status=status,
                    created_at=base + timedelta(hours=offset),
                )
            )
        await session.commit()


@pytest.mark.asyncio
async def test_sqlalchemy_repository_assigns_identity_on_insert(database: Database) -> None:
    """The store assigns id and created_at and returns the full row."""

    repository = SqlAlchemySubmissionRepository(database.session_factory)
    draft = SubmissionDraft(
        title="Open manhole",
        description="Uncovered manhole near the market",
        media_urls=["/uploads/a-photo.jpg"],
        media_types=["image/jpeg"],
        location=GeoLocation(lat=19.076, lng=72.8777, place_name="Mumbai"),
        tags=["roads", "safety"],
        anonymity=False,
        contact_info="resident@example.com",
        source="web",
    )

    stored = await repository.insert(draft)

    assert stored.id
    assert stored.created_at is not None
    assert stored.status == SubmissionStatus.NEW
    assert stored.media_urls == ["/uploads/a-photo.jpg"]
    assert stored.media_types == ["image/jpeg"]
    assert stored.location == GeoLocation(lat=19.076, lng=72.8777, place_name="Mumbai")
    assert stored.tags == ["roads", "safety"]
    assert stored.contact_info == "resident@example.com"

    listed = await repository.list()
    assert [s.id for s in listed] == [stored.id]


@pytest.mark.asyncio
async def test_sqlalchemy_repository_filters_by_status_newest_first(database: Database) -> None:
    await _seed_rows(database)
    repository = SqlAlchemySubmissionRepository(database.session_factory)

    verified = await repository.list("verified")
    everything = await repository.list()

    assert [s.title for s in verified] == ["newest-verified", "middle-verified"]
    assert all(s.status == SubmissionStatus.VERIFIED for s in verified)
    assert [s.title for s in everything] == [
        "newest-verified",
        "recent-rejected",
        "middle-verified",
        "oldest-new",
    ]
    assert await repository.list("archived") == []


@pytest.mark.asyncio
async def test_sqlalchemy_repository_wraps_store_errors(tmp_path: Path) -> None:
    """Operations against a missing table surface as RecordStoreError."""

    db = Database.from_url(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    repository = SqlAlchemySubmissionRepository(db.session_factory)
    try:
        with pytest.raises(RecordStoreError):
            await repository.insert(SubmissionDraft(title="t", description="d"))
        with pytest.raises(RecordStoreError):
            await repository.list()
    finally:
        await db.dispose()


@pytest.mark.asyncio
async def test_in_memory_repository_orders_newest_first() -> None:
    repository = InMemorySubmissionRepository()

    first = await repository.insert(SubmissionDraft(title="first", description="d"))
    second = await repository.insert(SubmissionDraft(title="second", description="d", status="verified"))

    assert [s.id for s in await repository.list()] == [second.id, first.id]
    assert [s.id for s in await repository.list("verified")] == [second.id]
    assert first.id != second.id


@pytest.mark.asyncio
async def test_store_rejects_unknown_status(database: Database) -> None:
    async with database.session_factory() as session:
        session.add(SubmissionRecordModel(title="t", description="d", status="archived"))
        with pytest.raises(IntegrityError):
            await session.commit()


@pytest.mark.asyncio
async def test_unreadable_row_surfaces_as_record_store_error(database: Database, tmp_path: Path) -> None:
    """A stored row that no longer satisfies the submission model fails the listing closed."""

    async with database.session_factory() as session:
        session.add(
            SubmissionRecordModel(
                title="mismatched",
                description="d",
                media_urls=["/uploads/a.jpg"],
                media_types=[],
            )
        )
        await session.commit()
    repository = SqlAlchemySubmissionRepository(database.session_factory)

    with pytest.raises(RecordStoreError):
        await repository.list()

    service = SubmissionService(
        repository=repository,
        media_store=LocalMediaStore.from_path(str(tmp_path / "uploads")),
    )
    assert await service.list_submissions() == []
