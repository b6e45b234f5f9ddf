"""Repository abstractions for submission records."""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from incident_reporter.db.models import SubmissionRecordModel
from incident_reporter.errors import RecordStoreError
from incident_reporter.models.submission import Submission, SubmissionDraft


class SubmissionRepository(ABC):
    """Abstract persistence interface for submission records."""

    @abstractmethod
    async def insert(self, draft: SubmissionDraft) -> Submission:  # pragma: no cover - interface stub
        """Insert a new submission and return the stored row."""
        ...

    @abstractmethod
    async def list(self, status: Optional[str] = None) -> List[Submission]:  # pragma: no cover - interface stub
        """Return submissions, optionally filtered by status, newest first."""
        ...


class InMemorySubmissionRepository(SubmissionRepository):
    """In-memory repository useful for testing and running without a database."""

    def __init__(self) -> None:
        self._storage: Dict[str, Submission] = {}

    async def insert(self, draft: SubmissionDraft) -> Submission:
        submission = Submission(
            **draft.model_dump(),
            id=str(uuid4()),
            created_at=datetime.now(timezone.utc),
        )
        self._storage[submission.id] = submission
        return submission

    async def list(self, status: Optional[str] = None) -> List[Submission]:
        # Insertion order breaks ties between identical timestamps.
        records = [
            (s.created_at, index, s)
            for index, s in enumerate(self._storage.values())
            if not status or s.status.value == status
        ]
        return [s for _, _, s in sorted(records, key=lambda item: item[:2], reverse=True)]


class SqlAlchemySubmissionRepository(SubmissionRepository):
    """Relational repository backed by the ``submissions`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def insert(self, draft: SubmissionDraft) -> Submission:
        record = SubmissionRecordModel(**draft.model_dump(mode="json"))
        try:
            async with self._session_factory() as session:
                session.add(record)
                await session.commit()
                await session.refresh(record)
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Failed to insert submission: {exc}") from exc
        return _to_submission(record)

    async def list(self, status: Optional[str] = None) -> List[Submission]:
        statement = select(SubmissionRecordModel)
        if status:
            statement = statement.where(SubmissionRecordModel.status == status)
        statement = statement.order_by(SubmissionRecordModel.created_at.desc())
        try:
            async with self._session_factory() as session:
                records = (await session.scalars(statement)).all()
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Failed to list submissions: {exc}") from exc
        try:
            return [_to_submission(record) for record in records]
        except PydanticValidationError as exc:
            raise RecordStoreError(f"Stored submission row is invalid: {exc}") from exc


def _to_submission(record: SubmissionRecordModel) -> Submission:
    return Submission(
        id=record.id,
        title=record.title,
        description=record.description,
        media_urls=list(record.media_urls or []),
        media_types=list(record.media_types or []),
        voice_transcript=record.voice_transcript,
        location=record.location,
        tags=list(record.tags or []),
        anonymity=record.anonymity,
        contact_info=record.contact_info,
        source=record.source,
        status=record.status,
        created_at=record.created_at,
    )
