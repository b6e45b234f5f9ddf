"""Application service for incident report submissions and review listings."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from incident_reporter.errors import (
    InvalidLocationError,
    MalformedLocationError,
    PersistenceError,
    RecordStoreError,
    ValidationError,
)
from incident_reporter.metrics import record_media_stored
from incident_reporter.models.submission import (
    GeoLocation,
    MediaUpload,
    Submission,
    SubmissionDraft,
    SubmissionForm,
)
from incident_reporter.repositories.submission_repository import SubmissionRepository
from incident_reporter.storage.media_store import MediaStore

logger = logging.getLogger(__name__)


def parse_tags(raw: str | None) -> List[str]:
    """Split a comma-separated tag string, trimming and dropping empty tokens."""

    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def parse_anonymity(raw: str | None) -> bool:
    return raw == "true"


def parse_location(raw: str | None) -> GeoLocation | None:
    """Decode the client-supplied location JSON into a structured value."""

    if raw is None or not raw.strip():
        return None
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedLocationError() from exc
    if payload is None:
        return None
    if not isinstance(payload, dict):
        raise InvalidLocationError()
    try:
        return GeoLocation.model_validate(payload)
    except PydanticValidationError as exc:
        raise InvalidLocationError() from exc


def unique_media_name(filename: str | None) -> str:
    """Return ``<uuid4>-<basename>`` so concurrent uploads never collide."""

    basename = Path((filename or "").replace("\\", "/")).name or "upload"
    return f"{uuid4()}-{basename}"


@dataclass(slots=True)
class SubmissionService:
    """Coordinate validation, media storage and persistence of submissions."""

    repository: SubmissionRepository
    media_store: MediaStore
    default_source: str = "web"

    async def submit(self, form: SubmissionForm) -> Submission:
        """Validate a form, store its attachments and persist the resulting row."""

        title = form.title
        description = form.description
        if not title or not description:
            raise ValidationError()

        # Parse before any upload so a bad location never leaves stored files behind.
        location = parse_location(form.location)
        anonymity = parse_anonymity(form.anonymity)

        media_urls: List[str] = []
        media_types: List[str] = []
        for upload in form.files:
            url = await self._store_media(upload)
            media_urls.append(url)
            media_types.append(upload.content_type)
            if upload.is_audio:
                logger.debug("Audio attachment %s received; transcription is not available", upload.filename)

        draft = SubmissionDraft(
            title=title,
            description=description,
            media_urls=media_urls,
            media_types=media_types,
            voice_transcript=None,
            location=location,
            tags=parse_tags(form.tags),
            anonymity=anonymity,
            contact_info=None if anonymity else form.contact_info,
            source=form.source or self.default_source,
        )

        try:
            submission = await self.repository.insert(draft)
        except RecordStoreError as exc:
            logger.error("Database insertion error: %s", exc)
            raise PersistenceError() from exc

        logger.info("Stored submission %s with %d attachment(s)", submission.id, len(media_urls))
        return submission

    async def list_submissions(self, status: Optional[str] = None) -> List[Submission]:
        """Return submissions for the review table, newest first.

        A store failure is logged and reported as an empty listing.
        """

        try:
            return await self.repository.list(status or None)
        except RecordStoreError as exc:
            logger.error("Error fetching submissions: %s", exc)
            return []

    async def _store_media(self, upload: MediaUpload) -> str:
        name = unique_media_name(upload.filename)
        url = await self.media_store.save(name, upload.content, upload.content_type)
        record_media_stored(self.media_store.backend, upload.content_type)
        return url
