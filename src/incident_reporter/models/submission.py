"""Pydantic models describing incident submissions and endpoint responses."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, model_validator


class SubmissionStatus(str, Enum):
    """Review states an administrator can assign to a submission."""

    NEW = "new"
    VERIFIED = "verified"
    REJECTED = "rejected"


class GeoLocation(BaseModel):
    """Browser-reported position attached to a report."""

    model_config = ConfigDict(extra="allow")

    lat: StrictFloat | None = Field(default=None, description="Latitude in decimal degrees.")
    lng: StrictFloat | None = Field(default=None, description="Longitude in decimal degrees.")
    place_name: str | None = Field(default=None, description="Human-readable place label.")


@dataclass(slots=True)
class MediaUpload:
    """A single file attached to a multipart submission."""

    filename: str
    content_type: str
    content: bytes

    @property
    def is_audio(self) -> bool:
        return self.content_type.lower().startswith("audio/")


@dataclass(slots=True)
class SubmissionForm:
    """Raw, unvalidated fields as received from the report form."""

    title: str | None = None
    description: str | None = None
    tags: str | None = None
    anonymity: str | None = None
    contact_info: str | None = None
    source: str | None = None
    location: str | None = None
    files: List[MediaUpload] = field(default_factory=list)


class SubmissionDraft(BaseModel):
    """Row contents assembled by the service before the store assigns identity."""

    title: str = Field(..., min_length=1, description="Short headline for the incident.")
    description: str = Field(..., min_length=1, description="Free-text account of the incident.")
    media_urls: List[str] = Field(default_factory=list, description="Retrievable URLs of uploaded media.")
    media_types: List[str] = Field(default_factory=list, description="Declared media types, parallel to media_urls.")
    voice_transcript: str | None = Field(default=None, description="Transcript of an attached voice note.")
    location: GeoLocation | None = Field(default=None, description="Where the incident was reported from.")
    tags: List[str] = Field(default_factory=list, description="Free-form labels supplied by the reporter.")
    anonymity: bool = Field(default=False, description="Whether the reporter asked to stay anonymous.")
    contact_info: str | None = Field(default=None, description="Optional way to reach the reporter.")
    source: str = Field(default="web", description="Channel the report arrived through.")
    status: SubmissionStatus = Field(default=SubmissionStatus.NEW, description="Review state.")

    @model_validator(mode="after")
    def _enforce_invariants(self) -> "SubmissionDraft":
        if self.anonymity:
            self.contact_info = None
        if len(self.media_urls) != len(self.media_types):
            raise ValueError("media_urls and media_types must have the same length")
        return self


class Submission(SubmissionDraft):
    """Persisted submission including store-assigned identity and timestamp."""

    id: str = Field(..., description="Store-assigned submission identifier.")
    created_at: datetime = Field(..., description="Time the store accepted the submission.")


class SubmissionResponse(BaseModel):
    """Body returned after a successful submission."""

    success: bool = True
    submission: Submission


class SubmissionListResponse(BaseModel):
    """Body returned by the JSON review listing."""

    success: bool = True
    submissions: List[Submission] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Body returned for any failed request to the submission API."""

    success: bool = False
    error: str
