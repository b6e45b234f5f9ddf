"""Error taxonomy for report submission and record storage."""
from __future__ import annotations


class SubmissionError(Exception):
    """Base class for failures surfaced to clients of the submission endpoint.

    Each subclass carries the HTTP status and the public message returned in the
    ``{"success": false, "error": ...}`` body. Diagnostic detail belongs in the
    exception chain and the server log, never in ``message``.
    """

    status_code: int = 500
    message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(SubmissionError):
    """Required report fields are missing or blank."""

    status_code = 400
    message = "Title and description are required."


class MalformedLocationError(SubmissionError):
    """The location field is not parseable JSON."""

    status_code = 400
    message = "Invalid JSON in location field."


class InvalidLocationError(SubmissionError):
    """The location field parsed, but is not an object with numeric coordinates."""

    status_code = 400
    message = "Location must be a JSON object with numeric lat and lng."


class StorageError(SubmissionError):
    """Uploading an attachment to the bucket failed."""

    status_code = 500
    message = "Failed to upload file to storage."


class PersistenceError(SubmissionError):
    """Inserting the submission row failed."""

    status_code = 500
    message = "Failed to save submission."


class UnknownError(SubmissionError):
    """Catch-all for failures with no more specific mapping."""


class RecordStoreError(RuntimeError):
    """Raised by repositories when the underlying datastore rejects an operation."""
