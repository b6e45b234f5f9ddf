"""API router wiring for report submission and review endpoints."""
from __future__ import annotations

import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from starlette.datastructures import FormData, UploadFile

from incident_reporter.auth import require_admin_access
from incident_reporter.errors import SubmissionError, UnknownError
from incident_reporter.metrics import record_submission
from incident_reporter.models.submission import (
    ErrorResponse,
    MediaUpload,
    SubmissionForm,
    SubmissionListResponse,
    SubmissionResponse,
)
from incident_reporter.services.submission_service import SubmissionService

logger = logging.getLogger(__name__)

api_router = APIRouter()

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}

_TEXT_FIELDS = ("title", "description", "tags", "anonymity", "contact_info", "source", "location")


def get_submission_service(request: Request) -> SubmissionService:
    """Resolve the configured submission service from the FastAPI application state."""

    try:
        return request.app.state.submission_service
    except AttributeError as exc:  # pragma: no cover - defensive guard
        raise RuntimeError("Submission service not configured on application state") from exc


def _error_response(error: SubmissionError) -> JSONResponse:
    body = ErrorResponse(error=error.message)
    return JSONResponse(status_code=error.status_code, content=body.model_dump())


def _text_value(name: str, value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    raise TypeError(f"Form field {name!r} must be text, got {type(value).__name__}")


async def _read_uploads(entries: List[Any]) -> List[MediaUpload]:
    uploads: List[MediaUpload] = []
    for entry in entries:
        if not isinstance(entry, UploadFile):
            raise TypeError(f"Form field 'files' must carry file parts, got {type(entry).__name__}")
        uploads.append(
            MediaUpload(
                filename=entry.filename or "upload",
                content_type=entry.content_type or "application/octet-stream",
                content=await entry.read(),
            )
        )
    return uploads


async def _build_form(data: FormData) -> SubmissionForm:
    fields = {name: _text_value(name, data.get(name)) for name in _TEXT_FIELDS}
    return SubmissionForm(**fields, files=await _read_uploads(data.getlist("files")))


@api_router.post(
    "/submit",
    status_code=status.HTTP_201_CREATED,
    response_model=SubmissionResponse,
    responses=_ERROR_RESPONSES,
    summary="Submit an incident report",
)
async def submit_report(
    request: Request,
    service: SubmissionService = Depends(get_submission_service),
):
    """Accept a multipart report, store its media and persist the submission.

    The body is parsed inside the handler, so an unreadable body or a mistyped
    part still answers with the error envelope.
    """

    try:
        async with request.form() as data:
            form = await _build_form(data)
        submission = await service.submit(form)
    except SubmissionError as exc:
        logger.warning("Submission rejected (%s): %s", type(exc).__name__, exc.message)
        record_submission(type(exc).__name__)
        return _error_response(exc)
    except Exception:
        logger.exception("Error in submission endpoint")
        record_submission(UnknownError.__name__)
        return _error_response(UnknownError())

    record_submission("created")
    return SubmissionResponse(submission=submission)


@api_router.get(
    "/admin/submissions",
    response_model=SubmissionListResponse,
    dependencies=[Depends(require_admin_access)],
    summary="List submissions for review",
)
async def list_submissions(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionListResponse:
    """Return submissions filtered by status, newest first."""

    submissions = await service.list_submissions(status_filter)
    return SubmissionListResponse(submissions=submissions)
