"""Server-rendered pages for reporters and administrators."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from incident_reporter.api.router import get_submission_service
from incident_reporter.auth import ADMIN_PREFIX, UNAUTHORIZED_PATH
from incident_reporter.models.submission import SubmissionStatus
from incident_reporter.services.submission_service import SubmissionService

ui_router = APIRouter()

_TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
templates = Jinja2Templates(directory=str(_TEMPLATE_DIR))


@ui_router.get("/", response_class=HTMLResponse)
async def landing_page(request: Request) -> HTMLResponse:
    """Render the welcome page linking to the report form and admin panel."""

    return templates.TemplateResponse(
        request,
        "landing.html",
        {"admin_path": ADMIN_PREFIX},
    )


@ui_router.get("/report", response_class=HTMLResponse)
async def report_page(request: Request) -> HTMLResponse:
    """Render the incident report form."""

    settings = request.app.state.settings
    return templates.TemplateResponse(
        request,
        "report.html",
        {"submit_url": f"{settings.api_prefix.rstrip('/')}/submit"},
    )


@ui_router.get(ADMIN_PREFIX, response_class=HTMLResponse)
async def admin_page(
    request: Request,
    status: Optional[str] = Query(default=None),
    key: Optional[str] = Query(default=None),
    service: SubmissionService = Depends(get_submission_service),
) -> HTMLResponse:
    """Render the review table; access is enforced by the admin gate middleware."""

    submissions = await service.list_submissions(status)
    return templates.TemplateResponse(
        request,
        "admin.html",
        {
            "submissions": submissions,
            "active_status": status or None,
            "statuses": [s.value for s in SubmissionStatus],
            "admin_key": key,
        },
    )


@ui_router.get(UNAUTHORIZED_PATH, response_class=HTMLResponse)
async def unauthorized_page(request: Request) -> HTMLResponse:
    """Static notice shown in place of gated pages."""

    return templates.TemplateResponse(request, "unauthorized.html", {})
