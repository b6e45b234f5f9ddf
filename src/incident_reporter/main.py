"""FastAPI application entrypoint for the incident reporter."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from starlette.responses import Response

from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from incident_reporter.api.router import api_router
from incident_reporter.api.ui import ui_router
from incident_reporter.auth import AdminGateMiddleware, SharedSecretPolicy
from incident_reporter.config import AppSettings, get_settings
from incident_reporter.db.firebase import FirebaseHandle, initialize_firebase
from incident_reporter.db.session import Database
from incident_reporter.logging import configure_logging
from incident_reporter.metrics import record_request_metrics
from incident_reporter.repositories.submission_repository import (
    InMemorySubmissionRepository,
    SqlAlchemySubmissionRepository,
    SubmissionRepository,
)
from incident_reporter.services.submission_service import SubmissionService
from incident_reporter.storage.media_store import FirebaseMediaStore, LocalMediaStore, MediaStore
from incident_reporter.telemetry import RequestContextMiddleware, route_label

logger = logging.getLogger(__name__)


def _make_request_recorder(enabled: bool):
    def _record(request: Request, response: Response, latency: float) -> None:
        if not enabled:
            return
        record_request_metrics(request.method, route_label(request), response.status_code, latency)

    return _record


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Instantiate and configure the FastAPI application."""

    app_settings = settings or get_settings()
    configure_logging(app_settings.log_level)

    database: Database | None = None
    repository: SubmissionRepository
    if app_settings.database_url:
        database = Database.from_settings(app_settings)
        repository = SqlAlchemySubmissionRepository(database.session_factory)
    else:
        logger.warning("No database_url configured; submissions are kept in memory only")
        repository = InMemorySubmissionRepository()

    firebase_handle: FirebaseHandle | None = None
    media_store: MediaStore
    local_store: LocalMediaStore | None = None
    if app_settings.remote_storage_enabled:
        firebase_handle = initialize_firebase(app_settings)
        media_store = FirebaseMediaStore(firebase_handle.bucket, firebase_handle.public_base_url)
    else:
        local_store = LocalMediaStore.from_path(app_settings.upload_dir, url_prefix=app_settings.upload_url_prefix)
        media_store = local_store

    access_policy = SharedSecretPolicy(app_settings.admin_secret_key)
    if not access_policy.configured:
        logger.warning("admin_secret_key is not set; the admin views will reject every request")

    submission_service = SubmissionService(
        repository=repository,
        media_store=media_store,
        default_source=app_settings.default_source,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if database is not None and app_settings.auto_create_tables:
            await database.create_all()
        try:
            yield
        finally:
            if database is not None:
                await database.dispose()
            if firebase_handle is not None:
                await firebase_handle.dispose()

    application = FastAPI(
        title="Incident Reporter",
        version="0.1.0",
        description="Accepts citizen incident reports and serves the review dashboard.",
        lifespan=lifespan,
    )
    application.add_middleware(AdminGateMiddleware, policy=access_policy)
    application.add_middleware(
        RequestContextMiddleware,
        recorder=_make_request_recorder(app_settings.enable_prometheus),
    )

    application.include_router(ui_router)
    application.include_router(api_router, prefix=app_settings.api_prefix)
    if local_store is not None:
        application.mount(
            app_settings.upload_url_prefix,
            StaticFiles(directory=str(local_store.root)),
            name="uploads",
        )

    application.state.settings = app_settings
    application.state.database = database
    application.state.firebase = firebase_handle
    application.state.submission_repository = repository
    application.state.media_store = media_store
    application.state.access_policy = access_policy
    application.state.submission_service = submission_service

    if app_settings.enable_prometheus:
        @application.get("/metrics")
        async def metrics_endpoint() -> Response:
            return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return application


app = create_app()
