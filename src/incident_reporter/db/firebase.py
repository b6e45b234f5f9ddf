"""Firebase initialization helpers for media storage."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict

import firebase_admin
from firebase_admin import credentials, storage

from incident_reporter.config import AppSettings


@dataclass(slots=True)
class FirebaseHandle:
    """Thin wrapper around a Firebase app and its Cloud Storage bucket."""

    app: firebase_admin.App
    bucket: Any
    public_base_url: str

    async def dispose(self) -> None:
        """Dispose of the Firebase app instance."""

        def _delete_app() -> None:
            try:
                firebase_admin.delete_app(self.app)
            except ValueError:
                # App already deleted or never initialised; nothing to do.
                pass

        await asyncio.to_thread(_delete_app)


def initialize_firebase(settings: AppSettings) -> FirebaseHandle:
    """Initialise the Firebase Admin SDK and return a handle to the media bucket."""

    if not settings.remote_storage_enabled:
        raise ValueError("storage_url, storage_credentials_path and storage_bucket must all be set")

    options: Dict[str, Any] = {"storageBucket": settings.storage_bucket}
    if settings.firebase_project_id:
        options["projectId"] = settings.firebase_project_id

    credential = credentials.Certificate(settings.storage_credentials_path)

    app_name = settings.firebase_app_name
    try:
        app = firebase_admin.get_app(app_name) if app_name else firebase_admin.get_app()
    except ValueError:
        app = firebase_admin.initialize_app(
            credential=credential,
            options=options,
            name=app_name if app_name else "[DEFAULT]",
        )

    bucket = storage.bucket(settings.storage_bucket, app=app)
    return FirebaseHandle(app=app, bucket=bucket, public_base_url=settings.storage_url or "")
