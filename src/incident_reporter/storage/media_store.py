"""Media persistence backends for uploaded report attachments."""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import quote

from incident_reporter.errors import StorageError

logger = logging.getLogger(__name__)


class MediaStore(ABC):
    """Abstract sink that stores a file and returns a URL it can be fetched from."""

    backend: str = "unknown"

    @abstractmethod
    async def save(self, name: str, content: bytes, content_type: str) -> str:  # pragma: no cover - interface stub
        """Persist ``content`` under ``name`` and return its public URL."""
        ...


@dataclass(slots=True)
class LocalMediaStore(MediaStore):
    """Persist uploads to a public directory on the local filesystem."""

    root: Path
    url_prefix: str = "/uploads"
    backend: str = "local"

    def __post_init__(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_path(cls, path: str, url_prefix: str = "/uploads") -> "LocalMediaStore":
        return cls(root=Path(path).resolve(), url_prefix=url_prefix)

    async def save(self, name: str, content: bytes, content_type: str) -> str:
        target = self._target(name)
        await asyncio.to_thread(self._write, target, content)
        logger.debug("Persisted %s upload %s (%d bytes)", content_type, target, len(content))
        return f"{self.url_prefix.rstrip('/')}/{quote(target.name)}"

    def _write(self, target: Path, content: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)

    def _target(self, name: str) -> Path:
        safe_name = Path(name.replace("\\", "/")).name
        if not safe_name:
            raise ValueError(f"Invalid media file name: {name!r}")
        return self.root / safe_name


class FirebaseMediaStore(MediaStore):
    """Cloud Storage bucket sink accessed through the Firebase Admin SDK."""

    backend = "bucket"

    def __init__(self, bucket: Any, public_base_url: str) -> None:
        self._bucket = bucket
        self._public_base_url = public_base_url.rstrip("/")

    async def save(self, name: str, content: bytes, content_type: str) -> str:
        def _upload() -> None:
            blob = self._bucket.blob(name)
            # if_generation_match=0 refuses to overwrite an existing object.
            blob.upload_from_string(content, content_type=content_type, if_generation_match=0)

        try:
            await asyncio.to_thread(_upload)
        except Exception as exc:
            logger.error("Bucket upload of %s to %s failed: %s", name, self._bucket.name, exc)
            raise StorageError() from exc
        return self.public_url(name)

    def public_url(self, name: str) -> str:
        return f"{self._public_base_url}/{self._bucket.name}/{quote(name)}"
