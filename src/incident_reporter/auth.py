"""Access control for the administrative review views."""
from __future__ import annotations

import logging
import secrets
from typing import Protocol

from fastapi import HTTPException, Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

ADMIN_PREFIX = "/admin"
UNAUTHORIZED_PATH = "/unauthorized"


class AccessPolicy(Protocol):
    """Capability check deciding whether a request may see admin content."""

    def is_authorized(self, request: Request) -> bool:  # pragma: no cover - protocol stub
        ...


class SharedSecretPolicy:
    """Authorize requests whose ``key`` query parameter equals a configured secret."""

    def __init__(self, secret: str | None, param: str = "key") -> None:
        self._secret = (secret or "").strip() or None
        self._param = param

    @property
    def configured(self) -> bool:
        return self._secret is not None

    def is_authorized(self, request: Request) -> bool:
        if self._secret is None:
            return False
        provided = request.query_params.get(self._param)
        if not provided:
            return False
        return secrets.compare_digest(provided.encode("utf-8"), self._secret.encode("utf-8"))


def path_is_protected(path: str, prefix: str) -> bool:
    prefix = prefix.rstrip("/") or "/"
    return path == prefix or path.startswith(prefix + "/")


class AdminGateMiddleware(BaseHTTPMiddleware):
    """Rewrite unauthorized requests under the admin prefix to the unauthorized view."""

    def __init__(
        self,
        app: ASGIApp,
        policy: AccessPolicy,
        prefix: str = ADMIN_PREFIX,
        unauthorized_path: str = UNAUTHORIZED_PATH,
    ) -> None:
        super().__init__(app)
        self._policy = policy
        self._prefix = prefix
        self._unauthorized_path = unauthorized_path

    async def dispatch(self, request: Request, call_next):
        if path_is_protected(request.url.path, self._prefix) and not self._policy.is_authorized(request):
            logger.info("Denied admin access to %s", request.url.path)
            request.scope["path"] = self._unauthorized_path
            request.scope["raw_path"] = self._unauthorized_path.encode("ascii")
        return await call_next(request)


async def require_admin_access(request: Request) -> None:
    """Reject API calls that do not carry the admin key."""

    policy: AccessPolicy = request.app.state.access_policy
    if not policy.is_authorized(request):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
