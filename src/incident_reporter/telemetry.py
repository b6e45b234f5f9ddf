"""Telemetry helpers for observability."""
from __future__ import annotations

import time
import uuid
from typing import Callable

from fastapi import Request
from starlette.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp


def route_label(request: Request) -> str:
    """Prefer the matched route template so per-file upload paths share one label."""

    route = request.scope.get("route")
    template = getattr(route, "path", None)
    if template:
        return template
    if request.url.path.startswith("/uploads/"):
        return "/uploads"
    return request.url.path


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Attach a request ID to responses and measure latency."""

    def __init__(
        self,
        app: ASGIApp,
        recorder: Callable[[Request, Response, float], None],
    ) -> None:
        super().__init__(app)
        self._recorder = recorder

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.perf_counter()
        response = await call_next(request)
        latency = time.perf_counter() - start
        response.headers["x-request-id"] = request_id
        self._recorder(request, response, latency)
        return response
