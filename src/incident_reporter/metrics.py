"""Metrics utilities for the incident reporter."""
from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNTER = Counter(
    "reporter_http_requests_total",
    "Count of HTTP requests processed",
    labelnames=("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "reporter_http_request_latency_seconds",
    "Latency of HTTP requests",
    labelnames=("method", "route"),
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

SUBMISSION_COUNTER = Counter(
    "reporter_submissions_total",
    "Submission attempts grouped by outcome",
    labelnames=("outcome",),
)

MEDIA_COUNTER = Counter(
    "reporter_media_stored_total",
    "Uploaded attachments persisted per storage backend",
    labelnames=("backend", "kind"),
)


def record_request_metrics(method: str, route: str, status_code: int, latency: float) -> None:
    """Record HTTP request throughput and latency."""

    REQUEST_COUNTER.labels(method=method, route=route, status=str(status_code)).inc()
    REQUEST_LATENCY.labels(method=method, route=route).observe(latency)


def record_submission(outcome: str) -> None:
    """Count a submission attempt, e.g. ``created`` or the error class name."""

    SUBMISSION_COUNTER.labels(outcome=outcome).inc()


def record_media_stored(backend: str, content_type: str) -> None:
    # Only the top-level type is used as a label to keep cardinality bounded.
    kind = (content_type or "unknown").split("/", 1)[0].lower() or "unknown"
    MEDIA_COUNTER.labels(backend=backend, kind=kind).inc()
