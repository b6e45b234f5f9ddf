"""Tests for the shared-secret admin gate."""
from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request

from incident_reporter.auth import SharedSecretPolicy, path_is_protected
from incident_reporter.main import create_app
from incident_reporter.models.submission import SubmissionDraft


def _request(query: str) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/admin",
            "query_string": query.encode("ascii"),
            "headers": [],
        }
    )


def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


async def _seed(app, title: str) -> None:
    await app.state.submission_repository.insert(SubmissionDraft(title=title, description="seeded"))


def test_shared_secret_policy_matches_exact_key() -> None:
    policy = SharedSecretPolicy("s3cret")

    assert policy.is_authorized(_request("key=s3cret"))
    assert not policy.is_authorized(_request("key=S3CRET"))
    assert not policy.is_authorized(_request("key="))
    assert not policy.is_authorized(_request(""))


def test_shared_secret_policy_without_secret_denies_everyone() -> None:
    policy = SharedSecretPolicy(None)

    assert not policy.configured
    assert not policy.is_authorized(_request("key="))
    assert not policy.is_authorized(_request("key=anything"))


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/admin", True),
        ("/admin/", True),
        ("/admin/reports", True),
        ("/administrator", False),
        ("/", False),
        ("/api/admin/submissions", False),
    ],
)
def test_admin_prefix_matching(path: str, expected: bool) -> None:
    assert path_is_protected(path, "/admin") is expected


@pytest.mark.asyncio
@pytest.mark.parametrize("query", ["", "?key=wrong", "?status=new&key=wrong"])
async def test_admin_page_without_matching_key_shows_unauthorized(test_app, query: str) -> None:
    await _seed(test_app, "Hidden incident")

    async with _client(test_app) as client:
        response = await client.get(f"/admin{query}")

    assert response.status_code == 200
    assert "You do not have permission to view this page." in response.text
    assert "Hidden incident" not in response.text


@pytest.mark.asyncio
async def test_admin_page_with_matching_key_lists_submissions(test_app, admin_key: str) -> None:
    await _seed(test_app, "Visible incident")

    async with _client(test_app) as client:
        response = await client.get("/admin", params={"key": admin_key})

    assert response.status_code == 200
    assert "Admin Panel" in response.text
    assert "Visible incident" in response.text
    # Filter links keep the key so switching filters stays authorized.
    assert f"status=verified&amp;key={admin_key}" in response.text


@pytest.mark.asyncio
async def test_admin_page_denied_when_secret_not_configured(test_settings) -> None:
    settings = test_settings.model_copy(update={"admin_secret_key": None})
    app = create_app(settings)
    await app.state.database.create_all()
    try:
        async with _client(app) as client:
            response = await client.get("/admin", params={"key": ""})
    finally:
        await app.state.database.dispose()

    assert "You do not have permission to view this page." in response.text


@pytest.mark.asyncio
async def test_json_listing_requires_key(test_app, admin_key: str) -> None:
    await _seed(test_app, "Api incident")

    async with _client(test_app) as client:
        denied = await client.get("/api/admin/submissions")
        allowed = await client.get("/api/admin/submissions", params={"key": admin_key})

    assert denied.status_code == 401
    assert denied.json() == {"detail": "Unauthorized"}
    assert allowed.status_code == 200
    body = allowed.json()
    assert body["success"] is True
    assert [s["title"] for s in body["submissions"]] == ["Api incident"]
