"""Tests for the bearer token gate on bookmark endpoints."""
from collections.abc import AsyncGenerator

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from conftest import TEST_DATABASE_URL, build_client
from core.config import Settings, get_settings

UNAUTHORIZED_BODY = {"error": "Unauthorized request"}


@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("GET", "/bookmarks"),
        ("POST", "/bookmarks"),
        ("GET", "/bookmarks/some-id"),
        ("PATCH", "/bookmarks/some-id"),
        ("DELETE", "/bookmarks/some-id"),
    ],
)
async def test__require_api_token__missing_token_rejected(
    anonymous_client: AsyncClient, method: str, path: str,
) -> None:
    """Every bookmark route responds 401 without credentials."""
    body = None
    if method in {"POST", "PATCH"}:
        body = {"title": "test-title", "url": "http://google.com", "rating": 1}
    response = await anonymous_client.request(method, path, json=body)

    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED_BODY
    assert response.headers["www-authenticate"] == "Bearer"


async def test__require_api_token__wrong_token_rejected(db_session: AsyncSession) -> None:
    """A bearer token that does not match API_TOKEN is rejected."""
    async with build_client(
        db_session, headers={"Authorization": "Bearer not-the-token"},
    ) as wrong_client:
        response = await wrong_client.get("/bookmarks")

    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED_BODY


async def test__require_api_token__non_bearer_scheme_rejected(db_session: AsyncSession) -> None:
    """Basic credentials do not satisfy the bearer gate."""
    async with build_client(
        db_session, headers={"Authorization": "Basic dXNlcjpwYXNz"},
    ) as basic_client:
        response = await basic_client.get("/bookmarks")

    assert response.status_code == 401


async def test__require_api_token__runs_before_validation(
    anonymous_client: AsyncClient,
) -> None:
    """The gate runs before payload validation."""
    response = await anonymous_client.post("/bookmarks", json={})
    assert response.status_code == 401


@pytest.mark.parametrize(
    ("method", "path"), [("POST", "/bookmarks"), ("PATCH", "/bookmarks/some-id")],
)
async def test__require_api_token__runs_before_json_decoding(
    anonymous_client: AsyncClient, method: str, path: str,
) -> None:
    """A malformed JSON body without a token is a 401, not a 400."""
    response = await anonymous_client.request(
        method,
        path,
        content="{bad",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED_BODY


async def test__root__does_not_require_token(anonymous_client: AsyncClient) -> None:
    """GET / is public."""
    response = await anonymous_client.get("/")
    assert response.status_code == 200
    assert response.text == "Hello, world!"


@pytest.fixture
async def dev_mode_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """Client without credentials against an app running in DEV_MODE."""
    async with build_client(db_session) as test_client:
        from api.main import app

        def override_get_settings() -> Settings:
            return Settings(database_url=TEST_DATABASE_URL, DEV_MODE=True)

        app.dependency_overrides[get_settings] = override_get_settings
        yield test_client


async def test__require_api_token__dev_mode_bypass(dev_mode_client: AsyncClient) -> None:
    """DEV_MODE lets requests through without a token."""
    response = await dev_mode_client.get("/bookmarks")
    assert response.status_code == 200
    assert response.json() == []
