"""Pytest fixtures and configuration."""

import os
from collections.abc import AsyncIterator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

# Set test environment variables before importing the app
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-at-least-32-characters-long")
os.environ.setdefault("DEBUG", "true")

from peakbook.database import Database, get_db
from peakbook.main import app
from peakbook.models.user import Role

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend for tests."""
    return "asyncio"


@pytest.fixture
def db(tmp_path) -> Database:
    """Stores and uploads rooted in a per-test temporary directory."""
    return Database(tmp_path / "data", tmp_path / "media")


@pytest.fixture
async def client(db: Database) -> AsyncIterator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints."""
    app.dependency_overrides[get_db] = lambda: db
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def image(name: str = "peak.png", content: bytes = PNG_BYTES, content_type: str = "image/png"):
    return (name, content, content_type)


async def signup(
    client: AsyncClient,
    username: str = "alice",
    password: str = "pw1",
    nickname: str | None = None,
) -> dict[str, Any]:
    """Sign up a user and return the response data (including token)."""
    form = {"username": username, "password": password}
    if nickname:
        form["nickname"] = nickname
    response = await client.post("/api/auth/signup", data=form)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def make_admin(db: Database, username: str) -> None:
    def promote(user) -> None:
        user.role = Role.ADMIN

    await db.users.update_by_username(username, promote)


async def create_mountain(
    client: AsyncClient,
    token: str,
    name: str = "Eiger",
    height: int = 3967,
    country: str = "Switzerland",
    needs_equipment: bool = True,
    images: int = 1,
) -> dict[str, Any]:
    """Create a mountain with ``images`` PNG files and return its record."""
    response = await client.post(
        "/api/mountains",
        data={
            "name": name,
            "height": str(height),
            "country": country,
            "needsEquipment": "true" if needs_equipment else "false",
            "description": "",
        },
        files=[("images", image(f"img{i}.png")) for i in range(images)],
        headers=auth_headers(token),
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]
