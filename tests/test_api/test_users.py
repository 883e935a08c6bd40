"""Tests for user profile, wishlist and summited endpoints."""

import asyncio

import pytest
from httpx import AsyncClient

from peakbook.database import Database
from tests.conftest import auth_headers, create_mountain, image, signup


@pytest.mark.parametrize("list_name", ["wishlist", "summited"])
class TestMountainLists:
    """Wishlist and summited lists behave the same way."""

    async def test_add_and_remove(self, client: AsyncClient, db: Database, list_name: str) -> None:
        alice = await signup(client, "alice")
        await create_mountain(client, alice["token"])
        headers = auth_headers(alice["token"])

        added = await client.post(
            f"/api/users/{list_name}", json={"mountainId": 1}, headers=headers
        )

        assert added.status_code == 200
        assert added.json()["data"] == [1]
        user = await db.users.find_by_username("alice")
        assert getattr(user, list_name) == [1]

        removed = await client.delete(f"/api/users/{list_name}/1", headers=headers)

        assert removed.status_code == 200
        assert removed.json()["data"] == []

    async def test_adding_twice_is_rejected(
        self, client: AsyncClient, db: Database, list_name: str
    ) -> None:
        alice = await signup(client, "alice")
        await create_mountain(client, alice["token"])
        headers = auth_headers(alice["token"])

        first = await client.post(
            f"/api/users/{list_name}", json={"mountainId": 1}, headers=headers
        )
        second = await client.post(
            f"/api/users/{list_name}", json={"mountainId": 1}, headers=headers
        )

        assert first.status_code == 200
        assert second.status_code == 409
        assert second.json()["success"] is False
        user = await db.users.find_by_username("alice")
        assert getattr(user, list_name) == [1]

    async def test_keeps_insertion_order(self, client: AsyncClient, list_name: str) -> None:
        alice = await signup(client, "alice")
        for name in ("A", "B", "C"):
            await create_mountain(client, alice["token"], name=name)
        headers = auth_headers(alice["token"])

        for mountain_id in (3, 1, 2):
            response = await client.post(
                f"/api/users/{list_name}", json={"mountainId": mountain_id}, headers=headers
            )

        assert response.json()["data"] == [3, 1, 2]

    async def test_accepts_numeric_string_id(self, client: AsyncClient, list_name: str) -> None:
        alice = await signup(client, "alice")
        await create_mountain(client, alice["token"])

        response = await client.post(
            f"/api/users/{list_name}",
            json={"mountainId": "1"},
            headers=auth_headers(alice["token"]),
        )

        assert response.json()["data"] == [1]

    async def test_unknown_mountain(self, client: AsyncClient, list_name: str) -> None:
        alice = await signup(client, "alice")

        response = await client.post(
            f"/api/users/{list_name}", json={"mountainId": 99}, headers=auth_headers(alice["token"])
        )

        assert response.status_code == 404

    async def test_missing_mountain_id(self, client: AsyncClient, list_name: str) -> None:
        alice = await signup(client, "alice")

        response = await client.post(
            f"/api/users/{list_name}", json={}, headers=auth_headers(alice["token"])
        )

        assert response.status_code == 400

    async def test_remove_absent_entry(self, client: AsyncClient, list_name: str) -> None:
        alice = await signup(client, "alice")

        response = await client.delete(
            f"/api/users/{list_name}/5", headers=auth_headers(alice["token"])
        )

        assert response.status_code == 404

    async def test_remove_invalid_id(self, client: AsyncClient, list_name: str) -> None:
        alice = await signup(client, "alice")

        response = await client.delete(
            f"/api/users/{list_name}/abc", headers=auth_headers(alice["token"])
        )

        assert response.status_code == 400

    async def test_add_racing_delete_leaves_no_dangling_id(
        self, client: AsyncClient, db: Database, list_name: str
    ) -> None:
        alice = await signup(client, "alice")
        await create_mountain(client, alice["token"])
        headers = auth_headers(alice["token"])

        added, deleted = await asyncio.gather(
            client.post(f"/api/users/{list_name}", json={"mountainId": 1}, headers=headers),
            client.delete("/api/mountains/1", headers=headers),
        )

        assert deleted.status_code == 200
        assert added.status_code in (200, 404)
        user = await db.users.find_by_username("alice")
        assert getattr(user, list_name) == []

    async def test_requires_auth(self, client: AsyncClient, list_name: str) -> None:
        response = await client.post(f"/api/users/{list_name}", json={"mountainId": 1})

        assert response.status_code == 401


class TestPublicProfile:
    """Tests for the public profile endpoint."""

    async def test_profile_populates_mountains(self, client: AsyncClient) -> None:
        alice = await signup(client, "alice", nickname="Al")
        await create_mountain(client, alice["token"], name="Eiger")
        await create_mountain(client, alice["token"], name="Matterhorn")
        headers = auth_headers(alice["token"])
        await client.post("/api/users/wishlist", json={"mountainId": 2}, headers=headers)
        await client.post("/api/users/summited", json={"mountainId": 1}, headers=headers)

        response = await client.get("/api/users/alice")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["nickname"] == "Al"
        assert data["bio"] == ""
        assert [m["name"] for m in data["wishlistMountains"]] == ["Matterhorn"]
        assert [m["name"] for m in data["summitedMountains"]] == ["Eiger"]
        assert data["uploadedMountains"] == [1, 2]
        assert "passwordHash" not in data
        assert "wishlist" not in data

    async def test_profile_not_found(self, client: AsyncClient) -> None:
        response = await client.get("/api/users/ghost")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "User not found."}


class TestProfilePicture:
    """Tests for replacing a profile picture."""

    async def test_replace_deletes_old_file(self, client: AsyncClient, db: Database) -> None:
        response = await client.post(
            "/api/auth/signup",
            data={"username": "alice", "password": "pw1"},
            files={"pfp": image("old.png")},
        )
        old_path = response.json()["data"]["profileImagePath"]
        token = response.json()["data"]["token"]

        response = await client.post(
            "/api/users/alice/pfp", files={"pfp": image("new.png")}, headers=auth_headers(token)
        )

        assert response.status_code == 200
        new_path = response.json()["data"]["profileImagePath"]
        assert new_path != old_path
        assert db.uploads.exists(new_path)
        assert not db.uploads.exists(old_path)
        user = await db.users.find_by_username("alice")
        assert user.profile_image_path == new_path

    async def test_other_user_forbidden(self, client: AsyncClient, db: Database) -> None:
        await signup(client, "alice")
        bob = await signup(client, "bob")

        response = await client.post(
            "/api/users/alice/pfp", files={"pfp": image()}, headers=auth_headers(bob["token"])
        )

        assert response.status_code == 403
        assert not any((db.uploads.uploads_dir / "pfp").glob("*"))

    async def test_missing_file(self, client: AsyncClient) -> None:
        alice = await signup(client, "alice")

        response = await client.post("/api/users/alice/pfp", headers=auth_headers(alice["token"]))

        assert response.status_code == 400
        assert response.json()["message"] == "No profile picture file provided."
