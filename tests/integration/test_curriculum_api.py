"""Curriculum and unlock endpoint tests."""

from __future__ import annotations

import pytest
from httpx import AsyncClient


class TestStaticConfiguration:
    @pytest.mark.asyncio
    async def test_levels(self, client: AsyncClient):
        response = await client.get("/api/v1/curriculum/levels")
        assert response.status_code == 200
        data = response.json()
        assert [entry["level"] for entry in data["levels"]][:3] == ["7A", "6A", "5A"]
        assert len(data["levels"]) == 21
        assert [entry["level"] for entry in data["electives"]] == ["XV", "XM", "XP", "XS"]
        assert data["electives"][0]["index"] == -1
        assert data["unlock_buffer"] == 1

    @pytest.mark.asyncio
    async def test_categories(self, client: AsyncClient):
        response = await client.get("/api/v1/curriculum/categories")
        assert response.status_code == 200
        categories = {c["id"]: c for c in response.json()["categories"]}
        assert len(categories) == 11
        assert categories["equations"]["anchor_level"] == "F"


class TestUnlockQueries:
    @pytest.mark.asyncio
    async def test_unlocks_for_level(self, client: AsyncClient):
        response = await client.get("/api/v1/unlocks/4A")
        assert response.status_code == 200
        data = response.json()
        assert data["unlocked_levels"] == ["7A", "6A", "5A", "4A", "3A"]
        assert "counting" in data["unlocked_categories"]
        assert "addition" in data["unlocked_categories"]
        assert "calculus" in data["locked_categories"]

        statuses = {c["id"]: c for c in data["categories"]}
        assert statuses["addition"]["unlocked_levels"] == 1
        assert statuses["addition"]["total_levels"] == 4
        assert statuses["subtraction"]["unlock_requirement"] == "2A"

    @pytest.mark.asyncio
    async def test_elective_level(self, client: AsyncClient):
        response = await client.get("/api/v1/unlocks/XV")
        assert response.status_code == 200
        data = response.json()
        assert data["unlocked_levels"] == ["XV"]
        assert data["unlocked_categories"] == []

    @pytest.mark.asyncio
    async def test_video_status(self, client: AsyncClient):
        response = await client.get("/api/v1/unlocks/4A/videos/2A")
        assert response.status_code == 200
        data = response.json()
        assert data["unlocked"] is False
        assert data["almost_unlocked"] is True
        assert data["levels_until_unlock"] == 1
        assert data["unlock_requirement"] == "3A"
        assert data["message"] == "Almost there! Reach Level 3A to unlock!"

    @pytest.mark.asyncio
    async def test_video_status_elective(self, client: AsyncClient):
        data = (await client.get("/api/v1/unlocks/4A/videos/XS")).json()
        assert data["levels_until_unlock"] == 999

    @pytest.mark.asyncio
    async def test_level_advance(self, client: AsyncClient):
        response = await client.get("/api/v1/unlocks/advance", params={"old_level": "B", "new_level": "C"})
        assert response.status_code == 200
        data = response.json()
        assert data["has_new_unlocks"] is True
        assert data["newly_unlocked_levels"] == ["D"]
        assert [c["id"] for c in data["newly_unlocked_categories"]] == ["fractions"]

    @pytest.mark.asyncio
    async def test_level_advance_requires_both_levels(self, client: AsyncClient):
        response = await client.get("/api/v1/unlocks/advance", params={"old_level": "B"})
        assert response.status_code == 422
        assert response.json()["detail"] == "Validation error"


class TestStoredChildren:
    @pytest.mark.asyncio
    async def test_child_unlocks(self, client: AsyncClient, make_family):
        _, (child,) = await make_family(["F"])
        response = await client.get(f"/api/v1/children/{child.id}/unlocks")
        assert response.status_code == 200
        data = response.json()
        assert data["child_level"] == "F"
        assert "equations" in data["unlocked_categories"]
        assert "algebra" in data["locked_categories"]

    @pytest.mark.asyncio
    async def test_missing_child(self, client: AsyncClient):
        response = await client.get("/api/v1/children/4040/unlocks")
        assert response.status_code == 404
        assert response.json() == {"detail": "Child not found"}

    @pytest.mark.asyncio
    async def test_parent_follows_most_advanced_child(self, client: AsyncClient, make_family):
        user, _ = await make_family(["2A", "C", "XV"])
        data = (await client.get(f"/api/v1/parents/{user.id}/unlocks")).json()
        assert data["child_level"] == "C"

    @pytest.mark.asyncio
    async def test_parent_without_children(self, client: AsyncClient, make_family):
        user, _ = await make_family([])
        data = (await client.get(f"/api/v1/parents/{user.id}/unlocks")).json()
        assert data["child_level"] == "7A"

    @pytest.mark.asyncio
    async def test_missing_parent(self, client: AsyncClient):
        response = await client.get("/api/v1/parents/4040/unlocks")
        assert response.status_code == 404
