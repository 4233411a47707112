"""Tests for the roadmap HTTP endpoints."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from src.api.dependencies import get_assignment_repo
from src.api.main import app
from src.repositories.assignments import AssignmentRepository

BASE = "/api/v1/roadmap"

ROADMAP_BODY = {
    "title": "Learn Rust",
    "tasks": [
        {"title": "Ownership", "estimated_hours": 6, "reward_points": 10, "order_number": 1},
        {"title": "Traits", "estimated_hours": 4, "reward_points": 15, "order_number": 2},
    ],
}


class TestRoadmapWorkspace:
    @pytest.mark.anyio
    async def test_get_creates_defaults(self, client: AsyncClient, owner_headers) -> None:
        response = await client.get(f"{BASE}/workspace", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["workspace_type"] == "ROADMAP"

    @pytest.mark.anyio
    async def test_missing_when_owner_has_only_custom(
        self, client: AsyncClient, owner_headers,
    ) -> None:
        await client.post("/api/v1/workspaces", json={"name": "Mine"}, headers=owner_headers)
        response = await client.get(f"{BASE}/workspace", headers=owner_headers)
        assert response.status_code == 404


class TestAddRoadmapAssignment:
    @pytest.mark.anyio
    async def test_created(self, client: AsyncClient, owner_headers) -> None:
        response = await client.post(
            f"{BASE}/assignments", json=ROADMAP_BODY, headers=owner_headers,
        )

        assert response.status_code == 201, response.text
        body = response.json()
        assert body["success"] is True
        assert body["location"].startswith("/api/v1/workspaces/")
        assert body["data"]["assignment_type"] == "ROADMAP"
        assert body["data"]["total_reward_points"] == 25
        assert body["data"]["total_estimated_hours"] == 10.0
        assert [t["title"] for t in body["data"]["tasks"]] == ["Ownership", "Traits"]

    @pytest.mark.anyio
    async def test_bad_color_is_422(self, client: AsyncClient, owner_headers) -> None:
        body = {"title": "x", "tasks": [{"title": "t", "title_color": "red"}]}
        response = await client.post(f"{BASE}/assignments", json=body, headers=owner_headers)
        assert response.status_code == 422

    @pytest.mark.anyio
    async def test_persistence_failure_is_500(self, client: AsyncClient, owner_headers) -> None:
        failing = AsyncMock(spec=AssignmentRepository)
        failing.create_with_tasks.side_effect = OperationalError("INSERT", {}, Exception("down"))
        app.dependency_overrides[get_assignment_repo] = lambda: failing

        response = await client.post(
            f"{BASE}/assignments", json=ROADMAP_BODY, headers=owner_headers,
        )

        assert response.status_code == 500
        assert response.json() == {
            "message": "Error adding roadmap assignment to workspace",
            "success": False,
            "data": None,
            "location": None,
        }
