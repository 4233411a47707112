"""Tests for the workspace HTTP endpoints."""

import pytest
from httpx import AsyncClient
from uuid_extensions import uuid7

BASE = "/api/v1/workspaces"


async def _create(client: AsyncClient, headers: dict, **body) -> dict:
    payload = {"name": "Team", **body}
    response = await client.post(BASE, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCreateWorkspace:
    @pytest.mark.anyio
    async def test_create_returns_view_and_location(
        self, client: AsyncClient, owner_headers, owner_id,
    ) -> None:
        reader = str(uuid7())
        response = await client.post(
            BASE,
            json={"name": "Team", "read_access_user_ids": [reader]},
            headers=owner_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["owner_user_id"] == str(owner_id)
        assert body["data"]["workspace_type"] == "CUSTOM"
        assert body["data"]["access_user_ids"] == [reader]
        assert body["data"]["user_access_count"] == 1
        assert body["location"] == f"{BASE}/{body['data']['workspace_id']}"

    @pytest.mark.anyio
    async def test_duplicate_across_lists_is_400(self, client: AsyncClient, owner_headers) -> None:
        dup = str(uuid7())
        response = await client.post(
            BASE,
            json={"name": "Team", "read_access_user_ids": [dup],
                  "write_access_user_ids": [dup]},
            headers=owner_headers,
        )
        assert response.status_code == 400
        assert dup in response.json()["detail"][0]

    @pytest.mark.anyio
    async def test_missing_user_header_is_422(self, client: AsyncClient) -> None:
        response = await client.post(BASE, json={"name": "Team"})
        assert response.status_code == 422

    @pytest.mark.anyio
    async def test_malformed_user_header_is_422(self, client: AsyncClient) -> None:
        response = await client.post(
            BASE, json={"name": "Team"}, headers={"X-User-Id": "not-a-uuid"},
        )
        assert response.status_code == 422

    @pytest.mark.anyio
    async def test_empty_name_is_422(self, client: AsyncClient, owner_headers) -> None:
        response = await client.post(BASE, json={"name": ""}, headers=owner_headers)
        assert response.status_code == 422


class TestListings:
    @pytest.mark.anyio
    async def test_owner_bootstraps_once(self, client: AsyncClient, owner_headers) -> None:
        first = await client.get(f"{BASE}/owner", headers=owner_headers)
        second = await client.get(f"{BASE}/owner", headers=owner_headers)

        assert first.status_code == 200
        types = [w["workspace_type"] for w in first.json()]
        assert types == ["DEFAULT", "ROADMAP", "GROUP_PROJECT"]
        assert len(second.json()) == 3

    @pytest.mark.anyio
    async def test_accessible_shared_toggle(self, client: AsyncClient, owner_headers, owner_id) -> None:
        other_headers = {"X-User-Id": str(uuid7())}
        shared = await _create(client, other_headers, read_access_user_ids=[str(owner_id)])
        await _create(client, owner_headers, name="Mine")

        owned = await client.get(f"{BASE}/accessible", headers=owner_headers)
        both = await client.get(
            f"{BASE}/accessible", params={"include_shared": "true"}, headers=owner_headers,
        )

        assert [w["name"] for w in owned.json()] == ["Mine"]
        ids = [w["workspace_id"] for w in both.json()]
        assert ids[-1] == shared["workspace_id"]
        assert len(ids) == 2


class TestActivate:
    @pytest.mark.anyio
    async def test_activate_then_noop(self, client: AsyncClient, owner_headers) -> None:
        first = await client.post(f"{BASE}/activate", headers=owner_headers)
        second = await client.post(f"{BASE}/activate", headers=owner_headers)

        assert first.status_code == 201
        assert first.json()["success"] is True
        assert len(first.json()["data"]) == 3
        assert second.status_code == 200
        assert second.json()["success"] is False
        assert second.json()["message"] == "User already has workspaces"


class TestSingleWorkspace:
    @pytest.mark.anyio
    async def test_get(self, client: AsyncClient, owner_headers) -> None:
        created = await _create(client, owner_headers)
        response = await client.get(f"{BASE}/{created['workspace_id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Team"

    @pytest.mark.anyio
    async def test_get_missing_is_404(self, client: AsyncClient) -> None:
        workspace_id = uuid7()
        response = await client.get(f"{BASE}/{workspace_id}")
        assert response.status_code == 404
        assert response.json()["detail"] == f"Workspace not found with ID: {workspace_id}"

    @pytest.mark.anyio
    async def test_delete(self, client: AsyncClient, owner_headers) -> None:
        created = await _create(client, owner_headers)
        path = f"{BASE}/{created['workspace_id']}"

        assert (await client.delete(path)).status_code == 200
        assert (await client.get(path)).status_code == 404
        assert (await client.delete(path)).status_code == 404


class TestAccessEndpoints:
    @pytest.mark.anyio
    async def test_grant_update_revoke(self, client: AsyncClient, owner_headers) -> None:
        created = await _create(client, owner_headers)
        user = str(uuid7())
        users_path = f"{BASE}/{created['workspace_id']}/users"

        granted = await client.post(f"{users_path}/{user}", params={"access_level": "READ"})
        assert granted.status_code == 201
        assert (await client.get(users_path)).json() == [user]

        updated = await client.put(
            f"{users_path}/{user}/access", params={"access_level": "ADMIN"},
        )
        assert updated.status_code == 200

        revoked = await client.delete(f"{users_path}/{user}")
        assert revoked.status_code == 200
        assert (await client.get(users_path)).json() == []

    @pytest.mark.anyio
    async def test_duplicate_grant_is_409(self, client: AsyncClient, owner_headers) -> None:
        created = await _create(client, owner_headers)
        path = f"{BASE}/{created['workspace_id']}/users/{uuid7()}"

        await client.post(path, params={"access_level": "READ"})
        response = await client.post(path, params={"access_level": "WRITE"})
        assert response.status_code == 409

    @pytest.mark.anyio
    async def test_grant_to_owner_is_409(
        self, client: AsyncClient, owner_headers, owner_id,
    ) -> None:
        created = await _create(client, owner_headers)
        users_path = f"{BASE}/{created['workspace_id']}/users"

        response = await client.post(f"{users_path}/{owner_id}", params={"access_level": "READ"})
        assert response.status_code == 409
        assert (await client.get(users_path)).json() == []

    @pytest.mark.anyio
    async def test_bad_access_level_is_422(self, client: AsyncClient, owner_headers) -> None:
        created = await _create(client, owner_headers)
        path = f"{BASE}/{created['workspace_id']}/users/{uuid7()}"
        response = await client.post(path, params={"access_level": "OWNER"})
        assert response.status_code == 422

    @pytest.mark.anyio
    async def test_update_missing_grant_is_404(self, client: AsyncClient, owner_headers) -> None:
        created = await _create(client, owner_headers)
        path = f"{BASE}/{created['workspace_id']}/users/{uuid7()}/access"
        response = await client.put(path, params={"access_level": "READ"})
        assert response.status_code == 404

    @pytest.mark.anyio
    async def test_grant_on_missing_workspace_is_404(self, client: AsyncClient) -> None:
        response = await client.post(
            f"{BASE}/{uuid7()}/users/{uuid7()}", params={"access_level": "READ"},
        )
        assert response.status_code == 404
