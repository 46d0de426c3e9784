"""HTTP tests for leave type management."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from httpx import AsyncClient

BASE_URL = "/leave-types"
HEADERS = {"X-User-Id": "hr-admin"}


async def _create(client: AsyncClient, name: str = "Vacation", **extra: object) -> dict:
    resp = await client.post(BASE_URL, json={"name": name, **extra}, headers=HEADERS)
    assert resp.status_code == 201
    return resp.json()


async def test_create_leave_type(async_client: AsyncClient) -> None:
    data = await _create(async_client, "Vacation", code="VL", description="Paid vacation leave")
    assert data["name"] == "Vacation"
    assert data["code"] == "VL"
    assert data["is_paid"] is True
    assert data["is_active"] is True


async def test_duplicate_name_conflicts_ignoring_case(async_client: AsyncClient) -> None:
    await _create(async_client, "Vacation")
    resp = await async_client.post(BASE_URL, json={"name": "VACATION"}, headers=HEADERS)
    assert resp.status_code == 409
    assert resp.json()["detail"] == 'Leave type "VACATION" already exists'


async def test_update_leave_type(async_client: AsyncClient) -> None:
    created = await _create(async_client, "Sick")
    resp = await async_client.patch(
        f"{BASE_URL}/{created['id']}", json={"description": "Medical", "is_paid": False}, headers=HEADERS
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["description"] == "Medical"
    assert data["is_paid"] is False
    assert data["name"] == "Sick"


async def test_update_without_fields(async_client: AsyncClient) -> None:
    created = await _create(async_client, "Sick")
    resp = await async_client.patch(f"{BASE_URL}/{created['id']}", json={}, headers=HEADERS)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No fields to update"


async def test_rename_to_existing_name_conflicts(async_client: AsyncClient) -> None:
    await _create(async_client, "Vacation")
    sick = await _create(async_client, "Sick")
    resp = await async_client.patch(f"{BASE_URL}/{sick['id']}", json={"name": "vacation"}, headers=HEADERS)
    assert resp.status_code == 409


async def test_soft_delete_hides_from_default_list(async_client: AsyncClient) -> None:
    vacation = await _create(async_client, "Vacation")
    await _create(async_client, "Sick")

    resp = await async_client.put(f"{BASE_URL}/{vacation['id']}/active", json={"is_active": False}, headers=HEADERS)
    assert resp.status_code == 200
    assert resp.json()["is_active"] is False

    active = (await async_client.get(BASE_URL)).json()
    assert [t["name"] for t in active["items"]] == ["Sick"]

    everything = (await async_client.get(BASE_URL, params={"include_inactive": True})).json()
    assert everything["total"] == 2


async def test_find_by_name(async_client: AsyncClient) -> None:
    created = await _create(async_client, "Bereavement")
    resp = await async_client.get(f"{BASE_URL}/by-name/bereavement")
    assert resp.status_code == 200
    assert resp.json()["id"] == created["id"]

    resp = await async_client.get(f"{BASE_URL}/by-name/Unknown")
    assert resp.status_code == 404
