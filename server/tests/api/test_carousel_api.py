"""API tests for carousel and admin dashboard endpoints."""

import pytest

CAROUSEL_ITEM = {
    "title": "Summer in Lisbon",
    "image_url": "https://cdn.example.com/lisbon.jpg",
    "action_type": "INTERNAL",
    "action_value": "/packages/slug/city-tour",
    "sort_order": 1,
}


@pytest.mark.asyncio
async def test_carousel_crud(test_client, admin_headers, user_headers):
    response = await test_client.post("/carousel", json=CAROUSEL_ITEM, headers=user_headers)
    assert response.status_code == 403

    response = await test_client.post("/carousel", json=CAROUSEL_ITEM, headers=admin_headers)
    assert response.status_code == 201
    item = response.json()

    response = await test_client.get("/carousel")
    assert [i["id"] for i in response.json()] == [item["id"]]

    response = await test_client.patch(
        f"/carousel/{item['id']}", json={"is_active": False}, headers=admin_headers
    )
    assert response.json()["is_active"] is False

    response = await test_client.get("/carousel")
    assert response.json() == []

    response = await test_client.get("/carousel/admin", headers=admin_headers)
    assert len(response.json()) == 1

    response = await test_client.get(f"/carousel/{item['id']}")
    assert response.status_code == 200

    response = await test_client.delete(f"/carousel/{item['id']}", headers=admin_headers)
    assert response.status_code == 204

    response = await test_client.get(f"/carousel/{item['id']}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_carousel_rejects_negative_sort_order(test_client, admin_headers):
    response = await test_client.post(
        "/carousel", json={**CAROUSEL_ITEM, "sort_order": -1}, headers=admin_headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_admin_dashboard(test_client, admin_headers, user_headers, sample_package, make_booking, user_caller):
    await make_booking(user_caller)

    response = await test_client.get("/admin/dashboard", headers=user_headers)
    assert response.status_code == 403

    response = await test_client.get("/admin/dashboard", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total_users"] == 2
    assert data["active_packages"] == 1
    assert data["pending_reviews"] == 0
    assert data["bookings"]["total_bookings"] == 1
    assert data["bookings"]["pending_bookings"] == 1
