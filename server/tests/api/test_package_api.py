"""API tests for package endpoints."""

from decimal import Decimal
from uuid import uuid4

import pytest


@pytest.mark.asyncio
async def test_create_package_as_admin(test_client, admin_headers, sample_package_data):
    response = await test_client.post("/packages", json=sample_package_data, headers=admin_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["slug"] == "city-tour"
    assert Decimal(data["price"]) == Decimal("100")
    assert data["rating"] == 0
    assert data["review_count"] == 0
    assert data["itinerary"][0]["title"] == "Arrival"


@pytest.mark.asyncio
async def test_create_package_forbidden_for_users(test_client, user_headers, sample_package_data):
    response = await test_client.post("/packages", json=sample_package_data, headers=user_headers)

    assert response.status_code == 403
    assert response.json()["required_role"] == "ADMIN"


@pytest.mark.asyncio
async def test_create_package_requires_auth(test_client, sample_package_data):
    response = await test_client.post("/packages", json=sample_package_data)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_duplicate_slug_conflict(test_client, admin_headers, sample_package, sample_package_data):
    response = await test_client.post("/packages", json=sample_package_data, headers=admin_headers)

    assert response.status_code == 409
    data = response.json()
    assert data["conflicting_resource"]["slug"] == "city-tour"


@pytest.mark.asyncio
async def test_search_packages_paginated(test_client, sample_package):
    response = await test_client.get("/packages", params={"search": "lisbon", "limit": 5})

    assert response.status_code == 200
    body = response.json()
    assert body["pagination"] == {"page": 1, "limit": 5, "total": 1, "pages": 1}
    assert body["data"][0]["id"] == str(sample_package.id)


@pytest.mark.asyncio
async def test_search_rejects_bad_query(test_client):
    response = await test_client.get("/packages", params={"limit": 1000})
    assert response.status_code == 422

    response = await test_client.get("/packages", params={"sort_by": "secret"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_package_by_id_and_slug(test_client, sample_package):
    response = await test_client.get(f"/packages/{sample_package.id}")
    assert response.status_code == 200
    assert response.json()["title"] == "City Tour!!"

    response = await test_client.get("/packages/slug/city-tour")
    assert response.status_code == 200
    assert response.json()["id"] == str(sample_package.id)

    response = await test_client.get(f"/packages/{uuid4()}")
    assert response.status_code == 404
    assert response.json()["resource_type"] == "package"


@pytest.mark.asyncio
async def test_categories_and_popular(test_client, sample_package):
    response = await test_client.get("/packages/categories")
    assert response.status_code == 200
    assert response.json() == ["CITY"]

    response = await test_client.get("/packages/popular")
    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == [str(sample_package.id)]


@pytest.mark.asyncio
async def test_update_and_soft_delete(test_client, admin_headers, sample_package):
    response = await test_client.patch(
        f"/packages/{sample_package.id}",
        json={"title": "City Tour Deluxe", "price": "150.00"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "City Tour Deluxe"
    assert data["slug"] == "city-tour"
    assert Decimal(data["price"]) == Decimal("150")

    response = await test_client.delete(f"/packages/{sample_package.id}", headers=admin_headers)
    assert response.status_code == 204

    response = await test_client.get("/packages")
    assert response.json()["pagination"]["total"] == 0

    # Soft-deleted packages are still addressable directly
    response = await test_client.get(f"/packages/{sample_package.id}")
    assert response.status_code == 200
    assert response.json()["is_active"] is False


@pytest.mark.asyncio
async def test_create_package_with_required_fields_only(test_client, admin_headers):
    """Test a package created from the required fields alone can be read back everywhere."""
    response = await test_client.post(
        "/packages",
        json={"title": "City Tour!!", "price": "100", "duration": 5, "location_name": "Lisbon"},
        headers=admin_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["slug"] == "city-tour"
    for field in ("images", "highlights", "includes", "excludes", "itinerary", "tags"):
        assert data[field] == []

    response = await test_client.get(f"/packages/{data['id']}")
    assert response.status_code == 200
    assert response.json()["images"] == []

    response = await test_client.get("/packages")
    assert response.status_code == 200
    assert response.json()["pagination"]["total"] == 1

    response = await test_client.get("/packages/popular")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_update_null_clears_optional_fields(test_client, admin_headers, sample_package):
    response = await test_client.patch(
        f"/packages/{sample_package.id}",
        json={"original_price": "120.00", "tags": ["walking"]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert Decimal(response.json()["original_price"]) == Decimal("120")

    response = await test_client.patch(
        f"/packages/{sample_package.id}",
        json={"original_price": None, "country": None, "title": None, "highlights": None},
        headers=admin_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["original_price"] is None
    assert data["country"] is None
    # Required columns ignore an explicit null
    assert data["title"] == "City Tour!!"
    assert data["highlights"] == ["Alfama", "Tram 28"]
    assert data["tags"] == ["walking"]
