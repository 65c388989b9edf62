"""API tests for authentication endpoints."""

import pytest

from tourer.core.security import REFRESH_TOKEN, create_token


@pytest.mark.asyncio
async def test_register_login_and_profile(test_client):
    response = await test_client.post(
        "/auth/register",
        json={
            "email": "maria@example.com",
            "password": "hunter2-but-longer",
            "first_name": "Maria",
            "last_name": "Silva",
        },
    )
    assert response.status_code == 201
    tokens = response.json()
    assert tokens["token_type"] == "bearer"
    assert tokens["user"]["role"] == "USER"

    response = await test_client.post(
        "/auth/login",
        json={"email": "maria@example.com", "password": "hunter2-but-longer"},
    )
    assert response.status_code == 200
    access_token = response.json()["access_token"]

    response = await test_client.get(
        "/auth/profile", headers={"Authorization": f"Bearer {access_token}"}
    )
    assert response.status_code == 200
    profile = response.json()
    assert profile["email"] == "maria@example.com"
    assert profile["first_name"] == "Maria"
    assert profile["provider"] == "LOCAL"
    assert profile["is_active"] is True


@pytest.mark.asyncio
async def test_register_validation_error(test_client):
    response = await test_client.post(
        "/auth/register", json={"email": "not-an-email", "password": "short"}
    )

    assert response.status_code == 422
    assert response.headers["content-type"].startswith("application/problem+json")
    paths = {violation["path"] for violation in response.json()["violations"]}
    assert "body.email" in paths
    assert "body.password" in paths


@pytest.mark.asyncio
async def test_login_wrong_password(test_client, regular_user):
    response = await test_client.post(
        "/auth/login", json={"email": regular_user.email, "password": "wrong-password"}
    )

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json()["title"] == "Authentication Required"


@pytest.mark.asyncio
async def test_profile_requires_token(test_client):
    response = await test_client.get("/auth/profile")
    assert response.status_code == 401

    response = await test_client.get("/auth/profile", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_requires_refresh_token(test_client, regular_user, user_headers):
    # An access token is not accepted by the refresh endpoint
    response = await test_client.post("/auth/refresh", headers=user_headers)
    assert response.status_code == 401

    refresh_token = create_token(regular_user.id, regular_user.email, regular_user.role, REFRESH_TOKEN)
    response = await test_client.post(
        "/auth/refresh", headers={"Authorization": f"Bearer {refresh_token}"}
    )
    assert response.status_code == 200
    new_access = response.json()["access_token"]

    # ...and a refresh token is not accepted as an access token
    response = await test_client.get(
        "/auth/profile", headers={"Authorization": f"Bearer {refresh_token}"}
    )
    assert response.status_code == 401

    response = await test_client.get(
        "/auth/profile", headers={"Authorization": f"Bearer {new_access}"}
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_deactivated_user_rejected(test_client, test_session, regular_user, user_headers):
    regular_user.is_active = False
    await test_session.commit()

    response = await test_client.get("/auth/profile", headers=user_headers)

    assert response.status_code == 401
