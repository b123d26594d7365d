"""
Auth endpoint tests — registration, credentials login, the bearer guard,
the /me endpoints and the forgot / reset password flow.
"""
from datetime import timedelta

import pytest
from httpx import AsyncClient

from cms.config import settings
from cms.models import utcnow
from cms.repositories import password_reset_repository
from cms.security import create_access_token
from tests.conftest import TEST_PASSWORD, make_user


async def _login(client: AsyncClient, email: str, password: str):
    return await client.post("/api/v1/auth/login", json={"email": email, "password": password})


# ---------------------------------------------------------------------------
# Infrastructure / config
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_health(async_client: AsyncClient):
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_auth_config_reflects_settings(async_client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "ALLOW_REGISTRATION", False)
    resp = await async_client.get("/api/v1/auth/config")
    assert resp.status_code == 200
    assert resp.json() == {"allow_registration": False, "allow_password_reset": True}


@pytest.mark.asyncio
async def test_timing_headers_present(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/auth/config")
    assert "x-response-time-ms" in resp.headers
    assert "x-query-count" in resp.headers


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_register_then_login(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/auth/register", json={
        "name": "Alice",
        "email": "alice@example.com",
        "password": "secret123",
    })
    assert resp.status_code == 201
    body = resp.json()
    assert body["name"] == "Alice"
    assert body["email"] == "alice@example.com"
    assert "password" not in body

    login = await _login(async_client, "alice@example.com", "secret123")
    assert login.status_code == 200
    data = login.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["user"]["id"] == body["id"]
    assert "password" not in data["user"]


@pytest.mark.asyncio
async def test_register_duplicate_email_returns_409(async_client: AsyncClient):
    payload = {"name": "Bob", "email": "bob@example.com", "password": "secret123"}
    assert (await async_client.post("/api/v1/auth/register", json=payload)).status_code == 201
    resp = await async_client.post("/api/v1/auth/register", json=payload)
    assert resp.status_code == 409
    assert resp.json()["detail"] == "User already exists"


@pytest.mark.asyncio
async def test_register_disabled_returns_403(async_client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "ALLOW_REGISTRATION", False)
    resp = await async_client.post("/api/v1/auth/register", json={
        "name": "Carol", "email": "carol@example.com", "password": "secret123",
    })
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_register_short_password_returns_422(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/auth/register", json={
        "name": "Dan", "email": "dan@example.com", "password": "123",
    })
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_login_wrong_password_returns_401(async_client: AsyncClient, admin_user):
    resp = await _login(async_client, "admin@example.com", "wrong-password")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_unknown_email_returns_same_401(async_client: AsyncClient):
    resp = await _login(async_client, "nobody@example.com", TEST_PASSWORD)
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_inactive_user_rejected(async_client: AsyncClient):
    await make_user(name="Off", email="off@example.com", is_active=False)
    resp = await _login(async_client, "off@example.com", TEST_PASSWORD)
    assert resp.status_code == 401


# ---------------------------------------------------------------------------
# Bearer guard
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_protected_route_without_token_returns_401(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/users")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Not authenticated"


@pytest.mark.asyncio
async def test_protected_route_with_garbage_token_returns_401(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/users", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_expired_token_returns_401(async_client: AsyncClient, admin_user):
    token = create_access_token(admin_user.id, expires_delta=timedelta(seconds=-1))
    resp = await async_client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


# ---------------------------------------------------------------------------
# Current user
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_me(async_client: AsyncClient, auth_headers, admin_user):
    resp = await async_client.get("/api/v1/auth/me", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["id"] == admin_user.id
    assert "password" not in resp.json()


@pytest.mark.asyncio
async def test_update_me_changes_name_only(async_client: AsyncClient, auth_headers):
    resp = await async_client.patch("/api/v1/auth/me", headers=auth_headers, json={"name": "Renamed"})
    assert resp.status_code == 200
    assert resp.json()["name"] == "Renamed"
    assert resp.json()["email"] == "admin@example.com"


@pytest.mark.asyncio
async def test_change_my_password(async_client: AsyncClient, auth_headers):
    resp = await async_client.post("/api/v1/auth/me/password", headers=auth_headers, json={
        "current_password": TEST_PASSWORD,
        "new_password": "brand-new-pass",
    })
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    assert (await _login(async_client, "admin@example.com", TEST_PASSWORD)).status_code == 401
    assert (await _login(async_client, "admin@example.com", "brand-new-pass")).status_code == 200


@pytest.mark.asyncio
async def test_change_my_password_wrong_current_returns_401(async_client: AsyncClient, auth_headers):
    resp = await async_client.post("/api/v1/auth/me/password", headers=auth_headers, json={
        "current_password": "not-my-password",
        "new_password": "brand-new-pass",
    })
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Current password is incorrect"


# ---------------------------------------------------------------------------
# Forgot / reset password
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_forgot_password_unknown_email_still_succeeds(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/auth/forgot-password", json={"email": "ghost@example.com"})
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert resp.json()["reset_token"] is None


@pytest.mark.asyncio
async def test_reset_token_is_64_hex_chars(async_client: AsyncClient, admin_user):
    resp = await async_client.post("/api/v1/auth/forgot-password", json={"email": "admin@example.com"})
    token = resp.json()["reset_token"]
    assert len(token) == 64
    int(token, 16)


@pytest.mark.asyncio
async def test_second_reset_request_supersedes_first(async_client: AsyncClient, admin_user):
    first = (await async_client.post(
        "/api/v1/auth/forgot-password", json={"email": "admin@example.com"}
    )).json()["reset_token"]
    second = (await async_client.post(
        "/api/v1/auth/forgot-password", json={"email": "admin@example.com"}
    )).json()["reset_token"]
    assert first != second

    resp = await async_client.post("/api/v1/auth/reset-password", json={"token": first, "password": "newpass1"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid or expired reset token"

    resp = await async_client.post("/api/v1/auth/reset-password", json={"token": second, "password": "newpass1"})
    assert resp.status_code == 200

    # Single use
    resp = await async_client.post("/api/v1/auth/reset-password", json={"token": second, "password": "newpass2"})
    assert resp.status_code == 400

    assert (await _login(async_client, "admin@example.com", TEST_PASSWORD)).status_code == 401
    assert (await _login(async_client, "admin@example.com", "newpass1")).status_code == 200


@pytest.mark.asyncio
async def test_expired_reset_token_rejected(async_client: AsyncClient, admin_user, db_session):
    await password_reset_repository.create(
        db_session,
        email="admin@example.com",
        token="a" * 64,
        expires=utcnow() - timedelta(minutes=1),
    )
    await db_session.commit()

    resp = await async_client.post("/api/v1/auth/reset-password", json={"token": "a" * 64, "password": "newpass1"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_forgot_password_disabled_returns_403(async_client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "ALLOW_PASSWORD_RESET", False)
    resp = await async_client.post("/api/v1/auth/forgot-password", json={"email": "admin@example.com"})
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_reset_token_hidden_outside_development(async_client: AsyncClient, admin_user, monkeypatch):
    monkeypatch.setattr(settings, "APP_ENV", "production")
    resp = await async_client.post("/api/v1/auth/forgot-password", json={"email": "admin@example.com"})
    assert resp.status_code == 200
    assert resp.json()["reset_token"] is None


@pytest.mark.asyncio
async def test_login_short_password_is_invalid_credentials(async_client: AsyncClient, admin_user):
    resp = await _login(async_client, "admin@example.com", "abc")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid credentials"
