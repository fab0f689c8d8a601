"""Tests for health, auth and user API endpoints."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from app.core.security import sign_token
from app.models.refresh_token import RefreshToken
from app.models.user import User

SIGN_UP = {
    "email": "NewUser@Example.com ",
    "password": "password123",
    "confirm_password": "password123",
    "name": "New User",
}


async def _sign_in(client: AsyncClient, email: str, password: str) -> dict:
    response = await client.post(
        "/api/v1/auth/sign-in", json={"email": email, "password": password}
    )
    assert response.status_code == 200
    return response.json()


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test health check endpoint."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_detailed_health_check(client: AsyncClient):
    """Test detailed health check endpoint."""
    response = await client.get("/api/v1/health/detailed")
    assert response.status_code == 200
    data = response.json()
    assert "status" in data
    assert "database" in data["components"]


@pytest.mark.asyncio
async def test_sign_up(client: AsyncClient):
    """Test account registration normalizes email and defaults to applicant."""
    response = await client.post("/api/v1/auth/sign-up", json=SIGN_UP)
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "newuser@example.com"
    assert data["name"] == "New User"
    assert data["role"] == "APPLICANT"
    assert "id" in data
    assert "hashed_password" not in data
    assert "password" not in data


@pytest.mark.asyncio
async def test_sign_up_duplicate_email(client: AsyncClient, applicant):
    """Test registering an existing email is rejected."""
    response = await client.post(
        "/api/v1/auth/sign-up", json={**SIGN_UP, "email": "APPLICANT@example.com"}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"


@pytest.mark.asyncio
async def test_sign_up_password_mismatch(client: AsyncClient):
    """Test mismatched passwords fail validation."""
    response = await client.post(
        "/api/v1/auth/sign-up", json={**SIGN_UP, "confirm_password": "different123"}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_sign_up_short_password(client: AsyncClient):
    """Test passwords shorter than 8 characters fail validation."""
    response = await client.post(
        "/api/v1/auth/sign-up",
        json={**SIGN_UP, "password": "short", "confirm_password": "short"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_sign_in(client: AsyncClient, db_session, applicant):
    """Test sign-in returns a token pair and stores one session record."""
    data = await _sign_in(client, "applicant@example.com", "testpassword")

    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["refresh_token"]
    count = await db_session.execute(
        select(func.count()).select_from(RefreshToken).where(RefreshToken.user_id == applicant.id)
    )
    assert count.scalar_one() == 1


@pytest.mark.asyncio
async def test_sign_in_wrong_password(client: AsyncClient, applicant):
    """Test sign-in with a wrong password is unauthorized."""
    response = await client.post(
        "/api/v1/auth/sign-in",
        json={"email": "applicant@example.com", "password": "wrong-password"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_sign_in_unknown_email(client: AsyncClient):
    """Test sign-in with an unknown email is unauthorized."""
    response = await client.post(
        "/api/v1/auth/sign-in",
        json={"email": "nobody@example.com", "password": "whatever123"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_get_current_user(client: AsyncClient, applicant):
    """Test getting current user info with an access token."""
    tokens = await _sign_in(client, "applicant@example.com", "testpassword")

    response = await client.get("/api/v1/users/me", headers=_bearer(tokens["access_token"]))

    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "applicant@example.com"
    assert data["id"] == str(applicant.id)


@pytest.mark.asyncio
async def test_get_current_user_without_token(client: AsyncClient):
    """Test protected routes reject anonymous callers."""
    response = await client.get("/api/v1/users/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_get_current_user_invalid_token(client: AsyncClient):
    """Test a forged access token returns a structured invalid_token error."""
    response = await client.get("/api/v1/users/me", headers=_bearer("forged.token.value"))
    assert response.status_code == 401
    assert response.json()["kind"] == "invalid_token"
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_refresh_token_not_accepted_as_access(client: AsyncClient, applicant):
    """Test a refresh token cannot authenticate a normal request."""
    tokens = await _sign_in(client, "applicant@example.com", "testpassword")

    response = await client.get("/api/v1/users/me", headers=_bearer(tokens["refresh_token"]))

    assert response.status_code == 401
    assert response.json()["kind"] == "invalid_token"


@pytest.mark.asyncio
async def test_refresh_rotates_tokens(client: AsyncClient, applicant):
    """Test refreshing issues a new pair and invalidates the old refresh token."""
    tokens = await _sign_in(client, "applicant@example.com", "testpassword")

    response = await client.post("/api/v1/auth/token", headers=_bearer(tokens["refresh_token"]))
    assert response.status_code == 200
    rotated = response.json()
    assert rotated["refresh_token"] != tokens["refresh_token"]

    replay = await client.post("/api/v1/auth/token", headers=_bearer(tokens["refresh_token"]))
    assert replay.status_code == 401
    assert replay.json()["kind"] == "invalid_token"

    again = await client.post("/api/v1/auth/token", headers=_bearer(rotated["refresh_token"]))
    assert again.status_code == 200

    me = await client.get("/api/v1/users/me", headers=_bearer(rotated["access_token"]))
    assert me.status_code == 200


@pytest.mark.asyncio
async def test_sign_in_again_supersedes_previous_session(client: AsyncClient, applicant):
    """Test a second sign-in invalidates the first refresh token."""
    first = await _sign_in(client, "applicant@example.com", "testpassword")
    await _sign_in(client, "applicant@example.com", "testpassword")

    response = await client.post("/api/v1/auth/token", headers=_bearer(first["refresh_token"]))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_sign_out_revokes_session(client: AsyncClient, db_session, applicant):
    """Test signing out deletes the session so the refresh token stops working."""
    tokens = await _sign_in(client, "applicant@example.com", "testpassword")

    response = await client.post("/api/v1/auth/sign-out", headers=_bearer(tokens["refresh_token"]))
    assert response.status_code == 200
    assert response.json()["user_id"] == str(applicant.id)

    count = await db_session.execute(
        select(func.count()).select_from(RefreshToken).where(RefreshToken.user_id == applicant.id)
    )
    assert count.scalar_one() == 0

    retry = await client.post("/api/v1/auth/token", headers=_bearer(tokens["refresh_token"]))
    assert retry.status_code == 401
    assert retry.json()["kind"] == "invalid_token"


@pytest.mark.asyncio
async def test_sign_out_requires_refresh_token(client: AsyncClient, applicant):
    """Test signing out with an access token is rejected."""
    tokens = await _sign_in(client, "applicant@example.com", "testpassword")

    response = await client.post("/api/v1/auth/sign-out", headers=_bearer(tokens["access_token"]))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_sign_up_concurrent_duplicate_email(client: AsyncClient, db_session):
    """Test losing the unique-email race at commit is reported as a duplicate."""
    real_commit = db_session.commit
    db_session.commit = AsyncMock(
        side_effect=IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: users.email"))
    )

    response = await client.post("/api/v1/auth/sign-up", json=SIGN_UP)

    db_session.commit = real_commit
    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"
    count = await db_session.execute(select(func.count()).select_from(User))
    assert count.scalar_one() == 0


@pytest.mark.asyncio
async def test_expired_access_token(client: AsyncClient, session_manager, applicant):
    """Test an expired access token returns a structured token_expired error."""
    config = session_manager.config
    token = sign_token(
        {"sub": str(applicant.id), "type": "access"},
        config.access_secret_key,
        timedelta(minutes=-1),
        config.algorithm,
    )

    response = await client.get("/api/v1/users/me", headers=_bearer(token))

    assert response.status_code == 401
    assert response.json()["kind"] == "token_expired"
    assert response.headers["WWW-Authenticate"] == "Bearer"
