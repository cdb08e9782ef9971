"""
Tests for authentication endpoints: signups, sign-in, and the role gate.
"""

import pytest
from datetime import timedelta
from httpx import AsyncClient

from marketplace.core.security import create_access_token
from marketplace.services import auth_service

from conftest import PASSWORD


@pytest.mark.asyncio
async def test_signup_user(client: AsyncClient):
    """Successful signup returns a token and the user record."""
    response = await client.post("/api/auth/signup", json={
        "name": "New User",
        "email": "New@Example.com",
        "password": "securepassword123",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["token"]
    assert data["user"]["email"] == "new@example.com"
    assert data["user"]["role"] == "user"
    assert "createdAt" in data["user"]
    assert "hashedPassword" not in data["user"]  # Never expose password hash


@pytest.mark.asyncio
async def test_signup_property_owner(client: AsyncClient):
    response = await client.post("/api/auth/signup", json={
        "name": "Pat Owner",
        "email": "owner@example.com",
        "password": "securepassword123",
        "role": "property-owner",
    })
    assert response.status_code == 201
    assert response.json()["user"]["role"] == "property-owner"


@pytest.mark.asyncio
async def test_signup_cannot_claim_admin(client: AsyncClient):
    """Privileged roles are not available on the generic signup."""
    response = await client.post("/api/auth/signup", json={
        "name": "Sneaky",
        "email": "sneaky@example.com",
        "password": "securepassword123",
        "role": "admin",
    })
    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_signup_duplicate_email(client: AsyncClient, regular_user):
    """Duplicate email returns 400 with an 'already exists' message."""
    response = await client.post("/api/auth/signup", json={
        "name": "Someone Else",
        "email": regular_user.email,
        "password": "securepassword123",
    })
    assert response.status_code == 400
    assert "already exists" in response.json()["message"]


@pytest.mark.asyncio
async def test_signup_email_taken_after_check(client: AsyncClient, regular_user, monkeypatch):
    """A concurrent signup that wins the insert still yields 400, not 500."""
    async def check_passed(db, email):
        return None

    monkeypatch.setattr(auth_service, "_ensure_email_free", check_passed)

    response = await client.post("/api/auth/signup", json={
        "name": "Late Twin",
        "email": regular_user.email,
        "password": "securepassword123",
    })
    assert response.status_code == 400
    assert response.json()["message"] == "User with this email already exists"


@pytest.mark.asyncio
async def test_signup_weak_password(client: AsyncClient):
    """Password under 8 chars returns 422 with a per-field error."""
    response = await client.post("/api/auth/signup", json={
        "name": "Weak",
        "email": "weak@example.com",
        "password": "short",
    })
    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert [e["param"] for e in body["errors"]] == ["password"]


@pytest.mark.asyncio
async def test_organizer_signup_creates_profile(client: AsyncClient):
    response = await client.post("/api/auth/organizer/signup", json={
        "name": "Olga Events",
        "email": "olga@example.com",
        "password": "securepassword123",
        "company": "Olga Live Ltd",
        "phone": "+15551234567",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["user"]["role"] == "organizer"

    profile = await client.get(
        "/api/organizer/me",
        headers={"Authorization": f"Bearer {data['token']}"},
    )
    assert profile.status_code == 200
    profile_data = profile.json()["data"]
    assert profile_data["firstName"] == "Olga"
    assert profile_data["company"]["name"] == "Olga Live Ltd"
    assert profile_data["isVerified"] is False


@pytest.mark.asyncio
async def test_doctor_signup_duplicate_registration_number(client: AsyncClient):
    payload = {
        "name": "Dr. House",
        "email": "house@example.com",
        "password": "securepassword123",
        "regNumber": "MED 12345",
    }
    first = await client.post("/api/auth/doctor/signup", json=payload)
    assert first.status_code == 201
    assert first.json()["user"]["role"] == "doctor"

    second = await client.post(
        "/api/auth/doctor/signup",
        json={**payload, "email": "other@example.com"},
    )
    assert second.status_code == 400
    assert "registration number" in second.json()["message"]


@pytest.mark.asyncio
async def test_signin_success(client: AsyncClient, organizer):
    """Valid credentials return a JWT and the user with its role."""
    response = await client.post("/api/auth/signin", json={
        "email": organizer.email,
        "password": PASSWORD,
    })
    assert response.status_code == 200
    data = response.json()
    assert data["token"]
    assert data["user"]["id"] == organizer.id
    assert data["user"]["role"] == "organizer"


@pytest.mark.asyncio
async def test_signin_wrong_password(client: AsyncClient, regular_user):
    """Wrong password returns 401 in the error envelope."""
    response = await client.post("/api/auth/signin", json={
        "email": regular_user.email,
        "password": "wrongpassword",
    })
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid email or password"}


@pytest.mark.asyncio
async def test_signin_nonexistent_email(client: AsyncClient):
    response = await client.post("/api/auth/signin", json={
        "email": "nobody@example.com",
        "password": "anypassword123",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_signin_deactivated_account(client: AsyncClient, db_session, regular_user):
    regular_user.is_active = False
    await db_session.commit()

    response = await client.post("/api/auth/signin", json={
        "email": regular_user.email,
        "password": PASSWORD,
    })
    assert response.status_code == 403
    assert response.json()["message"] == "Account is deactivated"


@pytest.mark.asyncio
async def test_me_requires_token(client: AsyncClient):
    response = await client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_me_returns_current_user(client: AsyncClient, user_headers, regular_user):
    response = await client.get("/api/auth/me", headers=user_headers)
    assert response.status_code == 200
    assert response.json()["user"]["email"] == regular_user.email


@pytest.mark.asyncio
async def test_expired_token_rejected(client: AsyncClient, regular_user):
    token = create_access_token({"sub": str(regular_user.id)}, expires_delta=timedelta(minutes=-1))
    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert "expired" in response.json()["message"]


@pytest.mark.asyncio
async def test_garbage_token_rejected(client: AsyncClient):
    response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
