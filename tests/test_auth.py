from datetime import timedelta

import jwt
import pytest

from photospot.config import settings
from photospot.models.enums import UserRole
from photospot.services.auth_service import (
    ANONYMOUS,
    Identified,
    create_access_token,
    hash_password,
    resolve_viewer,
    verify_password,
)


def test_password_hash_roundtrip():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)


def test_resolve_viewer_valid_token():
    token = create_access_token("user-1", "photographer")
    assert resolve_viewer(token) == Identified(viewer_id="user-1", role=UserRole.PHOTOGRAPHER)


@pytest.mark.parametrize("token", [None, "", "garbage", "a.b.c"])
def test_resolve_viewer_missing_or_malformed(token):
    assert resolve_viewer(token) is ANONYMOUS


def test_resolve_viewer_expired_token():
    token = create_access_token("user-1", "enthusiast", expires_in=timedelta(seconds=-1))
    assert resolve_viewer(token) is ANONYMOUS


def test_resolve_viewer_wrong_secret():
    token = jwt.encode({"sub": "user-1", "type": "access"}, "other-secret", algorithm="HS256")
    assert resolve_viewer(token) is ANONYMOUS


def test_resolve_viewer_wrong_token_type():
    token = jwt.encode(
        {"sub": "user-1", "type": "refresh"}, settings.jwt_secret, algorithm=settings.jwt_algorithm
    )
    assert resolve_viewer(token) is ANONYMOUS


def test_resolve_viewer_unknown_role_keeps_identity():
    token = jwt.encode(
        {"sub": "user-1", "role": "admin", "type": "access"},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    assert resolve_viewer(token) == Identified(viewer_id="user-1", role=None)


@pytest.mark.asyncio
async def test_login_valid_credentials(client, make_user):
    user_id = await make_user(email="ada@example.com", password="secret123")

    response = await client.post(
        "/api/auth/login",
        json={"email": " Ada@Example.com ", "password": "secret123"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == user_id
    assert data["role"] == "photographer"
    assert data["token_type"] == "bearer"
    assert resolve_viewer(data["access_token"]) == Identified(user_id, UserRole.PHOTOGRAPHER)


@pytest.mark.asyncio
async def test_login_without_profile_defaults_to_enthusiast(client, make_user):
    await make_user(display_name=None, email="noprofile@example.com")

    response = await client.post(
        "/api/auth/login",
        json={"email": "noprofile@example.com", "password": "secret123"},
    )

    assert response.status_code == 200
    assert response.json()["role"] == "enthusiast"


@pytest.mark.asyncio
async def test_login_invalid_password(client, make_user):
    await make_user(email="ada@example.com")

    response = await client.post(
        "/api/auth/login",
        json={"email": "ada@example.com", "password": "wrongpassword"},
    )

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_CREDENTIALS"
    assert error["message"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_login_nonexistent_user(client):
    response = await client.post(
        "/api/auth/login",
        json={"email": "nobody@example.com", "password": "whatever"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_login_missing_fields(client):
    response = await client.post("/api/auth/login", json={"email": "ada@example.com"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_INPUT"
    assert error["details"]["issues"][0]["path"] == "password"
