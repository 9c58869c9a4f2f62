# tests/v1/test_auth.py
"""Tests for authentication endpoints and the auth service."""

from __future__ import annotations

import pytest
from fastapi import status
from sqlalchemy import func, select

from chow.core.errors import AlreadyExistsError, InvalidCredentialsError
from chow.models import Role, User
from chow.services.auth import AuthService


def _register(client, **overrides):
    payload = {
        "email": "ada@example.com",
        "username": "ada_lovelace",
        "password": "analytical-engine",
        **overrides,
    }
    return client.post("/api/v1/auth/register", json=payload)


def test_register_user_success(client, db_session) -> None:
    response = _register(client)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["email"] == "ada@example.com"
    assert data["username"] == "ada_lovelace"
    assert data["role"] == "user"
    assert "password" not in data
    assert "password_hash" not in data

    stored = db_session.scalars(select(User).where(User.email == "ada@example.com")).one()
    assert stored.password_hash != "analytical-engine"


def test_register_duplicate_email_conflicts_and_keeps_original(client, db_session) -> None:
    assert _register(client).status_code == status.HTTP_201_CREATED
    original = db_session.scalars(select(User).where(User.email == "ada@example.com")).one()
    original_hash = original.password_hash

    response = _register(client, username="someone_else", password="different-password")

    assert response.status_code == status.HTTP_409_CONFLICT
    assert db_session.scalar(select(func.count()).select_from(User)) == 1
    db_session.refresh(original)
    assert original.username == "ada_lovelace"
    assert original.password_hash == original_hash


def test_register_duplicate_username_conflicts(client) -> None:
    assert _register(client).status_code == status.HTTP_201_CREATED
    response = _register(client, email="other@example.com")
    assert response.status_code == status.HTTP_409_CONFLICT


@pytest.mark.parametrize(
    "overrides",
    [
        {"email": "not-an-email"},
        {"username": "abcd"},
        {"password": "short"},
    ],
)
def test_register_validation(client, overrides) -> None:
    response = _register(client, **overrides)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_login_success_returns_user_and_token(client, test_user, test_password, token_service) -> None:
    response = client.post(
        "/api/v1/auth/login",
        json={"email": test_user.email, "password": test_password},
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["user"]["id"] == str(test_user.id)
    assert data["token_type"] == "bearer"
    identity = token_service.verify(data["access_token"])
    assert identity.user_id == test_user.id
    assert identity.role is Role.USER


def test_login_wrong_password(client, test_user) -> None:
    response = client.post(
        "/api/v1/auth/login",
        json={"email": test_user.email, "password": "definitely-wrong"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Invalid credentials"


def test_login_unknown_email_looks_like_wrong_password(client) -> None:
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "ghost@example.com", "password": "whatever-password"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Invalid credentials"


def test_service_register_rejects_existing_email(db_session, test_user, token_service) -> None:
    auth = AuthService(db_session, token_service)

    with pytest.raises(AlreadyExistsError):
        auth.register(email=test_user.email, username="brand_new", password="another-password")

    db_session.refresh(test_user)
    assert test_user.username != "brand_new"


def test_service_login_wrong_password(db_session, test_user, token_service) -> None:
    auth = AuthService(db_session, token_service)
    with pytest.raises(InvalidCredentialsError):
        auth.login(email=test_user.email, password="not-the-password")


def test_set_role_promotes_user(db_session, test_user, token_service) -> None:
    auth = AuthService(db_session, token_service)

    auth.set_role(test_user.email, Role.MODERATOR)

    db_session.refresh(test_user)
    assert test_user.role is Role.MODERATOR
