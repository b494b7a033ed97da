"""Tests for the authentication token endpoint."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from app.infrastructure.models import UserModel
from app.infrastructure.security import get_password_hash
from main import create_app

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


def _login(client: TestClient, email: str, password: str):
    return client.post(
        "/auth/token",
        data={"username": email, "password": password},
        headers=FORM_HEADERS,
    )


@pytest.mark.parametrize("role", ["admin", "coordinator", "user"])
def test_login_returns_bearer_token_with_role(seed, role: str) -> None:
    seed.user(1, role=role, email="user@example.com", password="StrongPass123")

    with TestClient(create_app()) as client:
        response = _login(client, "user@example.com", "StrongPass123")

    assert response.status_code == 200
    payload = response.json()
    assert payload["token_type"] == "bearer"
    assert payload["role"] == role
    assert bool(payload["access_token"])


def test_login_rejects_wrong_password(seed) -> None:
    seed.user(1, email="user@example.com", password="StrongPass123")

    with TestClient(create_app()) as client:
        response = _login(client, "user@example.com", "nope")

    assert response.status_code == 401
    assert response.json()["detail"] == "Incorrect credentials"


def test_login_rejects_inactive_user(seed) -> None:
    seed.user(1, email="user@example.com", password="StrongPass123", is_active=False)

    with TestClient(create_app()) as client:
        response = _login(client, "user@example.com", "StrongPass123")

    assert response.status_code == 403


def test_password_change_invalidates_existing_token(seed, session) -> None:
    seed.user(1, email="user@example.com", password="StrongPass123")

    with TestClient(create_app()) as client:
        token = _login(client, "user@example.com", "StrongPass123").json()["access_token"]
        headers = {"Authorization": f"Bearer {token}"}

        assert client.get("/notifications/unread-count", headers=headers).status_code == 200

        user = session.get(UserModel, 1)
        user.password = get_password_hash("AnotherPass456")
        session.commit()

        response = client.get("/notifications/unread-count", headers=headers)

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"
