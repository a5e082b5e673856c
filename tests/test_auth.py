"""Integration tests for authentication, profile and health endpoints."""
from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient

from blinkvocab.core.security import REFRESH_TOKEN, issue_token


def register_and_login(client: TestClient, email: str, password: str) -> str:
    client.post("/api/v1/auth/register", json={"email": email, "password": password})
    login_response = client.post(
        "/api/v1/auth/login", json={"email": email, "password": password}
    )
    return login_response.json()["access_token"]


def test_user_registration_success(client: TestClient) -> None:
    payload = {
        "email": "newcomer@example.com",
        "password": "securepassword",
        "full_name": "New Comer",
    }

    response = client.post("/api/v1/auth/register", json=payload)

    assert response.status_code == 201
    data = response.json()
    assert uuid.UUID(data["id"])
    assert data["email"] == payload["email"]
    assert data["full_name"] == "New Comer"
    assert data["is_active"] is True
    assert "hashed_password" not in data


def test_user_registration_duplicate_email(client: TestClient) -> None:
    payload = {"email": "duplicate@example.com", "password": "anothersecurepassword"}

    assert client.post("/api/v1/auth/register", json=payload).status_code == 201
    duplicate_response = client.post("/api/v1/auth/register", json=payload)

    assert duplicate_response.status_code == 400
    assert duplicate_response.json()["detail"] == "A user with this email already exists."


def test_short_password_is_rejected(client: TestClient) -> None:
    response = client.post("/api/v1/auth/register", json={"email": "short@example.com", "password": "abc"})

    assert response.status_code == 422


def test_login_and_profile(client: TestClient) -> None:
    token = register_and_login(client, "profile@example.com", "verysecure")

    response = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["email"] == "profile@example.com"


def test_login_with_wrong_password(client: TestClient) -> None:
    client.post("/api/v1/auth/register", json={"email": "wrong@example.com", "password": "verysecure"})

    response = client.post("/api/v1/auth/login", json={"email": "wrong@example.com", "password": "nope-nope"})

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.parametrize(
    "token",
    ["garbage", issue_token(uuid.uuid4()), issue_token(uuid.uuid4(), REFRESH_TOKEN)],
)
def test_unusable_tokens_are_rejected(client: TestClient, token: str) -> None:
    response = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_refresh_token_is_not_an_access_token(client: TestClient, learner) -> None:
    token = issue_token(learner.id, REFRESH_TOKEN)

    response = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_health(client: TestClient) -> None:
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["ok"] is True
    assert response.json()["time"]


@pytest.mark.asyncio
async def test_async_learner_flow(async_client, essentials) -> None:
    await async_client.post(
        "/api/v1/auth/register", json={"email": "async@example.com", "password": "verysecure"}
    )
    login = await async_client.post(
        "/api/v1/auth/login", json={"email": "async@example.com", "password": "verysecure"}
    )
    headers = {"Authorization": f"Bearer {login.json()['access_token']}"}

    await async_client.post("/api/v1/market/join", json={"dictionary_ids": [essentials.id]}, headers=headers)
    tasks = await async_client.get("/api/v1/tasks/today", headers=headers)
    first = tasks.json()["due"][0]
    review = await async_client.post(
        "/api/v1/review/submit",
        json={"learning_record_id": first["learning_record_id"], "correct": True},
        headers=headers,
    )
    overview = await async_client.get("/api/v1/dashboard/overview", headers=headers)

    assert review.status_code == 200
    assert review.json()["stage"] == 1
    assert overview.json()["totals"] == {"total": 3, "new": 2, "learning": 1, "review": 0, "mastered": 0}
    assert sum(day["events"] for day in overview.json()["activity"]["last_7_days"]) == 5
