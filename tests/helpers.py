"""Helpers for driving the API in tests."""

from fastapi.testclient import TestClient

PASSWORD = "secret123"


def register(client: TestClient, name: str, email: str, password: str = PASSWORD) -> dict:
    """Register a user through the API and return the response body."""
    response = client.post(
        "/api/register",
        json={
            "name": name,
            "email": email,
            "password": password,
            "password_confirmation": password,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def create_task(client: TestClient, token: str, title: str, description: str | None = None) -> dict:
    response = client.post(
        "/api/tasks",
        json={"title": title, "description": description},
        headers=auth_headers(token),
    )
    assert response.status_code == 201, response.text
    return response.json()["task"]
