"""Tests for /api/contact."""

import pytest
from fastapi.testclient import TestClient

from src.leadsite.entities.core.user import UserRepository


def test_contact_accepted(client: TestClient, repository: UserRepository):
    response = client.post(
        "/api/contact",
        json={
            "name": "Ada Lovelace",
            "email": "ada@example.com",
            "company": "Analytical Engines",
            "service": "consulting",
            "message": "Please call me",
        },
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Your message has been submitted. We will review and respond soon.",
    }
    # Contact submissions are not stored
    assert repository.count() == 0


@pytest.mark.parametrize("missing", ["name", "email", "message"])
def test_contact_requires_fields(client: TestClient, missing: str):
    payload = {"name": "Ada", "email": "ada@example.com", "message": "Hi"}
    payload[missing] = ""

    response = client.post("/api/contact", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "Name, email, and message are required"}
