"""End-to-end tests for /api/register."""

import pytest
from fastapi.testclient import TestClient

from src.leadsite.entities.core.user import UserRepository

VALID = {
    "firstName": "Ada",
    "lastName": "Lovelace",
    "email": "Ada@Example.com",
    "company": "Analytical Engines",
    "phone": "555-0100",
    "message": "Interested in a demo",
}


def register(client: TestClient, **overrides):
    return client.post("/api/register", json={**VALID, **overrides})


class TestRegister:
    def test_register_success(self, client: TestClient):
        response = register(client)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Registration successful! We will contact you within 24 hours."
        user = body["user"]
        assert user["id"] > 0
        assert user["email"] == "ada@example.com"
        assert user["firstName"] == "Ada"
        assert user["company"] == "Analytical Engines"
        assert "createdAt" in user
        assert "phone" not in user

    def test_message_is_optional(self, client: TestClient):
        payload = {k: v for k, v in VALID.items() if k != "message"}

        assert client.post("/api/register", json=payload).status_code == 200

    @pytest.mark.parametrize("missing", ["firstName", "lastName", "email", "company", "phone"])
    def test_missing_required_field(self, client: TestClient, missing: str):
        payload = {k: v for k, v in VALID.items() if k != missing}

        response = client.post("/api/register", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "All required fields must be provided"}

    def test_blank_required_field(self, client: TestClient):
        response = register(client, company="   ")

        assert response.status_code == 400
        assert response.json() == {"error": "All required fields must be provided"}

    def test_duplicate_email_ignores_case(self, client: TestClient):
        assert register(client, email="x@y.com").status_code == 200

        response = register(client, email="X@Y.COM", firstName="Other")

        assert response.status_code == 409
        assert response.json() == {"error": "An account with this email already exists"}
        assert client.get("/api/register").json()["total"] == 1

    def test_duplicate_caught_by_unique_constraint(self, client: TestClient, monkeypatch):
        assert register(client, email="x@y.com").status_code == 200
        monkeypatch.setattr(UserRepository, "get_by_email", lambda self, email: None)

        response = register(client, email="X@Y.com", firstName="Other")

        assert response.status_code == 409
        assert response.json() == {"error": "An account with this email already exists"}
        assert client.get("/api/register").json()["total"] == 1

    def test_malformed_body(self, client: TestClient):
        response = client.post(
            "/api/register",
            content="not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}

    def test_store_failure_is_generic(self, client: TestClient, engine):
        with engine.begin() as connection:
            connection.exec_driver_sql("DROP TABLE users")

        response = register(client)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error. Please try again later."}


class TestListRegistrations:
    @pytest.fixture
    def registered(self, client: TestClient):
        for i, company in enumerate(["Acme", "Globex", "Acme"]):
            register(client, email=f"lead{i}@example.com", company=company, firstName=f"Lead{i}")

    def test_list_all(self, client: TestClient, registered):
        body = client.get("/api/register").json()

        assert body["total"] == 3
        assert body["returned"] == 3
        assert [u["firstName"] for u in body["users"]] == ["Lead2", "Lead1", "Lead0"]
        assert {"phone", "message", "updatedAt"} <= set(body["users"][0])

    def test_paging(self, client: TestClient, registered):
        body = client.get("/api/register", params={"limit": 1, "offset": 1}).json()

        assert body["returned"] == 1
        assert body["total"] == 3
        assert body["users"][0]["firstName"] == "Lead1"

    def test_invalid_limit(self, client: TestClient):
        response = client.get("/api/register", params={"limit": 0})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request parameters"}

    @pytest.mark.parametrize(
        "params", [{"limit": "abc"}, {"limit": "1_0"}, {"offset": "-1"}, {"limit": "2.5"}]
    )
    def test_malformed_paging(self, client: TestClient, params):
        response = client.get("/api/register", params=params)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request parameters"}

    def test_empty_query_values_are_ignored(self, client: TestClient, registered):
        response = client.get("/api/register?limit=&offset=&search=&company=")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 3
        assert [u["firstName"] for u in body["users"]] == ["Lead2", "Lead1", "Lead0"]

    def test_search(self, client: TestClient, registered):
        body = client.get("/api/register", params={"search": "GLOBEX"}).json()

        assert [u["company"] for u in body["users"]] == ["Globex"]
        assert body["total"] == 3

    def test_company_filter_is_exact(self, client: TestClient, registered):
        assert client.get("/api/register", params={"company": "Acme"}).json()["returned"] == 2
        assert client.get("/api/register", params={"company": "acme"}).json()["returned"] == 0

    def test_search_wins_over_company(self, client: TestClient, registered):
        body = client.get(
            "/api/register", params={"search": "lead0", "company": "Globex"}
        ).json()

        assert [u["firstName"] for u in body["users"]] == ["Lead0"]

    def test_store_failure(self, client: TestClient, engine):
        with engine.begin() as connection:
            connection.exec_driver_sql("DROP TABLE users")

        response = client.get("/api/register")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to retrieve registrations"}


class TestDeleteRegistration:
    def test_delete(self, client: TestClient):
        user_id = register(client).json()["user"]["id"]

        response = client.delete("/api/register", params={"id": user_id})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "User deleted successfully",
            "userId": user_id,
        }
        assert client.get("/api/register").json()["total"] == 0

    def test_delete_then_register_same_email(self, client: TestClient):
        user_id = register(client).json()["user"]["id"]
        client.delete("/api/register", params={"id": user_id})

        again = register(client)

        assert again.status_code == 200
        assert again.json()["user"]["id"] > user_id

    def test_missing_id(self, client: TestClient):
        response = client.delete("/api/register")

        assert response.status_code == 400
        assert response.json() == {"error": "User ID is required"}

    def test_non_numeric_id(self, client: TestClient):
        response = client.delete("/api/register", params={"id": "abc"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid user ID"}

    @pytest.mark.parametrize("user_id", ["1_0", "+1", " 1", "1 ", "1.5", "١"])
    def test_malformed_id(self, client: TestClient, user_id: str):
        register(client)

        response = client.delete("/api/register", params={"id": user_id})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid user ID"}
        assert client.get("/api/register").json()["total"] == 1

    def test_unknown_id(self, client: TestClient):
        response = client.delete("/api/register", params={"id": 999})

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}
