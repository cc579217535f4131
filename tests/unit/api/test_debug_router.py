"""Tests for /api/debug and the log mirroring behind it."""

from fastapi.testclient import TestClient


def messages(client: TestClient) -> list[str]:
    return [entry["message"] for entry in client.get("/api/debug").json()["logs"]]


def test_logs_are_newest_first_with_request_context(client: TestClient):
    client.post("/api/contact", json={"name": "A", "email": "a@b.io", "message": "m"})

    body = client.get("/api/debug").json()

    assert body["totalLogs"] == len(body["logs"])
    assert "timestamp" in body
    submission = next(
        entry for entry in body["logs"] if entry["message"] == "Contact form submission received"
    )
    assert submission["level"] == "info"
    assert submission["endpoint"] == "/api/contact"
    assert submission["method"] == "POST"
    assert submission["requestId"]
    assert submission["data"]["email"] == "a@b.io"

    timestamps = [entry["timestamp"] for entry in body["logs"]]
    assert timestamps == sorted(timestamps, reverse=True)


def test_request_id_header_is_used(client: TestClient):
    client.post(
        "/api/contact",
        json={"name": "A", "email": "a@b.io", "message": "m"},
        headers={"X-Request-ID": "req-123"},
    )

    logs = client.get("/api/debug").json()["logs"]

    assert any(
        entry["requestId"] == "req-123" and entry["message"] == "Contact form submission received"
        for entry in logs
    )


def test_limit(client: TestClient):
    for _ in range(3):
        client.get("/health")

    assert len(client.get("/api/debug", params={"limit": 2}).json()["logs"]) == 2


def test_total_counts_all_buffered_entries(client: TestClient):
    for _ in range(3):
        client.get("/health")
    everything = client.get("/api/debug").json()

    body = client.get("/api/debug", params={"limit": 2}).json()

    assert len(body["logs"]) == 2
    assert body["totalLogs"] > len(everything["logs"]) > 2


def test_clear(client: TestClient):
    client.post("/api/contact", json={"name": "A", "email": "a@b.io", "message": "m"})

    response = client.delete("/api/debug")

    assert response.status_code == 200
    assert response.json()["message"] == "Server logs cleared"
    remaining = messages(client)
    assert "Contact form submission received" not in remaining
    assert "Server logs cleared" in remaining


def test_warnings_are_buffered(client: TestClient):
    client.post("/api/register", json={"firstName": "Only"})

    logs = client.get("/api/debug").json()["logs"]

    assert any(
        entry["level"] == "warn"
        and entry["message"] == "Registration validation failed - missing required fields"
        for entry in logs
    )
