"""
HTTP tests for /calendar — every route behind the access cookie and scoped
to the caller.
"""

import re

import pytest
from fastapi.testclient import TestClient

from bcal.main import app

ENTRY = {
    "title": "Test Meeting",
    "startDate": "2025-01-15T10:00:00.000Z",
    "endDate": "2025-01-15T11:00:00.000Z",
    "content": "Discussion about project",
}


def extract_id(body: dict) -> str:
    match = re.search(r"id (\S+)", body["message"])
    return match.group(1) if match else ""


@pytest.fixture
def alice(client):
    response = client.post("/auth/signup", json={"email": "alice@example.com", "password": "Passw0rd!"})
    assert response.status_code == 201
    return client


@pytest.fixture
def bob(client):
    # separate cookie jar, same app and database override
    other = TestClient(app)
    response = other.post("/auth/signup", json={"email": "bob@example.com", "password": "Passw0rd!"})
    assert response.status_code == 201
    return other


@pytest.fixture
def entry_id(alice):
    response = alice.post("/calendar", json=ENTRY)
    assert response.status_code == 201
    return extract_id(response.json())


class TestCreate:

    def test_create(self, alice):
        response = alice.post("/calendar", json=ENTRY)
        assert response.status_code == 201
        assert re.match(r"Calendar entry with id .+ created", response.json()["message"])

    def test_create_without_content(self, alice):
        body = {k: v for k, v in ENTRY.items() if k != "content"}
        assert alice.post("/calendar", json=body).status_code == 201

    def test_requires_authentication(self, client):
        assert client.post("/calendar", json=ENTRY).status_code == 401

    @pytest.mark.parametrize("missing", ["title", "startDate", "endDate"])
    def test_missing_field_is_400(self, alice, missing):
        body = {k: v for k, v in ENTRY.items() if k != missing}
        assert alice.post("/calendar", json=body).status_code == 400

    def test_start_after_end_is_400(self, alice):
        body = {**ENTRY, "startDate": "2025-01-15T12:00:00.000Z"}
        response = alice.post("/calendar", json=body)
        assert response.status_code == 400
        assert any("startDate must be before or equal to endDate" in m for m in response.json()["message"])

    def test_invalid_date_is_400(self, alice):
        assert alice.post("/calendar", json={**ENTRY, "startDate": "tomorrow"}).status_code == 400


class TestRead:

    def test_get_one(self, alice, entry_id):
        response = alice.get(f"/calendar/{entry_id}")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == entry_id
        assert data["title"] == "Test Meeting"
        assert data["startDate"].startswith("2025-01-15T10:00:00")
        assert data["userId"] == alice.get("/auth/me").json()["data"]["id"]

    def test_get_missing_is_404(self, alice):
        assert alice.get("/calendar/does-not-exist").status_code == 404

    def test_list_with_window(self, alice, entry_id):
        alice.post("/calendar", json={**ENTRY, "startDate": "2025-02-01T10:00:00Z", "endDate": "2025-02-01T11:00:00Z"})

        everything = alice.get("/calendar").json()["data"]
        assert len(everything) == 2

        january = alice.get(
            "/calendar",
            params={"startDate": "2025-01-01T00:00:00Z", "endDate": "2025-01-31T23:59:59Z"},
        ).json()["data"]
        assert [e["id"] for e in january] == [entry_id]

    def test_inverted_window_is_400(self, alice):
        response = alice.get(
            "/calendar",
            params={"startDate": "2025-02-01T00:00:00Z", "endDate": "2025-01-01T00:00:00Z"},
        )
        assert response.status_code == 400


class TestUpdate:

    def test_partial_update(self, alice, entry_id):
        response = alice.patch(f"/calendar/{entry_id}", json={"title": "Renamed"})
        assert response.status_code == 200
        assert alice.get(f"/calendar/{entry_id}").json()["data"]["title"] == "Renamed"

    def test_start_only_past_stored_end_is_400(self, alice, entry_id):
        response = alice.patch(f"/calendar/{entry_id}", json={"startDate": "2025-01-15T12:00:00Z"})
        assert response.status_code == 400

    def test_end_only_before_stored_start_is_400(self, alice, entry_id):
        response = alice.patch(f"/calendar/{entry_id}", json={"endDate": "2025-01-15T09:00:00Z"})
        assert response.status_code == 400

    def test_empty_update_is_400(self, alice, entry_id):
        assert alice.patch(f"/calendar/{entry_id}", json={}).status_code == 400


class TestOwnershipIsolation:

    def test_other_user_gets_404_everywhere(self, alice, bob, entry_id):
        assert bob.get(f"/calendar/{entry_id}").status_code == 404
        assert bob.patch(f"/calendar/{entry_id}", json={"title": "Mine now"}).status_code == 404
        assert bob.delete(f"/calendar/{entry_id}").status_code == 404
        assert bob.get("/calendar").json()["data"] == []

        assert alice.get(f"/calendar/{entry_id}").json()["data"]["title"] == "Test Meeting"


def test_delete(alice, entry_id):
    response = alice.delete(f"/calendar/{entry_id}")
    assert response.status_code == 200
    assert alice.get(f"/calendar/{entry_id}").status_code == 404
