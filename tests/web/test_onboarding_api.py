"""
Tests for the /api/onboarding routes.
"""

from datetime import datetime, timedelta

import pytest

from onboarding.api import SessionRegistry
from onboarding.assignments import StepAssignmentStore
from onboarding.persistence import InMemoryRecordSink


def register(client, registration):
    response = client.post("/api/onboarding/register", json=registration)
    assert response.status_code == 200, response.text
    return response.json()


class TestRegister:
    def test_register_sets_cookie_and_step(self, client, registration):
        body = register(client, registration)
        assert body["current_step"] == 2
        assert body["state"] == "collecting"
        assert body["user"]["email"] == "a@b.com"
        assert "password_hash" not in body["user"]
        assert body["message"] == "Account created successfully!"
        assert "onboarding_session" in client.cookies

    def test_mismatch_is_400(self, client, registration):
        response = client.post(
            "/api/onboarding/register",
            json={**registration, "confirm_password": "different"},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Passwords do not match"
        assert "onboarding_session" not in client.cookies

    def test_short_password_is_400(self, client):
        response = client.post(
            "/api/onboarding/register",
            json={"email": "a@b.com", "password": "12345", "confirm_password": "12345"},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Password must be at least 6 characters long"


class TestSessionRequired:
    @pytest.mark.parametrize("method,path", [
        ("get", "/api/onboarding/state"),
        ("get", "/api/onboarding/steps/2"),
        ("get", "/api/onboarding/summary"),
        ("post", "/api/onboarding/restart"),
    ])
    def test_401_without_cookie(self, client, method, path):
        response = getattr(client, method)(path)
        assert response.status_code == 401
        assert response.json()["detail"] == "No onboarding session"


class TestSteps:
    def test_get_step(self, client, registration):
        register(client, registration)
        body = client.get("/api/onboarding/steps/3").json()
        assert body["title"] == "Address Information"
        assert [c["component_type"] for c in body["components"]] == ["address", "birthdate"]

    def test_step_out_of_range(self, client, registration):
        register(client, registration)
        assert client.get("/api/onboarding/steps/4").status_code == 400

    def test_update_fields(self, client, registration):
        register(client, registration)
        response = client.put("/api/onboarding/fields", json={"about_me": "Hello"})
        assert response.status_code == 200
        body = response.json()
        assert body["draft"]["about_me"] == "Hello"
        assert body["step"]["is_valid"] is True

    def test_bad_birthdate_is_422(self, client, registration):
        register(client, registration)
        response = client.put("/api/onboarding/fields", json={"birthdate": "not-a-date"})
        assert response.status_code == 422


class TestFlow:
    def test_full_flow(self, client, registration, full_address):
        register(client, registration)

        response = client.post("/api/onboarding/advance", json={"step": 2})
        assert response.status_code == 400
        assert "about_me" in response.json()["detail"]

        response = client.post(
            "/api/onboarding/advance",
            json={"step": 2, "fields": {"about_me": "Hello there"}},
        )
        assert response.status_code == 200
        assert response.json()["current_step"] == 3

        response = client.post(
            "/api/onboarding/advance",
            json={"fields": {**full_address, "city": "", "birthdate": "1990-05-15"}},
        )
        assert response.status_code == 400

        response = client.post(
            "/api/onboarding/advance",
            json={"fields": {"city": "New York"}},
        )
        body = response.json()
        assert body["current_step"] == 4
        assert body["state"] == "completed"
        assert body["user"]["current_step"] == 4

        summary = client.get("/api/onboarding/summary").json()
        assert summary["location"] == "New York, NY"
        assert summary["birthdate"] == "1990-05-15"

    def test_back_and_restart(self, client, registration, record_sink):
        register(client, registration)
        assert client.post("/api/onboarding/back", json={}).json()["current_step"] == 1

        body = client.post("/api/onboarding/restart").json()
        assert body["current_step"] == 1
        assert body["user"] is None
        assert len(record_sink.records) == 1

    def test_back_cannot_jump_forward(self, client, registration):
        register(client, registration)
        response = client.post("/api/onboarding/back", json={"step": 4})
        assert response.status_code == 400
        assert client.get("/api/onboarding/state").json()["current_step"] == 2

    def test_second_registration_is_400(self, client, registration):
        register(client, registration)
        client.post("/api/onboarding/advance", json={"fields": {"about_me": "Hello"}})

        response = client.post(
            "/api/onboarding/register",
            json={"email": "c@d.com", "password": "secret1", "confirm_password": "secret1"},
        )
        assert response.status_code == 400
        body = client.get("/api/onboarding/state").json()
        assert body["current_step"] == 3
        assert body["user"]["email"] == "a@b.com"

    def test_admin_changes_apply_to_open_sessions(self, client, registration):
        register(client, registration)
        client.post("/api/admin/presets/all_page_2")
        body = client.get("/api/onboarding/steps/2").json()
        assert len(body["components"]) == 3


def test_persistence_failure_is_503(client, registration, record_sink):
    register(client, registration)
    record_sink.fail_with = "Record store unreachable"
    response = client.post(
        "/api/onboarding/advance",
        json={"fields": {"about_me": "Hello"}},
    )
    assert response.status_code == 503
    assert response.json()["detail"] == "Record store unreachable"
    assert client.get("/api/onboarding/state").json()["current_step"] == 2


class TestSessionRegistry:
    def test_create_purges_expired_sessions(self):
        registry = SessionRegistry(expire_hours=1)
        store, sink = StepAssignmentStore(), InMemoryRecordSink()
        old_id, old_session = registry.create(store, sink)
        registry._sessions[old_id] = (old_session, datetime.now() - timedelta(minutes=1))

        new_id, _ = registry.create(store, sink)

        assert len(registry) == 1
        assert registry.get(old_id) is None
        assert registry.get(new_id) is not None

    def test_live_sessions_survive_purge(self):
        registry = SessionRegistry()
        store, sink = StepAssignmentStore(), InMemoryRecordSink()
        registry.create(store, sink)
        registry.create(store, sink)
        assert registry.purge_expired() == 0
        assert len(registry) == 2
