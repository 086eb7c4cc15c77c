"""
Tests for the data review routes.
"""

import asyncio

from onboarding.state import UserRecord


def run(coro):
    return asyncio.run(coro)


def test_list_users_with_progress(client, record_sink):
    run(record_sink.save(UserRecord(
        email="john.doe@example.com",
        current_step=4,
        about_me="I am a software developer passionate about creating amazing user experiences",
        street_address="123 Main St",
        city="New York",
        state="NY",
        zip="10001",
        birthdate="1990-05-15",
        created_at="2024-05-03T00:00:00+00:00",
    )))
    run(record_sink.save(UserRecord(
        email="jane.smith@example.com",
        current_step=2,
        created_at="2024-05-02T00:00:00+00:00",
    )))

    body = client.get("/api/data/users").json()
    assert body["total"] == 2
    assert body["step_counts"] == {"1": 0, "2": 1, "3": 0, "4": 1}

    john, jane = body["users"]
    assert john["step_label"] == "Completed"
    assert john["address"] == "123 Main St, New York, NY 10001"
    assert john["about_me_preview"].endswith("...")
    assert len(john["about_me_preview"]) == 53
    assert "password_hash" not in john

    assert jane["step_label"] == "Step 2"
    assert jane["address"] == "Not provided"
    assert jane["about_me_preview"] == "Not provided"


def test_registered_users_show_up(client, registration):
    client.post("/api/onboarding/register", json=registration)
    body = client.get("/api/data/users").json()
    assert [u["email"] for u in body["users"]] == ["a@b.com"]


def test_read_cached_list(client):
    body = client.post("/api/data/cached", json={"blob": '[{"name": "A", "email": "a@b.com"}]'}).json()
    assert body == {"users": [{"name": "A", "email": "a@b.com"}], "total": 1}

    body = client.post("/api/data/cached", json={"blob": "{broken"}).json()
    assert body == {"users": [], "total": 0}
