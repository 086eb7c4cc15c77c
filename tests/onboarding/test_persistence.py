"""
Tests for record sinks.

HttpRecordSink is exercised against httpx.MockTransport, no real network.
"""

import asyncio
import json

import httpx
import pytest

from onboarding.persistence import HttpRecordSink, InMemoryRecordSink
from onboarding.state import UserRecord


def run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


def make_sink(handler) -> HttpRecordSink:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpRecordSink("http://records.test/", client=client)


class TestInMemoryRecordSink:
    def test_save_and_list_newest_first(self):
        sink = InMemoryRecordSink()
        older = UserRecord(email="old@example.com", created_at="2024-01-01T00:00:00+00:00")
        newer = UserRecord(email="new@example.com", created_at="2024-06-01T00:00:00+00:00")
        run(sink.save(older))
        run(sink.save(newer))
        assert [r.email for r in run(sink.list_records())] == ["new@example.com", "old@example.com"]

    def test_save_replaces_existing(self):
        sink = InMemoryRecordSink()
        record = UserRecord(email="a@b.com")
        run(sink.save(record))
        run(sink.save(record.merged({"city": "Boston"})))
        assert len(sink.records) == 1
        assert sink.records[record.id].city == "Boston"

    def test_fail_with(self):
        result = run(InMemoryRecordSink(fail_with="boom").save(UserRecord(email="a@b.com")))
        assert not result.success
        assert result.error == "boom"


class TestHttpRecordSink:
    def test_posts_name_and_email_once(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            body = json.loads(request.content)
            return httpx.Response(200, json={"id": "1", **body})

        sink = make_sink(handler)
        record = UserRecord(email="jane.smith@example.com")

        assert run(sink.save(record)).success
        assert run(sink.save(record.merged({"about_me": "Hi"}))).success

        assert len(requests) == 1
        assert str(requests[0].url) == "http://records.test/api/userdata"
        assert json.loads(requests[0].content) == {"name": "jane.smith", "email": "jane.smith@example.com"}
        assert run(sink.list_records())[0].about_me == "Hi"

    def test_email_without_local_part_sends_full_email_as_name(self):
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={})

        assert run(make_sink(handler).save(UserRecord(email="@x.com"))).success
        assert bodies == [{"name": "@x.com", "email": "@x.com"}]

    def test_rejected_request(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "Name and email required"})

        sink = make_sink(handler)
        result = run(sink.save(UserRecord(email="a@b.com")))
        assert not result.success
        assert result.error == "Name and email required"
        assert run(sink.list_records()) == []

    def test_server_error_without_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="oops")

        result = run(make_sink(handler).save(UserRecord(email="a@b.com")))
        assert not result.success
        assert "500" in result.error

    def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        result = run(make_sink(handler).save(UserRecord(email="a@b.com")))
        assert not result.success
        assert "timed out" in result.error

    def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        result = run(make_sink(handler).save(UserRecord(email="a@b.com")))
        assert result.error == "Record store unreachable"

    def test_failed_create_is_retried(self):
        calls = {"n": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["n"] += 1
            if calls["n"] == 1:
                return httpx.Response(503, json={"detail": "busy"})
            return httpx.Response(200, json={})

        sink = make_sink(handler)
        record = UserRecord(email="a@b.com")
        assert not run(sink.save(record)).success
        assert run(sink.save(record)).success
        assert calls["n"] == 2
