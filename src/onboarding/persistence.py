"""
Onboarding Persistence.

The session and the assignment store depend on these sinks abstractly.
In-memory sinks serve tests and local runs; HttpRecordSink talks to the
record-store endpoint in production. Which one is used is decided by
whoever constructs the session (see wizard_app.web.app.create_app).
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx

from .components import ComponentDefinition
from .state import UserRecord

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    """Outcome of a persistence call."""
    success: bool
    record: Any = None
    error: str = ""

    @classmethod
    def ok(cls, record: Any = None) -> "SaveResult":
        return cls(success=True, record=record)

    @classmethod
    def failed(cls, error: str) -> "SaveResult":
        return cls(success=False, error=error)


# =============================================================================
# Interfaces
# =============================================================================

class RecordSink(ABC):
    """Where user records go as onboarding progresses."""

    @abstractmethod
    async def save(self, record: UserRecord) -> SaveResult:
        """Create or replace a record."""

    @abstractmethod
    async def list_records(self) -> list[UserRecord]:
        """All records, newest first."""


class AssignmentSink(ABC):
    """Where the admin's component assignment is stored."""

    @abstractmethod
    async def save_assignments(self, definitions: list[ComponentDefinition]) -> SaveResult:
        """Replace the stored assignment."""

    @abstractmethod
    async def load_assignments(self) -> list[ComponentDefinition]:
        """Stored assignment, or an empty list if nothing was saved yet."""


def _newest_first(records: list[UserRecord]) -> list[UserRecord]:
    indexed = list(enumerate(records))
    indexed.sort(key=lambda pair: (pair[1].created_at, pair[0]), reverse=True)
    return [record for _, record in indexed]


# =============================================================================
# In-memory
# =============================================================================

class InMemoryRecordSink(RecordSink):
    """
    Dict-backed record sink.

    fail_with: when set, every save fails with this message.
    """

    def __init__(self, fail_with: str | None = None):
        self.records: dict[str, UserRecord] = {}
        self.fail_with = fail_with

    async def save(self, record: UserRecord) -> SaveResult:
        if self.fail_with:
            return SaveResult.failed(self.fail_with)
        self.records[record.id] = record
        return SaveResult.ok(record)

    async def list_records(self) -> list[UserRecord]:
        return _newest_first(list(self.records.values()))


class InMemoryAssignmentSink(AssignmentSink):
    def __init__(self, fail_with: str | None = None):
        self.definitions: list[ComponentDefinition] = []
        self.fail_with = fail_with

    async def save_assignments(self, definitions: list[ComponentDefinition]) -> SaveResult:
        if self.fail_with:
            return SaveResult.failed(self.fail_with)
        self.definitions = list(definitions)
        return SaveResult.ok(self.definitions)

    async def load_assignments(self) -> list[ComponentDefinition]:
        return list(self.definitions)


# =============================================================================
# HTTP record store
# =============================================================================

class HttpRecordSink(RecordSink):
    """
    Posts records to the record-store endpoint.

    The endpoint only keeps {name, email}, so full records are also indexed
    locally for the data review listing. name is the email local part.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.endpoint = base_url.rstrip("/") + "/api/userdata"
        self.timeout = timeout
        self._client = client
        self._posted: set[str] = set()
        self.records: dict[str, UserRecord] = {}

    async def _post(self, payload: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(self.endpoint, json=payload, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.endpoint, json=payload)

    async def save(self, record: UserRecord) -> SaveResult:
        # The endpoint is create-only; later step updates stay local
        if record.id not in self._posted:
            payload = {"name": record.display_name, "email": record.email}
            try:
                response = await self._post(payload)
                response.raise_for_status()
            except httpx.TimeoutException:
                logger.error(f"Record store timed out for {record.email}")
                return SaveResult.failed("Record store timed out. Please try again.")
            except httpx.HTTPStatusError as e:
                detail = _error_detail(e.response)
                logger.error(f"Record store rejected {record.email}: {e.response.status_code} {detail}")
                return SaveResult.failed(detail or f"Record store returned {e.response.status_code}")
            except httpx.HTTPError as e:
                logger.error(f"Record store unreachable: {e}")
                return SaveResult.failed("Record store unreachable")
            self._posted.add(record.id)

        self.records[record.id] = record
        return SaveResult.ok(record)

    async def list_records(self) -> list[UserRecord]:
        return _newest_first(list(self.records.values()))


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return ""
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or "")
    return ""
