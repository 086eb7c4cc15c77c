"""
User data records.

Backing store for the /api/userdata endpoint, plus the parser for the
locally cached user list shown on the data page.
"""

import json
import logging
import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class UserDataEntry(BaseModel):
    """One {name, email} row."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    email: str
    created_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class UserDataStore:
    """In-memory store for user data rows."""

    def __init__(self):
        self._entries: list[UserDataEntry] = []

    def list_entries(self) -> list[UserDataEntry]:
        """All entries, newest first."""
        # Ties on created_at fall back to insertion order
        indexed = list(enumerate(self._entries))
        indexed.sort(key=lambda pair: (pair[1].created_at, pair[0]), reverse=True)
        return [entry for _, entry in indexed]

    def create(self, name: str, email: str) -> UserDataEntry:
        entry = UserDataEntry(name=name, email=email)
        self._entries.append(entry)
        logger.info(f"Stored user data for {email}")
        return entry

    def __len__(self) -> int:
        return len(self._entries)


def parse_user_data_list(blob: str | None) -> list[dict]:
    """
    Parse a cached JSON list of {name, email} records.

    Anything malformed (bad JSON, not a list, entries without string
    name/email) means no data.
    """
    if not blob:
        return []
    try:
        data = json.loads(blob)
    except ValueError:
        logger.warning("Cached user list is not valid JSON")
        return []

    if not isinstance(data, list):
        return []

    entries = []
    for item in data:
        if not isinstance(item, dict):
            return []
        name, email = item.get("name"), item.get("email")
        if not isinstance(name, str) or not isinstance(email, str):
            return []
        entries.append({"name": name, "email": email})
    return entries
