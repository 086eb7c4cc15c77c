"""
Data review routes.

Lists users who went through onboarding with their progress.
"""

import logging

from fastapi import APIRouter, Request
from pydantic import BaseModel

from onboarding.state import OnboardingStep, UserRecord, step_label
from onboarding.summary import format_address, truncate_text
from wizard_app.records import parse_user_data_list

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/data", tags=["data"])


class CachedListRequest(BaseModel):
    blob: str | None = None


def user_row(record: UserRecord) -> dict:
    return {
        **record.to_dict(),
        "step_label": step_label(record.current_step),
        "address": format_address(record),
        "about_me_preview": truncate_text(record.about_me),
    }


def count_by_step(records: list[UserRecord]) -> dict[int, int]:
    counts = {int(step): 0 for step in OnboardingStep}
    for record in records:
        if record.current_step in counts:
            counts[record.current_step] += 1
    return counts


@router.get("/users")
async def list_users(request: Request) -> dict:
    """All user records newest first, plus how many are on each step."""
    records = await request.app.state.record_sink.list_records()
    return {
        "users": [user_row(r) for r in records],
        "total": len(records),
        "step_counts": count_by_step(records),
    }


@router.post("/cached")
async def read_cached_list(body: CachedListRequest) -> dict:
    """Parse a client-side cached {name, email} list. Malformed means empty."""
    entries = parse_user_data_list(body.blob)
    return {"users": entries, "total": len(entries)}
