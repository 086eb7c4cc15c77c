"""
Record-store endpoint.

GET lists stored {name, email} rows newest first; POST creates one.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from wizard_app.records import UserDataEntry, UserDataStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/userdata", tags=["records"])


class UserDataRequest(BaseModel):
    name: str | None = None
    email: str | None = None


def get_user_data_store(request: Request) -> UserDataStore:
    return request.app.state.user_data_store


@router.get("", response_model=list[UserDataEntry])
async def list_user_data(request: Request) -> list[UserDataEntry]:
    return get_user_data_store(request).list_entries()


@router.post("", response_model=None)
async def create_user_data(body: UserDataRequest, request: Request):
    if not body.name or not body.email:
        return JSONResponse(status_code=400, content={"error": "Name and email required"})
    return get_user_data_store(request).create(body.name, body.email)
