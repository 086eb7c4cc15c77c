"""
Admin API Endpoints.

Lets an administrator decide which components appear on steps 2 and 3.
Edits apply to the shared StepAssignmentStore immediately; save() persists.
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from .api import get_store, to_http_error
from .assignments import StepAssignmentStore
from .components import COMPONENT_DESCRIPTIONS, get_preset_options
from .errors import OnboardingError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


class ComponentUpdateRequest(BaseModel):
    page_number: int | None = Field(default=None, description="2 or 3")
    is_active: bool | None = None


def config_response(store: StepAssignmentStore, message: str = "") -> dict:
    overview = store.page_overview()
    return {
        "components": [
            {
                **c.to_dict(),
                "label": c.label,
                "description": COMPONENT_DESCRIPTIONS[c.component_type],
            }
            for c in store.components
        ],
        "pages": {
            str(page): [c.component_type.value for c in components]
            for page, components in overview.items()
        },
        "has_changes": store.has_changes,
        "message": message,
    }


@router.get("/config")
async def get_config(store: StepAssignmentStore = Depends(get_store)) -> dict:
    """Current assignment with per-page preview."""
    return {**config_response(store), "presets": get_preset_options()}


@router.get("/presets")
async def list_presets() -> list[dict]:
    return get_preset_options()


@router.put("/config/{component_type}")
async def update_component(
    component_type: str,
    request: ComponentUpdateRequest,
    store: StepAssignmentStore = Depends(get_store),
) -> dict:
    """Move a component to another page and/or toggle it."""
    try:
        if request.page_number is not None:
            store.reassign_component(component_type, request.page_number)
        if request.is_active is not None:
            store.set_component_active(component_type, request.is_active)
    except OnboardingError as e:
        raise to_http_error(e)
    return config_response(store)


@router.post("/presets/{preset_name}")
async def apply_preset(preset_name: str, store: StepAssignmentStore = Depends(get_store)) -> dict:
    try:
        store.apply_preset(preset_name)
    except OnboardingError as e:
        raise to_http_error(e)
    return config_response(store, "Configuration updated with preset settings")


@router.post("/config/save")
async def save_config(store: StepAssignmentStore = Depends(get_store)) -> dict:
    """Persist the assignment. 503 on failure, edits stay pending."""
    try:
        await store.save()
    except OnboardingError as e:
        raise to_http_error(e)
    return config_response(store, "Configuration saved successfully!")
