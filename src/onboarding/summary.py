"""
Display helpers for onboarding.

Step titles, progress, and the completion summary. Used by the API, the CLI
walk-through, and the data review listing.
"""

from .components import ComponentDefinition, ComponentType
from .state import TOTAL_STEPS, UserRecord

STEP_DESCRIPTION = "Please fill out the information below to continue."

NOT_PROVIDED = "Not provided"


def get_step_title(components: list[ComponentDefinition], step: int) -> str:
    """Title for a configurable step based on what it shows."""
    types = {c.component_type for c in components}

    if ComponentType.ABOUT_ME in types and ComponentType.ADDRESS in types:
        return "Personal & Address Information"
    if ComponentType.ABOUT_ME in types:
        return "Tell Us About Yourself"
    if ComponentType.ADDRESS in types:
        return "Address Information"
    if ComponentType.BIRTHDATE in types:
        return "Personal Details"
    return f"Step {step}"


def get_progress(step: int, total_steps: int = TOTAL_STEPS) -> dict:
    """Progress indicator data: "Step N of M" and a rounded percentage."""
    return {
        "step": step,
        "total_steps": total_steps,
        "label": f"Step {step} of {total_steps}",
        "percent": round(step / total_steps * 100),
    }


def truncate_text(text: str | None, max_length: int = 50) -> str:
    if not text:
        return NOT_PROVIDED
    return f"{text[:max_length]}..." if len(text) > max_length else text


def format_address(record: UserRecord) -> str:
    if not record.street_address:
        return NOT_PROVIDED
    return f"{record.street_address}, {record.city}, {record.state} {record.zip}"


def get_completion_summary(record: UserRecord) -> dict:
    """
    Summary shown on the completion screen.

    Only fields the user actually filled in are included.
    """
    summary = {"email": record.email}

    if record.about_me:
        summary["about"] = f"{record.about_me[:50]}..."
    if record.city:
        summary["location"] = f"{record.city}, {record.state}"
    if record.birthdate:
        summary["birthdate"] = record.birthdate

    return summary
