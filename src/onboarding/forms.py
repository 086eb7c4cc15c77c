"""
Onboarding Forms.

Registration form validation and per-step completeness checks:
- Registration needs an email and a confirmed password of 6+ characters
- Each configurable step needs every field of its active components filled
"""

import logging
from datetime import date

from pydantic import BaseModel, Field, field_validator

from .components import ComponentDefinition, ComponentType, COMPONENT_FIELDS
from .state import StepFields

logger = logging.getLogger(__name__)


MIN_PASSWORD_LENGTH = 6

ERROR_EMAIL_REQUIRED = "Email is required"
ERROR_PASSWORD_MISMATCH = "Passwords do not match"
ERROR_PASSWORD_TOO_SHORT = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"


# =============================================================================
# Registration
# =============================================================================

class RegistrationForm(BaseModel):
    """Step 1: account creation."""

    email: str = Field(default="", description="Login email")
    password: str = Field(default="", description="Plain password, hashed before storage")
    confirm_password: str = Field(default="", description="Must match password")

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: str | None) -> str:
        """Strip whitespace; missing email becomes empty string."""
        if not v:
            return ""
        return v.strip()


def validate_registration(form: RegistrationForm) -> tuple[bool, list[str]]:
    """
    Validate registration with specific error messages.

    Checks run in display order, so the first message is the one to show.

    Returns:
        (is_valid, error_messages)
    """
    errors = []

    if not form.email:
        errors.append(ERROR_EMAIL_REQUIRED)

    if form.password != form.confirm_password:
        errors.append(ERROR_PASSWORD_MISMATCH)

    if len(form.password) < MIN_PASSWORD_LENGTH:
        errors.append(ERROR_PASSWORD_TOO_SHORT)

    if errors:
        logger.info(f"Registration rejected: {errors[0]}")

    return (len(errors) == 0, errors)


# =============================================================================
# Step Fields
# =============================================================================

class StepFieldsRequest(BaseModel):
    """Partial draft update. Omitted fields are left untouched."""
    about_me: str | None = None
    street_address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    birthdate: date | None = None

    def changed_values(self) -> dict:
        return self.model_dump(exclude_unset=True)


def _is_filled(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def missing_fields(components: list[ComponentDefinition], draft: StepFields) -> list[str]:
    """
    List draft fields that block the given components.

    about_me needs non-blank text, address needs all four parts,
    birthdate needs a date.
    """
    missing = []
    for component in components:
        for name in COMPONENT_FIELDS[component.component_type]:
            if not _is_filled(getattr(draft, name)):
                missing.append(name)
    return missing


def is_step_valid(components: list[ComponentDefinition], draft: StepFields) -> bool:
    return not missing_fields(components, draft)


def fields_for_components(components: list[ComponentDefinition], draft: StepFields) -> dict:
    """Collect the record update for the components shown on a step."""
    updates = {}
    for component in components:
        for name in COMPONENT_FIELDS[component.component_type]:
            value = getattr(draft, name)
            if component.component_type == ComponentType.BIRTHDATE:
                value = value.isoformat() if value else None
            updates[name] = value
    return updates
