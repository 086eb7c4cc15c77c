"""
Onboarding State.

The four wizard steps, the user record that accumulates profile data as each
step is completed, and the draft field values held while a step is open.
"""

from dataclasses import dataclass, field, asdict, fields
from datetime import date, datetime, timezone
from enum import Enum, IntEnum
from typing import Any
import json
import uuid


class OnboardingStep(IntEnum):
    """Wizard steps."""
    REGISTRATION = 1
    STEP_2 = 2
    STEP_3 = 3
    COMPLETED = 4


TOTAL_STEPS = len(OnboardingStep)


class SessionState(Enum):
    """Coarse session state derived from the displayed step."""
    REGISTERING = "registering"
    COLLECTING = "collecting"
    COMPLETED = "completed"


STEP_LABELS = {
    OnboardingStep.REGISTRATION: "Registration",
    OnboardingStep.STEP_2: "Step 2",
    OnboardingStep.STEP_3: "Step 3",
    OnboardingStep.COMPLETED: "Completed",
}


def step_label(step: int) -> str:
    """Display label for a stored step value."""
    try:
        return STEP_LABELS[OnboardingStep(step)]
    except ValueError:
        return "Unknown"


def state_for_step(step: int) -> SessionState:
    if step <= OnboardingStep.REGISTRATION:
        return SessionState.REGISTERING
    if step >= OnboardingStep.COMPLETED:
        return SessionState.COMPLETED
    return SessionState.COLLECTING


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# Profile fields a step can write into the record
PROFILE_FIELDS = ("about_me", "street_address", "city", "state", "zip", "birthdate")


@dataclass
class UserRecord:
    """
    One user going through onboarding.

    Created at registration with current_step=2 and filled in by merging
    partial updates as each step completes.
    """
    email: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    current_step: int = OnboardingStep.STEP_2

    about_me: str | None = None
    street_address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    birthdate: str | None = None  # ISO date

    password_hash: str | None = None
    created_at: str = ""

    def __post_init__(self):
        if not self.created_at:
            self.created_at = _utc_now_iso()

    def merged(self, updates: dict[str, Any]) -> "UserRecord":
        """
        Return a copy with updates applied.

        current_step never decreases. id and created_at are fixed at creation.
        """
        data = self.to_dict(include_secrets=True)
        for key, value in updates.items():
            if key in ("id", "created_at"):
                continue
            if key == "current_step":
                value = max(int(value), self.current_step)
            elif key == "birthdate" and isinstance(value, date):
                value = value.isoformat()
            elif key not in data:
                raise ValueError(f"Unknown user field: {key}")
            data[key] = value
        return UserRecord.from_dict(data)

    @property
    def display_name(self) -> str:
        # "@x.com" has no local part; the record store needs a non-empty name
        return self.email.split("@")[0] or self.email

    def to_dict(self, include_secrets: bool = False) -> dict:
        """Serialize for storage or API output. Password hash only on request."""
        data = asdict(self)
        data["current_step"] = int(self.current_step)
        if not include_secrets:
            data.pop("password_hash")
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "UserRecord":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_json(self) -> str:
        return json.dumps(self.to_dict(include_secrets=True))

    @classmethod
    def from_json(cls, json_str: str) -> "UserRecord":
        return cls.from_dict(json.loads(json_str))


@dataclass
class StepFields:
    """In-progress values for the configurable steps."""
    about_me: str = ""
    street_address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    birthdate: date | None = None

    @classmethod
    def from_record(cls, record: UserRecord | None) -> "StepFields":
        """Seed the draft from whatever the record already holds."""
        if record is None:
            return cls()
        birthdate = date.fromisoformat(record.birthdate) if record.birthdate else None
        return cls(
            about_me=record.about_me or "",
            street_address=record.street_address or "",
            city=record.city or "",
            state=record.state or "",
            zip=record.zip or "",
            birthdate=birthdate,
        )

    def update(self, **values: Any) -> None:
        for key, value in values.items():
            if key not in PROFILE_FIELDS:
                raise ValueError(f"Unknown field: {key}")
            if key == "birthdate":
                if isinstance(value, str):
                    value = date.fromisoformat(value) if value else None
            elif value is None:
                value = ""
            setattr(self, key, value)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["birthdate"] = self.birthdate.isoformat() if self.birthdate else None
        return data
