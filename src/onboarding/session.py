"""
Onboarding Session.

Drives one user through the wizard:

    Registering (1) -> Collecting (2..3) -> Completed (4)

The session owns the current user record, the draft field values, and the
displayed step. Which fields a step collects comes from the
StepAssignmentStore; where records go is the injected RecordSink.
"""

import logging
from contextlib import contextmanager
from typing import Any

from .assignments import StepAssignmentStore
from .components import ComponentDefinition
from .errors import (
    IncompleteStepError,
    PersistenceError,
    SessionBusyError,
    ValidationError,
)
from .forms import (
    RegistrationForm,
    fields_for_components,
    missing_fields,
    validate_registration,
)
from .persistence import InMemoryRecordSink, RecordSink
from .security import hash_password
from .state import (
    OnboardingStep,
    SessionState,
    StepFields,
    UserRecord,
    state_for_step,
)
from .summary import get_completion_summary, get_progress, get_step_title, STEP_DESCRIPTION

logger = logging.getLogger(__name__)


class OnboardingSession:
    """
    One user's pass through the wizard.

    Not thread-safe. Async operations set `loading` while in flight and a
    second operation started meanwhile raises SessionBusyError.
    """

    def __init__(self, store: StepAssignmentStore, sink: RecordSink | None = None):
        self.store = store
        self.sink = sink or InMemoryRecordSink()
        self.current_user: UserRecord | None = None
        self.current_step: int = OnboardingStep.REGISTRATION
        self.draft = StepFields()
        self.loading = False

    @contextmanager
    def _busy(self):
        if self.loading:
            raise SessionBusyError()
        self.loading = True
        try:
            yield
        finally:
            self.loading = False

    @property
    def state(self) -> SessionState:
        return state_for_step(self.current_step)

    # =========================================================================
    # Registration
    # =========================================================================

    async def register_user(self, email: str, password: str, confirm_password: str) -> UserRecord:
        """
        Create the user record and move to step 2.

        Only allowed on step 1. Raises ValidationError (bad input, or already
        past registration) or PersistenceError (sink failed); a failed
        registration leaves the session as it was.
        """
        with self._busy():
            if self.state != SessionState.REGISTERING:
                raise ValidationError("Already registered. Go back to step 1 or restart to register again")

            form = RegistrationForm(email=email, password=password, confirm_password=confirm_password)
            is_valid, errors = validate_registration(form)
            if not is_valid:
                raise ValidationError(errors[0])

            record = UserRecord(
                email=form.email,
                current_step=OnboardingStep.STEP_2,
                password_hash=hash_password(form.password),
            )
            result = await self.sink.save(record)
            if not result.success:
                logger.error(f"Failed to create account for {form.email}: {result.error}")
                raise PersistenceError(result.error or "Failed to create account")

            self.current_user = record
            self.current_step = OnboardingStep.STEP_2
            self.draft = StepFields.from_record(record)

        logger.info(f"Registered user {record.id}")
        return record

    # =========================================================================
    # Field collection
    # =========================================================================

    def set_fields(self, **values: Any) -> StepFields:
        """Update draft values. Nothing is persisted until advance()."""
        self.draft.update(**values)
        return self.draft

    def components_for_step(self, step: int) -> list[ComponentDefinition]:
        return self.store.list_components_for_step(step)

    def missing_fields(self, step: int) -> list[str]:
        return missing_fields(self.components_for_step(step), self.draft)

    def is_step_valid(self, step: int) -> bool:
        return not self.missing_fields(step)

    async def update_user(self, updates: dict[str, Any]) -> UserRecord:
        """Merge a partial update into the current record and persist it."""
        with self._busy():
            return await self._persist(updates)

    async def _persist(self, updates: dict[str, Any]) -> UserRecord:
        if self.current_user is None:
            raise ValidationError("No registered user")

        updated = self.current_user.merged(updates)
        result = await self.sink.save(updated)
        if not result.success:
            # Local record untouched, so nothing to undo
            logger.error(f"Failed to save user {updated.id}: {result.error}")
            raise PersistenceError(result.error or "Failed to save your information")

        self.current_user = updated
        return updated

    # =========================================================================
    # Navigation
    # =========================================================================

    def _check_advanceable(self, step: int | None) -> int:
        if self.current_user is None:
            raise ValidationError("Register before continuing")
        if step is None:
            step = self.current_step
        if step != self.current_step:
            raise ValidationError(f"Step {step} is not the current step")
        if step not in (OnboardingStep.STEP_2, OnboardingStep.STEP_3):
            raise ValidationError(f"Step {step} cannot be advanced")
        return step

    async def advance(self, step: int | None = None) -> int:
        """
        Save the current step and move to the next one.

        A step with no active components passes straight through. Returns the
        new displayed step.
        """
        with self._busy():
            step = self._check_advanceable(step)
            components = self.components_for_step(step)

            missing = missing_fields(components, self.draft)
            if missing:
                logger.warning(f"Advance from step {step} refused, missing: {missing}")
                raise IncompleteStepError(step, missing)

            updates = fields_for_components(components, self.draft)
            updates["current_step"] = step + 1
            await self._persist(updates)

            self.current_step = step + 1

        if not components:
            logger.info(f"Step {step} has no components, skipped to {self.current_step}")
        else:
            logger.info(f"User {self.current_user.id} advanced to step {self.current_step}")
        return self.current_step

    def go_back(self, step: int | None = None) -> int:
        """
        Show the previous step. Stored progress and values are untouched.

        `step`, when given, must be the displayed step; back never moves forward.
        """
        if step is not None and step != self.current_step:
            raise ValidationError(f"Step {step} is not the current step")
        self.current_step = max(OnboardingStep.REGISTRATION, self.current_step - 1)
        return self.current_step

    def restart(self) -> None:
        """
        Start over at registration.

        Drops this session's user and draft. Records already saved to the
        sink are kept.
        """
        if self.loading:
            raise SessionBusyError()
        if self.current_user is not None:
            logger.info(f"Session restarted, leaving user {self.current_user.id} in store")
        self.current_user = None
        self.draft = StepFields()
        self.current_step = OnboardingStep.REGISTRATION

    # =========================================================================
    # Display
    # =========================================================================

    def step_title(self, step: int | None = None) -> str:
        step = self.current_step if step is None else step
        return get_step_title(self.components_for_step(step), step)

    def progress(self) -> dict:
        return get_progress(self.current_step)

    def summary(self) -> dict:
        if self.current_user is None:
            raise ValidationError("No registered user")
        return get_completion_summary(self.current_user)

    def step_view(self, step: int | None = None) -> dict:
        """Everything needed to render a configurable step."""
        step = self.current_step if step is None else step
        components = self.components_for_step(step)
        return {
            "step": step,
            "title": get_step_title(components, step),
            "description": STEP_DESCRIPTION,
            "components": [c.to_dict() for c in components],
            "is_valid": not missing_fields(components, self.draft),
            "missing_fields": missing_fields(components, self.draft),
        }

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "current_step": int(self.current_step),
            "user": self.current_user.to_dict() if self.current_user else None,
            "draft": self.draft.to_dict(),
            "progress": self.progress(),
            "loading": self.loading,
        }
