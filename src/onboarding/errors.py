"""
Onboarding Errors.

Every failure in the wizard is recoverable: callers catch these, show the
message inline, and leave prior state intact.
"""


class OnboardingError(Exception):
    """Base class for all onboarding failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(OnboardingError):
    """User input failed a stated precondition (registration, bad step)."""


class IncompleteStepError(OnboardingError):
    """Step advance refused because required fields are empty."""

    def __init__(self, step: int, missing: list[str]):
        super().__init__(f"Step {step} is incomplete: missing {', '.join(missing)}")
        self.step = step
        self.missing = missing


class InvalidPageError(OnboardingError):
    """Component assigned to a page outside the configurable range."""

    def __init__(self, page: int):
        super().__init__(f"Invalid page {page}: components can only be placed on pages 2 or 3")
        self.page = page


class UnknownPresetError(OnboardingError):
    """Preset name is not one of the fixed presets."""

    def __init__(self, preset_name: str):
        super().__init__(f"Unknown preset: {preset_name}")
        self.preset_name = preset_name


class UnknownComponentError(OnboardingError):
    """Component type is not part of the closed set."""

    def __init__(self, component_type: str):
        super().__init__(f"Unknown component type: {component_type}")
        self.component_type = component_type


class DuplicateComponentError(OnboardingError):
    """Write would leave two active components of the same type."""

    def __init__(self, component_type: str):
        super().__init__(f"Duplicate active component: {component_type}")
        self.component_type = component_type


class PersistenceError(OnboardingError):
    """External store failed. Retryable by re-triggering the action."""


class SessionBusyError(OnboardingError):
    """Another operation is still in flight for this session."""

    def __init__(self) -> None:
        super().__init__("Another operation is still in progress")
