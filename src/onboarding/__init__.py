"""
Onboarding Wizard.

Registration followed by configurable profile steps and a completion screen:

1. Registration - email and confirmed password
2. Step 2 - components the admin assigned to page 2
3. Step 3 - components the admin assigned to page 3
4. Completed - read-only summary

StepAssignmentStore decides which components (about me, address, birthdate)
appear on steps 2 and 3. OnboardingSession walks one user through the steps.
"""

from .assignments import StepAssignmentStore
from .components import ComponentDefinition, ComponentType
from .session import OnboardingSession
from .state import OnboardingStep, UserRecord

__all__ = [
    "StepAssignmentStore",
    "ComponentDefinition",
    "ComponentType",
    "OnboardingSession",
    "OnboardingStep",
    "UserRecord",
]
