"""
Pytest configuration and fixtures for onboarding wizard tests.
"""

import os
import pytest

# Set test environment before importing app modules
os.environ["WIZARD_ENV"] = "development"
os.environ.pop("RECORD_STORE_URL", None)

from fastapi.testclient import TestClient

from onboarding.assignments import StepAssignmentStore
from onboarding.persistence import InMemoryAssignmentSink, InMemoryRecordSink
from onboarding.session import OnboardingSession
from wizard_app.config import WizardSettings
from wizard_app.web.app import create_app


@pytest.fixture
def record_sink():
    """Empty in-memory record sink."""
    return InMemoryRecordSink()


@pytest.fixture
def assignment_sink():
    return InMemoryAssignmentSink()


@pytest.fixture
def store(assignment_sink):
    """Assignment store on the default preset."""
    return StepAssignmentStore(sink=assignment_sink)


@pytest.fixture
def session(store, record_sink):
    return OnboardingSession(store, record_sink)


@pytest.fixture
def settings():
    return WizardSettings(_env_file=None)


@pytest.fixture
def app(settings, record_sink, assignment_sink):
    return create_app(settings=settings, record_sink=record_sink, assignment_sink=assignment_sink)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def registration():
    """Valid registration payload."""
    return {"email": "a@b.com", "password": "secret1", "confirm_password": "secret1"}


@pytest.fixture
def full_address():
    return {
        "street_address": "123 Main St",
        "city": "New York",
        "state": "NY",
        "zip": "10001",
    }
