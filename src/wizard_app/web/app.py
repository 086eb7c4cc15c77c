"""
Wizard Web - FastAPI application.

Composes the onboarding, admin, record-store and data routes. Shared state
(assignment store, record sink, session registry) is built in create_app()
and kept on app.state.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from onboarding.admin_api import router as admin_router
from onboarding.api import SessionRegistry, router as onboarding_router
from onboarding.assignments import StepAssignmentStore
from onboarding.components import get_preset
from onboarding.persistence import (
    AssignmentSink,
    HttpRecordSink,
    InMemoryAssignmentSink,
    InMemoryRecordSink,
    RecordSink,
)
from wizard_app import __version__
from wizard_app.config import WizardSettings, get_settings
from wizard_app.records import UserDataStore
from wizard_app.web.data_routes import router as data_router
from wizard_app.web.records_routes import router as records_router

logger = logging.getLogger(__name__)


def build_record_sink(settings: WizardSettings) -> RecordSink:
    """HTTP sink when a record store URL is configured, otherwise in-memory."""
    if settings.record_store_url:
        return HttpRecordSink(settings.record_store_url, timeout=settings.record_store_timeout)
    return InMemoryRecordSink()


def create_app(
    settings: WizardSettings | None = None,
    record_sink: RecordSink | None = None,
    assignment_sink: AssignmentSink | None = None,
) -> FastAPI:
    """Build the app. Sinks can be injected; otherwise they come from settings."""
    settings = settings or get_settings()

    app = FastAPI(title="Onboarding Wizard", version=__version__)

    app.state.settings = settings
    app.state.record_sink = record_sink or build_record_sink(settings)
    app.state.assignment_store = StepAssignmentStore(
        components=get_preset(settings.default_preset),
        sink=assignment_sink or InMemoryAssignmentSink(),
    )
    app.state.sessions = SessionRegistry(
        cookie_name=settings.session_cookie_name,
        expire_hours=settings.session_expire_hours,
    )
    app.state.user_data_store = UserDataStore()

    @app.on_event("startup")
    async def startup_event():
        """Pick up a previously saved assignment and log configuration."""
        await app.state.assignment_store.load(settings.default_preset)
        logger.info("Onboarding wizard starting up...")
        logger.info(f"  Environment: {settings.wizard_env}")
        logger.info(f"  Record sink: {type(app.state.record_sink).__name__}")

    # CORS middleware for the frontend dev server
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(onboarding_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")
    app.include_router(records_router, prefix="/api")
    app.include_router(data_router, prefix="/api")

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": __version__}

    return app
