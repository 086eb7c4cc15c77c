"""
Onboarding API Endpoints.

Drives one OnboardingSession per browser. The session id travels in a cookie
and sessions live in an in-memory registry on app.state, next to the shared
StepAssignmentStore and RecordSink.
"""

import logging
import secrets
from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, Field

from .assignments import StepAssignmentStore
from .components import CONFIGURABLE_PAGES
from .errors import OnboardingError, PersistenceError, SessionBusyError
from .forms import StepFieldsRequest
from .persistence import RecordSink
from .session import OnboardingSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


# =============================================================================
# Error mapping
# =============================================================================

ERROR_STATUS = {
    SessionBusyError: 409,
    PersistenceError: 503,
}


def to_http_error(error: OnboardingError) -> HTTPException:
    """Map a domain error to an HTTP error. Input/admin mistakes are 400."""
    status = ERROR_STATUS.get(type(error), 400)
    return HTTPException(status_code=status, detail=error.message)


# =============================================================================
# Session registry
# =============================================================================

class SessionRegistry:
    """In-memory sessions keyed by cookie value."""

    def __init__(self, cookie_name: str = "onboarding_session", expire_hours: int = 24):
        self.cookie_name = cookie_name
        self.expire_hours = expire_hours
        self._sessions: dict[str, tuple[OnboardingSession, datetime]] = {}

    def create(self, store: StepAssignmentStore, sink: RecordSink) -> tuple[str, OnboardingSession]:
        self.purge_expired()
        session_id = secrets.token_urlsafe(32)
        session = OnboardingSession(store, sink)
        self._sessions[session_id] = (session, datetime.now() + timedelta(hours=self.expire_hours))
        return session_id, session

    def get(self, session_id: str | None) -> OnboardingSession | None:
        if not session_id:
            return None
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        session, expires_at = entry
        if expires_at <= datetime.now():
            del self._sessions[session_id]
            return None
        return session

    def purge_expired(self) -> int:
        """Drop expired sessions. Returns how many were removed."""
        now = datetime.now()
        expired = [sid for sid, (_, expires_at) in self._sessions.items() if expires_at <= now]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            logger.info(f"Purged {len(expired)} expired onboarding sessions")
        return len(expired)

    def discard(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)


def get_store(request: Request) -> StepAssignmentStore:
    return request.app.state.assignment_store


def get_sink(request: Request) -> RecordSink:
    return request.app.state.record_sink


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def require_session(request: Request, registry: SessionRegistry = Depends(get_registry)) -> OnboardingSession:
    """Session from cookie, or 401."""
    session = registry.get(request.cookies.get(registry.cookie_name))
    if session is None:
        raise HTTPException(status_code=401, detail="No onboarding session")
    return session


# =============================================================================
# Request/Response Models
# =============================================================================

class RegisterRequest(BaseModel):
    """Step 1: account creation."""
    email: str = ""
    password: str = ""
    confirm_password: str = ""


class AdvanceRequest(BaseModel):
    """Advance from a step, optionally applying field values first."""
    step: int | None = None
    fields: StepFieldsRequest | None = None


class BackRequest(BaseModel):
    step: int | None = None


class SessionResponse(BaseModel):
    """Current session snapshot."""
    state: str
    current_step: int
    user: dict | None = None
    draft: dict = Field(default_factory=dict)
    progress: dict = Field(default_factory=dict)
    loading: bool = False
    message: str = ""


def session_response(session: OnboardingSession, message: str = "") -> SessionResponse:
    return SessionResponse(**session.to_dict(), message=message)


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/register", response_model=SessionResponse)
async def register(
    request: RegisterRequest,
    http_request: Request,
    response: Response,
    store: StepAssignmentStore = Depends(get_store),
    sink: RecordSink = Depends(get_sink),
    registry: SessionRegistry = Depends(get_registry),
) -> SessionResponse:
    """Create an account and start a session at step 2."""
    session_id = http_request.cookies.get(registry.cookie_name)
    session = registry.get(session_id)
    created = session is None
    if created:
        session_id, session = registry.create(store, sink)

    try:
        await session.register_user(request.email, request.password, request.confirm_password)
    except OnboardingError as e:
        if created:
            registry.discard(session_id)
        raise to_http_error(e)

    response.set_cookie(
        key=registry.cookie_name,
        value=session_id,
        httponly=True,
        max_age=registry.expire_hours * 60 * 60,
        samesite="lax",
    )
    return session_response(session, "Account created successfully!")


@router.get("/state", response_model=SessionResponse)
async def get_state(session: OnboardingSession = Depends(require_session)) -> SessionResponse:
    """Current step, user record and draft."""
    return session_response(session)


@router.get("/steps/{step}")
async def get_step(step: int, session: OnboardingSession = Depends(require_session)) -> dict:
    """Components, title and validity for a configurable step."""
    if step not in CONFIGURABLE_PAGES:
        raise HTTPException(status_code=400, detail="Step must be 2 or 3")
    return session.step_view(step)


@router.put("/fields")
async def update_fields(request: StepFieldsRequest, session: OnboardingSession = Depends(require_session)) -> dict:
    """Update draft values without saving."""
    session.set_fields(**request.changed_values())
    return {"draft": session.draft.to_dict(), "step": session.step_view()}


@router.post("/advance", response_model=SessionResponse)
async def advance(request: AdvanceRequest, session: OnboardingSession = Depends(require_session)) -> SessionResponse:
    """Validate and save the current step, then move on."""
    if request.fields is not None:
        session.set_fields(**request.fields.changed_values())

    try:
        await session.advance(request.step)
    except OnboardingError as e:
        raise to_http_error(e)

    return session_response(session, "Your information has been saved successfully")


@router.post("/back", response_model=SessionResponse)
async def go_back(request: BackRequest, session: OnboardingSession = Depends(require_session)) -> SessionResponse:
    """Show the previous step. A step other than the displayed one is a 400."""
    try:
        session.go_back(request.step)
    except OnboardingError as e:
        raise to_http_error(e)
    return session_response(session)


@router.post("/restart", response_model=SessionResponse)
async def restart(session: OnboardingSession = Depends(require_session)) -> SessionResponse:
    """Back to registration. Saved records are kept."""
    try:
        session.restart()
    except OnboardingError as e:
        raise to_http_error(e)
    return session_response(session)


@router.get("/summary")
async def get_summary(session: OnboardingSession = Depends(require_session)) -> dict:
    """Completion screen data."""
    try:
        return session.summary()
    except OnboardingError as e:
        raise to_http_error(e)
