from fastapi import APIRouter, Depends, Request
from judo_hub.config import settings
from judo_hub.core.dependencies import (
    get_session_registry, get_session_token, get_portal_session,
    get_optional_portal_session
)
from judo_hub.core.rate_limit import limiter
from judo_hub.core.session import SessionManager, SessionRegistry
from judo_hub.modules.auth.schemas import (
    LoginRequest, RestoreRequest, PasswordResetRequest,
    LoginResponse, SessionStateResponse
)
from judo_hub.modules.auth.service import AuthService, session_state
from typing import Optional

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(registry: SessionRegistry = Depends(get_session_registry)) -> AuthService:
    return AuthService(registry)


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.auth_rate_limit)
async def login(
    request: Request,
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get a portal session token"""
    return service.login(login_data)


@router.post("/restore", response_model=LoginResponse)
async def restore(
    restore_data: RestoreRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Resume a Supabase session (e.g. after a page reload) as a new portal session"""
    return service.restore(restore_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_session_token),
    service: AuthService = Depends(get_auth_service)
):
    """Sign out and drop the portal session"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=SessionStateResponse)
async def get_session_state(session: SessionManager = Depends(get_portal_session)):
    """Current user and profile of this portal session"""
    return session_state(session)


@router.post("/me/refresh", response_model=SessionStateResponse)
async def refresh_profile(session: SessionManager = Depends(get_portal_session)):
    """Reload the profile of the logged-in user"""
    session.refetch_profile()
    return session_state(session)


@router.post("/password-reset", status_code=202)
@limiter.limit(settings.auth_rate_limit)
async def send_password_reset(
    request: Request,
    reset_data: PasswordResetRequest,
    session: Optional[SessionManager] = Depends(get_optional_portal_session),
    service: AuthService = Depends(get_auth_service)
):
    """Send a password reset email that links back to the portal"""
    service.send_password_reset(reset_data, session)
    return {"message": f"Password reset email sent to {reset_data.email}"}
