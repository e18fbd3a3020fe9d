"""
Core dependencies for session lookup and route protection
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from judo_hub.core.session import SessionManager, SessionRegistry
from judo_hub.modules.profiles.schemas import ProfileResponse
from supabase import Client
from typing import Optional

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def get_session_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract the portal session token from the Authorization header"""
    return credentials.credentials


def get_portal_session(
    token: str = Depends(get_session_token),
    registry: SessionRegistry = Depends(get_session_registry)
) -> SessionManager:
    session = registry.get(token)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session"
        )
    return session


def get_optional_portal_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(optional_security),
    registry: SessionRegistry = Depends(get_session_registry)
) -> Optional[SessionManager]:
    if credentials is None:
        return None
    return registry.get(credentials.credentials)


def get_authenticated_session(
    session: SessionManager = Depends(get_portal_session)
) -> SessionManager:
    if not session.user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not logged in"
        )
    return session


def require_profile(
    session: SessionManager = Depends(get_authenticated_session)
) -> ProfileResponse:
    """A logged-in user whose profile failed to load cannot use the portal yet."""
    if session.profile is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Profile not loaded yet"
        )
    return session.profile


def get_supabase(
    session: SessionManager = Depends(get_authenticated_session)
) -> Client:
    """Supabase client carrying the caller's identity; RLS decides what it may do."""
    return session.supabase
