from fastapi import HTTPException
from judo_hub.core.session import SessionManager, SessionRegistry, SessionStatus
from judo_hub.modules.auth.schemas import (
    LoginRequest, RestoreRequest, PasswordResetRequest,
    LoginResponse, SessionStateResponse, UserInfo
)
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def session_state(session: SessionManager) -> SessionStateResponse:
    user = None
    if session.user:
        user = UserInfo(id=session.user.id, email=session.user.email)
    return SessionStateResponse(
        status=session.status,
        loading=session.loading,
        user=user,
        profile=session.profile
    )


class AuthService:
    def __init__(self, registry: SessionRegistry):
        self.registry = registry

    def _login_response(self, token: str, session: SessionManager) -> LoginResponse:
        return LoginResponse(session_token=token, **session_state(session).model_dump())

    def login(self, login_data: LoginRequest) -> LoginResponse:
        """Open a portal session and sign it in"""
        token, session = self.registry.open()
        try:
            result = session.login(login_data.email, login_data.password)
        except Exception:
            self.registry.close(token)
            raise
        if result.error is not None:
            self.registry.close(token)
            raise HTTPException(status_code=401, detail=result.error.message)
        return self._login_response(token, session)

    def restore(self, restore_data: RestoreRequest) -> LoginResponse:
        """Open a portal session from tokens issued by an earlier login"""
        token, session = self.registry.open(restore_data.access_token, restore_data.refresh_token)
        if session.status != SessionStatus.AUTHENTICATED:
            self.registry.close(token)
            raise HTTPException(status_code=401, detail="Session could not be restored")
        return self._login_response(token, session)

    def logout(self, token: str) -> None:
        session = self.registry.get(token)
        if session is None:
            return
        session.logout()
        # A successful sign-out has already dropped the token from the registry
        self.registry.close(token)
        session.close()

    def send_password_reset(
        self,
        reset_data: PasswordResetRequest,
        session: Optional[SessionManager] = None
    ) -> None:
        """Send the reset email through the caller's session, or a short-lived anonymous one"""
        token = None
        if session is None:
            token, session = self.registry.open()
        try:
            result = session.send_password_reset_email(reset_data.email)
        finally:
            if token is not None:
                self.registry.close(token)
        if result.error is not None:
            raise HTTPException(status_code=400, detail=result.error.message)
