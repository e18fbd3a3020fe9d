"""
Portal sessions.

A SessionManager holds "who is logged in and what is their profile" for one
browser session, on top of a Supabase client dedicated to that session.
SessionRegistry owns all managers for the lifetime of the application.
"""

import asyncio
import logging
import secrets
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from supabase import AuthError, Client

from judo_hub.config import settings
from judo_hub.core.navigation import Navigator
from judo_hub.modules.profiles.schemas import ProfileResponse
from judo_hub.modules.profiles.service import ProfileService

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


@dataclass
class AuthResult:
    """Provider response or provider error, passed through untouched."""
    data: Any = None
    error: Optional[AuthError] = None


class SessionManager:
    def __init__(self, supabase: Client, profiles: Optional[ProfileService] = None):
        self.supabase = supabase
        self.profiles = profiles or ProfileService(supabase)
        self.navigator = Navigator()
        self.status = SessionStatus.UNINITIALIZED
        self.user = None
        self.profile: Optional[ProfileResponse] = None
        self._subscription = None
        # Set by SessionRegistry; called when the provider reports a sign-out.
        self.on_signed_out: Optional[Callable[[], None]] = None
        # Bumped on every auth-state notification; profile fetches started
        # under an older value are discarded.
        self._sequence = 0

    @property
    def loading(self) -> bool:
        return self.status in (SessionStatus.UNINITIALIZED, SessionStatus.LOADING)

    def start(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None) -> None:
        """Restore any existing session, then listen for auth-state changes."""
        self.status = SessionStatus.LOADING
        try:
            if access_token and refresh_token:
                self.supabase.auth.set_session(access_token, refresh_token)
            session = self.supabase.auth.get_session()
            self.user = session.user if session else None
            if self.user:
                self._fetch_profile(self.user.id, self._sequence)
        except Exception as e:
            logger.error(f"Critical error during initial session fetch: {e}")
            self.user = None
            self.profile = None
        finally:
            self._settle()

        self._subscription = self.supabase.auth.on_auth_state_change(self._on_auth_state_change)

    def close(self) -> None:
        """Stop listening and end the provider session held by this client.

        The local sign-out revokes only this client's refresh token and stops
        its auto-refresh timer; the user's other sessions stay valid.
        """
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        if self.user:
            try:
                self.supabase.auth.sign_out({"scope": "local"})
            except AuthError as e:
                logger.error(f"Error ending provider session on close: {e}")
            self.user = None
            self.profile = None
            self._settle()

    def _settle(self) -> None:
        self.status = SessionStatus.AUTHENTICATED if self.user else SessionStatus.ANONYMOUS

    def _on_auth_state_change(self, event, session) -> None:
        self._sequence += 1
        sequence = self._sequence
        logger.debug("Auth state change %s (#%d)", event, sequence)
        self.user = session.user if session else None
        if self.user:
            self._fetch_profile(self.user.id, sequence)
        else:
            self.profile = None
        self._settle()
        if event == "SIGNED_OUT" and self.on_signed_out is not None:
            self.on_signed_out()

    def _fetch_profile(self, user_id: str, sequence: int) -> None:
        try:
            profile = self.profiles.get_profile(user_id)
        except Exception as e:
            logger.error(f"Error fetching profile for {user_id}: {e}")
            profile = None
        if sequence != self._sequence:
            logger.debug("Discarding stale profile fetch for %s", user_id)
            return
        self.profile = profile

    def login(self, email: str, password: str) -> AuthResult:
        """Sign in with the provider. State changes arrive through the auth-state listener."""
        try:
            response = self.supabase.auth.sign_in_with_password({
                "email": email,
                "password": password
            })
        except AuthError as e:
            return AuthResult(error=e)
        return AuthResult(data=response)

    def logout(self) -> None:
        try:
            self.supabase.auth.sign_out()
        except AuthError as e:
            logger.error(f"Error signing out: {e}")

    def refetch_profile(self) -> Optional[ProfileResponse]:
        if not self.user:
            return None
        self._fetch_profile(self.user.id, self._sequence)
        return self.profile

    def send_password_reset_email(self, email: str) -> AuthResult:
        try:
            response = self.supabase.auth.reset_password_for_email(
                email, {"redirect_to": settings.app_origin}
            )
        except AuthError as e:
            return AuthResult(error=e)
        return AuthResult(data=response)


class SessionRegistry:
    """Application-owned map of bearer token -> SessionManager.

    Sessions leave the registry on explicit close, when the provider signs them
    out, or once they have been idle longer than `idle_ttl` seconds.
    """

    def __init__(
        self,
        client_factory: Callable[[], Client],
        idle_ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.client_factory = client_factory
        self.idle_ttl = idle_ttl if idle_ttl is not None else settings.session_idle_ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: Dict[str, SessionManager] = {}
        self._last_seen: Dict[str, float] = {}

    def open(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None):
        self.sweep()
        token = secrets.token_urlsafe(32)
        manager = SessionManager(self.client_factory())
        manager.start(access_token, refresh_token)
        manager.on_signed_out = lambda: self._forget(token)
        with self._lock:
            self._sessions[token] = manager
            self._last_seen[token] = self._clock()
            active = len(self._sessions)
        logger.info("Opened portal session (%d active)", active)
        return token, manager

    def get(self, token: str) -> Optional[SessionManager]:
        with self._lock:
            manager = self._sessions.get(token)
            if manager is None:
                return None
            now = self._clock()
            expired = now - self._last_seen[token] > self.idle_ttl
            if not expired:
                self._last_seen[token] = now
        if expired:
            self.close(token)
            return None
        return manager

    def _forget(self, token: str) -> None:
        # Runs inside the provider's auth notification: the subscription must
        # not be removed here, so the manager is only dropped from the map.
        with self._lock:
            manager = self._sessions.pop(token, None)
            self._last_seen.pop(token, None)
        if manager is not None:
            logger.info("Portal session signed out by provider")

    def close(self, token: str) -> None:
        with self._lock:
            manager = self._sessions.pop(token, None)
            self._last_seen.pop(token, None)
            active = len(self._sessions)
        if manager is not None:
            manager.close()
            logger.info("Closed portal session (%d active)", active)

    def sweep(self) -> int:
        """Close sessions idle for longer than idle_ttl. Returns how many were closed."""
        now = self._clock()
        with self._lock:
            idle = [token for token, seen in self._last_seen.items() if now - seen > self.idle_ttl]
        for token in idle:
            self.close(token)
        if idle:
            logger.info(f"Closed {len(idle)} idle portal session(s)")
        return len(idle)

    def close_all(self) -> None:
        with self._lock:
            tokens = list(self._sessions)
        for token in tokens:
            self.close(token)

    def __len__(self) -> int:
        return len(self._sessions)


async def session_sweep_loop(registry: SessionRegistry, interval: Optional[float] = None):
    """Background task that periodically closes idle portal sessions"""
    interval = interval or settings.session_sweep_interval_seconds
    while True:
        try:
            await asyncio.to_thread(registry.sweep)
        except Exception as e:
            logger.error(f"Error in session sweep loop: {str(e)}")
        await asyncio.sleep(interval)
