# =============================================================================
# taskhub_core/auth/session_manager.py
# Session Manager: current identity, login/register/logout, auth notifications
# =============================================================================
"""
SessionManager owns the one process-wide session cell.

Two pieces of state are kept apart:
- ``identity``: the Supabase principal (real or anonymous) writes are
  stamped with. Supabase is the source of truth for whether it exists.
- ``current_user``: the shaped User record shown by the UI. The local
  session cache is the source of truth for its contents.

login/register/logout and the anonymous bootstrap in ensure_session are
serialized by one asyncio.Lock. The auth-state handler runs synchronously
inside the Supabase client and never awaits, so it cannot interleave with
itself.

Usage:
    session = SessionManager(client, LocalSessionCache(path))
    session.restore()
    user = await session.login("ana@example.com", "secret")
"""

from __future__ import annotations
import asyncio
from typing import Any, Callable, List, Optional

from taskhub_core.config import Settings, get_settings
from taskhub_core.errors import AuthError, ValidationError, get_message
from taskhub_core.logging import get_logger
from taskhub_core.models import Identity, User
from .session_cache import LocalSessionCache

logger = get_logger(__name__)

SessionCallback = Callable[[Optional[User]], None]

SIGNED_OUT = "SIGNED_OUT"


def _describe(error: Exception) -> str:
    return getattr(error, "message", None) or str(error) or error.__class__.__name__


def _identity_from(remote_user: Any) -> Identity:
    return Identity(
        uid=remote_user.id,
        email=getattr(remote_user, "email", None) or None,
        is_anonymous=bool(getattr(remote_user, "is_anonymous", False)),
    )


class SessionManager:
    """Single owner of the current identity and the shaped user record."""

    def __init__(
        self,
        client,
        cache: LocalSessionCache,
        settings: Optional[Settings] = None,
    ):
        self._client = client
        self._cache = cache
        self._settings = settings or get_settings()
        self._identity: Optional[Identity] = None
        self._user: Optional[User] = None
        self._lock = asyncio.Lock()
        self._observers: List[SessionCallback] = []
        self._subscription = None

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        """True when a shaped (logged-in) user record is present."""
        return self._user is not None

    @property
    def locale(self) -> str:
        return self._settings.locale

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------

    def restore(self) -> Optional[User]:
        """
        Cold start: read the cached user to paint the UI immediately and
        subscribe to Supabase auth notifications.
        """
        self._user = self._cache.load_user()
        self._subscribe()
        if self._user is not None:
            logger.info(f"Restored cached user: {self._user.email}")
        return self._user

    async def ensure_session(self) -> Optional[Identity]:
        """
        Return the current identity, establishing an anonymous one if needed.

        Never raises: when anonymous sign-in fails, returns None and callers
        continue unauthenticated.
        """
        if self._identity is not None:
            return self._identity

        # Shares the mutator lock: a bootstrap never overlaps login/logout/register
        async with self._lock:
            if self._identity is not None:
                return self._identity

            try:
                session = await self._client.auth.get_session()
                if session is not None and session.user is not None:
                    self._identity = _identity_from(session.user)
                    logger.debug(f"Adopted existing session for {self._identity.uid}")
                    return self._identity

                response = await self._client.auth.sign_in_anonymously()
            except Exception as e:
                logger.warning(f"Anonymous auth failed, continuing without auth: {_describe(e)}")
                return None

            if response is None or response.user is None:
                logger.warning("Anonymous auth returned no user, continuing without auth")
                return None

            if self._identity is None:
                self._identity = Identity(uid=response.user.id, is_anonymous=True)
                logger.info(f"Anonymous session established: {self._identity.uid}")
            return self._identity

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> User:
        """
        Sign in with email and password and cache the shaped user record.

        Raises:
            AuthError: Supabase rejected the credentials or returned no user
        """
        async with self._lock:
            try:
                response = await self._client.auth.sign_in_with_password(
                    {"email": email, "password": password}
                )
            except Exception as e:
                logger.error(f"Login error for {email}: {_describe(e)}")
                raise AuthError(
                    get_message("auth.login", self.locale, error=_describe(e)),
                    email=email,
                    operation="login",
                ) from e

            remote_user = getattr(response, "user", None)
            if remote_user is None:
                raise AuthError(
                    get_message("auth.login", self.locale, error="no user returned"),
                    email=email,
                    operation="login",
                )

            user = User.from_login(remote_user.id, email)
            self._identity = Identity(uid=remote_user.id, email=email)
            self._user = user
            self._cache.save_user(user)
            logger.info(f"Login successful for: {email}")

        self._notify()
        return user

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> bool:
        """
        Create a Supabase account, then sign out again.

        The new account is not logged in: callers must go through login().

        Raises:
            ValidationError: password and confirmation differ (no remote call)
            AuthError: Supabase rejected the sign-up
        """
        if password != confirm_password:
            raise ValidationError(
                get_message("validation.password_mismatch", self.locale),
                field="confirm_password",
            )

        async with self._lock:
            try:
                await self._client.auth.sign_up(
                    {
                        "email": email,
                        "password": password,
                        "options": {"data": {"username": username}},
                    }
                )
            except Exception as e:
                logger.error(f"Registration error for {email}: {_describe(e)}")
                raise AuthError(
                    get_message("auth.register", self.locale, error=_describe(e)),
                    email=email,
                    operation="register",
                ) from e

            logger.info(f"Registration successful for: {email}")
            await self._sign_out_remote()
            self._clear()

        self._notify()
        return True

    async def logout(self) -> None:
        """Clear identity and cached user; safe to call repeatedly."""
        async with self._lock:
            self._clear()
            await self._sign_out_remote()
        logger.info("Logged out")
        self._notify()

    # ------------------------------------------------------------------
    # Auth notifications
    # ------------------------------------------------------------------

    def observe_session_changes(self, callback: SessionCallback) -> Callable[[], None]:
        """
        Register a callback invoked with the current User (or None) whenever
        the session changes.

        Returns:
            Function that unregisters the callback
        """
        if callback not in self._observers:
            self._observers.append(callback)
        self._subscribe()

        def unsubscribe() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    def close(self) -> None:
        """Stop listening to Supabase auth notifications."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self._observers.clear()

    def _subscribe(self) -> None:
        if self._subscription is None:
            self._subscription = self._client.auth.on_auth_state_change(
                self._on_auth_state_change
            )

    def _on_auth_state_change(self, event: str, session: Any) -> None:
        remote_user = getattr(session, "user", None) if session is not None else None
        logger.debug(f"Auth state changed: {event}")
        before = (self._identity, self._user)

        if event == SIGNED_OUT:
            self._clear()
        elif remote_user is None:
            # No remote session yet; a repository call re-derives the identity.
            self._identity = None
        else:
            cached = self._cache.load_user()
            if cached is not None:
                self._user = cached
                self._identity = _identity_from(remote_user)
            else:
                # Shaped user unknown (e.g. mid-login): leave it to the mutator
                self._identity = None

        if (self._identity, self._user) != before:
            self._notify()

    def _notify(self) -> None:
        for callback in list(self._observers):
            try:
                callback(self._user)
            except Exception as e:
                logger.error(f"Error in session callback: {e}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _clear(self) -> None:
        self._identity = None
        self._user = None
        self._cache.clear_user()

    async def _sign_out_remote(self) -> None:
        try:
            await self._client.auth.sign_out()
        except Exception as e:
            logger.warning(f"Remote sign-out failed: {_describe(e)}")
