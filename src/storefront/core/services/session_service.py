"""Customer session service: sign-in, sign-out and auth-state notifications."""

from collections.abc import Callable
from typing import Literal

from loguru import logger

from src.storefront.core.errors import PlatformError
from src.storefront.core.models.session import UserSession
from src.storefront.core.platform.gateway import PlatformGateway
from src.storefront.core.security import generate_secure_token
from src.storefront.core.storage.session_storage import SessionStorage
from src.storefront.runtime.context import get_config

AuthEvent = Literal["SIGNED_IN", "SIGNED_OUT"]
AuthStateCallback = Callable[[AuthEvent, UserSession | None], None]


class Subscription:
    """Handle returned by ``on_auth_state_change``."""

    def __init__(self, listeners: list[AuthStateCallback], callback: AuthStateCallback):
        self._listeners = listeners
        self._callback = callback

    def unsubscribe(self) -> None:
        if self._callback in self._listeners:
            self._listeners.remove(self._callback)


class UserSessionService:
    """Keeps platform sessions server-side, keyed by an opaque cookie value."""

    def __init__(self, gateway: PlatformGateway, session_storage: SessionStorage) -> None:
        self._gateway = gateway
        self._storage = session_storage
        self._listeners: list[AuthStateCallback] = []

    def on_auth_state_change(self, callback: AuthStateCallback) -> Subscription:
        """Register ``callback`` for sign-in and sign-out events."""
        self._listeners.append(callback)
        return Subscription(self._listeners, callback)

    def _notify(self, event: AuthEvent, session: UserSession | None) -> None:
        for callback in list(self._listeners):
            try:
                callback(event, session)
            except Exception:
                logger.exception("Auth state listener failed for {}", event)

    async def get_session(self, session_id: str | None) -> UserSession | None:
        """Get the current session for ``session_id``, or None if absent/expired."""
        if not session_id:
            return None

        user_session = await self._storage.get(f"user:{session_id}", UserSession)
        if not user_session:
            return None

        if user_session.is_expired():
            await self._storage.delete(f"user:{session_id}")
            return None

        user_session.update_access()
        await self._storage.set(
            f"user:{user_session.id}", user_session, get_config().app.session_max_age
        )
        return user_session

    async def validate_session(
        self, session_id: str | None, client_fingerprint: str
    ) -> UserSession | None:
        """Like ``get_session`` but drops sessions presented by a different client."""
        user_session = await self.get_session(session_id)
        if not user_session:
            return None

        if (
            get_config().security.enable_client_fingerprinting
            and user_session.client_fingerprint != client_fingerprint
        ):
            logger.warning("Session fingerprint mismatch for user {}", user_session.user_id)
            await self._storage.delete(f"user:{user_session.id}")
            return None

        return user_session

    async def sign_in_with_email(
        self, email: str, password: str, client_fingerprint: str
    ) -> UserSession:
        """Sign in with the auth service and persist the resulting session.

        Raises:
            PlatformError: The provider rejected the credentials.
        """
        platform_session = await self._gateway.sign_in_with_password(email, password)

        max_age = get_config().app.session_max_age
        user_session = UserSession.create(
            session_id=generate_secure_token(32),
            platform_session=platform_session,
            client_fingerprint=client_fingerprint,
            session_max_age=max_age,
        )
        await self._storage.set(f"user:{user_session.id}", user_session, max_age)

        # Abandoned sessions are never read again, so sweep them here
        purged = await self._storage.cleanup_expired()
        if purged:
            logger.debug("Purged {} expired customer sessions", purged)

        logger.info("Customer {} signed in", user_session.user_id)
        self._notify("SIGNED_IN", user_session)
        return user_session

    async def sign_out(self, session_id: str | None) -> None:
        """Revoke the platform token and forget the session."""
        user_session = await self.get_session(session_id)
        if not user_session:
            return

        try:
            await self._gateway.sign_out(user_session.access_token)
        except PlatformError as exc:
            # The local session is dropped regardless; the token expires on its own
            logger.warning("Platform sign-out failed for {}: {}", user_session.user_id, exc)

        await self._storage.delete(f"user:{user_session.id}")
        logger.info("Customer {} signed out", user_session.user_id)
        self._notify("SIGNED_OUT", None)

    async def purge_expired(self) -> int:
        """Drop expired sessions from storage."""
        return await self._storage.cleanup_expired()
