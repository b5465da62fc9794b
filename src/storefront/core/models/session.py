"""Server-side customer session model."""

import time

from pydantic import BaseModel, Field

from src.storefront.core.models.platform import PlatformSession


class UserSession(BaseModel):
    """Customer session kept server-side; the browser only holds its id."""

    id: str = Field(description="Session identifier (cookie value)")
    user_id: str = Field(description="Auth account identifier")
    email: str | None = Field(default=None, description="Account email")
    access_token: str = Field(description="Platform access token")
    refresh_token: str | None = Field(default=None, description="Platform refresh token")
    access_token_expires_at: int | None = Field(default=None, description="Access token expiry")
    client_fingerprint: str = Field(description="Client context fingerprint")
    created_at: int = Field(description="Creation timestamp")
    last_accessed_at: int = Field(description="Last access timestamp")
    expires_at: int = Field(description="Session expiration timestamp")

    @classmethod
    def create(
        cls,
        session_id: str,
        platform_session: PlatformSession,
        client_fingerprint: str,
        session_max_age: int = 3600,
    ) -> "UserSession":
        """Create a new user session from a platform token bundle."""
        now = int(time.time())
        return cls(
            id=session_id,
            user_id=platform_session.user.id or "",
            email=platform_session.user.email,
            access_token=platform_session.access_token,
            refresh_token=platform_session.refresh_token,
            access_token_expires_at=platform_session.expiry,
            client_fingerprint=client_fingerprint,
            created_at=now,
            last_accessed_at=now,
            expires_at=now + session_max_age,
        )

    def is_expired(self) -> bool:
        """Check if session is expired."""
        return time.time() > self.expires_at

    def update_access(self) -> None:
        """Update last accessed time."""
        self.last_accessed_at = int(time.time())
