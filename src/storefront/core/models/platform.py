"""Models for what the hosted auth service hands back."""

import time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PlatformUser(BaseModel):
    """Account record issued by the auth service."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = Field(default=None, description="Auth account identifier")
    email: str | None = Field(default=None, description="Account email")
    user_metadata: dict[str, Any] = Field(
        default_factory=dict, description="Metadata attached at sign-up"
    )


class PlatformSession(BaseModel):
    """Token bundle issued on sign-in or immediate-activation sign-up."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    token_type: str = "bearer"
    expires_in: int = 3600
    expires_at: int | None = None
    refresh_token: str | None = None
    user: PlatformUser = Field(default_factory=PlatformUser)

    @property
    def expiry(self) -> int:
        """Absolute expiry timestamp of the access token."""
        return self.expires_at or int(time.time()) + self.expires_in


class SignUpResult(BaseModel):
    """Outcome of an account creation request.

    When the project requires email confirmation there is no session, and
    depending on the platform settings there may be no usable identifier either.
    """

    user: PlatformUser | None = None
    session: PlatformSession | None = None

    @property
    def user_id(self) -> str | None:
        if self.user is not None and self.user.id:
            return self.user.id
        if self.session is not None and self.session.user.id:
            return self.session.user.id
        return None

    @classmethod
    def from_response(cls, body: dict[str, Any] | None) -> "SignUpResult":
        """Build from a /signup body: a session when auto-confirmed, else a bare user."""
        if not body:
            return cls()
        if body.get("access_token"):
            session = PlatformSession.model_validate(body)
            return cls(user=session.user, session=session)
        if body.get("id"):
            return cls(user=PlatformUser.model_validate(body))
        if isinstance(body.get("user"), dict):
            return cls(user=PlatformUser.model_validate(body["user"]))
        return cls()
