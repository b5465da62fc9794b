from .platform import PlatformSession, PlatformUser, SignUpResult
from .session import UserSession

__all__ = ["PlatformSession", "PlatformUser", "SignUpResult", "UserSession"]
