"""Session storage abstractions for customer sessions."""

from .session_storage import InMemorySessionStorage, SessionStorage

__all__ = ["InMemorySessionStorage", "SessionStorage"]
