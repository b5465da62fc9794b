"""Shared pytest fixtures and helpers."""

from .app import *  # noqa: F401,F403
from .platform import *  # noqa: F401,F403
