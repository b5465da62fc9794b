"""Hosted platform access."""

from .client import (
    SupabaseClient,
    create_public_client,
    create_service_client,
    error_from_response,
)
from .gateway import PlatformGateway, Row

__all__ = [
    "PlatformGateway",
    "Row",
    "SupabaseClient",
    "create_public_client",
    "create_service_client",
    "error_from_response",
]
