"""Capability surface the storefront needs from the hosted platform."""

from abc import ABC, abstractmethod
from typing import Any

from src.storefront.core.models.platform import PlatformSession, SignUpResult

Row = dict[str, Any]


class PlatformGateway(ABC):
    """Row queries, inserts and auth operations against the hosted platform.

    ``access_token`` arguments carry a signed-in customer's token so the
    platform applies that customer's row level security; when omitted the
    gateway authenticates with its own key.
    """

    @abstractmethod
    async def select_rows(
        self,
        table: str,
        *,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        access_token: str | None = None,
    ) -> list[Row]:
        """Select all columns, optionally ordered and limited."""

    @abstractmethod
    async def select_single(
        self,
        table: str,
        *,
        column: str,
        value: str,
        access_token: str | None = None,
    ) -> Row:
        """Select exactly one row where ``column`` equals ``value``.

        Raises:
            PlatformError: If no row (or more than one) matches.
        """

    @abstractmethod
    async def insert_rows(
        self,
        table: str,
        rows: list[Row],
        *,
        single: bool = False,
        access_token: str | None = None,
    ) -> list[Row] | Row:
        """Insert rows and return what was inserted (one row when ``single``)."""

    @abstractmethod
    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any] | None = None
    ) -> SignUpResult:
        """Create an auth account with attached user metadata."""

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> PlatformSession:
        """Exchange email and password for a session."""

    @abstractmethod
    async def sign_out(self, access_token: str) -> None:
        """Revoke the session that owns ``access_token``."""
