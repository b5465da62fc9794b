"""Fake platform gateway and service fixtures."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from src.storefront.core.errors import PlatformError
from src.storefront.core.models.platform import (
    PlatformSession,
    PlatformUser,
    SignUpResult,
)
from src.storefront.core.platform.gateway import PlatformGateway, Row
from src.storefront.core.services import (
    CustomerProvisioningService,
    DashboardService,
    ProductFeed,
    RegistrationService,
    UserSessionService,
)
from src.storefront.core.storage import InMemorySessionStorage

__all__ = [
    "FakePlatformGateway",
    "GatedPlatformGateway",
    "make_platform_session",
    "fake_platform",
    "fake_service_platform",
    "session_storage",
    "user_session_service",
    "product_feed",
    "registration_service",
    "dashboard_service",
    "provisioning_service",
    "registration_form_data",
]


def make_platform_session(
    user_id: str = "user-123", email: str = "ada@example.com", token: str = "access-token"
) -> PlatformSession:
    return PlatformSession(
        access_token=token,
        refresh_token="refresh-token",
        expires_in=3600,
        user=PlatformUser(id=user_id, email=email),
    )


class FakePlatformGateway(PlatformGateway):
    """In-memory stand-in recording every call.

    ``errors`` maps a method name to the exception that method raises.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.tables: dict[str, list[Row]] = {}
        self.errors: dict[str, Exception] = {}
        self.sign_up_result = SignUpResult()
        self.accounts: dict[str, tuple[str, PlatformSession]] = {}

    def _record(self, name: str, **kwargs: Any) -> None:
        self.calls.append((name, kwargs))
        if name in self.errors:
            raise self.errors[name]

    def calls_to(self, name: str) -> list[dict[str, Any]]:
        return [kwargs for called, kwargs in self.calls if called == name]

    async def select_rows(
        self,
        table: str,
        *,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        access_token: str | None = None,
    ) -> list[Row]:
        self._record(
            "select_rows",
            table=table,
            order_by=order_by,
            descending=descending,
            limit=limit,
            access_token=access_token,
        )
        rows = list(self.tables.get(table, []))
        if order_by:
            rows.sort(key=lambda row: row.get(order_by) or "", reverse=descending)
        return rows[:limit] if limit is not None else rows

    async def select_single(
        self, table: str, *, column: str, value: str, access_token: str | None = None
    ) -> Row:
        self._record(
            "select_single", table=table, column=column, value=value, access_token=access_token
        )
        matches = [row for row in self.tables.get(table, []) if row.get(column) == value]
        if len(matches) != 1:
            raise PlatformError(
                "JSON object requested, multiple (or no) rows returned",
                status_code=406,
                code="PGRST116",
            )
        return matches[0]

    async def insert_rows(
        self,
        table: str,
        rows: list[Row],
        *,
        single: bool = False,
        access_token: str | None = None,
    ) -> list[Row] | Row:
        self._record(
            "insert_rows", table=table, rows=rows, single=single, access_token=access_token
        )
        inserted = [{**row, "created_at": "2024-01-15T10:00:00+00:00"} for row in rows]
        self.tables.setdefault(table, []).extend(inserted)
        return inserted[0] if single else inserted

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any] | None = None
    ) -> SignUpResult:
        self._record("sign_up", email=email, password=password, metadata=metadata)
        return self.sign_up_result

    async def sign_in_with_password(self, email: str, password: str) -> PlatformSession:
        self._record("sign_in_with_password", email=email, password=password)
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise PlatformError(
                "Invalid login credentials", status_code=400, code="invalid_credentials"
            )
        return account[1]

    async def sign_out(self, access_token: str) -> None:
        self._record("sign_out", access_token=access_token)


class GatedPlatformGateway(FakePlatformGateway):
    """Fake gateway whose first select_rows call waits for ``release_first``.

    The held call returns ``first_rows`` (or raises ``first_error``) when set,
    otherwise the table rows for its own arguments.
    """

    def __init__(self) -> None:
        super().__init__()
        self.release_first = asyncio.Event()
        self.first_started = asyncio.Event()
        self.first_rows: list[Row] | None = None
        self.first_error: Exception | None = None
        self._select_calls = 0

    async def select_rows(self, table: str, **kwargs: Any) -> list[Row]:
        self._select_calls += 1
        if self._select_calls == 1:
            self.first_started.set()
            await self.release_first.wait()
            if self.first_error is not None:
                raise self.first_error
            if self.first_rows is not None:
                return self.first_rows
        return await super().select_rows(table, **kwargs)


@pytest.fixture
def fake_platform() -> FakePlatformGateway:
    """Gateway standing in for the public (anon key) client."""
    return FakePlatformGateway()


@pytest.fixture
def fake_service_platform() -> FakePlatformGateway:
    """Gateway standing in for the service-role client."""
    return FakePlatformGateway()


@pytest.fixture
def session_storage() -> InMemorySessionStorage:
    return InMemorySessionStorage()


@pytest.fixture
def user_session_service(
    fake_platform: FakePlatformGateway, session_storage: InMemorySessionStorage
) -> UserSessionService:
    return UserSessionService(fake_platform, session_storage)


@pytest.fixture
def product_feed(fake_platform: FakePlatformGateway) -> ProductFeed:
    return ProductFeed(fake_platform, table="products", default_limit=20)


@pytest.fixture
def registration_service(fake_platform: FakePlatformGateway) -> RegistrationService:
    return RegistrationService(
        fake_platform, customers_table="customers", login_route="/customer/login"
    )


@pytest.fixture
def dashboard_service(fake_platform: FakePlatformGateway) -> DashboardService:
    return DashboardService(
        fake_platform, customers_table="customers", login_route="/customer/login"
    )


@pytest.fixture
def provisioning_service(
    fake_service_platform: FakePlatformGateway,
) -> CustomerProvisioningService:
    return CustomerProvisioningService(fake_service_platform, customers_table="customers")


@pytest.fixture
def registration_form_data() -> dict[str, Any]:
    """Registration form as the storefront submits it."""
    return {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "phone": "555-0100",
        "address": "12 Analytical Way",
        "password": "s3cret-pass",
        "confirmPassword": "s3cret-pass",
        "agreeToTerms": True,
        "marketingEmails": None,
    }
