"""Customer dashboard loader."""

from dataclasses import dataclass

from loguru import logger

from src.storefront.core.errors import PlatformError
from src.storefront.core.models.session import UserSession
from src.storefront.core.platform.gateway import PlatformGateway
from src.storefront.entities.customer import CustomerProfile

DEFAULT_TABS = ("browse", "cart", "reviews")


def resolve_tab(
    tab: str | None, tabs: tuple[str, ...] | list[str] = DEFAULT_TABS, default: str = "browse"
) -> str:
    """Return ``tab`` if it names a known dashboard tab, otherwise ``default``."""
    if tab and tab in tabs:
        return tab
    return default


@dataclass(frozen=True)
class DashboardView:
    active_tab: str
    profile: CustomerProfile | None
    greeting: str
    user_id: str


class NotSignedInError(Exception):
    """No valid session; the client should go to ``redirect_to``."""

    def __init__(self, redirect_to: str) -> None:
        super().__init__("Not signed in")
        self.redirect_to = redirect_to


class DashboardService:
    """Reads the signed-in customer's profile once per dashboard load."""

    def __init__(
        self,
        gateway: PlatformGateway,
        customers_table: str = "customers",
        login_route: str = "/customer/login",
        tabs: tuple[str, ...] | list[str] = DEFAULT_TABS,
        default_tab: str = "browse",
    ) -> None:
        self._gateway = gateway
        self._customers_table = customers_table
        self._login_route = login_route
        self._tabs = tuple(tabs)
        self._default_tab = default_tab

    async def load(self, session: UserSession | None, tab: str | None = None) -> DashboardView:
        """Build the dashboard for ``session``.

        A missing profile row (or any provider error reading it) is not fatal;
        the dashboard renders with a generic greeting.

        Raises:
            NotSignedInError: ``session`` is None.
        """
        if session is None:
            raise NotSignedInError(self._login_route)

        profile = None
        try:
            row = await self._gateway.select_single(
                self._customers_table,
                column="id",
                value=session.user_id,
                access_token=session.access_token,
            )
            profile = CustomerProfile.model_validate(row)
        except PlatformError as exc:
            logger.info("No profile for customer {}: {}", session.user_id, exc.message)

        name = profile.display_name if profile else "Customer"
        return DashboardView(
            active_tab=resolve_tab(tab, self._tabs, self._default_tab),
            profile=profile,
            greeting=f"Welcome back, {name}!",
            user_id=session.user_id,
        )
