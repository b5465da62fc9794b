"""Core services exports."""

from .dashboard import DashboardService, DashboardView, NotSignedInError, resolve_tab
from .product_feed import ProductFeed, ProductFeedState
from .provisioning import CustomerProvisioningService, ProvisioningError
from .registration import RegistrationForm, RegistrationOutcome, RegistrationService
from .session_service import Subscription, UserSessionService

__all__ = [
    # Catalog
    "ProductFeed",
    "ProductFeedState",
    # Registration
    "RegistrationForm",
    "RegistrationOutcome",
    "RegistrationService",
    # Sessions
    "Subscription",
    "UserSessionService",
    # Dashboard
    "DashboardService",
    "DashboardView",
    "NotSignedInError",
    "resolve_tab",
    # Provisioning
    "CustomerProvisioningService",
    "ProvisioningError",
]
