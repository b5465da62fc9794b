from dataclasses import dataclass

from src.storefront.core.platform import PlatformGateway
from src.storefront.core.services import (
    CustomerProvisioningService,
    DashboardService,
    ProductFeed,
    RegistrationService,
    Subscription,
    UserSessionService,
)


@dataclass
class ApplicationDependencies:
    platform: PlatformGateway
    product_feed: ProductFeed
    user_session_service: UserSessionService
    registration_service: RegistrationService
    dashboard_service: DashboardService
    provisioning_service: CustomerProvisioningService | None = None
    auth_subscription: Subscription | None = None
