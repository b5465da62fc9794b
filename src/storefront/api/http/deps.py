"""FastAPI dependency implementations."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from src.storefront.api.http.app_data import ApplicationDependencies
from src.storefront.core.models.session import UserSession
from src.storefront.core.security import extract_client_fingerprint
from src.storefront.core.services import (
    CustomerProvisioningService,
    DashboardService,
    ProductFeed,
    RegistrationService,
    UserSessionService,
)
from src.storefront.runtime.context import get_config


def get_product_feed(request: Request) -> ProductFeed:
    """Get the shared product feed."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.product_feed


def get_user_session_service(request: Request) -> UserSessionService:
    """Get the User Session service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.user_session_service


def get_registration_service(request: Request) -> RegistrationService:
    """Get the registration service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.registration_service


def get_dashboard_service(request: Request) -> DashboardService:
    """Get the dashboard service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.dashboard_service


def get_provisioning_service(request: Request) -> CustomerProvisioningService:
    """Get the customer provisioning service (service-role client)."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    if app_deps.provisioning_service is None:
        raise HTTPException(status_code=404, detail="Not Found")
    return app_deps.provisioning_service


def get_session_id(request: Request) -> str | None:
    """Read the customer session cookie."""
    return request.cookies.get(get_config().security.session_cookie_name)


async def get_optional_session(
    request: Request,
    session_id: str | None = Depends(get_session_id),
    user_session_service: UserSessionService = Depends(get_user_session_service),
) -> UserSession | None:
    """Current customer session, or None when signed out."""
    return await user_session_service.validate_session(
        session_id, extract_client_fingerprint(request)
    )
