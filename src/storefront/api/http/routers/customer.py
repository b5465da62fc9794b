"""Customer endpoints: registration, login/logout, session state and dashboard."""

from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

from src.storefront.api.http.deps import (
    get_dashboard_service,
    get_optional_session,
    get_registration_service,
    get_session_id,
    get_user_session_service,
)
from src.storefront.core.errors import PlatformError
from src.storefront.core.models.session import UserSession
from src.storefront.core.security import extract_client_fingerprint
from src.storefront.core.services import (
    DashboardService,
    NotSignedInError,
    RegistrationForm,
    RegistrationService,
    UserSessionService,
)
from src.storefront.runtime.context import get_config

router = APIRouter(tags=["customer"])

_REGISTRATION_STATUS = {
    "created": 201,
    "confirmation_pending": 202,
    "invalid": 400,
}


class LoginRequest(BaseModel):
    email: str
    password: str


def _session_user(user_session: UserSession) -> dict[str, Any]:
    return {"id": user_session.user_id, "email": user_session.email}


def _get_secure_cookie_settings() -> dict[str, Any]:
    """Cookie settings for the customer session cookie."""
    config = get_config()
    return {
        "httponly": True,
        "secure": config.security.secure_cookies
        and config.app.environment == "production",
        "samesite": config.security.cookie_samesite,
        "path": "/",
    }


@router.post("/register", response_model=None)
async def register(
    form: RegistrationForm,
    service: RegistrationService = Depends(get_registration_service),
) -> JSONResponse:
    """Create an account and its profile row.

    201 when the account is usable right away, 202 when email confirmation is
    pending. Validation problems are 400; provider failures are 400 at the
    sign-up step and 502 once the account exists.
    """
    outcome = await service.register(form)

    if outcome.status in _REGISTRATION_STATUS:
        status_code = _REGISTRATION_STATUS[outcome.status]
    else:
        status_code = 400 if outcome.stage == "sign_up" else 502

    content = outcome.model_dump(exclude_none=True)
    if outcome.status in ("invalid", "failed"):
        content["error"] = outcome.message
    return JSONResponse(status_code=status_code, content=content)


@router.post("/login", response_model=None)
async def login(
    credentials: LoginRequest,
    request: Request,
    user_session_service: UserSessionService = Depends(get_user_session_service),
) -> JSONResponse:
    """Sign in with email and password and set the session cookie."""
    try:
        user_session = await user_session_service.sign_in_with_email(
            credentials.email,
            credentials.password,
            extract_client_fingerprint(request),
        )
    except PlatformError as exc:
        return JSONResponse(status_code=401, content={"error": exc.message})

    response = JSONResponse(status_code=200, content={"user": _session_user(user_session)})
    response.set_cookie(
        key=get_config().security.session_cookie_name,
        value=user_session.id,
        max_age=get_config().app.session_max_age,
        **_get_secure_cookie_settings(),
    )
    return response


@router.post("/logout")
async def logout(
    response: Response,
    session_id: str | None = Depends(get_session_id),
    user_session_service: UserSessionService = Depends(get_user_session_service),
) -> dict[str, str]:
    """Sign out and clear the session cookie."""
    await user_session_service.sign_out(session_id)
    response.delete_cookie(get_config().security.session_cookie_name, path="/")
    return {"message": "Logged out"}


@router.get("/session")
async def session_state(
    user_session: UserSession | None = Depends(get_optional_session),
) -> dict[str, Any]:
    """Current authentication state for the storefront."""
    if not user_session:
        return {"authenticated": False, "user": None}
    return {"authenticated": True, "user": _session_user(user_session)}


@router.get("/dashboard", response_model=None)
async def dashboard(
    tab: str | None = None,
    user_session: UserSession | None = Depends(get_optional_session),
    service: DashboardService = Depends(get_dashboard_service),
) -> dict[str, Any] | JSONResponse:
    """Dashboard data for the signed-in customer."""
    try:
        view = await service.load(user_session, tab)
    except NotSignedInError as exc:
        logger.debug("Dashboard requested without a session")
        return JSONResponse(
            status_code=401,
            content={"error": "Not signed in", "redirect_to": exc.redirect_to},
        )

    return {
        "active_tab": view.active_tab,
        "greeting": view.greeting,
        "profile": view.profile.model_dump() if view.profile else None,
        "user_id": view.user_id,
    }
