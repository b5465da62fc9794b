"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.storefront.api.http.app_data import ApplicationDependencies
from src.storefront.api.http.routers.catalog import router as catalog_router
from src.storefront.api.http.routers.customer import router as customer_router
from src.storefront.api.http.routers.health import router as health_router
from src.storefront.api.http.routers.provisioning import router as provisioning_router
from src.storefront.api.utils.app_startup import configure_logging
from src.storefront.core.models.session import UserSession
from src.storefront.core.platform import create_public_client, create_service_client
from src.storefront.core.services import (
    CustomerProvisioningService,
    DashboardService,
    ProductFeed,
    RegistrationService,
    UserSessionService,
)
from src.storefront.core.storage import InMemorySessionStorage
from src.storefront.runtime.context import get_config

# Initialize logging
configure_logging()


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


# --- FastAPI app setup ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


app = FastAPI(
    title="LocalMart Storefront",
    lifespan=lifespan,
    docs_url=None if get_config().app.environment == "production" else "/docs",
    redoc_url=None if get_config().app.environment == "production" else "/redoc",
)

app.add_middleware(SecurityHeadersMiddleware)

# expose startup for tests
__all__ = ["app", "startup", "shutdown"]

# --- CORS configuration ---
if get_config().app.environment == "production" and (
    "*" in get_config().app.cors.origins
):
    raise RuntimeError(
        "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().app.cors.origins,
    allow_credentials=get_config().app.cors.allow_credentials,
    allow_methods=get_config().app.cors.allow_methods,
    allow_headers=get_config().app.cors.allow_headers,
)


# --- Request logging middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    # query strings may carry emails; keep them out of the log context
    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except HTTPException as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=exc.status_code,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=exc.status_code,
                content={"detail": exc.detail, "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )

        except RequestValidationError as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=422,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.validation_error")
            return JSONResponse(
                status_code=422,
                content={"detail": exc.errors(), "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"error": str(exc), "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )


# --- Router registration ---
app.include_router(health_router)
app.include_router(catalog_router, prefix="/api")
app.include_router(provisioning_router, prefix="/api")
app.include_router(customer_router, prefix="/customer")


def _log_auth_event(event: str, session: UserSession | None) -> None:
    logger.bind(auth_event=event).info(
        "auth.state_change user={}", session.user_id if session else "-"
    )


# --- Lifecycle hooks ---
async def startup() -> None:
    config = get_config()
    logger.info("Starting up storefront in {} environment", config.app.environment)

    # Missing URL or keys raise ConfigurationError here and abort startup
    platform = create_public_client(config.supabase)

    provisioning_service = None
    if config.supabase.enable_provisioning:
        provisioning_service = CustomerProvisioningService(
            create_service_client(config.supabase), config.customers.table
        )
    else:
        logger.info("Customer provisioning endpoint disabled")

    user_session_service = UserSessionService(platform, InMemorySessionStorage())
    auth_subscription = user_session_service.on_auth_state_change(_log_auth_event)

    deps = ApplicationDependencies(
        platform=platform,
        product_feed=ProductFeed(
            platform,
            table=config.catalog.products_table,
            default_limit=config.catalog.default_limit,
        ),
        user_session_service=user_session_service,
        registration_service=RegistrationService(
            platform,
            customers_table=config.customers.table,
            login_route=config.customers.login_route,
            role=config.customers.role,
        ),
        dashboard_service=DashboardService(
            platform,
            customers_table=config.customers.table,
            login_route=config.customers.login_route,
            tabs=config.customers.dashboard_tabs,
            default_tab=config.customers.default_tab,
        ),
        provisioning_service=provisioning_service,
        auth_subscription=auth_subscription,
    )
    app.state.app_dependencies = deps


async def shutdown() -> None:
    logger.info("Shutting down storefront")
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is None:
        return

    if app_dependencies.auth_subscription is not None:
        app_dependencies.auth_subscription.unsubscribe()
    purged = await app_dependencies.user_session_service.purge_expired()
    logger.info("Purged {} expired customer sessions", purged)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # request logging happens in middleware
    )
