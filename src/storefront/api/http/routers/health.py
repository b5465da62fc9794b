"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Request

from src.storefront.api.http.app_data import ApplicationDependencies
from src.storefront.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe: 200 as long as the process is running."""
    return {"status": "healthy", "service": "storefront"}


@router.get("/ready")
async def readiness(request: Request) -> dict[str, Any]:
    """Report which storefront services were wired at startup."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    config = get_config()
    return {
        "status": "ready",
        "environment": config.app.environment,
        "platform_url": config.supabase.url,
        "provisioning": app_deps.provisioning_service is not None,
        "products_generation": app_deps.product_feed.generation,
    }
