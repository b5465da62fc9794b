"""Product catalog router."""

from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from src.storefront.api.http.deps import get_product_feed
from src.storefront.core.services import ProductFeed
from src.storefront.runtime.context import get_config

router = APIRouter(tags=["catalog"])


@router.get("/products", response_model=None)
async def list_products(
    limit: int | None = Query(default=None, ge=1),
    feed: ProductFeed = Depends(get_product_feed),
) -> dict[str, Any] | JSONResponse:
    """Refresh the product feed and return it, newest first.

    On a provider error the previous products are returned alongside the
    error with a 502.
    """
    catalog = get_config().catalog
    limit = min(limit or catalog.default_limit, catalog.max_limit)

    state = await feed.fetch_products(limit)
    body = {
        "products": [product.model_dump() for product in state.products],
        "loading": state.loading,
        "error": state.error,
    }
    if state.error:
        return JSONResponse(status_code=502, content=body)
    return body
