"""Newest-first product listing with loading/error state."""

import asyncio
from dataclasses import dataclass

from loguru import logger

from src.storefront.core.errors import PlatformError
from src.storefront.core.platform.gateway import PlatformGateway
from src.storefront.entities.product import Product


@dataclass(frozen=True)
class ProductFeedState:
    """Point-in-time view of a ProductFeed."""

    products: tuple[Product, ...]
    loading: bool
    error: str | None
    generation: int


class ProductFeed:
    """Holds the latest product page and the state of the request behind it.

    Each ``fetch_products`` call replaces the previous state wholesale. A
    failed fetch records its error but keeps the previous products, so the
    last good page stays visible. Calls are numbered; a response that
    arrives after a newer call has started does not touch the feed.

    The state returned by ``fetch_products`` belongs to that call alone, so
    callers sharing one feed each get the rows they asked for.
    """

    def __init__(
        self, gateway: PlatformGateway, table: str = "products", default_limit: int = 20
    ) -> None:
        self._gateway = gateway
        self._table = table
        self._default_limit = default_limit
        self._generation = 0

        self.products: list[Product] = []
        self.loading = False
        self.error: str | None = None

    @property
    def generation(self) -> int:
        return self._generation

    def snapshot(self) -> ProductFeedState:
        return ProductFeedState(
            products=tuple(self.products),
            loading=self.loading,
            error=self.error,
            generation=self._generation,
        )

    async def fetch_products(self, limit: int | None = None) -> ProductFeedState:
        """Fetch up to ``limit`` products, newest first.

        Returns this call's outcome. On failure that is the error together
        with the feed's last good page, cut to ``limit``.
        """
        limit = limit or self._default_limit
        self._generation += 1
        generation = self._generation

        self.loading = True
        self.error = None
        try:
            rows = await self._gateway.select_rows(
                self._table, order_by="created_at", descending=True, limit=limit
            )
            products = [Product.model_validate(row) for row in rows or []]
        except asyncio.CancelledError:
            if generation == self._generation:
                self.loading = False
            raise
        except PlatformError as exc:
            error = exc.message
        except Exception as exc:
            logger.exception("Unexpected error fetching products")
            error = str(exc)
        else:
            error = None

        if generation == self._generation:
            self.loading = False
            if error is None:
                self.products = products
            else:
                logger.warning("Product fetch failed: {}", error)
                self.error = error
        else:
            logger.debug(
                "Product page {} superseded by {}; feed left unchanged",
                generation,
                self._generation,
            )

        return ProductFeedState(
            products=tuple(products if error is None else self.products[:limit]),
            loading=False,
            error=error,
            generation=generation,
        )
