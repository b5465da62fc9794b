"""Privileged customer row insert using the service-role client."""

from typing import Any

from loguru import logger

from src.storefront.core.errors import PlatformError
from src.storefront.core.platform.gateway import PlatformGateway, Row

METHOD_NOT_ALLOWED = "Method not allowed"
MISSING_USER_ID = "Missing user id"


class ProvisioningError(Exception):
    """Request rejected by the provisioning service, with the HTTP status to send."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class CustomerProvisioningService:
    """Inserts one customer row on behalf of a caller.

    The gateway given here must be the service-role client; this is the only
    consumer of that credential.
    """

    def __init__(self, service_gateway: PlatformGateway, customers_table: str = "customers"):
        self._gateway = service_gateway
        self._customers_table = customers_table

    async def create_customer(self, method: str, payload: Any) -> Row:
        """Validate the request and insert ``payload``.

        Raises:
            ProvisioningError: 405 for non-POST, 400 without an ``id``, 500 when
                the platform rejects the insert or anything else goes wrong.
        """
        if method.upper() != "POST":
            raise ProvisioningError(405, METHOD_NOT_ALLOWED)

        if not isinstance(payload, dict) or not payload.get("id"):
            raise ProvisioningError(400, MISSING_USER_ID)

        try:
            row = await self._gateway.insert_rows(
                self._customers_table, [payload], single=True
            )
        except PlatformError as exc:
            logger.warning("Customer insert for {} failed: {}", payload["id"], exc.message)
            raise ProvisioningError(500, exc.message) from exc
        except Exception as exc:
            logger.exception("Unexpected error inserting customer {}", payload["id"])
            raise ProvisioningError(500, str(exc)) from exc

        logger.info("Provisioned customer {}", payload["id"])
        return row
