"""Privileged customer creation endpoint."""

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from src.storefront.api.http.deps import get_provisioning_service
from src.storefront.core.services import CustomerProvisioningService, ProvisioningError

router = APIRouter(tags=["provisioning"])


async def _read_payload(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return None


@router.api_route(
    "/create-customer",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    response_model=None,
)
async def create_customer(
    request: Request,
    service: CustomerProvisioningService = Depends(get_provisioning_service),
) -> JSONResponse:
    """Insert one customer row with the service-role credential.

    Only POST is accepted; the body must be a JSON object with an ``id``.
    """
    payload = await _read_payload(request) if request.method == "POST" else None

    try:
        row = await service.create_customer(request.method, payload)
    except ProvisioningError as exc:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    return JSONResponse(status_code=200, content={"data": row})
