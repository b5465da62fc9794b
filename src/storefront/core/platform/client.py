"""httpx client for the Supabase REST (PostgREST) and auth (GoTrue) APIs."""

from typing import Any

import httpx
from loguru import logger

from src.storefront.core.errors import ConfigurationError, PlatformError
from src.storefront.core.models.platform import PlatformSession, SignUpResult
from src.storefront.core.platform.gateway import PlatformGateway, Row
from src.storefront.core.security import mask_secret
from src.storefront.runtime.config.config_data import SupabaseConfig

_SINGLE_OBJECT = "application/vnd.pgrst.object+json"
_MESSAGE_KEYS = ("msg", "message", "error_description", "error")


def error_from_response(response: httpx.Response) -> PlatformError:
    """Turn a non-2xx platform response into a PlatformError.

    Auth errors carry ``msg`` or ``error_description``, row errors carry
    ``message``; whichever is present becomes the user-facing message.
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    message = None
    code = None
    if isinstance(body, dict):
        for key in _MESSAGE_KEYS:
            value = body.get(key)
            if isinstance(value, str) and value:
                message = value
                break
        code = body.get("error_code") or body.get("code")

    if not message:
        message = response.text or response.reason_phrase or f"HTTP {response.status_code}"

    return PlatformError(
        message,
        status_code=response.status_code,
        code=str(code) if code is not None else None,
    )


class SupabaseClient(PlatformGateway):
    """Platform gateway speaking the Supabase HTTP APIs.

    Every call opens a short-lived ``httpx.AsyncClient``; the handle itself
    only holds the project URL, the key and the timeout, so one instance is
    shared by all requests.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not url or not api_key:
            raise ConfigurationError(
                "Supabase URL and API key are required. "
                "Set SUPABASE_URL and SUPABASE_ANON_KEY (or SUPABASE_SERVICE_ROLE_KEY)."
            )
        self._url = url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    def __repr__(self) -> str:
        return f"SupabaseClient(url={self._url!r}, api_key={mask_secret(self._api_key)!r})"

    def _headers(
        self, access_token: str | None = None, extra: dict[str, str] | None = None
    ) -> dict[str, str]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {access_token or self._api_key}",
        }
        if extra:
            headers.update(extra)
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
        access_token: str | None = None,
    ) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self._url, timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.request(
                    method,
                    path,
                    params=params,
                    json=json,
                    headers=self._headers(access_token, headers),
                )
        except httpx.HTTPError as exc:
            logger.warning("Platform request {} {} failed: {}", method, path, exc)
            raise PlatformError(str(exc) or type(exc).__name__) from exc

        if response.is_error:
            error = error_from_response(response)
            logger.debug(
                "Platform returned {} for {} {}: {}",
                response.status_code,
                method,
                path,
                error.message,
            )
            raise error

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # --- Rows (PostgREST) ---

    async def select_rows(
        self,
        table: str,
        *,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        access_token: str | None = None,
    ) -> list[Row]:
        params: dict[str, Any] = {"select": "*"}
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        if limit is not None:
            params["limit"] = limit

        data = await self._request(
            "GET", f"/rest/v1/{table}", params=params, access_token=access_token
        )
        return data or []

    async def select_single(
        self,
        table: str,
        *,
        column: str,
        value: str,
        access_token: str | None = None,
    ) -> Row:
        return await self._request(
            "GET",
            f"/rest/v1/{table}",
            params={"select": "*", column: f"eq.{value}"},
            headers={"Accept": _SINGLE_OBJECT},
            access_token=access_token,
        )

    async def insert_rows(
        self,
        table: str,
        rows: list[Row],
        *,
        single: bool = False,
        access_token: str | None = None,
    ) -> list[Row] | Row:
        headers = {"Prefer": "return=representation"}
        if single:
            headers["Accept"] = _SINGLE_OBJECT

        data = await self._request(
            "POST",
            f"/rest/v1/{table}",
            json=rows,
            headers=headers,
            access_token=access_token,
        )
        if single:
            return data or {}
        return data or []

    # --- Auth (GoTrue) ---

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any] | None = None
    ) -> SignUpResult:
        body = await self._request(
            "POST",
            "/auth/v1/signup",
            json={"email": email, "password": password, "data": metadata or {}},
        )
        return SignUpResult.from_response(body)

    async def sign_in_with_password(self, email: str, password: str) -> PlatformSession:
        body = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return PlatformSession.model_validate(body)

    async def sign_out(self, access_token: str) -> None:
        await self._request("POST", "/auth/v1/logout", access_token=access_token)


def create_public_client(
    config: SupabaseConfig, transport: httpx.AsyncBaseTransport | None = None
) -> SupabaseClient:
    """Build the shared client used for every customer-facing call."""
    if not config.url or not config.anon_key:
        raise ConfigurationError(
            "supabase url and anon key are required. "
            "Set SUPABASE_URL and SUPABASE_ANON_KEY in the environment or .env."
        )
    logger.info(
        "Supabase public client: url={} anon_key={}",
        config.url,
        mask_secret(config.anon_key),
    )
    return SupabaseClient(
        config.url, config.anon_key, timeout=config.timeout_seconds, transport=transport
    )


def create_service_client(
    config: SupabaseConfig, transport: httpx.AsyncBaseTransport | None = None
) -> SupabaseClient:
    """Build the elevated client. Only the customer provisioning service may hold it."""
    if not config.url or not config.service_role_key:
        raise ConfigurationError(
            "Missing SUPABASE_SERVICE_ROLE_KEY or SUPABASE_URL on server"
        )
    logger.info(
        "Supabase service client: url={} service_role_key={}",
        config.url,
        mask_secret(config.service_role_key),
    )
    return SupabaseClient(
        config.url,
        config.service_role_key,
        timeout=config.timeout_seconds,
        transport=transport,
    )
