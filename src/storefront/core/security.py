"""Security helpers for customer sessions."""

import base64
import hashlib
import secrets

from fastapi import Request


def generate_secure_token(length: int = 32) -> str:
    """Generate a cryptographically secure random token.

    Args:
        length: Number of random bytes to generate (default 32)

    Returns:
        URL-safe base64 encoded token
    """
    return (
        base64.urlsafe_b64encode(secrets.token_bytes(length))
        .decode("utf-8")
        .rstrip("=")
    )


def mask_secret(value: str | None) -> str:
    """Render a credential for logs: first 8 and last 4 characters only."""
    if not value:
        return "<missing>"
    return f"{value[:8]}...{value[-4:]}" if len(value) > 12 else value


def hash_client_fingerprint(
    user_agent: str | None, client_ip: str | None = None
) -> str:
    """Create a stable fingerprint for client context binding.

    Args:
        user_agent: Client User-Agent header
        client_ip: Optional client IP (be careful with proxies)

    Returns:
        SHA256 hash of client characteristics
    """
    components = []

    if user_agent:
        components.append(user_agent.strip())

    if client_ip:
        components.append(client_ip.strip())

    if not components:
        components.append("unknown-client")

    fingerprint_data = "|".join(components)
    return hashlib.sha256(fingerprint_data.encode("utf-8")).hexdigest()


def extract_client_fingerprint(request: Request) -> str:
    """Extract and hash client fingerprint from FastAPI request."""
    user_agent = request.headers.get("user-agent")

    client_ip = None
    for header in ("x-forwarded-for", "x-real-ip", "cf-connecting-ip"):
        value = request.headers.get(header)
        if value:
            # Take first IP if comma-separated list
            client_ip = value.split(",")[0].strip()
            break

    if not client_ip and request.client:
        client_ip = request.client.host

    return hash_client_fingerprint(user_agent, client_ip)
