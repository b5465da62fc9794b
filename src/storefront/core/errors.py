"""Error types shared by the storefront services."""


class ConfigurationError(RuntimeError):
    """Required configuration is missing or invalid. Fatal at startup."""


class PlatformError(Exception):
    """The hosted platform rejected a request or could not be reached.

    ``message`` is the provider's own message and is surfaced to the user as-is.
    """

    def __init__(
        self, message: str, status_code: int | None = None, code: str | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code

    def __repr__(self) -> str:
        return (
            f"PlatformError(message={self.message!r}, "
            f"status_code={self.status_code!r}, code={self.code!r})"
        )
