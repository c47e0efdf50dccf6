"""Public exceptions for the Asana SDK."""


class AsanaError(Exception):
    """Base exception for all Asana SDK errors."""


class AsanaAPIError(AsanaError):
    """Non-2xx response from the Asana API."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class AsanaTransportError(AsanaError):
    """Request never produced a response (connection, DNS, TLS, timeout)."""


class AsanaConfigError(AsanaError):
    """Configuration error (missing token, model without a resource path)."""


class AsanaValidationError(AsanaError):
    """Response body does not match the requested model."""
