"""Provider failure taxonomy raised by the request gateway."""
from typing import Optional


class ProviderError(Exception):
    """
    Base class for third-party provider failures.

    The message is prefixed with the service name so log lines and surfaced
    errors say which provider failed.
    """

    def __init__(
        self,
        service_name: str,
        endpoint: Optional[str],
        message: str,
        status_code: Optional[int] = None
    ):
        self.service_name = service_name
        self.endpoint = endpoint
        self.status_code = status_code
        self.detail = message
        super().__init__(f"[{service_name}] {message}")


class ProviderAuthError(ProviderError):
    """401/403 from the provider, or no API key configured."""


class ProviderRateLimitError(ProviderError):
    """429 from the provider. Callers should back off before retrying."""

    def __init__(
        self,
        service_name: str,
        endpoint: Optional[str],
        message: str,
        status_code: Optional[int] = 429,
        retry_after: Optional[float] = None
    ):
        super().__init__(service_name, endpoint, message, status_code)
        self.retry_after = retry_after


class ProviderTransportError(ProviderError):
    """Timeout or connection failure; no response was received."""


class ProviderResponseError(ProviderError):
    """The provider answered, but the payload is unusable (not JSON, missing entity)."""
