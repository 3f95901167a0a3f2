"""Cached request gateway shared by all provider clients."""
import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from core.cache import CacheTTL, ResponseCache
from core.providers.errors import (
    ProviderError,
    ProviderAuthError,
    ProviderRateLimitError,
    ProviderTransportError,
    ProviderResponseError,
)
from core.utils import RequestFingerprinter

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 30


def _parse_retry_after(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _extract_error_message(response: requests.Response) -> Optional[str]:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        for key in ("message", "error"):
            if isinstance(data.get(key), str) and data[key]:
                return data[key]
    return None


class CachedRequestGateway:
    """
    Outbound HTTP for one provider, fronted by the response cache.

    Responsibilities:
    - Fingerprint each logical request (headers excluded)
    - Serve cache hits without touching the network
    - Call the provider with a fixed timeout on misses and cache the payload
    - Classify failures into ProviderError subclasses and re-raise them

    Concurrent misses on the same fingerprint each reach the provider; there is
    no in-flight de-duplication.
    """

    def __init__(
        self,
        service_name: str,
        cache: ResponseCache,
        session: Optional[requests.Session] = None,
        timeout_seconds: int = REQUEST_TIMEOUT_SECONDS
    ):
        self.service_name = service_name
        self.cache = cache
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self.session.headers.setdefault("Content-Type", "application/json")

    async def request(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
        ttl_seconds: int = CacheTTL.MEDIUM
    ) -> Any:
        fingerprint = RequestFingerprinter.calculate(self.service_name, endpoint, method, params, body)

        cached = await asyncio.to_thread(self.cache.get, fingerprint)
        if cached is not None:
            logger.debug(f"[{self.service_name}] Using cached response for {endpoint}")
            return cached

        logger.info(f"[{self.service_name}] Making API request to {endpoint}")
        payload = await asyncio.to_thread(self._send, endpoint, method, params, body, headers)

        await asyncio.to_thread(self.cache.put, fingerprint, payload, ttl_seconds)
        return payload

    def _send(
        self,
        endpoint: str,
        method: str,
        params: Optional[Dict[str, Any]],
        body: Optional[Any],
        headers: Optional[Dict[str, str]]
    ) -> Any:
        try:
            response = self.session.request(
                method.upper(),
                endpoint,
                params=params,
                json=body,
                headers=headers,
                timeout=self.timeout_seconds
            )
        except requests.Timeout as e:
            raise self._log(ProviderTransportError(
                self.service_name, endpoint, f"Request timed out after {self.timeout_seconds}s"
            )) from e
        except requests.RequestException as e:
            raise self._log(ProviderTransportError(
                self.service_name, endpoint, "No response received from API server"
            )) from e

        if response.status_code >= 400:
            raise self._log(self._classify(endpoint, response))

        try:
            return response.json()
        except ValueError as e:
            raise self._log(ProviderResponseError(
                self.service_name, endpoint, "Response body is not valid JSON", response.status_code
            )) from e

    def _classify(self, endpoint: str, response: requests.Response) -> ProviderError:
        status = response.status_code

        if status == 429:
            return ProviderRateLimitError(
                self.service_name,
                endpoint,
                "Rate limit exceeded. Please try again later.",
                status,
                retry_after=_parse_retry_after(response.headers.get("Retry-After"))
            )
        if status in (401, 403):
            return ProviderAuthError(
                self.service_name, endpoint, "API authentication error. Check your API key.", status
            )

        message = _extract_error_message(response) or f"API error with status {status}"
        return ProviderError(self.service_name, endpoint, message, status)

    @staticmethod
    def _log(error: ProviderError) -> ProviderError:
        logger.error(f"{error} (status={error.status_code}, endpoint={error.endpoint})")
        return error

    def close(self):
        """Close the session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
