import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Optional

from core.providers.errors import ProviderAuthError
from core.providers.gateway import CachedRequestGateway

logger = logging.getLogger(__name__)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse ISO-8601, RFC 2822 or epoch-second timestamps into naive UTC. Unparseable -> None."""
    if value is None or value == "":
        return None
    try:
        if isinstance(value, (int, float)):
            parsed = datetime.fromtimestamp(value, tz=timezone.utc)
        else:
            text = str(value).strip()
            try:
                parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
            except ValueError:
                parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, OverflowError, OSError):
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class BaseProviderClient:
    """
    Common plumbing for RapidAPI-hosted providers.

    Search operations catch ProviderError and return empty results; direct
    lookups let it propagate.
    """

    def __init__(self, gateway: CachedRequestGateway, api_key: Optional[str]):
        self.gateway = gateway
        self.api_key = api_key

    @property
    def service_name(self) -> str:
        return self.gateway.service_name

    def is_api_key_valid(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    def _headers(self, host: str) -> Dict[str, str]:
        if not self.is_api_key_valid():
            raise ProviderAuthError(self.service_name, None, "API key is missing or invalid")
        return {
            "X-RapidAPI-Key": self.api_key,
            "X-RapidAPI-Host": host,
        }

    async def _get(self, url: str, host: str, params: Dict[str, Any], ttl_seconds: int) -> Any:
        return await self.gateway.request(
            url,
            method="GET",
            params=params,
            headers=self._headers(host),
            ttl_seconds=ttl_seconds
        )
