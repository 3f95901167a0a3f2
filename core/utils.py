import hashlib
import json
import logging
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (66.5 -> 67).

    The builtin round() uses banker's rounding, which would make the composite
    score drift by one point on exact halves.
    """
    return int(Decimal(str(round(float(value), 6))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def clamp_score(value: float, lo: int = 0, hi: int = 100) -> int:
    """Round and clamp a score into [lo, hi]."""
    rounded = round_half_up(value)
    if not (lo <= rounded <= hi):
        logger.debug(f"Score {rounded} out of range, clamping to [{lo}, {hi}]")
    return max(lo, min(hi, rounded))


class RequestFingerprinter:
    """
    Pure logic for creating deterministic fingerprints of outbound provider requests.
    """

    @staticmethod
    def canonicalize(value: Any) -> str:
        """Serialize with sorted keys at every depth so dict insertion order never matters."""
        return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str, ensure_ascii=False)

    @staticmethod
    def calculate(
        service_name: str,
        endpoint: str,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Any] = None
    ) -> str:
        """
        Create a deterministic hash of the logical request tuple.
        Formula: SHA256(canonical_json([service, endpoint, METHOD, params, body]))
        """
        raw = RequestFingerprinter.canonicalize([
            service_name,
            endpoint,
            (method or "GET").upper(),
            params or {},
            body if body is not None else {},
        ])
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()
