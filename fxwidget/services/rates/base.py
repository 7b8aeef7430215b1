from __future__ import annotations

"""Rate provider abstraction.

A provider turns a base currency into a ProviderQuote (1 base = rate units of
each quoted currency). Classification of failures into the FetchError
hierarchy happens here so RateStore only ever sees a quote or an error.
"""
import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .errors import InvalidResponse, ProviderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderQuote:
    base: str
    rates: Dict[str, float] = field(default_factory=dict)
    date: Optional[str] = None


class RateProvider(ABC):
    name: str = "abstract"

    @abstractmethod
    def fetch_latest(self, base: str) -> ProviderQuote:
        """Return the latest rates relative to ``base`` or raise FetchError."""
        raise NotImplementedError


def _error_text(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    for key in ("error", "message", "error-type"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def parse_latest_payload(base: str, status: int, body: Any) -> ProviderQuote:
    """Validate a latest-rates JSON body into a ProviderQuote.

    Non-success status or an explicit error field -> ProviderError when the body
    explains itself, InvalidResponse otherwise. Absent or non-mapping rates ->
    InvalidResponse. Non-positive or non-numeric individual rates are dropped.
    """
    error = _error_text(body)
    if not 200 <= status < 300:
        if error:
            raise ProviderError(base, error)
        raise InvalidResponse(base, f"HTTP {status} without error payload")
    if error and not (isinstance(body, dict) and body.get("rates")):
        raise ProviderError(base, error)
    if not isinstance(body, dict):
        raise InvalidResponse(base, "response body is not a JSON object")
    raw_rates = body.get("rates")
    if not isinstance(raw_rates, dict):
        raise InvalidResponse(base, "response has no rates mapping")

    rates: Dict[str, float] = {}
    for code, value in raw_rates.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            logger.warning("dropping non-numeric rate %s=%r for base %s", code, value, base)
            continue
        if not math.isfinite(value) or value <= 0:
            logger.warning("dropping invalid rate %s=%r for base %s", code, value, base)
            continue
        rates[str(code).upper()] = float(value)

    reported_base = body.get("base") or body.get("base_code") or base
    if str(reported_base).upper() != base:
        raise InvalidResponse(base, f"provider answered for base {reported_base}")
    date = body.get("date")
    return ProviderQuote(base=base, rates=rates, date=date if isinstance(date, str) else None)
