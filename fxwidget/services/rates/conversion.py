from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

"""Amount conversion against the current rate snapshot.

Responsibilities:
    - Validate the amount (finite, strictly positive).
    - Multiply by the looked-up rate; no rounding happens here, formatting is a
      display concern (see services.formatting).
    - Report a missing rate separately from an invalid amount.
"""


class SupportsRateLookup(Protocol):
    def rate_for(self, currency: str) -> Optional[float]: ...


class ConversionStatus(str, Enum):
    OK = "ok"
    INVALID_AMOUNT = "invalid_amount"
    RATE_UNAVAILABLE = "rate_unavailable"


@dataclass(frozen=True)
class ConversionOutcome:
    status: ConversionStatus
    amount: Optional[float]
    target: str
    rate: Optional[float] = None
    value: Optional[float] = None

    @property
    def ok(self) -> bool:
        return self.status is ConversionStatus.OK


def parse_amount(raw: object) -> Optional[float]:
    """Coerce user input to float; None when it is not a number at all."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    text = str(raw).strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def convert(amount: object, target_currency: str, store: SupportsRateLookup) -> ConversionOutcome:
    target = target_currency.upper()
    value = parse_amount(amount)
    if value is None or not math.isfinite(value) or value <= 0:
        return ConversionOutcome(ConversionStatus.INVALID_AMOUNT, value, target)

    rate = store.rate_for(target)
    if rate is None:
        return ConversionOutcome(ConversionStatus.RATE_UNAVAILABLE, value, target)
    return ConversionOutcome(ConversionStatus.OK, value, target, rate, value * rate)
