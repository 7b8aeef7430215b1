from __future__ import annotations
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .constants import CURRENCIES


def _supported(v: str) -> str:
    v = v.upper()
    if v not in CURRENCIES:
        raise ValueError("unsupported currency")
    return v


class CurrencyOut(BaseModel):
    code: str
    name: str


class RefreshIn(BaseModel):
    base: str = Field(..., description="Base currency code (e.g. BRL)")

    @field_validator("base")
    @classmethod
    def valid_currency(cls, v: str) -> str:
        return _supported(v)


class ConvertIn(BaseModel):
    # Kept loose on purpose: invalid amounts are a conversion outcome, not a 422
    amount: Optional[float | str] = None
    source: str
    target: str

    @field_validator("source", "target")
    @classmethod
    def valid_currency(cls, v: str) -> str:
        return _supported(v)


class RatesOut(BaseModel):
    base: str
    rates: Dict[str, float]
    fetched_at: Optional[datetime] = None
    provider_date: Optional[str] = None


class RateRowOut(BaseModel):
    code: str
    name: str
    rate: float
    display: str


class ConvertOut(BaseModel):
    status: str
    source: str
    target: str
    amount: Optional[float] = None
    rate: Optional[float] = None
    value: Optional[float] = None
    formatted: str
    rates_header: str
    rate_rows: List[RateRowOut] = Field(default_factory=list)
