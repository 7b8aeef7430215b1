"""Pydantic API models and the static currency catalog."""

from .constants import (
    CURRENCIES,
    DEFAULT_SOURCE,
    DEFAULT_TARGET,
    available_currencies,
    currency_name,
    is_supported,
)  # re-export
from .rates import ConvertIn, ConvertOut, CurrencyOut, RateRowOut, RatesOut, RefreshIn

__all__ = [
    "CURRENCIES",
    "DEFAULT_SOURCE",
    "DEFAULT_TARGET",
    "available_currencies",
    "currency_name",
    "is_supported",
    "ConvertIn",
    "ConvertOut",
    "CurrencyOut",
    "RateRowOut",
    "RatesOut",
    "RefreshIn",
]
