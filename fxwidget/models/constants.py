"""Static currency catalog.

Read-only; insertion order is the order used by selectors and the rates table.
"""

from types import MappingProxyType
from typing import List, Mapping, Tuple

CURRENCIES: Mapping[str, str] = MappingProxyType(
    {
        "BRL": "Brazilian Real",
        "USD": "US Dollar",
        "EUR": "Euro",
        "GBP": "Pound Sterling",
        "JPY": "Japanese Yen",
        "CAD": "Canadian Dollar",
        "AUD": "Australian Dollar",
        "CHF": "Swiss Franc",
    }
)

DEFAULT_SOURCE = "BRL"
DEFAULT_TARGET = "USD"
UNKNOWN_CURRENCY_NAME = "Foreign currency"


def available_currencies() -> List[Tuple[str, str]]:
    return list(CURRENCIES.items())


def currency_name(code: str) -> str:
    return CURRENCIES.get(code.upper(), UNKNOWN_CURRENCY_NAME)


def is_supported(code: str) -> bool:
    return code.upper() in CURRENCIES
