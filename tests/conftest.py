from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from fxwidget.core.config import Settings
from fxwidget.main import create_app
from fxwidget.services.converter import build_converter
from fxwidget.services.rates.base import ProviderQuote, RateProvider
from fxwidget.services.rates.errors import FetchError, InvalidResponse
from fxwidget.services.rates.store import RateStore


class FakeProvider(RateProvider):
    name = "fake"

    def __init__(self, quotes: Optional[Dict[str, Dict[str, float]]] = None):
        self.quotes = quotes if quotes is not None else {}
        self.error: Optional[FetchError] = None
        self.calls: List[str] = []

    def fetch_latest(self, base: str) -> ProviderQuote:
        self.calls.append(base)
        if self.error is not None:
            raise self.error
        rates = self.quotes.get(base)
        if rates is None:
            raise InvalidResponse(base, "response has no rates mapping")
        return ProviderQuote(base=base, rates=dict(rates), date="2024-05-17")


QUOTES = {
    "BRL": {"USD": 0.20, "EUR": 0.18, "GBP": 0.155, "JPY": 31.25},
    "USD": {"BRL": 5.0, "EUR": 0.92, "GBP": 0.79},
}


@pytest.fixture
def settings():
    s = Settings(_env_file=None, debug=False)
    s.init_post_load()
    return s


@pytest.fixture
def provider():
    return FakeProvider({k: dict(v) for k, v in QUOTES.items()})


@pytest.fixture
def store(provider):
    return RateStore(provider)


@pytest.fixture
def converter(settings, provider):
    return build_converter(settings, provider=provider)


@pytest.fixture
def client(settings, converter):
    app = create_app(settings_override=settings, converter=converter)
    with TestClient(app) as c:
        yield c
