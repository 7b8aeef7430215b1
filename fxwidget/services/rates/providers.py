from __future__ import annotations

"""Concrete rate providers and factory.

Exactly one provider is active, chosen by settings.exchange_rate_provider.
There is no fallback chain between providers.
"""
import logging
from typing import Callable, Dict, Type
from urllib.parse import quote, urlencode

from fxwidget.core.config import Settings
from fxwidget.services.http_client import HttpError, HttpResponse, get_json

from .base import ProviderQuote, RateProvider, parse_latest_payload
from .errors import NetworkFailure

logger = logging.getLogger(__name__)

Fetcher = Callable[..., HttpResponse]


class _HTTPRateProvider(RateProvider):
    """Shared GET-and-validate flow; subclasses only build the URL."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        retries: int = 2,
        fetcher: Fetcher = get_json,
    ):
        self._base_url = str(base_url).rstrip("/")
        self._timeout = timeout
        self._retries = retries
        self._fetch = fetcher

    def build_url(self, base: str) -> str:  # pragma: no cover - abstract-ish
        raise NotImplementedError

    def fetch_latest(self, base: str) -> ProviderQuote:
        base = base.upper()
        url = self.build_url(base)
        logger.info("fetching latest rates from %s for base %s", self.name, base)
        try:
            resp = self._fetch(url, timeout=self._timeout, retries=self._retries)
        except HttpError as e:
            raise NetworkFailure(base, str(e)) from e
        return parse_latest_payload(base, resp.status, resp.body)


class FrankfurterRateProvider(_HTTPRateProvider):
    """api.frankfurter.app: GET /latest?from=BRL."""

    name = "frankfurter"

    def build_url(self, base: str) -> str:
        return f"{self._base_url}?{urlencode({'from': base})}"


class ExchangeRateApiProvider(_HTTPRateProvider):
    """api.exchangerate-api.com: GET /v4/latest/BRL."""

    name = "exchangerate-api"

    def build_url(self, base: str) -> str:
        return f"{self._base_url}/{quote(base)}"


_PROVIDER_REGISTRY: Dict[str, Type[_HTTPRateProvider]] = {
    "frankfurter": FrankfurterRateProvider,
    "exchangerate-api": ExchangeRateApiProvider,
}


def make_rate_provider(kind: str, settings: Settings) -> RateProvider:
    cls = _PROVIDER_REGISTRY.get(kind)
    if not cls:
        raise ValueError(f"Unknown rate provider kind '{kind}'")
    urls = {
        "frankfurter": settings.frankfurter_base_url,
        "exchangerate-api": settings.exchangerate_api_base_url,
    }
    return cls(
        str(urls[kind]),
        timeout=settings.http_timeout_seconds,
        retries=settings.http_retries,
    )
