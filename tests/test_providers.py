import io
import urllib.error

import pytest

from fxwidget.services import http_client
from fxwidget.services.http_client import HttpError, HttpResponse, get_json
from fxwidget.services.rates.base import parse_latest_payload
from fxwidget.services.rates.errors import InvalidResponse, NetworkFailure, ProviderError
from fxwidget.services.rates.providers import (
    ExchangeRateApiProvider,
    FrankfurterRateProvider,
    make_rate_provider,
)


class RecordingFetcher:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.urls = []

    def __call__(self, url, *, timeout, retries):
        self.urls.append(url)
        if self.exc is not None:
            raise self.exc
        return self.response


def test_frankfurter_builds_from_query_and_parses_rates():
    fetch = RecordingFetcher(
        HttpResponse(200, {"amount": 1.0, "base": "BRL", "date": "2024-05-17", "rates": {"USD": 0.2}})
    )
    provider = FrankfurterRateProvider("https://api.frankfurter.app/latest", fetcher=fetch)

    quote = provider.fetch_latest("brl")

    assert fetch.urls == ["https://api.frankfurter.app/latest?from=BRL"]
    assert quote.base == "BRL"
    assert quote.rates == {"USD": 0.2}
    assert quote.date == "2024-05-17"


def test_exchangerate_api_puts_base_in_path():
    fetch = RecordingFetcher(HttpResponse(200, {"base": "USD", "rates": {"USD": 1, "BRL": 5.01}}))
    provider = ExchangeRateApiProvider("https://api.exchangerate-api.com/v4/latest/", fetcher=fetch)

    quote = provider.fetch_latest("USD")

    assert fetch.urls == ["https://api.exchangerate-api.com/v4/latest/USD"]
    assert quote.rates["BRL"] == 5.01


def test_transport_error_becomes_network_failure():
    provider = FrankfurterRateProvider(
        "https://example.test/latest", fetcher=RecordingFetcher(exc=HttpError("timed out"))
    )

    with pytest.raises(NetworkFailure) as info:
        provider.fetch_latest("BRL")

    assert info.value.base == "BRL"
    assert info.value.kind == "network_failure"


def test_error_status_with_message_is_provider_error():
    with pytest.raises(ProviderError) as info:
        parse_latest_payload("XYZ", 404, {"message": "not found"})

    assert info.value.detail == "not found"


def test_error_status_without_payload_is_invalid_response():
    with pytest.raises(InvalidResponse):
        parse_latest_payload("BRL", 500, None)


def test_error_field_on_success_status_is_provider_error():
    with pytest.raises(ProviderError):
        parse_latest_payload("BRL", 200, {"error": "quota exceeded"})


@pytest.mark.parametrize("body", [{"base": "BRL"}, {"base": "BRL", "rates": []}, ["rates"], None])
def test_missing_or_malformed_rates_is_invalid_response(body):
    with pytest.raises(InvalidResponse):
        parse_latest_payload("BRL", 200, body)


def test_mismatched_base_is_invalid_response():
    with pytest.raises(InvalidResponse):
        parse_latest_payload("BRL", 200, {"base": "EUR", "rates": {"USD": 1.08}})


def test_bad_individual_rates_are_dropped():
    quote = parse_latest_payload(
        "BRL", 200, {"base": "BRL", "rates": {"USD": 0.2, "EUR": -1, "GBP": "x", "JPY": 0, "chf": 0.18}}
    )

    assert quote.rates == {"USD": 0.2, "CHF": 0.18}


def test_make_rate_provider_uses_settings(settings):
    provider = make_rate_provider("exchangerate-api", settings)

    assert isinstance(provider, ExchangeRateApiProvider)
    with pytest.raises(ValueError):
        make_rate_provider("static", settings)


class _FakeResponse(io.BytesIO):
    status = 200

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


def test_get_json_returns_error_status_with_body(monkeypatch):
    def fake_urlopen(request, timeout):
        raise urllib.error.HTTPError(
            request.full_url, 404, "Not Found", {}, io.BytesIO(b'{"message": "not found"}')
        )

    monkeypatch.setattr(http_client.urllib.request, "urlopen", fake_urlopen)

    resp = get_json("https://example.test/latest?from=XYZ", retries=0)

    assert resp.status == 404
    assert resp.body == {"message": "not found"}


def test_get_json_parses_success_body(monkeypatch):
    monkeypatch.setattr(
        http_client.urllib.request,
        "urlopen",
        lambda request, timeout: _FakeResponse(b'{"base": "BRL", "rates": {"USD": 0.2}}'),
    )

    resp = get_json("https://example.test/latest?from=BRL")

    assert resp.status == 200
    assert resp.body["rates"] == {"USD": 0.2}


def test_get_json_retries_transport_errors_then_raises(monkeypatch):
    attempts = []

    def failing_urlopen(request, timeout):
        attempts.append(request.full_url)
        raise urllib.error.URLError("connection refused")

    monkeypatch.setattr(http_client.urllib.request, "urlopen", failing_urlopen)
    monkeypatch.setattr(http_client.time, "sleep", lambda _: None)

    with pytest.raises(HttpError):
        get_json("https://example.test/latest", retries=2)

    assert len(attempts) == 3
