"""Errors raised while refreshing rates from a provider."""

from __future__ import annotations


class FetchError(RuntimeError):
    """Base class for every refresh failure. Never fatal to the process."""

    kind = "fetch_error"

    def __init__(self, base: str, detail: str):
        super().__init__(f"{base}: {detail}")
        self.base = base
        self.detail = detail


class NetworkFailure(FetchError):
    """Transport-level failure (DNS, refused connection, timeout)."""

    kind = "network_failure"


class InvalidResponse(FetchError):
    """Provider answered but the rates payload is missing or malformed."""

    kind = "invalid_response"


class ProviderError(FetchError):
    """Provider returned an explicit error payload."""

    kind = "provider_error"
