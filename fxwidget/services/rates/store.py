from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from .base import RateProvider
from .errors import FetchError

"""Rate cache for a single base currency.

Purpose:
    Hold the most recently fetched code -> rate mapping together with the base
    it is relative to, and refresh it through the configured RateProvider.

Design:
    - State is replaced wholesale on every successful refresh, never merged.
    - The identity rate (base -> 1.0) is always materialised, so conversion to
      the base needs no special case.
    - A failed refresh raises FetchError and leaves the previous snapshot as-is.
    - Refreshes are serialised by a lock: one writer at a time.
"""

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateSnapshot:
    base: Optional[str] = None
    rates: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    fetched_at: Optional[datetime] = None
    provider_date: Optional[str] = None

    @property
    def empty(self) -> bool:
        return self.base is None

    def rate_for(self, currency: str) -> Optional[float]:
        return self.rates.get(currency.upper())


class RateStore:
    """Owned cache of rates for one base currency."""

    def __init__(self, provider: RateProvider):
        self._provider = provider
        self._snapshot = RateSnapshot()
        self._lock = threading.Lock()

    @property
    def base(self) -> Optional[str]:
        return self._snapshot.base

    @property
    def rates(self) -> Mapping[str, float]:
        return self._snapshot.rates

    def snapshot(self) -> RateSnapshot:
        return self._snapshot

    def rate_for(self, currency: str) -> Optional[float]:
        return self._snapshot.rate_for(currency)

    def is_stale_for(self, desired_base: str) -> bool:
        snap = self._snapshot
        return snap.empty or snap.base != desired_base.upper()

    def refresh(self, base_currency: str) -> "RateStore":
        """Fetch rates for ``base_currency`` and replace the cached state.

        Raises FetchError (NetworkFailure, InvalidResponse, ProviderError) on
        failure; the previous snapshot is kept untouched in that case.
        """
        base = base_currency.upper()
        with self._lock:
            try:
                quote = self._provider.fetch_latest(base)
            except FetchError as e:
                logger.warning(
                    "rate refresh for %s failed (%s): %s",
                    base,
                    e.kind,
                    e.detail,
                    extra={"base": base, "provider": self._provider.name, "kind": e.kind},
                )
                raise
            rates: Dict[str, float] = dict(quote.rates)
            rates[base] = 1.0
            self._snapshot = RateSnapshot(
                base=base,
                rates=MappingProxyType(rates),
                fetched_at=datetime.now(timezone.utc),
                provider_date=quote.date,
            )
            logger.info(
                "rates refreshed for base %s (%d currencies)",
                base,
                len(rates),
                extra={"base": base, "provider": self._provider.name},
            )
        return self
