from __future__ import annotations

"""Converter widget controller.

Holds the state the page works on (selected source/target, raw amount, the
RateStore and the last status message) and drives refresh -> recompute.

Refresh policy:
    - Forced refresh (source change, refresh button, swap) always hits the provider.
    - Otherwise a refresh only happens when the store is stale for the source.
    - After a failed refresh the store keeps its previous snapshot. The failed
      base is remembered so plain amount edits do not refetch it in a loop;
      only an explicit refresh/source change retries.
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional

from fxwidget.core.config import Settings, get_settings
from fxwidget.models.constants import CURRENCIES, currency_name, is_supported
from fxwidget.services.formatting import (
    UNAVAILABLE_DISPLAY,
    format_amount,
    format_rate,
    invalid_amount_display,
)
from fxwidget.services.rates.conversion import ConversionOutcome, ConversionStatus, convert
from fxwidget.services.rates.errors import FetchError, NetworkFailure
from fxwidget.services.rates.base import RateProvider
from fxwidget.services.rates.providers import make_rate_provider
from fxwidget.services.rates.store import RateSnapshot, RateStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusMessage:
    text: str
    level: str = "info"  # success | info | danger


@dataclass(frozen=True)
class RateRow:
    code: str
    name: str
    rate: float
    display: str


@dataclass
class ConverterView:
    source: str
    target: str
    amount: str
    result: str
    amount_error: bool
    rates_header: str
    rate_rows: List[RateRow] = field(default_factory=list)
    load_error: Optional[str] = None
    message: Optional[StatusMessage] = None
    outcome: Optional[ConversionOutcome] = None


class ConverterController:
    def __init__(self, store: RateStore, settings: Settings):
        self._store = store
        self._settings = settings
        self.source = settings.default_source
        self.target = settings.default_target
        self.amount = "1"
        self._failed_base: Optional[str] = None
        self._load_error: Optional[str] = None
        self._message: Optional[StatusMessage] = None
        self._lock = threading.RLock()

    @property
    def store(self) -> RateStore:
        return self._store

    # Actions --------------------------------------------------
    def set_amount(self, raw: str) -> ConversionOutcome:
        with self._lock:
            self.amount = raw
            return self.update_conversion(fetch_new_rates=False)

    def select_source(self, code: str) -> ConversionOutcome:
        with self._lock:
            self.source = _checked(code)
            return self.update_conversion(fetch_new_rates=True)

    def select_target(self, code: str) -> ConversionOutcome:
        with self._lock:
            self.target = _checked(code)
            return self.calculate()

    def apply(
        self,
        source: str | None = None,
        target: str | None = None,
        amount: str | None = None,
    ) -> ConverterView:
        """Apply a full form submission and return the resulting view.

        A changed source behaves like select_source (forced refresh); anything
        else only refreshes when the store is stale.
        """
        with self._lock:
            new_source = _checked(source) if source else self.source
            new_target = _checked(target) if target else self.target
            source_changed = new_source != self.source
            self.source, self.target = new_source, new_target
            if amount is not None:
                self.amount = amount
            self.update_conversion(fetch_new_rates=source_changed)
            return self.view()

    def refresh(self) -> ConversionOutcome:
        return self.update_conversion(fetch_new_rates=True)

    def swap(self) -> ConversionOutcome:
        with self._lock:
            self.source, self.target = self.target, self.source
            outcome = self.update_conversion(fetch_new_rates=True)
            # A failed refresh keeps its danger message; the page shows one at a time
            if self._failed_base != self.source:
                self._message = StatusMessage(
                    f"Currencies swapped: {self.source} is now the source."
                )
            return outcome

    # Core flow ------------------------------------------------
    def update_conversion(self, fetch_new_rates: bool = False) -> ConversionOutcome:
        with self._lock:
            source = self.source
            if fetch_new_rates or self._needs_refresh(source):
                self._refresh_rates(source)
            return self.calculate()

    def calculate(self) -> ConversionOutcome:
        with self._lock:
            snap = _snapshot_for(self._store, self.source)
            return convert(self.amount, self.target, snap)

    def convert_once(self, source: str, target: str, amount: object) -> ConverterView:
        """Convert without touching the page state (selections, amount, messages).

        Refreshes the shared store when it is stale for ``source``; a failed
        refresh raises FetchError to the caller.
        """
        source, target = _checked(source), _checked(target)
        if self._store.is_stale_for(source):
            self._store.refresh(source)
        snap = _snapshot_for(self._store, source)
        outcome = convert("" if amount is None else amount, target, snap)
        return ConverterView(
            source=source,
            target=target,
            amount="" if amount is None else str(amount),
            result=_format_result(outcome, self._settings),
            amount_error=outcome.status is ConversionStatus.INVALID_AMOUNT,
            rates_header=f"Rate (1 {source})",
            rate_rows=_rate_rows(snap, self._settings),
            outcome=outcome,
        )

    def _needs_refresh(self, source: str) -> bool:
        if not self._store.is_stale_for(source):
            return False
        return self._failed_base != source

    def _refresh_rates(self, base: str) -> None:
        try:
            self._store.refresh(base)
        except NetworkFailure as e:
            self._record_failure(base, "Network error.", "Network error. Check your connection.")
            logger.error("network failure refreshing %s: %s", base, e.detail)
        except FetchError as e:
            self._record_failure(
                base, "Failed to load rates.", f"Failed to load rates: {e.detail}"
            )
            logger.error("rate provider failure for %s (%s): %s", base, e.kind, e.detail)
        else:
            self._failed_base = None
            self._load_error = None
            self._message = StatusMessage(f"Rates updated for 1 {base}.", "success")

    def _record_failure(self, base: str, table_text: str, message: str) -> None:
        self._failed_base = base
        self._load_error = table_text
        self._message = StatusMessage(message, "danger")

    # Presentation ---------------------------------------------
    def pop_message(self) -> Optional[StatusMessage]:
        with self._lock:
            msg, self._message = self._message, None
            return msg

    def view(self) -> ConverterView:
        with self._lock:
            snap = _snapshot_for(self._store, self.source)
            outcome = convert(self.amount, self.target, snap)
            return ConverterView(
                source=self.source,
                target=self.target,
                amount=self.amount,
                result=_format_result(outcome, self._settings),
                amount_error=outcome.status is ConversionStatus.INVALID_AMOUNT,
                rates_header=f"Rate (1 {self.source})",
                rate_rows=_rate_rows(snap, self._settings),
                load_error=self._load_error if self._failed_base == self.source else None,
                message=self.pop_message(),
                outcome=outcome,
            )


def _snapshot_for(store: RateStore, source: str) -> RateSnapshot:
    # Read once; rates cached for another base must not be used for this source
    snap = store.snapshot()
    return snap if snap.base == source else RateSnapshot()


def _format_result(outcome: ConversionOutcome, settings: Settings) -> str:
    if outcome.status is ConversionStatus.INVALID_AMOUNT:
        return invalid_amount_display(settings.decimal_separator)
    if outcome.status is ConversionStatus.RATE_UNAVAILABLE:
        return UNAVAILABLE_DISPLAY
    return format_amount(
        outcome.value, settings.decimal_separator, settings.group_separator  # type: ignore[arg-type]
    )


def _rate_rows(snap: RateSnapshot, settings: Settings) -> List[RateRow]:
    dec, grp = settings.decimal_separator, settings.group_separator
    rows = []
    for code in CURRENCIES:
        if code == snap.base:
            continue
        rate = snap.rate_for(code)
        if rate is None:
            continue
        rows.append(RateRow(code, currency_name(code), rate, format_rate(rate, dec, grp)))
    return rows


def _checked(code: str) -> str:
    code = code.upper()
    if not is_supported(code):
        raise ValueError(f"unsupported currency '{code}'")
    return code


def build_converter(
    settings: Settings | None = None, provider: RateProvider | None = None
) -> ConverterController:
    """Factory used by create_app; tests pass a fake provider."""
    settings = settings or get_settings()
    provider = provider or make_rate_provider(settings.exchange_rate_provider, settings)
    return ConverterController(RateStore(provider), settings)
