from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from typing import List

from fxwidget.models.constants import available_currencies, is_supported
from fxwidget.models.rates import (
    ConvertIn,
    ConvertOut,
    CurrencyOut,
    RateRowOut,
    RatesOut,
    RefreshIn,
)
from fxwidget.services.converter import ConverterController
from fxwidget.services.rates.store import RateStore

"""Rates JSON API.

Endpoints:
    - GET  /api/currencies        -> static catalog
    - GET  /api/rates?base=BRL    -> cached rates for base (refreshed when stale)
    - POST /api/rates/refresh     -> forced refresh {base}
    - POST /api/convert           -> {amount, source, target} -> conversion outcome

Fetch failures propagate as FetchError and are rendered as 502 by the app's
exception handler. Invalid amounts / missing rates are regular 200 outcomes.
"""

router = APIRouter(prefix="/api", tags=["rates"])


def get_converter(request: Request) -> ConverterController:
    return request.app.state.converter


def get_store(converter: ConverterController = Depends(get_converter)) -> RateStore:
    return converter.store


def _rates_out(store: RateStore) -> RatesOut:
    snap = store.snapshot()
    return RatesOut(
        base=snap.base,
        rates=dict(snap.rates),
        fetched_at=snap.fetched_at,
        provider_date=snap.provider_date,
    )


@router.get("/currencies", summary="List supported currencies")
async def list_currencies() -> List[CurrencyOut]:
    return [CurrencyOut(code=code, name=name) for code, name in available_currencies()]


@router.get("/rates", summary="Rates relative to a base currency")
def get_rates(
    base: str = Query(..., min_length=3, max_length=3),
    store: RateStore = Depends(get_store),
) -> RatesOut:
    if not is_supported(base):
        raise HTTPException(status_code=422, detail=f"unsupported currency '{base}'")
    if store.is_stale_for(base):
        store.refresh(base)
    return _rates_out(store)


@router.post("/rates/refresh", summary="Force a rate refresh")
def refresh_rates(payload: RefreshIn, store: RateStore = Depends(get_store)) -> RatesOut:
    store.refresh(payload.base)
    return _rates_out(store)


@router.post("/convert", summary="Convert an amount")
def convert_amount(
    payload: ConvertIn, converter: ConverterController = Depends(get_converter)
) -> ConvertOut:
    view = converter.convert_once(payload.source, payload.target, payload.amount)
    outcome = view.outcome
    return ConvertOut(
        status=outcome.status.value,
        source=view.source,
        target=view.target,
        amount=outcome.amount,
        rate=outcome.rate,
        value=outcome.value,
        formatted=view.result,
        rates_header=view.rates_header,
        rate_rows=[RateRowOut(**row.__dict__) for row in view.rate_rows],
    )
