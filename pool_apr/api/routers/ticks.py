from __future__ import annotations

from fastapi import APIRouter, HTTPException

from pool_apr.api.schemas.ticks import PriceToTickResponse, TickToPriceResponse
from pool_apr.domain.services.univ3_math import price_to_tick, tick_to_price

router = APIRouter()

# Outside this range 1.0001 ** tick is no longer a valid pool price.
MIN_TICK = -887272
MAX_TICK = 887272


@router.get("/v1/ticks/price-to-tick", response_model=PriceToTickResponse)
def convert_price_to_tick(price: float):
    try:
        tick = price_to_tick(price)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return PriceToTickResponse(price=price, tick=tick)


@router.get("/v1/ticks/tick-to-price", response_model=TickToPriceResponse)
def convert_tick_to_price(tick: int):
    if tick < MIN_TICK or tick > MAX_TICK:
        raise HTTPException(status_code=400, detail=f"tick must be between {MIN_TICK} and {MAX_TICK}.")
    return TickToPriceResponse(tick=tick, price=tick_to_price(tick))
