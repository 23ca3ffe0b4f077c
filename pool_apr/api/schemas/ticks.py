from __future__ import annotations

from pydantic import BaseModel


class PriceToTickResponse(BaseModel):
    price: float
    tick: int


class TickToPriceResponse(BaseModel):
    tick: int
    price: float
