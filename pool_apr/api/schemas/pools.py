from __future__ import annotations

from pydantic import BaseModel


class PoolTokenResponse(BaseModel):
    address: str
    symbol: str
    name: str
    decimals: int


class PoolSummaryResponse(BaseModel):
    id: str
    chain: str
    protocol: str
    token0: PoolTokenResponse
    token1: PoolTokenResponse
    pair: str
    fee_tier: int
    fee_percent: float
    liquidity: str
    tvl: float
    volume_24h: float
    fees_24h: float
    apr: float
    apr_display: str
    tvl_display: str
    current_tick: int
    token0_price: float
    token1_price: float
    reported_apy: float | None = None
    hooks: str | None = None


class PoolListResponse(BaseModel):
    chain: str
    count: int
    pools: list[PoolSummaryResponse]


class PoolHistoryPointResponse(BaseModel):
    date: int | None
    volume: float
    tvl: float
    fees: float


class PoolDetailResponse(PoolSummaryResponse):
    history: list[PoolHistoryPointResponse]


class PoolDetailEnvelope(BaseModel):
    pool: PoolDetailResponse
