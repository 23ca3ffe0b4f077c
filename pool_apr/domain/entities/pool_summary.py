from __future__ import annotations

from dataclasses import dataclass

from pool_apr.domain.entities.pool import PoolToken


@dataclass(frozen=True)
class PoolSummary:
    id: str
    chain: str
    protocol: str
    token0: PoolToken
    token1: PoolToken
    pair: str
    fee_tier: int
    fee_percent: float
    liquidity: str
    tvl_usd: float
    volume_24h_usd: float
    fees_24h_usd: float
    apr: float
    current_tick: int
    token0_price: float
    token1_price: float
    reported_apy: float | None
    hooks: str | None = None


@dataclass(frozen=True)
class PoolHistoryPoint:
    date: int | None
    volume_usd: float
    tvl_usd: float
    fees_usd: float
