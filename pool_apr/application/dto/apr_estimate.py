from __future__ import annotations

from dataclasses import dataclass

from pool_apr.domain.entities.apr_estimate import AprResult, EstimatedReturns
from pool_apr.domain.entities.pool import PoolMetrics


@dataclass(frozen=True)
class EstimatePositionAprInput:
    liquidity_usd: float
    chain: str | None = None
    pool_id: str | None = None
    pool: PoolMetrics | None = None
    lower_tick: int | None = None
    upper_tick: int | None = None
    lower_price: float | None = None
    upper_price: float | None = None


@dataclass(frozen=True)
class AprDisplayOutput:
    base_apr: str
    position_apr: str
    daily: str
    monthly: str
    yearly: str


@dataclass(frozen=True)
class EstimatePositionAprOutput:
    lower_tick: int
    upper_tick: int
    result: AprResult
    display: AprDisplayOutput


@dataclass(frozen=True)
class ProjectReturnsInput:
    liquidity_usd: float
    apr: float


@dataclass(frozen=True)
class ProjectReturnsOutput:
    returns: EstimatedReturns
    apr_display: str
    daily_display: str
    monthly_display: str
    yearly_display: str
