from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PositionRange:
    lower_tick: int
    upper_tick: int
    liquidity_usd: float


@dataclass(frozen=True)
class EstimatedReturns:
    daily: float
    monthly: float
    yearly: float


@dataclass(frozen=True)
class AprResult:
    base_apr: float
    position_apr: float
    in_range: bool
    multiplier: float
    projected_returns: EstimatedReturns
