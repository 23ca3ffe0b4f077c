from __future__ import annotations

from dataclasses import dataclass

from pool_apr.domain.entities.pool_summary import PoolHistoryPoint, PoolSummary


@dataclass(frozen=True)
class ListPoolsInput:
    chain: str = "ethereum"
    order_by: str = "totalValueLockedUSD"
    limit: int = 20
    sort_by: str = "apr"


@dataclass(frozen=True)
class ListPoolsOutput:
    chain: str
    count: int
    pools: list[PoolSummary]


@dataclass(frozen=True)
class GetPoolDetailsInput:
    chain: str
    pool_id: str


@dataclass(frozen=True)
class GetPoolDetailsOutput:
    pool: PoolSummary
    history: list[PoolHistoryPoint]


@dataclass(frozen=True)
class ListV4PoolsInput:
    chain: str = "base"
    limit: int = 50
