from __future__ import annotations

from typing import Protocol

from pool_apr.domain.entities.pool import PoolSnapshot


class PoolDataPort(Protocol):
    def list_top_pools(
        self,
        *,
        chain: str,
        order_by: str,
        limit: int,
    ) -> list[PoolSnapshot]:
        ...

    def get_pool(
        self,
        *,
        chain: str,
        pool_id: str,
    ) -> PoolSnapshot | None:
        ...
