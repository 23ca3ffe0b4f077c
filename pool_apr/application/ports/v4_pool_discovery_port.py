from __future__ import annotations

from typing import Protocol

from pool_apr.domain.entities.pool import PoolSnapshot


class V4PoolDiscoveryPort(Protocol):
    def list_pools(self, *, chain: str) -> list[PoolSnapshot]:
        ...
