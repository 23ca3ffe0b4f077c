from __future__ import annotations

import logging

from pool_apr.application.dto.pools import ListPoolsOutput, ListV4PoolsInput
from pool_apr.application.ports.v4_pool_discovery_port import V4PoolDiscoveryPort
from pool_apr.domain.exceptions import PoolListInputError
from pool_apr.domain.services.pool_summary import build_pool_summary
from pool_apr.shared.chains import get_chain_config


MAX_LIMIT = 100
logger = logging.getLogger(__name__)


class ListV4PoolsUseCase:
    def __init__(self, *, discovery_port: V4PoolDiscoveryPort):
        self._discovery_port = discovery_port

    def execute(self, command: ListV4PoolsInput) -> ListPoolsOutput:
        chain = get_chain_config(command.chain).key
        if command.limit < 1 or command.limit > MAX_LIMIT:
            raise PoolListInputError(f"limit must be between 1 and {MAX_LIMIT}.")

        # provider returns pools ordered by raw liquidity, deepest first
        snapshots = self._discovery_port.list_pools(chain=chain)
        pools = [build_pool_summary(row) for row in snapshots[: command.limit]]

        logger.info(
            "list_v4_pools: chain=%s discovered=%s returned=%s",
            chain,
            len(snapshots),
            len(pools),
        )
        return ListPoolsOutput(chain=chain, count=len(pools), pools=pools)
