from __future__ import annotations

import logging

from pool_apr.application.dto.pools import ListPoolsInput, ListPoolsOutput
from pool_apr.application.ports.pool_data_port import PoolDataPort
from pool_apr.domain.entities.pool_summary import PoolSummary
from pool_apr.domain.exceptions import PoolListInputError
from pool_apr.domain.services.pool_summary import build_pool_summary
from pool_apr.shared.chains import get_chain_config


ORDER_BY_FIELDS = {"totalValueLockedUSD", "volumeUSD", "txCount"}
SORT_FIELDS = {
    "apr": lambda item: item.apr,
    "tvl": lambda item: item.tvl_usd,
    "volume_24h": lambda item: item.volume_24h_usd,
}
MAX_LIMIT = 100
logger = logging.getLogger(__name__)


class ListPoolsUseCase:
    def __init__(self, *, pool_data_port: PoolDataPort):
        self._pool_data_port = pool_data_port

    def execute(self, command: ListPoolsInput) -> ListPoolsOutput:
        chain = get_chain_config(command.chain).key
        if command.limit < 1 or command.limit > MAX_LIMIT:
            raise PoolListInputError(f"limit must be between 1 and {MAX_LIMIT}.")
        if command.order_by not in ORDER_BY_FIELDS:
            raise PoolListInputError("order_by is not supported.")
        sort_key = SORT_FIELDS.get(command.sort_by)
        if sort_key is None:
            raise PoolListInputError("sort_by must be one of: apr, tvl, volume_24h.")

        snapshots = self._pool_data_port.list_top_pools(
            chain=chain,
            order_by=command.order_by,
            limit=command.limit,
        )
        pools: list[PoolSummary] = [build_pool_summary(row) for row in snapshots]
        pools.sort(key=sort_key, reverse=True)
        pools = pools[: command.limit]

        logger.info(
            "list_pools: chain=%s order_by=%s sort_by=%s fetched=%s returned=%s",
            chain,
            command.order_by,
            command.sort_by,
            len(snapshots),
            len(pools),
        )
        return ListPoolsOutput(chain=chain, count=len(pools), pools=pools)
