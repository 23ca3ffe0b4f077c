from __future__ import annotations

from pool_apr.application.dto.pools import GetPoolDetailsInput, GetPoolDetailsOutput
from pool_apr.application.ports.pool_data_port import PoolDataPort
from pool_apr.domain.exceptions import PoolNotFoundError
from pool_apr.domain.services.pool_summary import build_pool_history, build_pool_summary
from pool_apr.shared.chains import get_chain_config


class GetPoolDetailsUseCase:
    def __init__(self, *, pool_data_port: PoolDataPort):
        self._pool_data_port = pool_data_port

    def execute(self, command: GetPoolDetailsInput) -> GetPoolDetailsOutput:
        chain = get_chain_config(command.chain).key
        pool_id = command.pool_id.strip().lower()
        if not pool_id:
            raise PoolNotFoundError("Pool not found.")

        snapshot = self._pool_data_port.get_pool(chain=chain, pool_id=pool_id)
        if snapshot is None:
            raise PoolNotFoundError("Pool not found.")

        return GetPoolDetailsOutput(
            pool=build_pool_summary(snapshot),
            history=build_pool_history(snapshot),
        )
