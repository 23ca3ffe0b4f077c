from __future__ import annotations

import logging
import math

from pool_apr.application.dto.apr_estimate import (
    AprDisplayOutput,
    EstimatePositionAprInput,
    EstimatePositionAprOutput,
)
from pool_apr.application.ports.pool_data_port import PoolDataPort
from pool_apr.domain.entities.apr_estimate import PositionRange
from pool_apr.domain.entities.pool import PoolMetrics
from pool_apr.domain.exceptions import InvalidPositionInputError, PoolNotFoundError
from pool_apr.domain.services.apr_model import estimate_position
from pool_apr.domain.services.formatters import format_apr, format_usd
from pool_apr.domain.services.univ3_math import price_to_tick
from pool_apr.shared.chains import get_chain_config


logger = logging.getLogger(__name__)


class EstimatePositionAprUseCase:
    def __init__(self, *, pool_data_port: PoolDataPort):
        self._pool_data_port = pool_data_port

    def execute(self, command: EstimatePositionAprInput) -> EstimatePositionAprOutput:
        if not math.isfinite(command.liquidity_usd) or command.liquidity_usd <= 0:
            raise InvalidPositionInputError("liquidity_usd must be positive.")

        lower_tick, upper_tick = self._resolve_range_ticks(command)
        pool = self._resolve_pool_metrics(command)

        result = estimate_position(
            pool,
            PositionRange(
                lower_tick=lower_tick,
                upper_tick=upper_tick,
                liquidity_usd=command.liquidity_usd,
            ),
        )
        if not result.in_range:
            logger.info(
                "estimate_position_apr: out_of_range current_tick=%s lower_tick=%s upper_tick=%s",
                pool.current_tick,
                lower_tick,
                upper_tick,
            )

        returns = result.projected_returns
        return EstimatePositionAprOutput(
            lower_tick=lower_tick,
            upper_tick=upper_tick,
            result=result,
            display=AprDisplayOutput(
                base_apr=format_apr(result.base_apr),
                position_apr=format_apr(result.position_apr),
                daily=format_usd(returns.daily),
                monthly=format_usd(returns.monthly),
                yearly=format_usd(returns.yearly),
            ),
        )

    def _resolve_pool_metrics(self, command: EstimatePositionAprInput) -> PoolMetrics:
        if command.pool is not None:
            return command.pool

        if not command.chain or not command.pool_id:
            raise InvalidPositionInputError("Provide either pool metrics or chain and pool_id.")

        chain = get_chain_config(command.chain).key
        snapshot = self._pool_data_port.get_pool(
            chain=chain,
            pool_id=command.pool_id.strip().lower(),
        )
        if snapshot is None:
            raise PoolNotFoundError("Pool not found.")
        return snapshot.to_metrics()

    def _resolve_range_ticks(self, command: EstimatePositionAprInput) -> tuple[int, int]:
        if command.lower_tick is not None or command.upper_tick is not None:
            if command.lower_tick is None or command.upper_tick is None:
                raise InvalidPositionInputError("lower_tick and upper_tick must be provided together.")
            if command.lower_tick >= command.upper_tick:
                raise InvalidPositionInputError("lower_tick must be lower than upper_tick.")
            return command.lower_tick, command.upper_tick

        if command.lower_price is None or command.upper_price is None:
            raise InvalidPositionInputError(
                "Provide either tick range (lower_tick/upper_tick) or price range (lower_price/upper_price)."
            )
        if command.lower_price >= command.upper_price:
            raise InvalidPositionInputError("lower_price must be lower than upper_price.")

        try:
            lower_tick = price_to_tick(command.lower_price)
            upper_tick = price_to_tick(command.upper_price)
        except ValueError as exc:
            raise InvalidPositionInputError("lower_price and upper_price must be positive.") from exc
        if lower_tick >= upper_tick:
            raise InvalidPositionInputError("Price range collapses to a single tick.")
        return lower_tick, upper_tick
