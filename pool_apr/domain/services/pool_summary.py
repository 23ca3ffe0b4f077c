from __future__ import annotations

import math

from pool_apr.domain.entities.pool import PoolSnapshot
from pool_apr.domain.entities.pool_summary import PoolHistoryPoint, PoolSummary
from pool_apr.domain.services.apr_model import calculate_base_apr, parse_decimal


def float_or_zero(value: str | None) -> float:
    parsed = parse_decimal(value)
    return parsed if math.isfinite(parsed) else 0.0


def build_pool_summary(snapshot: PoolSnapshot) -> PoolSummary:
    latest = snapshot.latest_day
    volume_24h = float_or_zero(latest.volume_usd) if latest is not None else 0.0
    fees_24h = float_or_zero(latest.fees_usd) if latest is not None else 0.0

    return PoolSummary(
        id=snapshot.id,
        chain=snapshot.chain,
        protocol=snapshot.protocol,
        token0=snapshot.token0,
        token1=snapshot.token1,
        pair=snapshot.pair,
        fee_tier=snapshot.fee_tier,
        fee_percent=snapshot.fee_tier / 10000,
        liquidity=snapshot.liquidity,
        tvl_usd=float_or_zero(snapshot.total_value_locked_usd),
        volume_24h_usd=volume_24h,
        fees_24h_usd=fees_24h,
        apr=calculate_base_apr(snapshot.to_metrics()),
        current_tick=snapshot.tick,
        token0_price=float_or_zero(snapshot.token0_price),
        token1_price=float_or_zero(snapshot.token1_price),
        reported_apy=snapshot.reported_apy,
        hooks=snapshot.hooks,
    )


def build_pool_history(snapshot: PoolSnapshot) -> list[PoolHistoryPoint]:
    return [
        PoolHistoryPoint(
            date=day.date,
            volume_usd=float_or_zero(day.volume_usd),
            tvl_usd=float_or_zero(day.tvl_usd),
            fees_usd=float_or_zero(day.fees_usd),
        )
        for day in snapshot.day_data
    ]
