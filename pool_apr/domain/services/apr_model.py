from __future__ import annotations

import math

from pool_apr.domain.entities.apr_estimate import AprResult, EstimatedReturns, PositionRange
from pool_apr.domain.entities.pool import PoolMetrics


# Tick span of a +/-100% band around the current price: 2 * ln(2) / ln(1.0001).
FULL_RANGE_TICKS = 13863
MAX_LIQUIDITY_MULTIPLIER = 10
FEE_TIER_DENOMINATOR = 1_000_000
DAYS_PER_YEAR = 365
MONTHS_PER_YEAR = 12


def parse_decimal(value: str | int | float | None) -> float:
    """Parse an upstream decimal string; anything unusable becomes NaN."""
    if value is None:
        return math.nan
    text = str(value).strip()
    # float() accepts digit separators ("1_000"); upstream decimals never use them
    if "_" in text:
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def _parse_fee_tier(value: int | str | None) -> int:
    if isinstance(value, str) and "_" in value:
        return 0
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0


def calculate_base_apr(pool: PoolMetrics) -> float:
    """Full-range APR in percent: (24h fees / TVL) * 365 * 100.

    Degrades to 0 on empty, malformed, negative or non-finite inputs and never
    raises.
    """
    volume_24h = parse_decimal(pool.volume_24h)
    tvl = parse_decimal(pool.total_value_locked_usd)
    if math.isnan(volume_24h) or math.isnan(tvl):
        return 0.0
    if not math.isfinite(volume_24h) or not math.isfinite(tvl):
        return 0.0

    volume_24h = max(volume_24h, 0.0)
    tvl = max(tvl, 0.0)
    if tvl == 0:
        return 0.0

    fee_tier = _parse_fee_tier(pool.fee_tier)
    if fee_tier <= 0:
        return 0.0

    fee_rate = fee_tier / FEE_TIER_DENOMINATOR
    fees_24h = volume_24h * fee_rate
    apr = (fees_24h / tvl) * DAYS_PER_YEAR * 100
    return apr if math.isfinite(apr) else 0.0


def liquidity_multiplier(lower_tick: int, upper_tick: int) -> float:
    tick_span = upper_tick - lower_tick
    if tick_span <= 0:
        return 0.0
    return min(FULL_RANGE_TICKS / tick_span, MAX_LIQUIDITY_MULTIPLIER)


def is_in_range(current_tick: int, lower_tick: int, upper_tick: int) -> bool:
    # both bounds inclusive
    return not (current_tick < lower_tick or current_tick > upper_tick)


def calculate_position_apr(pool: PoolMetrics, position: PositionRange) -> float:
    """APR in percent for a concentrated position.

    A narrower range earns the same fee flow with less capital, so the base APR
    is scaled by FULL_RANGE_TICKS / span, capped at MAX_LIQUIDITY_MULTIPLIER.
    Out-of-range positions earn nothing.
    """
    base_apr = calculate_base_apr(pool)
    if base_apr == 0:
        return 0.0

    if not is_in_range(pool.current_tick, position.lower_tick, position.upper_tick):
        return 0.0

    return base_apr * liquidity_multiplier(position.lower_tick, position.upper_tick)


def calculate_estimated_returns(liquidity_usd: float, apr: float) -> EstimatedReturns:
    yearly = liquidity_usd * apr / 100
    return EstimatedReturns(
        daily=yearly / DAYS_PER_YEAR,
        monthly=yearly / MONTHS_PER_YEAR,
        yearly=yearly,
    )


def estimate_position(pool: PoolMetrics, position: PositionRange) -> AprResult:
    base_apr = calculate_base_apr(pool)
    in_range = is_in_range(pool.current_tick, position.lower_tick, position.upper_tick)
    position_apr = calculate_position_apr(pool, position)
    multiplier = (
        liquidity_multiplier(position.lower_tick, position.upper_tick)
        if in_range and base_apr > 0
        else 0.0
    )
    return AprResult(
        base_apr=base_apr,
        position_apr=position_apr,
        in_range=in_range,
        multiplier=multiplier,
        projected_returns=calculate_estimated_returns(position.liquidity_usd, position_apr),
    )
