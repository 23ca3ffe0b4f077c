from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PoolMetrics:
    """Pool-level numbers consumed by the APR model.

    Decimal values stay as the strings the data source returned; the model
    parses them and degrades to zero when they are malformed.
    """

    liquidity: str
    volume_usd: str
    volume_24h: str
    fee_tier: int
    total_value_locked_usd: str
    token0_price: str
    token1_price: str
    current_tick: int


@dataclass(frozen=True)
class PoolToken:
    address: str
    symbol: str
    name: str
    decimals: int


@dataclass(frozen=True)
class PoolDayData:
    date: int | None
    volume_usd: str
    tvl_usd: str
    fees_usd: str


@dataclass(frozen=True)
class PoolSnapshot:
    id: str
    chain: str
    protocol: str
    token0: PoolToken
    token1: PoolToken
    fee_tier: int
    liquidity: str
    sqrt_price: str
    tick: int
    token0_price: str
    token1_price: str
    volume_usd: str
    total_value_locked_usd: str
    day_data: list[PoolDayData] = field(default_factory=list)
    reported_apy: float | None = None
    # Uniswap V4 only
    hooks: str | None = None
    tick_spacing: int | None = None

    @property
    def pair(self) -> str:
        return f"{self.token0.symbol}/{self.token1.symbol}"

    @property
    def latest_day(self) -> PoolDayData | None:
        # day_data is ordered newest first
        return self.day_data[0] if self.day_data else None

    def to_metrics(self) -> PoolMetrics:
        latest = self.latest_day
        return PoolMetrics(
            liquidity=self.liquidity,
            volume_usd=self.volume_usd,
            volume_24h=latest.volume_usd if latest is not None and latest.volume_usd else "0",
            fee_tier=self.fee_tier,
            total_value_locked_usd=self.total_value_locked_usd,
            token0_price=self.token0_price,
            token1_price=self.token1_price,
            current_tick=self.tick,
        )
