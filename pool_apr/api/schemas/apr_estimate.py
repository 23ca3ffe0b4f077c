from __future__ import annotations

from pydantic import BaseModel, Field


class PoolMetricsRequest(BaseModel):
    liquidity: str = Field("0", description="Raw pool liquidity (integer string).")
    volume_usd: str = Field("0", description="Cumulative volume in USD.")
    volume_24h: str = Field(..., description="Last 24h volume in USD.")
    fee_tier: int = Field(..., description="Fee in hundredths of a basis point (3000 = 0.30%).")
    total_value_locked_usd: str = Field(..., description="Current TVL in USD.")
    token0_price: str = Field("0", description="token0 price in token1.")
    token1_price: str = Field("0", description="token1 price in token0.")
    current_tick: int = Field(..., description="Current pool tick.")


class EstimateAprRequest(BaseModel):
    liquidity_usd: float = Field(..., gt=0, allow_inf_nan=False, description="Capital to deploy in USD.")
    chain: str | None = Field(None, description="Chain key (ethereum, base, bsc).")
    pool_id: str | None = Field(None, description="Pool address on the chain.")
    pool: PoolMetricsRequest | None = Field(None, description="Inline pool metrics.")
    lower_tick: int | None = Field(None, description="Lower tick of the range.")
    upper_tick: int | None = Field(None, description="Upper tick of the range.")
    lower_price: float | None = Field(None, allow_inf_nan=False, description="Lower price of the range.")
    upper_price: float | None = Field(None, allow_inf_nan=False, description="Upper price of the range.")


class ProjectedReturnsResponse(BaseModel):
    daily: float
    monthly: float
    yearly: float


class AprDisplayResponse(BaseModel):
    base_apr: str
    position_apr: str
    daily: str
    monthly: str
    yearly: str


class EstimateAprResponse(BaseModel):
    base_apr: float
    position_apr: float
    in_range: bool
    multiplier: float
    lower_tick: int
    upper_tick: int
    projected_returns: ProjectedReturnsResponse
    display: AprDisplayResponse


class ProjectReturnsRequest(BaseModel):
    liquidity_usd: float = Field(..., gt=0, allow_inf_nan=False)
    apr: float = Field(..., ge=0, allow_inf_nan=False, description="APR in percent.")


class ProjectReturnsDisplayResponse(BaseModel):
    apr: str
    daily: str
    monthly: str
    yearly: str


class ProjectReturnsResponse(BaseModel):
    projected_returns: ProjectedReturnsResponse
    display: ProjectReturnsDisplayResponse
