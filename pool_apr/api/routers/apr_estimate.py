from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from pool_apr.api.deps import get_estimate_position_apr_use_case, get_project_returns_use_case
from pool_apr.api.schemas.apr_estimate import (
    AprDisplayResponse,
    EstimateAprRequest,
    EstimateAprResponse,
    ProjectedReturnsResponse,
    ProjectReturnsDisplayResponse,
    ProjectReturnsRequest,
    ProjectReturnsResponse,
)
from pool_apr.application.dto.apr_estimate import EstimatePositionAprInput, ProjectReturnsInput
from pool_apr.application.use_cases.estimate_position_apr import EstimatePositionAprUseCase
from pool_apr.application.use_cases.project_returns import ProjectReturnsUseCase
from pool_apr.domain.entities.pool import PoolMetrics
from pool_apr.domain.exceptions import (
    InvalidPositionInputError,
    PoolDataSourceError,
    PoolNotFoundError,
    UnsupportedChainError,
)

router = APIRouter()


@router.post("/v1/estimate/apr", response_model=EstimateAprResponse)
def estimate_apr(
    req: EstimateAprRequest,
    use_case: EstimatePositionAprUseCase = Depends(get_estimate_position_apr_use_case),
):
    pool = None
    if req.pool is not None:
        pool = PoolMetrics(
            liquidity=req.pool.liquidity,
            volume_usd=req.pool.volume_usd,
            volume_24h=req.pool.volume_24h,
            fee_tier=req.pool.fee_tier,
            total_value_locked_usd=req.pool.total_value_locked_usd,
            token0_price=req.pool.token0_price,
            token1_price=req.pool.token1_price,
            current_tick=req.pool.current_tick,
        )

    try:
        output = use_case.execute(
            EstimatePositionAprInput(
                liquidity_usd=req.liquidity_usd,
                chain=req.chain,
                pool_id=req.pool_id,
                pool=pool,
                lower_tick=req.lower_tick,
                upper_tick=req.upper_tick,
                lower_price=req.lower_price,
                upper_price=req.upper_price,
            )
        )
    except (InvalidPositionInputError, UnsupportedChainError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PoolNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except PoolDataSourceError as exc:
        raise HTTPException(status_code=502, detail=f"Failed to fetch pool: {exc}") from exc

    result = output.result
    return EstimateAprResponse(
        base_apr=result.base_apr,
        position_apr=result.position_apr,
        in_range=result.in_range,
        multiplier=result.multiplier,
        lower_tick=output.lower_tick,
        upper_tick=output.upper_tick,
        projected_returns=ProjectedReturnsResponse(
            daily=result.projected_returns.daily,
            monthly=result.projected_returns.monthly,
            yearly=result.projected_returns.yearly,
        ),
        display=AprDisplayResponse(
            base_apr=output.display.base_apr,
            position_apr=output.display.position_apr,
            daily=output.display.daily,
            monthly=output.display.monthly,
            yearly=output.display.yearly,
        ),
    )


@router.post("/v1/estimate/returns", response_model=ProjectReturnsResponse)
def project_returns(
    req: ProjectReturnsRequest,
    use_case: ProjectReturnsUseCase = Depends(get_project_returns_use_case),
):
    try:
        output = use_case.execute(ProjectReturnsInput(liquidity_usd=req.liquidity_usd, apr=req.apr))
    except InvalidPositionInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ProjectReturnsResponse(
        projected_returns=ProjectedReturnsResponse(
            daily=output.returns.daily,
            monthly=output.returns.monthly,
            yearly=output.returns.yearly,
        ),
        display=ProjectReturnsDisplayResponse(
            apr=output.apr_display,
            daily=output.daily_display,
            monthly=output.monthly_display,
            yearly=output.yearly_display,
        ),
    )
