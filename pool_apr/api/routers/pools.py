from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from pool_apr.api.deps import get_list_pools_use_case, get_list_v4_pools_use_case, get_pool_details_use_case
from pool_apr.api.schemas.pools import (
    PoolDetailEnvelope,
    PoolDetailResponse,
    PoolHistoryPointResponse,
    PoolListResponse,
    PoolSummaryResponse,
    PoolTokenResponse,
)
from pool_apr.application.dto.pools import GetPoolDetailsInput, ListPoolsInput, ListV4PoolsInput
from pool_apr.application.use_cases.get_pool_details import GetPoolDetailsUseCase
from pool_apr.application.use_cases.list_pools import ListPoolsUseCase
from pool_apr.application.use_cases.list_v4_pools import ListV4PoolsUseCase
from pool_apr.domain.entities.pool import PoolToken
from pool_apr.domain.entities.pool_summary import PoolSummary
from pool_apr.domain.exceptions import (
    PoolDataSourceError,
    PoolListInputError,
    PoolNotFoundError,
    UnsupportedChainError,
)
from pool_apr.domain.services.formatters import format_apr, format_usd
from pool_apr.shared.config import get_settings

router = APIRouter()
logger = logging.getLogger(__name__)


def _token_response(token: PoolToken) -> PoolTokenResponse:
    return PoolTokenResponse(
        address=token.address,
        symbol=token.symbol,
        name=token.name,
        decimals=token.decimals,
    )


def _summary_fields(item: PoolSummary) -> dict:
    return {
        "id": item.id,
        "chain": item.chain,
        "protocol": item.protocol,
        "token0": _token_response(item.token0),
        "token1": _token_response(item.token1),
        "pair": item.pair,
        "fee_tier": item.fee_tier,
        "fee_percent": item.fee_percent,
        "liquidity": item.liquidity,
        "tvl": item.tvl_usd,
        "volume_24h": item.volume_24h_usd,
        "fees_24h": item.fees_24h_usd,
        "apr": item.apr,
        "apr_display": format_apr(item.apr),
        "tvl_display": format_usd(item.tvl_usd),
        "current_tick": item.current_tick,
        "token0_price": item.token0_price,
        "token1_price": item.token1_price,
        "reported_apy": item.reported_apy,
        "hooks": item.hooks,
    }


@router.get("/api/pools", response_model=PoolListResponse)
def list_pools(
    chain: str | None = None,
    order_by: str = Query(default="totalValueLockedUSD", alias="orderBy"),
    limit: int = 20,
    sort_by: str = Query(default="apr", alias="sortBy"),
    use_case: ListPoolsUseCase = Depends(get_list_pools_use_case),
):
    try:
        result = use_case.execute(
            ListPoolsInput(
                chain=chain or get_settings().default_chain,
                order_by=order_by,
                limit=limit,
                sort_by=sort_by,
            )
        )
    except (UnsupportedChainError, PoolListInputError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PoolDataSourceError as exc:
        logger.error("pools_router: list_pools_failed chain=%s error=%s", chain, exc)
        raise HTTPException(status_code=502, detail=f"Failed to fetch pools: {exc}") from exc

    return PoolListResponse(
        chain=result.chain,
        count=result.count,
        pools=[PoolSummaryResponse(**_summary_fields(item)) for item in result.pools],
    )


@router.get("/api/pools-v4", response_model=PoolListResponse)
def list_v4_pools(
    chain: str = "base",
    limit: int = 50,
    use_case: ListV4PoolsUseCase = Depends(get_list_v4_pools_use_case),
):
    try:
        result = use_case.execute(ListV4PoolsInput(chain=chain, limit=limit))
    except (UnsupportedChainError, PoolListInputError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PoolDataSourceError as exc:
        logger.error("pools_router: list_v4_pools_failed chain=%s error=%s", chain, exc)
        raise HTTPException(status_code=502, detail=f"Failed to fetch V4 pools: {exc}") from exc

    return PoolListResponse(
        chain=result.chain,
        count=result.count,
        pools=[PoolSummaryResponse(**_summary_fields(item)) for item in result.pools],
    )


@router.get("/api/pools/{pool_id}", response_model=PoolDetailEnvelope)
def get_pool_details(
    pool_id: str,
    chain: str | None = None,
    use_case: GetPoolDetailsUseCase = Depends(get_pool_details_use_case),
):
    try:
        result = use_case.execute(
            GetPoolDetailsInput(
                chain=chain or get_settings().default_chain,
                pool_id=pool_id,
            )
        )
    except UnsupportedChainError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PoolNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except PoolDataSourceError as exc:
        logger.error("pools_router: pool_details_failed chain=%s pool=%s error=%s", chain, pool_id, exc)
        raise HTTPException(status_code=502, detail=f"Failed to fetch pool details: {exc}") from exc

    return PoolDetailEnvelope(
        pool=PoolDetailResponse(
            **_summary_fields(result.pool),
            history=[
                PoolHistoryPointResponse(
                    date=row.date,
                    volume=row.volume_usd,
                    tvl=row.tvl_usd,
                    fees=row.fees_usd,
                )
                for row in result.history
            ],
        )
    )
