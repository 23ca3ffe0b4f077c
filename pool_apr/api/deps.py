from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException

from pool_apr.application.ports.pool_data_port import PoolDataPort
from pool_apr.application.use_cases.estimate_position_apr import EstimatePositionAprUseCase
from pool_apr.application.use_cases.get_pool_details import GetPoolDetailsUseCase
from pool_apr.application.use_cases.list_pools import ListPoolsUseCase
from pool_apr.application.use_cases.list_v4_pools import ListV4PoolsUseCase
from pool_apr.application.use_cases.project_returns import ProjectReturnsUseCase
from pool_apr.infrastructure.clients.defillama_client import (
    DefiLlamaClientSettings,
    DefiLlamaPoolProvider,
)
from pool_apr.infrastructure.clients.mock_pool_provider import MockPoolDataProvider
from pool_apr.infrastructure.clients.univ3_subgraph_client import (
    Univ3SubgraphClient,
    Univ3SubgraphClientSettings,
)
from pool_apr.infrastructure.clients.univ4_pool_provider import V4PoolProvider, V4PoolProviderSettings
from pool_apr.shared.config import DATA_SOURCES, get_settings


@lru_cache(maxsize=1)
def _get_univ3_subgraph_client() -> Univ3SubgraphClient:
    settings = get_settings()
    return Univ3SubgraphClient(
        Univ3SubgraphClientSettings(
            graph_gateway_base=settings.graph_gateway_base,
            graph_api_key=settings.graph_api_key,
            graph_subgraph_ids=settings.graph_subgraph_ids,
            timeout_seconds=settings.graph_request_timeout_seconds,
            max_retries=settings.graph_max_retries,
            min_interval_ms=settings.graph_min_interval_ms,
            min_tvl_usd=settings.pool_min_tvl_usd,
            cache_ttl_seconds=settings.pool_cache_ttl_seconds,
        )
    )


@lru_cache(maxsize=1)
def _get_defillama_provider() -> DefiLlamaPoolProvider:
    settings = get_settings()
    return DefiLlamaPoolProvider(
        DefiLlamaClientSettings(
            api_base=settings.defillama_api_base,
            timeout_seconds=settings.defillama_timeout_seconds,
            min_volume_usd=settings.defillama_min_volume_usd,
            min_tvl_usd=settings.pool_min_tvl_usd,
            cache_ttl_seconds=settings.pool_cache_ttl_seconds,
        )
    )


@lru_cache(maxsize=1)
def _get_v4_pool_provider() -> V4PoolProvider:
    settings = get_settings()
    return V4PoolProvider(
        V4PoolProviderSettings(
            rpc_urls=settings.v4_rpc_urls,
            timeout_seconds=settings.v4_request_timeout_seconds,
            max_retries=settings.v4_max_retries,
            lookback_blocks=settings.v4_lookback_blocks,
            max_pools=settings.v4_max_pools,
            cache_ttl_seconds=settings.v4_cache_ttl_seconds,
        )
    )


def get_pool_data_port() -> PoolDataPort:
    source = get_settings().pool_data_source
    if source not in DATA_SOURCES:
        raise HTTPException(
            status_code=500,
            detail=f"POOL_DATA_SOURCE must be one of: {', '.join(sorted(DATA_SOURCES))}.",
        )
    if source == "subgraph":
        return _get_univ3_subgraph_client()
    if source == "defillama":
        return _get_defillama_provider()
    return MockPoolDataProvider()


def get_list_pools_use_case() -> ListPoolsUseCase:
    return ListPoolsUseCase(pool_data_port=get_pool_data_port())


def get_pool_details_use_case() -> GetPoolDetailsUseCase:
    return GetPoolDetailsUseCase(pool_data_port=get_pool_data_port())


def get_estimate_position_apr_use_case() -> EstimatePositionAprUseCase:
    return EstimatePositionAprUseCase(pool_data_port=get_pool_data_port())


def get_project_returns_use_case() -> ProjectReturnsUseCase:
    return ProjectReturnsUseCase()


def get_list_v4_pools_use_case() -> ListV4PoolsUseCase:
    return ListV4PoolsUseCase(discovery_port=_get_v4_pool_provider())
