from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


DATA_SOURCES = {"mock", "subgraph", "defillama"}


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


@dataclass(frozen=True)
class Settings:
    pool_data_source: str
    default_chain: str
    graph_api_key: str
    graph_gateway_base: str
    graph_subgraph_ids: dict
    graph_request_timeout_seconds: float
    graph_max_retries: int
    graph_min_interval_ms: int
    pool_min_tvl_usd: float
    defillama_api_base: str
    defillama_timeout_seconds: float
    defillama_min_volume_usd: float
    pool_cache_ttl_seconds: float
    v4_rpc_urls: dict
    v4_request_timeout_seconds: float
    v4_max_retries: int
    v4_lookback_blocks: int
    v4_max_pools: int
    v4_cache_ttl_seconds: float
    log_level: str


def get_settings() -> Settings:
    subgraphs = {
        "ethereum": _env("GRAPH_SUBGRAPH_ID_ETHEREUM", ""),
        "base": _env("GRAPH_SUBGRAPH_ID_BASE", ""),
        "bsc": _env("GRAPH_SUBGRAPH_ID_BSC", ""),
    }
    v4_rpc_urls = {
        "ethereum": _env("V4_RPC_URL_ETHEREUM", ""),
        "base": _env("V4_RPC_URL_BASE", ""),
    }
    return Settings(
        pool_data_source=(_env("POOL_DATA_SOURCE", "mock") or "mock").strip().lower(),
        default_chain=(_env("DEFAULT_CHAIN", "ethereum") or "ethereum").strip().lower(),
        graph_api_key=_env("GRAPH_API_KEY", ""),
        graph_gateway_base=_env("GRAPH_GATEWAY_BASE", "https://gateway.thegraph.com/api"),
        graph_subgraph_ids=subgraphs,
        graph_request_timeout_seconds=float(_env("GRAPH_REQUEST_TIMEOUT_SECONDS", "10")),
        graph_max_retries=int(_env("GRAPH_MAX_RETRIES", "3")),
        graph_min_interval_ms=int(_env("GRAPH_MIN_INTERVAL_MS", "120")),
        pool_min_tvl_usd=float(_env("POOL_MIN_TVL_USD", "10000")),
        defillama_api_base=_env("DEFILLAMA_API_BASE", "https://yields.llama.fi"),
        defillama_timeout_seconds=float(_env("DEFILLAMA_TIMEOUT_SECONDS", "15")),
        defillama_min_volume_usd=float(_env("DEFILLAMA_MIN_VOLUME_USD", "500")),
        pool_cache_ttl_seconds=float(_env("POOL_CACHE_TTL_SECONDS", "300")),
        v4_rpc_urls=v4_rpc_urls,
        v4_request_timeout_seconds=float(_env("V4_REQUEST_TIMEOUT_SECONDS", "15")),
        v4_max_retries=int(_env("V4_MAX_RETRIES", "3")),
        v4_lookback_blocks=int(_env("V4_LOOKBACK_BLOCKS", "100000")),
        v4_max_pools=int(_env("V4_MAX_POOLS", "50")),
        v4_cache_ttl_seconds=float(_env("V4_CACHE_TTL_SECONDS", "300")),
        log_level=(_env("LOG_LEVEL", "INFO") or "INFO").strip().upper(),
    )
