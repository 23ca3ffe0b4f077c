from __future__ import annotations

from dataclasses import dataclass
import logging
from threading import Lock
import time

import httpx

from pool_apr.domain.entities.pool import PoolDayData, PoolSnapshot, PoolToken
from pool_apr.domain.exceptions import PoolDataSourceError
from pool_apr.infrastructure.cache import TtlCache
from pool_apr.shared.chains import get_chain_config


logger = logging.getLogger(__name__)


POOL_FIELDS = """
      id
      token0 { id symbol name decimals }
      token1 { id symbol name decimals }
      feeTier
      liquidity
      sqrtPrice
      tick
      token0Price
      token1Price
      volumeUSD
      totalValueLockedUSD
"""

GET_TOP_POOLS = (
    """
query GetTopPools($first: Int!, $orderBy: Pool_orderBy!, $orderDirection: OrderDirection!, $minTvl: BigDecimal!) {
  pools(
    first: $first
    orderBy: $orderBy
    orderDirection: $orderDirection
    where: { totalValueLockedUSD_gt: $minTvl }
  ) {"""
    + POOL_FIELDS
    + """
    poolDayData(first: 1, orderBy: date, orderDirection: desc) {
      date
      volumeUSD
      tvlUSD
      feesUSD
    }
  }
}
"""
)

GET_POOL_DETAILS = (
    """
query GetPoolDetails($poolId: ID!) {
  pool(id: $poolId) {"""
    + POOL_FIELDS
    + """
    poolDayData(first: 7, orderBy: date, orderDirection: desc) {
      date
      volumeUSD
      tvlUSD
      feesUSD
    }
  }
}
"""
)


class SubgraphError(PoolDataSourceError):
    pass


@dataclass(frozen=True)
class Univ3SubgraphClientSettings:
    graph_gateway_base: str
    graph_api_key: str
    graph_subgraph_ids: dict
    timeout_seconds: float
    max_retries: int
    min_interval_ms: int
    min_tvl_usd: float = 10000
    cache_ttl_seconds: float = 300


def _int_or_zero(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _str_or_zero(value) -> str:
    return str(value) if value is not None else "0"


def _map_token(row: dict | None) -> PoolToken:
    row = row or {}
    return PoolToken(
        address=str(row.get("id") or ""),
        symbol=str(row.get("symbol") or "UNKNOWN"),
        name=str(row.get("name") or row.get("symbol") or "Unknown"),
        decimals=_int_or_zero(row.get("decimals")),
    )


def map_subgraph_pool(row: dict, *, chain: str) -> PoolSnapshot:
    day_rows = row.get("poolDayData") or []
    return PoolSnapshot(
        id=str(row.get("id") or "").lower(),
        chain=chain,
        protocol="v3",
        token0=_map_token(row.get("token0")),
        token1=_map_token(row.get("token1")),
        fee_tier=_int_or_zero(row.get("feeTier")),
        liquidity=_str_or_zero(row.get("liquidity")),
        sqrt_price=_str_or_zero(row.get("sqrtPrice")),
        tick=_int_or_zero(row.get("tick")),
        token0_price=_str_or_zero(row.get("token0Price")),
        token1_price=_str_or_zero(row.get("token1Price")),
        volume_usd=_str_or_zero(row.get("volumeUSD")),
        total_value_locked_usd=_str_or_zero(row.get("totalValueLockedUSD")),
        day_data=[
            PoolDayData(
                date=_int_or_zero(day.get("date")) if day.get("date") is not None else None,
                volume_usd=_str_or_zero(day.get("volumeUSD")),
                tvl_usd=_str_or_zero(day.get("tvlUSD")),
                fees_usd=_str_or_zero(day.get("feesUSD")),
            )
            for day in day_rows
        ],
    )


class Univ3SubgraphClient:
    def __init__(self, settings: Univ3SubgraphClientSettings):
        self._settings = settings
        self._lock = Lock()
        self._last_request_at = 0.0
        self._cache: TtlCache[list[PoolSnapshot]] = TtlCache(settings.cache_ttl_seconds)

    def list_top_pools(self, *, chain: str, order_by: str, limit: int) -> list[PoolSnapshot]:
        cache_key = (chain, order_by, limit)
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.debug("univ3_subgraph_client: top_pools_cache_hit chain=%s", chain)
            return cached

        payload = self._post_graphql(
            url=self._resolve_subgraph_url(chain),
            query=GET_TOP_POOLS,
            variables={
                "first": limit,
                "orderBy": order_by,
                "orderDirection": "desc",
                "minTvl": str(self._settings.min_tvl_usd),
            },
        )
        rows = (payload.get("data") or {}).get("pools") or []
        pools = [map_subgraph_pool(row, chain=chain) for row in rows if row.get("id")]

        logger.info(
            "univ3_subgraph_client: fetched_top_pools chain=%s order_by=%s requested=%s fetched=%s",
            chain,
            order_by,
            limit,
            len(pools),
        )
        self._cache.set(cache_key, pools)
        return pools

    def get_pool(self, *, chain: str, pool_id: str) -> PoolSnapshot | None:
        payload = self._post_graphql(
            url=self._resolve_subgraph_url(chain),
            query=GET_POOL_DETAILS,
            variables={"poolId": pool_id.lower()},
        )
        row = (payload.get("data") or {}).get("pool")
        if not row:
            logger.info("univ3_subgraph_client: pool_not_found chain=%s pool=%s", chain, pool_id)
            return None
        return map_subgraph_pool(row, chain=chain)

    def _post_graphql(self, *, url: str, query: str, variables: dict) -> dict:
        attempts = max(1, self._settings.max_retries)
        delay = 0.25
        last_exc: Exception | None = None

        for attempt in range(1, attempts + 1):
            self._respect_rate_limit()
            try:
                with httpx.Client(timeout=self._settings.timeout_seconds) as client:
                    response = client.post(
                        url,
                        json={"query": query, "variables": variables},
                    )
                    response.raise_for_status()
                    payload = response.json()

                errors = payload.get("errors") or []
                if errors:
                    message = " | ".join(str(err.get("message", err)) for err in errors)
                    raise SubgraphError(message)

                return payload
            except (httpx.HTTPError, SubgraphError, ValueError) as exc:
                last_exc = exc
                if attempt == attempts:
                    break
                logger.warning(
                    "univ3_subgraph_client: graphql_retry attempt=%s/%s error=%s",
                    attempt,
                    attempts,
                    exc,
                )
                time.sleep(delay)
                delay *= 2

        raise SubgraphError(f"GraphQL request failed after retries: {last_exc}") from last_exc

    def _respect_rate_limit(self) -> None:
        min_interval = max(0, self._settings.min_interval_ms) / 1000.0
        if min_interval <= 0:
            return

        with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_request_at
            if elapsed < min_interval:
                time.sleep(min_interval - elapsed)
            self._last_request_at = time.monotonic()

    def _resolve_subgraph_url(self, chain: str) -> str:
        config = get_chain_config(chain)
        subgraph_id = str(self._settings.graph_subgraph_ids.get(config.key) or "").strip()
        if not subgraph_id:
            return config.subgraph_url
        return self._build_gateway_url(subgraph_id)

    def _build_gateway_url(self, subgraph_id: str) -> str:
        if subgraph_id.startswith("http://") or subgraph_id.startswith("https://"):
            return subgraph_id.rstrip("/")
        base = self._settings.graph_gateway_base.rstrip("/")
        api_key = self._settings.graph_api_key.strip()
        if api_key:
            return f"{base}/{api_key}/subgraphs/id/{subgraph_id}"
        return f"{base}/subgraphs/id/{subgraph_id}"
