from __future__ import annotations

from dataclasses import dataclass
import logging

import httpx

from pool_apr.domain.entities.pool import PoolDayData, PoolSnapshot, PoolToken
from pool_apr.domain.exceptions import PoolDataSourceError
from pool_apr.infrastructure.cache import TtlCache
from pool_apr.shared.chains import get_chain_config


logger = logging.getLogger(__name__)


SUPPORTED_PROJECTS = {"uniswap-v3", "pancakeswap-amm-v3"}
# The yields feed carries no fee tier; pools are assumed to be 0.30%.
DEFAULT_FEE_TIER = 3000
DEFAULT_FEE_RATE = 0.003


class DefiLlamaError(PoolDataSourceError):
    pass


@dataclass(frozen=True)
class DefiLlamaClientSettings:
    api_base: str
    timeout_seconds: float
    min_volume_usd: float = 500
    min_tvl_usd: float = 10000
    cache_ttl_seconds: float = 300


def _float_or_zero(value) -> float:
    try:
        return float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        return 0.0


def map_defillama_pool(row: dict, *, chain: str) -> PoolSnapshot:
    symbols = str(row.get("symbol") or "").split("-")
    token0_symbol = symbols[0] if symbols and symbols[0] else "UNKNOWN"
    token1_symbol = symbols[1] if len(symbols) > 1 and symbols[1] else "UNKNOWN"
    pool_id = str(row.get("pool") or "")
    volume_24h = _float_or_zero(row.get("volumeUsd1d"))
    tvl = _float_or_zero(row.get("tvlUsd"))
    apy = row.get("apy")

    # Token addresses are not part of the feed; the pool id stands in for both.
    return PoolSnapshot(
        id=pool_id,
        chain=chain,
        protocol="v3",
        token0=PoolToken(address=pool_id, symbol=token0_symbol, name=token0_symbol, decimals=18),
        token1=PoolToken(address=pool_id, symbol=token1_symbol, name=token1_symbol, decimals=18),
        fee_tier=DEFAULT_FEE_TIER,
        liquidity="0",
        sqrt_price="0",
        tick=0,
        token0_price="1",
        token1_price="1",
        volume_usd=str(volume_24h * 365),
        total_value_locked_usd=str(tvl),
        day_data=[
            PoolDayData(
                date=None,
                volume_usd=str(volume_24h),
                tvl_usd=str(tvl),
                fees_usd=str(volume_24h * DEFAULT_FEE_RATE),
            )
        ],
        reported_apy=_float_or_zero(apy) if apy is not None else None,
    )


class DefiLlamaPoolProvider:
    def __init__(self, settings: DefiLlamaClientSettings):
        self._settings = settings
        self._cache: TtlCache[list[dict]] = TtlCache(settings.cache_ttl_seconds)

    def list_top_pools(self, *, chain: str, order_by: str, limit: int) -> list[PoolSnapshot]:
        _ = order_by
        pools = self._fetch_chain_pools(chain)
        pools.sort(key=lambda pool: _float_or_zero(pool.total_value_locked_usd), reverse=True)
        return pools[:limit]

    def get_pool(self, *, chain: str, pool_id: str) -> PoolSnapshot | None:
        pool_key = pool_id.lower()
        for pool in self._fetch_chain_pools(chain):
            if pool.id.lower() == pool_key:
                return pool
        return None

    def _fetch_chain_pools(self, chain: str) -> list[PoolSnapshot]:
        chain_name = get_chain_config(chain).defillama_name.lower()
        rows = self._fetch_all_rows()
        selected = [
            row
            for row in rows
            if row.get("project") in SUPPORTED_PROJECTS
            and str(row.get("chain") or "").lower() == chain_name
            and _float_or_zero(row.get("volumeUsd1d")) >= self._settings.min_volume_usd
            and _float_or_zero(row.get("tvlUsd")) >= self._settings.min_tvl_usd
        ]
        logger.info(
            "defillama_client: filtered_pools chain=%s total=%s selected=%s",
            chain,
            len(rows),
            len(selected),
        )
        return [map_defillama_pool(row, chain=chain) for row in selected]

    def _fetch_all_rows(self) -> list[dict]:
        cached = self._cache.get("pools")
        if cached is not None:
            logger.debug("defillama_client: pools_cache_hit rows=%s", len(cached))
            return cached

        payload = self._get_json(f"{self._settings.api_base.rstrip('/')}/pools")
        rows = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(rows, list):
            raise DefiLlamaError("DefiLlama response is missing the pools list.")

        self._cache.set("pools", rows)
        return rows

    def _get_json(self, url: str) -> dict:
        try:
            with httpx.Client(timeout=self._settings.timeout_seconds) as client:
                response = client.get(url, headers={"Accept": "application/json"})
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as exc:
            raise DefiLlamaError(f"DefiLlama API error: {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise DefiLlamaError(f"DefiLlama request failed: {exc}") from exc
