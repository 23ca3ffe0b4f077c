from __future__ import annotations

import httpx
import pytest

from pool_apr.domain.services.apr_model import calculate_base_apr
from pool_apr.infrastructure.cache import TtlCache
from pool_apr.infrastructure.clients.defillama_client import (
    DefiLlamaClientSettings,
    DefiLlamaError,
    DefiLlamaPoolProvider,
    map_defillama_pool,
)


ROWS = [
    {"pool": "pool-a", "chain": "Ethereum", "project": "uniswap-v3", "symbol": "USDC-WETH",
     "tvlUsd": 5_000_000, "volumeUsd1d": 200_000, "apy": 4.2},
    {"pool": "pool-b", "chain": "Ethereum", "project": "uniswap-v3", "symbol": "WBTC-WETH",
     "tvlUsd": 9_000_000, "volumeUsd1d": 100_000, "apy": None},
    {"pool": "pool-c", "chain": "Ethereum", "project": "curve-dex", "symbol": "DAI-USDC",
     "tvlUsd": 50_000_000, "volumeUsd1d": 1_000_000},
    {"pool": "pool-d", "chain": "Ethereum", "project": "uniswap-v3", "symbol": "PEPE-WETH",
     "tvlUsd": 2_000, "volumeUsd1d": 50_000},
    {"pool": "pool-e", "chain": "Ethereum", "project": "uniswap-v3", "symbol": "LINK-WETH",
     "tvlUsd": 800_000, "volumeUsd1d": 100},
    {"pool": "pool-f", "chain": "BSC", "project": "pancakeswap-amm-v3", "symbol": "USDT-WBNB",
     "tvlUsd": 3_000_000, "volumeUsd1d": 90_000},
]


def _make_provider(*, cache_ttl: float = 300) -> DefiLlamaPoolProvider:
    return DefiLlamaPoolProvider(
        DefiLlamaClientSettings(
            api_base="https://yields.llama.fi/",
            timeout_seconds=5,
            cache_ttl_seconds=cache_ttl,
        )
    )


def _stub_rows(monkeypatch: pytest.MonkeyPatch, provider: DefiLlamaPoolProvider, payload) -> list[str]:
    calls: list[str] = []

    def fake_get_json(url: str):
        calls.append(url)
        return payload

    monkeypatch.setattr(provider, "_get_json", fake_get_json)
    return calls


def test_list_top_pools_filters_and_sorts_by_tvl(monkeypatch: pytest.MonkeyPatch):
    provider = _make_provider()
    calls = _stub_rows(monkeypatch, provider, {"data": ROWS})

    pools = provider.list_top_pools(chain="ethereum", order_by="totalValueLockedUSD", limit=10)

    assert [pool.id for pool in pools] == ["pool-b", "pool-a"]
    assert calls == ["https://yields.llama.fi/pools"]


def test_list_top_pools_respects_limit_and_chain(monkeypatch: pytest.MonkeyPatch):
    provider = _make_provider()
    _stub_rows(monkeypatch, provider, {"data": ROWS})

    assert [pool.id for pool in provider.list_top_pools(chain="ethereum", order_by="volumeUSD", limit=1)] == ["pool-b"]
    assert [pool.id for pool in provider.list_top_pools(chain="bsc", order_by="volumeUSD", limit=5)] == ["pool-f"]
    assert provider.list_top_pools(chain="base", order_by="volumeUSD", limit=5) == []


def test_rows_are_cached_between_calls(monkeypatch: pytest.MonkeyPatch):
    provider = _make_provider()
    calls = _stub_rows(monkeypatch, provider, {"data": ROWS})

    provider.list_top_pools(chain="ethereum", order_by="totalValueLockedUSD", limit=5)
    provider.get_pool(chain="bsc", pool_id="pool-f")

    assert len(calls) == 1


def test_get_pool_matches_case_insensitively(monkeypatch: pytest.MonkeyPatch):
    provider = _make_provider()
    _stub_rows(monkeypatch, provider, {"data": ROWS})

    pool = provider.get_pool(chain="ethereum", pool_id="POOL-A")

    assert pool is not None
    assert pool.reported_apy == 4.2
    assert provider.get_pool(chain="ethereum", pool_id="pool-c") is None


def test_missing_data_list_raises(monkeypatch: pytest.MonkeyPatch):
    provider = _make_provider()
    _stub_rows(monkeypatch, provider, {"status": "error"})

    with pytest.raises(DefiLlamaError):
        provider.list_top_pools(chain="ethereum", order_by="totalValueLockedUSD", limit=5)


def test_http_status_errors_are_wrapped(monkeypatch: pytest.MonkeyPatch):
    provider = _make_provider()

    class FailingClient:
        def __init__(self, *, timeout: float):
            _ = timeout

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb) -> None:
            _ = (exc_type, exc, tb)
            return None

        def get(self, url: str, headers: dict) -> httpx.Response:
            _ = headers
            return httpx.Response(503, request=httpx.Request("GET", url))

    monkeypatch.setattr("pool_apr.infrastructure.clients.defillama_client.httpx.Client", FailingClient)

    with pytest.raises(DefiLlamaError, match="DefiLlama API error: 503"):
        provider.list_top_pools(chain="ethereum", order_by="totalValueLockedUSD", limit=5)


def test_map_defillama_pool_defaults():
    pool = map_defillama_pool(ROWS[0], chain="ethereum")

    assert pool.pair == "USDC/WETH"
    assert pool.fee_tier == 3000
    assert pool.tick == 0
    assert pool.latest_day.fees_usd == "600.0"
    assert calculate_base_apr(pool.to_metrics()) == pytest.approx(200_000 * 0.003 / 5_000_000 * 365 * 100)


def test_map_defillama_pool_handles_bare_symbol():
    pool = map_defillama_pool({"pool": "x", "symbol": "STETH"}, chain="ethereum")

    assert pool.token0.symbol == "STETH"
    assert pool.token1.symbol == "UNKNOWN"
    assert pool.reported_apy is None


def test_ttl_cache_expires_and_can_be_disabled(monkeypatch: pytest.MonkeyPatch):
    now = {"value": 100.0}
    monkeypatch.setattr("pool_apr.infrastructure.cache.time.monotonic", lambda: now["value"])

    cache: TtlCache[str] = TtlCache(10)
    cache.set("key", "value")
    assert cache.get("key") == "value"
    now["value"] = 111.0
    assert cache.get("key") is None

    disabled: TtlCache[str] = TtlCache(0)
    disabled.set("key", "value")
    assert disabled.get("key") is None
