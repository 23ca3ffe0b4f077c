from __future__ import annotations

from dataclasses import replace

from fastapi.testclient import TestClient

from pool_apr.api.deps import get_list_pools_use_case, get_list_v4_pools_use_case, get_pool_details_use_case
from pool_apr.application.use_cases.get_pool_details import GetPoolDetailsUseCase
from pool_apr.application.use_cases.list_pools import ListPoolsUseCase
from pool_apr.application.use_cases.list_v4_pools import ListV4PoolsUseCase
from pool_apr.domain.entities.pool import PoolDayData, PoolSnapshot, PoolToken
from pool_apr.domain.exceptions import PoolDataSourceError, UnsupportedChainError
from pool_apr.infrastructure.clients.mock_pool_provider import MockPoolDataProvider
from pool_apr.main import app


class FailingPoolDataPort:
    def list_top_pools(self, *, chain: str, order_by: str, limit: int):
        raise PoolDataSourceError("subgraph unavailable")

    def get_pool(self, *, chain: str, pool_id: str):
        raise PoolDataSourceError("subgraph unavailable")


def _use_mock_pools() -> None:
    app.dependency_overrides[get_list_pools_use_case] = lambda: ListPoolsUseCase(
        pool_data_port=MockPoolDataProvider()
    )
    app.dependency_overrides[get_pool_details_use_case] = lambda: GetPoolDetailsUseCase(
        pool_data_port=MockPoolDataProvider()
    )


def test_list_pools_returns_pools_sorted_by_apr():
    _use_mock_pools()
    try:
        client = TestClient(app)
        response = client.get("/api/pools", params={"chain": "ethereum", "limit": 3})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    body = response.json()
    assert body["chain"] == "ethereum"
    assert body["count"] == 3
    assert body["pools"][0]["id"] == "0x8ad599c3a0ff1de082011efddc58f1908eb6e6d8"
    assert body["pools"][0]["pair"] == "USDC/WETH"
    assert body["pools"][0]["fee_percent"] == 0.3
    assert body["pools"][0]["apr_display"] == "20.03%"
    assert body["pools"][0]["tvl_display"] == "$189.01M"


def test_list_pools_accepts_sort_alias():
    _use_mock_pools()
    try:
        client = TestClient(app)
        response = client.get("/api/pools", params={"chain": "ethereum", "sortBy": "tvl"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json()["pools"][0]["id"] == "0x88e6a0c2ddd26feeb64f039a2c41296fcb3f5640"


def test_list_pools_rejects_bad_input():
    _use_mock_pools()
    try:
        client = TestClient(app)
        unknown_chain = client.get("/api/pools", params={"chain": "solana"})
        bad_limit = client.get("/api/pools", params={"chain": "ethereum", "limit": 500})
        bad_sort = client.get("/api/pools", params={"chain": "ethereum", "sortBy": "fees"})
    finally:
        app.dependency_overrides.clear()

    assert unknown_chain.status_code == 400
    assert "Unsupported chain" in unknown_chain.json()["detail"]
    assert bad_limit.status_code == 400
    assert bad_sort.status_code == 400


def test_list_pools_maps_data_source_failure_to_502():
    app.dependency_overrides[get_list_pools_use_case] = lambda: ListPoolsUseCase(
        pool_data_port=FailingPoolDataPort()
    )
    try:
        client = TestClient(app)
        response = client.get("/api/pools", params={"chain": "base"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 502
    assert "subgraph unavailable" in response.json()["detail"]


def test_pool_details_returns_history():
    _use_mock_pools()
    try:
        client = TestClient(app)
        response = client.get(
            "/api/pools/0xD0B53D9277642D899DF5C87A3966A349A798F224",
            params={"chain": "base"},
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    pool = response.json()["pool"]
    assert pool["id"] == "0xd0b53d9277642d899df5c87a3966a349a798f224"
    assert pool["chain"] == "base"
    assert len(pool["history"]) == 1
    assert pool["history"][0]["date"] is None


def test_pool_details_missing_pool_is_404():
    _use_mock_pools()
    try:
        client = TestClient(app)
        response = client.get("/api/pools/0xmissing", params={"chain": "ethereum"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 404
    assert response.json()["detail"] == "Pool not found."


def test_health_reports_data_source():
    client = TestClient(app)
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


class FakeV4DiscoveryPort:
    def __init__(self, pools=None, error: Exception | None = None):
        self._pools = pools or []
        self._error = error

    def list_pools(self, *, chain: str):
        if self._error is not None:
            raise self._error
        return [replace(pool, chain=chain) for pool in self._pools]


def _v4_pool(pool_id: str, liquidity: str) -> PoolSnapshot:
    return PoolSnapshot(
        id=pool_id,
        chain="base",
        protocol="v4",
        token0=PoolToken(address="0x0000000000000000000000000000000000000000", symbol="ETH", name="Ether", decimals=18),
        token1=PoolToken(address="0xusdc", symbol="USDC", name="USD Coin", decimals=6),
        fee_tier=500,
        liquidity=liquidity,
        sqrt_price="1",
        tick=-198000,
        token0_price="1",
        token1_price="1",
        volume_usd="0",
        total_value_locked_usd="0",
        day_data=[PoolDayData(date=None, volume_usd="0", tvl_usd="0", fees_usd="0")],
        hooks="0x0000000000000000000000000000000000001234",
        tick_spacing=10,
    )


def test_list_v4_pools_returns_discovered_pools_with_zero_apr():
    port = FakeV4DiscoveryPort([_v4_pool("0xdeep", "900"), _v4_pool("0xshallow", "10")])
    app.dependency_overrides[get_list_v4_pools_use_case] = lambda: ListV4PoolsUseCase(discovery_port=port)
    try:
        client = TestClient(app)
        response = client.get("/api/pools-v4", params={"limit": 1})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    body = response.json()
    assert body["chain"] == "base"
    assert body["count"] == 1
    pool = body["pools"][0]
    assert pool["id"] == "0xdeep"
    assert pool["protocol"] == "v4"
    assert pool["apr"] == 0
    assert pool["apr_display"] == "0.00%"
    assert pool["hooks"] == "0x0000000000000000000000000000000000001234"


def test_list_v4_pools_error_mapping():
    app.dependency_overrides[get_list_v4_pools_use_case] = lambda: ListV4PoolsUseCase(
        discovery_port=FakeV4DiscoveryPort(error=PoolDataSourceError("rpc down"))
    )
    try:
        client = TestClient(app)
        bad_limit = client.get("/api/pools-v4", params={"limit": 0})
        unknown_chain = client.get("/api/pools-v4", params={"chain": "solana"})
        rpc_failure = client.get("/api/pools-v4")
    finally:
        app.dependency_overrides.clear()

    assert bad_limit.status_code == 400
    assert unknown_chain.status_code == 400
    assert rpc_failure.status_code == 502
    assert "rpc down" in rpc_failure.json()["detail"]


def test_list_v4_pools_rejects_chain_without_deployment():
    app.dependency_overrides[get_list_v4_pools_use_case] = lambda: ListV4PoolsUseCase(
        discovery_port=FakeV4DiscoveryPort(error=UnsupportedChainError("Uniswap V4 is not available on chain: bsc"))
    )
    try:
        client = TestClient(app)
        response = client.get("/api/pools-v4", params={"chain": "bsc"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 400
