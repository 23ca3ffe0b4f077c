from __future__ import annotations

from pool_apr.domain.entities.pool import PoolDayData, PoolSnapshot, PoolToken


# Placeholder sqrtPriceX96 shared by every fixture pool; the model never reads it.
MOCK_SQRT_PRICE = "1461446703485210103287273052203988822378723970342"

USDC_ETH = PoolToken("0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48", "USDC", "USD Coin", 6)
WETH_ETH = PoolToken("0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2", "WETH", "Wrapped Ether", 18)
WBTC_ETH = PoolToken("0x2260fac5e5542a773aa44fbcfedf7c193bc2c599", "WBTC", "Wrapped BTC", 8)
DAI_ETH = PoolToken("0x6b175474e89094c44da98b954eedeac495271d0f", "DAI", "Dai Stablecoin", 18)
USDC_BASE = PoolToken("0x833589fcd6edb6e08f4c7c32d4f71b54bda02913", "USDC", "USD Coin", 6)
WETH_BASE = PoolToken("0x4200000000000000000000000000000000000006", "WETH", "Wrapped Ether", 18)
USDT_BSC = PoolToken("0x55d398326f99059ff775485246999027b3197955", "USDT", "Tether USD", 18)
WBNB_BSC = PoolToken("0xbb4cdb9cbd36b01bd1cbaebf2de08d9173bc095c", "WBNB", "Wrapped BNB", 18)


def _pool(
    *,
    chain: str,
    pool_id: str,
    token0: PoolToken,
    token1: PoolToken,
    fee_tier: int,
    liquidity: str,
    tick: int,
    token0_price: str,
    token1_price: str,
    volume_usd: str,
    tvl_usd: str,
    volume_24h: str,
    fees_24h: str,
) -> PoolSnapshot:
    return PoolSnapshot(
        id=pool_id,
        chain=chain,
        protocol="v3",
        token0=token0,
        token1=token1,
        fee_tier=fee_tier,
        liquidity=liquidity,
        sqrt_price=MOCK_SQRT_PRICE,
        tick=tick,
        token0_price=token0_price,
        token1_price=token1_price,
        volume_usd=volume_usd,
        total_value_locked_usd=tvl_usd,
        day_data=[PoolDayData(date=None, volume_usd=volume_24h, tvl_usd=tvl_usd, fees_usd=fees_24h)],
    )


MOCK_POOLS: dict[str, list[PoolSnapshot]] = {
    "ethereum": [
        _pool(
            chain="ethereum",
            pool_id="0x88e6a0c2ddd26feeb64f039a2c41296fcb3f5640",
            token0=USDC_ETH,
            token1=WETH_ETH,
            fee_tier=500,
            liquidity="4567890123456789",
            tick=202920,
            token0_price="3456.789",
            token1_price="0.000289",
            volume_usd="856234567.89",
            tvl_usd="234567890.12",
            volume_24h="45678901.23",
            fees_24h="228394.51",
        ),
        _pool(
            chain="ethereum",
            pool_id="0x8ad599c3a0ff1de082011efddc58f1908eb6e6d8",
            token0=USDC_ETH,
            token1=WETH_ETH,
            fee_tier=3000,
            liquidity="3456789012345678",
            tick=202850,
            token0_price="3450.123",
            token1_price="0.000290",
            volume_usd="678901234.56",
            tvl_usd="189012345.67",
            volume_24h="34567890.12",
            fees_24h="103703.67",
        ),
        _pool(
            chain="ethereum",
            pool_id="0xcbcdf9626bc03e24f779434178a73a0b4bad62ed",
            token0=WBTC_ETH,
            token1=WETH_ETH,
            fee_tier=3000,
            liquidity="2345678901234567",
            tick=257420,
            token0_price="18.456",
            token1_price="0.0542",
            volume_usd="456789012.34",
            tvl_usd="145678901.23",
            volume_24h="23456789.01",
            fees_24h="70370.37",
        ),
        _pool(
            chain="ethereum",
            pool_id="0x4e68ccd3e89f51c3074ca5072bbac773960dfa36",
            token0=DAI_ETH,
            token1=WETH_ETH,
            fee_tier=3000,
            liquidity="1234567890123456",
            tick=202780,
            token0_price="3448.901",
            token1_price="0.000290",
            volume_usd="234567890.12",
            tvl_usd="98765432.10",
            volume_24h="12345678.90",
            fees_24h="37037.04",
        ),
        _pool(
            chain="ethereum",
            pool_id="0x5777d92f208679db4b9778590fa3cab3ac9e2168",
            token0=DAI_ETH,
            token1=USDC_ETH,
            fee_tier=100,
            liquidity="987654321098765",
            tick=-2,
            token0_price="1.0001",
            token1_price="0.9999",
            volume_usd="123456789.01",
            tvl_usd="87654321.09",
            volume_24h="6789012.34",
            fees_24h="6789.01",
        ),
    ],
    "base": [
        _pool(
            chain="base",
            pool_id="0xd0b53d9277642d899df5c87a3966a349a798f224",
            token0=USDC_BASE,
            token1=WETH_BASE,
            fee_tier=500,
            liquidity="2345678901234567",
            tick=202890,
            token0_price="3452.345",
            token1_price="0.000290",
            volume_usd="456789012.34",
            tvl_usd="123456789.01",
            volume_24h="23456789.01",
            fees_24h="117283.95",
        ),
        _pool(
            chain="base",
            pool_id="0x4c36388be6f416a29c8d8eee81c771ce6be14b18",
            token0=USDC_BASE,
            token1=WETH_BASE,
            fee_tier=3000,
            liquidity="1234567890123456",
            tick=202850,
            token0_price="3450.678",
            token1_price="0.000290",
            volume_usd="234567890.12",
            tvl_usd="98765432.10",
            volume_24h="12345678.90",
            fees_24h="37037.04",
        ),
    ],
    "bsc": [
        _pool(
            chain="bsc",
            pool_id="0x133b3d95bad5405d14d53473671200e9342896bf",
            token0=USDT_BSC,
            token1=WBNB_BSC,
            fee_tier=500,
            liquidity="1234567890123456",
            tick=276320,
            token0_price="612.345",
            token1_price="0.001633",
            volume_usd="345678901.23",
            tvl_usd="89012345.67",
            volume_24h="17283950.61",
            fees_24h="86419.75",
        ),
    ],
}


class MockPoolDataProvider:
    """Serves the static demo pools when no live data source is configured."""

    def __init__(self, pools: dict[str, list[PoolSnapshot]] | None = None):
        self._pools = pools if pools is not None else MOCK_POOLS

    def list_top_pools(self, *, chain: str, order_by: str, limit: int) -> list[PoolSnapshot]:
        _ = order_by
        return list(self._pools.get(chain, []))[:limit]

    def get_pool(self, *, chain: str, pool_id: str) -> PoolSnapshot | None:
        pool_key = pool_id.lower()
        for pool in self._pools.get(chain, []):
            if pool.id.lower() == pool_key:
                return pool
        return None
