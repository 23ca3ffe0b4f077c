from __future__ import annotations

from dataclasses import dataclass

from pool_apr.domain.exceptions import UnsupportedChainError


@dataclass(frozen=True)
class NativeCurrency:
    name: str
    symbol: str
    decimals: int


@dataclass(frozen=True)
class ChainConfig:
    key: str
    chain_id: int
    name: str
    rpc_url: str
    subgraph_url: str
    defillama_name: str
    native_currency: NativeCurrency
    # Uniswap V4 singleton PoolManager; None where V4 is not deployed.
    v4_pool_manager: str | None = None


SUPPORTED_CHAINS: dict[str, ChainConfig] = {
    "ethereum": ChainConfig(
        key="ethereum",
        chain_id=1,
        name="Ethereum",
        rpc_url="https://eth.llamarpc.com",
        # Uniswap Labs mirror endpoint.
        subgraph_url="https://cloudflare-ipfs.com/ipns/api.uniswap.org/v1/graphql",
        defillama_name="Ethereum",
        native_currency=NativeCurrency(name="Ether", symbol="ETH", decimals=18),
        v4_pool_manager="0x000000000004444c5dc75cb358380d2e3de08a90",
    ),
    "base": ChainConfig(
        key="base",
        chain_id=8453,
        name="Base",
        rpc_url="https://mainnet.base.org",
        subgraph_url="https://api.studio.thegraph.com/query/48427/uniswap-v3-base/version/latest",
        defillama_name="Base",
        native_currency=NativeCurrency(name="Ether", symbol="ETH", decimals=18),
        v4_pool_manager="0x498581ff718922c3f8e6a244956af099b2652b2b",
    ),
    "bsc": ChainConfig(
        key="bsc",
        chain_id=56,
        name="BSC",
        rpc_url="https://bsc-dataseed1.binance.org",
        # PancakeSwap V3 is a Uniswap V3 fork with the same subgraph schema.
        subgraph_url="https://api.thegraph.com/subgraphs/name/pancakeswap/exchange-v3-bsc",
        defillama_name="BSC",
        native_currency=NativeCurrency(name="BNB", symbol="BNB", decimals=18),
    ),
}

CHAIN_ID_TO_KEY = {config.chain_id: key for key, config in SUPPORTED_CHAINS.items()}


def normalize_chain(chain: str | None) -> str:
    return (chain or "").strip().lower()


def get_chain_config(chain: str) -> ChainConfig:
    config = SUPPORTED_CHAINS.get(normalize_chain(chain))
    if config is None:
        raise UnsupportedChainError(f"Unsupported chain: {chain}")
    return config
