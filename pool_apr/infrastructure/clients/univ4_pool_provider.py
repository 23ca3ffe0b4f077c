from __future__ import annotations

from dataclasses import dataclass
import logging
import time

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import keccak
import httpx

from pool_apr.domain.entities.pool import PoolDayData, PoolSnapshot, PoolToken
from pool_apr.domain.exceptions import PoolDataSourceError, UnsupportedChainError
from pool_apr.infrastructure.cache import TtlCache
from pool_apr.shared.chains import ChainConfig, get_chain_config


logger = logging.getLogger(__name__)


INITIALIZE_TOPIC = "0x" + keccak(
    text="Initialize(bytes32,address,address,uint24,int24,address,uint160,int24)"
).hex()
EXTSLOAD_SELECTOR = keccak(text="extsload(bytes32)")[:4]
SYMBOL_SELECTOR = keccak(text="symbol()")[:4]
NAME_SELECTOR = keccak(text="name()")[:4]
DECIMALS_SELECTOR = keccak(text="decimals()")[:4]

# PoolManager storage: mapping(PoolId => Pool.State) lives at slot 6; within a
# Pool.State, slot0 is word 0 and the active liquidity is word 3.
POOLS_SLOT = 6
LIQUIDITY_OFFSET = 3

NATIVE_CURRENCY = "0x0000000000000000000000000000000000000000"
UINT128_MASK = (1 << 128) - 1
UINT160_MASK = (1 << 160) - 1


class V4RpcError(PoolDataSourceError):
    pass


@dataclass(frozen=True)
class V4PoolProviderSettings:
    rpc_urls: dict
    timeout_seconds: float
    max_retries: int
    lookback_blocks: int = 100000
    max_pools: int = 50
    cache_ttl_seconds: float = 300


@dataclass(frozen=True)
class InitializedPool:
    pool_id: str
    currency0: str
    currency1: str
    fee: int
    tick_spacing: int
    hooks: str


def decode_initialize_log(log: dict) -> InitializedPool:
    topics = log.get("topics") or []
    if len(topics) < 4:
        raise V4RpcError("Initialize log is missing indexed topics.")
    try:
        fee, tick_spacing, hooks, _sqrt_price, _tick = decode(
            ["uint24", "int24", "address", "uint160", "int24"],
            bytes.fromhex(str(log.get("data") or "0x")[2:]),
        )
    except (DecodingError, ValueError) as exc:
        raise V4RpcError(f"Malformed Initialize log: {exc}") from exc

    return InitializedPool(
        pool_id=str(topics[1]).lower(),
        currency0="0x" + str(topics[2])[-40:].lower(),
        currency1="0x" + str(topics[3])[-40:].lower(),
        fee=fee,
        tick_spacing=tick_spacing,
        hooks=hooks.lower(),
    )


def pool_state_slot(pool_id: str) -> int:
    pool_key = bytes.fromhex(pool_id.removeprefix("0x"))
    return int.from_bytes(keccak(encode(["bytes32", "uint256"], [pool_key, POOLS_SLOT])), "big")


def decode_slot0(word: int) -> tuple[int, int]:
    """Split a packed slot0 word into (sqrtPriceX96, tick)."""
    sqrt_price = word & UINT160_MASK
    tick = (word >> 160) & 0xFFFFFF
    if tick >= 1 << 23:
        tick -= 1 << 24
    return sqrt_price, tick


def _decode_text(raw: bytes) -> str | None:
    try:
        (value,) = decode(["string"], raw)
        return value
    except (DecodingError, OverflowError, UnicodeDecodeError):
        pass
    # some older tokens return bytes32 instead of string
    text = raw[:32].rstrip(b"\x00")
    try:
        return text.decode("utf-8") or None
    except UnicodeDecodeError:
        return None


class V4PoolProvider:
    """Discovers Uniswap V4 pools from PoolManager ``Initialize`` logs.

    V4 has no subgraph-style volume or TVL feed here, so discovered pools carry
    zero volume and TVL and therefore a zero APR. Results are cached per chain.
    """

    def __init__(self, settings: V4PoolProviderSettings):
        self._settings = settings
        self._cache: TtlCache[list[PoolSnapshot]] = TtlCache(settings.cache_ttl_seconds)

    def list_pools(self, *, chain: str) -> list[PoolSnapshot]:
        config = get_chain_config(chain)
        if not config.v4_pool_manager:
            raise UnsupportedChainError(f"Uniswap V4 is not available on chain: {config.key}")

        cached = self._cache.get(config.key)
        if cached is not None:
            logger.debug("univ4_pool_provider: pools_cache_hit chain=%s", config.key)
            return cached

        rpc_url = str(self._settings.rpc_urls.get(config.key) or "").strip() or config.rpc_url
        current_block = int(self._rpc(rpc_url, "eth_blockNumber", []), 16)
        from_block = max(current_block - self._settings.lookback_blocks, 0)
        logs = self._rpc(
            rpc_url,
            "eth_getLogs",
            [
                {
                    "address": config.v4_pool_manager,
                    "topics": [INITIALIZE_TOPIC],
                    "fromBlock": hex(from_block),
                    "toBlock": hex(current_block),
                }
            ],
        ) or []

        pools: list[PoolSnapshot] = []
        for log in logs[: self._settings.max_pools]:
            try:
                pool = self._load_pool(rpc_url, config, decode_initialize_log(log))
            except V4RpcError as exc:
                logger.warning("univ4_pool_provider: pool_skipped chain=%s error=%s", config.key, exc)
                continue
            if pool is not None:
                pools.append(pool)

        pools.sort(key=lambda pool: int(pool.liquidity), reverse=True)
        logger.info(
            "univ4_pool_provider: fetched_pools chain=%s from_block=%s to_block=%s logs=%s pools=%s",
            config.key,
            from_block,
            current_block,
            len(logs),
            len(pools),
        )
        self._cache.set(config.key, pools)
        return pools

    def _load_pool(self, rpc_url: str, config: ChainConfig, initialized: InitializedPool) -> PoolSnapshot | None:
        manager = config.v4_pool_manager or ""
        state_slot = pool_state_slot(initialized.pool_id)
        liquidity = self._extsload(rpc_url, manager, state_slot + LIQUIDITY_OFFSET) & UINT128_MASK
        if liquidity == 0:
            return None
        sqrt_price, tick = decode_slot0(self._extsload(rpc_url, manager, state_slot))

        return PoolSnapshot(
            id=initialized.pool_id,
            chain=config.key,
            protocol="v4",
            token0=self._read_token(rpc_url, initialized.currency0, config),
            token1=self._read_token(rpc_url, initialized.currency1, config),
            fee_tier=initialized.fee,
            liquidity=str(liquidity),
            sqrt_price=str(sqrt_price),
            tick=tick,
            token0_price="1",
            token1_price="1",
            volume_usd="0",
            total_value_locked_usd="0",
            day_data=[PoolDayData(date=None, volume_usd="0", tvl_usd="0", fees_usd="0")],
            hooks=initialized.hooks,
            tick_spacing=initialized.tick_spacing,
        )

    def _read_token(self, rpc_url: str, address: str, config: ChainConfig) -> PoolToken:
        if address == NATIVE_CURRENCY:
            native = config.native_currency
            return PoolToken(address=address, symbol=native.symbol, name=native.name, decimals=native.decimals)

        try:
            symbol = _decode_text(self._eth_call(rpc_url, address, SYMBOL_SELECTOR))
            name = _decode_text(self._eth_call(rpc_url, address, NAME_SELECTOR))
            (decimals,) = decode(["uint8"], self._eth_call(rpc_url, address, DECIMALS_SELECTOR))
        except (V4RpcError, DecodingError) as exc:
            logger.warning("univ4_pool_provider: token_metadata_failed token=%s error=%s", address, exc)
            return PoolToken(address=address, symbol="UNKNOWN", name="Unknown", decimals=18)

        return PoolToken(
            address=address,
            symbol=symbol or "UNKNOWN",
            name=name or symbol or "Unknown",
            decimals=decimals,
        )

    def _extsload(self, rpc_url: str, manager: str, slot: int) -> int:
        raw = self._eth_call(rpc_url, manager, EXTSLOAD_SELECTOR + slot.to_bytes(32, "big"))
        return int.from_bytes(raw[:32], "big") if raw else 0

    def _eth_call(self, rpc_url: str, to: str, data: bytes) -> bytes:
        result = self._rpc(rpc_url, "eth_call", [{"to": to, "data": "0x" + data.hex()}, "latest"])
        return bytes.fromhex(str(result or "0x")[2:])

    def _rpc(self, url: str, method: str, params: list):
        attempts = max(1, self._settings.max_retries)
        delay = 0.25
        last_exc: Exception | None = None

        for attempt in range(1, attempts + 1):
            try:
                with httpx.Client(timeout=self._settings.timeout_seconds) as client:
                    response = client.post(
                        url,
                        json={"jsonrpc": "2.0", "id": 1, "method": method, "params": params},
                    )
                    response.raise_for_status()
                    payload = response.json()

                error = payload.get("error")
                if error:
                    message = error.get("message", error) if isinstance(error, dict) else error
                    raise V4RpcError(f"RPC error: {message}")
                return payload.get("result")
            except (httpx.HTTPError, V4RpcError, ValueError) as exc:
                last_exc = exc
                if attempt == attempts:
                    break
                logger.warning(
                    "univ4_pool_provider: rpc_retry method=%s attempt=%s/%s error=%s",
                    method,
                    attempt,
                    attempts,
                    exc,
                )
                time.sleep(delay)
                delay *= 2

        raise V4RpcError(f"RPC {method} failed after retries: {last_exc}") from last_exc
