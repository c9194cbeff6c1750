"""
Fee-Market Check (EIP-1559)
===========================
A chain supports the fee market when its latest block header reports a
non-zero base fee AND the node serves historical fee data through
`eth_feeHistory`. Checking both rules out networks that merely echo a
zero `baseFeePerGas`.
"""

import time
from typing import Optional

import httpx

from chaincaps.shared.infrastructure.rpc_client import (
    RpcClient,
    RpcClientError,
    RpcMethodError,
    hex_to_int,
)
from chaincaps.shared.models import ChainDescriptor, Outcome
from chaincaps.shared.system.logging import Logger


FEE_HISTORY_BLOCKS = "0x4"
FEE_HISTORY_PERCENTILES = [10, 50, 90]


async def check_fee_market(
    chain: ChainDescriptor,
    timeout_ms: Optional[int] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Outcome:
    """Probe one chain. Never raises."""
    start = time.time()

    def elapsed() -> float:
        return (time.time() - start) * 1000

    try:
        async with RpcClient(chain.rpc_endpoint, timeout_ms=timeout_ms, transport=transport) as client:
            block = await client.request("eth_getBlockByNumber", ["latest", False])
            if not isinstance(block, dict):
                return Outcome.failed("Malformed response to eth_getBlockByNumber: no block", elapsed())

            base_fee = hex_to_int(block.get("baseFeePerGas"))
            if not base_fee:
                return Outcome.unsupported(elapsed())

            history = await client.request(
                "eth_feeHistory",
                [FEE_HISTORY_BLOCKS, "latest", FEE_HISTORY_PERCENTILES],
            )
            if history is None:
                return Outcome.unsupported(elapsed())
            if not isinstance(history, dict):
                return Outcome.failed("Malformed response to eth_feeHistory", elapsed())

            series = history.get("baseFeePerGas")
            if not isinstance(series, list) or not series:
                return Outcome.unsupported(elapsed())

            return Outcome.supported(elapsed())

    except RpcMethodError as e:
        if e.is_method_missing:
            Logger.debug(f"[PROBE] {chain.name}: fee-market method missing ({e.message})")
            return Outcome.unsupported(elapsed())
        return Outcome.failed(str(e), elapsed())
    except RpcClientError as e:
        return Outcome.failed(str(e), elapsed())
    except Exception as e:
        return Outcome.failed(f"{type(e).__name__}: {e}", elapsed())
