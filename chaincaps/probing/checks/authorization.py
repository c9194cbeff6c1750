"""
Authorization Check (EIP-7702)
==============================
Estimates gas for a call into an account whose code is overridden with
the EIP-7702 delegation designator (`0xef0100 || address`). Nodes that do
not implement delegated accounts reject the `0xef` prefix during
estimation; nodes that implement it return an estimate.

Known false positives: networks that ignore the override or the marker
(HyperEVM is one) pass this check without supporting EIP-7702. This is an
accepted accuracy limit of the heuristic.
"""

import time
from typing import Optional

import httpx

from chaincaps.shared.infrastructure.rpc_client import (
    RpcClient,
    RpcClientError,
    RpcMethodError,
)
from chaincaps.shared.models import ChainDescriptor, Outcome
from chaincaps.shared.system.logging import Logger


SENTINEL_ADDRESS = "0xdeadbeef00000000000000000000000000000000"

DELEGATION_MARKER = "0xef0100"
DELEGATE_ADDRESS = "00" * 19 + "01"
DELEGATED_CODE = DELEGATION_MARKER + DELEGATE_ADDRESS


def _word(value: int) -> str:
    return f"{value:064x}"


# Authorization-tuple shaped calldata: chain id, nonce, two zeroed signature words
PROBE_CALLDATA = "0x" + _word(0) + _word(1) + _word(0) + _word(0)


def build_estimate_params() -> list:
    """`eth_estimateGas` params with the delegation-code state override."""
    return [
        {
            "from": SENTINEL_ADDRESS,
            "to": SENTINEL_ADDRESS,
            "data": PROBE_CALLDATA,
            "value": "0x0",
        },
        "latest",
        {SENTINEL_ADDRESS: {"code": DELEGATED_CODE}},
    ]


async def check_authorization(
    chain: ChainDescriptor,
    timeout_ms: Optional[int] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Outcome:
    """
    Probe one chain. Never raises.

    - estimate resolves         -> Supported
    - node returns an RPC error -> Unsupported
    - timeout / transport error -> Failed
    """
    start = time.time()

    def elapsed() -> float:
        return (time.time() - start) * 1000

    try:
        async with RpcClient(chain.rpc_endpoint, timeout_ms=timeout_ms, transport=transport) as client:
            await client.request("eth_estimateGas", build_estimate_params())
            return Outcome.supported(elapsed())

    except RpcMethodError as e:
        Logger.debug(f"[PROBE] {chain.name}: delegation marker rejected ({e.message})")
        return Outcome.unsupported(elapsed())
    except RpcClientError as e:
        return Outcome.failed(str(e), elapsed())
    except Exception as e:
        return Outcome.failed(f"{type(e).__name__}: {e}", elapsed())
