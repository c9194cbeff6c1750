"""Capability check registry."""

from functools import partial
from typing import Awaitable, Callable, Dict, Iterable, Optional

import httpx

from chaincaps.probing.checks.authorization import check_authorization
from chaincaps.probing.checks.fee_market import check_fee_market
from chaincaps.shared.models import CapabilityId, ChainDescriptor, Outcome


# A check takes a chain and always resolves to a terminal Outcome
CapabilityCheck = Callable[[ChainDescriptor], Awaitable[Outcome]]

CHECK_FUNCTIONS = {
    CapabilityId.FEE_MARKET: check_fee_market,
    CapabilityId.AUTHORIZATION: check_authorization,
}


def build_checks(
    capabilities: Optional[Iterable[CapabilityId]] = None,
    timeout_ms: Optional[int] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[CapabilityId, CapabilityCheck]:
    """Bind timeout/transport into one check per requested capability."""
    selected = list(capabilities) if capabilities else list(CHECK_FUNCTIONS)
    return {
        cap: partial(CHECK_FUNCTIONS[cap], timeout_ms=timeout_ms, transport=transport)
        for cap in selected
    }


__all__ = [
    "CHECK_FUNCTIONS",
    "CapabilityCheck",
    "build_checks",
    "check_authorization",
    "check_fee_market",
]
