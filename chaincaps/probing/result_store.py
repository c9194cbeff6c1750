"""
Result Store
============
Holds one ChainResult per registry chain for a single probing session.

All writes go through `merge`, which replaces exactly one
(chain, capability) slot. ChainResults are immutable and swapped
whole, so `snapshot()` can be taken at any time while probes are
still landing and never exposes a half-updated record.
"""

from typing import Dict, Iterable, Optional, Tuple

from chaincaps.shared.models import (
    CapabilityId,
    ChainDescriptor,
    ChainResult,
    Outcome,
    OutcomeStatus,
)
from chaincaps.shared.system.logging import Logger


Snapshot = Tuple[ChainResult, ...]


class ChainNotFoundError(KeyError):
    """Merge targeted a chain id that was never initialized."""


class CapabilityNotFoundError(KeyError):
    """Merge targeted a capability that is not registered for this session."""


class StoreAlreadyInitializedError(RuntimeError):
    """initialize() may only run once per store."""


class ResultStore:
    """
    Per-session mapping of chain id -> ChainResult.

    Usage:
        store = ResultStore()
        store.initialize(chains, [CapabilityId.FEE_MARKET])
        store.merge(1, CapabilityId.FEE_MARKET, Outcome.supported())
        for result in store.snapshot():
            ...
    """

    def __init__(self):
        self._results: Dict[int, ChainResult] = {}
        self._capabilities: Tuple[CapabilityId, ...] = ()
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def capabilities(self) -> Tuple[CapabilityId, ...]:
        return self._capabilities

    def initialize(self, registry: Iterable[ChainDescriptor], capability_ids: Iterable[CapabilityId]) -> None:
        """Create one all-Pending ChainResult per chain."""
        if self._initialized:
            raise StoreAlreadyInitializedError("ResultStore is already initialized")

        capabilities = tuple(dict.fromkeys(capability_ids))
        results: Dict[int, ChainResult] = {}
        for chain in registry:
            if chain.id in results:
                raise ValueError(f"Duplicate chain id {chain.id} in registry")
            results[chain.id] = ChainResult.initial(chain, capabilities)

        self._capabilities = capabilities
        self._results = results
        self._initialized = True
        Logger.debug(f"[STORE] Initialized {len(results)} chains x {len(capabilities)} capabilities")

    def merge(self, chain_id: int, capability_id: CapabilityId, outcome: Outcome) -> ChainResult:
        """Set one capability's outcome for one chain; returns the new ChainResult."""
        current = self._results.get(chain_id)
        if current is None:
            raise ChainNotFoundError(chain_id)
        if capability_id not in current.capabilities:
            raise CapabilityNotFoundError(capability_id)
        if outcome.status == OutcomeStatus.PENDING:
            raise ValueError("Only terminal outcomes can be merged")

        previous = current.capabilities[capability_id]
        if previous.is_terminal:
            Logger.warning(
                f"[STORE] {current.chain.name} {capability_id.value}: "
                f"{previous.status.value} overwritten by {outcome.status.value}"
            )

        updated = current.with_outcome(capability_id, outcome)
        self._results[chain_id] = updated
        return updated

    def snapshot(self) -> Snapshot:
        """Point-in-time view of every ChainResult, in registry order."""
        return tuple(self._results.values())

    def get(self, chain_id: int) -> Optional[ChainResult]:
        return self._results.get(chain_id)

    def pending_count(self) -> int:
        return sum(
            1
            for result in self._results.values()
            for outcome in result.capabilities.values()
            if outcome.is_pending
        )

    def is_settled(self) -> bool:
        return self._initialized and self.pending_count() == 0

    def summary(self) -> Dict[CapabilityId, Dict[str, int]]:
        """Per-capability counts keyed by outcome status value."""
        counts = {cap: {status.value: 0 for status in OutcomeStatus} for cap in self._capabilities}
        for result in self._results.values():
            for cap, outcome in result.capabilities.items():
                counts[cap][outcome.status.value] += 1
        return counts

    def __len__(self) -> int:
        return len(self._results)
