"""
Chain Models
============
Static chain identity and the per-chain capability record held by the
ResultStore.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping

from chaincaps.shared.models.outcome import CapabilityId, Outcome


@dataclass(frozen=True)
class ChainDescriptor:
    """One network from the chain registry."""
    id: int  # Canonical EVM chain id, unique within a registry
    name: str
    rpc_endpoint: str
    testnet: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "rpc": self.rpc_endpoint,
            "testnet": self.testnet,
        }


@dataclass(frozen=True)
class ChainResult:
    """
    Capability outcomes for one chain.

    Immutable: the store replaces the whole record on every merge, so a
    reader holding a ChainResult never sees it change underneath it.
    """
    chain: ChainDescriptor
    capabilities: Mapping[CapabilityId, Outcome]

    @classmethod
    def initial(cls, chain: ChainDescriptor, capability_ids: Iterable[CapabilityId]) -> "ChainResult":
        """All capabilities Pending."""
        return cls(chain, MappingProxyType({cap: Outcome.pending() for cap in capability_ids}))

    def with_outcome(self, capability_id: CapabilityId, outcome: Outcome) -> "ChainResult":
        """Copy with exactly one capability replaced."""
        updated = dict(self.capabilities)
        updated[capability_id] = outcome
        return ChainResult(self.chain, MappingProxyType(updated))

    def outcome(self, capability_id: CapabilityId) -> Outcome:
        return self.capabilities[capability_id]

    @property
    def is_settled(self) -> bool:
        return all(o.is_terminal for o in self.capabilities.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chain": self.chain.to_dict(),
            "capabilities": {cap.value: o.to_dict() for cap, o in self.capabilities.items()},
        }
