"""
Capability Outcome Model
========================
Identifiers for the probed capabilities and the ternary verdict
(plus Pending) a probe produces for one (chain, capability) pair.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class CapabilityId(str, Enum):
    """Protocol capabilities probed on every chain."""
    FEE_MARKET = "eip1559"
    AUTHORIZATION = "eip7702"

    @property
    def label(self) -> str:
        return CAPABILITY_LABELS[self]


CAPABILITY_LABELS = {
    CapabilityId.FEE_MARKET: "EIP-1559",
    CapabilityId.AUTHORIZATION: "EIP-7702",
}


class OutcomeStatus(str, Enum):
    """Classification of one probe."""
    PENDING = "pending"
    SUPPORTED = "supported"
    UNSUPPORTED = "unsupported"
    FAILED = "failed"


@dataclass(frozen=True)
class Outcome:
    """
    Result of probing one capability on one chain.

    `reason` is only populated for FAILED outcomes and carries the
    underlying error text. `latency_ms` is informational and does not
    take part in equality.
    """
    status: OutcomeStatus
    reason: str = ""
    latency_ms: float = field(default=0.0, compare=False)

    @classmethod
    def pending(cls) -> "Outcome":
        return cls(OutcomeStatus.PENDING)

    @classmethod
    def supported(cls, latency_ms: float = 0.0) -> "Outcome":
        return cls(OutcomeStatus.SUPPORTED, latency_ms=latency_ms)

    @classmethod
    def unsupported(cls, latency_ms: float = 0.0) -> "Outcome":
        return cls(OutcomeStatus.UNSUPPORTED, latency_ms=latency_ms)

    @classmethod
    def failed(cls, reason: str, latency_ms: float = 0.0) -> "Outcome":
        return cls(OutcomeStatus.FAILED, reason=reason or "Unknown error", latency_ms=latency_ms)

    @property
    def is_pending(self) -> bool:
        return self.status == OutcomeStatus.PENDING

    @property
    def is_terminal(self) -> bool:
        return self.status != OutcomeStatus.PENDING

    @property
    def is_supported(self) -> bool:
        return self.status == OutcomeStatus.SUPPORTED

    @property
    def is_failed(self) -> bool:
        return self.status == OutcomeStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"status": self.status.value}
        if self.reason:
            data["reason"] = self.reason
        if self.is_terminal:
            data["latency_ms"] = round(self.latency_ms, 2)
        return data

    def __repr__(self) -> str:
        if self.reason:
            return f"Outcome({self.status.value}: {self.reason})"
        return f"Outcome({self.status.value})"
