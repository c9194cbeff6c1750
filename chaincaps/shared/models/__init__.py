from chaincaps.shared.models.outcome import CAPABILITY_LABELS, CapabilityId, Outcome, OutcomeStatus
from chaincaps.shared.models.chain import ChainDescriptor, ChainResult

__all__ = [
    "CAPABILITY_LABELS",
    "CapabilityId",
    "ChainDescriptor",
    "ChainResult",
    "Outcome",
    "OutcomeStatus",
]
