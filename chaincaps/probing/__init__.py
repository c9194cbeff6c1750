from chaincaps.probing.engine import ProbeEngine
from chaincaps.probing.result_store import (
    CapabilityNotFoundError,
    ChainNotFoundError,
    ResultStore,
    Snapshot,
    StoreAlreadyInitializedError,
)
from chaincaps.probing.sorter import CHAIN_ID_COLUMN, NAME_COLUMN, SortDirection, order, parse_sort_column

__all__ = [
    "CHAIN_ID_COLUMN",
    "CapabilityNotFoundError",
    "ChainNotFoundError",
    "NAME_COLUMN",
    "ProbeEngine",
    "ResultStore",
    "Snapshot",
    "SortDirection",
    "StoreAlreadyInitializedError",
    "order",
    "parse_sort_column",
]
