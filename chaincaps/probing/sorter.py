"""
Snapshot Sorter
===============
Orders a snapshot by name, chain id or a capability column.

Capability columns rank rows as:
    Supported < Pending < Unsupported < Failed
so in-flight rows stay visually separate from confirmed results.
Descending order negates the final comparison; ties keep their
original relative order in both directions.
"""

import locale
from enum import Enum
from functools import cmp_to_key
from typing import Iterable, List, Union

from chaincaps.shared.models import CAPABILITY_LABELS, CapabilityId, ChainResult, Outcome


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


NAME_COLUMN = "name"
CHAIN_ID_COLUMN = "chainId"

SortColumn = Union[str, CapabilityId]

_CHAIN_ID_ALIASES = {"chainid", "chain-id", "chain_id", "id"}


def parse_sort_column(text: str) -> SortColumn:
    """Map user input to a sort column. Raises ValueError if unknown."""
    key = text.strip().lower()
    if key == NAME_COLUMN:
        return NAME_COLUMN
    if key in _CHAIN_ID_ALIASES:
        return CHAIN_ID_COLUMN
    for cap in CapabilityId:
        if key in (cap.value, CAPABILITY_LABELS[cap].lower()):
            return cap
    raise ValueError(f"Unknown sort column: {text!r}")


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare_names(a: ChainResult, b: ChainResult) -> int:
    """Locale-aware, case-insensitive; falls back to exact text on ties."""
    result = locale.strcoll(a.chain.name.casefold(), b.chain.name.casefold())
    if result == 0:
        return _cmp(a.chain.name, b.chain.name)
    return _cmp(result, 0)


def compare_chain_ids(a: ChainResult, b: ChainResult) -> int:
    return _cmp(a.chain.id, b.chain.id)


def compare_outcomes(a: Outcome, b: Outcome) -> int:
    """Supported first, then Pending, then Unsupported, then Failed."""
    if a.is_supported != b.is_supported:
        return -1 if a.is_supported else 1
    if a.is_pending != b.is_pending:
        return -1 if a.is_pending else 1
    if a.is_failed != b.is_failed:
        return 1 if a.is_failed else -1
    return 0


def order(
    snapshot: Iterable[ChainResult],
    column: SortColumn = CHAIN_ID_COLUMN,
    direction: Union[SortDirection, str] = SortDirection.ASC,
) -> List[ChainResult]:
    """Return a new list of the snapshot's results in display order."""
    direction = SortDirection(direction)
    if not isinstance(column, CapabilityId) and column not in (NAME_COLUMN, CHAIN_ID_COLUMN):
        column = parse_sort_column(column)
    sign = 1 if direction == SortDirection.ASC else -1

    if column == NAME_COLUMN:
        compare = compare_names
    elif column == CHAIN_ID_COLUMN:
        compare = compare_chain_ids
    else:
        snapshot = list(snapshot)
        if any(column not in result.capabilities for result in snapshot):
            raise ValueError(f"Cannot sort by {column.label}: not probed in this snapshot")

        def compare(a: ChainResult, b: ChainResult) -> int:
            return compare_outcomes(a.outcome(column), b.outcome(column))

    return sorted(snapshot, key=cmp_to_key(lambda a, b: sign * compare(a, b)))
