"""
Result Table
============
Rich rendering of a snapshot. Reads only; ordering comes from the sorter.
"""

from typing import Iterable, Optional, Sequence

from rich.table import Table
from rich.text import Text

from chaincaps.probing.result_store import ResultStore
from chaincaps.probing.sorter import CHAIN_ID_COLUMN, NAME_COLUMN, SortColumn, SortDirection, order
from chaincaps.shared.models import CapabilityId, ChainResult, Outcome


FALSE_POSITIVE_WARNING = (
    "Warning: the EIP-7702 check can report false positives "
    "(e.g. HyperEVM) on nodes that ignore the delegation marker."
)


def outcome_cell(outcome: Outcome) -> Text:
    """Checking... / ✓ Supported / ✗ Not Supported (+ error line for Failed)."""
    if outcome.is_pending:
        return Text("Checking...", style="dim")
    if outcome.is_supported:
        return Text("✓ Supported", style="green")

    cell = Text("✗ Not Supported", style="red")
    if outcome.is_failed:
        cell.append("\n")
        cell.append(f"Error: {outcome.reason}", style="dark_orange")
    return cell


def _header(title: str, column: SortColumn, active: SortColumn, direction: SortDirection) -> str:
    if column != active:
        return title
    return f"{title} {'↓' if direction == SortDirection.ASC else '↑'}"


def build_table(
    snapshot: Iterable[ChainResult],
    capabilities: Sequence[CapabilityId],
    column: SortColumn = CHAIN_ID_COLUMN,
    direction: SortDirection = SortDirection.ASC,
    title: Optional[str] = None,
) -> Table:
    """Sort the snapshot and render one row per chain."""
    direction = SortDirection(direction)
    table = Table(title=title, header_style="bold", expand=False)
    table.add_column(_header("Name", NAME_COLUMN, column, direction))
    table.add_column(_header("Chain ID", CHAIN_ID_COLUMN, column, direction), justify="right")
    for cap in capabilities:
        table.add_column(_header(cap.label, cap, column, direction))

    for result in order(snapshot, column, direction):
        table.add_row(
            result.chain.name,
            str(result.chain.id),
            *(outcome_cell(result.outcome(cap)) for cap in capabilities),
        )
    return table


def summary_line(store: ResultStore) -> str:
    """One line per capability: supported / not supported / failed / pending."""
    lines = []
    for cap, counts in store.summary().items():
        lines.append(
            f"{cap.label}: {counts['supported']} supported | "
            f"{counts['unsupported']} not supported | "
            f"{counts['failed']} failed | "
            f"{counts['pending']} pending"
        )
    return "\n".join(lines)
