"""
ChainCaps CLI
=============
Command-line interface using Typer + Rich.

Commands:
    chaincaps scan
    chaincaps scan --sort eip7702 --desc
    chaincaps scan -c 1 -c 8453 --capability eip1559 --json
    chaincaps chains --testnets
"""

import asyncio
import json
import locale
from typing import List, Optional

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel

from config.settings import Settings
from chaincaps.interface.table import FALSE_POSITIVE_WARNING, build_table, summary_line
from chaincaps.probing.checks import build_checks
from chaincaps.probing.engine import ProbeEngine
from chaincaps.probing.result_store import ResultStore
from chaincaps.probing.sorter import SortDirection, order, parse_sort_column
from chaincaps.shared.infrastructure.chain_registry import RegistryError, filter_registry, load_registry
from chaincaps.shared.models import CapabilityId
from chaincaps.shared.system.logging import Logger


app = typer.Typer(
    name="chaincaps",
    help="ChainCaps - EIP-1559 / EIP-7702 support scanner for EVM RPC endpoints",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


def _fail(message: str) -> None:
    console.print(f"[bold red]❌ {message}[/bold red]")
    raise typer.Exit(1)


def _parse_capabilities(values: Optional[List[str]]) -> List[CapabilityId]:
    if not values:
        return list(CapabilityId)
    selected = []
    for value in values:
        column = parse_sort_column(value)
        if not isinstance(column, CapabilityId):
            raise ValueError(f"Unknown capability: {value!r}")
        if column not in selected:
            selected.append(column)
    return selected


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND: SCAN
# ═══════════════════════════════════════════════════════════════════════════════

@app.command()
def scan(
    registry: Optional[str] = typer.Option(None, "--registry", help="Chain registry JSON file"),
    testnets: bool = typer.Option(Settings.INCLUDE_TESTNETS, "--testnets/--no-testnets", help="Include testnets"),
    chain: Optional[List[int]] = typer.Option(None, "--chain", "-c", help="Only probe this chain id (repeatable)"),
    capability: Optional[List[str]] = typer.Option(
        None, "--capability", help="eip1559 / eip7702 (repeatable, default: all)"
    ),
    sort: str = typer.Option("chainId", "--sort", help="name | chainId | eip1559 | eip7702"),
    desc: bool = typer.Option(False, "--desc", help="Sort descending"),
    timeout_ms: int = typer.Option(
        Settings.RPC_TIMEOUT_MS, "--timeout-ms", help="Per-request RPC timeout", min=100, max=60000
    ),
    max_concurrency: Optional[int] = typer.Option(
        Settings.MAX_CONCURRENT_PROBES, "--max-concurrency", help="Cap probes in flight (default: unbounded)", min=1
    ),
    live: bool = typer.Option(True, "--live/--no-live", help="Redraw the table while probes run"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to console"),
):
    """
    Probe every chain's RPC endpoint for EIP-1559 and EIP-7702 support.

    \b
    Examples:
        chaincaps scan
        chaincaps scan --sort eip7702
        chaincaps scan -c 1 -c 10 --json
    """
    Logger.set_silent(not verbose)
    if verbose:
        Settings.SILENT_MODE = False

    try:
        column = parse_sort_column(sort)
        capabilities = _parse_capabilities(capability)
        if isinstance(column, CapabilityId) and column not in capabilities:
            raise ValueError(f"Cannot sort by {column.label}: it is not among the probed capabilities")
        chains = filter_registry(load_registry(registry, include_testnets=testnets), chain)
    except (RegistryError, ValueError) as e:
        _fail(str(e))

    direction = SortDirection.DESC if desc else SortDirection.ASC
    checks = build_checks(capabilities, timeout_ms=timeout_ms)
    store = ResultStore()
    show_live = live and not as_json

    if not as_json:
        console.print(Panel.fit(
            f"[bold cyan]🔍 Capability Scan[/bold cyan]\n"
            f"Chains: {len(chains)} | Timeout: {timeout_ms}ms | "
            f"Concurrency: {max_concurrency or 'unbounded'}\n"
            f"[dark_orange]{FALSE_POSITIVE_WARNING}[/dark_orange]",
            border_style="cyan",
        ))

    def render():
        return build_table(store.snapshot(), capabilities, column, direction)

    async def run_scan():
        if show_live:
            with Live(console=console, refresh_per_second=Settings.LIVE_REFRESH_PER_SECOND, transient=True) as view:
                engine = ProbeEngine(
                    store,
                    max_concurrency=max_concurrency,
                    on_result=lambda *_: view.update(render()),
                )
                done = engine.start(chains, checks)
                view.update(render())
                await done
        else:
            await ProbeEngine(store, max_concurrency=max_concurrency).run(chains, checks)

    try:
        asyncio.run(run_scan())
    except KeyboardInterrupt:
        console.print("\n[yellow]Scan interrupted.[/yellow]")
        raise typer.Exit(130)

    if as_json:
        payload = [result.to_dict() for result in order(store.snapshot(), column, direction)]
        typer.echo(json.dumps(payload, indent=2))
        return

    console.print(render())
    console.print(f"\n[dim]{summary_line(store)}[/dim]\n")


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND: CHAINS
# ═══════════════════════════════════════════════════════════════════════════════

@app.command()
def chains(
    registry: Optional[str] = typer.Option(None, "--registry", help="Chain registry JSON file"),
    testnets: bool = typer.Option(Settings.INCLUDE_TESTNETS, "--testnets/--no-testnets", help="Include testnets"),
):
    """List the chains a scan would probe."""
    from rich.table import Table

    try:
        descriptors = load_registry(registry, include_testnets=testnets)
    except RegistryError as e:
        _fail(str(e))

    table = Table(header_style="bold")
    table.add_column("Name")
    table.add_column("Chain ID", justify="right")
    table.add_column("RPC")
    for descriptor in descriptors:
        name = f"{descriptor.name} [dim](testnet)[/dim]" if descriptor.testnet else descriptor.name
        table.add_row(name, str(descriptor.id), descriptor.rpc_endpoint)

    console.print(table)
    console.print(f"[dim]{len(descriptors)} chains[/dim]")


def main():
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        Logger.warning("[CLI] System locale unavailable, names sort by code point")
    app()


if __name__ == "__main__":
    main()
