"""
CLI Unit Tests
==============
Typer commands with a temporary registry and injected checks.
"""

import json

import pytest
from rich.console import Console
from typer.testing import CliRunner

from chaincaps import cli
from chaincaps.shared.models import CapabilityId, Outcome


runner = CliRunner()


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Keep table cells on one line."""
    monkeypatch.setattr(cli, "console", Console(width=200))


@pytest.fixture
def registry_file(tmp_path):
    path = tmp_path / "chains.json"
    path.write_text(json.dumps({"chains": [
        {"id": 10, "name": "OP Mainnet", "rpc": "https://op.example"},
        {"id": 1, "name": "Ethereum", "rpc": "https://eth.example"},
        {"id": 84532, "name": "Base Sepolia", "rpc": "https://sepolia.base.example", "testnet": True},
    ]}))
    return str(path)


@pytest.fixture
def fake_checks(monkeypatch):
    """Replace real RPC checks: chain 1 supports everything, others nothing."""
    def build(capabilities=None, timeout_ms=None, transport=None):
        async def check(chain):
            return Outcome.supported() if chain.id == 1 else Outcome.failed("Timeout after 2000ms")
        return {cap: check for cap in (capabilities or list(CapabilityId))}

    monkeypatch.setattr(cli, "build_checks", build)


def test_chains_lists_registry(registry_file):
    result = runner.invoke(cli.app, ["chains", "--registry", registry_file])

    assert result.exit_code == 0
    assert "OP Mainnet" in result.output
    assert "Ethereum" in result.output
    assert "Base Sepolia" not in result.output


def test_chains_with_testnets(registry_file):
    result = runner.invoke(cli.app, ["chains", "--registry", registry_file, "--testnets"])

    assert result.exit_code == 0
    assert "Base Sepolia" in result.output


def test_missing_registry_exits_1(tmp_path):
    result = runner.invoke(cli.app, ["chains", "--registry", str(tmp_path / "missing.json")])

    assert result.exit_code == 1


def test_scan_json_sorted_by_capability(registry_file, fake_checks):
    result = runner.invoke(cli.app, [
        "scan", "--registry", registry_file, "--json", "--sort", "eip7702",
    ])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [row["chain"]["id"] for row in payload] == [1, 10]
    assert payload[0]["capabilities"]["eip7702"]["status"] == "supported"
    assert payload[1]["capabilities"]["eip1559"] == {
        "status": "failed",
        "reason": "Timeout after 2000ms",
        "latency_ms": 0.0,
    }


def test_scan_capability_and_chain_filters(registry_file, fake_checks):
    result = runner.invoke(cli.app, [
        "scan", "--registry", registry_file, "--json", "-c", "10", "--capability", "eip1559",
    ])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert len(payload) == 1
    assert list(payload[0]["capabilities"]) == ["eip1559"]


def test_scan_table_output(registry_file, fake_checks):
    result = runner.invoke(cli.app, ["scan", "--registry", registry_file, "--no-live", "--desc"])

    assert result.exit_code == 0
    assert "✓ Supported" in result.output
    assert "Error: Timeout after 2000ms" in result.output
    assert "EIP-1559: 1 supported" in result.output


def test_scan_rejects_unknown_sort(registry_file, fake_checks):
    result = runner.invoke(cli.app, ["scan", "--registry", registry_file, "--sort", "gasPrice"])

    assert result.exit_code == 1


def test_scan_rejects_sort_by_unselected_capability(registry_file, fake_checks):
    result = runner.invoke(cli.app, [
        "scan", "--registry", registry_file, "--capability", "eip1559", "--sort", "eip7702", "--no-live",
    ])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Cannot sort by EIP-7702" in result.output


def test_main_enables_system_collation(monkeypatch):
    calls = []
    monkeypatch.setattr(cli.locale, "setlocale", lambda category, value: calls.append((category, value)))
    monkeypatch.setattr(cli, "app", lambda: None)

    cli.main()

    assert calls == [(cli.locale.LC_COLLATE, "")]


def test_main_survives_missing_locale(monkeypatch):
    def broken(category, value):
        raise cli.locale.Error("unsupported locale setting")

    ran = []
    monkeypatch.setattr(cli.locale, "setlocale", broken)
    monkeypatch.setattr(cli, "app", lambda: ran.append(True))

    cli.main()

    assert ran == [True]
