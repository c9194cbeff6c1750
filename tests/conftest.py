"""
ChainCaps Test Configuration
============================
Shared fixtures and pytest markers for the test suite.
"""

import pytest
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# ============================================================================
# PYTEST MARKERS
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "network: marks tests that require network access"
    )


# ============================================================================
# SHARED FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """No console output and no log files during tests."""
    monkeypatch.setattr("config.settings.Settings.SILENT_MODE", True)
    monkeypatch.setattr("config.settings.Settings.LOG_TO_FILE", False)
    yield


@pytest.fixture
def chain():
    """A single test chain."""
    from chaincaps.shared.models import ChainDescriptor
    return ChainDescriptor(id=8453, name="Base", rpc_endpoint="https://rpc.test/8453")


@pytest.fixture
def sample_chains():
    """Small registry in deliberately unsorted order."""
    from chaincaps.shared.models import ChainDescriptor
    return [
        ChainDescriptor(id=137, name="Polygon", rpc_endpoint="https://rpc.test/137"),
        ChainDescriptor(id=1, name="Ethereum", rpc_endpoint="https://rpc.test/1"),
        ChainDescriptor(id=42161, name="arbitrum One", rpc_endpoint="https://rpc.test/42161"),
        ChainDescriptor(id=10, name="OP Mainnet", rpc_endpoint="https://rpc.test/10"),
    ]


@pytest.fixture
def mock_node():
    """Fresh fake JSON-RPC node."""
    from tests.mocks import MockRpcNode
    return MockRpcNode()
