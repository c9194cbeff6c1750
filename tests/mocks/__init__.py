"""
ChainCaps Test Mocks
====================
Reusable mock classes for isolated testing.
"""

from tests.mocks.mock_rpc import MockRpcNode

__all__ = [
    "MockRpcNode",
]
