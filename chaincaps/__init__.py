"""
ChainCaps
=========
Probes EVM chain RPC endpoints for fee-market (EIP-1559) and
account-authorization (EIP-7702) support.
"""

__version__ = "0.1.0"
