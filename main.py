"""
ChainCaps - Unified CLI Entrypoint
==================================
Probe EVM RPC endpoints for fee-market and account-authorization support.

    python main.py scan
    python main.py scan --sort eip7702 --desc
    python main.py chains --testnets
"""

from chaincaps.cli import main


if __name__ == "__main__":
    main()
