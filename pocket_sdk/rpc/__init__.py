"""
pocket_sdk.rpc
--------------

REST access to an Aptos node.

    from pocket_sdk.rpc import LedgerClient
    ledger = LedgerClient("https://fullnode.testnet.aptoslabs.com/v1")
"""

from __future__ import annotations

from .http import LedgerClient

__all__ = ["LedgerClient"]
