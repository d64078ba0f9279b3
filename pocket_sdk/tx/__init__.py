"""
pocket_sdk.tx
=============

Transaction helpers: build, encode, and send.

Submodules
----------
- params: Typed intents, one per program operation.
- build : `TransactionBuilder` turning intents into executors.
- encode: BCS layouts of raw/signed transactions, signing message and hash.
- send  : `TransactionSigner` (simulate, sign, submit, wait) and `LedgerService`.
"""

from . import build, encode, params, send

__all__ = ["build", "encode", "params", "send"]
