"""
pocket_sdk.wallet
=================

Ed25519 accounts and address derivation.
"""

from .signer import (Account, address_from_public_key,
                     derive_resource_account_address, verify_signature)

__all__ = [
    "Account",
    "address_from_public_key",
    "derive_resource_account_address",
    "verify_signature",
]
