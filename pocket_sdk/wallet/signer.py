"""
pocket_sdk.wallet.signer
========================

Ed25519 accounts for signing Aptos transactions.

Key features
------------
- Fresh key generation or import from a 32-byte private key (hex)
- Authentication-key address derivation: `sha3_256(public_key || 0x00)`
- Resource-account derivation: `sha3_256(source || seed || 0xFF)`

Notes
-----
Crypto is delegated to the `cryptography` package; this module only deals
with raw key bytes and the chain's address scheme.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey, Ed25519PublicKey)

from ..types.core import AccountAddress, AddressLike
from ..utils.bytes import BytesLike, ensure_bytes, to_hex
from ..utils.hash import sha3_256

__all__ = [
    "ED25519_SCHEME",
    "RESOURCE_ACCOUNT_SCHEME",
    "Account",
    "address_from_public_key",
    "derive_resource_account_address",
    "verify_signature",
]

# Authentication-key scheme suffixes
ED25519_SCHEME = b"\x00"
RESOURCE_ACCOUNT_SCHEME = b"\xff"

PRIVATE_KEY_LENGTH = 32


def address_from_public_key(public_key: BytesLike) -> AccountAddress:
    return AccountAddress(sha3_256(bytes(public_key) + ED25519_SCHEME))


def derive_resource_account_address(source: AddressLike, seed: Union[str, bytes]) -> AccountAddress:
    """
    Address of the resource account `source` creates with `seed`.

    String seeds are taken as UTF-8, the same bytes the
    `create_resource_account_and_fund` entry function receives.
    """
    seed_bytes = seed.encode("utf-8") if isinstance(seed, str) else bytes(seed)
    src = AccountAddress.from_hex(source)
    return AccountAddress(sha3_256(src.data + seed_bytes + RESOURCE_ACCOUNT_SCHEME))


@dataclass(frozen=True)
class Account:
    """
    An Ed25519 key pair and the account address it controls.
    """

    private_key: Ed25519PrivateKey = field(repr=False)

    @classmethod
    def generate(cls) -> "Account":
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def from_private_key(cls, key: Union[BytesLike, str]) -> "Account":
        raw = ensure_bytes(key)
        if len(raw) != PRIVATE_KEY_LENGTH:
            raise ValueError(f"ed25519 private key must be {PRIVATE_KEY_LENGTH} bytes, got {len(raw)}")
        return cls(Ed25519PrivateKey.from_private_bytes(raw))

    @classmethod
    def from_private_key_hex(cls, key_hex: str) -> "Account":
        return cls.from_private_key(key_hex)

    # ---- keys / address ----

    def private_key_bytes(self) -> bytes:
        return self.private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def private_key_hex(self) -> str:
        return to_hex(self.private_key_bytes())

    def public_key_bytes(self) -> bytes:
        return self.private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    def address(self) -> AccountAddress:
        return address_from_public_key(self.public_key_bytes())

    # ---- signatures ----

    def sign(self, message: bytes) -> bytes:
        return self.private_key.sign(bytes(message))

    def verify(self, message: bytes, signature: bytes) -> bool:
        return verify_signature(self.public_key_bytes(), message, signature)


def verify_signature(public_key: BytesLike, message: bytes, signature: bytes) -> bool:
    try:
        Ed25519PublicKey.from_public_bytes(bytes(public_key)).verify(bytes(signature), bytes(message))
    except (InvalidSignature, ValueError):
        return False
    return True
