"""
Utility helpers for the pocket SDK.

Re-exports:
- bytes: hex helpers and ULEB128 encode/decode
- hash: SHA3-256 and Aptos domain salts
- bcs: canonical BCS encoders and the `Deserializer` cursor
"""

from . import bcs
from .bytes import (ensure_bytes, from_hex, to_hex, uleb128_decode,
                    uleb128_encode, utf8_hex)
from .hash import domain_salt, sha3_256, sha3_256_hex

__all__ = [
    "bcs",
    # bytes
    "ensure_bytes",
    "from_hex",
    "to_hex",
    "uleb128_decode",
    "uleb128_encode",
    "utf8_hex",
    # hash
    "domain_salt",
    "sha3_256",
    "sha3_256_hex",
]
