from __future__ import annotations

import hashlib
from functools import lru_cache

from .bytes import BytesLike, ensure_bytes, to_hex

# --- NIST SHA3 (FIPS-202) -----------------------------------------------------
# Aptos hashes addresses, signing messages and transaction ids with SHA3-256.


def sha3_256(data: BytesLike) -> bytes:
    """Return SHA3-256 digest of *data* (NIST version, not Keccak padding)."""
    h = hashlib.sha3_256()
    h.update(ensure_bytes(data))
    return h.digest()


def sha3_256_hex(data: BytesLike, *, prefix: bool = True) -> str:
    return to_hex(sha3_256(data), prefix=prefix)


@lru_cache(maxsize=None)
def domain_salt(name: str) -> bytes:
    """
    Hash prefix for a BCS-serialized type, e.g. `domain_salt("RawTransaction")`
    is `sha3_256(b"APTOS::RawTransaction")`.
    """
    return sha3_256(f"APTOS::{name}".encode("utf-8"))


__all__ = [
    "sha3_256",
    "sha3_256_hex",
    "domain_salt",
]
