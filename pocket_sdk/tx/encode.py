"""
pocket_sdk.tx.encode
====================

Canonical BCS layouts for Aptos transactions.

This module provides:
- `encode_type_tag(tag)` / `decode_type_tag(de)`
- `encode_entry_function(payload)` → `TransactionPayload::EntryFunction` bytes
- `encode_raw_transaction(raw)` / `decode_raw_transaction(data)`
- `signing_message(raw)` → bytes to sign (domain salt + BCS(raw))
- `encode_signed_transaction(signed)` / `decode_signed_transaction(data)`
- `transaction_hash(signed_bytes)` → `0x`-hex id the ledger reports

Design notes
------------
* `RawTransaction` layout: sender(32) | sequence_number u64 | payload |
  max_gas_amount u64 | gas_unit_price u64 | expiration_timestamp_secs u64 |
  chain_id u8.
* Only the EntryFunction payload variant (index 2) is produced; script and
  multisig payloads are rejected on decode.
* The only authenticator produced is single-key Ed25519 (variant 0):
  ULEB128-prefixed 32-byte public key then 64-byte signature.
"""

from __future__ import annotations

from typing import Dict, Union

from ..errors import DecodingError
from ..types.core import (ADDRESS_LENGTH, AccountAddress,
                          EntryFunctionPayload, ModuleId, RawTransaction,
                          SignedTransaction, StructTag, TypeTag)
from ..utils import bcs
from ..utils.bytes import BytesLike, to_hex
from ..utils.hash import domain_salt, sha3_256

# TypeTag enum variants, in declaration order on-chain
_TYPE_TAG_VARIANTS: Dict[str, int] = {
    "bool": 0,
    "u8": 1,
    "u64": 2,
    "u128": 3,
    "address": 4,
    "signer": 5,
    "vector": 6,
    "struct": 7,
    "u16": 8,
    "u32": 9,
    "u256": 10,
}
_TYPE_TAG_NAMES = {v: k for k, v in _TYPE_TAG_VARIANTS.items()}

PAYLOAD_ENTRY_FUNCTION = 2
AUTHENTICATOR_ED25519 = 0
# Transaction enum variant for a user transaction, hashed into the tx id
TRANSACTION_USER = 0

ED25519_PUBLIC_KEY_LENGTH = 32
ED25519_SIGNATURE_LENGTH = 64


# -----------------------------------------------------------------------------
# Type tags
# -----------------------------------------------------------------------------


def encode_address(address: AccountAddress) -> bytes:
    return bcs.encode_fixed_bytes(address.data, ADDRESS_LENGTH)


def encode_type_tag(tag: TypeTag) -> bytes:
    if tag.primitive is not None:
        return bcs.encode_uleb128(_TYPE_TAG_VARIANTS[tag.primitive])
    if tag.vector_of is not None:
        return bcs.encode_uleb128(_TYPE_TAG_VARIANTS["vector"]) + encode_type_tag(tag.vector_of)
    st = tag.struct
    assert st is not None
    return (
        bcs.encode_uleb128(_TYPE_TAG_VARIANTS["struct"])
        + encode_address(st.address)
        + bcs.encode_str(st.module)
        + bcs.encode_str(st.name)
        + bcs.encode_sequence(st.type_args, encode_type_tag)
    )


def decode_type_tag(de: bcs.Deserializer) -> TypeTag:
    variant = de.uleb128()
    name = _TYPE_TAG_NAMES.get(variant)
    if name is None:
        raise DecodingError(f"unknown type tag variant {variant}")
    if name == "vector":
        return TypeTag(vector_of=decode_type_tag(de))
    if name == "struct":
        address = AccountAddress(de.fixed_bytes(ADDRESS_LENGTH))
        module = de.str()
        struct_name = de.str()
        args = tuple(de.sequence(decode_type_tag))
        return TypeTag(struct=StructTag(address, module, struct_name, args))
    return TypeTag(primitive=name)


# -----------------------------------------------------------------------------
# Payload
# -----------------------------------------------------------------------------


def encode_entry_function(payload: EntryFunctionPayload) -> bytes:
    return (
        bcs.encode_uleb128(PAYLOAD_ENTRY_FUNCTION)
        + encode_address(payload.module.address)
        + bcs.encode_str(payload.module.name)
        + bcs.encode_str(payload.function)
        + bcs.encode_sequence(payload.type_args, encode_type_tag)
        + bcs.encode_sequence(payload.args, bcs.encode_bytes)
    )


def decode_entry_function(de: bcs.Deserializer) -> EntryFunctionPayload:
    variant = de.uleb128()
    if variant != PAYLOAD_ENTRY_FUNCTION:
        raise DecodingError(f"unsupported transaction payload variant {variant}")
    module = ModuleId(AccountAddress(de.fixed_bytes(ADDRESS_LENGTH)), de.str())
    function = de.str()
    type_args = tuple(de.sequence(decode_type_tag))
    args = tuple(de.sequence(bcs.Deserializer.bytes))
    return EntryFunctionPayload(module, function, type_args, args)


# -----------------------------------------------------------------------------
# Raw / signed transactions
# -----------------------------------------------------------------------------


def encode_raw_transaction(raw: RawTransaction) -> bytes:
    return (
        encode_address(raw.sender)
        + bcs.encode_u64(raw.sequence_number)
        + encode_entry_function(raw.payload)
        + bcs.encode_u64(raw.max_gas_amount)
        + bcs.encode_u64(raw.gas_unit_price)
        + bcs.encode_u64(raw.expiration_timestamp_secs)
        + bcs.encode_u8(raw.chain_id)
    )


def _read_raw_transaction(de: bcs.Deserializer) -> RawTransaction:
    return RawTransaction(
        sender=AccountAddress(de.fixed_bytes(ADDRESS_LENGTH)),
        sequence_number=de.u64(),
        payload=decode_entry_function(de),
        max_gas_amount=de.u64(),
        gas_unit_price=de.u64(),
        expiration_timestamp_secs=de.u64(),
        chain_id=de.u8(),
    )


def decode_raw_transaction(data: BytesLike) -> RawTransaction:
    de = bcs.Deserializer(data)
    raw = _read_raw_transaction(de)
    de.finish()
    return raw


def signing_message(raw: RawTransaction) -> bytes:
    """
    The exact byte string the account key signs.
    """
    return domain_salt("RawTransaction") + encode_raw_transaction(raw)


def encode_signed_transaction(signed: SignedTransaction) -> bytes:
    return (
        encode_raw_transaction(signed.raw)
        + bcs.encode_uleb128(AUTHENTICATOR_ED25519)
        + bcs.encode_bytes(bcs.encode_fixed_bytes(signed.public_key, ED25519_PUBLIC_KEY_LENGTH))
        + bcs.encode_bytes(bcs.encode_fixed_bytes(signed.signature, ED25519_SIGNATURE_LENGTH))
    )


def decode_signed_transaction(data: BytesLike) -> SignedTransaction:
    de = bcs.Deserializer(data)
    raw = _read_raw_transaction(de)
    variant = de.uleb128()
    if variant != AUTHENTICATOR_ED25519:
        raise DecodingError(f"unsupported authenticator variant {variant}")
    public_key = de.bytes()
    signature = de.bytes()
    de.finish()
    if len(public_key) != ED25519_PUBLIC_KEY_LENGTH or len(signature) != ED25519_SIGNATURE_LENGTH:
        raise DecodingError("malformed ed25519 authenticator")
    return SignedTransaction(raw=raw, public_key=public_key, signature=signature)


# -----------------------------------------------------------------------------
# Hash helpers
# -----------------------------------------------------------------------------


def transaction_hash(signed: Union[bytes, SignedTransaction]) -> str:
    """
    Ledger transaction id of a signed user transaction, `0x`-hex.
    """
    raw = signed if isinstance(signed, (bytes, bytearray)) else encode_signed_transaction(signed)
    return to_hex(sha3_256(domain_salt("Transaction") + bcs.encode_uleb128(TRANSACTION_USER) + bytes(raw)))


__all__ = [
    "encode_address",
    "encode_type_tag",
    "decode_type_tag",
    "encode_entry_function",
    "decode_entry_function",
    "encode_raw_transaction",
    "decode_raw_transaction",
    "signing_message",
    "encode_signed_transaction",
    "decode_signed_transaction",
    "transaction_hash",
]
