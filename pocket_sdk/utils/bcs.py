"""
Canonical BCS (Binary Canonical Serialization) encoder/decoder.

Goals
-----
- Produce byte-for-byte canonical encodings for the argument shapes the
  pocket program's entry functions accept, plus the transaction envelope.
- Encoders are pure functions `value -> bytes`; no shared state.

Supported shapes
----------------
- u8, u16, u32, u64, u128, u256: little-endian, fixed width
- bool: single byte 0x00 / 0x01
- str: ULEB128 byte length + UTF-8 bytes
- bytes: ULEB128 length + raw bytes
- fixed bytes (addresses): raw bytes, no prefix
- sequences: ULEB128 element count + concatenated element encodings

The only encode-side failure is an out-of-range value (`EncodingError`).
Decoding malformed or truncated input raises `DecodingError`.

API
---
- encode_u8 .. encode_u256, encode_bool, encode_str, encode_bytes,
  encode_fixed_bytes, encode_uleb128, encode_sequence, encode_u64_vector
- Deserializer(data).u64() / .str() / .sequence(Deserializer.u64) / ...
"""

from __future__ import annotations

from typing import Callable, Iterable, List, TypeVar

from ..errors import DecodingError, EncodingError
from .bytes import BytesLike, uleb128_decode, uleb128_encode

T = TypeVar("T")

__all__ = [
    "encode_uint",
    "encode_u8",
    "encode_u16",
    "encode_u32",
    "encode_u64",
    "encode_u128",
    "encode_u256",
    "encode_bool",
    "encode_uleb128",
    "encode_str",
    "encode_bytes",
    "encode_fixed_bytes",
    "encode_sequence",
    "encode_u64_vector",
    "Deserializer",
]


# -----------------------------------------------------------------------------
# Encoders
# -----------------------------------------------------------------------------


def encode_uint(value: int, bits: int) -> bytes:
    """Fixed-width little-endian unsigned integer of `bits` bits."""
    # bool is an int subclass; never let True/False pass as 1/0
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"value out of range: expected u{bits} integer, got {type(value).__name__}")
    if value < 0 or value >= (1 << bits):
        raise EncodingError(f"value out of range: {value} does not fit in u{bits}")
    return value.to_bytes(bits // 8, "little")


def encode_u8(value: int) -> bytes:
    return encode_uint(value, 8)


def encode_u16(value: int) -> bytes:
    return encode_uint(value, 16)


def encode_u32(value: int) -> bytes:
    return encode_uint(value, 32)


def encode_u64(value: int) -> bytes:
    return encode_uint(value, 64)


def encode_u128(value: int) -> bytes:
    return encode_uint(value, 128)


def encode_u256(value: int) -> bytes:
    return encode_uint(value, 256)


def encode_bool(value: bool) -> bytes:
    if not isinstance(value, bool):
        raise EncodingError(f"value out of range: expected bool, got {type(value).__name__}")
    return b"\x01" if value else b"\x00"


def encode_uleb128(value: int) -> bytes:
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"value out of range: expected uleb128 integer, got {type(value).__name__}")
    try:
        return uleb128_encode(value)
    except ValueError as e:
        raise EncodingError(f"value out of range: {e}") from e


def encode_bytes(value: BytesLike) -> bytes:
    raw = bytes(value)
    return encode_uleb128(len(raw)) + raw


def encode_str(value: str) -> bytes:
    return encode_bytes(value.encode("utf-8"))


def encode_fixed_bytes(value: BytesLike, length: int) -> bytes:
    raw = bytes(value)
    if len(raw) != length:
        raise EncodingError(f"value out of range: expected {length} bytes, got {len(raw)}")
    return raw


def encode_sequence(items: Iterable[T], encoder: Callable[[T], bytes]) -> bytes:
    """Length prefix followed by each element's encoding."""
    parts = [encoder(item) for item in items]
    return encode_uleb128(len(parts)) + b"".join(parts)


def encode_u64_vector(values: Iterable[int]) -> bytes:
    """`vector<u64>`; the shape of every pocket condition argument."""
    return encode_sequence(values, encode_u64)


# -----------------------------------------------------------------------------
# Decoder
# -----------------------------------------------------------------------------


class Deserializer:
    """Cursor over a BCS buffer. Every read either consumes exactly or raises."""

    __slots__ = ("_buf", "_pos")

    def __init__(self, data: BytesLike) -> None:
        self._buf = bytes(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._pos

    def _take(self, n: int) -> bytes:
        if n > self.remaining:
            raise DecodingError(f"truncated input: need {n} bytes, have {self.remaining}")
        out = self._buf[self._pos : self._pos + n]
        self._pos += n
        return out

    def uint(self, bits: int) -> int:
        return int.from_bytes(self._take(bits // 8), "little")

    def u8(self) -> int:
        return self.uint(8)

    def u16(self) -> int:
        return self.uint(16)

    def u32(self) -> int:
        return self.uint(32)

    def u64(self) -> int:
        return self.uint(64)

    def u128(self) -> int:
        return self.uint(128)

    def u256(self) -> int:
        return self.uint(256)

    def bool(self) -> bool:
        b = self.u8()
        if b not in (0, 1):
            raise DecodingError(f"invalid bool byte: {b:#x}")
        return b == 1

    def uleb128(self) -> int:
        try:
            value, used = uleb128_decode(self._buf, offset=self._pos)
        except ValueError as e:
            raise DecodingError(str(e)) from e
        self._pos += used
        return value

    def bytes(self) -> bytes:
        return self._take(self.uleb128())

    def fixed_bytes(self, length: int) -> bytes:
        return self._take(length)

    def str(self) -> str:
        raw = self.bytes()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodingError(f"invalid utf-8 string: {e}") from e

    def sequence(self, reader: Callable[["Deserializer"], T]) -> List[T]:
        return [reader(self) for _ in range(self.uleb128())]

    def finish(self) -> None:
        """Assert the buffer was consumed exactly."""
        if self.remaining:
            raise DecodingError(f"{self.remaining} trailing bytes after decode")
