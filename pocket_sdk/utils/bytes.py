from __future__ import annotations

from typing import Tuple, Union

BytesLike = Union[bytes, bytearray, memoryview]

# BCS caps sequence lengths at u32
MAX_ULEB128_VALUE = 2**32 - 1


def ensure_bytes(data: Union[BytesLike, str]) -> bytes:
    """
    Ensure input is bytes.

    Accepts:
      - bytes / bytearray / memoryview  -> bytes(data)
      - str: treated as hex; optional '0x' prefix; even-length enforced

    Raises:
      ValueError on invalid hex strings.
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return from_hex(data)
    raise TypeError(f"Unsupported type for ensure_bytes: {type(data)!r}")


def to_hex(b: BytesLike, prefix: bool = True) -> str:
    """
    Bytes -> hex string (lowercase). Prefix with '0x' by default.
    """
    s = bytes(b).hex()
    return f"0x{s}" if prefix else s


def from_hex(s: str) -> bytes:
    """
    Hex string (optionally '0x' prefixed) -> bytes.

    Enforces even-length (nibbles must pair to bytes) and lowercase/uppercase agnostic.
    """
    if not isinstance(s, str):
        raise TypeError("from_hex expects a string")
    if s.startswith(("0x", "0X")):
        s = s[2:]
    if len(s) % 2 != 0:
        raise ValueError("hex string must have even length")
    try:
        return bytes.fromhex(s)
    except ValueError as e:
        raise ValueError(f"invalid hex string: {e}") from e


def utf8_hex(text: str) -> str:
    """0x-hex of the UTF-8 bytes of *text* (how view calls take `vector<u8>` strings)."""
    return to_hex(text.encode("utf-8"))


# --- ULEB128 ------------------------------------------------------------------


def uleb128_encode(n: int) -> bytes:
    """
    Encode an unsigned integer as ULEB128 (BCS length/variant prefix).

    - Little-endian groups of 7 bits; MSB continuation bit.

    Example:
        0x00 -> b'\\x00'
        0x7f -> b'\\x7f'
        0x80 -> b'\\x80\\x01'
    """
    if n < 0 or n > MAX_ULEB128_VALUE:
        raise ValueError(f"uleb128 value out of range: {n}")
    out = bytearray()
    while True:
        to_write = n & 0x7F
        n >>= 7
        if n:
            out.append(to_write | 0x80)
        else:
            out.append(to_write)
            break
    return bytes(out)


def uleb128_decode(b: BytesLike, *, offset: int = 0) -> Tuple[int, int]:
    """
    Decode a ULEB128 value from bytes starting at `offset`.

    Returns:
        (value, length_consumed)

    Raises:
        ValueError if the value is truncated, exceeds u32 or is not minimally encoded.
    """
    result = 0
    shift = 0
    view = memoryview(b)[offset:]

    for consumed, byte in enumerate(view, start=1):
        result |= (byte & 0x7F) << shift
        if (byte & 0x80) == 0:
            if consumed > 1 and byte == 0:
                raise ValueError("non-canonical uleb128 (trailing zero byte)")
            if result > MAX_ULEB128_VALUE:
                raise ValueError("uleb128 exceeds u32")
            return result, consumed
        shift += 7
        if shift >= 35:
            raise ValueError("uleb128 exceeds u32")
    raise ValueError("truncated uleb128 (input ended before termination byte)")


__all__ = [
    "BytesLike",
    "MAX_ULEB128_VALUE",
    "ensure_bytes",
    "to_hex",
    "from_hex",
    "utf8_hex",
    "uleb128_encode",
    "uleb128_decode",
]
