"""
Core chain types for the pocket SDK.

- `AccountAddress`: 32-byte account address with hex parsing/formatting.
- `TypeTag` / `StructTag`: Move type identifiers, parsed from their canonical
  `address::module::name<...>` string form.
- `ModuleId`, `EntryFunctionPayload`, `ViewPayload`: the closed set of payload
  shapes the builder can produce.
- `RawTransaction` / `SignedTransaction`: the envelope the signer fills in.

Nothing here performs network I/O; BCS layouts live in `pocket_sdk.tx.encode`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from ..errors import TypeTagParseError
from ..utils.bytes import utf8_hex

ADDRESS_LENGTH = 32

_HEX_ADDR_RE = re.compile(r"^0x[0-9a-fA-F]{1,64}$")
_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


# --- Addresses ---------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class AccountAddress:
    data: bytes

    def __post_init__(self) -> None:
        if len(self.data) != ADDRESS_LENGTH:
            raise ValueError(f"address must be {ADDRESS_LENGTH} bytes, got {len(self.data)}")

    @staticmethod
    def from_hex(value: Union[str, "AccountAddress"]) -> "AccountAddress":
        """Parse `0x`-prefixed hex; short forms like `0x1` are left-padded."""
        if isinstance(value, AccountAddress):
            return value
        s = value.strip()
        if not s.startswith(("0x", "0X")):
            s = "0x" + s
        if not _HEX_ADDR_RE.match(s):
            raise ValueError(f"invalid account address: {value!r}")
        return AccountAddress(bytes.fromhex(s[2:].rjust(ADDRESS_LENGTH * 2, "0")))

    @staticmethod
    def is_valid(value: str) -> bool:
        try:
            AccountAddress.from_hex(value)
            return True
        except ValueError:
            return False

    def hex(self) -> str:
        """Long form: `0x` + 64 hex chars."""
        return "0x" + self.data.hex()

    def short_hex(self) -> str:
        """Leading zeros stripped, e.g. `0x1`."""
        return "0x" + (self.data.hex().lstrip("0") or "0")

    def __str__(self) -> str:
        return self.hex()


AddressLike = Union[str, AccountAddress]


# --- Type tags ---------------------------------------------------------------

PRIMITIVE_TYPE_TAGS = ("bool", "u8", "u16", "u32", "u64", "u128", "u256", "address", "signer")


@dataclass(slots=True, frozen=True)
class StructTag:
    address: AccountAddress
    module: str
    name: str
    type_args: Tuple["TypeTag", ...] = ()

    def __str__(self) -> str:
        base = f"{self.address.short_hex()}::{self.module}::{self.name}"
        if self.type_args:
            base += "<" + ", ".join(str(t) for t in self.type_args) + ">"
        return base


@dataclass(slots=True, frozen=True)
class TypeTag:
    """A Move type. Exactly one of `primitive`, `vector_of`, `struct` is set."""

    primitive: Optional[str] = None
    vector_of: Optional["TypeTag"] = None
    struct: Optional[StructTag] = None

    @staticmethod
    def parse(type_str: str) -> "TypeTag":
        """
        Parse `0x1::aptos_coin::AptosCoin`, `vector<u8>`,
        `0x1::coin::CoinStore<0x1::aptos_coin::AptosCoin>` and primitives.
        """
        if not isinstance(type_str, str):
            raise TypeTagParseError(f"type tag must be a string, got {type(type_str).__name__}")
        parser = _TypeTagParser(type_str)
        tag = parser.parse_type()
        parser.expect_end()
        return tag

    def __str__(self) -> str:
        if self.primitive is not None:
            return self.primitive
        if self.vector_of is not None:
            return f"vector<{self.vector_of}>"
        return str(self.struct)


class _TypeTagParser:
    """Recursive descent over the canonical type string."""

    _TOKEN_RE = re.compile(r"\s*(::|<|>|,|[A-Za-z0-9_]+)")

    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens: List[str] = []
        pos = 0
        stripped = text.rstrip()
        while pos < len(stripped):
            m = self._TOKEN_RE.match(stripped, pos)
            if not m:
                raise TypeTagParseError(f"unexpected character at {pos} in {text!r}")
            self.tokens.append(m.group(1))
            pos = m.end()
        if not self.tokens:
            raise TypeTagParseError("empty type tag")
        self.i = 0

    def _peek(self) -> Optional[str]:
        return self.tokens[self.i] if self.i < len(self.tokens) else None

    def _next(self) -> str:
        tok = self._peek()
        if tok is None:
            raise TypeTagParseError(f"unexpected end of type tag {self.text!r}")
        self.i += 1
        return tok

    def _expect(self, tok: str) -> None:
        got = self._next()
        if got != tok:
            raise TypeTagParseError(f"expected {tok!r}, got {got!r} in {self.text!r}")

    def expect_end(self) -> None:
        if self._peek() is not None:
            raise TypeTagParseError(f"trailing tokens in type tag {self.text!r}")

    def parse_type(self) -> TypeTag:
        head = self._next()
        if head in PRIMITIVE_TYPE_TAGS:
            return TypeTag(primitive=head)
        if head == "vector":
            self._expect("<")
            inner = self.parse_type()
            self._expect(">")
            return TypeTag(vector_of=inner)
        # struct: address::module::name[<args>]
        try:
            address = AccountAddress.from_hex(head)
        except ValueError as e:
            raise TypeTagParseError(f"invalid address {head!r} in {self.text!r}") from e
        if not head.startswith(("0x", "0X")):
            raise TypeTagParseError(f"struct address must be 0x-prefixed in {self.text!r}")
        self._expect("::")
        module = self._ident()
        self._expect("::")
        name = self._ident()
        args: List[TypeTag] = []
        if self._peek() == "<":
            self._next()
            args.append(self.parse_type())
            while self._peek() == ",":
                self._next()
                args.append(self.parse_type())
            self._expect(">")
        return TypeTag(struct=StructTag(address, module, name, tuple(args)))

    def _ident(self) -> str:
        tok = self._next()
        if not _IDENT_RE.match(tok):
            raise TypeTagParseError(f"invalid identifier {tok!r} in {self.text!r}")
        return tok


# --- Payloads ----------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class ModuleId:
    address: AccountAddress
    name: str

    def __str__(self) -> str:
        return f"{self.address.hex()}::{self.name}"


@dataclass(slots=True, frozen=True)
class EntryFunctionPayload:
    """A mutating call: BCS-encoded arguments, executed through a signed transaction."""

    module: ModuleId
    function: str
    type_args: Tuple[TypeTag, ...] = ()
    args: Tuple[bytes, ...] = ()

    @property
    def function_id(self) -> str:
        return f"{self.module}::{self.function}"


@dataclass(slots=True, frozen=True)
class ViewPayload:
    """A read-only call: JSON arguments in their canonical string form."""

    function: str
    arguments: Tuple[Any, ...] = ()
    type_arguments: Tuple[str, ...] = ()

    def to_json(self) -> Dict[str, Any]:
        return {
            "function": self.function,
            "type_arguments": list(self.type_arguments),
            "arguments": [list(a) if isinstance(a, tuple) else a for a in self.arguments],
        }

    @staticmethod
    def string_arg(text: str) -> str:
        return utf8_hex(text)


Payload = Union[EntryFunctionPayload, ViewPayload]


# --- Transactions ------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class RawTransaction:
    sender: AccountAddress
    sequence_number: int
    payload: EntryFunctionPayload
    max_gas_amount: int
    gas_unit_price: int
    expiration_timestamp_secs: int
    chain_id: int


@dataclass(slots=True, frozen=True)
class SignedTransaction:
    raw: RawTransaction
    public_key: bytes
    signature: bytes = field(repr=False)


__all__ = [
    "ADDRESS_LENGTH",
    "AccountAddress",
    "AddressLike",
    "PRIMITIVE_TYPE_TAGS",
    "StructTag",
    "TypeTag",
    "ModuleId",
    "EntryFunctionPayload",
    "ViewPayload",
    "Payload",
    "RawTransaction",
    "SignedTransaction",
]
