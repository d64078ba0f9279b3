"""
Typed error classes for the pocket SDK.

Local validation errors (`EncodingError`, `TypeTagParseError`,
`ConfigurationError`) are raised before any network I/O. Remote failures
(`SimulationFailure`, `SubmissionFailure`) carry the ledger's `vm_status`
verbatim plus the parsed Move abort code, so callers can key off specific
codes. Everything derives from `PocketSdkError`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional, Tuple

__all__ = [
    "PocketSdkError",
    "EncodingError",
    "DecodingError",
    "TypeTagParseError",
    "ConfigurationError",
    "RpcError",
    "SimulationFailure",
    "SubmissionFailure",
    "ConfirmationTimeout",
    "parse_abort",
]


class PocketSdkError(Exception):
    """Base class for all SDK errors."""


class EncodingError(PocketSdkError, ValueError):
    """A value cannot be represented in its target BCS width."""


class DecodingError(PocketSdkError, ValueError):
    """A raw resource, event or byte buffer could not be decoded."""


class TypeTagParseError(PocketSdkError, ValueError):
    """A type identifier is not of the form `address::module::name`."""


class ConfigurationError(PocketSdkError):
    """The operation needs a deployed program address that is not known."""


@dataclass(slots=True)
class RpcError(PocketSdkError):
    """Raised when the ledger REST API answers with an error body or is unreachable."""

    message: str
    status: Optional[int] = None
    error_code: Optional[str] = None
    vm_error_code: Optional[int] = None
    data: Optional[Any] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        parts = [f"RPC error: {self.message}"]
        if self.status is not None:
            parts.append(f"http={self.status}")
        if self.error_code:
            parts.append(f"code={self.error_code}")
        if self.vm_error_code is not None:
            parts.append(f"vm_error_code={self.vm_error_code}")
        return " ".join(parts)


# "Move abort in 0x1::coin: EINSUFFICIENT_BALANCE(0x10006): ..." or
# "Move abort in 0xabc::chef: 0x3"
_ABORT_RE = re.compile(
    r"Move abort in (?P<location>[^:\s]+(?:::[^:\s]+)*):\s*"
    r"(?:(?P<name>[A-Za-z_][A-Za-z0-9_]*)\()?(?P<code>0x[0-9a-fA-F]+|\d+)\)?"
)


def parse_abort(vm_status: Optional[str]) -> Tuple[Optional[str], Optional[int], Optional[str]]:
    """
    Extract `(location, abort_code, abort_name)` from a VM status string.

    Returns `(None, None, None)` when the status is not a Move abort.
    """
    if not vm_status:
        return None, None, None
    m = _ABORT_RE.search(vm_status)
    if not m:
        return None, None, None
    raw = m.group("code")
    code = int(raw, 16) if raw.lower().startswith("0x") else int(raw)
    return m.group("location"), code, m.group("name")


@dataclass(slots=True)
class _RemoteFailure(PocketSdkError):
    vm_status: str
    tx_hash: Optional[str] = None

    @property
    def abort_location(self) -> Optional[str]:
        return parse_abort(self.vm_status)[0]

    @property
    def abort_code(self) -> Optional[int]:
        return parse_abort(self.vm_status)[1]

    @property
    def abort_name(self) -> Optional[str]:
        return parse_abort(self.vm_status)[2]


@dataclass(slots=True)
class SimulationFailure(_RemoteFailure):
    """The dry run reported failure; the transaction was never signed or submitted."""

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"SimulationFailure: {self.vm_status}"


@dataclass(slots=True)
class SubmissionFailure(_RemoteFailure):
    """The submitted transaction was finalized on-chain as failed."""

    def __str__(self) -> str:  # pragma: no cover - trivial
        suffix = f" tx={self.tx_hash}" if self.tx_hash else ""
        return f"SubmissionFailure{suffix}: {self.vm_status}"


class ConfirmationTimeout(PocketSdkError, TimeoutError):
    """
    The local wait budget ran out before the ledger reported finality.

    The transaction may still be committed later; its outcome is unknown.
    """

    def __init__(self, tx_hash: str, timeout_s: float) -> None:
        super().__init__(f"timeout waiting for transaction (tx={tx_hash}, timeout_s={timeout_s})")
        self.tx_hash = tx_hash
        self.timeout_s = timeout_s
