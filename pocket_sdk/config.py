"""
SDK configuration: node endpoint, program address, gas/expiry and timeouts.

- Loads sane defaults and supports overrides via environment variables (POCKET_*).
- Provides helpers for building HTTP headers and validating endpoints.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .version import __version__

MAINNET_NODE_URL = "https://fullnode.mainnet.aptoslabs.com/v1"
TESTNET_NODE_URL = "https://fullnode.testnet.aptoslabs.com/v1"
TESTNET_FAUCET_URL = "https://faucet.testnet.aptoslabs.com"

# Framework account hosting `resource_account`, `coin`, ...
APTOS_GENESIS_ADDRESS = "0x1"
RESOURCE_ACCOUNT_SEED = "hamsterpocket"

_DEFAULT_NODE = TESTNET_NODE_URL

_ADDR_RE = re.compile(r"^(0x)?[0-9a-fA-F]{1,64}$")


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None and v != "" else default


def _ensure_scheme(url: Optional[str], allowed: tuple[str, ...]) -> Optional[str]:
    if not url:
        return url
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ValueError(f"URL must start with {allowed}, got: {url!r}")
    return url


def _parse_program_address(val: Optional[str]) -> Optional[str]:
    """
    Accepts None/"" (program not deployed yet) or a hex account address.
    """
    if val is None or val.strip() == "":
        return None
    s = val.strip()
    if not _ADDR_RE.match(s):
        raise ValueError(f"invalid program address: {val!r}")
    return s if s.startswith("0x") else "0x" + s


@dataclass(slots=True)
class SDKConfig:
    # Core
    node_url: str = field(default_factory=lambda: _DEFAULT_NODE)
    faucet_url: Optional[str] = None
    # None means "not deployed yet"; chef operations refuse to build.
    program_address: Optional[str] = None
    # HTTP behavior
    request_timeout: float = 10.0
    max_retries: int = 3
    backoff_base: float = 0.25
    # Transaction defaults
    max_gas_amount: int = 200_000
    gas_unit_price: int = 100
    tx_expiry_s: int = 600
    wait_timeout_s: float = 30.0
    # Headers / identity
    user_agent: str = field(default_factory=lambda: f"pocket-sdk-py/{__version__}")

    @classmethod
    def from_env(cls, prefix: str = "POCKET_") -> "SDKConfig":
        """
        Create config from environment variables:

        POCKET_NODE_URL          (http/https, REST base incl. /v1)
        POCKET_FAUCET_URL        (http/https) optional
        POCKET_PROGRAM_ADDRESS   (hex) optional
        POCKET_TIMEOUT           (float seconds, HTTP)
        POCKET_MAX_RETRIES       (int)
        POCKET_BACKOFF           (float)
        POCKET_MAX_GAS           (int)
        POCKET_GAS_UNIT_PRICE    (int)
        POCKET_TX_EXPIRY         (int seconds)
        POCKET_WAIT_TIMEOUT      (float seconds)
        POCKET_USER_AGENT        (str)
        """
        node = _env(f"{prefix}NODE_URL", _DEFAULT_NODE)
        faucet = _env(f"{prefix}FAUCET_URL", None)
        _ensure_scheme(node, ("http", "https"))
        _ensure_scheme(faucet, ("http", "https"))

        return cls(
            node_url=node or _DEFAULT_NODE,
            faucet_url=faucet,
            program_address=_parse_program_address(_env(f"{prefix}PROGRAM_ADDRESS")),
            request_timeout=float(_env(f"{prefix}TIMEOUT", "10.0")),
            max_retries=int(_env(f"{prefix}MAX_RETRIES", "3")),
            backoff_base=float(_env(f"{prefix}BACKOFF", "0.25")),
            max_gas_amount=int(_env(f"{prefix}MAX_GAS", "200000")),
            gas_unit_price=int(_env(f"{prefix}GAS_UNIT_PRICE", "100")),
            tx_expiry_s=int(_env(f"{prefix}TX_EXPIRY", "600")),
            wait_timeout_s=float(_env(f"{prefix}WAIT_TIMEOUT", "30.0")),
            user_agent=_env(f"{prefix}USER_AGENT", f"pocket-sdk-py/{__version__}")
            or f"pocket-sdk-py/{__version__}",
        )

    @classmethod
    def with_overrides(
        cls, base: Optional["SDKConfig"] = None, **overrides: Any
    ) -> "SDKConfig":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data})
        if "node_url" in overrides:
            _ensure_scheme(data["node_url"], ("http", "https"))
        if "faucet_url" in overrides:
            _ensure_scheme(data["faucet_url"], ("http", "https"))
        if "program_address" in overrides:
            data["program_address"] = _parse_program_address(overrides["program_address"])
        return cls(**data)

    def http_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node_url": self.node_url,
            "faucet_url": self.faucet_url,
            "program_address": self.program_address,
            "request_timeout": float(self.request_timeout),
            "max_retries": int(self.max_retries),
            "backoff_base": float(self.backoff_base),
            "max_gas_amount": int(self.max_gas_amount),
            "gas_unit_price": int(self.gas_unit_price),
            "tx_expiry_s": int(self.tx_expiry_s),
            "wait_timeout_s": float(self.wait_timeout_s),
            "user_agent": self.user_agent,
        }


__all__ = [
    "SDKConfig",
    "MAINNET_NODE_URL",
    "TESTNET_NODE_URL",
    "TESTNET_FAUCET_URL",
    "APTOS_GENESIS_ADDRESS",
    "RESOURCE_ACCOUNT_SEED",
]
