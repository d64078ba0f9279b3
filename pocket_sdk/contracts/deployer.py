"""
pocket_sdk.contracts.deployer
=============================

Publish or upgrade the pocket Move package through the `aptos` CLI.

The core SDK never shells out; this module is the single place that does,
and the process runner is injectable so tests (and unusual environments)
can replace it.

Typical usage
-------------
    from pocket_sdk.contracts.deployer import AptosCliPublisher

    publisher = AptosCliPublisher(deployer_account, node_url, package_dir="./move")

    # First deployment into a freshly funded resource account
    publisher.publish(resource_address)

    # Upgrade: compile a publish payload, then submit it through the builder
    params = publisher.build_upgrade_payload(resource_address)
    builder.build_upgrade_transaction(params).execute()

Design notes
------------
* The package's named addresses are `hamsterpocket` (the resource account
  the modules live at) and `deployer` (the account that controls it).
* `build_upgrade_payload` asks the CLI for the `code::publish_package_txn`
  JSON payload and converts its two hex arguments to bytes.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
import tempfile
from typing import Callable, List, Optional, Protocol, Sequence

from ..errors import PocketSdkError
from ..tx.params import ProgramUpgradeParams
from ..types.core import AccountAddress, AddressLike
from ..utils.bytes import from_hex
from ..wallet.signer import Account

log = logging.getLogger(__name__)

PROGRAM_NAMED_ADDRESS = "hamsterpocket"
DEPLOYER_NAMED_ADDRESS = "deployer"

Runner = Callable[[Sequence[str], Optional[str]], None]


class DeploymentError(PocketSdkError):
    """The `aptos` CLI failed or produced an unusable payload."""


class ProgramPublisher(Protocol):
    def publish(self, resource_address: AddressLike) -> AccountAddress: ...
    def build_upgrade_payload(self, resource_address: AddressLike) -> ProgramUpgradeParams: ...


def subprocess_runner(argv: Sequence[str], cwd: Optional[str]) -> None:
    try:
        subprocess.run(list(argv), cwd=cwd, check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise DeploymentError(f"aptos CLI failed: {e}") from e


class AptosCliPublisher:
    def __init__(
        self,
        deployer: Account,
        node_url: str,
        *,
        package_dir: Optional[str] = None,
        aptos_bin: str = "aptos",
        runner: Runner = subprocess_runner,
    ) -> None:
        self.deployer = deployer
        self.node_url = node_url
        self.package_dir = package_dir
        self.aptos_bin = aptos_bin
        self.runner = runner

    def _named_addresses(self, resource: AccountAddress) -> str:
        return f"{PROGRAM_NAMED_ADDRESS}={resource.hex()},{DEPLOYER_NAMED_ADDRESS}={self.deployer.address().hex()}"

    def publish_command(self, resource_address: AddressLike) -> List[str]:
        resource = AccountAddress.from_hex(resource_address)
        return [
            self.aptos_bin,
            "move",
            "publish",
            "--assume-yes",
            "--private-key",
            self.deployer.private_key_hex(),
            "--sender-account",
            resource.hex(),
            "--named-addresses",
            self._named_addresses(resource),
            "--url",
            self.node_url,
        ]

    def publish(self, resource_address: AddressLike) -> AccountAddress:
        """Publish the package at `resource_address`; returns that address."""
        resource = AccountAddress.from_hex(resource_address)
        log.info("publishing package at %s via %s", resource, self.node_url)
        self.runner(self.publish_command(resource), self.package_dir)
        return resource

    def build_upgrade_payload(self, resource_address: AddressLike) -> ProgramUpgradeParams:
        resource = AccountAddress.from_hex(resource_address)
        with tempfile.TemporaryDirectory() as tmp:
            out = os.path.join(tmp, "publish-payload.json")
            argv = [
                self.aptos_bin,
                "move",
                "build-publish-payload",
                "--assume-yes",
                "--json-output-file",
                out,
                "--named-addresses",
                self._named_addresses(resource),
            ]
            self.runner(argv, self.package_dir)
            try:
                with open(out, "r", encoding="utf-8") as f:
                    payload = json.load(f)
            except (OSError, ValueError) as e:
                raise DeploymentError(f"unreadable publish payload: {e}") from e
        return upgrade_params_from_publish_payload(payload)


def upgrade_params_from_publish_payload(payload: dict) -> ProgramUpgradeParams:
    """`{"args": [{"value": "0x<metadata>"}, {"value": ["0x<module>", ...]}]}` -> params."""
    try:
        metadata_arg, code_arg = payload["args"][0]["value"], payload["args"][1]["value"]
        return ProgramUpgradeParams(
            serialized_metadata=from_hex(metadata_arg),
            code=tuple(from_hex(m) for m in code_arg),
        )
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise DeploymentError(f"malformed publish payload: {e}") from e


__all__ = [
    "PROGRAM_NAMED_ADDRESS",
    "DEPLOYER_NAMED_ADDRESS",
    "DeploymentError",
    "ProgramPublisher",
    "AptosCliPublisher",
    "subprocess_runner",
    "upgrade_params_from_publish_payload",
]
