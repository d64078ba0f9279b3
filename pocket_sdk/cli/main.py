"""
pocket_sdk.cli.main
===================

`pocket-sdk`: read-only command-line access to a deployed pocket program.

Examples
--------
    $ pocket-sdk --program 0x9ddf...ff6a pocket my-pocket-id
    $ pocket-sdk events update_deposit_stats --start 0 --limit 25
    $ pocket-sdk roles 0xabc...
    $ pocket-sdk quote 0x1::aptos_coin::AptosCoin 0x...::usdc::USDC 100000
    $ pocket-sdk resource-address 0xdeployer hamsterpocket-1700000000

Configuration
-------------
- Node URL        : `--node` or env `POCKET_NODE_URL` (default: testnet fullnode)
- Program address : `--program` or env `POCKET_PROGRAM_ADDRESS`
- HTTP timeout    : `--timeout` or env `POCKET_TIMEOUT`
Everything else comes from `SDKConfig.from_env()`.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

import typer

from ..config import SDKConfig
from ..errors import PocketSdkError
from ..events.indexer import EventIndexer
from ..rpc.http import LedgerClient
from ..tx.build import TransactionBuilder
from ..tx.params import GetMultiplePocketsParams, GetQuoteParams
from ..tx.send import LedgerService, ReadOnlySigner
from ..types.events import EventName
from ..types.response import transform_pocket
from ..version import __version__ as SDK_VERSION
from ..wallet.signer import derive_resource_account_address

app = typer.Typer(
    name="pocket-sdk",
    help="Pocket SDK CLI: inspect pockets, events and roles of a deployed program.",
    no_args_is_help=True,
    add_completion=False,
)

__all__ = ["app", "main"]


@dataclass
class Ctx:
    config: SDKConfig


def _to_jsonable(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return obj.name if not isinstance(obj, str) else obj.value
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: _to_jsonable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, (list, tuple)):
        return [_to_jsonable(v) for v in obj]
    if isinstance(obj, dict):
        return {k: _to_jsonable(v) for k, v in obj.items()}
    return obj


def _print_json(obj: Any) -> None:
    typer.echo(json.dumps(_to_jsonable(obj), indent=2, ensure_ascii=False))


@app.callback()
def _root(
    ctx: typer.Context,
    node: Optional[str] = typer.Option(None, "--node", help="Node REST URL (incl. /v1)."),
    program: Optional[str] = typer.Option(None, "--program", help="Program (resource account) address."),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="HTTP timeout in seconds."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging to stderr."),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    overrides = {}
    if node is not None:
        overrides["node_url"] = node
    if program is not None:
        overrides["program_address"] = program
    if timeout is not None:
        overrides["request_timeout"] = timeout
    try:
        cfg = SDKConfig.with_overrides(SDKConfig.from_env(), **overrides)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    ctx.obj = Ctx(config=cfg)


def _ledger(cfg: SDKConfig) -> LedgerService:
    return LedgerClient.from_config(cfg)


def _open_ledger(ctx: typer.Context) -> LedgerService:
    """A ledger handle that is closed together with the command context."""
    ledger = _ledger(ctx.obj.config)
    close = getattr(ledger, "close", None)
    if close is not None:
        ctx.call_on_close(close)
    return ledger


def _builder(ctx: typer.Context) -> TransactionBuilder:
    return TransactionBuilder(ReadOnlySigner(_open_ledger(ctx)), ctx.obj.config.program_address)


def _require_program(ctx: typer.Context) -> str:
    program = ctx.obj.config.program_address
    if program is None:
        raise typer.BadParameter("program address is required (--program or POCKET_PROGRAM_ADDRESS)")
    return program


# --- Commands -----------------------------------------------------------------


@app.command("version")
def version() -> None:
    """Print the SDK version."""
    typer.echo(f"pocket-sdk {SDK_VERSION}")


@app.command("env")
def env(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    _print_json({**ctx.obj.config.to_dict(), "sdk_version": SDK_VERSION})


@app.command("pocket")
def pocket(
    ctx: typer.Context,
    ids: List[str] = typer.Argument(..., help="Pocket id(s)."),
) -> None:
    """Fetch pockets by id and print them decoded."""
    _require_program(ctx)
    result = _builder(ctx).build_get_multiple_pockets(GetMultiplePocketsParams(id_list=tuple(ids))).execute()
    raw_pockets = result[0] if result else []
    _print_json([transform_pocket(p) for p in raw_pockets])


@app.command("events")
def events(
    ctx: typer.Context,
    name: EventName = typer.Argument(..., help="Event stream name."),
    start: Optional[int] = typer.Option(None, "--start", help="First sequence number."),
    limit: Optional[int] = typer.Option(None, "--limit", help="Page size."),
) -> None:
    """Print one page of an event stream."""
    program = _require_program(ctx)
    indexer = EventIndexer(_open_ledger(ctx), program)
    _print_json(indexer.fetch(name, start, limit))


@app.command("roles")
def roles(
    ctx: typer.Context,
    address: str = typer.Argument(..., help="Account address (0x...)."),
) -> None:
    """Show whether ADDRESS is an admin and/or operator."""
    _require_program(ctx)
    builder = _builder(ctx)
    _print_json(
        {
            "address": address,
            "is_admin": bool(builder.build_check_for_allowed_admin(address).execute()[0]),
            "is_operator": bool(builder.build_check_for_allowed_operator(address).execute()[0]),
        }
    )


@app.command("quote")
def quote(
    ctx: typer.Context,
    base: str = typer.Argument(..., help="Base coin type."),
    target: str = typer.Argument(..., help="Target coin type."),
    amount: int = typer.Argument(..., help="Amount in, smallest unit."),
) -> None:
    """Quote AMOUNT of BASE in TARGET through the program's AMM route."""
    _require_program(ctx)
    params = GetQuoteParams(base_coin_type=base, target_coin_type=target, amount_in=amount)
    result = _builder(ctx).build_get_quote(params).execute()
    _print_json({"base": base, "target": target, "amount_in": amount, "amount_out": int(result[0])})


@app.command("resource-address")
def resource_address(
    source: str = typer.Argument(..., help="Creator account address."),
    seed: str = typer.Argument(..., help="Seed string (UTF-8)."),
) -> None:
    """Derive the resource account SOURCE creates with SEED."""
    try:
        typer.echo(derive_resource_account_address(source, seed).hex())
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


# --- Entrypoint ---------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> int:
    """
    Run the CLI. Returns an integer exit code.
    """
    try:
        # standalone mode prints usage errors and ends every run in SystemExit
        app(prog_name="pocket-sdk", args=argv)
        return 0
    except SystemExit as e:
        if e.code is None:
            return 0
        return e.code if isinstance(e.code, int) else 1
    except PocketSdkError as e:
        typer.echo(f"error: {e}", err=True)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
