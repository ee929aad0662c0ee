"""
lasr_sdk.cli
============

`lasr-sdk`: developer utilities for program authors: convert amounts,
check addresses and inspect compute envelopes without writing a program.

Examples
--------
    $ lasr-sdk version
    $ lasr-sdk amount parse 1.5             # 1500000000000000000
    $ lasr-sdk amount to-hex 1              # 0x000...0de0b6b3a7640000
    $ lasr-sdk amount from-hex 0x...01      # 0.000000000000000001
    $ lasr-sdk amount limbs 0x...01 --order big
    $ lasr-sdk address check 0x1234...abcd
    $ lasr-sdk inspect inputs.json          # or '-' for stdin

Configuration
-------------
- Limb order : `--limb-order` or env `LASR_LIMB_ORDER` (little|big)
- Log level  : `--log-level` or env `LASR_LOG_LEVEL`
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any, Optional

import typer

from . import log as llog
from .address import Address
from .amount import (U256, format_amount_to_hex, format_hex_to_amount,
                     parse_amount_to_bigint)
from .config import SDKConfig
from .consts import DECIMALS, U256_HEX_WIDTH
from .errors import LasrSdkError
from .types import parse_compute_inputs
from .version import __version__ as SDK_VERSION
from .version import version as version_string

app = typer.Typer(
    name="lasr-sdk",
    help="LASR SDK CLI: amounts, addresses and compute envelopes.",
    no_args_is_help=True,
    add_completion=False,
)
amount_app = typer.Typer(no_args_is_help=True, help="Convert between human amounts and wire values.")
address_app = typer.Typer(no_args_is_help=True, help="Validate addresses.")
app.add_typer(amount_app, name="amount")
app.add_typer(address_app, name="address")

__all__ = ["app", "main", "run"]


@dataclass
class Ctx:
    config: SDKConfig


def _print_json(obj: Any) -> None:
    typer.echo(json.dumps(obj, indent=2, ensure_ascii=False))


def _fail(err: LasrSdkError) -> None:
    typer.echo(json.dumps({"error": err.to_dict()}, ensure_ascii=False, default=str), err=True)
    raise typer.Exit(code=1)


@app.callback()
def _root(
    ctx: typer.Context,
    limb_order: Optional[str] = typer.Option(
        None, "--limb-order", help="U256 limb order: little or big.", envvar="LASR_LIMB_ORDER"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Enable logging to stderr at this level."
    ),
) -> None:
    """Resolve the effective SDK configuration for this process."""
    try:
        cfg = SDKConfig.from_env()
        if limb_order is not None:
            cfg = SDKConfig.with_overrides(cfg, limb_order=limb_order)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    if log_level:
        llog.configure(level=log_level.upper())
    ctx.obj = Ctx(config=cfg)


@app.command("version")
def version() -> None:
    """Print the SDK version."""
    typer.echo(f"lasr-sdk {version_string()}")


@app.command("env")
def env(ctx: typer.Context) -> None:
    """Show the effective SDK configuration."""
    c: Ctx = ctx.obj
    _print_json(
        {**c.config.to_dict(), "decimals": DECIMALS, "hex_width": U256_HEX_WIDTH, "sdk_version": SDK_VERSION}
    )


# --- amount -------------------------------------------------------------------


@amount_app.command("parse")
def amount_parse(value: str = typer.Argument(..., help="Decimal amount, or 0x hex (taken literally).")) -> None:
    """Print the on-chain integer for VALUE (decimals scaled by 10**18)."""
    try:
        typer.echo(str(parse_amount_to_bigint(value)))
    except LasrSdkError as e:
        _fail(e)


@amount_app.command("to-hex")
def amount_to_hex(value: str = typer.Argument(..., help="Decimal amount.")) -> None:
    """Print the 64-digit wire hex for VALUE."""
    try:
        typer.echo(format_amount_to_hex(value))
    except LasrSdkError as e:
        _fail(e)


@amount_app.command("from-hex")
def amount_from_hex(value: str = typer.Argument(..., help="0x wire hex.")) -> None:
    """Print the decimal amount encoded by VALUE."""
    try:
        typer.echo(format_hex_to_amount(value))
    except LasrSdkError as e:
        _fail(e)


@amount_app.command("limbs")
def amount_limbs(
    ctx: typer.Context,
    value: str = typer.Argument(..., help="On-chain integer (hex or digits, not scaled)."),
    order: Optional[str] = typer.Option(None, "--order", help="little or big (default: config)."),
) -> None:
    """Print VALUE as four 64-bit limbs."""
    c: Ctx = ctx.obj
    use = order or c.config.limb_order
    try:
        u = U256.parse(value)
        _print_json({"hex": u.to_hex(), "order": use, "limbs": u.to_limbs(order=use)})
    except LasrSdkError as e:
        _fail(e)


# --- address ------------------------------------------------------------------


@address_app.command("check")
def address_check(value: str = typer.Argument(..., help="0x + 40 hex characters.")) -> None:
    """Validate VALUE; exit 1 when it is not an address."""
    try:
        addr = Address(value)
    except LasrSdkError as e:
        _fail(e)
    else:
        _print_json({"address": addr.value, "normalized": addr.normalized, "valid": True})


# --- inspect ------------------------------------------------------------------


@app.command("inspect")
def inspect(
    path: str = typer.Argument(..., help="Compute envelope JSON file, or '-' for stdin."),
) -> None:
    """Validate a compute envelope and print its transaction and decoded inputs."""
    if path == "-":
        raw = sys.stdin.read()
    else:
        try:
            with open(path, "r", encoding="utf-8") as fh:
                raw = fh.read()
        except OSError as e:
            raise typer.BadParameter(f"cannot read {path}: {e}") from e
    try:
        ci = parse_compute_inputs(raw)
        inputs = ci.transaction.inputs() if ci.transaction.transaction_inputs else None
    except LasrSdkError as e:
        _fail(e)
    else:
        _print_json(
            {
                "op": ci.op,
                "version": ci.version,
                "transaction": ci.transaction.model_dump(by_alias=True, mode="json"),
                "transactionInputs": inputs,
                "tokens": sorted(ci.account_info.programs) if ci.account_info else [],
            }
        )


# --- Entrypoints --------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> int:
    """
    Run the CLI. Returns an integer exit code.
    """
    try:
        rv = app(prog_name="lasr-sdk", standalone_mode=False, args=argv)
        return rv if isinstance(rv, int) else 0
    except typer.Exit as e:
        return int(e.exit_code)
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        return 1


def run(argv: Optional[list[str]] = None) -> int:
    """Alias for :func:`main`."""
    return main(argv)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
