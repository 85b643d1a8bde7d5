"""Helpers shared by CLI subcommands: async runner, clients, wallet-backed tx builder, output."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from typing import Any, Coroutine, TypeVar

import structlog
import typer

from predictx.contract.client import ContractClient
from predictx.contract.encoding import decode_b64_json
from predictx.errors import PredictXError, SignatureRejected, TransactionFailed
from predictx.models import Market, MsgExecuteContract, TxResult
from predictx.tx.builder import TransactionBuilder
from predictx.units import format_amount, odds_from_contract
from predictx.wallet import WalletBackend, WalletSession, auto_approve
from predictx.wallet.local import LocalKeyWallet

log = structlog.get_logger(__name__)

T = TypeVar("T")


def run_async(ctx: typer.Context, coro: Coroutine[Any, Any, T]) -> T:
    """Run a command coroutine; PredictXError becomes one message on stderr and exit code 1."""
    try:
        return asyncio.run(coro)
    except SignatureRejected as e:
        log.info("command_cancelled", command=ctx.command_path, reason=str(e))
        typer.echo(f"Cancelled: {e}", err=True)
        raise typer.Exit(1)
    except PredictXError as e:
        extra = {"tx_hash": e.tx_hash} if isinstance(e, TransactionFailed) and e.tx_hash else {}
        log.error("command_failed", command=ctx.command_path, code=e.code, error=str(e), **extra)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def open_client(ctx: typer.Context) -> ContractClient:
    return ContractClient.from_settings(ctx.obj["settings"], transport=ctx.obj.get("transport"))


def confirm_sign(msg: MsgExecuteContract) -> bool:
    """Interactive stand-in for the wallet's signing prompt."""
    typer.echo(f"Contract: {msg.contract}")
    typer.echo(f"Message:  {json.dumps(decode_b64_json(msg.msg))}")
    if msg.funds:
        typer.echo("Funds:    " + ", ".join(f"{c.amount}{c.denom}" for c in msg.funds))
    return typer.confirm("Sign and broadcast?", default=False)


def wallet_backend(ctx: typer.Context, yes: bool = False) -> WalletBackend:
    backend = ctx.obj.get("wallet_backend")
    if backend is not None:
        return backend
    return LocalKeyWallet.from_settings(ctx.obj["settings"], approve=auto_approve if yes else confirm_sign)


async def connect_wallet(ctx: typer.Context, yes: bool = False) -> WalletSession:
    settings = ctx.obj["settings"]
    session = WalletSession(wallet_backend(ctx, yes), settings.chain_id)
    await session.connect()
    return session


async def open_builder(ctx: typer.Context, client: ContractClient, yes: bool = False) -> TransactionBuilder:
    """Connected builder whose fee/escrow denom follows the contract's configured coin."""
    settings = ctx.obj["settings"]
    session = await connect_wallet(ctx, yes)
    builder = TransactionBuilder(session, settings.contract_address, settings.coin_denom)
    builder.sync_denom(await client.get_config())
    return builder


async def resolve_address(ctx: typer.Context, address: str | None) -> str:
    """Explicit address, else the connected wallet's."""
    if address:
        return address
    session = await connect_wallet(ctx)
    return session.require_connected()


def parse_time(value: str) -> int:
    """Unix seconds or ISO 8601 (naive values are UTC) -> unix seconds."""
    value = value.strip()
    if value.isdigit():
        return int(value)
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Not a unix timestamp or ISO date: {value}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def fmt_time(ts: int) -> str:
    if not ts:
        return "-"
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def fmt_amount(ctx: typer.Context, minor: int) -> str:
    return format_amount(minor, ctx.obj["settings"].display_denom)


def fmt_odds(scaled: int) -> str:
    return f"{odds_from_contract(scaled):.2f}"


def echo_market_line(market: Market, extra: str = "") -> None:
    typer.echo(f"  #{market.id:<5} {market.status.value:<15} {extra:<20} {market.question[:60]}")


def echo_tx(result: TxResult) -> None:
    typer.echo(f"Transaction: {result.tx_hash}")
    if result.height is not None:
        typer.echo(f"Height: {result.height}  Gas used: {result.gas_used}/{result.gas_wanted}")
