"""Wallet subcommand: connect and report the active account."""

from __future__ import annotations

import typer

from predictx.cli.common import connect_wallet, run_async

app = typer.Typer(help="Wallet session")


@app.command("status")
def status(ctx: typer.Context) -> None:
    """Connect the configured wallet and show the active address."""
    settings = ctx.obj["settings"]

    async def _run() -> None:
        session = await connect_wallet(ctx)
        typer.echo(f"State: {session.state.value}")
        typer.echo(f"Address: {session.address}")
        typer.echo(f"Chain: {settings.chain_id}  Denom: {settings.coin_denom}")

    run_async(ctx, _run())
