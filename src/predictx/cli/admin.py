"""Admin subcommand: market pause/close/cancel, creator whitelist, platform config."""

from __future__ import annotations

import typer

from predictx.cli.common import echo_tx, open_builder, open_client, run_async

app = typer.Typer(help="Admin actions (contract admin wallet only)")


def _market_action(ctx: typer.Context, market_id: int, action: str, yes: bool) -> None:
    async def _run() -> None:
        async with open_client(ctx) as client:
            builder = await open_builder(ctx, client, yes)
            result = await builder.market_action(market_id, action)
        typer.echo(f"Market #{market_id}: {action}")
        echo_tx(result)

    run_async(ctx, _run())


@app.command("pause")
def pause(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Sign without prompting"),
) -> None:
    """Pause betting on a market."""
    _market_action(ctx, market_id, "pause", yes)


@app.command("close")
def close(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Sign without prompting"),
) -> None:
    """Close a market so resolution can start."""
    _market_action(ctx, market_id, "close", yes)


@app.command("cancel")
def cancel(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Sign without prompting"),
) -> None:
    """Cancel a market and refund bets."""
    _market_action(ctx, market_id, "cancel", yes)


@app.command("whitelist")
def whitelist(ctx: typer.Context) -> None:
    """List addresses allowed to create markets."""

    async def _run() -> None:
        async with open_client(ctx) as client:
            addresses = await client.whitelisted_addresses()
        for addr in addresses:
            typer.echo(f"  {addr}")
        typer.echo(f"Total: {len(addresses)} addresses")

    run_async(ctx, _run())


@app.command("whitelist-add")
def whitelist_add(
    ctx: typer.Context,
    address: str = typer.Argument(..., help="Bech32 address"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Sign without prompting"),
) -> None:
    """Allow an address to create markets."""

    async def _run() -> None:
        async with open_client(ctx) as client:
            builder = await open_builder(ctx, client, yes)
            echo_tx(await builder.add_to_whitelist(address))

    run_async(ctx, _run())


@app.command("whitelist-remove")
def whitelist_remove(
    ctx: typer.Context,
    address: str = typer.Argument(..., help="Bech32 address"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Sign without prompting"),
) -> None:
    """Revoke an address's market-creation rights."""

    async def _run() -> None:
        async with open_client(ctx) as client:
            builder = await open_builder(ctx, client, yes)
            echo_tx(await builder.remove_from_whitelist(address))

    run_async(ctx, _run())


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """Show the contract's platform config."""

    async def _run() -> None:
        async with open_client(ctx) as client:
            cfg = await client.get_config()
        typer.echo(f"Admin: {cfg.admin}")
        typer.echo(f"Coin denom: {cfg.coin_denom}")
        typer.echo(f"Platform fee: {cfg.platform_fee} bps")
        typer.echo(f"Treasury: {cfg.protocol_treasury_account or '-'}")
        typer.echo(f"Challenging time: {cfg.challenging_time}s  Voting time: {cfg.voting_time}s")

    run_async(ctx, _run())


@app.command("update-config")
def update_config(
    ctx: typer.Context,
    platform_fee: int | None = typer.Option(None, "--platform-fee", help="Basis points"),
    treasury: str | None = typer.Option(None, "--treasury", help="Protocol treasury address"),
    challenging_time: int | None = typer.Option(None, "--challenging-time", help="Seconds"),
    voting_time: int | None = typer.Option(None, "--voting-time", help="Seconds"),
    coin_denom: str | None = typer.Option(None, "--coin-denom"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Sign without prompting"),
) -> None:
    """Update platform config fields; unset options are left unchanged."""

    async def _run() -> None:
        async with open_client(ctx) as client:
            builder = await open_builder(ctx, client, yes)
            result = await builder.update_config(
                platform_fee=platform_fee,
                protocol_treasury_account=treasury,
                challenging_time=challenging_time,
                voting_time=voting_time,
                coin_denom=coin_denom,
            )
        echo_tx(result)

    run_async(ctx, _run())
