"""Resolve subcommand: pending queue, propose, challenge, vote, finalize."""

from __future__ import annotations

import typer

from predictx.aggregation.markets import next_resolution_action, resolution_queue
from predictx.cli.common import echo_market_line, echo_tx, open_builder, open_client, run_async
from predictx.contract.pagination import collect

app = typer.Typer(help="Market resolution: propose, challenge, vote, finalize")


@app.command("pending")
def pending(ctx: typer.Context) -> None:
    """Markets awaiting resolution and the next action for each."""
    settings = ctx.obj["settings"]

    async def _run() -> None:
        async with open_client(ctx) as client:
            markets = await collect(client.iter_markets(limit=settings.page_limit))
        queue = resolution_queue(markets)
        for m in queue:
            action = next_resolution_action(m.status)
            echo_market_line(m, action.label if action else "")
        typer.echo(f"Total: {len(queue)} markets awaiting resolution")

    run_async(ctx, _run())


def _send_outcome(ctx: typer.Context, market_id: int, option: int, yes: bool, verb: str) -> None:
    async def _run() -> None:
        async with open_client(ctx) as client:
            market = await client.get_market(market_id)
            builder = await open_builder(ctx, client, yes)
            send = {
                "Propose": builder.propose_result,
                "Challenge": builder.challenge_result,
                "Vote": builder.vote,
            }[verb]
            result = await send(market, option)
        typer.echo(f"{verb} '{market.option_name(option)}' on #{market.id}")
        echo_tx(result)

    run_async(ctx, _run())


@app.command("propose")
def propose(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market ID"),
    option: int = typer.Argument(..., help="Winning option index"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Sign without prompting"),
) -> None:
    """Propose the winning option of a closed market (bonds the resolution bond)."""
    _send_outcome(ctx, market_id, option, yes, "Propose")


@app.command("challenge")
def challenge(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market ID"),
    option: int = typer.Argument(..., help="Counter-outcome option index"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Sign without prompting"),
) -> None:
    """Dispute a proposed result (bonds the resolution bond)."""
    _send_outcome(ctx, market_id, option, yes, "Challenge")


@app.command("vote")
def vote(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market ID"),
    option: int = typer.Argument(..., help="Option index"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Sign without prompting"),
) -> None:
    """Vote on a challenged market."""
    _send_outcome(ctx, market_id, option, yes, "Vote")


@app.command("finalize")
def finalize(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Sign without prompting"),
) -> None:
    """Resolve a market whose challenge/voting window has passed."""

    async def _run() -> None:
        async with open_client(ctx) as client:
            builder = await open_builder(ctx, client, yes)
            echo_tx(await builder.resolve_market(market_id))

    run_async(ctx, _run())
