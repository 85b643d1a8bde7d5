"""Markets subcommand: list, show, book, stats, create."""

from __future__ import annotations

import time

import typer

from predictx.aggregation.markets import filter_markets, market_stats, next_resolution_action, time_remaining
from predictx.cli.common import (
    echo_market_line,
    echo_tx,
    fmt_amount,
    fmt_odds,
    fmt_time,
    open_builder,
    open_client,
    parse_time,
    run_async,
)
from predictx.contract.pagination import collect
from predictx.models import MarketStatus
from predictx.orderbook.book import depth_at_levels

app = typer.Typer(help="Market listing, detail, order books and creation")


def _status(value: str | None) -> MarketStatus | None:
    if not value:
        return None
    for s in MarketStatus:
        if s.value.lower() == value.strip().lower():
            return s
    raise typer.BadParameter(f"Unknown status: {value}. Choose from: {', '.join(s.value for s in MarketStatus)}")


@app.command("list")
def list_markets(
    ctx: typer.Context,
    status: str | None = typer.Option(None, "--status", "-s", help="Active, Closed, Settled, ..."),
    search: str = typer.Option("", "--search", "-q", help="Case-insensitive question search"),
    category: str | None = typer.Option(None, "--category", help="Filter by category"),
) -> None:
    """List every market on the contract."""
    wanted = _status(status)
    settings = ctx.obj["settings"]

    async def _run() -> None:
        async with open_client(ctx) as client:
            markets = await collect(client.iter_markets(limit=settings.page_limit))
        shown = filter_markets(markets, status=wanted, search=search, category=category)
        for m in shown:
            echo_market_line(m, time_remaining(m.end_time) if m.is_active else "")
        typer.echo(f"Total: {len(shown)} markets")

    run_async(ctx, _run())


@app.command("show")
def show(ctx: typer.Context, market_id: int = typer.Argument(..., help="Market ID")) -> None:
    """Show one market's detail."""

    async def _run() -> None:
        async with open_client(ctx) as client:
            m = await client.get_market(market_id)
        typer.echo(f"#{m.id}  {m.question}")
        if m.description:
            typer.echo(f"  {m.description}")
        typer.echo(f"Status: {m.status.value}  Category: {m.category or '-'}")
        typer.echo(f"Start: {fmt_time(m.start_time)}  End: {fmt_time(m.end_time)}  ({time_remaining(m.end_time)})")
        typer.echo(f"Resolution bond: {fmt_amount(ctx, m.resolution_bond)}  Reward: {fmt_amount(ctx, m.resolution_reward)}")
        for i, name in enumerate(m.options):
            marker = "  <- winner" if m.result == i else ""
            typer.echo(f"  [{i}] {name}{marker}")
        action = next_resolution_action(m.status)
        if action is not None:
            typer.echo(f"Next: {action.label}")

    run_async(ctx, _run())


@app.command("book")
def book(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market ID"),
    option: int = typer.Argument(..., help="Option index"),
    depth: int = typer.Option(5, "--depth", "-n", help="Levels per side"),
) -> None:
    """Show back and lay levels for one option."""

    async def _run() -> None:
        async with open_client(ctx) as client:
            ob = await client.get_order_book(market_id, option)
        backs, lays = depth_at_levels(ob, depth)
        typer.echo(f"Market #{market_id} option {option}")
        typer.echo("  Back (odds / volume)")
        for odds, volume in backs:
            typer.echo(f"    {fmt_odds(odds):>7}  {fmt_amount(ctx, volume)}")
        typer.echo("  Lay (odds / volume)")
        for odds, volume in lays:
            typer.echo(f"    {fmt_odds(odds):>7}  {fmt_amount(ctx, volume)}")
        if not backs and not lays:
            typer.echo("  No open orders.")

    run_async(ctx, _run())


@app.command("stats")
def stats(ctx: typer.Context) -> None:
    """Total markets, active markets and total volume."""
    settings = ctx.obj["settings"]

    async def _run() -> None:
        async with open_client(ctx) as client:
            markets = await collect(client.iter_markets(limit=settings.page_limit))
        data = market_stats(markets)
        typer.echo(f"Markets: {data.total_markets}  Active: {data.active_markets}")
        typer.echo(f"Total volume: {fmt_amount(ctx, data.total_volume)}")

    run_async(ctx, _run())


@app.command("create")
def create(
    ctx: typer.Context,
    question: str = typer.Option(..., "--question", help="Market question"),
    description: str = typer.Option(..., "--description", help="Resolution criteria"),
    options: list[str] = typer.Option(..., "--option", "-o", help="Outcome (repeat, at least two)"),
    end: str = typer.Option(..., "--end", help="End time: unix seconds or ISO 8601"),
    start: str | None = typer.Option(None, "--start", help="Start time (default: now)"),
    bond: str = typer.Option(..., "--bond", help="Resolution bond in display units"),
    reward: str = typer.Option(..., "--reward", help="Resolution reward in display units (escrowed)"),
    category: str | None = typer.Option(None, "--category"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Sign without prompting"),
) -> None:
    """Create a market (whitelisted creators only)."""
    start_ts = parse_time(start) if start else int(time.time())
    end_ts = parse_time(end)

    async def _run() -> None:
        async with open_client(ctx) as client:
            builder = await open_builder(ctx, client, yes)
            result = await builder.create_market(
                question=question,
                description=description,
                options=options,
                category=category,
                start_time=start_ts,
                end_time=end_ts,
                resolution_bond=bond,
                resolution_reward=reward,
            )
        echo_tx(result)

    run_async(ctx, _run())
