"""Bets subcommand: place, cancel, redeem, list, summary, orders."""

from __future__ import annotations

import typer

from predictx.aggregation.bets import active_bets, expected_payout, past_bets, redeemable, summarize_bets
from predictx.cli.common import echo_tx, fmt_amount, fmt_odds, open_builder, open_client, resolve_address, run_async
from predictx.contract.pagination import collect
from predictx.models import Order, Side
from predictx.orderbook.betting import liability, potential_win
from predictx.units import odds_to_contract

app = typer.Typer(help="Place, cancel and redeem bets; list a user's bets")


def _side(value: str) -> Side:
    try:
        return Side.parse(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))


def _echo_bet(ctx: typer.Context, bet: Order, state: str | None = None) -> None:
    state = state or ("redeemed" if bet.redeemed else (bet.status or "open"))
    typer.echo(
        f"  #{bet.id:<6} market {bet.market_id:<5} opt {bet.option_index}  {bet.side.value:<4} "
        f"{fmt_amount(ctx, bet.amount):>16} @ {fmt_odds(bet.odds)}  {state}"
    )


@app.command("place")
def place(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market ID"),
    option: int = typer.Argument(..., help="Option index"),
    side: str = typer.Option("back", "--side", help="back or lay"),
    stake: str = typer.Option(..., "--stake", help="Stake in display units"),
    odds: str = typer.Option(..., "--odds", help="Decimal odds, greater than 1.00"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Sign without prompting"),
) -> None:
    """Back or lay an option at limit odds."""
    bet_side = _side(side)

    async def _run() -> None:
        async with open_client(ctx) as client:
            market = await client.get_market(market_id)
            builder = await open_builder(ctx, client, yes)
            result = await builder.place_order(market, option, bet_side, stake, odds)
        typer.echo(f"{bet_side.value} '{market.option_name(option)}' on #{market.id}: {stake} @ {fmt_odds(odds_to_contract(odds))}")
        if bet_side == Side.BACK:
            typer.echo(f"Potential win: {potential_win(stake, odds, bet_side):.2f}")
        else:
            typer.echo(f"Liability: {liability(stake, odds, bet_side):.2f}")
        echo_tx(result)

    run_async(ctx, _run())


@app.command("cancel")
def cancel(
    ctx: typer.Context,
    order_id: int = typer.Argument(..., help="Order ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Sign without prompting"),
) -> None:
    """Cancel an unmatched order."""

    async def _run() -> None:
        async with open_client(ctx) as client:
            builder = await open_builder(ctx, client, yes)
            echo_tx(await builder.cancel_order(order_id))

    run_async(ctx, _run())


@app.command("redeem")
def redeem(
    ctx: typer.Context,
    bet_id: int = typer.Argument(..., help="Bet ID"),
    market_id: int | None = typer.Option(None, "--market", "-m", help="Check the market is settled first"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Sign without prompting"),
) -> None:
    """Redeem a winning bet on a settled market."""

    async def _run() -> None:
        async with open_client(ctx) as client:
            market = await client.get_market(market_id) if market_id is not None else None
            builder = await open_builder(ctx, client, yes)
            echo_tx(await builder.redeem(bet_id, market))

    run_async(ctx, _run())


@app.command("list")
def list_bets(
    ctx: typer.Context,
    address: str | None = typer.Argument(None, help="Bettor address (default: connected wallet)"),
    past: bool = typer.Option(False, "--past", help="Show redeemed bets instead of active ones"),
) -> None:
    """List a user's active (or past) bets."""
    settings = ctx.obj["settings"]

    async def _run() -> None:
        user = await resolve_address(ctx, address)
        async with open_client(ctx) as client:
            bets = await collect(client.iter_user_bets(user, limit=settings.page_limit))
            shown = past_bets(bets) if past else active_bets(bets)
            markets = await client.get_markets([b.market_id for b in shown])
        for bet in shown:
            _echo_bet(ctx, bet, "redeemable" if redeemable(bet, markets) else None)
        typer.echo(f"Total: {len(shown)} {'past' if past else 'active'} bets")

    run_async(ctx, _run())


@app.command("summary")
def summary(
    ctx: typer.Context,
    address: str | None = typer.Argument(None, help="Bettor address (default: connected wallet)"),
) -> None:
    """Profile stats: bets, wins, win rate, staked and profit/loss."""
    settings = ctx.obj["settings"]

    async def _run() -> None:
        user = await resolve_address(ctx, address)
        async with open_client(ctx) as client:
            bets = await collect(client.iter_user_bets(user, limit=settings.page_limit))
        s = summarize_bets(bets)
        typer.echo(f"Address: {user}")
        typer.echo(f"Bets: {s.total_bets}  Active: {s.active_bets}  Won: {s.won_bets}  Lost: {s.lost_bets}")
        typer.echo(f"Win rate: {s.win_rate:.1f}%")
        typer.echo(f"Staked: {fmt_amount(ctx, s.total_staked)}  Profit/loss: {fmt_amount(ctx, s.profit_loss)}")
        pending = sum(expected_payout(b) for b in active_bets(bets))
        if pending:
            typer.echo(f"Open bets pay up to: {fmt_amount(ctx, pending)}")

    run_async(ctx, _run())


@app.command("orders")
def orders(
    ctx: typer.Context,
    address: str | None = typer.Argument(None, help="User address (default: connected wallet)"),
    market_id: int | None = typer.Option(None, "--market", "-m", help="Only this market"),
    limit: int = typer.Option(30, "--limit", "-n", help="Page size"),
    start_after: int | None = typer.Option(None, "--start-after", help="Order ID cursor"),
) -> None:
    """One page of a user's orders."""

    async def _run() -> None:
        user = await resolve_address(ctx, address)
        async with open_client(ctx) as client:
            rows = await client.user_orders(user, market_id=market_id, start_after=start_after, limit=limit)
        for order in rows:
            _echo_bet(ctx, order)
        typer.echo(f"Total: {len(rows)} orders")
        if len(rows) == limit:
            typer.echo(f"More: --start-after {rows[-1].id}")

    run_async(ctx, _run())
