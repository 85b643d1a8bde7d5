"""Bet portfolio summary for the my-bets and profile views."""

from __future__ import annotations

from dataclasses import dataclass, field

from predictx.models import Market, MarketStatus, Order
from predictx.orderbook.betting import payout_minor, profit_minor, stake_minor


@dataclass
class BetSummary:
    """Counts and minor-unit totals over a user's bets. Redeemed bets count as won."""

    total_bets: int = 0
    active_bets: int = 0
    won_bets: int = 0
    lost_bets: int = 0
    total_staked: int = 0
    profit_loss: int = 0
    market_ids: list[int] = field(default_factory=list)

    @property
    def win_rate(self) -> float:
        """Percentage of bets won, 0-100."""
        return (self.won_bets / self.total_bets) * 100.0 if self.total_bets else 0.0


def active_bets(bets: list[Order]) -> list[Order]:
    return [b for b in bets if not b.redeemed]


def past_bets(bets: list[Order]) -> list[Order]:
    return [b for b in bets if b.redeemed]


def summarize_bets(bets: list[Order]) -> BetSummary:
    """Totals over bets. Profit/loss sums the winnings of redeemed bets."""
    won = past_bets(bets)
    return BetSummary(
        total_bets=len(bets),
        active_bets=len(bets) - len(won),
        won_bets=len(won),
        lost_bets=len(bets) - len(won),
        total_staked=sum(stake_minor(b) for b in bets),
        profit_loss=sum(profit_minor(b) for b in won),
        market_ids=list(dict.fromkeys(b.market_id for b in bets)),
    )


def redeemable(bet: Order, markets: dict[int, Market]) -> bool:
    """A bet can be redeemed once its market is Settled and it hasn't been redeemed already."""
    market = markets.get(bet.market_id)
    return market is not None and market.status == MarketStatus.SETTLED and not bet.redeemed


def expected_payout(bet: Order) -> int:
    return payout_minor(bet)
