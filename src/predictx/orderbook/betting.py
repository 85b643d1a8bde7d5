"""Bet economics shown next to the betting form: potential win, lay liability, escrowed funds.

Odds are taken at the x100 precision the contract stores, so what is shown and escrowed
matches the odds carried by the place_order message.
"""

from __future__ import annotations

from decimal import Decimal

from predictx.models.order import Order, Side
from predictx.units import Number, odds_from_contract, round_odds, to_minor


def potential_win(stake: Number, odds: Number, side: Side) -> Decimal:
    """Profit if the bet wins. Back: stake * odds - stake. Lay: the backer's stake."""
    stake_d = Decimal(str(stake))
    if side == Side.BACK:
        return stake_d * round_odds(odds) - stake_d
    return stake_d


def liability(stake: Number, odds: Number, side: Side) -> Decimal:
    """Amount a lay bettor stands to lose: (odds - 1) * stake. Zero for backs."""
    if side == Side.BACK:
        return Decimal(0)
    return (round_odds(odds) - 1) * Decimal(str(stake))


def escrow_minor(stake: Number, odds: Number, side: Side) -> int:
    """Minor units the contract holds for this bet: stake for backs, liability for lays."""
    round_odds(odds)  # validates odds > 1
    if side == Side.BACK:
        return to_minor(stake)
    return to_minor(liability(stake, odds, side))


def payout_minor(order: Order) -> int:
    """Stake plus winnings of a winning bet, in minor units, floored. Back and lay both receive amount * odds."""
    return int(Decimal(order.amount) * odds_from_contract(order.odds))


def profit_minor(order: Order) -> int:
    return payout_minor(order) - stake_minor(order)


def stake_minor(order: Order) -> int:
    """What the bettor put up: stake for backs, liability for lays."""
    if order.side == Side.BACK:
        return order.amount
    return int(Decimal(order.amount) * (odds_from_contract(order.odds) - 1))
