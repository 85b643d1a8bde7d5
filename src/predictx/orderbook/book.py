"""Order book for one (market, option) from the `query_bets_by_market_and_option` response."""

from __future__ import annotations

from typing import Any, Iterable

import structlog

from predictx.models.order import Order, OrderBook, OrderBookLevel, Side

log = structlog.get_logger(__name__)


def _uint(v: Any) -> int:
    if v is None or v == "":
        return 0
    try:
        return int(v)
    except (TypeError, ValueError):
        return 0


def _level_entries(raw: Any) -> Iterable[tuple[Any, dict[str, Any]]]:
    """Accept [[odds, level], ...] (contract Map serialization) or {odds: level}."""
    if isinstance(raw, dict):
        return raw.items()
    out = []
    for entry in raw or []:
        if isinstance(entry, (list, tuple)) and len(entry) == 2 and isinstance(entry[1], dict):
            out.append((entry[0], entry[1]))
    return out


def _parse_levels(raw: Any) -> list[OrderBookLevel]:
    levels: list[OrderBookLevel] = []
    for odds_raw, body in _level_entries(raw):
        odds = _uint(odds_raw)
        if odds <= 0:
            log.warning("orderbook_bad_odds", odds=odds_raw)
            continue
        bets = [Order.model_validate(b) for b in body.get("bets") or []]
        volume = body.get("total_unmatched_volume")
        total = _uint(volume) if volume is not None else sum(b.unmatched_amount for b in bets)
        levels.append(OrderBookLevel(odds=odds, total_unmatched_volume=total, bets=bets))
    return levels


def sort_back(levels: list[OrderBookLevel]) -> list[OrderBookLevel]:
    """Back levels, odds non-decreasing (lowest odds first)."""
    return sorted(levels, key=lambda lev: lev.odds)


def sort_lay(levels: list[OrderBookLevel]) -> list[OrderBookLevel]:
    """Lay levels, odds non-increasing (highest odds first)."""
    return sorted(levels, key=lambda lev: lev.odds, reverse=True)


def build_order_book(raw: dict[str, Any], market_id: int, option_index: int) -> OrderBook:
    """Convert contract response to OrderBook. `buy_bets` are backs, `sell_bets` are lays."""
    back = _parse_levels(raw.get("buy_bets") or raw.get("back_bets"))
    lay = _parse_levels(raw.get("sell_bets") or raw.get("lay_bets"))
    return OrderBook(market_id=market_id, option_index=option_index, back=sort_back(back), lay=sort_lay(lay))


def order_book_from_orders(orders: Iterable[Order], market_id: int, option_index: int) -> OrderBook:
    """Group a flat list of orders into levels (used for user_orders and tests)."""
    back: dict[int, list[Order]] = {}
    lay: dict[int, list[Order]] = {}
    for o in orders:
        if o.market_id != market_id or o.option_index != option_index or o.unmatched_amount == 0:
            continue
        (back if o.side == Side.BACK else lay).setdefault(o.odds, []).append(o)

    def levels(groups: dict[int, list[Order]]) -> list[OrderBookLevel]:
        return [
            OrderBookLevel(odds=odds, total_unmatched_volume=sum(o.unmatched_amount for o in bets), bets=bets)
            for odds, bets in groups.items()
        ]

    return OrderBook(
        market_id=market_id,
        option_index=option_index,
        back=sort_back(levels(back)),
        lay=sort_lay(levels(lay)),
    )


def depth_at_levels(book: OrderBook, n: int = 5) -> tuple[list[tuple[int, int]], list[tuple[int, int]]]:
    """Return (top N back, top N lay) as [(odds, volume), ...]."""
    return (
        [(lev.odds, lev.total_unmatched_volume) for lev in book.back[:n]],
        [(lev.odds, lev.total_unmatched_volume) for lev in book.lay[:n]],
    )
