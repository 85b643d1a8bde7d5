"""Market list filtering, stats, countdowns and the resolution queue."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum

from predictx.models import RESOLUTION_STATUSES, Market, MarketStatus


class ResolutionAction(str, Enum):
    PROPOSE = "propose"
    CHALLENGE = "challenge"
    VOTE = "vote"
    RESOLVE = "resolve"

    @property
    def label(self) -> str:
        return _ACTION_LABELS[self]


_ACTION_LABELS = {
    ResolutionAction.PROPOSE: "Propose Result",
    ResolutionAction.CHALLENGE: "Challenge Proposal",
    ResolutionAction.VOTE: "Vote",
    ResolutionAction.RESOLVE: "Resolve",
}

_NEXT_ACTION = {
    MarketStatus.CLOSED: ResolutionAction.PROPOSE,
    MarketStatus.RESULT_PROPOSED: ResolutionAction.CHALLENGE,
    MarketStatus.CHALLENGED: ResolutionAction.VOTE,
    MarketStatus.VOTING: ResolutionAction.VOTE,
    MarketStatus.READY_TO_RESOLVE: ResolutionAction.RESOLVE,
}


@dataclass
class MarketStats:
    total_markets: int
    active_markets: int
    total_volume: int  # sum of resolution bonds, minor units


def filter_markets(
    markets: list[Market],
    status: MarketStatus | None = None,
    search: str = "",
    category: str | None = None,
) -> list[Market]:
    """Status / category filter plus case-insensitive substring search on the question."""
    needle = search.strip().lower()

    def allowed(m: Market) -> bool:
        if status is not None and m.status != status:
            return False
        if category and (m.category or "").lower() != category.lower():
            return False
        return not needle or needle in m.question.lower()

    return [m for m in markets if allowed(m)]


def market_stats(markets: list[Market]) -> MarketStats:
    return MarketStats(
        total_markets=len(markets),
        active_markets=sum(1 for m in markets if m.is_active),
        total_volume=sum(m.resolution_bond for m in markets),
    )


def time_remaining(end_time: int, now: float | None = None) -> str:
    """'2d 3h remaining', '4h 10m remaining', '12m remaining' or 'Ended'."""
    now_s = int(time.time() if now is None else now)
    left = end_time - now_s
    if left <= 0:
        return "Ended"
    days, rem = divmod(left, 86400)
    hours, rem = divmod(rem, 3600)
    minutes = rem // 60
    if days > 0:
        return f"{days}d {hours}h remaining"
    if hours > 0:
        return f"{hours}h {minutes}m remaining"
    return f"{minutes}m remaining"


def next_resolution_action(status: MarketStatus) -> ResolutionAction | None:
    """What a user can do next for a market in the resolution flow; None outside it."""
    return _NEXT_ACTION.get(status)


def resolution_queue(markets: list[Market]) -> list[Market]:
    """Markets awaiting resolution, soonest-ended first."""
    return sorted((m for m in markets if m.status in RESOLUTION_STATUSES), key=lambda m: (m.end_time, m.id))
