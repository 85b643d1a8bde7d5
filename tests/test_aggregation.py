"""Market filtering, stats, countdowns, resolution queue and bet summaries."""

from conftest import bet_json, market_json

from predictx.aggregation.bets import active_bets, past_bets, redeemable, summarize_bets
from predictx.aggregation.markets import (
    ResolutionAction,
    filter_markets,
    market_stats,
    next_resolution_action,
    resolution_queue,
    time_remaining,
)
from predictx.models import Market, MarketStatus, Order


def _markets():
    return [
        Market.model_validate(market_json(1, question="Will BTC hit 100k?", category="Crypto")),
        Market.model_validate(market_json(2, status="Closed", end_time="1700000500")),
        Market.model_validate(market_json(3, status="Voting", end_time="1700000100")),
        Market.model_validate(market_json(4, status="Settled", collateral_amount="0")),
    ]


def test_filter_markets():
    markets = _markets()
    assert [m.id for m in filter_markets(markets, search="btc")] == [1]
    assert [m.id for m in filter_markets(markets, status=MarketStatus.CLOSED)] == [2]
    assert [m.id for m in filter_markets(markets, category="crypto")] == [1]
    assert len(filter_markets(markets)) == 4


def test_market_stats():
    stats = market_stats(_markets())
    assert stats.total_markets == 4
    assert stats.active_markets == 1
    assert stats.total_volume == 15_000_000


def test_time_remaining():
    assert time_remaining(2 * 86400 + 3 * 3600 + 59, now=0) == "2d 3h remaining"
    assert time_remaining(4 * 3600 + 10 * 60, now=0) == "4h 10m remaining"
    assert time_remaining(12 * 60 + 30, now=0) == "12m remaining"
    assert time_remaining(100, now=100) == "Ended"
    assert time_remaining(100, now=500) == "Ended"


def test_next_resolution_action():
    assert next_resolution_action(MarketStatus.CLOSED) == ResolutionAction.PROPOSE
    assert next_resolution_action(MarketStatus.RESULT_PROPOSED) == ResolutionAction.CHALLENGE
    assert next_resolution_action(MarketStatus.CHALLENGED) == ResolutionAction.VOTE
    assert next_resolution_action(MarketStatus.VOTING) == ResolutionAction.VOTE
    assert next_resolution_action(MarketStatus.READY_TO_RESOLVE) == ResolutionAction.RESOLVE
    assert next_resolution_action(MarketStatus.ACTIVE) is None
    assert ResolutionAction.PROPOSE.label == "Propose Result"


def test_resolution_queue_soonest_first():
    assert [m.id for m in resolution_queue(_markets())] == [3, 2]


def test_summarize_bets():
    bets = [
        Order.model_validate(bet_json(1, amount=1_000_000, odds=250, redeemed=True)),
        Order.model_validate(bet_json(2, side="Lay", amount=2_000_000, odds=300, market_id=2)),
    ]
    summary = summarize_bets(bets)
    assert summary.total_bets == 2
    assert summary.active_bets == 1
    assert summary.won_bets == 1
    assert summary.total_staked == 5_000_000
    assert summary.profit_loss == 1_500_000
    assert summary.win_rate == 50.0
    assert summary.market_ids == [1, 2]
    assert [b.id for b in active_bets(bets)] == [2]
    assert [b.id for b in past_bets(bets)] == [1]


def test_empty_summary():
    assert summarize_bets([]).win_rate == 0.0


def test_redeemable():
    markets = {
        1: Market.model_validate(market_json(1, status="Settled")),
        2: Market.model_validate(market_json(2, status="Closed")),
    }
    assert redeemable(Order.model_validate(bet_json(1)), markets)
    assert not redeemable(Order.model_validate(bet_json(2, redeemed=True)), markets)
    assert not redeemable(Order.model_validate(bet_json(3, market_id=2)), markets)
    assert not redeemable(Order.model_validate(bet_json(4, market_id=9)), markets)
