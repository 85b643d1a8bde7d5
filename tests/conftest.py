"""Shared fixtures: an in-memory contract behind httpx.MockTransport and a scriptable wallet."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import pytest
import structlog

from predictx.config import Settings
from predictx.config.settings import ENV_OVERRIDES
from predictx.contract.encoding import decode_query
from predictx.errors import SignatureRejected
from predictx.models import MsgExecuteContract, TxResult
from predictx.wallet.base import WalletBackend

CONTRACT = "comdex1contract"
REST_URL = "http://lcd.test"
ALICE = "comdex1alice"


def market_json(market_id: int, status: str = "Active", **overrides: Any) -> dict[str, Any]:
    row = {
        "id": market_id,
        "creator": "comdex1creator",
        "question": f"Will event {market_id} happen?",
        "description": "Resolves Yes if it happens.",
        "options": ["Yes", "No"],
        "category": "Sports",
        "start_time": "1700000000",
        "end_time": "1800000000",
        "status": status,
        "collateral_amount": "5000000",
        "reward_amount": "1000000",
        "result": None,
    }
    row.update(overrides)
    return row


def bet_json(bet_id: int, side: str = "Back", amount: int = 1_000_000, odds: int = 250, **overrides: Any) -> dict[str, Any]:
    row = {
        "id": bet_id,
        "bettor": ALICE,
        "market_id": 1,
        "option_id": 0,
        "side": side,
        "amount": str(amount),
        "matched_amount": "0",
        "odds": str(odds),
        "redeemed": False,
    }
    row.update(overrides)
    return row


class FakeContract:
    """Answers smart queries from in-memory state and records every decoded query."""

    def __init__(self) -> None:
        self.markets: dict[int, dict[str, Any]] = {}
        self.config: dict[str, Any] = {
            "admin": "comdex1admin",
            "coin_denom": "ucmdx",
            "platform_fee": 200,
            "protocol_treasury_account": "comdex1treasury",
            "challenging_time": 86400,
            "voting_time": 172800,
        }
        self.books: dict[tuple[int, int], dict[str, Any]] = {}
        self.bets: list[dict[str, Any]] = []
        self.whitelist: list[str] = []
        self.calls: list[dict[str, Any]] = []
        self.fail_network = False

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def _page(self, rows: list[dict[str, Any]], args: dict[str, Any]) -> list[dict[str, Any]]:
        rows = sorted(rows, key=lambda r: r["id"])
        if args.get("start_after") is not None:
            rows = [r for r in rows if r["id"] > args["start_after"]]
        return rows[: args.get("limit") or 30]

    def handle(self, request: httpx.Request) -> httpx.Response:
        if self.fail_network:
            raise httpx.ConnectError("connection refused", request=request)
        query = decode_query(request.url.path.rsplit("/", 1)[-1])
        self.calls.append(query)
        variant, args = next(iter(query.items()))
        if variant == "markets":
            rows = [m for m in self.markets.values() if not args.get("status") or m["status"] == args["status"]]
            return httpx.Response(200, json={"data": self._page(rows, args)})
        if variant == "market":
            row = self.markets.get(args["market_id"])
            if row is None:
                body = {"code": 2, "message": "market not found: query wasm contract failed", "details": []}
                return httpx.Response(500, json=body)
            return httpx.Response(200, json={"data": row})
        if variant == "config":
            return httpx.Response(200, json={"data": self.config})
        if variant == "query_bets_by_market_and_option":
            book = self.books.get((args["market_id"], args["option_index"]), {"buy_bets": [], "sell_bets": []})
            return httpx.Response(200, json={"data": book})
        if variant in ("user_bets", "user_orders"):
            rows = [b for b in self.bets if b["bettor"] == args["user"]]
            if args.get("market_id") is not None:
                rows = [b for b in rows if b["market_id"] == args["market_id"]]
            return httpx.Response(200, json={"data": self._page(rows, args)})
        if variant == "whitelisted_addresses":
            return httpx.Response(200, json={"data": {"addresses": self.whitelist}})
        return httpx.Response(400, json={"code": 2, "message": f"unknown variant {variant}", "details": []})


class FakeWallet(WalletBackend):
    """Wallet backend that counts enable requests and records what it is asked to sign."""

    name = "fake"

    def __init__(self, accounts: list[str] | None = None, enable_delay: float = 0.0) -> None:
        self.accounts = accounts if accounts is not None else [ALICE]
        self.enable_delay = enable_delay
        self.enable_calls = 0
        self.reject = False
        self.broadcast_error: Exception | None = None
        self.sent: list[MsgExecuteContract] = []

    async def enable(self, chain_id: str) -> None:
        self.enable_calls += 1
        if self.enable_delay:
            await asyncio.sleep(self.enable_delay)

    async def get_accounts(self, chain_id: str) -> list[str]:
        return list(self.accounts)

    async def sign_and_broadcast(self, chain_id: str, msg: MsgExecuteContract, memo: str = "") -> TxResult:
        if self.reject:
            raise SignatureRejected("Request rejected by user")
        if self.broadcast_error is not None:
            raise self.broadcast_error
        self.sent.append(msg)
        return TxResult(tx_hash=f"HASH{len(self.sent)}", height=100, gas_wanted=200000, gas_used=150000)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ENV_OVERRIDES:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def contract() -> FakeContract:
    return FakeContract()


@pytest.fixture
def wallet() -> FakeWallet:
    return FakeWallet()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        chain={
            "rest_url": REST_URL,
            "contract_address": CONTRACT,
            "chain_id": "comdex-1",
            "coin_denom": "ucmdx",
            "display_denom": "CMDX",
            "page_limit": 2,
        }
    )
