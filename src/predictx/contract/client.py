"""Async REST client for the contract's `smart` query endpoint."""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError

from predictx.contract.encoding import encode_query
from predictx.contract.pagination import paginate
from predictx.contract.queries import (
    BetsByMarketAndOptionQuery,
    ConfigQuery,
    MarketQuery,
    MarketsQuery,
    UserBetsQuery,
    UserOrdersQuery,
    WhitelistedAddressesQuery,
)
from predictx.errors import ContractQueryError, NetworkError
from predictx.models import ContractConfig, Market, MarketStatus, Order, OrderBook
from predictx.orderbook.book import build_order_book

log = structlog.get_logger(__name__)

SMART_PATH = "/cosmwasm/wasm/v1/contract/{contract}/smart/{query}"


def smart_query_url(rest_url: str, contract_address: str, query: Any) -> str:
    """Full GET URL for a smart query."""
    path = SMART_PATH.format(contract=contract_address, query=encode_query(query))
    return rest_url.rstrip("/") + path


def _error_detail(resp: httpx.Response) -> str:
    # Cosmos REST errors look like {"code": 2, "message": "...", "details": []}
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200]
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)


class ContractClient:
    """Queries one contract through a chain REST (LCD) node. Use as an async context manager."""

    def __init__(
        self,
        rest_url: str,
        contract_address: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.rest_url = rest_url.rstrip("/")
        self.contract_address = contract_address
        self._http = httpx.AsyncClient(base_url=self.rest_url, timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, settings: Any, transport: httpx.AsyncBaseTransport | None = None) -> ContractClient:
        settings.require_chain()
        return cls(
            settings.rest_url,
            settings.contract_address,
            timeout=settings.request_timeout_sec,
            transport=transport,
        )

    async def __aenter__(self) -> ContractClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def query(self, query: Any) -> Any:
        """Run a smart query and return the decoded `data` field."""
        path = SMART_PATH.format(contract=self.contract_address, query=encode_query(query))
        variant = next(iter(query.to_msg())) if hasattr(query, "to_msg") else None
        log.debug("contract_query", variant=variant)
        try:
            resp = await self._http.get(path)
        except httpx.RequestError as e:
            log.warning("contract_query_network_error", variant=variant, error=str(e))
            raise NetworkError(f"Could not reach {self.rest_url}: {e}") from e
        if resp.status_code >= 400:
            detail = _error_detail(resp)
            log.warning("contract_query_failed", variant=variant, status=resp.status_code, detail=detail)
            raise ContractQueryError(f"Query {variant or 'smart'} failed: {detail}", resp.status_code)
        try:
            body = resp.json()
        except ValueError as e:
            raise ContractQueryError("Response is not JSON", resp.status_code) from e
        if not isinstance(body, dict) or "data" not in body:
            raise ContractQueryError("Response has no 'data' field", resp.status_code)
        return body["data"]

    async def _query_model(self, query: Any, model: Any) -> Any:
        data = await self.query(query)
        try:
            if isinstance(data, list):
                return [model.model_validate(row) for row in data]
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise ContractQueryError(f"Unexpected {model.__name__} shape: {e.error_count()} error(s)") from e

    # --- Markets ---
    async def get_market(self, market_id: int) -> Market:
        return await self._query_model(MarketQuery(market_id=market_id), Market)

    async def list_markets(
        self,
        status: MarketStatus | None = None,
        start_after: int | None = None,
        limit: int | None = None,
    ) -> list[Market]:
        """One page of markets after cursor `start_after`."""
        query = MarketsQuery(status=status, start_after=start_after, limit=limit)
        return await self._query_model(query, Market)

    def iter_markets(self, status: MarketStatus | None = None, limit: int = 30) -> AsyncIterator[Market]:
        """Every market, page by page."""

        async def fetch(start_after: int | None, page_limit: int) -> list[Market]:
            return await self.list_markets(status=status, start_after=start_after, limit=page_limit)

        return paginate(fetch, limit=limit, cursor=lambda m: m.id)

    async def get_markets(self, market_ids: list[int]) -> dict[int, Market]:
        """Fetch several markets concurrently, keyed by id."""
        unique = list(dict.fromkeys(market_ids))
        markets = await asyncio.gather(*(self.get_market(mid) for mid in unique))
        return {m.id: m for m in markets}

    async def get_config(self) -> ContractConfig:
        return await self._query_model(ConfigQuery(), ContractConfig)

    # --- Orders / bets ---
    async def get_order_book(self, market_id: int, option_index: int) -> OrderBook:
        data = await self.query(BetsByMarketAndOptionQuery(market_id=market_id, option_index=option_index))
        try:
            return build_order_book(data or {}, market_id, option_index)
        except PydanticValidationError as e:
            raise ContractQueryError(f"Unexpected order book shape: {e.error_count()} error(s)") from e

    async def user_orders(
        self,
        user: str,
        market_id: int | None = None,
        start_after: int | None = None,
        limit: int | None = None,
    ) -> list[Order]:
        query = UserOrdersQuery(user=user, market_id=market_id, start_after=start_after, limit=limit)
        return await self._query_model(query, Order)

    async def user_bets(self, user: str, start_after: int | None = None, limit: int | None = None) -> list[Order]:
        return await self._query_model(UserBetsQuery(user=user, start_after=start_after, limit=limit), Order)

    def iter_user_bets(self, user: str, limit: int = 30) -> AsyncIterator[Order]:
        async def fetch(start_after: int | None, page_limit: int) -> list[Order]:
            return await self.user_bets(user, start_after=start_after, limit=page_limit)

        return paginate(fetch, limit=limit, cursor=lambda o: o.id)

    async def whitelisted_addresses(self, start_after: str | None = None, limit: int | None = None) -> list[str]:
        data = await self.query(WhitelistedAddressesQuery(start_after=start_after, limit=limit))
        if isinstance(data, dict):
            data = data.get("addresses", [])
        return [str(a) for a in data or []]
