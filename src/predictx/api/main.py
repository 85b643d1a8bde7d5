"""FastAPI read-only JSON bridge over the contract's smart queries."""

from __future__ import annotations

import pathlib
from typing import AsyncIterator

import structlog
from fastapi import Depends, FastAPI, Path, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from predictx.aggregation.bets import summarize_bets
from predictx.aggregation.markets import (
    filter_markets,
    market_stats,
    next_resolution_action,
    resolution_queue,
    time_remaining,
)
from predictx.api.schemas import (
    BetSummaryResponse,
    ErrorResponse,
    HealthResponse,
    MarketItem,
    MarketsListResponse,
    OrderBookResponse,
    StatsResponse,
    UserBetsResponse,
    WhitelistResponse,
)
from predictx.config import Settings, get_settings
from predictx.contract.client import ContractClient
from predictx.contract.pagination import collect
from predictx.errors import (
    ConfigurationError,
    ContractQueryError,
    NetworkError,
    PredictXError,
    ValidationError,
)
from predictx.models import ContractConfig, Market, MarketStatus, Order
from predictx.units import format_amount

log = structlog.get_logger(__name__)

# Set by run_api() so dependencies load the same profile and config directory as the CLI.
_config_profile: str | None = None
_config_dir: pathlib.Path | None = None


def get_app_settings() -> Settings:
    return get_settings(_config_profile, _config_dir)


async def get_contract_client(settings: Settings = Depends(get_app_settings)) -> AsyncIterator[ContractClient]:
    """One REST client per request; closed when the response is sent."""
    client = ContractClient.from_settings(settings)
    try:
        yield client
    finally:
        await client.aclose()


app = FastAPI(title="PredictX API", version="0.1.0")
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


def _error_json(code: str, message: str, status_code: int = 404) -> JSONResponse:
    """Return consistent error JSON: { detail, code }."""
    return JSONResponse(
        status_code=status_code,
        content={"detail": message, "code": code},
    )


def _status_for(exc: PredictXError) -> int:
    if isinstance(exc, ConfigurationError):
        return 503
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, ContractQueryError):
        # LCD nodes report a missing market as 404 on newer versions, 500 + "not found" on older ones
        if exc.status_code == 404 or "not found" in str(exc).lower():
            return 404
        return 502
    if isinstance(exc, NetworkError):
        return 502
    return 500


@app.exception_handler(PredictXError)
async def predictx_error_handler(request: Request, exc: PredictXError) -> JSONResponse:
    status_code = _status_for(exc)
    code = "not_found" if status_code == 404 else exc.code
    log.warning("api_error", path=request.url.path, code=code, error=str(exc))
    return _error_json(code, str(exc), status_code)


def _market_item(market: Market) -> MarketItem:
    action = next_resolution_action(market.status)
    return MarketItem(
        **market.model_dump(),
        time_remaining=time_remaining(market.end_time) if market.end_time else None,
        next_action=action.value if action else None,
    )


async def _all_markets(client: ContractClient, settings: Settings, status: MarketStatus | None = None) -> list[Market]:
    return await collect(client.iter_markets(status=status, limit=settings.page_limit))


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok")


@app.get("/api/markets", response_model=MarketsListResponse)
async def markets_list(
    status: MarketStatus | None = None,
    search: str = "",
    category: str | None = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    client: ContractClient = Depends(get_contract_client),
    settings: Settings = Depends(get_app_settings),
) -> MarketsListResponse:
    """All markets (every page), filtered by status / category / question search, then limit/offset."""
    markets = filter_markets(await _all_markets(client, settings), status=status, search=search, category=category)
    page = markets[offset : offset + limit]
    return MarketsListResponse(markets=[_market_item(m) for m in page], total=len(markets))


@app.get(
    "/api/market/{market_id}",
    response_model=MarketItem,
    responses={404: {"description": "Unknown market", "model": ErrorResponse}},
)
async def market_detail(market_id: int, client: ContractClient = Depends(get_contract_client)) -> MarketItem:
    return _market_item(await client.get_market(market_id))


@app.get("/api/market/{market_id}/orderbook/{option_index}", response_model=OrderBookResponse)
async def market_orderbook(
    market_id: int,
    option_index: int = Path(..., ge=0),
    client: ContractClient = Depends(get_contract_client),
) -> OrderBookResponse:
    """Back levels lowest odds first, lay levels highest odds first."""
    book = await client.get_order_book(market_id, option_index)
    return OrderBookResponse(
        market_id=book.market_id,
        option_index=book.option_index,
        back=book.back,
        lay=book.lay,
        best_back=book.best_back,
        best_lay=book.best_lay,
        back_volume=book.back_volume,
        lay_volume=book.lay_volume,
    )


@app.get("/api/config", response_model=ContractConfig)
async def contract_config(client: ContractClient = Depends(get_contract_client)) -> ContractConfig:
    return await client.get_config()


@app.get("/api/stats", response_model=StatsResponse)
async def stats(
    client: ContractClient = Depends(get_contract_client),
    settings: Settings = Depends(get_app_settings),
) -> StatsResponse:
    data = market_stats(await _all_markets(client, settings))
    return StatsResponse(
        total_markets=data.total_markets,
        active_markets=data.active_markets,
        total_volume=data.total_volume,
        total_volume_display=format_amount(data.total_volume, settings.display_denom),
    )


@app.get("/api/user-bets/{address}", response_model=UserBetsResponse)
async def user_bets(
    address: str,
    client: ContractClient = Depends(get_contract_client),
    settings: Settings = Depends(get_app_settings),
) -> UserBetsResponse:
    bets = await collect(client.iter_user_bets(address, limit=settings.page_limit))
    summary = summarize_bets(bets)
    return UserBetsResponse(
        address=address,
        bets=bets,
        summary=BetSummaryResponse(
            total_bets=summary.total_bets,
            active_bets=summary.active_bets,
            won_bets=summary.won_bets,
            lost_bets=summary.lost_bets,
            total_staked=summary.total_staked,
            profit_loss=summary.profit_loss,
            win_rate=summary.win_rate,
        ),
    )


@app.get("/api/user-orders/{address}", response_model=list[Order])
async def user_orders(
    address: str,
    market_id: int | None = None,
    start_after: int | None = None,
    limit: int = Query(30, ge=1, le=100),
    client: ContractClient = Depends(get_contract_client),
) -> list[Order]:
    """One page of a user's open orders, optionally for one market."""
    return await client.user_orders(address, market_id=market_id, start_after=start_after, limit=limit)


@app.get("/api/whitelisted-addresses", response_model=WhitelistResponse)
async def whitelisted_addresses(client: ContractClient = Depends(get_contract_client)) -> WhitelistResponse:
    return WhitelistResponse(addresses=await client.whitelisted_addresses())


@app.get("/api/resolution-queue", response_model=list[MarketItem])
async def resolution_queue_list(
    client: ContractClient = Depends(get_contract_client),
    settings: Settings = Depends(get_app_settings),
) -> list[MarketItem]:
    """Markets in Closed / ResultProposed / Challenged / Voting / ReadyToResolve with their next action."""
    return [_market_item(m) for m in resolution_queue(await _all_markets(client, settings))]


def run_api(
    host: str = "127.0.0.1",
    port: int = 3001,
    profile: str | None = None,
    config_dir: pathlib.Path | None = None,
) -> None:
    global _config_profile, _config_dir
    _config_profile = profile
    _config_dir = config_dir
    import uvicorn

    uvicorn.run("predictx.api.main:app", host=host, port=port, reload=False)
