"""Pydantic schemas for API request/response consistency and OpenAPI docs."""

from __future__ import annotations

from pydantic import BaseModel, Field

from predictx.models import Market, Order, OrderBookLevel


# --- Health ---
class HealthResponse(BaseModel):
    status: str = "ok"


# --- Error (consistent shape for 4xx/5xx) ---
class ErrorResponse(BaseModel):
    detail: str = Field(..., description="Human-readable message")
    code: str | None = Field(None, description="Machine-readable code, e.g. not_found, query_failed")


# --- Markets ---
class MarketItem(Market):
    time_remaining: str | None = Field(None, description="'2d 3h remaining' or 'Ended'")
    next_action: str | None = Field(None, description="propose / challenge / vote / resolve for markets in resolution")


class MarketsListResponse(BaseModel):
    markets: list[MarketItem]
    total: int


class OrderBookResponse(BaseModel):
    market_id: int
    option_index: int
    back: list[OrderBookLevel]
    lay: list[OrderBookLevel]
    best_back: int | None = None
    best_lay: int | None = None
    back_volume: int = 0
    lay_volume: int = 0


class StatsResponse(BaseModel):
    total_markets: int
    active_markets: int
    total_volume: int = Field(..., description="Sum of resolution bonds, minor units")
    total_volume_display: str


# --- Bets ---
class BetSummaryResponse(BaseModel):
    total_bets: int
    active_bets: int
    won_bets: int
    lost_bets: int
    total_staked: int
    profit_loss: int
    win_rate: float


class UserBetsResponse(BaseModel):
    address: str
    bets: list[Order]
    summary: BetSummaryResponse


class WhitelistResponse(BaseModel):
    addresses: list[str]
