"""Typed smart-query variants. `to_msg()` gives the `{variant: {fields}}` JSON the contract expects."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from predictx.models.market import MarketStatus


class ContractQuery(BaseModel):
    """Base for query variants. None-valued fields are omitted from the wire form."""

    model_config = ConfigDict(frozen=True)

    variant: ClassVar[str] = ""

    def to_msg(self) -> dict[str, Any]:
        return {self.variant: self.model_dump(mode="json", exclude_none=True)}


class MarketsQuery(ContractQuery):
    variant: ClassVar[str] = "markets"

    status: MarketStatus | None = None
    start_after: int | None = None
    limit: int | None = Field(None, ge=1)


class MarketQuery(ContractQuery):
    variant: ClassVar[str] = "market"

    market_id: int


class ConfigQuery(ContractQuery):
    variant: ClassVar[str] = "config"


class BetsByMarketAndOptionQuery(ContractQuery):
    variant: ClassVar[str] = "query_bets_by_market_and_option"

    market_id: int
    option_index: int = Field(..., ge=0)


class UserOrdersQuery(ContractQuery):
    variant: ClassVar[str] = "user_orders"

    user: str
    market_id: int | None = None
    start_after: int | None = None
    limit: int | None = Field(None, ge=1)


class UserBetsQuery(ContractQuery):
    variant: ClassVar[str] = "user_bets"

    user: str
    start_after: int | None = None
    limit: int | None = Field(None, ge=1)


class WhitelistedAddressesQuery(ContractQuery):
    variant: ClassVar[str] = "whitelisted_addresses"

    start_after: str | None = None
    limit: int | None = Field(None, ge=1)
