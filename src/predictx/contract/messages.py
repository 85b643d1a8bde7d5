"""Typed execute-message variants for the PredictX contract."""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, model_validator

from predictx.models.order import Side

# Uint128 travels as a decimal string
Uint128 = Annotated[int, Field(ge=0), PlainSerializer(str, return_type=str, when_used="json")]


class ExecuteMsg(BaseModel):
    """Base for execute variants. `to_msg()` -> `{variant: {fields}}`, None fields dropped."""

    model_config = ConfigDict(frozen=True)

    variant: ClassVar[str] = ""

    def to_msg(self) -> dict[str, Any]:
        return {self.variant: self.model_dump(mode="json", exclude_none=True)}


# --- Betting ---
class PlaceOrder(ExecuteMsg):
    variant: ClassVar[str] = "place_order"

    market_id: int
    option_id: int = Field(..., ge=0)
    order_type: Literal["limit", "market"] = "limit"
    side: Side
    amount: Uint128
    odds: int = Field(..., gt=100)  # x100


class CancelOrder(ExecuteMsg):
    variant: ClassVar[str] = "cancel_order"

    order_id: int


class Redeem(ExecuteMsg):
    variant: ClassVar[str] = "redeem"

    bet_id: int


# --- Market creation ---
class CreateMarket(ExecuteMsg):
    variant: ClassVar[str] = "create_market"

    question: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=2)
    category: str | None = None
    start_time: int
    end_time: int
    resolution_bond: Uint128
    resolution_reward: Uint128

    @model_validator(mode="after")
    def _check(self) -> CreateMarket:
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        if any(not o.strip() for o in self.options):
            raise ValueError("options must be non-empty")
        if len({o.strip().lower() for o in self.options}) != len(self.options):
            raise ValueError("options must be unique")
        return self


# --- Resolution ---
class ProposeResult(ExecuteMsg):
    variant: ClassVar[str] = "propose_result"

    market_id: int
    winning_option: int = Field(..., ge=0)


class ChallengeResult(ExecuteMsg):
    variant: ClassVar[str] = "challenge_result"

    market_id: int
    proposed_outcome: int = Field(..., ge=0)


class Vote(ExecuteMsg):
    variant: ClassVar[str] = "vote"

    market_id: int
    outcome: int = Field(..., ge=0)


class ResolveMarket(ExecuteMsg):
    variant: ClassVar[str] = "resolve_market"

    market_id: int


# --- Admin ---
class PauseMarket(ExecuteMsg):
    variant: ClassVar[str] = "pause_market"

    market_id: int


class CloseMarket(ExecuteMsg):
    variant: ClassVar[str] = "close_market"

    market_id: int


class CancelMarket(ExecuteMsg):
    variant: ClassVar[str] = "cancel_market"

    market_id: int


class AddToWhitelist(ExecuteMsg):
    variant: ClassVar[str] = "add_to_whitelist"

    address: str = Field(..., min_length=1)


class RemoveFromWhitelist(ExecuteMsg):
    variant: ClassVar[str] = "remove_from_whitelist"

    address: str = Field(..., min_length=1)


class UpdateConfig(ExecuteMsg):
    variant: ClassVar[str] = "update_config"

    coin_denom: str | None = None
    platform_fee: int | None = Field(None, ge=0, le=10_000)
    protocol_treasury_account: str | None = None
    challenging_time: int | None = Field(None, ge=0)
    voting_time: int | None = Field(None, ge=0)


ADMIN_MARKET_ACTIONS: dict[str, type[ExecuteMsg]] = {
    "pause": PauseMarket,
    "close": CloseMarket,
    "cancel": CancelMarket,
}
