"""Market, MarketStatus, ContractConfig - snapshots of contract state."""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class MarketStatus(str, Enum):
    ACTIVE = "Active"
    PAUSED = "Paused"
    CLOSED = "Closed"
    DISPUTED = "Disputed"
    SETTLED = "Settled"
    CANCELLED = "Cancelled"
    # Resolution flow
    RESULT_PROPOSED = "ResultProposed"
    CHALLENGED = "Challenged"
    VOTING = "Voting"
    READY_TO_RESOLVE = "ReadyToResolve"


RESOLUTION_STATUSES = frozenset(
    {
        MarketStatus.CLOSED,
        MarketStatus.RESULT_PROPOSED,
        MarketStatus.CHALLENGED,
        MarketStatus.VOTING,
        MarketStatus.READY_TO_RESOLVE,
    }
)


class Market(BaseModel):
    """Prediction market as returned by the `market` / `markets` queries."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    creator: str = ""
    question: str
    description: str = ""
    options: list[str] = Field(..., min_length=2)
    category: str | None = None
    start_time: int = 0  # unix seconds
    end_time: int = 0  # unix seconds
    status: MarketStatus
    resolution_bond: int = Field(0, validation_alias=AliasChoices("resolution_bond", "collateral_amount"))
    resolution_reward: int = Field(0, validation_alias=AliasChoices("resolution_reward", "reward_amount"))
    result: int | None = None  # winning option index once settled

    @field_validator("start_time", "end_time", "resolution_bond", "resolution_reward", mode="before")
    @classmethod
    def _int_from_str(cls, v: object) -> object:
        # Uint128 / Timestamp come over the wire as strings
        if isinstance(v, str):
            return int(v) if v else 0
        return v

    @field_validator("result", mode="before")
    @classmethod
    def _result_index(cls, v: object) -> object:
        if isinstance(v, str):
            return int(v) if v.strip() else None
        return v

    @property
    def is_active(self) -> bool:
        return self.status == MarketStatus.ACTIVE

    def option_name(self, index: int) -> str:
        if not 0 <= index < len(self.options):
            raise IndexError(f"Market {self.id} has no option {index}")
        return self.options[index]


class ContractConfig(BaseModel):
    """Platform-wide singleton from the `config` query."""

    model_config = ConfigDict(frozen=True)

    admin: str
    coin_denom: str
    platform_fee: int = 0  # basis points
    protocol_treasury_account: str = Field(
        "", validation_alias=AliasChoices("protocol_treasury_account", "treasury")
    )
    challenging_time: int = 0  # seconds
    voting_time: int = 0  # seconds
