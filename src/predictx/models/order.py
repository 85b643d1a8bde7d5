"""Order (bet) and order book levels."""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from predictx.errors import ValidationError as PredictXValidationError
from predictx.units import odds_to_contract


class Side(str, Enum):
    BACK = "Back"
    LAY = "Lay"

    @classmethod
    def parse(cls, value: str) -> Side:
        """Case-insensitive: back/BACK/Back/buy -> BACK, lay/sell -> LAY."""
        v = value.strip().lower()
        if v in ("back", "buy"):
            return cls.BACK
        if v in ("lay", "sell"):
            return cls.LAY
        raise ValueError(f"Unknown side: {value!r}")


class Order(BaseModel):
    """Single bet. The contract uses two shapes (bets and user orders); aliases cover both."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    bettor: str = Field("", validation_alias=AliasChoices("bettor", "creator"))
    market_id: int
    option_index: int = Field(..., validation_alias=AliasChoices("option_index", "option_id"))
    side: Side = Field(..., validation_alias=AliasChoices("side", "position"))
    amount: int
    matched_amount: int = Field(0, validation_alias=AliasChoices("matched_amount", "filled_amount"))
    odds: int  # x100
    status: str | None = None
    redeemed: bool = False
    timestamp: int | None = None

    @field_validator("side", mode="before")
    @classmethod
    def _side(cls, v: object) -> object:
        if isinstance(v, str):
            return Side.parse(v)
        return v

    @field_validator("amount", "matched_amount", mode="before")
    @classmethod
    def _uint(cls, v: object) -> object:
        if isinstance(v, str):
            return int(v) if v else 0
        return v

    @field_validator("odds", mode="before")
    @classmethod
    def _odds(cls, v: object) -> object:
        # "250" is already scaled; "2.5" is decimal odds
        try:
            if isinstance(v, str):
                return odds_to_contract(v) if "." in v else int(v)
            if isinstance(v, float):
                return odds_to_contract(v)
        except PredictXValidationError as e:
            raise ValueError(str(e)) from e
        return v

    @property
    def unmatched_amount(self) -> int:
        return max(self.amount - self.matched_amount, 0)


class OrderBookLevel(BaseModel):
    """All unmatched bets at one odds value."""

    odds: int  # x100
    total_unmatched_volume: int = 0
    bets: list[Order] = Field(default_factory=list)


class OrderBook(BaseModel):
    """Back and lay levels for one (market, option)."""

    market_id: int
    option_index: int
    back: list[OrderBookLevel] = Field(default_factory=list)  # odds non-decreasing
    lay: list[OrderBookLevel] = Field(default_factory=list)  # odds non-increasing

    @property
    def best_back(self) -> int | None:
        return self.back[0].odds if self.back else None

    @property
    def best_lay(self) -> int | None:
        return self.lay[0].odds if self.lay else None

    @property
    def back_volume(self) -> int:
        return sum(lev.total_unmatched_volume for lev in self.back)

    @property
    def lay_volume(self) -> int:
        return sum(lev.total_unmatched_volume for lev in self.lay)
