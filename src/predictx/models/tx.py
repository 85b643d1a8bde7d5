"""Coin, MsgExecuteContract, TxResult - execute-side payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

EXECUTE_TYPE_URL = "/cosmwasm.wasm.v1.MsgExecuteContract"


class Coin(BaseModel):
    """Amount in minor units of one denom. Serialized with amount as a string, as the chain expects."""

    model_config = ConfigDict(frozen=True)

    denom: str = Field(..., min_length=1)
    amount: int = Field(..., ge=0)

    @field_serializer("amount")
    def _amount_str(self, amount: int) -> str:
        return str(amount)


class MsgExecuteContract(BaseModel):
    """CosmWasm execute message with base64-encoded JSON `msg`."""

    model_config = ConfigDict(frozen=True)

    sender: str
    contract: str
    msg: str  # base64(JSON)
    funds: list[Coin] = Field(default_factory=list)

    def to_any(self) -> dict[str, Any]:
        """{typeUrl, value} envelope used by signing clients."""
        return {"typeUrl": EXECUTE_TYPE_URL, "value": self.model_dump()}


class TxResult(BaseModel):
    """Outcome of a broadcast execute transaction."""

    tx_hash: str
    height: int | None = None
    gas_wanted: int | None = None
    gas_used: int | None = None
    raw_log: str | None = None
