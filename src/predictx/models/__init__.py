"""Canonical schema (Pydantic) - Market, Order, OrderBook, Coin, MsgExecuteContract."""

from predictx.models.market import RESOLUTION_STATUSES, ContractConfig, Market, MarketStatus
from predictx.models.order import Order, OrderBook, OrderBookLevel, Side
from predictx.models.tx import Coin, MsgExecuteContract, TxResult

__all__ = [
    "Market",
    "MarketStatus",
    "RESOLUTION_STATUSES",
    "ContractConfig",
    "Order",
    "OrderBook",
    "OrderBookLevel",
    "Side",
    "Coin",
    "MsgExecuteContract",
    "TxResult",
]
