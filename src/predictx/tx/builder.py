"""Build MsgExecuteContract payloads and send them through the wallet session."""

from __future__ import annotations

from typing import Any, Iterable

import structlog
from pydantic import ValidationError as PydanticValidationError

from predictx.contract.encoding import encode_msg
from predictx.contract.messages import (
    ADMIN_MARKET_ACTIONS,
    AddToWhitelist,
    CancelOrder,
    ChallengeResult,
    CreateMarket,
    ExecuteMsg,
    PlaceOrder,
    ProposeResult,
    Redeem,
    RemoveFromWhitelist,
    ResolveMarket,
    UpdateConfig,
    Vote,
)
from predictx.errors import ValidationError
from predictx.models import Coin, ContractConfig, Market, MarketStatus, MsgExecuteContract, Side, TxResult
from predictx.orderbook.betting import escrow_minor
from predictx.units import Number, odds_to_contract, to_minor
from predictx.wallet.session import WalletSession

log = structlog.get_logger(__name__)


def make_msg(cls: type[ExecuteMsg], **fields: Any) -> ExecuteMsg:
    """Construct an execute variant, turning schema violations into ValidationError."""
    try:
        return cls(**fields)
    except PydanticValidationError as e:
        first = e.errors()[0]
        where = ".".join(str(p) for p in first.get("loc", ())) or cls.variant
        raise ValidationError(f"{cls.variant}: {where}: {first.get('msg')}") from e


def normalize_funds(funds: Iterable[Coin] | None) -> list[Coin]:
    """Merge duplicate denoms, drop zero amounts, sort by denom (the chain rejects unsorted coins)."""
    totals: dict[str, int] = {}
    for coin in funds or []:
        totals[coin.denom] = totals.get(coin.denom, 0) + coin.amount
    return [Coin(denom=d, amount=a) for d, a in sorted(totals.items()) if a > 0]


class TransactionBuilder:
    """Turns execute variants into signed, broadcast transactions against one contract."""

    def __init__(self, session: WalletSession, contract_address: str, denom: str) -> None:
        self.session = session
        self.contract_address = contract_address
        self.denom = denom

    def sync_denom(self, config: ContractConfig) -> str:
        """Prefer the contract's coin denom; warn when it differs from the configured one."""
        if config.coin_denom and config.coin_denom != self.denom:
            log.warning("denom_mismatch", configured=self.denom, contract=config.coin_denom)
            self.denom = config.coin_denom
        return self.denom

    def coins(self, minor_amount: int) -> list[Coin]:
        return [Coin(denom=self.denom, amount=minor_amount)] if minor_amount > 0 else []

    def build(self, msg: ExecuteMsg | dict[str, Any], funds: Iterable[Coin] | None = None) -> MsgExecuteContract:
        """MsgExecuteContract from the connected sender. Raises WalletNotConnected when disconnected."""
        sender = self.session.require_connected()
        return MsgExecuteContract(
            sender=sender,
            contract=self.contract_address,
            msg=encode_msg(msg),
            funds=normalize_funds(funds),
        )

    async def execute(
        self,
        msg: ExecuteMsg | dict[str, Any],
        funds: Iterable[Coin] | None = None,
        memo: str = "",
    ) -> TxResult:
        """Build, sign (prompting the wallet) and broadcast. Returns the tx hash and inclusion details."""
        execute_msg = self.build(msg, funds)
        variant = next(iter(msg.to_msg() if isinstance(msg, ExecuteMsg) else msg), "")
        log.info("tx_execute", variant=variant, funds=[c.model_dump(mode="json") for c in execute_msg.funds])
        return await self.session.sign_and_broadcast(execute_msg, memo)

    # --- Betting ---
    async def place_order(
        self,
        market: Market,
        option_index: int,
        side: Side,
        stake: Number,
        odds: Number,
    ) -> TxResult:
        """Back or lay an option. Backs escrow the stake, lays escrow (odds - 1) * stake."""
        self.session.require_connected()
        if not market.is_active:
            raise ValidationError(f"Market {market.id} is {market.status.value}, not Active")
        if not 0 <= option_index < len(market.options):
            raise ValidationError(f"Market {market.id} has no option {option_index}")
        amount = to_minor(stake)
        if amount == 0:
            raise ValidationError("Stake must be greater than zero")
        msg = make_msg(
            PlaceOrder,
            market_id=market.id,
            option_id=option_index,
            side=side,
            amount=amount,
            odds=odds_to_contract(odds),
        )
        return await self.execute(msg, self.coins(escrow_minor(stake, odds, side)))

    async def cancel_order(self, order_id: int) -> TxResult:
        return await self.execute(make_msg(CancelOrder, order_id=order_id))

    async def redeem(self, bet_id: int, market: Market | None = None) -> TxResult:
        if market is not None and market.status != MarketStatus.SETTLED:
            raise ValidationError(f"Market {market.id} is not settled yet")
        return await self.execute(make_msg(Redeem, bet_id=bet_id))

    # --- Market creation ---
    async def create_market(
        self,
        *,
        question: str,
        description: str,
        options: list[str],
        start_time: int,
        end_time: int,
        resolution_bond: Number,
        resolution_reward: Number,
        category: str | None = None,
    ) -> TxResult:
        """Create a market; the creator escrows the resolution reward."""
        reward = to_minor(resolution_reward)
        msg = make_msg(
            CreateMarket,
            question=question.strip(),
            description=description.strip(),
            options=[o.strip() for o in options],
            category=category,
            start_time=start_time,
            end_time=end_time,
            resolution_bond=to_minor(resolution_bond),
            resolution_reward=reward,
        )
        return await self.execute(msg, self.coins(reward))

    # --- Resolution ---
    def _check_option(self, market: Market, option_index: int) -> None:
        if not 0 <= option_index < len(market.options):
            raise ValidationError(f"Market {market.id} has no option {option_index}")

    async def propose_result(self, market: Market, option_index: int) -> TxResult:
        """Propose the winning option, bonding the market's resolution bond."""
        self._check_option(market, option_index)
        msg = make_msg(ProposeResult, market_id=market.id, winning_option=option_index)
        return await self.execute(msg, self.coins(market.resolution_bond))

    async def challenge_result(self, market: Market, option_index: int) -> TxResult:
        """Dispute the proposal with a counter-outcome, bonding the resolution bond."""
        self._check_option(market, option_index)
        msg = make_msg(ChallengeResult, market_id=market.id, proposed_outcome=option_index)
        return await self.execute(msg, self.coins(market.resolution_bond))

    async def vote(self, market: Market, option_index: int) -> TxResult:
        self._check_option(market, option_index)
        return await self.execute(make_msg(Vote, market_id=market.id, outcome=option_index))

    async def resolve_market(self, market_id: int) -> TxResult:
        return await self.execute(make_msg(ResolveMarket, market_id=market_id))

    # --- Admin ---
    async def market_action(self, market_id: int, action: str) -> TxResult:
        """Admin pause / close / cancel."""
        cls = ADMIN_MARKET_ACTIONS.get(action)
        if cls is None:
            raise ValidationError(f"Unknown market action: {action}. Choose from: {', '.join(ADMIN_MARKET_ACTIONS)}")
        return await self.execute(make_msg(cls, market_id=market_id))

    async def add_to_whitelist(self, address: str) -> TxResult:
        return await self.execute(make_msg(AddToWhitelist, address=address.strip()))

    async def remove_from_whitelist(self, address: str) -> TxResult:
        return await self.execute(make_msg(RemoveFromWhitelist, address=address.strip()))

    async def update_config(self, **changes: Any) -> TxResult:
        fields = {k: v for k, v in changes.items() if v is not None}
        if not fields:
            raise ValidationError("update_config needs at least one field")
        return await self.execute(make_msg(UpdateConfig, **fields))
