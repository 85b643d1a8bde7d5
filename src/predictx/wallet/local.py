"""Mnemonic-backed signer using cosmpy. Blocking cosmpy calls run in a worker thread."""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from predictx.contract.encoding import decode_b64_json, to_json_bytes
from predictx.errors import SignatureRejected, TransactionFailed, WalletUnavailable
from predictx.models.tx import MsgExecuteContract, TxResult
from predictx.wallet.base import Approver, WalletBackend, auto_approve

log = structlog.get_logger(__name__)


def _network_url(node_url: str) -> str:
    """cosmpy wants a transport prefix. A bare URL is taken as the LCD endpoint (rest+https://...);
    grpc+https://... passes through."""
    if "+" in node_url.split("://", 1)[0]:
        return node_url
    return "rest+" + node_url


class LocalKeyWallet(WalletBackend):
    """Signs with a key derived from a BIP-39 mnemonic. `approve` stands in for the wallet's signing prompt."""

    name = "local"

    def __init__(
        self,
        mnemonic: str,
        *,
        chain_id: str,
        node_url: str,
        fee_denom: str,
        gas_price: float = 0.025,
        prefix: str = "comdex",
        approve: Approver = auto_approve,
        wait_for_inclusion: bool = True,
    ) -> None:
        self._mnemonic = mnemonic
        self.chain_id = chain_id
        self.node_url = node_url
        self.fee_denom = fee_denom
        self.gas_price = gas_price
        self.prefix = prefix
        self.approve = approve
        self.wait_for_inclusion = wait_for_inclusion
        self._wallet: Any = None
        self._client: Any = None

    @classmethod
    def from_settings(cls, settings: Any, approve: Approver = auto_approve) -> LocalKeyWallet:
        settings.require_chain(signing=True)
        return cls(
            settings.mnemonic,
            chain_id=settings.chain_id,
            node_url=settings.rest_url,
            fee_denom=settings.coin_denom,
            gas_price=settings.gas_price,
            prefix=settings.bech32_prefix,
            approve=approve,
            wait_for_inclusion=settings.wait_for_inclusion,
        )

    def _load(self) -> None:
        from cosmpy.aerial.client import LedgerClient, NetworkConfig
        from cosmpy.aerial.wallet import LocalWallet

        try:
            self._wallet = LocalWallet.from_mnemonic(self._mnemonic, prefix=self.prefix)
        except Exception as e:
            raise WalletUnavailable(f"Cannot derive key from mnemonic: {e}") from e
        cfg = NetworkConfig(
            chain_id=self.chain_id,
            url=_network_url(self.node_url),
            fee_minimum_gas_price=self.gas_price,
            fee_denomination=self.fee_denom,
            staking_denomination=self.fee_denom,
        )
        self._client = LedgerClient(cfg)

    async def enable(self, chain_id: str) -> None:
        if chain_id != self.chain_id:
            raise WalletUnavailable(f"Wallet is configured for {self.chain_id}, not {chain_id}")
        if self._wallet is None:
            await asyncio.to_thread(self._load)

    async def get_accounts(self, chain_id: str) -> list[str]:
        if self._wallet is None:
            return []
        return [str(self._wallet.address())]

    def _broadcast(self, msg: MsgExecuteContract, memo: str) -> TxResult:
        from cosmpy.aerial.client.utils import prepare_and_broadcast_basic_transaction
        from cosmpy.aerial.exceptions import BroadcastError
        from cosmpy.aerial.tx import Transaction
        from cosmpy.protos.cosmos.base.v1beta1.coin_pb2 import Coin as ProtoCoin
        from cosmpy.protos.cosmwasm.wasm.v1.tx_pb2 import MsgExecuteContract as ProtoMsgExecuteContract

        proto = ProtoMsgExecuteContract(
            sender=msg.sender,
            contract=msg.contract,
            msg=to_json_bytes(decode_b64_json(msg.msg)),
            funds=[ProtoCoin(denom=c.denom, amount=str(c.amount)) for c in msg.funds],
        )
        tx = Transaction()
        tx.add_message(proto)
        try:
            submitted = prepare_and_broadcast_basic_transaction(self._client, tx, self._wallet, memo=memo or None)
            if self.wait_for_inclusion:
                submitted.wait_to_complete()
        except BroadcastError as e:
            raise TransactionFailed(str(e), tx_hash=getattr(e, "tx_hash", None)) from e
        response = getattr(submitted, "response", None)
        return TxResult(
            tx_hash=submitted.tx_hash,
            height=getattr(response, "height", None),
            gas_wanted=getattr(response, "gas_wanted", None),
            gas_used=getattr(response, "gas_used", None),
            raw_log=getattr(response, "raw_log", None),
        )

    async def sign_and_broadcast(self, chain_id: str, msg: MsgExecuteContract, memo: str = "") -> TxResult:
        if self._wallet is None or self._client is None:
            raise WalletUnavailable("Wallet not enabled")
        # approve may block on a terminal prompt
        if not await asyncio.to_thread(self.approve, msg):
            raise SignatureRejected("Request rejected by user")
        log.debug("tx_signing", **msg.to_any())
        return await asyncio.to_thread(self._broadcast, msg, memo)
