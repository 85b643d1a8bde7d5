"""Wallet backend protocol - pluggable signers behind a WalletSession."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from predictx.models.tx import MsgExecuteContract, TxResult

# Called with the message about to be signed; False means the user declined.
Approver = Callable[[MsgExecuteContract], bool]


def auto_approve(msg: MsgExecuteContract) -> bool:
    return True


class WalletBackend(ABC):
    """Abstract signer: enable for a chain, list accounts, sign and broadcast an execute message."""

    name: str = ""

    @abstractmethod
    async def enable(self, chain_id: str) -> None:
        """Unlock / authorize the wallet for chain_id. Raise WalletUnavailable if it cannot."""
        ...

    @abstractmethod
    async def get_accounts(self, chain_id: str) -> list[str]:
        """Bech32 addresses, primary first."""
        ...

    @abstractmethod
    async def sign_and_broadcast(self, chain_id: str, msg: MsgExecuteContract, memo: str = "") -> TxResult:
        """Sign msg, broadcast it and return the result. Raise SignatureRejected if the user declines."""
        ...
