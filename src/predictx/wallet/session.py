"""Wallet session state machine: DISCONNECTED -> CONNECTING -> CONNECTED."""

from __future__ import annotations

import asyncio
from enum import Enum

import structlog

from predictx.errors import SignatureRejected, TransactionFailed, WalletError, WalletNotConnected, WalletUnavailable
from predictx.models.tx import MsgExecuteContract, TxResult
from predictx.wallet.base import WalletBackend

log = structlog.get_logger(__name__)


class WalletState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class WalletSession:
    """
    Process-wide wallet session. Concurrent connect() calls while CONNECTING share one
    attempt, so the backend is enabled once. Mutating operations go through
    require_connected() and fail with WalletNotConnected instead of silently doing nothing.
    """

    def __init__(self, backend: WalletBackend | None, chain_id: str) -> None:
        self.backend = backend
        self.chain_id = chain_id
        self.state = WalletState.DISCONNECTED
        self.address: str | None = None
        self._pending: asyncio.Task[str] | None = None

    @property
    def connected(self) -> bool:
        return self.state == WalletState.CONNECTED

    async def connect(self) -> str:
        """Connect (or join the in-flight attempt) and return the active address."""
        if self.state == WalletState.CONNECTED and self.address:
            return self.address
        if self._pending is None:
            self.state = WalletState.CONNECTING
            self._pending = asyncio.get_running_loop().create_task(self._connect())
        return await asyncio.shield(self._pending)

    async def _connect(self) -> str:
        me = asyncio.current_task()
        try:
            if self.backend is None:
                raise WalletUnavailable("No wallet configured. Set PREDICTX_WALLET_MNEMONIC or install a wallet backend.")
            await self.backend.enable(self.chain_id)
            accounts = await self.backend.get_accounts(self.chain_id)
            if not accounts:
                raise WalletUnavailable(f"Wallet exposes no accounts for {self.chain_id}")
        except asyncio.CancelledError:
            # disconnect() already reset the session
            raise WalletNotConnected("Connection attempt aborted") from None
        except Exception:
            if self._pending is me:
                self._reset()
            raise
        finally:
            if self._pending is me:
                self._pending = None
        self.address = accounts[0]
        self.state = WalletState.CONNECTED
        log.info("wallet_connected", address=self.address, chain_id=self.chain_id)
        return self.address

    def _reset(self) -> None:
        self.state = WalletState.DISCONNECTED
        self.address = None

    def disconnect(self) -> None:
        """Explicit disconnect. Aborts an in-flight connect attempt."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        if self.address:
            log.info("wallet_disconnected", address=self.address)
        self._reset()

    def handle_lock(self) -> None:
        """Wallet locked: drop the session."""
        log.info("wallet_locked")
        self.disconnect()

    async def handle_keystore_change(self) -> str:
        """Active account changed in the wallet: reconnect and record the new address."""
        self.disconnect()
        return await self.connect()

    def require_connected(self) -> str:
        if not self.connected or not self.address:
            raise WalletNotConnected("Wallet not connected. Connect a wallet before sending transactions.")
        return self.address

    async def sign_and_broadcast(self, msg: MsgExecuteContract, memo: str = "") -> TxResult:
        address = self.require_connected()
        if msg.sender != address:
            raise WalletError(f"Message sender {msg.sender} is not the connected account {address}")
        if self.backend is None:
            raise WalletUnavailable("No wallet backend attached to this session")
        try:
            result = await self.backend.sign_and_broadcast(self.chain_id, msg, memo)
        except SignatureRejected:
            log.info("tx_signature_rejected", contract=msg.contract)
            raise
        except WalletError:
            raise
        except Exception as e:
            log.error("tx_broadcast_failed", contract=msg.contract, error=str(e))
            raise TransactionFailed(f"Broadcast failed: {e}") from e
        log.info("tx_broadcast", tx_hash=result.tx_hash, contract=msg.contract)
        return result
