"""Wallet session and signer backends."""

from predictx.wallet.base import Approver, WalletBackend, auto_approve
from predictx.wallet.session import WalletSession, WalletState

__all__ = ["Approver", "WalletBackend", "WalletSession", "WalletState", "auto_approve"]
