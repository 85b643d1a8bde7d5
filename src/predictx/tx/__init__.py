"""Execute-transaction construction."""

from predictx.tx.builder import TransactionBuilder, make_msg, normalize_funds

__all__ = ["TransactionBuilder", "make_msg", "normalize_funds"]
