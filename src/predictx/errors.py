"""Error taxonomy. Library code raises these; CLI commands and API handlers catch PredictXError."""

from __future__ import annotations


class PredictXError(Exception):
    """Base for every error surfaced to the user as a one-shot message."""

    code = "error"


class ConfigurationError(PredictXError):
    """Missing or invalid configuration (REST URL, contract address, chain id, mnemonic)."""

    code = "config_missing"


class EncodingError(PredictXError):
    """Query or message could not be serialized to JSON."""

    code = "encoding_failed"


class ValidationError(PredictXError):
    """User input rejected before anything is sent (amounts, odds, options, times)."""

    code = "invalid_input"


class NetworkError(PredictXError):
    """Transport-level failure talking to the REST endpoint."""

    code = "network_error"


class ContractQueryError(PredictXError):
    """REST endpoint answered with an error status or an unusable body."""

    code = "query_failed"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class WalletError(PredictXError):
    code = "wallet_error"


class WalletUnavailable(WalletError):
    """No wallet backend configured, or it exposes no accounts."""

    code = "wallet_unavailable"


class WalletNotConnected(WalletError):
    """A contract-mutating operation was attempted without a connected wallet."""

    code = "wallet_not_connected"


class SignatureRejected(WalletError):
    """The user declined to sign. Not a failure of the transaction itself."""

    code = "signature_rejected"


class TransactionFailed(WalletError):
    """Signing succeeded but broadcast or execution failed."""

    code = "tx_failed"

    def __init__(self, message: str, tx_hash: str | None = None) -> None:
        super().__init__(message)
        self.tx_hash = tx_hash
