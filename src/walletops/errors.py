"""
Error hierarchy for wallet operations.

Every error carries an ``exit_code`` so CLI commands can map failures to
process exit status without a lookup table.
"""

from __future__ import annotations


class WalletOpsError(RuntimeError):
    exit_code: int = 1


class ConfigError(WalletOpsError):
    pass


class ValidationError(WalletOpsError):
    pass


class UnsupportedChainError(WalletOpsError):
    def __init__(self, chain_id: object, supported: list[int] | None = None) -> None:
        self.chain_id = chain_id
        self.supported = supported or []
        message = f"Unsupported chain ID: {chain_id}"
        if self.supported:
            message += f". Supported: {', '.join(str(c) for c in self.supported)}"
        super().__init__(message)


class ResolutionError(WalletOpsError):
    pass


class QuoteError(WalletOpsError):
    pass


class SubmissionError(WalletOpsError):
    pass


class BalanceError(WalletOpsError):
    pass


class ChainRpcError(WalletOpsError):
    pass
