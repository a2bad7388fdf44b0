__all__ = [
    # Configuration
    "Settings",
    # Chains
    "CHAINS",
    "ChainInfo",
    "explorer_url",
    "get_chain",
    "to_caip2",
    # Clients
    "BebopClient",
    "PrivyClient",
    # Models
    "Balance",
    "Quote",
    "TransactionRequest",
    "TransactionResult",
    # Swap
    "ApprovalManager",
    "SwapOrchestrator",
    "SwapRequest",
    "SwapResult",
    "SwapStage",
    "swap_tokens",
    # Balances and transfers
    "AssetHoldings",
    "holdings_by_asset",
    "get_wallet_balance",
    "send_custom_transaction",
    "withdraw_native",
    # Errors
    "WalletOpsError",
    "ConfigError",
    "ValidationError",
    "UnsupportedChainError",
    "ResolutionError",
    "QuoteError",
    "SubmissionError",
    "BalanceError",
    "ChainRpcError",
]

from .config import Settings
from .chains import CHAINS, ChainInfo, explorer_url, get_chain, to_caip2
from .errors import (
    BalanceError,
    ChainRpcError,
    ConfigError,
    QuoteError,
    ResolutionError,
    SubmissionError,
    UnsupportedChainError,
    ValidationError,
    WalletOpsError,
)
from .custody import Balance, PrivyClient, TransactionRequest, TransactionResult
from .venue import BebopClient, Quote
from .swap import (
    ApprovalManager,
    SwapOrchestrator,
    SwapRequest,
    SwapResult,
    SwapStage,
    swap_tokens,
)
from .balances import AssetHoldings, get_wallet_balance, holdings_by_asset
from .transfers import send_custom_transaction, withdraw_native
