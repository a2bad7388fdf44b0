"""
Wallet custody service (Privy) client.

The custody service owns the keys: it resolves wallet addresses, signs and
broadcasts transactions, and reports balances.
"""

from .models import Balance, TransactionRequest, TransactionResult
from .privy import PrivyClient

__all__ = ["Balance", "PrivyClient", "TransactionRequest", "TransactionResult"]
