"""
Token swap pipeline: resolve address -> approve -> quote -> execute.
"""

from .approval import ApprovalManager
from .orchestrator import SwapOrchestrator, SwapRequest, SwapResult, SwapStage, swap_tokens

__all__ = [
    "ApprovalManager",
    "SwapOrchestrator",
    "SwapRequest",
    "SwapResult",
    "SwapStage",
    "swap_tokens",
]
