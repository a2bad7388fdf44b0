"""
Swap orchestration.

Stages run strictly in order and each one aborts the swap on failure:

    RESOLVING -> APPROVING (optional) -> QUOTING -> EXECUTING -> DONE

Nothing is rolled back: an approval that went through stays on chain even
if quoting or execution fails afterwards.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..chains import explorer_url, get_chain
from ..custody.privy import PrivyClient
from ..errors import ValidationError
from ..evm.address import is_valid_address
from ..evm.units import to_smallest_unit
from ..venue.bebop import BebopClient
from .approval import ApprovalManager

logger = logging.getLogger(__name__)


class SwapStage(enum.Enum):
    RESOLVING = "resolving"
    APPROVING = "approving"
    QUOTING = "quoting"
    EXECUTING = "executing"
    DONE = "done"


@dataclass(frozen=True)
class SwapRequest:
    wallet_id: str
    from_token: str
    to_token: str
    amount: str
    from_chain: int
    to_chain: Optional[int] = None
    gasless: bool = False
    skip_approval: bool = False

    def validate(self) -> None:
        """
        Check the request before any network call.

        Raises:
            ValidationError: Missing field, malformed address, bad amount or
                             cross-chain request
            UnsupportedChainError: Source chain not in the chain table
        """
        for name in ("wallet_id", "from_token", "to_token", "amount", "from_chain"):
            if not getattr(self, name):
                raise ValidationError(f"{name} is required")

        if self.to_chain and self.to_chain != self.from_chain:
            raise ValidationError(
                "Bebop only supports same-chain swaps. from_chain must equal to_chain."
            )

        if not is_valid_address(self.from_token):
            raise ValidationError(f"Invalid from_token address: {self.from_token}")
        if not is_valid_address(self.to_token):
            raise ValidationError(f"Invalid to_token address: {self.to_token}")

        if to_smallest_unit(self.amount) <= 0:
            raise ValidationError(f"amount must be positive, got {self.amount}")

        get_chain(self.from_chain)


@dataclass(frozen=True)
class SwapResult:
    success: bool
    transaction_hash: str
    from_token: str
    to_token: str
    sell_amount: str
    buy_amount: Optional[str]
    explorer_url: str
    approval_hash: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "transactionHash": self.transaction_hash,
            "explorerUrl": self.explorer_url,
            "approvalHash": self.approval_hash,
            "quote": {
                "fromToken": self.from_token,
                "toToken": self.to_token,
                "sellAmount": self.sell_amount,
                "buyAmount": self.buy_amount,
            },
        }


class SwapOrchestrator:
    """
    Runs one swap end to end against injected clients.

    Args:
        custody: Custody service client (address resolution + submission)
        venue: Bebop quote client
        approvals: Approval manager; built from ``custody`` if omitted
        on_stage: Called with each stage as it is entered
    """

    def __init__(
        self,
        custody: PrivyClient,
        venue: BebopClient,
        approvals: Optional[ApprovalManager] = None,
        on_stage: Optional[Callable[[SwapStage], None]] = None,
    ) -> None:
        self.custody = custody
        self.venue = venue
        self.approvals = approvals or ApprovalManager(custody)
        self.on_stage = on_stage

    def _enter(self, stage: SwapStage) -> None:
        logger.debug("swap stage: %s", stage.value)
        if self.on_stage is not None:
            self.on_stage(stage)

    def swap(self, request: SwapRequest) -> SwapResult:
        request.validate()
        chain_id = request.from_chain

        self._enter(SwapStage.RESOLVING)
        taker = self.custody.get_wallet_address(request.wallet_id, chain_id)

        approval_hash = None
        if not request.skip_approval:
            self._enter(SwapStage.APPROVING)
            approval = self.approvals.ensure_allowance(
                request.wallet_id, request.from_token, request.amount, chain_id, taker
            )
            approval_hash = approval.hash if approval else None

        self._enter(SwapStage.QUOTING)
        quote = self.venue.get_quote(
            taker_address=taker,
            sell_token=request.from_token,
            buy_token=request.to_token,
            amount=request.amount,
            chain_id=chain_id,
            gasless=request.gasless,
        )
        logger.info("quote: sell %s buy %s", quote.sell_amount, quote.buy_amount)

        self._enter(SwapStage.EXECUTING)
        result = self.custody.send_transaction(request.wallet_id, chain_id, quote.tx)

        self._enter(SwapStage.DONE)
        return SwapResult(
            success=True,
            transaction_hash=result.hash,
            from_token=request.from_token,
            to_token=request.to_token,
            sell_amount=quote.sell_amount,
            buy_amount=quote.buy_amount,
            explorer_url=explorer_url(chain_id, result.hash),
            approval_hash=approval_hash,
        )


def swap_tokens(
    custody: PrivyClient,
    venue: BebopClient,
    wallet_id: str,
    from_token: str,
    to_token: str,
    amount: str,
    from_chain: int,
    to_chain: Optional[int] = None,
    gasless: bool = False,
    skip_approval: bool = False,
    approvals: Optional[ApprovalManager] = None,
) -> SwapResult:
    """Convenience wrapper: build a SwapRequest and run it."""
    request = SwapRequest(
        wallet_id=wallet_id,
        from_token=from_token,
        to_token=to_token,
        amount=amount,
        from_chain=from_chain,
        to_chain=to_chain,
        gasless=gasless,
        skip_approval=skip_approval,
    )
    return SwapOrchestrator(custody, venue, approvals=approvals).swap(request)
