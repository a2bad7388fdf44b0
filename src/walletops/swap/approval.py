"""
ERC-20 allowance management for the Bebop settlement contract.

Approvals are always unlimited (2**256 - 1) so a token needs approving only
once. After submitting an approval the manager pauses for a fixed delay; the
pause does not prove the approval was mined. With ``wait_for_receipt`` and a
known RPC endpoint it polls for the receipt instead.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import httpx

from ..config import DEFAULT_APPROVAL_DELAY, DEFAULT_HTTP_TIMEOUT
from ..custody.models import TransactionRequest, TransactionResult
from ..custody.privy import PrivyClient
from ..errors import SubmissionError
from ..evm import rpc
from ..evm.abi import ERC20_ABI, MAX_UINT256, encode_approve
from ..evm.units import to_smallest_unit
from ..venue.bebop import BEBOP_SETTLEMENT_ADDRESS

logger = logging.getLogger(__name__)


class ApprovalManager:
    def __init__(
        self,
        custody: PrivyClient,
        spender: str = BEBOP_SETTLEMENT_ADDRESS,
        delay: float = DEFAULT_APPROVAL_DELAY,
        rpc_url_for: Callable[[int], Optional[str]] = rpc.get_rpc_url,
        wait_for_receipt: bool = False,
        receipt_timeout: float = 120,
        sleep: Callable[[float], None] = time.sleep,
        rpc_timeout: float = DEFAULT_HTTP_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.custody = custody
        self.spender = spender
        self.delay = delay
        self.rpc_url_for = rpc_url_for
        self.wait_for_receipt = wait_for_receipt
        self.receipt_timeout = receipt_timeout
        self.sleep = sleep
        self.rpc_timeout = rpc_timeout
        self.http_client = http_client

    def current_allowance(self, token: str, owner: str, chain_id: int) -> Optional[int]:
        """Allowance granted by ``owner`` to the spender, or None without an RPC endpoint."""
        rpc_url = self.rpc_url_for(chain_id)
        if not rpc_url:
            return None
        allowance = rpc.read_contract(
            token,
            "allowance",
            [owner, self.spender],
            abi=ERC20_ABI,
            rpc_url=rpc_url,
            timeout=self.rpc_timeout,
            http_client=self.http_client,
        )
        return int(allowance or 0)

    def ensure_allowance(
        self,
        wallet_id: str,
        token: str,
        amount: str,
        chain_id: int,
        owner: str,
    ) -> Optional[TransactionResult]:
        """
        Make sure the spender may move ``amount`` of ``token`` for ``owner``.

        Returns:
            The approval transaction, or None if the existing allowance
            already covers the amount

        Raises:
            SubmissionError: If the approval transaction is rejected or reverts
            ChainRpcError: If the allowance read or receipt wait fails
        """
        required = to_smallest_unit(amount)
        allowance = self.current_allowance(token, owner, chain_id)
        if allowance is not None and allowance >= required:
            logger.info("allowance %s already covers %s, skipping approval", allowance, required)
            return None

        logger.info("approving %s for %s (unlimited)", token, self.spender)
        result = self.custody.send_transaction(
            wallet_id,
            chain_id,
            TransactionRequest(to=token, data=encode_approve(self.spender, MAX_UINT256)),
        )
        logger.info("approval tx %s", result.hash)

        rpc_url = self.rpc_url_for(chain_id) if self.wait_for_receipt else None
        if rpc_url:
            receipt = rpc.wait_for_receipt(
                result.hash,
                rpc_url,
                timeout=self.receipt_timeout,
                sleep=self.sleep,
                request_timeout=self.rpc_timeout,
                http_client=self.http_client,
            )
            if receipt.get("status") in ("0x0", 0):
                raise SubmissionError(f"Approval transaction {result.hash} reverted")
        else:
            self.sleep(self.delay)
        return result
