"""Tests for the swap pipeline (approval manager + orchestrator)."""

from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest

from conftest import USDC_BASE, WALLET_ADDRESS, WALLET_ID, WETH_BASE, FakeHttp
from walletops.custody.privy import PrivyClient
from walletops.errors import (
    QuoteError,
    ResolutionError,
    SubmissionError,
    UnsupportedChainError,
    ValidationError,
)
from walletops.evm.abi import encode_approve
from walletops.swap import ApprovalManager, SwapOrchestrator, SwapRequest, SwapStage, swap_tokens
from walletops.venue.bebop import BEBOP_SETTLEMENT_ADDRESS, BebopClient

RPC_PATH = f"/v1/wallets/{WALLET_ID}/rpc"


def _request(**overrides) -> SwapRequest:
    fields = dict(
        wallet_id=WALLET_ID,
        from_token=WETH_BASE,
        to_token=USDC_BASE,
        amount="1",
        from_chain=8453,
        gasless=False,
        skip_approval=True,
    )
    fields.update(overrides)
    return SwapRequest(**fields)


@pytest.fixture()
def sleeps() -> list[float]:
    return []


@pytest.fixture()
def approvals(privy: PrivyClient, sleeps: list[float]) -> ApprovalManager:
    return ApprovalManager(privy, rpc_url_for=lambda chain_id: None, sleep=sleeps.append)


@pytest.fixture()
def orchestrator(
    privy: PrivyClient, bebop: BebopClient, approvals: ApprovalManager
) -> SwapOrchestrator:
    return SwapOrchestrator(privy, bebop, approvals=approvals)


class TestApprovalManager:
    def test_submits_unlimited_approval_then_pauses(
        self, fake_http: FakeHttp, approvals: ApprovalManager, sleeps: list[float]
    ) -> None:
        fake_http.send_ok("0xapprove")

        result = approvals.ensure_allowance(WALLET_ID, WETH_BASE, "1", 8453, WALLET_ADDRESS)

        assert result is not None and result.hash == "0xapprove"
        body = fake_http.json_body(fake_http.requests[0])
        assert body["params"]["transaction"] == {
            "to": WETH_BASE,
            "data": encode_approve(BEBOP_SETTLEMENT_ADDRESS),
            "value": "0x0",
        }
        assert body["params"]["transaction"]["data"].endswith("f" * 64)
        assert sleeps == [3.0]

    def test_custom_delay(self, fake_http: FakeHttp, privy: PrivyClient, sleeps: list[float]) -> None:
        fake_http.send_ok()
        manager = ApprovalManager(privy, delay=0.5, rpc_url_for=lambda c: None, sleep=sleeps.append)
        manager.ensure_allowance(WALLET_ID, WETH_BASE, "1", 8453, WALLET_ADDRESS)
        assert sleeps == [0.5]

    def test_skips_when_allowance_covers_amount(
        self, fake_http: FakeHttp, privy: PrivyClient, sleeps: list[float]
    ) -> None:
        manager = ApprovalManager(privy, rpc_url_for=lambda c: "https://rpc.test", sleep=sleeps.append)
        with patch("walletops.evm.rpc.read_contract", return_value=2 * 10**18) as read:
            result = manager.ensure_allowance(WALLET_ID, WETH_BASE, "1", 8453, WALLET_ADDRESS)

        assert result is None
        assert fake_http.requests == []
        assert sleeps == []
        args, kwargs = read.call_args
        assert args[:3] == (WETH_BASE, "allowance", [WALLET_ADDRESS, BEBOP_SETTLEMENT_ADDRESS])
        assert kwargs["rpc_url"] == "https://rpc.test"

    def test_approves_when_allowance_too_small(
        self, fake_http: FakeHttp, privy: PrivyClient, sleeps: list[float]
    ) -> None:
        fake_http.send_ok()
        manager = ApprovalManager(privy, rpc_url_for=lambda c: "https://rpc.test", sleep=sleeps.append)
        with patch("walletops.evm.rpc.read_contract", return_value=10):
            result = manager.ensure_allowance(WALLET_ID, WETH_BASE, "1", 8453, WALLET_ADDRESS)

        assert result is not None
        assert len(fake_http.calls(RPC_PATH)) == 1
        assert sleeps == [3.0]

    def test_waits_for_receipt_when_enabled(
        self, fake_http: FakeHttp, privy: PrivyClient, sleeps: list[float]
    ) -> None:
        fake_http.send_ok("0xapprove")
        manager = ApprovalManager(
            privy,
            rpc_url_for=lambda c: "https://rpc.test",
            wait_for_receipt=True,
            receipt_timeout=30,
            sleep=sleeps.append,
        )
        with patch("walletops.evm.rpc.read_contract", return_value=0), patch(
            "walletops.evm.rpc.wait_for_receipt", return_value={"status": "0x1"}
        ) as wait:
            manager.ensure_allowance(WALLET_ID, WETH_BASE, "1", 8453, WALLET_ADDRESS)

        wait.assert_called_once()
        assert wait.call_args.args[:2] == ("0xapprove", "https://rpc.test")
        assert wait.call_args.kwargs["timeout"] == 30
        assert sleeps == []

    def test_reverted_approval_raises(
        self, fake_http: FakeHttp, privy: PrivyClient, sleeps: list[float]
    ) -> None:
        fake_http.send_ok("0xapprove")
        manager = ApprovalManager(
            privy, rpc_url_for=lambda c: "https://rpc.test", wait_for_receipt=True, sleep=sleeps.append
        )
        with patch("walletops.evm.rpc.read_contract", return_value=0), patch(
            "walletops.evm.rpc.wait_for_receipt", return_value={"status": "0x0"}
        ):
            with pytest.raises(SubmissionError, match="0xapprove reverted"):
                manager.ensure_allowance(WALLET_ID, WETH_BASE, "1", 8453, WALLET_ADDRESS)

    def test_rpc_timeout_and_client_forwarded(self, privy: PrivyClient) -> None:
        shared = httpx.Client()
        manager = ApprovalManager(
            privy, rpc_url_for=lambda c: "https://rpc.test", rpc_timeout=5.0, http_client=shared
        )
        with shared, patch("walletops.evm.rpc.read_contract", return_value=2 * 10**18) as read:
            manager.ensure_allowance(WALLET_ID, WETH_BASE, "1", 8453, WALLET_ADDRESS)

        assert read.call_args.kwargs["timeout"] == 5.0
        assert read.call_args.kwargs["http_client"] is shared


class TestValidation:
    """Every validation failure happens before any network call."""

    @pytest.mark.parametrize(
        "field,value",
        [
            ("from_token", "0x123"),
            ("from_token", "4200000000000000000000000000000000000006"),
            ("to_token", "0x" + "z" * 40),
            ("to_token", "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA029130"),
            ("to_token", "0x833589FCD6eDb6E08f4c7C32D4f71b54bdA02913"),
        ],
    )
    def test_malformed_addresses(
        self, fake_http: FakeHttp, orchestrator: SwapOrchestrator, field: str, value: str
    ) -> None:
        with pytest.raises(ValidationError, match="Invalid"):
            orchestrator.swap(_request(**{field: value}))
        assert fake_http.requests == []

    @pytest.mark.parametrize("field", ["wallet_id", "from_token", "to_token", "amount", "from_chain"])
    def test_missing_fields(self, fake_http: FakeHttp, orchestrator: SwapOrchestrator, field: str) -> None:
        value = 0 if field == "from_chain" else ""
        with pytest.raises(ValidationError, match=f"{field} is required"):
            orchestrator.swap(_request(**{field: value}))
        assert fake_http.requests == []

    @pytest.mark.parametrize("to_chain", [1, 137, 11155111])
    def test_cross_chain_rejected(
        self, fake_http: FakeHttp, orchestrator: SwapOrchestrator, to_chain: int
    ) -> None:
        with pytest.raises(ValidationError, match="same-chain"):
            orchestrator.swap(_request(to_chain=to_chain))
        assert fake_http.requests == []

    def test_same_destination_chain_allowed(self, fake_http: FakeHttp, orchestrator: SwapOrchestrator) -> None:
        fake_http.wallet()
        fake_http.quote_ok()
        fake_http.send_ok()
        assert orchestrator.swap(_request(to_chain=8453)).success

    def test_unsupported_chain(self, fake_http: FakeHttp, orchestrator: SwapOrchestrator) -> None:
        with pytest.raises(UnsupportedChainError):
            orchestrator.swap(_request(from_chain=56))
        assert fake_http.requests == []

    @pytest.mark.parametrize("amount", ["0", "-1", "abc"])
    def test_bad_amount(self, fake_http: FakeHttp, orchestrator: SwapOrchestrator, amount: str) -> None:
        with pytest.raises(ValidationError):
            orchestrator.swap(_request(amount=amount))
        assert fake_http.requests == []


class TestSwapPipeline:
    def test_end_to_end(self, fake_http: FakeHttp, orchestrator: SwapOrchestrator) -> None:
        fake_http.wallet()
        fake_http.quote_ok(sell_amount="1000000000000000000", buy_amount="2500000000")
        fake_http.send_ok("0xabc")

        result = orchestrator.swap(_request())

        assert result.to_dict() == {
            "success": True,
            "transactionHash": "0xabc",
            "explorerUrl": "https://basescan.org/tx/0xabc",
            "approvalHash": None,
            "quote": {
                "fromToken": WETH_BASE,
                "toToken": USDC_BASE,
                "sellAmount": "1000000000000000000",
                "buyAmount": "2500000000",
            },
        }
        quote_request = fake_http.calls("/pmm/base/v3/quote")[0]
        assert quote_request.url.params["taker_address"] == WALLET_ADDRESS
        executed = fake_http.json_body(fake_http.calls(RPC_PATH)[0])
        assert executed["params"]["transaction"] == {
            "to": "0xbbbbbBB520d69a9775E85b458C58c648259FAD5F",
            "data": "0xdeadbeef",
            "value": "0x0",
        }

    def test_request_order_with_approval(
        self, fake_http: FakeHttp, orchestrator: SwapOrchestrator, sleeps: list[float]
    ) -> None:
        fake_http.wallet()
        fake_http.send_ok("0xapprove")
        fake_http.send_ok("0xswap")
        fake_http.quote_ok()

        result = orchestrator.swap(_request(skip_approval=False))

        assert [(r.method, r.url.path) for r in fake_http.requests] == [
            ("GET", f"/v1/wallets/{WALLET_ID}"),
            ("POST", RPC_PATH),
            ("GET", "/pmm/base/v3/quote"),
            ("POST", RPC_PATH),
        ]
        assert result.approval_hash == "0xapprove"
        assert result.transaction_hash == "0xswap"
        assert sleeps == [3.0]

    def test_stages_reported_in_order(
        self, fake_http: FakeHttp, privy: PrivyClient, bebop: BebopClient, approvals: ApprovalManager
    ) -> None:
        fake_http.wallet()
        fake_http.quote_ok()
        fake_http.send_ok()
        stages: list[SwapStage] = []
        orchestrator = SwapOrchestrator(privy, bebop, approvals=approvals, on_stage=stages.append)

        orchestrator.swap(_request(skip_approval=False))

        assert stages == [
            SwapStage.RESOLVING,
            SwapStage.APPROVING,
            SwapStage.QUOTING,
            SwapStage.EXECUTING,
            SwapStage.DONE,
        ]

    def test_skip_approval_skips_stage(
        self, fake_http: FakeHttp, privy: PrivyClient, bebop: BebopClient, approvals: ApprovalManager
    ) -> None:
        fake_http.wallet()
        fake_http.quote_ok()
        fake_http.send_ok()
        stages: list[SwapStage] = []
        orchestrator = SwapOrchestrator(privy, bebop, approvals=approvals, on_stage=stages.append)

        orchestrator.swap(_request(skip_approval=True))

        assert SwapStage.APPROVING not in stages
        assert len(fake_http.calls(RPC_PATH)) == 1

    def test_swap_tokens_wrapper(self, fake_http: FakeHttp, privy: PrivyClient, bebop: BebopClient) -> None:
        fake_http.wallet()
        fake_http.quote_ok()
        fake_http.send_ok("0xabc")

        result = swap_tokens(
            privy,
            bebop,
            wallet_id=WALLET_ID,
            from_token=WETH_BASE,
            to_token=USDC_BASE,
            amount="1",
            from_chain=8453,
            to_chain=8453,
            skip_approval=True,
        )
        assert result.transaction_hash == "0xabc"


class TestFailures:
    """Failures abort the swap; nothing is retried or rolled back."""

    def test_unknown_wallet(self, fake_http: FakeHttp, orchestrator: SwapOrchestrator) -> None:
        fake_http.add("GET", f"/v1/wallets/{WALLET_ID}", {"error": "not found"}, status=404)
        with pytest.raises(ResolutionError):
            orchestrator.swap(_request())
        assert len(fake_http.requests) == 1

    def test_quote_error_never_submits(self, fake_http: FakeHttp, orchestrator: SwapOrchestrator) -> None:
        fake_http.wallet()
        fake_http.add("GET", "/pmm/base/v3/quote", {"error": "No liquidity"})

        with pytest.raises(QuoteError, match="No liquidity"):
            orchestrator.swap(_request())
        assert fake_http.calls(RPC_PATH) == []

    def test_quote_error_after_approval_keeps_approval(
        self, fake_http: FakeHttp, orchestrator: SwapOrchestrator
    ) -> None:
        fake_http.wallet()
        fake_http.send_ok("0xapprove")
        fake_http.add("GET", "/pmm/base/v3/quote", {"error": "No liquidity"})

        with pytest.raises(QuoteError):
            orchestrator.swap(_request(skip_approval=False))
        # only the approval went out; no compensating transaction follows
        assert len(fake_http.calls(RPC_PATH)) == 1

    def test_submission_error_not_retried(self, fake_http: FakeHttp, orchestrator: SwapOrchestrator) -> None:
        fake_http.wallet()
        fake_http.quote_ok()
        fake_http.add("POST", RPC_PATH, {"error": "execution reverted"}, status=400)

        with pytest.raises(SubmissionError, match="execution reverted"):
            orchestrator.swap(_request())
        assert len(fake_http.calls(RPC_PATH)) == 1

    def test_submission_error_after_approval(
        self, fake_http: FakeHttp, orchestrator: SwapOrchestrator
    ) -> None:
        fake_http.wallet()
        fake_http.send_ok("0xapprove")
        fake_http.add("POST", RPC_PATH, {"error": "execution reverted"}, status=400)
        fake_http.quote_ok()

        with pytest.raises(SubmissionError):
            orchestrator.swap(_request(skip_approval=False))

        submissions = fake_http.calls(RPC_PATH)
        assert len(submissions) == 2
        first = fake_http.json_body(submissions[0])["params"]["transaction"]
        assert first["to"] == WETH_BASE
