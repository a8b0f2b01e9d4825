"""Tests for the httpx ledger client and transfer submitter."""

import json
from collections.abc import Callable
from datetime import UTC, datetime

import httpx
import pytest

from src.tw_common.enums import TransferStatus
from src.tw_common.errors import (
    AccountError,
    InvalidSignatureError,
    NetworkError,
    RejectedByNetworkError,
    SubmitTimeoutError,
)
from src.tw_ledger.infrastructure.http_client import (
    HttpLedgerClient,
    HttpTransferSubmitter,
    PatternAddressValidator,
)
from src.tw_transfer.domain.models import SubmitPayload, SubmitReceipt
from tests.factories import make_asset

ASSET_JSON = {"id": "chr", "symbol": "chr", "decimals": 6, "icon_url": None}


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://ledger")


class TestFetchBalances:
    async def test_parses_raw_amounts(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/accounts/acc-1/balances"
            big = str(10**40)  # beyond float precision
            return httpx.Response(200, json=[{"asset": ASSET_JSON, "amount": big}])

        async with _client(handler) as http:
            balances = await HttpLedgerClient(http).fetch_balances("acc-1")

        assert len(balances) == 1
        assert balances[0].raw_amount == 10**40
        assert balances[0].asset == make_asset()

    async def test_404_is_account_error(self) -> None:
        async with _client(lambda r: httpx.Response(404)) as http:
            with pytest.raises(AccountError):
                await HttpLedgerClient(http).fetch_balances("acc-1")

    async def test_500_is_network_error(self) -> None:
        async with _client(lambda r: httpx.Response(500)) as http:
            with pytest.raises(NetworkError):
                await HttpLedgerClient(http).fetch_balances("acc-1")

    async def test_transport_error_is_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as http:
            with pytest.raises(NetworkError):
                await HttpLedgerClient(http).fetch_balances("acc-1")

    async def test_malformed_payload_is_network_error(self) -> None:
        async with _client(lambda r: httpx.Response(200, json=[{"amount": "-5"}])) as http:
            with pytest.raises(NetworkError, match="malformed"):
                await HttpLedgerClient(http).fetch_balances("acc-1")

    async def test_non_list_body(self) -> None:
        async with _client(lambda r: httpx.Response(200, json={"oops": 1})) as http:
            with pytest.raises(NetworkError):
                await HttpLedgerClient(http).fetch_balances("acc-1")


class TestFetchHistory:
    async def test_parses_entries(self) -> None:
        row = {
            "tx_ref": "0xabc",
            "recipient": "bob",
            "asset": ASSET_JSON,
            "amount": "1500000",
            "timestamp": "2025-03-01T12:00:00Z",
            "status": "PENDING",
        }
        async with _client(lambda r: httpx.Response(200, json=[row])) as http:
            entries = await HttpLedgerClient(http).fetch_history("acc-1")

        assert entries[0].tx_ref == "0xabc"
        assert entries[0].raw_amount == 1_500_000
        assert entries[0].timestamp == datetime(2025, 3, 1, 12, 0, tzinfo=UTC)
        assert entries[0].status is TransferStatus.PENDING


class TestSubmitter:
    payload = SubmitPayload(recipient="bob", raw_amount=100_000_000, asset=make_asset())

    async def test_success(self) -> None:
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(json.loads(request.content))
            return httpx.Response(200, json={"tx_ref": "0xabc"})

        async with _client(handler) as http:
            receipt = await HttpTransferSubmitter(http).submit(self.payload)

        assert receipt == SubmitReceipt(tx_ref="0xabc")
        assert seen == {"recipient": "bob", "amount": "100000000", "asset_id": "chr"}

    @pytest.mark.parametrize(
        ("status", "error"),
        [
            (400, RejectedByNetworkError),
            (422, RejectedByNetworkError),
            (401, InvalidSignatureError),
            (403, InvalidSignatureError),
            (504, SubmitTimeoutError),
        ],
    )
    async def test_status_mapping(self, status: int, error: type[Exception]) -> None:
        async with _client(lambda r: httpx.Response(status)) as http:
            with pytest.raises(error):
                await HttpTransferSubmitter(http).submit(self.payload)

    async def test_error_message_passed_through(self) -> None:
        body = {"message": "Insufficient funds on chain"}
        async with _client(lambda r: httpx.Response(400, json=body)) as http:
            with pytest.raises(RejectedByNetworkError) as exc_info:
                await HttpTransferSubmitter(http).submit(self.payload)
        assert exc_info.value.message == "Insufficient funds on chain"

    async def test_read_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        async with _client(handler) as http:
            with pytest.raises(SubmitTimeoutError):
                await HttpTransferSubmitter(http).submit(self.payload)


class TestPatternAddressValidator:
    def test_no_pattern_accepts_non_blank(self) -> None:
        validator = PatternAddressValidator()
        assert validator.is_valid("anything") is True
        assert validator.is_valid("  ") is False

    def test_hex_pattern(self) -> None:
        validator = PatternAddressValidator(r"[0-9a-fA-F]{64}")
        assert validator.is_valid("ab" * 32) is True
        assert validator.is_valid("xyz") is False
