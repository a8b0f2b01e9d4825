"""Unit tests for AccountSession and SessionManager."""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.tw_common.enums import DisplayMode
from src.tw_common.errors import (
    InsufficientBalanceError,
    NoActiveSessionError,
    SessionClosedError,
    UnknownAssetError,
)
from src.tw_session.application.session import AccountSession, SessionManager, TransferPolicy
from src.tw_transfer.domain.models import SubmitReceipt, Success, TransferRequest
from tests.factories import make_asset, make_balance


def _session(ledger: AsyncMock, submitter: AsyncMock, **policy: object) -> AccountSession:
    return AccountSession(
        "acc-1",
        ledger=ledger,
        submitter=submitter,
        policy=TransferPolicy(**policy),  # type: ignore[arg-type]
    )


class TestAccountSession:
    async def test_reads_are_store_snapshots(self, ledger: AsyncMock, submitter: AsyncMock) -> None:
        session = _session(ledger, submitter)
        await session.refresh_all()

        assert session.get_balances() is session.balances.state
        assert session.get_history() is session.history.state
        assert session.get_balances().items == (make_balance(500_000_000),)

    async def test_refresh_all_fetches_concurrently(self, submitter: AsyncMock) -> None:
        history_started = asyncio.Event()

        async def fetch_balances(account_id: str) -> list:
            await history_started.wait()
            return [make_balance(1)]

        async def fetch_history(account_id: str) -> list:
            history_started.set()
            return []

        ledger = AsyncMock()
        ledger.fetch_balances.side_effect = fetch_balances
        ledger.fetch_history.side_effect = fetch_history
        session = _session(ledger, submitter)

        balances, history = await asyncio.wait_for(session.refresh_all(), timeout=1)

        assert balances.items == (make_balance(1),)
        assert history.items == ()

    async def test_present_list(self, submitter: AsyncMock) -> None:
        ledger = AsyncMock()
        ledger.fetch_balances.return_value = [
            make_balance(i, make_asset(f"a{i}")) for i in range(1, 5)
        ]
        ledger.fetch_history.return_value = []
        session = _session(ledger, submitter)
        await session.refresh_all()

        compact = session.present_list(DisplayMode.COMPACT)
        full = session.present_list(DisplayMode.FULL)

        assert len(compact.visible) == 3
        assert compact.truncated is True
        assert len(full.visible) == 4
        assert full.truncated is False

    async def test_max_transferable_is_full_balance(
        self, ledger: AsyncMock, submitter: AsyncMock
    ) -> None:
        session = _session(ledger, submitter)
        await session.refresh_all()

        assert session.max_transferable("chr") == Decimal("500")

    async def test_max_transferable_capped_by_policy(
        self, ledger: AsyncMock, submitter: AsyncMock
    ) -> None:
        session = _session(ledger, submitter, max_amount=Decimal("100"))
        await session.refresh_all()

        assert session.max_transferable("chr") == Decimal("100")

    async def test_unknown_asset(self, ledger: AsyncMock, submitter: AsyncMock) -> None:
        session = _session(ledger, submitter)
        await session.refresh_all()

        with pytest.raises(UnknownAssetError) as exc_info:
            session.asset_by_id("nope")
        assert exc_info.value.field == "asset"

    async def test_submit_transfer_uses_fresh_workflow(
        self, ledger: AsyncMock, submitter: AsyncMock
    ) -> None:
        submitter.submit.return_value = SubmitReceipt(tx_ref="0xabc")
        session = _session(ledger, submitter)
        await session.refresh_all()
        request = TransferRequest(recipient="bob", amount=Decimal("100"), asset=make_asset())

        first = await session.submit_transfer(request)
        second = await session.submit_transfer(request)

        assert first == second == Success(tx_ref="0xabc")
        assert submitter.submit.await_count == 2

    async def test_submit_validation_error_propagates(
        self, ledger: AsyncMock, submitter: AsyncMock
    ) -> None:
        session = _session(ledger, submitter)
        await session.refresh_all()
        request = TransferRequest(recipient="bob", amount=Decimal("600"), asset=make_asset())

        with pytest.raises(InsufficientBalanceError):
            await session.submit_transfer(request)

    async def test_closed_session_rejects_transfers(
        self, ledger: AsyncMock, submitter: AsyncMock
    ) -> None:
        session = _session(ledger, submitter)
        session.close()

        with pytest.raises(SessionClosedError):
            session.new_workflow()
        assert session.balances.closed
        assert session.history.closed


class TestSessionManager:
    async def test_no_session(self, ledger: AsyncMock, submitter: AsyncMock) -> None:
        manager = SessionManager(ledger, submitter)
        assert manager.has_session is False
        with pytest.raises(NoActiveSessionError):
            _ = manager.current

    async def test_activate_starts_initial_refresh(
        self, ledger: AsyncMock, submitter: AsyncMock
    ) -> None:
        manager = SessionManager(ledger, submitter)

        session = manager.activate("acc-1")

        assert manager.current is session
        assert session.balances.state.is_loading is True
        await asyncio.gather(session.balances.refresh(), session.history.refresh())
        ledger.fetch_balances.assert_awaited_once_with("acc-1")
        ledger.fetch_history.assert_awaited_once_with("acc-1")

    async def test_switch_account_replaces_and_closes(
        self, ledger: AsyncMock, submitter: AsyncMock
    ) -> None:
        manager = SessionManager(ledger, submitter)
        first = manager.activate("acc-1")

        second = manager.activate("acc-2")

        assert first.closed is True
        assert first.balances.closed is True
        assert second is manager.current
        assert second.balances is not first.balances
        assert second.account_id == "acc-2"
        await second.refresh_all()

    async def test_deactivate(self, ledger: AsyncMock, submitter: AsyncMock) -> None:
        manager = SessionManager(ledger, submitter)
        session = manager.activate("acc-1")

        manager.deactivate()

        assert session.closed is True
        assert manager.has_session is False
