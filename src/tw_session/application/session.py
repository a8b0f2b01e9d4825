"""AccountSession — everything scoped to one active account.

Stores are built here and handed to workflows by reference; nothing looks
them up globally. SessionManager swaps sessions on account switch/logout
and closes the old stores so late refreshes cannot leak across accounts.
"""

import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal

from src.tw_balance.application.presenter import COMPACT_SIZE, BalanceListView, present
from src.tw_balance.domain.store import BalanceState, BalanceStore
from src.tw_common.enums import DisplayMode
from src.tw_common.errors import NoActiveSessionError, SessionClosedError, UnknownAssetError
from src.tw_history.domain.store import HistoryState, TransferHistoryStore
from src.tw_ledger.domain.models import AssetRef
from src.tw_ledger.domain.ports import (
    AddressValidatorProtocol,
    LedgerClientProtocol,
    TransferSubmitterProtocol,
)
from src.tw_transfer.domain.models import TransferOutcome, TransferRequest
from src.tw_transfer.domain.workflow import DEFAULT_MAX_AMOUNT, TransferWorkflow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferPolicy:
    max_amount: Decimal = DEFAULT_MAX_AMOUNT
    submit_timeout: float | None = None
    compact_size: int = COMPACT_SIZE


class AccountSession:
    def __init__(
        self,
        account_id: str,
        ledger: LedgerClientProtocol,
        submitter: TransferSubmitterProtocol,
        address_validator: AddressValidatorProtocol | None = None,
        policy: TransferPolicy | None = None,
    ) -> None:
        self.account_id = account_id
        self.balances = BalanceStore(account_id, ledger)
        self.history = TransferHistoryStore(account_id, ledger)
        self._submitter = submitter
        self._address_validator = address_validator
        self._policy = policy or TransferPolicy()
        self._closed = False

    # --- reads ---

    def get_balances(self) -> BalanceState:
        return self.balances.state

    def get_history(self) -> HistoryState:
        return self.history.state

    def present_list(self, mode: DisplayMode) -> BalanceListView:
        return present(self.balances.balances, mode, self._policy.compact_size)

    def asset_by_id(self, asset_id: str) -> AssetRef:
        asset = self.balances.find_asset(asset_id)
        if asset is None:
            raise UnknownAssetError(asset_id)
        return asset

    def max_transferable(self, asset_id: str) -> Decimal:
        """Amount the "Max" shortcut fills in: full known balance, capped by policy."""
        asset = self.asset_by_id(asset_id)
        balance = self.balances.balance_for(asset)
        available = balance.amount if balance is not None else Decimal(0)
        return min(available, self._policy.max_amount)

    # --- writes ---

    async def refresh_all(self) -> tuple[BalanceState, HistoryState]:
        balances, history = await asyncio.gather(self.balances.refresh(), self.history.refresh())
        return balances, history

    def new_workflow(self) -> TransferWorkflow:
        if self._closed:
            raise SessionClosedError(self.account_id)
        return TransferWorkflow(
            balances=self.balances,
            history=self.history,
            submitter=self._submitter,
            address_validator=self._address_validator,
            max_amount=self._policy.max_amount,
            submit_timeout=self._policy.submit_timeout,
        )

    async def submit_transfer(self, request: TransferRequest) -> TransferOutcome:
        """Fresh workflow per attempt; validation errors propagate, submission errors are Failures."""
        return await self.new_workflow().submit(request)

    # --- lifecycle ---

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        """Kick off the initial refreshes without waiting for them."""
        self.balances.start_refresh()
        self.history.start_refresh()

    def close(self) -> None:
        self._closed = True
        self.balances.close()
        self.history.close()
        logger.info("Closed session for account %s", self.account_id)


class SessionManager:
    """Holds at most one AccountSession; activation replaces the previous one."""

    def __init__(
        self,
        ledger: LedgerClientProtocol,
        submitter: TransferSubmitterProtocol,
        address_validator: AddressValidatorProtocol | None = None,
        policy: TransferPolicy | None = None,
    ) -> None:
        self._ledger = ledger
        self._submitter = submitter
        self._address_validator = address_validator
        self._policy = policy or TransferPolicy()
        self._current: AccountSession | None = None

    @property
    def current(self) -> AccountSession:
        if self._current is None:
            raise NoActiveSessionError()
        return self._current

    @property
    def has_session(self) -> bool:
        return self._current is not None

    def activate(self, account_id: str) -> AccountSession:
        self.deactivate()
        session = AccountSession(
            account_id,
            ledger=self._ledger,
            submitter=self._submitter,
            address_validator=self._address_validator,
            policy=self._policy,
        )
        self._current = session
        session.start()
        logger.info("Activated session for account %s", account_id)
        return session

    def deactivate(self) -> None:
        if self._current is not None:
            self._current.close()
            self._current = None
