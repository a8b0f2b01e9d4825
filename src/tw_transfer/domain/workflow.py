"""TransferWorkflow — one transfer attempt, from validation to settlement.

IDLE -> VALIDATING -> SUBMITTING -> SETTLING -> SUCCEEDED
VALIDATING or SUBMITTING -> FAILED

One instance per attempt. Validation errors are raised to the caller before
any collaborator is touched. After validation the attempt runs in its own
task: a caller that goes away (cancelled) does not withdraw the broadcast,
and settlement still kicks off the balance and history refreshes.
"""

import asyncio
import logging
from decimal import Decimal

from src.tw_balance.domain.store import BalanceStore
from src.tw_common.enums import WorkflowState
from src.tw_common.errors import SubmissionError, SubmitTimeoutError, WorkflowReusedError
from src.tw_common.tasks import spawn
from src.tw_history.domain.store import TransferHistoryStore
from src.tw_ledger.domain.ports import AddressValidatorProtocol, TransferSubmitterProtocol
from src.tw_transfer.domain.models import (
    Failure,
    SubmitPayload,
    Success,
    TransferOutcome,
    TransferRequest,
)
from src.tw_transfer.domain.rules import check_amount, check_balance, check_recipient

logger = logging.getLogger(__name__)

DEFAULT_MAX_AMOUNT = Decimal("100000")


class TransferWorkflow:
    def __init__(
        self,
        balances: BalanceStore,
        history: TransferHistoryStore,
        submitter: TransferSubmitterProtocol,
        address_validator: AddressValidatorProtocol | None = None,
        max_amount: Decimal = DEFAULT_MAX_AMOUNT,
        submit_timeout: float | None = None,
    ) -> None:
        self._balances = balances
        self._history = history
        self._submitter = submitter
        self._address_validator = address_validator
        self._max_amount = max_amount
        self._submit_timeout = submit_timeout or None
        self._state = WorkflowState.IDLE
        self._outcome: TransferOutcome | None = None
        self._settle_tasks: tuple[asyncio.Task, ...] = ()

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def outcome(self) -> TransferOutcome | None:
        """Set exactly once, when the attempt reaches a terminal state."""
        return self._outcome

    @property
    def settle_tasks(self) -> tuple[asyncio.Task, ...]:
        return self._settle_tasks

    async def submit(self, request: TransferRequest) -> TransferOutcome:
        if self._state is not WorkflowState.IDLE:
            raise WorkflowReusedError(self._state.value)

        self._state = WorkflowState.VALIDATING
        try:
            payload = self._validate(request)
        except Exception:
            self._state = WorkflowState.FAILED
            raise

        # Past validation the attempt is not cancellable: run it detached and shield the wait
        attempt = spawn(self._submit_and_settle(payload), name=f"transfer:{request.recipient}")
        return await asyncio.shield(attempt)

    def _validate(self, request: TransferRequest) -> SubmitPayload:
        check_recipient(request.recipient, self._address_validator)
        raw_amount = check_amount(request.amount, request.asset, self._max_amount)
        # Latest snapshot only; a stale balance is caught by the ledger as a Failure
        check_balance(raw_amount, request.asset, self._balances.balance_for(request.asset))
        return SubmitPayload(
            recipient=request.recipient.strip(),
            raw_amount=raw_amount,
            asset=request.asset,
        )

    async def _submit_and_settle(self, payload: SubmitPayload) -> TransferOutcome:
        self._state = WorkflowState.SUBMITTING
        logger.info(
            "Submitting transfer of %d raw %s to %s",
            payload.raw_amount,
            payload.asset.id,
            payload.recipient,
        )
        try:
            if self._submit_timeout is None:
                receipt = await self._submitter.submit(payload)
            else:
                receipt = await asyncio.wait_for(
                    self._submitter.submit(payload), timeout=self._submit_timeout
                )
        except TimeoutError:
            return self._fail(SubmitTimeoutError(
                f"Transfer submission timed out after {self._submit_timeout}s"
            ))
        except SubmissionError as exc:
            return self._fail(exc)
        except Exception:
            self._state = WorkflowState.FAILED
            logger.exception("Transfer submission crashed for %s", payload.recipient)
            raise

        self._state = WorkflowState.SETTLING
        self._settle_tasks = self._start_settle_refreshes()

        self._state = WorkflowState.SUCCEEDED
        self._outcome = Success(tx_ref=receipt.tx_ref)
        logger.info("Transfer %s succeeded", receipt.tx_ref)
        return self._outcome

    def _start_settle_refreshes(self) -> tuple[asyncio.Task, ...]:
        tasks: list[asyncio.Task] = []
        for store in (self._balances, self._history):
            if store.closed:
                logger.info("Skipping %s refresh: session closed", store.name)
                continue
            tasks.append(store.start_refresh())
        return tuple(tasks)

    def _fail(self, exc: SubmissionError) -> Failure:
        self._state = WorkflowState.FAILED
        self._outcome = Failure(reason=exc.kind, message=exc.message)
        logger.warning("Transfer failed: %s (%s)", exc.kind.value, exc.message)
        return self._outcome
