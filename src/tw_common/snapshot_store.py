"""SnapshotStore — account-scoped read-model with single-flight refresh.

State is an immutable StoreState replaced by value on every change, so a
reader never sees a half-applied refresh. Concurrent refresh() calls share
one fetch. A failed fetch keeps the previous items and records last_error
(stale-but-available). Listeners are notified after every state change.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Generic, TypeVar

from src.tw_common.datetime_utils import utc_now
from src.tw_common.enums import ErrorKind
from src.tw_common.errors import FetchError, SessionClosedError
from src.tw_common.tasks import spawn

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class StoreState(Generic[T]):
    items: tuple[T, ...] = ()
    is_loading: bool = False
    last_error: ErrorKind | None = None
    last_error_message: str | None = None
    refreshed_at: datetime | None = None


Listener = Callable[[StoreState[T]], None]


class SnapshotStore(Generic[T]):
    name = "store"

    def __init__(self, account_id: str) -> None:
        self.account_id = account_id
        self._state: StoreState[T] = StoreState()
        self._inflight: asyncio.Task[StoreState[T]] | None = None
        self._listeners: list[Listener[T]] = []
        self._closed = False

    # ------------------------------------------------------------------
    # Subclass hooks
    # ------------------------------------------------------------------

    async def _fetch(self) -> Sequence[T]:
        raise NotImplementedError

    def _order(self, items: Sequence[T]) -> tuple[T, ...]:
        return tuple(items)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def state(self) -> StoreState[T]:
        return self._state

    @property
    def is_refreshing(self) -> bool:
        return self._inflight is not None

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    def start_refresh(self) -> asyncio.Task[StoreState[T]]:
        """Initiate a refresh, or return the one already in flight."""
        if self._closed:
            raise SessionClosedError(self.account_id)
        if self._inflight is not None:
            return self._inflight

        task = spawn(self._run_refresh(), name=f"{self.name}-refresh:{self.account_id}")
        # In flight before listeners hear about it, so a listener that refreshes joins this task
        self._inflight = task
        self._set_state(replace(self._state, is_loading=True))
        return task

    async def refresh(self) -> StoreState[T]:
        """Refresh and return the resulting state. Fetch errors land in last_error."""
        task = self.start_refresh()
        try:
            # Shielded: a cancelled joiner must not cancel the fetch other callers share
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if self._closed and (current is None or current.cancelling() == 0):
                # The fetch was cancelled by close(), not this caller
                raise SessionClosedError(self.account_id) from None
            raise

    async def _run_refresh(self) -> StoreState[T]:
        try:
            items = await self._fetch()
        except FetchError as exc:
            logger.warning(
                "%s refresh failed for account %s: %s", self.name, self.account_id, exc.message
            )
            new_state = replace(
                self._state,
                is_loading=False,
                last_error=exc.kind,
                last_error_message=exc.message,
            )
        except BaseException:
            # Cancellation (close) or an unexpected bug: still never leave is_loading stuck
            self._set_state(replace(self._state, is_loading=False))
            raise
        else:
            new_state = StoreState(
                items=self._order(items),
                is_loading=False,
                last_error=None,
                last_error_message=None,
                refreshed_at=utc_now(),
            )
            logger.debug(
                "%s refreshed for account %s: %d item(s)",
                self.name,
                self.account_id,
                len(new_state.items),
            )
        finally:
            self._inflight = None

        self._set_state(new_state)
        return new_state

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener[T]) -> Callable[[], None]:
        """Register listener for state changes. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, new_state: StoreState[T]) -> None:
        self._state = new_state
        if self._closed:
            return
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                logger.exception("%s listener raised; continuing", self.name)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Tear down on account switch or logout."""
        self._closed = True
        self._listeners.clear()
        if self._inflight is not None:
            self._inflight.cancel()
            self._inflight = None
        self._state = replace(self._state, is_loading=False)
