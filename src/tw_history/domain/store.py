"""TransferHistoryStore — recent transfers, newest first.

The ledger is the authority: each refresh replaces the whole list, no merge.
"""

from collections.abc import Sequence

from src.tw_common.snapshot_store import SnapshotStore, StoreState
from src.tw_ledger.domain.models import TransferHistoryEntry
from src.tw_ledger.domain.ports import LedgerClientProtocol

HistoryState = StoreState[TransferHistoryEntry]


def order_history(entries: Sequence[TransferHistoryEntry]) -> tuple[TransferHistoryEntry, ...]:
    """Timestamp descending; equal timestamps by tx_ref ascending."""
    by_ref = sorted(entries, key=lambda e: e.tx_ref)
    return tuple(sorted(by_ref, key=lambda e: e.timestamp, reverse=True))


class TransferHistoryStore(SnapshotStore[TransferHistoryEntry]):
    name = "history"

    def __init__(self, account_id: str, ledger: LedgerClientProtocol) -> None:
        super().__init__(account_id)
        self._ledger = ledger

    async def _fetch(self) -> Sequence[TransferHistoryEntry]:
        return await self._ledger.fetch_history(self.account_id)

    def _order(self, items: Sequence[TransferHistoryEntry]) -> tuple[TransferHistoryEntry, ...]:
        return order_history(items)

    @property
    def entries(self) -> tuple[TransferHistoryEntry, ...]:
        return self.state.items
