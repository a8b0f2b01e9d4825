"""Balance list view model for the asset list widget."""

from collections.abc import Sequence
from dataclasses import dataclass

from src.tw_common.enums import DisplayMode
from src.tw_ledger.domain.models import AssetBalance

COMPACT_SIZE = 3


@dataclass(frozen=True)
class BalanceListView:
    visible: tuple[AssetBalance, ...]
    truncated: bool
    total_count: int


def present(
    balances: Sequence[AssetBalance],
    mode: DisplayMode,
    compact_size: int = COMPACT_SIZE,
) -> BalanceListView:
    """Pure: same balances and mode always give the same view.

    Compact mode shows the first compact_size entries in store order.
    truncated is set in compact mode as soon as there is more than one
    balance, even when all of them fit (existing "View all" threshold).
    """
    if mode is DisplayMode.COMPACT:
        return BalanceListView(
            visible=tuple(balances[:compact_size]),
            truncated=len(balances) > 1,
            total_count=len(balances),
        )
    return BalanceListView(
        visible=tuple(balances),
        truncated=False,
        total_count=len(balances),
    )
