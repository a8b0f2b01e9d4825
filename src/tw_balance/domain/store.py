"""BalanceStore — current asset balances of the active account."""

from collections.abc import Sequence

from src.tw_common.snapshot_store import SnapshotStore, StoreState
from src.tw_ledger.domain.models import AssetBalance, AssetRef
from src.tw_ledger.domain.ports import LedgerClientProtocol

BalanceState = StoreState[AssetBalance]


class BalanceStore(SnapshotStore[AssetBalance]):
    name = "balances"

    def __init__(self, account_id: str, ledger: LedgerClientProtocol) -> None:
        super().__init__(account_id)
        self._ledger = ledger

    async def _fetch(self) -> Sequence[AssetBalance]:
        return await self._ledger.fetch_balances(self.account_id)

    @property
    def balances(self) -> tuple[AssetBalance, ...]:
        return self.state.items

    def balance_for(self, asset: AssetRef) -> AssetBalance | None:
        """Latest known balance of asset; same id with other decimals is a different asset."""
        for balance in self.state.items:
            if balance.asset.id == asset.id and balance.asset.decimals == asset.decimals:
                return balance
        return None

    def find_asset(self, asset_id: str) -> AssetRef | None:
        for balance in self.state.items:
            if balance.asset.id == asset_id:
                return balance.asset
        return None
