"""Domain object builders shared by unit and integration tests."""

from datetime import UTC, datetime

from src.tw_ledger.domain.models import AssetBalance, AssetRef, TransferHistoryEntry


def make_asset(asset_id: str = "chr", symbol: str = "chr", decimals: int = 6) -> AssetRef:
    return AssetRef(id=asset_id, symbol=symbol, decimals=decimals, icon_ref=None)


def make_balance(raw_amount: int, asset: AssetRef | None = None) -> AssetBalance:
    return AssetBalance(asset=asset or make_asset(), raw_amount=raw_amount)


def make_entry(
    tx_ref: str,
    timestamp: datetime | None = None,
    raw_amount: int = 1_000_000,
) -> TransferHistoryEntry:
    return TransferHistoryEntry(
        tx_ref=tx_ref,
        recipient="bob",
        asset=make_asset(),
        raw_amount=raw_amount,
        timestamp=timestamp or datetime(2025, 1, 1, tzinfo=UTC),
    )
