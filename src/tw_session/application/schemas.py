"""Pydantic schemas for the wallet API."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.tw_balance.application.presenter import BalanceListView
from src.tw_common.snapshot_store import StoreState
from src.tw_ledger.domain.models import AssetBalance, AssetRef, TransferHistoryEntry

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ActivateSessionRequest(BaseModel):
    account_id: str = Field(..., min_length=1, description="Ledger account id")


class TransferBody(BaseModel):
    # Left loose on purpose: rules.py produces the field-level errors
    recipient: str = Field("", description="Receiver account id")
    amount: str | int | float = Field(..., description="Display units, e.g. '12.5'")
    asset_id: str = Field(..., min_length=1)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class AssetItem(BaseModel):
    id: str
    symbol: str
    decimals: int
    icon_ref: str | None

    @classmethod
    def from_domain(cls, asset: AssetRef) -> "AssetItem":
        return cls(
            id=asset.id,
            symbol=asset.display_symbol,
            decimals=asset.decimals,
            icon_ref=asset.icon_ref,
        )


class BalanceItem(BaseModel):
    asset: AssetItem
    raw_amount: str          # string so big ints survive JSON clients
    amount: str
    amount_display: str

    @classmethod
    def from_domain(cls, balance: AssetBalance) -> "BalanceItem":
        return cls(
            asset=AssetItem.from_domain(balance.asset),
            raw_amount=str(balance.raw_amount),
            amount=str(balance.amount),
            amount_display=balance.display,
        )


class HistoryItem(BaseModel):
    tx_ref: str
    recipient: str
    asset: AssetItem
    raw_amount: str
    amount: str
    timestamp: str  # ISO8601 string
    status: str

    @classmethod
    def from_domain(cls, entry: TransferHistoryEntry) -> "HistoryItem":
        return cls(
            tx_ref=entry.tx_ref,
            recipient=entry.recipient,
            asset=AssetItem.from_domain(entry.asset),
            raw_amount=str(entry.raw_amount),
            amount=str(entry.amount),
            timestamp=entry.timestamp.isoformat(),
            status=entry.status.value,
        )


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


class BalancesResponse(BaseModel):
    account_id: str
    items: list[BalanceItem]
    is_loading: bool
    last_error: str | None
    last_error_message: str | None
    refreshed_at: str | None

    @classmethod
    def from_state(cls, account_id: str, state: StoreState[AssetBalance]) -> "BalancesResponse":
        return cls(
            account_id=account_id,
            items=[BalanceItem.from_domain(b) for b in state.items],
            is_loading=state.is_loading,
            last_error=state.last_error.value if state.last_error else None,
            last_error_message=state.last_error_message,
            refreshed_at=_iso(state.refreshed_at),
        )


class HistoryResponse(BaseModel):
    account_id: str
    items: list[HistoryItem]
    is_loading: bool
    last_error: str | None
    last_error_message: str | None
    refreshed_at: str | None

    @classmethod
    def from_state(
        cls, account_id: str, state: StoreState[TransferHistoryEntry]
    ) -> "HistoryResponse":
        return cls(
            account_id=account_id,
            items=[HistoryItem.from_domain(e) for e in state.items],
            is_loading=state.is_loading,
            last_error=state.last_error.value if state.last_error else None,
            last_error_message=state.last_error_message,
            refreshed_at=_iso(state.refreshed_at),
        )


class BalanceListResponse(BaseModel):
    visible: list[BalanceItem]
    truncated: bool
    total_count: int
    is_loading: bool

    @classmethod
    def from_view(cls, view: BalanceListView, is_loading: bool) -> "BalanceListResponse":
        return cls(
            visible=[BalanceItem.from_domain(b) for b in view.visible],
            truncated=view.truncated,
            total_count=view.total_count,
            is_loading=is_loading,
        )


class SessionResponse(BaseModel):
    account_id: str


class MaxAmountResponse(BaseModel):
    asset_id: str
    amount: str
    amount_display: str


class TransferResponse(BaseModel):
    status: str
    tx_ref: str
