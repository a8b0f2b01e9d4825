"""Domain models for tw_ledger — frozen dataclasses, no I/O dependency."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.tw_common.amounts import MAX_DECIMALS, format_amount, to_decimal
from src.tw_common.enums import TransferStatus


@dataclass(frozen=True)
class AssetRef:
    id: str
    symbol: str
    decimals: int            # fixed per asset id for the session
    icon_ref: str | None = None

    def __post_init__(self) -> None:
        if not (0 <= self.decimals <= MAX_DECIMALS):
            raise ValueError(f"decimals must be in [0, {MAX_DECIMALS}], got {self.decimals}")

    @property
    def display_symbol(self) -> str:
        return self.symbol.strip().upper() or "TOKEN"


@dataclass(frozen=True)
class AssetBalance:
    asset: AssetRef
    raw_amount: int          # smallest units, never negative

    def __post_init__(self) -> None:
        if self.raw_amount < 0:
            raise ValueError(f"raw_amount must be non-negative, got {self.raw_amount}")

    @property
    def amount(self) -> Decimal:
        return to_decimal(self.raw_amount, self.asset.decimals)

    @property
    def display(self) -> str:
        return format_amount(self.raw_amount, self.asset.decimals, self.asset.display_symbol)


@dataclass(frozen=True)
class TransferHistoryEntry:
    tx_ref: str
    recipient: str
    asset: AssetRef
    raw_amount: int
    timestamp: datetime
    status: TransferStatus = TransferStatus.CONFIRMED

    def __post_init__(self) -> None:
        if self.raw_amount < 0:
            raise ValueError(f"raw_amount must be non-negative, got {self.raw_amount}")

    @property
    def amount(self) -> Decimal:
        return to_decimal(self.raw_amount, self.asset.decimals)
