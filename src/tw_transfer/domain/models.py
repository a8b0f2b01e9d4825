"""Transfer request and outcome types."""

from dataclasses import dataclass
from decimal import Decimal

from src.tw_common.enums import ErrorKind
from src.tw_ledger.domain.models import AssetRef


@dataclass(frozen=True)
class TransferRequest:
    recipient: str
    amount: Decimal          # display units; converted to raw only at submit
    asset: AssetRef


@dataclass(frozen=True)
class SubmitPayload:
    recipient: str
    raw_amount: int
    asset: AssetRef


@dataclass(frozen=True)
class SubmitReceipt:
    tx_ref: str


@dataclass(frozen=True)
class Success:
    tx_ref: str


@dataclass(frozen=True)
class Failure:
    reason: ErrorKind
    message: str | None = None


TransferOutcome = Success | Failure
