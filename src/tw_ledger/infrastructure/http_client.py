"""HTTP implementations of the ledger collaborators (httpx + pydantic).

Wire format (ledger gateway JSON):
  GET  /accounts/{account_id}/balances   -> [{"asset": {...}, "amount": "123"}]
  GET  /accounts/{account_id}/transfers  -> [{"tx_ref", "recipient", "asset", "amount",
                                              "timestamp", "status"}]
  POST /transfers {"recipient", "amount", "asset_id"} -> {"tx_ref": "..."}

Amounts travel as decimal strings of raw units so big integers survive JSON.
"""

import logging
import re
from datetime import datetime

import httpx
from pydantic import BaseModel, Field, ValidationError

from src.tw_common.enums import TransferStatus
from src.tw_common.errors import (
    AccountError,
    InvalidSignatureError,
    NetworkError,
    RejectedByNetworkError,
    SubmitTimeoutError,
)
from src.tw_ledger.domain.models import AssetBalance, AssetRef, TransferHistoryEntry
from src.tw_transfer.domain.models import SubmitPayload, SubmitReceipt

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Wire schemas
# ---------------------------------------------------------------------------


class AssetWire(BaseModel):
    id: str
    symbol: str
    decimals: int = Field(..., ge=0, le=36)
    icon_url: str | None = None

    def to_domain(self) -> AssetRef:
        return AssetRef(id=self.id, symbol=self.symbol, decimals=self.decimals, icon_ref=self.icon_url)


class BalanceWire(BaseModel):
    asset: AssetWire
    amount: int = Field(..., ge=0)

    def to_domain(self) -> AssetBalance:
        return AssetBalance(asset=self.asset.to_domain(), raw_amount=self.amount)


class TransferWire(BaseModel):
    tx_ref: str
    recipient: str
    asset: AssetWire
    amount: int = Field(..., ge=0)
    timestamp: datetime
    status: TransferStatus = TransferStatus.CONFIRMED

    def to_domain(self) -> TransferHistoryEntry:
        return TransferHistoryEntry(
            tx_ref=self.tx_ref,
            recipient=self.recipient,
            asset=self.asset.to_domain(),
            raw_amount=self.amount,
            timestamp=self.timestamp,
            status=self.status,
        )


class SubmitResponseWire(BaseModel):
    tx_ref: str


# ---------------------------------------------------------------------------
# Ledger client
# ---------------------------------------------------------------------------


class HttpLedgerClient:
    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def fetch_balances(self, account_id: str) -> list[AssetBalance]:
        rows = await self._get_list(f"/accounts/{account_id}/balances", account_id)
        try:
            return [BalanceWire.model_validate(row).to_domain() for row in rows]
        except ValidationError as exc:
            raise NetworkError(f"malformed balances payload: {exc.error_count()} error(s)") from exc

    async def fetch_history(self, account_id: str) -> list[TransferHistoryEntry]:
        rows = await self._get_list(f"/accounts/{account_id}/transfers", account_id)
        try:
            return [TransferWire.model_validate(row).to_domain() for row in rows]
        except ValidationError as exc:
            raise NetworkError(f"malformed history payload: {exc.error_count()} error(s)") from exc

    async def _get_list(self, path: str, account_id: str) -> list:
        try:
            resp = await self._client.get(path)
        except httpx.HTTPError as exc:
            raise NetworkError(str(exc) or type(exc).__name__) from exc

        if resp.status_code == 404:
            raise AccountError(account_id)
        if resp.status_code in (401, 403):
            raise AccountError(account_id, f"access denied ({resp.status_code})")
        if resp.is_error:
            raise NetworkError(f"GET {path} returned {resp.status_code}")

        try:
            body = resp.json()
        except ValueError as exc:
            raise NetworkError(f"GET {path} returned non-JSON body") from exc
        if not isinstance(body, list):
            raise NetworkError(f"GET {path} returned {type(body).__name__}, expected list")
        return body


# ---------------------------------------------------------------------------
# Transfer submitter
# ---------------------------------------------------------------------------


class HttpTransferSubmitter:
    """Hands a transfer to the signing/broadcast gateway. No retries."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def submit(self, payload: SubmitPayload) -> SubmitReceipt:
        body = {
            "recipient": payload.recipient,
            "amount": str(payload.raw_amount),
            "asset_id": payload.asset.id,
        }
        try:
            resp = await self._client.post("/transfers", json=body)
        except httpx.TimeoutException as exc:
            raise SubmitTimeoutError() from exc
        except httpx.HTTPError as exc:
            raise RejectedByNetworkError(f"Transfer not delivered: {exc}") from exc

        if resp.status_code in (401, 403):
            raise InvalidSignatureError(_error_detail(resp, "Transfer signature is invalid"))
        if resp.status_code in (408, 504):
            raise SubmitTimeoutError()
        if resp.is_error:
            raise RejectedByNetworkError(_error_detail(resp, "Transfer rejected by network"))

        try:
            return SubmitReceipt(tx_ref=SubmitResponseWire.model_validate(resp.json()).tx_ref)
        except (ValidationError, ValueError) as exc:
            logger.error("Unreadable submit response (%d): %s", resp.status_code, resp.text[:200])
            raise RejectedByNetworkError("Unreadable response from transfer gateway") from exc


def _error_detail(resp: httpx.Response, default: str) -> str:
    try:
        body = resp.json()
    except ValueError:
        return default
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return default


# ---------------------------------------------------------------------------
# Recipient validation
# ---------------------------------------------------------------------------


class PatternAddressValidator:
    """Accepts any non-blank recipient, or only those matching pattern when given."""

    def __init__(self, pattern: str | None = None) -> None:
        self._pattern = re.compile(pattern) if pattern else None

    def is_valid(self, recipient: str) -> bool:
        if not recipient.strip():
            return False
        if self._pattern is None:
            return True
        return self._pattern.fullmatch(recipient) is not None
