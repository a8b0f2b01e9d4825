"""Collaborator Protocols — dependency inversion for testability.

Unit tests inject AsyncMock fakes that conform to these Protocols.
tw_ledger.infrastructure provides the HTTP implementations.
"""

from collections.abc import Sequence
from typing import Protocol

from src.tw_ledger.domain.models import AssetBalance, TransferHistoryEntry
from src.tw_transfer.domain.models import SubmitPayload, SubmitReceipt


class LedgerClientProtocol(Protocol):
    async def fetch_balances(self, account_id: str) -> Sequence[AssetBalance]:
        """Raises NetworkError or AccountError."""
        ...

    async def fetch_history(self, account_id: str) -> Sequence[TransferHistoryEntry]:
        """Raises NetworkError or AccountError."""
        ...


class TransferSubmitterProtocol(Protocol):
    async def submit(self, payload: SubmitPayload) -> SubmitReceipt:
        """Raises RejectedByNetworkError, InvalidSignatureError or SubmitTimeoutError."""
        ...


class AddressValidatorProtocol(Protocol):
    def is_valid(self, recipient: str) -> bool: ...
