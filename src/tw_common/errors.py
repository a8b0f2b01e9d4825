"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Transfer validation (field-attributable)
  2xxx: Read-model fetch (balances, history)
  3xxx: Transfer submission
  9xxx: System
"""

from src.tw_common.enums import ErrorKind


class AppError(Exception):
    """Base application error."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        field: str | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.field = field
        super().__init__(message)


# --- 1xxx: Validation ---

class TransferValidationError(AppError):
    """Raised before any collaborator is called; always names a field."""


class InvalidAmountError(TransferValidationError):
    kind = ErrorKind.INVALID_AMOUNT

    def __init__(self, detail: str) -> None:
        super().__init__(1001, f"Invalid amount: {detail}", 422, field="amount")


class InvalidRecipientError(TransferValidationError):
    kind = ErrorKind.INVALID_RECIPIENT

    def __init__(self, detail: str = "Recipient is required") -> None:
        super().__init__(1002, detail, 422, field="recipient")


class InsufficientBalanceError(TransferValidationError):
    kind = ErrorKind.INSUFFICIENT_BALANCE

    def __init__(self, required: str, available: str) -> None:
        super().__init__(
            1003,
            f"Insufficient balance: required {required}, available {available}",
            422,
            field="amount",
        )


class UnknownAssetError(TransferValidationError):
    kind = ErrorKind.UNKNOWN_ASSET

    def __init__(self, asset_id: str) -> None:
        super().__init__(1004, f"Asset not held by this account: {asset_id}", 422, field="asset")


# --- 2xxx: Fetch ---

class FetchError(AppError):
    """Ledger read failure; stores keep their previous snapshot."""


class NetworkError(FetchError):
    kind = ErrorKind.NETWORK_ERROR

    def __init__(self, detail: str) -> None:
        super().__init__(2001, f"Ledger unreachable: {detail}", 503)


class AccountError(FetchError):
    kind = ErrorKind.ACCOUNT_ERROR

    def __init__(self, account_id: str, detail: str = "account not found") -> None:
        super().__init__(2002, f"Account {account_id}: {detail}", 404)


# --- 3xxx: Submission ---

class SubmissionError(AppError):
    """Terminal for the attempt; reported as a Failure outcome."""


class RejectedByNetworkError(SubmissionError):
    kind = ErrorKind.REJECTED_BY_NETWORK

    def __init__(self, detail: str = "Transfer rejected by network") -> None:
        super().__init__(3001, detail, 502)


class InvalidSignatureError(SubmissionError):
    kind = ErrorKind.INVALID_SIGNATURE

    def __init__(self, detail: str = "Transfer signature is invalid") -> None:
        super().__init__(3002, detail, 502)


class SubmitTimeoutError(SubmissionError):
    kind = ErrorKind.TIMEOUT

    def __init__(self, detail: str = "Transfer submission timed out") -> None:
        super().__init__(3003, detail, 504)


# --- 9xxx: System ---

class NoActiveSessionError(AppError):
    kind = ErrorKind.NO_ACTIVE_SESSION

    def __init__(self) -> None:
        super().__init__(9001, "No active account session", 409)


class SessionClosedError(AppError):
    kind = ErrorKind.SESSION_CLOSED

    def __init__(self, account_id: str) -> None:
        super().__init__(9003, f"Session for account {account_id} is closed", 409)


class WorkflowReusedError(AppError):
    def __init__(self, state: str) -> None:
        super().__init__(9004, f"Transfer workflow already used (state {state})", 500)


# Reverse lookup so a Failure outcome can be rendered with its code and status.
SUBMISSION_ERRORS: dict[ErrorKind, type[SubmissionError]] = {
    ErrorKind.REJECTED_BY_NETWORK: RejectedByNetworkError,
    ErrorKind.INVALID_SIGNATURE: InvalidSignatureError,
    ErrorKind.TIMEOUT: SubmitTimeoutError,
}
