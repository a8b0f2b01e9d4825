"""Global enums shared across the wallet modules."""

from enum import Enum


class ErrorKind(str, Enum):
    # Local validation (field-attributable, never retried)
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INVALID_RECIPIENT = "INVALID_RECIPIENT"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    UNKNOWN_ASSET = "UNKNOWN_ASSET"
    # Read-model fetch (store keeps stale data)
    NETWORK_ERROR = "NETWORK_ERROR"
    ACCOUNT_ERROR = "ACCOUNT_ERROR"
    # Submission (terminal for the attempt)
    REJECTED_BY_NETWORK = "REJECTED_BY_NETWORK"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    TIMEOUT = "TIMEOUT"
    # System
    NO_ACTIVE_SESSION = "NO_ACTIVE_SESSION"
    SESSION_CLOSED = "SESSION_CLOSED"
    INTERNAL = "INTERNAL"


class DisplayMode(str, Enum):
    COMPACT = "compact"
    FULL = "full"


class WorkflowState(str, Enum):
    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    SUBMITTING = "SUBMITTING"
    SETTLING = "SETTLING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class TransferStatus(str, Enum):
    """Status of a history entry as reported by the ledger."""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"
