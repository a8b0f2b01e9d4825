"""Pre-submission checks. Each raises a field-attributed TransferValidationError."""

from decimal import Decimal

from src.tw_common.amounts import format_amount, parse_amount, to_raw
from src.tw_common.errors import (
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidRecipientError,
)
from src.tw_ledger.domain.models import AssetBalance, AssetRef
from src.tw_ledger.domain.ports import AddressValidatorProtocol


def check_recipient(recipient: str, validator: AddressValidatorProtocol | None = None) -> None:
    """Raise InvalidRecipientError if recipient is blank or rejected by validator."""
    if not recipient or not recipient.strip():
        raise InvalidRecipientError("Recipient is required")
    if validator is not None and not validator.is_valid(recipient.strip()):
        raise InvalidRecipientError(f"Recipient is not a valid address: {recipient}")


def check_amount(amount: Decimal | str | int, asset: AssetRef, max_amount: Decimal) -> int:
    """Raise InvalidAmountError unless 0 < amount <= max_amount. Returns raw units."""
    value = parse_amount(amount)
    if value <= 0:
        raise InvalidAmountError("Amount should be greater than 0")
    if value > max_amount:
        raise InvalidAmountError(f"Max possible to transfer is {max_amount:,f} {asset.display_symbol}")
    return to_raw(value, asset.decimals)


def check_balance(raw_amount: int, asset: AssetRef, balance: AssetBalance | None) -> None:
    """Raise InsufficientBalanceError if raw_amount exceeds the known balance."""
    available = balance.raw_amount if balance is not None else 0
    if raw_amount > available:
        raise InsufficientBalanceError(
            required=format_amount(raw_amount, asset.decimals, asset.display_symbol),
            available=format_amount(available, asset.decimals, asset.display_symbol),
        )
