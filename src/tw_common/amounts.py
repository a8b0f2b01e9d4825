"""Exact conversion between display amounts and raw ledger units.

Raw amounts are non-negative ints (smallest indivisible unit of an asset).
Display amounts are Decimal, scaled by 10^decimals. No float arithmetic:
floats are accepted only as input and go through their shortest repr.
"""

from decimal import Decimal, InvalidOperation

from src.tw_common.errors import InvalidAmountError

MAX_DECIMALS = 36
# uint256 has 78 decimal digits; no ledger amount is longer
MAX_RAW_DIGITS = 78


def _check_decimals(decimals: int) -> None:
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise ValueError(f"decimals must be an int, got {type(decimals).__name__}")
    if not (0 <= decimals <= MAX_DECIMALS):
        raise ValueError(f"decimals must be between 0 and {MAX_DECIMALS}, got {decimals}")


def parse_amount(value: str | int | float | Decimal) -> Decimal:
    """Parse user input into a finite Decimal or raise InvalidAmountError."""
    if isinstance(value, bool):
        raise InvalidAmountError("boolean is not an amount")
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, int):
        parsed = Decimal(value)
    elif isinstance(value, (float, str)):
        text = str(value).strip().replace("_", "")
        if not text:
            raise InvalidAmountError("amount is required")
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            raise InvalidAmountError(f"not a number: {value!r}") from None
    else:
        raise InvalidAmountError(f"unsupported type {type(value).__name__}")

    if not parsed.is_finite():
        raise InvalidAmountError(f"must be finite, got {value!r}")
    return parsed


def to_raw(amount: str | int | float | Decimal, decimals: int) -> int:
    """Convert a display amount to raw units: '1.5', 6 -> 1500000.

    Raises InvalidAmountError for negative or non-finite input, or when the
    amount has more fractional digits than the asset supports. Huge exponents
    are rejected before any power of ten is built.
    """
    _check_decimals(decimals)
    value = parse_amount(amount)
    if value < 0:
        raise InvalidAmountError(f"must not be negative, got {value}")

    _, digits, exponent = value.as_tuple()
    if not isinstance(exponent, int):
        raise InvalidAmountError(f"must be finite, got {value}")
    significant = "".join(map(str, digits)).rstrip("0")
    if not significant:
        return 0

    # Trailing zeros fold into the exponent, so "1.50" with 1 decimal is fine
    shift = exponent + len(digits) - len(significant) + decimals
    if shift < 0:
        raise InvalidAmountError(
            f"{value} has more than {decimals} fractional digit(s)"
        )
    if len(significant) + shift > MAX_RAW_DIGITS:
        raise InvalidAmountError(f"{value} is too large")
    return int(significant) * 10**shift


def to_decimal(raw: int, decimals: int) -> Decimal:
    """Convert raw units to an exact Decimal: 1500000, 6 -> Decimal('1.500000')."""
    _check_decimals(decimals)
    sign = 1 if raw < 0 else 0
    digits = tuple(int(c) for c in str(abs(int(raw))))
    return Decimal((sign, digits, -decimals))


def format_amount(raw: int, decimals: int, symbol: str | None = None) -> str:
    """Display string with separators: 1234500000, 6, 'CHR' -> '1,234.5 CHR'."""
    text = f"{to_decimal(raw, decimals):,f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text} {symbol}" if symbol else text
