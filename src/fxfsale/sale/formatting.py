"""Human-facing strings for amounts, prices and countdowns.

Display only: every value here is rounded half-up and grouped with thousands
separators, so none of it may be parsed back into a transaction amount.
"""

from decimal import ROUND_HALF_UP, Decimal, localcontext

from fxfsale.fixed_point import (
    AMOUNT_CONTEXT,
    format_trimmed,
    to_decimal,
    to_decimal_string,
)
from fxfsale.models import ConversionResult, FixedPointAmount, PaymentMethod, VestingClock
from fxfsale.vesting.schedule import decompose_remaining

LOADING = "Loading..."
VESTING_COMPLETE = "Vesting Complete"
TOKEN_SYMBOL = "FXF"

#: Maximum fraction digits for quoted payment amounts (buy and raffle forms).
PAYMENT_DIGITS = 6

#: Fraction digits for wallet balances per payment method.
BALANCE_DIGITS = {
    PaymentMethod.NATIVE: 4,
    PaymentMethod.STABLE_A: 2,
    PaymentMethod.STABLE_B: 2,
}


def format_grouped(value: Decimal, min_digits: int, max_digits: int) -> str:
    """Round to ``max_digits`` and group thousands, keeping at least ``min_digits``.

    >>> format_grouped(Decimal("1234.5"), 2, 4)
    '1,234.50'
    """
    if not 0 <= min_digits <= max_digits:
        raise ValueError(f"invalid digit range {min_digits}..{max_digits}")

    with localcontext(AMOUNT_CONTEXT):
        rounded = value.quantize(Decimal((0, (1,), -max_digits)), rounding=ROUND_HALF_UP)
    text = format(rounded, ",f")

    if "." not in text:
        return text
    whole, frac = text.split(".")
    frac = frac.rstrip("0").ljust(min_digits, "0")
    return f"{whole}.{frac}" if frac else whole


def format_amount(
    amount: FixedPointAmount | None,
    symbol: str,
    min_digits: int,
    max_digits: int,
) -> str:
    if amount is None:
        return LOADING
    return f"{format_grouped(to_decimal(amount), min_digits, max_digits)} {symbol}"


def format_token_amount(amount: FixedPointAmount | None) -> str:
    """``1234.5 FXF`` -> ``"1,234.50 FXF"``."""
    return format_amount(amount, TOKEN_SYMBOL, 2, 2)


def format_payment_amount(
    amount: FixedPointAmount | ConversionResult | None,
    method: PaymentMethod,
) -> str:
    """Quoted payment with trailing zeros trimmed, e.g. ``"0.00202 ETH"``.

    Not grouped, so the number matches what the buy form's input shows.
    Unavailable quotes show Loading.
    """
    if isinstance(amount, ConversionResult):
        amount = amount.amount
    if amount is None:
        return LOADING
    text = to_decimal_string(amount.magnitude, amount.scale)
    return f"{format_trimmed(text, PAYMENT_DIGITS)} {method.value}"


def format_balance(amount: FixedPointAmount | None, method: PaymentMethod) -> str:
    """Wallet balance: 4 digits for ETH, 2 for stablecoins."""
    if amount is None:
        return f"0 {method.value}"
    digits = BALANCE_DIGITS[method]
    return format_amount(amount, method.value, digits, digits)


def format_token_price(price: FixedPointAmount | None) -> str:
    """FXF price in USD, 4 fraction digits: ``"$0.0500"``."""
    if price is None:
        return LOADING
    return f"${format_grouped(to_decimal(price), 4, 4)}"


def format_gas_price(price: FixedPointAmount | None) -> str:
    """ETH price in USD, 2 fraction digits: ``"$2,500.00"``."""
    if price is None:
        return LOADING
    return f"${format_grouped(to_decimal(price), 2, 2)}"


def format_countdown(clock: VestingClock) -> str:
    """``"{days}d {hh}:{mm}:{ss}"`` or the completion marker."""
    if clock.is_complete:
        return VESTING_COMPLETE
    parts = decompose_remaining(clock.remaining)
    return f"{parts.days}d {parts.hours:02d}:{parts.minutes:02d}:{parts.seconds:02d}"
