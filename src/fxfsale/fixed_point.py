"""Fixed-point decimal helpers for on-chain quantities.

On-chain values are integers with an implied decimal scale (FXF and ETH 18,
USDT/USDC 6, Chainlink ETH/USD 8). Token magnitudes routinely exceed 2**53, so
every conversion here runs on Python ints and Decimal, never on float.

The parse direction is the correctness-critical one: its output becomes a
transaction amount. It rejects anything it cannot represent exactly instead
of truncating.
"""

import re
from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation, localcontext

from fxfsale.exceptions import InvalidAmountError
from fxfsale.models import MAX_SCALE, FixedPointAmount

#: Arithmetic context for amount math. 78 significant digits hold any uint256.
AMOUNT_CONTEXT = Context(prec=78, rounding=ROUND_HALF_UP)

_DECIMAL_RE = re.compile(r"^(?P<whole>[0-9]*)(?:\.(?P<frac>[0-9]*))?$")


def _check_scale(scale: int) -> None:
    if isinstance(scale, bool) or not isinstance(scale, int):
        raise ValueError(f"scale must be an int, got {scale!r}")
    if not 0 <= scale <= MAX_SCALE:
        raise ValueError(f"scale must be in 0..{MAX_SCALE}, got {scale}")


def to_decimal_string(magnitude: int, scale: int) -> str:
    """Render ``magnitude / 10**scale`` with exactly ``scale`` fraction digits.

    Args:
        magnitude: Non-negative integer on-chain amount.
        scale: Number of implied decimal places.

    Returns:
        Plain decimal text, e.g. ``to_decimal_string(1500000, 6) == "1.500000"``.
        With ``scale == 0`` there is no decimal point.
    """
    _check_scale(scale)
    if isinstance(magnitude, bool) or not isinstance(magnitude, int):
        raise ValueError(f"magnitude must be an int, got {magnitude!r}")
    if magnitude < 0:
        raise ValueError(f"magnitude must be non-negative, got {magnitude}")

    if scale == 0:
        return str(magnitude)
    whole, frac = divmod(magnitude, 10**scale)
    return f"{whole}.{frac:0{scale}d}"


def from_decimal_string(value: str, scale: int) -> int:
    """Parse non-negative decimal text into an integer magnitude at ``scale``.

    Accepts ``"12"``, ``"12.5"``, ``"12."`` and ``".5"`` with surrounding
    whitespace. Any fraction digit beyond ``scale`` is rejected, zeros included.

    Raises:
        InvalidAmountError: Empty, non-numeric, signed or exponent-notation
            text, or more fraction digits than ``scale`` allows.
    """
    _check_scale(scale)
    if not isinstance(value, str):
        raise InvalidAmountError(f"amount must be text, got {type(value).__name__}")

    text = value.strip()
    if "e" in text.lower():
        raise InvalidAmountError(f"scientific notation is not accepted: {value!r}")
    if text.startswith("-"):
        raise InvalidAmountError(f"amount must not be negative: {value!r}")

    match = _DECIMAL_RE.match(text)
    if match is None:
        raise InvalidAmountError(f"not a decimal number: {value!r}")
    whole = match.group("whole")
    frac = match.group("frac") or ""
    if not whole and not frac:
        raise InvalidAmountError(f"not a decimal number: {value!r}")

    if len(frac) > scale:
        raise InvalidAmountError(f"{value!r} has more than {scale} fraction digits")

    return int(whole or "0") * 10**scale + int(frac.ljust(scale, "0") or "0")


def format_trimmed(value: str, max_fraction_digits: int) -> str:
    """Round to ``max_fraction_digits`` (half-up) and trim trailing zeros.

    Display only. The output must never be fed back into
    ``from_decimal_string`` because rounding has already happened.
    """
    if max_fraction_digits < 0:
        raise ValueError(f"max_fraction_digits must be >= 0, got {max_fraction_digits}")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise InvalidAmountError(f"not a decimal number: {value!r}") from exc
    if not number.is_finite():
        raise InvalidAmountError(f"not a finite number: {value!r}")

    try:
        with localcontext(AMOUNT_CONTEXT):
            rounded = number.quantize(Decimal((0, (1,), -max_fraction_digits)))
    except InvalidOperation as exc:
        raise InvalidAmountError(
            f"{value!r} does not fit {max_fraction_digits} fraction digits"
        ) from exc
    text = format(rounded, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def to_decimal(amount: FixedPointAmount) -> Decimal:
    """Exact Decimal value of a FixedPointAmount."""
    return Decimal(to_decimal_string(amount.magnitude, amount.scale))


def from_decimal(
    value: Decimal,
    scale: int,
    rounding: str = ROUND_HALF_UP,
) -> tuple[int, bool]:
    """Convert a Decimal back to an integer magnitude at ``scale``.

    The value is quantized to ``scale`` places with ``rounding``, rendered in
    plain notation and parsed with ``from_decimal_string``, so exponent
    notation never reaches the integer parser.

    Returns:
        ``(magnitude, precision_loss)`` where ``precision_loss`` is True when
        quantizing changed the value.
    """
    _check_scale(scale)
    if not value.is_finite() or value < 0:
        raise ValueError(f"value must be a finite non-negative Decimal, got {value}")
    value = value.copy_abs()  # drop the sign of -0

    try:
        with localcontext(AMOUNT_CONTEXT):
            quantized = value.quantize(Decimal((0, (1,), -scale)), rounding=rounding)
            precision_loss = quantized != value
    except InvalidOperation as exc:
        raise ValueError(f"{value} does not fit {scale} decimal places") from exc

    return from_decimal_string(format(quantized, "f"), scale), precision_loss


def to_fixed_point(
    value: Decimal,
    scale: int,
    rounding: str = ROUND_HALF_UP,
) -> tuple[FixedPointAmount, bool]:
    """Like ``from_decimal`` but wrapped in a FixedPointAmount."""
    magnitude, precision_loss = from_decimal(value, scale, rounding)
    return FixedPointAmount(magnitude=magnitude, scale=scale), precision_loss
