"""Tests for fixed-point decimal helpers.

Magnitudes are Python ints so values past 2**53 stay exact.
"""

from decimal import ROUND_DOWN, Decimal

import pytest

from fxfsale.exceptions import InvalidAmountError
from fxfsale.fixed_point import (
    format_trimmed,
    from_decimal,
    from_decimal_string,
    to_decimal,
    to_decimal_string,
    to_fixed_point,
)
from fxfsale.models import FixedPointAmount


class TestToDecimalString:
    """Rendering integer magnitudes with an exact number of fraction digits."""

    def test_stablecoin_amount(self) -> None:
        assert to_decimal_string(1500000, 6) == "1.500000"

    def test_zero_keeps_all_fraction_digits(self) -> None:
        assert to_decimal_string(0, 18) == "0.000000000000000000"

    def test_small_magnitude_is_zero_padded(self) -> None:
        assert to_decimal_string(5, 3) == "0.005"

    def test_scale_zero_has_no_point(self) -> None:
        assert to_decimal_string(123, 0) == "123"

    def test_beyond_float_precision(self) -> None:
        """10**30 wei does not fit a double exactly but must render exactly."""
        assert to_decimal_string(10**30 + 1, 18) == "1000000000000.000000000000000001"

    def test_negative_magnitude_rejected(self) -> None:
        with pytest.raises(ValueError):
            to_decimal_string(-1, 6)

    @pytest.mark.parametrize("scale", [-1, 19])
    def test_scale_out_of_range_rejected(self, scale: int) -> None:
        with pytest.raises(ValueError):
            to_decimal_string(1, scale)


class TestFromDecimalString:
    """Parsing user text into transaction magnitudes."""

    def test_plain_decimal(self) -> None:
        assert from_decimal_string("1.5", 6) == 1500000

    def test_integer_text(self) -> None:
        assert from_decimal_string("12", 6) == 12000000

    def test_leading_point(self) -> None:
        assert from_decimal_string(".5", 18) == 5 * 10**17

    def test_trailing_point(self) -> None:
        assert from_decimal_string("12.", 6) == 12000000

    def test_surrounding_whitespace(self) -> None:
        assert from_decimal_string("  3.25 ", 6) == 3250000

    def test_full_precision(self) -> None:
        assert from_decimal_string("0.000000000000000001", 18) == 1

    @pytest.mark.parametrize("text", ["1.5000000", "0.0000000", "1.500000000"])
    def test_zeros_past_scale_rejected(self, text: str) -> None:
        with pytest.raises(InvalidAmountError):
            from_decimal_string(text, 6)

    def test_zeros_up_to_scale_accepted(self) -> None:
        assert from_decimal_string("1.500000", 6) == 1500000

    def test_excess_fraction_digits_rejected(self) -> None:
        """Never truncate: 1.0000001 USDT cannot be sent."""
        with pytest.raises(InvalidAmountError):
            from_decimal_string("1.0000001", 6)

    @pytest.mark.parametrize("text", ["1e5", "1E-7", "2.5e+3"])
    def test_scientific_notation_rejected(self, text: str) -> None:
        with pytest.raises(InvalidAmountError):
            from_decimal_string(text, 18)

    @pytest.mark.parametrize("text", ["", " ", ".", "abc", "1,000", "+1", "1.2.3", "0x10"])
    def test_malformed_rejected(self, text: str) -> None:
        with pytest.raises(InvalidAmountError):
            from_decimal_string(text, 18)

    def test_negative_rejected(self) -> None:
        with pytest.raises(InvalidAmountError):
            from_decimal_string("-1", 18)

    def test_non_text_rejected(self) -> None:
        with pytest.raises(InvalidAmountError):
            from_decimal_string(1.5, 6)  # type: ignore[arg-type]

    def test_bad_scale_is_programmer_error(self) -> None:
        with pytest.raises(ValueError):
            from_decimal_string("1", -1)


class TestRoundTrip:
    """from_decimal_string(to_decimal_string(m, s), s) == m."""

    @pytest.mark.parametrize(
        ("magnitude", "scale"),
        [
            (0, 0),
            (0, 18),
            (1, 18),
            (1500000, 6),
            (250000000000, 8),
            (2**53 + 1, 18),
            (2**255 - 1, 18),
            (987654321, 0),
        ],
    )
    def test_exact_round_trip(self, magnitude: int, scale: int) -> None:
        assert from_decimal_string(to_decimal_string(magnitude, scale), scale) == magnitude


class TestFormatTrimmed:
    """Display-only rounding and trimming."""

    def test_rounds_to_max_digits(self) -> None:
        assert format_trimmed("1.23456789", 4) == "1.2346"

    def test_rounds_half_up(self) -> None:
        assert format_trimmed("1.23445", 4) == "1.2345"

    def test_trims_trailing_zeros(self) -> None:
        assert format_trimmed("1.50000", 6) == "1.5"

    def test_drops_dangling_point(self) -> None:
        assert format_trimmed("2.000", 2) == "2"

    def test_tiny_value_rounds_to_zero(self) -> None:
        assert format_trimmed("0.00001", 4) == "0"

    def test_exponent_input_normalized(self) -> None:
        """Display helper normalizes exponent notation instead of printing it."""
        assert format_trimmed("1e3", 2) == "1000"

    def test_invalid_rejected(self) -> None:
        with pytest.raises(InvalidAmountError):
            format_trimmed("abc", 2)

    def test_value_too_large_for_context_rejected(self) -> None:
        with pytest.raises(InvalidAmountError):
            format_trimmed("1e100", 2)


class TestDecimalBridge:
    """to_decimal / from_decimal used by the conversion engine."""

    def test_to_decimal_is_exact(self) -> None:
        amount = FixedPointAmount(magnitude=2**64 + 7, scale=18)
        assert to_decimal(amount) == Decimal("18.446744073709551623")

    def test_from_decimal_exact(self) -> None:
        assert from_decimal(Decimal("0.0020200"), 18) == (2020000000000000, False)

    def test_from_decimal_rounds_half_up(self) -> None:
        assert from_decimal(Decimal("1.2345675"), 6) == (1234568, True)

    def test_from_decimal_custom_rounding(self) -> None:
        assert from_decimal(Decimal("1.2345679"), 6, ROUND_DOWN) == (1234567, True)

    def test_from_decimal_exponent_form(self) -> None:
        """A Decimal carrying a positive exponent still parses."""
        assert from_decimal(Decimal("1E+3"), 6) == (1000000000, False)

    def test_from_decimal_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            from_decimal(Decimal("-1"), 6)

    def test_from_decimal_too_large_for_context_rejected(self) -> None:
        with pytest.raises(ValueError):
            from_decimal(Decimal("1E+70"), 18)

    def test_to_fixed_point_wraps_result(self) -> None:
        amount, lossy = to_fixed_point(Decimal("5"), 6)
        assert amount == FixedPointAmount(magnitude=5000000, scale=6)
        assert lossy is False


class TestFixedPointAmount:
    """Model invariants."""

    def test_negative_magnitude_rejected(self) -> None:
        with pytest.raises(ValueError):
            FixedPointAmount(magnitude=-1, scale=6)

    def test_scale_above_max_rejected(self) -> None:
        with pytest.raises(ValueError):
            FixedPointAmount(magnitude=1, scale=19)

    def test_float_magnitude_rejected(self) -> None:
        with pytest.raises(ValueError):
            FixedPointAmount(magnitude=1.0, scale=6)  # type: ignore[arg-type]

    def test_zero(self) -> None:
        assert FixedPointAmount.zero(6).is_zero
