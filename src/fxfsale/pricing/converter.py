"""Conversion between FXF amounts and payment amounts.

All calculations use Decimal arithmetic in a 78-digit context. Integer
magnitudes are turned into exact Decimals first, because the legs have
different scales (FXF 18, stablecoins 6, ETH/USD feed 8), and the result is
quantized back to the target scale once at the end.

Price conventions:
  - token_price_usd: USD per 1 FXF (scale 18), read from the sale contract
  - gas_price_usd: USD per 1 ETH (scale 8), Chainlink ETH/USD
  - USDT/USDC are treated as exactly 1 USD

A missing or zero price leg is a normal state while feeds load. It yields a
PRICE_UNAVAILABLE result, never an exception and never a division by zero.
"""

from decimal import Decimal, localcontext

from fxfsale.config import PricingSettings
from fxfsale.exceptions import PrecisionLossError
from fxfsale.fixed_point import AMOUNT_CONTEXT, to_decimal, to_fixed_point
from fxfsale.logging import get_logger
from fxfsale.models import (
    TOKEN_DECIMALS,
    ConversionDirection,
    ConversionRequest,
    ConversionResult,
    FixedPointAmount,
    PaymentMethod,
    PriceQuote,
    QuoteStatus,
)

logger = get_logger(__name__)


def _require_scale(amount: FixedPointAmount, scale: int, name: str) -> None:
    if amount.scale != scale:
        raise ValueError(f"{name} must have scale {scale}, got {amount.scale}")


def _usable(price: FixedPointAmount | None) -> bool:
    return price is not None and not price.is_zero


class PriceConverter:
    """Converts FXF <-> payment amounts for a given PaymentMethod and PriceQuote.

    Token -> ETH quotes carry a buffer (PricingSettings.native_buffer, +1% by
    default) so the attached value still covers the purchase if the ETH price
    moves before the transaction is mined. The buffer is one-directional: it
    is never applied when back-computing FXF from a given spend.

    Args:
        settings: Pricing settings (buffer, rounding mode, strict precision).
    """

    def __init__(self, settings: PricingSettings) -> None:
        if settings.native_buffer < 0:
            raise ValueError(f"native_buffer must be >= 0, got {settings.native_buffer}")
        self._settings = settings

    @property
    def native_buffer(self) -> Decimal:
        return self._settings.native_buffer

    def convert(self, request: ConversionRequest, quote: PriceQuote) -> ConversionResult:
        """Dispatch a ConversionRequest on its direction."""
        if request.direction == ConversionDirection.TOKEN_TO_PAYMENT:
            return self.quote_token_to_payment(request.amount, quote, request.method)
        return self.quote_payment_to_token(request.amount, quote, request.method)

    def quote_token_to_payment(
        self,
        token_amount: FixedPointAmount,
        quote: PriceQuote,
        method: PaymentMethod,
    ) -> ConversionResult:
        """How much of ``method`` buys ``token_amount`` FXF.

        Formula:
            stablecoin: token * token_price
            ETH:        token * token_price / eth_price * (1 + native_buffer)

        Args:
            token_amount: FXF amount at scale 18.
            quote: Current price snapshot.
            method: Payment currency.

        Returns:
            ConversionResult at ``method.decimals``, or PRICE_UNAVAILABLE.
        """
        return self._token_to_payment(token_amount, quote, method, buffered=True)

    def unbuffered_native_amount(
        self,
        token_amount: FixedPointAmount,
        quote: PriceQuote,
    ) -> ConversionResult:
        """ETH cost of ``token_amount`` at the quoted price, without the buffer."""
        return self._token_to_payment(
            token_amount, quote, PaymentMethod.NATIVE, buffered=False
        )

    def quote_payment_to_token(
        self,
        payment_amount: FixedPointAmount,
        quote: PriceQuote,
        method: PaymentMethod,
    ) -> ConversionResult:
        """How much FXF ``payment_amount`` of ``method`` buys. Never buffered.

        Formula:
            stablecoin: payment / token_price
            ETH:        payment * eth_price / token_price

        Returns:
            ConversionResult with an FXF amount at scale 18, or PRICE_UNAVAILABLE.
        """
        _require_scale(payment_amount, method.decimals, "payment_amount")

        missing = self._missing_legs(quote, method)
        if missing:
            return self._unavailable(method, missing)

        with localcontext(AMOUNT_CONTEXT):
            usd = to_decimal(payment_amount)
            if method == PaymentMethod.NATIVE:
                usd = usd * to_decimal(quote.gas_price_usd)  # type: ignore[arg-type]
            tokens = usd / to_decimal(quote.token_price_usd)  # type: ignore[arg-type]

        return self._finish(tokens, TOKEN_DECIMALS, method)

    def _token_to_payment(
        self,
        token_amount: FixedPointAmount,
        quote: PriceQuote,
        method: PaymentMethod,
        buffered: bool,
    ) -> ConversionResult:
        _require_scale(token_amount, TOKEN_DECIMALS, "token_amount")

        missing = self._missing_legs(quote, method)
        if missing:
            return self._unavailable(method, missing)

        with localcontext(AMOUNT_CONTEXT):
            usd = to_decimal(token_amount) * to_decimal(quote.token_price_usd)  # type: ignore[arg-type]
            if method.is_stable:
                payment = usd
            else:
                payment = usd / to_decimal(quote.gas_price_usd)  # type: ignore[arg-type]
                if buffered:
                    payment = payment * (Decimal("1") + self._settings.native_buffer)

        return self._finish(payment, method.decimals, method)

    def _missing_legs(self, quote: PriceQuote, method: PaymentMethod) -> list[str]:
        missing = []
        if not _usable(quote.token_price_usd):
            missing.append("token_price_usd")
        if method == PaymentMethod.NATIVE and not _usable(quote.gas_price_usd):
            missing.append("gas_price_usd")
        return missing

    def _unavailable(self, method: PaymentMethod, missing: list[str]) -> ConversionResult:
        logger.debug("price_unavailable", method=method.value, missing=missing)
        return ConversionResult.unavailable(method)

    def _finish(self, value: Decimal, scale: int, method: PaymentMethod) -> ConversionResult:
        amount, precision_loss = to_fixed_point(value, scale, self._settings.rounding)

        if precision_loss and self._settings.strict_precision:
            raise PrecisionLossError(
                f"{value} does not fit {scale} decimal places"
            )

        return ConversionResult(
            status=QuoteStatus.OK,
            method=method,
            amount=amount,
            precision_loss=precision_loss,
        )
