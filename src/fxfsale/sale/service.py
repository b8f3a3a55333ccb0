"""Sale orchestration: the thin layer a UI calls.

Reads a fresh price quote or vesting snapshot for every request and hands it
to the pure pricing and vesting functions. Nothing is cached between calls,
so a quote computed against a superseded price is simply replaced by the next
call (last value wins).
"""

import asyncio
from collections.abc import Callable

from fxfsale.chain.readers import PriceReader, VestingReader
from fxfsale.config import AppSettings
from fxfsale.exceptions import (
    ContractDataError,
    InvalidAmountError,
    PriceUnavailableError,
    VestingMisconfiguredError,
)
from fxfsale.fixed_point import from_decimal_string
from fxfsale.logging import account_context, get_logger
from fxfsale.models import (
    TOKEN_DECIMALS,
    ApprovalOrder,
    ConversionDirection,
    ConversionRequest,
    ConversionResult,
    FixedPointAmount,
    PaymentMethod,
    PriceQuote,
    PurchaseOrder,
    PurchaseView,
    VestingClock,
    VestingOverview,
    VestingPurchase,
)
from fxfsale.pricing.converter import PriceConverter
from fxfsale.vesting.schedule import compute_clock, releasable_amount, vesting_progress
from fxfsale.vesting.ticker import CountdownTicker

logger = get_logger(__name__)


class SaleService:
    """Entry point for quoting purchases and rendering vesting state.

    Args:
        price_reader: Source of FXF/USD and ETH/USD prices.
        vesting_reader: Source of vesting purchases and duration.
        settings: Application settings (token addresses, pricing).
    """

    def __init__(
        self,
        price_reader: PriceReader,
        vesting_reader: VestingReader,
        settings: AppSettings,
    ) -> None:
        self._price_reader = price_reader
        self._vesting_reader = vesting_reader
        self._settings = settings
        self._converter = PriceConverter(settings.pricing)

    @property
    def converter(self) -> PriceConverter:
        return self._converter

    async def fetch_quote(self) -> PriceQuote:
        """Read both price legs. Either may come back None while loading."""
        token_price, gas_price = await asyncio.gather(
            self._price_reader.get_token_price_usd(),
            self._price_reader.get_gas_price_usd(),
        )
        return PriceQuote(token_price_usd=token_price, gas_price_usd=gas_price)

    async def quote(
        self,
        amount_text: str,
        direction: ConversionDirection,
        method: PaymentMethod,
    ) -> ConversionResult:
        """Convert user-typed text on one side of the buy form to the other side.

        The text is parsed at the scale of the side it was typed on: 18 for
        FXF, ``method.decimals`` for a payment amount.

        Raises:
            InvalidAmountError: ``amount_text`` is not a valid amount. Raised
                before any price is read.
        """
        if direction == ConversionDirection.TOKEN_TO_PAYMENT:
            scale = TOKEN_DECIMALS
        else:
            scale = method.decimals
        amount = FixedPointAmount(
            magnitude=from_decimal_string(amount_text, scale),
            scale=scale,
        )

        quote = await self.fetch_quote()
        result = self._converter.convert(
            ConversionRequest(amount=amount, direction=direction, method=method),
            quote,
        )

        logger.info(
            "quote_computed",
            direction=direction.value,
            method=method.value,
            amount=amount_text.strip(),
            status=result.status.value,
            precision_loss=result.precision_loss,
        )
        return result

    def needs_approval(
        self,
        method: PaymentMethod,
        payment_amount: FixedPointAmount | None,
        allowance: int | None,
    ) -> bool:
        """Whether an ERC-20 approve must precede the purchase.

        Rules:
        1. ETH never needs approval.
        2. No amount (or zero) needs no approval yet.
        3. Unknown allowance (still loading) counts as insufficient.
        4. Otherwise approval is needed when allowance < amount.
        """
        if not method.requires_approval:
            return False
        if payment_amount is None or payment_amount.is_zero:
            return False
        if allowance is None:
            return True
        return allowance < payment_amount.magnitude

    def payment_token_address(self, method: PaymentMethod) -> str:
        """Token address for a payment method: the ``buy`` argument and ``approve`` target."""
        token = self._settings.token
        if method == PaymentMethod.NATIVE:
            return token.native_address
        if method == PaymentMethod.STABLE_A:
            return token.usdt_address
        return token.usdc_address

    def build_purchase_order(
        self,
        result: ConversionResult,
        for_raffle: bool = False,
        raffle_id: int = 0,
    ) -> PurchaseOrder:
        """Turn a payment quote into ``buy`` arguments.

        Raises:
            PriceUnavailableError: The quote has no amount.
        """
        if not result.is_available or result.amount is None:
            raise PriceUnavailableError(
                f"cannot build a {result.method.value} purchase without a price"
            )

        amount = result.amount.magnitude
        value = amount if result.method == PaymentMethod.NATIVE else 0
        return PurchaseOrder(
            payment_token=self.payment_token_address(result.method),
            amount=amount,
            value=value,
            for_raffle=for_raffle,
            raffle_id=raffle_id,
        )

    def build_approval_order(self, result: ConversionResult) -> ApprovalOrder:
        """Turn a stablecoin payment quote into ``approve`` arguments.

        The spender is the sale contract and the amount is exactly the quoted
        payment, so the approval covers one purchase.

        Raises:
            PriceUnavailableError: The quote has no amount.
            ValueError: The quote is in ETH, which needs no approval, or the
                sale contract address is not configured.
        """
        if not result.method.requires_approval:
            raise ValueError(f"{result.method.value} payments need no approval")
        if not result.is_available or result.amount is None:
            raise PriceUnavailableError(
                f"cannot approve a {result.method.value} payment without a price"
            )
        spender = self._settings.token.sale_contract_address
        if not spender:
            raise ValueError("sale contract address is not configured")

        return ApprovalOrder(
            token=self.payment_token_address(result.method),
            spender=spender,
            amount=result.amount.magnitude,
        )

    def raffle_ticket_cost(self, ticket_price: int, quantity: int) -> FixedPointAmount:
        """Total FXF cost of ``quantity`` tickets at ``ticket_price`` (scale 18).

        Raises:
            InvalidAmountError: ``quantity`` is below 1.
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidAmountError(f"ticket quantity must be at least 1, got {quantity!r}")
        return FixedPointAmount(magnitude=ticket_price * quantity, scale=TOKEN_DECIMALS)

    async def quote_raffle_tickets(
        self,
        ticket_price: int,
        quantity: int,
        method: PaymentMethod,
    ) -> ConversionResult:
        """Payment needed for ``quantity`` raffle tickets in ``method``."""
        cost = self.raffle_ticket_cost(ticket_price, quantity)
        quote = await self.fetch_quote()
        return self._converter.quote_token_to_payment(cost, quote, method)

    async def vesting_overview(self, account: str, raffle_id: int, now: int) -> VestingOverview:
        """Per-purchase clocks and releasable amounts for one raffle, with totals.

        Raises:
            VestingMisconfiguredError: The contract reports a non-positive duration.
            ContractDataError: The purchases do not share one token scale.
        """
        with account_context(account, raffle_id):
            duration, purchases = await asyncio.gather(
                self._vesting_reader.get_vesting_duration(),
                self._vesting_reader.get_purchases(account, raffle_id),
            )
            if duration <= 0:
                logger.warning("vesting_misconfigured", duration=duration)
                raise VestingMisconfiguredError(
                    f"vesting duration must be positive, got {duration}"
                )

            scales = {purchase.scale for purchase in purchases}
            if len(scales) > 1:
                raise ContractDataError(f"purchases mix token scales {sorted(scales)}")
            scale = scales.pop() if scales else TOKEN_DECIMALS

            overview = VestingOverview(account=account, raffle_id=raffle_id, duration=duration)
            purchased = released = releasable = 0
            for purchase in purchases:
                view = PurchaseView(
                    purchase=purchase,
                    clock=compute_clock(now, purchase.start_time, duration),
                    releasable=releasable_amount(purchase),
                    progress=vesting_progress(now, purchase.start_time, duration),
                )
                overview.purchases.append(view)
                purchased += purchase.total_amount
                released += purchase.released_amount
                releasable += view.releasable.magnitude

            overview.total_purchased = FixedPointAmount(magnitude=purchased, scale=scale)
            overview.total_released = FixedPointAmount(magnitude=released, scale=scale)
            overview.total_releasable = FixedPointAmount(magnitude=releasable, scale=scale)

            logger.info(
                "vesting_overview_built",
                purchases=len(overview.purchases),
                releasable=overview.total_releasable,
            )
        return overview

    def countdown_ticker(
        self,
        purchase: VestingPurchase,
        duration: int,
        on_tick: Callable[[VestingClock], None],
    ) -> CountdownTicker:
        """Ticker for one purchase at the configured refresh interval. Not started."""
        return CountdownTicker(
            purchase.start_time,
            duration,
            on_tick,
            interval=self._settings.vesting.tick_interval,
        )

    async def vesting_overviews(self, account: str, now: int) -> list[VestingOverview]:
        """Overviews for every raffle the account bought into, skipping empty ones."""
        raffle_ids = await self._vesting_reader.get_user_raffles(account)
        overviews = []
        for raffle_id in raffle_ids:
            overview = await self.vesting_overview(account, raffle_id, now)
            if overview.purchases:
                overviews.append(overview)
        return overviews
