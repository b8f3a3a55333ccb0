"""Shared data models for the FXF sale core.

CRITICAL: All on-chain quantities are integer magnitudes with an explicit decimal
scale. Never use float for prices, token amounts, or payment amounts.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

#: Highest decimal scale in this domain (FXF and ETH use 18).
MAX_SCALE = 18

#: FXF token precision.
TOKEN_DECIMALS = 18

#: Price feed precisions: the sale contract quotes FXF in USD with 18 decimals,
#: the Chainlink ETH/USD feed uses 8.
TOKEN_PRICE_DECIMALS = 18
GAS_PRICE_DECIMALS = 8


@dataclass(frozen=True)
class FixedPointAmount:
    """An exact on-chain quantity: ``magnitude / 10**scale``."""

    magnitude: int
    scale: int

    def __post_init__(self) -> None:
        if isinstance(self.magnitude, bool) or not isinstance(self.magnitude, int):
            raise ValueError(f"magnitude must be an int, got {self.magnitude!r}")
        if isinstance(self.scale, bool) or not isinstance(self.scale, int):
            raise ValueError(f"scale must be an int, got {self.scale!r}")
        if self.magnitude < 0:
            raise ValueError(f"magnitude must be non-negative, got {self.magnitude}")
        if not 0 <= self.scale <= MAX_SCALE:
            raise ValueError(f"scale must be in 0..{MAX_SCALE}, got {self.scale}")

    @classmethod
    def zero(cls, scale: int) -> "FixedPointAmount":
        return cls(magnitude=0, scale=scale)

    @property
    def is_zero(self) -> bool:
        return self.magnitude == 0


class PaymentMethod(str, Enum):
    """Currencies the sale contract accepts.

    NATIVE is paid as transaction value and needs no allowance. The two
    USD-pegged stablecoins are ERC-20 transfers and always need one.
    """

    NATIVE = "ETH"
    STABLE_A = "USDT"
    STABLE_B = "USDC"

    @property
    def decimals(self) -> int:
        return _PAYMENT_DECIMALS[self]

    @property
    def requires_approval(self) -> bool:
        return self is not PaymentMethod.NATIVE

    @property
    def is_stable(self) -> bool:
        return self is not PaymentMethod.NATIVE


_PAYMENT_DECIMALS = {
    PaymentMethod.NATIVE: 18,
    PaymentMethod.STABLE_A: 6,
    PaymentMethod.STABLE_B: 6,
}


@dataclass(frozen=True)
class PriceQuote:
    """Snapshot of both price feeds. A leg that has not loaded yet is None."""

    token_price_usd: FixedPointAmount | None = None  # scale 18
    gas_price_usd: FixedPointAmount | None = None  # scale 8


class ConversionDirection(str, Enum):
    """Which side of a purchase the user typed."""

    TOKEN_TO_PAYMENT = "token_to_payment"
    PAYMENT_TO_TOKEN = "payment_to_token"


class QuoteStatus(str, Enum):
    """Outcome of a conversion."""

    OK = "ok"
    PRICE_UNAVAILABLE = "price_unavailable"


@dataclass(frozen=True)
class ConversionRequest:
    """A single conversion to perform against a PriceQuote."""

    amount: FixedPointAmount
    direction: ConversionDirection
    method: PaymentMethod


@dataclass(frozen=True)
class ConversionResult:
    """Result of a conversion.

    ``amount`` is None exactly when ``status`` is PRICE_UNAVAILABLE.
    ``precision_loss`` is True when the exact result had more fractional
    digits than the target scale and was rounded.
    """

    status: QuoteStatus
    method: PaymentMethod
    amount: FixedPointAmount | None = None
    precision_loss: bool = False

    @classmethod
    def unavailable(cls, method: PaymentMethod) -> "ConversionResult":
        return cls(status=QuoteStatus.PRICE_UNAVAILABLE, method=method)

    @property
    def is_available(self) -> bool:
        return self.status == QuoteStatus.OK


@dataclass(frozen=True)
class PurchaseOrder:
    """Arguments for the sale contract's ``buy`` write.

    ``value`` is the native amount attached to the transaction; it equals
    ``amount`` for ETH purchases and is zero for stablecoin purchases.
    """

    payment_token: str
    amount: int
    value: int = 0
    for_raffle: bool = False
    raffle_id: int = 0


@dataclass(frozen=True)
class ApprovalOrder:
    """Arguments for an ERC-20 ``approve(spender, amount)`` write.

    Sent to ``token`` before a stablecoin purchase so the sale contract
    (``spender``) can pull ``amount``.
    """

    token: str
    spender: str
    amount: int


@dataclass(frozen=True)
class VestingPurchase:
    """One vesting record as stored by the sale contract.

    Amounts are FXF magnitudes at ``scale``. Decoding enforces
    0 <= released_amount <= vested_amount <= total_amount.
    """

    total_amount: int
    released_amount: int
    vested_amount: int
    start_time: int  # Unix seconds
    scale: int = TOKEN_DECIMALS


class VestingPhase(str, Enum):
    """Where a purchase is in its vesting schedule. Only moves forward."""

    NOT_STARTED = "not_started"
    VESTING = "vesting"
    COMPLETE = "complete"


@dataclass(frozen=True)
class CountdownParts:
    """Remaining seconds split into whole days, hours, minutes and seconds."""

    days: int
    hours: int
    minutes: int
    seconds: int


@dataclass(frozen=True)
class VestingClock:
    """Vesting state derived from (now, start_time, duration). Never stored."""

    phase: VestingPhase
    remaining: int  # seconds

    @property
    def is_complete(self) -> bool:
        return self.phase == VestingPhase.COMPLETE


@dataclass(frozen=True)
class PurchaseView:
    """Display-ready state of one vesting purchase."""

    purchase: VestingPurchase
    clock: VestingClock
    releasable: FixedPointAmount
    progress: Decimal


@dataclass
class VestingOverview:
    """All vesting purchases of one account in one raffle, with totals."""

    account: str
    raffle_id: int
    duration: int  # seconds
    purchases: list[PurchaseView] = field(default_factory=list)
    total_purchased: FixedPointAmount = FixedPointAmount.zero(TOKEN_DECIMALS)
    total_released: FixedPointAmount = FixedPointAmount.zero(TOKEN_DECIMALS)
    total_releasable: FixedPointAmount = FixedPointAmount.zero(TOKEN_DECIMALS)

    @property
    def has_releasable(self) -> bool:
        return not self.total_releasable.is_zero
