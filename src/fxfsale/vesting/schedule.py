"""Vesting schedule calculations.

Everything here is a pure function of its arguments. Callers recompute on
every tick instead of keeping a mutable clock, so a countdown can never show
state left over from an earlier purchase or render.

Times are Unix seconds; durations are whole seconds.
"""

from decimal import Decimal

from fxfsale.exceptions import VestingMisconfiguredError
from fxfsale.models import (
    CountdownParts,
    FixedPointAmount,
    VestingClock,
    VestingPhase,
    VestingPurchase,
)

SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60


def _check_duration(duration: int) -> None:
    if duration <= 0:
        raise VestingMisconfiguredError(
            f"vesting duration must be positive, got {duration}"
        )


def compute_clock(now: int, start_time: int, duration: int) -> VestingClock:
    """Derive the vesting phase and remaining seconds.

    - now < start_time: NOT_STARTED, remaining until start
    - start_time <= now < start_time + duration: VESTING, remaining until end
    - now >= start_time + duration: COMPLETE, remaining 0

    The end boundary is inclusive: at exactly ``start_time + duration`` the
    schedule is COMPLETE.

    Raises:
        VestingMisconfiguredError: ``duration`` is zero or negative.
    """
    _check_duration(duration)

    end_time = start_time + duration
    if now < start_time:
        return VestingClock(phase=VestingPhase.NOT_STARTED, remaining=start_time - now)
    if now < end_time:
        return VestingClock(phase=VestingPhase.VESTING, remaining=end_time - now)
    return VestingClock(phase=VestingPhase.COMPLETE, remaining=0)


def decompose_remaining(seconds: int) -> CountdownParts:
    """Split seconds into days, hours (<24), minutes (<60) and seconds (<60)."""
    if seconds < 0:
        raise ValueError(f"seconds must be non-negative, got {seconds}")
    days, rest = divmod(seconds, SECONDS_PER_DAY)
    hours, rest = divmod(rest, SECONDS_PER_HOUR)
    minutes, secs = divmod(rest, SECONDS_PER_MINUTE)
    return CountdownParts(days=days, hours=hours, minutes=minutes, seconds=secs)


def releasable_amount(purchase: VestingPurchase) -> FixedPointAmount:
    """FXF that can be released now: ``max(0, vested - released)``.

    Clamps at zero so a stale or malformed read where released exceeds vested
    never produces a negative amount.
    """
    releasable = max(0, purchase.vested_amount - purchase.released_amount)
    return FixedPointAmount(magnitude=releasable, scale=purchase.scale)


def vesting_progress(now: int, start_time: int, duration: int) -> Decimal:
    """Fraction of the vesting period elapsed, clamped to [0, 1].

    Quantized to 4 decimal places for progress bars.
    """
    _check_duration(duration)
    elapsed = min(max(now - start_time, 0), duration)
    return (Decimal(elapsed) / Decimal(duration)).quantize(Decimal("0.0001"))
