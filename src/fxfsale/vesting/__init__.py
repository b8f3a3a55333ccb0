"""Vesting schedule calculator and countdown driver."""

from fxfsale.vesting.schedule import (
    compute_clock,
    decompose_remaining,
    releasable_amount,
    vesting_progress,
)
from fxfsale.vesting.ticker import CountdownTicker

__all__ = [
    "CountdownTicker",
    "compute_clock",
    "decompose_remaining",
    "releasable_amount",
    "vesting_progress",
]
