"""Typed decoding of raw sale contract output.

Multi-value contract reads arrive as loosely typed tuples. They are validated
here once, in the contract's return order, and turned into the typed records
the pricing and vesting code consumes. Nothing untyped crosses this module.
"""

from collections.abc import Sequence
from typing import Any

from fxfsale.exceptions import ContractDataError
from fxfsale.logging import get_logger
from fxfsale.models import TOKEN_DECIMALS, FixedPointAmount, VestingPurchase

logger = get_logger(__name__)

#: Field order of ``getVestingPurchases``.
VESTING_FIELDS = ("amounts", "released_amounts", "start_times", "vested_amounts")


def _as_uint(raw: Any, name: str) -> int:
    """Accept a non-negative int or a string of digits."""
    if isinstance(raw, bool):
        raise ContractDataError(f"{name}: expected integer, got bool")
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    if not isinstance(raw, int):
        raise ContractDataError(f"{name}: expected integer, got {type(raw).__name__}")
    if raw < 0:
        raise ContractDataError(f"{name}: expected non-negative integer, got {raw}")
    return raw


def decode_price(raw: Any, scale: int) -> FixedPointAmount | None:
    """Decode a price feed value. None (not loaded) stays None."""
    if raw is None:
        return None
    return FixedPointAmount(magnitude=_as_uint(raw, "price"), scale=scale)


def decode_vesting_duration(raw: Any) -> int:
    """Decode ``VESTING_DURATION`` to seconds.

    Zero is passed through; the vesting calculator reports it as a
    misconfiguration rather than treating it as complete.
    """
    if raw is None:
        raise ContractDataError("vesting duration missing")
    return _as_uint(raw, "vesting_duration")


def decode_raffle_ids(raw: Any) -> list[int]:
    """Decode ``getUserRaffles`` to a list of raffle ids."""
    if raw is None:
        return []
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise ContractDataError(f"raffle ids: expected a sequence, got {type(raw).__name__}")
    return [_as_uint(item, f"raffle_ids[{i}]") for i, item in enumerate(raw)]


def decode_vesting_purchases(raw: Any, scale: int = TOKEN_DECIMALS) -> list[VestingPurchase]:
    """Decode ``getVestingPurchases`` into VestingPurchase records.

    The contract returns four parallel arrays:
    ``(amounts, released_amounts, start_times, vested_amounts)``.

    Rows with a zero purchase amount are placeholders and are dropped.
    Rows violating ``released <= vested <= total`` are clamped into range and
    logged, because a stale read must not produce a negative releasable amount.

    Raises:
        ContractDataError: Wrong arity, mismatched array lengths, or
            non-integer entries.
    """
    if raw is None:
        return []
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence) or len(raw) != 4:
        raise ContractDataError(
            f"vesting purchases: expected {len(VESTING_FIELDS)} arrays"
        )

    columns: list[list[int]] = []
    for name, column in zip(VESTING_FIELDS, raw):
        if isinstance(column, (str, bytes)) or not isinstance(column, Sequence):
            raise ContractDataError(f"{name}: expected a sequence")
        columns.append([_as_uint(value, f"{name}[{i}]") for i, value in enumerate(column)])

    lengths = {len(column) for column in columns}
    if len(lengths) != 1:
        raise ContractDataError(
            f"vesting purchases: array lengths differ {[len(c) for c in columns]}"
        )

    purchases = []
    for index, (amount, released, start_time, vested) in enumerate(zip(*columns)):
        if amount == 0:
            continue

        clamped_vested = min(vested, amount)
        clamped_released = min(released, clamped_vested)
        if (clamped_vested, clamped_released) != (vested, released):
            logger.warning(
                "vesting_purchase_clamped",
                index=index,
                amount=str(amount),
                vested=str(vested),
                released=str(released),
            )

        purchases.append(
            VestingPurchase(
                total_amount=amount,
                released_amount=clamped_released,
                vested_amount=clamped_vested,
                start_time=start_time,
                scale=scale,
            )
        )

    return purchases
