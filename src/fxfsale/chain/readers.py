"""Abstract read capabilities consumed by the sale core.

The pricing and vesting code depends only on these interfaces. How values get
off the chain (RPC endpoint, ABI, retries) stays in the implementations.
"""

from abc import ABC, abstractmethod
from typing import Any

from fxfsale.models import FixedPointAmount, VestingPurchase


class ContractCaller(ABC):
    """Low-level read access to the sale contract."""

    @abstractmethod
    async def read(self, function_name: str, args: tuple[Any, ...] = ()) -> Any:
        """Call a view function and return its raw decoded output."""
        ...


class PriceReader(ABC):
    """Source of the two price legs. None means the leg is not available yet."""

    @abstractmethod
    async def get_token_price_usd(self) -> FixedPointAmount | None:
        """USD per FXF at scale 18."""
        ...

    @abstractmethod
    async def get_gas_price_usd(self) -> FixedPointAmount | None:
        """USD per ETH at scale 8."""
        ...


class VestingReader(ABC):
    """Source of vesting records and the contract's vesting duration."""

    @abstractmethod
    async def get_purchases(self, account: str, raffle_id: int) -> list[VestingPurchase]:
        """Return the account's vesting purchases for one raffle."""
        ...

    @abstractmethod
    async def get_vesting_duration(self) -> int:
        """Return the vesting duration in seconds."""
        ...

    @abstractmethod
    async def get_user_raffles(self, account: str) -> list[int]:
        """Return the ids of raffles the account has purchases in."""
        ...
