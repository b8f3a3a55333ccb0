"""Sale contract reader built on a ContractCaller.

Maps the sale contract's view functions onto the PriceReader and
VestingReader capabilities and decodes every result through
fxfsale.chain.decode before it reaches the core.
"""

from fxfsale.chain.decode import (
    decode_price,
    decode_raffle_ids,
    decode_vesting_duration,
    decode_vesting_purchases,
)
from fxfsale.chain.readers import ContractCaller, PriceReader, VestingReader
from fxfsale.logging import get_logger
from fxfsale.models import (
    GAS_PRICE_DECIMALS,
    TOKEN_PRICE_DECIMALS,
    FixedPointAmount,
    VestingPurchase,
)

logger = get_logger(__name__)


class SaleContractReader(PriceReader, VestingReader):
    """PriceReader and VestingReader over the FXF sale contract.

    A failed price read degrades to None (price unavailable) because prices
    are re-read on the next request anyway. Vesting reads propagate errors.

    Args:
        caller: Raw contract read access.
    """

    TOKEN_PRICE_FN = "getFxfPrice"
    GAS_PRICE_FN = "getLatestETHPrice"
    VESTING_DURATION_FN = "VESTING_DURATION"
    VESTING_PURCHASES_FN = "getVestingPurchases"
    USER_RAFFLES_FN = "getUserRaffles"

    def __init__(self, caller: ContractCaller) -> None:
        self._caller = caller

    async def get_token_price_usd(self) -> FixedPointAmount | None:
        return await self._read_price(self.TOKEN_PRICE_FN, TOKEN_PRICE_DECIMALS)

    async def get_gas_price_usd(self) -> FixedPointAmount | None:
        return await self._read_price(self.GAS_PRICE_FN, GAS_PRICE_DECIMALS)

    async def get_purchases(self, account: str, raffle_id: int) -> list[VestingPurchase]:
        raw = await self._caller.read(self.VESTING_PURCHASES_FN, (account, raffle_id))
        return decode_vesting_purchases(raw)

    async def get_vesting_duration(self) -> int:
        raw = await self._caller.read(self.VESTING_DURATION_FN)
        return decode_vesting_duration(raw)

    async def get_user_raffles(self, account: str) -> list[int]:
        raw = await self._caller.read(self.USER_RAFFLES_FN, (account,))
        return decode_raffle_ids(raw)

    async def _read_price(self, function_name: str, scale: int) -> FixedPointAmount | None:
        try:
            raw = await self._caller.read(function_name)
        except Exception:
            logger.warning("price_read_failed", function=function_name, exc_info=True)
            return None
        return decode_price(raw, scale)
