"""Chain boundary: read capabilities and typed decoding of contract output."""

from fxfsale.chain.contract import SaleContractReader
from fxfsale.chain.decode import (
    decode_price,
    decode_raffle_ids,
    decode_vesting_duration,
    decode_vesting_purchases,
)
from fxfsale.chain.readers import ContractCaller, PriceReader, VestingReader

__all__ = [
    "ContractCaller",
    "PriceReader",
    "SaleContractReader",
    "VestingReader",
    "decode_price",
    "decode_raffle_ids",
    "decode_vesting_duration",
    "decode_vesting_purchases",
]
