"""Sale orchestration and display formatting consumed by the UI."""

from fxfsale.sale.formatting import (
    format_balance,
    format_countdown,
    format_gas_price,
    format_payment_amount,
    format_token_amount,
    format_token_price,
)
from fxfsale.sale.service import SaleService

__all__ = [
    "SaleService",
    "format_balance",
    "format_countdown",
    "format_gas_price",
    "format_payment_amount",
    "format_token_amount",
    "format_token_price",
]
