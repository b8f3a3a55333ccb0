"""Shared test fixtures for the FXF sale core."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from fxfsale.chain.readers import PriceReader, VestingReader
from fxfsale.config import AppSettings, PricingSettings, TokenSettings
from fxfsale.models import FixedPointAmount, PriceQuote
from fxfsale.pricing.converter import PriceConverter

USDT_ADDRESS = "0xdAC17F958D2ee523a2206206994597C13D831ec7"
USDC_ADDRESS = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"

# $0.0500 per FXF (scale 18) and $2500.00 per ETH (scale 8)
TOKEN_PRICE = FixedPointAmount(magnitude=50000000000000000, scale=18)
GAS_PRICE = FixedPointAmount(magnitude=250000000000, scale=8)


@pytest.fixture
def pricing_settings() -> PricingSettings:
    """Default pricing settings: +1% ETH buffer, half-up rounding."""
    return PricingSettings()


@pytest.fixture
def converter(pricing_settings: PricingSettings) -> PriceConverter:
    """PriceConverter with default settings."""
    return PriceConverter(pricing_settings)


@pytest.fixture
def quote() -> PriceQuote:
    """Both legs loaded: FXF $0.05, ETH $2500."""
    return PriceQuote(token_price_usd=TOKEN_PRICE, gas_price_usd=GAS_PRICE)


@pytest.fixture
def app_settings() -> AppSettings:
    """AppSettings with test token addresses."""
    return AppSettings(
        log_level="DEBUG",
        token=TokenSettings(
            sale_contract_address="0x5a1e000000000000000000000000000000000001",
            usdt_address=USDT_ADDRESS,
            usdc_address=USDC_ADDRESS,
        ),
        pricing=PricingSettings(native_buffer=Decimal("0.01")),
    )


@pytest.fixture
def price_reader() -> AsyncMock:
    """PriceReader returning the standard quote legs."""
    reader = AsyncMock(spec=PriceReader)
    reader.get_token_price_usd.return_value = TOKEN_PRICE
    reader.get_gas_price_usd.return_value = GAS_PRICE
    return reader


@pytest.fixture
def vesting_reader() -> AsyncMock:
    """VestingReader with a 180-day duration and no purchases."""
    reader = AsyncMock(spec=VestingReader)
    reader.get_vesting_duration.return_value = 180 * 86400
    reader.get_purchases.return_value = []
    reader.get_user_raffles.return_value = []
    return reader
