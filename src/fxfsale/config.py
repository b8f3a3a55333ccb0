"""Configuration system using pydantic-settings with environment variable loading."""

from decimal import Decimal
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

#: Address the sale contract uses to mean "paid in the native currency".
NATIVE_TOKEN_SENTINEL = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"

RoundingMode = Literal[
    "ROUND_HALF_UP",
    "ROUND_HALF_EVEN",
    "ROUND_HALF_DOWN",
    "ROUND_UP",
    "ROUND_DOWN",
    "ROUND_CEILING",
    "ROUND_FLOOR",
]


class TokenSettings(BaseSettings):
    """On-chain addresses used when building approval and purchase arguments."""

    model_config = SettingsConfigDict(env_prefix="TOKEN_")

    sale_contract_address: str = ""
    usdt_address: str = ""
    usdc_address: str = ""
    native_address: str = NATIVE_TOKEN_SENTINEL


class PricingSettings(BaseSettings):
    """Price conversion parameters.

    native_buffer is added to every token->ETH quote so a price feed that moves
    between quoting and submission does not underfund the transaction.
    All fields configurable via PRICING_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="PRICING_")

    native_buffer: Decimal = Decimal("0.01")  # +1%
    strict_precision: bool = False  # raise instead of rounding lossy results
    rounding: RoundingMode = "ROUND_HALF_UP"


class VestingSettings(BaseSettings):
    """Vesting countdown configuration."""

    model_config = SettingsConfigDict(env_prefix="VESTING_")

    tick_interval: float = 1.0  # seconds between countdown refreshes


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"
    token: TokenSettings = TokenSettings()
    pricing: PricingSettings = PricingSettings()
    vesting: VestingSettings = VestingSettings()
