"""Price conversion between FXF, USD stablecoins and ETH."""

from fxfsale.pricing.converter import PriceConverter

__all__ = ["PriceConverter"]
