"""Custom exceptions for the FXF sale core.

Expected runtime states (a price still loading, a finished vesting schedule,
nothing to release) are returned as typed results and never raised. The
exceptions here cover input that must be rejected and misconfiguration.
"""


class SaleError(Exception):
    """Base exception for all sale core errors."""


class InvalidAmountError(SaleError):
    """Raised when decimal text is malformed, negative, or too precise for its scale."""


class PrecisionLossError(SaleError):
    """Raised in strict precision mode when a result does not fit the target scale."""


class VestingMisconfiguredError(SaleError):
    """Raised when the vesting duration is zero or negative."""


class PriceUnavailableError(SaleError):
    """Raised when a transaction is requested from a quote without a price."""


class ContractDataError(SaleError):
    """Raised when raw contract output does not have the expected shape."""
