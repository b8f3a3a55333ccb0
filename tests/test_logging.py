"""Tests for structlog setup and processors."""

import logging
from decimal import Decimal

import structlog

from fxfsale.logging import account_context, render_amounts, setup_logging
from fxfsale.models import FixedPointAmount


class TestRenderAmounts:
    """Amounts become exact strings before rendering."""

    def test_fixed_point_amount(self) -> None:
        event = {"amount": FixedPointAmount(magnitude=2020000000000000, scale=18)}
        assert render_amounts(None, "info", event) == {"amount": "0.002020000000000000"}

    def test_decimal_without_exponent(self) -> None:
        event = {"buffer": Decimal("1E-2")}
        assert render_amounts(None, "info", event) == {"buffer": "0.01"}

    def test_other_values_untouched(self) -> None:
        event = {"event": "quote_computed", "precision_loss": False}
        assert render_amounts(None, "info", dict(event)) == event


class TestSetupLogging:
    """Root logger wiring."""

    def test_sets_level_and_single_handler(self) -> None:
        setup_logging("DEBUG", log_format="json")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging("CHATTY", log_format="console")
        assert logging.getLogger().level == logging.INFO


class TestAccountContext:
    """Context binding for per-account requests."""

    def test_binds_and_clears(self) -> None:
        with account_context("0xabc", raffle_id=2):
            assert structlog.contextvars.get_contextvars() == {
                "account": "0xabc",
                "raffle_id": 2,
            }
        assert "account" not in structlog.contextvars.get_contextvars()

    def test_raffle_optional(self) -> None:
        with account_context("0xabc"):
            assert "raffle_id" not in structlog.contextvars.get_contextvars()
