"""
Unit Tests for Uplift Cap Enforcer

Tests verify the value over the cap is moved into monthly arrears.
"""

from datetime import date
from decimal import Decimal

import pytest

from projection_engine.calculators.uplift_cap import UpliftCapEnforcer
from projection_engine.models import Contract, PaymentTerms, ProjectionContext, split


class TestUpliftCapEnforcement:
    """Test uplift cap enforcement on the contract value."""

    @pytest.fixture
    def enforcer(self):
        return UpliftCapEnforcer()

    def test_no_cap_configured_passes_through(self, enforcer):
        """Without a cap the full value stays payable."""
        ctx = self._make_context(rate=5, cap=None)
        result = enforcer.apply(ctx)

        assert not result.cap_applied
        assert result.payable_value == Decimal("12000")
        assert result.arrears_events == []

    def test_rate_equal_to_cap_passes_through(self, enforcer):
        """The cap only bites when the rate is strictly above it."""
        ctx = self._make_context(rate="1.5", cap="1.5")
        result = enforcer.apply(ctx)

        assert not result.cap_applied
        assert result.payable_value == Decimal("12000")

    def test_over_cap_scales_payable_value(self, enforcer):
        """Payable value is value x cap / rate."""
        ctx = self._make_context(rate="3.0", cap="1.5")
        result = enforcer.apply(ctx)

        assert result.cap_applied
        assert result.payable_value == Decimal("6000")
        assert result.arrears_value == Decimal("6000")

    def test_arrears_run_from_start_plus_one_to_end_plus_one(self, enforcer):
        """Arrears months cover CSD+1 through CED+1 inclusive."""
        ctx = self._make_context(rate="3.0", cap="1.5")
        result = enforcer.apply(ctx)

        months = [e.month for e in result.arrears_events]
        assert len(months) == 12
        assert months[0] == date(2025, 2, 1)
        assert months[-1] == date(2026, 1, 1)
        assert all(e.amount == Decimal("500") for e in result.arrears_events)
        assert all(e.payment_type == "arrears" for e in result.arrears_events)

    def test_day_of_month_shortfall_still_reconciles(self, enforcer):
        """When CED's day is before CSD's, every emitted month shares the arrears equally."""
        ctx = self._make_context(rate="3.0", cap="1.5", start="2025-01-15", end="2026-01-14")
        result = enforcer.apply(ctx)

        assert len(result.arrears_events) == 13
        assert all(e.amount == Decimal("6000") / 13 for e in result.arrears_events)
        total = sum(e.amount for e in result.arrears_events)
        assert abs(total - result.arrears_value) < Decimal("1e-6")

    def test_end_before_start_puts_arrears_in_one_month(self, enforcer):
        """A reversed contract still accounts for every penny of arrears."""
        ctx = self._make_context(rate="3.0", cap="1.5", start="2026-01-01", end="2025-01-01")
        result = enforcer.apply(ctx)

        assert len(result.arrears_events) == 1
        assert result.arrears_events[0].month == date(2026, 2, 1)
        assert result.arrears_events[0].amount == Decimal("6000")

    def _make_context(self, rate, cap, start="2025-01-01", end="2025-12-31") -> ProjectionContext:
        contract = Contract(
            lock_in_date=date(2024, 11, 1),
            contract_start_date=date.fromisoformat(start),
            contract_end_date=date.fromisoformat(end),
            contract_value=Decimal("12000"),
            uplift_rate=Decimal(str(rate)),
        )
        terms = PaymentTerms(
            default_payments=(split(100, "csd", "at", 0, "live"),),
            uplift_cap=Decimal(str(cap)) if cap is not None else None,
        )
        return ProjectionContext(contract=contract, terms=terms)
