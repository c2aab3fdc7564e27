"""
Tests for projection aggregation and the date helpers behind it.
"""

from datetime import date
from decimal import Decimal

import pytest

from projection_engine.aggregator import (
    aggregate_by_company, aggregate_by_month, aggregate_by_supplier,
    fill_month_range, filter_by_range, next_months, summarise,
)
from projection_engine.dates import add_months, month_key, month_label, month_span, months_between
from projection_engine.models import ContractProjection, MonthTotal, PaymentEvent


def tagged(month, amount, supplier="EDF Acquisition", company="Acme", payment_type="live"):
    return ContractProjection(
        event=PaymentEvent(month=month, amount=Decimal(amount), payment_type=payment_type),
        contract_id=f"{company}-{supplier}",
        supplier_name=supplier,
        company_name=company,
    )


@pytest.fixture
def projections():
    return [
        tagged(date(2025, 3, 1), "300", supplier="SSE Acquisition", company="Bolt"),
        tagged(date(2025, 1, 1), "100"),
        tagged(date(2025, 1, 1), "50", supplier="SSE Acquisition", company="Bolt"),
        tagged(date(2025, 6, 1), "1000", company="Cole"),
    ]


class TestDates:
    """Month arithmetic helpers."""

    @pytest.mark.parametrize("earlier,later,expected", [
        (date(2025, 1, 1), date(2025, 12, 31), 11),
        (date(2025, 1, 15), date(2026, 1, 15), 12),
        (date(2025, 1, 15), date(2026, 1, 14), 11),
        (date(2025, 6, 1), date(2025, 1, 1), -5),
        (date(2025, 3, 1), date(2025, 3, 31), 0),
    ])
    def test_months_between(self, earlier, later, expected):
        """Complete months only, truncated toward zero."""
        assert months_between(earlier, later) == expected

    def test_add_months_clamps_to_month_end(self):
        assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
        assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)

    def test_month_span_is_inclusive(self):
        span = month_span(date(2025, 11, 20), date(2026, 2, 3))

        assert span == [date(2025, 11, 1), date(2025, 12, 1), date(2026, 1, 1), date(2026, 2, 1)]

    def test_month_span_empty_when_reversed(self):
        assert month_span(date(2026, 1, 1), date(2025, 1, 1)) == []

    def test_month_key_and_label(self):
        assert month_key(date(2025, 3, 1)) == "2025-03"
        assert month_label(date(2025, 3, 1)) == "Mar 2025"


class TestAggregation:
    """Totals by month, supplier and company."""

    def test_by_month_sums_and_orders(self, projections):
        totals = aggregate_by_month(projections)

        assert list(totals) == ["2025-01", "2025-03", "2025-06"]
        assert totals["2025-01"] == Decimal("150")

    def test_by_month_accepts_plain_events(self):
        events = [PaymentEvent(date(2025, 2, 1), Decimal("10"), "live")] * 3

        assert aggregate_by_month(events) == {"2025-02": Decimal("30")}

    def test_by_supplier_largest_first(self, projections):
        totals = aggregate_by_supplier(projections)

        assert list(totals.items()) == [
            ("EDF Acquisition", Decimal("1100")),
            ("SSE Acquisition", Decimal("350")),
        ]

    def test_by_supplier_with_lookup(self):
        """A supplier_of callable lets callers group plain events."""
        events = [
            PaymentEvent(date(2025, 2, 1), Decimal("10"), "live"),
            PaymentEvent(date(2025, 2, 1), Decimal("5"), "arrears"),
        ]
        totals = aggregate_by_supplier(events, supplier_of=lambda e: e.payment_type)

        assert totals == {"live": Decimal("10"), "arrears": Decimal("5")}

    def test_by_company(self, projections):
        totals = aggregate_by_company(projections)

        assert list(totals) == ["Cole", "Bolt", "Acme"]

    def test_empty_input(self):
        assert aggregate_by_month([]) == {}
        assert aggregate_by_supplier([]) == {}


class TestMonthRanges:
    """Gap-free month series."""

    def test_fill_month_range_reports_zero_months(self, projections):
        """Months with no payments appear with a zero amount."""
        series = fill_month_range(aggregate_by_month(projections), date(2025, 1, 1), date(2025, 4, 1))

        assert series == [
            MonthTotal(date(2025, 1, 1), Decimal("150")),
            MonthTotal(date(2025, 2, 1), Decimal("0")),
            MonthTotal(date(2025, 3, 1), Decimal("300")),
            MonthTotal(date(2025, 4, 1), Decimal("0")),
        ]

    def test_next_months(self, projections):
        series = next_months(aggregate_by_month(projections), date(2025, 1, 20), count=12)

        assert len(series) == 12
        assert series[0].month == date(2025, 1, 1)
        assert series[-1].month == date(2025, 12, 1)
        assert sum(m.amount for m in series) == Decimal("1450")

    def test_next_months_zero_count(self):
        assert next_months({}, date(2025, 1, 1), count=0) == []

    def test_filter_by_range_is_month_inclusive(self, projections):
        filtered = filter_by_range(projections, date(2025, 1, 31), date(2025, 3, 2))

        assert sorted(p.amount for p in filtered) == [Decimal("50"), Decimal("100"), Decimal("300")]


class TestSummarise:
    """Dashboard summary figures."""

    def test_summary_figures(self, projections):
        summary = summarise(projections, as_of=date(2025, 3, 15))

        assert summary["current_month"] == Decimal("300")
        assert summary["current_year"] == Decimal("1450")
        assert summary["projected_to_date"] == Decimal("450")
        assert len(summary["monthly"]) == 12
        assert summary["monthly"][0] == MonthTotal(date(2025, 3, 1), Decimal("300"))

    def test_supplier_status_splits_outstanding_and_upcoming(self, projections):
        status = summarise(projections, as_of=date(2025, 3, 15))["supplier_status"]

        assert status[0]["supplier_name"] == "SSE Acquisition"
        assert status[0]["outstanding"] == Decimal("350")
        assert status[0]["outstanding_count"] == 2
        assert status[1]["supplier_name"] == "EDF Acquisition"
        assert status[1]["outstanding"] == Decimal("100")
        assert status[1]["upcoming"] == Decimal("1000")
        assert status[1]["upcoming_count"] == 1

    def test_top_suppliers_limit(self, projections):
        summary = summarise(projections, as_of=date(2025, 3, 15), top_suppliers=1)

        assert len(summary["supplier_status"]) == 1
