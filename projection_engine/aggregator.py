"""
Projection Aggregator

Pure reductions over projected payments for reporting. Items may be
PaymentEvents or ContractProjections; both expose month and amount.
"""

from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Callable

from .dates import add_months, month_key, month_span, start_of_month
from .models import MonthTotal

ZERO = Decimal("0")


def aggregate_by_key(items, key_of: Callable) -> dict:
    """Sum amounts per key; keys appear in first-seen order."""
    totals = OrderedDict()
    for item in items:
        key = key_of(item)
        totals[key] = totals.get(key, ZERO) + item.amount
    return totals


def aggregate_by_month(items) -> dict:
    """Sum amounts per YYYY-MM key, ordered by month."""
    totals = aggregate_by_key(items, lambda item: month_key(item.month))
    return OrderedDict(sorted(totals.items()))


def _ranked(totals: dict) -> dict:
    """Largest total first; equal totals keep first-seen order."""
    return OrderedDict(sorted(totals.items(), key=lambda kv: kv[1], reverse=True))


def aggregate_by_supplier(items, supplier_of: Callable = None) -> dict:
    """
    Sum amounts per supplier name, largest first.

    supplier_of maps an item to its supplier name; by default the
    ContractProjection's own supplier_name is used.
    """
    supplier_of = supplier_of or (lambda item: item.supplier_name)
    return _ranked(aggregate_by_key(items, supplier_of))


def aggregate_by_company(items, company_of: Callable = None) -> dict:
    """Sum amounts per company name, largest first."""
    company_of = company_of or (lambda item: item.company_name)
    return _ranked(aggregate_by_key(items, company_of))


def fill_month_range(totals: dict, start: date, end: date) -> list:
    """
    One MonthTotal for every month from start through end inclusive.

    Months missing from totals (a YYYY-MM keyed mapping) are reported as zero,
    never dropped.
    """
    return [
        MonthTotal(month=month, amount=totals.get(month_key(month), ZERO))
        for month in month_span(start, end)
    ]


def next_months(totals: dict, start: date, count: int = 12) -> list:
    """Gap-free series of count months beginning with start's month."""
    if count <= 0:
        return []
    first = start_of_month(start)
    return fill_month_range(totals, first, add_months(first, count - 1))


def filter_by_range(items, start: date, end: date) -> list:
    """Items whose month falls within start's month through end's month."""
    first = start_of_month(start)
    last = start_of_month(end)
    return [item for item in items if first <= item.month <= last]


def summarise(projections, as_of: date, months_ahead: int = 12, top_suppliers: int = 10) -> dict:
    """
    Dashboard figures for the given day.

    - current_month / current_year: projected in as_of's month / year
    - projected_to_date: projected up to and including as_of's month
    - monthly: next months_ahead months starting with as_of's month
    - supplier_status: per supplier, amounts already due (outstanding) versus
      still to come (upcoming), most outstanding first
    """
    this_month = start_of_month(as_of)
    by_month = aggregate_by_month(projections)

    current_month = by_month.get(month_key(this_month), ZERO)
    current_year = sum(
        (item.amount for item in projections if item.month.year == as_of.year), ZERO
    )
    projected_to_date = sum(
        (item.amount for item in projections if item.month <= this_month), ZERO
    )

    status = OrderedDict()
    for item in projections:
        entry = status.setdefault(item.supplier_name, {
            "supplier_name": item.supplier_name,
            "outstanding": ZERO,
            "outstanding_count": 0,
            "upcoming": ZERO,
            "upcoming_count": 0,
        })
        if item.month <= this_month:
            entry["outstanding"] += item.amount
            entry["outstanding_count"] += 1
        else:
            entry["upcoming"] += item.amount
            entry["upcoming_count"] += 1

    supplier_status = sorted(status.values(), key=lambda s: s["outstanding"], reverse=True)

    return {
        "current_month": current_month,
        "current_year": current_year,
        "projected_to_date": projected_to_date,
        "monthly": next_months(by_month, this_month, months_ahead),
        "supplier_status": supplier_status[:top_suppliers],
    }
