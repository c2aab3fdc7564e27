"""
Output Builder

Constructs JSON-ready responses from projected payments, and renders payment
terms as readable text.
"""

from decimal import Decimal

from .dates import month_key, month_label
from .models import Contract, PaymentEvent, PaymentSplit, PaymentTerms


def to_money(value: Decimal) -> float:
    """Convert Decimal to float with 2 decimal places."""
    return round(float(value), 2)


def _fmt(value) -> str:
    """Format a number as currency string for descriptions."""
    return f"£{value:,.2f}"


TRIGGER_TEXT = {
    'lock_in': 'Lock-in Date',
    'csd': 'Contract Start Date (CSD)',
    'ced': 'Contract End Date (CED)',
}


def trigger_to_text(trigger: str) -> str:
    return TRIGGER_TEXT.get(trigger, trigger)


def format_payment_split(payment: PaymentSplit) -> str:
    """e.g. '80% live (1 month after Contract Start Date (CSD))'."""
    trigger_text = trigger_to_text(payment.trigger)
    offset = payment.months_offset
    if offset == 0:
        timing_text = f"at {trigger_text}"
    else:
        plural = "s" if offset > 1 else ""
        direction = "before" if payment.timing == 'before' else "after"
        timing_text = f"{offset} month{plural} {direction} {trigger_text}"

    return f"{payment.percentage.normalize():f}% {payment.payment_type} ({timing_text})"


def describe_terms(terms: PaymentTerms) -> str:
    """One line per payment list, conditional rules first."""
    lines = []
    for rule in terms.conditional_rules:
        splits = ", ".join(format_payment_split(p) for p in rule.payments)
        lines.append(f"If {rule.condition} {rule.operator} {rule.value.normalize():f}: {splits}")
    lines.append("Otherwise: " + ", ".join(format_payment_split(p) for p in terms.default_payments))
    if terms.max_contract_months is not None:
        splits = ", ".join(format_payment_split(p) for p in terms.overflow_payments)
        lines.append(f"Beyond {terms.max_contract_months} months: {splits}")
    if terms.uplift_cap is not None:
        lines.append(f"Uplift over {terms.uplift_cap.normalize():f}p/kWh paid monthly in arrears")
    return "\n".join(lines)


class OutputBuilder:
    """Builds the final output response."""

    def build(self, contract: Contract, events: list) -> dict:
        """Construct the projection response for one contract."""
        total = sum((event.amount for event in events), Decimal("0"))
        return {
            "contract_summary": self._build_contract_summary(contract),
            "projections": [self.event_to_dict(event) for event in events],
            "total_projected": {
                "value": to_money(total),
                "description": f"{len(events)} payments totalling {_fmt(to_money(total))} "
                               f"of {_fmt(to_money(contract.contract_value))} contract value",
            },
        }

    def _build_contract_summary(self, contract: Contract) -> dict:
        """Build contract summary section."""
        return {
            "contract_id": contract.contract_id,
            "company_name": contract.company_name,
            "supplier_name": contract.supplier_name,
            "lock_in_date": contract.lock_in_date.isoformat(),
            "contract_start_date": contract.contract_start_date.isoformat(),
            "contract_end_date": contract.contract_end_date.isoformat(),
            "contract_value": to_money(contract.contract_value),
            "uplift_rate": float(contract.uplift_rate),
        }

    @staticmethod
    def event_to_dict(event: PaymentEvent) -> dict:
        return {
            "month": event.month.isoformat(),
            "monthKey": month_key(event.month),
            "monthLabel": month_label(event.month),
            "amount": to_money(event.amount),
            "paymentType": event.payment_type,
        }
