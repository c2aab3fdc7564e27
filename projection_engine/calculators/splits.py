"""
Split Calculator

Turns percentage splits into dated payment events.
"""

from datetime import date
from decimal import Decimal

from ..dates import add_months, start_of_month
from ..models import Contract, PaymentEvent, PaymentSplit

HUNDRED = Decimal("100")


class SplitCalculator:
    """Applies a payment list to a value."""

    def calculate(self, payments, value: Decimal, contract: Contract) -> list:
        """Emit one event per split, in the order the splits are defined."""
        return [self.to_event(payment, value, contract) for payment in payments]

    def to_event(self, payment: PaymentSplit, value: Decimal, contract: Contract) -> PaymentEvent:
        return PaymentEvent(
            month=self.payment_month(payment, contract),
            amount=value * payment.percentage / HUNDRED,
            payment_type=payment.payment_type,
        )

    @staticmethod
    def anchor_date(trigger: str, contract: Contract) -> date:
        """Contract date a split is measured from."""
        if trigger == 'lock_in':
            return contract.lock_in_date
        if trigger == 'ced':
            return contract.contract_end_date
        return contract.contract_start_date

    def payment_month(self, payment: PaymentSplit, contract: Contract) -> date:
        """Anchor date shifted by the split's offset, normalised to the 1st."""
        anchor = self.anchor_date(payment.trigger, contract)
        return start_of_month(add_months(anchor, payment.signed_offset))
