"""
Uplift Cap Enforcer

Applies a supplier's uplift cap to the contract value.
"""

from decimal import Decimal

from ..dates import add_months, month_span
from ..models import PaymentEvent, ProjectionContext, UpliftCapApplication


class UpliftCapEnforcer:
    """Moves commission earned above the uplift cap into monthly arrears."""

    def apply(self, ctx: ProjectionContext) -> UpliftCapApplication:
        """
        Apply the uplift cap if configured.

        When the contract's uplift rate is at or under the cap (or there is
        no cap) the full value stays payable on the standard schedule.

        Over the cap:
        - payable value = contract value x cap / uplift rate
        - the remainder is paid as equal 'arrears' events every month from
          CSD+1 through CED+1 inclusive
        """
        contract = ctx.contract
        cap = ctx.terms.uplift_cap
        value = contract.contract_value

        if cap is None or contract.uplift_rate <= cap:
            return UpliftCapApplication(cap_applied=False, payable_value=value)

        payable_value = value * (cap / contract.uplift_rate)
        arrears_value = value - payable_value

        return UpliftCapApplication(
            cap_applied=True,
            payable_value=payable_value,
            arrears_value=arrears_value,
            arrears_events=self._spread_arrears(ctx, arrears_value),
        )

    def _spread_arrears(self, ctx: ProjectionContext, arrears_value: Decimal) -> list:
        """
        Spread arrears evenly over CSD+1 .. CED+1.

        The range normally holds months_between(CSD, CED) + 1 months. Each
        event is arrears_value divided by the number of months actually
        emitted, so the arrears always add back up to arrears_value. A
        contract whose CED+1 falls before CSD+1 gets the whole amount at CSD+1.
        """
        contract = ctx.contract
        first = add_months(contract.contract_start_date, 1)
        last = add_months(contract.contract_end_date, 1)

        months = month_span(first, last) or month_span(first, first)
        # Divisor is the emitted month count, not months_between(CSD, CED) + 1.
        # The two differ when CED's day of month is before CSD's.
        monthly = arrears_value / Decimal(len(months))

        return [
            PaymentEvent(month=month, amount=monthly, payment_type='arrears')
            for month in months
        ]
