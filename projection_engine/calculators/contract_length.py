"""
Contract Length Splitter

Handles suppliers that only pay the standard schedule up to a maximum
contract length.
"""

from decimal import Decimal

from ..models import LengthTierApplication, ProjectionContext


class ContractLengthSplitter:
    """Splits a value into a term portion and an overflow portion."""

    def apply(self, ctx: ProjectionContext, value: Decimal) -> LengthTierApplication:
        """
        Split value by contract length.

        Contracts up to max_contract_months keep the whole value on the
        active payment list. Longer contracts pay value x max / length on the
        active list and the remainder on the overflow payments.
        """
        max_months = ctx.terms.max_contract_months
        length = ctx.contract_length

        if max_months is None or length <= max_months or length <= 0:
            return LengthTierApplication(tier_applied=False, term_value=value)

        term_value = value * (Decimal(max_months) / Decimal(length))
        return LengthTierApplication(
            tier_applied=True,
            term_value=term_value,
            overflow_value=value - term_value,
        )
