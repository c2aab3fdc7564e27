"""
Condition Evaluator

Chooses which payment list applies to a contract.
"""

import operator as op
from decimal import Decimal

from ..models import ConditionalRule, ProjectionContext

COMPARATORS = {
    'lte': op.le,
    'lt': op.lt,
    'gte': op.ge,
    'gt': op.gt,
}


class ConditionEvaluator:
    """Evaluates conditional rules top to bottom; first match wins."""

    def select(self, ctx: ProjectionContext) -> tuple:
        """
        Return the payment list to use for this contract.

        A matching rule's payments replace the defaults entirely, they are
        never merged. No match (or no rules) means the default payments.
        """
        payments = self._first_match(ctx.terms.conditional_rules, ctx)
        if payments is None:
            return tuple(ctx.terms.default_payments)
        return payments

    def _first_match(self, rules, ctx: ProjectionContext):
        for rule in rules:
            if not self.matches(rule, ctx):
                continue
            nested = self._first_match(rule.conditional_rules, ctx)
            if nested is not None:
                return nested
            return tuple(rule.payments)
        return None

    def matches(self, rule: ConditionalRule, ctx: ProjectionContext) -> bool:
        """Apply the rule's operator to the measured condition."""
        compare = COMPARATORS.get(rule.operator)
        if compare is None:
            # Unknown operators never match
            return False
        measured = self.measure(rule.condition, ctx)
        if measured is None:
            return False
        return compare(measured, rule.value)

    @staticmethod
    def measure(condition: str, ctx: ProjectionContext):
        """Value of a condition for the contract in ctx (None if unknown)."""
        if condition == 'months_to_csd':
            return Decimal(ctx.months_to_csd)
        if condition == 'contract_length':
            return Decimal(ctx.contract_length)
        if condition == 'uplift_rate':
            return ctx.contract.uplift_rate
        return None
