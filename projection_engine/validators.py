"""
Validation for the Commission Projection Engine

Payment terms are validated when a supplier's terms are saved; contracts are
validated by callers before they are projected. The calculator itself does not
run these checks unless asked to.
Raises ValueError with clear messages for any constraint violations.
"""

from decimal import Decimal

from .models import (
    CONDITIONS, OPERATORS, PAYMENT_TYPES, TIMINGS, TRIGGERS,
    ConditionalRule, Contract, PaymentTerms,
)

FULL_PERCENTAGE = Decimal("100")


class PaymentTermsValidator:
    """Validates structured payment terms according to business rules."""

    def validate(self, terms: PaymentTerms) -> None:
        """
        Run all validations. Raises ValueError if any check fails.
        """
        if not terms.default_payments:
            raise ValueError("defaultPayments must contain at least one payment")

        self._validate_payments(terms.default_payments, "defaultPayments")

        for i, rule in enumerate(terms.conditional_rules):
            self._validate_rule(rule, f"conditionalRules[{i}]")

        if terms.uplift_cap is not None and terms.uplift_cap < 0:
            raise ValueError(f"upliftCap cannot be negative, got: {terms.uplift_cap}")

        self._validate_length_tier(terms)

    def _validate_rule(self, rule: ConditionalRule, path: str) -> None:
        if rule.condition not in CONDITIONS:
            raise ValueError(f"{path}: invalid condition: {rule.condition}. Must be one of {', '.join(CONDITIONS)}")
        if rule.operator not in OPERATORS:
            raise ValueError(f"{path}: invalid operator: {rule.operator}. Must be one of {', '.join(OPERATORS)}")
        if not rule.payments:
            raise ValueError(f"{path}: payments must contain at least one payment")

        self._validate_payments(rule.payments, f"{path}.payments")

        for i, nested in enumerate(rule.conditional_rules):
            self._validate_rule(nested, f"{path}.conditionalRules[{i}]")

    def _validate_length_tier(self, terms: PaymentTerms) -> None:
        if terms.max_contract_months is None:
            if terms.overflow_payments:
                raise ValueError("overflowPayments requires maxContractMonths")
            return

        if terms.max_contract_months <= 0:
            raise ValueError(f"maxContractMonths must be positive, got: {terms.max_contract_months}")
        if not terms.overflow_payments:
            raise ValueError("overflowPayments is required when maxContractMonths is set")

        self._validate_payments(terms.overflow_payments, "overflowPayments")

    def _validate_payments(self, payments, path: str) -> None:
        """Each split must be well formed and the list must total exactly 100%."""
        total = Decimal("0")
        for i, payment in enumerate(payments):
            if payment.trigger not in TRIGGERS:
                raise ValueError(f"{path}[{i}]: invalid trigger: {payment.trigger}")
            if payment.timing not in TIMINGS:
                raise ValueError(f"{path}[{i}]: invalid timing: {payment.timing}")
            if payment.payment_type not in PAYMENT_TYPES:
                raise ValueError(f"{path}[{i}]: invalid paymentType: {payment.payment_type}")
            if payment.months_offset < 0:
                raise ValueError(f"{path}[{i}]: monthsOffset cannot be negative, got: {payment.months_offset}")
            if payment.timing == 'at' and payment.months_offset != 0:
                raise ValueError(f"{path}[{i}]: monthsOffset must be 0 when timing is 'at'")
            if not (0 <= payment.percentage <= FULL_PERCENTAGE):
                raise ValueError(f"{path}[{i}]: percentage must be between 0 and 100, got: {payment.percentage}")
            total += payment.percentage

        if total != FULL_PERCENTAGE:
            raise ValueError(f"{path}: percentages must total 100, got: {total}")


class ContractValidator:
    """Sanity checks a caller runs before projecting a contract."""

    def validate(self, contract: Contract) -> None:
        if contract.contract_end_date <= contract.contract_start_date:
            raise ValueError(
                f"contractEndDate ({contract.contract_end_date}) must be after "
                f"contractStartDate ({contract.contract_start_date})"
            )

        if contract.contract_value < 0:
            raise ValueError(f"contractValue cannot be negative, got: {contract.contract_value}")

        if contract.uplift_rate < 0:
            raise ValueError(f"upliftRate cannot be negative, got: {contract.uplift_rate}")
