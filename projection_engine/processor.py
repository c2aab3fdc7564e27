"""
Schedule Calculator - Main Orchestrator

Coordinates the payment projection pipeline through discrete, testable steps.
"""

from typing import Any, Dict, Optional

from .calculators import (
    ConditionEvaluator,
    ContractLengthSplitter,
    SplitCalculator,
    UpliftCapEnforcer,
)
from .dates import months_between
from .models import (
    BatchResult, Contract, ContractProjection, PaymentTerms,
    ProjectionContext, ProjectionError,
)
from .output import OutputBuilder
from .resolver import RuleResolver
from .validators import PaymentTermsValidator


class ScheduleCalculator:
    """
    Main orchestrator for payment projections.

    Implements a clear pipeline pattern:
    1. Resolve Payment Terms
    2. Build Context
    3. Select Active Payments (conditional rules)
    4. Apply Uplift Cap
    5. Split by Contract Length
    6. Apply Splits
    7. Order Events
    """

    def __init__(self, resolver: Optional[RuleResolver] = None, validate_terms: bool = False):
        self.resolver = resolver or RuleResolver()
        self.validate_terms = validate_terms
        self.terms_validator = PaymentTermsValidator()
        self.condition_evaluator = ConditionEvaluator()
        self.uplift_cap_enforcer = UpliftCapEnforcer()
        self.length_splitter = ContractLengthSplitter()
        self.split_calculator = SplitCalculator()
        self.output_builder = OutputBuilder()

    def calculate(self, contract: Contract, terms: Optional[PaymentTerms] = None) -> list:
        """
        Project the payments for one contract.

        Args:
            contract: The contract's dates and values
            terms: Payment terms to apply; resolved from contract.supplier if omitted

        Returns:
            PaymentEvent list ordered by month, ties in rule-definition order
        """
        # Step 1: Resolve terms
        if terms is None:
            terms = self.resolver.resolve(contract.supplier)
        if self.validate_terms:
            self.terms_validator.validate(terms)

        # Step 2: Build context
        ctx = self._build_context(contract, terms)

        # Step 3: First matching conditional rule, else defaults
        ctx.active_payments = self.condition_evaluator.select(ctx)

        # Step 4: Uplift cap (full value when under the cap)
        ctx.uplift = self.uplift_cap_enforcer.apply(ctx)

        # Step 5: Contract length tier on the payable value
        ctx.length_tier = self.length_splitter.apply(ctx, ctx.uplift.payable_value)

        # Step 6: Apply splits
        events = self.split_calculator.calculate(ctx.active_payments, ctx.length_tier.term_value, contract)
        if ctx.length_tier.tier_applied:
            events += self.split_calculator.calculate(
                terms.overflow_payments, ctx.length_tier.overflow_value, contract
            )
        events += ctx.uplift.arrears_events

        # Step 7: Chronological; sorted() is stable so ties keep definition order
        return sorted(events, key=lambda event: event.month)

    def calculate_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Project a contract from raw dictionary input.

        Convenience method for API usage.
        """
        contract = Contract.from_dict(data)
        events = self.calculate(contract)
        return self.output_builder.build(contract, events)

    def project_contracts(self, contracts) -> BatchResult:
        """
        Project many contracts, tagging each event with its contract.

        A contract that fails is recorded in errors and the run continues;
        the result always replaces previous projections wholesale.
        """
        result = BatchResult(total=len(contracts))

        for contract in contracts:
            try:
                events = self.calculate(contract)
            except (ValueError, ArithmeticError, TypeError) as e:
                result.errors.append(ProjectionError(
                    contract_id=contract.contract_id,
                    company_name=contract.company_name,
                    error=str(e),
                ))
                continue

            result.projections.extend(
                ContractProjection(
                    event=event,
                    contract_id=contract.contract_id,
                    supplier_name=contract.supplier_name,
                    company_name=contract.company_name or "",
                )
                for event in events
            )
            result.regenerated += 1

        return result

    def _build_context(self, contract: Contract, terms: PaymentTerms) -> ProjectionContext:
        """Build the initial projection context."""
        return ProjectionContext(
            contract=contract,
            terms=terms,
            months_to_csd=months_between(contract.lock_in_date, contract.contract_start_date),
            contract_length=months_between(contract.contract_start_date, contract.contract_end_date),
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def calculate_payment_projections(contract: Contract, terms: Optional[PaymentTerms] = None) -> list:
    """Project one contract with a default ScheduleCalculator."""
    return ScheduleCalculator().calculate(contract, terms)


def calculate_from_json(json_input: str) -> str:
    """
    Project a contract from JSON string input and return JSON string output.
    """
    import json

    try:
        data = json.loads(json_input)
        result = ScheduleCalculator().calculate_from_dict(data)
        return json.dumps(result, indent=2)

    except (ValueError, KeyError) as e:
        error_response = {"error": str(e), "status": "validation_failed"}
        return json.dumps(error_response, indent=2)
