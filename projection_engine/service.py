"""
Projection Service

Request-level operations shared by the Flask app and the Lambda handler:
parse JSON payloads, validate, project and aggregate.
"""

from typing import Any, Dict, Optional

from . import aggregator
from .dates import month_key, month_label
from .models import Contract, PaymentTerms, ProjectionError, to_date
from .output import OutputBuilder, describe_terms, to_money
from .presets import PAYMENT_TERM_PRESETS
from .processor import ScheduleCalculator
from .suppliers import VALID_SUPPLIERS, find_supplier_match, get_suggested_suppliers, is_valid_supplier
from .validators import ContractValidator, PaymentTermsValidator

GROUP_BY_OPTIONS = ('month', 'supplier', 'company', 'none')


class ProjectionService:
    """Validates and projects contracts received as dictionaries."""

    def __init__(self, calculator: Optional[ScheduleCalculator] = None):
        self.calculator = calculator or ScheduleCalculator()
        self.contract_validator = ContractValidator()
        self.terms_validator = PaymentTermsValidator()
        self.output_builder = OutputBuilder()

    def project(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Project one contract, or a batch under "contracts".

        Batch options:
        - groupBy: 'month', 'supplier', 'company' or 'none' (default)
        - startDate/endDate: keep only months in range; with groupBy=month
          every month in range is listed, zero when nothing is projected
        """
        if "contracts" not in payload:
            contract = Contract.from_dict(payload)
            self.contract_validator.validate(contract)
            return self.output_builder.build(contract, self.calculator.calculate(contract))

        return self._project_batch(payload)

    def _project_batch(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        group_by = payload.get("groupBy", "none")
        if group_by not in GROUP_BY_OPTIONS:
            raise ValueError(f"Invalid groupBy: {group_by}. Must be one of {', '.join(GROUP_BY_OPTIONS)}")

        start = payload.get("startDate")
        end = payload.get("endDate")
        start = to_date(start) if start else None
        end = to_date(end) if end else None

        contracts, errors = self._parse_contracts(payload["contracts"])

        batch = self.calculator.project_contracts(contracts)
        errors.extend(batch.errors)

        projections = batch.projections
        if start and end:
            projections = aggregator.filter_by_range(projections, start, end)

        result = {
            "regenerated": batch.regenerated,
            "total": len(payload["contracts"]),
            "errors": [vars(error) for error in errors],
        }

        if group_by == "month":
            totals = aggregator.aggregate_by_month(projections)
            if start and end:
                rows = aggregator.fill_month_range(totals, start, end)
                result["projections"] = [self._month_row(row.month, row.amount) for row in rows]
            else:
                result["projections"] = [
                    self._month_row(to_date(key + "-01"), amount) for key, amount in totals.items()
                ]
        elif group_by == "supplier":
            result["projections"] = self._name_rows(aggregator.aggregate_by_supplier(projections))
        elif group_by == "company":
            result["projections"] = self._name_rows(aggregator.aggregate_by_company(projections))
        else:
            result["projections"] = [self._detail_row(item) for item in sorted(projections, key=lambda p: p.month)]

        return result

    def summarise(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Dashboard figures for a batch of contracts.

        Payload:
        - contracts: contract objects, as for a batch projection
        - asOf: the day to report on (required; the engine never reads the clock)
        - monthsAhead / topSuppliers: optional sizes of the monthly series and
          the supplier status list
        """
        as_of = payload.get("asOf")
        if not as_of:
            raise ValueError("asOf is required")

        contracts, errors = self._parse_contracts(payload.get("contracts", []))
        batch = self.calculator.project_contracts(contracts)
        errors.extend(batch.errors)

        summary = aggregator.summarise(
            batch.projections,
            as_of=to_date(as_of),
            months_ahead=int(payload.get("monthsAhead", 12)),
            top_suppliers=int(payload.get("topSuppliers", 10)),
        )

        return {
            "as_of": to_date(as_of).isoformat(),
            "current_month": to_money(summary["current_month"]),
            "current_year": to_money(summary["current_year"]),
            "projected_to_date": to_money(summary["projected_to_date"]),
            "monthly": [self._month_row(row.month, row.amount) for row in summary["monthly"]],
            "supplier_status": [
                dict(status, outstanding=to_money(status["outstanding"]), upcoming=to_money(status["upcoming"]))
                for status in summary["supplier_status"]
            ],
            "errors": [vars(error) for error in errors],
        }

    def _parse_contracts(self, rows) -> tuple:
        """Parse and validate contract rows; bad rows become ProjectionErrors."""
        contracts, errors = [], []
        for i, raw in enumerate(rows):
            row = raw if isinstance(raw, dict) else {}
            try:
                if not isinstance(raw, dict):
                    raise ValueError(f"contracts[{i}] must be an object, got: {type(raw).__name__}")
                contract = Contract.from_dict(raw)
                self.contract_validator.validate(contract)
            except (ValueError, KeyError, TypeError) as e:
                errors.append(ProjectionError(
                    contract_id=str(row.get("contractId", row.get("id", i))),
                    company_name=row.get("companyName"),
                    error=str(e),
                ))
                continue
            contracts.append(contract)
        return contracts, errors

    def validate_terms(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Validate supplier payment terms before they are saved."""
        terms = PaymentTerms.from_dict(payload)
        self.terms_validator.validate(terms)
        return {
            "valid": True,
            "payment_terms": terms.to_dict(),
            "description": describe_terms(terms),
        }

    def list_suppliers(self) -> Dict[str, Any]:
        return {
            "suppliers": list(VALID_SUPPLIERS),
            "presets": {name: terms.to_dict() for name, terms in PAYMENT_TERM_PRESETS.items()},
        }

    def match_supplier(self, name: str) -> Dict[str, Any]:
        valid = is_valid_supplier(name)
        return {
            "input": name,
            "match": find_supplier_match(name),
            "valid": valid,
            "suggestions": [] if valid else get_suggested_suppliers(name),
            "resolved_terms": self.calculator.resolver.resolve(name).to_dict(),
        }

    @staticmethod
    def _month_row(month, amount) -> dict:
        return {"month": month_label(month), "monthKey": month_key(month), "amount": to_money(amount)}

    @staticmethod
    def _name_rows(totals: dict) -> list:
        return [{"name": name, "amount": to_money(amount)} for name, amount in totals.items()]

    def _detail_row(self, item) -> dict:
        row = self.output_builder.event_to_dict(item.event)
        row.update({
            "contractId": item.contract_id,
            "companyName": item.company_name,
            "supplierName": item.supplier_name,
        })
        return row
