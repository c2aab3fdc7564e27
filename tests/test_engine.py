"""
Tests for the Schedule Calculator

Run with: python -m pytest tests/ -v
"""

import json
from datetime import date
from decimal import Decimal

import pytest

from projection_engine import Contract, PaymentTerms, ScheduleCalculator, calculate_payment_projections
from projection_engine.models import ConditionalRule, split
from projection_engine.processor import calculate_from_json

TOLERANCE = Decimal("1e-6")


def make_contract(supplier="Unknown Supplier", lock_in="2024-12-01", start="2025-01-15",
                  end="2026-01-15", value="10000", rate="1.0", **kwargs) -> Contract:
    return Contract(
        lock_in_date=date.fromisoformat(lock_in),
        contract_start_date=date.fromisoformat(start),
        contract_end_date=date.fromisoformat(end),
        contract_value=Decimal(value),
        uplift_rate=Decimal(rate),
        supplier=supplier,
        **kwargs,
    )


class TestDefaultRule:
    """The 80/20 fallback used for unknown suppliers."""

    @pytest.fixture
    def calculator(self):
        return ScheduleCalculator()

    def test_default_rule_example(self, calculator):
        """80% live at CSD+1, 20% reconciliation at CED+2."""
        events = calculator.calculate(make_contract())

        assert len(events) == 2
        assert events[0].month == date(2025, 2, 1)
        assert events[0].amount == Decimal("8000")
        assert events[0].payment_type == "live"
        assert events[1].month == date(2026, 3, 1)
        assert events[1].amount == Decimal("2000")
        assert events[1].payment_type == "reconciliation"

    def test_unknown_supplier_matches_default_rule(self, calculator):
        """An unmapped name projects exactly like the default terms."""
        from projection_engine.presets import DEFAULT_PAYMENT_TERMS

        contract = make_contract(supplier="Brand New Energy Ltd")
        assert calculator.calculate(contract) == calculator.calculate(contract, DEFAULT_PAYMENT_TERMS)

    def test_missing_supplier_uses_default_rule(self, calculator):
        """No supplier at all still produces the default schedule."""
        events = calculator.calculate(make_contract(supplier=None))

        assert [e.payment_type for e in events] == ["live", "reconciliation"]

    def test_month_end_start_date_clamps(self, calculator):
        """Jan 31 + 1 month lands in February, not March."""
        events = calculator.calculate(make_contract(start="2025-01-31", end="2026-01-31"))

        assert events[0].month == date(2025, 2, 1)


class TestScheduleCalculator:
    """General behaviour of the calculation pipeline."""

    @pytest.fixture
    def calculator(self):
        return ScheduleCalculator()

    @pytest.mark.parametrize("supplier", [
        "British Gas Acquisition",
        "British Gas Renewal",
        "Brook Green Acquisition Upfront",
        "Corona Acquisition Upfront",
        "Crown Gas & Power Renewal No Upfront",
        "Engie Acquisition Upfront",
        "EonNext Acquisition",
        "EonNext Renewal",
        "Npower Renewal Upfront",
        "Smartest Energy Acquisition",
        "Totalenergies Acquisition Upfront",
        "Totalenergies Renewal Upfront",
        "SSE Acquisition",
    ])
    def test_amounts_reconcile_to_contract_value(self, calculator, supplier):
        """Every supplier's events add back up to the contract value."""
        contract = make_contract(
            supplier=supplier, lock_in="2024-03-10", start="2026-05-01",
            end="2031-04-30", value="25000", rate="2.7",
        )
        events = calculator.calculate(contract)

        total = sum(e.amount for e in events)
        assert abs(total - Decimal("25000")) < TOLERANCE

    def test_events_are_chronological(self, calculator):
        """Output is ordered by month even when splits are not."""
        terms = PaymentTerms(default_payments=(
            split(20, "ced", "after", 2, "reconciliation"),
            split(30, "csd", "at", 0, "live"),
            split(50, "lock_in", "at", 0, "signature"),
        ))
        events = calculator.calculate(make_contract(), terms)

        assert [e.payment_type for e in events] == ["signature", "live", "reconciliation"]

    def test_same_month_keeps_definition_order(self, calculator):
        """Ties on month are broken by the order splits are defined in."""
        terms = PaymentTerms(default_payments=(
            split(60, "csd", "at", 0, "live"),
            split(40, "csd", "at", 0, "signature"),
        ))
        events = calculator.calculate(make_contract(), terms)

        assert [e.payment_type for e in events] == ["live", "signature"]
        assert events[0].month == events[1].month

    def test_before_timing_subtracts_months(self, calculator):
        """'before' moves the payment earlier than its anchor."""
        terms = PaymentTerms(default_payments=(split(100, "csd", "before", 3, "signature"),))
        events = calculator.calculate(make_contract(), terms)

        assert events[0].month == date(2024, 10, 1)

    def test_is_deterministic(self, calculator):
        """Identical inputs give identical outputs."""
        contract = make_contract(supplier="Brook Green Renewal Upfront", rate="2.5")

        assert calculator.calculate(contract) == calculator.calculate(contract)

    def test_structured_terms_on_contract(self, calculator):
        """A contract carrying its own terms skips name resolution."""
        terms = PaymentTerms(default_payments=(split(100, "lock_in", "after", 1, "signature"),))
        events = calculator.calculate(make_contract(supplier=terms))

        assert len(events) == 1
        assert events[0].month == date(2025, 1, 1)
        assert events[0].amount == Decimal("10000")

    def test_conditional_payments_replace_defaults(self, calculator):
        """A matching rule's payments are used instead of, not merged with, defaults."""
        terms = PaymentTerms(
            default_payments=(split(100, "csd", "at", 0, "live"),),
            conditional_rules=(
                ConditionalRule("contract_length", "gte", Decimal(12), payments=(
                    split(50, "lock_in", "at", 0, "signature"),
                    split(50, "ced", "at", 0, "reconciliation"),
                )),
            ),
        )
        events = calculator.calculate(make_contract(), terms)

        assert [e.payment_type for e in events] == ["signature", "reconciliation"]

    def test_malformed_dates_do_not_raise(self, calculator):
        """CSD after CED still yields a schedule."""
        events = calculator.calculate(make_contract(start="2026-01-01", end="2025-01-01"))

        assert len(events) == 2
        assert events[0].month == date(2025, 3, 1)
        assert events[0].payment_type == "reconciliation"

    def test_lock_in_after_start_is_handled(self, calculator):
        """A negative months-to-CSD is just a number to compare."""
        contract = make_contract(supplier="Npower Acquisition Upfront", lock_in="2025-06-01")
        events = calculator.calculate(contract)

        assert [e.payment_type for e in events] == ["signature", "reconciliation"]

    def test_invalid_terms_pass_through_by_default(self, calculator):
        """Percentages are trusted unless validation is switched on."""
        terms = PaymentTerms(default_payments=(split(90, "csd", "at", 0, "live"),))
        events = calculator.calculate(make_contract(), terms)

        assert events[0].amount == Decimal("9000")

    def test_validate_terms_flag_rejects_bad_percentages(self):
        """With validate_terms the 100% invariant is asserted."""
        calculator = ScheduleCalculator(validate_terms=True)
        terms = PaymentTerms(default_payments=(split(90, "csd", "at", 0, "live"),))

        with pytest.raises(ValueError, match="total 100"):
            calculator.calculate(make_contract(), terms)

    def test_convenience_function(self):
        """calculate_payment_projections resolves the supplier itself."""
        events = calculate_payment_projections(make_contract(supplier="British Gas Acquisition"))

        assert events[0].amount == Decimal("7000")


class TestDictAndJsonInput:
    """Raw input handling."""

    @pytest.fixture
    def sample_input(self):
        return {
            "lockInDate": "2024-12-01",
            "contractStartDate": "2025-01-15T00:00:00.000Z",
            "contractEndDate": "2026-01-15",
            "contractValue": 10000,
            "commsUR": 1.2,
            "supplierName": "Airticity Acquisition",
            "companyName": "Acme Bakery Ltd",
        }

    def test_calculate_from_dict(self, sample_input):
        """camelCase input is parsed and projected."""
        result = ScheduleCalculator().calculate_from_dict(sample_input)

        assert result["contract_summary"]["company_name"] == "Acme Bakery Ltd"
        assert result["contract_summary"]["contract_start_date"] == "2025-01-15"
        assert [p["monthKey"] for p in result["projections"]] == ["2025-02", "2026-03"]
        assert result["total_projected"]["value"] == 10000.0

    def test_payment_terms_in_dict_take_precedence(self, sample_input):
        """paymentTerms overrides the supplier name."""
        sample_input["paymentTerms"] = {
            "defaultPayments": [
                {"percentage": 100, "trigger": "lock_in", "timing": "at", "monthsOffset": 0, "paymentType": "signature"}
            ]
        }
        result = ScheduleCalculator().calculate_from_dict(sample_input)

        assert len(result["projections"]) == 1
        assert result["projections"][0]["paymentType"] == "signature"
        assert result["projections"][0]["monthKey"] == "2024-12"

    def test_calculate_from_json(self, sample_input):
        """JSON in, JSON out."""
        result = json.loads(calculate_from_json(json.dumps(sample_input)))

        assert len(result["projections"]) == 2

    def test_calculate_from_json_missing_field(self, sample_input):
        """Missing fields come back as a validation failure."""
        del sample_input["contractEndDate"]
        result = json.loads(calculate_from_json(json.dumps(sample_input)))

        assert result["status"] == "validation_failed"


class TestProjectContracts:
    """Batch projection used when all projections are regenerated."""

    def test_tags_events_with_contract(self):
        """Every event carries its contract's id, supplier and company."""
        contracts = [
            make_contract(supplier="EDF Acquisition", contract_id="c1", company_name="Acme"),
            make_contract(supplier="Npower Acquisition Upfront", contract_id="c2", company_name="Bolt"),
        ]
        result = ScheduleCalculator().project_contracts(contracts)

        assert result.total == 2
        assert result.regenerated == 2
        assert result.errors == []
        assert {p.contract_id for p in result.projections} == {"c1", "c2"}
        assert {p.supplier_name for p in result.projections} == {"EDF Acquisition", "Npower Acquisition Upfront"}

    def test_failing_contract_is_recorded_and_skipped(self):
        """Invalid terms on one contract do not stop the batch."""
        bad_terms = PaymentTerms(default_payments=(split(50, "csd", "at", 0, "live"),))
        contracts = [
            make_contract(contract_id="good"),
            make_contract(supplier=bad_terms, contract_id="bad", company_name="Broken Co"),
        ]
        result = ScheduleCalculator(validate_terms=True).project_contracts(contracts)

        assert result.regenerated == 1
        assert len(result.errors) == 1
        assert result.errors[0].contract_id == "bad"
        assert result.errors[0].company_name == "Broken Co"
