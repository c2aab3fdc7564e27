"""
Domain Models for the Commission Projection Engine

These dataclasses provide type-safe representations of contracts, supplier
payment terms and projected payments.
All monetary values use Decimal for precision.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from dateutil.parser import isoparse

# =============================================================================
# VOCABULARY
# =============================================================================

TRIGGERS = ('lock_in', 'csd', 'ced')
TIMINGS = ('at', 'before', 'after')
PAYMENT_TYPES = ('signature', 'live', 'reconciliation', 'arrears')
CONDITIONS = ('months_to_csd', 'contract_length', 'uplift_rate')
OPERATORS = ('lte', 'gt', 'gte', 'lt')


def to_decimal(value) -> Decimal:
    """Convert a number or numeric string to Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid number: {value!r}")


def to_date(value) -> date:
    """Parse an ISO date/datetime string (or pass a date through)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return isoparse(str(value)).date()


def _pick(data: dict, *keys, default=None):
    """Return the first key present in data (camelCase or snake_case)."""
    for key in keys:
        if key in data:
            return data[key]
    return default


# =============================================================================
# PAYMENT TERMS (RULE-SET) MODELS
# =============================================================================


@dataclass(frozen=True)
class PaymentSplit:
    """One percentage of the contract value paid relative to a contract date."""

    percentage: Decimal  # 0-100
    trigger: str  # 'lock_in', 'csd' or 'ced'
    timing: str  # 'at', 'before' or 'after'
    months_offset: int
    payment_type: str

    @property
    def signed_offset(self) -> int:
        """Months to add to the anchor date ('at' never moves it)."""
        if self.timing == 'before':
            return -self.months_offset
        if self.timing == 'after':
            return self.months_offset
        return 0

    @classmethod
    def from_dict(cls, data: dict) -> "PaymentSplit":
        timing = data.get("timing", "at")
        offset = int(_pick(data, "monthsOffset", "months_offset", default=0))
        return cls(
            percentage=to_decimal(data["percentage"]),
            trigger=data["trigger"],
            timing=timing,
            months_offset=0 if timing == "at" else offset,
            payment_type=_pick(data, "paymentType", "payment_type"),
        )

    def to_dict(self) -> dict:
        return {
            "percentage": float(self.percentage),
            "trigger": self.trigger,
            "timing": self.timing,
            "monthsOffset": self.months_offset,
            "paymentType": self.payment_type,
        }


@dataclass(frozen=True)
class ConditionalRule:
    """A threshold test that swaps in its own payment list when it matches.

    Nested rules are only consulted when this rule matches; the first nested
    match wins, otherwise this rule's own payments apply.
    """

    condition: str
    operator: str
    value: Decimal
    payments: tuple = ()
    conditional_rules: tuple = ()

    @classmethod
    def from_dict(cls, data: dict) -> "ConditionalRule":
        nested = _pick(data, "conditionalRules", "conditional_rules", default=None) or []
        return cls(
            condition=data["condition"],
            operator=data["operator"],
            value=to_decimal(data["value"]),
            payments=tuple(PaymentSplit.from_dict(p) for p in data.get("payments", [])),
            conditional_rules=tuple(ConditionalRule.from_dict(r) for r in nested),
        )

    def to_dict(self) -> dict:
        result = {
            "condition": self.condition,
            "operator": self.operator,
            "value": float(self.value),
            "payments": [p.to_dict() for p in self.payments],
        }
        if self.conditional_rules:
            result["conditionalRules"] = [r.to_dict() for r in self.conditional_rules]
        return result


@dataclass(frozen=True)
class PaymentTerms:
    """Structured payment terms for one supplier.

    Conditional rules are evaluated in order and the first match replaces
    default_payments entirely. An uplift cap moves the value earned above the
    cap into monthly arrears. max_contract_months splits long contracts into a
    term portion (active payments) and an overflow portion (overflow_payments).
    """

    default_payments: tuple
    conditional_rules: tuple = ()
    uplift_cap: Optional[Decimal] = None
    max_contract_months: Optional[int] = None
    overflow_payments: tuple = ()
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "PaymentTerms":
        cap = _pick(data, "upliftCap", "uplift_cap")
        max_months = _pick(data, "maxContractMonths", "max_contract_months")
        defaults = _pick(data, "defaultPayments", "default_payments", default=[])
        rules = _pick(data, "conditionalRules", "conditional_rules", default=None) or []
        overflow = _pick(data, "overflowPayments", "overflow_payments", default=None) or []
        return cls(
            default_payments=tuple(PaymentSplit.from_dict(p) for p in defaults),
            conditional_rules=tuple(ConditionalRule.from_dict(r) for r in rules),
            uplift_cap=to_decimal(cap) if cap is not None else None,
            max_contract_months=int(max_months) if max_months is not None else None,
            overflow_payments=tuple(PaymentSplit.from_dict(p) for p in overflow),
            description=data.get("description") or "",
        )

    def to_dict(self) -> dict:
        result = {"defaultPayments": [p.to_dict() for p in self.default_payments]}
        if self.conditional_rules:
            result["conditionalRules"] = [r.to_dict() for r in self.conditional_rules]
        if self.uplift_cap is not None:
            result["upliftCap"] = float(self.uplift_cap)
        if self.max_contract_months is not None:
            result["maxContractMonths"] = self.max_contract_months
            result["overflowPayments"] = [p.to_dict() for p in self.overflow_payments]
        if self.description:
            result["description"] = self.description
        return result


def split(percentage, trigger: str, timing: str, months_offset: int, payment_type: str) -> PaymentSplit:
    """Shorthand used by the supplier table and presets."""
    return PaymentSplit(
        percentage=to_decimal(percentage),
        trigger=trigger,
        timing=timing,
        months_offset=0 if timing == 'at' else months_offset,
        payment_type=payment_type,
    )


# =============================================================================
# CONTRACT (INPUT) MODEL
# =============================================================================


@dataclass(frozen=True)
class Contract:
    """Key dates and values of one brokerage contract."""

    lock_in_date: date
    contract_start_date: date  # CSD
    contract_end_date: date  # CED
    contract_value: Decimal
    uplift_rate: Decimal = Decimal("0")  # commsUR, p/kWh
    supplier: Union[str, PaymentTerms, None] = None
    contract_id: Optional[str] = None
    company_name: Optional[str] = None

    @property
    def supplier_name(self) -> str:
        """Display name of the supplier (structured terms use their description)."""
        if isinstance(self.supplier, PaymentTerms):
            return self.supplier.description or "Custom payment terms"
        return self.supplier or ""

    @classmethod
    def from_dict(cls, data: dict) -> "Contract":
        # Structured terms take precedence over the free-text supplier name
        terms = _pick(data, "paymentTerms", "payment_terms")
        if isinstance(terms, dict):
            supplier = PaymentTerms.from_dict(terms)
        else:
            supplier = _pick(data, "supplierName", "supplier_name", "supplier")
        rate = _pick(data, "commsUR", "upliftRate", "uplift_rate", default=0)
        contract_id = _pick(data, "contractId", "contract_id", "id")
        return cls(
            lock_in_date=to_date(_pick(data, "lockInDate", "lock_in_date")),
            contract_start_date=to_date(_pick(data, "contractStartDate", "contract_start_date")),
            contract_end_date=to_date(_pick(data, "contractEndDate", "contract_end_date")),
            contract_value=to_decimal(_pick(data, "contractValue", "contract_value")),
            uplift_rate=to_decimal(rate if rate is not None else 0),
            supplier=supplier,
            contract_id=str(contract_id) if contract_id is not None else None,
            company_name=_pick(data, "companyName", "company_name"),
        )


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass(frozen=True)
class PaymentEvent:
    """One projected payment."""

    month: date  # always the first of the month
    amount: Decimal
    payment_type: str


@dataclass(frozen=True)
class ContractProjection:
    """A payment event tagged with the contract it belongs to."""

    event: PaymentEvent
    contract_id: Optional[str] = None
    supplier_name: str = ""
    company_name: str = ""

    @property
    def month(self) -> date:
        return self.event.month

    @property
    def amount(self) -> Decimal:
        return self.event.amount


@dataclass
class ProjectionError:
    """A contract that could not be projected during a batch run."""

    contract_id: Optional[str]
    company_name: Optional[str]
    error: str


@dataclass
class BatchResult:
    """Outcome of projecting many contracts."""

    projections: list = field(default_factory=list)
    regenerated: int = 0
    total: int = 0
    errors: list = field(default_factory=list)


@dataclass
class UpliftCapApplication:
    """Results of the uplift cap step."""

    cap_applied: bool = False
    payable_value: Decimal = Decimal("0")
    arrears_value: Decimal = Decimal("0")
    arrears_events: list = field(default_factory=list)


@dataclass
class LengthTierApplication:
    """Results of the contract-length tier step."""

    tier_applied: bool = False
    term_value: Decimal = Decimal("0")
    overflow_value: Decimal = Decimal("0")


@dataclass
class ProjectionContext:
    """
    Holds all intermediate state while projecting one contract.
    This is the "bag" that flows through the pipeline.
    """

    # Input (immutable during processing)
    contract: Contract
    terms: PaymentTerms
    months_to_csd: int = 0
    contract_length: int = 0

    # Step results (populated as we go)
    active_payments: tuple = ()
    uplift: UpliftCapApplication = field(default_factory=UpliftCapApplication)
    length_tier: LengthTierApplication = field(default_factory=LengthTierApplication)


@dataclass
class MonthTotal:
    """Sum of projected payments in one calendar month."""

    month: date
    amount: Decimal = Decimal("0")
