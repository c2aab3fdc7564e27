"""
Supplier Catalogue and Named Payment Terms

The fixed list of suppliers accepted on import, and the payment terms each
supplier name resolves to. Terms are plain data interpreted by the
ScheduleCalculator; no supplier has code of its own.
"""

from decimal import Decimal

from .models import ConditionalRule, PaymentTerms, split
from .presets import DEFAULT_PAYMENT_TERMS

# =============================================================================
# NAMED PAYMENT TERMS
# =============================================================================

BRITISH_GAS_ACQUISITION = PaymentTerms(
    default_payments=(
        split(70, 'csd', 'after', 1, 'live'),
        split(30, 'ced', 'after', 2, 'reconciliation'),
    ),
    description='70% on live (month after CSD), 30% reconciliation 2 months after CED',
)

BRITISH_GAS_RENEWAL = PaymentTerms(
    default_payments=(
        split(70, 'lock_in', 'after', 1, 'signature'),
        split(30, 'ced', 'after', 2, 'reconciliation'),
    ),
    description='70% on signature (month after lock-in), 30% reconciliation 2 months after CED',
)

BROOK_GREEN = PaymentTerms(
    default_payments=(
        split(80, 'csd', 'after', 1, 'live'),
        split(20, 'ced', 'after', 2, 'reconciliation'),
    ),
    uplift_cap=Decimal('1.5'),
    description='80% on live, 20% reconciliation. Anything over 1.5p/kWh paid monthly in arrears',
)

CORONA_UPFRONT = PaymentTerms(
    default_payments=(
        split(80, 'lock_in', 'after', 1, 'signature'),
        split(20, 'ced', 'after', 2, 'reconciliation'),
    ),
    conditional_rules=(
        ConditionalRule(
            condition='months_to_csd',
            operator='gt',
            value=Decimal(18),
            payments=(
                split(80, 'csd', 'before', 18, 'signature'),
                split(20, 'ced', 'after', 2, 'reconciliation'),
            ),
        ),
    ),
    description='80% signature (18 months before CSD if >18 months out), 20% reconciliation 2 months after CED',
)

# Long contracts reconcile the first 36 months at CSD+38, two months of
# collection lag after the 36-month boundary.
CROWN_GAS_AND_POWER = PaymentTerms(
    default_payments=(
        split(80, 'csd', 'after', 1, 'live'),
        split(20, 'ced', 'after', 2, 'reconciliation'),
    ),
    conditional_rules=(
        ConditionalRule(
            condition='contract_length',
            operator='gt',
            value=Decimal(36),
            payments=(
                split(80, 'csd', 'after', 1, 'live'),
                split(20, 'csd', 'after', 38, 'reconciliation'),
            ),
        ),
    ),
    max_contract_months=36,
    overflow_payments=(
        split(80, 'csd', 'after', 38, 'live'),
        split(20, 'ced', 'after', 2, 'reconciliation'),
    ),
    description='80% live up to 36 months, longer contracts reconciled at 36 months then remainder paid 80%',
)

ENGIE_ACQUISITION = PaymentTerms(
    default_payments=(
        split(50, 'lock_in', 'after', 1, 'signature'),
        split(30, 'csd', 'at', 0, 'live'),
        split(20, 'ced', 'after', 2, 'reconciliation'),
    ),
    conditional_rules=(
        ConditionalRule(
            condition='months_to_csd',
            operator='gt',
            value=Decimal(24),
            payments=(
                split(80, 'csd', 'at', 0, 'live'),
                split(20, 'ced', 'after', 2, 'reconciliation'),
            ),
        ),
    ),
    description='50% signature, 30% live, 20% 2 months after CED. If >2 years to CSD from lock-in, paid 80% live',
)

EONNEXT_ACQUISITION = PaymentTerms(
    default_payments=(
        split(80, 'csd', 'at', 0, 'live'),
        split(20, 'ced', 'after', 2, 'reconciliation'),
    ),
    description='80% live (at CSD month), 20% 2 months after CED',
)

EONNEXT_RENEWAL = PaymentTerms(
    default_payments=(
        split(80, 'lock_in', 'after', 1, 'signature'),
        split(20, 'ced', 'after', 2, 'reconciliation'),
    ),
    description='80% signature (1 month after lock-in), 20% 2 months after CED',
)

NPOWER = PaymentTerms(
    default_payments=(
        split(40, 'lock_in', 'at', 0, 'signature'),
        split(40, 'csd', 'at', 0, 'live'),
        split(20, 'ced', 'at', 0, 'reconciliation'),
    ),
    conditional_rules=(
        ConditionalRule(
            condition='months_to_csd',
            operator='lte',
            value=Decimal(24),
            payments=(
                split(80, 'lock_in', 'at', 0, 'signature'),
                split(20, 'ced', 'at', 0, 'reconciliation'),
            ),
        ),
    ),
    description='<=24 months to CSD: 80% at lock-in, 20% at CED. >24 months: 40-40-20',
)

# Paid at month end after lock-in/CSD + 15 days, CED + 6 weeks; projected by month.
SMARTEST_ENERGY = PaymentTerms(
    default_payments=(
        split(20, 'lock_in', 'at', 0, 'signature'),
        split(60, 'csd', 'at', 0, 'live'),
        split(20, 'ced', 'after', 2, 'reconciliation'),
    ),
    description='20% signature, 60% live (~15 days after), 20% 6 weeks after CED',
)

TOTALENERGIES_ACQUISITION = PaymentTerms(
    default_payments=(
        split(40, 'csd', 'before', 12, 'signature'),
        split(40, 'csd', 'at', 0, 'live'),
        split(20, 'ced', 'at', 0, 'reconciliation'),
    ),
    conditional_rules=(
        ConditionalRule(
            condition='months_to_csd',
            operator='lte',
            value=Decimal(12),
            payments=(
                split(40, 'lock_in', 'at', 0, 'signature'),
                split(40, 'csd', 'at', 0, 'live'),
                split(20, 'ced', 'at', 0, 'reconciliation'),
            ),
        ),
    ),
    description='<=12 months to CSD: 40% at lock-in, otherwise 40% 12 months before CSD; 40% at CSD, 20% at CED',
)

TOTALENERGIES_RENEWAL = PaymentTerms(
    default_payments=(
        split(80, 'lock_in', 'at', 0, 'signature'),
        split(20, 'ced', 'at', 0, 'reconciliation'),
    ),
    description='80% at lock-in month, 20% at CED month',
)

# Full (lower-cased) supplier names
EXACT_TERMS = {
    'british gas acquisition': BRITISH_GAS_ACQUISITION,
    'british gas renewal': BRITISH_GAS_RENEWAL,
    'corona acquisition upfront': CORONA_UPFRONT,
    'corona renewal upfront': CORONA_UPFRONT,
    'corona acquisition no upfront': DEFAULT_PAYMENT_TERMS,
    'corona renewal no upfront': DEFAULT_PAYMENT_TERMS,
    'eonnext acquisition': EONNEXT_ACQUISITION,
    'eonnext renewal': EONNEXT_RENEWAL,
}

# Name prefixes covering every Upfront / No Upfront / Acquisition / Renewal variant
PREFIX_TERMS = {
    'brook green': BROOK_GREEN,
    'crown gas & power': CROWN_GAS_AND_POWER,
    'engie acquisition': ENGIE_ACQUISITION,
    'engie renewal': DEFAULT_PAYMENT_TERMS,
    'npower': NPOWER,
    'smartest energy': SMARTEST_ENERGY,
    'totalenergies acquisition': TOTALENERGIES_ACQUISITION,
    'totalenergies renewal': TOTALENERGIES_RENEWAL,
}

# =============================================================================
# SUPPLIER CATALOGUE (import validation)
# =============================================================================

VALID_SUPPLIERS = (
    'Airticity Acquisition',
    'Airticity Renewal',
    'British Gas Acquisition',
    'British Gas Renewal',
    'Brook Green Acquisition No Upfront',
    'Brook Green Acquisition Upfront',
    'Brook Green Renewal No Upfront',
    'Brook Green Renewal Upfront',
    'Corona Acquisition No Upfront',
    'Corona Acquisition Upfront',
    'Corona Renewal No Upfront',
    'Corona Renewal Upfront',
    'Crown Gas & Power Acquisition No Upfront',
    'Crown Gas & Power Acquisition Upfront',
    'Crown Gas & Power Renewal No Upfront',
    'Crown Gas & Power Renewal Upfront',
    'D-Energi Acquisition',
    'D-Energi Renewal',
    'Drax Acquisition',
    'Drax Renewal',
    'Dyce Energy Acquisition',
    'Dyce Energy Renewal',
    'Ecotricity Acquisition',
    'Ecotricity Renewal',
    'EDF Acquisition',
    'EDF Renewal',
    'Engie Acquisition No Upfront',
    'Engie Acquisition Upfront',
    'Engie Renewal No Upfront',
    'Engie Renewal Upfront',
    'EonNext Acquisition',
    'EonNext Renewal',
    'Jellyfish Acquisition',
    'Jellyfish Renewal',
    'Npower Acquisition No Upfront',
    'Npower Acquisition Upfront',
    'Npower Renewal No Upfront',
    'Npower Renewal Upfront',
    'Pozitive Energy Acquisition',
    'Pozitive Energy Renewal',
    'Regent Gas Acquisition',
    'Regent Gas Renewal',
    'Scottish Power Acquisition',
    'Scottish Power Renewal',
    'Sefe Acquisition',
    'Sefe Renewal',
    'Shell Energy Acquisition',
    'Shell Energy Renewal',
    'Smartest Energy Acquisition',
    'Smartest Energy Renewal',
    'SSE Acquisition',
    'SSE Renewal',
    'TEM-Energy Acquisition',
    'TEM-Energy Renewal',
    'Totalenergies Acquisition No Upfront',
    'Totalenergies Acquisition Upfront',
    'Totalenergies Renewal No Upfront',
    'Totalenergies Renewal Upfront',
    'United Gas & Power Acquisition',
    'United Gas & Power Renewal',
    'Utilita Acquisition',
    'Utilita Renewal',
    'Valda Energy Acquisition',
    'Valda Energy Renewal',
    'Yorkshire Gas & Power Acquisition',
    'Yorkshire Gas & Power Renewal',
    'Yu Energy Acquisition',
    'Yu Energy Renewal',
)

_SUPPLIER_LOOKUP = {name.lower().strip(): name for name in VALID_SUPPLIERS}

# Old-style names mapped to their current variants, for import error hints
LEGACY_SUPPLIER_ALIASES = {
    'british gas': ['British Gas Acquisition', 'British Gas Renewal'],
    'brook green supply': [
        'Brook Green Acquisition No Upfront', 'Brook Green Acquisition Upfront',
        'Brook Green Renewal No Upfront', 'Brook Green Renewal Upfront',
    ],
    'corona': ['Corona Acquisition No Upfront', 'Corona Renewal No Upfront'],
    'corona upfront': ['Corona Acquisition Upfront', 'Corona Renewal Upfront'],
    'crown gas & power': ['Crown Gas & Power Acquisition No Upfront', 'Crown Gas & Power Renewal No Upfront'],
    'crown gas & power upfront': ['Crown Gas & Power Acquisition Upfront', 'Crown Gas & Power Renewal Upfront'],
    'engie': [
        'Engie Acquisition No Upfront', 'Engie Acquisition Upfront',
        'Engie Renewal No Upfront', 'Engie Renewal Upfront',
    ],
    'engie renewal': ['Engie Renewal No Upfront', 'Engie Renewal Upfront'],
    'eonnext': ['EonNext Acquisition', 'EonNext Renewal'],
    'npower': [
        'Npower Acquisition No Upfront', 'Npower Acquisition Upfront',
        'Npower Renewal No Upfront', 'Npower Renewal Upfront',
    ],
    'npower upfront': ['Npower Acquisition Upfront', 'Npower Renewal Upfront'],
    'npower upfront/npower': ['Npower Acquisition Upfront', 'Npower Acquisition No Upfront'],
    'smartest energy': ['Smartest Energy Acquisition', 'Smartest Energy Renewal'],
    'totalenergies': [
        'Totalenergies Acquisition No Upfront', 'Totalenergies Acquisition Upfront',
        'Totalenergies Renewal No Upfront', 'Totalenergies Renewal Upfront',
    ],
    'total energies': [
        'Totalenergies Acquisition No Upfront', 'Totalenergies Acquisition Upfront',
        'Totalenergies Renewal No Upfront', 'Totalenergies Renewal Upfront',
    ],
}

MAX_SUGGESTIONS = 5


def find_supplier_match(name: str, supplier_names=None):
    """
    Canonical supplier name for name (case-insensitive exact match).

    Matches against the fixed catalogue, or against supplier_names when the
    caller has its own list. Returns None when nothing matches.
    """
    normalized = (name or "").lower().strip()
    if supplier_names is None:
        return _SUPPLIER_LOOKUP.get(normalized)
    for candidate in supplier_names:
        if candidate.lower().strip() == normalized:
            return candidate
    return None


def is_valid_supplier(name: str, supplier_names=None) -> bool:
    return find_supplier_match(name, supplier_names) is not None


def get_suggested_suppliers(name: str, supplier_names=None) -> list:
    """
    Up to five supplier names resembling name.

    Legacy aliases win when using the fixed catalogue; otherwise any name
    containing (or contained in) the input is suggested.
    """
    normalized = (name or "").lower().strip()
    if not normalized:
        return []

    if supplier_names is None:
        legacy = LEGACY_SUPPLIER_ALIASES.get(normalized)
        if legacy:
            return legacy[:MAX_SUGGESTIONS]
        supplier_names = VALID_SUPPLIERS

    matches = [
        candidate for candidate in supplier_names
        if normalized in candidate.lower() or candidate.lower() in normalized
    ]
    return matches[:MAX_SUGGESTIONS]
