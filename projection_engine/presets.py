"""
Payment Term Presets

Common supplier payment terms, offered as starting points when a supplier's
terms are authored.
"""

from .models import PaymentTerms, split

DEFAULT_PAYMENT_TERMS = PaymentTerms(
    default_payments=(
        split(80, 'csd', 'after', 1, 'live'),
        split(20, 'ced', 'after', 2, 'reconciliation'),
    ),
    description='80% on live (1 month after CSD), 20% reconciliation (2 months after CED)',
)

PAYMENT_TERM_PRESETS = {
    'standard_80_20_live': PaymentTerms(
        default_payments=(
            split(80, 'csd', 'after', 1, 'live'),
            split(20, 'ced', 'after', 2, 'reconciliation'),
        ),
        description='80% live (CSD+1), 20% reconciliation (CED+2)',
    ),
    'standard_80_20_signature': PaymentTerms(
        default_payments=(
            split(80, 'lock_in', 'after', 1, 'signature'),
            split(20, 'ced', 'after', 2, 'reconciliation'),
        ),
        description='80% signature (Lock-in+1), 20% reconciliation (CED+2)',
    ),
    'standard_70_30_live': PaymentTerms(
        default_payments=(
            split(70, 'csd', 'after', 1, 'live'),
            split(30, 'ced', 'after', 2, 'reconciliation'),
        ),
        description='70% live (CSD+1), 30% reconciliation (CED+2)',
    ),
    'standard_50_30_20': PaymentTerms(
        default_payments=(
            split(50, 'lock_in', 'after', 1, 'signature'),
            split(30, 'csd', 'at', 0, 'live'),
            split(20, 'ced', 'after', 2, 'reconciliation'),
        ),
        description='50% signature (Lock-in+1), 30% live (CSD), 20% reconciliation (CED+2)',
    ),
    'standard_40_40_20': PaymentTerms(
        default_payments=(
            split(40, 'lock_in', 'at', 0, 'signature'),
            split(40, 'csd', 'at', 0, 'live'),
            split(20, 'ced', 'at', 0, 'reconciliation'),
        ),
        description='40% signature (Lock-in), 40% live (CSD), 20% reconciliation (CED)',
    ),
    'standard_20_60_20': PaymentTerms(
        default_payments=(
            split(20, 'lock_in', 'at', 0, 'signature'),
            split(60, 'csd', 'at', 0, 'live'),
            split(20, 'ced', 'after', 2, 'reconciliation'),
        ),
        description='20% signature (Lock-in), 60% live (CSD), 20% reconciliation (CED+2)',
    ),
}
