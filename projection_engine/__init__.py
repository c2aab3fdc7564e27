"""
COMMISSION PROJECTION ENGINE
Projects when, and how much, supplier commission is paid on each contract.
"""

from .models import Contract, PaymentEvent, PaymentTerms
from .processor import ScheduleCalculator, calculate_payment_projections
from .resolver import RuleResolver

__all__ = [
    'ScheduleCalculator',
    'RuleResolver',
    'Contract',
    'PaymentEvent',
    'PaymentTerms',
    'calculate_payment_projections',
]
