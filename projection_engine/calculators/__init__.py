"""
Calculators Package

Provides all calculation components for payment projection.
"""

from .conditions import ConditionEvaluator
from .contract_length import ContractLengthSplitter
from .splits import SplitCalculator
from .uplift_cap import UpliftCapEnforcer

__all__ = [
    "ConditionEvaluator",
    "UpliftCapEnforcer",
    "ContractLengthSplitter",
    "SplitCalculator",
]
