"""
Rule Resolver

Maps a supplier identity to the payment terms the calculator runs.
"""

import logging
from typing import Optional, Union

from .models import PaymentTerms
from .presets import DEFAULT_PAYMENT_TERMS
from .suppliers import EXACT_TERMS, PREFIX_TERMS

logger = logging.getLogger(__name__)


class RuleResolver:
    """
    Resolves structured terms or free-text supplier names to PaymentTerms.

    Structured terms are returned as they are. Names are matched
    case-insensitively after trimming: full names first, then name prefixes,
    longest prefix first. Anything unmatched gets the default 80/20 terms,
    so resolution never fails.
    """

    def __init__(self, exact_terms: Optional[dict] = None, prefix_terms: Optional[dict] = None,
                 default_terms: PaymentTerms = DEFAULT_PAYMENT_TERMS):
        self.exact_terms = EXACT_TERMS if exact_terms is None else exact_terms
        self.prefix_terms = PREFIX_TERMS if prefix_terms is None else prefix_terms
        self.default_terms = default_terms
        self._prefixes = sorted(self.prefix_terms, key=len, reverse=True)

    def resolve(self, supplier: Union[str, dict, PaymentTerms, None]) -> PaymentTerms:
        if isinstance(supplier, PaymentTerms):
            return supplier
        if isinstance(supplier, dict):
            return PaymentTerms.from_dict(supplier)

        key = self.match_name(supplier)
        if key is None:
            logger.debug(f"No payment terms for supplier {supplier!r}, using default terms")
            return self.default_terms
        if key in self.exact_terms:
            return self.exact_terms[key]
        return self.prefix_terms[key]

    def match_name(self, name: Optional[str]) -> Optional[str]:
        """Table key matching name, or None when the default terms apply."""
        normalized = (name or "").strip().lower()
        if not normalized:
            return None
        if normalized in self.exact_terms:
            return normalized
        for prefix in self._prefixes:
            if normalized.startswith(prefix):
                return prefix
        return None
