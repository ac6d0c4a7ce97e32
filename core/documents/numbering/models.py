"""
Tradebook Documents - Numbering Models
=========================================
Defines the NumberingPolicy dataclass: how invoice, voucher and
product numbers are formatted.

Doctrine:
- Same policy + sequence + date → same number (deterministic).
- Sequence positions are counted from persisted documents by the caller.
- No random() or current time inside number generation logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

DOC_PURCHASE_INVOICE = "PURCHASE_INVOICE"
DOC_SALE_INVOICE = "SALE_INVOICE"
DOC_VOUCHER = "VOUCHER"
DOC_PRODUCT = "PRODUCT"
DOC_PARTY = "PARTY"

VALID_DOC_TYPES = frozenset({
    DOC_PURCHASE_INVOICE,
    DOC_SALE_INVOICE,
    DOC_VOUCHER,
    DOC_PRODUCT,
    DOC_PARTY,
})


@dataclass(frozen=True)
class NumberingPolicy:
    """
    Declares how document numbers are formatted.

    Fields:
        doc_type:      one of VALID_DOC_TYPES
        prefix:        leading code (e.g. "SAL", "PYT", "PRD")
        padding:       minimum digit width of the sequence ("001")
        period_format: strftime pattern for the period part ("%Y",
                       "%y%m"); empty means no period part
        separator:     joins prefix, period and sequence
    """
    doc_type: str
    prefix: str
    padding: int = 3
    period_format: str = ""
    separator: str = "-"

    def __post_init__(self):
        if self.doc_type not in VALID_DOC_TYPES:
            raise ValueError(
                f"doc_type '{self.doc_type}' is not valid. "
                f"Must be one of: {sorted(VALID_DOC_TYPES)}"
            )
        if not self.prefix or not isinstance(self.prefix, str):
            raise ValueError("prefix must be a non-empty string.")
        if not isinstance(self.padding, int) or self.padding < 1:
            raise ValueError("padding must be int >= 1.")
        if not isinstance(self.period_format, str):
            raise ValueError("period_format must be a string.")
        if not isinstance(self.separator, str):
            raise ValueError("separator must be a string.")

    def format_number(self, sequence: int, issued_on: date) -> str:
        """
        e.g. sequence=7, issued_on=2026-10-19:
            "%Y",   pad 3 → "SAL-2026-007"
            "%y%m", pad 4 → "SLS-2610-0007"
            "",     pad 3, separator "" → "PRD007"
        """
        if isinstance(sequence, bool) or not isinstance(sequence, int) or sequence < 1:
            raise ValueError("sequence must be int >= 1.")
        parts = [self.prefix]
        if self.period_format:
            parts.append(issued_on.strftime(self.period_format))
        parts.append(str(sequence).zfill(self.padding))
        return self.separator.join(parts)
