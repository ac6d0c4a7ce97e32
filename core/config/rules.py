"""
Tradebook Core Config — Admin-Configurable Tax Rules
======================================================
Tax rates and supply rules come from admin-configurable data, not
from source code. The GST engine and the transaction builders read
rates from here when a product does not carry its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Protocol, Tuple

from core.primitives.money import (
    HUNDRED,
    ZERO,
    percent_of,
    quantize_money,
    to_decimal,
)

SUPPLY_INTRA_STATE = "INTRA_STATE"
SUPPLY_INTER_STATE = "INTER_STATE"


# ══════════════════════════════════════════════════════════════
# TAX RULE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TaxRule:
    """
    GST slab rule.

    rate_percent is a percentage (18 means 18%). Intra-state supplies
    split the tax equally into CGST and SGST; inter-state supplies
    carry it whole as IGST.
    """

    tax_type: str  # GST | CESS
    rate_percent: Decimal
    applies_to: Tuple[str, ...] = ()  # product categories
    exemptions: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        rate = to_decimal(self.rate_percent, "rate_percent")
        if not ZERO <= rate <= HUNDRED:
            raise ValueError(
                f"Tax rate must be between 0 and 100, got {rate}."
            )
        object.__setattr__(self, "rate_percent", rate)

    def compute_tax(self, amount: Decimal) -> Decimal:
        """Compute tax amount for a given taxable value."""
        return quantize_money(percent_of(amount, self.rate_percent))

    def is_exempt(self, category: str) -> bool:
        return category in self.exemptions

    def covers(self, category: str) -> bool:
        if self.is_exempt(category):
            return False
        return not self.applies_to or category in self.applies_to


def split_tax(tax_amount: Decimal, supply_type: str) -> Tuple[Decimal, Decimal, Decimal]:
    """Return (igst, cgst, sgst) for a tax amount and supply type."""
    if supply_type == SUPPLY_INTER_STATE:
        return tax_amount, ZERO, ZERO
    if supply_type != SUPPLY_INTRA_STATE:
        raise ValueError(f"Unknown supply type '{supply_type}'.")
    half = tax_amount / 2
    return ZERO, half, half


# ══════════════════════════════════════════════════════════════
# CONFIG STORE PROTOCOL
# ══════════════════════════════════════════════════════════════

class ConfigStore(Protocol):
    """
    Protocol for admin-configured rule storage.

    Implementations may back this with a database, file, or in-memory store.
    """

    def get_tax_rules(self, tax_type: str) -> list[TaxRule]:
        ...  # pragma: no cover

    def rule_for_category(
        self, category: str, tax_type: str = "GST"
    ) -> Optional[TaxRule]:
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IN-MEMORY CONFIG STORE (for testing / bootstrap)
# ══════════════════════════════════════════════════════════════

class InMemoryConfigStore:
    """Simple in-memory config store for testing and bootstrap."""

    def __init__(self) -> None:
        self._tax_rules: list[TaxRule] = []

    def add_tax_rule(self, rule: TaxRule) -> None:
        self._tax_rules.append(rule)

    def get_tax_rules(self, tax_type: str) -> list[TaxRule]:
        return [r for r in self._tax_rules if r.tax_type == tax_type]

    def rule_for_category(
        self, category: str, tax_type: str = "GST"
    ) -> Optional[TaxRule]:
        """First rule of tax_type covering category, in insertion order."""
        for rule in self.get_tax_rules(tax_type):
            if rule.covers(category):
                return rule
        return None
