"""
Tradebook Core Config — Application Settings
===============================================
Typed view over the ``TRADEBOOK`` dict in Django settings.

Engines never import django.conf directly; adapters resolve a
TradebookSettings once and pass values down explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from core.primitives.party import PartyRole

DEFAULTS = {
    "BUSINESS_NAME": "Tradebook",
    "CURRENCY": "INR",
    "PURCHASE_INVOICE_PREFIX": "PUR",
    "SALE_INVOICE_PREFIX": "SAL",
    "PRODUCT_ID_PREFIX": "PRD",
    "CUSTOMER_ID_PREFIX": "CUS",
    "SUPPLIER_ID_PREFIX": "SUP",
}


@dataclass(frozen=True)
class TradebookSettings:
    business_name: str
    currency: str
    purchase_invoice_prefix: str
    sale_invoice_prefix: str
    product_id_prefix: str
    customer_id_prefix: str = DEFAULTS["CUSTOMER_ID_PREFIX"]
    supplier_id_prefix: str = DEFAULTS["SUPPLIER_ID_PREFIX"]

    def __post_init__(self):
        if not isinstance(self.currency, str) or len(self.currency) != 3:
            raise ValueError(
                f"currency must be 3-letter ISO 4217 code, "
                f"got '{self.currency}'."
            )
        for name in (
            "purchase_invoice_prefix",
            "sale_invoice_prefix",
            "product_id_prefix",
            "customer_id_prefix",
            "supplier_id_prefix",
        ):
            if not getattr(self, name):
                raise ValueError(f"{name} must be non-empty.")

    @classmethod
    def from_mapping(cls, values: Optional[Mapping[str, Any]]) -> TradebookSettings:
        merged = dict(DEFAULTS)
        merged.update(values or {})
        return cls(
            business_name=merged["BUSINESS_NAME"],
            currency=merged["CURRENCY"],
            purchase_invoice_prefix=merged["PURCHASE_INVOICE_PREFIX"],
            sale_invoice_prefix=merged["SALE_INVOICE_PREFIX"],
            product_id_prefix=merged["PRODUCT_ID_PREFIX"],
            customer_id_prefix=merged["CUSTOMER_ID_PREFIX"],
            supplier_id_prefix=merged["SUPPLIER_ID_PREFIX"],
        )

    def party_id_prefix(self, role: PartyRole) -> str:
        if role == PartyRole.CUSTOMER:
            return self.customer_id_prefix
        return self.supplier_id_prefix


def get_tradebook_settings() -> TradebookSettings:
    """Resolve settings from django.conf (requires configured Django)."""
    from django.conf import settings

    return TradebookSettings.from_mapping(getattr(settings, "TRADEBOOK", None))
