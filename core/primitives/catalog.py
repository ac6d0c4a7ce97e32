"""
Tradebook Catalog Primitive — Product Master Data
===================================================
Engine: Core Primitives

A Product is the baseline every stock figure is derived from:
opening_stock is the quantity on hand before any recorded purchase
or sale.

RULES:
- product_id is assigned externally and unique per business
- Rates are Decimal (no floats) with at most 4 decimal places;
  gst_percent is within 0..100 at 2 places
- opening_stock and reorder_level are non-negative integers
- Products are immutable values; edits produce a new Product

This file contains NO persistence logic.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Dict

from core.primitives.money import (
    CURRENCY_PLACES,
    HUNDRED,
    ZERO,
    check_rate,
    check_scale,
    to_decimal,
)

EDITABLE_FIELDS = frozenset({
    "name",
    "brand",
    "category",
    "purchase_rate",
    "selling_rate",
    "gst_percent",
    "opening_stock",
    "reorder_level",
})


@dataclass(frozen=True)
class Product:
    """
    Product master record.

    Fields:
        product_id:    User-facing identifier (e.g. "PRD001")
        name:          Display name
        brand:         Brand / manufacturer
        category:      Free-form grouping
        purchase_rate: Default cost per unit
        selling_rate:  Default price per unit
        gst_percent:   GST rate applied on value, 0..100
        opening_stock: Units on hand before the first recorded event
        reorder_level: Low-stock threshold (inclusive)
    """
    product_id: str
    name: str
    purchase_rate: Decimal
    selling_rate: Decimal
    brand: str = ""
    category: str = ""
    gst_percent: Decimal = ZERO
    opening_stock: int = 0
    reorder_level: int = 0

    def __post_init__(self):
        if not self.product_id or not isinstance(self.product_id, str):
            raise ValueError("product_id must be a non-empty string.")
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be a non-empty string.")

        purchase_rate = to_decimal(self.purchase_rate, "purchase_rate")
        selling_rate = to_decimal(self.selling_rate, "selling_rate")
        gst_percent = to_decimal(self.gst_percent, "gst_percent")
        if purchase_rate < ZERO:
            raise ValueError("purchase_rate cannot be negative.")
        if selling_rate < ZERO:
            raise ValueError("selling_rate cannot be negative.")
        if not ZERO <= gst_percent <= HUNDRED:
            raise ValueError(
                f"gst_percent must be between 0 and 100, got {gst_percent}."
            )
        check_rate(purchase_rate, "purchase_rate")
        check_rate(selling_rate, "selling_rate")
        check_scale(gst_percent, CURRENCY_PLACES, HUNDRED + 1, "gst_percent")
        object.__setattr__(self, "purchase_rate", purchase_rate)
        object.__setattr__(self, "selling_rate", selling_rate)
        object.__setattr__(self, "gst_percent", gst_percent)

        if not isinstance(self.opening_stock, int) or self.opening_stock < 0:
            raise ValueError("opening_stock must be a non-negative integer.")
        if not isinstance(self.reorder_level, int) or self.reorder_level < 0:
            raise ValueError("reorder_level must be a non-negative integer.")

    def with_changes(self, **changes: Any) -> Product:
        """Return an edited copy. product_id cannot change."""
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(
                f"Cannot edit product fields: {sorted(unknown)}."
            )
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "brand": self.brand,
            "category": self.category,
            "purchase_rate": str(self.purchase_rate),
            "selling_rate": str(self.selling_rate),
            "gst_percent": str(self.gst_percent),
            "opening_stock": self.opening_stock,
            "reorder_level": self.reorder_level,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Product:
        return cls(
            product_id=data["product_id"],
            name=data["name"],
            brand=data.get("brand", ""),
            category=data.get("category", ""),
            purchase_rate=data["purchase_rate"],
            selling_rate=data["selling_rate"],
            gst_percent=data.get("gst_percent", ZERO),
            opening_stock=data.get("opening_stock", 0),
            reorder_level=data.get("reorder_level", 0),
        )
