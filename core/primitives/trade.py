"""
Tradebook Trade Primitives — Purchase & Sale Events
=====================================================
Engine: Core Primitives

Purchases bring stock in, sales take it out. Both are append-only
events: once recorded they are never edited, and current stock is
always re-derived from the full list of them.

RULES:
- quantity is a positive integer
- total_value == quantity * rate (at currency precision)
- grand_total == total_value + gst_amount
- A sale keeps the selling_rate it was recorded at; later product
  price edits never rewrite history
- Several line items may share one invoice_no

This file contains NO persistence logic.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from core.primitives.money import (
    ZERO,
    check_money,
    check_rate,
    money_equal,
    percent_of,
    quantize_money,
    to_decimal,
)


def _validate_line(
    *,
    entry_id: Any,
    invoice_no: str,
    product_id: str,
    quantity: Any,
    rate: Decimal,
    total_value: Decimal,
    gst_amount: Decimal,
    grand_total: Decimal,
    txn_date: Any,
    rate_name: str,
) -> None:
    if not isinstance(entry_id, uuid.UUID):
        raise ValueError("entry_id must be UUID.")
    if not invoice_no or not isinstance(invoice_no, str):
        raise ValueError("invoice_no must be a non-empty string.")
    if not product_id or not isinstance(product_id, str):
        raise ValueError("product_id must be a non-empty string.")
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValueError("quantity must be positive integer.")
    if rate < ZERO:
        raise ValueError(f"{rate_name} cannot be negative.")
    if gst_amount < ZERO:
        raise ValueError("gst_amount cannot be negative.")
    check_rate(rate, rate_name)
    check_money(total_value, "total_value")
    check_money(gst_amount, "gst_amount")
    check_money(grand_total, "grand_total")
    if not money_equal(total_value, rate * quantity):
        raise ValueError(
            f"total_value {total_value} != quantity * {rate_name} "
            f"({quantity} * {rate})."
        )
    if not money_equal(grand_total, total_value + gst_amount):
        raise ValueError(
            f"grand_total {grand_total} != total_value + gst_amount "
            f"({total_value} + {gst_amount})."
        )
    if isinstance(txn_date, datetime) or not isinstance(txn_date, date):
        raise ValueError("date must be a calendar date (datetime.date).")


def _line_totals(quantity: int, rate: Decimal, gst_percent: Decimal):
    total_value = quantize_money(rate * quantity)
    gst_amount = quantize_money(percent_of(total_value, gst_percent))
    return total_value, gst_amount, total_value + gst_amount


# ══════════════════════════════════════════════════════════════
# PURCHASE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Purchase:
    """
    Inbound stock event (one invoice line).

    Fields:
        entry_id:      Unique identifier of this line
        invoice_no:    Supplier invoice, shared across lines
        supplier:      Supplier name
        product_id:    Product received
        quantity:      Units received (> 0)
        purchase_rate: Cost per unit on this invoice
        total_value:   quantity * purchase_rate
        gst_amount:    Input tax on total_value
        grand_total:   total_value + gst_amount
        date:          Transaction date
        created_at:    When the line was recorded (optional)
        inter_state:   Inter-state supply (IGST) instead of CGST+SGST
    """
    entry_id: uuid.UUID
    invoice_no: str
    supplier: str
    product_id: str
    quantity: int
    purchase_rate: Decimal
    total_value: Decimal
    gst_amount: Decimal
    grand_total: Decimal
    date: date
    created_at: Optional[datetime] = None
    inter_state: bool = False

    def __post_init__(self):
        for name in ("purchase_rate", "total_value", "gst_amount", "grand_total"):
            object.__setattr__(self, name, to_decimal(getattr(self, name), name))
        _validate_line(
            entry_id=self.entry_id,
            invoice_no=self.invoice_no,
            product_id=self.product_id,
            quantity=self.quantity,
            rate=self.purchase_rate,
            total_value=self.total_value,
            gst_amount=self.gst_amount,
            grand_total=self.grand_total,
            txn_date=self.date,
            rate_name="purchase_rate",
        )

    @classmethod
    def record(
        cls,
        *,
        invoice_no: str,
        supplier: str,
        product_id: str,
        quantity: int,
        purchase_rate: Any,
        gst_percent: Any,
        date: date,
        entry_id: Optional[uuid.UUID] = None,
        created_at: Optional[datetime] = None,
        inter_state: bool = False,
    ) -> Purchase:
        """Build a purchase line, deriving value, tax and grand total."""
        rate = to_decimal(purchase_rate, "purchase_rate")
        total_value, gst_amount, grand_total = _line_totals(
            quantity, rate, to_decimal(gst_percent, "gst_percent"),
        )
        return cls(
            entry_id=entry_id or uuid.uuid4(),
            invoice_no=invoice_no,
            supplier=supplier,
            product_id=product_id,
            quantity=quantity,
            purchase_rate=rate,
            total_value=total_value,
            gst_amount=gst_amount,
            grand_total=grand_total,
            date=date,
            created_at=created_at,
            inter_state=inter_state,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entry_id": str(self.entry_id),
            "invoice_no": self.invoice_no,
            "supplier": self.supplier,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "purchase_rate": str(self.purchase_rate),
            "total_value": str(self.total_value),
            "gst_amount": str(self.gst_amount),
            "grand_total": str(self.grand_total),
            "date": self.date.isoformat(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "inter_state": self.inter_state,
        }


# ══════════════════════════════════════════════════════════════
# SALE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Sale:
    """
    Outbound stock event (one invoice line).

    Mirrors Purchase with customer and selling_rate. The recorded
    selling_rate is what profit/loss uses, not the product's current
    price.
    """
    entry_id: uuid.UUID
    invoice_no: str
    customer: str
    product_id: str
    quantity: int
    selling_rate: Decimal
    total_value: Decimal
    gst_amount: Decimal
    grand_total: Decimal
    date: date
    created_at: Optional[datetime] = None
    inter_state: bool = False

    def __post_init__(self):
        for name in ("selling_rate", "total_value", "gst_amount", "grand_total"):
            object.__setattr__(self, name, to_decimal(getattr(self, name), name))
        _validate_line(
            entry_id=self.entry_id,
            invoice_no=self.invoice_no,
            product_id=self.product_id,
            quantity=self.quantity,
            rate=self.selling_rate,
            total_value=self.total_value,
            gst_amount=self.gst_amount,
            grand_total=self.grand_total,
            txn_date=self.date,
            rate_name="selling_rate",
        )

    @classmethod
    def record(
        cls,
        *,
        invoice_no: str,
        customer: str,
        product_id: str,
        quantity: int,
        selling_rate: Any,
        gst_percent: Any,
        date: date,
        entry_id: Optional[uuid.UUID] = None,
        created_at: Optional[datetime] = None,
        inter_state: bool = False,
    ) -> Sale:
        """Build a sale line, deriving value, tax and grand total."""
        rate = to_decimal(selling_rate, "selling_rate")
        total_value, gst_amount, grand_total = _line_totals(
            quantity, rate, to_decimal(gst_percent, "gst_percent"),
        )
        return cls(
            entry_id=entry_id or uuid.uuid4(),
            invoice_no=invoice_no,
            customer=customer,
            product_id=product_id,
            quantity=quantity,
            selling_rate=rate,
            total_value=total_value,
            gst_amount=gst_amount,
            grand_total=grand_total,
            date=date,
            created_at=created_at,
            inter_state=inter_state,
        )

    @property
    def sales_value(self) -> Decimal:
        """Revenue at the recorded rate (quantity * selling_rate)."""
        return self.selling_rate * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entry_id": str(self.entry_id),
            "invoice_no": self.invoice_no,
            "customer": self.customer,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "selling_rate": str(self.selling_rate),
            "total_value": str(self.total_value),
            "gst_amount": str(self.gst_amount),
            "grand_total": str(self.grand_total),
            "date": self.date.isoformat(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "inter_state": self.inter_state,
        }
