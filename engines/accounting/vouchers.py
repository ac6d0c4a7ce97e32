"""
Tradebook Accounting Engine — Voucher Builders & Chart of Ledgers
===================================================================
Engine: Accounting

Turns trade events into balanced vouchers and provides the standard
ledger set a new business starts with.

Sales voucher:
    Dr  customer ledger    grand_total
    Cr  Sales A/c          total_value
    Cr  GST Payable        gst_amount

Purchase voucher:
    Dr  Purchases A/c      total_value
    Dr  GST Input Credit   gst_amount
    Cr  supplier ledger    grand_total

A zero GST amount produces no tax entry.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional, Tuple

from core.primitives.ledger import (
    EntrySide,
    Ledger,
    LedgerEntry,
    LedgerGroup,
    Voucher,
    VoucherType,
)
from core.primitives.money import ZERO
from core.primitives.trade import Purchase, Sale

LEDGER_CAPITAL = "capital"
LEDGER_CASH = "cash-in-hand"
LEDGER_BANK = "bank-account"
LEDGER_STOCK = "stock-in-hand"
LEDGER_SUNDRY_DEBTORS = "sundry-debtors"
LEDGER_SUNDRY_CREDITORS = "sundry-creditors"
LEDGER_GST_PAYABLE = "gst-payable"
LEDGER_GST_INPUT = "gst-input-credit"
LEDGER_CGST_PAYABLE = "cgst-payable"
LEDGER_SGST_PAYABLE = "sgst-payable"
LEDGER_IGST_PAYABLE = "igst-payable"
LEDGER_SALES = "sales"
LEDGER_SALES_DISCOUNT = "sales-discount-allowed"
LEDGER_PURCHASES = "purchases"
LEDGER_PURCHASE_DISCOUNT = "purchase-discount-received"

_STANDARD_LEDGERS: Tuple[Tuple[str, str, LedgerGroup], ...] = (
    (LEDGER_CASH, "Cash-in-Hand", LedgerGroup.CASH_IN_HAND),
    (LEDGER_BANK, "Bank Account", LedgerGroup.BANK_ACCOUNTS),
    (LEDGER_STOCK, "Stock-in-Hand", LedgerGroup.CURRENT_ASSETS),
    (LEDGER_SUNDRY_DEBTORS, "Sundry Debtors", LedgerGroup.SUNDRY_DEBTORS),
    (LEDGER_SUNDRY_CREDITORS, "Sundry Creditors", LedgerGroup.SUNDRY_CREDITORS),
    (LEDGER_GST_PAYABLE, "GST Payable", LedgerGroup.DUTIES_AND_TAXES),
    (LEDGER_GST_INPUT, "GST Input Credit", LedgerGroup.DUTIES_AND_TAXES),
    (LEDGER_CGST_PAYABLE, "CGST Payable", LedgerGroup.DUTIES_AND_TAXES),
    (LEDGER_SGST_PAYABLE, "SGST Payable", LedgerGroup.DUTIES_AND_TAXES),
    (LEDGER_IGST_PAYABLE, "IGST Payable", LedgerGroup.DUTIES_AND_TAXES),
    (LEDGER_SALES, "Sales A/c", LedgerGroup.DIRECT_INCOMES),
    (LEDGER_SALES_DISCOUNT, "Sales Discount Allowed", LedgerGroup.INDIRECT_EXPENSES),
    (LEDGER_PURCHASES, "Purchases A/c", LedgerGroup.DIRECT_EXPENSES),
    (LEDGER_PURCHASE_DISCOUNT, "Purchase Discount Received", LedgerGroup.INDIRECT_INCOMES),
    ("interest-received", "Interest Received", LedgerGroup.INDIRECT_INCOMES),
    ("commission-received", "Commission Received", LedgerGroup.INDIRECT_INCOMES),
    ("rent-expense", "Rent Expense", LedgerGroup.INDIRECT_EXPENSES),
    ("salary-expense", "Salary Expense", LedgerGroup.INDIRECT_EXPENSES),
    ("electricity-expense", "Electricity Expense", LedgerGroup.INDIRECT_EXPENSES),
    ("telephone-expense", "Telephone Expense", LedgerGroup.INDIRECT_EXPENSES),
    ("advertising-expense", "Advertising Expense", LedgerGroup.INDIRECT_EXPENSES),
    ("travelling-expense", "Travelling Expense", LedgerGroup.INDIRECT_EXPENSES),
    ("office-expense", "Office Expense", LedgerGroup.INDIRECT_EXPENSES),
    ("bank-charges", "Bank Charges", LedgerGroup.INDIRECT_EXPENSES),
)


def default_ledgers(business_name: str) -> Tuple[Ledger, ...]:
    """Standard chart of ledgers, all opening at zero."""
    if not business_name or not isinstance(business_name, str):
        raise ValueError("business_name must be a non-empty string.")
    capital = Ledger(
        ledger_id=LEDGER_CAPITAL,
        name=f"{business_name} Capital A/c",
        group=LedgerGroup.CAPITAL_ACCOUNT,
    )
    return (capital,) + tuple(
        Ledger(ledger_id=ledger_id, name=name, group=group)
        for ledger_id, name, group in _STANDARD_LEDGERS
    )


# ══════════════════════════════════════════════════════════════
# ENTRY BUILDERS
# ══════════════════════════════════════════════════════════════

def sales_voucher_entries(
    sale: Sale,
    *,
    party_ledger_id: str,
    product_name: str = "",
    sales_ledger_id: str = LEDGER_SALES,
    tax_ledger_id: str = LEDGER_GST_PAYABLE,
) -> Tuple[LedgerEntry, ...]:
    what = product_name or sale.product_id
    entries: List[LedgerEntry] = [
        LedgerEntry(
            ledger_id=party_ledger_id,
            side=EntrySide.DEBIT,
            amount=sale.grand_total,
            ledger_name=sale.customer,
            description=f"Sale of {sale.quantity} units of {what}",
        ),
        LedgerEntry(
            ledger_id=sales_ledger_id,
            side=EntrySide.CREDIT,
            amount=sale.total_value,
            description=f"Sales of {sale.quantity} units of {what}",
        ),
    ]
    if sale.gst_amount > ZERO:
        entries.append(LedgerEntry(
            ledger_id=tax_ledger_id,
            side=EntrySide.CREDIT,
            amount=sale.gst_amount,
            description="Output GST on sales",
        ))
    return tuple(entries)


def purchase_voucher_entries(
    purchase: Purchase,
    *,
    party_ledger_id: str,
    product_name: str = "",
    purchases_ledger_id: str = LEDGER_PURCHASES,
    tax_ledger_id: str = LEDGER_GST_INPUT,
) -> Tuple[LedgerEntry, ...]:
    what = product_name or purchase.product_id
    entries: List[LedgerEntry] = [
        LedgerEntry(
            ledger_id=purchases_ledger_id,
            side=EntrySide.DEBIT,
            amount=purchase.total_value,
            description=f"Purchase of {purchase.quantity} units of {what}",
        ),
    ]
    if purchase.gst_amount > ZERO:
        entries.append(LedgerEntry(
            ledger_id=tax_ledger_id,
            side=EntrySide.DEBIT,
            amount=purchase.gst_amount,
            description="Input GST on purchase",
        ))
    entries.append(LedgerEntry(
        ledger_id=party_ledger_id,
        side=EntrySide.CREDIT,
        amount=purchase.grand_total,
        ledger_name=purchase.supplier,
        description=f"Purchase from {purchase.supplier}",
    ))
    return tuple(entries)


# ══════════════════════════════════════════════════════════════
# VOUCHER BUILDERS
# ══════════════════════════════════════════════════════════════

def build_sales_voucher(
    sale: Sale,
    *,
    party_ledger_id: str,
    voucher_number: str,
    created_at: datetime,
    product_name: str = "",
    sales_ledger_id: str = LEDGER_SALES,
    tax_ledger_id: str = LEDGER_GST_PAYABLE,
    voucher_id: Optional[uuid.UUID] = None,
) -> Voucher:
    return Voucher(
        voucher_id=voucher_id or uuid.uuid4(),
        voucher_type=VoucherType.SALES,
        voucher_number=voucher_number,
        date=sale.date,
        narration=f"Sales invoice {sale.invoice_no}",
        entries=sales_voucher_entries(
            sale,
            party_ledger_id=party_ledger_id,
            product_name=product_name,
            sales_ledger_id=sales_ledger_id,
            tax_ledger_id=tax_ledger_id,
        ),
        created_at=created_at,
        reference_number=sale.invoice_no,
        party_name=sale.customer,
    )


def build_purchase_voucher(
    purchase: Purchase,
    *,
    party_ledger_id: str,
    voucher_number: str,
    created_at: datetime,
    product_name: str = "",
    purchases_ledger_id: str = LEDGER_PURCHASES,
    tax_ledger_id: str = LEDGER_GST_INPUT,
    voucher_id: Optional[uuid.UUID] = None,
) -> Voucher:
    return Voucher(
        voucher_id=voucher_id or uuid.uuid4(),
        voucher_type=VoucherType.PURCHASE,
        voucher_number=voucher_number,
        date=purchase.date,
        narration=f"Purchase invoice {purchase.invoice_no}",
        entries=purchase_voucher_entries(
            purchase,
            party_ledger_id=party_ledger_id,
            product_name=product_name,
            purchases_ledger_id=purchases_ledger_id,
            tax_ledger_id=tax_ledger_id,
        ),
        created_at=created_at,
        reference_number=purchase.invoice_no,
        party_name=purchase.supplier,
    )
