"""
Tradebook Documents - Numbering Engine
=========================================
Deterministic number generation for invoices, vouchers and products.

Doctrine:
- Stateless: given the same inputs, always produces the same output.
- The next sequence is "count of existing documents + 1"; callers
  count from their snapshot and pass the date explicitly.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable

from core.documents.numbering.models import (
    DOC_PARTY,
    DOC_PRODUCT,
    DOC_PURCHASE_INVOICE,
    DOC_SALE_INVOICE,
    DOC_VOUCHER,
    NumberingPolicy,
)
from core.primitives.ledger import Voucher, VoucherType

VOUCHER_PREFIXES: Dict[VoucherType, str] = {
    VoucherType.PAYMENT: "PYT",
    VoucherType.RECEIPT: "RCT",
    VoucherType.CONTRA: "CON",
    VoucherType.JOURNAL: "JNL",
    VoucherType.SALES: "SLS",
    VoucherType.PURCHASE: "PUR",
    VoucherType.DEBIT_NOTE: "DBN",
    VoucherType.CREDIT_NOTE: "CRN",
}


def invoice_policy(prefix: str, *, doc_type: str = DOC_SALE_INVOICE) -> NumberingPolicy:
    if doc_type not in (DOC_SALE_INVOICE, DOC_PURCHASE_INVOICE):
        raise ValueError(f"Not an invoice doc_type: {doc_type}")
    return NumberingPolicy(doc_type=doc_type, prefix=prefix, padding=3, period_format="%Y")


def voucher_policy(voucher_type: VoucherType) -> NumberingPolicy:
    return NumberingPolicy(
        doc_type=DOC_VOUCHER,
        prefix=VOUCHER_PREFIXES[voucher_type],
        padding=4,
        period_format="%y%m",
    )


def product_id_policy(prefix: str = "PRD") -> NumberingPolicy:
    return NumberingPolicy(doc_type=DOC_PRODUCT, prefix=prefix, padding=3, separator="")


def party_id_policy(prefix: str) -> NumberingPolicy:
    return NumberingPolicy(doc_type=DOC_PARTY, prefix=prefix, padding=3, separator="")


def generate_document_number(
    *,
    policy: NumberingPolicy,
    sequence: int,
    issued_on: date,
) -> str:
    return policy.format_number(sequence, issued_on)


def next_invoice_no(prefix: str, existing_invoice_nos: Iterable[str], issued_on: date) -> str:
    """Next invoice number; lines sharing an invoice count once."""
    count = len(set(existing_invoice_nos))
    return generate_document_number(
        policy=invoice_policy(prefix),
        sequence=count + 1,
        issued_on=issued_on,
    )


def count_of_type(vouchers: Iterable[Voucher], voucher_type: VoucherType) -> int:
    return sum(1 for v in vouchers if v.voucher_type == voucher_type)


def next_voucher_number(
    voucher_type: VoucherType,
    existing_count: int,
    issued_on: date,
) -> str:
    """existing_count is the number of vouchers of this type already posted."""
    return generate_document_number(
        policy=voucher_policy(voucher_type),
        sequence=existing_count + 1,
        issued_on=issued_on,
    )


def next_product_id(existing_count: int, prefix: str = "PRD") -> str:
    # product ids carry no period part; any date satisfies the signature
    return product_id_policy(prefix).format_number(existing_count + 1, date.min)


def next_party_id(existing_count: int, prefix: str) -> str:
    """existing_count is the number of parties already holding this prefix's role."""
    return party_id_policy(prefix).format_number(existing_count + 1, date.min)
