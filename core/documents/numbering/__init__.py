"""
Tradebook Documents - Numbering Public API
=============================================
"""

from core.documents.numbering.engine import (
    VOUCHER_PREFIXES,
    count_of_type,
    generate_document_number,
    invoice_policy,
    next_invoice_no,
    next_party_id,
    next_product_id,
    next_voucher_number,
    party_id_policy,
    product_id_policy,
    voucher_policy,
)
from core.documents.numbering.models import (
    DOC_PARTY,
    DOC_PRODUCT,
    DOC_PURCHASE_INVOICE,
    DOC_SALE_INVOICE,
    DOC_VOUCHER,
    VALID_DOC_TYPES,
    NumberingPolicy,
)

__all__ = [
    "NumberingPolicy",
    "DOC_PARTY",
    "DOC_PRODUCT",
    "DOC_PURCHASE_INVOICE",
    "DOC_SALE_INVOICE",
    "DOC_VOUCHER",
    "VALID_DOC_TYPES",
    "VOUCHER_PREFIXES",
    "count_of_type",
    "generate_document_number",
    "invoice_policy",
    "voucher_policy",
    "product_id_policy",
    "next_invoice_no",
    "next_voucher_number",
    "next_product_id",
    "next_party_id",
    "party_id_policy",
]
