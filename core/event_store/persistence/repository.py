"""
Tradebook Event Store — Persistence Repository
================================================
Low-level row helpers used by the persistence service: row <->
primitive conversion and per-business queries.

The caller (persistence service) owns all rule checks and
transactional guards.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from django.db.models import Sum

from core.event_store.models import (
    DocumentSequenceRecord,
    LedgerEntryRecord,
    LedgerRecord,
    PartyRecord,
    ProductRecord,
    PurchaseRecord,
    SaleRecord,
    VoucherRecord,
)
from core.primitives.catalog import Product
from core.primitives.ledger import (
    EntrySide,
    Ledger,
    LedgerEntry,
    LedgerGroup,
    Voucher,
    VoucherType,
)
from core.primitives.party import Party, PartyRole
from core.primitives.trade import Purchase, Sale


# ══════════════════════════════════════════════════════════════
# ROW → PRIMITIVE
# ══════════════════════════════════════════════════════════════

def product_from_row(row: ProductRecord) -> Product:
    return Product(
        product_id=row.product_id,
        name=row.name,
        brand=row.brand,
        category=row.category,
        purchase_rate=row.purchase_rate,
        selling_rate=row.selling_rate,
        gst_percent=row.gst_percent,
        opening_stock=row.opening_stock,
        reorder_level=row.reorder_level,
    )


def party_from_row(row: PartyRecord) -> Party:
    return Party(
        party_id=row.party_id,
        role=PartyRole(row.role),
        name=row.name,
        contact_person=row.contact_person,
        email=row.email,
        phone=row.phone,
        address=row.address,
        city=row.city,
        state=row.state,
        pincode=row.pincode,
        gstin=row.gstin,
        opening_balance=row.opening_balance,
    )


def purchase_from_row(row: PurchaseRecord) -> Purchase:
    return Purchase(
        entry_id=row.entry_id,
        invoice_no=row.invoice_no,
        supplier=row.supplier,
        product_id=row.product_id,
        quantity=row.quantity,
        purchase_rate=row.purchase_rate,
        total_value=row.total_value,
        gst_amount=row.gst_amount,
        grand_total=row.grand_total,
        date=row.date,
        created_at=row.created_at,
        inter_state=row.inter_state,
    )


def sale_from_row(row: SaleRecord) -> Sale:
    return Sale(
        entry_id=row.entry_id,
        invoice_no=row.invoice_no,
        customer=row.customer,
        product_id=row.product_id,
        quantity=row.quantity,
        selling_rate=row.selling_rate,
        total_value=row.total_value,
        gst_amount=row.gst_amount,
        grand_total=row.grand_total,
        date=row.date,
        created_at=row.created_at,
        inter_state=row.inter_state,
    )


def ledger_from_row(row: LedgerRecord) -> Ledger:
    return Ledger(
        ledger_id=row.ledger_id,
        name=row.name,
        group=LedgerGroup(row.group),
        opening_balance=row.opening_balance,
        current_balance=row.current_balance,
    )


def voucher_from_row(row: VoucherRecord) -> Voucher:
    """Rebuild a voucher; entries must be prefetched or are queried here."""
    entries = tuple(
        LedgerEntry(
            ledger_id=e.ledger_id,
            side=EntrySide(e.side),
            amount=e.amount,
            ledger_name=e.ledger_name,
            description=e.description,
        )
        for e in sorted(row.entries.all(), key=lambda e: e.position)
    )
    return Voucher(
        voucher_id=row.voucher_id,
        voucher_type=VoucherType(row.voucher_type),
        voucher_number=row.voucher_number,
        date=row.date,
        narration=row.narration,
        entries=entries,
        created_at=row.created_at,
        reference_number=row.reference_number,
        party_name=row.party_name,
    )


# ══════════════════════════════════════════════════════════════
# QUERIES
# ══════════════════════════════════════════════════════════════

def get_product_row(
    business_id: uuid.UUID,
    product_id: str,
    *,
    lock: bool = False,
) -> Optional[ProductRecord]:
    """lock=True takes a row lock for check-then-insert sequences."""
    query = ProductRecord.objects.filter(
        business_id=business_id, product_id=product_id,
    )
    if lock:
        query = query.select_for_update()
    return query.first()


def get_party_row(
    business_id: uuid.UUID,
    party_id: str,
    *,
    lock: bool = False,
) -> Optional[PartyRecord]:
    query = PartyRecord.objects.filter(business_id=business_id, party_id=party_id)
    if lock:
        query = query.select_for_update()
    return query.first()


def lock_sequence(business_id: uuid.UUID, doc_type: str) -> DocumentSequenceRecord:
    """Create-if-missing, then row-lock the sequence for one document kind."""
    DocumentSequenceRecord.objects.get_or_create(business_id=business_id, doc_type=doc_type)
    return DocumentSequenceRecord.objects.select_for_update().get(
        business_id=business_id, doc_type=doc_type,
    )


def invoice_numbers(model, business_id: uuid.UUID) -> List[str]:
    return list(
        model.objects.filter(business_id=business_id).values_list("invoice_no", flat=True)
    )


def quantity_moved(business_id: uuid.UUID, product_id: str) -> Tuple[int, int]:
    """(units purchased, units sold) for one product."""
    purchased = PurchaseRecord.objects.filter(
        business_id=business_id, product_id=product_id,
    ).aggregate(total=Sum("quantity"))["total"] or 0
    sold = SaleRecord.objects.filter(
        business_id=business_id, product_id=product_id,
    ).aggregate(total=Sum("quantity"))["total"] or 0
    return purchased, sold


def load_products(business_id: uuid.UUID) -> Tuple[Product, ...]:
    rows = ProductRecord.objects.filter(business_id=business_id).order_by("created_at", "id")
    return tuple(product_from_row(r) for r in rows)


def load_parties(business_id: uuid.UUID) -> Tuple[Party, ...]:
    rows = PartyRecord.objects.filter(business_id=business_id).order_by("created_at", "id")
    return tuple(party_from_row(r) for r in rows)


def load_purchases(business_id: uuid.UUID) -> Tuple[Purchase, ...]:
    rows = PurchaseRecord.objects.filter(business_id=business_id).order_by("created_at", "entry_id")
    return tuple(purchase_from_row(r) for r in rows)


def load_sales(business_id: uuid.UUID) -> Tuple[Sale, ...]:
    rows = SaleRecord.objects.filter(business_id=business_id).order_by("created_at", "entry_id")
    return tuple(sale_from_row(r) for r in rows)


def load_ledgers(business_id: uuid.UUID) -> Tuple[Ledger, ...]:
    rows = LedgerRecord.objects.filter(business_id=business_id).order_by("created_at", "id")
    return tuple(ledger_from_row(r) for r in rows)


def load_vouchers(business_id: uuid.UUID) -> Tuple[Voucher, ...]:
    rows = (
        VoucherRecord.objects.filter(business_id=business_id)
        .order_by("created_at", "voucher_id")
        .prefetch_related("entries")
    )
    return tuple(voucher_from_row(r) for r in rows)


# ══════════════════════════════════════════════════════════════
# INSERTS
# ══════════════════════════════════════════════════════════════

def insert_product(business_id: uuid.UUID, product: Product, now: datetime) -> ProductRecord:
    return ProductRecord.objects.create(
        business_id=business_id,
        product_id=product.product_id,
        name=product.name,
        brand=product.brand,
        category=product.category,
        purchase_rate=product.purchase_rate,
        selling_rate=product.selling_rate,
        gst_percent=product.gst_percent,
        opening_stock=product.opening_stock,
        reorder_level=product.reorder_level,
        created_at=now,
        updated_at=now,
    )


def insert_party(business_id: uuid.UUID, party: Party, now: datetime) -> PartyRecord:
    return PartyRecord.objects.create(
        business_id=business_id,
        party_id=party.party_id,
        role=party.role.value,
        name=party.name,
        contact_person=party.contact_person,
        email=party.email,
        phone=party.phone,
        address=party.address,
        city=party.city,
        state=party.state,
        pincode=party.pincode,
        gstin=party.gstin,
        opening_balance=party.opening_balance,
        created_at=now,
        updated_at=now,
    )


def insert_purchase(business_id: uuid.UUID, purchase: Purchase) -> PurchaseRecord:
    return PurchaseRecord.objects.create(
        entry_id=purchase.entry_id,
        business_id=business_id,
        invoice_no=purchase.invoice_no,
        supplier=purchase.supplier,
        product_id=purchase.product_id,
        quantity=purchase.quantity,
        purchase_rate=purchase.purchase_rate,
        total_value=purchase.total_value,
        gst_amount=purchase.gst_amount,
        grand_total=purchase.grand_total,
        date=purchase.date,
        inter_state=purchase.inter_state,
        created_at=purchase.created_at,
    )


def insert_sale(business_id: uuid.UUID, sale: Sale) -> SaleRecord:
    return SaleRecord.objects.create(
        entry_id=sale.entry_id,
        business_id=business_id,
        invoice_no=sale.invoice_no,
        customer=sale.customer,
        product_id=sale.product_id,
        quantity=sale.quantity,
        selling_rate=sale.selling_rate,
        total_value=sale.total_value,
        gst_amount=sale.gst_amount,
        grand_total=sale.grand_total,
        date=sale.date,
        inter_state=sale.inter_state,
        created_at=sale.created_at,
    )


def insert_ledger(business_id: uuid.UUID, ledger: Ledger, now: datetime) -> LedgerRecord:
    return LedgerRecord.objects.create(
        business_id=business_id,
        ledger_id=ledger.ledger_id,
        name=ledger.name,
        group=ledger.group.value,
        opening_balance=ledger.opening_balance,
        current_balance=ledger.current_balance,
        created_at=now,
    )


def insert_voucher(business_id: uuid.UUID, voucher: Voucher) -> VoucherRecord:
    row = VoucherRecord.objects.create(
        voucher_id=voucher.voucher_id,
        business_id=business_id,
        voucher_type=voucher.voucher_type.value,
        voucher_number=voucher.voucher_number,
        date=voucher.date,
        narration=voucher.narration,
        reference_number=voucher.reference_number,
        party_name=voucher.party_name,
        total_debit=voucher.total_debit,
        total_credit=voucher.total_credit,
        created_at=voucher.created_at,
    )
    LedgerEntryRecord.objects.bulk_create([
        LedgerEntryRecord(
            voucher=row,
            position=position,
            ledger_id=entry.ledger_id,
            ledger_name=entry.ledger_name,
            side=entry.side.value,
            amount=entry.amount,
            description=entry.description,
        )
        for position, entry in enumerate(voucher.entries)
    ])
    return row


def update_ledger_balances(business_id: uuid.UUID, ledgers: Iterable[Ledger]) -> None:
    for ledger in ledgers:
        LedgerRecord.objects.filter(
            business_id=business_id, ledger_id=ledger.ledger_id,
        ).update(current_balance=ledger.current_balance)
