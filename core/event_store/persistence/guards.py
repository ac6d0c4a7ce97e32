"""
Tradebook Event Store — Write Guards
======================================
Rule checks shared by every store implementation. Each guard takes
the facts the store has already read (under its lock) and returns a
rejection, or the value to persist.

No I/O here: the store decides what to lock and what to read.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional, Tuple

from core.documents.numbering.engine import next_voucher_number
from core.event_store.persistence.errors import AppendResult, StoreRejectionCode
from core.primitives.catalog import Product
from core.primitives.ledger import (
    ImbalancedVoucherError,
    LedgerEntry,
    Voucher,
    VoucherType,
    check_balanced,
)
from core.primitives.party import Party


def stamp_created_at(line, now: datetime):
    """Purchases and sales without created_at get the store's clock time."""
    if line.created_at is not None:
        return line
    return replace(line, created_at=now)


def check_sale_stock(sale, available: Optional[int]) -> Optional[AppendResult]:
    """Reject a sale that would take derived stock below zero."""
    if available is None:
        return AppendResult.rejected(
            StoreRejectionCode.UNKNOWN_PRODUCT,
            f"Product '{sale.product_id}' does not exist.",
        )
    if sale.quantity > available:
        return AppendResult.rejected(
            StoreRejectionCode.INSUFFICIENT_STOCK,
            f"Cannot sell {sale.quantity} units of '{sale.product_id}': "
            f"only {available} available.",
        )
    return None


def apply_product_edit(
    current: Product,
    changes: Dict[str, Any],
    purchased: int,
    sold: int,
) -> AppendResult:
    """
    Validate an edit. A lower opening_stock must still cover what
    was already sold.
    """
    try:
        updated = current.with_changes(**changes)
    except (TypeError, ValueError) as exc:
        return AppendResult.rejected(StoreRejectionCode.INVALID_PRODUCT, str(exc))

    derived = updated.opening_stock + purchased - sold
    if derived < 0:
        return AppendResult.rejected(
            StoreRejectionCode.NEGATIVE_STOCK,
            f"Edit would leave '{current.product_id}' at {derived} units.",
        )
    return AppendResult.ok(updated)


def apply_party_edit(current: Party, changes: Dict[str, Any]) -> AppendResult:
    try:
        return AppendResult.ok(current.with_changes(**changes))
    except (TypeError, ValueError) as exc:
        return AppendResult.rejected(StoreRejectionCode.INVALID_PARTY, str(exc))


def unknown_ledgers(
    entries: Iterable[LedgerEntry], known_ids: Iterable[str],
) -> Tuple[str, ...]:
    known = set(known_ids)
    missing: Dict[str, None] = {}
    for entry in entries:
        if entry.ledger_id not in known:
            missing.setdefault(entry.ledger_id, None)
    return tuple(missing)


def build_numbered_voucher(
    *,
    voucher_type: VoucherType,
    date: date,
    narration: str,
    entries: Tuple[LedgerEntry, ...],
    existing_count: int,
    created_at: datetime,
    reference_number: Optional[str] = None,
    party_name: Optional[str] = None,
    voucher_id: Optional[uuid.UUID] = None,
) -> AppendResult:
    """
    Number and construct a voucher, or reject it.

    The number's period part follows the voucher's accounting date.
    """
    try:
        check_balanced(tuple(entries))
    except ImbalancedVoucherError as exc:
        return AppendResult.rejected(StoreRejectionCode.IMBALANCED_VOUCHER, str(exc))

    try:
        voucher = Voucher(
            voucher_id=voucher_id or uuid.uuid4(),
            voucher_type=voucher_type,
            voucher_number=next_voucher_number(voucher_type, existing_count, date),
            date=date,
            narration=narration,
            entries=tuple(entries),
            created_at=created_at,
            reference_number=reference_number,
            party_name=party_name,
        )
    except (TypeError, ValueError) as exc:
        return AppendResult.rejected(StoreRejectionCode.INVALID_VOUCHER, str(exc))
    return AppendResult.ok(voucher)
