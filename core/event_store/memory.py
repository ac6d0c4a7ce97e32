"""
Tradebook Event Store — In-Memory Store
=========================================
Process-local store with the same capability interface and rules as
DjangoTradeStore. Used by tests and single-process tooling.

Write serialization:
- sales of one product run check-and-insert under that product's lock
- issued numbers are picked under one lock per document kind
- voucher postings run under one accounts lock
"""

from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

from core.documents.numbering.engine import (
    count_of_type,
    next_invoice_no,
    next_party_id,
    next_product_id,
)
from core.documents.numbering.models import (
    DOC_PARTY,
    DOC_PRODUCT,
    DOC_PURCHASE_INVOICE,
    DOC_SALE_INVOICE,
)
from core.event_store.persistence.errors import AppendResult, StoreRejectionCode
from core.event_store.persistence.guards import (
    apply_party_edit,
    apply_product_edit,
    build_numbered_voucher,
    check_sale_stock,
    stamp_created_at,
    unknown_ledgers,
)
from core.event_store.protocol import AccountsSnapshot, TradeSnapshot
from core.primitives.catalog import Product
from core.primitives.ledger import Ledger, LedgerEntry, Voucher, VoucherType
from core.primitives.party import Party, PartyRole
from core.primitives.trade import Purchase, Sale
from core.time.clock import Clock, SystemClock
from engines.accounting.posting import post_voucher as apply_voucher
from engines.accounting.vouchers import default_ledgers
from engines.stock.derivation import get_available_stock

logger = logging.getLogger("tradebook.store")


class InMemoryTradeStore:
    """Simple in-memory store for testing and bootstrap."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or SystemClock()
        self._products: List[Product] = []
        self._parties: List[Party] = []
        self._purchases: List[Purchase] = []
        self._sales: List[Sale] = []
        self._ledgers: Tuple[Ledger, ...] = ()
        self._vouchers: List[Voucher] = []

        self._catalog_lock = threading.Lock()
        self._accounts_lock = threading.Lock()
        self._product_locks: Dict[str, threading.Lock] = {}
        self._numbering_locks = {
            doc_type: threading.Lock()
            for doc_type in (DOC_PRODUCT, DOC_PARTY, DOC_PURCHASE_INVOICE, DOC_SALE_INVOICE)
        }

    def _lock_for(self, product_id: str) -> Optional[threading.Lock]:
        """Per-product lock; None for an unknown product (products are never removed)."""
        with self._catalog_lock:
            if self._find_product(product_id) is None:
                return None
            return self._product_locks.setdefault(product_id, threading.Lock())

    def _find_product(self, product_id: str) -> Optional[int]:
        for index, product in enumerate(self._products):
            if product.product_id == product_id:
                return index
        return None

    def _find_party(self, party_id: str) -> Optional[int]:
        for index, party in enumerate(self._parties):
            if party.party_id == party_id:
                return index
        return None

    @staticmethod
    def _unknown_product(product_id: str) -> AppendResult:
        return AppendResult.rejected(
            StoreRejectionCode.UNKNOWN_PRODUCT,
            f"Product '{product_id}' does not exist.",
        )

    # ── Reads ─────────────────────────────────────────────────

    def fetch_all(self) -> TradeSnapshot:
        with self._catalog_lock:
            return TradeSnapshot(
                products=tuple(self._products),
                purchases=tuple(self._purchases),
                sales=tuple(self._sales),
            )

    def fetch_parties(self) -> Tuple[Party, ...]:
        with self._catalog_lock:
            return tuple(self._parties)

    def fetch_accounts(self) -> AccountsSnapshot:
        with self._accounts_lock:
            return AccountsSnapshot(
                ledgers=self._ledgers,
                vouchers=tuple(self._vouchers),
            )

    # ── Catalog ───────────────────────────────────────────────

    def add_product(self, product: Product) -> AppendResult:
        with self._catalog_lock:
            if self._find_product(product.product_id) is not None:
                return AppendResult.rejected(
                    StoreRejectionCode.DUPLICATE_PRODUCT,
                    f"Product '{product.product_id}' already exists.",
                )
            self._products.append(product)
        return AppendResult.ok(product)

    def issue_product(self, *, id_prefix: str, build: Callable[[str], Product]) -> AppendResult:
        with self._numbering_locks[DOC_PRODUCT]:
            with self._catalog_lock:
                existing = len(self._products)
            return self.add_product(build(next_product_id(existing, id_prefix)))

    def update_product(self, product_id: str, /, **changes: Any) -> AppendResult:
        lock = self._lock_for(product_id)
        if lock is None:
            return self._unknown_product(product_id)
        with lock:
            snapshot = self.fetch_all()
            index = self._find_product(product_id)
            purchased = sum(p.quantity for p in snapshot.purchases if p.product_id == product_id)
            sold = sum(s.quantity for s in snapshot.sales if s.product_id == product_id)
            result = apply_product_edit(snapshot.products[index], changes, purchased, sold)
            if result.accepted:
                with self._catalog_lock:
                    self._products[index] = result.entity
            return result

    # ── Parties ───────────────────────────────────────────────

    def add_party(self, party: Party) -> AppendResult:
        with self._catalog_lock:
            if self._find_party(party.party_id) is not None:
                return AppendResult.rejected(
                    StoreRejectionCode.DUPLICATE_PARTY,
                    f"Party '{party.party_id}' already exists.",
                )
            self._parties.append(party)
        return AppendResult.ok(party)

    def issue_party(
        self, *, role: PartyRole, id_prefix: str, build: Callable[[str], Party],
    ) -> AppendResult:
        with self._numbering_locks[DOC_PARTY]:
            with self._catalog_lock:
                existing = sum(1 for p in self._parties if p.role == role)
            return self.add_party(build(next_party_id(existing, id_prefix)))

    def update_party(self, party_id: str, /, **changes: Any) -> AppendResult:
        with self._catalog_lock:
            index = self._find_party(party_id)
            if index is None:
                return AppendResult.rejected(
                    StoreRejectionCode.UNKNOWN_PARTY,
                    f"Party '{party_id}' does not exist.",
                )
            result = apply_party_edit(self._parties[index], changes)
            if result.accepted:
                self._parties[index] = result.entity
        return result

    # ── Trade ─────────────────────────────────────────────────

    def append_purchase(self, purchase: Purchase) -> AppendResult:
        purchase = stamp_created_at(purchase, self._clock.now_utc())
        with self._catalog_lock:
            if self._find_product(purchase.product_id) is None:
                return self._unknown_product(purchase.product_id)
            self._purchases.append(purchase)
        return AppendResult.ok(purchase)

    def append_sale(self, sale: Sale) -> AppendResult:
        sale = stamp_created_at(sale, self._clock.now_utc())
        lock = self._lock_for(sale.product_id)
        if lock is None:
            return self._unknown_product(sale.product_id)
        with lock:
            snapshot = self.fetch_all()
            available = get_available_stock(
                snapshot.products, snapshot.purchases, snapshot.sales, sale.product_id,
            )
            rejection = check_sale_stock(sale, available)
            if rejection is not None:
                logger.info("Sale %s rejected: %s", sale.invoice_no, rejection.rejection.code)
                return rejection
            with self._catalog_lock:
                self._sales.append(sale)
        return AppendResult.ok(sale)

    def issue_purchase(
        self, *, invoice_prefix: str, issued_on: date, build: Callable[[str], Purchase],
    ) -> AppendResult:
        with self._numbering_locks[DOC_PURCHASE_INVOICE]:
            with self._catalog_lock:
                existing = [p.invoice_no for p in self._purchases]
            invoice_no = next_invoice_no(invoice_prefix, existing, issued_on)
            return self.append_purchase(build(invoice_no))

    def issue_sale(
        self, *, invoice_prefix: str, issued_on: date, build: Callable[[str], Sale],
    ) -> AppendResult:
        with self._numbering_locks[DOC_SALE_INVOICE]:
            with self._catalog_lock:
                existing = [s.invoice_no for s in self._sales]
            invoice_no = next_invoice_no(invoice_prefix, existing, issued_on)
            return self.append_sale(build(invoice_no))

    # ── Accounts ──────────────────────────────────────────────

    def create_ledger(self, ledger: Ledger) -> AppendResult:
        with self._accounts_lock:
            if any(l.ledger_id == ledger.ledger_id for l in self._ledgers):
                return AppendResult.rejected(
                    StoreRejectionCode.DUPLICATE_LEDGER,
                    f"Ledger '{ledger.ledger_id}' already exists.",
                )
            self._ledgers = self._ledgers + (ledger,)
        return AppendResult.ok(ledger)

    def open_default_ledgers(self, business_name: str) -> Tuple[Ledger, ...]:
        created = tuple(
            ledger for ledger in default_ledgers(business_name)
            if self.create_ledger(ledger).accepted
        )
        logger.info("Opened %s default ledgers", len(created))
        return created

    def post_voucher(
        self,
        *,
        voucher_type: VoucherType,
        date: date,
        narration: str,
        entries: Tuple[LedgerEntry, ...],
        reference_number: Optional[str] = None,
        party_name: Optional[str] = None,
    ) -> AppendResult:
        entries = tuple(entries)
        with self._accounts_lock:
            missing = unknown_ledgers(entries, (l.ledger_id for l in self._ledgers))
            if missing:
                return AppendResult.rejected(
                    StoreRejectionCode.UNKNOWN_LEDGER,
                    f"Unknown ledger(s): {', '.join(missing)}.",
                )
            result = build_numbered_voucher(
                voucher_type=voucher_type,
                date=date,
                narration=narration,
                entries=entries,
                existing_count=count_of_type(self._vouchers, voucher_type),
                created_at=self._clock.now_utc(),
                reference_number=reference_number,
                party_name=party_name,
            )
            if not result.accepted:
                return result
            self._ledgers = apply_voucher(self._ledgers, result.entity)
            self._vouchers.append(result.entity)
        return result
