"""
Tradebook Event Store — Persistence Service
=============================================
The single controlled write path for one business's trade and
ledger records.

Write flow (NON-NEGOTIABLE):
    1. Validate the value being written        (primitives / guards)
    2. Lock the rows the rule depends on       (select_for_update)
    3. Re-read the facts under the lock        (stock, ledgers, counts)
    4. Atomic DB save
    5. Return AppendResult: accepted or explicit Rejection

If ANY step fails → deterministic rejection. No partial state.

This service does NOT:
- Trust a stock figure computed before the transaction began
- Store derived stock
- Retry on failure
- Swallow errors silently
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Any, Callable, Optional, Tuple

from django.db import DatabaseError, IntegrityError, OperationalError, transaction

from core.documents.numbering.engine import next_invoice_no, next_party_id, next_product_id
from core.documents.numbering.models import (
    DOC_PARTY,
    DOC_PRODUCT,
    DOC_PURCHASE_INVOICE,
    DOC_SALE_INVOICE,
)
from core.event_store.models import (
    LedgerRecord,
    PartyRecord,
    ProductRecord,
    PurchaseRecord,
    SaleRecord,
    VoucherRecord,
)
from core.event_store.persistence import repository
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
from core.primitives.ledger import Ledger, LedgerEntry, VoucherType
from core.primitives.party import Party, PartyRole
from core.primitives.trade import Purchase, Sale
from core.time.clock import Clock, SystemClock
from engines.accounting.posting import post_voucher as apply_voucher
from engines.accounting.vouchers import default_ledgers

logger = logging.getLogger("tradebook.store")


def _database_rejection(operation: str, exc: DatabaseError) -> AppendResult:
    """Map a database failure to a rejection; lock contention is retryable."""
    if isinstance(exc, OperationalError):
        logger.warning("%s hit a write conflict: %s", operation, exc)
        return AppendResult.rejected(
            StoreRejectionCode.WRITE_CONFLICT,
            f"Write conflict during {operation}: {exc}",
        )
    logger.error("%s aborted: %s", operation, exc, exc_info=True)
    return AppendResult.rejected(
        StoreRejectionCode.TRANSACTION_ABORTED,
        f"Transaction aborted: {exc}",
    )


class DjangoTradeStore:
    """
    Django ORM store for one business.

    Usage:
        store = DjangoTradeStore(business_id)
        result = store.append_sale(sale)
        if not result.accepted:
            ...  # result.rejection.code, result.rejection.retryable
    """

    def __init__(self, business_id: uuid.UUID, clock: Optional[Clock] = None) -> None:
        if not isinstance(business_id, uuid.UUID):
            raise ValueError("business_id must be UUID.")
        self.business_id = business_id
        self._clock = clock or SystemClock()

    # ── Reads ─────────────────────────────────────────────────

    def fetch_all(self) -> TradeSnapshot:
        with transaction.atomic():
            return TradeSnapshot(
                products=repository.load_products(self.business_id),
                purchases=repository.load_purchases(self.business_id),
                sales=repository.load_sales(self.business_id),
            )

    def fetch_parties(self) -> Tuple[Party, ...]:
        return repository.load_parties(self.business_id)

    def fetch_accounts(self) -> AccountsSnapshot:
        with transaction.atomic():
            return AccountsSnapshot(
                ledgers=repository.load_ledgers(self.business_id),
                vouchers=repository.load_vouchers(self.business_id),
            )

    # ── Catalog ───────────────────────────────────────────────

    def add_product(self, product: Product) -> AppendResult:
        try:
            with transaction.atomic():
                if repository.get_product_row(self.business_id, product.product_id):
                    return self._duplicate_product(product.product_id)
                repository.insert_product(
                    self.business_id, product, self._clock.now_utc(),
                )
        except IntegrityError:
            return self._duplicate_product(product.product_id)
        except DatabaseError as exc:
            return _database_rejection("add_product", exc)

        logger.info("Product %s added for business %s", product.product_id, self.business_id)
        return AppendResult.ok(product)

    def issue_product(self, *, id_prefix: str, build: Callable[[str], Product]) -> AppendResult:
        """Pick the next product id under the sequence lock, then add build(id)."""
        try:
            with transaction.atomic():
                sequence = repository.lock_sequence(self.business_id, DOC_PRODUCT)
                existing = ProductRecord.objects.filter(business_id=self.business_id).count()
                product_id = next_product_id(existing, id_prefix)
                result = self.add_product(build(product_id))
                if result.accepted:
                    self._advance(sequence, product_id)
                return result
        except DatabaseError as exc:
            return _database_rejection("issue_product", exc)

    def update_product(self, product_id: str, /, **changes: Any) -> AppendResult:
        try:
            with transaction.atomic():
                row = repository.get_product_row(self.business_id, product_id, lock=True)
                if row is None:
                    return self._unknown_product(product_id)
                purchased, sold = repository.quantity_moved(self.business_id, product_id)
                result = apply_product_edit(
                    repository.product_from_row(row), changes, purchased, sold,
                )
                if not result.accepted:
                    return result
                updated: Product = result.entity
                ProductRecord.objects.filter(pk=row.pk).update(
                    name=updated.name,
                    brand=updated.brand,
                    category=updated.category,
                    purchase_rate=updated.purchase_rate,
                    selling_rate=updated.selling_rate,
                    gst_percent=updated.gst_percent,
                    opening_stock=updated.opening_stock,
                    reorder_level=updated.reorder_level,
                    updated_at=self._clock.now_utc(),
                )
        except DatabaseError as exc:
            return _database_rejection("update_product", exc)

        logger.info("Product %s updated: %s", product_id, sorted(changes))
        return result

    # ── Parties ───────────────────────────────────────────────

    def add_party(self, party: Party) -> AppendResult:
        try:
            with transaction.atomic():
                if repository.get_party_row(self.business_id, party.party_id):
                    return self._duplicate_party(party.party_id)
                repository.insert_party(self.business_id, party, self._clock.now_utc())
        except IntegrityError:
            return self._duplicate_party(party.party_id)
        except DatabaseError as exc:
            return _database_rejection("add_party", exc)

        logger.info(
            "Party %s (%s) added for business %s",
            party.party_id, party.role.value, self.business_id,
        )
        return AppendResult.ok(party)

    def issue_party(
        self, *, role: PartyRole, id_prefix: str, build: Callable[[str], Party],
    ) -> AppendResult:
        try:
            with transaction.atomic():
                sequence = repository.lock_sequence(self.business_id, DOC_PARTY)
                existing = PartyRecord.objects.filter(
                    business_id=self.business_id, role=role.value,
                ).count()
                party_id = next_party_id(existing, id_prefix)
                result = self.add_party(build(party_id))
                if result.accepted:
                    self._advance(sequence, party_id)
                return result
        except DatabaseError as exc:
            return _database_rejection("issue_party", exc)

    def update_party(self, party_id: str, /, **changes: Any) -> AppendResult:
        try:
            with transaction.atomic():
                row = repository.get_party_row(self.business_id, party_id, lock=True)
                if row is None:
                    return AppendResult.rejected(
                        StoreRejectionCode.UNKNOWN_PARTY,
                        f"Party '{party_id}' does not exist.",
                    )
                result = apply_party_edit(repository.party_from_row(row), changes)
                if not result.accepted:
                    return result
                updated: Party = result.entity
                PartyRecord.objects.filter(pk=row.pk).update(
                    name=updated.name,
                    contact_person=updated.contact_person,
                    email=updated.email,
                    phone=updated.phone,
                    address=updated.address,
                    city=updated.city,
                    state=updated.state,
                    pincode=updated.pincode,
                    gstin=updated.gstin,
                    opening_balance=updated.opening_balance,
                    updated_at=self._clock.now_utc(),
                )
        except DatabaseError as exc:
            return _database_rejection("update_party", exc)

        logger.info("Party %s updated: %s", party_id, sorted(changes))
        return result

    # ── Trade ─────────────────────────────────────────────────

    def append_purchase(self, purchase: Purchase) -> AppendResult:
        purchase = stamp_created_at(purchase, self._clock.now_utc())
        try:
            with transaction.atomic():
                if repository.get_product_row(self.business_id, purchase.product_id) is None:
                    return self._unknown_product(purchase.product_id)
                repository.insert_purchase(self.business_id, purchase)
        except IntegrityError:
            return self._duplicate_entry(purchase.entry_id)
        except DatabaseError as exc:
            return _database_rejection("append_purchase", exc)

        logger.info(
            "Purchase %s: +%s %s",
            purchase.invoice_no, purchase.quantity, purchase.product_id,
        )
        return AppendResult.ok(purchase)

    def append_sale(self, sale: Sale) -> AppendResult:
        """
        Check-and-insert under a lock on the product row.

        Two concurrent sales of the same product serialize here, so
        they can never jointly overdraw stock.
        """
        sale = stamp_created_at(sale, self._clock.now_utc())
        try:
            with transaction.atomic():
                row = repository.get_product_row(
                    self.business_id, sale.product_id, lock=True,
                )
                available = None
                if row is not None:
                    purchased, sold = repository.quantity_moved(
                        self.business_id, sale.product_id,
                    )
                    available = row.opening_stock + purchased - sold
                rejection = check_sale_stock(sale, available)
                if rejection is not None:
                    logger.info(
                        "Sale %s rejected: %s",
                        sale.invoice_no, rejection.rejection.code,
                    )
                    return rejection
                repository.insert_sale(self.business_id, sale)
        except IntegrityError:
            return self._duplicate_entry(sale.entry_id)
        except DatabaseError as exc:
            return _database_rejection("append_sale", exc)

        logger.info(
            "Sale %s: -%s %s",
            sale.invoice_no, sale.quantity, sale.product_id,
        )
        return AppendResult.ok(sale)

    def issue_purchase(
        self, *, invoice_prefix: str, issued_on: date, build: Callable[[str], Purchase],
    ) -> AppendResult:
        return self._issue_invoice(
            DOC_PURCHASE_INVOICE, PurchaseRecord, self.append_purchase,
            invoice_prefix, issued_on, build,
        )

    def issue_sale(
        self, *, invoice_prefix: str, issued_on: date, build: Callable[[str], Sale],
    ) -> AppendResult:
        return self._issue_invoice(
            DOC_SALE_INVOICE, SaleRecord, self.append_sale,
            invoice_prefix, issued_on, build,
        )

    def _issue_invoice(self, doc_type, model, append, invoice_prefix, issued_on, build):
        """
        Number and append one invoice line in a single transaction.

        The sequence row is locked before existing numbers are read, so
        concurrent issues of the same kind get distinct numbers. The
        append runs in a savepoint; a rejected line leaves the sequence
        untouched.
        """
        try:
            with transaction.atomic():
                sequence = repository.lock_sequence(self.business_id, doc_type)
                invoice_no = next_invoice_no(
                    invoice_prefix,
                    repository.invoice_numbers(model, self.business_id),
                    issued_on,
                )
                result = append(build(invoice_no))
                if result.accepted:
                    self._advance(sequence, invoice_no)
                return result
        except DatabaseError as exc:
            return _database_rejection(f"issue {doc_type}", exc)

    @staticmethod
    def _advance(sequence, number: str) -> None:
        sequence.last_number = number
        sequence.save(update_fields=["last_number", "updated_at"])

    # ── Accounts ──────────────────────────────────────────────

    def create_ledger(self, ledger: Ledger) -> AppendResult:
        try:
            with transaction.atomic():
                exists = LedgerRecord.objects.filter(
                    business_id=self.business_id, ledger_id=ledger.ledger_id,
                ).exists()
                if exists:
                    return self._duplicate_ledger(ledger.ledger_id)
                repository.insert_ledger(self.business_id, ledger, self._clock.now_utc())
        except IntegrityError:
            return self._duplicate_ledger(ledger.ledger_id)
        except DatabaseError as exc:
            return _database_rejection("create_ledger", exc)
        return AppendResult.ok(ledger)

    def open_default_ledgers(self, business_name: str) -> Tuple[Ledger, ...]:
        """Create the standard chart of ledgers; existing ids are kept."""
        created = []
        for ledger in default_ledgers(business_name):
            result = self.create_ledger(ledger)
            if result.accepted:
                created.append(ledger)
        logger.info(
            "Opened %s default ledgers for business %s",
            len(created), self.business_id,
        )
        return tuple(created)

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
        """
        Number, persist and apply a voucher in one transaction.

        Every referenced ledger row is locked before balances are read,
        so concurrent postings to the same ledger serialize.
        """
        entries = tuple(entries)
        try:
            with transaction.atomic():
                ledger_ids = sorted({e.ledger_id for e in entries})
                rows = list(
                    LedgerRecord.objects.select_for_update()
                    .filter(business_id=self.business_id, ledger_id__in=ledger_ids)
                    .order_by("ledger_id")
                )
                missing = unknown_ledgers(entries, (r.ledger_id for r in rows))
                if missing:
                    return AppendResult.rejected(
                        StoreRejectionCode.UNKNOWN_LEDGER,
                        f"Unknown ledger(s): {', '.join(missing)}.",
                    )

                existing_count = VoucherRecord.objects.filter(
                    business_id=self.business_id,
                    voucher_type=voucher_type.value,
                ).count()
                result = build_numbered_voucher(
                    voucher_type=voucher_type,
                    date=date,
                    narration=narration,
                    entries=entries,
                    existing_count=existing_count,
                    created_at=self._clock.now_utc(),
                    reference_number=reference_number,
                    party_name=party_name,
                )
                if not result.accepted:
                    return result

                voucher = result.entity
                updated = apply_voucher(
                    tuple(repository.ledger_from_row(r) for r in rows), voucher,
                )
                repository.insert_voucher(self.business_id, voucher)
                repository.update_ledger_balances(self.business_id, updated)
        except IntegrityError as exc:
            # voucher_number taken by a concurrent posting of the same type
            logger.warning("Voucher numbering conflict: %s", exc)
            return AppendResult.rejected(
                StoreRejectionCode.WRITE_CONFLICT,
                f"Voucher number conflict, retry: {exc}",
            )
        except DatabaseError as exc:
            return _database_rejection("post_voucher", exc)

        logger.info(
            "Posted %s voucher %s (%s)",
            voucher.voucher_type.value, voucher.voucher_number, voucher.total_debit,
        )
        return AppendResult.ok(voucher)

    # ── Rejection helpers ─────────────────────────────────────

    @staticmethod
    def _unknown_product(product_id: str) -> AppendResult:
        return AppendResult.rejected(
            StoreRejectionCode.UNKNOWN_PRODUCT,
            f"Product '{product_id}' does not exist.",
        )

    @staticmethod
    def _duplicate_product(product_id: str) -> AppendResult:
        return AppendResult.rejected(
            StoreRejectionCode.DUPLICATE_PRODUCT,
            f"Product '{product_id}' already exists.",
        )

    @staticmethod
    def _duplicate_party(party_id: str) -> AppendResult:
        return AppendResult.rejected(
            StoreRejectionCode.DUPLICATE_PARTY,
            f"Party '{party_id}' already exists.",
        )

    @staticmethod
    def _duplicate_ledger(ledger_id: str) -> AppendResult:
        return AppendResult.rejected(
            StoreRejectionCode.DUPLICATE_LEDGER,
            f"Ledger '{ledger_id}' already exists.",
        )

    @staticmethod
    def _duplicate_entry(entry_id: uuid.UUID) -> AppendResult:
        return AppendResult.rejected(
            StoreRejectionCode.DUPLICATE_ENTRY,
            f"Entry '{entry_id}' was already recorded.",
        )
