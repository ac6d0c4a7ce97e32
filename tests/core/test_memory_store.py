"""
Tradebook Event Store — In-Memory Store Tests
===============================================
Write-path rules enforced by InMemoryTradeStore: product and party
master uniqueness, stock-checked sales, invoice numbers issued under
lock, numbered balanced vouchers.
"""

import threading
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest


NOW = datetime(2026, 4, 1, 9, 0, tzinfo=timezone.utc)
DAY = date(2026, 4, 1)


def _store():
    from core.event_store.memory import InMemoryTradeStore
    from core.time.clock import FixedClock
    return InMemoryTradeStore(clock=FixedClock(NOW))


def _product(product_id="PRD001", opening_stock=10):
    from core.primitives.catalog import Product
    return Product(
        product_id=product_id, name="Rice 5kg",
        purchase_rate="200", selling_rate="250",
        opening_stock=opening_stock, reorder_level=2,
    )


def _sale(quantity, product_id="PRD001"):
    from core.primitives.trade import Sale
    return Sale.record(
        invoice_no="SAL-2026-001", customer="Corner Shop", product_id=product_id,
        quantity=quantity, selling_rate="250", gst_percent="5", date=DAY,
    )


def _purchase(quantity, product_id="PRD001"):
    from core.primitives.trade import Purchase
    return Purchase.record(
        invoice_no="PUR-2026-001", supplier="Wholesale Co", product_id=product_id,
        quantity=quantity, purchase_rate="200", gst_percent="5", date=DAY,
    )


def _entries(*pairs):
    from core.primitives.ledger import EntrySide, LedgerEntry
    return tuple(
        LedgerEntry(ledger_id=ledger_id, side=EntrySide(side), amount=amount)
        for ledger_id, side, amount in pairs
    )


# ══════════════════════════════════════════════════════════════
# CATALOG & TRADE
# ══════════════════════════════════════════════════════════════

class TestCatalog:

    def test_duplicate_product_rejected(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        store = _store()
        assert store.add_product(_product()).accepted
        result = store.add_product(_product())
        assert not result.accepted
        assert result.rejection.code == StoreRejectionCode.DUPLICATE_PRODUCT

    def test_update_product(self):
        store = _store()
        store.add_product(_product())
        result = store.update_product("PRD001", selling_rate="260")
        assert result.accepted
        assert store.fetch_all().products[0].selling_rate == Decimal("260")

    def test_update_cannot_strand_sold_stock(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        store = _store()
        store.add_product(_product(opening_stock=10))
        store.append_sale(_sale(8))
        result = store.update_product("PRD001", opening_stock=5)
        assert result.rejection.code == StoreRejectionCode.NEGATIVE_STOCK
        assert store.fetch_all().products[0].opening_stock == 10

    def test_update_unknown_product(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        result = _store().update_product("PRD404", name="x")
        assert result.rejection.code == StoreRejectionCode.UNKNOWN_PRODUCT

    def test_invalid_edit_rejected(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        store = _store()
        store.add_product(_product())
        result = store.update_product("PRD001", product_id="PRD002")
        assert result.rejection.code == StoreRejectionCode.INVALID_PRODUCT

    def test_unknown_product_allocates_no_lock(self):
        store = _store()
        store.add_product(_product())
        for n in range(50):
            store.append_sale(_sale(1, product_id=f"GHOST{n}"))
            store.update_product(f"GHOST{n}", name="x")
        assert set(store._product_locks) <= {"PRD001"}

    def test_issue_product_numbers_from_catalog_size(self):
        from core.primitives.catalog import Product
        store = _store()
        store.add_product(_product("PRD001"))

        def build(product_id):
            return Product(
                product_id=product_id, name="Dal 1kg",
                purchase_rate="90", selling_rate="110",
            )

        result = store.issue_product(id_prefix="PRD", build=build)
        assert result.accepted
        assert result.entity.product_id == "PRD002"


class TestTrade:

    def test_purchase_for_unknown_product_rejected(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        result = _store().append_purchase(_purchase(5))
        assert result.rejection.code == StoreRejectionCode.UNKNOWN_PRODUCT

    def test_purchase_gets_created_at(self):
        store = _store()
        store.add_product(_product())
        result = store.append_purchase(_purchase(5))
        assert result.entity.created_at == NOW

    def test_sale_within_stock_accepted(self):
        store = _store()
        store.add_product(_product(opening_stock=10))
        store.append_purchase(_purchase(5))
        assert store.append_sale(_sale(15)).accepted
        assert len(store.fetch_all().sales) == 1

    def test_oversell_rejected_and_not_recorded(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        store = _store()
        store.add_product(_product(opening_stock=3))
        result = store.append_sale(_sale(4))
        assert result.rejection.code == StoreRejectionCode.INSUFFICIENT_STOCK
        assert not result.rejection.retryable
        assert store.fetch_all().sales == ()

    def test_sale_for_unknown_product_rejected(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        result = _store().append_sale(_sale(1))
        assert result.rejection.code == StoreRejectionCode.UNKNOWN_PRODUCT

    def test_concurrent_sales_never_oversell(self):
        from engines.stock.derivation import get_available_stock
        store = _store()
        store.add_product(_product(opening_stock=10))
        results = []

        def sell():
            results.append(store.append_sale(_sale(1)))

        threads = [threading.Thread(target=sell) for _ in range(25)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        snapshot = store.fetch_all()
        assert sum(1 for r in results if r.accepted) == 10
        assert get_available_stock(
            snapshot.products, snapshot.purchases, snapshot.sales, "PRD001",
        ) == 0

    def test_issue_sale_numbers_in_sequence(self):
        from core.primitives.trade import Sale
        store = _store()
        store.add_product(_product(opening_stock=10))

        def build(invoice_no):
            return Sale.record(
                invoice_no=invoice_no, customer="Corner Shop", product_id="PRD001",
                quantity=1, selling_rate="250", gst_percent="5", date=DAY,
            )

        first = store.issue_sale(invoice_prefix="SAL", issued_on=DAY, build=build)
        second = store.issue_sale(invoice_prefix="SAL", issued_on=DAY, build=build)
        assert first.entity.invoice_no == "SAL-2026-001"
        assert second.entity.invoice_no == "SAL-2026-002"

    def test_concurrent_issued_sales_get_distinct_numbers(self):
        from core.primitives.trade import Sale
        store = _store()
        store.add_product(_product(opening_stock=100))
        barrier = threading.Barrier(20)
        results = []

        def build(invoice_no):
            return Sale.record(
                invoice_no=invoice_no, customer="Corner Shop", product_id="PRD001",
                quantity=1, selling_rate="250", gst_percent="5", date=DAY,
            )

        def sell():
            barrier.wait()
            results.append(store.issue_sale(invoice_prefix="SAL", issued_on=DAY, build=build))

        threads = [threading.Thread(target=sell) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        numbers = [r.entity.invoice_no for r in results]
        assert all(r.accepted for r in results)
        assert len(set(numbers)) == 20
        assert max(numbers) == "SAL-2026-020"

    def test_issue_purchase_rejects_unknown_product(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        result = _store().issue_purchase(
            invoice_prefix="PUR", issued_on=DAY, build=lambda no: _purchase(1),
        )
        assert result.rejection.code == StoreRejectionCode.UNKNOWN_PRODUCT


# ══════════════════════════════════════════════════════════════
# PARTIES
# ══════════════════════════════════════════════════════════════

class TestParties:

    def _party(self, party_id="CUS001", role="customer", **fields):
        from core.primitives.party import Party, PartyRole
        fields.setdefault("name", "Corner Shop")
        return Party(party_id=party_id, role=PartyRole(role), **fields)

    def test_add_and_fetch(self):
        store = _store()
        assert store.add_party(self._party()).accepted
        (party,) = store.fetch_parties()
        assert party.name == "Corner Shop"

    def test_duplicate_party_rejected(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        store = _store()
        store.add_party(self._party())
        result = store.add_party(self._party(name="Other"))
        assert result.rejection.code == StoreRejectionCode.DUPLICATE_PARTY

    def test_issue_party_counts_per_role(self):
        from core.primitives.party import PartyRole
        store = _store()
        store.add_party(self._party("CUS001"))
        store.add_party(self._party("SUP001", role="supplier", name="Wholesale Co"))
        result = store.issue_party(
            role=PartyRole.CUSTOMER, id_prefix="CUS",
            build=lambda party_id: self._party(party_id, name="Kiosk"),
        )
        assert result.entity.party_id == "CUS002"

    def test_update_party(self):
        store = _store()
        store.add_party(self._party())
        assert store.update_party("CUS001", city="Pune", opening_balance="150").accepted
        (party,) = store.fetch_parties()
        assert party.city == "Pune"
        assert party.opening_balance == Decimal("150")

    def test_update_party_keeps_identity(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        store = _store()
        store.add_party(self._party())
        result = store.update_party("CUS001", party_id="CUS009")
        assert result.rejection.code == StoreRejectionCode.INVALID_PARTY

    def test_update_unknown_party(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        result = _store().update_party("CUS404", city="Pune")
        assert result.rejection.code == StoreRejectionCode.UNKNOWN_PARTY


# ══════════════════════════════════════════════════════════════
# ACCOUNTS
# ══════════════════════════════════════════════════════════════

class TestAccounts:

    def _opened(self):
        store = _store()
        store.open_default_ledgers("Acme Traders")
        return store

    def test_default_ledgers_opened(self):
        store = self._opened()
        assert len(store.fetch_accounts().ledgers) == 25

    def test_duplicate_ledger_rejected(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        from core.primitives.ledger import Ledger, LedgerGroup
        store = self._opened()
        result = store.create_ledger(
            Ledger(ledger_id="cash-in-hand", name="Cash", group=LedgerGroup.CASH_IN_HAND),
        )
        assert result.rejection.code == StoreRejectionCode.DUPLICATE_LEDGER

    def test_post_numbers_and_applies(self):
        from core.primitives.ledger import VoucherType
        store = self._opened()
        result = store.post_voucher(
            voucher_type=VoucherType.RECEIPT,
            date=DAY,
            narration="Capital introduced",
            entries=_entries(("cash-in-hand", "Debit", "1000"), ("capital", "Credit", "1000")),
        )
        assert result.accepted
        assert result.entity.voucher_number == "RCT-2604-0001"
        ledgers = {l.ledger_id: l for l in store.fetch_accounts().ledgers}
        assert ledgers["cash-in-hand"].current_balance == Decimal("1000")
        assert ledgers["capital"].current_balance == Decimal("1000")

    def test_sequence_is_per_type(self):
        from core.primitives.ledger import VoucherType
        store = self._opened()
        entries = _entries(("cash-in-hand", "Debit", "10"), ("sales", "Credit", "10"))
        store.post_voucher(voucher_type=VoucherType.SALES, date=DAY, narration="", entries=entries)
        store.post_voucher(voucher_type=VoucherType.RECEIPT, date=DAY, narration="", entries=entries)
        result = store.post_voucher(
            voucher_type=VoucherType.SALES, date=DAY, narration="", entries=entries,
        )
        assert result.entity.voucher_number == "SLS-2604-0002"

    def test_imbalanced_rejected_without_side_effects(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        from core.primitives.ledger import VoucherType
        store = self._opened()
        before = store.fetch_accounts()
        result = store.post_voucher(
            voucher_type=VoucherType.JOURNAL,
            date=DAY,
            narration="",
            entries=_entries(("cash-in-hand", "Debit", "100"), ("sales", "Credit", "50")),
        )
        assert result.rejection.code == StoreRejectionCode.IMBALANCED_VOUCHER
        assert store.fetch_accounts() == before

    def test_unknown_ledger_rejected(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        from core.primitives.ledger import VoucherType
        store = self._opened()
        result = store.post_voucher(
            voucher_type=VoucherType.JOURNAL,
            date=DAY,
            narration="",
            entries=_entries(("cash-in-hand", "Debit", "5"), ("nowhere", "Credit", "5")),
        )
        assert result.rejection.code == StoreRejectionCode.UNKNOWN_LEDGER
        assert "nowhere" in result.rejection.message

    def test_malformed_voucher_is_invalid(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        from core.primitives.ledger import VoucherType
        store = self._opened()
        result = store.post_voucher(
            voucher_type=VoucherType.JOURNAL,
            date=NOW,
            narration="",
            entries=_entries(("cash-in-hand", "Debit", "5"), ("capital", "Credit", "5")),
        )
        assert result.rejection.code == StoreRejectionCode.INVALID_VOUCHER
        assert store.fetch_accounts().vouchers == ()
