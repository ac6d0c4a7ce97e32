"""
Tradebook Event Store — Django Store Tests
============================================
DjangoTradeStore against the test database: persistence round-trips,
stock-checked sales, invoice and voucher numbering, parties and
append-only rows.
"""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

pytestmark = pytest.mark.django_db(transaction=True)


BIZ_A = uuid.uuid4()
BIZ_B = uuid.uuid4()
NOW = datetime(2026, 4, 1, 9, 0, tzinfo=timezone.utc)
DAY = date(2026, 4, 1)


def _store(business_id=BIZ_A):
    from core.event_store.persistence.service import DjangoTradeStore
    from core.time.clock import FixedClock
    return DjangoTradeStore(business_id, clock=FixedClock(NOW))


def _product(product_id="PRD001", opening_stock=10):
    from core.primitives.catalog import Product
    return Product(
        product_id=product_id, name="Rice 5kg", brand="Acme", category="grocery",
        purchase_rate="200", selling_rate="250", gst_percent="5",
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
        inter_state=True,
    )


def _entries(*pairs):
    from core.primitives.ledger import EntrySide, LedgerEntry
    return tuple(
        LedgerEntry(ledger_id=ledger_id, side=EntrySide(side), amount=amount)
        for ledger_id, side, amount in pairs
    )


class TestDjangoStoreConstruction:

    def test_business_id_must_be_uuid(self):
        from core.event_store.persistence.service import DjangoTradeStore
        with pytest.raises(ValueError, match="UUID"):
            DjangoTradeStore("not-a-uuid")


# ══════════════════════════════════════════════════════════════
# CATALOG & TRADE
# ══════════════════════════════════════════════════════════════

class TestDjangoCatalog:

    def test_product_round_trip(self):
        store = _store()
        assert store.add_product(_product()).accepted
        (loaded,) = store.fetch_all().products
        assert loaded == _product()

    def test_duplicate_product_rejected(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        store = _store()
        store.add_product(_product())
        result = store.add_product(_product())
        assert result.rejection.code == StoreRejectionCode.DUPLICATE_PRODUCT

    def test_same_product_id_in_other_business(self):
        _store(BIZ_A).add_product(_product())
        assert _store(BIZ_B).add_product(_product()).accepted
        assert len(_store(BIZ_B).fetch_all().products) == 1

    def test_update_product(self):
        store = _store()
        store.add_product(_product())
        assert store.update_product("PRD001", reorder_level=7).accepted
        assert store.fetch_all().products[0].reorder_level == 7

    def test_update_cannot_strand_sold_stock(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        store = _store()
        store.add_product(_product(opening_stock=10))
        store.append_sale(_sale(9))
        result = store.update_product("PRD001", opening_stock=8)
        assert result.rejection.code == StoreRejectionCode.NEGATIVE_STOCK

    def test_update_refuses_product_id_change(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        store = _store()
        store.add_product(_product())
        result = store.update_product("PRD001", product_id="PRD002")
        assert result.rejection.code == StoreRejectionCode.INVALID_PRODUCT


class TestDjangoTrade:

    def test_purchase_round_trip(self):
        store = _store()
        store.add_product(_product())
        purchase = _purchase(4)
        assert store.append_purchase(purchase).accepted
        (loaded,) = store.fetch_all().purchases
        assert loaded.entry_id == purchase.entry_id
        assert loaded.grand_total == Decimal("840.00")
        assert loaded.inter_state is True
        assert loaded.created_at == NOW

    def test_fine_rate_survives_round_trip(self):
        from core.primitives.trade import Purchase
        store = _store()
        store.add_product(_product())
        purchase = Purchase.record(
            invoice_no="PUR-2026-001", supplier="Wholesale Co", product_id="PRD001",
            quantity=1000, purchase_rate="1.2345", gst_percent="5", date=DAY,
        )
        assert store.append_purchase(purchase).accepted
        (loaded,) = store.fetch_all().purchases
        assert loaded.purchase_rate == Decimal("1.2345")
        assert loaded.total_value == Decimal("1234.50")

    def test_unknown_product_purchase_rejected(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        result = _store().append_purchase(_purchase(1, product_id="PRD404"))
        assert result.rejection.code == StoreRejectionCode.UNKNOWN_PRODUCT

    def test_sale_up_to_available_stock(self):
        from engines.stock.derivation import compute_stock_items
        store = _store()
        store.add_product(_product(opening_stock=10))
        store.append_purchase(_purchase(5))
        assert store.append_sale(_sale(15)).accepted

        snapshot = store.fetch_all()
        (item,) = compute_stock_items(snapshot.products, snapshot.purchases, snapshot.sales)
        assert item.current_stock == 0
        assert item.status.value == "out-of-stock"

    def test_oversell_rejected_atomically(self):
        from core.event_store.models import SaleRecord
        from core.event_store.persistence.errors import StoreRejectionCode
        store = _store()
        store.add_product(_product(opening_stock=3))
        result = store.append_sale(_sale(4))
        assert result.rejection.code == StoreRejectionCode.INSUFFICIENT_STOCK
        assert SaleRecord.objects.count() == 0

    def test_duplicate_entry_rejected(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        store = _store()
        store.add_product(_product())
        sale = _sale(1)
        assert store.append_sale(sale).accepted
        result = store.append_sale(sale)
        assert result.rejection.code == StoreRejectionCode.DUPLICATE_ENTRY

    def test_sale_rows_are_immutable(self):
        from core.event_store.models import SaleRecord
        store = _store()
        store.add_product(_product())
        store.append_sale(_sale(1))
        row = SaleRecord.objects.get()
        row.quantity = 5
        with pytest.raises(PermissionError, match="immutable"):
            row.save()
        with pytest.raises(PermissionError):
            row.delete()

    def test_issue_sale_numbers_and_records_sequence(self):
        from core.documents.numbering.models import DOC_SALE_INVOICE
        from core.event_store.models import DocumentSequenceRecord
        from core.primitives.trade import Sale
        store = _store()
        store.add_product(_product(opening_stock=10))

        def build(invoice_no):
            return Sale.record(
                invoice_no=invoice_no, customer="Corner Shop", product_id="PRD001",
                quantity=1, selling_rate="250", gst_percent="5", date=DAY,
            )

        numbers = [
            store.issue_sale(invoice_prefix="SAL", issued_on=DAY, build=build).entity.invoice_no
            for _ in range(3)
        ]
        assert numbers == ["SAL-2026-001", "SAL-2026-002", "SAL-2026-003"]
        sequence = DocumentSequenceRecord.objects.get(business_id=BIZ_A, doc_type=DOC_SALE_INVOICE)
        assert sequence.last_number == "SAL-2026-003"

    def test_rejected_issue_leaves_sequence_alone(self):
        from core.documents.numbering.models import DOC_SALE_INVOICE
        from core.event_store.models import DocumentSequenceRecord
        from core.event_store.persistence.errors import StoreRejectionCode
        from core.primitives.trade import Sale
        store = _store()
        store.add_product(_product(opening_stock=1))

        def build(invoice_no):
            return Sale.record(
                invoice_no=invoice_no, customer="Corner Shop", product_id="PRD001",
                quantity=5, selling_rate="250", gst_percent="5", date=DAY,
            )

        result = store.issue_sale(invoice_prefix="SAL", issued_on=DAY, build=build)
        assert result.rejection.code == StoreRejectionCode.INSUFFICIENT_STOCK
        sequence = DocumentSequenceRecord.objects.get(business_id=BIZ_A, doc_type=DOC_SALE_INVOICE)
        assert sequence.last_number == ""

    def test_issue_product_after_existing(self):
        from core.primitives.catalog import Product
        store = _store()
        store.add_product(_product())
        result = store.issue_product(
            id_prefix="PRD",
            build=lambda product_id: Product(
                product_id=product_id, name="Dal 1kg", purchase_rate="90", selling_rate="110",
            ),
        )
        assert result.entity.product_id == "PRD002"
        assert [p.product_id for p in store.fetch_all().products] == ["PRD001", "PRD002"]


# ══════════════════════════════════════════════════════════════
# PARTIES
# ══════════════════════════════════════════════════════════════

class TestDjangoParties:

    def _party(self, party_id="CUS001", **fields):
        from core.primitives.party import Party, PartyRole
        fields.setdefault("name", "Corner Shop")
        fields.setdefault("role", PartyRole.CUSTOMER)
        return Party(party_id=party_id, **fields)

    def test_party_round_trip(self):
        store = _store()
        party = self._party(gstin="27ABCDE1234F1Z5", city="Pune", opening_balance="250.50")
        assert store.add_party(party).accepted
        assert store.fetch_parties() == (party,)

    def test_duplicate_party_rejected(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        store = _store()
        store.add_party(self._party())
        result = store.add_party(self._party())
        assert result.rejection.code == StoreRejectionCode.DUPLICATE_PARTY

    def test_issue_party_per_role(self):
        from core.primitives.party import PartyRole
        store = _store()
        store.add_party(self._party("SUP001", role=PartyRole.SUPPLIER, name="Wholesale Co"))
        result = store.issue_party(
            role=PartyRole.CUSTOMER, id_prefix="CUS",
            build=lambda party_id: self._party(party_id),
        )
        assert result.entity.party_id == "CUS001"

    def test_update_party(self):
        store = _store()
        store.add_party(self._party())
        assert store.update_party("CUS001", phone="98200 00000").accepted
        (party,) = store.fetch_parties()
        assert party.phone == "98200 00000"

    def test_update_unknown_party(self):
        from core.event_store.persistence.errors import StoreRejectionCode
        result = _store().update_party("CUS404", phone="1")
        assert result.rejection.code == StoreRejectionCode.UNKNOWN_PARTY

    def test_parties_are_never_deleted(self):
        from core.event_store.models import PartyRecord
        _store().add_party(self._party())
        with pytest.raises(PermissionError):
            PartyRecord.objects.get().delete()


# ══════════════════════════════════════════════════════════════
# ACCOUNTS
# ══════════════════════════════════════════════════════════════

class TestDjangoAccounts:

    def _opened(self):
        store = _store()
        store.open_default_ledgers("Acme Traders")
        return store

    def test_default_ledgers_opened_once(self):
        store = self._opened()
        assert store.open_default_ledgers("Acme Traders") == ()
        assert len(store.fetch_accounts().ledgers) == 25

    def test_post_voucher_persists_and_applies(self):
        from core.primitives.ledger import VoucherType
        store = self._opened()
        result = store.post_voucher(
            voucher_type=VoucherType.SALES,
            date=DAY,
            narration="Sales invoice SAL-2026-001",
            entries=_entries(
                ("sundry-debtors", "Debit", "100"),
                ("sales", "Credit", "60"),
                ("gst-payable", "Credit", "40"),
            ),
            reference_number="SAL-2026-001",
            party_name="Corner Shop",
        )
        assert result.accepted
        assert result.entity.voucher_number == "SLS-2604-0001"

        accounts = store.fetch_accounts()
        balances = {l.ledger_id: l.current_balance for l in accounts.ledgers}
        assert balances["sundry-debtors"] == Decimal("100")
        assert balances["sales"] == Decimal("60")
        assert balances["gst-payable"] == Decimal("40")

        (voucher,) = accounts.vouchers
        assert [e.ledger_id for e in voucher.entries] == [
            "sundry-debtors", "sales", "gst-payable",
        ]
        assert voucher.party_name == "Corner Shop"

    def test_imbalanced_voucher_leaves_no_trace(self):
        from core.event_store.models import LedgerEntryRecord, VoucherRecord
        from core.event_store.persistence.errors import StoreRejectionCode
        from core.primitives.ledger import VoucherType
        store = self._opened()
        result = store.post_voucher(
            voucher_type=VoucherType.JOURNAL,
            date=DAY,
            narration="",
            entries=_entries(("cash-in-hand", "Debit", "100"), ("sales", "Credit", "50")),
        )
        assert result.rejection.code == StoreRejectionCode.IMBALANCED_VOUCHER
        assert VoucherRecord.objects.count() == 0
        assert LedgerEntryRecord.objects.count() == 0
        assert all(l.current_balance == Decimal("0") for l in store.fetch_accounts().ledgers)

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

    def test_trial_balance_from_store(self):
        from core.primitives.ledger import VoucherType
        from engines.accounting.statements import compute_trial_balance, trial_balance_totals
        store = self._opened()
        store.post_voucher(
            voucher_type=VoucherType.RECEIPT, date=DAY, narration="Capital",
            entries=_entries(("cash-in-hand", "Debit", "500"), ("capital", "Credit", "500")),
        )
        store.post_voucher(
            voucher_type=VoucherType.PAYMENT, date=DAY, narration="Rent",
            entries=_entries(("rent-expense", "Debit", "120"), ("cash-in-hand", "Credit", "120")),
        )
        accounts = store.fetch_accounts()
        rows = compute_trial_balance(accounts.ledgers, accounts.vouchers)
        total_debit, total_credit = trial_balance_totals(rows)
        assert total_debit == total_credit == Decimal("500")
