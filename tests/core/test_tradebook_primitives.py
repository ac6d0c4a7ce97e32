"""
Tradebook Core Primitives Tests
=================================
Tests for: money helpers, Product, Purchase/Sale lines, ledgers,
entries and vouchers.
"""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest


NOW = datetime(2026, 4, 1, 9, 0, tzinfo=timezone.utc)
DAY = date(2026, 4, 1)


# ══════════════════════════════════════════════════════════════
# MONEY
# ══════════════════════════════════════════════════════════════

class TestMoney:

    def test_accepts_int_str_decimal(self):
        from core.primitives.money import to_decimal
        assert to_decimal(5) == Decimal("5")
        assert to_decimal(" 2.50 ") == Decimal("2.50")
        assert to_decimal(Decimal("1.1")) == Decimal("1.1")

    def test_refuses_float(self):
        from core.primitives.money import to_decimal
        with pytest.raises(TypeError, match="Floats"):
            to_decimal(1.5)

    def test_refuses_bool(self):
        from core.primitives.money import to_decimal
        with pytest.raises(TypeError, match="bool"):
            to_decimal(True)

    def test_refuses_garbage_string(self):
        from core.primitives.money import to_decimal
        with pytest.raises(ValueError, match="numeric string"):
            to_decimal("ten")

    def test_round_half_up(self):
        from core.primitives.money import quantize_money
        assert quantize_money(Decimal("2.345")) == Decimal("2.35")

    def test_money_equal_at_two_places(self):
        from core.primitives.money import money_equal
        assert money_equal(Decimal("1.001"), Decimal("1.00"))
        assert not money_equal(Decimal("1.01"), Decimal("1.00"))

    def test_rate_scale(self):
        from core.primitives.money import check_rate
        assert check_rate(Decimal("1.2345")) == Decimal("1.2345")
        assert check_rate(Decimal("1.23450")) == Decimal("1.23450")
        with pytest.raises(ValueError, match="decimal places"):
            check_rate(Decimal("1.23456"))
        with pytest.raises(ValueError, match="too large"):
            check_rate(Decimal("10000000000"))

    def test_rate_too_precise_for_product(self):
        from core.primitives.catalog import Product
        with pytest.raises(ValueError, match="purchase_rate"):
            Product(product_id="P1", name="Rice", purchase_rate="1.23456", selling_rate="2")

    def test_rate_too_precise_for_purchase(self):
        from core.primitives.trade import Purchase
        with pytest.raises(ValueError, match="purchase_rate"):
            Purchase.record(
                invoice_no="PUR-2026-001", supplier="Wholesale Co", product_id="P1",
                quantity=1000, purchase_rate="1.23456", gst_percent="5", date=DAY,
            )

    def test_line_total_too_large(self):
        from core.primitives.trade import Sale
        with pytest.raises(ValueError, match="total_value"):
            Sale.record(
                invoice_no="SAL-2026-001", customer="Corner Shop", product_id="P1",
                quantity=2_000_000_000, selling_rate="9999999999", gst_percent="0",
                date=DAY,
            )


# ══════════════════════════════════════════════════════════════
# PRODUCT
# ══════════════════════════════════════════════════════════════

class TestProduct:

    def _product(self, **overrides):
        from core.primitives.catalog import Product
        fields = dict(
            product_id="PRD001", name="Rice 5kg",
            purchase_rate="200", selling_rate="250",
        )
        fields.update(overrides)
        return Product(**fields)

    def test_coerces_amounts(self):
        product = self._product(gst_percent=5)
        assert product.purchase_rate == Decimal("200")
        assert product.gst_percent == Decimal("5")

    def test_negative_rate_rejected(self):
        with pytest.raises(ValueError, match="purchase_rate"):
            self._product(purchase_rate="-1")

    def test_gst_out_of_range_rejected(self):
        with pytest.raises(ValueError, match="between 0 and 100"):
            self._product(gst_percent="101")

    def test_negative_opening_stock_rejected(self):
        with pytest.raises(ValueError, match="opening_stock"):
            self._product(opening_stock=-1)

    def test_immutable(self):
        product = self._product()
        with pytest.raises(AttributeError):
            product.name = "changed"

    def test_with_changes_keeps_id(self):
        updated = self._product().with_changes(selling_rate="275")
        assert updated.product_id == "PRD001"
        assert updated.selling_rate == Decimal("275")

    def test_with_changes_refuses_product_id(self):
        with pytest.raises(ValueError, match="Cannot edit"):
            self._product().with_changes(product_id="PRD002")

    def test_dict_round_trip(self):
        from core.primitives.catalog import Product
        product = self._product(brand="Acme", reorder_level=4)
        assert Product.from_dict(product.to_dict()) == product


# ══════════════════════════════════════════════════════════════
# TRADE LINES
# ══════════════════════════════════════════════════════════════

class TestTradeLines:

    def test_record_derives_totals(self):
        from core.primitives.trade import Sale
        sale = Sale.record(
            invoice_no="SAL-2026-001", customer="Corner Shop", product_id="PRD001",
            quantity=3, selling_rate="99.99", gst_percent="18", date=DAY,
        )
        assert sale.total_value == Decimal("299.97")
        assert sale.gst_amount == Decimal("53.99")
        assert sale.grand_total == Decimal("353.96")
        assert sale.sales_value == Decimal("299.97")

    def test_zero_quantity_rejected(self):
        from core.primitives.trade import Purchase
        with pytest.raises(ValueError, match="quantity"):
            Purchase.record(
                invoice_no="PUR-2026-001", supplier="Wholesale Co", product_id="PRD001",
                quantity=0, purchase_rate="10", gst_percent="0", date=DAY,
            )

    def test_inconsistent_totals_rejected(self):
        from core.primitives.trade import Purchase
        with pytest.raises(ValueError, match="total_value"):
            Purchase(
                entry_id=uuid.uuid4(), invoice_no="PUR-2026-001", supplier="Wholesale Co",
                product_id="PRD001", quantity=2, purchase_rate="10",
                total_value="25", gst_amount="0", grand_total="25", date=DAY,
            )

    def test_datetime_is_not_a_date(self):
        from core.primitives.trade import Sale
        with pytest.raises(ValueError, match="calendar date"):
            Sale.record(
                invoice_no="SAL-2026-001", customer="Corner Shop", product_id="PRD001",
                quantity=1, selling_rate="10", gst_percent="0", date=NOW,
            )


# ══════════════════════════════════════════════════════════════
# LEDGER / VOUCHER
# ══════════════════════════════════════════════════════════════

class TestLedgerPrimitives:

    def test_group_normal_balance(self):
        from core.primitives.ledger import EntrySide, LedgerGroup
        assert LedgerGroup.CASH_IN_HAND.normal_balance == EntrySide.DEBIT
        assert LedgerGroup.INDIRECT_EXPENSES.normal_balance == EntrySide.DEBIT
        assert LedgerGroup.SUNDRY_CREDITORS.normal_balance == EntrySide.CREDIT
        assert LedgerGroup.CAPITAL_ACCOUNT.normal_balance == EntrySide.CREDIT
        assert LedgerGroup.DIRECT_INCOMES.normal_balance == EntrySide.CREDIT

    def test_every_group_has_a_nature(self):
        from core.primitives.ledger import GROUP_NATURE, LedgerGroup
        assert set(GROUP_NATURE) == set(LedgerGroup)

    def test_current_balance_defaults_to_opening(self):
        from core.primitives.ledger import Ledger, LedgerGroup
        ledger = Ledger(ledger_id="bank", name="Bank", group=LedgerGroup.BANK_ACCOUNTS,
                        opening_balance="500")
        assert ledger.current_balance == Decimal("500")

    def test_entry_amount_must_be_positive(self):
        from core.primitives.ledger import EntrySide, LedgerEntry
        with pytest.raises(ValueError, match="positive"):
            LedgerEntry(ledger_id="cash", side=EntrySide.DEBIT, amount="0")

    def test_voucher_needs_two_entries(self):
        from core.primitives.ledger import EntrySide, LedgerEntry, Voucher, VoucherType
        with pytest.raises(ValueError, match="at least 2"):
            Voucher(
                voucher_id=uuid.uuid4(), voucher_type=VoucherType.JOURNAL,
                voucher_number="JNL-2604-0001", date=DAY, narration="",
                entries=(LedgerEntry(ledger_id="cash", side=EntrySide.DEBIT, amount="1"),),
                created_at=NOW,
            )

    def test_voucher_ledger_ids_unique_in_order(self):
        from core.primitives.ledger import EntrySide, LedgerEntry, Voucher, VoucherType
        voucher = Voucher(
            voucher_id=uuid.uuid4(), voucher_type=VoucherType.JOURNAL,
            voucher_number="JNL-2604-0001", date=DAY, narration="split",
            entries=(
                LedgerEntry(ledger_id="cash", side=EntrySide.DEBIT, amount="10"),
                LedgerEntry(ledger_id="sales", side=EntrySide.CREDIT, amount="6"),
                LedgerEntry(ledger_id="cash", side=EntrySide.CREDIT, amount="4"),
            ),
            created_at=NOW,
        )
        assert voucher.ledger_ids == ("cash", "sales")
        assert voucher.to_dict()["total_debit"] == "10"
