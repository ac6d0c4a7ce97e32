"""
Tradebook Tax Engine — GST Report Tests
"""

from datetime import date
from decimal import Decimal

import pytest


START = date(2026, 4, 1)
END = date(2026, 4, 30)


def _sale(quantity, rate, gst, *, inter_state=False, on=START):
    from core.primitives.trade import Sale
    return Sale.record(
        invoice_no="SAL-2026-001",
        customer="Corner Shop",
        product_id="PRD001",
        quantity=quantity,
        selling_rate=rate,
        gst_percent=gst,
        date=on,
        inter_state=inter_state,
    )


def _purchase(quantity, rate, gst, *, inter_state=False, on=START):
    from core.primitives.trade import Purchase
    return Purchase.record(
        invoice_no="PUR-2026-001",
        supplier="Wholesale Co",
        product_id="PRD001",
        quantity=quantity,
        purchase_rate=rate,
        gst_percent=gst,
        date=on,
        inter_state=inter_state,
    )


class TestGSTReport:

    def test_intra_state_splits_cgst_sgst(self):
        from engines.tax.gst import compute_gst_report
        report = compute_gst_report([_sale(10, "100", "18")], [], START, END)
        (row,) = report.outward.intra_state
        assert row.gst_rate == Decimal("18.00")
        assert row.taxable_value == Decimal("1000.00")
        assert row.cgst_amount == Decimal("90.00")
        assert row.sgst_amount == Decimal("90.00")
        assert row.igst_amount == Decimal("0")
        assert row.total_amount == Decimal("1180.00")
        assert report.outward.inter_state == ()

    def test_inter_state_is_igst(self):
        from engines.tax.gst import compute_gst_report
        report = compute_gst_report(
            [_sale(10, "100", "12", inter_state=True)], [], START, END,
        )
        (row,) = report.outward.inter_state
        assert row.igst_amount == Decimal("120.00")
        assert row.cgst_amount == Decimal("0")

    def test_buckets_by_rate(self):
        from engines.tax.gst import compute_gst_report
        sales = [_sale(1, "100", "5"), _sale(1, "100", "18"), _sale(2, "100", "5")]
        report = compute_gst_report(sales, [], START, END)
        rates = [row.gst_rate for row in report.outward.intra_state]
        assert rates == [Decimal("5.00"), Decimal("18.00")]
        assert report.outward.intra_state[0].taxable_value == Decimal("300.00")

    def test_net_liability(self):
        from engines.tax.gst import compute_gst_report
        report = compute_gst_report(
            [_sale(10, "150", "18")], [_purchase(10, "100", "18")], START, END,
        )
        assert report.total_tax_payable == Decimal("270.00")
        assert report.total_tax_paid == Decimal("180.00")
        assert report.net_tax_liability == Decimal("90.00")

    def test_period_filter(self):
        from engines.tax.gst import compute_gst_report
        report = compute_gst_report(
            [_sale(1, "100", "18", on=date(2026, 5, 1))], [], START, END,
        )
        assert report.total_tax_payable == Decimal("0")

    def test_inverted_period_rejected(self):
        from engines.tax.gst import compute_gst_report
        with pytest.raises(ValueError, match="before start"):
            compute_gst_report([], [], END, START)

    def test_category_rule_overrides_product_rate(self):
        from core.config.rules import InMemoryConfigStore, TaxRule
        from core.primitives.catalog import Product
        from engines.tax.gst import effective_gst_percent
        store = InMemoryConfigStore()
        store.add_tax_rule(TaxRule(tax_type="GST", rate_percent="5", applies_to=("grocery",)))
        grocery = Product(
            product_id="PRD001", name="Rice", category="grocery",
            purchase_rate="40", selling_rate="50", gst_percent="18",
        )
        other = Product(
            product_id="PRD002", name="Soap", category="personal-care",
            purchase_rate="20", selling_rate="30", gst_percent="18",
        )
        assert effective_gst_percent(grocery, store) == Decimal("5")
        assert effective_gst_percent(other, store) == Decimal("18")
        assert effective_gst_percent(grocery) == Decimal("18")
