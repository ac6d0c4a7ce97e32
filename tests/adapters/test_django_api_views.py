"""
Tradebook Django Adapter — JSON View Tests
"""

from __future__ import annotations

import json
import uuid
from decimal import Decimal

import pytest
from django.test import Client

pytestmark = pytest.mark.django_db(transaction=True)


BUSINESS_ID = uuid.uuid5(uuid.NAMESPACE_URL, "tradebook-http-business")


def _post(client: Client, path: str, body: dict):
    payload = {"business_id": str(BUSINESS_ID)}
    payload.update(body)
    return client.post(path, data=json.dumps(payload), content_type="application/json")


def _get(client: Client, path: str, **params):
    query = {"business_id": str(BUSINESS_ID)}
    query.update(params)
    return client.get(path, query)


def _seed_product(client: Client, **overrides):
    body = {
        "name": "Rice 5kg",
        "brand": "Acme",
        "category": "grocery",
        "purchase_rate": "200",
        "selling_rate": "250",
        "gst_percent": "5",
        "opening_stock": 10,
        "reorder_level": 2,
    }
    body.update(overrides)
    return _post(client, "/v1/products", body)


@pytest.fixture(autouse=True)
def _fresh_config_store():
    from adapters.django_api.wiring import reset_config_store
    reset_config_store()
    yield
    reset_config_store()


# ══════════════════════════════════════════════════════════════
# PRODUCTS & TRADE
# ══════════════════════════════════════════════════════════════

class TestTradeEndpoints:

    def test_product_id_is_generated(self):
        client = Client()
        first = _seed_product(client)
        second = _seed_product(client, name="Sugar 1kg")
        assert first.status_code == 201
        assert first.json()["data"]["product_id"] == "PRD001"
        assert second.json()["data"]["product_id"] == "PRD002"

    def test_duplicate_product_conflict(self):
        client = Client()
        _seed_product(client, product_id="RICE")
        response = _seed_product(client, product_id="RICE")
        assert response.status_code == 409
        body = response.json()
        assert body["ok"] is False
        assert body["error"]["code"] == "DUPLICATE_PRODUCT"
        assert body["error"]["details"]["retryable"] is False

    def test_purchase_defaults_from_product(self):
        client = Client()
        _seed_product(client)
        response = _post(client, "/v1/purchases", {
            "product_id": "PRD001",
            "supplier": "Wholesale Co",
            "quantity": 4,
            "date": "2026-04-01",
        })
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["invoice_no"] == "PUR-2026-001"
        assert data["total_value"] == "800.00"
        assert data["gst_amount"] == "40.00"

    def test_oversell_is_rejected(self):
        client = Client()
        _seed_product(client, opening_stock=3)
        response = _post(client, "/v1/sales", {
            "product_id": "PRD001",
            "customer": "Corner Shop",
            "quantity": 4,
            "date": "2026-04-01",
        })
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INSUFFICIENT_STOCK"

    def test_stock_and_dashboard(self):
        client = Client()
        _seed_product(client, opening_stock=100, reorder_level=20)
        _post(client, "/v1/purchases", {
            "product_id": "PRD001", "supplier": "Wholesale Co",
            "quantity": 50, "date": "2026-04-01",
        })
        sale = _post(client, "/v1/sales", {
            "product_id": "PRD001", "customer": "Corner Shop",
            "quantity": 140, "date": "2026-04-02",
        })
        assert sale.json()["data"]["invoice_no"] == "SAL-2026-001"

        (item,) = _get(client, "/v1/stock").json()["data"]
        assert item["current_stock"] == 10
        assert item["status"] == "low-stock"

        stats = _get(client, "/v1/dashboard").json()["data"]
        assert stats["total_products"] == 1
        assert stats["low_stock_count"] == 1

        (pl,) = _get(client, "/v1/profit-loss").json()["data"]
        assert Decimal(pl["profit"]) == Decimal("25000")

    def test_inter_state_must_be_a_json_boolean(self):
        client = Client()
        _seed_product(client)
        response = _post(client, "/v1/purchases", {
            "product_id": "PRD001", "supplier": "Wholesale Co",
            "quantity": 1, "date": "2026-04-01", "inter_state": "false",
        })
        assert response.status_code == 400
        assert "inter_state" in response.json()["error"]["message"]
        assert _get(client, "/v1/stock").json()["data"][0]["current_stock"] == 10

    def test_inter_state_flag_recorded(self):
        client = Client()
        _seed_product(client)
        response = _post(client, "/v1/sales", {
            "product_id": "PRD001", "customer": "Distant Co",
            "quantity": 1, "date": "2026-04-01", "inter_state": True,
        })
        assert response.status_code == 201
        assert response.json()["data"]["inter_state"] is True

    def test_invoice_numbers_follow_on(self):
        client = Client()
        _seed_product(client)
        numbers = [
            _post(client, "/v1/sales", {
                "product_id": "PRD001", "customer": "Corner Shop",
                "quantity": 1, "date": "2026-04-01",
            }).json()["data"]["invoice_no"]
            for _ in range(2)
        ]
        assert numbers == ["SAL-2026-001", "SAL-2026-002"]

    def test_over_precise_rate_is_bad_request(self):
        client = Client()
        _seed_product(client)
        response = _post(client, "/v1/purchases", {
            "product_id": "PRD001", "supplier": "Wholesale Co",
            "quantity": 1000, "purchase_rate": "1.23456", "date": "2026-04-01",
        })
        assert response.status_code == 400
        assert "decimal places" in response.json()["error"]["message"]

    def test_missing_field(self):
        client = Client()
        response = _post(client, "/v1/products", {"purchase_rate": "1", "selling_rate": "2"})
        assert response.status_code == 400
        assert "name" in response.json()["error"]["message"]

    def test_bad_json(self):
        response = Client().post("/v1/products", data="{not json", content_type="application/json")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_wrong_method(self):
        assert Client().get("/v1/products").status_code == 405
        assert Client().post("/v1/stock").status_code == 405


# ══════════════════════════════════════════════════════════════
# PARTIES
# ══════════════════════════════════════════════════════════════

class TestPartyEndpoints:

    def test_party_ids_are_generated_per_role(self):
        client = Client()
        customer = _post(client, "/v1/parties", {"role": "customer", "name": "Corner Shop"})
        supplier = _post(client, "/v1/parties", {"role": "supplier", "name": "Wholesale Co"})
        second = _post(client, "/v1/parties", {"role": "customer", "name": "B Mart"})
        assert customer.status_code == 201
        assert customer.json()["data"]["party_id"] == "CUS001"
        assert supplier.json()["data"]["party_id"] == "SUP001"
        assert second.json()["data"]["party_id"] == "CUS002"

    def test_list_filtered_by_role(self):
        client = Client()
        _post(client, "/v1/parties", {"role": "customer", "name": "Corner Shop"})
        _post(client, "/v1/parties", {"role": "supplier", "name": "Wholesale Co"})
        everyone = _get(client, "/v1/parties").json()["data"]
        (supplier,) = _get(client, "/v1/parties", role="supplier").json()["data"]
        assert len(everyone) == 2
        assert supplier["name"] == "Wholesale Co"

    def test_unknown_role(self):
        assert _get(Client(), "/v1/parties", role="agent").status_code == 400

    def test_duplicate_party_conflict(self):
        client = Client()
        _post(client, "/v1/parties", {"party_id": "C1", "role": "customer", "name": "A"})
        response = _post(client, "/v1/parties", {"party_id": "C1", "role": "customer", "name": "B"})
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_PARTY"

    def test_bad_gstin(self):
        response = _post(Client(), "/v1/parties", {
            "role": "customer", "name": "Corner Shop", "gstin": "123",
        })
        assert response.status_code == 400

    def test_party_outstanding(self):
        client = Client()
        _seed_product(client)
        _post(client, "/v1/parties", {
            "role": "customer", "name": "Corner Shop", "opening_balance": "100",
        })
        _post(client, "/v1/parties", {"role": "supplier", "name": "Wholesale Co"})
        _post(client, "/v1/sales", {
            "product_id": "PRD001", "customer": "Corner Shop",
            "quantity": 2, "date": "2026-04-01",
        })
        _post(client, "/v1/purchases", {
            "product_id": "PRD001", "supplier": "Wholesale Co",
            "quantity": 1, "date": "2026-04-01",
        })

        data = _get(client, "/v1/party-outstanding").json()["data"]
        customer, supplier = data["rows"]
        assert Decimal(customer["outstanding"]) == Decimal("625")
        assert customer["status"] == "Debtor"
        assert Decimal(supplier["outstanding"]) == Decimal("-210")
        assert supplier["status"] == "Creditor"
        assert Decimal(data["summary"]["net_position"]) == Decimal("415")


# ══════════════════════════════════════════════════════════════
# ACCOUNTS
# ══════════════════════════════════════════════════════════════

class TestAccountEndpoints:

    def _open_books(self, client: Client):
        from adapters.django_api.wiring import build_store
        build_store(BUSINESS_ID).open_default_ledgers("Acme Traders")

    def test_post_voucher_and_trial_balance(self):
        client = Client()
        self._open_books(client)
        response = _post(client, "/v1/vouchers", {
            "voucher_type": "Receipt",
            "date": "2026-04-01",
            "narration": "Capital introduced",
            "entries": [
                {"ledger_id": "cash-in-hand", "side": "Debit", "amount": "1000"},
                {"ledger_id": "capital", "side": "Credit", "amount": "1000"},
            ],
        })
        assert response.status_code == 201
        assert response.json()["data"]["voucher_number"] == "RCT-2604-0001"

        trial = _get(client, "/v1/trial-balance").json()["data"]
        assert Decimal(trial["total_debit"]) == Decimal(trial["total_credit"]) == Decimal("1000")

        day = _get(client, "/v1/day-book", date="2026-04-01").json()["data"]
        assert len(day["lines"]) == 1
        assert Decimal(day["total_debit"]) == Decimal("1000")

    def test_imbalanced_voucher_is_unprocessable(self):
        client = Client()
        self._open_books(client)
        response = _post(client, "/v1/vouchers", {
            "voucher_type": "Journal",
            "date": "2026-04-01",
            "entries": [
                {"ledger_id": "cash-in-hand", "side": "Debit", "amount": 100},
                {"ledger_id": "sales", "side": "Credit", "amount": 50},
            ],
        })
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "IMBALANCED_VOUCHER"

    def test_create_ledger(self):
        client = Client()
        response = _post(client, "/v1/ledgers", {
            "ledger_id": "customer-corner-shop",
            "name": "Corner Shop",
            "group": "Sundry Debtors",
        })
        assert response.status_code == 201
        assert response.json()["data"]["current_balance"] == "0"

    def test_period_reports(self):
        client = Client()
        self._open_books(client)
        _post(client, "/v1/vouchers", {
            "voucher_type": "Sales",
            "date": "2026-04-05",
            "entries": [
                {"ledger_id": "cash-in-hand", "side": "Debit", "amount": "118"},
                {"ledger_id": "sales", "side": "Credit", "amount": "100"},
                {"ledger_id": "gst-payable", "side": "Credit", "amount": "18"},
            ],
        })
        period = {"start": "2026-04-01", "end": "2026-04-30"}

        pl = _get(client, "/v1/profit-loss-statement", **period).json()["data"]
        assert Decimal(pl["net_profit"]) == Decimal("100")

        sheet = _get(client, "/v1/balance-sheet", **period).json()["data"]
        assert Decimal(sheet["total_assets"]) == Decimal(sheet["total_liabilities"]) == Decimal("118")

        statement = _get(
            client, "/v1/account-statement", ledger_id="cash-in-hand", **period,
        ).json()["data"]
        assert Decimal(statement["closing_balance"]) == Decimal("118")

    def test_unknown_ledger_statement(self):
        response = _get(
            Client(), "/v1/account-statement",
            ledger_id="nowhere", start="2026-04-01", end="2026-04-30",
        )
        assert response.status_code == 404

    def test_inverted_period(self):
        response = _get(Client(), "/v1/gst-report", start="2026-04-30", end="2026-04-01")
        assert response.status_code == 400

    def test_day_book_requires_date(self):
        response = _get(Client(), "/v1/day-book")
        assert response.status_code == 400

    def test_gst_report(self):
        client = Client()
        _seed_product(client)
        _post(client, "/v1/sales", {
            "product_id": "PRD001", "customer": "Corner Shop",
            "quantity": 2, "date": "2026-04-03",
        })
        report = _get(client, "/v1/gst-report", start="2026-04-01", end="2026-04-30").json()["data"]
        (row,) = report["outward"]["intra_state"]
        assert Decimal(row["cgst_amount"]) == Decimal("12.50")
        assert Decimal(report["net_tax_liability"]) == Decimal("25")
