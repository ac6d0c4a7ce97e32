"""
Manual smoke runner for the Tradebook Django adapter endpoints.

Usage:
    python manage.py migrate && python manage.py runserver
    python scripts/smoke_http_api.py
    python scripts/smoke_http_api.py --base-url http://127.0.0.1:8000
"""

from __future__ import annotations

import argparse
import json
import uuid
from urllib import error, parse, request


def _call(
    *,
    method: str,
    url: str,
    body: dict | None = None,
) -> tuple[int, dict]:
    encoded = None
    headers = {}
    if body is not None:
        encoded = json.dumps(body).encode("utf-8")
        headers["Content-Type"] = "application/json"

    req = request.Request(url=url, method=method, headers=headers, data=encoded)
    try:
        with request.urlopen(req) as response:
            status = response.status
            payload = json.loads(response.read().decode("utf-8"))
            return status, payload
    except error.HTTPError as exc:
        payload = json.loads(exc.read().decode("utf-8"))
        return exc.code, payload


def _print_case(label: str, status: int, payload: dict) -> None:
    print(f"\n[{label}] status={status}")
    print(json.dumps(payload, indent=2, sort_keys=True))


def run(base_url: str, business_id: str) -> None:
    api = base_url.rstrip("/") + "/v1"

    def post(label: str, path: str, body: dict) -> dict:
        status, payload = _call(
            method="POST",
            url=f"{api}/{path}",
            body={"business_id": business_id, **body},
        )
        _print_case(label, status, payload)
        return payload

    def get(label: str, path: str, **params: str) -> None:
        query = parse.urlencode({"business_id": business_id, **params})
        status, payload = _call(method="GET", url=f"{api}/{path}?{query}")
        _print_case(label, status, payload)

    product = post("create-product", "products", {
        "name": "Rice 5kg",
        "brand": "Acme",
        "category": "grocery",
        "purchase_rate": "200",
        "selling_rate": "250",
        "gst_percent": "5",
        "opening_stock": 10,
        "reorder_level": 5,
    })
    product_id = product["data"]["product_id"]

    post("customer", "parties", {"role": "customer", "name": "Corner Shop"})
    post("supplier", "parties", {"role": "supplier", "name": "Wholesale Co"})

    post("purchase", "purchases", {
        "product_id": product_id,
        "supplier": "Wholesale Co",
        "quantity": 20,
        "date": "2026-04-01",
    })
    post("sale", "sales", {
        "product_id": product_id,
        "customer": "Corner Shop",
        "quantity": 25,
        "date": "2026-04-02",
    })
    post("oversell", "sales", {
        "product_id": product_id,
        "customer": "Corner Shop",
        "quantity": 500,
        "date": "2026-04-02",
    })

    get("stock", "stock")
    get("profit-loss", "profit-loss")
    get("dashboard", "dashboard")
    get("gst-report", "gst-report", start="2026-04-01", end="2026-04-30")
    get("parties", "parties")
    get("party-outstanding", "party-outstanding")

    post("ledger-cash", "ledgers", {
        "ledger_id": "cash-in-hand", "name": "Cash", "group": "Cash-in-Hand",
    })
    post("ledger-capital", "ledgers", {
        "ledger_id": "capital", "name": "Capital Account", "group": "Capital Account",
    })
    post("voucher", "vouchers", {
        "voucher_type": "Receipt",
        "date": "2026-04-01",
        "narration": "Capital introduced",
        "entries": [
            {"ledger_id": "cash-in-hand", "side": "Debit", "amount": "1000"},
            {"ledger_id": "capital", "side": "Credit", "amount": "1000"},
        ],
    })
    post("imbalanced-voucher", "vouchers", {
        "voucher_type": "Journal",
        "date": "2026-04-01",
        "entries": [
            {"ledger_id": "cash-in-hand", "side": "Debit", "amount": "100"},
            {"ledger_id": "capital", "side": "Credit", "amount": "50"},
        ],
    })

    get("trial-balance", "trial-balance")
    get("day-book", "day-book", date="2026-04-01")


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--base-url",
        default="http://127.0.0.1:8000",
        help="Server base URL.",
    )
    parser.add_argument(
        "--business-id",
        default=str(uuid.uuid4()),
        help="Business UUID to write under (fresh one by default).",
    )
    args = parser.parse_args()
    run(args.base_url, args.business_id)


if __name__ == "__main__":
    main()
